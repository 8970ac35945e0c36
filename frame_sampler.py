"""Grab a still from the video source, cropped to the target box."""

from __future__ import annotations

import logging
import time
from typing import Optional

from interfaces import VideoSource
from models import CapturedFrame

logger = logging.getLogger("study_scanner.sampler")

ROI_WIDTH_RATIO = 0.8
ROI_HEIGHT_RATIO = 0.6


def crop_region(
    width: int,
    height: int,
    width_ratio: float = ROI_WIDTH_RATIO,
    height_ratio: float = ROI_HEIGHT_RATIO,
) -> tuple[int, int, int, int]:
    """Return ``(x, y, w, h)`` of the centered region of interest."""
    box_w = int(width * width_ratio)
    box_h = int(height * height_ratio)
    x = (width - box_w) // 2
    y = (height - box_h) // 2
    return x, y, box_w, box_h


class FrameSampler:
    def __init__(
        self,
        width_ratio: float = ROI_WIDTH_RATIO,
        height_ratio: float = ROI_HEIGHT_RATIO,
    ) -> None:
        self._width_ratio = width_ratio
        self._height_ratio = height_ratio

    def sample(self, source: VideoSource) -> Optional[CapturedFrame]:
        image = source.read()
        if image is None or getattr(image, "size", 0) == 0:
            return None

        height, width = image.shape[:2]
        x, y, box_w, box_h = crop_region(width, height, self._width_ratio, self._height_ratio)
        if box_w <= 0 or box_h <= 0:
            logger.debug("frame %dx%d too small to crop", width, height)
            return None

        # Copy so the source buffer can be reused by the capture device.
        region = image[y : y + box_h, x : x + box_w]
        return CapturedFrame(
            pixels=region.copy(),
            width=box_w,
            height=box_h,
            timestamp_ms=int(time.time() * 1000),
        )
