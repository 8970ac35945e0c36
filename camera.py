"""Camera adapter backed by OpenCV."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

try:
    import cv2
except Exception:  # pragma: no cover
    cv2 = None  # type: ignore

logger = logging.getLogger("study_scanner.camera")


class OpenCVCamera:
    def __init__(self, index: int = 0, width: int = 1280, height: int = 720) -> None:
        self.index = index
        self.width = width
        self.height = height
        self._capture: Any = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self) -> None:
        with self._lock:
            if self._capture is not None:
                return
            if cv2 is None:
                raise RuntimeError("opencv-python is not installed")
            capture = cv2.VideoCapture(self.index)
            if not capture.isOpened():
                capture.release()
                raise RuntimeError(f"camera {self.index} could not be opened")
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
            self._capture = capture
            logger.info("camera %d opened", self.index)

    def close(self) -> None:
        with self._lock:
            if self._capture is None:
                return
            self._capture.release()
            self._capture = None
            logger.info("camera %d released", self.index)

    def read(self) -> Optional[Any]:
        """Return the latest BGR frame, or ``None`` if none is available."""
        with self._lock:
            if self._capture is None:
                return None
            ok, frame = self._capture.read()
        if not ok or frame is None:
            return None
        return frame
