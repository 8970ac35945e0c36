"""OCR adapter using Tesseract through pytesseract.

The adapter is deliberately thin: it takes the cropped frame as-is (no
preprocessing) and returns whatever text Tesseract reads. Failures are
raised as :class:`ExtractionError` so the capture cycle can stop and show
the message to the user.
"""

from __future__ import annotations

import logging
from typing import Optional

from errors import EXTRACTION_FAILED, OCR_UNAVAILABLE, ExtractionError
from models import CapturedFrame

try:
    import pytesseract
except Exception:  # pragma: no cover
    pytesseract = None  # type: ignore

logger = logging.getLogger("study_scanner.ocr")


class TesseractOcrAdapter:
    def __init__(
        self,
        lang: str = "eng",
        psm: int = 6,
        oem: int = 3,
        tesseract_cmd: Optional[str] = None,
    ) -> None:
        self._lang = lang
        self._config = f"--oem {oem} --psm {psm}"
        self._tesseract_cmd = tesseract_cmd

    def extract_text(self, frame: CapturedFrame) -> str:
        if pytesseract is None:
            raise ExtractionError(OCR_UNAVAILABLE, "pytesseract is not installed")
        if self._tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd

        try:
            text = pytesseract.image_to_string(
                frame.pixels,
                lang=self._lang,
                config=self._config,
            )
        except Exception as exc:
            raise self._to_error(exc) from exc

        text = text or ""
        logger.debug("ocr read %d chars from %dx%d frame", len(text), frame.width, frame.height)
        return text

    def _to_error(self, exc: Exception) -> ExtractionError:
        """Map a pytesseract/runtime exception to an extraction error."""
        not_found = getattr(pytesseract, "TesseractNotFoundError", None)
        if isinstance(not_found, type) and isinstance(exc, not_found):
            return ExtractionError(OCR_UNAVAILABLE, "tesseract binary not found")
        message = str(exc).strip() or exc.__class__.__name__
        return ExtractionError(EXTRACTION_FAILED, message)
