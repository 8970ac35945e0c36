"""Shared error codes, user-facing messages and exceptions."""

from __future__ import annotations

SOURCE_NOT_READY = "SOURCE_NOT_READY"
EXTRACTION_FAILED = "EXTRACTION_FAILED"
OCR_UNAVAILABLE = "OCR_UNAVAILABLE"
SINK_FAILED = "SINK_FAILED"
CLIPBOARD_UNAVAILABLE = "CLIPBOARD_UNAVAILABLE"
CAMERA_UNAVAILABLE = "CAMERA_UNAVAILABLE"

ERROR_MESSAGES = {
    SOURCE_NOT_READY: "Camera has no frame yet.",
    EXTRACTION_FAILED: "Text extraction failed, press Retry to resume.",
    OCR_UNAVAILABLE: "Tesseract OCR is not installed.",
    SINK_FAILED: "Could not update notes.",
    CLIPBOARD_UNAVAILABLE: "Clipboard is not available.",
    CAMERA_UNAVAILABLE: "Failed to start camera.",
}


class ScannerError(RuntimeError):
    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(message or ERROR_MESSAGES.get(code, code))
        self.code = code


class ExtractionError(ScannerError):
    pass


class NoteSinkError(ScannerError):
    pass
