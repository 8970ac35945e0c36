"""Copy extracted text to the system clipboard."""

from __future__ import annotations

from errors import CLIPBOARD_UNAVAILABLE
from models import ActionResult

try:
    import pyperclip
except Exception:  # pragma: no cover
    pyperclip = None  # type: ignore


class ClipboardCopyService:
    def copy_text(self, text: str) -> ActionResult:
        if not text.strip():
            return ActionResult(success=False, reason="empty text")
        if pyperclip is None:
            return ActionResult(success=False, reason=f"{CLIPBOARD_UNAVAILABLE}: pyperclip missing")
        try:
            pyperclip.copy(text)
        except Exception as exc:
            return ActionResult(success=False, reason=f"{CLIPBOARD_UNAVAILABLE}: {exc}")
        return ActionResult(success=True, reason="ok")
