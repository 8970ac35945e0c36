"""User actions on notes: save the current capture, delete, list."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from errors import SINK_FAILED
from interfaces import NoteSink
from models import ActionResult, Note

ErrorCallback = Callable[[str, str], None]

logger = logging.getLogger("study_scanner.notes")


def default_title(now: Optional[datetime] = None) -> str:
    """Human readable fallback title, e.g. ``Note Mon Oct 19 14:02:11 2026``."""
    now = now or datetime.now()
    return f"Note {now.strftime('%c')}"


class NoteActions:
    def __init__(self, sink: NoteSink, on_error: Optional[ErrorCallback] = None) -> None:
        self._sink = sink
        self._on_error = on_error

    def save(self, text: str, title: str = "") -> ActionResult:
        if not text or not text.strip():
            return ActionResult(success=False, reason="nothing to save")
        title = (title or "").strip() or default_title()
        try:
            note_id = self._sink.create_note(title, text)
        except Exception as exc:
            return self._failed("save", exc)
        return ActionResult(success=True, reason="ok", note_id=note_id)

    def delete(self, note_id: int) -> ActionResult:
        try:
            self._sink.delete_note(note_id)
        except Exception as exc:
            return self._failed("delete", exc)
        return ActionResult(success=True, reason="ok", note_id=note_id)

    def list_notes(self) -> list[Note]:
        try:
            return list(self._sink.list_notes())
        except Exception as exc:
            self._failed("list", exc)
            return []

    def _failed(self, action: str, exc: Exception) -> ActionResult:
        code = getattr(exc, "code", SINK_FAILED)
        message = str(exc)
        logger.warning("note %s failed: %s", action, message)
        if self._on_error:
            self._on_error(code, message)
        return ActionResult(success=False, reason=f"{code}: {message}")
