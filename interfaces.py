"""Protocol interfaces used by CaptureController and the note actions."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

from models import CapturedFrame, Note


class VideoSource(Protocol):
    def read(self) -> Optional[Any]: ...


class OcrAdapter(Protocol):
    def extract_text(self, frame: CapturedFrame) -> str: ...


class Sampler(Protocol):
    def sample(self, source: VideoSource) -> Optional[CapturedFrame]: ...


class Ticker(Protocol):
    def start(self, interval_s: float, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...


class NoteSink(Protocol):
    def create_note(self, title: str, text: str) -> int: ...

    def delete_note(self, note_id: int) -> None: ...

    def list_notes(self) -> list[Note]: ...

