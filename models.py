"""Core data models for the scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class CaptureStatus(str, Enum):
    IDLE = "IDLE"
    SCANNING = "SCANNING"
    PROCESSING = "PROCESSING"
    WAITING = "WAITING"
    ERROR = "ERROR"
    PAUSED = "PAUSED"


class CycleEventKind(str, Enum):
    START = "start"
    STOP = "stop"
    PAUSE = "pause"
    RESUME = "resume"
    TICK = "tick"
    FRAME_MISSING = "frame_missing"
    FRAME_READY = "frame_ready"
    OCR_SUCCEEDED = "ocr_succeeded"
    OCR_FAILED = "ocr_failed"


class EffectKind(str, Enum):
    START_TIMER = "start_timer"
    CANCEL_TIMER = "cancel_timer"
    SAMPLE_FRAME = "sample_frame"
    EXTRACT_TEXT = "extract_text"
    PUBLISH_TEXT = "publish_text"
    REPORT_ERROR = "report_error"


@dataclass
class CapturedFrame:
    pixels: Any
    width: int
    height: int
    timestamp_ms: int = 0


@dataclass(frozen=True)
class GatePolicy:
    min_text_length: int = 15
    similarity_threshold: float = 0.8


@dataclass(frozen=True)
class CaptureSession:
    running: bool = False
    paused: bool = False
    in_flight: bool = False
    status: CaptureStatus = CaptureStatus.IDLE
    last_accepted_text: str = ""
    extracted_text: str = ""
    error_message: str = ""


@dataclass
class CycleEvent:
    kind: str
    frame: Optional[CapturedFrame] = None
    text: str = ""
    code: str = ""
    message: str = ""


@dataclass
class Effect:
    kind: str
    frame: Optional[CapturedFrame] = None
    text: str = ""
    code: str = ""
    message: str = ""


@dataclass
class Transition:
    session: CaptureSession
    effects: list[Effect] = field(default_factory=list)


@dataclass
class Note:
    id: int
    title: str
    owner: str
    created_at: datetime
    extracted_text: str


@dataclass
class ActionResult:
    success: bool
    reason: str
    note_id: Optional[int] = None
