"""Pure transition function for the capture cycle.

``reduce`` takes the current session and one event and returns the next
session plus the effects the controller must carry out (start the timer,
sample a frame, run OCR, publish text, report an error). It never touches
the camera, the OCR engine or the clock, so every cycle outcome can be
checked without threads or timers.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from errors import EXTRACTION_FAILED
from models import (
    CaptureSession,
    CaptureStatus,
    CycleEvent,
    CycleEventKind,
    Effect,
    EffectKind,
    GatePolicy,
    Transition,
)
from similarity import similarity

DEFAULT_POLICY = GatePolicy()


def reduce(
    session: CaptureSession,
    event: CycleEvent,
    policy: Optional[GatePolicy] = None,
) -> Transition:
    policy = policy or DEFAULT_POLICY
    kind = event.kind

    if kind == CycleEventKind.START.value:
        return _start(session)
    if kind == CycleEventKind.STOP.value:
        return _stop(session)
    if kind == CycleEventKind.PAUSE.value:
        return _pause(session)
    if kind == CycleEventKind.RESUME.value:
        return _resume(session)
    if kind == CycleEventKind.TICK.value:
        return _tick(session)
    if kind == CycleEventKind.FRAME_MISSING.value:
        # Source not ready: skip silently, status stays where the tick left it.
        return Transition(replace(session, in_flight=False))
    if kind == CycleEventKind.FRAME_READY.value:
        status = CaptureStatus.PAUSED if session.paused else CaptureStatus.PROCESSING
        return Transition(
            replace(session, status=status),
            [Effect(kind=EffectKind.EXTRACT_TEXT.value, frame=event.frame)],
        )
    if kind == CycleEventKind.OCR_SUCCEEDED.value:
        return _gate(session, event.text, policy)
    if kind == CycleEventKind.OCR_FAILED.value:
        return _fail(session, event.code or EXTRACTION_FAILED, event.message)
    raise ValueError(f"unknown cycle event: {kind}")


def _start(session: CaptureSession) -> Transition:
    if session.running and not session.paused:
        return Transition(session)
    status = session.status
    if status in (CaptureStatus.ERROR, CaptureStatus.PAUSED):
        status = CaptureStatus.IDLE
    return Transition(
        replace(session, running=True, paused=False, status=status, error_message=""),
        [Effect(kind=EffectKind.START_TIMER.value)],
    )


def _stop(session: CaptureSession) -> Transition:
    if not session.running and not session.paused:
        return Transition(session)
    return Transition(
        replace(session, running=False, paused=False, status=CaptureStatus.IDLE),
        [Effect(kind=EffectKind.CANCEL_TIMER.value)],
    )


def _pause(session: CaptureSession) -> Transition:
    if not session.running or session.paused:
        return Transition(session)
    return Transition(
        replace(session, paused=True, status=CaptureStatus.PAUSED),
        [Effect(kind=EffectKind.CANCEL_TIMER.value)],
    )


def _resume(session: CaptureSession) -> Transition:
    if not session.paused:
        return Transition(session)
    return Transition(
        replace(session, paused=False, status=CaptureStatus.IDLE),
        [Effect(kind=EffectKind.START_TIMER.value)],
    )


def _tick(session: CaptureSession) -> Transition:
    # Dropped, not queued.
    if session.in_flight or not session.running or session.paused:
        return Transition(session)
    return Transition(
        replace(session, in_flight=True, status=CaptureStatus.SCANNING),
        [Effect(kind=EffectKind.SAMPLE_FRAME.value)],
    )


def _gate(session: CaptureSession, raw_text: str, policy: GatePolicy) -> Transition:
    text = (raw_text or "").strip()
    released = replace(session, in_flight=False)
    # A pause that landed mid-cycle outlives the cycle's result.
    waiting = CaptureStatus.PAUSED if session.paused else CaptureStatus.WAITING
    done = CaptureStatus.PAUSED if session.paused else CaptureStatus.IDLE

    if len(text) < policy.min_text_length:
        return Transition(replace(released, status=waiting))

    score = similarity(text, session.last_accepted_text) if session.last_accepted_text else 0.0
    if score >= policy.similarity_threshold:
        return Transition(replace(released, status=waiting))

    accepted = replace(
        released,
        last_accepted_text=text,
        extracted_text=text,
        error_message="",
        status=done,
    )
    return Transition(accepted, [Effect(kind=EffectKind.PUBLISH_TEXT.value, text=text)])


def _fail(session: CaptureSession, code: str, message: str) -> Transition:
    message = message or "OCR failed"
    failed = replace(
        session,
        in_flight=False,
        running=False,
        paused=False,
        status=CaptureStatus.ERROR,
        error_message=message,
    )
    return Transition(
        failed,
        [
            Effect(kind=EffectKind.CANCEL_TIMER.value),
            Effect(kind=EffectKind.REPORT_ERROR.value, code=code, message=message),
        ],
    )
