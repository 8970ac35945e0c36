"""Tests for the pure capture-cycle transition function."""

from __future__ import annotations

from dataclasses import replace

import pytest

from capture_cycle import reduce
from errors import EXTRACTION_FAILED, OCR_UNAVAILABLE
from models import (
    CapturedFrame,
    CaptureSession,
    CaptureStatus,
    CycleEvent,
    CycleEventKind,
    EffectKind,
    GatePolicy,
)

STUDY_TEXT = "Study material example:\n1. First point\n2. Second point\n3. Third point"


def _event(kind: CycleEventKind, **kwargs) -> CycleEvent:  # noqa: ANN003
    return CycleEvent(kind=kind.value, **kwargs)


def _kinds(transition) -> list[str]:  # noqa: ANN001
    return [effect.kind for effect in transition.effects]


def _running() -> CaptureSession:
    return CaptureSession(running=True)


def _in_flight(last: str = "") -> CaptureSession:
    return CaptureSession(
        running=True,
        in_flight=True,
        status=CaptureStatus.PROCESSING,
        last_accepted_text=last,
    )


# ---------------------------------------------------------------
# Start / stop / pause
# ---------------------------------------------------------------

def test_start_from_idle_starts_timer() -> None:
    result = reduce(CaptureSession(), _event(CycleEventKind.START))

    assert result.session.running is True
    assert result.session.status == CaptureStatus.IDLE
    assert _kinds(result) == [EffectKind.START_TIMER.value]


def test_start_when_running_is_noop() -> None:
    session = _running()
    result = reduce(session, _event(CycleEventKind.START))
    assert result.session == session
    assert result.effects == []


def test_start_after_error_clears_error() -> None:
    session = CaptureSession(status=CaptureStatus.ERROR, error_message="boom", last_accepted_text="kept")
    result = reduce(session, _event(CycleEventKind.START))

    assert result.session.status == CaptureStatus.IDLE
    assert result.session.error_message == ""
    assert result.session.last_accepted_text == "kept"


def test_stop_keeps_baseline_and_published_text() -> None:
    session = CaptureSession(
        running=True,
        status=CaptureStatus.WAITING,
        last_accepted_text=STUDY_TEXT,
        extracted_text=STUDY_TEXT,
    )
    result = reduce(session, _event(CycleEventKind.STOP))

    assert result.session.running is False
    assert result.session.status == CaptureStatus.IDLE
    assert result.session.last_accepted_text == STUDY_TEXT
    assert result.session.extracted_text == STUDY_TEXT
    assert _kinds(result) == [EffectKind.CANCEL_TIMER.value]


def test_stop_when_not_running_is_noop() -> None:
    result = reduce(CaptureSession(), _event(CycleEventKind.STOP))
    assert result.effects == []


def test_pause_and_resume() -> None:
    paused = reduce(_running(), _event(CycleEventKind.PAUSE))
    assert paused.session.status == CaptureStatus.PAUSED
    assert paused.session.paused is True
    assert _kinds(paused) == [EffectKind.CANCEL_TIMER.value]

    # Ticks are ignored while paused.
    assert reduce(paused.session, _event(CycleEventKind.TICK)).effects == []

    resumed = reduce(paused.session, _event(CycleEventKind.RESUME))
    assert resumed.session.paused is False
    assert resumed.session.status == CaptureStatus.IDLE
    assert _kinds(resumed) == [EffectKind.START_TIMER.value]


def test_resume_when_not_paused_is_noop() -> None:
    assert reduce(_running(), _event(CycleEventKind.RESUME)).effects == []


def test_pause_mid_cycle_keeps_paused_status() -> None:
    frame = CapturedFrame(pixels=None, width=8, height=6)
    scanning = reduce(_running(), _event(CycleEventKind.TICK)).session
    paused = reduce(scanning, _event(CycleEventKind.PAUSE)).session

    ready = reduce(paused, _event(CycleEventKind.FRAME_READY, frame=frame))
    assert ready.session.status == CaptureStatus.PAUSED
    assert _kinds(ready) == [EffectKind.EXTRACT_TEXT.value]

    accepted = reduce(ready.session, _event(CycleEventKind.OCR_SUCCEEDED, text=STUDY_TEXT))
    assert accepted.session.status == CaptureStatus.PAUSED
    assert accepted.session.paused is True
    assert accepted.session.in_flight is False
    assert accepted.session.last_accepted_text == STUDY_TEXT
    assert _kinds(accepted) == [EffectKind.PUBLISH_TEXT.value]

    short = reduce(ready.session, _event(CycleEventKind.OCR_SUCCEEDED, text="too short"))
    assert short.session.status == CaptureStatus.PAUSED


# ---------------------------------------------------------------
# Tick and in-flight guard
# ---------------------------------------------------------------

def test_tick_enters_scanning_and_samples() -> None:
    result = reduce(_running(), _event(CycleEventKind.TICK))

    assert result.session.in_flight is True
    assert result.session.status == CaptureStatus.SCANNING
    assert _kinds(result) == [EffectKind.SAMPLE_FRAME.value]


def test_tick_while_in_flight_is_dropped() -> None:
    session = _in_flight()
    result = reduce(session, _event(CycleEventKind.TICK))
    assert result.session == session
    assert result.effects == []


def test_tick_when_stopped_is_dropped() -> None:
    result = reduce(CaptureSession(), _event(CycleEventKind.TICK))
    assert result.effects == []
    assert result.session.status == CaptureStatus.IDLE


def test_missing_frame_releases_guard_and_keeps_status() -> None:
    scanning = reduce(_running(), _event(CycleEventKind.TICK)).session
    result = reduce(scanning, _event(CycleEventKind.FRAME_MISSING))

    assert result.session.in_flight is False
    assert result.session.status == CaptureStatus.SCANNING
    assert result.effects == []


def test_frame_ready_requests_extraction() -> None:
    frame = CapturedFrame(pixels=None, width=8, height=6)
    scanning = reduce(_running(), _event(CycleEventKind.TICK)).session
    result = reduce(scanning, _event(CycleEventKind.FRAME_READY, frame=frame))

    assert result.session.status == CaptureStatus.PROCESSING
    assert _kinds(result) == [EffectKind.EXTRACT_TEXT.value]
    assert result.effects[0].frame is frame


# ---------------------------------------------------------------
# Gates
# ---------------------------------------------------------------

def test_new_text_is_accepted_and_published() -> None:
    result = reduce(_in_flight(), _event(CycleEventKind.OCR_SUCCEEDED, text=f"  {STUDY_TEXT}\n"))

    assert result.session.status == CaptureStatus.IDLE
    assert result.session.in_flight is False
    assert result.session.last_accepted_text == STUDY_TEXT
    assert result.session.extracted_text == STUDY_TEXT
    assert _kinds(result) == [EffectKind.PUBLISH_TEXT.value]
    assert result.effects[0].text == STUDY_TEXT


def test_short_text_waits_without_touching_baseline() -> None:
    result = reduce(_in_flight(last="previous text here"), _event(CycleEventKind.OCR_SUCCEEDED, text="  ok  "))

    assert result.session.status == CaptureStatus.WAITING
    assert result.session.last_accepted_text == "previous text here"
    assert result.session.in_flight is False
    assert result.effects == []


def test_fourteen_characters_is_below_the_floor() -> None:
    result = reduce(_in_flight(), _event(CycleEventKind.OCR_SUCCEEDED, text="a" * 14))
    assert result.session.status == CaptureStatus.WAITING

    result = reduce(_in_flight(), _event(CycleEventKind.OCR_SUCCEEDED, text="a" * 15))
    assert result.session.status == CaptureStatus.IDLE


def test_near_duplicate_waits() -> None:
    session = _in_flight(last=STUDY_TEXT)
    text = STUDY_TEXT.upper().replace("THIRD", "THIRT")
    result = reduce(session, _event(CycleEventKind.OCR_SUCCEEDED, text=text))

    assert result.session.status == CaptureStatus.WAITING
    assert result.session.last_accepted_text == STUDY_TEXT
    assert result.effects == []


def test_different_text_replaces_baseline() -> None:
    other = "Question: What is the capital of France?\nA) London\nB) Paris"
    result = reduce(_in_flight(last=STUDY_TEXT), _event(CycleEventKind.OCR_SUCCEEDED, text=other))

    assert result.session.status == CaptureStatus.IDLE
    assert result.session.last_accepted_text == other


def test_custom_policy_thresholds() -> None:
    policy = GatePolicy(min_text_length=3, similarity_threshold=1.1)
    result = reduce(_in_flight(last="same text"), _event(CycleEventKind.OCR_SUCCEEDED, text="same text"), policy)
    assert result.session.status == CaptureStatus.IDLE


# ---------------------------------------------------------------
# Failure
# ---------------------------------------------------------------

def test_ocr_failure_stops_automation() -> None:
    session = replace(_in_flight(last=STUDY_TEXT), extracted_text=STUDY_TEXT)
    result = reduce(session, _event(CycleEventKind.OCR_FAILED, message="engine crashed"))

    assert result.session.status == CaptureStatus.ERROR
    assert result.session.running is False
    assert result.session.in_flight is False
    assert result.session.error_message == "engine crashed"
    assert result.session.last_accepted_text == STUDY_TEXT
    assert _kinds(result) == [EffectKind.CANCEL_TIMER.value, EffectKind.REPORT_ERROR.value]
    assert result.effects[1].code == EXTRACTION_FAILED


def test_ocr_failure_keeps_adapter_code() -> None:
    result = reduce(
        _in_flight(),
        _event(CycleEventKind.OCR_FAILED, code=OCR_UNAVAILABLE, message="missing"),
    )
    assert result.effects[1].code == OCR_UNAVAILABLE


def test_unknown_event_raises() -> None:
    with pytest.raises(ValueError):
        reduce(CaptureSession(), CycleEvent(kind="bogus"))
