"""State-machine based capture orchestration."""

from __future__ import annotations

import functools
import logging
import threading
from dataclasses import replace
from typing import Callable, Optional

from capture_cycle import reduce
from errors import SOURCE_NOT_READY, ScannerError
from frame_sampler import FrameSampler
from interfaces import OcrAdapter, Sampler, Ticker, VideoSource
from models import (
    CapturedFrame,
    CaptureSession,
    CaptureStatus,
    CycleEvent,
    CycleEventKind,
    Effect,
    EffectKind,
    GatePolicy,
)
from scheduler import IntervalTicker

StateCallback = Callable[[CaptureStatus, CaptureStatus], None]
TextCallback = Callable[[str], None]
ErrorCallback = Callable[[str, str], None]
Dispatcher = Callable[[Callable[[], None]], None]

logger = logging.getLogger("study_scanner.capture")


def _spawn_thread(work: Callable[[], None]) -> None:
    threading.Thread(target=work, daemon=True).start()


class CaptureController:
    def __init__(
        self,
        video_source: VideoSource,
        ocr: OcrAdapter,
        sampler: Optional[Sampler] = None,
        ticker: Optional[Ticker] = None,
        interval_s: float = 3.0,
        policy: Optional[GatePolicy] = None,
        dispatch: Optional[Dispatcher] = None,
        on_state_change: Optional[StateCallback] = None,
        on_text: Optional[TextCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self._video_source = video_source
        self._ocr = ocr
        self._sampler = sampler or FrameSampler()
        self._ticker = ticker or IntervalTicker()
        self._interval_s = interval_s
        self._policy = policy or GatePolicy()
        self._dispatch = dispatch or _spawn_thread
        self._on_state_change = on_state_change
        self._on_text = on_text
        self._on_error = on_error

        self._lock = threading.RLock()
        self._session = CaptureSession()
        self._closed = False
        self._cycle_id = 0

    @property
    def state(self) -> CaptureStatus:
        return self._session.status

    @property
    def session(self) -> CaptureSession:
        return self._session

    @property
    def running(self) -> bool:
        return self._session.running

    @property
    def last_accepted_text(self) -> str:
        return self._session.last_accepted_text

    @property
    def extracted_text(self) -> str:
        return self._session.extracted_text

    @property
    def error_message(self) -> str:
        return self._session.error_message

    # ------------------------------------------------------------------
    # User controls
    # ------------------------------------------------------------------

    def start_automation(self) -> None:
        if self._handle(CycleEvent(kind=CycleEventKind.START.value)):
            logger.info("automation started (every %.1fs)", self._interval_s)
            # First cycle runs now instead of after a full interval.
            self.tick()

    def stop_automation(self) -> None:
        if self._handle(CycleEvent(kind=CycleEventKind.STOP.value)):
            logger.info("automation stopped")

    def pause_automation(self) -> None:
        if self._handle(CycleEvent(kind=CycleEventKind.PAUSE.value)):
            logger.info("automation paused")

    def resume_automation(self) -> None:
        if self._handle(CycleEvent(kind=CycleEventKind.RESUME.value)):
            logger.info("automation resumed")
            self.tick()

    def retry(self) -> None:
        """Restart automation after an extraction failure."""
        self.start_automation()

    def toggle_automation(self) -> None:
        if self._session.running:
            self.stop_automation()
        else:
            self.start_automation()

    def tick(self) -> bool:
        """Run one cycle unless one is already in flight."""
        return self._handle(CycleEvent(kind=CycleEventKind.TICK.value))

    def shutdown(self) -> None:
        """Tear the session down. Results of a cycle still in flight are dropped."""
        self.stop_automation()
        with self._lock:
            self._closed = True
        self._safe_stop_ticker()

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    def _run_cycle(self, cycle_id: int) -> None:
        try:
            frame = self._sample_frame()
            if frame is None:
                self._handle(CycleEvent(kind=CycleEventKind.FRAME_MISSING.value))
                return
            self._handle(CycleEvent(kind=CycleEventKind.FRAME_READY.value, frame=frame))
        except Exception:
            logger.exception("capture cycle %d crashed", cycle_id)
            self._release_guard(cycle_id)

    def _sample_frame(self) -> Optional[CapturedFrame]:
        try:
            return self._sampler.sample(self._video_source)
        except Exception as exc:
            logger.warning("%s: %s", SOURCE_NOT_READY, exc)
            return None

    def _extract_text(self, frame: CapturedFrame) -> None:
        try:
            text = self._ocr.extract_text(frame)
        except Exception as exc:
            code = exc.code if isinstance(exc, ScannerError) else ""
            logger.error("ocr failed: %s", exc)
            self._handle(CycleEvent(kind=CycleEventKind.OCR_FAILED.value, code=code, message=str(exc)))
            return
        self._handle(CycleEvent(kind=CycleEventKind.OCR_SUCCEEDED.value, text=text))

    def _release_guard(self, cycle_id: int) -> None:
        with self._lock:
            if self._session.in_flight and cycle_id == self._cycle_id:
                self._session = replace(self._session, in_flight=False)

    # ------------------------------------------------------------------
    # Reducer plumbing
    # ------------------------------------------------------------------

    def _handle(self, event: CycleEvent) -> bool:
        """Apply *event* and run its effects. Returns True if anything happened."""
        with self._lock:
            if self._closed:
                logger.debug("session closed, dropping %s", event.kind)
                return False
            previous = self._session
            transition = reduce(previous, event, self._policy)
            self._session = transition.session
            self._transition(previous.status, transition.session.status)
            changed = transition.session != previous or bool(transition.effects)
        self._run_effects(transition.effects)
        return changed

    def _run_effects(self, effects: list[Effect]) -> None:
        for effect in effects:
            kind = effect.kind
            if kind == EffectKind.START_TIMER.value:
                self._ticker.start(self._interval_s, self.tick)
            elif kind == EffectKind.CANCEL_TIMER.value:
                self._safe_stop_ticker()
            elif kind == EffectKind.SAMPLE_FRAME.value:
                with self._lock:
                    self._cycle_id += 1
                    cycle_id = self._cycle_id
                self._dispatch(functools.partial(self._run_cycle, cycle_id))
            elif kind == EffectKind.EXTRACT_TEXT.value and effect.frame is not None:
                self._extract_text(effect.frame)
            elif kind == EffectKind.PUBLISH_TEXT.value:
                logger.info("accepted %d chars of new text", len(effect.text))
                if self._on_text:
                    self._on_text(effect.text)
            elif kind == EffectKind.REPORT_ERROR.value:
                self._emit_error(effect.code, effect.message)

    def _emit_error(self, code: str, message: str) -> None:
        if self._on_error:
            self._on_error(code, message)

    def _safe_stop_ticker(self) -> None:
        try:
            self._ticker.stop()
        except Exception:  # pragma: no cover - defensive
            logger.exception("ticker stop failed")

    def _transition(self, from_state: CaptureStatus, to_state: CaptureStatus) -> None:
        if from_state == to_state:
            return
        logger.debug("status %s -> %s", from_state.value, to_state.value)
        if self._on_state_change:
            self._on_state_change(from_state, to_state)
