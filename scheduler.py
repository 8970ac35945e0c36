"""Fixed-cadence ticker thread."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger("study_scanner.scheduler")


class IntervalTicker:
    def __init__(self) -> None:
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self, interval_s: float, callback: Callable[[], None]) -> None:
        with self._lock:
            if self.active:
                return
            # Fresh event per run so a thread still winding down never resumes.
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._worker,
                args=(interval_s, callback, self._stop_event),
                daemon=True,
            )
            self._thread.start()

    def stop(self) -> None:
        with self._lock:
            self._stop_event.set()
            thread = self._thread
            self._thread = None
        if thread is not None and thread is not threading.current_thread() and thread.is_alive():
            thread.join(timeout=0.5)

    def _worker(
        self,
        interval_s: float,
        callback: Callable[[], None],
        stop_event: threading.Event,
    ) -> None:
        while not stop_event.wait(interval_s):
            try:
                callback()
            except Exception:
                logger.exception("tick callback failed")
