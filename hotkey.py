"""Global hotkey that starts and stops automation, based on pynput.

One physical press toggles capture once; key auto-repeat is ignored until
the key is released.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

try:
    from pynput import keyboard
except Exception:  # pragma: no cover
    keyboard = None  # type: ignore


class GlobalHotkeyAdapter:
    def __init__(self, hotkey_name: str = "Key.f8") -> None:
        self._hotkey_name = hotkey_name
        self._listener: Optional[object] = None
        self._pressed = False
        self._lock = threading.Lock()

    def start(self, on_activate: Callable[[], None]) -> None:
        if keyboard is None:
            raise RuntimeError("pynput is not installed")

        def _on_press(key: object) -> None:
            if str(key) != self._hotkey_name:
                return
            # Key auto-repeat fires press repeatedly; act once per physical press.
            with self._lock:
                if self._pressed:
                    return
                self._pressed = True
            on_activate()

        def _on_release(key: object) -> None:
            if str(key) != self._hotkey_name:
                return
            with self._lock:
                self._pressed = False

        self._listener = keyboard.Listener(on_press=_on_press, on_release=_on_release)
        self._listener.start()

    def stop(self) -> None:
        listener = self._listener
        if listener is not None:
            listener.stop()
            self._listener = None
