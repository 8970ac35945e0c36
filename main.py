"""Application entrypoint."""

from __future__ import annotations

import sys

from camera import OpenCVCamera
from capture_controller import CaptureController
from clipboard import ClipboardCopyService
from config import JsonConfigStore
from errors import CAMERA_UNAVAILABLE, ERROR_MESSAGES
from hotkey import GlobalHotkeyAdapter
from log import setup_logger
from models import CaptureStatus
from note_store import SqliteNoteStore
from notes import NoteActions
from ocr import TesseractOcrAdapter
from window import ScannerWindow

try:
    from PySide6.QtCore import QObject, QTimer, Signal
    from PySide6.QtWidgets import QApplication, QMessageBox
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

PREVIEW_INTERVAL_MS = 100


class UIBridge(QObject):
    text_signal = Signal(str)
    error_signal = Signal(str)
    state_signal = Signal(str, str)  # from_state, to_state
    toggle_signal = Signal()


class App:
    def __init__(self) -> None:
        self.logger = setup_logger()
        self.app = QApplication(sys.argv)
        self.config_store = JsonConfigStore()
        self.window = ScannerWindow()
        self.ui = UIBridge()
        self.ui.text_signal.connect(self._on_text_ui)
        self.ui.error_signal.connect(self._on_error_ui)
        self.ui.state_signal.connect(self._on_state_change_ui)
        self.ui.toggle_signal.connect(self._toggle_automation)

        interval_s, policy = self.config_store.capture_settings()
        self.camera = OpenCVCamera(index=self.config_store.get_camera_index())
        self.controller = CaptureController(
            video_source=self.camera,
            ocr=TesseractOcrAdapter(
                lang=self.config_store.get_ocr_lang(),
                tesseract_cmd=self.config_store.get_tesseract_cmd() or None,
            ),
            interval_s=interval_s,
            policy=policy,
            on_state_change=self._on_state_change,
            on_text=self._on_text,
            on_error=self._on_error,
        )
        self.notes = NoteActions(
            SqliteNoteStore(
                db_path=self.config_store.get_db_path() or None,
                owner=self.config_store.get_owner() or None,
            ),
            on_error=self._on_note_error,
        )
        self.clipboard = ClipboardCopyService()
        self.hotkey = GlobalHotkeyAdapter(hotkey_name=self.config_store.get_hotkey())

        self.preview_timer = QTimer()
        self.preview_timer.timeout.connect(self._refresh_preview)

        self._connect_buttons()
        self._reload_notes()

    def _connect_buttons(self) -> None:
        self.window.start_button.clicked.connect(self._toggle_automation)
        self.window.pause_button.clicked.connect(self._toggle_pause)
        self.window.retry_button.clicked.connect(self._retry)
        self.window.copy_button.clicked.connect(self._copy)
        self.window.save_button.clicked.connect(self._save)
        self.window.delete_button.clicked.connect(self._delete)

    # ------------------------------------------------------------------
    # Controller callbacks (worker threads -> emit signals for UI thread)
    # ------------------------------------------------------------------

    def _on_state_change(self, from_state: CaptureStatus, to_state: CaptureStatus) -> None:
        self.ui.state_signal.emit(from_state.value, to_state.value)

    def _on_text(self, text: str) -> None:
        self.ui.text_signal.emit(text)

    def _on_error(self, code: str, message: str) -> None:
        self.ui.error_signal.emit(message or ERROR_MESSAGES.get(code, code))

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _on_text_ui(self, text: str) -> None:
        self.window.set_text(text)

    def _on_error_ui(self, msg: str) -> None:
        self.window.show_error(msg)
        self._sync_buttons()

    def _on_state_change_ui(self, from_state: str, to_state: str) -> None:
        self.window.set_status(CaptureStatus(to_state))
        self._sync_buttons()

    def _on_note_error(self, code: str, message: str) -> None:
        QMessageBox.warning(self.window, "Notes", f"{ERROR_MESSAGES.get(code, code)}\n{message}")

    def _sync_buttons(self) -> None:
        session = self.controller.session
        self.window.set_automating(session.running or session.paused, session.paused)

    # ------------------------------------------------------------------
    # User controls
    # ------------------------------------------------------------------

    def _ensure_camera(self) -> bool:
        try:
            self.camera.open()
        except RuntimeError as exc:
            self.logger.error("camera unavailable: %s", exc)
            QMessageBox.critical(self.window, "Camera", f"{ERROR_MESSAGES[CAMERA_UNAVAILABLE]}\n{exc}")
            return False
        if not self.preview_timer.isActive():
            self.preview_timer.start(PREVIEW_INTERVAL_MS)
        return True

    def _toggle_automation(self) -> None:
        if self.controller.running or self.controller.session.paused:
            self.controller.stop_automation()
        elif self._ensure_camera():
            self.window.clear_error()
            self.controller.start_automation()
        self._sync_buttons()

    def _toggle_pause(self) -> None:
        if self.controller.session.paused:
            self.controller.resume_automation()
        else:
            self.controller.pause_automation()
        self._sync_buttons()

    def _retry(self) -> None:
        if self._ensure_camera():
            self.window.clear_error()
            self.controller.retry()
        self._sync_buttons()

    def _copy(self) -> None:
        text = self.controller.extracted_text
        if not text:
            return
        result = self.clipboard.copy_text(text)
        if result.success:
            self.window.show_notice("Text copied to clipboard")
        else:
            QMessageBox.warning(self.window, "Copy", f"Failed to copy text: {result.reason}")

    def _save(self) -> None:
        text = self.controller.extracted_text
        if not text:
            return
        result = self.notes.save(text, self.window.title_input.text())
        if result.success:
            self.window.title_input.clear()
            self.window.show_notice("Note saved successfully")
            self._reload_notes()

    def _delete(self) -> None:
        note_id = self.window.selected_note_id()
        if note_id is None:
            return
        if self.notes.delete(note_id).success:
            self.window.show_notice("Note deleted")
            self._reload_notes()

    def _reload_notes(self) -> None:
        self.window.set_notes(self.notes.list_notes())

    def _refresh_preview(self) -> None:
        self.window.show_frame(self.camera.read())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        try:
            # pynput calls back from its own thread; hop to the UI thread.
            self.hotkey.start(on_activate=self.ui.toggle_signal.emit)
        except Exception as exc:
            self.logger.warning("hotkey disabled: %s", exc)
        self.app.aboutToQuit.connect(self.quit)
        self.window.show()
        return self.app.exec()

    def quit(self) -> None:
        self.hotkey.stop()
        self.preview_timer.stop()
        self.controller.shutdown()
        self.camera.close()


def main() -> int:
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
