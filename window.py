"""Main scanner window: camera preview, latest capture and saved notes."""

from __future__ import annotations

from typing import Any, Optional

from frame_sampler import crop_region
from models import CaptureStatus, Note

try:
    import cv2
except Exception:  # pragma: no cover
    cv2 = None  # type: ignore

try:
    from PySide6.QtCore import Qt, QTimer
    from PySide6.QtGui import QImage, QPixmap
    from PySide6.QtWidgets import (
        QHBoxLayout,
        QLabel,
        QLineEdit,
        QListWidget,
        QListWidgetItem,
        QPlainTextEdit,
        QPushButton,
        QVBoxLayout,
        QWidget,
    )
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QTimer = None  # type: ignore
    QImage = None  # type: ignore
    QPixmap = None  # type: ignore
    QHBoxLayout = object  # type: ignore
    QLabel = object  # type: ignore
    QLineEdit = object  # type: ignore
    QListWidget = object  # type: ignore
    QListWidgetItem = object  # type: ignore
    QPlainTextEdit = object  # type: ignore
    QPushButton = object  # type: ignore
    QVBoxLayout = object  # type: ignore
    QWidget = object  # type: ignore

STATUS_TEXT = {
    CaptureStatus.IDLE: "Idle",
    CaptureStatus.SCANNING: "Scanning...",
    CaptureStatus.PROCESSING: "Processing OCR...",
    CaptureStatus.WAITING: "Not enough text; waiting...",
    CaptureStatus.ERROR: "Error occurred",
    CaptureStatus.PAUSED: "Paused",
}

STATUS_COLOR = {
    CaptureStatus.IDLE: "#888888",  # grey
    CaptureStatus.SCANNING: "#3B82F6",  # blue
    CaptureStatus.PROCESSING: "#3B82F6",
    CaptureStatus.WAITING: "#EAB308",  # yellow
    CaptureStatus.ERROR: "#EF4444",  # red
    CaptureStatus.PAUSED: "#888888",
}

BOX_COLOR_RGB = (120, 200, 0)
NOTICE_TIMEOUT_MS = 2500


class ScannerWindow(QWidget):
    def __init__(self) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.setWindowTitle("Study Scanner")
        self.resize(1100, 640)

        self.preview = QLabel("Camera off")
        self.preview.setAlignment(Qt.AlignCenter)
        self.preview.setMinimumSize(560, 400)
        self.preview.setStyleSheet("background: black; color: #bbbbbb;")

        self.status_label = QLabel("")
        self.start_button = QPushButton("Start Automation")
        self.pause_button = QPushButton("Pause")
        self.retry_button = QPushButton("Retry")
        self.retry_button.hide()
        self.error_label = QLabel("")
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet("color: #FF6B6B;")
        self.error_label.hide()

        controls = QHBoxLayout()
        controls.addWidget(self.status_label, 1)
        controls.addWidget(self.retry_button)
        controls.addWidget(self.pause_button)
        controls.addWidget(self.start_button)

        left = QVBoxLayout()
        left.addWidget(self.preview, 1)
        left.addWidget(self.error_label)
        left.addLayout(controls)

        self.text_view = QPlainTextEdit()
        self.text_view.setReadOnly(True)
        self.text_view.setPlaceholderText("No text captured yet. Start automation to begin scanning.")
        self.copy_button = QPushButton("Copy")
        self.title_input = QLineEdit()
        self.title_input.setPlaceholderText("Enter note title...")
        self.save_button = QPushButton("Save Note")
        self.notes_list = QListWidget()
        self.delete_button = QPushButton("Delete Note")
        self.notice_label = QLabel("")
        self.notice_label.setStyleSheet("color: #22C55E;")
        self.notice_label.hide()
        self._notice_timer = QTimer(self)
        self._notice_timer.setSingleShot(True)
        self._notice_timer.timeout.connect(self.notice_label.hide)

        right = QVBoxLayout()
        right.addWidget(QLabel("Latest Capture"))
        right.addWidget(self.text_view, 1)
        right.addWidget(self.copy_button)
        right.addWidget(QLabel("Save as Note (optional title)"))
        right.addWidget(self.title_input)
        right.addWidget(self.save_button)
        right.addWidget(QLabel("Recent Notes"))
        right.addWidget(self.notes_list, 1)
        right.addWidget(self.delete_button)
        right.addWidget(self.notice_label)

        layout = QHBoxLayout()
        layout.addLayout(left, 3)
        layout.addLayout(right, 2)
        self.setLayout(layout)

        self.set_status(CaptureStatus.IDLE)
        self.set_automating(False)

    def set_status(self, status: CaptureStatus) -> None:
        color = STATUS_COLOR.get(status, "#888888")
        self.status_label.setText(f"<span style='color:{color}'>&#9679;</span> {STATUS_TEXT[status]}")
        self.retry_button.setVisible(status == CaptureStatus.ERROR)

    def set_automating(self, running: bool, paused: bool = False) -> None:
        self.start_button.setText("Stop Automation" if running else "Start Automation")
        self.pause_button.setEnabled(running)
        self.pause_button.setText("Resume" if paused else "Pause")

    def set_text(self, text: str) -> None:
        self.text_view.setPlainText(text)
        self.clear_error()

    def show_error(self, text: str) -> None:
        self.error_label.setText(f"OCR Error: {text}")
        self.error_label.show()

    def clear_error(self) -> None:
        self.error_label.clear()
        self.error_label.hide()

    def show_notice(self, text: str) -> None:
        """Flash a short success message under the notes list."""
        self.notice_label.setText(text)
        self.notice_label.show()
        self._notice_timer.start(NOTICE_TIMEOUT_MS)

    def set_notes(self, notes: list[Note]) -> None:
        self.notes_list.clear()
        for note in notes:
            stamp = note.created_at.astimezone().strftime("%c")
            preview = " ".join(note.extracted_text.split())[:80]
            item = QListWidgetItem(f"{note.title}\n{stamp}\n{preview}")
            item.setData(Qt.UserRole, note.id)
            self.notes_list.addItem(item)

    def selected_note_id(self) -> Optional[int]:
        item = self.notes_list.currentItem()
        if item is None:
            return None
        return int(item.data(Qt.UserRole))

    def show_frame(self, frame: Any) -> None:
        """Render a BGR frame with the capture target box drawn on top."""
        if frame is None or cv2 is None:
            return
        height, width = frame.shape[:2]
        x, y, box_w, box_h = crop_region(width, height)
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        cv2.rectangle(rgb, (x, y), (x + box_w, y + box_h), BOX_COLOR_RGB, 4)
        image = QImage(rgb.data, width, height, rgb.strides[0], QImage.Format_RGB888)
        pixmap = QPixmap.fromImage(image.copy())
        self.preview.setPixmap(
            pixmap.scaled(self.preview.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation)
        )
