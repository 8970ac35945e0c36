"""Simple JSON-based config store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from models import GatePolicy

DEFAULTS: dict[str, Any] = {
    "camera_index": 0,
    "interval_ms": 3000,
    "min_text_length": 15,
    "similarity_threshold": 0.8,
    "ocr_lang": "eng",
    "tesseract_cmd": "",
    "hotkey": "Key.f8",
    "db_path": "",
    "owner": "",
}


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "study_scanner" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_camera_index(self) -> int:
        return int(self._get("camera_index"))

    def set_camera_index(self, index: int) -> None:
        self._set("camera_index", int(index))

    def get_interval_ms(self) -> int:
        return max(int(self._get("interval_ms")), 100)

    def set_interval_ms(self, interval_ms: int) -> None:
        self._set("interval_ms", int(interval_ms))

    def get_ocr_lang(self) -> str:
        return str(self._get("ocr_lang"))

    def set_ocr_lang(self, lang: str) -> None:
        self._set("ocr_lang", lang)

    def get_tesseract_cmd(self) -> str:
        return str(self._get("tesseract_cmd"))

    def set_tesseract_cmd(self, cmd: str) -> None:
        self._set("tesseract_cmd", cmd)

    def get_hotkey(self) -> str:
        return str(self._get("hotkey"))

    def set_hotkey(self, hotkey: str) -> None:
        self._set("hotkey", hotkey)

    def get_db_path(self) -> str:
        return str(self._get("db_path"))

    def set_db_path(self, db_path: str) -> None:
        self._set("db_path", str(db_path))

    def get_owner(self) -> str:
        return str(self._get("owner"))

    def set_owner(self, owner: str) -> None:
        self._set("owner", owner)

    def get_gate_policy(self) -> GatePolicy:
        return GatePolicy(
            min_text_length=int(self._get("min_text_length")),
            similarity_threshold=float(self._get("similarity_threshold")),
        )

    def capture_settings(self) -> tuple[float, GatePolicy]:
        """Return the tick interval in seconds and the gate policy."""
        return self.get_interval_ms() / 1000.0, self.get_gate_policy()

    def _get(self, key: str) -> Any:
        value = self._read_all().get(key)
        default = DEFAULTS[key]
        if value is None:
            return default
        try:
            return type(default)(value)
        except (TypeError, ValueError):
            return default

    def _set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
