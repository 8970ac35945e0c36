"""SQLite-backed note store.

Accepted captures are saved as small records owned by the local user. The
store keeps a single ``notes`` table; identifiers are SQLite row ids, so
they are stable for the lifetime of the database file.
"""

from __future__ import annotations

import getpass
import logging
import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from errors import SINK_FAILED, NoteSinkError
from models import Note

logger = logging.getLogger("study_scanner.notes")

_DEFAULT_DB_PATH = Path(
    os.getenv("STUDY_SCANNER_DB", "~/.study_scanner/notes.db")
).expanduser()


def _default_owner() -> str:
    try:
        return getpass.getuser()
    except Exception:
        return "local"


class SqliteNoteStore:
    """Note sink persisting to a single SQLite file."""

    def __init__(self, db_path: Path | str | None = None, owner: Optional[str] = None):
        self.path = Path(db_path).expanduser() if db_path else _DEFAULT_DB_PATH
        self.owner = owner or _default_owner()
        if str(self.path) != ":memory:":
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._memory_conn: Optional[sqlite3.Connection] = None
        self._initialise()

    def _connect(self) -> sqlite3.Connection:
        if str(self.path) == ":memory:":
            # Each connect() would otherwise open a fresh, empty database.
            if self._memory_conn is None:
                self._memory_conn = sqlite3.connect(":memory:", check_same_thread=False)
                self._memory_conn.row_factory = sqlite3.Row
            return self._memory_conn
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialise(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS notes (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        title TEXT NOT NULL,
                        owner TEXT NOT NULL,
                        created_at TEXT NOT NULL,
                        extracted_text TEXT NOT NULL
                    )
                    """
                )
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_notes_owner ON notes(owner, created_at)"
                )
        except sqlite3.Error as exc:
            raise NoteSinkError(SINK_FAILED, f"cannot open note store: {exc}") from exc

    # ------------------------------------------------------------------
    # Note sink operations
    # ------------------------------------------------------------------
    def create_note(self, title: str, text: str) -> int:
        if not text or not text.strip():
            raise NoteSinkError(SINK_FAILED, "note text is empty")
        created_at = datetime.now(timezone.utc).isoformat(timespec="microseconds")
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "INSERT INTO notes (title, owner, created_at, extracted_text) "
                    "VALUES (?, ?, ?, ?)",
                    (title, self.owner, created_at, text),
                )
                note_id = int(cursor.lastrowid)
        except sqlite3.Error as exc:
            raise NoteSinkError(SINK_FAILED, f"cannot save note: {exc}") from exc
        logger.info("note %d created (%d chars)", note_id, len(text))
        return note_id

    def delete_note(self, note_id: int) -> None:
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "DELETE FROM notes WHERE id = ? AND owner = ?",
                    (int(note_id), self.owner),
                )
        except sqlite3.Error as exc:
            raise NoteSinkError(SINK_FAILED, f"cannot delete note: {exc}") from exc
        if cursor.rowcount:
            logger.info("note %d deleted", note_id)
        else:
            logger.debug("note %d not found, nothing to delete", note_id)

    def list_notes(self) -> list[Note]:
        """Return the owner's notes, newest first."""
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT id, title, owner, created_at, extracted_text FROM notes "
                    "WHERE owner = ? ORDER BY created_at DESC, id DESC",
                    (self.owner,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise NoteSinkError(SINK_FAILED, f"cannot load notes: {exc}") from exc
        return [self._row_to_note(row) for row in rows]

    @staticmethod
    def _row_to_note(row: sqlite3.Row) -> Note:
        return Note(
            id=int(row["id"]),
            title=row["title"],
            owner=row["owner"],
            created_at=datetime.fromisoformat(row["created_at"]),
            extracted_text=row["extracted_text"],
        )
