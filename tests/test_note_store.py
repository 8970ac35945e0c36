from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from errors import SINK_FAILED, NoteSinkError
from note_store import SqliteNoteStore


def test_create_and_list_notes(tmp_path: Path) -> None:
    store = SqliteNoteStore(db_path=tmp_path / "notes.db", owner="alex")

    first = store.create_note("Biology", "Cells are the basic unit of life.")
    second = store.create_note("History", "The war ended in 1945.")

    notes = store.list_notes()
    assert [n.id for n in notes] == [second, first]
    assert notes[0].title == "History"
    assert notes[0].owner == "alex"
    assert notes[0].extracted_text == "The war ended in 1945."
    assert notes[0].created_at.tzinfo is not None
    assert first != second


def test_notes_survive_reopen(tmp_path: Path) -> None:
    path = tmp_path / "notes.db"
    note_id = SqliteNoteStore(db_path=path, owner="alex").create_note("t", "persisted text")

    reloaded = SqliteNoteStore(db_path=path, owner="alex")
    assert [n.id for n in reloaded.list_notes()] == [note_id]


def test_owners_only_see_and_delete_their_notes(tmp_path: Path) -> None:
    path = tmp_path / "notes.db"
    alex = SqliteNoteStore(db_path=path, owner="alex")
    sam = SqliteNoteStore(db_path=path, owner="sam")

    note_id = alex.create_note("mine", "private study notes")
    assert sam.list_notes() == []

    sam.delete_note(note_id)
    assert [n.id for n in alex.list_notes()] == [note_id]


def test_delete_is_idempotent(tmp_path: Path) -> None:
    store = SqliteNoteStore(db_path=tmp_path / "notes.db", owner="alex")
    note_id = store.create_note("t", "some text to delete")

    store.delete_note(note_id)
    store.delete_note(note_id)
    store.delete_note(9999)

    assert store.list_notes() == []


def test_blank_text_is_rejected(tmp_path: Path) -> None:
    store = SqliteNoteStore(db_path=tmp_path / "notes.db", owner="alex")
    with pytest.raises(NoteSinkError) as info:
        store.create_note("empty", "   ")
    assert info.value.code == SINK_FAILED


def test_in_memory_store_keeps_data() -> None:
    store = SqliteNoteStore(db_path=":memory:", owner="alex")
    note_id = store.create_note("t", "kept in memory")
    assert [n.id for n in store.list_notes()] == [note_id]


def test_database_errors_are_wrapped(tmp_path: Path, monkeypatch) -> None:  # noqa: ANN001
    store = SqliteNoteStore(db_path=tmp_path / "notes.db", owner="alex")

    def broken_connect() -> sqlite3.Connection:
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(store, "_connect", broken_connect)

    with pytest.raises(NoteSinkError, match="database is locked"):
        store.create_note("t", "text")
    with pytest.raises(NoteSinkError):
        store.delete_note(1)
    with pytest.raises(NoteSinkError):
        store.list_notes()


def test_default_owner_is_used(tmp_path: Path) -> None:
    store = SqliteNoteStore(db_path=tmp_path / "notes.db")
    assert store.owner
