"""Shared fakes for note coordinator and API tests."""

from datetime import datetime, timezone

import pytest

from app.models import Note

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class StoreError(Exception):
    pass


class FakeNoteStore:
    """In-memory note store that can be told to fail the next N calls of an operation."""

    def __init__(self, notes: list[Note] | None = None):
        self.rows: dict[str, Note] = {n.id: n for n in notes or []}
        self.calls: list[tuple[str, str]] = []
        self.pending_failures = {"insert": 0, "update": 0, "delete": 0}
        self.before_call = None
        self.after_commit = None
        self.issued: dict[str, str] = {}
        self.insert_keys: list[str | None] = []
        self._next_id = 1

    def fail(self, operation: str, times: int) -> None:
        self.pending_failures[operation] = times

    def _enter(self, operation: str, target: str) -> None:
        self.calls.append((operation, target))
        if self.before_call is not None:
            self.before_call(operation)
        if self.pending_failures[operation] > 0:
            self.pending_failures[operation] -= 1
            raise StoreError(f"{operation} rejected")

    async def insert(self, note: Note, note_id: str | None = None) -> Note:
        self._enter("insert", note.id)
        self.insert_keys.append(note_id)
        if note_id is not None and note_id in self.issued:
            return self.rows[self.issued[note_id]]
        stored = note.model_copy(update={"id": f"srv-{self._next_id}"})
        self._next_id += 1
        self.rows[stored.id] = stored
        if note_id is not None:
            self.issued[note_id] = stored.id
        if self.after_commit is not None:
            await self.after_commit()
        return stored

    async def update(self, note_id: str, fields: dict) -> None:
        self._enter("update", note_id)
        self.rows[note_id] = self.rows[note_id].model_copy(update=fields)

    async def delete(self, note_id: str) -> None:
        self._enter("delete", note_id)
        del self.rows[note_id]

    async def list_by_folder(self, folder_id: str) -> list[Note]:
        notes = [n for n in self.rows.values() if n.folder_id == folder_id]
        return sorted(notes, key=lambda n: n.updated_at, reverse=True)


class FakeActivityLog:
    def __init__(self, failing: bool = False):
        self.entries: list[tuple[str, str, str]] = []
        self.failing = failing

    async def append(self, action: str, details: str, actor: str):
        if self.failing:
            raise StoreError("activity log unavailable")
        self.entries.append((action, details, actor))


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def make_note(note_id: str, content: str, updated_by: str = "Dad", folder_id: str = "folder-1") -> Note:
    return Note(
        id=note_id,
        folder_id=folder_id,
        content=content,
        updated_by=updated_by,
        updated_at=datetime(2024, 4, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def store():
    return FakeNoteStore()


@pytest.fixture
def activity_log():
    return FakeActivityLog()


@pytest.fixture
def sleep():
    return RecordingSleep()
