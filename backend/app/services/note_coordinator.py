"""
Optimistic note mutations with bounded retry and rollback.

The coordinator owns an ordered, in-memory view of one folder's notes. Every
mutation is applied locally first, then persisted through the note store with
a fixed number of attempts spaced by a fixed delay. When the store rejects
every attempt the local change is undone and ``PersistenceError`` is raised.
"""

import asyncio
import inspect
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, TypeVar, Union
from uuid import uuid4

from app.config import settings
from app.exceptions import NotFoundError, PersistenceError, ValidationError
from app.logging import get_logger
from app.models import (
    ActivityAction,
    Folder,
    MutationStatus,
    Note,
    NoteMutationResult,
    NoteSyncState,
)
from app.services.activity_log import ActivityLogService
from app.services.note_store import NoteStore

logger = get_logger("services.note_coordinator")
_T = TypeVar("_T")

ConfirmPrompt = Callable[[Note], Union[bool, Awaitable[bool]]]
Clock = Callable[[], datetime]
Sleep = Callable[[float], Awaitable[None]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TrackedNote:
    """A note plus its sync state; ``snapshot`` is set while an update is pending."""
    note: Note
    state: NoteSyncState = NoteSyncState.CONFIRMED
    snapshot: Optional[Note] = None


class NoteMutationCoordinator:
    """Keeps one folder's notes in sync with the store under optimistic updates."""

    def __init__(
        self,
        folder_id: str,
        store: NoteStore,
        activity_log: Optional[ActivityLogService] = None,
        *,
        folder_name: Optional[str] = None,
        confirm: Optional[ConfirmPrompt] = None,
        clock: Clock = _utcnow,
        sleep: Sleep = asyncio.sleep,
        max_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
        max_chars: Optional[int] = None,
        temp_id_prefix: Optional[str] = None,
    ):
        self.folder_id = folder_id
        self.folder_name = folder_name or folder_id
        self.store = store
        self.activity_log = activity_log
        self.confirm = confirm
        self.clock = clock
        self.sleep = sleep
        self.max_attempts = max(
            int(settings.NOTE_MUTATION_MAX_ATTEMPTS if max_attempts is None else max_attempts), 1
        )
        self.retry_delay = max(
            float(settings.NOTE_MUTATION_RETRY_SECONDS if retry_delay is None else retry_delay), 0.0
        )
        self.max_chars = settings.NOTE_MAX_CHARS if max_chars is None else max_chars
        self.temp_id_prefix = temp_id_prefix or settings.NOTE_TEMP_ID_PREFIX
        self._entries: list[TrackedNote] = []
        self._in_flight = 0

    @classmethod
    def for_folder(cls, folder: Folder, store: NoteStore, **kwargs) -> "NoteMutationCoordinator":
        return cls(folder.id, store, folder_name=folder.name, **kwargs)

    # ── Views ──

    @property
    def notes(self) -> list[Note]:
        """Current local view, newest first, including provisional changes."""
        return [entry.note for entry in self._entries]

    @property
    def has_pending(self) -> bool:
        """True while any create, update or delete is waiting on the store."""
        return self._in_flight > 0

    def get(self, note_id: str) -> Note | None:
        index = self._index_of(note_id)
        return self._entries[index].note if index is not None else None

    def state_of(self, note_id: str) -> NoteSyncState:
        index = self._index_of(note_id)
        if index is None:
            return NoteSyncState.ABSENT
        return self._entries[index].state

    def is_temporary_id(self, note_id: str) -> bool:
        return note_id.startswith(self.temp_id_prefix)

    async def load(self) -> list[Note]:
        """Replace the local view with the store's current list for this folder."""
        if self.has_pending:
            logger.warning(
                f"Reloading folder {self.folder_id[:8]} with mutations still in flight"
            )
        notes = await self.store.list_by_folder(self.folder_id)
        self._entries = [TrackedNote(note) for note in notes]
        return self.notes

    async def sync(self) -> list[Note]:
        """Pick up other sessions' changes unless a local mutation is in flight."""
        if self.has_pending:
            return self.notes
        notes = await self.store.list_by_folder(self.folder_id)
        if self.has_pending:
            # A mutation started while the list was being read.
            return self.notes
        self._entries = [TrackedNote(note) for note in notes]
        return self.notes

    # ── Mutations ──

    async def create(self, content: str, actor: str) -> NoteMutationResult:
        text = self._validate(content)
        provisional = Note(
            id=f"{self.temp_id_prefix}{uuid4()}",
            folder_id=self.folder_id,
            content=text,
            updated_by=actor,
            updated_at=self.clock(),
        )
        # Reused by every attempt so a retried insert cannot add a second row.
        stored_id = str(uuid4())

        self._in_flight += 1
        try:
            self._entries.insert(0, TrackedNote(provisional, NoteSyncState.PENDING_CREATE))
            try:
                stored, attempts = await self._run_with_retry(
                    "save note", lambda: self.store.insert(provisional, note_id=stored_id)
                )
            except PersistenceError:
                self._remove(provisional.id)
                raise

            confirmed = TrackedNote(stored)
            index = self._index_of(provisional.id)
            if index is None:
                # A reload dropped the provisional entry and may already hold the new row.
                index = self._index_of(stored.id)
            if index is None:
                self._entries.insert(0, confirmed)
            else:
                self._entries[index] = confirmed
        finally:
            self._in_flight -= 1

        await self._log_activity(
            ActivityAction.CREATED_NOTE,
            f'Added a note to folder "{self.folder_name}"',
            actor,
        )
        return NoteMutationResult(status=MutationStatus.COMMITTED, note=stored, attempts=attempts)

    async def update(self, note_id: str, content: str, actor: str) -> NoteMutationResult:
        text = self._validate(content)
        index = self._require(note_id)

        snapshot = self._entries[index].note
        updated = snapshot.model_copy(
            update={"content": text, "updated_by": actor, "updated_at": self.clock()}
        )

        self._in_flight += 1
        try:
            self._entries[index] = TrackedNote(updated, NoteSyncState.PENDING_UPDATE, snapshot)
            try:
                _, attempts = await self._run_with_retry(
                    "save note",
                    lambda: self.store.update(
                        note_id,
                        {
                            "content": updated.content,
                            "updated_by": updated.updated_by,
                            "updated_at": updated.updated_at,
                        },
                    ),
                )
            except PersistenceError:
                self._restore(snapshot)
                raise

            index = self._index_of(note_id)
            if index is not None and self._entries[index].note is updated:
                self._entries[index] = TrackedNote(updated)
        finally:
            self._in_flight -= 1

        await self._log_activity(
            ActivityAction.EDITED_NOTES,
            f'Updated notes in folder "{self.folder_name}"',
            actor,
        )
        return NoteMutationResult(status=MutationStatus.COMMITTED, note=updated, attempts=attempts)

    async def delete(
        self,
        note_id: str,
        actor: str,
        confirm: Optional[ConfirmPrompt] = None,
    ) -> NoteMutationResult:
        index = self._require(note_id)
        target = self._entries[index].note

        if not await self._ask(confirm or self.confirm, target):
            logger.info(f"Delete of note {note_id[:8]} cancelled by {actor}")
            return NoteMutationResult(status=MutationStatus.CANCELLED, note=target)

        # The prompt may have yielded; look the note up again.
        index = self._require(note_id)

        self._in_flight += 1
        try:
            removed = self._entries.pop(index)
            try:
                _, attempts = await self._run_with_retry(
                    "delete note", lambda: self.store.delete(note_id)
                )
            except PersistenceError:
                if self._index_of(note_id) is None:
                    self._entries.insert(min(index, len(self._entries)), removed)
                raise
        finally:
            self._in_flight -= 1

        await self._log_activity(
            ActivityAction.DELETED_NOTE,
            f'Deleted a note from folder "{self.folder_name}"',
            actor,
        )
        return NoteMutationResult(
            status=MutationStatus.COMMITTED, note=removed.note, attempts=attempts
        )

    # ── Internals ──

    def _validate(self, content: str) -> str:
        text = (content or "").strip()
        if not text:
            raise ValidationError("Note content cannot be empty")
        if len(text) > self.max_chars:
            raise ValidationError(f"Note content cannot exceed {self.max_chars} characters")
        return text

    def _index_of(self, note_id: str) -> int | None:
        for index, entry in enumerate(self._entries):
            if entry.note.id == note_id:
                return index
        return None

    def _require(self, note_id: str) -> int:
        index = self._index_of(note_id)
        if index is None:
            raise NotFoundError(f"Note {note_id} not found")
        if self._entries[index].state == NoteSyncState.PENDING_CREATE:
            raise ValidationError("Note is still being saved; try again in a moment")
        return index

    def _remove(self, note_id: str) -> None:
        index = self._index_of(note_id)
        if index is not None:
            del self._entries[index]

    def _restore(self, snapshot: Note) -> None:
        index = self._index_of(snapshot.id)
        if index is None:
            logger.debug(f"Note {snapshot.id[:8]} no longer present; nothing to roll back")
            return
        self._entries[index] = TrackedNote(snapshot)

    async def _ask(self, prompt: Optional[ConfirmPrompt], note: Note) -> bool:
        if prompt is None:
            return False
        answer = prompt(note)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    async def _run_with_retry(
        self,
        operation_name: str,
        operation: Callable[[], Awaitable[_T]],
    ) -> tuple[_T, int]:
        attempt = 1
        while True:
            try:
                return await operation(), attempt
            except Exception as error:
                if attempt >= self.max_attempts:
                    logger.error(
                        "Note store %s failed after %d attempts: %s",
                        operation_name,
                        attempt,
                        error,
                    )
                    raise PersistenceError(operation_name, error) from error

                logger.warning(
                    "Note store %s failed (attempt %d/%d): %s. Retrying in %.2fs",
                    operation_name,
                    attempt,
                    self.max_attempts,
                    error,
                    self.retry_delay,
                )
                await self.sleep(self.retry_delay)
                attempt += 1

    async def _log_activity(self, action: ActivityAction, details: str, actor: str) -> None:
        if self.activity_log is None:
            return
        try:
            await self.activity_log.append(action.value, details, actor)
        except Exception as e:
            logger.warning(f"Failed to record activity '{action.value}': {e}")


class NoteCoordinatorRegistry:
    """One coordinator per (session, folder), loaded from the store on first use.

    Coordinators idle longer than ``idle_seconds`` are dropped, and at most
    ``max_size`` are kept (least recently used go first). A coordinator with a
    mutation in flight is never dropped.
    """

    def __init__(
        self,
        store: NoteStore,
        activity_log: Optional[ActivityLogService] = None,
        *,
        max_size: Optional[int] = None,
        idle_seconds: Optional[float] = None,
        monotonic: Callable[[], float] = time.monotonic,
        **coordinator_options,
    ):
        self.store = store
        self.activity_log = activity_log
        self.max_size = max(
            int(settings.NOTE_COORDINATOR_CACHE_SIZE if max_size is None else max_size), 1
        )
        self.idle_seconds = float(
            settings.NOTE_COORDINATOR_IDLE_SECONDS if idle_seconds is None else idle_seconds
        )
        self.monotonic = monotonic
        self.coordinator_options = coordinator_options
        self._coordinators: OrderedDict[tuple[str, str], NoteMutationCoordinator] = OrderedDict()
        self._last_used: dict[tuple[str, str], float] = {}

    def __len__(self) -> int:
        return len(self._coordinators)

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._coordinators

    async def get(self, session_token: str, folder: Folder) -> NoteMutationCoordinator:
        key = (session_token, folder.id)
        self._evict(self.monotonic())

        coordinator = self._coordinators.get(key)
        if coordinator is None:
            fresh = NoteMutationCoordinator.for_folder(
                folder,
                self.store,
                activity_log=self.activity_log,
                **self.coordinator_options,
            )
            await fresh.load()
            coordinator = self._coordinators.setdefault(key, fresh)

        self._touch(key)
        self._evict(self.monotonic(), keep=key)
        return coordinator

    def discard_session(self, session_token: str) -> None:
        for key in [k for k in self._coordinators if k[0] == session_token]:
            self._drop(key)

    def discard_folder(self, folder_id: str) -> None:
        for key in [k for k in self._coordinators if k[1] == folder_id]:
            self._drop(key)

    def _touch(self, key: tuple[str, str]) -> None:
        self._coordinators.move_to_end(key)
        self._last_used[key] = self.monotonic()

    def _drop(self, key: tuple[str, str]) -> None:
        self._coordinators.pop(key, None)
        self._last_used.pop(key, None)

    def _evict(self, now: float, keep: Optional[tuple[str, str]] = None) -> None:
        for key, coordinator in list(self._coordinators.items()):
            idle = now - self._last_used.get(key, now)
            if idle > self.idle_seconds and not coordinator.has_pending:
                logger.debug(f"Dropping idle note coordinator for folder {key[1][:8]}")
                self._drop(key)

        excess = len(self._coordinators) - self.max_size
        for key, coordinator in list(self._coordinators.items()):
            if excess <= 0:
                break
            if key != keep and not coordinator.has_pending:
                self._drop(key)
                excess -= 1
