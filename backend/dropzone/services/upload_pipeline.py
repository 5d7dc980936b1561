"""Simulated upload pipeline — per-upload state machine driven by ticks."""

from __future__ import annotations

import asyncio
import logging
import random
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Iterable

from dropzone.records import RecordId
from dropzone.schemas.files import FileCreate, FileRecord
from dropzone.schemas.uploads import UploadEntryOut, UploadFile

logger = logging.getLogger(__name__)


class UploadState(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    CLEARED = "cleared"


VALID_TRANSITIONS: dict[UploadState, set[UploadState]] = {
    UploadState.PENDING: {UploadState.IN_PROGRESS, UploadState.COMPLETED, UploadState.FAILED},
    UploadState.IN_PROGRESS: {UploadState.COMPLETED, UploadState.FAILED},
    UploadState.COMPLETED: {UploadState.CLEARED},
    UploadState.FAILED: {UploadState.CLEARED},
    UploadState.CLEARED: set(),
}

ACTIVE_STATES = (UploadState.PENDING, UploadState.IN_PROGRESS)
FINISHED_STATES = (UploadState.COMPLETED, UploadState.FAILED)


@dataclass
class UploadEntry:
    id: str
    file: UploadFile
    folder_id: RecordId | None
    state: UploadState = UploadState.PENDING
    progress: float = 0.0
    finished_at: float | None = None
    file_id: RecordId | None = None
    error: str | None = None

    def to_file_fields(self) -> FileCreate:
        """Record to persist once the upload completes."""
        thumbnail = self.file.thumbnail_url
        if thumbnail is None and self.file.type.startswith("image/"):
            thumbnail = self.file.url
        fields = {
            "Name": self.file.name,
            "Tags": [],
            "size": self.file.size,
            "type": self.file.type,
            "url": self.file.url,
            "thumbnail_url": thumbnail,
            "folder_id": self.folder_id,
            "is_public": False,
        }
        if self.file.last_modified is not None:
            fields["last_modified"] = self.file.last_modified
        return FileCreate.model_validate(fields)

    def to_out(self) -> UploadEntryOut:
        return UploadEntryOut(
            id=self.id,
            name=self.file.name,
            state=self.state.value,
            progress=round(self.progress, 2),
            folder_id=self.folder_id,
            file_id=self.file_id,
            error=self.error,
        )


CompletionHandler = Callable[[UploadEntry], Awaitable[FileRecord]]
CompletionListener = Callable[[FileRecord], None]
Notifier = Callable[[str, str], None]


class UploadPipeline:
    """Tracks in-flight uploads and advances them on every ``tick()``.

    Each tick adds a random increment in ``[0, max_increment)`` to every
    active upload. At 100 the upload completes: ``on_complete`` persists
    the file record, listeners receive it with ``upload_progress=100`` and
    a success notification fires. Finished uploads are dropped from the
    progress map ``clear_delay`` seconds later.
    """

    def __init__(
        self,
        on_complete: CompletionHandler,
        notify: Notifier | None = None,
        *,
        max_increment: float = 20.0,
        clear_delay: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ):
        self._on_complete = on_complete
        self._notify = notify or (lambda level, message: None)
        self._max_increment = max_increment
        self._clear_delay = clear_delay
        self._clock = clock
        self._rng = rng or random.Random()
        self._entries: dict[str, UploadEntry] = {}
        self._progress: dict[str, float] = {}
        self._listeners: list[CompletionListener] = []
        self._lock = asyncio.Lock()

    @property
    def progress(self) -> dict[str, float]:
        """Upload id -> percentage, for every upload not yet cleared."""
        return dict(self._progress)

    def entries(self) -> list[UploadEntry]:
        return list(self._entries.values())

    def get(self, upload_id: str) -> UploadEntry | None:
        return self._entries.get(upload_id)

    def add_listener(self, listener: CompletionListener) -> None:
        self._listeners.append(listener)

    def start(self, files: Iterable[UploadFile], folder_id: RecordId | None) -> list[UploadEntry]:
        """Register one pending upload per file."""
        started: list[UploadEntry] = []
        progress = dict(self._progress)
        for file in files:
            entry = UploadEntry(id=uuid.uuid4().hex, file=file, folder_id=folder_id)
            self._entries[entry.id] = entry
            progress[entry.id] = 0.0
            started.append(entry)
        self._progress = progress
        logger.info("Started %d upload(s) into folder %s", len(started), folder_id)
        return started

    def _transition(self, entry: UploadEntry, new_state: UploadState) -> bool:
        if new_state == entry.state:
            return True
        if new_state not in VALID_TRANSITIONS[entry.state]:
            logger.warning(
                "Invalid upload transition for %s: %s -> %s",
                entry.id, entry.state, new_state,
            )
            return False
        logger.debug("Upload %s: %s -> %s", entry.id, entry.state, new_state)
        entry.state = new_state
        return True

    async def tick(self) -> None:
        """Advance active uploads, complete those at 100, clear expired ones."""
        async with self._lock:
            now = self._clock()
            progress = dict(self._progress)
            reached: list[UploadEntry] = []

            for entry in list(self._entries.values()):
                if entry.state in ACTIVE_STATES:
                    step = self._rng.random() * self._max_increment
                    entry.progress = min(entry.progress + step, 100.0)
                    progress[entry.id] = entry.progress
                    if entry.progress >= 100.0:
                        reached.append(entry)
                    else:
                        self._transition(entry, UploadState.IN_PROGRESS)
                elif entry.state in FINISHED_STATES and entry.finished_at is not None:
                    if now - entry.finished_at >= self._clear_delay:
                        self._transition(entry, UploadState.CLEARED)
                        progress.pop(entry.id, None)
                        del self._entries[entry.id]

            self._progress = progress

            for entry in reached:
                await self._complete(entry, now)

    async def _complete(self, entry: UploadEntry, now: float) -> None:
        entry.finished_at = now
        try:
            record = await self._on_complete(entry)
        except Exception as e:
            entry.error = str(e)
            self._transition(entry, UploadState.FAILED)
            logger.error("Upload %s (%s) failed to persist: %s", entry.id, entry.file.name, e)
            self._notify("error", f"{entry.file.name} failed to upload: {e}")
            return

        entry.file_id = record.id
        self._transition(entry, UploadState.COMPLETED)
        record = record.model_copy(update={"upload_progress": 100})
        for listener in self._listeners:
            listener(record)
        logger.info("Upload %s completed as file %s", entry.id, record.id)
        self._notify("success", f"{entry.file.name} uploaded successfully!")
