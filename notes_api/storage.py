"""
Notes API — Note Storage (JSON File Persistence)
==================================================

What:  Loads and saves the complete note collection as one JSON document.
Why:   Keeps every file-system concern (paths, encoding, first-use creation,
       error translation) out of the service layer.
How:   `NoteStorage` is the contract; `JsonFileNoteStorage` does async file
       I/O with aiofiles, `InMemoryNoteStorage` keeps the collection in a
       list for tests and embedding.
Who:   Owned by NoteService, one instance per application.
When:  Every service operation calls load() first and, if it mutates, save().

Persistence Contract:
    load():
        missing file  → create parent dir + "[]" document, return []
        read failure  → log error, return []   (never raises)
        parse failure → log error, return []   (never raises)
    save(notes):
        overwrite the whole document (pretty-printed, 2-space indent)
        failure → StorageError (the request fails with 500, no retry)

Concurrency:
    There is no lock and no version field. Two requests that both load()
    before either save()s race, and the save() that completes last wins:
    the other mutation is silently lost. Acceptable for a single process
    with low write concurrency; anything more needs a lock around the
    load-mutate-save sequence or a store with atomic per-record writes.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

import aiofiles

from notes_api.exceptions import StorageError
from notes_api.models.note import Note

logger = logging.getLogger(__name__)


class NoteStorage(ABC):
    """
    Abstract interface for loading and saving the note collection.

    Contract:
        - load() returns the full ordered collection and never raises
        - save() replaces the full collection or raises StorageError
        - Returned records are owned by the caller (mutating them does not
          touch storage until save() is called)
    """

    @abstractmethod
    async def load(self) -> List[Note]:
        """Return every persisted note in insertion order."""

    @abstractmethod
    async def save(self, notes: List[Note]) -> None:
        """Overwrite the persisted collection with `notes`."""

    async def health_check(self) -> bool:
        """Whether the backing store is reachable."""
        return True


class JsonFileNoteStorage(NoteStorage):
    """
    Note collection stored in a single pretty-printed JSON array.

    File layout:
        data/
        └── notes.json      ← [ {id, title, content, createdAt, updatedAt}, ... ]
    """

    def __init__(self, data_file: Union[str, Path]):
        """
        Args:
            data_file: Path of the JSON document. Nothing is touched on disk
                       until the first load() or save().
        """
        self.data_file = Path(data_file)

    async def _ensure_data_file(self) -> None:
        """Create the parent directory and an empty array document if missing."""
        self.data_file.parent.mkdir(parents=True, exist_ok=True)
        if not self.data_file.exists():
            async with aiofiles.open(self.data_file, "w", encoding="utf-8") as f:
                await f.write(json.dumps([], indent=2))
            logger.info("Initialized empty note store at %s", self.data_file)

    async def load(self) -> List[Note]:
        try:
            await self._ensure_data_file()
            async with aiofiles.open(self.data_file, "r", encoding="utf-8") as f:
                raw = await f.read()
            documents = json.loads(raw)
            if not isinstance(documents, list):
                raise ValueError(
                    f"expected a JSON array, got {type(documents).__name__}"
                )
            return [Note.model_validate(doc) for doc in documents]
        except (OSError, ValueError) as e:
            # json.JSONDecodeError and pydantic's ValidationError are ValueErrors
            logger.error("Error reading notes from %s: %s", self.data_file, str(e))
            return []

    async def save(self, notes: List[Note]) -> None:
        payload = [note.model_dump(mode="json", by_alias=True) for note in notes]
        try:
            await self._ensure_data_file()
            async with aiofiles.open(self.data_file, "w", encoding="utf-8") as f:
                await f.write(json.dumps(payload, indent=2, ensure_ascii=False))
        except OSError as e:
            logger.error("Failed to write notes to %s: %s", self.data_file, str(e))
            raise StorageError(
                message="Failed to write notes",
                context={"path": str(self.data_file), "os_error": str(e)},
            ) from e
        logger.debug("Saved %d notes to %s", len(notes), self.data_file)

    async def health_check(self) -> bool:
        try:
            await self._ensure_data_file()
        except OSError as e:
            logger.warning("Note store unreachable at %s: %s", self.data_file, str(e))
            return False
        return self.data_file.is_file()


class InMemoryNoteStorage(NoteStorage):
    """
    Note collection kept in process memory.

    Used by tests and anywhere a throwaway store is enough. Copies go in and
    out so callers can't mutate stored records behind save()'s back.
    """

    def __init__(self, notes: Optional[List[Note]] = None):
        self._notes: List[Note] = [note.model_copy() for note in notes or []]

    async def load(self) -> List[Note]:
        return [note.model_copy() for note in self._notes]

    async def save(self, notes: List[Note]) -> None:
        self._notes = [note.model_copy() for note in notes]
