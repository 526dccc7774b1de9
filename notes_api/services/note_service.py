"""
Notes API — Note Service (Business Logic)
===========================================

What:  Create, list/search/paginate, get, partial-update and delete notes.
Why:   Encapsulates all business rules in one place, independent of HTTP concerns.
How:   Every operation loads the full collection from the storage, works on it
       in memory and, if it changed anything, saves the full collection back.
Who:   Called by route handlers; calls the NoteStorage it was built with.

Operation Flow (PATCH /notes/{id}):
    ┌──────────┐    ┌──────────┐    ┌──────────────┐    ┌──────────┐
    │  load()  │───▶│  find id │───▶│ merge fields │───▶│  save()  │
    │ (all)    │    │ (linear) │    │ + updatedAt  │    │ (all)    │
    └──────────┘    └──────────┘    └──────────────┘    └──────────┘

Complexity:
    Every call is O(n) in the collection size (full load, linear scan, full
    save). Fine while the collection fits comfortably in memory.

Design Decision:
    NoteService holds no state besides its storage and timezone. It is built
    explicitly by the application factory (or by a test) and reached through a
    FastAPI dependency, so a test can hand it any NoteStorage.
"""

import logging
import math
import uuid
from datetime import datetime, tzinfo
from typing import List, Optional

from notes_api.exceptions import NotFoundError
from notes_api.models.note import Note
from notes_api.schemas.note import (
    NoteCreate,
    NoteQueryParams,
    NoteUpdate,
    PaginatedNotes,
    Pagination,
)
from notes_api.storage import NoteStorage

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - create_note(): id + timestamps, append, persist
        - list_notes(): search filter, then offset pagination
        - get_note(): single note lookup with not-found handling
        - update_note(): partial merge, refresh updatedAt, persist
        - delete_note(): remove, persist, return the removed record

    Error Handling Strategy:
        A missing id raises NotFoundError. StorageError from save() propagates
        unchanged; the request fails and nothing is retried.
    """

    def __init__(self, storage: NoteStorage, tz: Optional[tzinfo] = None):
        """
        Args:
            storage: Where the collection lives.
            tz: Fixed-offset timezone for timestamps. Defaults to the
                configured TIMEZONE_OFFSET_HOURS.
        """
        if tz is None:
            from notes_api.config import settings
            tz = settings.fixed_timezone
        self.storage = storage
        self.tz = tz

    def _now(self) -> datetime:
        return datetime.now(self.tz)

    @staticmethod
    def _find_index(notes: List[Note], note_id: str) -> int:
        for index, note in enumerate(notes):
            if note.id == note_id:
                return index
        raise NotFoundError(resource="Note", resource_id=note_id)

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a note and persist it.

        Returns:
            The stored note with its generated id and createdAt == updatedAt.

        Raises:
            StorageError: The collection could not be written (→ 500)
        """
        now = self._now()
        note = Note(
            id=str(uuid.uuid4()),
            title=data.title,
            content=data.content,
            created_at=now,
            updated_at=now,
        )

        notes = await self.storage.load()
        notes.append(note)
        await self.storage.save(notes)

        logger.info("Note created: %s", note.id)
        return note

    async def list_notes(self, params: NoteQueryParams) -> PaginatedNotes:
        """
        List notes with optional keyword search and offset pagination.

        How:
            1. Load the full collection (insertion order)
            2. If `search` is non-blank, keep notes whose title OR content
               contains it, ignoring case (plain substring, no ranking)
            3. total = filtered count, total_pages = ceil(total / limit)
            4. Return the slice [(page - 1) * limit, page * limit)

        A page past the end returns an empty `data` list, not an error.
        """
        notes = await self.storage.load()

        if params.search and params.search.strip():
            needle = params.search.lower()
            notes = [
                note for note in notes
                if needle in note.title.lower() or needle in note.content.lower()
            ]

        total = len(notes)
        total_pages = math.ceil(total / params.limit)
        offset = (params.page - 1) * params.limit
        page_items = notes[offset:offset + params.limit]

        return PaginatedNotes(
            data=page_items,
            pagination=Pagination(
                page=params.page,
                limit=params.limit,
                total=total,
                total_pages=total_pages,
            ),
        )

    async def get_note(self, note_id: str) -> Note:
        """
        Retrieve a single note by id.

        Raises:
            NotFoundError: No note has this id (→ 404)
        """
        notes = await self.storage.load()
        return notes[self._find_index(notes, note_id)]

    async def update_note(self, note_id: str, patch: NoteUpdate) -> Note:
        """
        Merge the fields present in `patch` into the stored note.

        Only fields the client sent are applied: an absent field keeps its
        stored value, an explicit empty content clears it. updatedAt is
        refreshed on every successful update, even if the values are unchanged.

        Raises:
            NotFoundError: No note has this id (→ 404)
            StorageError: The collection could not be written (→ 500)
        """
        notes = await self.storage.load()
        index = self._find_index(notes, note_id)

        changes = patch.model_dump(exclude_unset=True)
        changes["updated_at"] = self._now()
        updated = notes[index].model_copy(update=changes)

        notes[index] = updated
        await self.storage.save(notes)

        logger.info("Note updated: %s (fields=%s)", note_id, sorted(changes))
        return updated

    async def delete_note(self, note_id: str) -> Note:
        """
        Remove a note and return it.

        Raises:
            NotFoundError: No note has this id (→ 404)
            StorageError: The collection could not be written (→ 500)
        """
        notes = await self.storage.load()
        index = self._find_index(notes, note_id)

        deleted = notes.pop(index)
        await self.storage.save(notes)

        logger.info("Note deleted: %s", note_id)
        return deleted
