"""
Notes API — Note Service Unit Tests
=====================================

What:  Tests for NoteService business logic (create, list, get, update, delete).
Why:   The service holds every rule about ids, timestamps, search and paging.
How:   Real JsonFileNoteStorage on a temp file; no HTTP layer involved.
When:  Run on every commit to catch regressions in business logic.

What we test:
    ✅ Create assigns a UUID and equal +05:00 timestamps, then persists
    ✅ Get by id, and NotFoundError for unknown ids
    ✅ Pagination partitions the collection; a page past the end is empty
    ✅ Search is a case-insensitive substring match on title or content
    ✅ Partial update keeps absent fields and refreshes updatedAt
    ✅ Delete returns the removed note and shrinks the collection
"""

import uuid
from datetime import timedelta

import pytest

from notes_api.exceptions import NotFoundError, StorageError
from notes_api.schemas.note import NoteCreate, NoteQueryParams, NoteUpdate
from notes_api.services.note_service import NoteService
from notes_api.storage import InMemoryNoteStorage

MISSING_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"


async def seed(service: NoteService, count: int):
    return [
        await service.create_note(NoteCreate(title=f"Note {i}", content=f"body {i}"))
        for i in range(count)
    ]


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, note_service):
        note = await note_service.create_note(
            NoteCreate(title="Project Ideas", content="Brainstorming")
        )

        assert str(uuid.UUID(note.id)) == note.id
        assert note.title == "Project Ideas"
        assert note.content == "Brainstorming"
        assert note.created_at == note.updated_at
        assert note.created_at.utcoffset() == timedelta(hours=5)

    @pytest.mark.asyncio
    async def test_create_persists_to_storage(self, note_service, json_storage):
        note = await note_service.create_note(NoteCreate(title="Groceries"))

        stored = await json_storage.load()
        assert stored == [note]
        assert stored[0].content == ""

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, note_service):
        notes = await seed(note_service, 5)

        assert len({n.id for n in notes}) == 5

    @pytest.mark.asyncio
    async def test_failed_save_propagates(self):
        class BrokenStorage(InMemoryNoteStorage):
            async def save(self, notes):
                raise StorageError(context={"path": "nowhere"})

        service = NoteService(BrokenStorage())

        with pytest.raises(StorageError):
            await service.create_note(NoteCreate(title="Lost note"))


class TestGetNote:

    @pytest.mark.asyncio
    async def test_get_returns_created_note(self, note_service):
        created = await note_service.create_note(NoteCreate(title="Reading list"))

        assert await note_service.get_note(created.id) == created

    @pytest.mark.asyncio
    async def test_get_unknown_id_raises(self, note_service):
        await seed(note_service, 2)

        with pytest.raises(NotFoundError) as exc_info:
            await note_service.get_note(MISSING_ID)

        assert exc_info.value.message == f"Note with id {MISSING_ID} not found"


class TestListNotes:
    """Pagination and search behavior of list_notes()."""

    @pytest.mark.asyncio
    async def test_empty_store(self, note_service):
        result = await note_service.list_notes(NoteQueryParams())

        assert result.data == []
        assert result.pagination.total == 0
        assert result.pagination.total_pages == 0

    @pytest.mark.asyncio
    async def test_pages_partition_collection_in_order(self, note_service):
        created = await seed(note_service, 7)

        pages = [
            await note_service.list_notes(NoteQueryParams(page=page, limit=3))
            for page in (1, 2, 3)
        ]

        assert [len(p.data) for p in pages] == [3, 3, 1]
        assert [n.id for p in pages for n in p.data] == [n.id for n in created]
        assert all(p.pagination.total == 7 for p in pages)
        assert all(p.pagination.total_pages == 3 for p in pages)

    @pytest.mark.asyncio
    async def test_page_past_end_is_empty(self, note_service):
        await seed(note_service, 3)

        result = await note_service.list_notes(NoteQueryParams(page=5, limit=2))

        assert result.data == []
        assert result.pagination.page == 5
        assert result.pagination.total == 3
        assert result.pagination.total_pages == 2

    @pytest.mark.asyncio
    async def test_search_ignores_case(self, note_service):
        await note_service.create_note(NoteCreate(title="Meeting Notes", content="Agenda"))
        await note_service.create_note(NoteCreate(title="Shopping", content="Milk"))

        for query in ("meeting", "NOTES"):
            result = await note_service.list_notes(NoteQueryParams(search=query))
            assert [n.title for n in result.data] == ["Meeting Notes"]
            assert result.pagination.total == 1

    @pytest.mark.asyncio
    async def test_search_matches_content(self, note_service):
        await note_service.create_note(NoteCreate(title="Shopping", content="Milk and eggs"))
        await note_service.create_note(NoteCreate(title="Travel", content="Pack bags"))

        result = await note_service.list_notes(NoteQueryParams(search="EGGS"))

        assert [n.title for n in result.data] == ["Shopping"]

    @pytest.mark.asyncio
    async def test_search_without_matches(self, note_service):
        await seed(note_service, 3)

        result = await note_service.list_notes(NoteQueryParams(search="zebra"))

        assert result.data == []
        assert result.pagination.total == 0
        assert result.pagination.total_pages == 0

    @pytest.mark.asyncio
    async def test_blank_search_lists_everything(self, note_service):
        await seed(note_service, 4)

        result = await note_service.list_notes(NoteQueryParams(search="   "))

        assert result.pagination.total == 4


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, note_service):
        created = await note_service.create_note(
            NoteCreate(title="Project Ideas", content="Brainstorming")
        )

        updated = await note_service.update_note(created.id, NoteUpdate(title="Refined Ideas"))

        assert updated.id == created.id
        assert updated.title == "Refined Ideas"
        assert updated.content == "Brainstorming"
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_update_is_persisted(self, note_service):
        created = await note_service.create_note(NoteCreate(title="Draft"))

        await note_service.update_note(created.id, NoteUpdate(content="Final text"))

        stored = await note_service.get_note(created.id)
        assert stored.title == "Draft"
        assert stored.content == "Final text"

    @pytest.mark.asyncio
    async def test_empty_content_clears_body(self, note_service):
        created = await note_service.create_note(NoteCreate(title="Scratch", content="temp"))

        updated = await note_service.update_note(created.id, NoteUpdate(content=""))

        assert updated.content == ""

    @pytest.mark.asyncio
    async def test_update_keeps_position(self, note_service):
        created = await seed(note_service, 3)

        await note_service.update_note(created[1].id, NoteUpdate(title="Middle note"))

        result = await note_service.list_notes(NoteQueryParams())
        assert [n.title for n in result.data] == ["Note 0", "Middle note", "Note 2"]

    @pytest.mark.asyncio
    async def test_update_unknown_id_raises(self, note_service):
        with pytest.raises(NotFoundError):
            await note_service.update_note(MISSING_ID, NoteUpdate(title="Nobody"))


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_delete_returns_removed_note(self, note_service):
        created = await seed(note_service, 3)

        deleted = await note_service.delete_note(created[0].id)

        assert deleted == created[0]
        result = await note_service.list_notes(NoteQueryParams())
        assert result.pagination.total == 2
        assert created[0].id not in {n.id for n in result.data}

    @pytest.mark.asyncio
    async def test_deleted_note_is_gone(self, note_service):
        created = await note_service.create_note(NoteCreate(title="Temporary"))
        await note_service.delete_note(created.id)

        with pytest.raises(NotFoundError):
            await note_service.get_note(created.id)
        with pytest.raises(NotFoundError):
            await note_service.delete_note(created.id)


class TestNoteLifecycle:

    @pytest.mark.asyncio
    async def test_create_search_update_delete(self):
        """Full lifecycle against an in-memory store."""
        service = NoteService(InMemoryNoteStorage())

        note = await service.create_note(
            NoteCreate(title="Project Ideas", content="Brainstorming")
        )
        found = await service.list_notes(NoteQueryParams(search="ideas"))
        assert [n.id for n in found.data] == [note.id]

        updated = await service.update_note(note.id, NoteUpdate(title="Refined Ideas"))
        assert updated.content == "Brainstorming"

        await service.delete_note(note.id)
        remaining = await service.list_notes(NoteQueryParams())
        assert remaining.pagination.total == 0
