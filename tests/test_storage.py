"""
Notes API — Storage Unit Tests
================================

What:  Tests for JsonFileNoteStorage and InMemoryNoteStorage.
Why:   The storage contract (create on first use, silent recovery on bad
       reads, loud failure on bad writes) is what every operation relies on.
How:   Real files under pytest's tmp_path; no mocks needed.

What we test:
    ✅ Missing file is created as an empty array
    ✅ Corrupt / non-array / malformed documents load as []
    ✅ Save writes a pretty-printed camelCase array that loads back identically
    ✅ Write failure raises StorageError
    ✅ In-memory storage hands out copies
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from notes_api.exceptions import StorageError
from notes_api.models.note import Note
from notes_api.storage import InMemoryNoteStorage, JsonFileNoteStorage

UTC_PLUS_5 = timezone(timedelta(hours=5))


def make_note(index: int = 0, **overrides) -> Note:
    stamp = datetime(2026, 10, 18, 9, 30, index, tzinfo=UTC_PLUS_5)
    fields = {
        "id": f"00000000-0000-4000-8000-{index:012d}",
        "title": f"Note {index}",
        "content": f"Body of note {index}",
        "created_at": stamp,
        "updated_at": stamp,
    }
    fields.update(overrides)
    return Note(**fields)


class TestJsonFileLoad:
    """Tests for JsonFileNoteStorage.load()."""

    @pytest.mark.asyncio
    async def test_missing_file_is_created_empty(self, json_storage, data_file):
        """First load creates the directory and an empty array document."""
        assert not data_file.parent.exists()

        notes = await json_storage.load()

        assert notes == []
        assert data_file.exists()
        assert json.loads(data_file.read_text(encoding="utf-8")) == []

    @pytest.mark.asyncio
    async def test_invalid_json_returns_empty(self, json_storage, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text("{not json", encoding="utf-8")

        assert await json_storage.load() == []

    @pytest.mark.asyncio
    async def test_non_array_document_returns_empty(self, json_storage, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text('{"id": "x"}', encoding="utf-8")

        assert await json_storage.load() == []

    @pytest.mark.asyncio
    async def test_malformed_record_returns_empty(self, json_storage, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text('[{"id": "x", "title": "No timestamps"}]', encoding="utf-8")

        assert await json_storage.load() == []

    @pytest.mark.asyncio
    async def test_unreadable_path_returns_empty(self, tmp_path):
        """A directory where the file should be is a read failure, not a crash."""
        target = tmp_path / "notes.json"
        target.mkdir()

        assert await JsonFileNoteStorage(target).load() == []


class TestJsonFileSave:
    """Tests for JsonFileNoteStorage.save()."""

    @pytest.mark.asyncio
    async def test_save_then_load_preserves_order_and_values(self, json_storage):
        notes = [make_note(i) for i in range(3)]

        await json_storage.save(notes)
        loaded = await json_storage.load()

        assert loaded == notes
        assert [n.id for n in loaded] == [n.id for n in notes]

    @pytest.mark.asyncio
    async def test_save_writes_pretty_printed_camel_case(self, json_storage, data_file):
        await json_storage.save([make_note(1)])

        text = data_file.read_text(encoding="utf-8")
        document = json.loads(text)

        assert text.startswith("[\n  {")
        assert set(document[0]) == {"id", "title", "content", "createdAt", "updatedAt"}
        assert document[0]["createdAt"].endswith("+05:00")

    @pytest.mark.asyncio
    async def test_save_overwrites_whole_collection(self, json_storage):
        await json_storage.save([make_note(1), make_note(2)])
        await json_storage.save([make_note(3)])

        loaded = await json_storage.load()
        assert [n.title for n in loaded] == ["Note 3"]

    @pytest.mark.asyncio
    async def test_save_keeps_non_ascii_text(self, json_storage, data_file):
        await json_storage.save([make_note(1, title="Qaydlar ✓")])

        assert "Qaydlar ✓" in data_file.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_write_failure_raises_storage_error(self, tmp_path):
        target = tmp_path / "notes.json"
        target.mkdir()
        storage = JsonFileNoteStorage(target)

        with pytest.raises(StorageError) as exc_info:
            await storage.save([make_note(1)])

        assert exc_info.value.context["path"] == str(target)


class TestHealthCheck:

    @pytest.mark.asyncio
    async def test_reachable_store_is_healthy(self, json_storage, data_file):
        assert await json_storage.health_check() is True
        assert data_file.exists()

    @pytest.mark.asyncio
    async def test_directory_in_place_of_file_is_unhealthy(self, tmp_path):
        target = tmp_path / "notes.json"
        target.mkdir()

        assert await JsonFileNoteStorage(target).health_check() is False


class TestInMemoryStorage:

    @pytest.mark.asyncio
    async def test_starts_empty(self, memory_storage):
        assert await memory_storage.load() == []

    @pytest.mark.asyncio
    async def test_seeded_notes_are_loaded(self):
        storage = InMemoryNoteStorage([make_note(1), make_note(2)])

        assert [n.title for n in await storage.load()] == ["Note 1", "Note 2"]

    @pytest.mark.asyncio
    async def test_mutating_loaded_list_does_not_touch_store(self, memory_storage):
        await memory_storage.save([make_note(1)])

        loaded = await memory_storage.load()
        loaded.append(make_note(2))
        loaded[0].title = "Changed without save"

        again = await memory_storage.load()
        assert [n.title for n in again] == ["Note 1"]
