"""
Notes API — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (isolated stores, services, API client).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── data_file: Path of a not-yet-existing JSON store under tmp_path
    ├── json_storage: JsonFileNoteStorage on data_file
    ├── memory_storage: InMemoryNoteStorage
    ├── note_service: NoteService over json_storage, UTC+5
    ├── sample_note_payload: Body for POST /notes
    └── test_client: HTTPX AsyncClient for an app built around note_service
"""

import os
import tempfile
from datetime import timedelta, timezone

# Override settings for testing BEFORE any notes_api imports, so the
# module-level app never touches ./data
os.environ["DATA_FILE"] = os.path.join(
    tempfile.mkdtemp(prefix="notes_api_test_"), "notes.json"
)
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["API_PREFIX"] = ""

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from notes_api.services.note_service import NoteService  # noqa: E402
from notes_api.storage import InMemoryNoteStorage, JsonFileNoteStorage  # noqa: E402

UTC_PLUS_5 = timezone(timedelta(hours=5))


@pytest.fixture
def data_file(tmp_path):
    """A JSON store path inside a directory that doesn't exist yet."""
    return tmp_path / "data" / "notes.json"


@pytest.fixture
def json_storage(data_file):
    return JsonFileNoteStorage(data_file)


@pytest.fixture
def memory_storage():
    return InMemoryNoteStorage()


@pytest.fixture
def note_service(json_storage):
    """NoteService on a fresh temp file with the default +05:00 offset."""
    return NoteService(json_storage, tz=UTC_PLUS_5)


@pytest.fixture
def sample_note_payload():
    return {"title": "Project Ideas", "content": "Brainstorming"}


@pytest_asyncio.fixture
async def test_client(note_service):
    """
    Provides an async HTTP test client for endpoint testing.

    How:     ASGITransport routes requests straight into an app built around
             the note_service fixture. raise_app_exceptions=False lets the
             catch-all 500 handler's response reach the test instead of the
             re-raised exception.
    """
    from notes_api.main import create_app

    app = create_app(note_service=note_service)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
