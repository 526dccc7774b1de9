"""
Notes API — Note Model
========================

What:  The Note record as it is persisted in the JSON store.
Why:   One typed definition shared by the storage layer (load/save) and the
       service (create/merge), so every record on disk has the same shape.
How:   Pydantic model with snake_case attributes and camelCase aliases;
       `model_dump(mode="json", by_alias=True)` produces the on-disk form.

Persisted form:
    {
        "id": "3f1c8e0a-5b7d-4c2e-9a61-0d7e2f4b8c11",
        "title": "Project Ideas",
        "content": "Brainstorming",
        "createdAt": "2026-10-18T14:03:07.512301+05:00",
        "updatedAt": "2026-10-18T14:03:07.512301+05:00"
    }

Timestamps are timezone-aware and always carry the configured fixed offset,
so their ISO strings sort chronologically.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Note(BaseModel):
    """
    A single note.

    Invariants (enforced by the service and the validator, not re-checked here):
        - id never changes after creation
        - created_at <= updated_at
        - title is 3-100 chars, content at most 10,000 chars (trimmed)
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Unique note identifier (UUID)")
    title: str = Field(description="Note title")
    content: str = Field(default="", description="Note body, may be empty")
    created_at: datetime = Field(description="When the note was created (fixed UTC offset)")
    updated_at: datetime = Field(description="When the note was last modified (fixed UTC offset)")

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, updated_at='{self.updated_at}')>"
