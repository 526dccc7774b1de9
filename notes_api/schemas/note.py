"""
Notes API — Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the API contract.
Why:   Typed hand-off between the validator, the service and the routes,
       automatic serialization and OpenAPI doc generation.
How:   Input models are built by the validation pipeline from already-checked,
       trimmed values; response envelopes are returned by the routes and
       serialized by FastAPI (camelCase aliases).
Who:   Used by route handlers, the note service and the validator.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from notes_api.models.note import Note


# Shared by the request models below and the rule chains in validation.py
TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
CONTENT_MAX_LENGTH = 10_000
SEARCH_MAX_LENGTH = 100
LIMIT_MAX = 100


# ══════════════════════════════════════════════════════════════════════════
# Input Models — built from validated request data
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /notes."""
    title: str = Field(
        min_length=TITLE_MIN_LENGTH,
        max_length=TITLE_MAX_LENGTH,
        description=f"Note title ({TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} chars)",
    )
    content: str = Field(
        default="",
        max_length=CONTENT_MAX_LENGTH,
        description=f"Note body (max {CONTENT_MAX_LENGTH} chars)",
    )


class NoteUpdate(BaseModel):
    """
    Body of PATCH /notes/{id}.

    Only the fields the client actually sent are "set": the service merges
    `model_dump(exclude_unset=True)`, so an omitted field keeps its stored
    value while an explicit empty string overwrites it.
    """
    title: Optional[str] = Field(default=None, min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    content: Optional[str] = Field(default=None, max_length=CONTENT_MAX_LENGTH)


class NoteQueryParams(BaseModel):
    """
    Validated query parameters for GET /notes.

    Parameters:
        page:   1-based page number
        limit:  Items per page (1-LIMIT_MAX)
        search: Case-insensitive substring matched against title OR content
    """
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=LIMIT_MAX)
    search: Optional[str] = Field(default=None, max_length=SEARCH_MAX_LENGTH)


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Pagination(CamelModel):
    """
    Pagination state of a list response.

    total_pages is ceil(total / limit); a page past the end is simply empty.
    """
    page: int = Field(description="Requested page (1-based)")
    limit: int = Field(description="Items per page")
    total: int = Field(description="Notes matching the search filter")
    total_pages: int = Field(description="ceil(total / limit)")


class PaginatedNotes(CamelModel):
    """Result of NoteService.list_notes()."""
    data: List[Note]
    pagination: Pagination


class NoteEnvelope(CamelModel):
    """
    What:  Single-note response: create, get, update and delete.
    Why:   Delete echoes the removed record so the client can show what went away.
    """
    message: str = Field(description="Human-readable success message")
    data: Note


class NoteListEnvelope(CamelModel):
    """Response of GET /notes."""
    message: str = Field(description="Human-readable success message")
    data: List[Note]
    pagination: Pagination


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models — documented in OpenAPI, built in main.py handlers
# ══════════════════════════════════════════════════════════════════════════


class ValidationErrorDetail(BaseModel):
    field: str = Field(description="Offending field (`body` for request-level rules)")
    message: str = Field(description="What is wrong with it")
    value: Optional[Any] = Field(default=None, description="Submitted value, omitted when the field was missing")


class ValidationErrorResponse(BaseModel):
    """
    Example:
        {
            "error": "Validation failed",
            "details": [{"field": "limit", "message": "Limit must be between 1 and 100", "value": "101"}]
        }
    """
    error: str = Field(default="Validation failed")
    details: List[ValidationErrorDetail]


class ErrorResponse(CamelModel):
    """
    Not-found, unmatched-route and server errors.

    Example:
        {"error": "Note with id 3f1c... not found", "statusCode": 404}
    """
    error: str = Field(description="Error description")
    message: Optional[str] = Field(default=None, description="Present on 500 responses")
    status_code: int = Field(description="HTTP status code")


class HealthResponse(CamelModel):
    """Returned by GET /health for monitoring and container probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    storage: str = Field(description="Note store status: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
