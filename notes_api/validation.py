"""
Notes API — Request Validation Pipeline
=========================================

What:  Rejects malformed path, query and body input before it reaches NoteService.
Why:   Every rule lives in one place and every failure comes back in the same
       `{field, message, value?}` shape, whichever part of the request was wrong.
How:   Each request field owns a `FieldChain`: an ordered list of stages
       (presence → type → trim → length/range → conversion). A stage either
       returns the (possibly transformed) value for the next stage or raises
       `StageFailure`, which stops that field's chain. All chains of a request
       run, then request-level checks, then either the cleaned values are
       returned or one ValidationError carries every detail.
Who:   Route handlers receive the already-validated models through the
       FastAPI dependencies at the bottom of this module.

Pipeline (PATCH /notes/{id}):
    ┌───────────┐   ┌──────────────┐   ┌────────────────┐   ┌──────────────┐
    │ id chain  │   │ title chain  │   │ content chain  │   │ at least one │
    │ uuid      │ + │ str→trim→len │ + │ str→trim→len   │ → │ field given  │
    └───────────┘   └──────────────┘   └────────────────┘   └──────────────┘
          any detail collected → ValidationError (400)   else → NoteUpdate

Sanitizing:
    Trimmed strings, converted integers and lowercased ids are what the
    service receives, so "  Groceries  " is stored as "Groceries".
"""

import json
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID

from fastapi import Request
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from notes_api.config import settings
from notes_api.exceptions import ValidationError
from notes_api.schemas.note import (
    CONTENT_MAX_LENGTH,
    LIMIT_MAX,
    SEARCH_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    NoteCreate,
    NoteQueryParams,
    NoteUpdate,
)

# Lax mode: "42" → 42 and canonical UUID strings → UUID; oversized digit
# strings fail as a validation error
_INT_ADAPTER = TypeAdapter(int)
_UUID_ADAPTER = TypeAdapter(UUID)

_MISSING = object()


class StageFailure(Exception):
    """Raised by a stage to stop its chain with a client-facing message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


Stage = Callable[[Any], Any]


class FieldChain:
    """
    Ordered validation/sanitization stages for one request field.

    Built fluently, each method appends one stage:

        FieldChain("title").required("Title is required") \\
            .is_string("Title must be a string").trim() \\
            .length(3, 100, "Title must be between 3 and 100 characters")

    A chain marked `optional()` is skipped entirely when the field is absent
    (present-but-empty still runs every stage).
    """

    def __init__(self, field: str):
        self.field = field
        self.is_optional = False
        self.stages: List[Stage] = []

    def optional(self) -> "FieldChain":
        self.is_optional = True
        return self

    def _add(self, stage: Stage) -> "FieldChain":
        self.stages.append(stage)
        return self

    def required(self, message: str) -> "FieldChain":
        def stage(value):
            if value is _MISSING or value is None:
                raise StageFailure(message)
            return value
        return self._add(stage)

    def is_string(self, message: str) -> "FieldChain":
        def stage(value):
            if not isinstance(value, str):
                raise StageFailure(message)
            return value
        return self._add(stage)

    def trim(self) -> "FieldChain":
        return self._add(lambda value: value.strip())

    def not_empty(self, message: str) -> "FieldChain":
        def stage(value):
            if not value:
                raise StageFailure(message)
            return value
        return self._add(stage)

    def length(
        self,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
        message: str = "Invalid length",
    ) -> "FieldChain":
        def stage(value):
            if min_length is not None and len(value) < min_length:
                raise StageFailure(message)
            if max_length is not None and len(value) > max_length:
                raise StageFailure(message)
            return value
        return self._add(stage)

    def to_int(
        self,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
        message: str = "Must be an integer",
    ) -> "FieldChain":
        """Accept an int, or a string pydantic reads as one, within the bounds."""
        def stage(value):
            if isinstance(value, bool):
                raise StageFailure(message)
            try:
                number = _INT_ADAPTER.validate_python(value)
            except PydanticValidationError:
                raise StageFailure(message)
            if min_value is not None and number < min_value:
                raise StageFailure(message)
            if max_value is not None and number > max_value:
                raise StageFailure(message)
            return number
        return self._add(stage)

    def is_uuid(self, message: str) -> "FieldChain":
        """Accept the hyphenated 8-4-4-4-12 form of any UUID version, lowercased."""
        def stage(value):
            if not isinstance(value, str):
                raise StageFailure(message)
            try:
                parsed = _UUID_ADAPTER.validate_python(value)
            except PydanticValidationError:
                raise StageFailure(message)
            # pydantic also takes the bare 32-hex, braced and urn: spellings
            if str(parsed) != value.lower():
                raise StageFailure(message)
            return str(parsed)
        return self._add(stage)

    def run(self, source: Mapping[str, Any]) -> Any:
        """
        Run every stage against `source[field]`.

        Returns:
            The sanitized value, or `_MISSING` when an optional field is absent.

        Raises:
            StageFailure: From the first stage that rejected the value.
        """
        value = source.get(self.field, _MISSING)
        if value is _MISSING and self.is_optional:
            return _MISSING
        for stage in self.stages:
            value = stage(value)
        return value


RequestCheck = Callable[[Mapping[str, Any]], Optional[Dict[str, Any]]]


def require_any(fields: Sequence[str], message: str) -> RequestCheck:
    """Request-level check: at least one of `fields` must be present as a key."""
    def check(source: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        if any(field in source for field in fields):
            return None
        return {"field": "body", "message": message}
    return check


def run_pipeline(
    source: Mapping[str, Any],
    chains: Sequence[FieldChain],
    checks: Sequence[RequestCheck] = (),
    details: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Run field chains, then request-level checks, over one request part.

    Args:
        source: Body dict, query params or path params.
        chains: One chain per field, run in order; all of them run.
        checks: Whole-request rules, run after the chains.
        details: Detail list to append to (lets a route combine path and
                 body failures into one response). A new list if omitted.

    Returns:
        Sanitized values of the present fields.

    Raises:
        ValidationError: With every collected detail, if any. Only raised
                         when `details` was not supplied by the caller.
    """
    owns_details = details is None
    if details is None:
        details = []

    cleaned: Dict[str, Any] = {}
    for chain in chains:
        try:
            value = chain.run(source)
        except StageFailure as failure:
            detail: Dict[str, Any] = {"field": chain.field, "message": failure.message}
            if chain.field in source:
                detail["value"] = source[chain.field]
            details.append(detail)
            continue
        if value is not _MISSING:
            cleaned[chain.field] = value

    for check in checks:
        detail = check(source)
        if detail is not None:
            details.append(detail)

    if owns_details and details:
        raise ValidationError(details)
    return cleaned


# ══════════════════════════════════════════════════════════════════════════
# Note Rules
# ══════════════════════════════════════════════════════════════════════════

NOT_JSON_OBJECT_MESSAGE = "Request body must be a JSON object"
AT_LEAST_ONE_FIELD_MESSAGE = "At least one field (title or content) must be provided"


def title_chain(optional: bool = False) -> FieldChain:
    chain = FieldChain("title")
    if optional:
        chain.optional()
    return (
        chain.required("Title is required")
        .is_string("Title must be a string")
        .trim()
        .not_empty("Title is required")
        .length(
            TITLE_MIN_LENGTH,
            TITLE_MAX_LENGTH,
            f"Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters",
        )
    )


def content_chain() -> FieldChain:
    return (
        FieldChain("content").optional()
        .is_string("Content must be a string")
        .trim()
        .length(max_length=CONTENT_MAX_LENGTH,
                message=f"Content must not exceed {CONTENT_MAX_LENGTH} characters")
    )


def note_id_chain() -> FieldChain:
    return (
        FieldChain("id")
        .required("Note ID is required")
        .is_string("Invalid note ID format")
        .trim()
        .not_empty("Note ID is required")
        .is_uuid("Invalid note ID format")
    )


def query_chains() -> List[FieldChain]:
    return [
        FieldChain("page").optional()
        .to_int(min_value=1, message="Page must be a positive integer"),
        FieldChain("limit").optional()
        .to_int(min_value=1, max_value=LIMIT_MAX, message=f"Limit must be between 1 and {LIMIT_MAX}"),
        FieldChain("search").optional()
        .is_string("Search must be a string")
        .trim()
        .length(max_length=SEARCH_MAX_LENGTH,
                message=f"Search query must not exceed {SEARCH_MAX_LENGTH} characters"),
    ]


def validate_create_payload(body: Any) -> NoteCreate:
    if not isinstance(body, dict):
        raise ValidationError([{"field": "body", "message": NOT_JSON_OBJECT_MESSAGE}])
    cleaned = run_pipeline(body, [title_chain(), content_chain()])
    return NoteCreate(**cleaned)


def validate_update_payload(note_id: str, body: Any) -> Tuple[str, NoteUpdate]:
    """
    Path id and body are checked together so one response lists both.

    Returns:
        The sanitized id and the patch holding only the fields that were sent.
    """
    details: List[Dict[str, Any]] = []
    path = run_pipeline({"id": note_id}, [note_id_chain()], details=details)

    if not isinstance(body, dict):
        details.append({"field": "body", "message": NOT_JSON_OBJECT_MESSAGE})
        raise ValidationError(details)

    cleaned = run_pipeline(
        body,
        [title_chain(optional=True), content_chain()],
        checks=[require_any(["title", "content"], AT_LEAST_ONE_FIELD_MESSAGE)],
        details=details,
    )
    if details:
        raise ValidationError(details)
    return path["id"], NoteUpdate(**cleaned)


def validate_note_id_value(note_id: str) -> str:
    return run_pipeline({"id": note_id}, [note_id_chain()])["id"]


def validate_query_values(query: Mapping[str, Any]) -> NoteQueryParams:
    cleaned = run_pipeline(query, query_chains())
    cleaned.setdefault("limit", settings.default_page_limit)
    return NoteQueryParams(**cleaned)


# ══════════════════════════════════════════════════════════════════════════
# FastAPI Dependencies
# ══════════════════════════════════════════════════════════════════════════


def _reject_constant(token: str) -> Any:
    # NaN/Infinity aren't JSON and can't be echoed back in an error detail
    raise ValueError(f"Non-standard JSON constant: {token}")


async def read_json_body(request: Request) -> Any:
    """Parse the request body as strict JSON; an unparseable body is a 400."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        raise ValidationError([{"field": "body", "message": NOT_JSON_OBJECT_MESSAGE}])


async def validate_create_note(request: Request) -> NoteCreate:
    return validate_create_payload(await read_json_body(request))


async def validate_update_note(note_id: str, request: Request) -> Tuple[str, NoteUpdate]:
    return validate_update_payload(note_id, await read_json_body(request))


async def validate_note_id(note_id: str) -> str:
    return validate_note_id_value(note_id)


async def validate_query_params(request: Request) -> NoteQueryParams:
    return validate_query_values(request.query_params)
