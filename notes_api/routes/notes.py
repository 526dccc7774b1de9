"""
Notes API — Notes Route Handlers
==================================

What:  POST/GET /notes and GET/PATCH/DELETE /notes/{id}.
Why:   The HTTP surface of the note service.
How:   Each handler gets already-validated input from a validation dependency,
       calls exactly one NoteService method and wraps the result in a
       `{message, data}` envelope (`{message, data, pagination}` for the list).
Who:   Called by API clients; Swagger UI at /api-docs.

Error responses are never built here: ValidationError, NotFoundError and
StorageError propagate to the handlers registered in main.py.

Request bodies are parsed by the validation pipeline rather than by FastAPI's
body binding, so the body schemas are attached to the OpenAPI document by hand.
"""

import logging
from typing import Tuple

from fastapi import APIRouter, Depends, Request

from notes_api.schemas.note import (
    ErrorResponse,
    NoteCreate,
    NoteEnvelope,
    NoteListEnvelope,
    NoteQueryParams,
    NoteUpdate,
    ValidationErrorResponse,
)
from notes_api.services.note_service import NoteService
from notes_api.validation import (
    validate_create_note,
    validate_note_id,
    validate_query_params,
    validate_update_note,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])


def get_note_service(request: Request) -> NoteService:
    """
    FastAPI dependency returning the application's NoteService.

    The service is built by create_app() and kept on app.state, so tests can
    build an app around any storage.
    """
    return request.app.state.note_service


def _json_body(model) -> dict:
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


_VALIDATION_RESPONSE = {"description": "Validation failed", "model": ValidationErrorResponse}
_NOT_FOUND_RESPONSE = {"description": "Note not found", "model": ErrorResponse}
_SERVER_ERROR_RESPONSE = {"description": "Server error", "model": ErrorResponse}


@router.post(
    "",
    status_code=201,
    response_model=NoteEnvelope,
    responses={400: _VALIDATION_RESPONSE, 500: _SERVER_ERROR_RESPONSE},
    summary="Create a note",
    description="Title is required (3-100 characters); content is optional (max 10000 characters).",
    openapi_extra=_json_body(NoteCreate),
)
async def create_note(
    data: NoteCreate = Depends(validate_create_note),
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    note = await service.create_note(data)
    return NoteEnvelope(message="Note created successfully", data=note)


@router.get(
    "",
    response_model=NoteListEnvelope,
    responses={400: _VALIDATION_RESPONSE, 500: _SERVER_ERROR_RESPONSE},
    summary="List notes with pagination and search",
    description=(
        "Query parameters: `page` (default 1), `limit` (1-100, default 10) and "
        "`search`, a case-insensitive keyword matched against title and content. "
        "Example: GET /notes?page=2&limit=5&search=meeting"
    ),
)
async def list_notes(
    params: NoteQueryParams = Depends(validate_query_params),
    service: NoteService = Depends(get_note_service),
) -> NoteListEnvelope:
    result = await service.list_notes(params)
    return NoteListEnvelope(
        message="Notes retrieved successfully",
        data=result.data,
        pagination=result.pagination,
    )


@router.get(
    "/{note_id}",
    response_model=NoteEnvelope,
    responses={400: _VALIDATION_RESPONSE, 404: _NOT_FOUND_RESPONSE, 500: _SERVER_ERROR_RESPONSE},
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str = Depends(validate_note_id),
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    note = await service.get_note(note_id)
    return NoteEnvelope(message="Note retrieved successfully", data=note)


@router.patch(
    "/{note_id}",
    response_model=NoteEnvelope,
    responses={400: _VALIDATION_RESPONSE, 404: _NOT_FOUND_RESPONSE, 500: _SERVER_ERROR_RESPONSE},
    summary="Partially update a note",
    description=(
        "Send `title`, `content` or both. Omitted fields keep their value; "
        "updatedAt is refreshed."
    ),
    openapi_extra=_json_body(NoteUpdate),
)
async def update_note(
    target: Tuple[str, NoteUpdate] = Depends(validate_update_note),
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    note_id, patch = target
    note = await service.update_note(note_id, patch)
    return NoteEnvelope(message="Note updated successfully", data=note)


@router.delete(
    "/{note_id}",
    response_model=NoteEnvelope,
    responses={400: _VALIDATION_RESPONSE, 404: _NOT_FOUND_RESPONSE, 500: _SERVER_ERROR_RESPONSE},
    summary="Delete a note",
    description="Returns the deleted note.",
)
async def delete_note(
    note_id: str = Depends(validate_note_id),
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    note = await service.delete_note(note_id)
    return NoteEnvelope(message="Note deleted successfully", data=note)
