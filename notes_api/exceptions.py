"""
Notes API — Custom Exception Hierarchy
========================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and response bodies, without try/except in every route.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by the validator, the service and the storage layer.
When:  During request processing when an expected failure occurs.

Exception Hierarchy:
    NotesAPIError (base)     → 500 Internal Server Error
    ├── ValidationError      → 400 Bad Request (per-field details)
    ├── NotFoundError        → 404 Not Found
    └── StorageError         → 500 Internal Server Error (details logged only)

Design Decision:
    A missing note is raised, not returned. Services stay free of HTTP
    concerns and callers don't have to unpack a result object on every call;
    the handler in main.py owns the mapping to a 404 body.
"""

from typing import Any, Dict, List, Optional


class NotesAPIError(Exception):
    """
    Base exception for all Notes API application errors.

    Attributes:
        message:  Error description
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesAPIError):
    """
    Raised when client input fails validation.

    What:    The request body, path or query did not pass the rule chains.
    HTTP:    400 Bad Request

    Each entry of `details` is a dict with `field` and `message` keys, plus a
    `value` key holding the submitted value when the field was present.

    Example response:
        {
            "error": "Validation failed",
            "details": [
                {"field": "title", "message": "Title must be between 3 and 100 characters", "value": "ab"}
            ]
        }
    """

    def __init__(
        self,
        details: Optional[List[Dict[str, Any]]] = None,
        message: str = "Validation failed",
    ):
        self.details = list(details or [])
        super().__init__(message=message, context={"details": self.details})


class NotFoundError(NotesAPIError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PATCH/DELETE /notes/{id} with an id that is not in the collection.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "Note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource.lower()} was not found"
        if resource_id:
            message = f"{resource} with id {resource_id} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class StorageError(NotesAPIError):
    """
    Raised when the note collection cannot be persisted.

    What:    Writing the JSON document failed (disk full, permission denied,
             path is a directory, ...).
    HTTP:    500 Internal Server Error

    The client only ever sees the generic 500 body; the path and OS error in
    `context` are logged server-side. No retry is attempted, the caller must
    resubmit.
    """

    def __init__(
        self,
        message: str = "Failed to persist notes",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
