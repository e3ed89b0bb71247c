"""
Recordbook — Custom Exception Hierarchy
=========================================

What:  Application-specific exceptions for the three failure kinds the
       service knows about.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) catch these
       and return `{"message": ...}` bodies with the matching status code.
Who:   Raised by the storage and service layers; caught by global handlers.

Exception Hierarchy:
    RecordbookError (base)   → 500 Internal Server Error
    ├── ValidationError      → 400 Bad Request (required field missing)
    ├── NotFoundError        → 404 Not Found (no record with that id)
    └── StorageError         → 500 Internal Server Error (data file unusable)
"""

from typing import Any, Dict, Optional


class RecordbookError(Exception):
    """
    Base exception for all Recordbook application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
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


class ValidationError(RecordbookError):
    """
    Raised when a create request is missing one of the required fields.

    HTTP:    400 Bad Request

    Only presence is checked: a field counts as missing when it is absent,
    null, an empty string, zero or false.
    """

    def __init__(
        self,
        message: str = "All fields are required",
        fields: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["missing_fields"] = list(fields)
        super().__init__(message=message, context=ctx)
        self.fields = list(fields or [])


class NotFoundError(RecordbookError):
    """
    Raised when no record in the collection carries the requested id.

    HTTP:    404 Not Found

    The message is fixed so clients can match on it; the requested id is kept
    in the context for logging.
    """

    def __init__(
        self,
        resource_id: Optional[Any] = None,
        message: str = "Record not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class StorageError(RecordbookError):
    """
    Raised when the data file cannot be created or written.

    HTTP:    500 Internal Server Error

    Read failures on an existing file do NOT raise this; they are logged and
    degrade to an empty collection (see JsonFileStore.load).
    """

    def __init__(
        self,
        message: str = "Could not save records. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
