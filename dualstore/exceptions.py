"""
DualStore API - Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the four outcome categories a
       request can end in besides success.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the matching HTTP status code.
Who:   Raised by store adapters and route handlers; caught by global handlers.

Exception Hierarchy:
    DualStoreError (base)
    ├── ValidationError              → 400 Bad Request (client can fix)
    │   └── InvalidIdentifierError   → 400 Bad Request {"error": "Invalid ID format"}
    ├── NotFoundError                → 404 {"error": "Resource not found"}
    └── BackendError                 → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class DualStoreError(Exception):
    """
    Base exception for all DualStore application errors.

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


class ValidationError(DualStoreError):
    """
    Raised when client input fails validation.

    HTTP: 400 Bad Request, with a structured body:
        {
            "error": "validation_error",
            "message": "Request validation failed",
            "details": [{"loc": ["body", "description"], "msg": "Field required", ...}],
            "request_id": "a1b2c3d4"
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        errors: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        self.errors = errors or []


class InvalidIdentifierError(ValidationError):
    """
    Raised when a document-store id is not in the backend's identifier format.

    Distinct from NotFoundError: a malformed id is a client error (400),
    never a lookup miss (404). Only the document adapter raises it.
    """

    def __init__(self, raw_id: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["resource_id"] = raw_id
        super().__init__(message="Invalid ID format", field="id", context=ctx)
        self.raw_id = raw_id


class NotFoundError(DualStoreError):
    """
    Raised when a well-formed id matches no record.

    Store adapters return None/False for a miss; route handlers convert that
    into this exception so the 404 body is produced in one place.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message="Resource not found", context=ctx)


class BackendError(DualStoreError):
    """
    Raised when a store round trip fails (connectivity, query, driver error).

    The message returned to the client is always generic. The driver error
    type and the failing operation go into `context` and are logged
    server-side only. Never retried.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
