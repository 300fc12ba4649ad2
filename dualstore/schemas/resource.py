"""
DualStore API - Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the API contract for resources.
How:   FastAPI uses these models to validate request bodies (the declared
       shape every POST/PUT body must match), serialize responses, and
       generate the OpenAPI documentation.
Who:   Used by route handlers and returned by both store adapters.

Both namespaces share the request shape. The response shapes differ only
in the identifier type: an integer primary key for the relational backend,
a 24-character hex ObjectId string for the document backend.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ResourceCreate(BaseModel):
    """
    Body for POST and PUT on either namespace.

    Unknown fields are ignored (pydantic's default). Strings are not coerced
    from numbers or booleans, so {"name": 1} is rejected.
    """
    name: str = Field(min_length=1, max_length=255, description="Resource name (required, non-empty)")
    description: str = Field(description="Free-form description (required, may be empty)")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class RelationalResource(BaseModel):
    """A resource row from the PostgreSQL `resources` table."""
    id: int = Field(description="Auto-incrementing integer primary key")
    name: str
    description: str

    model_config = {"from_attributes": True}


class DocumentResource(BaseModel):
    """A resource document from the MongoDB `resources` collection."""
    id: str = Field(description="ObjectId as a 24-character hex string")
    name: str
    description: str


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body for 404 and invalid-identifier 400 responses.

    Example:
        {"error": "Resource not found"}
    """
    error: str = Field(description="Error description")


class ValidationErrorResponse(BaseModel):
    """
    Structured 400 body for malformed requests.

    Fields:
        error: Always "validation_error"
        message: Human-readable summary
        details: Per-field problems as reported by pydantic (loc, msg, type)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(default="validation_error")
    message: str
    details: List[dict] = Field(default_factory=list)
    request_id: Optional[str] = None


class ServerErrorResponse(BaseModel):
    """Generic 500 body. Never carries internal details."""
    error: str
    message: str
    request_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response showing service and backend status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    postgres: str = Field(description="Relational backend: connected, disconnected")
    mongo: str = Field(description="Document backend: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
