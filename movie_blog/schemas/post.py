"""
Movie Blog API - Pydantic Request/Response Schemas
===================================================

What:  Pydantic models defining the API contract for the post resource.
How:   Route handlers declare these as response models; FastAPI serializes
       responses through them and publishes them in the OpenAPI document.

Field names follow the wire format existing clients use (`imgSrc`,
`affectedRows`, `insertId`), so no aliasing is involved.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostPayload(BaseModel):
    """
    What:  The four required post fields after validation succeeded.
    Who:   Produced by validation.validate_post_payload(); consumed by the
           create and update handlers.
    """
    title: str = Field(description="Post title (non-empty)")
    imgSrc: str = Field(description="Absolute URL of the post image")
    pelicula: str = Field(description="Movie the post refers to (non-empty)")
    content: str = Field(description="Post body (non-empty)")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PostResponse(BaseModel):
    """A stored post as returned by GET /posts and GET /posts/{postId}."""
    id: int = Field(description="Database-assigned post identifier")
    title: str
    imgSrc: str
    pelicula: str
    content: str

    model_config = {"from_attributes": True}


class MutationResult(BaseModel):
    """
    What:  Outcome of an update or delete.
    How:   affectedRows is 0 when no row matched the identifier. That is a
           successful response, not an error.
    """
    affectedRows: int = Field(description="Number of rows changed by the statement")


class CreateResult(MutationResult):
    """Outcome of an insert, including the identifier the database assigned."""
    insertId: int = Field(description="Identifier of the newly created post")


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class FieldViolation(BaseModel):
    """One failed field check: which field, and why."""
    field: str = Field(description="Name of the offending body field")
    message: str = Field(description="Reason the value was rejected")


class ErrorResponse(BaseModel):
    """
    What:  Standardized JSON error envelope.

    Example:
        {
            "error": "store_error",
            "message": "Could not retrieve posts. Please try again later.",
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class ValidationErrorResponse(ErrorResponse):
    """Error envelope for 400 responses, carrying every failed field check."""
    errors: List[FieldViolation] = Field(description="Per-field validation failures")
