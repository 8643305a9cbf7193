"""
Pydantic schemas for error responses.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standard error response format.

    Examples:
        404: {"error": "not_found", "message": "Project with ID '...' not found"}
        409: {"error": "conflict", "message": "User '...' is already a member ..."}
        502: {"error": "upload_failed", "message": "1 of 3 file(s) failed to upload",
              "details": {"failed": [...]}}
    """

    error: str = Field(
        ...,
        description="Error code string",
        examples=["not_found", "conflict", "upload_failed", "retrieval_failed"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Optional additional error details",
    )
