"""
Custom exceptions for the SimVex API.
Every failure surfaced to callers carries a stable error code.
"""

from typing import Any


class SimvexAPIException(Exception):
    """Base exception for all SimVex API errors."""

    def __init__(
        self,
        error: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.error = error
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to response dictionary."""
        response = {
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            response["details"] = self.details
        return response


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing."""

    def __init__(self, message: str, missing: list[str] | None = None):
        self.missing = missing or []
        super().__init__(message)


class ValidationException(SimvexAPIException):
    """400 - Malformed request."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="validation_failed",
            message=message,
            status_code=400,
            details=details,
        )


class UnauthorizedException(SimvexAPIException):
    """401 - No authenticated identity supplied."""

    def __init__(self, message: str = "Authenticated user required"):
        super().__init__(
            error="unauthorized",
            message=message,
            status_code=401,
        )


class NotFoundException(SimvexAPIException):
    """404 - Resource not found."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="not_found",
            message=message,
            status_code=404,
            details=details,
        )


class ProjectNotFoundException(NotFoundException):
    def __init__(self, project_id: str):
        super().__init__(f"Project with ID '{project_id}' not found")


class MemberNotFoundException(NotFoundException):
    def __init__(self, project_id: str, user_id: str):
        super().__init__(
            f"User '{user_id}' is not a member of project '{project_id}'",
            details={"project_id": project_id, "user_id": user_id},
        )


class NodeNotFoundException(NotFoundException):
    def __init__(self, project_id: str, node_name: str):
        super().__init__(
            f"Node '{node_name}' not found in project '{project_id}'",
            details={"project_id": project_id, "node": node_name},
        )


class StoredFileNotFoundException(NotFoundException):
    def __init__(self, key: str):
        super().__init__(f"File not found: {key}", details={"key": key})


class ConflictException(SimvexAPIException):
    """409 - Request conflicts with the current state."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="conflict",
            message=message,
            status_code=409,
            details=details,
        )


class PayloadTooLargeException(SimvexAPIException):
    """413 - Upload size exceeds limit."""

    def __init__(self, max_size: int):
        max_size_mb = max_size / (1024 * 1024)
        super().__init__(
            error="payload_too_large",
            message=f"Maximum upload size exceeded ({max_size_mb:.0f}MB limit)",
            status_code=413,
        )


class StorageException(SimvexAPIException):
    """500 - Storage backend error."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="storage_error",
            message=message,
            status_code=500,
            details=details,
        )


class UploadFailedException(SimvexAPIException):
    """502 - At least one put in an upload batch failed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="upload_failed",
            message=message,
            status_code=502,
            details=details,
        )


class RetrievalFailedException(SimvexAPIException):
    """502 - Object store read or metadata fetch failed for a reason other than absence."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="retrieval_failed",
            message=message,
            status_code=502,
            details=details,
        )


class AssistantUnavailableException(SimvexAPIException):
    """502 - The AI assistant could not be reached."""

    def __init__(self, message: str):
        super().__init__(
            error="assistant_unavailable",
            message=message,
            status_code=502,
        )


class ServiceUnavailableException(SimvexAPIException):
    """503 - An optional collaborator is not configured."""

    def __init__(self, message: str):
        super().__init__(
            error="service_unavailable",
            message=message,
            status_code=503,
        )
