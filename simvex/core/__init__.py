"""Core utilities and exceptions for the SimVex API."""

from simvex.core.exceptions import (
    SimvexAPIException,
    ConfigurationError,
    ValidationException,
    UnauthorizedException,
    NotFoundException,
    ProjectNotFoundException,
    MemberNotFoundException,
    NodeNotFoundException,
    StoredFileNotFoundException,
    ConflictException,
    PayloadTooLargeException,
    StorageException,
    UploadFailedException,
    RetrievalFailedException,
    AssistantUnavailableException,
    ServiceUnavailableException,
)

__all__ = [
    "SimvexAPIException",
    "ConfigurationError",
    "ValidationException",
    "UnauthorizedException",
    "NotFoundException",
    "ProjectNotFoundException",
    "MemberNotFoundException",
    "NodeNotFoundException",
    "StoredFileNotFoundException",
    "ConflictException",
    "PayloadTooLargeException",
    "StorageException",
    "UploadFailedException",
    "RetrievalFailedException",
    "AssistantUnavailableException",
    "ServiceUnavailableException",
]
