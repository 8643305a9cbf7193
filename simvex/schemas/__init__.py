"""
Pydantic schemas for request/response validation.
"""

from simvex.schemas.project import (
    ProjectUpdate,
    MemberAdd,
    MemberRoleUpdate,
    NodeQuestion,
    ProfileResponse,
    UserSummaryResponse,
    MemberResponse,
    TeamResponse,
    ChatResponse,
    ProjectFilesResponse,
    ProjectResponse,
    FileListResponse,
)
from simvex.schemas.error import ErrorResponse

__all__ = [
    # Request schemas
    "ProjectUpdate",
    "MemberAdd",
    "MemberRoleUpdate",
    "NodeQuestion",
    # Response schemas
    "ProfileResponse",
    "UserSummaryResponse",
    "MemberResponse",
    "TeamResponse",
    "ChatResponse",
    "ProjectFilesResponse",
    "ProjectResponse",
    "FileListResponse",
    # Error schemas
    "ErrorResponse",
]
