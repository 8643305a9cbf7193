"""
Pydantic schemas for Project request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from simvex.storage.naming import NamingScheme


# ===================
# Request Schemas
# ===================

class ProjectUpdate(BaseModel):
    """Mutable project fields (PATCH /projects/{id})."""

    name: str | None = Field(
        default=None,
        min_length=1,
        max_length=100,
        description="Project display name",
    )

    model_config = ConfigDict(extra="forbid")


class MemberAdd(BaseModel):
    """Schema for adding a member (POST /projects/{id}/members)."""

    user_id: str = Field(..., min_length=1, alias="userId")
    role: int = Field(
        ...,
        ge=1,
        description="1 = owner, 2 = editor, 3 = viewer",
    )

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class MemberRoleUpdate(BaseModel):
    """Mutable member fields (PATCH /projects/{id}/members/{userId})."""

    role: int = Field(..., ge=1)

    model_config = ConfigDict(extra="forbid")


class NodeQuestion(BaseModel):
    """Question forwarded to the AI assistant about one node."""

    content: str = Field(..., min_length=1)


# ===================
# Response Schemas
# ===================

class ProfileResponse(BaseModel):
    nickname: str
    avatar_url: str | None = Field(default=None, alias="avatarUrl")
    bio: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class UserSummaryResponse(BaseModel):
    """User fields exposed next to a membership. Never includes credentials."""

    id: str
    personal_id: str = Field(alias="personalId")
    email: str
    profile: ProfileResponse | None = None

    model_config = ConfigDict(populate_by_name=True)


class MemberResponse(BaseModel):
    project_id: str = Field(alias="projectId")
    user_id: str = Field(alias="userId")
    role: int
    joined_at: datetime | None = Field(default=None, alias="joinedAt")
    user: UserSummaryResponse | None = None

    model_config = ConfigDict(populate_by_name=True)


class TeamResponse(BaseModel):
    id: str
    name: str


class ChatResponse(BaseModel):
    id: str
    title: str | None = None
    created_at: datetime = Field(alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


class ProjectFilesResponse(BaseModel):
    """Recorded storage location of a project."""

    id: str
    name: str
    storage_scheme: NamingScheme = Field(alias="storageScheme")
    folder_url: str | None = Field(default=None, alias="folderUrl")
    model_folder_url: str | None = Field(default=None, alias="modelFolderUrl")
    json_file_url: str | None = Field(default=None, alias="jsonFileUrl")

    model_config = ConfigDict(populate_by_name=True)


class ProjectResponse(ProjectFilesResponse):
    """Standard JSON response for a single project."""

    team_id: str = Field(alias="teamId")
    created_at: datetime = Field(alias="createdAt")
    last_accessed_at: datetime = Field(alias="lastAccessedAt")
    team: TeamResponse | None = None
    members: list[MemberResponse] = []
    chats: list[ChatResponse] | None = None


class FileListResponse(BaseModel):
    """Basenames of stored objects. Subfolders are not distinguished."""

    files: list[str]
    total: int

