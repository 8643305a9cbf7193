"""
Project endpoints.
Project CRUD, file upload and retrieval, node metadata and membership.
"""

from typing import Any

from fastapi import APIRouter, File, Form, Response, UploadFile
from fastapi.responses import StreamingResponse

from simvex.auth.dependencies import CurrentUser
from simvex.config import get_settings
from simvex.core.exceptions import PayloadTooLargeException, ValidationException
from simvex.dependencies import Assistant, Naming, NodeResolver, Projects, Uploads
from simvex.models.project import Project, ProjectMember
from simvex.schemas.project import (
    FileListResponse,
    MemberAdd,
    MemberResponse,
    MemberRoleUpdate,
    NodeQuestion,
    ProjectFilesResponse,
    ProjectResponse,
    ProjectUpdate,
)
from simvex.services.upload_service import IncomingFile, validate_filename

router = APIRouter()
settings = get_settings()


def _member_to_response(member: ProjectMember) -> dict[str, Any]:
    """Convert ProjectMember model to response dict. Credentials are never included."""
    user = member.user
    user_response = None
    if user is not None:
        profile = user.profile
        user_response = {
            "id": user.id,
            "personalId": user.personal_id,
            "email": user.email,
            "profile": None if profile is None else {
                "nickname": profile.nickname,
                "avatarUrl": profile.avatar_url,
                "bio": profile.bio,
            },
        }

    return {
        "projectId": member.project_id,
        "userId": member.user_id,
        "role": member.role,
        "joinedAt": member.joined_at,
        "user": user_response,
    }


def _files_to_response(project: Project) -> dict[str, Any]:
    return {
        "id": project.id,
        "name": project.name,
        "storageScheme": project.storage_scheme,
        "folderUrl": project.folder_url,
        "modelFolderUrl": project.model_folder_url,
        "jsonFileUrl": project.json_file_url,
    }


def _project_to_response(project: Project, include_chats: bool = False) -> dict[str, Any]:
    """Convert Project model to response dict."""
    response = _files_to_response(project)
    response.update({
        "teamId": project.team_id,
        "createdAt": project.created_at,
        "lastAccessedAt": project.last_accessed_at,
        "team": {"id": project.team.id, "name": project.team.name} if project.team else None,
        "members": [_member_to_response(m) for m in project.members],
    })

    if include_chats:
        response["chats"] = [
            {"id": chat.id, "title": chat.title, "createdAt": chat.created_at}
            for chat in project.chats
        ]

    return response


async def _read_uploads(files: list[UploadFile] | None) -> list[IncomingFile]:
    """Read multipart parts into memory, enforcing the per-request limits."""
    files = [f for f in files or [] if f.filename]

    if len(files) > settings.MAX_MODEL_FILES:
        raise ValidationException(
            f"Maximum {settings.MAX_MODEL_FILES} model files allowed per request",
            details={"received": len(files)},
        )

    incoming = []
    for f in files:
        validate_filename(f.filename)
        data = await f.read()
        if len(data) > settings.MAX_UPLOAD_SIZE:
            raise PayloadTooLargeException(settings.MAX_UPLOAD_SIZE)
        incoming.append(IncomingFile(filename=f.filename, data=data, content_type=f.content_type))

    return incoming


async def _read_metadata(metadata: UploadFile | None) -> IncomingFile | None:
    if metadata is None or not metadata.filename:
        return None
    return (await _read_uploads([metadata]))[0]


# ===================
# Projects
# ===================

@router.post("", status_code=201, response_model=ProjectResponse)
async def create_project(
    projects: Projects,
    uploads: Uploads,
    naming: Naming,
    user_id: CurrentUser,
    teamId: str = Form(..., min_length=1),
    name: str = Form(..., min_length=1, max_length=100),
    modelFiles: list[UploadFile] | None = File(default=None, description="Binary model files"),
    metadata: UploadFile | None = File(default=None, description="JSON metadata / scene file"),
):
    """
    Create a project with the caller as owner.

    Files are optional. When model files are sent they are uploaded in the
    same request and the resulting location is recorded; a failed upload
    fails the request and no project is created.
    """
    model_files = await _read_uploads(modelFiles)
    metadata_file = await _read_metadata(metadata)

    if metadata_file is not None and not model_files:
        raise ValidationException("A metadata file requires at least one model file")

    project = await projects.create_project(
        team_id=teamId,
        name=name,
        creator_id=user_id,
        scheme=naming.default_scheme,
    )

    if model_files:
        location = await uploads.upload_project_files(
            project.id,
            project.scheme,
            model_files,
            metadata_file,
        )
        project = await projects.record_upload_result(project.id, location)

    return _project_to_response(project)


@router.get("/user/{user_id}", response_model=list[ProjectResponse])
async def list_projects_for_user(user_id: str, projects: Projects, caller: CurrentUser):
    """All projects the user is a member of."""
    return [_project_to_response(p) for p in await projects.find_projects_for_user(user_id)]


@router.get("/team/{team_id}", response_model=list[ProjectResponse])
async def list_projects_for_team(team_id: str, projects: Projects, caller: CurrentUser):
    """All projects of a team."""
    return [_project_to_response(p) for p in await projects.find_projects_for_team(team_id)]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str, projects: Projects, caller: CurrentUser):
    """Project detail including team, members and chats."""
    project = await projects.get_by_id(project_id, include_chats=True)
    return _project_to_response(project, include_chats=True)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    projects: Projects,
    caller: CurrentUser,
):
    project = await projects.update_project(project_id, data)
    return _project_to_response(project)


@router.delete("/{project_id}", status_code=204)
async def delete_project(project_id: str, projects: Projects, caller: CurrentUser):
    """
    Delete a project with its members and chats.
    Objects already in storage are left in place.
    """
    await projects.delete_project(project_id)


@router.patch("/{project_id}/access", response_model=ProjectResponse)
async def touch_project(project_id: str, projects: Projects, caller: CurrentUser):
    """Mark the project as recently used."""
    project = await projects.touch_last_accessed(project_id)
    return _project_to_response(project)


# ===================
# Files
# ===================

@router.post("/{project_id}/files", response_model=ProjectFilesResponse)
async def upload_files(
    project_id: str,
    projects: Projects,
    uploads: Uploads,
    caller: CurrentUser,
    modelFiles: list[UploadFile] | None = File(default=None, description="Binary model files"),
    metadata: UploadFile | None = File(default=None, description="JSON metadata / scene file"),
):
    """
    Append files to a project.

    Both parts are optional; with neither present nothing is uploaded and the
    current location is returned.
    """
    project = await projects.get_files(project_id)

    model_files = await _read_uploads(modelFiles)
    metadata_file = await _read_metadata(metadata)

    current = project.location
    location = await uploads.upload_additional_files(
        project.id,
        project.scheme,
        model_files,
        metadata_file,
        current=current,
    )

    if location is not None and location != current:
        project = await projects.record_upload_result(project.id, location)

    return _files_to_response(project)


@router.get("/{project_id}/files", response_model=ProjectFilesResponse)
async def get_files(project_id: str, projects: Projects, caller: CurrentUser):
    """Recorded storage location of the project."""
    return _files_to_response(await projects.get_files(project_id))


@router.get("/{project_id}/file-list", response_model=FileListResponse)
async def list_files(
    project_id: str,
    projects: Projects,
    uploads: Uploads,
    caller: CurrentUser,
):
    """
    Basenames of every stored object of the project.
    Files sharing a basename in different subfolders are not distinguished.
    """
    project = await projects.get_files(project_id)
    files = await uploads.list_project_files(project.id)
    return {"files": files, "total": len(files)}


@router.get("/{project_id}/files/{file_path:path}")
async def download_file(
    project_id: str,
    file_path: str,
    projects: Projects,
    uploads: Uploads,
    caller: CurrentUser,
):
    """Stream one stored file, addressed by its path below the project folder."""
    project = await projects.get_files(project_id)
    stored = await uploads.get_project_file(project.id, file_path)

    headers = {}
    if stored.length is not None:
        headers["Content-Length"] = str(stored.length)

    return StreamingResponse(
        stored.stream,
        media_type=stored.content_type,
        headers=headers,
    )


# ===================
# Nodes
# ===================

@router.get("/{project_id}/nodes/{node_name}")
async def get_node(
    project_id: str,
    node_name: str,
    projects: Projects,
    resolver: NodeResolver,
    caller: CurrentUser,
):
    """Payload stored under one top-level key of the project's metadata file."""
    project = await projects.get_files(project_id)
    return await resolver.get_node(project, node_name)


@router.post("/{project_id}/nodes/{node_name}/ask")
async def ask_about_node(
    project_id: str,
    node_name: str,
    question: NodeQuestion,
    projects: Projects,
    assistant: Assistant,
    caller: CurrentUser,
):
    """Forward a question to the AI assistant and relay its answer unchanged."""
    project = await projects.get_files(project_id)
    reply = await assistant.ask(project.id, node_name, question.content)

    return Response(
        content=reply.body,
        status_code=reply.status_code,
        media_type=reply.content_type,
    )


# ===================
# Members
# ===================

@router.post("/{project_id}/members", status_code=201, response_model=MemberResponse)
async def add_member(
    project_id: str,
    data: MemberAdd,
    projects: Projects,
    caller: CurrentUser,
):
    member = await projects.add_member(project_id, data)
    return _member_to_response(member)


@router.patch("/{project_id}/members/{user_id}", response_model=MemberResponse)
async def update_member_role(
    project_id: str,
    user_id: str,
    data: MemberRoleUpdate,
    projects: Projects,
    caller: CurrentUser,
):
    member = await projects.update_member_role(project_id, user_id, data)
    return _member_to_response(member)


@router.delete("/{project_id}/members/{user_id}", status_code=204)
async def remove_member(
    project_id: str,
    user_id: str,
    projects: Projects,
    caller: CurrentUser,
):
    await projects.remove_member(project_id, user_id)
