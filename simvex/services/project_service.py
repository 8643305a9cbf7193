"""
Project service - Business logic for projects and their membership roster.
"""

import logging
from datetime import datetime, timezone
from typing import Sequence
from uuid import uuid4

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from simvex.core.exceptions import (
    ConflictException,
    MemberNotFoundException,
    NotFoundException,
    ProjectNotFoundException,
)
from simvex.models.project import Project, ProjectMember, ProjectRole
from simvex.models.team import Team
from simvex.models.user import User
from simvex.schemas.project import MemberAdd, MemberRoleUpdate, ProjectUpdate
from simvex.storage.naming import NamingScheme, StorageLocation

logger = logging.getLogger(__name__)


class ProjectService:
    """Service class for project and membership operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _project_query(self, include_chats: bool = False):
        query = select(Project).options(
            selectinload(Project.team),
            selectinload(Project.members)
            .selectinload(ProjectMember.user)
            .selectinload(User.profile),
        )
        if include_chats:
            query = query.options(selectinload(Project.chats))
        return query.execution_options(populate_existing=True)

    async def get_by_id(self, project_id: str, include_chats: bool = False) -> Project:
        """
        Get project by ID with team and members loaded.

        Args:
            project_id: Project UUID
            include_chats: Also load the project's chats

        Raises:
            ProjectNotFoundException: If project not found
        """
        query = self._project_query(include_chats).where(Project.id == project_id)
        result = await self.db.execute(query)
        project = result.scalar_one_or_none()

        if not project:
            raise ProjectNotFoundException(project_id)

        return project

    async def create_project(
        self,
        team_id: str,
        name: str,
        creator_id: str,
        scheme: NamingScheme,
    ) -> Project:
        """
        Create a project with its creator as owner.

        The project row and the owner membership are flushed together, so a
        project never exists without its creator's membership.

        Args:
            team_id: Owning team
            name: Display name
            creator_id: Authenticated user creating the project
            scheme: Naming scheme recorded for all future uploads

        Raises:
            NotFoundException: If the team or the creator does not exist
        """
        if await self.db.get(Team, team_id) is None:
            raise NotFoundException(f"Team with ID '{team_id}' not found")

        if await self.db.get(User, creator_id) is None:
            raise NotFoundException(f"User with ID '{creator_id}' not found")

        project = Project(
            id=str(uuid4()),
            team_id=team_id,
            name=name,
            storage_scheme=NamingScheme(scheme).value,
            members=[
                ProjectMember(user_id=creator_id, role=ProjectRole.OWNER.value),
            ],
        )
        self.db.add(project)
        await self.db.flush()

        logger.info(f"Created project {project.id} in team {team_id} (scheme {project.storage_scheme})")

        return await self.get_by_id(project.id)

    async def get_files(self, project_id: str) -> Project:
        """Get the project row holding its storage scheme and recorded location."""
        project = await self.db.get(Project, project_id, populate_existing=True)
        if project is None:
            raise ProjectNotFoundException(project_id)
        return project

    async def find_projects_for_user(self, user_id: str) -> Sequence[Project]:
        """All projects the user is a member of. Not paginated."""
        query = (
            self._project_query()
            .where(Project.members.any(ProjectMember.user_id == user_id))
            .order_by(Project.created_at.desc())
        )
        result = await self.db.execute(query)
        return result.scalars().all()

    async def find_projects_for_team(self, team_id: str) -> Sequence[Project]:
        """All projects of a team. Not paginated."""
        query = (
            self._project_query()
            .where(Project.team_id == team_id)
            .order_by(Project.created_at.desc())
        )
        result = await self.db.execute(query)
        return result.scalars().all()

    async def update_project(self, project_id: str, data: ProjectUpdate) -> Project:
        """Apply a project update. Any update also counts as an access."""
        project = await self.get_by_id(project_id)

        if data.name is not None:
            project.name = data.name
        project.last_accessed_at = datetime.now(timezone.utc)

        await self.db.flush()

        return await self.get_by_id(project_id)

    async def delete_project(self, project_id: str) -> None:
        """Delete a project with its members and chats. Stored files are kept."""
        project = await self.get_by_id(project_id)

        await self.db.delete(project)
        await self.db.flush()

        logger.info(f"Deleted project {project_id}")

    async def touch_last_accessed(self, project_id: str) -> Project:
        """Mark the project as recently used."""
        result = await self.db.execute(
            update(Project)
            .where(Project.id == project_id)
            .values(last_accessed_at=datetime.now(timezone.utc))
        )
        if result.rowcount == 0:
            raise ProjectNotFoundException(project_id)

        return await self.get_by_id(project_id)

    async def record_upload_result(self, project_id: str, location: StorageLocation) -> Project:
        """
        Persist the location returned by the upload orchestrator.

        Written as one UPDATE replacing all location fields, so concurrent
        uploads end with exactly one caller's location (last writer wins).

        Raises:
            ProjectNotFoundException: If project not found
            ConflictException: If the location uses a different naming scheme
        """
        result = await self.db.execute(
            update(Project)
            .where(
                Project.id == project_id,
                Project.storage_scheme == location.scheme.value,
            )
            .values(
                folder_url=location.folder_url,
                model_folder_url=location.model_folder_url,
                json_file_url=location.json_file_url,
            )
        )

        if result.rowcount == 0:
            project = await self.get_by_id(project_id)
            raise ConflictException(
                "Storage location does not match the project's naming scheme",
                details={
                    "project_id": project_id,
                    "project_scheme": project.storage_scheme,
                    "location_scheme": location.scheme.value,
                },
            )

        return await self.get_by_id(project_id)

    # ===================
    # Membership
    # ===================

    async def _get_member(self, project_id: str, user_id: str) -> ProjectMember | None:
        query = (
            select(ProjectMember)
            .options(selectinload(ProjectMember.user).selectinload(User.profile))
            .where(
                ProjectMember.project_id == project_id,
                ProjectMember.user_id == user_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _require_member(self, project_id: str, user_id: str) -> ProjectMember:
        member = await self._get_member(project_id, user_id)
        if member is None:
            raise MemberNotFoundException(project_id, user_id)
        return member

    async def _owner_count(self, project_id: str) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(ProjectMember)
            .where(
                ProjectMember.project_id == project_id,
                ProjectMember.role == ProjectRole.OWNER.value,
            )
        )
        return result.scalar() or 0

    async def _guard_last_owner(self, member: ProjectMember, action: str) -> None:
        if member.role != ProjectRole.OWNER.value:
            return
        if await self._owner_count(member.project_id) <= 1:
            raise ConflictException(
                "A project must keep at least one owner",
                details={
                    "project_id": member.project_id,
                    "user_id": member.user_id,
                    "action": action,
                },
            )

    async def add_member(self, project_id: str, data: MemberAdd) -> ProjectMember:
        """
        Add a user to a project.

        Raises:
            ProjectNotFoundException: If project not found
            NotFoundException: If the user does not exist
            ConflictException: If the user is already a member
        """
        exists = await self.db.scalar(select(Project.id).where(Project.id == project_id))
        if exists is None:
            raise ProjectNotFoundException(project_id)

        if await self.db.get(User, data.user_id) is None:
            raise NotFoundException(f"User with ID '{data.user_id}' not found")

        conflict = ConflictException(
            f"User '{data.user_id}' is already a member of project '{project_id}'",
            details={"project_id": project_id, "user_id": data.user_id},
        )

        if await self._get_member(project_id, data.user_id) is not None:
            raise conflict

        member = ProjectMember(
            project_id=project_id,
            user_id=data.user_id,
            role=data.role,
        )
        self.db.add(member)

        try:
            await self.db.flush()
        except IntegrityError as e:
            # Concurrent insert of the same pair
            raise conflict from e

        return await self._require_member(project_id, data.user_id)

    async def update_member_role(
        self,
        project_id: str,
        user_id: str,
        data: MemberRoleUpdate,
    ) -> ProjectMember:
        """
        Change a member's role.

        Raises:
            MemberNotFoundException: If the pair has no membership row
            ConflictException: If this would demote the last owner
        """
        member = await self._require_member(project_id, user_id)

        if data.role != ProjectRole.OWNER.value:
            await self._guard_last_owner(member, action="update_role")

        member.role = data.role
        await self.db.flush()

        return member

    async def remove_member(self, project_id: str, user_id: str) -> None:
        """
        Remove a member from a project.

        Raises:
            MemberNotFoundException: If the pair has no membership row
            ConflictException: If the member is the last owner
        """
        member = await self._require_member(project_id, user_id)
        await self._guard_last_owner(member, action="remove")

        await self.db.delete(member)
        await self.db.flush()
