"""
Project and ProjectMember SQLAlchemy models.
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from simvex.db.base import Base
from simvex.storage.naming import NamingScheme, StorageLocation

if TYPE_CHECKING:
    from simvex.models.chat import Chat
    from simvex.models.team import Team
    from simvex.models.user import User


class ProjectRole(int, enum.Enum):
    """
    Member roles. Lower value means more privilege; values above VIEWER are
    reserved.
    """
    OWNER = 1
    EDITOR = 2
    VIEWER = 3


class Project(Base):
    """
    Project entity.

    The location fields are written only at creation and by
    ProjectService.record_upload_result. ``storage_scheme`` is fixed at
    creation and decides how every later upload is laid out.
    """
    __tablename__ = "projects"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        comment="Project identifier, also the storage folder name",
    )
    team_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    last_accessed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        comment="Explicit 'recently used' marker",
    )

    # ===================
    # Storage location
    # ===================
    storage_scheme: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        default=NamingScheme.V2.value,
        comment="Naming scheme version in effect at creation (v1, v2)",
    )
    folder_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="v2: CDN URL of the project folder",
    )
    model_folder_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="v1: CDN URL of the model folder",
    )
    json_file_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="CDN URL of the metadata / scene-graph JSON file",
    )

    # ===================
    # Relationships
    # ===================
    team: Mapped["Team"] = relationship(
        "Team",
        back_populates="projects",
        lazy="selectin",
    )
    members: Mapped[list["ProjectMember"]] = relationship(
        "ProjectMember",
        back_populates="project",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="ProjectMember.joined_at",
    )
    chats: Mapped[list["Chat"]] = relationship(
        "Chat",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Chat.created_at",
    )

    @property
    def scheme(self) -> NamingScheme:
        return NamingScheme(self.storage_scheme)

    @property
    def location(self) -> StorageLocation | None:
        """Recorded storage location, or None before the first upload."""
        location = StorageLocation(
            scheme=self.scheme,
            folder_url=self.folder_url,
            model_folder_url=self.model_folder_url,
            json_file_url=self.json_file_url,
        )
        return None if location.is_empty else location

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name}, scheme={self.storage_scheme})>"


class ProjectMember(Base):
    """Membership of a user in a project, keyed by (project_id, user_id)."""
    __tablename__ = "project_members"
    __mapper_args__ = {"eager_defaults": True}

    project_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=ProjectRole.VIEWER.value,
        comment="1 = owner, 2 = editor, 3 = viewer",
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    project: Mapped["Project"] = relationship("Project", back_populates="members")
    user: Mapped["User"] = relationship("User", back_populates="memberships", lazy="selectin")

    def __repr__(self) -> str:
        return f"<ProjectMember(project_id={self.project_id}, user_id={self.user_id}, role={self.role})>"
