"""
SQLAlchemy ORM models for the SimVex API.
"""

from simvex.models.user import User, UserProfile
from simvex.models.team import Team
from simvex.models.project import Project, ProjectMember, ProjectRole
from simvex.models.chat import Chat

__all__ = [
    "User",
    "UserProfile",
    "Team",
    "Project",
    "ProjectMember",
    "ProjectRole",
    "Chat",
]
