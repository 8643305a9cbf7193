"""Initial project schema

Creates:
- users, user_profiles (read-only here, written by the identity service)
- teams
- projects with storage_scheme and location URLs
- project_members keyed by (project_id, user_id)
- chats

Revision ID: 001
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- Identity ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("personal_id", sa.String(50), nullable=False, comment="Login identifier chosen by the user"),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("personal_id", name="uq_users_personal_id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_table(
        "user_profiles",
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("nickname", sa.String(50), nullable=False),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"],
            name="fk_user_profiles_user_id_users",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("user_id", name="pk_user_profiles"),
    )

    # --- Teams & projects ---
    op.create_table(
        "teams",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_teams"),
    )
    op.create_table(
        "projects",
        sa.Column("id", sa.String(36), nullable=False, comment="Project identifier, also the storage folder name"),
        sa.Column("team_id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("last_accessed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment="Explicit 'recently used' marker"),
        sa.Column("storage_scheme", sa.String(8), nullable=False, server_default="v2", comment="Naming scheme version in effect at creation (v1, v2)"),
        sa.Column("folder_url", sa.String(500), nullable=True, comment="v2: CDN URL of the project folder"),
        sa.Column("model_folder_url", sa.String(500), nullable=True, comment="v1: CDN URL of the model folder"),
        sa.Column("json_file_url", sa.String(500), nullable=True, comment="CDN URL of the metadata / scene-graph JSON file"),
        sa.ForeignKeyConstraint(
            ["team_id"], ["teams.id"],
            name="fk_projects_team_id_teams",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_projects"),
    )
    op.create_index("ix_projects_team_id", "projects", ["team_id"])

    # --- Membership ---
    op.create_table(
        "project_members",
        sa.Column("project_id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("role", sa.Integer(), nullable=False, comment="1 = owner, 2 = editor, 3 = viewer"),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ["project_id"], ["projects.id"],
            name="fk_project_members_project_id_projects",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"],
            name="fk_project_members_user_id_users",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("project_id", "user_id", name="pk_project_members"),
    )

    op.create_table(
        "chats",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("project_id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ["project_id"], ["projects.id"],
            name="fk_chats_project_id_projects",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_chats"),
    )
    op.create_index("ix_chats_project_id", "chats", ["project_id"])


def downgrade() -> None:
    # Drop tables in reverse dependency order
    op.drop_index("ix_chats_project_id", "chats")
    op.drop_table("chats")
    op.drop_table("project_members")
    op.drop_index("ix_projects_team_id", "projects")
    op.drop_table("projects")
    op.drop_table("teams")
    op.drop_table("user_profiles")
    op.drop_table("users")
