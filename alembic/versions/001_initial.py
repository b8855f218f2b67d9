"""Initial tables: hunts, versions, steps, play progress, access, assets, counters.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "counters",
        sa.Column("name", sa.String(32), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("name"),
    )
    counters = sa.table("counters", sa.column("name", sa.String), sa.column("seq", sa.Integer))
    op.bulk_insert(counters, [{"name": name, "seq": 0} for name in ("hunt", "step", "asset")])

    op.create_table(
        "hunts",
        sa.Column("hunt_id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("creator_id", sa.String(64), nullable=False),
        sa.Column("latest_version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("live_version", sa.Integer(), nullable=True),
        sa.Column("released_at", sa.DateTime(), nullable=True),
        sa.Column("released_by", sa.String(64), nullable=True),
        sa.Column("play_slug", sa.String(32), nullable=False),
        sa.Column("access_mode", sa.String(32), nullable=False, server_default="open"),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("hunt_id"),
    )
    op.create_index(op.f("ix_hunts_creator_id"), "hunts", ["creator_id"], unique=False)
    op.create_index(op.f("ix_hunts_live_version"), "hunts", ["live_version"], unique=False)
    op.create_index(op.f("ix_hunts_play_slug"), "hunts", ["play_slug"], unique=True)

    op.create_table(
        "hunt_versions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("hunt_id", sa.Integer(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("start_location_json", sa.Text(), nullable=True),
        sa.Column("step_order_json", sa.Text(), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("published_by", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("hunt_id", "version", name="uq_hunt_versions_hunt_id_version"),
    )
    op.create_index(op.f("ix_hunt_versions_hunt_id"), "hunt_versions", ["hunt_id"], unique=False)
    op.create_index(op.f("ix_hunt_versions_is_published"), "hunt_versions", ["is_published"], unique=False)

    op.create_table(
        "steps",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("step_id", sa.Integer(), nullable=False),
        sa.Column("hunt_id", sa.Integer(), nullable=False),
        sa.Column("hunt_version", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("challenge_json", sa.Text(), nullable=False),
        sa.Column("hint", sa.Text(), nullable=True),
        sa.Column("required_location_json", sa.Text(), nullable=True),
        sa.Column("time_limit", sa.Integer(), nullable=True),
        sa.Column("max_attempts", sa.Integer(), nullable=True),
        sa.Column("meta_json", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("step_id", "hunt_id", "hunt_version", name="uq_steps_step_id_hunt_version"),
    )
    op.create_index(op.f("ix_steps_step_id"), "steps", ["step_id"], unique=False)
    op.create_index(op.f("ix_steps_hunt_id"), "steps", ["hunt_id"], unique=False)

    op.create_table(
        "progress",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("session_id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_preview", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("player_name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("hunt_id", sa.Integer(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="in_progress"),
        sa.Column("current_step_id", sa.Integer(), nullable=False),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_progress_session_id"), "progress", ["session_id"], unique=True)
    op.create_index(op.f("ix_progress_user_id"), "progress", ["user_id"], unique=False)
    op.create_index(op.f("ix_progress_hunt_id"), "progress", ["hunt_id"], unique=False)

    op.create_table(
        "step_progress",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("progress_id", sa.Integer(), nullable=False),
        sa.Column("step_id", sa.Integer(), nullable=False),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("hints_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["progress_id"], ["progress.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("progress_id", "step_id", name="uq_step_progress_progress_id_step_id"),
    )
    op.create_index(op.f("ix_step_progress_progress_id"), "step_progress", ["progress_id"], unique=False)

    op.create_table(
        "submissions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("step_progress_id", sa.Integer(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(), nullable=False),
        sa.Column("content_json", sa.Text(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False),
        sa.Column("score", sa.Float(), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("meta_json", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["step_progress_id"], ["step_progress.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_submissions_step_progress_id"), "submissions", ["step_progress_id"], unique=False)

    op.create_table(
        "hunt_access",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("hunt_id", sa.Integer(), nullable=False),
        sa.Column("shared_with_id", sa.String(64), nullable=False),
        sa.Column("shared_by_id", sa.String(64), nullable=False),
        sa.Column("permission", sa.String(16), nullable=False),
        sa.Column("shared_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("hunt_id", "shared_with_id", name="uq_hunt_access_hunt_id_shared_with_id"),
    )
    op.create_index(op.f("ix_hunt_access_hunt_id"), "hunt_access", ["hunt_id"], unique=False)
    op.create_index(op.f("ix_hunt_access_shared_with_id"), "hunt_access", ["shared_with_id"], unique=False)

    op.create_table(
        "player_invitations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("hunt_id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("invited_by", sa.String(64), nullable=False),
        sa.Column("invited_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("hunt_id", "email", name="uq_player_invitations_hunt_id_email"),
    )
    op.create_index(op.f("ix_player_invitations_hunt_id"), "player_invitations", ["hunt_id"], unique=False)

    op.create_table(
        "assets",
        sa.Column("asset_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.String(64), nullable=True),
        sa.Column("session_id", sa.String(36), nullable=True),
        sa.Column("url", sa.String(1024), nullable=False),
        sa.Column("mime_type", sa.String(64), nullable=False),
        sa.Column("storage_path", sa.String(1024), nullable=True),
        sa.Column("size", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("asset_id"),
    )
    op.create_index(op.f("ix_assets_owner_id"), "assets", ["owner_id"], unique=False)
    op.create_index(op.f("ix_assets_session_id"), "assets", ["session_id"], unique=False)


def downgrade() -> None:
    op.drop_table("assets")
    op.drop_table("player_invitations")
    op.drop_table("hunt_access")
    op.drop_table("submissions")
    op.drop_table("step_progress")
    op.drop_table("progress")
    op.drop_table("steps")
    op.drop_table("hunt_versions")
    op.drop_table("hunts")
    op.drop_table("counters")
