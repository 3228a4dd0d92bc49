"""add achievement tables and seed the catalog

Revision ID: c4e6a8b0d2f3
Revises: b8d2f4a6c0e1
Create Date: 2026-10-01 00:20:00.000000

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

from app.core.gamification.catalog import ACHIEVEMENTS


revision = "c4e6a8b0d2f3"
down_revision = "b8d2f4a6c0e1"
branch_labels = None
depends_on = None


def upgrade() -> None:
    achievements = op.create_table(
        "achievements",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("icon", sa.String(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "user_achievements",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("achievement_id", sa.String(), nullable=False),
        sa.Column(
            "unlocked_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["achievement_id"],
            ["achievements.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id",
            "achievement_id",
            name="uq_user_achievement",
        ),
    )
    op.create_index(
        "ix_user_achievements_user_id", "user_achievements", ["user_id"]
    )

    op.bulk_insert(
        achievements,
        [
            {
                "id": item.id,
                "title": item.title,
                "description": item.description,
                "icon": item.icon,
                "sort_order": position,
            }
            for position, item in enumerate(ACHIEVEMENTS)
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_user_achievements_user_id", table_name="user_achievements")
    op.drop_table("user_achievements")
    op.drop_table("achievements")
