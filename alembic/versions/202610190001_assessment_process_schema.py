"""Assessment processes, status history and goal categories

Revision ID: 202610190001
Revises:
Create Date: 2026-10-19 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610190001"
down_revision = None
branch_labels = None
depends_on = None

process_status_enum = sa.Enum(
    "in_definition",
    "in_self_assessment",
    "awaiting_manager_assessment",
    "completed",
    name="assessment_process_status",
)


def upgrade() -> None:
    op.create_table(
        "assessment_processes",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "status",
            process_status_enum,
            nullable=False,
            server_default="in_definition",
        ),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_assessment_processes_status", "assessment_processes", ["status"])
    op.create_index("ix_assessment_processes_active", "assessment_processes", ["active"])

    op.create_table(
        "assessment_process_status_history",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "process_id",
            sa.String(length=36),
            sa.ForeignKey("assessment_processes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", process_status_enum, nullable=False),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("changed_by_id", sa.String(length=64), nullable=False),
        sa.Column("changed_by_name", sa.String(length=255), nullable=False),
    )
    op.create_index(
        "ix_assessment_process_status_history_process_id",
        "assessment_process_status_history",
        ["process_id"],
    )

    op.create_table(
        "goal_categories",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False, unique=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )


def downgrade() -> None:
    op.drop_table("goal_categories")
    op.drop_index(
        "ix_assessment_process_status_history_process_id",
        table_name="assessment_process_status_history",
    )
    op.drop_table("assessment_process_status_history")
    op.drop_index("ix_assessment_processes_active", table_name="assessment_processes")
    op.drop_index("ix_assessment_processes_status", table_name="assessment_processes")
    op.drop_table("assessment_processes")
    process_status_enum.drop(op.get_bind(), checkfirst=True)
