"""initial schema

Revision ID: 3c1f0a9d2e41
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c1f0a9d2e41"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

AI_TOOLS = "'GPT-4', 'Claude-3', 'Gemini Pro', 'Llama-2', 'PaLM-2', 'Other'"


def _ts(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade() -> None:
    """Create users, AI tools, performance history, reports and votes."""
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column("preferences", sa.JSON(), nullable=False),
        sa.Column("reports_submitted", sa.Integer(), nullable=False),
        sa.Column("reports_verified", sa.Integer(), nullable=False),
        sa.Column("total_votes", sa.Integer(), nullable=False),
        _ts("last_login_at", nullable=True),
        _ts("created_at"),
        sa.CheckConstraint("role IN ('user', 'moderator', 'admin')", name="ck_user_account_role"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_user_account_email", "user_account", ["email"], unique=False)

    op.create_table(
        "ai_tool",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("version", sa.String(length=32), nullable=False),
        sa.Column("provider", sa.String(length=100), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("capabilities", sa.JSON(), nullable=False),
        sa.Column("limitations", sa.JSON(), nullable=False),
        sa.Column("website", sa.String(length=255), nullable=False),
        sa.Column("pricing_input", sa.Float(), nullable=False),
        sa.Column("pricing_output", sa.Float(), nullable=False),
        sa.Column("pricing_currency", sa.String(length=8), nullable=False),
        sa.Column("pricing_unit", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("accuracy", sa.Float(), nullable=False),
        sa.Column("response_time", sa.Float(), nullable=False),
        sa.Column("reliability", sa.Float(), nullable=False),
        sa.Column("user_satisfaction", sa.Float(), nullable=False),
        _ts("performance_last_updated"),
        sa.Column("total_queries", sa.Integer(), nullable=False),
        sa.Column("successful_queries", sa.Integer(), nullable=False),
        sa.Column("failed_queries", sa.Integer(), nullable=False),
        sa.Column("total_mistakes", sa.Integer(), nullable=False),
        sa.Column("mistake_rate", sa.Float(), nullable=False),
        sa.Column("average_response_time", sa.Float(), nullable=False),
        sa.Column("total_cost", sa.Float(), nullable=False),
        sa.Column("active_users", sa.Integer(), nullable=False),
        _ts("created_at"),
        _ts("updated_at"),
        sa.Column("row_version", sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "category IN ('language-model', 'image-generation', 'code-generation', "
            "'multimodal', 'other')",
            name="ck_ai_tool_category",
        ),
        sa.CheckConstraint(
            "status IN ('active', 'inactive', 'maintenance', 'deprecated')",
            name="ck_ai_tool_status",
        ),
        sa.CheckConstraint(
            "mistake_rate >= 0 AND mistake_rate <= 100", name="ck_ai_tool_mistake_rate"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_ai_tool_slug", "ai_tool", ["slug"], unique=False)
    op.create_index("ix_ai_tool_status", "ai_tool", ["status"], unique=False)
    op.create_index("ix_ai_tool_accuracy", "ai_tool", ["accuracy"], unique=False)
    op.create_index("ix_ai_tool_mistake_rate", "ai_tool", ["mistake_rate"], unique=False)

    op.create_table(
        "ai_tool_performance",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tool_id", sa.Integer(), nullable=False),
        _ts("recorded_at"),
        sa.Column("accuracy", sa.Float(), nullable=False),
        sa.Column("response_time", sa.Float(), nullable=False),
        sa.Column("cost", sa.Float(), nullable=False),
        sa.Column("reliability", sa.Float(), nullable=False),
        sa.Column("user_satisfaction", sa.Float(), nullable=False),
        sa.Column("total_queries", sa.Integer(), nullable=False),
        sa.Column("successful_queries", sa.Integer(), nullable=False),
        sa.Column("failed_queries", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["tool_id"], ["ai_tool.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_ai_tool_performance_tool_recorded",
        "ai_tool_performance",
        ["tool_id", "recorded_at"],
        unique=False,
    )

    op.create_table(
        "mistake_report",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("reporter_id", sa.Integer(), nullable=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("ai_tool", sa.String(length=32), nullable=False),
        sa.Column("category", sa.String(length=16), nullable=False),
        sa.Column("severity", sa.String(length=8), nullable=False),
        sa.Column("user_query", sa.Text(), nullable=False),
        sa.Column("ai_response", sa.Text(), nullable=False),
        sa.Column("corrected_answer", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("impact", sa.Text(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("verified_by_id", sa.Integer(), nullable=True),
        _ts("verified_at", nullable=True),
        sa.Column("rejection_reason", sa.String(length=500), nullable=True),
        sa.Column("upvotes", sa.Integer(), nullable=False),
        sa.Column("downvotes", sa.Integer(), nullable=False),
        sa.Column("total_votes", sa.Integer(), nullable=False),
        sa.Column("vote_score", sa.Integer(), nullable=False),
        sa.Column("views", sa.Integer(), nullable=False),
        sa.Column("shares", sa.Integer(), nullable=False),
        _ts("created_at"),
        _ts("updated_at"),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.CheckConstraint(f"ai_tool IN ({AI_TOOLS})", name="ck_mistake_report_ai_tool"),
        sa.CheckConstraint(
            "category IN ('factual', 'logical', 'bias', 'context', 'other')",
            name="ck_mistake_report_category",
        ),
        sa.CheckConstraint(
            "severity IN ('low', 'medium', 'high')", name="ck_mistake_report_severity"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'investigating', 'verified', 'rejected')",
            name="ck_mistake_report_status",
        ),
        sa.ForeignKeyConstraint(["reporter_id"], ["user_account.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["verified_by_id"], ["user_account.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    for name, columns in (
        ("ix_mistake_report_ai_tool_created", ["ai_tool", "created_at"]),
        ("ix_mistake_report_category_created", ["category", "created_at"]),
        ("ix_mistake_report_status_created", ["status", "created_at"]),
        ("ix_mistake_report_score_created", ["vote_score", "created_at"]),
        ("ix_mistake_report_reporter_created", ["reporter_id", "created_at"]),
    ):
        op.create_index(name, "mistake_report", columns, unique=False)

    op.create_table(
        "report_vote",
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("direction", sa.String(length=8), nullable=False),
        _ts("created_at"),
        sa.CheckConstraint(
            "direction IN ('upvote', 'downvote')", name="ck_report_vote_direction"
        ),
        sa.ForeignKeyConstraint(["report_id"], ["mistake_report.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("report_id", "user_id"),
    )
    op.create_index("ix_report_vote_user_id", "report_vote", ["user_id"], unique=False)


def downgrade() -> None:
    """Drop every table created in upgrade."""
    op.drop_index("ix_report_vote_user_id", table_name="report_vote")
    op.drop_table("report_vote")
    for name in (
        "ix_mistake_report_reporter_created",
        "ix_mistake_report_score_created",
        "ix_mistake_report_status_created",
        "ix_mistake_report_category_created",
        "ix_mistake_report_ai_tool_created",
    ):
        op.drop_index(name, table_name="mistake_report")
    op.drop_table("mistake_report")
    op.drop_index("ix_ai_tool_performance_tool_recorded", table_name="ai_tool_performance")
    op.drop_table("ai_tool_performance")
    for name in (
        "ix_ai_tool_mistake_rate",
        "ix_ai_tool_accuracy",
        "ix_ai_tool_status",
        "ix_ai_tool_slug",
    ):
        op.drop_index(name, table_name="ai_tool")
    op.drop_table("ai_tool")
    op.drop_index("ix_user_account_email", table_name="user_account")
    op.drop_table("user_account")
