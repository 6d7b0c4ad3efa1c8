"""Create users and errors tables

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

user_role_enum = sa.Enum("user", "admin", name="user_role")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("role", user_role_enum, nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "errors",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("severity", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("stack", sa.Text(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("resolved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolve_comment", sa.Text(), nullable=True),
        sa.Column("resolved_by", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        # Resolution metadata is all-or-nothing
        sa.CheckConstraint(
            "(resolved AND resolved_at IS NOT NULL AND resolve_comment IS NOT NULL "
            "AND resolved_by IS NOT NULL) OR (NOT resolved AND resolved_at IS NULL "
            "AND resolve_comment IS NULL AND resolved_by IS NULL)",
            name="ck_errors_resolution_consistent",
        ),
    )
    op.create_index("ix_errors_resolved", "errors", ["resolved"])
    op.create_index("ix_errors_category", "errors", ["category"])
    op.create_index("ix_errors_severity", "errors", ["severity"])
    op.create_index("ix_errors_created_at", "errors", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_errors_created_at", "errors")
    op.drop_index("ix_errors_severity", "errors")
    op.drop_index("ix_errors_category", "errors")
    op.drop_index("ix_errors_resolved", "errors")
    op.drop_table("errors")
    op.drop_index("ix_users_email", "users")
    op.drop_table("users")
    user_role_enum.drop(op.get_bind(), checkfirst=True)
