"""users and follow edges

Revision ID: 0001_users_and_follows
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_users_and_follows"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("uuid", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("created_by_uuid", sa.String(36), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("updated_by_uuid", sa.String(36), nullable=True),
        sa.Column("updated_at", sa.BigInteger(), nullable=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_user_follows",
        sa.Column(
            "follower",
            sa.String(36),
            sa.ForeignKey("users.uuid", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "followed",
            sa.String(36),
            sa.ForeignKey("users.uuid", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "user_source_follows",
        sa.Column(
            "follower",
            sa.String(36),
            sa.ForeignKey("users.uuid", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("followed", sa.String(36), primary_key=True),
    )
    op.create_index("ix_user_source_follows_followed", "user_source_follows", ["followed"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_user_source_follows_followed", table_name="user_source_follows")
    op.drop_table("user_source_follows")
    op.drop_table("user_user_follows")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
