"""Create users and thoughts tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema: `users` (credentials + access token) and `thoughts`.
Rollback: downgrade() drops both tables (destructive).
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
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(20), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("access_token", sa.String(256), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_access_token", "users", ["access_token"], unique=True)

    op.create_table(
        "thoughts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("message", sa.String(140), nullable=False),
        sa.Column("hearts", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "category",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'General'"),
        ),
        sa.Column("created_by", sa.String(20), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("hearts >= 0", name="ck_thoughts_hearts_non_negative"),
    )
    op.create_index("ix_thoughts_created_by", "thoughts", ["created_by"])
    # DESC indexes back sortBy=date and sortBy=hearts
    op.create_index("idx_thoughts_created_at", "thoughts", [sa.text("created_at DESC")])
    op.create_index("idx_thoughts_hearts", "thoughts", [sa.text("hearts DESC")])


def downgrade() -> None:
    op.drop_index("idx_thoughts_hearts", table_name="thoughts")
    op.drop_index("idx_thoughts_created_at", table_name="thoughts")
    op.drop_index("ix_thoughts_created_by", table_name="thoughts")
    op.drop_table("thoughts")
    op.drop_index("ix_users_access_token", table_name="users")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
