"""users, shared documents and edit locks

Revision ID: 3e1c9a4b7d20
Revises:
Create Date: 2026-10-19 10:12:41.118203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3e1c9a4b7d20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True
        ),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "shared_documents",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True
        ),
        sa.Column(
            "updated_by",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    op.create_index("ix_shared_documents_key", "shared_documents", ["key"], unique=True)

    # 리소스당 1행 (unique) - 만료된 행은 갱신 시 덮어씀
    op.create_table(
        "edit_locks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("resource_key", sa.String(length=64), nullable=False),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("acquired_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_edit_locks_resource_key", "edit_locks", ["resource_key"], unique=True)
    op.create_index("ix_edit_locks_user_id", "edit_locks", ["user_id"])
    op.create_index("ix_edit_locks_expires_at", "edit_locks", ["expires_at"])


def downgrade() -> None:
    op.drop_index("ix_edit_locks_expires_at", table_name="edit_locks")
    op.drop_index("ix_edit_locks_user_id", table_name="edit_locks")
    op.drop_index("ix_edit_locks_resource_key", table_name="edit_locks")
    op.drop_table("edit_locks")
    op.drop_index("ix_shared_documents_key", table_name="shared_documents")
    op.drop_table("shared_documents")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
