"""Initial schema: users, notes, tags, note_tags, files

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

from noted.core.models.types import GUID, JSONDict


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns():
    return [
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("telegram_id", sa.BigInteger(), nullable=False, unique=True),
        sa.Column("telegram_data", JSONDict(), nullable=False),
    )
    op.create_index("idx_users_telegram_id", "users", ["telegram_id"])

    op.create_table(
        "notes",
        *_base_columns(),
        sa.Column("title", sa.Text(), nullable=False, server_default=""),
        sa.Column("body", sa.Text(), nullable=False, server_default=""),
        sa.Column("user_id", GUID(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    )
    op.create_index("idx_notes_user_id", "notes", ["user_id"])
    op.create_index("idx_notes_user_created", "notes", ["user_id", "created_at"])

    op.create_table(
        "tags",
        *_base_columns(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("user_id", GUID(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("user_id", "name", name="uq_tags_user_name"),
        sa.CheckConstraint("name = lower(name)", name="ck_tags_name_lowercase"),
    )
    op.create_index("idx_tags_user_id", "tags", ["user_id"])

    op.create_table(
        "note_tags",
        sa.Column("note_id", GUID(), sa.ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("tag_id", GUID(), sa.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index("idx_note_tags_tag_id", "note_tags", ["tag_id"])

    op.create_table(
        "files",
        *_base_columns(),
        sa.Column("path", sa.String(length=1024), nullable=False),
        sa.Column("mime_type", sa.String(length=255), nullable=False),
        sa.Column("filename", sa.String(length=255), nullable=True),
        sa.Column("note_id", GUID(), sa.ForeignKey("notes.id", ondelete="CASCADE"), nullable=False),
    )
    op.create_index("idx_files_note_id", "files", ["note_id"])


def downgrade() -> None:
    op.drop_table("files")
    op.drop_table("note_tags")
    op.drop_table("tags")
    op.drop_table("notes")
    op.drop_table("users")
