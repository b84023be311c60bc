"""Changelog entries

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "changelog",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("version", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column("release_date", sa.DateTime(), nullable=False),
        sa.Column("english_content", sa.JSON(), nullable=False),
        sa.Column("spanish_content", sa.JSON(), nullable=False),
        sa.Column("release_notes_en", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("release_notes_es", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_changelog_version", "changelog", ["version"], unique=True)
    op.create_index("ix_changelog_release_date", "changelog", ["release_date"], unique=False)
    op.create_index("ix_feedback_status", "feedback", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_feedback_status", table_name="feedback")
    op.drop_index("ix_changelog_release_date", table_name="changelog")
    op.drop_index("ix_changelog_version", table_name="changelog")
    op.drop_table("changelog")
