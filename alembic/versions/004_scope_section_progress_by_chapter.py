"""Scope section progress by chapter.

Revision ID: 004
Revises: 003
Create Date: 2026-10-19

Changes the unique constraint from (user_id, course_id, section) to
(user_id, course_id, chapter, section) so section numbers may repeat across
chapters of the same course.
"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "004"
down_revision: str | None = "003"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Include chapter in the section progress unique constraint."""
    with op.batch_alter_table("section_progress") as batch_op:
        batch_op.drop_constraint("uq_section_progress", type_="unique")
        batch_op.create_unique_constraint(
            "uq_section_progress", ["user_id", "course_id", "chapter", "section"]
        )


def downgrade() -> None:
    """Revert to the per-section constraint."""
    # WARNING: This will fail if a section number repeats across chapters
    with op.batch_alter_table("section_progress") as batch_op:
        batch_op.drop_constraint("uq_section_progress", type_="unique")
        batch_op.create_unique_constraint(
            "uq_section_progress", ["user_id", "course_id", "section"]
        )
