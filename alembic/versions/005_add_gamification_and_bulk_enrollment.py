"""Add achievements, points, study plan sessions and bulk enrollment.

Revision ID: 005
Revises: 004
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "005"
down_revision: str | None = "004"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

NOW = sa.text("(CURRENT_TIMESTAMP)")


def upgrade() -> None:
    """Create gamification and bulk enrollment tables; extend users and study sessions."""
    with op.batch_alter_table("users") as batch_op:
        batch_op.add_column(
            sa.Column("total_points", sa.Integer(), nullable=False, server_default="0")
        )

    with op.batch_alter_table("study_sessions") as batch_op:
        batch_op.add_column(sa.Column("study_plan_id", sa.Integer(), nullable=True))
        batch_op.add_column(sa.Column("estimated_duration", sa.Integer(), nullable=True))
        batch_op.add_column(
            sa.Column("sections_completed", sa.Integer(), nullable=False, server_default="0")
        )
        batch_op.create_foreign_key(
            "fk_study_sessions_study_plan_id",
            "course_contents",
            ["study_plan_id"],
            ["id"],
            ondelete="SET NULL",
        )
        batch_op.create_index(
            batch_op.f("ix_study_sessions_study_plan_id"), ["study_plan_id"], unique=False
        )

    op.create_table(
        "achievements",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(30), nullable=False),
        sa.Column("icon", sa.String(50), nullable=True),
        sa.Column("point_value", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("key"),
    )
    op.create_index(op.f("ix_achievements_id"), "achievements", ["id"], unique=False)

    op.create_table(
        "user_achievements",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("achievement_id", sa.Integer(), nullable=False),
        sa.Column("points_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("earned_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["achievement_id"], ["achievements.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )
    op.create_index(op.f("ix_user_achievements_id"), "user_achievements", ["id"], unique=False)
    op.create_index(
        op.f("ix_user_achievements_user_id"), "user_achievements", ["user_id"], unique=False
    )

    op.create_table(
        "points_transactions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("reference_id", sa.String(100), nullable=True),
        sa.Column("balance_before", sa.Integer(), nullable=False),
        sa.Column("balance_after", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_points_transactions_id"), "points_transactions", ["id"], unique=False)
    op.create_index(
        op.f("ix_points_transactions_user_id"), "points_transactions", ["user_id"], unique=False
    )
    op.create_index(
        op.f("ix_points_transactions_created_at"),
        "points_transactions",
        ["created_at"],
        unique=False,
    )

    op.create_table(
        "bulk_enrollment_requests",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employer_id", sa.Integer(), nullable=False),
        sa.Column("student_count", sa.Integer(), nullable=False),
        sa.Column("courses", sa.JSON(), nullable=False),
        sa.Column("total_price", sa.Float(), nullable=False),
        sa.Column("discount_rate", sa.Float(), nullable=False),
        sa.Column("final_price", sa.Float(), nullable=False),
        sa.Column("contact_email", sa.String(255), nullable=False),
        sa.Column("contact_phone", sa.String(30), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("requested_start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("approved_by_id", sa.Integer(), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.ForeignKeyConstraint(["employer_id"], ["employers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["approved_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_bulk_enrollment_requests_id"), "bulk_enrollment_requests", ["id"], unique=False
    )
    op.create_index(
        op.f("ix_bulk_enrollment_requests_employer_id"),
        "bulk_enrollment_requests",
        ["employer_id"],
        unique=False,
    )

    op.create_table(
        "bulk_student_enrollments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("request_id", sa.Integer(), nullable=False),
        sa.Column("student_email", sa.String(255), nullable=False),
        sa.Column("student_first_name", sa.String(100), nullable=False),
        sa.Column("student_last_name", sa.String(100), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.ForeignKeyConstraint(
            ["request_id"], ["bulk_enrollment_requests.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_bulk_student_enrollments_id"), "bulk_student_enrollments", ["id"], unique=False
    )
    op.create_index(
        op.f("ix_bulk_student_enrollments_request_id"),
        "bulk_student_enrollments",
        ["request_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop gamification and bulk enrollment tables and the added columns."""
    op.drop_table("bulk_student_enrollments")
    op.drop_table("bulk_enrollment_requests")
    op.drop_table("points_transactions")
    op.drop_table("user_achievements")
    op.drop_table("achievements")

    with op.batch_alter_table("study_sessions") as batch_op:
        batch_op.drop_index(batch_op.f("ix_study_sessions_study_plan_id"))
        batch_op.drop_constraint("fk_study_sessions_study_plan_id", type_="foreignkey")
        batch_op.drop_column("sections_completed")
        batch_op.drop_column("estimated_duration")
        batch_op.drop_column("study_plan_id")

    with op.batch_alter_table("users") as batch_op:
        batch_op.drop_column("total_points")
