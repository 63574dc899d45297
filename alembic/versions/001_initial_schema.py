# alembic/versions/001_initial_schema.py
"""Initial schema - users, tutor profiles, sessions, feedback, doubts

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

All tables are created in their final form. Status-like columns are
VARCHAR with CHECK constraints rather than database ENUM types.
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the booking workflow schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("role IN ('student', 'tutor')", name="ck_users_role"),
        comment="Students and tutors",
    )
    op.create_index("ix_users_id", "users", ["id"], unique=False)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "tutor_profiles",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(26), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("years_experience", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_sessions", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", name="uq_tutor_profiles_user_id"),
        sa.CheckConstraint("years_experience >= 0", name="ck_tutor_profiles_experience"),
        sa.CheckConstraint("hourly_rate >= 0", name="ck_tutor_profiles_rate"),
        sa.CheckConstraint("total_sessions >= 0", name="ck_tutor_profiles_sessions"),
        sa.CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 5)",
            name="ck_tutor_profiles_rating_range",
        ),
        comment="Public tutor profile with derived rating and session aggregates",
    )
    op.create_index("ix_tutor_profiles_id", "tutor_profiles", ["id"], unique=False)

    op.create_table(
        "tutor_subjects",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("tutor_profile_id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("name_key", sa.String(100), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tutor_profile_id"], ["tutor_profiles.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("tutor_profile_id", "name_key", name="uq_tutor_subjects_profile_key"),
    )
    op.create_index(
        "ix_tutor_subjects_tutor_profile_id", "tutor_subjects", ["tutor_profile_id"], unique=False
    )
    op.create_index("ix_tutor_subjects_name_key", "tutor_subjects", ["name_key"], unique=False)

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("student_id", sa.String(26), nullable=False),
        sa.Column("tutor_id", sa.String(26), nullable=False),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("topic", sa.String(200), nullable=True),
        sa.Column("level", sa.String(50), nullable=True),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("session_time", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("student_message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("origin", sa.String(20), nullable=False, server_default="student_initiated"),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tutor_notes", sa.Text(), nullable=True),
        sa.Column("closure_kind", sa.String(20), nullable=True),
        sa.Column("cancelled_by_id", sa.String(26), nullable=True),
        sa.Column("cancelled_by_role", sa.String(20), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column("tutor_feedback_rating", sa.Integer(), nullable=True),
        sa.Column("tutor_feedback_strengths", sa.Text(), nullable=True),
        sa.Column("tutor_feedback_improvements", sa.Text(), nullable=True),
        sa.Column("tutor_feedback_notes", sa.Text(), nullable=True),
        sa.Column("tutor_feedback_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["tutor_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["cancelled_by_id"], ["users.id"]),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="ck_sessions_status",
        ),
        sa.CheckConstraint(
            "origin IN ('student_initiated', 'tutor_initiated')",
            name="ck_sessions_origin",
        ),
        sa.CheckConstraint(
            "closure_kind IS NULL OR closure_kind IN ('rejected', 'cancelled')",
            name="ck_sessions_closure_kind",
        ),
        sa.CheckConstraint("duration_minutes > 0", name="ck_sessions_duration_positive"),
        sa.CheckConstraint("hourly_rate >= 0", name="ck_sessions_rate_non_negative"),
        sa.CheckConstraint(
            "progress >= 0 AND progress <= 100", name="ck_sessions_progress_range"
        ),
        sa.CheckConstraint(
            "tutor_feedback_rating IS NULL OR "
            "(tutor_feedback_rating >= 1 AND tutor_feedback_rating <= 5)",
            name="ck_sessions_tutor_feedback_rating",
        ),
        comment="Tutoring sessions (bookings); never deleted",
    )
    op.create_index("ix_sessions_id", "sessions", ["id"], unique=False)
    op.create_index("ix_sessions_student_id", "sessions", ["student_id"], unique=False)
    op.create_index("ix_sessions_tutor_id", "sessions", ["tutor_id"], unique=False)
    op.create_index("ix_sessions_status", "sessions", ["status"], unique=False)
    op.create_index(
        "ix_sessions_tutor_slot",
        "sessions",
        ["tutor_id", "session_date", "session_time", "status"],
        unique=False,
    )

    op.create_table(
        "feedback",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("booking_id", sa.String(26), nullable=False),
        sa.Column("student_id", sa.String(26), nullable=False),
        sa.Column("tutor_id", sa.String(26), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["booking_id"], ["sessions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tutor_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("booking_id", "student_id", name="uq_feedback_booking_student"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedback_rating_range"),
        comment="Student ratings of completed sessions",
    )
    op.create_index("idx_feedback_booking", "feedback", ["booking_id"], unique=False)
    op.create_index("ix_feedback_tutor_id", "feedback", ["tutor_id"], unique=False)

    op.create_table(
        "doubts",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("student_id", sa.String(26), nullable=False),
        sa.Column("tutor_id", sa.String(26), nullable=False),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("urgency", sa.String(10), nullable=False, server_default="normal"),
        sa.Column("status", sa.String(10), nullable=False, server_default="open"),
        sa.Column("reply", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("replied_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["tutor_id"], ["users.id"]),
        sa.CheckConstraint("status IN ('open', 'answered')", name="ck_doubts_status"),
        sa.CheckConstraint(
            "urgency IN ('normal', 'high', 'urgent')", name="ck_doubts_urgency"
        ),
        sa.CheckConstraint(
            "(status = 'open' AND reply IS NULL AND replied_at IS NULL) OR "
            "(status = 'answered' AND reply IS NOT NULL AND replied_at IS NOT NULL)",
            name="ck_doubts_reply_consistency",
        ),
        comment="Student questions addressed to a tutor, answered once",
    )
    op.create_index("ix_doubts_id", "doubts", ["id"], unique=False)
    op.create_index("ix_doubts_student_id", "doubts", ["student_id"], unique=False)
    op.create_index("ix_doubts_tutor_id", "doubts", ["tutor_id"], unique=False)
    op.create_index("ix_doubts_status", "doubts", ["status"], unique=False)
    op.create_index("ix_doubts_tutor_status", "doubts", ["tutor_id", "status"], unique=False)


def downgrade() -> None:
    """Drop the booking workflow schema."""
    op.drop_table("doubts")
    op.drop_table("feedback")
    op.drop_table("sessions")
    op.drop_table("tutor_subjects")
    op.drop_table("tutor_profiles")
    op.drop_table("users")
