# backend/alembic/versions/001_scheduling_core.py
"""Scheduling core - directory tables, sessions and reviews

Revision ID: 001_scheduling_core
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the directory tables the scheduling core reads (teachers, learners,
skills, teacher_skills), the sessions table it owns, and the reviews table
it consults for has_review.

On PostgreSQL, two exclusion constraints back the application-level overlap
check: an active (PENDING/CONFIRMED) session may not overlap another active
session of the same teacher or of the same learner. Intervals are
half-open ('[)') so back-to-back sessions are allowed.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_scheduling_core"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create scheduling tables and overlap guards."""
    dialect_name = op.get_bind().dialect.name
    is_postgres = dialect_name == "postgresql"

    print("Creating directory tables...")
    op.create_table(
        "teachers",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_teachers_email"),
    )
    op.create_table(
        "learners",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_learners_email"),
    )
    op.create_table(
        "skills",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_skills_name"),
    )
    op.create_table(
        "teacher_skills",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("teacher_id", sa.String(26), nullable=False),
        sa.Column("skill_id", sa.String(26), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["skill_id"], ["skills.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("teacher_id", "skill_id", name="uq_teacher_skills_teacher_skill"),
    )

    print("Creating sessions table...")
    op.create_table(
        "sessions",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("teacher_id", sa.String(26), nullable=False),
        sa.Column("learner_id", sa.String(26), nullable=False),
        sa.Column("skill_id", sa.String(26), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"]),
        sa.ForeignKeyConstraint(["learner_id"], ["learners.id"]),
        sa.ForeignKeyConstraint(["skill_id"], ["skills.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('PENDING', 'CONFIRMED', 'COMPLETED')",
            name="ck_sessions_status",
        ),
        sa.CheckConstraint("start_time < end_time", name="ck_sessions_time_order"),
    )
    op.create_index("ix_sessions_id", "sessions", ["id"])
    op.create_index("ix_sessions_status", "sessions", ["status"])
    op.create_index("ix_sessions_teacher_interval", "sessions", ["teacher_id", "start_time", "end_time"])
    op.create_index("ix_sessions_learner_interval", "sessions", ["learner_id", "start_time", "end_time"])

    if is_postgres:
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            """
            ALTER TABLE sessions
              ADD CONSTRAINT sessions_no_overlap_per_teacher
              EXCLUDE USING gist (
                teacher_id WITH =,
                tstzrange(start_time, end_time, '[)') WITH &&
              )
              WHERE (status IN ('PENDING', 'CONFIRMED'))
            """
        )
        op.execute(
            """
            ALTER TABLE sessions
              ADD CONSTRAINT sessions_no_overlap_per_learner
              EXCLUDE USING gist (
                learner_id WITH =,
                tstzrange(start_time, end_time, '[)') WITH &&
              )
              WHERE (status IN ('PENDING', 'CONFIRMED'))
            """
        )

    print("Creating reviews table...")
    op.create_table(
        "reviews",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("session_id", sa.String(26), nullable=False),
        sa.Column("teacher_id", sa.String(26), nullable=False),
        sa.Column("learner_id", sa.String(26), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["session_id"], ["sessions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["learner_id"], ["learners.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("session_id", name="uq_reviews_session"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
    )
    op.create_index("ix_reviews_teacher_id", "reviews", ["teacher_id"])
    op.create_index("ix_reviews_learner_id", "reviews", ["learner_id"])

    print("Scheduling core tables created")


def downgrade() -> None:
    """Drop scheduling tables."""
    is_postgres = op.get_bind().dialect.name == "postgresql"

    op.drop_index("ix_reviews_learner_id", table_name="reviews")
    op.drop_index("ix_reviews_teacher_id", table_name="reviews")
    op.drop_table("reviews")

    if is_postgres:
        op.execute("ALTER TABLE sessions DROP CONSTRAINT IF EXISTS sessions_no_overlap_per_learner")
        op.execute("ALTER TABLE sessions DROP CONSTRAINT IF EXISTS sessions_no_overlap_per_teacher")

    op.drop_index("ix_sessions_learner_interval", table_name="sessions")
    op.drop_index("ix_sessions_teacher_interval", table_name="sessions")
    op.drop_index("ix_sessions_status", table_name="sessions")
    op.drop_index("ix_sessions_id", table_name="sessions")
    op.drop_table("sessions")

    op.drop_table("teacher_skills")
    op.drop_table("skills")
    op.drop_table("learners")
    op.drop_table("teachers")
