"""Initial schema: staff, teams, students, referrals, followups, notes, progress.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Staff and teams
    op.create_table(
        "staff",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )

    op.create_table(
        "teams",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "staff_teams",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("staff_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("team_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.UniqueConstraint("staff_id", "team_id", name="uq_staff_teams_staff_team"),
    )

    # Students
    op.create_table(
        "students",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, index=True),
        sa.Column("grade", sa.String(20)),
        sa.Column("photo", sa.String(500)),
        sa.Column("team_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("teams.id"), index=True),
        *_timestamps(),
    )

    op.create_table(
        "teacher_students",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("staff_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.UniqueConstraint("staff_id", "student_id", name="uq_teacher_students_staff_student"),
    )

    # Referrals and status history
    op.create_table(
        "referrals",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("staff_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("staff.id"), index=True),
        sa.Column("student_name", sa.String(255)),
        sa.Column("referral_type", sa.String(100), nullable=False),
        sa.Column("referral_reason", sa.String(255)),
        sa.Column("referral_notes", sa.Text),
        sa.Column("status", sa.String(20), nullable=False, server_default="New"),
        *_timestamps(),
    )
    op.create_index("idx_referrals_student_created", "referrals", ["student_id", "created_at"])
    op.create_index("idx_referrals_status", "referrals", ["status"])

    op.create_table(
        "status_changelog",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("staff_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("staff.id")),
        sa.Column("previous_status", sa.String(20)),
        sa.Column("new_status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_status_changelog_student_created", "status_changelog", ["student_id", "created_at"])

    # Followups
    op.create_table(
        "followups",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("responsible_person", postgresql.UUID(as_uuid=True), sa.ForeignKey("staff.id"), index=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("followup_notes", sa.Text),
        sa.Column("followup_status", sa.String(20), nullable=False, server_default="Active"),
        sa.Column("intervention", sa.Text),
        sa.Column("metric", sa.String(255)),
        sa.Column("start_date", sa.Date),
        sa.Column("end_date", sa.Date),
        *_timestamps(),
    )
    op.create_index("idx_followups_student_status", "followups", ["student_id", "followup_status"])
    op.create_index("idx_followups_type_status", "followups", ["type", "followup_status"])

    # Reviews
    op.create_table(
        "reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("staff_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("staff.id")),
        sa.Column("review_date", sa.Date),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_reviews_student_created", "reviews", ["student_id", "created_at"])

    # Incidents and notes
    op.create_table(
        "incident_notes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id", ondelete="CASCADE"), index=True),
        sa.Column("student_name", sa.String(255)),
        sa.Column("staff_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("staff.id"), index=True),
        sa.Column("type", sa.String(20), nullable=False, server_default="Note"),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("time", sa.String(5)),
        sa.Column("location", sa.String(255)),
        sa.Column("offense", sa.String(255)),
        sa.Column("note", sa.Text, nullable=False, server_default=""),
        sa.Column("draft_status", sa.Boolean, nullable=False, server_default=sa.text("false")),
        *_timestamps(),
    )
    op.create_index("idx_incident_notes_student_date", "incident_notes", ["student_id", "date"])
    op.create_index("idx_incident_notes_staff_draft", "incident_notes", ["staff_id", "draft_status"])

    # Progress monitoring
    op.create_table(
        "progress_entries",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("followup_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("followups.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("staff_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("staff.id")),
        sa.Column("date", sa.Date, nullable=False, index=True),
        sa.Column("applied", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("value", sa.Float),
        *_timestamps(),
        sa.UniqueConstraint("followup_id", "date", name="uq_progress_entries_followup_date"),
    )


def downgrade() -> None:
    op.drop_table("progress_entries")
    op.drop_table("incident_notes")
    op.drop_table("reviews")
    op.drop_table("followups")
    op.drop_table("status_changelog")
    op.drop_table("referrals")
    op.drop_table("teacher_students")
    op.drop_table("students")
    op.drop_table("staff_teams")
    op.drop_table("teams")
    op.drop_table("staff")
