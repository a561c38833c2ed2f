"""Team dashboard service: fetch, join, and the two dashboard write actions."""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.config import get_settings
from casetrack.models.referral import Referral
from casetrack.models.review import Review
from casetrack.models.status_change import StatusChange
from casetrack.models.student import Student
from casetrack.schemas.dashboard import StudentDashboardRow
from casetrack.services.dashboard_joiner import build_dashboard_rows
from casetrack.services.errors import NotFoundError
from casetrack.services.record_fetcher import fetch_team_records

logger = logging.getLogger(__name__)


async def fetch_dashboard(db: AsyncSession, team_id: UUID) -> list[StudentDashboardRow]:
    """Rows for every student of the team that has a recognized referral.

    Raises FetchError if any of the underlying queries fails.
    """
    settings = get_settings()
    records = await fetch_team_records(db, team_id, settings.recognized_referral_statuses)
    rows = build_dashboard_rows(
        records,
        statuses=settings.recognized_referral_statuses,
        notes_limit=settings.recent_notes_limit,
    )
    logger.info("Dashboard for team %s: %d of %d students shown", team_id, len(rows), len(records.students))
    return rows


async def _get_student(db: AsyncSession, student_id: UUID) -> Student:
    result = await db.execute(select(Student).where(Student.id == student_id))
    student = result.scalar_one_or_none()
    if not student:
        raise NotFoundError(f"Student {student_id} not found")
    return student


async def mark_reviewed(
    db: AsyncSession,
    student_id: UUID,
    staff_id: UUID,
    review_date: date | None = None,
) -> Review:
    """Record that a staff member reviewed the student (today unless a date is given)."""
    await _get_student(db, student_id)

    review = Review(
        student_id=student_id,
        staff_id=staff_id,
        review_date=review_date or date.today(),
    )
    db.add(review)
    await db.flush()
    await db.refresh(review)

    logger.info("Student %s marked reviewed by %s", student_id, staff_id)
    return review


async def change_student_status(
    db: AsyncSession,
    student_id: UUID,
    new_status: str,
    staff_id: UUID,
) -> StatusChange:
    """Append a status change; the dashboard picks up the newest one."""
    statuses = get_settings().recognized_referral_statuses
    if new_status not in statuses:
        raise ValueError(f"Unknown status {new_status!r}; expected one of {', '.join(statuses)}")

    await _get_student(db, student_id)

    result = await db.execute(
        select(StatusChange.new_status)
        .where(StatusChange.student_id == student_id)
        .order_by(StatusChange.created_at.desc())
        .limit(1)
    )
    previous_status = result.scalar_one_or_none()
    if previous_status is None:
        result = await db.execute(
            select(Referral.status)
            .where(Referral.student_id == student_id)
            .order_by(Referral.created_at.desc())
            .limit(1)
        )
        previous_status = result.scalar_one_or_none()

    change = StatusChange(
        student_id=student_id,
        staff_id=staff_id,
        previous_status=previous_status,
        new_status=new_status,
    )
    db.add(change)
    await db.flush()
    await db.refresh(change)

    logger.info("Student %s status %s -> %s", student_id, previous_status, new_status)
    return change
