"""Dashboard record fetchers: the team-scoped queries behind the dashboard.

The students query runs first; its ids seed the ``IN (...)`` filter of every
other query. The remaining queries are independent and read-only. Any failure
aborts the whole fetch with a single ``FetchError`` so callers never see a
snapshot built from a mix of old and new data.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.config import get_settings
from casetrack.models.followup import Followup
from casetrack.models.incident_note import IncidentNote
from casetrack.models.referral import Referral
from casetrack.models.review import Review
from casetrack.models.staff import Staff
from casetrack.models.status_change import StatusChange
from casetrack.models.student import Student
from casetrack.services.errors import FetchError

logger = logging.getLogger(__name__)

ACTIVE_FOLLOWUP_STATUSES = ("Active", "In Progress")


@dataclass(frozen=True)
class DashboardRecords:
    """Immutable snapshot of everything the joiner needs for one team.

    Every collection holds flat dict records in query order.
    """

    students: tuple[dict, ...] = ()
    referrals: tuple[dict, ...] = ()
    status_changes: tuple[dict, ...] = ()
    followups: tuple[dict, ...] = ()
    reviews: tuple[dict, ...] = ()
    incidents: tuple[dict, ...] = ()


async def _fetch_all(db: AsyncSession, query) -> tuple[dict, ...]:
    result = await db.execute(query)
    return tuple(dict(row) for row in result.mappings().all())


async def fetch_team_records(
    db: AsyncSession,
    team_id: UUID,
    statuses: list[str] | None = None,
) -> DashboardRecords:
    """Run the dashboard queries for a team and return one snapshot."""
    statuses = statuses or get_settings().recognized_referral_statuses

    try:
        students = await _fetch_all(
            db,
            select(Student.id, Student.name, Student.grade, Student.photo, Student.team_id)
            .where(Student.team_id == team_id)
            .order_by(Student.name),
        )
        if not students:
            return DashboardRecords()

        student_ids = [s["id"] for s in students]

        referrals = await _fetch_all(
            db,
            select(
                Referral.id,
                Referral.student_id,
                Referral.referral_type,
                Referral.referral_reason,
                Referral.referral_notes,
                Referral.status,
                Referral.created_at,
            )
            .where(Referral.student_id.in_(student_ids), Referral.status.in_(statuses))
            .order_by(Referral.created_at.desc()),
        )

        status_changes = await _fetch_all(
            db,
            select(StatusChange.student_id, StatusChange.new_status, StatusChange.created_at)
            .where(StatusChange.student_id.in_(student_ids))
            .order_by(StatusChange.created_at.desc()),
        )

        # Responsible person's name comes back pre-joined
        followups = await _fetch_all(
            db,
            select(
                Followup.id,
                Followup.student_id,
                Followup.type,
                Followup.followup_notes,
                Followup.followup_status,
                Followup.created_at,
                Followup.responsible_person,
                Followup.intervention,
                Followup.metric,
                Followup.start_date,
                Followup.end_date,
                Staff.name.label("responsible_name"),
            )
            .outerjoin(Staff, Followup.responsible_person == Staff.id)
            .where(
                Followup.student_id.in_(student_ids),
                Followup.followup_status.in_(ACTIVE_FOLLOWUP_STATUSES),
            )
            .order_by(Followup.created_at.desc()),
        )

        reviews = await _fetch_all(
            db,
            select(Review.student_id, Review.review_date, Review.created_at)
            .where(Review.student_id.in_(student_ids))
            .order_by(Review.created_at.desc()),
        )

        incidents = await _fetch_all(
            db,
            select(
                IncidentNote.id,
                IncidentNote.student_id,
                IncidentNote.type,
                IncidentNote.location,
                IncidentNote.offense,
                IncidentNote.note,
                IncidentNote.date,
                IncidentNote.time,
                IncidentNote.created_at,
            )
            .where(
                IncidentNote.student_id.in_(student_ids),
                IncidentNote.draft_status == False,  # noqa: E712
            )
            .order_by(IncidentNote.date.desc()),
        )
    except SQLAlchemyError as exc:
        logger.exception("Dashboard fetch failed for team %s", team_id)
        raise FetchError(f"Failed to load team data: {exc.__class__.__name__}") from exc

    logger.debug(
        "Fetched team %s: %d students, %d referrals, %d status changes, %d followups, %d reviews",
        team_id, len(students), len(referrals), len(status_changes), len(followups), len(reviews),
    )

    return DashboardRecords(
        students=students,
        referrals=referrals,
        status_changes=status_changes,
        followups=followups,
        reviews=reviews,
        incidents=incidents,
    )
