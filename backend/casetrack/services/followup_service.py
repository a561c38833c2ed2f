"""Followup service: listing, creation, and the followup status workflow.

Status workflow::

    Active ------+--> Completed
    In Progress -+--> Deleted

Completed and Deleted are terminal. Completing a followup also records a
Note on the student so the completion shows up in the recent-notes column.
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from casetrack.models.followup import Followup, INTERVENTION
from casetrack.models.incident_note import IncidentNote
from casetrack.models.staff import Staff
from casetrack.models.student import Student
from casetrack.models.team import StaffTeam
from casetrack.services.errors import InvalidTransition, NotFoundError

logger = logging.getLogger(__name__)

ACTIVE = "Active"
IN_PROGRESS = "In Progress"
COMPLETED = "Completed"
DELETED = "Deleted"

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    ACTIVE: frozenset({COMPLETED, DELETED}),
    IN_PROGRESS: frozenset({COMPLETED, DELETED}),
    COMPLETED: frozenset(),
    DELETED: frozenset(),
}

INTERVENTION_FIELDS = ("intervention", "metric", "start_date", "end_date")


def check_transition(current: str, requested: str) -> None:
    """Raise InvalidTransition unless current -> requested is allowed."""
    if requested not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransition(current, requested)


def is_intervention(followup: Followup) -> bool:
    return (followup.type or "").lower() == INTERVENTION.lower()


def completion_note_text(followup: Followup) -> str:
    if is_intervention(followup):
        return (
            f"Completed {followup.type} followup: {followup.intervention or ''} "
            f"measured by {followup.metric or ''} from {followup.start_date or ''} "
            f"to {followup.end_date or ''}. {followup.followup_notes or ''}"
        )
    return f"Completed {followup.type} followup: {followup.followup_notes or ''}"


def to_read_dict(followup: Followup) -> dict:
    """Flatten a followup with its student and responsible person's names."""
    return {
        "id": followup.id,
        "student_id": followup.student_id,
        "type": followup.type,
        "responsible_person": followup.responsible_person,
        "followup_notes": followup.followup_notes,
        "followup_status": followup.followup_status,
        "intervention": followup.intervention,
        "metric": followup.metric,
        "start_date": followup.start_date,
        "end_date": followup.end_date,
        "created_at": followup.created_at,
        "updated_at": followup.updated_at,
        "student_name": followup.student.name if followup.student else "Unknown Student",
        "grade": (followup.student.grade or "") if followup.student else "",
        "responsible_person_name": followup.responsible.name if followup.responsible else "Unassigned",
    }


def _base_query():
    return select(Followup).options(
        selectinload(Followup.student),
        selectinload(Followup.responsible),
    )


async def get_followup(db: AsyncSession, followup_id: UUID) -> Followup:
    result = await db.execute(
        _base_query().where(Followup.id == followup_id).execution_options(populate_existing=True)
    )
    followup = result.scalar_one_or_none()
    if not followup:
        raise NotFoundError(f"Followup {followup_id} not found")
    return followup


async def list_followups(
    db: AsyncSession,
    staff_id: UUID | None = None,
    responsible_person: UUID | None = None,
    team_id: UUID | None = None,
    student_id: UUID | None = None,
    status: str | None = None,
) -> list[Followup]:
    """List followups, most recently updated first.

    Deleted followups are hidden when filtering by responsible person or by
    student. Filtering by staff alone returns every followup the staff member
    can see.
    """
    query = _base_query()

    if status:
        query = query.where(Followup.followup_status == status)
    if responsible_person:
        query = query.where(Followup.responsible_person == responsible_person)
    if student_id:
        query = query.where(Followup.student_id == student_id)
    if team_id:
        query = query.join(Student, Followup.student_id == Student.id).where(Student.team_id == team_id)
    if responsible_person or student_id:
        query = query.where(Followup.followup_status != DELETED)

    query = query.order_by(Followup.updated_at.desc())
    result = await db.execute(query)
    followups = list(result.scalars().all())
    logger.debug("Listed %d followups (staff=%s, status=%s)", len(followups), staff_id, status)
    return followups


async def create_followup(db: AsyncSession, data: dict) -> Followup:
    """Create an Active followup. Intervention fields are dropped for other types."""
    result = await db.execute(select(Student.id).where(Student.id == data["student_id"]))
    if result.scalar_one_or_none() is None:
        raise NotFoundError(f"Student {data['student_id']} not found")

    values = {
        "student_id": data["student_id"],
        "type": data["type"],
        "responsible_person": data.get("responsible_person"),
        "followup_notes": data.get("followup_notes") or "",
        "followup_status": ACTIVE,
    }
    if (data["type"] or "").lower() == INTERVENTION.lower():
        for field in INTERVENTION_FIELDS:
            values[field] = data.get(field)

    followup = Followup(**values)
    db.add(followup)
    await db.flush()

    logger.info("Created %s followup %s for student %s", followup.type, followup.id, followup.student_id)
    return await get_followup(db, followup.id)


async def update_followup(db: AsyncSession, followup_id: UUID, changes: dict) -> Followup:
    followup = await get_followup(db, followup_id)
    for field, value in changes.items():
        setattr(followup, field, value)
    await db.flush()
    # updated_at is set by the database; responsible may point at a new person
    await db.refresh(followup, attribute_names=["updated_at", "responsible"])
    return followup


async def toggle_followup_status(
    db: AsyncSession,
    followup_id: UUID,
    new_status: str,
    staff_id: UUID,
) -> tuple[Followup, IncidentNote | None]:
    """Move a followup to Completed or Deleted.

    Returns the followup and, for completions, the Note that documents it.
    Raises InvalidTransition for anything the workflow does not allow.
    """
    followup = await get_followup(db, followup_id)
    check_transition(followup.followup_status, new_status)

    followup.followup_status = new_status

    note = None
    if new_status == COMPLETED:
        note = IncidentNote(
            student_id=followup.student_id,
            student_name=followup.student.name if followup.student else "Unknown Student",
            staff_id=staff_id,
            type="Note",
            date=date.today(),
            note=completion_note_text(followup),
            draft_status=False,
        )
        db.add(note)

    await db.flush()
    await db.refresh(followup, attribute_names=["updated_at"])

    logger.info("Followup %s -> %s by %s", followup_id, new_status, staff_id)
    return followup, note


async def update_followup_statuses(
    db: AsyncSession,
    updates: list[dict],
    staff_id: UUID,
) -> list[Followup]:
    """Apply a batch of ``{id, status}`` edits.

    Every transition is checked before anything is written, so one illegal
    edit rejects the whole batch. A followup may appear only once.
    """
    ids = [UUID(str(update["id"])) for update in updates]
    duplicates = sorted({str(i) for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ValueError(f"Followups listed more than once: {', '.join(duplicates)}")

    followups = []
    for update in updates:
        followup = await get_followup(db, update["id"])
        check_transition(followup.followup_status, update["status"])
        followups.append((followup, update["status"]))

    results = []
    for followup, status in followups:
        updated, _ = await toggle_followup_status(db, followup.id, status, staff_id)
        results.append(updated)
    return results


async def get_team_members(db: AsyncSession, staff_id: UUID, team_id: UUID | None = None) -> list[Staff]:
    """Every staff member sharing at least one team with ``staff_id``, deduplicated.

    With ``team_id``, only that team is considered.
    """
    team_ids = select(StaffTeam.team_id).where(StaffTeam.staff_id == staff_id)
    if team_id is not None:
        team_ids = team_ids.where(StaffTeam.team_id == team_id)
    result = await db.execute(
        select(Staff)
        .join(StaffTeam, StaffTeam.staff_id == Staff.id)
        .where(StaffTeam.team_id.in_(team_ids))
        .order_by(Staff.name)
    )
    members: dict[UUID, Staff] = {}
    for staff in result.scalars().all():
        members.setdefault(staff.id, staff)
    return list(members.values())
