"""Progress monitoring: daily entries for intervention followups.

Each Active intervention followup gets one ProgressEntry per weekday between
its start and end dates. Staff see the entries for their related students
(team members plus direct teacher links) and record whether the intervention
was applied that day and the measured value.
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from casetrack.config import get_settings
from casetrack.models.followup import Followup, INTERVENTION
from casetrack.models.progress_entry import ProgressEntry
from casetrack.models.student import Student
from casetrack.models.team import StaffTeam, TeacherStudent
from casetrack.schemas.progress import ProgressEntryRow, SaveResult
from casetrack.services.dates import weekday_dates
from casetrack.services.edit_overlay import EditOverlay
from casetrack.services.errors import NotFoundError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("applied", "value")


async def get_related_students(db: AsyncSession, staff_id: UUID) -> list[Student]:
    """Students on the staff member's teams plus directly linked students, deduplicated."""
    team_ids = select(StaffTeam.team_id).where(StaffTeam.staff_id == staff_id)
    team_students = await db.execute(select(Student).where(Student.team_id.in_(team_ids)))

    linked_ids = select(TeacherStudent.student_id).where(TeacherStudent.staff_id == staff_id)
    linked_students = await db.execute(select(Student).where(Student.id.in_(linked_ids)))

    students: dict[UUID, Student] = {}
    for student in [*team_students.scalars().all(), *linked_students.scalars().all()]:
        students.setdefault(student.id, student)
    return list(students.values())


def _entry_query():
    return (
        select(
            ProgressEntry.id,
            ProgressEntry.followup_id,
            ProgressEntry.student_id,
            ProgressEntry.date,
            ProgressEntry.applied,
            ProgressEntry.value,
            Student.name.label("student_name"),
            Followup.intervention,
            Followup.metric,
            Followup.start_date,
            Followup.end_date,
        )
        .outerjoin(Student, ProgressEntry.student_id == Student.id)
        .outerjoin(Followup, ProgressEntry.followup_id == Followup.id)
    )


def _to_row(record) -> ProgressEntryRow:
    return ProgressEntryRow(
        id=record["id"],
        followup_id=record["followup_id"],
        student_id=record["student_id"],
        student_name=record["student_name"] or "Unknown Student",
        date=record["date"],
        applied=bool(record["applied"]),
        value=record["value"],
        intervention=record["intervention"] or "Unknown Intervention",
        metric=record["metric"] or "Unknown Metric",
        start_date=record["start_date"],
        end_date=record["end_date"],
    )


async def _fetch_rows(db: AsyncSession, query) -> list[ProgressEntryRow]:
    result = await db.execute(query)
    return [_to_row(record) for record in result.mappings().all()]


async def _intervention_followup_ids(db: AsyncSession, student_ids: list[UUID], active_only: bool) -> list[UUID]:
    query = select(Followup.id).where(
        Followup.type == INTERVENTION,
        Followup.student_id.in_(student_ids),
    )
    if active_only:
        query = query.where(Followup.followup_status == "Active")
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_progress_entries(
    db: AsyncSession,
    staff_id: UUID,
    active_only: bool = True,
) -> list[ProgressEntryRow]:
    """All progress entries for the staff member's related students, oldest date first."""
    students = await get_related_students(db, staff_id)
    if not students:
        logger.debug("No related students for staff %s", staff_id)
        return []

    followup_ids = await _intervention_followup_ids(db, [s.id for s in students], active_only)
    if not followup_ids:
        return []

    return await _fetch_rows(
        db,
        _entry_query()
        .where(ProgressEntry.followup_id.in_(followup_ids))
        .order_by(ProgressEntry.date.asc()),
    )


async def save_progress_edits(
    db: AsyncSession,
    edits: EditOverlay | list[dict],
    chunk_size: int | None = None,
) -> SaveResult:
    """Write pending ``{id, applied?, value?}`` edits.

    Edits are applied in chunks; only the fields present in an edit are
    written and edits without an id are skipped. On failure the session is
    rolled back and a single error message is returned. When given an
    EditOverlay, its drafts are committed on success and kept on failure.
    """
    overlay = edits if isinstance(edits, EditOverlay) else None
    pending = overlay.pending_edits() if overlay is not None else [dict(e) for e in edits]
    if not pending:
        return SaveResult(success=True)

    chunk_size = chunk_size or get_settings().progress_save_chunk_size
    updated_ids: list[UUID] = []

    try:
        for start in range(0, len(pending), chunk_size):
            for edit in pending[start:start + chunk_size]:
                if edit.get("id") is None:
                    continue
                values = {f: edit[f] for f in EDITABLE_FIELDS if f in edit}
                if not values:
                    continue

                entry_id = UUID(str(edit["id"]))
                result = await db.execute(
                    update(ProgressEntry)
                    .where(ProgressEntry.id == entry_id)
                    .values(**values)
                )
                if result.rowcount:
                    updated_ids.append(entry_id)
                else:
                    logger.warning("Progress entry %s not found, edit skipped", entry_id)
            await db.flush()

        rows = []
        if updated_ids:
            rows = await _fetch_rows(
                db,
                _entry_query().where(ProgressEntry.id.in_(updated_ids)).order_by(ProgressEntry.date.asc()),
            )
    except SQLAlchemyError as exc:
        logger.exception("Saving %d progress edits failed", len(pending))
        await db.rollback()
        return SaveResult(success=False, error=f"Failed to save progress: {exc.__class__.__name__}")

    logger.info("Saved %d progress edits", len(updated_ids))
    if overlay is not None:
        overlay.commit([row.model_dump() for row in rows])
    return SaveResult(success=True, updated=rows)


# --- Quick add ---

async def get_today_entries(
    db: AsyncSession,
    staff_id: UUID,
    today: date | None = None,
) -> list[ProgressEntryRow]:
    """Today's entries for Active interventions whose date range contains today."""
    today = today or date.today()

    students = await get_related_students(db, staff_id)
    if not students:
        return []

    result = await db.execute(
        select(Followup.id).where(
            Followup.type == INTERVENTION,
            Followup.followup_status == "Active",
            Followup.student_id.in_([s.id for s in students]),
            Followup.start_date.is_not(None),
            Followup.end_date.is_not(None),
            Followup.start_date <= today,
            Followup.end_date >= today,
        )
    )
    followup_ids = list(result.scalars().all())
    if not followup_ids:
        return []

    return await _fetch_rows(
        db,
        _entry_query()
        .where(ProgressEntry.followup_id.in_(followup_ids), ProgressEntry.date == today)
        .order_by(Student.name),
    )


async def _get_entry(db: AsyncSession, entry_id: UUID) -> ProgressEntry:
    result = await db.execute(select(ProgressEntry).where(ProgressEntry.id == entry_id))
    entry = result.scalar_one_or_none()
    if not entry:
        raise NotFoundError(f"Progress entry {entry_id} not found")
    return entry


async def _save_entry(db: AsyncSession, entry: ProgressEntry) -> ProgressEntryRow:
    await db.flush()
    rows = await _fetch_rows(db, _entry_query().where(ProgressEntry.id == entry.id))
    return rows[0]


async def increment_value(db: AsyncSession, entry_id: UUID) -> ProgressEntryRow:
    entry = await _get_entry(db, entry_id)
    entry.value = (entry.value or 0) + 1
    return await _save_entry(db, entry)


async def decrement_value(db: AsyncSession, entry_id: UUID) -> ProgressEntryRow:
    """Decrease the value by one, never below zero."""
    entry = await _get_entry(db, entry_id)
    entry.value = max(0, (entry.value or 0) - 1)
    return await _save_entry(db, entry)


async def toggle_applied(db: AsyncSession, entry_id: UUID) -> ProgressEntryRow:
    entry = await _get_entry(db, entry_id)
    entry.applied = not entry.applied
    return await _save_entry(db, entry)


# --- Entry generation (Celery workers, sync session) ---

def ensure_progress_entries(session: Session, followup: Followup) -> int:
    """Create any missing weekday entries for an intervention followup.

    Safe to run repeatedly; dates that already have an entry are skipped.
    Returns the number of entries created.
    """
    if (followup.type or "").lower() != INTERVENTION.lower():
        return 0
    if not followup.start_date or not followup.end_date:
        logger.warning("Intervention followup %s has no date range", followup.id)
        return 0

    existing = set(
        session.execute(
            select(ProgressEntry.date).where(ProgressEntry.followup_id == followup.id)
        ).scalars().all()
    )

    created = 0
    for entry_date in weekday_dates(followup.start_date, followup.end_date):
        if entry_date in existing:
            continue
        session.add(
            ProgressEntry(
                followup_id=followup.id,
                student_id=followup.student_id,
                staff_id=followup.responsible_person,
                date=entry_date,
                applied=False,
            )
        )
        created += 1

    session.flush()
    return created
