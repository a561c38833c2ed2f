"""Incidents and notes, including drafts saved before a student is chosen."""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.models.incident_note import IncidentNote
from casetrack.services.errors import NotFoundError

logger = logging.getLogger(__name__)

INCIDENT = "Incident"
INCIDENT_ONLY_FIELDS = ("location", "offense")


def _clean(values: dict) -> dict:
    # Location and offense only mean something for incidents
    if values.get("type") != INCIDENT:
        for field in INCIDENT_ONLY_FIELDS:
            values[field] = None
    return values


async def create_incident(db: AsyncSession, data: dict, staff_id: UUID) -> IncidentNote:
    values = _clean({
        "student_id": data.get("student_id"),
        "student_name": data.get("student_name"),
        "type": data.get("type") or "Note",
        "date": data.get("date") or date.today(),
        "time": data.get("time"),
        "location": data.get("location"),
        "offense": data.get("offense"),
        "note": data.get("note") or "",
        "draft_status": bool(data.get("draft_status")),
    })
    if not values["draft_status"] and values["student_id"] is None:
        raise ValueError("A student is required unless the entry is saved as a draft")

    incident = IncidentNote(staff_id=staff_id, **values)
    db.add(incident)
    await db.flush()
    await db.refresh(incident)

    logger.info("%s %s recorded by %s (draft=%s)", incident.type, incident.id, staff_id, incident.draft_status)
    return incident


async def get_incident(db: AsyncSession, incident_id: UUID) -> IncidentNote:
    result = await db.execute(select(IncidentNote).where(IncidentNote.id == incident_id))
    incident = result.scalar_one_or_none()
    if not incident:
        raise NotFoundError(f"Incident {incident_id} not found")
    return incident


async def update_incident(db: AsyncSession, incident_id: UUID, changes: dict) -> IncidentNote:
    incident = await get_incident(db, incident_id)
    for field, value in changes.items():
        setattr(incident, field, value)
    if incident.type != INCIDENT:
        incident.location = None
        incident.offense = None
    if not incident.draft_status and incident.student_id is None:
        raise ValueError("A student is required unless the entry is saved as a draft")

    await db.flush()
    await db.refresh(incident)
    return incident


async def delete_incident(db: AsyncSession, incident_id: UUID) -> None:
    incident = await get_incident(db, incident_id)
    await db.delete(incident)
    await db.flush()
    logger.info("Deleted incident %s", incident_id)


async def list_incidents_by_staff(
    db: AsyncSession,
    staff_id: UUID,
    include_drafts: bool = False,
) -> list[IncidentNote]:
    query = select(IncidentNote).where(IncidentNote.staff_id == staff_id)
    if not include_drafts:
        query = query.where(IncidentNote.draft_status == False)  # noqa: E712
    result = await db.execute(query.order_by(IncidentNote.date.desc(), IncidentNote.created_at.desc()))
    return list(result.scalars().all())


async def list_drafts_by_staff(db: AsyncSession, staff_id: UUID) -> list[IncidentNote]:
    result = await db.execute(
        select(IncidentNote)
        .where(IncidentNote.staff_id == staff_id, IncidentNote.draft_status == True)  # noqa: E712
        .order_by(IncidentNote.updated_at.desc())
    )
    return list(result.scalars().all())


async def list_incidents_by_student(db: AsyncSession, student_id: UUID) -> list[IncidentNote]:
    result = await db.execute(
        select(IncidentNote)
        .where(IncidentNote.student_id == student_id, IncidentNote.draft_status == False)  # noqa: E712
        .order_by(IncidentNote.date.desc())
    )
    return list(result.scalars().all())
