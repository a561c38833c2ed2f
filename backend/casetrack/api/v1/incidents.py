"""Incident and note endpoints, including drafts."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.dependencies.auth import get_current_staff
from casetrack.models.base import get_db
from casetrack.models.staff import Staff
from casetrack.schemas.incident_note import IncidentNoteCreate, IncidentNoteRead, IncidentNoteUpdate
from casetrack.services import incident_service
from casetrack.services.errors import NotFoundError

router = APIRouter(prefix="/incidents", tags=["incidents"])


@router.get("", response_model=list[IncidentNoteRead])
async def list_incidents(
    student_id: UUID | None = Query(None, description="Notes for one student instead of my notes"),
    include_drafts: bool = False,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    if student_id:
        return await incident_service.list_incidents_by_student(db, student_id)
    return await incident_service.list_incidents_by_staff(db, staff.id, include_drafts=include_drafts)


@router.get("/drafts", response_model=list[IncidentNoteRead])
async def list_drafts(
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    return await incident_service.list_drafts_by_staff(db, staff.id)


@router.post("", response_model=IncidentNoteRead, status_code=201)
async def create_incident(
    body: IncidentNoteCreate,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await incident_service.create_incident(db, body.model_dump(), staff.id)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.put("/{incident_id}", response_model=IncidentNoteRead)
async def update_incident(
    incident_id: UUID,
    body: IncidentNoteUpdate,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await incident_service.update_incident(db, incident_id, body.model_dump(exclude_unset=True))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.delete("/{incident_id}", status_code=204)
async def delete_incident(
    incident_id: UUID,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    try:
        await incident_service.delete_incident(db, incident_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)
