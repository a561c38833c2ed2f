"""Followup endpoints, including the status workflow."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.dependencies.auth import get_current_staff
from casetrack.models.base import get_db
from casetrack.models.staff import Staff
from casetrack.schemas.followup import (
    FollowupCreate,
    FollowupRead,
    FollowupStatusBatchItem,
    FollowupStatusResult,
    FollowupStatusUpdate,
    FollowupUpdate,
)
from casetrack.services import followup_service
from casetrack.services.errors import InvalidTransition, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/followups", tags=["followups"])


@router.get("", response_model=list[FollowupRead])
async def list_followups(
    mine: bool = Query(False, description="Only followups I am responsible for"),
    team_id: UUID | None = Query(None),
    student_id: UUID | None = Query(None),
    status: str | None = Query(None, description="Filter by followup status"),
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    followups = await followup_service.list_followups(
        db,
        staff_id=staff.id,
        responsible_person=staff.id if mine else None,
        team_id=team_id,
        student_id=student_id,
        status=status,
    )
    return [followup_service.to_read_dict(f) for f in followups]


@router.post("", response_model=FollowupRead, status_code=201)
async def create_followup(
    body: FollowupCreate,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    try:
        followup = await followup_service.create_followup(db, body.model_dump())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if followup_service.is_intervention(followup):
        # Entries are generated once the request's transaction has committed
        await db.commit()
        _fire_progress_generation(followup.id)

    return followup_service.to_read_dict(followup)


@router.put("/{followup_id}", response_model=FollowupRead)
async def update_followup(
    followup_id: UUID,
    body: FollowupUpdate,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    changes = body.model_dump(exclude_unset=True)
    try:
        followup = await followup_service.update_followup(db, followup_id, changes)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if followup_service.is_intervention(followup) and {"start_date", "end_date"} & changes.keys():
        await db.commit()
        _fire_progress_generation(followup.id)

    return followup_service.to_read_dict(followup)


@router.patch("/{followup_id}/status", response_model=FollowupStatusResult)
async def change_followup_status(
    followup_id: UUID,
    body: FollowupStatusUpdate,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """Complete or delete a followup. Completing also writes a Note."""
    try:
        followup, note = await followup_service.toggle_followup_status(db, followup_id, body.status, staff.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))

    return FollowupStatusResult(
        followup=followup_service.to_read_dict(followup),
        note_id=note.id if note else None,
    )


@router.post("/statuses", response_model=list[FollowupRead])
async def change_followup_statuses(
    body: list[FollowupStatusBatchItem],
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """Save the pending status edits of the followups table in one go."""
    try:
        followups = await followup_service.update_followup_statuses(
            db, [item.model_dump() for item in body], staff.id
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    return [followup_service.to_read_dict(f) for f in followups]


def _fire_progress_generation(followup_id):
    """Dispatch Celery task to create the followup's progress entries."""
    try:
        from casetrack.tasks.progress_tasks import generate_progress_entries
        generate_progress_entries.delay(str(followup_id))
    except Exception:
        # Don't fail the request if Celery is down; the nightly backfill catches up
        logger.warning("Could not dispatch progress generation for followup %s", followup_id, exc_info=True)
