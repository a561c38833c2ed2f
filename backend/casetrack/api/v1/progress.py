"""Progress monitoring endpoints: the table view, batch save and quick add."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.dependencies.auth import get_current_staff
from casetrack.models.base import get_db
from casetrack.models.staff import Staff
from casetrack.schemas.progress import (
    ProgressEditBatch,
    ProgressEntryRow,
    ProgressGroup,
    ProgressView,
    ProgressViewRequest,
    SaveResult,
)
from casetrack.services import progress_service
from casetrack.services.dates import today_str
from casetrack.services.edit_overlay import EditOverlay
from casetrack.services.errors import NotFoundError
from casetrack.services.view_materializer import materialize

router = APIRouter(prefix="/progress", tags=["progress"])


async def _overlay_for(db: AsyncSession, staff_id: UUID, edits) -> EditOverlay:
    rows = await progress_service.get_progress_entries(db, staff_id)
    overlay = EditOverlay(row.model_dump() for row in rows)
    overlay.stage_many(edit.model_dump(exclude_unset=True) for edit in edits)
    return overlay


@router.get("", response_model=list[ProgressEntryRow])
async def list_progress_entries(
    active_only: bool = True,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    return await progress_service.get_progress_entries(db, staff.id, active_only=active_only)


@router.post("/view", response_model=ProgressView)
async def view_progress(
    body: ProgressViewRequest,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """The progress table with the client's unsaved edits applied."""
    overlay = await _overlay_for(db, staff.id, body.edits)
    view = materialize(
        overlay.committed,
        group_by_student=body.group_by_student,
        pending_edits=overlay,
        today=today_str() if body.hide_future else None,
    )

    if body.group_by_student:
        groups = [
            ProgressGroup(student_id=g.student_id, student_name=g.student_name, entries=g.entries)
            for g in view
        ]
        return ProgressView(group_by_student=True, groups=groups, has_pending=overlay.has_pending())
    return ProgressView(group_by_student=False, entries=view, has_pending=overlay.has_pending())


@router.post("/save", response_model=SaveResult)
async def save_progress(
    body: ProgressEditBatch,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """Save pending edits. Edits for entries the staff member cannot see are ignored."""
    overlay = await _overlay_for(db, staff.id, body.edits)
    result = await progress_service.save_progress_edits(db, overlay)
    if not result.success:
        raise HTTPException(status_code=500, detail=result.error)
    return result


@router.get("/today", response_model=list[ProgressEntryRow])
async def list_today_entries(
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    return await progress_service.get_today_entries(db, staff.id)


async def _quick_update(action, db: AsyncSession, entry_id: UUID) -> ProgressEntryRow:
    try:
        return await action(db, entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{entry_id}/increment", response_model=ProgressEntryRow)
async def increment_entry(
    entry_id: UUID,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    return await _quick_update(progress_service.increment_value, db, entry_id)


@router.post("/{entry_id}/decrement", response_model=ProgressEntryRow)
async def decrement_entry(
    entry_id: UUID,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    return await _quick_update(progress_service.decrement_value, db, entry_id)


@router.post("/{entry_id}/toggle-applied", response_model=ProgressEntryRow)
async def toggle_entry_applied(
    entry_id: UUID,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    return await _quick_update(progress_service.toggle_applied, db, entry_id)
