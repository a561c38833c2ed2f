"""Student endpoints: search, lookups, reviews and status changes."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.dependencies.auth import get_current_staff
from casetrack.models.base import get_db
from casetrack.models.staff import Staff
from casetrack.schemas.student import (
    ReviewCreate,
    ReviewRead,
    StatusChangeCreate,
    StatusChangeRead,
    StudentRead,
)
from casetrack.services import student_service
from casetrack.services.dashboard_service import change_student_status, mark_reviewed
from casetrack.services.errors import NotFoundError

router = APIRouter(prefix="/students", tags=["students"])


@router.get("/search", response_model=list[StudentRead])
async def search_students(
    q: str = Query("", description="Name fragment, at least 3 characters"),
    limit: int = Query(10, ge=1, le=50),
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    return await student_service.search_students(db, q, limit=limit)


@router.get("/{student_id}", response_model=StudentRead)
async def get_student(
    student_id: UUID,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await student_service.get_student(db, student_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{student_id}/reviews", response_model=list[ReviewRead])
async def list_reviews(
    student_id: UUID,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await student_service.get_student_reviews(db, student_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{student_id}/reviews", response_model=ReviewRead, status_code=201)
async def create_review(
    student_id: UUID,
    body: ReviewCreate | None = None,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """Mark the student reviewed (today unless a date is sent)."""
    review_date = body.review_date if body else None
    try:
        return await mark_reviewed(db, student_id, staff.id, review_date)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{student_id}/status", response_model=StatusChangeRead, status_code=201)
async def create_status_change(
    student_id: UUID,
    body: StatusChangeCreate,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await change_student_status(db, student_id, body.new_status, staff.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
