"""Referral endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.dependencies.auth import get_current_staff
from casetrack.models.base import get_db
from casetrack.models.staff import Staff
from casetrack.schemas.referral import ReferralCreate, ReferralRead, ReferralStatusUpdate
from casetrack.services import referral_service
from casetrack.services.errors import NotFoundError

router = APIRouter(prefix="/referrals", tags=["referrals"])


@router.get("", response_model=list[ReferralRead])
async def list_referrals(
    student_id: UUID | None = Query(None, description="Referrals for one student instead of my referrals"),
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    if student_id:
        return await referral_service.list_referrals_by_student(db, student_id)
    return await referral_service.list_referrals_by_staff(db, staff.id)


@router.post("", response_model=ReferralRead, status_code=201)
async def create_referral(
    body: ReferralCreate,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await referral_service.create_referral(db, body.model_dump(), staff.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{referral_id}/status", response_model=ReferralRead)
async def update_referral_status(
    referral_id: UUID,
    body: ReferralStatusUpdate,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await referral_service.update_referral_status(db, referral_id, body.status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
