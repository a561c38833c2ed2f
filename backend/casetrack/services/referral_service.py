"""Referral submission and status updates."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.models.referral import Referral, REFERRAL_STATUSES
from casetrack.services.errors import NotFoundError
from casetrack.services.student_service import get_student

logger = logging.getLogger(__name__)


async def create_referral(db: AsyncSession, data: dict, staff_id: UUID) -> Referral:
    """Submit a referral. New referrals always start in status New."""
    student = await get_student(db, data["student_id"])

    referral = Referral(
        student_id=student.id,
        student_name=student.name,
        staff_id=staff_id,
        referral_type=data["referral_type"],
        referral_reason=data.get("referral_reason"),
        referral_notes=data.get("referral_notes"),
        status="New",
    )
    db.add(referral)
    await db.flush()
    await db.refresh(referral)

    logger.info("Referral %s created for student %s by %s", referral.id, student.id, staff_id)
    return referral


async def list_referrals_by_staff(db: AsyncSession, staff_id: UUID) -> list[Referral]:
    result = await db.execute(
        select(Referral).where(Referral.staff_id == staff_id).order_by(Referral.created_at.desc())
    )
    return list(result.scalars().all())


async def list_referrals_by_student(db: AsyncSession, student_id: UUID) -> list[Referral]:
    result = await db.execute(
        select(Referral).where(Referral.student_id == student_id).order_by(Referral.created_at.desc())
    )
    return list(result.scalars().all())


async def update_referral_status(db: AsyncSession, referral_id: UUID, status: str) -> Referral:
    if status not in REFERRAL_STATUSES:
        raise ValueError(f"Unknown referral status {status!r}")

    result = await db.execute(select(Referral).where(Referral.id == referral_id))
    referral = result.scalar_one_or_none()
    if not referral:
        raise NotFoundError(f"Referral {referral_id} not found")

    referral.status = status
    await db.flush()
    await db.refresh(referral)
    return referral
