"""Pydantic schemas for referrals."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ReferralCreate(BaseModel):
    """Fields for submitting a referral. Status always starts as New."""

    student_id: UUID
    referral_type: str = Field(min_length=1)
    referral_reason: str | None = None
    referral_notes: str | None = None


class ReferralRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    staff_id: UUID | None = None
    student_name: str | None = None
    referral_type: str
    referral_reason: str | None = None
    referral_notes: str | None = None
    status: str
    created_at: datetime


class ReferralStatusUpdate(BaseModel):
    status: str
