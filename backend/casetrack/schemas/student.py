"""Pydantic schemas for students, reviews and status changes."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class StudentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    grade: str | None = None
    photo: str | None = None
    team_id: UUID | None = None


class ReviewCreate(BaseModel):
    """Mark a student reviewed. Defaults to today."""

    review_date: date | None = None


class ReviewRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    staff_id: UUID | None = None
    review_date: date | None = None
    created_at: datetime


class StatusChangeCreate(BaseModel):
    new_status: str


class StatusChangeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    staff_id: UUID | None = None
    previous_status: str | None = None
    new_status: str
    created_at: datetime
