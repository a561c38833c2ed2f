"""Pydantic schemas for followups."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class FollowupBase(BaseModel):
    type: str = Field(min_length=1)
    responsible_person: UUID | None = None
    followup_notes: str | None = None
    intervention: str | None = None
    metric: str | None = None
    start_date: date | None = None
    end_date: date | None = None


class FollowupCreate(FollowupBase):
    """Fields for creating a followup.

    Intervention fields are only kept when type is Intervention.
    """

    student_id: UUID

    @model_validator(mode="after")
    def check_date_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class FollowupUpdate(BaseModel):
    """Partial update; only fields that are sent are written."""

    type: str | None = Field(default=None, min_length=1)
    responsible_person: UUID | None = None
    followup_notes: str | None = None
    intervention: str | None = None
    metric: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("type")
    @classmethod
    def type_is_required(cls, v):
        # Leaving type out is fine, sending null is not
        if v is None:
            raise ValueError("type cannot be null")
        return v


class FollowupRead(FollowupBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    followup_status: str
    student_name: str = "Unknown Student"
    grade: str = ""
    responsible_person_name: str = "Unassigned"
    created_at: datetime
    updated_at: datetime


class FollowupStatusUpdate(BaseModel):
    status: str


class FollowupStatusBatchItem(BaseModel):
    id: UUID
    status: str


class FollowupStatusResult(BaseModel):
    """Outcome of a status change; ``note_id`` is set when a completion note was written."""

    followup: FollowupRead
    note_id: UUID | None = None
