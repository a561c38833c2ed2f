"""Pydantic schemas for incidents and notes."""

import datetime as dt
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class IncidentNoteCreate(BaseModel):
    """Fields for recording an incident or note.

    Drafts may be saved without a student; location and offense are only
    kept for incidents.
    """

    student_id: UUID | None = None
    student_name: str | None = None
    type: Literal["Incident", "Note"] = "Note"
    date: dt.date | None = None
    time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    location: str | None = None
    offense: str | None = None
    note: str = ""
    draft_status: bool = False


class IncidentNoteUpdate(BaseModel):
    student_id: UUID | None = None
    student_name: str | None = None
    type: Literal["Incident", "Note"] | None = None
    date: dt.date | None = None
    time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    location: str | None = None
    offense: str | None = None
    note: str | None = None
    draft_status: bool | None = None


class IncidentNoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID | None = None
    student_name: str | None = None
    staff_id: UUID | None = None
    type: str
    date: dt.date
    time: str | None = None
    location: str | None = None
    offense: str | None = None
    note: str
    draft_status: bool
    created_at: dt.datetime
