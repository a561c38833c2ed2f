"""Pydantic schemas for progress monitoring."""

import datetime as dt
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class ProgressEntryRow(BaseModel):
    """A progress entry flattened with its student and followup fields."""

    id: UUID
    followup_id: UUID
    student_id: UUID | None = None
    student_name: str = "Unknown Student"
    date: dt.date
    applied: bool = False
    value: float | None = None
    intervention: str = "Unknown Intervention"
    metric: str = "Unknown Metric"
    start_date: dt.date | None = None
    end_date: dt.date | None = None


class ProgressEdit(BaseModel):
    """One pending edit; only the fields that are sent get written."""

    id: UUID | None = None
    applied: bool | None = None
    value: float | None = None


class ProgressEditBatch(BaseModel):
    edits: list[ProgressEdit] = Field(default_factory=list)


class ProgressViewRequest(BaseModel):
    group_by_student: bool = True
    edits: list[ProgressEdit] = Field(default_factory=list)
    hide_future: bool = True


class ProgressGroup(BaseModel):
    student_id: UUID | None = None
    student_name: str
    entries: list[dict[str, Any]]


class ProgressView(BaseModel):
    group_by_student: bool
    groups: list[ProgressGroup] = Field(default_factory=list)
    entries: list[dict[str, Any]] = Field(default_factory=list)
    has_pending: bool = False


class SaveResult(BaseModel):
    success: bool
    updated: list[ProgressEntryRow] = Field(default_factory=list)
    error: str | None = None
