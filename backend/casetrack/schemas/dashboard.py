"""Pydantic schemas for the team dashboard."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class StudentDashboardRow(BaseModel):
    """One derived display row per student. Never persisted."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID | str
    name: str
    grade: str | None = None
    photo: str | None = None
    current_status: str
    referral_type: str
    referral_reason: str
    notes_text: str
    incident_notes: str
    followups_text: str
    last_review_date: str


class TeamDashboard(BaseModel):
    """Dashboard response for one team."""

    team_id: UUID
    students: list[StudentDashboardRow]
    message: str | None = None
