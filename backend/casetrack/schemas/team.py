"""Pydantic schemas for teams and staff."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TeamRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class StaffSummary(BaseModel):
    """Minimal staff info for pickers and nested responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
