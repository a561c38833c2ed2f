"""Staff model: school staff members who submit and review cases."""

from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from casetrack.models.base import Base, TimestampMixin, UUIDMixin


class Staff(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "staff"

    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    team_links = relationship("StaffTeam", back_populates="staff", cascade="all, delete-orphan")
