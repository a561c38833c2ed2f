"""Student model."""

from sqlalchemy import Column, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from casetrack.models.base import Base, TimestampMixin, UUIDMixin


class Student(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "students"

    name = Column(String(255), nullable=False, index=True)
    grade = Column(String(20))
    photo = Column(String(500))
    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.id"), index=True)

    # Relationships
    team = relationship("Team", back_populates="students")
