"""Incident / note model: dated observations, optionally saved as drafts."""

from sqlalchemy import Column, String, Text, Boolean, Date, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from casetrack.models.base import Base, TimestampMixin, UUIDMixin


class IncidentNote(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "incident_notes"

    # Drafts may be saved before a student is picked
    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), index=True)
    student_name = Column(String(255))
    staff_id = Column(Uuid(as_uuid=True), ForeignKey("staff.id"), index=True)

    type = Column(String(20), nullable=False, default="Note")  # Incident, Note
    date = Column(Date, nullable=False)
    time = Column(String(5))  # HH:MM
    location = Column(String(255))
    offense = Column(String(255))
    note = Column(Text, nullable=False, default="")
    draft_status = Column(Boolean, default=False, nullable=False)

    student = relationship("Student")

    __table_args__ = (
        Index("idx_incident_notes_student_date", "student_id", "date"),
        Index("idx_incident_notes_staff_draft", "staff_id", "draft_status"),
    )
