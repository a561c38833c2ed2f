"""Followup model: interventions and communication actions for a student."""

from sqlalchemy import Column, String, Text, Date, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from casetrack.models.base import Base, TimestampMixin, UUIDMixin

INTERVENTION = "Intervention"


class Followup(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "followups"

    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    responsible_person = Column(Uuid(as_uuid=True), ForeignKey("staff.id"), index=True)

    type = Column(String(50), nullable=False)  # Intervention, Communication, Check-in, ...
    followup_notes = Column(Text)
    followup_status = Column(String(20), nullable=False, default="Active")  # Active, In Progress, Completed, Deleted

    # Intervention-only fields
    intervention = Column(Text)
    metric = Column(String(255))
    start_date = Column(Date)
    end_date = Column(Date)

    # Relationships
    student = relationship("Student")
    responsible = relationship("Staff")

    __table_args__ = (
        Index("idx_followups_student_status", "student_id", "followup_status"),
        Index("idx_followups_type_status", "type", "followup_status"),
    )
