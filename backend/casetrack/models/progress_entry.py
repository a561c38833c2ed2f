"""Progress entry model: one day's measurement for an intervention followup."""

from sqlalchemy import Column, Boolean, Float, Date, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship

from casetrack.models.base import Base, TimestampMixin, UUIDMixin


class ProgressEntry(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "progress_entries"

    followup_id = Column(Uuid(as_uuid=True), ForeignKey("followups.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    staff_id = Column(Uuid(as_uuid=True), ForeignKey("staff.id"))
    date = Column(Date, nullable=False, index=True)
    applied = Column(Boolean, default=False, nullable=False)
    value = Column(Float)

    # Relationships
    followup = relationship("Followup")
    student = relationship("Student")

    __table_args__ = (
        UniqueConstraint("followup_id", "date", name="uq_progress_entries_followup_date"),
    )
