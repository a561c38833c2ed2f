"""Status changelog model: append-only log of student status transitions."""

from sqlalchemy import Column, String, DateTime, ForeignKey, Index, Uuid, func

from casetrack.models.base import Base, UUIDMixin


class StatusChange(UUIDMixin, Base):
    __tablename__ = "status_changelog"

    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    staff_id = Column(Uuid(as_uuid=True), ForeignKey("staff.id"))
    previous_status = Column(String(20))
    new_status = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_status_changelog_student_created", "student_id", "created_at"),
    )
