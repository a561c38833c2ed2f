"""Referral model: one case-opening event for a student."""

from sqlalchemy import Column, String, Text, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from casetrack.models.base import Base, TimestampMixin, UUIDMixin

REFERRAL_STATUSES = ("New", "In Progress", "On Watch", "Closed")


class Referral(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "referrals"

    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    staff_id = Column(Uuid(as_uuid=True), ForeignKey("staff.id"), index=True)
    student_name = Column(String(255))

    referral_type = Column(String(100), nullable=False)
    referral_reason = Column(String(255))
    referral_notes = Column(Text)
    status = Column(String(20), nullable=False, default="New")  # New, In Progress, On Watch, Closed

    student = relationship("Student")

    __table_args__ = (
        Index("idx_referrals_student_created", "student_id", "created_at"),
        Index("idx_referrals_status", "status"),
    )
