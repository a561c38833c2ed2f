"""Review model: a 'this student was reviewed' marker."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Uuid, func

from casetrack.models.base import Base, UUIDMixin


class Review(UUIDMixin, Base):
    __tablename__ = "reviews"

    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    staff_id = Column(Uuid(as_uuid=True), ForeignKey("staff.id"))
    review_date = Column(Date)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_reviews_student_created", "student_id", "created_at"),
    )
