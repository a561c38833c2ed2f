"""Team models: student support teams and their staff membership."""

from sqlalchemy import Column, String, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship

from casetrack.models.base import Base, TimestampMixin, UUIDMixin


class Team(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "teams"

    name = Column(String(255), nullable=False)

    # Relationships
    students = relationship("Student", back_populates="team")
    staff_links = relationship("StaffTeam", back_populates="team", cascade="all, delete-orphan")


class StaffTeam(UUIDMixin, Base):
    __tablename__ = "staff_teams"

    staff_id = Column(Uuid(as_uuid=True), ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)

    staff = relationship("Staff", back_populates="team_links")
    team = relationship("Team", back_populates="staff_links")

    __table_args__ = (
        UniqueConstraint("staff_id", "team_id", name="uq_staff_teams_staff_team"),
    )


class TeacherStudent(UUIDMixin, Base):
    """Direct teacher-to-student link, independent of team membership."""

    __tablename__ = "teacher_students"

    staff_id = Column(Uuid(as_uuid=True), ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)

    student = relationship("Student")

    __table_args__ = (
        UniqueConstraint("staff_id", "student_id", name="uq_teacher_students_staff_student"),
    )
