"""ORM models. Importing this package registers every table on Base.metadata."""

from casetrack.models.base import Base
from casetrack.models.staff import Staff
from casetrack.models.team import Team, StaffTeam, TeacherStudent
from casetrack.models.student import Student
from casetrack.models.referral import Referral
from casetrack.models.status_change import StatusChange
from casetrack.models.followup import Followup
from casetrack.models.review import Review
from casetrack.models.incident_note import IncidentNote
from casetrack.models.progress_entry import ProgressEntry

__all__ = [
    "Base",
    "Staff",
    "Team",
    "StaffTeam",
    "TeacherStudent",
    "Student",
    "Referral",
    "StatusChange",
    "Followup",
    "Review",
    "IncidentNote",
    "ProgressEntry",
]
