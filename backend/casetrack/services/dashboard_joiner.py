"""Per-student joiner: derives one dashboard row per student from a snapshot.

Everything here is pure. Inputs are the flat records produced by the record
fetcher, already sorted newest-first; the joiner filters them by student and
never re-sorts referrals, status changes or followups, so the text it builds
follows the query order exactly. Missing optional fields become display
defaults instead of errors.
"""

from typing import Iterable, Mapping

from casetrack.models.followup import INTERVENTION
from casetrack.models.referral import REFERRAL_STATUSES
from casetrack.schemas.dashboard import StudentDashboardRow
from casetrack.services.dates import date_part
from casetrack.services.record_fetcher import DashboardRecords

RECENT_NOTES_LIMIT = 5
NO_FOLLOWUPS = "No active followups"


def _for_student(records: Iterable[Mapping], student_id) -> list[Mapping]:
    return [r for r in records if r.get("student_id") == student_id]


def _sort_key(value) -> str:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def format_referral_notes(referrals: list[Mapping]) -> str:
    return "\n\n".join(
        f"{date_part(ref.get('created_at'))} - {ref.get('referral_notes') or 'No notes provided'}"
        for ref in referrals
    )


def format_incident(incident: Mapping) -> str:
    note_date = date_part(incident.get("date"))
    if incident.get("type") == "Incident":
        return (
            f"{note_date} - {incident.get('offense') or 'Incident'} at "
            f"{incident.get('location') or 'Unknown'}: {incident.get('note') or ''}"
        )
    return f"{note_date} - {incident.get('note') or 'No details provided'}"


def combine_recent_notes(
    incidents: list[Mapping],
    latest_referral: Mapping | None,
    limit: int = RECENT_NOTES_LIMIT,
) -> str:
    """Merge incidents/notes with the newest referral note, keep the most recent.

    The referral note is only added while there are fewer than ``limit``
    incidents. Entries are ordered newest first; entries on the same date
    keep their input order.
    """
    entries = [(_sort_key(i.get("date")), format_incident(i)) for i in incidents]

    if len(entries) < limit and latest_referral and latest_referral.get("referral_notes"):
        created_at = latest_referral.get("created_at")
        entries.append(
            (_sort_key(created_at), f"{date_part(created_at)} - Referred: {latest_referral['referral_notes']}")
        )

    entries.sort(key=lambda entry: entry[0], reverse=True)
    return "\n".join(text for _, text in entries[:limit])


def format_followup(followup: Mapping) -> str:
    followup_date = date_part(followup.get("created_at"))
    responsible = followup.get("responsible_name") or "Unassigned"
    followup_type = followup.get("type") or ""

    if followup_type.lower() != INTERVENTION.lower():
        return (
            f"{followup_date} - {followup_type}: "
            f"{followup.get('followup_notes') or 'No notes provided'} ({responsible})"
        )

    start = date_part(followup.get("start_date")) or "N/A"
    end = date_part(followup.get("end_date")) or "N/A"
    return (
        f"{followup_date} - {INTERVENTION}: {followup.get('intervention') or 'No intervention defined'} "
        f"to be measured by {followup.get('metric') or 'N/A'} from {start} to {end}. "
        f"{followup.get('followup_notes') or ''} ({responsible})"
    )


def last_review_date(reviews: list[Mapping], referrals: list[Mapping]) -> str:
    if reviews:
        latest = reviews[0]
        if latest.get("review_date"):
            return date_part(latest["review_date"])
        return date_part(latest.get("created_at"))
    if referrals:
        return date_part(referrals[0].get("created_at"))
    return "Never"


def join_student(
    student: Mapping,
    referrals: Iterable[Mapping],
    status_changes: Iterable[Mapping],
    followups: Iterable[Mapping],
    reviews: Iterable[Mapping],
    incidents: Iterable[Mapping] = (),
    statuses: Iterable[str] = REFERRAL_STATUSES,
    notes_limit: int = RECENT_NOTES_LIMIT,
) -> StudentDashboardRow | None:
    """Build the dashboard row for one student.

    Returns None when the student has no referral in a recognized status;
    such students are not shown on the dashboard.

    The newest status change overrides the referral's own status. The
    changelog is matched by student only, not by referral.
    """
    student_id = student.get("id")
    recognized = set(statuses)

    student_referrals = [
        r for r in _for_student(referrals, student_id) if r.get("status") in recognized
    ]
    if not student_referrals:
        return None

    student_changes = _for_student(status_changes, student_id)
    student_followups = _for_student(followups, student_id)
    student_reviews = _for_student(reviews, student_id)
    student_incidents = _for_student(incidents, student_id)

    latest_referral = student_referrals[0]
    if student_changes:
        current_status = student_changes[0].get("new_status")
    else:
        current_status = latest_referral.get("status") or "Unknown"

    followups_text = "\n\n".join(format_followup(f) for f in student_followups) or NO_FOLLOWUPS

    return StudentDashboardRow(
        id=student_id,
        name=student.get("name") or "",
        grade=student.get("grade"),
        photo=student.get("photo"),
        current_status=current_status or "Unknown",
        referral_type=latest_referral.get("referral_type") or "N/A",
        referral_reason=latest_referral.get("referral_reason") or "N/A",
        notes_text=format_referral_notes(student_referrals),
        incident_notes=combine_recent_notes(student_incidents, latest_referral, notes_limit),
        followups_text=followups_text,
        last_review_date=last_review_date(student_reviews, student_referrals),
    )


def build_dashboard_rows(
    records: DashboardRecords,
    statuses: Iterable[str] = REFERRAL_STATUSES,
    notes_limit: int = RECENT_NOTES_LIMIT,
) -> list[StudentDashboardRow]:
    """Join every student in the snapshot, in student order."""
    statuses = tuple(statuses)
    rows = []
    for student in records.students:
        row = join_student(
            student,
            records.referrals,
            records.status_changes,
            records.followups,
            records.reviews,
            records.incidents,
            statuses=statuses,
            notes_limit=notes_limit,
        )
        if row is not None:
            rows.append(row)
    return rows
