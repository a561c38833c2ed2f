"""Progress table view: grouped by student or flat, with pending edits applied."""

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from casetrack.services.dates import date_part
from casetrack.services.edit_overlay import EditOverlay

UNKNOWN_STUDENT = "Unknown Student"


@dataclass
class StudentGroup:
    student_id: object
    student_name: str
    entries: list[dict] = field(default_factory=list)


def _by_date_desc(entries: list[dict]) -> list[dict]:
    # sorted() is stable, so same-date entries keep their input order
    return sorted(entries, key=lambda e: date_part(e.get("date")), reverse=True)


def materialize(
    rows: Iterable[Mapping],
    group_by_student: bool = True,
    pending_edits: EditOverlay | None = None,
    today: str | None = None,
) -> list[StudentGroup] | list[dict]:
    """Build the table view for a list of progress entries.

    With ``today`` given, entries dated after it are left out. Entries without
    a student id are grouped together under "Unknown Student" rather than
    dropped.
    """
    entries = []
    for row in rows:
        if today is not None and date_part(row.get("date")) > today:
            continue
        entries.append(pending_edits.apply(row) if pending_edits is not None else dict(row))

    if not group_by_student:
        return _by_date_desc(entries)

    groups: dict[object, StudentGroup] = {}
    for entry in entries:
        student_id = entry.get("student_id")
        group = groups.get(student_id)
        if group is None:
            group = StudentGroup(
                student_id=student_id,
                student_name=entry.get("student_name") or UNKNOWN_STUDENT,
            )
            groups[student_id] = group
        group.entries.append(entry)

    ordered = sorted(groups.values(), key=lambda g: g.student_name.lower())
    for group in ordered:
        group.entries = _by_date_desc(group.entries)
    return ordered


def flatten(view: list[StudentGroup] | list[dict]) -> list[dict]:
    entries = []
    for item in view:
        if isinstance(item, StudentGroup):
            entries.extend(item.entries)
        else:
            entries.append(item)
    return entries
