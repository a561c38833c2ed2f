# /tests/test_dashboard_service.py

import uuid
from datetime import date, datetime

import pytest
from sqlalchemy.exc import OperationalError

from casetrack.models import Followup, IncidentNote, Team
from casetrack.services.dashboard_service import change_student_status, fetch_dashboard, mark_reviewed
from casetrack.services.errors import FetchError, NotFoundError
from casetrack.services.record_fetcher import DashboardRecords, fetch_team_records


# --- Record fetchers ---

async def test_fetch_team_records_snapshot(db, school):
    records = await fetch_team_records(db, school.team.id)

    assert [s["name"] for s in records.students] == ["Ana Alvarez", "Ben Brooks"]
    # Newest referral first
    assert [r["student_id"] for r in records.referrals] == [school.ana.id, school.ben.id]
    assert [c["new_status"] for c in records.status_changes] == ["On Watch"]
    assert records.followups[0]["responsible_name"] == "Tom Teacher"
    assert records.reviews[0]["review_date"] == date(2024, 1, 10)


async def test_fetch_excludes_closed_followups_and_drafts(db, school):
    db.add_all([
        Followup(
            student_id=school.ben.id, type="Check-in", followup_status="Completed",
            created_at=datetime(2024, 1, 9), updated_at=datetime(2024, 1, 9),
        ),
        IncidentNote(student_id=school.ben.id, type="Note", date=date(2024, 1, 9), note="Posted", draft_status=False),
        IncidentNote(student_id=school.ben.id, type="Note", date=date(2024, 1, 9), note="Draft", draft_status=True),
    ])
    await db.commit()

    records = await fetch_team_records(db, school.team.id)

    assert [f["id"] for f in records.followups] == [school.reading.id]
    assert [i["note"] for i in records.incidents] == ["Posted"]


async def test_empty_team_short_circuits(db, mocker):
    team = Team(id=uuid.uuid4(), name="Empty")
    db.add(team)
    await db.commit()
    spy = mocker.spy(db, "execute")

    records = await fetch_team_records(db, team.id)

    assert records == DashboardRecords()
    assert spy.call_count == 1


async def test_query_failure_raises_single_fetch_error(db, school, mocker):
    mocker.patch.object(
        db, "execute",
        side_effect=OperationalError("SELECT 1", {}, Exception("database is locked")),
    )

    with pytest.raises(FetchError, match="Failed to load team data"):
        await fetch_team_records(db, school.team.id)


# --- Dashboard ---

async def test_fetch_dashboard_rows(db, school):
    """
    GIVEN Ana (referral New, nothing else) and Ben (Closed referral, newer
          On Watch change, reading intervention, review on 2024-01-10)
    WHEN the dashboard is fetched
    THEN each row reflects the derivation rules.
    """
    rows = await fetch_dashboard(db, school.team.id)
    ana, ben = rows

    assert ana.current_status == "New"
    assert ana.followups_text == "No active followups"
    assert ana.last_review_date == "2024-01-05"

    assert ben.current_status == "On Watch"
    assert "measured by pages read" in ben.followups_text
    assert ben.followups_text.endswith("(Tom Teacher)")
    assert ben.last_review_date == "2024-01-10"


async def test_dashboard_recent_notes_include_incidents(db, school):
    db.add(IncidentNote(
        student_id=school.ben.id, type="Incident", date=date(2024, 1, 9),
        location="Cafeteria", offense="Fighting", note="Pushed a peer",
    ))
    await db.commit()

    rows = await fetch_dashboard(db, school.team.id)

    assert rows[1].incident_notes == (
        "2024-01-09 - Fighting at Cafeteria: Pushed a peer\n"
        "2024-01-02 - Referred: Talks during lessons"
    )


# --- Dashboard actions ---

async def test_mark_reviewed_defaults_to_today(db, school):
    review = await mark_reviewed(db, school.ana.id, school.counselor.id)
    await db.commit()

    assert review.review_date == date.today()
    rows = await fetch_dashboard(db, school.team.id)
    assert rows[0].last_review_date == date.today().isoformat()


async def test_mark_reviewed_unknown_student(db, school):
    with pytest.raises(NotFoundError):
        await mark_reviewed(db, uuid.uuid4(), school.counselor.id)


async def test_change_status_appends_changelog(db, school):
    change = await change_student_status(db, school.ana.id, "On Watch", school.counselor.id)
    await db.commit()

    assert change.previous_status == "New"
    rows = await fetch_dashboard(db, school.team.id)
    assert rows[0].current_status == "On Watch"


async def test_change_status_rejects_unknown_status(db, school):
    with pytest.raises(ValueError):
        await change_student_status(db, school.ana.id, "Archived", school.counselor.id)
