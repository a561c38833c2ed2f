# /tests/test_progress_service.py

import uuid
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from casetrack.models import Staff, Student, TeacherStudent, Team
from casetrack.services import progress_service
from casetrack.services.edit_overlay import EditOverlay
from casetrack.services.errors import NotFoundError


# --- Related students and entry listing ---

async def test_related_students_merge_team_and_direct_links(db, school):
    other_team = Team(id=uuid.uuid4(), name="Grade 6 Team")
    cara = Student(id=uuid.uuid4(), name="Cara Cole", grade="6", team_id=other_team.id)
    db.add_all([other_team, cara])
    await db.flush()
    db.add_all([
        TeacherStudent(staff_id=school.teacher.id, student_id=cara.id),
        # Also on the teacher's team; must not show up twice
        TeacherStudent(staff_id=school.teacher.id, student_id=school.ben.id),
    ])
    await db.commit()

    students = await progress_service.get_related_students(db, school.teacher.id)

    assert sorted(s.name for s in students) == ["Ana Alvarez", "Ben Brooks", "Cara Cole"]


async def test_progress_entries_flattened_oldest_first(db, school, progress_entries):
    rows = await progress_service.get_progress_entries(db, school.teacher.id)

    assert [r.date for r in rows] == [date(2024, 1, day) for day in range(8, 13)]
    assert rows[0].student_name == "Ben Brooks"
    assert rows[0].intervention == "Guided reading"
    assert rows[0].metric == "pages read"
    assert rows[0].applied is False


async def test_staff_without_students_sees_nothing(db, school, progress_entries):
    loner = Staff(id=uuid.uuid4(), name="Nora New", email="nora@school.test")
    db.add(loner)
    await db.commit()

    assert await progress_service.get_progress_entries(db, loner.id) == []


async def test_inactive_interventions_only_listed_on_request(db, school, progress_entries):
    school.reading.followup_status = "Completed"
    await db.commit()

    assert await progress_service.get_progress_entries(db, school.teacher.id) == []
    assert len(await progress_service.get_progress_entries(db, school.teacher.id, active_only=False)) == 5


# --- Saving edits ---

async def test_save_writes_only_fields_present(db, school, progress_entries):
    first, second = progress_entries[:2]

    result = await progress_service.save_progress_edits(db, [
        {"id": first.id, "applied": True},
        {"id": second.id, "value": 3},
        {"applied": True},
    ])
    await db.commit()

    assert result.success is True
    assert result.error is None
    by_id = {row.id: row for row in result.updated}
    assert set(by_id) == {first.id, second.id}
    assert by_id[first.id].applied is True
    assert by_id[first.id].value is None
    assert by_id[second.id].applied is False
    assert by_id[second.id].value == 3


async def test_save_processes_edits_in_chunks(db, school, progress_entries, mocker):
    flush = mocker.spy(db, "flush")
    edits = [{"id": str(entry.id), "value": 1} for entry in progress_entries]

    result = await progress_service.save_progress_edits(db, edits, chunk_size=2)

    assert result.success is True
    assert len(result.updated) == 5
    assert flush.call_count == 3


async def test_save_from_overlay_commits_drafts(db, school, progress_entries):
    rows = await progress_service.get_progress_entries(db, school.teacher.id)
    overlay = EditOverlay(row.model_dump() for row in rows)
    overlay.stage(progress_entries[2].id, "applied", True)

    result = await progress_service.save_progress_edits(db, overlay)

    assert result.success is True
    assert not overlay.has_pending()
    assert overlay.get_current_value(progress_entries[2].id, "applied") is True


async def test_failed_save_keeps_drafts_and_reports_one_error(db, school, progress_entries, mocker):
    rows = await progress_service.get_progress_entries(db, school.teacher.id)
    overlay = EditOverlay(row.model_dump() for row in rows)
    overlay.stage(progress_entries[0].id, "applied", True)
    mocker.patch.object(
        db, "execute",
        side_effect=OperationalError("UPDATE progress_entries", {}, Exception("disk I/O error")),
    )

    result = await progress_service.save_progress_edits(db, overlay)

    assert result.success is False
    assert result.error == "Failed to save progress: OperationalError"
    assert result.updated == []
    assert overlay.has_pending()


async def test_nothing_to_save(db):
    result = await progress_service.save_progress_edits(db, [])
    assert result.success is True
    assert result.updated == []


# --- Quick add ---

async def test_today_entries_within_intervention_range(db, school, progress_entries):
    rows = await progress_service.get_today_entries(db, school.teacher.id, today=date(2024, 1, 10))

    assert [r.date for r in rows] == [date(2024, 1, 10)]


async def test_no_today_entries_outside_range(db, school, progress_entries):
    assert await progress_service.get_today_entries(db, school.teacher.id, today=date(2024, 1, 15)) == []


async def test_increment_treats_missing_value_as_zero(db, school, progress_entries):
    entry_id = progress_entries[0].id

    assert (await progress_service.increment_value(db, entry_id)).value == 1
    assert (await progress_service.increment_value(db, entry_id)).value == 2


async def test_decrement_never_goes_below_zero(db, school, progress_entries):
    entry_id = progress_entries[0].id

    assert (await progress_service.decrement_value(db, entry_id)).value == 0
    await progress_service.increment_value(db, entry_id)
    assert (await progress_service.decrement_value(db, entry_id)).value == 0


async def test_toggle_applied(db, school, progress_entries):
    entry_id = progress_entries[0].id

    assert (await progress_service.toggle_applied(db, entry_id)).applied is True
    assert (await progress_service.toggle_applied(db, entry_id)).applied is False


async def test_quick_add_unknown_entry(db):
    with pytest.raises(NotFoundError):
        await progress_service.increment_value(db, uuid.uuid4())
