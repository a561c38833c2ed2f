# /tests/test_view_materializer.py

import pytest

from casetrack.services.edit_overlay import EditOverlay
from casetrack.services.view_materializer import StudentGroup, flatten, materialize


@pytest.fixture
def rows():
    """Progress rows in database order (date ascending), mixed students."""
    return [
        {"id": "e1", "student_id": "s_b", "student_name": "ben", "date": "2024-01-08", "applied": False},
        {"id": "e2", "student_id": "s_a", "student_name": "Ana", "date": "2024-01-08", "applied": False},
        {"id": "e3", "student_id": "s_b", "student_name": "ben", "date": "2024-01-09", "applied": True},
        {"id": "e4", "student_id": None, "student_name": None, "date": "2024-01-09", "applied": False},
        {"id": "e5", "student_id": "s_a", "student_name": "Ana", "date": "2024-01-10", "applied": False},
    ]


def test_grouped_view_sorts_groups_by_name_and_entries_by_date(rows):
    view = materialize(rows, group_by_student=True)

    assert all(isinstance(g, StudentGroup) for g in view)
    assert [g.student_name for g in view] == ["Ana", "ben", "Unknown Student"]
    assert [e["id"] for e in view[0].entries] == ["e5", "e2"]
    assert [e["id"] for e in view[1].entries] == ["e3", "e1"]


def test_flat_view_is_date_descending_and_stable(rows):
    view = materialize(rows, group_by_student=False)

    assert [e["id"] for e in view] == ["e5", "e3", "e4", "e1", "e2"]


def test_grouped_and_flat_views_hold_the_same_entries(rows):
    grouped = flatten(materialize(rows, group_by_student=True))
    flat = materialize(rows, group_by_student=False)

    assert {e["id"] for e in grouped} == {e["id"] for e in flat}
    assert len(grouped) == len(flat)


def test_pending_edits_are_applied(rows):
    overlay = EditOverlay(rows)
    overlay.stage("e1", "applied", True)

    view = materialize(rows, group_by_student=False, pending_edits=overlay)

    by_id = {e["id"]: e for e in view}
    assert by_id["e1"]["applied"] is True
    # The input rows are untouched
    assert rows[0]["applied"] is False


def test_future_entries_hidden_when_today_given(rows):
    view = materialize(rows, group_by_student=False, today="2024-01-09")
    assert "e5" not in {e["id"] for e in view}

    everything = materialize(rows, group_by_student=False)
    assert len(everything) == len(rows)


def test_empty_input():
    assert materialize([], group_by_student=True) == []
    assert flatten([]) == []
