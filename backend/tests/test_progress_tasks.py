# /tests/test_progress_tasks.py

import uuid
from datetime import date

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from casetrack.models import Base, Followup, ProgressEntry, Student
from casetrack.services.progress_service import ensure_progress_entries


@pytest.fixture
def sync_session_factory(tmp_path):
    """Sync SQLite database, as the Celery workers use."""
    engine = create_engine(f"sqlite:///{tmp_path / 'worker.db'}")
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False)
    engine.dispose()


@pytest.fixture
def intervention(sync_session_factory):
    """A reading intervention running Friday 2024-01-12 to Tuesday 2024-01-16."""
    with sync_session_factory() as session:
        student = Student(id=uuid.uuid4(), name="Ben Brooks")
        followup = Followup(
            id=uuid.uuid4(), student_id=student.id, type="Intervention",
            intervention="Guided reading", metric="pages read", followup_status="Active",
            start_date=date(2024, 1, 12), end_date=date(2024, 1, 16),
        )
        session.add_all([student, followup])
        session.commit()
        return followup.id


def _entry_dates(session, followup_id):
    return session.execute(
        select(ProgressEntry.date).where(ProgressEntry.followup_id == followup_id).order_by(ProgressEntry.date)
    ).scalars().all()


def test_entries_created_for_weekdays_only(sync_session_factory, intervention):
    with sync_session_factory() as session:
        followup = session.get(Followup, intervention)

        created = ensure_progress_entries(session, followup)
        session.commit()

        assert created == 3
        assert _entry_dates(session, intervention) == [date(2024, 1, 12), date(2024, 1, 15), date(2024, 1, 16)]


def test_generation_is_idempotent(sync_session_factory, intervention):
    with sync_session_factory() as session:
        followup = session.get(Followup, intervention)
        ensure_progress_entries(session, followup)
        session.commit()

        assert ensure_progress_entries(session, followup) == 0


def test_non_interventions_get_no_entries(sync_session_factory, intervention):
    with sync_session_factory() as session:
        followup = session.get(Followup, intervention)
        followup.type = "Check-in"

        assert ensure_progress_entries(session, followup) == 0


def test_generate_task_uses_worker_session(sync_session_factory, intervention, mocker):
    from casetrack.tasks import progress_tasks

    mocker.patch.object(progress_tasks, "SyncSessionLocal", sync_session_factory)

    assert progress_tasks.generate_progress_entries(str(intervention)) == {"created": 3}
    assert progress_tasks.generate_progress_entries(str(uuid.uuid4())) == {"created": 0}


def test_backfill_only_touches_running_interventions(sync_session_factory, intervention, mocker):
    from casetrack.tasks import progress_tasks

    mocker.patch.object(progress_tasks, "SyncSessionLocal", sync_session_factory)
    mocker.patch.object(progress_tasks, "date", mocker.Mock(today=mocker.Mock(return_value=date(2024, 1, 15))))

    assert progress_tasks.backfill_progress_entries() == {"followups": 1, "created": 3}

    with sync_session_factory() as session:
        session.get(Followup, intervention).end_date = date(2024, 1, 12)
        session.commit()

    assert progress_tasks.backfill_progress_entries() == {"followups": 0, "created": 0}
