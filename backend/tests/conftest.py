# /tests/conftest.py

import os

# Settings are read at import time; point them at SQLite before casetrack loads.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./casetrack_test.db")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import uuid
from datetime import date, datetime
from types import SimpleNamespace

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from casetrack.main import app
from casetrack.models import (
    Base,
    Followup,
    ProgressEntry,
    Referral,
    Review,
    Staff,
    StaffTeam,
    StatusChange,
    Student,
    Team,
)
from casetrack.models.base import get_db


@pytest.fixture
async def session_factory(tmp_path):
    """
    Creates a fresh SQLite database file for EACH test and returns a session
    factory bound to it. Tables are created from the ORM metadata.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'casetrack.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    """A session on the per-test database."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """
    An httpx client talking to the app in-process, with get_db swapped for
    the per-test database.
    """
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def school(db):
    """
    Seeds one team with two staff members and two students:

    - Ana: referral "New", nothing else.
    - Ben: referral "Closed", a newer "On Watch" status change, an active
      reading Intervention followup and a review dated 2024-01-10.
    """
    team = Team(id=uuid.uuid4(), name="Grade 5 Team")
    counselor = Staff(id=uuid.uuid4(), name="Carla Counselor", email="carla@school.test")
    teacher = Staff(id=uuid.uuid4(), name="Tom Teacher", email="tom@school.test")
    ana = Student(id=uuid.uuid4(), name="Ana Alvarez", grade="5", team_id=team.id)
    ben = Student(id=uuid.uuid4(), name="Ben Brooks", grade="5", team_id=team.id)
    db.add_all([team, counselor, teacher, ana, ben])
    await db.flush()

    db.add_all([
        StaffTeam(staff_id=counselor.id, team_id=team.id),
        StaffTeam(staff_id=teacher.id, team_id=team.id),
        Referral(
            student_id=ana.id, staff_id=teacher.id, student_name=ana.name,
            referral_type="Academic", referral_reason="Missing work",
            referral_notes="Has not turned in homework", status="New",
            created_at=datetime(2024, 1, 5, 9, 0),
        ),
        Referral(
            student_id=ben.id, staff_id=teacher.id, student_name=ben.name,
            referral_type="Behavior", referral_reason="Disruption",
            referral_notes="Talks during lessons", status="Closed",
            created_at=datetime(2024, 1, 2, 9, 0),
        ),
        StatusChange(
            student_id=ben.id, staff_id=counselor.id,
            previous_status="Closed", new_status="On Watch",
            created_at=datetime(2024, 1, 8, 14, 0),
        ),
        Review(
            student_id=ben.id, staff_id=counselor.id,
            review_date=date(2024, 1, 10), created_at=datetime(2024, 1, 10, 15, 0),
        ),
    ])
    reading = Followup(
        id=uuid.uuid4(), student_id=ben.id, responsible_person=teacher.id,
        type="Intervention", followup_notes="Small group", followup_status="Active",
        intervention="Guided reading", metric="pages read",
        start_date=date(2024, 1, 8), end_date=date(2024, 1, 12),
        created_at=datetime(2024, 1, 7, 8, 0), updated_at=datetime(2024, 1, 7, 8, 0),
    )
    db.add(reading)
    await db.commit()

    return SimpleNamespace(
        team=team, counselor=counselor, teacher=teacher,
        ana=ana, ben=ben, reading=reading,
    )


@pytest.fixture
async def progress_entries(db, school):
    """Weekday progress entries for Ben's reading intervention (Mon 8th to Fri 12th)."""
    entries = [
        ProgressEntry(
            id=uuid.uuid4(), followup_id=school.reading.id, student_id=school.ben.id,
            staff_id=school.teacher.id, date=date(2024, 1, day), applied=False,
        )
        for day in range(8, 13)
    ]
    db.add_all(entries)
    await db.commit()
    return entries

