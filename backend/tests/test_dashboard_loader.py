# /tests/test_dashboard_loader.py

import asyncio

import pytest

from casetrack.services.dashboard_loader import EMPTY_DASHBOARD_MESSAGE, DashboardLoader
from casetrack.services.errors import FetchError


class FakeSession:
    """Stands in for an AsyncSession; the fake fetchers never touch it."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def make_fetch(results: dict, slow: set = frozenset()):
    async def fetch(db, team_id):
        if team_id in slow:
            await asyncio.sleep(3600)
        result = results[team_id]
        if isinstance(result, Exception):
            raise result
        return result
    return fetch


async def test_load_publishes_rows():
    loader = DashboardLoader(session_factory=FakeSession, fetch=make_fetch({"t1": ["row-a", "row-b"]}))

    rows = await loader.load("t1")

    assert rows == ["row-a", "row-b"]
    assert loader.rows == rows
    assert loader.loading is False
    assert loader.error is None
    assert loader.team_id == "t1"
    assert loader.empty_message is None


async def test_empty_team_gets_message():
    loader = DashboardLoader(session_factory=FakeSession, fetch=make_fetch({"t1": []}))

    await loader.load("t1")

    assert loader.rows == []
    assert loader.empty_message == EMPTY_DASHBOARD_MESSAGE


async def test_newer_load_supersedes_in_flight_load():
    """
    GIVEN a slow load for team 1 still in flight
    WHEN a load for team 2 is started
    THEN the team 1 load is cancelled and only team 2's rows are published.
    """
    loader = DashboardLoader(
        session_factory=FakeSession,
        fetch=make_fetch({"t1": ["stale"], "t2": ["fresh"]}, slow={"t1"}),
    )

    first = asyncio.create_task(loader.load("t1"))
    await asyncio.sleep(0)
    assert loader.loading is True

    rows = await loader.load("t2")

    assert await first is None
    assert rows == ["fresh"]
    assert loader.rows == ["fresh"]
    assert loader.team_id == "t2"
    assert loader.generation == 2


async def test_timeout_clears_rows_and_sets_error():
    loader = DashboardLoader(
        session_factory=FakeSession,
        timeout=0.01,
        fetch=make_fetch({"ok": ["row"], "slow": ["never"]}, slow={"slow"}),
    )
    await loader.load("ok")

    result = await loader.load("slow")

    assert result is None
    assert loader.rows == []
    assert loader.loading is False
    assert "Timed out" in loader.error


async def test_fetch_error_replaces_rows_with_single_error():
    loader = DashboardLoader(
        session_factory=FakeSession,
        fetch=make_fetch({"ok": ["row"], "bad": FetchError("Failed to load team data: OperationalError")}),
    )
    await loader.load("ok")

    result = await loader.load("bad")

    assert result is None
    assert loader.rows == []
    assert loader.error == "Failed to load team data: OperationalError"
    assert loader.empty_message is None

    loader.dismiss_error()
    assert loader.error is None


async def test_close_cancels_in_flight_load():
    loader = DashboardLoader(session_factory=FakeSession, fetch=make_fetch({"t1": []}, slow={"t1"}))
    pending = asyncio.create_task(loader.load("t1"))
    await asyncio.sleep(0)

    await loader.close()

    assert await pending is None
    assert loader.loading is False


async def test_loads_real_dashboard(session_factory, school):
    loader = DashboardLoader(session_factory=session_factory)

    rows = await loader.load(school.team.id)

    assert [r.name for r in rows] == ["Ana Alvarez", "Ben Brooks"]
    assert loader.error is None
