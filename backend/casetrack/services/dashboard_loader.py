"""Stateful dashboard loader for long-lived clients (CLI, workers, tests).

Holds the last published rows for one team along with loading and error
state. Each ``load()`` starts a new generation and cancels the previous
in-flight fetch; a result is published only if its generation is still the
newest when it arrives, so switching teams quickly never shows the wrong
team's students.
"""

import asyncio
import logging
from uuid import UUID

from casetrack.models.base import AsyncSessionLocal
from casetrack.schemas.dashboard import StudentDashboardRow
from casetrack.services.dashboard_service import fetch_dashboard
from casetrack.services.errors import FetchError

logger = logging.getLogger(__name__)

EMPTY_DASHBOARD_MESSAGE = "No students found with relevant status in this team."


class DashboardLoader:
    def __init__(self, session_factory=AsyncSessionLocal, timeout: float | None = None, fetch=fetch_dashboard):
        self._session_factory = session_factory
        self._timeout = timeout
        self._fetch = fetch
        self._generation = 0
        self._task: asyncio.Task | None = None

        self.team_id: UUID | None = None
        self.rows: list[StudentDashboardRow] = []
        self.loading = False
        self.error: str | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def empty_message(self) -> str | None:
        if self.team_id is None or self.loading or self.error or self.rows:
            return None
        return EMPTY_DASHBOARD_MESSAGE

    async def _run(self, team_id: UUID) -> list[StudentDashboardRow]:
        async with self._session_factory() as db:
            return await self._fetch(db, team_id)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _fail(self, message: str) -> None:
        self.rows = []
        self.error = message
        self.loading = False

    async def load(self, team_id: UUID) -> list[StudentDashboardRow] | None:
        """Load the dashboard for a team.

        Returns the published rows, or None when this load was superseded by
        a newer one or failed (``error`` then holds the message).
        """
        self._generation += 1
        generation = self._generation

        if self._task is not None and not self._task.done():
            self._task.cancel()

        self.team_id = team_id
        self.loading = True
        self.error = None

        task = asyncio.ensure_future(self._run(team_id))
        self._task = task

        try:
            rows = await asyncio.wait_for(task, timeout=self._timeout)
        except asyncio.CancelledError:
            if not self._is_current(generation):
                logger.debug("Dashboard load for team %s superseded (generation %d)", team_id, generation)
                return None
            raise
        except asyncio.TimeoutError:
            if self._is_current(generation):
                logger.warning("Dashboard load for team %s timed out after %ss", team_id, self._timeout)
                self._fail("Timed out loading team data. Please try again.")
            return None
        except FetchError as exc:
            if self._is_current(generation):
                self._fail(str(exc))
            return None

        if not self._is_current(generation):
            logger.debug("Dropping stale dashboard result for team %s", team_id)
            return None

        self.rows = rows
        self.loading = False
        return rows

    def dismiss_error(self) -> None:
        self.error = None

    async def close(self) -> None:
        """Cancel any in-flight load."""
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self.loading = False
