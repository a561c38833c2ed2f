"""Print a team's dashboard rows to the terminal.

Loads through DashboardLoader, so the fetch timeout and error handling are
the same ones long-lived clients get.

Usage:
    docker compose exec backend python -m scripts.show_dashboard <team-id>
    docker compose exec backend python -m scripts.show_dashboard <team-id> --timeout 10
"""

import argparse
import asyncio
import logging
from uuid import UUID

from casetrack.config import get_settings
from casetrack.models.base import engine
from casetrack.services.dashboard_loader import DashboardLoader

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def print_rows(rows) -> None:
    for row in rows:
        print(f"\n=== {row.name} (grade {row.grade or '?'}) ===")
        print(f"Status:       {row.current_status}")
        print(f"Referral:     {row.referral_type} / {row.referral_reason}")
        print(f"Last review:  {row.last_review_date}")
        print("Recent notes:")
        for line in (row.incident_notes or "").splitlines():
            print(f"  {line}")
        print("Followups:")
        for line in row.followups_text.split("\n\n"):
            print(f"  {line}")


async def show(team_id: UUID, timeout: float) -> int:
    loader = DashboardLoader(timeout=timeout)
    try:
        await loader.load(team_id)
    finally:
        await loader.close()
        await engine.dispose()

    if loader.error:
        logger.error("Could not load dashboard: %s", loader.error)
        return 1
    if loader.empty_message:
        print(loader.empty_message)
        return 0

    print_rows(loader.rows)
    print(f"\n{len(loader.rows)} students")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Show a team's student dashboard")
    parser.add_argument("team_id", type=UUID, help="Team id")
    parser.add_argument(
        "--timeout", type=float, default=get_settings().dashboard_fetch_timeout,
        help="Seconds before the load is abandoned",
    )
    args = parser.parse_args()
    raise SystemExit(asyncio.run(show(args.team_id, args.timeout)))
