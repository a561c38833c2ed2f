"""Team lookups for the acting staff member."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.models.team import StaffTeam, Team
from casetrack.services.errors import NotFoundError


async def list_teams_for_staff(db: AsyncSession, staff_id: UUID) -> list[Team]:
    """Teams the staff member belongs to, by name, each listed once."""
    result = await db.execute(
        select(Team)
        .join(StaffTeam, StaffTeam.team_id == Team.id)
        .where(StaffTeam.staff_id == staff_id)
        .order_by(Team.name)
    )
    teams: dict[UUID, Team] = {}
    for team in result.scalars().all():
        teams.setdefault(team.id, team)
    return list(teams.values())


async def get_team(db: AsyncSession, team_id: UUID) -> Team:
    result = await db.execute(select(Team).where(Team.id == team_id))
    team = result.scalar_one_or_none()
    if not team:
        raise NotFoundError(f"Team {team_id} not found")
    return team


async def is_team_member(db: AsyncSession, staff_id: UUID, team_id: UUID) -> bool:
    result = await db.execute(
        select(StaffTeam.id).where(StaffTeam.staff_id == staff_id, StaffTeam.team_id == team_id).limit(1)
    )
    return result.scalar_one_or_none() is not None
