"""Team endpoints: the acting staff member's teams and the team dashboard."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.dependencies.auth import get_current_staff
from casetrack.models.base import get_db
from casetrack.models.staff import Staff
from casetrack.schemas.dashboard import TeamDashboard
from casetrack.schemas.team import StaffSummary, TeamRead
from casetrack.services import team_service
from casetrack.services.dashboard_loader import EMPTY_DASHBOARD_MESSAGE
from casetrack.services.dashboard_service import fetch_dashboard
from casetrack.services.errors import FetchError, NotFoundError
from casetrack.services.followup_service import get_team_members

router = APIRouter(prefix="/teams", tags=["teams"])


async def _require_membership(db: AsyncSession, staff: Staff, team_id: UUID) -> None:
    try:
        await team_service.get_team(db, team_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if not await team_service.is_team_member(db, staff.id, team_id):
        raise HTTPException(status_code=403, detail="Not a member of this team")


@router.get("", response_model=list[TeamRead])
async def list_my_teams(
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """Teams the acting staff member belongs to."""
    return await team_service.list_teams_for_staff(db, staff.id)


@router.get("/{team_id}/dashboard", response_model=TeamDashboard)
async def get_team_dashboard(
    team_id: UUID,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """One row per student with a recognized referral. Members of the team only."""
    await _require_membership(db, staff, team_id)
    try:
        rows = await fetch_dashboard(db, team_id)
    except FetchError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return TeamDashboard(
        team_id=team_id,
        students=rows,
        message=None if rows else EMPTY_DASHBOARD_MESSAGE,
    )


@router.get("/{team_id}/members", response_model=list[StaffSummary])
async def list_team_members(
    team_id: UUID,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """Members of the team, if the acting staff member is on it."""
    await _require_membership(db, staff, team_id)
    return await get_team_members(db, staff.id, team_id)
