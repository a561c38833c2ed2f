"""Acting-staff dependency for API routes.

Login is handled outside this service; callers identify the acting staff
member with the ``X-Staff-Id`` header.
"""

from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.models.base import get_db
from casetrack.models.staff import Staff


async def get_current_staff(
    x_staff_id: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> Staff:
    """Return the active staff member named by the header or raise 401."""
    if not x_staff_id:
        raise HTTPException(status_code=401, detail="X-Staff-Id header required")
    try:
        staff_id = UUID(x_staff_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid staff id")

    result = await db.execute(
        select(Staff).where(Staff.id == staff_id, Staff.is_active == True)  # noqa: E712
    )
    staff = result.scalar_one_or_none()
    if not staff:
        raise HTTPException(status_code=401, detail="Unknown or inactive staff member")
    return staff
