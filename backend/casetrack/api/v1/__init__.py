"""API v1 router aggregation."""

from fastapi import APIRouter

from casetrack.api.v1.teams import router as teams_router
from casetrack.api.v1.students import router as students_router
from casetrack.api.v1.referrals import router as referrals_router
from casetrack.api.v1.followups import router as followups_router
from casetrack.api.v1.progress import router as progress_router
from casetrack.api.v1.incidents import router as incidents_router

router = APIRouter(prefix="/api/v1")

router.include_router(teams_router)
router.include_router(students_router)
router.include_router(referrals_router)
router.include_router(followups_router)
router.include_router(progress_router)
router.include_router(incidents_router)
