"""Celery tasks that keep progress entries in step with intervention followups."""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select

from casetrack.tasks.celery_app import celery_app
from casetrack.models.base import SyncSessionLocal

# Import ALL models so relationships resolve in the worker process
import casetrack.models  # noqa: F401
from casetrack.models.followup import Followup, INTERVENTION
from casetrack.services.progress_service import ensure_progress_entries

logger = logging.getLogger(__name__)


@celery_app.task(name="casetrack.tasks.progress_tasks.generate_progress_entries")
def generate_progress_entries(followup_id: str):
    """Create the weekday progress entries for one intervention followup.

    Dispatched right after an Intervention followup is created or its dates
    change.
    """
    with SyncSessionLocal() as session:
        try:
            followup = session.execute(
                select(Followup).where(Followup.id == UUID(str(followup_id)))
            ).scalar_one_or_none()
            if not followup:
                logger.warning("Followup %s not found, no progress entries generated", followup_id)
                return {"created": 0}

            created = ensure_progress_entries(session, followup)
            session.commit()
            logger.info("Generated %d progress entries for followup %s", created, followup_id)
            return {"created": created}
        except Exception:
            session.rollback()
            logger.exception("Progress entry generation failed for followup %s", followup_id)
            raise


@celery_app.task(name="casetrack.tasks.progress_tasks.backfill_progress_entries")
def backfill_progress_entries():
    """Nightly: fill in entries for every Active intervention still running."""
    today = date.today()
    with SyncSessionLocal() as session:
        try:
            followups = session.execute(
                select(Followup).where(
                    Followup.type == INTERVENTION,
                    Followup.followup_status == "Active",
                    Followup.end_date >= today,
                )
            ).scalars().all()

            total = 0
            for followup in followups:
                total += ensure_progress_entries(session, followup)
            session.commit()

            logger.info("Backfill: %d entries created across %d interventions", total, len(followups))
            return {"followups": len(followups), "created": total}
        except Exception:
            session.rollback()
            logger.exception("Progress entry backfill failed")
            raise
