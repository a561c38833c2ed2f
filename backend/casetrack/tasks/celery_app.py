"""Celery application configuration and beat schedule."""

from celery import Celery
from celery.schedules import crontab

from casetrack.config import get_settings

settings = get_settings()

celery_app = Celery(
    "casetrack",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "casetrack.tasks.progress_tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.celery_timezone,
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=240,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
)

celery_app.conf.beat_schedule = {
    "backfill-progress-entries": {
        "task": "casetrack.tasks.progress_tasks.backfill_progress_entries",
        "schedule": crontab(minute=15, hour=2),
    },
}
