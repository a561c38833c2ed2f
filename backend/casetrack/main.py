"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import redis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from sqlalchemy import text

from casetrack.config import get_settings
from casetrack.models import Base
from casetrack.models.base import engine, AsyncSessionLocal
from casetrack.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info("Starting %s...", settings.app_name)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified")
    yield
    logger.info("Shutting down...")
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Referrals, followups and progress monitoring for student support teams",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(GZipMiddleware, minimum_size=500)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(api_v1_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name}


PROGRESS_TASKS = (
    "casetrack.tasks.progress_tasks.generate_progress_entries",
    "casetrack.tasks.progress_tasks.backfill_progress_entries",
)


async def _check_database() -> dict:
    async with AsyncSessionLocal() as session:
        await session.execute(text("SELECT 1"))
    return {"ok": True}


async def _check_broker() -> dict:
    redis.from_url(settings.redis_url, socket_timeout=5).ping()
    return {"ok": True}


async def _check_progress_workers() -> dict:
    """Workers are only useful here if they can generate progress entries."""
    from casetrack.tasks.celery_app import celery_app

    registered = celery_app.control.inspect(timeout=5).registered() or {}
    serving = [name for name, tasks in registered.items() if set(PROGRESS_TASKS) <= set(tasks)]
    return {"ok": bool(serving), "workers": serving}


@app.get("/health/detailed")
async def detailed_health_check():
    checks = {}
    for name, check in (
        ("database", _check_database),
        ("redis", _check_broker),
        ("progress_workers", _check_progress_workers),
    ):
        try:
            checks[name] = await check()
        except Exception as e:
            logger.warning("Health check %s failed: %s", name, e)
            checks[name] = {"ok": False, "message": str(e)}

    return {
        "status": "healthy" if all(c["ok"] for c in checks.values()) else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }
