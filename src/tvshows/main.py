"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from fastapi import FastAPI

from tvshows.admin.app import setup_admin
from tvshows.api.routes import admin, health, tv_shows
from tvshows.config import settings
from tvshows.database import dispose_engine
from tvshows.tasks.sync_job import run_scheduled_sync, start_background_sync

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: register the daily sync
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        run_scheduled_sync,
        trigger=CronTrigger(hour=settings.sync_cron_hour, minute=0, timezone="UTC"),
        id="tv_shows_daily_sync",
        name="Daily sync of TV shows data from TVMaze API",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info(f"Scheduler started, daily sync registered at {settings.sync_cron_hour:02d}:00 UTC")

    if settings.sync_on_startup:
        start_background_sync()
        logger.info("Startup sync triggered in background")

    yield

    # Shutdown: stop the scheduler gracefully
    scheduler.shutdown(wait=False)
    logger.info("Scheduler shut down")
    await dispose_engine()


app = FastAPI(
    title="TV Shows API",
    description="TV shows synced incrementally from the TVMaze schedule",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(tv_shows.router, prefix="/api", tags=["tv_shows"])
app.include_router(admin.router, prefix="/api", tags=["admin"])

setup_admin(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tvshows.main:app", host=settings.api_host, port=settings.api_port)
