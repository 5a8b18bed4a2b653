"""Health check endpoints."""

from fastapi import APIRouter

from tvshows.tasks.sync_job import is_sync_running

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness probe for load balancers."""
    return {"status": "ok"}


@router.get("/health/sync")
async def sync_status() -> dict[str, bool]:
    """Report whether a sync cycle is currently in flight."""
    return {"running": is_sync_running()}
