"""Admin API endpoints for manual operations."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from tvshows.api.auth import require_api_user
from tvshows.schemas import SyncRequest, SyncResponse
from tvshows.tasks.sync_job import SyncError, is_sync_running, run_sync_cycle

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_api_user)])


@router.post("/admin/sync", response_model=SyncResponse)
async def trigger_sync(request: SyncRequest) -> SyncResponse:
    """
    Manually run one sync cycle and wait for it.

    Returns 409 if a cycle is already running and 502 if the feed could
    not be fetched. Per-record persistence errors are returned in the body.
    """
    if is_sync_running():
        raise HTTPException(status_code=409, detail="A sync is already running")

    logger.info(f"Manual sync triggered (force_full_refresh={request.force_full_refresh})")

    try:
        report = await run_sync_cycle(request.force_full_refresh)
    except SyncError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    stats = report.stats
    return SyncResponse(
        outcome=report.outcome.value,
        fetched=report.fetched,
        to_persist=report.to_persist,
        skipped=report.skipped,
        storage_updated=report.storage_updated,
        persisted=report.persisted,
        processed=stats.processed if stats else 0,
        created=stats.created if stats else 0,
        updated=stats.updated if stats else 0,
        errors=stats.errors if stats else [],
    )
