"""Scheduled sync job: fetch the TVMaze feed, detect changes, persist the delta."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from tvshows.config import settings
from tvshows.database import AsyncSessionLocal
from tvshows.services.change_detector import ChangeDetector, OutcomeKind
from tvshows.services.snapshot_store import SnapshotStore, get_snapshot_store
from tvshows.services.tv_show_reconciler import PersistStats, TvShowReconciler
from tvshows.services.tvmaze_client import TVMazeClient

logger = logging.getLogger(__name__)

# One cycle at a time: the snapshot read-then-write must not interleave.
_sync_lock = asyncio.Lock()


class SyncError(Exception):
    """Raised when a sync cycle fails and should be retried."""


@dataclass
class SyncReport:
    """Summary of one sync cycle."""

    outcome: OutcomeKind
    fetched: int
    to_persist: int
    skipped: int = 0
    storage_updated: bool | None = None
    stats: PersistStats | None = None

    @property
    def persisted(self) -> bool:
        return self.stats is not None


def is_sync_running() -> bool:
    return _sync_lock.locked()


async def run_sync_cycle(
    force_full_refresh: bool = False,
    *,
    client: TVMazeClient | None = None,
    store: SnapshotStore | None = None,
    session_factory: Callable[[], AsyncSession] | None = None,
) -> SyncReport:
    """Run one fetch → detect → reconcile cycle.

    Args:
        force_full_refresh: Persist every fetched record, ignoring the snapshot
        client: Feed client (creates default if not provided)
        store: Snapshot store (built from settings if not provided)
        session_factory: Session factory (uses AsyncSessionLocal if not provided)

    Returns:
        SyncReport for the cycle. Per-record persistence errors are reported
        in ``stats.errors`` and do not fail the cycle.

    Raises:
        SyncError: If the feed could not be fetched
        Exception: Anything raised while persisting, after the snapshot is reset
    """
    client = client or TVMazeClient()
    store = store or get_snapshot_store()
    session_factory = session_factory or AsyncSessionLocal

    async with _sync_lock:
        logger.info(f"Starting TV shows sync (force_full_refresh={force_full_refresh})")

        fetch_result = await client.fetch_full_schedule()
        if not fetch_result.success:
            logger.error(f"Failed to fetch TV shows data: {fetch_result.error}")
            raise SyncError(f"API fetch failed: {fetch_result.error}")

        logger.info(f"Fetched {fetch_result.count} records from TVMaze")

        # Hashing and snapshot I/O are blocking; keep them off the event loop.
        outcome = await asyncio.to_thread(
            ChangeDetector(store).detect, fetch_result.data, force_full_refresh
        )
        report = SyncReport(
            outcome=outcome.kind,
            fetched=fetch_result.count,
            to_persist=outcome.count,
            skipped=outcome.skipped,
            storage_updated=outcome.storage_updated,
        )

        if outcome.kind is OutcomeKind.NO_CHANGE:
            logger.info(f"No changes since last sync, skipped {outcome.skipped} records")
            return report

        if not outcome.records:
            logger.info(f"Nothing to persist ({outcome.kind.value} outcome with 0 records)")
            return report

        try:
            async with session_factory() as db:
                result = await TvShowReconciler(db).persist(outcome.records)
        except Exception:
            # The snapshot already matches this feed; the next attempt must run full.
            deleted = await asyncio.to_thread(store.delete)
            logger.error(
                f"Persisting sync batch failed, snapshot "
                f"{'reset' if deleted else 'could not be reset'}"
            )
            raise

        stats = result.stats
        report.stats = stats

        if result.success:
            logger.info(
                f"TV shows sync completed successfully: {stats.processed} processed, "
                f"{stats.created} created, {stats.updated} updated"
            )
        else:
            logger.error(
                f"TV shows sync completed with errors: {len(stats.errors)} errors "
                f"out of {stats.processed} processed"
            )
            for error in stats.errors:
                logger.error(f"Show ID {error['show_id']}: {error['error']}")

        return report


async def run_scheduled_sync(
    force_full_refresh: bool = False,
    max_attempts: int | None = None,
    retry_delay: float | None = None,
) -> SyncReport | None:
    """Scheduler entry point with bounded retries.

    Failed cycles are retried up to ``max_attempts`` times in total. After the
    last failure the job is abandoned: the error is logged and None returned,
    so the scheduler keeps its regular trigger.
    """
    max_attempts = max_attempts or settings.sync_max_retries
    retry_delay = settings.sync_retry_delay if retry_delay is None else retry_delay

    for attempt in range(1, max_attempts + 1):
        try:
            return await run_sync_cycle(force_full_refresh)
        except Exception as e:
            logger.error(
                f"TV shows sync attempt {attempt}/{max_attempts} failed: {e}",
                exc_info=True,
            )
            if attempt < max_attempts:
                await asyncio.sleep(retry_delay)

    logger.error(f"TV shows sync abandoned after {max_attempts} attempts")
    return None


# Strong references to background syncs; the event loop only keeps weak ones.
_background_tasks: set[asyncio.Task] = set()


def start_background_sync(force_full_refresh: bool = False) -> asyncio.Task:
    """Schedule run_scheduled_sync on the running loop and keep it alive until done."""
    task = asyncio.create_task(run_scheduled_sync(force_full_refresh=force_full_refresh))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task
