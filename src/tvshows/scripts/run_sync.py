"""Run one TV shows sync from the command line.

Examples:
    python -m tvshows.scripts.run_sync
    python -m tvshows.scripts.run_sync --force-full-refresh
    python -m tvshows.scripts.run_sync --reset-snapshot
"""

import argparse
import asyncio
import logging
import sys

from tvshows.services.snapshot_store import get_snapshot_store
from tvshows.tasks.sync_job import SyncError, run_sync_cycle

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)


async def sync(force_full_refresh: bool) -> bool:
    try:
        report = await run_sync_cycle(force_full_refresh)
    except SyncError as e:
        logger.error(str(e))
        return False

    if report.stats is None:
        logger.info(f"Done: {report.outcome.value}, nothing persisted")
        return True

    stats = report.stats
    logger.info(
        f"Done: {report.outcome.value}, {stats.processed} processed, "
        f"{stats.created} created, {stats.updated} updated, {len(stats.errors)} errors"
    )
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Sync TV shows from the TVMaze schedule feed.")
    parser.add_argument(
        "--force-full-refresh",
        action="store_true",
        help="Persist every fetched record, ignoring the stored snapshot",
    )
    parser.add_argument(
        "--reset-snapshot",
        action="store_true",
        help="Delete the stored snapshot and exit (next sync will be a full refresh)",
    )
    args = parser.parse_args()

    if args.reset_snapshot:
        deleted = get_snapshot_store().delete()
        logger.info("Snapshot deleted" if deleted else "Failed to delete snapshot")
        sys.exit(0 if deleted else 1)

    ok = asyncio.run(sync(args.force_full_refresh))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
