"""Incremental change detection between a fresh fetch and the stored snapshot."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from tvshows.services.snapshot_store import SnapshotStore
from tvshows.utils.episodes import (
    EpisodeRecord,
    build_lookup,
    content_fingerprint,
    dataset_fingerprint,
)

logger = logging.getLogger(__name__)


class OutcomeKind(str, Enum):
    FULL = "full"
    NO_CHANGE = "no_change"
    DELTA = "delta"


@dataclass
class DetectionOutcome:
    """
    Records that need persisting, plus bookkeeping counts.

    ``storage_updated`` is None when the snapshot was not written at all
    (the no-change case).
    """

    kind: OutcomeKind
    records: list[EpisodeRecord] = field(default_factory=list)
    count: int = 0
    changes: int = 0
    skipped: int = 0
    examined: int = 0
    storage_updated: bool | None = None


class ChangeDetector:
    """
    Decides which fetched records are new or changed since the last sync.

    Three outcomes:
    1. FULL: forced, or no usable snapshot. Every record is returned.
    2. NO_CHANGE: the dataset fingerprint matches the snapshot.
    3. DELTA: only records whose identity key is new or whose content
       fingerprint changed.

    Records that disappeared upstream are never reported.
    """

    def __init__(self, store: SnapshotStore) -> None:
        """
        Initialize change detector.

        Args:
            store: Snapshot store holding the previous dataset
        """
        self.store = store

    def detect(
        self,
        new_data: list[EpisodeRecord],
        force_full_refresh: bool = False,
    ) -> DetectionOutcome:
        """
        Compare new_data against the stored snapshot.

        Args:
            new_data: Freshly fetched records (may be empty)
            force_full_refresh: Skip the comparison and return everything

        Returns:
            DetectionOutcome describing what to persist
        """
        if force_full_refresh or not self.store.exists():
            logger.info(
                f"Processing full dataset ({len(new_data)} records, "
                f"force_full_refresh={force_full_refresh})"
            )
            return self._full_dataset(new_data)

        previous_data = self.store.read()
        if previous_data is None:
            logger.warning("Previous snapshot could not be read, falling back to full processing")
            return self._full_dataset(new_data)

        try:
            previous_hash = dataset_fingerprint(previous_data)
        except TypeError as e:
            logger.warning(f"Previous snapshot is malformed ({e}), falling back to full processing")
            return self._full_dataset(new_data)

        if previous_hash == dataset_fingerprint(new_data):
            logger.info("No changes detected in data")
            return DetectionOutcome(
                kind=OutcomeKind.NO_CHANGE,
                skipped=len(new_data),
            )

        logger.info("Data changes detected, finding differences")
        changes = self.find_changes(previous_data, new_data)

        outcome = DetectionOutcome(
            kind=OutcomeKind.DELTA,
            records=changes,
            count=len(changes),
            changes=len(changes),
            examined=len(new_data),
        )
        outcome.storage_updated = self._write_snapshot(new_data)
        if outcome.storage_updated:
            logger.info(
                f"Updated snapshot with {len(new_data)} records ({len(changes)} changes)"
            )
        return outcome

    def find_changes(
        self,
        previous_data: list[EpisodeRecord],
        new_data: list[EpisodeRecord],
    ) -> list[EpisodeRecord]:
        """
        Return new and changed records, in new_data order.

        Args:
            previous_data: Snapshot records
            new_data: Freshly fetched records

        Returns:
            Records absent from the snapshot or whose content differs
        """
        previous_map = build_lookup(previous_data)
        new_map = build_lookup(new_data)

        changes: list[EpisodeRecord] = []
        for key, new_episode in new_map.items():
            previous_episode = previous_map.get(key)

            if previous_episode is None:
                logger.debug(f"New episode detected: {key}")
                changes.append(new_episode)
            elif content_fingerprint(previous_episode) != content_fingerprint(new_episode):
                logger.debug(f"Changed episode detected: {key}")
                changes.append(new_episode)

        logger.info(f"Found {len(changes)} changed episodes out of {len(new_data)} total")
        return changes

    def _full_dataset(self, new_data: list[EpisodeRecord]) -> DetectionOutcome:
        outcome = DetectionOutcome(
            kind=OutcomeKind.FULL,
            records=list(new_data),
            count=len(new_data),
            examined=len(new_data),
        )
        outcome.storage_updated = self._write_snapshot(new_data)
        if outcome.storage_updated:
            logger.info(f"Stored {len(new_data)} records to snapshot")
        return outcome

    def _write_snapshot(self, new_data: list[EpisodeRecord]) -> bool:
        written = self.store.write(new_data)
        if not written:
            logger.warning("Failed to store snapshot; next sync will diff against the old one")
        return written
