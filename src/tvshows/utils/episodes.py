"""Normalization and hashing of TVMaze episode records.

The feed delivers the same logical show in three layouts:

- ``{"id": ..., "airdate": ..., "_embedded": {"show": {...}}}``
- ``{"id": ..., "airdate": ..., "show": {...}}``
- ``{"id": ..., "name": ..., "network": {...}}`` (a bare show)

Everything downstream reads shows through :func:`normalize_show`, which tags
the layout once and returns a :class:`ShowView`.
"""

import hashlib
import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple

UNKNOWN_DISTRIBUTOR = "Unknown"
DEFAULT_COUNTRY = "US"

EpisodeRecord = dict[str, Any]


class PayloadShape(str, Enum):
    """Layout of a feed record."""

    EMBEDDED = "embedded"
    NESTED = "nested"
    BARE = "bare"


def _dig(data: Mapping[str, Any], *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing."""
    current: Any = data
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


@dataclass(frozen=True)
class ShowView:
    """Canonical view of the show carried by a feed record."""

    shape: PayloadShape
    show: dict[str, Any]
    record: EpisodeRecord

    @property
    def external_id(self) -> Any:
        return self.show.get("id")

    @property
    def distributor_name(self) -> str:
        """Network name, then web channel name, then ``"Unknown"``."""
        name = _dig(self.show, "network", "name") or _dig(self.show, "webChannel", "name")
        if not name or not str(name).strip():
            return UNKNOWN_DISTRIBUTOR
        return name

    @property
    def country_code(self) -> str:
        """Network country, then web channel country, then ``"US"``."""
        return (
            _dig(self.show, "network", "country", "code")
            or _dig(self.show, "webChannel", "country", "code")
            or DEFAULT_COUNTRY
        )

    @property
    def air_value(self) -> str | None:
        """Raw air timestamp of the record, falling back to its air date."""
        return self.record.get("airstamp") or self.record.get("airdate")


def detect_shape(record: Mapping[str, Any]) -> PayloadShape:
    if isinstance(_dig(record, "_embedded", "show"), dict):
        return PayloadShape.EMBEDDED
    if isinstance(record.get("show"), dict):
        return PayloadShape.NESTED
    return PayloadShape.BARE


def normalize_show(record: EpisodeRecord) -> ShowView:
    """
    Extract the show sub-object regardless of payload layout.

    Args:
        record: Feed record in any of the three supported layouts

    Returns:
        ShowView tagged with the detected layout

    Raises:
        TypeError: If the record is not a JSON object
    """
    if not isinstance(record, dict):
        raise TypeError(f"Expected a JSON object, got {type(record).__name__}")

    shape = detect_shape(record)
    if shape is PayloadShape.EMBEDDED:
        show = record["_embedded"]["show"]
    elif shape is PayloadShape.NESTED:
        show = record["show"]
    else:
        show = record
    return ShowView(shape=shape, show=show, record=record)


class EpisodeKey(NamedTuple):
    """Identity of an episode across snapshots."""

    show_id: Any
    episode_id: Any
    airdate: Any

    def __str__(self) -> str:
        return f"{self.show_id}_{self.episode_id}_{self.airdate}"


def episode_key(record: EpisodeRecord) -> EpisodeKey:
    """Build the (show id, episode id, air date) identity of a record."""
    show = normalize_show(record).show
    episode_id = record.get("id")
    show_id = show.get("id")
    if show_id is None:
        show_id = episode_id
    return EpisodeKey(
        show_id=_hashable(show_id),
        episode_id=_hashable(episode_id),
        airdate=_hashable(record.get("airdate")),
    )


def _hashable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return canonical_json(value)


def canonical_json(data: Any) -> str:
    """Serialize with sorted keys and no insignificant whitespace."""
    return json.dumps(
        data,
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
        default=str,
    )


def content_fingerprint(record: EpisodeRecord) -> str:
    """
    Digest of the fields that matter for change detection.

    Covers the episode id, the show object, the air date and the air
    timestamp. Key order inside the record does not affect the result.
    """
    normalized = {
        "id": record.get("id"),
        "show": normalize_show(record).show,
        "airdate": record.get("airdate"),
        "airstamp": record.get("airstamp"),
    }
    return hashlib.md5(canonical_json(normalized).encode("utf-8")).hexdigest()


def _sort_part(value: Any) -> tuple[int, Any]:
    # None sorts first, numbers before strings, so mixed ids never compare directly.
    if value is None:
        return (0, 0)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (1, value)
    return (2, str(value))


def dataset_fingerprint(records: Iterable[EpisodeRecord]) -> str:
    """
    SHA-256 of a whole dataset, independent of record order.

    Records are sorted by identity key, with their canonical serialization
    as the tiebreaker for duplicate keys.
    """
    entries = []
    for record in records:
        key = episode_key(record)
        serialized = canonical_json(record)
        sort_key = (
            _sort_part(key.show_id),
            _sort_part(key.episode_id),
            _sort_part(key.airdate),
            serialized,
        )
        entries.append((sort_key, serialized))

    entries.sort(key=lambda entry: entry[0])
    payload = "[" + ",".join(serialized for _, serialized in entries) + "]"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def build_lookup(records: Iterable[EpisodeRecord]) -> dict[EpisodeKey, EpisodeRecord]:
    """Map identity key to record. Later duplicates replace earlier ones."""
    return {episode_key(record): record for record in records}
