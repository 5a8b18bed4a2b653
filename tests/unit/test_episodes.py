"""Unit tests for episode record normalization and fingerprints."""

import pytest

from conftest import make_episode, make_show
from tvshows.utils.episodes import (
    EpisodeKey,
    PayloadShape,
    build_lookup,
    content_fingerprint,
    dataset_fingerprint,
    episode_key,
    normalize_show,
)


# ---------------------------------------------------------------------------
# normalize_show
# ---------------------------------------------------------------------------


class TestNormalizeShow:
    def test_embedded_layout(self) -> None:
        record = make_episode(show=make_show(show_id=7))
        view = normalize_show(record)
        assert view.shape is PayloadShape.EMBEDDED
        assert view.external_id == 7

    def test_nested_layout(self) -> None:
        record = make_episode(show=make_show(show_id=8), embedded=False)
        view = normalize_show(record)
        assert view.shape is PayloadShape.NESTED
        assert view.external_id == 8

    def test_bare_show_layout(self) -> None:
        view = normalize_show(make_show(show_id=9))
        assert view.shape is PayloadShape.BARE
        assert view.external_id == 9

    def test_embedded_wins_over_nested(self) -> None:
        record = make_episode(show=make_show(show_id=1))
        record["show"] = make_show(show_id=2)
        assert normalize_show(record).external_id == 1

    def test_rejects_non_object(self) -> None:
        with pytest.raises(TypeError):
            normalize_show(["not", "a", "record"])  # type: ignore[arg-type]

    def test_distributor_prefers_network(self) -> None:
        show = make_show(network="HBO", webChannel={"name": "Netflix"})
        assert normalize_show(make_episode(show=show)).distributor_name == "HBO"

    def test_distributor_falls_back_to_web_channel(self) -> None:
        show = make_show(network=None, webChannel={"name": "Netflix", "country": None})
        assert normalize_show(make_episode(show=show)).distributor_name == "Netflix"

    def test_distributor_defaults_to_unknown(self) -> None:
        show = make_show(network=None)
        assert normalize_show(make_episode(show=show)).distributor_name == "Unknown"

    def test_country_from_network(self) -> None:
        show = make_show(network="BBC One", country="GB")
        assert normalize_show(make_episode(show=show)).country_code == "GB"

    def test_country_from_web_channel(self) -> None:
        show = make_show(network=None, webChannel={"name": "Netflix", "country": {"code": "CA"}})
        assert normalize_show(make_episode(show=show)).country_code == "CA"

    def test_country_defaults_to_us(self) -> None:
        show = make_show(network="Some Network", country=None)
        assert normalize_show(make_episode(show=show)).country_code == "US"

    def test_air_value_prefers_airstamp(self) -> None:
        record = make_episode(airdate="2024-03-01")
        assert normalize_show(record).air_value == "2024-03-01T20:00:00+00:00"

    def test_air_value_falls_back_to_airdate(self) -> None:
        record = make_episode(airdate="2024-03-01", airstamp=None)
        assert normalize_show(record).air_value == "2024-03-01"


# ---------------------------------------------------------------------------
# episode_key
# ---------------------------------------------------------------------------


class TestEpisodeKey:
    def test_key_parts(self) -> None:
        record = make_episode(episode_id=456, airdate="2024-01-01", show=make_show(show_id=123))
        key = episode_key(record)
        assert key == EpisodeKey(123, 456, "2024-01-01")
        assert str(key) == "123_456_2024-01-01"

    def test_same_key_for_embedded_and_nested(self) -> None:
        show = make_show(show_id=5)
        embedded = make_episode(show=show)
        nested = make_episode(show=show, embedded=False)
        assert episode_key(embedded) == episode_key(nested)

    def test_bare_show_uses_own_id(self) -> None:
        key = episode_key({"id": 42, "name": "Bare", "airdate": None})
        assert key == EpisodeKey(42, 42, None)

    def test_different_airdate_is_different_key(self) -> None:
        first = make_episode(airdate="2024-01-01")
        second = make_episode(airdate="2024-01-02")
        assert episode_key(first) != episode_key(second)


# ---------------------------------------------------------------------------
# Fingerprints
# ---------------------------------------------------------------------------


class TestContentFingerprint:
    def test_ignores_key_order(self) -> None:
        record = make_episode()
        reordered = dict(reversed(list(record.items())))
        assert content_fingerprint(record) == content_fingerprint(reordered)

    def test_changes_with_show_fields(self) -> None:
        before = make_episode(show=make_show(status="Running"))
        after = make_episode(show=make_show(status="Ended"))
        assert content_fingerprint(before) != content_fingerprint(after)

    def test_ignores_fields_outside_the_tracked_set(self) -> None:
        before = make_episode(name="Pilot")
        after = make_episode(name="Pilot (Extended)")
        assert content_fingerprint(before) == content_fingerprint(after)

    def test_is_md5_hex(self) -> None:
        assert len(content_fingerprint(make_episode())) == 32


class TestDatasetFingerprint:
    def test_order_independent(self) -> None:
        records = [make_episode(episode_id=i, show=make_show(show_id=i)) for i in range(1, 6)]
        assert dataset_fingerprint(records) == dataset_fingerprint(list(reversed(records)))

    def test_detects_any_change(self) -> None:
        records = [make_episode(episode_id=1), make_episode(episode_id=2)]
        changed = [make_episode(episode_id=1), make_episode(episode_id=2, name="Renamed")]
        assert dataset_fingerprint(records) != dataset_fingerprint(changed)

    def test_empty_dataset(self) -> None:
        assert dataset_fingerprint([]) == dataset_fingerprint([])
        assert dataset_fingerprint([]) != dataset_fingerprint([make_episode()])

    def test_mixed_id_types_do_not_crash(self) -> None:
        records = [
            make_episode(episode_id=1, show=make_show(show_id=1)),
            make_episode(episode_id="x", show=make_show(show_id="abc")),
            {"id": None, "name": "No id"},
        ]
        assert dataset_fingerprint(records) == dataset_fingerprint(list(reversed(records)))

    def test_is_sha256_hex(self) -> None:
        assert len(dataset_fingerprint([make_episode()])) == 64


def test_build_lookup_keeps_last_duplicate() -> None:
    first = make_episode(episode_id=1, name="First")
    second = make_episode(episode_id=1, name="Second")
    lookup = build_lookup([first, second])
    assert len(lookup) == 1
    assert next(iter(lookup.values()))["name"] == "Second"
