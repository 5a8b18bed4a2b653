"""Tests for the manual sync trigger endpoint."""

from unittest.mock import AsyncMock, patch

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from tvshows.services.change_detector import OutcomeKind
from tvshows.services.tv_show_reconciler import PersistStats
from tvshows.tasks.sync_job import SyncError, SyncReport


async def post_sync(test_app: FastAPI, json: dict | None = None, auth: tuple[str, str] | None = None):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        return await client.post("/api/admin/sync", json=json or {}, auth=auth)


async def test_requires_credentials(test_app: FastAPI) -> None:
    with patch("tvshows.api.routes.admin.run_sync_cycle", new=AsyncMock()) as cycle:
        response = await post_sync(test_app)

    assert response.status_code == 401
    cycle.assert_not_awaited()


async def test_returns_cycle_report(test_app: FastAPI, api_auth: tuple[str, str]) -> None:
    stats = PersistStats(
        processed=3,
        created=1,
        updated=1,
        errors=[{"show_id": 7, "error": "Name can't be blank"}],
    )
    report = SyncReport(
        outcome=OutcomeKind.DELTA,
        fetched=10,
        to_persist=3,
        storage_updated=True,
        stats=stats,
    )
    with patch(
        "tvshows.api.routes.admin.run_sync_cycle", new=AsyncMock(return_value=report)
    ) as cycle:
        response = await post_sync(test_app, {"force_full_refresh": True}, auth=api_auth)

    assert response.status_code == 200
    cycle.assert_awaited_once_with(True)
    assert response.json() == {
        "outcome": "delta",
        "fetched": 10,
        "to_persist": 3,
        "skipped": 0,
        "storage_updated": True,
        "persisted": True,
        "processed": 3,
        "created": 1,
        "updated": 1,
        "errors": [{"show_id": 7, "error": "Name can't be blank"}],
    }


async def test_no_change_report(test_app: FastAPI, api_auth: tuple[str, str]) -> None:
    report = SyncReport(outcome=OutcomeKind.NO_CHANGE, fetched=5, to_persist=0, skipped=5)
    with patch("tvshows.api.routes.admin.run_sync_cycle", new=AsyncMock(return_value=report)):
        response = await post_sync(test_app, auth=api_auth)

    data = response.json()
    assert response.status_code == 200
    assert data["outcome"] == "no_change"
    assert data["skipped"] == 5
    assert data["persisted"] is False
    assert data["storage_updated"] is None
    assert data["processed"] == 0


async def test_fetch_failure_is_bad_gateway(test_app: FastAPI, api_auth: tuple[str, str]) -> None:
    cycle = AsyncMock(side_effect=SyncError("API fetch failed: HTTP 503: Service Unavailable"))
    with patch("tvshows.api.routes.admin.run_sync_cycle", new=cycle):
        response = await post_sync(test_app, auth=api_auth)

    assert response.status_code == 502
    assert response.json()["detail"] == "API fetch failed: HTTP 503: Service Unavailable"


async def test_conflict_when_sync_running(test_app: FastAPI, api_auth: tuple[str, str]) -> None:
    with (
        patch("tvshows.api.routes.admin.is_sync_running", return_value=True),
        patch("tvshows.api.routes.admin.run_sync_cycle", new=AsyncMock()) as cycle,
    ):
        response = await post_sync(test_app, auth=api_auth)

    assert response.status_code == 409
    cycle.assert_not_awaited()
