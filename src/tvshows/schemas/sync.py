"""Pydantic schemas for the admin sync trigger."""

from typing import Any

from pydantic import BaseModel


class SyncRequest(BaseModel):
    """Request model for triggering a sync."""

    force_full_refresh: bool = False


class SyncResponse(BaseModel):
    """Result of one sync cycle."""

    outcome: str
    fetched: int
    to_persist: int
    skipped: int = 0
    storage_updated: bool | None = None
    persisted: bool
    processed: int = 0
    created: int = 0
    updated: int = 0
    errors: list[dict[str, Any]] = []
