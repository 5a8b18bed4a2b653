"""Pydantic schemas for API requests and responses."""

from tvshows.schemas.sync import SyncRequest, SyncResponse
from tvshows.schemas.tv_show import (
    DistributorResponse,
    PaginationMeta,
    ReleaseDateResponse,
    TvShowListResponse,
    TvShowResponse,
)

__all__ = [
    "DistributorResponse",
    "PaginationMeta",
    "ReleaseDateResponse",
    "SyncRequest",
    "SyncResponse",
    "TvShowListResponse",
    "TvShowResponse",
]
