"""Pydantic schemas for TV show data."""

from datetime import date

from pydantic import BaseModel, ConfigDict


class DistributorResponse(BaseModel):
    """Distributor nested in a TV show."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ReleaseDateResponse(BaseModel):
    """Per-country release date."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    country: str
    release_date: date


class TvShowResponse(BaseModel):
    """TV show response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    external_id: int
    name: str
    show_type: str | None = None
    language: str | None = None
    status: str | None = None
    runtime: int | None = None
    premiered: date | None = None
    summary: str | None = None
    official_site: str | None = None
    image_url: str | None = None
    rating: float | None = None
    distributor: DistributorResponse
    release_dates: list[ReleaseDateResponse] = []


class PaginationMeta(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    per_page: int


class TvShowListResponse(BaseModel):
    """Paginated list of TV shows."""

    tv_shows: list[TvShowResponse]
    meta: PaginationMeta
