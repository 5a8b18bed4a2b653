"""TV shows read API."""

import math

from fastapi import APIRouter, Depends, Query
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tvshows.api.auth import require_api_user
from tvshows.database import get_db
from tvshows.models import Distributor, ReleaseDate, TvShow
from tvshows.schemas import PaginationMeta, TvShowListResponse, TvShowResponse

router = APIRouter(dependencies=[Depends(require_api_user)])

DEFAULT_PER_PAGE = 25
MAX_PER_PAGE = 100


def build_tv_show_query(
    distributor: str | None = None,
    country: str | None = None,
    min_rating: float | None = None,
) -> Select:
    """
    Build the filtered (unordered, unpaginated) TV show query.

    Args:
        distributor: Exact distributor name
        country: Country code of at least one release date
        min_rating: Minimum rating, inclusive

    Returns:
        SQLAlchemy select over TvShow
    """
    stmt = select(TvShow)
    if distributor:
        stmt = stmt.join(TvShow.distributor).where(Distributor.name == distributor)
    if country:
        # EXISTS keeps one row per show even with several matching release dates
        stmt = stmt.where(TvShow.release_dates.any(ReleaseDate.country == country))
    if min_rating is not None:
        stmt = stmt.where(TvShow.rating >= min_rating)
    return stmt


@router.get("/v1/tv_shows", response_model=TvShowListResponse)
async def list_tv_shows(
    distributor: str | None = Query(None, description="Distributor (network) name"),
    country: str | None = Query(None, description="Release country code, e.g. US"),
    min_rating: float | None = Query(None, ge=0, le=10, description="Minimum rating"),
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE, description="Page size"),
    db: AsyncSession = Depends(get_db),
) -> TvShowListResponse:
    """
    List persisted TV shows with their distributor and release dates.

    Ordered by name, then id, so pages are stable.
    """
    stmt = build_tv_show_query(distributor, country, min_rating)

    count_result = await db.execute(select(func.count()).select_from(stmt.subquery()))
    total_count = count_result.scalar_one()

    page_stmt = (
        stmt.options(
            selectinload(TvShow.distributor),
            selectinload(TvShow.release_dates),
        )
        .order_by(TvShow.name, TvShow.id)
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    result = await db.execute(page_stmt)
    tv_shows = result.scalars().all()

    return TvShowListResponse(
        tv_shows=[TvShowResponse.model_validate(show) for show in tv_shows],
        meta=PaginationMeta(
            current_page=page,
            total_pages=math.ceil(total_count / per_page),
            total_count=total_count,
            per_page=per_page,
        ),
    )
