"""Upserts TVMaze records into distributors, TV shows and release dates."""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from tvshows.models import Distributor, ReleaseDate, TvShow
from tvshows.utils.episodes import EpisodeRecord, ShowView, normalize_show
from tvshows.utils.text import parse_date, strip_html

logger = logging.getLogger(__name__)


@dataclass
class PersistStats:
    processed: int = 0
    created: int = 0
    updated: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class PersistResult:
    success: bool
    stats: PersistStats
    error: str | None = None


class TvShowReconciler:
    """
    Persists feed records as normalized entities in one unit of work.

    Each record runs inside its own SAVEPOINT, so a record that fails
    validation or hits a constraint is rolled back alone and logged in
    ``stats.errors``. Connectivity failures abort the whole batch.
    """

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize reconciler.

        Args:
            db: Database session; committed once at the end of the batch
        """
        self.db = db

    async def persist(self, records: list[EpisodeRecord] | None) -> PersistResult:
        """
        Upsert every record and commit.

        Args:
            records: New or changed feed records

        Returns:
            PersistResult; success is False if any record failed

        Raises:
            OperationalError, InterfaceError: If the database connection fails
        """
        stats = PersistStats()
        if not records:
            return PersistResult(success=False, stats=stats, error="No data provided")

        try:
            for record in records:
                stats.processed += 1
                try:
                    async with self.db.begin_nested():
                        was_new = await self._process_record(record)
                except (OperationalError, InterfaceError):
                    raise
                except Exception as e:
                    show_id = record.get("id") if isinstance(record, dict) else None
                    stats.errors.append({"show_id": show_id, "error": str(e)})
                    logger.error(f"Error processing show {show_id}: {e}")
                    continue

                if was_new:
                    stats.created += 1
                else:
                    stats.updated += 1

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return PersistResult(success=not stats.errors, stats=stats)

    async def _process_record(self, record: EpisodeRecord) -> bool:
        """Upsert one record. Returns True if the show was created."""
        view = normalize_show(record)

        distributor = await self._find_or_create_distributor(view.distributor_name)

        tv_show = await self._find_tv_show(view.external_id)
        was_new = tv_show is None
        if tv_show is None:
            tv_show = TvShow(external_id=view.external_id)

        self._assign_attributes(tv_show, view)

        if was_new:
            # Distributor is only set on creation; updates keep the original.
            tv_show.distributor_id = distributor.id
            self.db.add(tv_show)
        await self.db.flush()

        await self._ensure_release_date(tv_show, view)
        return was_new

    async def _find_or_create_distributor(self, name: str) -> Distributor:
        result = await self.db.execute(select(Distributor).where(Distributor.name == name))
        distributor = result.scalar_one_or_none()
        if distributor:
            return distributor

        distributor = Distributor(name=name)
        self.db.add(distributor)
        await self.db.flush()
        logger.info(f"Created distributor: {name}")
        return distributor

    async def _find_tv_show(self, external_id: Any) -> TvShow | None:
        if external_id is None:
            raise ValueError("External id can't be blank")
        result = await self.db.execute(select(TvShow).where(TvShow.external_id == external_id))
        return result.scalar_one_or_none()

    def _assign_attributes(self, tv_show: TvShow, view: ShowView) -> None:
        show = view.show
        tv_show.name = show.get("name")
        tv_show.show_type = show.get("type")
        tv_show.language = show.get("language")
        tv_show.status = show.get("status")
        tv_show.runtime = show.get("runtime")
        tv_show.premiered = parse_date(show.get("premiered"))
        tv_show.summary = strip_html(show.get("summary"))
        tv_show.official_site = show.get("officialSite")
        tv_show.image_url = (show.get("image") or {}).get("medium")
        tv_show.rating = (show.get("rating") or {}).get("average")

    async def _ensure_release_date(self, tv_show: TvShow, view: ShowView) -> None:
        """Create the (show, country) release date unless one already exists."""
        country = view.country_code
        release_date = parse_date(view.air_value)
        if not country or not release_date:
            return

        result = await self.db.execute(
            select(ReleaseDate).where(
                ReleaseDate.tv_show_id == tv_show.id,
                ReleaseDate.country == country,
            )
        )
        if result.scalar_one_or_none():
            return

        self.db.add(
            ReleaseDate(tv_show_id=tv_show.id, country=country, release_date=release_date)
        )
        await self.db.flush()
