"""Per-country release date of a TV show."""

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from tvshows.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from tvshows.models.tv_show import TvShow


class ReleaseDate(Base, TimestampMixin):
    """
    Release date model.

    One row per (tv_show, country).
    """

    __tablename__ = "release_dates"
    __table_args__ = (
        UniqueConstraint("tv_show_id", "country", name="uq_release_dates_tv_show_country"),
        Index("ix_release_dates_country_release_date", "country", "release_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tv_show_id: Mapped[int] = mapped_column(
        ForeignKey("tv_shows.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    country: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    release_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # Relationships
    tv_show: Mapped["TvShow"] = relationship(back_populates="release_dates")

    @validates("country", "release_date")
    def validate_present(self, key: str, value: object) -> object:
        if value is None or value == "":
            raise ValueError(f"{key.replace('_', ' ').capitalize()} can't be blank")
        return value

    def __repr__(self) -> str:
        return (
            f"<ReleaseDate(tv_show_id={self.tv_show_id!r}, "
            f"country={self.country!r}, "
            f"release_date={self.release_date})>"
        )
