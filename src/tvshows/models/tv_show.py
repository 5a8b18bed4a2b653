"""TV show model keyed by its TVMaze identifier."""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from tvshows.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from tvshows.models.distributor import Distributor
    from tvshows.models.release_date import ReleaseDate


class TvShow(Base, TimestampMixin):
    """
    TV show model.

    Stores show metadata from the TVMaze feed. ``external_id`` is the TVMaze
    show id and is the upsert key used by the reconciler.
    """

    __tablename__ = "tv_shows"
    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 10", name="ck_tv_shows_rating_range"),
        CheckConstraint("runtime > 0", name="ck_tv_shows_runtime_positive"),
        Index(
            "ix_tv_shows_status_rating",
            "status",
            "rating",
            postgresql_where=text("rating IS NOT NULL"),
        ),
        Index(
            "ix_tv_shows_distributor_rating",
            "distributor_id",
            "rating",
            postgresql_where=text("rating IS NOT NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    external_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    show_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    language: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    status: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    runtime: Mapped[int | None] = mapped_column(Integer, nullable=True)
    premiered: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    official_site: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    rating: Mapped[Decimal | None] = mapped_column(Numeric(3, 1), nullable=True, index=True)

    distributor_id: Mapped[int] = mapped_column(
        ForeignKey("distributors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    distributor: Mapped["Distributor"] = relationship(back_populates="tv_shows")
    release_dates: Mapped[list["ReleaseDate"]] = relationship(
        back_populates="tv_show",
        cascade="all, delete-orphan",
    )

    @validates("external_id")
    def validate_external_id(self, key: str, value: int | None) -> int:
        if value is None:
            raise ValueError("External id can't be blank")
        return value

    @validates("name")
    def validate_name(self, key: str, value: str | None) -> str:
        if value is None or not str(value).strip():
            raise ValueError("Name can't be blank")
        return value

    @validates("rating")
    def validate_rating(self, key: str, value: float | Decimal | None) -> float | Decimal | None:
        if value is not None and not 0 <= value <= 10:
            raise ValueError(f"Rating must be between 0 and 10, got {value}")
        return value

    @validates("runtime")
    def validate_runtime(self, key: str, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError(f"Runtime must be greater than 0, got {value}")
        return value

    def __repr__(self) -> str:
        return f"<TvShow(id={self.id!r}, external_id={self.external_id!r}, name={self.name!r})>"
