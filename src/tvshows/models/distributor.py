"""Distributor model: the network or web channel that airs a show."""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from tvshows.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from tvshows.models.tv_show import TvShow


class Distributor(Base, TimestampMixin):
    """
    Distributor model.

    Name is unique. Deleting a distributor deletes its shows.
    """

    __tablename__ = "distributors"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)

    # Relationships
    tv_shows: Mapped[list["TvShow"]] = relationship(
        back_populates="distributor",
        cascade="all, delete-orphan",
    )

    @validates("name")
    def validate_name(self, key: str, value: str | None) -> str:
        if value is None or not str(value).strip():
            raise ValueError("Distributor name can't be blank")
        return value

    def __repr__(self) -> str:
        return f"<Distributor(id={self.id!r}, name={self.name!r})>"
