"""SQLAlchemy ORM models."""

from tvshows.models.base import Base
from tvshows.models.distributor import Distributor
from tvshows.models.release_date import ReleaseDate
from tvshows.models.tv_show import TvShow

__all__ = ["Base", "Distributor", "ReleaseDate", "TvShow"]
