"""Shared test fixtures."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from fastapi import FastAPI
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tvshows.api.routes import admin, health, tv_shows
from tvshows.config import settings
from tvshows.models import Base


@pytest.fixture
def test_app() -> FastAPI:
    """Minimal FastAPI app without the APScheduler lifespan, for API tests."""
    app = FastAPI()
    app.include_router(health.router)
    app.include_router(tv_shows.router, prefix="/api")
    app.include_router(admin.router, prefix="/api")
    return app


@pytest.fixture
def api_auth() -> tuple[str, str]:
    """Valid HTTP Basic credentials for the API."""
    return (settings.api_username, settings.api_password)


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the schema created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite's implicit transaction handling breaks SAVEPOINT; take over BEGIN.
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


def make_show(
    show_id: int = 1,
    name: str = "Test Show",
    network: str | None = "HBO",
    country: str | None = "US",
    **overrides: Any,
) -> dict[str, Any]:
    """Build a TVMaze show object."""
    show: dict[str, Any] = {
        "id": show_id,
        "name": name,
        "type": "Scripted",
        "language": "English",
        "status": "Running",
        "runtime": 60,
        "premiered": "2024-01-01",
        "officialSite": f"https://example.com/shows/{show_id}",
        "rating": {"average": 8.5},
        "image": {"medium": f"https://static.tvmaze.com/{show_id}.jpg"},
        "summary": "<p>A <b>test</b> show.</p>",
        "network": None,
        "webChannel": None,
    }
    if network is not None:
        show["network"] = {
            "id": 100,
            "name": network,
            "country": {"code": country} if country else None,
        }
    show.update(overrides)
    return show


def make_episode(
    episode_id: int = 10,
    airdate: str = "2024-01-15",
    show: dict[str, Any] | None = None,
    embedded: bool = True,
    **overrides: Any,
) -> dict[str, Any]:
    """Build a TVMaze schedule record, with the show embedded or nested."""
    show = show if show is not None else make_show()
    record: dict[str, Any] = {
        "id": episode_id,
        "name": f"Episode {episode_id}",
        "airdate": airdate,
        "airstamp": f"{airdate}T20:00:00+00:00",
    }
    if embedded:
        record["_embedded"] = {"show": show}
    else:
        record["show"] = show
    record.update(overrides)
    return record
