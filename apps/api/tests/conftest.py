"""Shared fixtures for API, store and aggregator tests."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import httpx
import pytest

from transit_api.config import ApiSettings
from transit_api.main import create_app
from transit_api.services.airport_directory import AirportDirectory
from transit_core.schemas import OfferIn
from transit_db.database import create_engine, create_session_factory, setup_tables
from transit_db.models import Place

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

SQLITE_URL = "sqlite+aiosqlite://"

PLACES = [
    # code, name, country
    ("LGB", "Long Beach", "US"),
    ("JFK", "New York JFK", "US"),
    ("SFO", "San Francisco", "US"),
    ("LIS", "Lisbon", "PT"),
    ("KEF", "Reykjavik", "IS"),
]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """In-memory SQLite database with the schema and a few airports."""
    engine = create_engine(SQLITE_URL)
    await setup_tables(engine)
    async with create_session_factory(engine)() as session:
        session.add_all(
            Place(
                latitude=0,
                longitude=0,
                name=name,
                country=country,
                iata_code=code,
            )
            for code, name, country in PLACES
        )
        await session.commit()
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def directory() -> AirportDirectory:
    return AirportDirectory()


@pytest.fixture
def make_offer():
    """Factory fixture for creating valid OfferIn instances."""

    def _make(
        origin: str = "LGB",
        destination: str = "JFK",
        cost: int = 200,
        available_from: date = date(2024, 1, 10),
        *,
        source: str = "test",
        expires_at: datetime | None = None,
        offered_at: datetime | None = None,
    ) -> OfferIn:
        return OfferIn(
            origin_airport=origin,
            destination_airport=destination,
            cost=cost,
            source=source,
            available_from=available_from,
            offered_at=offered_at or datetime(2024, 1, 1, tzinfo=UTC),
            expires_at=expires_at,
        )

    return _make


@pytest.fixture
def app(engine: AsyncEngine) -> FastAPI:
    return create_app(
        ApiSettings(database_url=SQLITE_URL, setup_tables=False), engine=engine
    )


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
