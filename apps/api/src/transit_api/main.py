"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from transit_api.config import ApiSettings, settings
from transit_api.errors import register_exception_handlers
from transit_api.routers import airports, offers, quotes
from transit_api.schemas.common import HealthResponse
from transit_api.services.airport_directory import AirportDirectory
from transit_db.database import create_engine, create_session_factory, setup_tables

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncEngine


def create_app(
    app_settings: ApiSettings | None = None,
    *,
    engine: AsyncEngine | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    The engine, session factory and airport directory live on ``app.state``
    so every request shares one directory cache.
    """
    cfg = app_settings or settings
    db_engine = engine or create_engine(cfg.database_url)

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """Manage startup / shutdown resources."""
        if cfg.setup_tables:
            await setup_tables(db_engine)
        yield
        await db_engine.dispose()

    app = FastAPI(
        title="transitdb",
        version="0.1.0",
        lifespan=_lifespan,
    )
    app.state.settings = cfg
    app.state.engine = db_engine
    app.state.session_factory = create_session_factory(db_engine)
    app.state.airport_directory = AirportDirectory()

    register_exception_handlers(app)

    # Routers
    app.include_router(offers.router)
    app.include_router(quotes.router)
    app.include_router(airports.router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse()

    return app


app = create_app()
