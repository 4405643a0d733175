"""FastAPI dependency injection providers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002

from transit_api.services.airport_directory import AirportDirectory
from transit_api.services.ingest_service import IngestService
from transit_api.services.offer_store import OfferStore
from transit_api.services.quote_service import QuoteService

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


async def get_db(request: Request) -> AsyncGenerator[AsyncSession]:
    """Yield an async database session from the app's session factory."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_directory(request: Request) -> AirportDirectory:
    """Return the process-wide airport directory owned by the app."""
    return request.app.state.airport_directory


DbDep = Annotated[AsyncSession, Depends(get_db)]
DirectoryDep = Annotated[AirportDirectory, Depends(get_directory)]


def get_offer_store(db: DbDep, directory: DirectoryDep) -> OfferStore:
    return OfferStore(db, directory)


def get_ingest_service(
    store: Annotated[OfferStore, Depends(get_offer_store)],
) -> IngestService:
    return IngestService(store)


def get_quote_service(db: DbDep, directory: DirectoryDep) -> QuoteService:
    return QuoteService(db, directory)
