"""Persist validated offers into the offers table."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import insert, select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from transit_core.errors import StorageError
from transit_core.schemas import as_utc_naive
from transit_db.errors import adapter_for
from transit_db.models import Offer, Place

if TYPE_CHECKING:
    from sqlalchemy import ScalarSelect
    from sqlalchemy.ext.asyncio import AsyncSession

    from transit_api.services.airport_directory import AirportDirectory
    from transit_core.schemas import OfferIn
    from transit_db.errors import StoreErrorAdapter

logger = logging.getLogger(__name__)


class OfferStore:
    """Write :class:`OfferIn` objects to the offers table, one commit per offer."""

    def __init__(
        self,
        db: AsyncSession,
        directory: AirportDirectory,
        errors: StoreErrorAdapter | None = None,
    ) -> None:
        self._db = db
        self._directory = directory
        self._errors = errors or adapter_for(db.get_bind().dialect.name)

    def _place_id(self, iata_code: str) -> int | ScalarSelect[int]:
        """Bind a cached place id, or resolve the code inside the INSERT."""
        place_id = self._directory.peek(iata_code)
        if place_id is not None:
            return place_id
        return (
            select(Place.place_id)
            .where(Place.iata_code == iata_code)
            .scalar_subquery()
        )

    async def save(self, offer: OfferIn) -> int:
        """Insert *offer* and return its ``offer_id``.

        The offer must already have passed ``validate_required``.  Raises
        ``UnknownAirportError`` when either airport code is not a known place
        and ``StorageError`` for any other database failure.
        """
        stmt = (
            insert(Offer)
            .values(
                origin_id=self._place_id(offer.origin_airport),
                dest_id=self._place_id(offer.destination_airport),
                cost=offer.cost,
                source=offer.source,
                start_time=offer.available_from,
                end_time=offer.available_to,
                created_at=as_utc_naive(offer.offered_at),
                expires_at=as_utc_naive(offer.expires_at),
            )
            .returning(Offer.offer_id, Offer.origin_id, Offer.dest_id)
        )

        try:
            row = (await self._db.execute(stmt)).one()
            await self._db.commit()
        except DBAPIError as exc:
            await self._db.rollback()
            raise self._errors.classify(
                exc,
                origin_code=offer.origin_airport,
                destination_code=offer.destination_airport,
            ) from exc
        except SQLAlchemyError as exc:
            await self._db.rollback()
            raise StorageError(str(exc)) from exc

        self._directory.remember(offer.origin_airport, row.origin_id)
        self._directory.remember(offer.destination_airport, row.dest_id)
        logger.debug(
            "Saved offer %d %s -> %s cost=%d",
            row.offer_id,
            offer.origin_airport,
            offer.destination_airport,
            offer.cost,
        )
        return row.offer_id
