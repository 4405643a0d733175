"""IATA code to place id lookup with a read-through cache."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from sqlalchemy import select

from transit_core.errors import AirportNotFoundError
from transit_db.models import Place

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class AirportDirectory:
    """Resolve IATA airport codes to ``places.place_id``.

    A code's place id never changes once the place exists, so successful
    lookups are cached for the lifetime of the directory.  Misses are not
    cached: an airport added later becomes resolvable without a restart.
    Concurrent misses on the same code may both query the database; they
    write the same value, so the race is harmless.
    """

    def __init__(self) -> None:
        self._cache: dict[str, int] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._cache)

    def peek(self, iata_code: str) -> int | None:
        """Return the cached place id for *iata_code* without touching the DB."""
        return self._cache.get(iata_code)

    def remember(self, iata_code: str, place_id: int) -> None:
        """Populate the cache with a mapping learned elsewhere (e.g. an insert)."""
        if self._cache.get(iata_code) == place_id:
            return
        with self._lock:
            self._cache[iata_code] = place_id
        logger.debug("Cached airport %s -> %d", iata_code, place_id)

    async def resolve(self, session: AsyncSession, iata_code: str) -> int:
        """Return the place id for *iata_code* or raise :class:`AirportNotFoundError`."""
        place_id = self._cache.get(iata_code)
        if place_id is not None:
            return place_id

        result = await session.execute(
            select(Place.place_id).where(Place.iata_code == iata_code)
        )
        place_id = result.scalar_one_or_none()
        if place_id is None:
            raise AirportNotFoundError(iata_code)

        self.remember(iata_code, place_id)
        return place_id

    async def resolve_many(
        self, session: AsyncSession, iata_codes: list[str]
    ) -> list[int]:
        """Resolve each known code, silently skipping unknown ones."""
        place_ids: list[int] = []
        for code in iata_codes:
            try:
                place_ids.append(await self.resolve(session, code))
            except AirportNotFoundError:
                logger.debug("Ignoring unknown airport %s in filter", code)
        return place_ids

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
