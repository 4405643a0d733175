"""Cheapest-per-route aggregation over the offers table."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased

from transit_core.errors import StorageError
from transit_core.schemas import Quote, QuoteQuery, as_utc_naive
from transit_db.models import Offer, Place

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.ext.asyncio import AsyncSession

    from transit_api.services.airport_directory import AirportDirectory
    from transit_core.schemas import ListQuotesRequest

logger = logging.getLogger(__name__)


def upcoming_window(days: int = 30, today: date | None = None) -> tuple[date, date]:
    """Return the inclusive ``[today, today + days]`` window."""
    start = today or datetime.now(UTC).date()
    return start, start + timedelta(days=days)


class QuoteService:
    """Find the cheapest offer per route, earliest date first among ties."""

    def __init__(self, db: AsyncSession, directory: AirportDirectory) -> None:
        self._db = db
        self._directory = directory

    async def cheapest_per_route(self, start: date, end: date) -> list[Quote]:
        """Every route's cheapest offer starting in ``[start, end]``.

        Expired offers are still considered here.
        """
        return await self.aggregate(
            QuoteQuery(start_date=start, end_date=end, consider_expiration=False)
        )

    async def list_quotes(self, request: ListQuotesRequest) -> list[Quote]:
        """Filtered, paginated quotes over unexpired offers."""
        return await self.aggregate(request.to_query())

    async def _conditions(self, query: QuoteQuery) -> list[ColumnElement[bool]] | None:
        """Build the candidate filter; ``None`` means nothing can match."""
        conditions: list[ColumnElement[bool]] = [
            Offer.start_time.between(query.start_date, query.end_date)
        ]

        if query.consider_expiration:
            now = as_utc_naive(query.now) or datetime.now(UTC).replace(tzinfo=None)
            # No expiration means the offer never expires.
            conditions.append(or_(Offer.expires_at.is_(None), Offer.expires_at > now))

        if query.origins:
            origin_ids = await self._directory.resolve_many(self._db, query.origins)
            if not origin_ids:
                return None
            conditions.append(Offer.origin_id.in_(origin_ids))

        if query.destinations:
            dest_ids = await self._directory.resolve_many(
                self._db, query.destinations
            )
            if not dest_ids:
                return None
            conditions.append(Offer.dest_id.in_(dest_ids))

        return conditions

    async def aggregate(self, query: QuoteQuery) -> list[Quote]:
        conditions = await self._conditions(query)
        if conditions is None:
            return []

        # Offers in the window that pass every filter.
        matching = (
            select(
                Offer.offer_id,
                Offer.origin_id,
                Offer.dest_id,
                Offer.cost,
                Offer.start_time,
            )
            .where(*conditions)
            .cte("matching_offers")
        )

        # Lowest cost per route.  Several offers may share it.
        min_offers = (
            select(
                matching.c.origin_id,
                matching.c.dest_id,
                func.min(matching.c.cost).label("cost"),
            )
            .group_by(matching.c.origin_id, matching.c.dest_id)
            .cte("min_offers")
        )

        # The soonest date among the offers at that cost.
        next_min_offer = (
            select(
                min_offers.c.origin_id,
                min_offers.c.dest_id,
                min_offers.c.cost,
                func.min(matching.c.start_time).label("start_time"),
            )
            .join_from(
                min_offers,
                matching,
                and_(
                    matching.c.origin_id == min_offers.c.origin_id,
                    matching.c.dest_id == min_offers.c.dest_id,
                    matching.c.cost == min_offers.c.cost,
                ),
            )
            .group_by(min_offers.c.origin_id, min_offers.c.dest_id, min_offers.c.cost)
            .cte("next_min_offer")
        )

        # Back to a single offer row per route; identical duplicates collapse
        # onto the lowest offer_id.
        chosen = (
            select(func.min(matching.c.offer_id).label("offer_id"))
            .join_from(
                next_min_offer,
                matching,
                and_(
                    matching.c.origin_id == next_min_offer.c.origin_id,
                    matching.c.dest_id == next_min_offer.c.dest_id,
                    matching.c.cost == next_min_offer.c.cost,
                    matching.c.start_time == next_min_offer.c.start_time,
                ),
            )
            .group_by(next_min_offer.c.origin_id, next_min_offer.c.dest_id)
            .cte("chosen_offer")
        )

        origin_ap = aliased(Place, name="origin")
        dest_ap = aliased(Place, name="dest")

        stmt = (
            select(
                Offer.cost,
                func.coalesce(origin_ap.iata_code, "").label("origin"),
                origin_ap.name.label("origin_name"),
                origin_ap.country.label("origin_country"),
                func.coalesce(dest_ap.iata_code, "").label("dest"),
                dest_ap.name.label("dest_name"),
                dest_ap.country.label("dest_country"),
                Offer.start_time.label("cheapest_date"),
                Offer.source,
            )
            .join_from(chosen, Offer, Offer.offer_id == chosen.c.offer_id)
            .join(origin_ap, origin_ap.place_id == Offer.origin_id)
            .join(dest_ap, dest_ap.place_id == Offer.dest_id)
            # Cheapest first; the rest only makes pages stable.
            .order_by(
                Offer.cost,
                Offer.start_time,
                Offer.origin_id,
                Offer.dest_id,
            )
        )
        if query.limit is not None:
            stmt = stmt.limit(query.limit)
        if query.offset:
            stmt = stmt.offset(query.offset)

        try:
            result = await self._db.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc
        rows = result.all()

        logger.debug(
            "Aggregated %d quote(s) for %s..%s", len(rows), query.start_date, query.end_date
        )
        return [
            Quote(
                cost=row.cost,
                origin=row.origin,
                origin_name=row.origin_name,
                origin_country=row.origin_country,
                dest=row.dest,
                dest_name=row.dest_name,
                dest_country=row.dest_country,
                cheapest_date=row.cheapest_date,
                source=row.source,
            )
            for row in rows
        ]
