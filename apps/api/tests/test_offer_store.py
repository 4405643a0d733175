"""Tests for persisting offers and classifying unknown airports."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from transit_api.services.offer_store import OfferStore
from transit_core.errors import StorageError, UnknownAirportError
from transit_db.errors import StoreErrorAdapter
from transit_db.models import Offer


async def _count_offers(session) -> int:
    return (await session.execute(select(func.count()).select_from(Offer))).scalar_one()


async def test_save_persists_offer(session, directory, make_offer):
    store = OfferStore(session, directory)
    offer = make_offer("LGB", "JFK", 250, date(2024, 2, 1))
    offer.available_to = date(2024, 2, 3)

    offer_id = await store.save(offer)

    row = (await session.execute(select(Offer).where(Offer.offer_id == offer_id))).scalar_one()
    assert row.cost == 250
    assert row.source == "test"
    assert row.start_time == date(2024, 2, 1)
    assert row.end_time == date(2024, 2, 3)
    assert row.expires_at is None


async def test_save_warms_directory_cache(session, directory, make_offer):
    store = OfferStore(session, directory)

    await store.save(make_offer("LGB", "JFK"))

    assert directory.peek("LGB") is not None
    assert directory.peek("JFK") is not None

    # Cached ids are bound directly on the next insert.
    await store.save(make_offer("LGB", "JFK", 300))
    assert await _count_offers(session) == 2


@pytest.mark.parametrize(
    ("origin", "destination", "which", "code"),
    [
        ("XXX", "JFK", "origin", "XXX"),
        ("LGB", "YYY", "destination", "YYY"),
    ],
)
async def test_unknown_airport_is_rejected(
    session, directory, make_offer, origin, destination, which, code
):
    store = OfferStore(session, directory)

    with pytest.raises(UnknownAirportError) as excinfo:
        await store.save(make_offer(origin, destination))

    assert excinfo.value.which == which
    assert excinfo.value.code == code
    assert str(excinfo.value) == f'unknown {which} airport "{code}"'
    assert await _count_offers(session) == 0


async def test_unclassified_failure_is_storage_error(session, directory, make_offer):
    # The base adapter knows no engine specifics, so nothing maps to an airport.
    store = OfferStore(session, directory, errors=StoreErrorAdapter())

    with pytest.raises(StorageError):
        await store.save(make_offer("XXX", "JFK"))
    assert await _count_offers(session) == 0


async def test_timestamps_stored_as_utc(session, directory, make_offer):
    store = OfferStore(session, directory)
    plus_two = timezone(timedelta(hours=2))
    offer = make_offer(
        offered_at=datetime(2024, 1, 1, 12, 0, tzinfo=plus_two),
        expires_at=datetime(2024, 1, 5, 2, 0, tzinfo=plus_two),
    )

    offer_id = await store.save(offer)

    row = (await session.execute(select(Offer).where(Offer.offer_id == offer_id))).scalar_one()
    assert row.created_at == datetime(2024, 1, 1, 10, 0)
    assert row.expires_at == datetime(2024, 1, 5, 0, 0)
