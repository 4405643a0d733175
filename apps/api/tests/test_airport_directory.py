"""Tests for the IATA code directory and its cache."""

from __future__ import annotations

import pytest
from sqlalchemy import delete

from transit_core.errors import AirportNotFoundError
from transit_db.models import Place


async def test_resolve_known_code(session, directory):
    place_id = await directory.resolve(session, "LGB")

    assert isinstance(place_id, int)
    assert directory.peek("LGB") == place_id
    assert len(directory) == 1


async def test_resolve_serves_hits_from_cache(session, directory):
    place_id = await directory.resolve(session, "JFK")

    await session.execute(delete(Place).where(Place.iata_code == "JFK"))
    await session.commit()

    assert await directory.resolve(session, "JFK") == place_id


async def test_unknown_code_raises_and_is_not_cached(session, directory):
    with pytest.raises(AirportNotFoundError) as excinfo:
        await directory.resolve(session, "ZZZ")
    assert excinfo.value.code == "ZZZ"
    assert directory.peek("ZZZ") is None

    session.add(Place(latitude=0, longitude=0, name="Later", country="US", iata_code="ZZZ"))
    await session.commit()

    assert await directory.resolve(session, "ZZZ") > 0


async def test_resolve_many_skips_unknown_codes(session, directory):
    ids = await directory.resolve_many(session, ["LGB", "NOPE", "SFO"])

    assert len(ids) == 2
    assert ids == [directory.peek("LGB"), directory.peek("SFO")]


def test_remember_and_clear(directory):
    directory.remember("LGB", 7)
    directory.remember("LGB", 7)

    assert directory.peek("LGB") == 7
    assert len(directory) == 1

    directory.clear()
    assert directory.peek("LGB") is None
