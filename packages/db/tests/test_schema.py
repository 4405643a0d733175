"""Tests for table and index creation."""

from __future__ import annotations

from sqlalchemy import inspect

from transit_db.database import create_engine, setup_tables


async def test_setup_tables_is_idempotent():
    engine = create_engine("sqlite+aiosqlite://")
    try:
        await setup_tables(engine)
        await setup_tables(engine)

        async with engine.connect() as conn:
            tables, offer_indexes, place_indexes = await conn.run_sync(
                lambda sync_conn: (
                    inspect(sync_conn).get_table_names(),
                    {i["name"]: i for i in inspect(sync_conn).get_indexes("offers")},
                    {i["name"]: i for i in inspect(sync_conn).get_indexes("places")},
                )
            )
    finally:
        await engine.dispose()

    assert {"places", "offers"} <= set(tables)
    assert offer_indexes["offer_cost_join_idx"]["column_names"] == [
        "origin_id",
        "dest_id",
        "start_time",
        "expires_at",
        "cost",
    ]
    assert offer_indexes["offer_date_idx"]["column_names"] == ["start_time"]
    assert place_indexes["place_airport_idx"]["unique"]
