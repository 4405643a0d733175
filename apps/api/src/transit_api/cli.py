"""transitdb command line: serve the API and manage the database."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import BinaryIO

import click
from pydantic import ValidationError
from sqlalchemy import select

from transit_api.config import settings
from transit_api.services.airport_directory import AirportDirectory
from transit_api.services.ingest_service import IngestService, split_lines
from transit_api.services.offer_store import OfferStore
from transit_core.errors import BatchLineError
from transit_core.schemas import PlaceIn
from transit_db.database import create_engine, create_session_factory, setup_tables
from transit_db.models import Place

logger = logging.getLogger(__name__)

_db_option = click.option(
    "--db",
    "database_url",
    default=lambda: settings.database_url,
    show_default="$TRANSIT_DATABASE_URL",
    help="Database URL",
)


async def _load_places(database_url: str, places: list[PlaceIn]) -> tuple[int, int]:
    engine = create_engine(database_url)
    try:
        await setup_tables(engine)
        async with create_session_factory(engine)() as session:
            existing = set(
                (
                    await session.execute(
                        select(Place.iata_code).where(Place.iata_code.is_not(None))
                    )
                ).scalars()
            )
            added = 0
            for place in places:
                if place.iata_code and place.iata_code in existing:
                    continue
                session.add(Place(**place.model_dump()))
                if place.iata_code:
                    existing.add(place.iata_code)
                added += 1
            await session.commit()
    finally:
        await engine.dispose()
    return added, len(places) - added


async def _add_offers(database_url: str, lines: list[bytes]) -> int:
    engine = create_engine(database_url)
    try:
        async with create_session_factory(engine)() as session:
            store = OfferStore(session, AirportDirectory())
            return await IngestService(store).add_offers(lines)
    finally:
        await engine.dispose()


@click.group()
@click.option("--log-level", default=lambda: settings.log_level, help="Logging level")
def cli(log_level: str) -> None:
    """transitdb - cheapest fares per route."""
    logging.basicConfig(
        level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


@cli.command("serve")
@_db_option
@click.option("--host", default=lambda: settings.host, help="Bind address")
@click.option("--port", default=lambda: settings.port, type=int, help="HTTP port")
def serve(database_url: str, host: str, port: int) -> None:
    """Create tables if needed and run the HTTP API."""
    import uvicorn

    from transit_api.main import create_app

    app = create_app(settings.model_copy(update={"database_url": database_url}))
    logger.info("listening at %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


@cli.command("setup-tables")
@_db_option
def setup_tables_cmd(database_url: str) -> None:
    """Create the places / offers schema and exit."""

    async def _run() -> None:
        engine = create_engine(database_url)
        try:
            await setup_tables(engine)
        finally:
            await engine.dispose()

    asyncio.run(_run())
    click.echo("tables ready")


@cli.command("load-places")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_db_option
def load_places(path: Path, database_url: str) -> None:
    """Load place reference data from a JSON array file."""
    with path.open(encoding="utf-8") as fh:
        raw = json.load(fh)
    try:
        places = [PlaceIn.model_validate(item) for item in raw]
    except ValidationError as exc:
        raise click.ClickException(f"invalid place data: {exc}") from exc

    added, skipped = asyncio.run(_load_places(database_url, places))
    click.echo(f"loaded {added} places ({skipped} already present)")


@cli.command("add-offers")
@click.argument("path", type=click.File("rb"))
@_db_option
def add_offers(path: BinaryIO, database_url: str) -> None:
    """Ingest a JSON-lines offer file ('-' reads stdin)."""
    lines = split_lines(path.read())
    try:
        saved = asyncio.run(_add_offers(database_url, lines))
    except BatchLineError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)
    click.echo(f"saved {saved} records")


if __name__ == "__main__":
    cli()
