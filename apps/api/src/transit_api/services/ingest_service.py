"""JSON-lines offer ingestion."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from transit_core.errors import BatchLineError, TransitError
from transit_core.schemas import OfferIn

if TYPE_CHECKING:
    from collections.abc import Iterable

    from transit_api.services.offer_store import OfferStore

logger = logging.getLogger(__name__)


def split_lines(body: bytes) -> list[bytes]:
    """Split a JSON-lines body on ``\\n`` only, dropping a trailing ``\\r``.

    JSON strings may hold raw U+2028, form feeds and the like, so
    :meth:`str.splitlines` would cut valid records apart.
    """
    return [line.removesuffix(b"\r") for line in body.split(b"\n")]


def parse_offer_line(raw: str | bytes) -> OfferIn:
    """Decode one JSON line into an :class:`OfferIn` (no required-field checks)."""
    return OfferIn.model_validate_json(raw)


def _describe(exc: ValidationError) -> str:
    for error in exc.errors():
        if error["type"].startswith("json_"):
            return "bad json"
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "offer"
    return f"invalid {field}: {first['msg']}"


class IngestService:
    """Save a batch of JSON-lines offers in submission order.

    The first bad line aborts the batch.  Offers saved before it stay
    committed.
    """

    def __init__(self, store: OfferStore) -> None:
        self._store = store

    async def add_offers(self, lines: Iterable[str | bytes]) -> int:
        """Save every offer in *lines* and return how many were saved.

        Raises :class:`BatchLineError` carrying the 1-based line number of
        the first line that could not be decoded, parsed, validated or
        stored.  Blank lines are skipped but still counted.
        """
        saved = 0
        for line_no, raw in enumerate(lines, start=1):
            if isinstance(raw, bytes):
                try:
                    raw = raw.decode("utf-8")
                except UnicodeDecodeError as exc:
                    raise BatchLineError(line_no, "bad json") from exc
            if not raw.strip():
                continue

            try:
                offer = parse_offer_line(raw)
            except ValidationError as exc:
                raise BatchLineError(line_no, _describe(exc)) from exc

            try:
                offer.validate_required()
                await self._store.save(offer)
            except TransitError as exc:
                if saved:
                    logger.info("Batch aborted at line %d after %d saved", line_no, saved)
                raise BatchLineError(line_no, exc) from exc

            saved += 1

        logger.info("Saved %d offer(s)", saved)
        return saved
