"""Backing-store adapters that classify database failures.

The offer store writes both airport ids through sub-selects on ``places``;
an unknown IATA code therefore surfaces as a NOT NULL violation on
``origin_id`` or ``dest_id``.  Each adapter knows how its engine reports
which column failed, and turns that into a typed error.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from transit_core.errors import StorageError, UnknownAirportError

if TYPE_CHECKING:
    from sqlalchemy.exc import DBAPIError

    from transit_core.errors import AirportField, TransitError

# Column of the offers table -> which side of the route it references.
_AIRPORT_COLUMNS: dict[str, AirportField] = {
    "origin_id": "origin",
    "dest_id": "destination",
}


class StoreErrorAdapter:
    """Classify a failed offer write into ``UnknownAirportError`` or ``StorageError``."""

    dialect: str = ""

    def not_null_column(self, exc: DBAPIError) -> str | None:
        """Return the column whose NOT NULL constraint failed, if any."""
        return None

    def classify(
        self, exc: DBAPIError, *, origin_code: str, destination_code: str
    ) -> TransitError:
        which = _AIRPORT_COLUMNS.get(self.not_null_column(exc) or "")
        if which == "origin":
            return UnknownAirportError("origin", origin_code)
        if which == "destination":
            return UnknownAirportError("destination", destination_code)
        return StorageError(str(exc.orig) if exc.orig is not None else str(exc))


class PostgresErrorAdapter(StoreErrorAdapter):
    """asyncpg reports SQLSTATE 23502 with the column on the driver exception."""

    dialect = "postgresql"
    _NOT_NULL_VIOLATION = "23502"

    def not_null_column(self, exc: DBAPIError) -> str | None:
        orig = exc.orig
        if orig is None:
            return None
        code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        if code != self._NOT_NULL_VIOLATION:
            return None
        # The SQLAlchemy asyncpg adapter chains the native asyncpg error.
        for candidate in (orig, orig.__cause__):
            column = getattr(candidate, "column_name", None)
            if column:
                return column
        return None


class SqliteErrorAdapter(StoreErrorAdapter):
    """SQLite only reports the failing column in the message text."""

    dialect = "sqlite"
    _NOT_NULL_RE = re.compile(r"NOT NULL constraint failed: \w+\.(\w+)")

    def not_null_column(self, exc: DBAPIError) -> str | None:
        match = self._NOT_NULL_RE.search(str(exc.orig))
        return match.group(1) if match else None


_ADAPTERS: dict[str, type[StoreErrorAdapter]] = {
    PostgresErrorAdapter.dialect: PostgresErrorAdapter,
    SqliteErrorAdapter.dialect: SqliteErrorAdapter,
}


def adapter_for(dialect_name: str) -> StoreErrorAdapter:
    """Return the error adapter for a SQLAlchemy dialect name.

    Unknown dialects get the base adapter, which classifies everything as
    ``StorageError``.
    """
    return _ADAPTERS.get(dialect_name, StoreErrorAdapter)()
