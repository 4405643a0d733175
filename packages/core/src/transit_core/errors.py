"""Error taxonomy shared by the store, the aggregator and the HTTP layer."""

from __future__ import annotations

from typing import Literal

AirportField = Literal["origin", "destination"]


class TransitError(Exception):
    """Base class for all transitdb errors."""


class OfferValidationError(TransitError):
    """An offer is missing a required field or carries an invalid value.

    Raised before any storage attempt; the caller is expected to fix the input.
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        self.message = message or f"missing {field}"
        super().__init__(self.message)


class UnknownAirportError(TransitError):
    """An offer references an airport code that is not in the directory."""

    def __init__(self, which: AirportField, code: str) -> None:
        self.which = which
        self.code = code
        super().__init__(f'unknown {which} airport "{code}"')


class InvalidParameterError(TransitError):
    """A query parameter could not be parsed."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        self.message = message or f"invalid '{name}'"
        super().__init__(self.message)


class AirportNotFoundError(TransitError):
    """Airport directory lookup miss."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f'airport "{code}" not found')


class StorageError(TransitError):
    """Opaque backing-store failure.

    The message is for server-side logs only and must not reach callers.
    """


class BatchLineError(TransitError):
    """The first failing line of a JSON-lines batch."""

    def __init__(self, line: int, cause: TransitError | str) -> None:
        self.line = line
        self.cause = cause
        super().__init__(f"line {line}: {cause}")

    @property
    def caller_fault(self) -> bool:
        """Whether the caller can fix the batch by editing the reported line."""
        return not isinstance(self.cause, StorageError)
