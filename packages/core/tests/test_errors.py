"""Tests for error messages callers see."""

from __future__ import annotations

from transit_core.errors import (
    BatchLineError,
    InvalidParameterError,
    OfferValidationError,
    StorageError,
    UnknownAirportError,
)


def test_messages():
    assert str(OfferValidationError("source")) == "missing source"
    assert str(UnknownAirportError("origin", "XXX")) == 'unknown origin airport "XXX"'
    assert str(InvalidParameterError("start")) == "invalid 'start'"


def test_batch_line_error_fault():
    caller = BatchLineError(3, OfferValidationError("cost"))
    storage = BatchLineError(1, StorageError("disk full"))

    assert str(caller) == "line 3: missing cost"
    assert caller.caller_fault
    assert not storage.caller_fault
    assert BatchLineError(2, "bad json").caller_fault
