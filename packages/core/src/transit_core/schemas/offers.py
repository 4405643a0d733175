"""Offer wire schema and its validation rules."""

from __future__ import annotations

from datetime import UTC, date, datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..errors import OfferValidationError

MAX_SOURCE_LENGTH = 20
# Upper bound of the 32-bit offers.cost column.
MAX_COST = 2**31 - 1


def as_utc_naive(value: datetime | None) -> datetime | None:
    """Normalise a timestamp to naive UTC for storage."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


class OfferIn(BaseModel):
    """A single fare offer as submitted by a collector (one JSON line)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: int | None = None

    origin_airport: str = ""
    destination_airport: str = ""

    cost: int = 0
    source: str = ""

    available_from: date | None = None
    available_to: date | None = None

    offered_at: datetime | None = None
    expires_at: datetime | None = None

    @field_validator(
        "available_from", "available_to", "offered_at", "expires_at", mode="after"
    )
    @classmethod
    def _year_one_is_unset(cls, v: date | datetime | None) -> date | datetime | None:
        # 0001-01-01 is the zero value some collectors send for "no date".
        if v is not None and v.year == 1:
            return None
        return v

    @field_validator("origin_airport", "destination_airport", mode="after")
    @classmethod
    def _normalise_code(cls, v: str) -> str:
        return v.strip().upper()

    def validate_required(self) -> None:
        """Raise :class:`OfferValidationError` for the first missing field."""
        if self.cost <= 0:
            raise OfferValidationError("cost")
        if self.cost > MAX_COST:
            raise OfferValidationError("cost", f"cost above {MAX_COST}")
        if not self.source:
            raise OfferValidationError("source")
        if len(self.source) > MAX_SOURCE_LENGTH:
            raise OfferValidationError(
                "source", f"source longer than {MAX_SOURCE_LENGTH} characters"
            )
        if self.offered_at is None:
            raise OfferValidationError("offeredAt")
        if self.available_from is None:
            raise OfferValidationError("availableFrom")
