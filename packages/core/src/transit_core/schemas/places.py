"""Place reference data schema (seed files)."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PlaceIn(BaseModel):
    """A place entry as read from a seed file."""

    name: str = Field(min_length=1, max_length=100)
    country: str = Field(min_length=2, max_length=2)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    iata_code: str | None = Field(default=None, min_length=3, max_length=3)
