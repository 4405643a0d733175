"""Place model."""

from __future__ import annotations

from decimal import Decimal  # noqa: TC003

from sqlalchemy import Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Place(Base):
    """Places table - geographic reference data, optionally an airport."""

    __tablename__ = "places"

    place_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    latitude: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    longitude: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(String(2), nullable=False)
    iata_code: Mapped[str | None] = mapped_column(String(3))

    __table_args__ = (Index("place_airport_idx", "iata_code", unique=True),)

    def __repr__(self) -> str:
        return f"<Place {self.iata_code or self.place_id} ({self.name})>"
