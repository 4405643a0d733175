"""Offer model."""

from __future__ import annotations

from datetime import date, datetime  # noqa: TC003
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .place import Place


class Offer(Base):
    """Offers table - append-only fare offers submitted by collectors."""

    __tablename__ = "offers"

    offer_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    origin_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("places.place_id"), nullable=False
    )
    dest_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("places.place_id"), nullable=False
    )
    cost: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[str] = mapped_column(String(20), nullable=False)
    start_time: Mapped[date] = mapped_column(Date, nullable=False)
    end_time: Mapped[date | None] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime)

    # Relationships
    origin: Mapped[Place] = relationship(foreign_keys=[origin_id])
    destination: Mapped[Place] = relationship(foreign_keys=[dest_id])

    __table_args__ = (
        Index(
            "offer_cost_join_idx",
            "origin_id",
            "dest_id",
            "start_time",
            "expires_at",
            "cost",
        ),
        Index("offer_date_idx", "start_time"),
    )

    def __repr__(self) -> str:
        return f"<Offer {self.offer_id} {self.origin_id}->{self.dest_id} {self.cost}>"
