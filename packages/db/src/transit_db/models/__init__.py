"""SQLAlchemy ORM models for transitdb."""

from .base import Base
from .offer import Offer
from .place import Place

__all__ = [
    "Base",
    "Offer",
    "Place",
]
