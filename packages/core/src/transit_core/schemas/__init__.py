"""Core schemas for transitdb."""

from .offers import OfferIn, as_utc_naive
from .places import PlaceIn
from .quotes import DEFAULT_LIMIT, ListQuotesRequest, Quote, QuoteQuery

__all__ = [
    "DEFAULT_LIMIT",
    "ListQuotesRequest",
    "OfferIn",
    "PlaceIn",
    "Quote",
    "QuoteQuery",
    "as_utc_naive",
]
