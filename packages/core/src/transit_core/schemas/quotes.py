"""Quote result schema and the typed queries that produce it."""

from __future__ import annotations

from collections.abc import Mapping  # noqa: TC003
from datetime import date, datetime  # noqa: TC003
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..errors import InvalidParameterError

DEFAULT_LIMIT = 100


class Quote(BaseModel):
    """Cheapest known offer for one route within a query's constraints."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    cost: int
    origin: str = Field(description="IATA airport code")
    origin_name: str
    origin_country: str
    dest: str = Field(description="IATA airport code")
    dest_name: str
    dest_country: str
    cheapest_date: date = Field(alias="date")
    source: str

    def as_csv_line(self) -> str:
        return f"{self.origin},{self.dest},{self.cost}"


class QuoteQuery(BaseModel):
    """Parameters of a single cheapest-per-route aggregation.

    Empty ``origins`` / ``destinations`` mean "no filter".  ``limit=None``
    returns every route.  ``now`` is the evaluation time used for the
    expiration check and defaults to the current UTC time.
    """

    start_date: date
    end_date: date
    origins: list[str] = Field(default_factory=list)
    destinations: list[str] = Field(default_factory=list)
    consider_expiration: bool = True
    limit: int | None = None
    offset: int = 0
    now: datetime | None = None


class ListQuotesRequest(BaseModel):
    """External parameters of ``GET /quotes`` after defaulting and coercion."""

    start_date: date
    end_date: date
    origins: list[str] = Field(default_factory=list)
    destinations: list[str] = Field(default_factory=list)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1)
    offset: int = Field(default=0, ge=0)

    @classmethod
    def from_params(
        cls, params: Mapping[str, Any], *, default_limit: int = DEFAULT_LIMIT
    ) -> ListQuotesRequest:
        """Build a request from a (possibly multi-valued) parameter mapping.

        Accepts Starlette ``QueryParams`` or any mapping; repeated ``origin``
        and ``dest`` values are read with ``getlist`` when available.
        """
        limit = _parse_int(params, "limit")
        return cls(
            start_date=_parse_date(params, "start"),
            end_date=_parse_date(params, "end"),
            origins=_get_codes(params, "origin"),
            destinations=_get_codes(params, "dest"),
            limit=limit or default_limit,
            offset=_parse_int(params, "offset"),
        )

    def to_query(self) -> QuoteQuery:
        return QuoteQuery(
            start_date=self.start_date,
            end_date=self.end_date,
            origins=self.origins,
            destinations=self.destinations,
            consider_expiration=True,
            limit=self.limit,
            offset=self.offset,
        )


def _parse_date(params: Mapping[str, Any], name: str) -> date:
    raw = params.get(name)
    if not raw:
        raise InvalidParameterError(name)
    try:
        value = date.fromisoformat(str(raw))
    except ValueError:
        raise InvalidParameterError(name) from None
    # Only zero-padded YYYY-MM-DD; fromisoformat also takes week and basic forms.
    if value.isoformat() != str(raw):
        raise InvalidParameterError(name)
    return value


def _parse_int(params: Mapping[str, Any], name: str) -> int:
    raw = params.get(name)
    if raw is None or raw == "":
        return 0
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidParameterError(name) from None
    if value < 0:
        raise InvalidParameterError(name, f"'{name}' must not be negative")
    return value


def _get_codes(params: Mapping[str, Any], name: str) -> list[str]:
    getlist = getattr(params, "getlist", None)
    if getlist is not None:
        values = getlist(name)
    else:
        raw = params.get(name)
        if raw is None:
            values = []
        elif isinstance(raw, str):
            values = [raw]
        else:
            values = list(raw)
    return [v.strip().upper() for v in values if v and v.strip()]
