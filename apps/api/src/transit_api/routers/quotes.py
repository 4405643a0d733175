"""Quote query router."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from transit_api.dependencies import get_quote_service
from transit_api.services.quote_service import QuoteService, upcoming_window
from transit_core.schemas import ListQuotesRequest, Quote

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["quotes"])

QuoteDep = Annotated[QuoteService, Depends(get_quote_service)]


@router.get("", response_model=list[Quote])
async def list_quotes(request: Request, service: QuoteDep) -> list[Quote]:
    """Cheapest unexpired quote per route, filtered and paginated."""
    query = ListQuotesRequest.from_params(
        request.query_params, default_limit=request.app.state.settings.default_limit
    )
    logger.debug("List quotes %s", query)
    return await service.list_quotes(query)


@router.get("/cheapest", response_class=PlainTextResponse)
async def cheapest_per_route(request: Request, service: QuoteDep) -> str:
    """One ``origin,destination,cost`` line per route for the coming window."""
    start, end = upcoming_window(request.app.state.settings.cheapest_window_days)
    quotes = await service.cheapest_per_route(start, end)
    return "".join(f"{q.as_csv_line()}\n" for q in quotes)
