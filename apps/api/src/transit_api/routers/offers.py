"""Offer ingestion router."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from transit_api.dependencies import get_ingest_service
from transit_api.services.ingest_service import IngestService, split_lines

router = APIRouter(prefix="/offers", tags=["offers"])

IngestDep = Annotated[IngestService, Depends(get_ingest_service)]


@router.post("", response_class=PlainTextResponse)
async def add_offers(request: Request, service: IngestDep) -> str:
    """Save a JSON-lines batch of offers.

    The first bad line fails the request; earlier lines stay saved.
    """
    body = await request.body()
    saved = await service.add_offers(split_lines(body))
    return f"saved {saved} records\n"
