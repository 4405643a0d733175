"""Airport lookup router."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from transit_api.dependencies import DbDep, DirectoryDep

router = APIRouter(prefix="/airports", tags=["airports"])


class AirportLookupResponse(BaseModel):
    """Place id for an IATA code."""

    code: str
    place_id: int


@router.get("/{code}", response_model=AirportLookupResponse)
async def lookup_airport(
    code: str, db: DbDep, directory: DirectoryDep
) -> AirportLookupResponse:
    code = code.upper()
    place_id = await directory.resolve(db, code)
    return AirportLookupResponse(code=code, place_id=place_id)
