from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_geo_gateway
from ..errors import InvalidParameter, MissingParameter
from ..gateway import ModelGateway
from ..prompts import geocode_prompt
from ..schemas import GEO_SCHEMA, report_contract


router = APIRouter()


def _coordinate(raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise InvalidParameter("Latitude and longitude must be numeric.")


@router.get("/reverse-geo")
async def reverse_geo(
    lat: Optional[str] = Query(default=None),
    lon: Optional[str] = Query(default=None),
    gateway: ModelGateway = Depends(get_geo_gateway),
) -> Any:
    if not lat or not lat.strip() or not lon or not lon.strip():
        raise MissingParameter("Latitude and longitude parameters are required.")

    data = await gateway.query(geocode_prompt(_coordinate(lat), _coordinate(lon)))
    report_contract("geocode", data, GEO_SCHEMA)
    return data
