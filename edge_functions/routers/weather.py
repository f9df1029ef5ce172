from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_weather_gateway
from ..errors import MissingParameter
from ..gateway import ModelGateway
from ..prompts import forecast_prompt
from ..schemas import WEATHER_SCHEMA, report_contract


router = APIRouter()


@router.get("/weather")
async def weather(
    city: Optional[str] = Query(default=None),
    gateway: ModelGateway = Depends(get_weather_gateway),
) -> Any:
    if not city or not city.strip():
        raise MissingParameter("City parameter is required.")

    data = await gateway.query(forecast_prompt(city.strip()))
    report_contract("weather", data, WEATHER_SCHEMA)
    return data
