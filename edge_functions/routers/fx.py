from typing import Any

from fastapi import APIRouter, Depends

from ..currency import SUPPORTED_CURRENCIES
from ..deps import get_exchange_gateway
from ..gateway import ModelGateway
from ..prompts import exchange_prompt
from ..schemas import EXCHANGE_SCHEMA, report_contract


router = APIRouter()


@router.get("/exchange-rate")
async def exchange_rate(gateway: ModelGateway = Depends(get_exchange_gateway)) -> Any:
    data = await gateway.query(exchange_prompt(SUPPORTED_CURRENCIES))
    report_contract("exchange", data, EXCHANGE_SCHEMA)
    return data
