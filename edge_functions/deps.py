from fastapi import Request

from .errors import GatewayFailure
from .gateway import ModelGateway


def _gateway(request: Request, kind: str) -> ModelGateway:
    gateways = getattr(request.app.state, "gateways", None)
    if not gateways or kind not in gateways:
        raise GatewayFailure("Model gateway not initialized")
    return gateways[kind]


def get_geo_gateway(request: Request) -> ModelGateway:
    return _gateway(request, "geocode")


def get_weather_gateway(request: Request) -> ModelGateway:
    return _gateway(request, "weather")


def get_exchange_gateway(request: Request) -> ModelGateway:
    return _gateway(request, "exchange")
