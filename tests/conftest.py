import json
import os
from types import SimpleNamespace
from typing import Any, List, Optional

# Read once at import time by the app config
os.environ.setdefault("EDGE_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient

from edge_functions.currency import SUPPORTED_CURRENCIES
from edge_functions.deps import get_exchange_gateway, get_geo_gateway, get_weather_gateway
from edge_functions.gateway import ModelGateway
from edge_functions.main import app
from edge_functions.schemas import EXCHANGE_SCHEMA, GEO_SCHEMA, WEATHER_SCHEMA


class FakeModel:
    """Stands in for ``genai.GenerativeModel``; records every prompt."""

    def __init__(self, text: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.prompts: List[str] = []

    async def generate_content_async(self, prompt: str) -> Any:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def forecast_payload(city: str = "London", country: str = "GB", count: int = 40,
                     start: int = 1_760_900_400, tz: int = 0) -> dict:
    items = []
    for i in range(count):
        dt = start + i * 3 * 3600
        temp = 10 + (i % 8)
        items.append({
            "dt": dt,
            "main": {"temp": temp, "feels_like": temp - 1, "temp_min": temp - 2, "temp_max": temp + 1,
                     "pressure": 1012, "humidity": 70},
            "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d" if i % 8 < 4 else "10n"}],
            "clouds": {"all": 75},
            "wind": {"speed": 4.1, "deg": 220},
            "visibility": 10000,
            "pop": 0.4,
            "sys": {"pod": "d" if i % 8 < 4 else "n"},
            "dt_txt": "2025-10-19 21:00:00",
        })
    return {
        "cod": "200",
        "message": 0,
        "cnt": count,
        "list": items,
        "city": {
            "id": 2643743, "name": city, "coord": {"lat": 51.5085, "lon": -0.1257},
            "country": country, "population": 8_961_989, "timezone": tz,
            "sunrise": 1_760_855_000, "sunset": 1_760_893_000,
        },
    }


def exchange_payload(**overrides: float) -> dict:
    rates = {code: 0.001 for code in SUPPORTED_CURRENCIES}
    rates.update({"KRW": 1.0, "USD": 0.00072, "GBP": 0.00054, "JPY": 0.108, "EUR": 0.00062})
    rates.update(overrides)
    return {
        "result": "success",
        "base_code": "KRW",
        "conversion_rates": rates,
        "time_last_update_utc": "Sun, 19 Oct 2025 00:00:01 +0000",
        "time_last_update_unix": 1_760_832_001,
        "time_next_update_utc": "Mon, 20 Oct 2025 00:00:01 +0000",
        "time_next_update_unix": 1_760_918_401,
    }


GEO_PAYLOAD = [{"name": "Seoul", "lat": 37.5665, "lon": 126.978, "country": "KR"}]


@pytest.fixture
def models():
    return SimpleNamespace(
        geocode=FakeModel(json.dumps(GEO_PAYLOAD)),
        weather=FakeModel(json.dumps(forecast_payload())),
        exchange=FakeModel(json.dumps(exchange_payload())),
    )


@pytest.fixture
def gateways(models):
    return SimpleNamespace(
        geocode=ModelGateway("geocode", GEO_SCHEMA, model=models.geocode),
        weather=ModelGateway("weather", WEATHER_SCHEMA, model=models.weather),
        exchange=ModelGateway("exchange", EXCHANGE_SCHEMA, model=models.exchange),
    )


@pytest.fixture
def edge_app(gateways):
    app.dependency_overrides[get_geo_gateway] = lambda: gateways.geocode
    app.dependency_overrides[get_weather_gateway] = lambda: gateways.weather
    app.dependency_overrides[get_exchange_gateway] = lambda: gateways.exchange
    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(edge_app):
    return TestClient(edge_app)
