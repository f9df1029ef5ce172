import json

import pytest
from fastapi.testclient import TestClient

from edge_functions.config import CONFIG
from edge_functions.currency import SUPPORTED_CURRENCIES
from edge_functions.main import CORS_HEADERS, app

from .conftest import GEO_PAYLOAD, forecast_payload


def assert_cors(resp) -> None:
    for name, value in CORS_HEADERS.items():
        assert resp.headers[name] == value


def test_weather_returns_model_payload_verbatim(client, models):
    resp = client.get("/weather", params={"city": "London"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json() == forecast_payload()
    assert_cors(resp)

    prompt = models.weather.prompts[0]
    assert '"London"' in prompt
    assert "exactly 40" in prompt
    assert "GMT" in prompt
    assert CONFIG.description_language in prompt


@pytest.mark.parametrize("params", [{}, {"city": ""}, {"city": "   "}])
def test_weather_requires_city(client, models, params):
    resp = client.get("/weather", params=params)
    assert resp.status_code == 400
    assert resp.json() == {"error": "City parameter is required."}
    assert_cors(resp)
    assert models.weather.prompts == []


def test_weather_tolerates_short_forecast(client, models):
    models.weather.text = json.dumps(forecast_payload(count=7))
    resp = client.get("/weather", params={"city": "London"})
    assert resp.status_code == 200
    assert len(resp.json()["list"]) == 7


def test_reverse_geo_returns_array(client, models):
    resp = client.get("/reverse-geo", params={"lat": "37.5665", "lon": "126.978"})
    assert resp.status_code == 200
    assert resp.json() == GEO_PAYLOAD
    assert "latitude: 37.5665" in models.geocode.prompts[0]
    assert "longitude: 126.978" in models.geocode.prompts[0]


def test_reverse_geo_empty_array_is_not_an_error(client, models):
    models.geocode.text = "[]"
    resp = client.get("/reverse-geo", params={"lat": "0", "lon": "0"})
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.parametrize(
    "params",
    [{"lat": "", "lon": "37.5"}, {"lat": "126.9"}, {"lon": "37.5"}, {}],
)
def test_reverse_geo_requires_both_coordinates(client, models, params):
    resp = client.get("/reverse-geo", params=params)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Latitude and longitude parameters are required."}
    assert_cors(resp)
    assert models.geocode.prompts == []


def test_reverse_geo_rejects_non_numeric(client, models):
    resp = client.get("/reverse-geo", params={"lat": "north", "lon": "37.5"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Latitude and longitude must be numeric."}
    assert models.geocode.prompts == []


def test_exchange_rate_prompt_lists_each_currency_once(client, models):
    resp = client.get("/exchange-rate")
    assert resp.status_code == 200
    assert resp.json()["base_code"] == "KRW"

    prompt = models.exchange.prompts[0]
    listed = prompt.split("following currencies: ", 1)[1].rstrip(".").split(", ")
    assert listed == list(SUPPORTED_CURRENCIES)
    assert len(listed) == len(set(listed))


def test_gateway_failure_maps_to_500(client, models):
    models.weather.error = RuntimeError("429 Resource has been exhausted")
    resp = client.get("/weather", params={"city": "London"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Gemini API Error: 429 Resource has been exhausted"}
    assert_cors(resp)


def test_empty_model_response_maps_to_500(client, models):
    models.exchange.text = "   "
    resp = client.get("/exchange-rate")
    assert resp.status_code == 500
    assert resp.json()["error"].startswith("Gemini API Error: ")
    assert "empty response" in resp.json()["error"]


def test_unparsable_model_response_maps_to_500(client, models):
    models.weather.text = "I cannot help with that."
    resp = client.get("/weather", params={"city": "London"})
    assert resp.status_code == 500
    assert "I cannot help with that." in resp.json()["error"]


def test_malformed_payload_is_still_returned(client, models):
    broken = forecast_payload()
    del broken["cnt"]
    broken["list"][0]["main"]["temp"] = "12.5"
    models.weather.text = json.dumps(broken)
    resp = client.get("/weather", params={"city": "London"})
    assert resp.status_code == 200
    assert resp.json() == broken


@pytest.mark.parametrize("path", ["/weather", "/reverse-geo", "/exchange-rate", "/unknown"])
def test_options_short_circuits(client, models, path):
    resp = client.options(path)
    assert resp.status_code == 200
    assert resp.content == b""
    assert_cors(resp)
    assert models.weather.prompts == []
    assert models.geocode.prompts == []
    assert models.exchange.prompts == []


def test_health_probe(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_startup_requires_gemini_key(monkeypatch):
    monkeypatch.setattr(CONFIG, "gemini_api_key", None)
    with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
        with TestClient(app):
            pass
