import asyncio
import json
import logging
import math
import time
from typing import Any, Callable, Optional, Tuple

import httpx
from pydantic import BaseModel, ValidationError

from .config import CONFIG
from .errors import CityNotFound, DashboardError
from .models import ExchangeRates, ForecastResponse, GeoResult
from .storage import LocalStorage


logger = logging.getLogger(__name__)

EXCHANGE_RATE_CACHE_KEY = "exchangeRateCache"
EXCHANGE_RATE_CACHE_DURATION_MS = 60 * 60 * 1000  # 1 hour


def _validate(model: type[BaseModel], payload: Any, what: str) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(p) for p in first.get("loc", ())) or "payload"
        raise DashboardError(f"Invalid {what} data received ({where}: {first.get('msg')}).")


class DashboardService:
    """Client-side access to the edge functions.

    Owns the hourly exchange-rate cache kept in ``storage``.
    """

    def __init__(
        self,
        storage: LocalStorage,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.storage = storage
        self.base_url = (base_url or CONFIG.api_base).rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=CONFIG.http_timeout_sec)
        self.clock = clock

    async def __aenter__(self) -> "DashboardService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    async def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        try:
            resp = await self.client.get(f"{self.base_url}{path}", params=params)
        except httpx.HTTPError as e:
            raise DashboardError(f"Request failed: {e}")

        if not resp.is_success:
            try:
                error_data = resp.json()
            except ValueError:
                error_data = {"error": "An unknown API error occurred."}
            message = error_data.get("error") if isinstance(error_data, dict) else None
            raise DashboardError(message or f"Request failed with status: {resp.status_code}")

        try:
            return resp.json()
        except ValueError:
            raise DashboardError("Received a malformed response from the server.")

    async def get_forecast(self, identifier: str) -> ForecastResponse:
        payload = await self._get_json("/weather", params={"city": identifier})
        return _validate(ForecastResponse, payload, "forecast")

    async def reverse_geocode(self, lat: float, lon: float) -> Optional[GeoResult]:
        payload = await self._get_json("/reverse-geo", params={"lat": lat, "lon": lon})
        if not isinstance(payload, list) or not payload:
            return None
        return _validate(GeoResult, payload[0], "location")

    def _read_cached_rates(self) -> Optional[ExchangeRates]:
        try:
            cached_item = self.storage.get_item(EXCHANGE_RATE_CACHE_KEY)
            if not cached_item:
                return None
            cached = json.loads(cached_item)
            timestamp = float(cached["timestamp"])
            if not math.isfinite(timestamp):
                raise ValueError(f"non-finite cache timestamp {timestamp!r}")
            data = cached["data"]
        except (ValueError, TypeError, KeyError) as e:
            logger.error("Failed to read exchange rate cache: %s", e)
            return None

        if self._now_ms() - timestamp >= EXCHANGE_RATE_CACHE_DURATION_MS:
            return None
        try:
            return ExchangeRates.model_validate(data)
        except ValidationError as e:
            logger.error("Discarding invalid exchange rate cache: %s", e)
            return None

    def _write_cached_rates(self, data: Any) -> None:
        try:
            cache_item = {"timestamp": self._now_ms(), "data": data}
            self.storage.set_item(EXCHANGE_RATE_CACHE_KEY, json.dumps(cache_item, ensure_ascii=False))
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write to exchange rate cache: %s", e)

    async def get_exchange_rates(self) -> ExchangeRates:
        cached = self._read_cached_rates()
        if cached is not None:
            return cached

        payload = await self._get_json("/exchange-rate")
        rates = _validate(ExchangeRates, payload, "exchange rate")
        self._write_cached_rates(payload)
        return rates

    async def fetch_forecast_and_rates(self, identifier: str) -> Tuple[ForecastResponse, ExchangeRates]:
        forecast, rates = await asyncio.gather(
            self.get_forecast(identifier),
            self.get_exchange_rates(),
            return_exceptions=True,
        )
        # Both-or-nothing; the forecast failure is reported when both fail
        for res in (forecast, rates):
            if isinstance(res, BaseException):
                raise res

        if not forecast.city_name:
            raise CityNotFound(f"Could not find city information for '{identifier}'.")
        return forecast, rates
