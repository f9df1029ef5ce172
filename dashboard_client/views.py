from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

from edge_functions.currency import currency_for_country

from .models import ExchangeRates, ForecastItem, ForecastResponse


ICON_LABELS: Dict[str, str] = {
    "01d": "Sun", "01n": "Moon",
    "02d": "Sun/Cloud", "02n": "Moon/Cloud",
    "03d": "Cloud", "03n": "Cloud",
    "04d": "Cloudy", "04n": "Cloudy",
    "09d": "Showers", "09n": "Showers",
    "10d": "Rain", "10n": "Rain",
    "11d": "Storm", "11n": "Storm",
    "13d": "Snow", "13n": "Snow",
    "50d": "Mist", "50n": "Mist",
}


def icon_label(code: str) -> str:
    return ICON_LABELS.get(code, code)


@dataclass(frozen=True)
class DailySummary:
    day: date
    high: float
    low: float
    icon: str


@dataclass(frozen=True)
class ExchangeView:
    currency: str
    rate: float  # units of currency per 1 KRW
    krw_per_unit: float
    last_updated: str


def local_time(item: ForecastItem, forecast: ForecastResponse) -> datetime:
    offset = forecast.city.timezone if forecast.city else 0
    return datetime.fromtimestamp(item.dt, tz=timezone(timedelta(seconds=int(offset))))


def hourly_preview(forecast: ForecastResponse, count: int = 4) -> List[ForecastItem]:
    return forecast.list[:count]


def daily_summaries(forecast: ForecastResponse, days: int = 5) -> List[DailySummary]:
    """Group forecast items by the city's local calendar day.

    The icon for a day is the one from the middle slot of that day.
    """
    grouped: Dict[date, List[ForecastItem]] = {}
    for item in forecast.list:
        grouped.setdefault(local_time(item, forecast).date(), []).append(item)

    summaries: List[DailySummary] = []
    for day, items in list(grouped.items())[:days]:
        temps = [item.main.temp for item in items]
        icons = [item.weather[0].icon for item in items]
        summaries.append(
            DailySummary(day=day, high=max(temps), low=min(temps), icon=icons[len(icons) // 2])
        )
    return summaries


def exchange_view(country: Optional[str], rates: ExchangeRates) -> Optional[ExchangeView]:
    """KRW price of the city's currency, or None when there is nothing to show."""
    currency = currency_for_country(country)
    if not currency or currency == "KRW":
        return None
    rate = rates.conversion_rates.get(currency)
    if not rate:
        return None
    return ExchangeView(
        currency=currency,
        rate=rate,
        krw_per_unit=1 / rate,
        last_updated=rates.time_last_update_utc,
    )
