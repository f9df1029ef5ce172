from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Iterable, Optional

from .config import CONFIG


def utc_now_string(now: Optional[datetime] = None) -> str:
    # e.g. "Mon, 19 Oct 2026 20:34:00 GMT"
    return format_datetime(now or datetime.now(timezone.utc), usegmt=True)


def geocode_prompt(lat: float, lon: float) -> str:
    return (
        f"Provide geocoding information for the coordinates latitude: {lat}, longitude: {lon}. "
        "Return only a single, most relevant result in an array."
    )


def forecast_prompt(city: str, now: Optional[datetime] = None) -> str:
    return (
        f"As of {utc_now_string(now)}, provide the most current and accurate 5-day weather "
        f'forecast with 3-hour intervals for the city "{city}".\n'
        "The response must exactly match the provided JSON schema.\n"
        "- The 'city' object in the response should contain the accurately identified city name, "
        "country code, and coordinates.\n"
        "- Generate realistic and consistent weather data based on the current time.\n"
        "- Create exactly 40 forecast list items, in chronological order.\n"
        "- Use OpenWeatherMap icon codes (e.g., '01d', '10n').\n"
        f"- Weather descriptions must be in {CONFIG.description_language}."
    )


def exchange_prompt(currencies: Iterable[str], now: Optional[datetime] = None) -> str:
    return (
        f"As of {utc_now_string(now)}, provide the latest real-time currency exchange rates "
        f"with {CONFIG.base_currency} (South Korean Won) as the base currency. "
        f"Provide rates for all of the following currencies: {', '.join(currencies)}."
    )
