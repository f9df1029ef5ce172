"""Response schemas handed to Gemini and the contract checker that reads them.

The schema dicts use the Gemini ``response_schema`` dialect (``OBJECT``,
``ARRAY``, ``STRING``, ``NUMBER``). They are built once at import time and are
never mutated afterwards.
"""
import logging
from typing import Any, Dict, List, Optional

from .currency import SUPPORTED_CURRENCIES


Schema = Dict[str, Any]


def _num(description: Optional[str] = None) -> Schema:
    out: Schema = {"type": "NUMBER"}
    if description:
        out["description"] = description
    return out


def _str(description: Optional[str] = None) -> Schema:
    out: Schema = {"type": "STRING"}
    if description:
        out["description"] = description
    return out


def _obj(properties: Dict[str, Schema], required: Optional[List[str]] = None,
         description: Optional[str] = None) -> Schema:
    out: Schema = {"type": "OBJECT", "properties": properties}
    if required:
        out["required"] = list(required)
    if description:
        out["description"] = description
    return out


def _arr(items: Schema, description: Optional[str] = None) -> Schema:
    out: Schema = {"type": "ARRAY", "items": items}
    if description:
        out["description"] = description
    return out


GEO_SCHEMA: Schema = _arr(
    _obj(
        {
            "name": _str("The English name of the city."),
            "lat": _num("Latitude of the city."),
            "lon": _num("Longitude of the city."),
            "country": _str("The 2-letter ISO 3166-1 alpha-2 country code."),
        },
        required=["name", "lat", "lon", "country"],
    )
)


_MAIN = _obj(
    {
        "temp": _num("Temperature in Celsius."),
        "feels_like": _num("Feels like temperature in Celsius."),
        "temp_min": _num("Minimum temperature for the period in Celsius."),
        "temp_max": _num("Maximum temperature for the period in Celsius."),
        "pressure": _num("Atmospheric pressure in hPa."),
        "humidity": _num("Humidity in %."),
    },
    required=["temp", "feels_like", "temp_min", "temp_max", "pressure", "humidity"],
)

_CONDITION = _obj(
    {
        "id": _num("Weather condition id."),
        "main": _str("Group of weather parameters (Rain, Snow, etc.)."),
        "description": _str("Weather condition within the group, in the requested language."),
        "icon": _str("OpenWeatherMap weather icon id (e.g., '01d', '10n')."),
    },
    required=["id", "main", "description", "icon"],
)

_FORECAST_ITEM = _obj(
    {
        "dt": _num("Timestamp in UNIX UTC."),
        "main": _MAIN,
        "weather": _arr(_CONDITION),
        "clouds": _obj({"all": _num("Cloudiness in %.")}),
        "wind": _obj({
            "speed": _num("Wind speed in meter/sec."),
            "deg": _num("Wind direction in degrees."),
        }),
        "visibility": _num("Visibility in meters."),
        "pop": _num("Probability of precipitation (0-1)."),
        "sys": _obj({"pod": _str("'d' for day, 'n' for night.")}),
        "dt_txt": _str("Date and time in 'YYYY-MM-DD HH:MM:SS' format."),
    },
    required=["dt", "main", "weather", "clouds", "wind", "visibility", "pop", "sys", "dt_txt"],
)

_CITY = _obj(
    {
        "id": _num("City ID."),
        "name": _str("City name."),
        "coord": _obj({"lat": _num(), "lon": _num()}),
        "country": _str("Country code (e.g., 'KR', 'US')."),
        "population": _num(),
        "timezone": _num("Shift in seconds from UTC."),
        "sunrise": _num("Sunrise time, UNIX, UTC."),
        "sunset": _num("Sunset time, UNIX, UTC."),
    },
    required=["id", "name", "coord", "country", "population", "timezone", "sunrise", "sunset"],
)

WEATHER_SCHEMA: Schema = _obj(
    {
        "cod": _str("API response code, should be '200'"),
        "message": _num("Internal parameter, should be 0"),
        "cnt": _num("Number of forecast items, should be 40"),
        "list": _arr(
            _FORECAST_ITEM,
            "An array of 40 weather forecast items, for every 3 hours over 5 days.",
        ),
        "city": _CITY,
    },
    required=["cod", "cnt", "list", "city"],
)


EXCHANGE_SCHEMA: Schema = _obj(
    {
        "result": _str("Should be 'success'."),
        "documentation": _str(),
        "terms_of_use": _str(),
        "time_last_update_unix": _num("Last update time, UNIX, UTC."),
        "time_last_update_utc": _str("Last update time string, UTC."),
        "time_next_update_unix": _num("Next update time, UNIX, UTC."),
        "time_next_update_utc": _str("Next update time string, UTC."),
        "base_code": _str("Base currency, should be 'KRW'."),
        "conversion_rates": _obj(
            {code: _num(f"Rate for {code}") for code in SUPPORTED_CURRENCIES},
            required=list(SUPPORTED_CURRENCIES),
        ),
    },
    required=["result", "time_last_update_utc", "base_code", "conversion_rates"],
)


def _type_ok(value: Any, expected: str) -> bool:
    if expected == "OBJECT":
        return isinstance(value, dict)
    if expected == "ARRAY":
        return isinstance(value, list)
    if expected == "STRING":
        return isinstance(value, str)
    if expected == "NUMBER":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return True


def check_contract(payload: Any, schema: Schema, path: str = "$") -> List[str]:
    """Return the ways ``payload`` deviates from ``schema``.

    A missing required field is reported as ``"missing: <path>"``; a value of
    the wrong primitive type as ``"type: <path> expected <TYPE>"``. Nested
    values under a mistyped container are not inspected.
    """
    expected = schema.get("type")
    if expected and not _type_ok(payload, expected):
        return [f"type: {path} expected {expected}"]

    issues: List[str] = []
    if expected == "OBJECT":
        properties = schema.get("properties", {})
        for key in schema.get("required", []):
            if payload.get(key) is None:
                issues.append(f"missing: {path}.{key}")
        for key, sub in properties.items():
            if payload.get(key) is not None:
                issues.extend(check_contract(payload[key], sub, f"{path}.{key}"))
    elif expected == "ARRAY":
        items = schema.get("items")
        if items:
            for i, item in enumerate(payload):
                issues.extend(check_contract(item, items, f"{path}[{i}]"))
    return issues


def report_contract(kind: str, payload: Any, schema: Schema) -> List[str]:
    """Log contract issues for a model payload; the payload is never rejected."""
    issues = check_contract(payload, schema)
    if issues:
        shown = ", ".join(issues[:10])
        more = f" (+{len(issues) - 10} more)" if len(issues) > 10 else ""
        logging.warning("Schema contract issues in %s payload: %s%s", kind, shown, more)
    return issues
