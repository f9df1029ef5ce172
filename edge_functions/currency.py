from typing import Dict, Final, Tuple


# ISO 3166-1 alpha-2 country -> ISO 4217 currency
CURRENCY_MAP: Final[Dict[str, str]] = {
    # Asia
    "JP": "JPY", "KR": "KRW", "CN": "CNY", "HK": "HKD", "SG": "SGD", "TH": "THB",
    "VN": "VND", "IN": "INR", "ID": "IDR", "MY": "MYR", "PH": "PHP",
    # North America
    "US": "USD", "CA": "CAD", "MX": "MXN",
    # Europe (non-euro)
    "GB": "GBP", "CH": "CHF", "SE": "SEK", "NO": "NOK", "DK": "DKK", "CZ": "CZK",
    "PL": "PLN", "HU": "HUF", "TR": "TRY",
    # Eurozone
    "AD": "EUR", "AT": "EUR", "BE": "EUR", "CY": "EUR", "EE": "EUR", "FI": "EUR",
    "FR": "EUR", "DE": "EUR", "GR": "EUR", "IE": "EUR", "IT": "EUR", "LV": "EUR",
    "LT": "EUR", "LU": "EUR", "MT": "EUR", "MC": "EUR", "NL": "EUR", "PT": "EUR",
    "SM": "EUR", "SK": "EUR", "SI": "EUR", "ES": "EUR", "VA": "EUR", "EU": "EUR",
    # Oceania / others
    "AU": "AUD", "NZ": "NZD",
    "BR": "BRL",
    "ZA": "ZAR",
}


def _unique(values) -> Tuple[str, ...]:
    seen: Dict[str, None] = {}
    for v in values:
        seen.setdefault(v, None)
    return tuple(seen)


SUPPORTED_CURRENCIES: Final[Tuple[str, ...]] = _unique(CURRENCY_MAP.values())


def currency_for_country(country_code: str | None) -> str | None:
    if not country_code:
        return None
    return CURRENCY_MAP.get(country_code.strip().upper())
