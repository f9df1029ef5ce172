from datetime import date

import pytest

from dashboard_client.models import ExchangeRates, ForecastResponse
from dashboard_client.views import daily_summaries, exchange_view, hourly_preview, icon_label

from .conftest import exchange_payload, forecast_payload

# 2025-10-19 00:00:00 UTC
MIDNIGHT_UTC = 1_760_832_000


def test_hourly_preview_takes_first_four():
    forecast = ForecastResponse.model_validate(forecast_payload())
    preview = hourly_preview(forecast)
    assert [item.dt for item in preview] == [item.dt for item in forecast.list[:4]]


def test_daily_summaries_group_by_local_day():
    forecast = ForecastResponse.model_validate(forecast_payload(start=MIDNIGHT_UTC))
    days = daily_summaries(forecast)

    assert len(days) == 5
    assert days[0].day == date(2025, 10, 19)
    # temps cycle 10..17 within each 8-slot day
    assert days[0].high == 17 and days[0].low == 10
    assert days[0].icon == "10n"


def test_daily_summaries_respect_timezone_offset():
    forecast = ForecastResponse.model_validate(forecast_payload(start=MIDNIGHT_UTC, tz=9 * 3600))
    days = daily_summaries(forecast, days=10)
    # 00:00 UTC is 09:00 KST, so the first local day only has 5 slots and a sixth day appears
    assert days[0].day == date(2025, 10, 19)
    assert len(days) == 6


def test_exchange_view_inverts_rate():
    rates = ExchangeRates.model_validate(exchange_payload(GBP=0.0005))
    view = exchange_view("GB", rates)
    assert view.currency == "GBP"
    assert view.krw_per_unit == pytest.approx(2000)
    assert view.last_updated == rates.time_last_update_utc


def test_exchange_view_hidden_for_krw_unknown_or_zero():
    rates = ExchangeRates.model_validate(exchange_payload(USD=0))
    assert exchange_view("KR", rates) is None
    assert exchange_view("AQ", rates) is None
    assert exchange_view(None, rates) is None
    assert exchange_view("US", rates) is None


def test_icon_label_falls_back_to_code():
    assert icon_label("01d") == "Sun"
    assert icon_label("99x") == "99x"
