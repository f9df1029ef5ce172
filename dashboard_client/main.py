from __future__ import annotations

import asyncio
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import CONFIG
from .errors import DashboardError, LocationNotFound
from .favorites import FavoritesStore
from .models import ExchangeRates, ForecastResponse
from .service import DashboardService
from .storage import LocalStorage
from .views import daily_summaries, exchange_view, hourly_preview, icon_label, local_time


logging.basicConfig(level=logging.WARNING, format="%(asctime)s - %(levelname)s - %(message)s")

app = typer.Typer(help="Weather and KRW exchange-rate dashboard.")
console = Console()
notify_console = Console(stderr=True)


def _storage() -> LocalStorage:
    return LocalStorage(CONFIG.state_file)


def _notify(message: str, error: bool = False) -> None:
    notify_console.print(message, style="bold red" if error else "cyan")


def _fail(message: str) -> None:
    _notify(message, error=True)
    raise typer.Exit(code=1)


def render(forecast: ForecastResponse, rates: ExchangeRates, is_favorite: bool) -> None:
    city = forecast.city
    star = " *" if is_favorite else ""
    header = f"[bold]{city.name}[/bold] ({city.country}){star}"
    if forecast.list:
        current = forecast.list[0]
        header += (
            f"\n{round(current.main.temp)}°C  {current.weather[0].description}"
            f"  (feels like {round(current.main.feels_like)}°C, humidity {round(current.main.humidity)}%)"
        )
    console.print(Panel(header, expand=False))

    hourly = Table(title="Next hours", show_header=True)
    for item in hourly_preview(forecast):
        hourly.add_column(local_time(item, forecast).strftime("%I %p").lstrip("0"), justify="center")
    if hourly.columns:
        hourly.add_row(*[f"{icon_label(i.weather[0].icon)} {round(i.main.temp)}°" for i in hourly_preview(forecast)])
        console.print(hourly)

    daily = Table(title="5-Day Forecast")
    daily.add_column("Day")
    daily.add_column("Sky")
    daily.add_column("High / Low", justify="right")
    for summary in daily_summaries(forecast):
        daily.add_row(
            summary.day.strftime("%a %m/%d"),
            icon_label(summary.icon),
            f"{round(summary.high)}° / {round(summary.low)}°",
        )
    console.print(daily)

    view = exchange_view(city.country, rates)
    if view is not None:
        console.print(
            Panel(
                f"1 {view.currency} = {view.krw_per_unit:,.2f} KRW\n[dim]Last Updated: {view.last_updated}[/dim]",
                title=f"Exchange Rate ({view.currency}/KRW)",
                expand=False,
            )
        )


async def _show(identifier: str, favorites: FavoritesStore) -> None:
    async with DashboardService(favorites.storage) as service:
        forecast, rates = await service.fetch_forecast_and_rates(identifier)
    render(forecast, rates, favorites.contains(forecast.city_name))


def _run_show(identifier: str) -> None:
    favorites = FavoritesStore(_storage())
    try:
        with console.status(f"Fetching weather for {identifier}..."):
            asyncio.run(_show(identifier, favorites))
    except DashboardError as e:
        _fail(e.message)


@app.command()
def show(city: Optional[str] = typer.Argument(None, help="City to show; defaults to the first favorite.")) -> None:
    """Show the forecast and exchange rate for a city."""
    if city is None or not city.strip():
        favorites = FavoritesStore(_storage()).load()
        if not favorites:
            _fail("No city given and no favorites saved.")
        city = favorites[0]
    _run_show(city.strip())


@app.command()
def locate(lat: float = typer.Argument(...), lon: float = typer.Argument(...)) -> None:
    """Resolve coordinates to a city and show it."""
    _notify("Fetching your current location...")

    async def _resolve() -> str:
        async with DashboardService(_storage()) as service:
            geo = await service.reverse_geocode(lat, lon)
        if geo is None or not geo.name:
            raise LocationNotFound()
        return geo.name

    try:
        name = asyncio.run(_resolve())
    except DashboardError as e:
        _fail(e.message)
    _run_show(name)


@app.command()
def rates() -> None:
    """Print KRW-based conversion rates."""

    async def _rates() -> ExchangeRates:
        async with DashboardService(_storage()) as service:
            return await service.get_exchange_rates()

    try:
        data = asyncio.run(_rates())
    except DashboardError as e:
        _fail(e.message)

    table = Table(title=f"Rates per 1 {data.base_code}")
    table.add_column("Currency")
    table.add_column("Rate", justify="right")
    table.add_column(f"{data.base_code} per unit", justify="right")
    for code, rate in sorted(data.conversion_rates.items()):
        table.add_row(code, f"{rate:.6g}", f"{1 / rate:,.2f}" if rate else "-")
    console.print(table)
    console.print(f"Last Updated: {data.time_last_update_utc}", style="dim")


@app.command("favorites")
def list_favorites() -> None:
    """List saved favorite cities."""
    for i, name in enumerate(FavoritesStore(_storage()).load(), start=1):
        console.print(f"{i:>2}. {name}")


@app.command()
def favorite(city: str = typer.Argument(..., help="City to add or remove.")) -> None:
    """Toggle a city in the favorites list."""
    store = FavoritesStore(_storage())
    was_favorite = store.contains(city)
    try:
        updated = store.toggle(city)
    except DashboardError as e:
        _fail(e.message)
    _notify(f"{'Removed' if was_favorite else 'Added'} {city.strip()}. Favorites: {', '.join(updated)}")


def _step(city: str, step: int) -> None:
    target = FavoritesStore(_storage()).neighbor(city, step)
    if target is None:
        _fail(f"'{city}' is not among at least two favorites.")
    _run_show(target)


@app.command("next")
def next_favorite(city: str = typer.Argument(..., help="Current favorite.")) -> None:
    """Show the favorite after CITY."""
    _step(city, 1)


@app.command("prev")
def prev_favorite(city: str = typer.Argument(..., help="Current favorite.")) -> None:
    """Show the favorite before CITY."""
    _step(city, -1)


if __name__ == "__main__":
    app()
