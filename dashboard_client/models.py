from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from edge_functions.currency import SUPPORTED_CURRENCIES


class GeoResult(BaseModel):
    name: str
    lat: float
    lon: float
    country: str


class MainBlock(BaseModel):
    temp: float
    feels_like: float
    temp_min: float
    temp_max: float
    pressure: float
    humidity: float


class Condition(BaseModel):
    id: float
    main: str
    description: str
    icon: str


class Clouds(BaseModel):
    all: Optional[float] = None


class Wind(BaseModel):
    speed: Optional[float] = None
    deg: Optional[float] = None


class DayPart(BaseModel):
    pod: Optional[str] = None


class ForecastItem(BaseModel):
    dt: float
    main: MainBlock
    weather: List[Condition] = Field(..., min_length=1)
    clouds: Clouds
    wind: Wind
    visibility: float
    pop: float
    sys: DayPart
    dt_txt: str


class Coord(BaseModel):
    lat: Optional[float] = None
    lon: Optional[float] = None


class CityInfo(BaseModel):
    id: float
    name: Optional[str] = None
    coord: Coord
    country: str
    population: float
    timezone: float  # UTC offset in seconds
    sunrise: float
    sunset: float


class ForecastResponse(BaseModel):
    cod: str
    message: float = 0
    cnt: int
    list: List[ForecastItem]
    # A missing city is reported as "not found" by the service, not as a schema error
    city: Optional[CityInfo] = None

    @field_validator("list")
    @classmethod
    def _chronological(cls, items: List[ForecastItem]) -> List[ForecastItem]:
        return sorted(items, key=lambda item: item.dt)

    @property
    def city_name(self) -> str:
        return (self.city.name or "").strip() if self.city else ""


class ExchangeRates(BaseModel):
    result: str
    base_code: str
    conversion_rates: Dict[str, float]
    time_last_update_utc: str
    time_last_update_unix: Optional[float] = None
    time_next_update_utc: Optional[str] = None
    time_next_update_unix: Optional[float] = None

    @model_validator(mode="after")
    def _all_currencies_present(self) -> "ExchangeRates":
        missing = [code for code in SUPPORTED_CURRENCIES if code not in self.conversion_rates]
        if missing:
            raise ValueError(f"conversion_rates missing currencies: {', '.join(missing)}")
        return self
