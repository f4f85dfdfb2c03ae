# ABOUTME: Pydantic BaseModels for OpenWeatherMap payloads, city suggestions, and widget state.
# ABOUTME: Defines the forecast sample, current conditions, snapshot, and preference types.

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

_DT_TXT_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")


class TemperatureUnit(str, Enum):
    """Unit system passed through to the provider as the `units` parameter."""

    METRIC = "metric"
    IMPERIAL = "imperial"


class WeatherCondition(BaseModel):
    """One condition descriptor (code, label, icon id)."""

    model_config = ConfigDict(frozen=True)

    id: int
    main: str
    description: str = ""
    icon: str = ""


class Readings(BaseModel):
    """Temperature and atmosphere readings from the `main` block."""

    model_config = ConfigDict(frozen=True)

    temp: float
    feels_like: float | None = None
    temp_min: float | None = None
    temp_max: float | None = None
    pressure: float | None = None
    humidity: float | None = None


class Wind(BaseModel):
    model_config = ConfigDict(frozen=True)

    speed: float
    deg: float | None = None


class RawForecastSample(BaseModel):
    """One 3-hour forecast entry as returned by the provider's forecast endpoint."""

    model_config = ConfigDict(frozen=True)

    dt: int
    dt_txt: str
    main: Readings
    weather: list[WeatherCondition] = Field(min_length=1)
    wind: Wind | None = None
    pop: float | None = None
    visibility: int | None = None

    @field_validator("dt_txt")
    @classmethod
    def _check_dt_txt(cls, value: str) -> str:
        if not _DT_TXT_PATTERN.match(value):
            raise ValueError(f"dt_txt must look like 'YYYY-MM-DD HH:MM:SS', got {value!r}")
        return value

    @property
    def date_key(self) -> str:
        """Calendar date portion of the display timestamp."""
        return self.dt_txt.split(" ")[0]

    @property
    def time_of_day(self) -> str:
        return self.dt_txt.split(" ")[1]


# A daily sample is just the raw sample picked to represent its date.
DailyForecastSample = RawForecastSample


class ForecastCity(BaseModel):
    id: int | None = None
    name: str
    country: str | None = None
    timezone: int | None = None


class ForecastResponse(BaseModel):
    """Parsed response from the 5 day / 3 hour forecast endpoint."""

    samples: list[RawForecastSample] = Field(default=[], alias="list")
    city: ForecastCity | None = None

    model_config = ConfigDict(populate_by_name=True)


class LocationInfo(BaseModel):
    country: str | None = None
    sunrise: int | None = None
    sunset: int | None = None


class CurrentConditions(BaseModel):
    """Present weather for one resolved location."""

    model_config = ConfigDict(frozen=True)

    name: str
    dt: int
    weather: list[WeatherCondition] = Field(min_length=1)
    main: Readings
    wind: Wind
    sys: LocationInfo | None = None
    timezone: int | None = None

    @property
    def humidity(self) -> float | None:
        return self.main.humidity

    @property
    def feels_like(self) -> float | None:
        return self.main.feels_like


class CitySuggestion(BaseModel):
    """A candidate location returned by the city search endpoint."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    country: str | None = None

    @property
    def key(self) -> tuple[str, str | None]:
        """Identity used to deduplicate suggestions for display."""
        return (self.name, self.country)

    @property
    def label(self) -> str:
        """Canonical location string, e.g. "Taipei, TW"."""
        if self.country:
            return f"{self.name}, {self.country}"
        return self.name


class WeatherSnapshot(BaseModel):
    """Current conditions paired with up to five daily forecast samples."""

    current: CurrentConditions
    forecast: list[DailyForecastSample] = Field(default=[], max_length=5)


class Preferences(BaseModel):
    """Settings persisted across sessions."""

    last_city: str | None = None
    unit: TemperatureUnit = TemperatureUnit.METRIC
