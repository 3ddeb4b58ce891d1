from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple


class ErrorKind(str, Enum):
    """Terminal failure of a single pipeline run."""

    PLACE_NOT_FOUND = "place_not_found"
    FETCH_FAILED = "fetch_failed"

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]


_ERROR_MESSAGES = {
    ErrorKind.PLACE_NOT_FOUND: "City not found. Try another search.",
    ErrorKind.FETCH_FAILED: "Could not load data. Please try again.",
}


class PipelineStatus(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    FETCHING = "fetching"
    READY = "ready"
    FAILED = "failed"


class DisplayUnit(str, Enum):
    CELSIUS = "C"
    FAHRENHEIT = "F"


class ThemePreference(str, Enum):
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class ResolvedPlace:
    """First geocoding match for a place query."""

    name: str
    latitude: float
    longitude: float
    admin_region: Optional[str] = None
    country: Optional[str] = None

    @property
    def display_label(self) -> str:
        parts = (self.name, self.admin_region, self.country)
        return ", ".join(part for part in parts if part)


@dataclass(frozen=True)
class CurrentConditions:
    temperature_c: Optional[float]
    humidity_pct: Optional[float]
    wind_speed_mps: Optional[float]
    weather_code: Optional[int]


@dataclass(frozen=True)
class DailyEntry:
    date: date
    weather_code: Optional[int]
    temp_min_c: Optional[float]
    temp_max_c: Optional[float]


@dataclass(frozen=True)
class RawForecast:
    """Forecast payload as returned upstream, daily entries ascending by date.

    Index 0 of ``daily`` is the location's current day.
    """

    current: CurrentConditions
    daily: Tuple[DailyEntry, ...]


@dataclass(frozen=True)
class ForecastDay:
    short_day_name: str
    icon: str
    description: str
    temp_min_c: Optional[float]
    temp_max_c: Optional[float]
    day: Optional[date] = None


@dataclass(frozen=True)
class WeatherViewState:
    """Aggregate result of one pipeline run.

    ``observed_at`` is excluded from equality: two runs over an unchanged
    upstream response compare equal.
    """

    place: Optional[ResolvedPlace] = None
    description: str = "—"
    icon: str = "01d"
    temperature_c: Optional[float] = None
    humidity_pct: Optional[int] = None
    wind_speed_mps: Optional[float] = None
    outlook: Tuple[ForecastDay, ...] = ()
    error: Optional[ErrorKind] = None
    observed_at: Optional[datetime] = field(default=None, compare=False)


__all__ = [
    "CurrentConditions",
    "DailyEntry",
    "DisplayUnit",
    "ErrorKind",
    "ForecastDay",
    "PipelineStatus",
    "RawForecast",
    "ResolvedPlace",
    "ThemePreference",
    "WeatherViewState",
]
