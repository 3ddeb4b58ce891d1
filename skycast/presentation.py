"""Helpers turning a :class:`WeatherViewState` into display-ready values.

Dates go through a :class:`DateFormatter`. The default one uses
:meth:`datetime.strftime`, which follows whatever ``LC_TIME`` locale the host
process has set; display layers pass their own formatter to localize names
for the viewer.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .entities import DisplayUnit, ForecastDay, WeatherViewState
from .units import display_temperature

ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{icon}@2x.png"
PLACEHOLDER = "—"
MISSING_TEMPERATURE = "–"


def icon_url(icon: str) -> str:
    return ICON_URL_TEMPLATE.format(icon=icon)


def short_day_name(day: date) -> str:
    return day.strftime("%a")


def format_observed_at(moment: Optional[datetime]) -> str:
    if moment is None:
        return ""
    return moment.strftime("%A %H:%M")


class DateFormatter:
    """Weekday and timestamp formatting for rendered views."""

    def day_name(self, day: date) -> str:
        return short_day_name(day)

    def observed_at(self, moment: Optional[datetime]) -> str:
        return format_observed_at(moment)


def format_temperature(celsius: Optional[float], unit: DisplayUnit) -> str:
    value = display_temperature(celsius, unit)
    if value is None:
        return MISSING_TEMPERATURE
    return f"{value}°"


def format_wind(speed: Optional[float]) -> Optional[str]:
    if speed is None:
        return None
    return f"{speed:.1f}"


def render_day(day: ForecastDay, unit: DisplayUnit, formatter: Optional[DateFormatter] = None) -> Dict[str, Any]:
    formatter = formatter or DateFormatter()
    high = display_temperature(day.temp_max_c, unit)
    low = display_temperature(day.temp_min_c, unit)
    return {
        "name": formatter.day_name(day.day) if day.day else day.short_day_name,
        "icon": day.icon,
        "icon_url": icon_url(day.icon),
        "description": day.description,
        "max": high,
        "min": low,
        "range": f"{format_temperature(day.temp_max_c, unit)} / {format_temperature(day.temp_min_c, unit)}",
    }


def render_view(
    state: WeatherViewState,
    unit: DisplayUnit = DisplayUnit.CELSIUS,
    formatter: Optional[DateFormatter] = None,
) -> Dict[str, Any]:
    """Serialize ``state`` for the display layer in the requested unit."""
    formatter = formatter or DateFormatter()
    outlook: List[Dict[str, Any]] = [render_day(day, unit, formatter) for day in state.outlook]
    error = None
    if state.error is not None:
        error = {"kind": state.error.value, "message": state.error.message}
    return {
        "city": state.place.display_label if state.place else PLACEHOLDER,
        "latitude": state.place.latitude if state.place else None,
        "longitude": state.place.longitude if state.place else None,
        "date": formatter.observed_at(state.observed_at),
        "unit": unit.value,
        "temperature": format_temperature(state.temperature_c, unit),
        "description": state.description,
        "icon": state.icon,
        "icon_url": icon_url(state.icon),
        "humidity": state.humidity_pct,
        "wind": format_wind(state.wind_speed_mps),
        "outlook": outlook,
        "error": error,
    }


__all__ = [
    "DateFormatter",
    "ICON_URL_TEMPLATE",
    "format_observed_at",
    "format_temperature",
    "format_wind",
    "icon_url",
    "render_day",
    "render_view",
    "short_day_name",
]
