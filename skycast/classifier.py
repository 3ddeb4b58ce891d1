"""Classification of Open-Meteo (WMO) weather codes into icons and labels."""
from __future__ import annotations

from typing import Dict, Optional, Tuple

DEFAULT_ICON = "01d"
DEFAULT_DESCRIPTION = "Weather"

WEATHER_CODES: Dict[int, Tuple[str, str]] = {
    0: ("01d", "Clear sky"),
    1: ("02d", "Mainly clear"),
    2: ("03d", "Partly cloudy"),
    3: ("04d", "Overcast"),
    45: ("50d", "Fog"),
    48: ("50d", "Rime fog"),
    51: ("09d", "Light drizzle"),
    53: ("09d", "Drizzle"),
    55: ("09d", "Dense drizzle"),
    61: ("10d", "Light rain"),
    63: ("10d", "Rain"),
    65: ("10d", "Heavy rain"),
    66: ("10d", "Freezing rain"),
    67: ("10d", "Freezing rain"),
    71: ("13d", "Light snow"),
    73: ("13d", "Snow"),
    75: ("13d", "Heavy snow"),
    77: ("13d", "Snow grains"),
    80: ("09d", "Light showers"),
    81: ("09d", "Showers"),
    82: ("09d", "Heavy showers"),
    85: ("13d", "Snow showers"),
    86: ("13d", "Snow showers"),
    95: ("11d", "Thunderstorm"),
    96: ("11d", "Thunderstorm w/ hail"),
    99: ("11d", "Thunderstorm w/ hail"),
}


def classify(code: Optional[int]) -> Tuple[str, str]:
    """Return ``(icon, description)`` for ``code``.

    Never fails: codes outside :data:`WEATHER_CODES` (and ``None``) yield
    ``(DEFAULT_ICON, DEFAULT_DESCRIPTION)``.
    """
    if code is None:
        return DEFAULT_ICON, DEFAULT_DESCRIPTION
    return WEATHER_CODES.get(code, (DEFAULT_ICON, DEFAULT_DESCRIPTION))


def classify_icon(code: Optional[int]) -> str:
    return classify(code)[0]


def classify_text(code: Optional[int]) -> str:
    return classify(code)[1]


__all__ = [
    "DEFAULT_DESCRIPTION",
    "DEFAULT_ICON",
    "WEATHER_CODES",
    "classify",
    "classify_icon",
    "classify_text",
]
