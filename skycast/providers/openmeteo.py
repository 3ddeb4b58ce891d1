from __future__ import annotations

import math
from datetime import date
from typing import List, Optional, Tuple

from .base import HttpProvider, ProviderError
from ..entities import CurrentConditions, DailyEntry, RawForecast


CURRENT_FIELDS = ("temperature_2m", "relative_humidity_2m", "wind_speed_10m", "weather_code")
DAILY_FIELDS = ("weather_code", "temperature_2m_max", "temperature_2m_min")
FORECAST_DAYS = 7


class OpenMeteoForecastProvider(HttpProvider):
    base_url = "https://api.open-meteo.com/v1/forecast"

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url

    async def fetch(self, latitude: float, longitude: float) -> RawForecast:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": ",".join(CURRENT_FIELDS),
            "daily": ",".join(DAILY_FIELDS),
            "timezone": "auto",
            "forecast_days": FORECAST_DAYS,
        }
        data = await self._get_json(self.base_url, params)
        return RawForecast(current=self._parse_current(data), daily=self._parse_daily(data))

    # helpers ------------------------------------------------------------
    def _parse_current(self, data: dict) -> CurrentConditions:
        current = data.get("current")
        if not isinstance(current, dict):
            raise ProviderError("missing current weather")
        return CurrentConditions(
            temperature_c=_safe_float(current.get("temperature_2m")),
            humidity_pct=_safe_float(current.get("relative_humidity_2m")),
            wind_speed_mps=_safe_float(current.get("wind_speed_10m")),
            weather_code=_safe_int(current.get("weather_code")),
        )

    def _parse_daily(self, data: dict) -> Tuple[DailyEntry, ...]:
        daily = data.get("daily")
        if not isinstance(daily, dict):
            raise ProviderError("missing daily data")
        dates = daily.get("time")
        if not isinstance(dates, list):
            raise ProviderError("missing daily dates")
        series = {}
        for name in DAILY_FIELDS:
            values = daily.get(name)
            if not isinstance(values, list):
                raise ProviderError(f"missing daily {name}")
            series[name] = values

        result: List[DailyEntry] = []
        for idx, date_str in enumerate(dates):
            result.append(
                DailyEntry(
                    date=self._parse_date(date_str),
                    weather_code=_safe_int(_safe_index(series["weather_code"], idx)),
                    temp_min_c=_safe_float(_safe_index(series["temperature_2m_min"], idx)),
                    temp_max_c=_safe_float(_safe_index(series["temperature_2m_max"], idx)),
                )
            )
        return tuple(result)

    def _parse_date(self, value: object) -> date:
        try:
            return date.fromisoformat(str(value))
        except ValueError as exc:
            self._log.error("Unparseable daily date %r", value)
            raise ProviderError("invalid daily date") from exc


def _safe_index(values: list, index: int) -> object:
    try:
        return values[index]
    except IndexError:
        return None


def _safe_float(value: object) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: object) -> Optional[int]:
    number = _safe_float(value)
    if number is None or not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


__all__ = ["OpenMeteoForecastProvider"]
