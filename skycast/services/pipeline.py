from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Tuple

from ..abstractions import ForecastFetcher, LocationResolver
from ..classifier import classify
from ..entities import (
    ErrorKind,
    ForecastDay,
    PipelineStatus,
    RawForecast,
    ResolvedPlace,
    WeatherViewState,
)
from ..presentation import short_day_name
from ..providers.base import ProviderError
from ..units import round_half_up


class WeatherPipeline:
    """Geocode a query, fetch its forecast and publish one view state per run.

    Runs are ordered by a monotonically increasing token. A run whose token is
    no longer current when it completes is discarded, so the published state
    always reflects the most recently started run.
    """

    OUTLOOK_DAYS = 6

    def __init__(
        self,
        *,
        resolver: LocationResolver,
        fetcher: ForecastFetcher,
        default_query: str = "London",
        clock: Optional[Callable[[], datetime]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.resolver = resolver
        self.fetcher = fetcher
        self.default_query = default_query
        self._clock = clock or datetime.now
        self._log = logger or logging.getLogger(self.__class__.__name__)
        self._run_token = 0
        self.status = PipelineStatus.IDLE
        self.view_state = WeatherViewState()

    # Public API ---------------------------------------------------------
    async def load_initial(self) -> WeatherViewState:
        return await self.run_search(self.default_query)

    async def run_search(self, query: str) -> WeatherViewState:
        """Run one search and return the published view state.

        Never raises. Blank queries return the current state untouched. A run
        superseded by a newer one returns whatever is published when it ends.
        """
        text = (query or "").strip()
        if not text:
            return self.view_state

        self._run_token += 1
        token = self._run_token
        self.status = PipelineStatus.IDLE
        self._transition(token, PipelineStatus.RESOLVING)

        try:
            place = await self.resolver.resolve(text)
        except ProviderError as exc:
            self._log.warning("Geocoding %r failed: %s", text, exc)
            return self._fail(token, ErrorKind.FETCH_FAILED)
        except Exception:  # noqa: BLE001 - every failure is scoped to the run
            self._log.exception("Unexpected geocoding failure for %r", text)
            return self._fail(token, ErrorKind.FETCH_FAILED)

        if place is None:
            self._log.info("Place %r not found", text)
            return self._fail(token, ErrorKind.PLACE_NOT_FOUND)

        if not self._transition(token, PipelineStatus.FETCHING):
            self._log.debug("Run %s superseded before fetching", token)
            return self.view_state

        try:
            forecast = await self.fetcher.fetch(place.latitude, place.longitude)
        except ProviderError as exc:
            self._log.warning("Forecast for %s failed: %s", place.display_label, exc)
            return self._fail(token, ErrorKind.FETCH_FAILED)
        except Exception:  # noqa: BLE001 - every failure is scoped to the run
            self._log.exception("Unexpected forecast failure for %s", place.display_label)
            return self._fail(token, ErrorKind.FETCH_FAILED)

        if not self._is_current(token):
            self._log.debug("Discarding stale forecast for run %s", token)
            return self.view_state
        state = self.build_view_state(place, forecast, self._clock())
        return self._commit(token, state, PipelineStatus.READY)

    def build_view_state(
        self, place: ResolvedPlace, forecast: RawForecast, observed_at: datetime
    ) -> WeatherViewState:
        current = forecast.current
        icon, description = classify(current.weather_code)
        return WeatherViewState(
            place=place,
            description=description,
            icon=icon,
            temperature_c=current.temperature_c,
            humidity_pct=round_half_up(current.humidity_pct),
            wind_speed_mps=current.wind_speed_mps,
            outlook=self._build_outlook(forecast),
            error=None,
            observed_at=observed_at,
        )

    # Helpers ------------------------------------------------------------
    def _build_outlook(self, forecast: RawForecast) -> Tuple[ForecastDay, ...]:
        days = []
        # index 0 is today; the outlook only lists upcoming days
        for entry in forecast.daily[1 : self.OUTLOOK_DAYS + 1]:
            icon, description = classify(entry.weather_code)
            days.append(
                ForecastDay(
                    short_day_name=short_day_name(entry.date),
                    icon=icon,
                    description=description,
                    temp_min_c=entry.temp_min_c,
                    temp_max_c=entry.temp_max_c,
                    day=entry.date,
                )
            )
        return tuple(days)

    def _is_current(self, token: int) -> bool:
        return token == self._run_token

    def _transition(self, token: int, status: PipelineStatus) -> bool:
        if not self._is_current(token):
            return False
        self.status = status
        return True

    def _fail(self, token: int, kind: ErrorKind) -> WeatherViewState:
        # previously displayed place, metrics and outlook stay on screen
        return self._commit(token, replace(self.view_state, error=kind), PipelineStatus.FAILED)

    def _commit(self, token: int, state: WeatherViewState, status: PipelineStatus) -> WeatherViewState:
        if self._transition(token, status):
            self.view_state = state
        else:
            self._log.debug("Discarding stale result of run %s", token)
        return self.view_state


__all__ = ["WeatherPipeline"]
