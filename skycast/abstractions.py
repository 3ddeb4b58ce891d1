"""Collaborator protocols for the weather pipeline."""
from __future__ import annotations

from typing import Optional, Protocol

from .entities import RawForecast, ResolvedPlace


class LocationResolver(Protocol):
    """Turns free text into the first matching place."""

    async def resolve(self, query: str) -> Optional[ResolvedPlace]:
        """Return the first match, or ``None`` when nothing matched.

        Transport and decoding failures raise ``ProviderError``.
        """
        ...


class ForecastFetcher(Protocol):
    """Fetches current conditions and the daily series for coordinates."""

    async def fetch(self, latitude: float, longitude: float) -> RawForecast:
        """Return the raw forecast; failures raise ``ProviderError``."""
        ...


__all__ = ["ForecastFetcher", "LocationResolver"]
