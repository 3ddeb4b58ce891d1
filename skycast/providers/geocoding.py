from __future__ import annotations

from typing import Optional

from .base import HttpProvider, ProviderError
from ..entities import ResolvedPlace


class OpenMeteoGeocoder(HttpProvider):
    """Resolve free-text place names through the Open-Meteo geocoding API."""

    base_url = "https://geocoding-api.open-meteo.com/v1/search"

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url

    async def resolve(self, query: str) -> Optional[ResolvedPlace]:
        name = query.strip()
        if not name:
            raise ValueError("query must not be blank")
        params = {"name": name, "count": 1, "language": "en", "format": "json"}
        data = await self._get_json(self.base_url, params)
        results = data.get("results") or []
        if not results:
            self._log.info("No geocoding match for %r", name)
            return None
        return self._build_place(results[0])

    def _build_place(self, result: dict) -> ResolvedPlace:
        try:
            return ResolvedPlace(
                name=result["name"],
                latitude=float(result["latitude"]),
                longitude=float(result["longitude"]),
                admin_region=result.get("admin1") or None,
                country=result.get("country") or None,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderError("malformed geocoding result") from exc


__all__ = ["OpenMeteoGeocoder"]
