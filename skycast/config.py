"""Process configuration, loaded once at startup and handed to the display layer.

The weather pipeline itself never reads this module; callers pass the values
it needs (seed query, endpoints, timeout) when wiring providers.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .entities import ThemePreference
from .providers.base import RequestConfig
from .providers.geocoding import OpenMeteoGeocoder
from .providers.openmeteo import OpenMeteoForecastProvider
from .services.pipeline import WeatherPipeline


logger = logging.getLogger(__name__)

DEFAULT_THEME_FILE = Path.home() / ".skycast" / "theme.json"


class ConfigError(ValueError):
    """Raised when an environment value cannot be interpreted."""


class ThemeStore:
    """Persist the colour theme across sessions as a small JSON document."""

    def __init__(self, path: Path, default: ThemePreference = ThemePreference.LIGHT) -> None:
        self.path = Path(path)
        self.default = default

    def load(self) -> ThemePreference:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return self.default
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable theme file %s: %s", self.path, exc)
            return self.default
        value = payload.get("theme") if isinstance(payload, dict) else None
        try:
            return ThemePreference(value)
        except ValueError:
            logger.warning("Ignoring unknown theme %r in %s", value, self.path)
            return self.default

    def save(self, theme: ThemePreference) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"theme": theme.value}), encoding="utf-8")


@dataclass(frozen=True)
class ProcessConfig:
    seed_query: str = "London"
    geocoding_url: str = OpenMeteoGeocoder.base_url
    forecast_url: str = OpenMeteoForecastProvider.base_url
    request_timeout: float = 10.0
    theme_file: Path = DEFAULT_THEME_FILE
    default_theme: ThemePreference = ThemePreference.LIGHT
    theme: ThemePreference = ThemePreference.LIGHT

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None) -> "ProcessConfig":
        env = os.environ if environ is None else environ
        timeout_raw = env.get("SKYCAST_REQUEST_TIMEOUT", str(cls.request_timeout))
        try:
            timeout = float(timeout_raw)
        except ValueError as exc:
            raise ConfigError(f"SKYCAST_REQUEST_TIMEOUT must be a number, got {timeout_raw!r}") from exc
        if timeout <= 0:
            raise ConfigError("SKYCAST_REQUEST_TIMEOUT must be positive")

        default_theme_raw = env.get("SKYCAST_DEFAULT_THEME", ThemePreference.LIGHT.value)
        try:
            default_theme = ThemePreference(default_theme_raw.lower())
        except ValueError as exc:
            raise ConfigError(f"SKYCAST_DEFAULT_THEME must be light or dark, got {default_theme_raw!r}") from exc

        theme_file = Path(env.get("SKYCAST_THEME_FILE", str(DEFAULT_THEME_FILE)))
        seed_query = env.get("SKYCAST_SEED_QUERY", "").strip() or cls.seed_query
        return cls(
            seed_query=seed_query,
            geocoding_url=env.get("SKYCAST_GEOCODING_URL", cls.geocoding_url),
            forecast_url=env.get("SKYCAST_FORECAST_URL", cls.forecast_url),
            request_timeout=timeout,
            theme_file=theme_file,
            default_theme=default_theme,
            theme=ThemeStore(theme_file, default_theme).load(),
        )

    def theme_store(self) -> ThemeStore:
        return ThemeStore(self.theme_file, self.default_theme)

    def build_pipeline(self) -> WeatherPipeline:
        request_config = RequestConfig(timeout=self.request_timeout)
        return WeatherPipeline(
            resolver=OpenMeteoGeocoder(base_url=self.geocoding_url, request_config=request_config),
            fetcher=OpenMeteoForecastProvider(base_url=self.forecast_url, request_config=request_config),
            default_query=self.seed_query,
        )


__all__ = ["ConfigError", "ProcessConfig", "ThemeStore"]
