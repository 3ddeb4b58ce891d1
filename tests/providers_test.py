from __future__ import annotations

import asyncio
from datetime import date

import pytest
import requests

from skycast.providers.base import ProviderError, RequestConfig
from skycast.providers.geocoding import OpenMeteoGeocoder
from skycast.providers.openmeteo import OpenMeteoForecastProvider, _safe_int


GEO_URL = "https://geo.test/v1/search"
FORECAST_URL = "https://openmeteo.test/v1/forecast"


def forecast_payload(days: int = 7) -> dict:
    return {
        "current": {
            "time": "2024-05-06T14:15",
            "temperature_2m": 18.4,
            "relative_humidity_2m": 61,
            "wind_speed_10m": 3.2,
            "weather_code": 2,
        },
        "daily": {
            "time": [f"2024-05-{6 + idx:02d}" for idx in range(days)],
            "weather_code": [2, 61, 0, 3, 95, 71, 45][:days],
            "temperature_2m_max": [19.0, 17.5, 21.2, 20.0, 16.4, 8.0, 12.9][:days],
            "temperature_2m_min": [9.1, 10.2, 11.0, 9.9, 7.5, -1.2, 4.0][:days],
        },
    }


def test_geocoder_builds_single_english_json_request(requests_mock):
    geocoder = OpenMeteoGeocoder(base_url=GEO_URL)
    requests_mock.get(
        GEO_URL,
        json={
            "results": [
                {"name": "Paris", "admin1": "Île-de-France", "country": "France", "latitude": 48.85, "longitude": 2.35},
                {"name": "Paris", "admin1": "Texas", "country": "United States", "latitude": 33.66, "longitude": -95.55},
            ]
        },
    )

    place = asyncio.run(geocoder.resolve("  Paris "))

    assert requests_mock.call_count == 1
    assert requests_mock.last_request.qs == {
        "name": ["Paris"],
        "count": ["1"],
        "language": ["en"],
        "format": ["json"],
    }
    assert place.name == "Paris"
    assert place.country == "France"
    assert place.latitude == pytest.approx(48.85)
    assert place.display_label == "Paris, Île-de-France, France"


def test_geocoder_returns_none_when_nothing_matches(requests_mock):
    geocoder = OpenMeteoGeocoder(base_url=GEO_URL)
    requests_mock.get(GEO_URL, json={"generationtime_ms": 0.4})

    assert asyncio.run(geocoder.resolve("Atlantis")) is None


def test_geocoder_label_omits_missing_parts(requests_mock):
    geocoder = OpenMeteoGeocoder(base_url=GEO_URL)
    requests_mock.get(GEO_URL, json={"results": [{"name": "Monaco", "latitude": 43.73, "longitude": 7.42}]})

    place = asyncio.run(geocoder.resolve("Monaco"))

    assert place.admin_region is None
    assert place.display_label == "Monaco"


def test_geocoder_rejects_malformed_result(requests_mock):
    geocoder = OpenMeteoGeocoder(base_url=GEO_URL)
    requests_mock.get(GEO_URL, json={"results": [{"name": "Nowhere"}]})

    with pytest.raises(ProviderError):
        asyncio.run(geocoder.resolve("Nowhere"))


def test_geocoder_maps_http_errors(requests_mock):
    geocoder = OpenMeteoGeocoder(base_url=GEO_URL)
    requests_mock.get(GEO_URL, status_code=503, text="unavailable")

    with pytest.raises(ProviderError, match="HTTP 503"):
        asyncio.run(geocoder.resolve("Oslo"))


def test_geocoder_maps_timeouts(requests_mock):
    geocoder = OpenMeteoGeocoder(base_url=GEO_URL, request_config=RequestConfig(timeout=0.5))
    requests_mock.get(GEO_URL, exc=requests.exceptions.ConnectTimeout)

    with pytest.raises(ProviderError, match="timeout"):
        asyncio.run(geocoder.resolve("Oslo"))


def test_forecast_requests_current_and_seven_days(requests_mock):
    provider = OpenMeteoForecastProvider(base_url=FORECAST_URL)
    requests_mock.get(FORECAST_URL, json=forecast_payload())

    asyncio.run(provider.fetch(48.85, 2.35))

    qs = requests_mock.last_request.qs
    assert qs["latitude"] == ["48.85"]
    assert qs["longitude"] == ["2.35"]
    assert qs["current"] == ["temperature_2m,relative_humidity_2m,wind_speed_10m,weather_code"]
    assert qs["daily"] == ["weather_code,temperature_2m_max,temperature_2m_min"]
    assert qs["timezone"] == ["auto"]
    assert qs["forecast_days"] == ["7"]


def test_forecast_returns_raw_values(requests_mock):
    provider = OpenMeteoForecastProvider(base_url=FORECAST_URL)
    requests_mock.get(FORECAST_URL, json=forecast_payload())

    forecast = asyncio.run(provider.fetch(48.85, 2.35))

    assert forecast.current.temperature_c == 18.4
    assert forecast.current.humidity_pct == 61
    assert forecast.current.wind_speed_mps == 3.2
    assert forecast.current.weather_code == 2
    assert len(forecast.daily) == 7
    assert forecast.daily[0].date == date(2024, 5, 6)
    assert forecast.daily[6].date == date(2024, 5, 12)
    assert forecast.daily[1].weather_code == 61
    assert forecast.daily[5].temp_min_c == -1.2
    assert forecast.daily[5].temp_max_c == 8.0


def test_forecast_keeps_null_readings_empty(requests_mock):
    payload = forecast_payload()
    payload["current"]["temperature_2m"] = None
    payload["daily"]["temperature_2m_min"] = [None] * 7
    provider = OpenMeteoForecastProvider(base_url=FORECAST_URL)
    requests_mock.get(FORECAST_URL, json=payload)

    forecast = asyncio.run(provider.fetch(1.0, 1.0))

    assert forecast.current.temperature_c is None
    assert all(day.temp_min_c is None for day in forecast.daily)


@pytest.mark.parametrize("missing", ["current", "daily"])
def test_forecast_rejects_missing_sections(requests_mock, missing):
    payload = forecast_payload()
    del payload[missing]
    provider = OpenMeteoForecastProvider(base_url=FORECAST_URL)
    requests_mock.get(FORECAST_URL, json=payload)

    with pytest.raises(ProviderError):
        asyncio.run(provider.fetch(1.0, 1.0))


def test_forecast_rejects_missing_daily_series(requests_mock):
    payload = forecast_payload()
    del payload["daily"]["temperature_2m_max"]
    provider = OpenMeteoForecastProvider(base_url=FORECAST_URL)
    requests_mock.get(FORECAST_URL, json=payload)

    with pytest.raises(ProviderError, match="temperature_2m_max"):
        asyncio.run(provider.fetch(1.0, 1.0))


def test_forecast_rejects_invalid_json(requests_mock):
    provider = OpenMeteoForecastProvider(base_url=FORECAST_URL)
    requests_mock.get(FORECAST_URL, text="<html>oops</html>")

    with pytest.raises(ProviderError, match="invalid json"):
        asyncio.run(provider.fetch(1.0, 1.0))


def test_forecast_rejects_unparseable_dates(requests_mock):
    payload = forecast_payload()
    payload["daily"]["time"][3] = "someday"
    provider = OpenMeteoForecastProvider(base_url=FORECAST_URL)
    requests_mock.get(FORECAST_URL, json=payload)

    with pytest.raises(ProviderError, match="invalid daily date"):
        asyncio.run(provider.fetch(1.0, 1.0))


def test_forecast_drops_non_integral_weather_codes(requests_mock):
    payload = forecast_payload()
    payload["current"]["weather_code"] = 1.7
    payload["daily"]["weather_code"][2] = 3.0
    provider = OpenMeteoForecastProvider(base_url=FORECAST_URL)
    requests_mock.get(FORECAST_URL, json=payload)

    forecast = asyncio.run(provider.fetch(1.0, 1.0))

    assert forecast.current.weather_code is None
    assert forecast.daily[2].weather_code == 3


@pytest.mark.parametrize("value", [1.7, float("inf"), float("-inf"), float("nan"), "x", None])
def test_safe_int_rejects_non_integral_values(value):
    assert _safe_int(value) is None


def test_safe_int_accepts_whole_numbers():
    assert _safe_int(3.0) == 3
    assert _safe_int("45") == 45


class CountingSession(requests.Session):
    def __init__(self):
        super().__init__()
        self.calls = 0

    def request(self, *args, **kwargs):
        self.calls += 1
        return super().request(*args, **kwargs)


def test_provider_uses_injected_session(requests_mock):
    session = CountingSession()
    geocoder = OpenMeteoGeocoder(session=session, base_url=GEO_URL)
    requests_mock.get(GEO_URL, json={"results": []})

    asyncio.run(geocoder.resolve("Atlantis"))

    assert geocoder.session is session
    assert session.calls == 1


def test_provider_without_session_serves_concurrent_calls(requests_mock):
    provider = OpenMeteoForecastProvider(base_url=FORECAST_URL)
    requests_mock.get(FORECAST_URL, json=forecast_payload())

    async def fetch_both():
        return await asyncio.gather(provider.fetch(1.0, 1.0), provider.fetch(2.0, 2.0))

    first, second = asyncio.run(fetch_both())

    assert provider.session is None
    assert first == second
    assert requests_mock.call_count == 2
