from __future__ import annotations

import os
import tempfile
from pathlib import Path

import django
import pytest
import requests_mock as requests_mock_lib


os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings")
os.environ.setdefault("SKYCAST_GEOCODING_URL", "https://geocoding.test/v1/search")
os.environ.setdefault("SKYCAST_FORECAST_URL", "https://forecast.test/v1/forecast")
os.environ.setdefault("SKYCAST_SEED_QUERY", "London")
os.environ.setdefault("SKYCAST_THEME_FILE", str(Path(tempfile.mkdtemp()) / "theme.json"))

django.setup()


@pytest.fixture()
def requests_mock():
    with requests_mock_lib.Mocker(case_sensitive=True) as mocker:
        yield mocker
