"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from backend.api.views import ThemeView, WeatherView

urlpatterns = [
    path("weather", WeatherView.as_view(), name="weather"),
    path("theme", ThemeView.as_view(), name="theme"),
]
