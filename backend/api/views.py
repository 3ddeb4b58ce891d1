"""REST API views exposing the weather pipeline to the display layer."""
from __future__ import annotations

from asgiref.sync import async_to_sync
from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api.formats import LocalizedDateFormatter
from skycast.config import ThemeStore
from skycast.entities import DisplayUnit, ErrorKind, ThemePreference
from skycast.presentation import render_view
from skycast.services.pipeline import WeatherPipeline


ERROR_STATUS = {
    ErrorKind.PLACE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.FETCH_FAILED: status.HTTP_502_BAD_GATEWAY,
}


def get_weather_pipeline() -> WeatherPipeline:
    # One pipeline per request: its view state belongs to a single viewer.
    return settings.SKYCAST.build_pipeline()


def get_theme_store() -> ThemeStore:
    return settings.SKYCAST.theme_store()


class WeatherView(APIView):
    """Resolve a city and return its current conditions and outlook."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Return the rendered weather view for ``q`` in unit ``unit``."""
        try:
            unit = DisplayUnit(request.query_params.get("unit", DisplayUnit.CELSIUS.value).upper())
        except ValueError:
            return Response({"detail": "unit must be C or F"}, status=status.HTTP_400_BAD_REQUEST)

        pipeline = get_weather_pipeline()
        query = request.query_params.get("q")
        if query is None:
            state = async_to_sync(pipeline.load_initial)()
        elif not query.strip():
            return Response({"detail": "q must not be blank"}, status=status.HTTP_400_BAD_REQUEST)
        else:
            state = async_to_sync(pipeline.run_search)(query)

        payload = render_view(state, unit, LocalizedDateFormatter())
        payload["status"] = pipeline.status.value
        if state.error is not None:
            return Response(payload, status=ERROR_STATUS[state.error])
        return Response(payload, status=status.HTTP_200_OK)


class ThemeView(APIView):
    """Read or persist the colour theme preference."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Return the persisted theme."""
        return Response({"theme": get_theme_store().load().value}, status=status.HTTP_200_OK)

    def put(self, request, *args, **kwargs):  # noqa: D401
        """Persist the theme sent as ``{"theme": "light" | "dark"}``."""
        data = request.data if isinstance(request.data, dict) else {}
        try:
            theme = ThemePreference(data.get("theme"))
        except ValueError:
            return Response({"detail": "theme must be light or dark"}, status=status.HTTP_400_BAD_REQUEST)
        get_theme_store().save(theme)
        return Response({"theme": theme.value}, status=status.HTTP_200_OK)
