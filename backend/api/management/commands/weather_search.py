"""Management command to run a weather search using the same stack as the API."""
from __future__ import annotations

import asyncio
import json
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import translation

from backend.api.formats import LocalizedDateFormatter
from skycast.entities import DisplayUnit
from skycast.presentation import render_view


class Command(BaseCommand):
    help = "Resolve a city and print its current weather and 6-day outlook as JSON"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--city", type=str, help="Place to search; defaults to the seed city")
        parser.add_argument("--unit", type=str, default="C", choices=["C", "F", "c", "f"], help="Temperature unit")
        parser.add_argument("--language", type=str, default=settings.LANGUAGE_CODE, help="Language for day names")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        city = options.get("city")
        unit = DisplayUnit(options["unit"].upper())
        pipeline = settings.SKYCAST.build_pipeline()

        if city is None:
            state = asyncio.run(pipeline.load_initial())
        elif not city.strip():
            raise CommandError("--city must not be blank")
        else:
            state = asyncio.run(pipeline.run_search(city))

        if state.error is not None:
            raise CommandError(state.error.message)
        with translation.override(options["language"]):
            payload = render_view(state, unit, LocalizedDateFormatter())
        self.stdout.write(json.dumps(payload, ensure_ascii=False))
