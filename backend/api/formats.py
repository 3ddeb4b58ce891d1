"""Date formatting through Django's translation catalogs.

Weekday names follow the active language (``LocaleMiddleware`` activates it
from ``Accept-Language``), so no OS locale has to be installed.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from django.utils import dateformat

from skycast.presentation import DateFormatter


class LocalizedDateFormatter(DateFormatter):
    def day_name(self, day: date) -> str:
        return dateformat.format(day, "D")

    def observed_at(self, moment: Optional[datetime]) -> str:
        if moment is None:
            return ""
        return dateformat.format(moment, "l H:i")
