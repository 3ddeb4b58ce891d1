from __future__ import annotations

import math
from typing import Optional

from .entities import DisplayUnit


def to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def round_half_up(value: Optional[float]) -> Optional[int]:
    """Round to the nearest integer, halves toward positive infinity."""
    if value is None:
        return None
    return int(math.floor(value + 0.5))


def convert(celsius: Optional[float], unit: DisplayUnit) -> Optional[float]:
    if celsius is None:
        return None
    if unit is DisplayUnit.FAHRENHEIT:
        return to_fahrenheit(celsius)
    return celsius


def display_temperature(celsius: Optional[float], unit: DisplayUnit) -> Optional[int]:
    """Convert first, then round; a missing reading stays missing."""
    return round_half_up(convert(celsius, unit))


__all__ = ["convert", "display_temperature", "round_half_up", "to_fahrenheit"]
