"""Validation primitives shared by the step rules."""

from __future__ import annotations

import re
import math
from typing import Final

# HH:MM on a 24h clock, or 1-12 with an AM/PM suffix.
INTERVIEW_TIME_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:(?:[01]?\d|2[0-3]):[0-5]\d|(?:0?[1-9]|1[0-2]):[0-5]\d\s?(?:AM|PM))$",
    re.IGNORECASE,
)


def is_blank(value: object | None) -> bool:
    """Return ``True`` if *value* is ``None`` or an empty/whitespace string."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def is_valid_interview_time(value: str) -> bool:
    """Return ``True`` when ``value`` looks like ``14:30`` or ``10:00 AM``."""

    return bool(INTERVIEW_TIME_PATTERN.match(value.strip()))


def in_range(value: int | float | None, low: float, high: float | None = None) -> bool:
    """Return ``True`` when ``value`` is set, finite and within ``[low, high]``."""

    if value is None or not math.isfinite(value):
        return False
    if value < low:
        return False
    if high is not None and value > high:
        return False
    return True
