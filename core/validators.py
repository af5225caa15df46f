"""Helper validators shared across the draft models."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from core.validation import is_blank

Number = int | float


def deduplicate_preserve_order(value: object) -> list[str]:
    """Return ``value`` as a list of unique strings, preserving the original order."""

    if value is None:
        return []
    if isinstance(value, str):
        candidate_iter: Iterable[Any] = [value]
    elif isinstance(value, Mapping):
        candidate_iter = list(value.values())
    elif isinstance(value, Iterable):
        candidate_iter = value  # type: ignore[assignment]
    else:
        return []

    seen: set[str] = set()
    result: list[str] = []
    for item in candidate_iter:
        if item is None:
            continue
        as_str = str(item).strip()
        if not as_str:
            continue
        marker = as_str.casefold()
        if marker in seen:
            continue
        seen.add(marker)
        result.append(as_str)
    return result


def coerce_numeric_input(value: object) -> Number | None:
    """Map raw numeric input onto ``None`` (not yet entered) or a number.

    Empty strings and text that does not parse as a number stay unset, so a
    field that is mid-edit never reads as a validated zero. NaN and infinite
    values, including overflowing literals such as ``1e400``, stay unset too.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _finite(value)
    if isinstance(value, str):
        cleaned = value.strip().replace(",", "")
        if not cleaned:
            return None
        try:
            return int(cleaned)
        except ValueError:
            pass
        try:
            parsed = float(cleaned)
        except ValueError:
            return None
        return _finite(parsed)
    return None


def _finite(value: float) -> Number | None:
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


def coerce_int(value: object) -> int | None:
    """Return ``value`` as a whole number, or ``None`` when it is unset."""

    number = coerce_numeric_input(value)
    if number is None:
        return None
    return int(number)


def blank_to_none(value: object) -> object | None:
    """Treat empty or whitespace-only strings as ``None``."""

    if isinstance(value, str):
        cleaned = value.strip()
        return cleaned or None
    return value


def optional_text(value: object) -> str | None:
    """Return a stripped string or ``None`` for blank input."""

    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return None if is_blank(text) else text.strip()
