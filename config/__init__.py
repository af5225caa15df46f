"""Central configuration for the job draft wizard.

Values are read once from the environment (a local ``.env`` file is honoured
through ``python-dotenv``). ``DRAFT_STORE_BACKEND`` selects where drafts are
persisted: ``memory`` keeps them in-process (handy for demos and the CLI),
``http`` talks to the agency backend at ``DRAFTS_API_BASE_URL``.
"""

from __future__ import annotations

import logging
import os
from enum import StrEnum
from typing import Final

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

_TRUTHY_ENV_VALUES: tuple[str, ...] = ("1", "true", "yes", "on")


class StoreBackend(StrEnum):
    """Enumerate the supported draft persistence backends."""

    MEMORY = "memory"
    HTTP = "http"


def _is_truthy_flag(value: str | None) -> bool:
    """Return ``True`` when ``value`` matches a truthy environment token."""

    if value is None:
        return False
    return value.strip().lower() in _TRUTHY_ENV_VALUES


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning("Ignoring non-integer value for %s: %r", name, raw)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        logger.warning("Ignoring non-numeric value for %s: %r", name, raw)
        return default


def _resolve_store_backend(value: str | None) -> StoreBackend:
    if not value:
        return StoreBackend.MEMORY
    try:
        return StoreBackend(value.strip().lower())
    except ValueError:
        logger.warning("Unknown DRAFT_STORE_BACKEND %r, falling back to memory", value)
        return StoreBackend.MEMORY


DRAFTS_API_BASE_URL: str = os.getenv("DRAFTS_API_BASE_URL", "http://localhost:3000").rstrip("/")
AGENCY_LICENSE: str | None = os.getenv("AGENCY_LICENSE") or None
DRAFTS_API_TOKEN: str | None = os.getenv("DRAFTS_API_TOKEN") or None
HTTP_TIMEOUT_SECONDS: float = _env_float("HTTP_TIMEOUT_SECONDS", 10.0)
COUNTRIES_API_URL: str = os.getenv("COUNTRIES_API_URL", f"{DRAFTS_API_BASE_URL}/countries")

DRAFT_STORE_BACKEND: StoreBackend = _resolve_store_backend(os.getenv("DRAFT_STORE_BACKEND"))

DEFAULT_CURRENCY: str = (os.getenv("DEFAULT_CURRENCY") or "AED").strip().upper()

# Cutout (job advertisement image) acceptance rules
CUTOUT_MAX_BYTES: Final[int] = _env_int("CUTOUT_MAX_BYTES", 10 * 1024 * 1024)
CUTOUT_ALLOWED_MIME_TYPES: Final[tuple[str, ...]] = ("image/jpeg", "image/png")
CUTOUT_MIME_ALIASES: Final[dict[str, str]] = {"image/jpg": "image/jpeg", "image/pjpeg": "image/jpeg"}

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
DRAFTS_DEBUG: bool = _is_truthy_flag(os.getenv("DRAFTS_DEBUG"))


def resolve_log_level() -> int:
    """Return the numeric logging level configured via ``LOG_LEVEL``."""

    if DRAFTS_DEBUG:
        return logging.DEBUG
    level = logging.getLevelName(LOG_LEVEL)
    return level if isinstance(level, int) else logging.INFO


__all__ = [
    "AGENCY_LICENSE",
    "COUNTRIES_API_URL",
    "CUTOUT_ALLOWED_MIME_TYPES",
    "CUTOUT_MAX_BYTES",
    "CUTOUT_MIME_ALIASES",
    "DEFAULT_CURRENCY",
    "DRAFTS_API_BASE_URL",
    "DRAFTS_API_TOKEN",
    "DRAFTS_DEBUG",
    "DRAFT_STORE_BACKEND",
    "HTTP_TIMEOUT_SECONDS",
    "LOG_LEVEL",
    "StoreBackend",
    "resolve_log_level",
]
