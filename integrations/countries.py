"""Country list provider backed by the agency API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import requests

import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Country:
    name: str
    code: str | None = None
    currency_code: str | None = None


def _parse_country(item: object) -> Country | None:
    if not isinstance(item, Mapping):
        return None
    name = str(item.get("country_name") or item.get("name") or "").strip()
    if not name:
        return None
    code = str(item.get("country_code") or "").strip() or None
    currency = str(item.get("currency_code") or "").strip().upper() or None
    return Country(name=name, code=code, currency_code=currency)


class CountryDirectory:
    """Lazily load the valid country names.

    A failed load is not fatal: the directory reports no countries and sets
    :attr:`load_failed` so the wizard can show a hint and keep going.
    """

    def __init__(self, url: str | None = None, *, timeout: float | None = None) -> None:
        self._url = url or config.COUNTRIES_API_URL
        self._timeout = timeout if timeout is not None else config.HTTP_TIMEOUT_SECONDS
        self._countries: tuple[Country, ...] | None = None
        self.load_failed = False

    @property
    def loaded(self) -> bool:
        return self._countries is not None

    def _fetch(self) -> Any:
        response = requests.get(self._url, timeout=self._timeout, headers={"Accept": "application/json"})
        response.raise_for_status()
        return response.json()

    def load(self, *, force: bool = False) -> tuple[Country, ...]:
        if self._countries is not None and not force:
            return self._countries
        try:
            payload = self._fetch()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Unable to load countries from %s: %s", self._url, exc)
            self._countries = ()
            self.load_failed = True
            return self._countries
        items = payload.get("data") if isinstance(payload, Mapping) else payload
        if not isinstance(items, list):
            logger.warning("Unexpected countries payload from %s", self._url)
            self._countries = ()
            self.load_failed = True
            return self._countries
        parsed = (_parse_country(item) for item in items)
        self._countries = tuple(sorted((c for c in parsed if c is not None), key=lambda c: c.name))
        self.load_failed = False
        return self._countries

    def names(self) -> list[str]:
        return [country.name for country in self.load()]

    def find(self, name: str) -> Country | None:
        return next((country for country in self.load() if country.name == name), None)

    def currency_for(self, name: str) -> str | None:
        country = self.find(name)
        return country.currency_code if country else None


__all__ = ["Country", "CountryDirectory"]
