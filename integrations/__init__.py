"""Adapters for the agency backend (drafts and countries)."""

from __future__ import annotations

import logging

import config
from config import StoreBackend
from integrations.countries import CountryDirectory
from integrations.draft_api import HttpDraftStore
from state.draft_store import DraftStore, InMemoryDraftStore

logger = logging.getLogger(__name__)


def make_store(backend: StoreBackend | str | None = None) -> DraftStore:
    """Return the draft store selected by ``backend`` or ``DRAFT_STORE_BACKEND``."""

    selected = StoreBackend(backend) if backend else config.DRAFT_STORE_BACKEND
    if selected is StoreBackend.HTTP:
        logger.info("Using HTTP draft store at %s", config.DRAFTS_API_BASE_URL)
        return HttpDraftStore()
    return InMemoryDraftStore()


__all__ = ["CountryDirectory", "HttpDraftStore", "make_store"]
