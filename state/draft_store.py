"""Persistence boundary for job drafts and an in-process implementation."""

from __future__ import annotations

import copy
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Protocol

from core.errors import DraftStoreError
from models.draft import DraftStatus

logger = logging.getLogger(__name__)

StoredDraft = dict[str, Any]


class DraftStore(Protocol):
    """Calls the wizard and the draft list make against persisted drafts.

    Records travel as JSON-ready mappings: the raw draft model for partial
    saves, the publish payload when a draft is published.
    """

    def create(self, record: Mapping[str, Any], /) -> StoredDraft:
        """Persist a new draft and return it with its assigned ``id``."""

    def update(self, draft_id: str, partial_record: Mapping[str, Any], /) -> StoredDraft:
        """Merge ``partial_record`` into the stored draft ``draft_id``."""

    def delete(self, draft_id: str, /) -> None:
        """Remove the draft ``draft_id``."""

    def publish(self, draft_id: str, /) -> StoredDraft:
        """Mark the draft ``draft_id`` as published."""

    def list(self) -> list[StoredDraft]:
        """Return every stored draft."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemoryDraftStore:
    """Dictionary backed :class:`DraftStore` used by the CLI, demos and tests."""

    def __init__(self, records: list[Mapping[str, Any]] | None = None) -> None:
        self._records: dict[str, StoredDraft] = {}
        self._pending_failure: Exception | None = None
        self.calls: list[tuple[str, str | None]] = []
        for record in records or ():
            self._insert(record)

    def fail_next(self, exc: Exception | None = None) -> None:
        """Make the next call raise ``exc`` (a generic store error by default)."""

        self._pending_failure = exc or DraftStoreError("store", "simulated failure")

    def _check_failure(self, operation: str, draft_id: str | None = None) -> None:
        self.calls.append((operation, draft_id))
        if self._pending_failure is None:
            return
        exc, self._pending_failure = self._pending_failure, None
        logger.debug("Raising injected failure for %s", operation)
        raise exc

    def _require(self, operation: str, draft_id: str) -> StoredDraft:
        try:
            return self._records[draft_id]
        except KeyError:
            raise DraftStoreError(operation, f"draft {draft_id} not found", status_code=404) from None

    def _insert(self, record: Mapping[str, Any]) -> StoredDraft:
        stored = copy.deepcopy(dict(record))
        draft_id = str(stored.get("id") or uuid.uuid4())
        timestamp = _now()
        stored["id"] = draft_id
        stored.setdefault("created_at", timestamp)
        stored["updated_at"] = timestamp
        stored.setdefault("status", DraftStatus.DRAFT.value)
        self._records[draft_id] = stored
        return stored

    def create(self, record: Mapping[str, Any], /) -> StoredDraft:
        self._check_failure("create")
        payload = dict(record)
        payload.pop("id", None)
        stored = self._insert(payload)
        logger.info("Created draft %s", stored["id"])
        return copy.deepcopy(stored)

    def update(self, draft_id: str, partial_record: Mapping[str, Any], /) -> StoredDraft:
        self._check_failure("update", draft_id)
        stored = self._require("update", draft_id)
        if stored.get("status") == DraftStatus.PUBLISHED.value:
            raise DraftStoreError("update", f"draft {draft_id} is already published", status_code=409)
        changes = copy.deepcopy(dict(partial_record))
        changes.pop("id", None)
        changes.pop("created_at", None)
        stored.update(changes)
        stored["updated_at"] = _now()
        return copy.deepcopy(stored)

    def delete(self, draft_id: str, /) -> None:
        self._check_failure("delete", draft_id)
        self._require("delete", draft_id)
        del self._records[draft_id]
        logger.info("Deleted draft %s", draft_id)

    def publish(self, draft_id: str, /) -> StoredDraft:
        self._check_failure("publish", draft_id)
        stored = self._require("publish", draft_id)
        stored["status"] = DraftStatus.PUBLISHED.value
        stored["updated_at"] = _now()
        logger.info("Published draft %s", draft_id)
        return copy.deepcopy(stored)

    def list(self) -> list[StoredDraft]:
        self._check_failure("list")
        return [copy.deepcopy(record) for record in self._records.values()]

    def get(self, draft_id: str) -> StoredDraft:
        return copy.deepcopy(self._require("get", draft_id))


__all__ = ["DraftStore", "InMemoryDraftStore", "StoredDraft"]
