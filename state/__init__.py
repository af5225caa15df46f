"""Draft persistence boundary and partial-save helpers."""

from .draft_store import DraftStore, InMemoryDraftStore, StoredDraft

__all__ = ["DraftStore", "InMemoryDraftStore", "StoredDraft"]
