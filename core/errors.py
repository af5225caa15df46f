"""Custom exception types for draft editing and persistence."""

from __future__ import annotations


class DraftError(Exception):
    """Base exception for job draft related issues."""


class WizardStateError(DraftError):
    """Raised when a session operation is not allowed in the current phase."""


class PublishedDraftError(WizardStateError):
    """Raised when a published draft is opened for editing."""

    def __init__(self, draft_id: str | None = None) -> None:
        label = draft_id or "unknown"
        super().__init__(f"Draft {label} is published and can no longer be edited.")
        self.draft_id = draft_id


class UnknownEntryError(DraftError, KeyError):
    """Raised when a repeatable entry is addressed by an id that does not exist."""

    def __init__(self, collection: str, entry_id: int) -> None:
        super().__init__(f"No {collection} entry with id {entry_id}")
        self.collection = collection
        self.entry_id = entry_id

    def __str__(self) -> str:
        return str(self.args[0])


class DraftStoreError(DraftError):
    """Raised by the persistence boundary when a draft call fails."""

    def __init__(self, operation: str, message: str, *, status_code: int | None = None) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.status_code = status_code
