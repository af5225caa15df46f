"""Pydantic models for job drafts and their publish payload."""

from .draft import (
    DEFAULT_CURRENCY,
    BulkEntry,
    DraftKind,
    DraftRecord,
    DraftStatus,
    Expense,
    Position,
    revise,
)
from .payload import PublishPayload

__all__ = [
    "BulkEntry",
    "DEFAULT_CURRENCY",
    "DraftKind",
    "DraftRecord",
    "DraftStatus",
    "Expense",
    "Position",
    "PublishPayload",
    "revise",
]
