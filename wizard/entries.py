"""Id-keyed helpers for the repeatable parts of a draft.

Positions, expenses, interview expenses and bulk entries are addressed by a
local id that is unique for the lifetime of an editing session. All helpers
return new tuples and leave their input untouched.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

from core.errors import UnknownEntryError
from core.validators import deduplicate_preserve_order
from models.draft import DraftRecord, revise


class _HasLocalId(Protocol):
    id: int


EntryT = TypeVar("EntryT", bound=_HasLocalId)


class LocalIdAllocator:
    """Mint increasing local ids; ids are never handed out twice."""

    def __init__(self, start: int = 1) -> None:
        self._next = max(start, 1)

    @classmethod
    def for_draft(cls, draft: DraftRecord) -> "LocalIdAllocator":
        return cls(start=draft.max_local_id() + 1)

    @property
    def next_id(self) -> int:
        return self._next

    def mint(self) -> int:
        value = self._next
        self._next += 1
        return value


def find_entry(entries: tuple[EntryT, ...], entry_id: int) -> EntryT | None:
    return next((entry for entry in entries if entry.id == entry_id), None)


def append_entry(entries: tuple[EntryT, ...], entry: EntryT) -> tuple[EntryT, ...]:
    return (*entries, entry)


def remove_entry(entries: tuple[EntryT, ...], entry_id: int) -> tuple[EntryT, ...]:
    """Drop the entry with ``entry_id``; unknown ids leave ``entries`` as is."""

    return tuple(entry for entry in entries if entry.id != entry_id)


def replace_entry(
    entries: tuple[EntryT, ...],
    entry_id: int,
    *,
    collection: str,
    **changes: Any,
) -> tuple[EntryT, ...]:
    """Return ``entries`` with ``changes`` applied to the entry ``entry_id``.

    Raises:
        UnknownEntryError: if no entry carries ``entry_id``.
    """

    if find_entry(entries, entry_id) is None:
        raise UnknownEntryError(collection, entry_id)
    changes.pop("id", None)
    return tuple(revise(entry, **changes) if entry.id == entry_id else entry for entry in entries)  # type: ignore[type-var]


def add_tag(tags: tuple[str, ...], value: str) -> tuple[str, ...]:
    """Append ``value`` unless an equal tag (ignoring case) is present."""

    return tuple(deduplicate_preserve_order([*tags, value]))


def remove_tag(tags: tuple[str, ...], value: str) -> tuple[str, ...]:
    marker = value.strip().casefold()
    return tuple(tag for tag in tags if tag.casefold() != marker)


__all__ = [
    "LocalIdAllocator",
    "add_tag",
    "append_entry",
    "find_entry",
    "remove_entry",
    "remove_tag",
    "replace_entry",
]
