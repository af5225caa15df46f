"""Build the initial draft of a wizard session."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Final

from constants.flow_mode import FlowMode
from constants.steps import REVIEW_STEP_INDEX
from core.errors import PublishedDraftError
from core.progress import describe_hint_drift
from models.draft import BulkEntry, DraftKind, DraftRecord, Position
from wizard.entries import LocalIdAllocator

logger = logging.getLogger(__name__)

GENERAL_WORKER_TITLE: Final[str] = "General Worker"

# Contract values pre-filled when a bulk entry is expanded into a single draft.
EXPANSION_CONTRACT_DEFAULTS: Final[dict[str, Any]] = {
    "period_years": 2,
    "renewable": True,
    "hours_per_day": 8,
    "days_per_week": 6,
    "weekly_off_days": 1,
    "annual_leave_days": 21,
}


@dataclass(frozen=True)
class SessionSeed:
    """Draft, flow and step a session starts from."""

    draft: DraftRecord
    flow: FlowMode | None
    step_index: int = 0


def new_single_draft(allocator: LocalIdAllocator) -> DraftRecord:
    return DraftRecord(kind=DraftKind.SINGLE, positions=(Position(id=allocator.mint()),))


def new_bulk_draft(allocator: LocalIdAllocator) -> DraftRecord:
    return DraftRecord(kind=DraftKind.BULK, bulk_entries=(BulkEntry(id=allocator.mint()),))


def expand_bulk_draft(record: DraftRecord, allocator: LocalIdAllocator) -> DraftRecord:
    """Seed a new single draft from the first bulk entry of ``record``.

    Only the first entry is carried over; the remaining entries are dropped.
    """

    first = record.bulk_entries[0] if record.bulk_entries else BulkEntry(id=0)
    dropped = max(len(record.bulk_entries) - 1, 0)
    if dropped:
        logger.info(
            "Expanding bulk draft %s from its first entry, %d entr%s not carried over",
            record.id,
            dropped,
            "y" if dropped == 1 else "ies",
        )
    job_count = int(first.job_count) if first.job_count else 1
    position = Position(
        id=allocator.mint(),
        title=first.position or GENERAL_WORKER_TITLE,
        vacancies_male=job_count,
        vacancies_female=0,
        notes=f"Expanded from bulk draft: {record.title or 'Bulk Draft'}",
    )
    return DraftRecord.model_validate(
        {
            "kind": DraftKind.SINGLE,
            "title": first.position or record.title,
            "employer": record.employer,
            "administrative": {"country": first.country, "notes": record.description},
            "contract": EXPANSION_CONTRACT_DEFAULTS,
            "positions": [position.model_dump()],
            "original_bulk_id": record.id,
        }
    )


def _resume_index(record: DraftRecord, resume_step: int | None) -> int:
    if resume_step is None and record.is_partial:
        resume_step = record.last_completed_step
    if resume_step is None:
        return 0
    return min(max(resume_step, 0), REVIEW_STEP_INDEX)


def seed_from_record(
    record: DraftRecord,
    allocator: LocalIdAllocator,
    *,
    resume_step: int | None = None,
    expand_bulk: bool = False,
) -> SessionSeed:
    """Return the starting point of a session editing ``record``.

    Raises:
        PublishedDraftError: if ``record`` has already been published.
    """

    if record.is_published:
        raise PublishedDraftError(record.id)

    if record.is_bulk and expand_bulk:
        return SessionSeed(draft=expand_bulk_draft(record, allocator), flow=FlowMode.SINGLE)
    if record.is_bulk:
        return SessionSeed(draft=record, flow=FlowMode.BULK)

    describe_hint_drift(record)
    return SessionSeed(
        draft=record,
        flow=FlowMode.SINGLE,
        step_index=_resume_index(record, resume_step),
    )


__all__ = [
    "EXPANSION_CONTRACT_DEFAULTS",
    "GENERAL_WORKER_TITLE",
    "SessionSeed",
    "expand_bulk_draft",
    "new_bulk_draft",
    "new_single_draft",
    "seed_from_record",
]
