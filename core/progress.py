"""Recompute draft progress from persisted content only.

The stored ``last_completed_step`` pointer is a resume hint; badges and the
"ready to publish" decision are always derived from the draft content here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

from pydantic import ValidationError

from constants.steps import CONTENT_STEPS, SINGLE_FLOW_ORDER, StepId
from core.step_validators import validate
from models.draft import DraftRecord

logger = logging.getLogger(__name__)

SINGLE_FLOW_STEP_COUNT: Final[int] = len(SINGLE_FLOW_ORDER)
BULK_FLOW_STEP_COUNT: Final[int] = 1


@dataclass(frozen=True)
class DraftProgress:
    """Progress summary of a stored draft.

    ``current_step`` is 1-based: the first failing content step, or the review
    step once every content step passes.
    """

    current_step: int
    completed_count: int
    ready_to_publish: bool
    total_steps: int = SINGLE_FLOW_STEP_COUNT
    step_results: tuple[bool, ...] = ()
    is_bulk: bool = False

    @property
    def resume_index(self) -> int:
        """0-based step index to reopen the wizard at."""

        if self.is_bulk:
            return 0
        return self.current_step - 1

    @property
    def label(self) -> str:
        return f"Step {self.current_step}/{self.total_steps}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_step": self.current_step,
            "completed_count": self.completed_count,
            "ready_to_publish": self.ready_to_publish,
            "total_steps": self.total_steps,
            "step_results": list(self.step_results),
            "resume_index": self.resume_index,
            "is_bulk": self.is_bulk,
        }


UNREADABLE_PROGRESS: Final[DraftProgress] = DraftProgress(
    current_step=1,
    completed_count=0,
    ready_to_publish=False,
    step_results=(False,) * len(CONTENT_STEPS),
)


def _content_step_passes(step_id: StepId, draft: DraftRecord) -> bool:
    # Expenses and cutout only need to be present for the badge.
    if step_id is StepId.EXPENSES:
        return bool(draft.expenses)
    if step_id is StepId.CUTOUT:
        return draft.has_cutout_content()
    return not validate(step_id, draft)


def _evaluate_bulk(draft: DraftRecord) -> DraftProgress:
    ready = bool(draft.bulk_entries) and draft.title is not None and draft.employer is not None
    return DraftProgress(
        current_step=1,
        completed_count=1,
        ready_to_publish=ready,
        total_steps=BULK_FLOW_STEP_COUNT,
        step_results=(True,),
        is_bulk=True,
    )


def evaluate(draft: DraftRecord) -> DraftProgress:
    """Return the progress of ``draft`` ignoring any stored step pointer."""

    if draft.is_bulk:
        return _evaluate_bulk(draft)

    results = tuple(_content_step_passes(step_id, draft) for step_id in CONTENT_STEPS)
    completed = sum(results)
    try:
        first_failing = results.index(False)
    except ValueError:
        current_step = SINGLE_FLOW_STEP_COUNT
    else:
        current_step = first_failing + 1

    interview_ok = not validate(StepId.INTERVIEW, draft)
    ready = all(results) and interview_ok and draft.review.is_complete
    return DraftProgress(
        current_step=current_step,
        completed_count=completed,
        ready_to_publish=ready,
        step_results=results,
    )


def evaluate_payload(payload: Mapping[str, Any]) -> DraftProgress:
    """Evaluate a raw persisted mapping, degrading to an empty result if unreadable."""

    try:
        draft = DraftRecord.model_validate(payload)
    except ValidationError as exc:
        logger.warning(
            "Unreadable draft %s, reporting empty progress: %d error(s)",
            payload.get("id", "<unknown>") if isinstance(payload, Mapping) else "<unknown>",
            exc.error_count(),
        )
        return UNREADABLE_PROGRESS
    return evaluate(draft)


def describe_hint_drift(draft: DraftRecord, progress: DraftProgress | None = None) -> str | None:
    """Return a message when the stored step hint disagrees with the recomputed step."""

    if draft.is_bulk or draft.last_completed_step is None:
        return None
    progress = progress or evaluate(draft)
    if draft.last_completed_step == progress.resume_index:
        return None
    message = (
        f"Stored step hint {draft.last_completed_step + 1} differs from "
        f"recomputed step {progress.current_step}"
    )
    logger.info("Draft %s: %s", draft.id or "<new>", message)
    return message


__all__ = [
    "BULK_FLOW_STEP_COUNT",
    "DraftProgress",
    "SINGLE_FLOW_STEP_COUNT",
    "UNREADABLE_PROGRESS",
    "describe_hint_drift",
    "evaluate",
    "evaluate_payload",
]
