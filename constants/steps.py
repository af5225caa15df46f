"""Identifiers for the draft wizard steps."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class StepId(StrEnum):
    """Stable keys for every wizard step, in single-flow order."""

    DETAILS = "details"
    CONTRACT = "contract"
    POSITIONS = "positions"
    TAGS = "tags"
    EXPENSES = "expenses"
    CUTOUT = "cutout"
    INTERVIEW = "interview"
    REVIEW = "review"
    BULK = "bulk"


SINGLE_FLOW_ORDER: Final[tuple[StepId, ...]] = (
    StepId.DETAILS,
    StepId.CONTRACT,
    StepId.POSITIONS,
    StepId.TAGS,
    StepId.EXPENSES,
    StepId.CUTOUT,
    StepId.INTERVIEW,
    StepId.REVIEW,
)

# Steps whose content the progress badge tracks.
CONTENT_STEPS: Final[tuple[StepId, ...]] = SINGLE_FLOW_ORDER[:6]

# Steps re-validated before publishing (everything except the review screen).
PUBLISH_STEPS: Final[tuple[StepId, ...]] = SINGLE_FLOW_ORDER[:7]

REVIEW_STEP_INDEX: Final[int] = SINGLE_FLOW_ORDER.index(StepId.REVIEW)
