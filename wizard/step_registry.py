"""Registry for wizard steps, metadata, and canonical order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from constants.steps import StepId
from core.step_validators import STEP_VALIDATORS, StepValidator


@dataclass(frozen=True)
class StepDefinition:
    """Metadata + validation contract for an individual wizard step."""

    key: StepId
    title: str
    description: str
    validator: StepValidator
    optional: bool = False


def _step(key: StepId, title: str, description: str, *, optional: bool = False) -> StepDefinition:
    return StepDefinition(
        key=key,
        title=title,
        description=description,
        validator=STEP_VALIDATORS[key],
        optional=optional,
    )


SINGLE_FLOW_STEPS: Final[tuple[StepDefinition, ...]] = (
    _step(StepId.DETAILS, "Posting Details", "Administrative fields"),
    _step(StepId.CONTRACT, "Contract", "Employment terms"),
    _step(StepId.POSITIONS, "Positions", "Job positions with salary"),
    _step(StepId.TAGS, "Tags & Canonical Titles", "Skills, education, experience"),
    _step(StepId.EXPENSES, "Expenses", "Cost breakdown", optional=True),
    _step(StepId.CUTOUT, "Cutout", "Job advertisement image (Required)"),
    _step(StepId.INTERVIEW, "Interview", "Interview process details", optional=True),
    _step(StepId.REVIEW, "Review and Publish", "Final review"),
)

BULK_FLOW_STEPS: Final[tuple[StepDefinition, ...]] = (
    _step(StepId.BULK, "Bulk Draft Entries", "Countries, job counts and positions"),
)


def step_keys() -> tuple[StepId, ...]:
    """Return single-flow step keys in canonical order."""

    return tuple(step.key for step in SINGLE_FLOW_STEPS)


def step_count() -> int:
    return len(SINGLE_FLOW_STEPS)


def get_step(key: StepId | str) -> StepDefinition | None:
    """Lookup step metadata by key."""

    return next(
        (step for step in (*SINGLE_FLOW_STEPS, *BULK_FLOW_STEPS) if step.key == key),
        None,
    )


def step_at(index: int) -> StepDefinition:
    """Return the single-flow step at 0-based ``index``."""

    return SINGLE_FLOW_STEPS[index]


def index_of(key: StepId | str) -> int:
    """Return the 0-based position of ``key`` in the single flow."""

    return step_keys().index(StepId(key))


__all__ = [
    "BULK_FLOW_STEPS",
    "SINGLE_FLOW_STEPS",
    "StepDefinition",
    "get_step",
    "index_of",
    "step_at",
    "step_count",
    "step_keys",
]
