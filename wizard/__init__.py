"""Draft wizard: step registry, session controller and editing helpers."""

from __future__ import annotations

from .session import PublishResult, SessionPhase, WizardSession
from .step_registry import BULK_FLOW_STEPS, SINGLE_FLOW_STEPS, StepDefinition, get_step

__all__ = [
    "BULK_FLOW_STEPS",
    "PublishResult",
    "SINGLE_FLOW_STEPS",
    "SessionPhase",
    "StepDefinition",
    "WizardSession",
    "get_step",
]
