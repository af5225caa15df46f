"""Utility helpers for the job draft wizard."""

from .logging_context import configure_logging, log_context, set_draft_id, set_session_id, set_wizard_step

__all__ = ["configure_logging", "log_context", "set_draft_id", "set_session_id", "set_wizard_step"]
