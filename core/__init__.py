"""Core rules for job drafts: validation, progress and publish payloads."""
