"""Acceptance rules for the job advertisement image."""

from __future__ import annotations

import logging

import config
from models.draft import CutoutImage, revise

logger = logging.getLogger(__name__)

CUTOUT_FIELD = "cutout_file"


def normalise_mime_type(mime_type: str | None) -> str:
    cleaned = (mime_type or "").strip().lower()
    return config.CUTOUT_MIME_ALIASES.get(cleaned, cleaned)


def check_cutout_file(size: int | None, mime_type: str | None) -> dict[str, str]:
    """Return a field error when the selected file must be rejected."""

    if normalise_mime_type(mime_type) not in config.CUTOUT_ALLOWED_MIME_TYPES:
        return {CUTOUT_FIELD: "Please select a valid image file (JPG, PNG)"}
    if size is None or size < 0 or size > config.CUTOUT_MAX_BYTES:
        limit_mb = config.CUTOUT_MAX_BYTES // (1024 * 1024)
        return {CUTOUT_FIELD: f"File size must be less than {limit_mb}MB"}
    return {}


def accept_cutout_file(
    current: CutoutImage | None,
    file_name: str,
    size: int | None,
    mime_type: str | None,
) -> tuple[CutoutImage | None, dict[str, str]]:
    """Return the cutout after selecting a file, plus any rejection error.

    A rejected file leaves ``current`` untouched. An accepted file replaces the
    local file metadata and resets the upload flag; a previously uploaded url is
    kept until the new file is uploaded.
    """

    errors = check_cutout_file(size, mime_type)
    if errors:
        logger.info("Rejected cutout %r (%s, %s bytes)", file_name, mime_type, size)
        return current, errors
    base = current or CutoutImage()
    accepted = revise(
        base,
        file_name=file_name,
        file_size=size,
        file_type=normalise_mime_type(mime_type),
        is_uploaded=False,
    )
    return accepted, {}


def mark_uploaded(current: CutoutImage | None, uploaded_url: str) -> CutoutImage:
    base = current or CutoutImage()
    return revise(base, uploaded_url=uploaded_url, is_uploaded=True)


__all__ = [
    "CUTOUT_FIELD",
    "accept_cutout_file",
    "check_cutout_file",
    "mark_uploaded",
    "normalise_mime_type",
]
