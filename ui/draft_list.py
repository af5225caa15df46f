"""Draft list rows and badges derived from stored records only."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal, Mapping

import streamlit as st

from constants.steps import CONTENT_STEPS
from core.errors import WizardStateError
from core.progress import UNREADABLE_PROGRESS, DraftProgress, evaluate
from models.draft import DraftRecord
from state.autosave import is_published_record, try_parse_stored_record
from state.draft_store import DraftStore, StoredDraft

Badge = Literal["Published", "Bulk Draft", "Ready to Publish", "Partial", "Draft"]
DraftAction = Literal["edit", "expand", "publish", "delete"]

_BADGE_ICONS: dict[str, str] = {
    "Published": "✅",
    "Bulk Draft": "📦",
    "Ready to Publish": "🚀",
    "Partial": "📝",
    "Draft": "🗒️",
}


@dataclass(frozen=True)
class DraftRow:
    draft_id: str | None
    title: str
    badge: Badge
    progress_label: str
    completed_count: int
    total_steps: int
    resume_step: int
    ready_to_publish: bool
    is_bulk: bool
    country: str | None = None
    is_partial: bool = False
    can_publish: bool = False


def _badge(draft: DraftRecord | None, progress: DraftProgress, *, published: bool) -> Badge:
    if published or (draft is not None and draft.is_published):
        return "Published"
    if progress.is_bulk:
        return "Bulk Draft"
    if progress.ready_to_publish:
        return "Ready to Publish"
    if draft is not None and draft.is_partial:
        return "Partial"
    return "Draft"


def _title(draft: DraftRecord | None, record: Mapping[str, Any]) -> str:
    if draft is not None:
        if draft.title:
            return draft.title
        if draft.is_bulk:
            return draft.bulk_summary().title
        if draft.positions and draft.positions[0].title:
            return f"{draft.positions[0].title} Position"
    fallback = record.get("posting_title")
    return str(fallback) if fallback else "Untitled draft"


def _can_publish(draft: DraftRecord | None, progress: DraftProgress, published: bool) -> bool:
    # Partial saves and drafts missing title, country or employer stay in the wizard.
    if published or draft is None or draft.is_bulk or draft.is_partial:
        return False
    if not (draft.title and draft.employer and draft.administrative.country):
        return False
    return progress.ready_to_publish


def build_draft_row(record: Mapping[str, Any]) -> DraftRow:
    published = is_published_record(record)
    draft = try_parse_stored_record(record)
    progress = evaluate(draft) if draft is not None else UNREADABLE_PROGRESS
    if draft is not None and draft.is_bulk:
        summary = draft.bulk_summary()
        progress_label = f"{summary.total_jobs} jobs"
        country: str | None = summary.country_label if summary.countries else None
    else:
        progress_label = progress.label
        country = draft.administrative.country if draft is not None else None
    return DraftRow(
        draft_id=str(record["id"]) if record.get("id") else None,
        title=_title(draft, record),
        badge=_badge(draft, progress, published=published),
        progress_label=progress_label,
        completed_count=progress.completed_count,
        total_steps=progress.total_steps,
        resume_step=progress.resume_index,
        ready_to_publish=progress.ready_to_publish,
        is_bulk=progress.is_bulk,
        country=country,
        is_partial=draft is not None and draft.is_partial,
        can_publish=_can_publish(draft, progress, published),
    )


def build_draft_rows(records: Iterable[Mapping[str, Any]]) -> list[DraftRow]:
    """Return one row per stored record, in the given order."""

    return [build_draft_row(record) for record in records]


def publish_row(store: DraftStore, row: DraftRow) -> StoredDraft:
    """Publish a listed draft straight from the list.

    Raises:
        WizardStateError: if the row is not ready to publish.
        DraftStoreError: if the store call fails.
    """

    if not row.can_publish or row.draft_id is None:
        raise WizardStateError(f"“{row.title}” is incomplete and cannot be published yet.")
    return store.publish(row.draft_id)


def render_draft_list(rows: list[DraftRow]) -> tuple[DraftAction, DraftRow] | None:
    """Draw the draft rows and return the action clicked in this run, if any."""

    if not rows:
        st.info("No drafts yet. Create one to get started.")
        return None
    clicked: tuple[DraftAction, DraftRow] | None = None
    for index, row in enumerate(rows):
        key = row.draft_id or f"row-{index}"
        with st.container(border=True):
            info_col, progress_col, action_col = st.columns([4, 2, 2])
            info_col.markdown(f"**{row.title}**")
            info_col.caption(f"{_BADGE_ICONS[row.badge]} {row.badge}" + (f" · {row.country}" if row.country else ""))
            progress_col.caption(row.progress_label)
            if not row.is_bulk:
                progress_col.progress(row.completed_count / len(CONTENT_STEPS))
            if row.badge == "Published":
                continue
            if action_col.button("Continue editing", key=f"draft.edit.{key}"):
                clicked = ("edit", row)
            if row.is_bulk and action_col.button("Expand to single", key=f"draft.expand.{key}"):
                clicked = ("expand", row)
            if row.can_publish and action_col.button("Publish", key=f"draft.publish.{key}", type="primary"):
                clicked = ("publish", row)
            if action_col.button("Delete", key=f"draft.delete.{key}"):
                clicked = ("delete", row)
    return clicked


__all__ = [
    "DraftAction",
    "DraftRow",
    "build_draft_row",
    "build_draft_rows",
    "publish_row",
    "render_draft_list",
]
