# app.py: Job Drafts Streamlit entrypoint
from __future__ import annotations

from pathlib import Path
import sys
from typing import Final

import streamlit as st
from pydantic import ValidationError

APP_ROOT = Path(__file__).resolve().parent
for candidate in (APP_ROOT, APP_ROOT.parent):
    candidate_str = str(candidate)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

import config  # noqa: E402
from core.errors import DraftError  # noqa: E402
from integrations import CountryDirectory, make_store  # noqa: E402
from state.draft_store import DraftStore  # noqa: E402
from ui.draft_list import build_draft_rows, publish_row, render_draft_list  # noqa: E402
from ui.wizard_view import render_session  # noqa: E402
from utils.logging_context import configure_logging  # noqa: E402
from wizard.session import SessionPhase, WizardSession  # noqa: E402

APP_VERSION = "1.0.0"
STORE_STATE_KEY: Final[str] = "drafts.store"
COUNTRIES_STATE_KEY: Final[str] = "drafts.countries"
SESSION_STATE_KEY: Final[str] = "drafts.session"
NOTICE_STATE_KEY: Final[str] = "drafts.notice"

configure_logging(level=config.resolve_log_level())

st.set_page_config(page_title="Job Drafts", page_icon="🗂️", layout="wide")


def _store() -> DraftStore:
    if STORE_STATE_KEY not in st.session_state:
        st.session_state[STORE_STATE_KEY] = make_store()
    return st.session_state[STORE_STATE_KEY]


def _countries() -> CountryDirectory:
    if COUNTRIES_STATE_KEY not in st.session_state:
        st.session_state[COUNTRIES_STATE_KEY] = CountryDirectory()
    return st.session_state[COUNTRIES_STATE_KEY]


def _close_session(notice: str | None = None) -> None:
    st.session_state.pop(SESSION_STATE_KEY, None)
    if notice:
        st.session_state[NOTICE_STATE_KEY] = notice


def _render_list(store: DraftStore) -> None:
    header_col, action_col = st.columns([4, 1])
    header_col.title("Job Drafts")
    if action_col.button("Create draft", type="primary", use_container_width=True):
        st.session_state[SESSION_STATE_KEY] = WizardSession.new(store, countries=_countries())
        st.rerun()

    try:
        records = store.list()
    except DraftError as exc:
        st.error(str(exc))
        return
    picked = render_draft_list(build_draft_rows(records))
    if picked is None:
        return
    action, row = picked
    if row.draft_id is None:
        st.error("This draft has no id and cannot be opened.")
        return
    try:
        if action == "delete":
            store.delete(row.draft_id)
            st.session_state[NOTICE_STATE_KEY] = f"Deleted “{row.title}”."
        elif action == "publish":
            publish_row(store, row)
            st.session_state[NOTICE_STATE_KEY] = f"Published “{row.title}”."
        else:
            record = next(item for item in records if str(item.get("id")) == row.draft_id)
            st.session_state[SESSION_STATE_KEY] = WizardSession.from_record(
                store,
                record,
                expand_bulk=action == "expand",
                countries=_countries(),
            )
    except DraftError as exc:
        st.error(str(exc))
        return
    except ValidationError:
        st.error(f"“{row.title}” could not be read and cannot be opened.")
        return
    st.rerun()


def main() -> None:
    store = _store()
    notice = st.session_state.pop(NOTICE_STATE_KEY, None)
    if notice:
        st.success(notice)

    session: WizardSession | None = st.session_state.get(SESSION_STATE_KEY)
    if session is None:
        _render_list(store)
        return

    if st.sidebar.button("Back to drafts"):
        session.discard()
        _close_session()
        st.rerun()
    st.sidebar.caption(f"Session {session.session_id} · v{APP_VERSION}")

    render_session(session)
    if session.phase is SessionPhase.TERMINAL:
        published = session.single_draft is not None and session.single_draft.is_published
        _close_session("Draft published." if published else "Bulk draft created.")
        st.rerun()
    elif session.phase is SessionPhase.CLOSED:
        _close_session("Draft saved for later.")
        st.rerun()


main()
