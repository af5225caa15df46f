"""Streamlit rendering of a :class:`~wizard.session.WizardSession`.

The view only reads the session and calls its operations; all rules live in
the session and the validators.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Sequence, TypeVar

import streamlit as st

from constants.flow_mode import FlowMode
from constants.options import (
    ANNOUNCEMENT_TYPE_LABELS,
    CANONICAL_TITLES,
    EDUCATION_LEVELS,
    EXPENSE_TYPE_LABELS,
    EXPERIENCE_DOMAINS,
    PREDEFINED_SKILLS,
    REQUIRED_DOCUMENTS,
    AnnouncementType,
    CalendarSystem,
    Currency,
    ExpensePayer,
    ExpenseType,
    OvertimePolicy,
    Provision,
)
from constants.steps import StepId
from core.errors import DraftError
from core.publish import transform
from models.draft import DraftRecord, Expense
from wizard.session import SessionPhase, WizardSession
from wizard.step_registry import SINGLE_FLOW_STEPS

OptionT = TypeVar("OptionT")


def _field_error(session: WizardSession, key: str) -> None:
    message = session.errors.get(key)
    if message:
        st.caption(f":red[{message}]")


def _choice(
    label: str,
    options: Sequence[OptionT],
    current: OptionT | None,
    *,
    key: str,
    format_func: Callable[[Any], str] = str,
) -> OptionT | None:
    values: list[OptionT | None] = [None, *options]
    index = values.index(current) if current in values else 0
    return st.selectbox(
        label,
        values,
        index=index,
        key=key,
        format_func=lambda value: "Select…" if value is None else format_func(value),
    )


def _number(label: str, current: int | float | None, *, key: str) -> str:
    return st.text_input(label, value="" if current is None else str(current), key=key)


def render_flow_selection(session: WizardSession) -> None:
    st.subheader("Create Job Draft")
    st.caption("Choose how you'd like to create your job posting")
    single_col, bulk_col = st.columns(2)
    if single_col.button("Single Draft Creation", use_container_width=True):
        session.select(FlowMode.SINGLE)
        st.rerun()
    if bulk_col.button("Bulk Draft Creation", use_container_width=True):
        session.select(FlowMode.BULK)
        st.rerun()


def _render_details(session: WizardSession, draft: DraftRecord) -> None:
    details = draft.administrative
    title = st.text_input("Posting title", value=draft.title or "")
    employer = st.text_input("Employer", value=draft.employer or "")
    options = session.country_options
    if session.countries_unavailable:
        st.warning("Countries could not be loaded; type the country name instead.")
    if options:
        country = _choice("Country", options, details.country, key="details.country")
    else:
        country = st.text_input("Country", value=details.country or "")
    _field_error(session, "country")
    city = st.text_input("City", value=details.city or "")
    _field_error(session, "city")
    lt_number = st.text_input("LT Number", value=details.lt_number or "")
    _field_error(session, "lt_number")
    chalani = st.text_input("Chalani Number", value=details.chalani_number or "")
    _field_error(session, "chalani_number")
    calendar = st.radio(
        "Date format",
        list(CalendarSystem),
        index=list(CalendarSystem).index(details.date_format),
        horizontal=True,
    )
    changes: dict[str, Any] = {}
    if calendar is CalendarSystem.AD:
        changes["approval_date_ad"] = st.date_input("Approval date", value=details.approval_date_ad)
        _field_error(session, "approval_date_ad")
        changes["posting_date_ad"] = st.date_input("Posting date", value=details.posting_date_ad)
        _field_error(session, "posting_date_ad")
    else:
        changes["approval_date_bs"] = st.text_input("Approval date (BS)", value=details.approval_date_bs or "")
        _field_error(session, "approval_date_bs")
        changes["posting_date_bs"] = st.text_input("Posting date (BS)", value=details.posting_date_bs or "")
        _field_error(session, "posting_date_bs")
    announcement = _choice(
        "Announcement type",
        list(AnnouncementType),
        details.announcement_type,
        key="details.announcement",
        format_func=lambda value: ANNOUNCEMENT_TYPE_LABELS[value],
    )
    _field_error(session, "announcement_type")
    notes = st.text_area("Notes", value=details.notes or "")
    session.update_posting(title=title, employer=employer)
    session.update_details(
        country=country,
        city=city,
        lt_number=lt_number,
        chalani_number=chalani,
        date_format=calendar,
        announcement_type=announcement,
        notes=notes,
        **changes,
    )


def _render_contract(session: WizardSession, draft: DraftRecord) -> None:
    contract = draft.contract
    changes: dict[str, Any] = {
        "period_years": _number("Contract period (years)", contract.period_years, key="contract.period"),
    }
    _field_error(session, "period_years")
    changes["renewable"] = st.radio(
        "Renewable", [True, False], index=0 if contract.renewable is not False else 1, horizontal=True,
        format_func=lambda value: "Yes" if value else "No",
    )
    changes["hours_per_day"] = _number("Hours per day", contract.hours_per_day, key="contract.hours")
    _field_error(session, "hours_per_day")
    changes["days_per_week"] = _number("Days per week", contract.days_per_week, key="contract.days")
    _field_error(session, "days_per_week")
    changes["overtime_policy"] = _choice(
        "Overtime policy", list(OvertimePolicy), contract.overtime_policy, key="contract.overtime"
    )
    _field_error(session, "overtime_policy")
    changes["weekly_off_days"] = _number("Weekly off days", contract.weekly_off_days, key="contract.off")
    _field_error(session, "weekly_off_days")
    for field_name in ("food", "accommodation", "transport"):
        changes[field_name] = _choice(
            field_name.title(), list(Provision), getattr(contract, field_name), key=f"contract.{field_name}"
        )
        _field_error(session, field_name)
    changes["annual_leave_days"] = _number("Annual leave days", contract.annual_leave_days, key="contract.leave")
    _field_error(session, "annual_leave_days")
    session.update_contract(**changes)


def _render_positions(session: WizardSession, draft: DraftRecord) -> None:
    _field_error(session, "positions_general")
    for position in draft.positions:
        prefix = f"positions_{position.id}"
        with st.expander(position.title or f"Position #{position.id}", expanded=True):
            changes = {
                "title": st.text_input("Title", value=position.title or "", key=f"{prefix}.title"),
                "vacancies_male": _number("Male vacancies", position.vacancies_male, key=f"{prefix}.male"),
                "vacancies_female": _number("Female vacancies", position.vacancies_female, key=f"{prefix}.female"),
                "monthly_salary": _number("Monthly salary", position.monthly_salary, key=f"{prefix}.salary"),
                "currency": _choice("Currency", list(Currency), position.currency, key=f"{prefix}.currency"),
                "notes": st.text_area("Notes", value=position.notes or "", key=f"{prefix}.notes"),
            }
            for suffix in ("title", "vacancies_male", "vacancies_female", "vacancies_total", "monthly_salary", "currency"):
                _field_error(session, f"{prefix}_{suffix}")
            overrides = {
                "hours_per_day": _number(
                    "Hours per day override", position.overrides.hours_per_day, key=f"{prefix}.o_hours"
                ),
                "days_per_week": _number(
                    "Days per week override", position.overrides.days_per_week, key=f"{prefix}.o_days"
                ),
                "weekly_off_days": _number(
                    "Weekly off days override", position.overrides.weekly_off_days, key=f"{prefix}.o_off"
                ),
            }
            for suffix in ("hours_per_day_override", "days_per_week_override", "weekly_off_days_override"):
                _field_error(session, f"{prefix}_{suffix}")
            session.update_position(position.id, overrides=overrides, **changes)
            if st.button("Remove position", key=f"{prefix}.remove"):
                session.remove_position(position.id)
                st.rerun()
    if st.button("Add position"):
        session.add_position()
        st.rerun()


def _render_tag_picker(session: WizardSession, field_name: str, label: str, current: Sequence[str], options: Sequence[str]) -> None:
    selected = st.multiselect(label, sorted({*options, *current}), default=list(current), key=f"tags.{field_name}")
    for value in current:
        if value not in selected:
            session.remove_tag(field_name, value)
    for value in selected:
        if value not in current:
            session.add_tag(field_name, value)


def _render_tags(session: WizardSession, draft: DraftRecord) -> None:
    tags = draft.tags
    _render_tag_picker(session, "skills", "Skills", tags.skills, PREDEFINED_SKILLS)
    _field_error(session, "skills")
    _render_tag_picker(session, "education_requirements", "Education", tags.education_requirements, EDUCATION_LEVELS)
    _field_error(session, "education_requirements")
    session.update_experience(
        min_years=_number("Minimum experience (years)", tags.experience.min_years, key="tags.min_years"),
        preferred_years=_number("Preferred experience (years)", tags.experience.preferred_years, key="tags.pref_years"),
    )
    _field_error(session, "experience_min_years")
    _field_error(session, "experience_preferred_years")
    _render_tag_picker(session, "experience_domains", "Experience domains", tags.experience.domains, EXPERIENCE_DOMAINS)
    _field_error(session, "experience_domains")
    names = {title_id: name for title_id, name, _category in CANONICAL_TITLES}
    chosen = st.multiselect(
        "Canonical titles",
        list(names),
        default=[title_id for title_id in tags.canonical_title_ids if title_id in names],
        format_func=lambda title_id: names[title_id],
    )
    for title_id in tags.canonical_title_ids:
        if title_id not in chosen:
            session.remove_canonical_title(title_id)
    for title_id in chosen:
        session.add_canonical_title(title_id)
    _field_error(session, "canonical_titles")


def _render_expense(session: WizardSession, expense: Expense, prefix: str, *, interview: bool) -> None:
    update = session.update_interview_expense if interview else session.update_expense
    remove = session.remove_interview_expense if interview else session.remove_expense
    key = f"{prefix}_{expense.id}"
    with st.container(border=True):
        changes: dict[str, Any] = {
            "type": _choice(
                "Type", list(ExpenseType), expense.type, key=f"{key}.type",
                format_func=lambda value: EXPENSE_TYPE_LABELS[value],
            ),
            "payer": _choice("Who pays", list(ExpensePayer), expense.payer, key=f"{key}.payer"),
            "is_free": st.checkbox("Free", value=expense.is_free, key=f"{key}.free"),
        }
        if not changes["is_free"]:
            changes["amount"] = _number("Amount", expense.amount, key=f"{key}.amount")
            changes["currency"] = _choice("Currency", list(Currency), expense.currency, key=f"{key}.currency")
        changes["notes"] = st.text_input("Notes", value=expense.notes or "", key=f"{key}.notes")
        for suffix in ("type", "who_pays", "amount", "currency"):
            _field_error(session, f"{key}_{suffix}")
        update(expense.id, **changes)
        if st.button("Remove expense", key=f"{key}.remove"):
            remove(expense.id)
            st.rerun()


def _render_expenses(session: WizardSession, draft: DraftRecord) -> None:
    for expense in draft.expenses:
        _render_expense(session, expense, "expenses", interview=False)
    if st.button("Add expense"):
        session.add_expense()
        st.rerun()


def _render_cutout(session: WizardSession, draft: DraftRecord) -> None:
    uploaded = st.file_uploader("Job advertisement image", type=["jpg", "jpeg", "png"])
    if uploaded is not None and (draft.cutout is None or draft.cutout.file_name != uploaded.name):
        session.select_cutout(uploaded.name, uploaded.size, uploaded.type)
    _field_error(session, "cutout_file")
    cutout = session.single_draft.cutout if session.single_draft else None
    if cutout is not None and cutout.has_content:
        st.caption(f"Selected: {cutout.file_name or cutout.uploaded_url}")
        if st.button("Remove image"):
            session.remove_cutout()
            st.rerun()


def _render_interview(session: WizardSession, draft: DraftRecord) -> None:
    interview = draft.interview
    interview_date = st.date_input("Interview date", value=interview.date_ad)
    time_value = st.text_input("Time", value=interview.time or "", placeholder="10:00 AM")
    _field_error(session, "interview_time")
    session.update_interview(
        date_ad=interview_date if isinstance(interview_date, date) else None,
        time=time_value,
        location=st.text_input("Location", value=interview.location or ""),
        contact_person=st.text_input("Contact person", value=interview.contact_person or ""),
        notes=st.text_area("Interview notes", value=interview.notes or ""),
    )
    _render_tag_picker(session, "required_documents", "Required documents", interview.required_documents, REQUIRED_DOCUMENTS)
    for expense in interview.expenses:
        _render_expense(session, expense, "interview_expense", interview=True)
    if st.button("Add interview expense"):
        session.add_interview_expense()
        st.rerun()


def _render_review(session: WizardSession, draft: DraftRecord) -> None:
    st.json(transform(draft).to_wire(), expanded=False)


_STEP_RENDERERS: dict[StepId, Callable[[WizardSession, DraftRecord], None]] = {
    StepId.DETAILS: _render_details,
    StepId.CONTRACT: _render_contract,
    StepId.POSITIONS: _render_positions,
    StepId.TAGS: _render_tags,
    StepId.EXPENSES: _render_expenses,
    StepId.CUTOUT: _render_cutout,
    StepId.INTERVIEW: _render_interview,
    StepId.REVIEW: _render_review,
}


def render_bulk(session: WizardSession, draft: DraftRecord) -> None:
    session.update_posting(
        title=st.text_input("Posting title", value=draft.title or "", key="bulk.title"),
        employer=st.text_input("Employer", value=draft.employer or "", key="bulk.employer"),
    )
    _field_error(session, "bulk_entries")
    for entry in draft.bulk_entries:
        cols = st.columns([3, 2, 3, 1])
        session.update_bulk_entry(
            entry.id,
            country=cols[0].text_input("Country", value=entry.country or "", key=f"bulk.{entry.id}.country"),
            job_count=cols[1].text_input(
                "Jobs", value="" if entry.job_count is None else str(entry.job_count), key=f"bulk.{entry.id}.count"
            ),
            position=cols[2].text_input("Position", value=entry.position or "", key=f"bulk.{entry.id}.position"),
        )
        _field_error(session, f"bulk_{entry.id}_job_count")
        if cols[3].button("✕", key=f"bulk.{entry.id}.remove"):
            session.remove_bulk_entry(entry.id)
            st.rerun()
    if st.button("Add entry"):
        session.add_bulk_entry()
        st.rerun()
    summary = draft.bulk_summary()
    st.caption(summary.description)


def render_session(session: WizardSession) -> None:
    """Render the active screen of ``session`` with its navigation buttons."""

    if session.phase is SessionPhase.FLOW_SELECTION:
        render_flow_selection(session)
        return
    draft = session.draft
    step = session.current_step
    if draft is None or step is None:
        return

    if session.phase is SessionPhase.SINGLE:
        st.progress((session.step_index + 1) / len(SINGLE_FLOW_STEPS))
        st.subheader(f"Step {session.step_index + 1} of {len(SINGLE_FLOW_STEPS)}: {step.title}")
        st.caption(step.description)
        _STEP_RENDERERS[step.key](session, draft)
    elif session.phase is SessionPhase.BULK:
        st.subheader(step.title)
        render_bulk(session, draft)
    else:
        summary = draft.bulk_summary()
        st.subheader("Confirm bulk draft")
        st.write(summary.description)

    if session.error_count:
        st.error(f"{session.error_count} field(s) need attention.")

    back_col, save_col, next_col = st.columns(3)
    try:
        if back_col.button("Back"):
            session.back()
            st.rerun()
        if session.phase in (SessionPhase.SINGLE, SessionPhase.BULK) and step.key is not StepId.REVIEW:
            if save_col.button("Save & exit"):
                session.save_and_exit()
                st.rerun()
        if session.phase is SessionPhase.BULK_SUBMISSION:
            if next_col.button("Create bulk draft", type="primary"):
                session.submit_bulk()
                st.rerun()
        elif step.key is StepId.REVIEW:
            if next_col.button("Publish", type="primary"):
                result = session.publish()
                if not result.published:
                    st.warning(f"{result.error_count} field(s) remaining before publishing.")
                st.rerun()
        elif next_col.button("Next", type="primary"):
            session.next()
            st.rerun()
    except DraftError as exc:
        st.error(str(exc))


__all__ = ["render_bulk", "render_flow_selection", "render_session"]
