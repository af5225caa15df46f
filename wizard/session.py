"""Controller for one draft editing session.

A :class:`WizardSession` owns the draft being edited, walks the single flow
(eight steps) or the bulk flow (one screen), and is the only place that talks
to the persistence boundary. Every edit replaces the draft with a validated
copy, so validators and the progress evaluator only ever see whole states.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Mapping

from constants.flow_mode import FlowMode
from constants.options import CANONICAL_TITLES
from constants.steps import PUBLISH_STEPS, REVIEW_STEP_INDEX, StepId
from core.errors import DraftStoreError, PublishedDraftError, WizardStateError
from core.publish import transform
from core.step_validators import ValidationErrors, first_failing_step, validate, validate_steps
from integrations.countries import CountryDirectory
from models.draft import (
    DEFAULT_CURRENCY,
    BulkEntry,
    DraftRecord,
    DraftStatus,
    Expense,
    Position,
    coerce_flag,
    revise,
)
from state.autosave import build_partial_record, is_published_record, parse_stored_record
from state.draft_store import DraftStore, StoredDraft
from utils.logging_context import set_draft_id, set_session_id, set_wizard_step
from wizard import cutout as cutout_rules
from wizard import entries
from wizard.seeding import SessionSeed, new_bulk_draft, new_single_draft, seed_from_record
from wizard.step_registry import BULK_FLOW_STEPS, SINGLE_FLOW_STEPS, StepDefinition, index_of

logger = logging.getLogger(__name__)

MULTIPLE_COMPANIES = "Multiple Companies"


class SessionPhase(StrEnum):
    FLOW_SELECTION = "flow_selection"
    SINGLE = "single"
    BULK = "bulk"
    BULK_SUBMISSION = "bulk_submission"
    TERMINAL = "terminal"
    CLOSED = "closed"


_EDITABLE_PHASES = frozenset(
    {SessionPhase.FLOW_SELECTION, SessionPhase.SINGLE, SessionPhase.BULK, SessionPhase.BULK_SUBMISSION}
)


@dataclass(frozen=True)
class PublishResult:
    """Outcome of :meth:`WizardSession.publish`."""

    published: bool
    failing_step: StepId | None = None
    errors: dict[str, str] = field(default_factory=dict)
    record: StoredDraft | None = None

    @property
    def error_count(self) -> int:
        return len(self.errors)


class WizardSession:
    """Drive the draft wizard for a single draft."""

    def __init__(
        self,
        store: DraftStore,
        seed: SessionSeed,
        allocator: entries.LocalIdAllocator,
        *,
        countries: CountryDirectory | None = None,
        session_id: str | None = None,
    ) -> None:
        self._store = store
        self._ids = allocator
        self._countries = countries
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self._single: DraftRecord | None = None
        self._bulk: DraftRecord | None = None
        self._errors: ValidationErrors = {}
        self._publishing = False
        self._step_index = 0
        self._phase = SessionPhase.FLOW_SELECTION

        if seed.flow is FlowMode.SINGLE:
            self._single = seed.draft
            self._phase = SessionPhase.SINGLE
            self._step_index = seed.step_index
        elif seed.flow is FlowMode.BULK:
            self._bulk = seed.draft
            self._phase = SessionPhase.BULK

        set_session_id(self.session_id)
        set_draft_id(seed.draft.id if seed.flow is not None else None)
        self._bind_step()

    @classmethod
    def new(
        cls,
        store: DraftStore,
        *,
        countries: CountryDirectory | None = None,
        session_id: str | None = None,
    ) -> "WizardSession":
        """Start a session for a brand new draft at the flow selection screen."""

        return cls(
            store,
            SessionSeed(draft=DraftRecord(), flow=None),
            entries.LocalIdAllocator(),
            countries=countries,
            session_id=session_id,
        )

    @classmethod
    def from_record(
        cls,
        store: DraftStore,
        record: DraftRecord | Mapping[str, Any],
        *,
        resume_step: int | None = None,
        expand_bulk: bool = False,
        countries: CountryDirectory | None = None,
        session_id: str | None = None,
    ) -> "WizardSession":
        """Start a session editing an existing draft.

        Raises:
            PublishedDraftError: if ``record`` has already been published.
        """

        if not isinstance(record, DraftRecord) and is_published_record(record):
            raise PublishedDraftError(str(record["id"]) if record.get("id") else None)
        draft = record if isinstance(record, DraftRecord) else parse_stored_record(record)
        allocator = entries.LocalIdAllocator.for_draft(draft)
        seed = seed_from_record(draft, allocator, resume_step=resume_step, expand_bulk=expand_bulk)
        logger.info(
            "Opening draft %s in %s flow at step %d",
            draft.id,
            seed.flow,
            seed.step_index + 1,
        )
        return cls(store, seed, allocator, countries=countries, session_id=session_id)

    # ------------------------------------------------------------------
    # State inspection

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def flow(self) -> FlowMode | None:
        if self._phase is SessionPhase.SINGLE:
            return FlowMode.SINGLE
        if self._phase in (SessionPhase.BULK, SessionPhase.BULK_SUBMISSION):
            return FlowMode.BULK
        return None

    @property
    def step_index(self) -> int:
        return self._step_index

    @property
    def current_step(self) -> StepDefinition | None:
        if self._phase is SessionPhase.SINGLE:
            return SINGLE_FLOW_STEPS[self._step_index]
        if self._phase in (SessionPhase.BULK, SessionPhase.BULK_SUBMISSION):
            return BULK_FLOW_STEPS[0]
        return None

    @property
    def draft(self) -> DraftRecord | None:
        """The draft of the active flow (``None`` before a flow is chosen)."""

        flow = self.flow
        if flow is FlowMode.SINGLE:
            return self._single
        if flow is FlowMode.BULK:
            return self._bulk
        return None

    @property
    def single_draft(self) -> DraftRecord | None:
        return self._single

    @property
    def bulk_draft(self) -> DraftRecord | None:
        return self._bulk

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def error_count(self) -> int:
        return len(self._errors)

    @property
    def is_terminal(self) -> bool:
        return self._phase is SessionPhase.TERMINAL

    @property
    def country_options(self) -> list[str]:
        if self._countries is None:
            return []
        return self._countries.names()

    @property
    def countries_unavailable(self) -> bool:
        return self._countries is not None and self._countries.load_failed

    def validate_current(self) -> ValidationErrors:
        """Run the current step's rules without changing the session."""

        step = self.current_step
        draft = self.draft
        if step is None or draft is None:
            return {}
        return validate(step.key, draft)

    # ------------------------------------------------------------------
    # Guards

    def _require_editable(self) -> None:
        if self._publishing:
            raise WizardStateError("The draft is being published and cannot change.")
        if self._phase not in _EDITABLE_PHASES:
            raise WizardStateError(f"Session is {self._phase} and can no longer be edited.")

    def _require_single(self) -> DraftRecord:
        self._require_editable()
        if self._single is None:
            raise WizardStateError("Select the single draft flow first.")
        return self._single

    def _require_bulk(self) -> DraftRecord:
        self._require_editable()
        if self._bulk is None:
            raise WizardStateError("Select the bulk draft flow first.")
        return self._bulk

    def _bind_step(self) -> None:
        step = self.current_step
        set_wizard_step(step.key if step is not None else self._phase.value)

    def _move_to(self, phase: SessionPhase, step_index: int = 0) -> None:
        changed = phase is not self._phase or step_index != self._step_index
        self._phase = phase
        self._step_index = step_index
        if changed:
            self._errors = {}
        self._bind_step()

    # ------------------------------------------------------------------
    # Navigation

    def select(self, flow: FlowMode | str) -> None:
        """Enter ``flow`` at its first screen, keeping data already entered."""

        self._require_editable()
        mode = FlowMode(flow)
        if mode is FlowMode.SINGLE:
            if self._single is None:
                self._single = new_single_draft(self._ids)
            self._move_to(SessionPhase.SINGLE, 0)
        else:
            if self._bulk is None:
                self._bulk = new_bulk_draft(self._ids)
            self._move_to(SessionPhase.BULK, 0)
        logger.info("Selected %s flow", mode)

    def next(self) -> bool:
        """Validate the current screen and advance when it passes.

        Returns ``False`` (keeping the errors on :attr:`errors`) when blocked.
        """

        self._require_editable()
        if self._phase is SessionPhase.SINGLE:
            if self._step_index >= REVIEW_STEP_INDEX:
                raise WizardStateError("The review step is final; publish the draft instead.")
            errors = self.validate_current()
            if errors:
                self._errors = errors
                logger.info("Blocked on step %s with %d error(s)", self.current_step.key, len(errors))
                return False
            self._move_to(SessionPhase.SINGLE, self._step_index + 1)
            return True
        if self._phase is SessionPhase.BULK:
            errors = self.validate_current()
            if errors:
                self._errors = errors
                logger.info("Blocked bulk entries with %d error(s)", len(errors))
                return False
            self._move_to(SessionPhase.BULK_SUBMISSION)
            return True
        raise WizardStateError(f"next() is not available during {self._phase}.")

    def back(self) -> None:
        """Go one screen back; never validates."""

        self._require_editable()
        if self._phase is SessionPhase.SINGLE and self._step_index > 0:
            self._move_to(SessionPhase.SINGLE, self._step_index - 1)
        elif self._phase is SessionPhase.BULK_SUBMISSION:
            self._move_to(SessionPhase.BULK)
        elif self._phase in (SessionPhase.SINGLE, SessionPhase.BULK):
            self._move_to(SessionPhase.FLOW_SELECTION)

    def go_to(self, step: StepId | str | int) -> None:
        """Jump to a single-flow step without validating (review edit links)."""

        self._require_single()
        if self._phase is not SessionPhase.SINGLE:
            raise WizardStateError("Direct step navigation is only available in the single flow.")
        index = step if isinstance(step, int) else index_of(step)
        if not 0 <= index < len(SINGLE_FLOW_STEPS):
            raise ValueError(f"Unknown step index {index}")
        self._move_to(SessionPhase.SINGLE, index)

    def discard(self) -> None:
        """Close the session and drop unsaved changes."""

        logger.info("Discarding session in phase %s", self._phase)
        self._phase = SessionPhase.CLOSED
        self._errors = {}
        self._bind_step()

    # ------------------------------------------------------------------
    # Persistence

    def _persist(self, draft: DraftRecord, payload: Mapping[str, Any], operation: str) -> StoredDraft:
        try:
            if draft.id:
                return self._store.update(draft.id, payload)
            return self._store.create(payload)
        except DraftStoreError as exc:
            logger.warning("%s failed for draft %s: %s", operation, draft.id or "<new>", exc)
            raise

    def save_and_exit(self) -> StoredDraft:
        """Persist the active draft as partial and close the session."""

        self._require_editable()
        draft = self.draft
        if draft is None:
            raise WizardStateError("Nothing to save before a flow is selected.")
        if self._phase is SessionPhase.SINGLE and self._step_index == REVIEW_STEP_INDEX:
            raise WizardStateError("Save & exit is not available on the review step.")

        record = build_partial_record(draft, step_index=self._step_index)
        stored = self._persist(draft, record, "Partial save")
        logger.info("Saved partial draft %s at step %d", stored.get("id"), self._step_index + 1)
        set_draft_id(stored.get("id"))
        self._phase = SessionPhase.CLOSED
        self._bind_step()
        return stored

    def publish(self) -> PublishResult:
        """Validate every step, then create/update and publish the draft once."""

        self._require_editable()
        if self._phase is not SessionPhase.SINGLE or self._single is None:
            raise WizardStateError("Only single drafts can be published from the wizard.")
        draft = self._single

        results = validate_steps(draft, PUBLISH_STEPS)
        failing = first_failing_step(results)
        if failing is not None:
            all_errors: dict[str, str] = {}
            for step_errors in results.values():
                all_errors.update(step_errors)
            self._move_to(SessionPhase.SINGLE, index_of(failing))
            self._errors = dict(results[failing])
            logger.info(
                "Publish blocked: %d field(s) remaining in step %s (%d in total)",
                len(results[failing]),
                failing,
                len(all_errors),
            )
            return PublishResult(published=False, failing_step=failing, errors=all_errors)

        payload = transform(draft).to_wire()
        self._publishing = True
        try:
            stored = self._persist(draft, payload, "Publish")
            draft_id = str(stored["id"])
            if draft.id != draft_id:
                # A retry after a failed publish call must update, not create again.
                self._single = revise(draft, id=draft_id)
                set_draft_id(draft_id)
            try:
                published = self._store.publish(draft_id)
            except DraftStoreError as exc:
                logger.warning("Publish call failed for draft %s: %s", draft_id, exc)
                raise
        finally:
            self._publishing = False

        self._single = revise(self._single, status=DraftStatus.PUBLISHED)
        self._phase = SessionPhase.TERMINAL
        self._errors = {}
        self._bind_step()
        logger.info("Published draft %s", draft_id)
        return PublishResult(published=True, record=published)

    def submit_bulk(self) -> StoredDraft:
        """Persist the bulk draft with its complete entries and end the session."""

        self._require_editable()
        if self._phase is not SessionPhase.BULK_SUBMISSION or self._bulk is None:
            raise WizardStateError("Bulk entries must be validated with next() before submitting.")
        draft = self._bulk
        kept = tuple(entry for entry in draft.bulk_entries if entry.is_complete())
        summary = revise(draft, bulk_entries=kept).bulk_summary()
        prepared = revise(
            draft,
            bulk_entries=kept,
            title=draft.title or summary.title,
            employer=draft.employer or MULTIPLE_COMPANIES,
            description=draft.description or summary.description,
            is_partial=False,
            last_completed_step=None,
        )
        stored = self._persist(prepared, prepared.to_storage(), "Bulk submission")
        self._bulk = revise(prepared, id=str(stored["id"]))
        set_draft_id(self._bulk.id)
        self._phase = SessionPhase.TERMINAL
        self._bind_step()
        logger.info(
            "Submitted bulk draft %s with %d job(s) in %d countr%s",
            self._bulk.id,
            summary.total_jobs,
            len(summary.countries),
            "y" if len(summary.countries) == 1 else "ies",
        )
        return stored

    # ------------------------------------------------------------------
    # Single draft fields

    def _set_single(self, **changes: Any) -> DraftRecord:
        self._single = revise(self._require_single(), **changes)
        return self._single

    def update_posting(self, **changes: Any) -> DraftRecord:
        """Update ``title``, ``employer`` or ``description`` of the active draft."""

        allowed = {"title", "employer", "description"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Unsupported posting field(s): {', '.join(sorted(unknown))}")
        if self.flow is FlowMode.BULK:
            self._bulk = revise(self._require_bulk(), **changes)
            return self._bulk
        return self._set_single(**changes)

    def update_details(self, **changes: Any) -> DraftRecord:
        draft = self._require_single()
        return self._set_single(administrative=revise(draft.administrative, **changes))

    def update_contract(self, **changes: Any) -> DraftRecord:
        draft = self._require_single()
        return self._set_single(contract=revise(draft.contract, **changes))

    def update_experience(self, **changes: Any) -> DraftRecord:
        draft = self._require_single()
        experience = revise(draft.tags.experience, **changes)
        return self._set_single(tags=revise(draft.tags, experience=experience))

    def update_interview(self, **changes: Any) -> DraftRecord:
        draft = self._require_single()
        if "expenses" in changes:
            raise ValueError("Interview expenses are edited through the interview expense methods.")
        return self._set_single(interview=revise(draft.interview, **changes))

    # Positions

    def add_position(self, **fields: Any) -> int:
        draft = self._require_single()
        fields.pop("id", None)
        position = Position(id=self._ids.mint(), **fields)
        self._set_single(positions=entries.append_entry(draft.positions, position))
        return position.id

    def remove_position(self, position_id: int) -> None:
        draft = self._require_single()
        self._set_single(positions=entries.remove_entry(draft.positions, position_id))

    def update_position(self, position_id: int, **changes: Any) -> Position:
        draft = self._require_single()
        overrides = changes.pop("overrides", None)
        if overrides is not None:
            current = entries.find_entry(draft.positions, position_id)
            if current is not None and isinstance(overrides, Mapping):
                changes["overrides"] = revise(current.overrides, **overrides)
            else:
                changes["overrides"] = overrides
        updated = entries.replace_entry(draft.positions, position_id, collection="positions", **changes)
        self._set_single(positions=updated)
        return entries.find_entry(updated, position_id)  # type: ignore[return-value]

    # Tags

    def add_tag(self, field_name: str, value: str) -> DraftRecord:
        """Add ``value`` to ``skills``, ``education_requirements``,
        ``experience_domains`` or ``required_documents``."""

        return self._edit_tags(field_name, lambda tags: entries.add_tag(tags, value))

    def remove_tag(self, field_name: str, value: str) -> DraftRecord:
        return self._edit_tags(field_name, lambda tags: entries.remove_tag(tags, value))

    def _edit_tags(self, field_name: str, change: Any) -> DraftRecord:
        draft = self._require_single()
        if field_name in ("skills", "education_requirements"):
            current = getattr(draft.tags, field_name)
            return self._set_single(tags=revise(draft.tags, **{field_name: change(current)}))
        if field_name == "experience_domains":
            return self.update_experience(domains=change(draft.tags.experience.domains))
        if field_name == "required_documents":
            return self.update_interview(required_documents=change(draft.interview.required_documents))
        raise ValueError(f"Unknown tag field {field_name!r}")

    def add_canonical_title(self, title_id: int, name: str | None = None) -> DraftRecord:
        """Reference a canonical title, keeping ids and names aligned."""

        draft = self._require_single()
        tags = draft.tags
        if title_id in tags.canonical_title_ids:
            return draft
        if name is None:
            name = next((entry[1] for entry in CANONICAL_TITLES if entry[0] == title_id), None)
        if name is None:
            raise ValueError(f"Unknown canonical title id {title_id}")
        return self._set_single(
            tags=revise(
                tags,
                canonical_title_ids=(*tags.canonical_title_ids, title_id),
                canonical_title_names=(*tags.canonical_title_names, name),
            )
        )

    def remove_canonical_title(self, title_id: int) -> DraftRecord:
        draft = self._require_single()
        tags = draft.tags
        pairs = [
            (tid, tname)
            for tid, tname in zip(tags.canonical_title_ids, tags.canonical_title_names)
            if tid != title_id
        ]
        return self._set_single(
            tags=revise(
                tags,
                canonical_title_ids=tuple(tid for tid, _ in pairs),
                canonical_title_names=tuple(tname for _, tname in pairs),
            )
        )

    # Expenses

    def _new_expense(self, fields: dict[str, Any]) -> Expense:
        fields.pop("id", None)
        return Expense(id=self._ids.mint(), **fields)

    @staticmethod
    def _expense_changes(changes: dict[str, Any]) -> dict[str, Any]:
        if "who_pays" in changes:
            changes["payer"] = changes.pop("who_pays")
        if "is_free" in changes:
            changes["is_free"] = coerce_flag(changes["is_free"], True)
            if changes["is_free"]:
                changes["amount"] = None
                changes["currency"] = DEFAULT_CURRENCY
        return changes

    def add_expense(self, **fields: Any) -> int:
        draft = self._require_single()
        expense = self._new_expense(fields)
        self._set_single(expenses=entries.append_entry(draft.expenses, expense))
        return expense.id

    def remove_expense(self, expense_id: int) -> None:
        draft = self._require_single()
        self._set_single(expenses=entries.remove_entry(draft.expenses, expense_id))

    def update_expense(self, expense_id: int, **changes: Any) -> Expense:
        """Update an expense; marking it free clears the amount and resets the currency."""

        draft = self._require_single()
        updated = entries.replace_entry(
            draft.expenses, expense_id, collection="expenses", **self._expense_changes(changes)
        )
        self._set_single(expenses=updated)
        return entries.find_entry(updated, expense_id)  # type: ignore[return-value]

    def add_interview_expense(self, **fields: Any) -> int:
        draft = self._require_single()
        expense = self._new_expense(fields)
        interview = revise(draft.interview, expenses=entries.append_entry(draft.interview.expenses, expense))
        self._set_single(interview=interview)
        return expense.id

    def remove_interview_expense(self, expense_id: int) -> None:
        draft = self._require_single()
        interview = revise(draft.interview, expenses=entries.remove_entry(draft.interview.expenses, expense_id))
        self._set_single(interview=interview)

    def update_interview_expense(self, expense_id: int, **changes: Any) -> Expense:
        draft = self._require_single()
        updated = entries.replace_entry(
            draft.interview.expenses,
            expense_id,
            collection="interview_expenses",
            **self._expense_changes(changes),
        )
        self._set_single(interview=revise(draft.interview, expenses=updated))
        return entries.find_entry(updated, expense_id)  # type: ignore[return-value]

    # Cutout

    def select_cutout(self, file_name: str, size: int | None, mime_type: str | None) -> dict[str, str]:
        """Accept or reject a selected image; rejections only set ``cutout_file``."""

        draft = self._require_single()
        accepted, errors = cutout_rules.accept_cutout_file(draft.cutout, file_name, size, mime_type)
        if errors:
            self._errors = {**self._errors, **errors}
            return errors
        self._errors.pop(cutout_rules.CUTOUT_FIELD, None)
        self._set_single(cutout=accepted)
        return {}

    def mark_cutout_uploaded(self, uploaded_url: str) -> DraftRecord:
        draft = self._require_single()
        return self._set_single(cutout=cutout_rules.mark_uploaded(draft.cutout, uploaded_url))

    def remove_cutout(self) -> DraftRecord:
        self._require_single()
        return self._set_single(cutout=None)

    # Bulk entries

    def _set_bulk(self, **changes: Any) -> DraftRecord:
        self._bulk = revise(self._require_bulk(), **changes)
        return self._bulk

    def add_bulk_entry(self, **fields: Any) -> int:
        draft = self._require_bulk()
        fields.pop("id", None)
        entry = BulkEntry(id=self._ids.mint(), **fields)
        self._set_bulk(bulk_entries=entries.append_entry(draft.bulk_entries, entry))
        return entry.id

    def remove_bulk_entry(self, entry_id: int) -> None:
        draft = self._require_bulk()
        self._set_bulk(bulk_entries=entries.remove_entry(draft.bulk_entries, entry_id))

    def update_bulk_entry(self, entry_id: int, **changes: Any) -> BulkEntry:
        draft = self._require_bulk()
        updated = entries.replace_entry(draft.bulk_entries, entry_id, collection="bulk_entries", **changes)
        self._set_bulk(bulk_entries=updated)
        return entries.find_entry(updated, entry_id)  # type: ignore[return-value]


__all__ = ["MULTIPLE_COMPANIES", "PublishResult", "SessionPhase", "WizardSession"]
