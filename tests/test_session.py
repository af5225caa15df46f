import pytest

from constants.flow_mode import FlowMode
from constants.steps import StepId
from core.errors import DraftStoreError, PublishedDraftError, UnknownEntryError, WizardStateError
from models.draft import DEFAULT_CURRENCY, revise
from state.autosave import parse_stored_record
from state.draft_store import InMemoryDraftStore
from ui.draft_list import build_draft_row
from wizard.session import MULTIPLE_COMPANIES, SessionPhase, WizardSession


def _seeded(draft):
    store = InMemoryDraftStore(records=[draft.to_storage()])
    return store, WizardSession.from_record(store, store.get(draft.id))


def test_new_session_starts_at_flow_selection(store):
    session = WizardSession.new(store)

    assert session.phase is SessionPhase.FLOW_SELECTION
    assert session.draft is None
    with pytest.raises(WizardStateError):
        session.next()


def test_single_flow_starts_with_one_blank_position(store):
    session = WizardSession.new(store)
    session.select(FlowMode.SINGLE)

    assert session.phase is SessionPhase.SINGLE
    assert session.step_index == 0
    assert [position.id for position in session.draft.positions] == [1]


def test_next_blocks_on_invalid_step(store):
    session = WizardSession.new(store)
    session.select("single")

    assert session.next() is False
    assert session.step_index == 0
    assert "city" in session.errors
    assert session.error_count == len(session.errors)


def test_back_never_validates_and_leaves_flow_from_first_step(store):
    session = WizardSession.new(store)
    session.select("single")
    session.back()

    assert session.phase is SessionPhase.FLOW_SELECTION


def test_switching_flows_keeps_entered_data(store):
    session = WizardSession.new(store)
    session.select("single")
    session.update_posting(title="Cooks for Doha")
    session.back()
    session.select("bulk")
    session.update_bulk_entry(2, country="Qatar")
    session.back()
    session.select("single")

    assert session.draft.title == "Cooks for Doha"
    assert session.bulk_draft.bulk_entries[0].country == "Qatar"


def test_next_advances_on_valid_step(single_draft):
    store, session = _seeded(single_draft)

    assert session.next() is True
    assert session.current_step.key is StepId.CONTRACT
    assert session.errors == {}


def test_out_of_range_hours_blocks_contract_step(single_draft):
    store, session = _seeded(single_draft)
    session.go_to(StepId.CONTRACT)
    session.update_contract(hours_per_day=18)

    assert session.next() is False
    assert session.step_index == 1
    assert session.errors == {"hours_per_day": "Working hours must be between 1 and 16 hours per day"}


def test_next_is_rejected_on_review(single_draft):
    store, session = _seeded(single_draft)
    session.go_to(StepId.REVIEW)

    with pytest.raises(WizardStateError):
        session.next()


def test_resume_index_from_partial_hint(make_payload, store):
    session = WizardSession.from_record(store, make_payload(is_partial=True, last_completed_step=3))
    assert session.step_index == 3

    session = WizardSession.from_record(store, make_payload(is_partial=True, last_completed_step=12))
    assert session.step_index == 7

    session = WizardSession.from_record(store, make_payload(is_partial=True, last_completed_step=3), resume_step=1)
    assert session.step_index == 1


def test_published_draft_cannot_be_opened(make_payload, store):
    with pytest.raises(PublishedDraftError):
        WizardSession.from_record(store, make_payload(status="published"))


def test_local_ids_are_never_reused(single_draft):
    store, session = _seeded(single_draft)
    added = session.add_position(title="Driver")
    session.remove_position(added)
    again = session.add_position()

    assert added == 4
    assert again == 5
    assert [position.id for position in session.draft.positions] == [1, 2, 5]


def test_position_overrides_are_merged(single_draft):
    store, session = _seeded(single_draft)
    position = session.update_position(2, overrides={"days_per_week": 5})

    assert position.overrides.hours_per_day == 10
    assert position.overrides.days_per_week == 5


def test_unknown_entry_update_raises_but_remove_is_noop(single_draft):
    store, session = _seeded(single_draft)
    session.remove_expense(99)

    with pytest.raises(UnknownEntryError):
        session.update_position(99, title="Ghost")
    assert len(session.draft.expenses) == 1


def test_marking_expense_free_clears_amount(single_draft):
    store, session = _seeded(single_draft)
    expense_id = session.add_expense(type="travel", who_pays="worker", is_free=False, amount=300, currency="USD")
    expense = session.update_expense(expense_id, is_free=True)

    assert expense.amount is None
    assert expense.currency == DEFAULT_CURRENCY
    assert expense.payer == "worker"


def test_interview_expenses_have_own_collection(single_draft):
    store, session = _seeded(single_draft)
    expense_id = session.add_interview_expense(type="medical", payer="company")

    assert session.draft.interview.expenses[0].id == expense_id
    assert [expense.id for expense in session.draft.expenses] == [3]
    with pytest.raises(ValueError):
        session.update_interview(expenses=())


def test_tags_and_canonical_titles(single_draft):
    store, session = _seeded(single_draft)
    session.add_tag("skills", "security")
    session.add_tag("skills", "Driving")
    session.add_tag("required_documents", "Passport")
    session.add_canonical_title(3)
    session.remove_canonical_title(1)

    tags = session.draft.tags
    assert tags.skills == ("Security", "English Communication", "Driving")
    assert tags.canonical_title_ids == (3,)
    assert tags.canonical_title_names == ("Driver",)
    assert session.draft.interview.required_documents == ("Passport",)
    with pytest.raises(ValueError):
        session.add_canonical_title(999)
    with pytest.raises(ValueError):
        session.add_tag("hobbies", "Chess")


def test_rejected_cutout_sets_error_only(single_draft):
    store, session = _seeded(single_draft)
    errors = session.select_cutout("advert.gif", 1024, "image/gif")

    assert errors == {"cutout_file": "Please select a valid image file (JPG, PNG)"}
    assert session.errors["cutout_file"] == errors["cutout_file"]
    assert session.draft.cutout is None

    assert session.select_cutout("advert.jpg", 1024, "image/jpg") == {}
    assert session.draft.cutout.file_type == "image/jpeg"
    assert "cutout_file" not in session.errors


def test_publish_jumps_to_first_failing_step(single_draft):
    store, session = _seeded(single_draft)
    session.go_to(StepId.REVIEW)
    result = session.publish()

    assert result.published is False
    assert result.failing_step is StepId.CUTOUT
    assert result.error_count == 1
    assert session.current_step.key is StepId.CUTOUT
    assert session.errors == {"cutout_file": "Job advertisement image is required"}
    assert [call[0] for call in store.calls] == []


def test_publish_updates_then_publishes(publishable_draft):
    store, session = _seeded(publishable_draft)
    session.go_to(StepId.REVIEW)
    result = session.publish()

    assert result.published is True
    assert session.phase is SessionPhase.TERMINAL
    assert store.calls == [("update", "draft-1"), ("publish", "draft-1")]
    stored = store.get("draft-1")
    assert stored["status"] == "published"
    assert stored["posting_title"] == "Security Guards for Dubai Mall"
    with pytest.raises(WizardStateError):
        session.update_posting(title="Too late")


def test_publish_new_draft_creates_once(publishable_draft, store):
    session = WizardSession.from_record(store, revise(publishable_draft, id=None))
    session.go_to(StepId.REVIEW)
    session.publish()

    operations = [operation for operation, _ in store.calls]
    assert operations == ["create", "publish"]


def test_failed_persistence_keeps_session_publishable(publishable_draft, store):
    session = WizardSession.from_record(store, revise(publishable_draft, id=None))
    session.go_to(StepId.REVIEW)
    store.fail_next()

    with pytest.raises(DraftStoreError):
        session.publish()
    assert session.phase is SessionPhase.SINGLE
    assert session.publish().published is True


def test_retry_after_failed_publish_call_updates(publishable_draft, store, monkeypatch):
    session = WizardSession.from_record(store, revise(publishable_draft, id=None))
    session.go_to(StepId.REVIEW)
    original = store.publish

    def flaky_publish(draft_id):
        monkeypatch.setattr(store, "publish", original)
        raise DraftStoreError("Publish draft job", "HTTP 502: bad gateway", status_code=502)

    monkeypatch.setattr(store, "publish", flaky_publish)
    with pytest.raises(DraftStoreError):
        session.publish()
    assert session.single_draft.id is not None

    assert session.publish().published is True
    operations = [operation for operation, _ in store.calls]
    assert operations.count("create") == 1
    assert "update" in operations


def test_save_and_exit_records_resume_hint(store):
    session = WizardSession.new(store)
    session.select("single")
    session.update_posting(title="Welders")
    stored = session.save_and_exit()

    assert stored["is_partial"] is True
    assert stored["last_completed_step"] == 0
    assert stored["title"] == "Welders"
    assert session.phase is SessionPhase.CLOSED
    with pytest.raises(WizardStateError):
        session.add_position()


def test_save_and_exit_failure_propagates(single_draft):
    store, session = _seeded(single_draft)
    store.fail_next(DraftStoreError("Update draft job", "No response from server"))

    with pytest.raises(DraftStoreError):
        session.save_and_exit()
    assert session.phase is SessionPhase.SINGLE


def test_save_and_exit_not_allowed_on_review(single_draft):
    store, session = _seeded(single_draft)
    session.go_to(StepId.REVIEW)

    with pytest.raises(WizardStateError):
        session.save_and_exit()


def test_bulk_submission_totals(store):
    session = WizardSession.new(store)
    session.select("bulk")
    first = session.draft.bulk_entries[0].id
    session.update_bulk_entry(first, country="UAE", job_count="10", position="Cook")
    session.add_bulk_entry(country="Malaysia", job_count=5, position="Driver")
    session.add_bulk_entry(position="Cleaner")

    assert session.next() is True
    assert session.phase is SessionPhase.BULK_SUBMISSION
    stored = session.submit_bulk()

    assert stored["total_jobs"] == 15
    assert stored["countries"] == ["UAE", "Malaysia"]
    assert stored["country"] == "Multiple Countries"
    assert stored["employer"] == MULTIPLE_COMPANIES
    assert stored["title"] == "Cook, Driver"
    assert len(stored["bulk_entries"]) == 2
    assert session.phase is SessionPhase.TERMINAL


def test_bulk_submission_requires_validation(store):
    session = WizardSession.new(store)
    session.select("bulk")

    assert session.next() is False
    assert "bulk_entries" in session.errors
    with pytest.raises(WizardStateError):
        session.submit_bulk()


def test_expand_bulk_into_single(bulk_payload, store):
    session = WizardSession.from_record(store, bulk_payload, expand_bulk=True)
    draft = session.draft

    assert session.phase is SessionPhase.SINGLE
    assert draft.id is None
    assert draft.original_bulk_id == "bulk-1"
    assert draft.administrative.country == "UAE"
    assert draft.contract.hours_per_day == 8
    position = draft.positions[0]
    assert (position.title, position.vacancies_male, position.vacancies_female) == ("Cook", 10, 0)
    assert position.id == 3


def test_bulk_record_opens_bulk_flow(bulk_payload, store):
    session = WizardSession.from_record(store, bulk_payload)

    assert session.phase is SessionPhase.BULK
    assert session.draft.id == "bulk-1"


def test_discard_closes_without_saving(single_draft):
    store, session = _seeded(single_draft)
    session.discard()

    assert session.phase is SessionPhase.CLOSED
    assert store.calls == []


def test_non_finite_hours_block_contract_step(single_draft):
    store, session = _seeded(single_draft)
    session.go_to(StepId.CONTRACT)
    session.update_contract(hours_per_day="nan")

    assert session.next() is False
    assert session.step_index == 1
    assert "hours_per_day" in session.errors


def test_textual_free_flag_resets_currency(single_draft):
    store, session = _seeded(single_draft)
    expense_id = session.add_expense(type="travel", who_pays="worker", is_free=False, amount=300, currency="USD")
    expense = session.update_expense(expense_id, is_free="yes")

    assert expense.is_free is True
    assert expense.amount is None
    assert expense.currency == DEFAULT_CURRENCY


@pytest.mark.parametrize("saved_first", [True, False])
def test_published_record_lists_as_published_and_stays_closed(publishable_draft, saved_first):
    if saved_first:
        store = InMemoryDraftStore(records=[publishable_draft.to_storage()])
        session = WizardSession.from_record(store, store.get("draft-1"))
    else:
        store = InMemoryDraftStore()
        session = WizardSession.from_record(store, revise(publishable_draft, id=None))
    session.go_to(StepId.REVIEW)
    assert session.publish().published is True

    [record] = store.list()
    row = build_draft_row(record)
    assert row.badge == "Published"
    assert row.title == "Security Guards for Dubai Mall"
    assert row.country == "United Arab Emirates"
    assert row.can_publish is False

    reread = parse_stored_record(record)
    assert reread.is_published
    assert [position.title for position in reread.positions] == ["Security Guard", "Supervisor"]
    assert reread.positions[1].overrides.hours_per_day == 10
    with pytest.raises(PublishedDraftError):
        WizardSession.from_record(store, record)
