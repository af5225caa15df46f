import logging

import pytest

from core.progress import (
    UNREADABLE_PROGRESS,
    describe_hint_drift,
    evaluate,
    evaluate_payload,
)
from models.draft import DraftRecord, revise


def test_valid_draft_without_cutout_stops_at_cutout(single_draft):
    progress = evaluate(single_draft)

    assert progress.completed_count == 5
    assert progress.current_step == 6
    assert progress.ready_to_publish is False
    assert progress.label == "Step 6/8"
    assert progress.resume_index == 5


def test_expenses_step_is_a_presence_check(single_draft):
    progress = evaluate(revise(single_draft, expenses=()))

    assert progress.current_step == 5
    assert progress.completed_count == 4


def test_incomplete_expense_still_counts_as_present(single_draft):
    expense = revise(single_draft.expenses[0], type=None)
    progress = evaluate(revise(single_draft, expenses=(expense,)))

    assert progress.step_results[4] is True


def test_all_content_steps_pass_without_review_marker(publishable_draft):
    progress = evaluate(publishable_draft)

    assert progress.completed_count == 6
    assert progress.current_step == 8
    assert progress.ready_to_publish is False


def test_ready_requires_review_marker(publishable_draft):
    progress = evaluate(revise(publishable_draft, review={"is_complete": True}))

    assert progress.ready_to_publish is True


def test_invalid_interview_blocks_ready(publishable_draft):
    interview = revise(publishable_draft.interview, time="half past ten")
    draft = revise(publishable_draft, interview=interview, review={"is_complete": True})

    assert evaluate(draft).ready_to_publish is False


@pytest.mark.parametrize("hint", [None, 0, 3, 7])
def test_stored_hint_never_changes_progress(make_payload, hint):
    baseline = evaluate(DraftRecord.model_validate(make_payload()))
    hinted = evaluate(DraftRecord.model_validate(make_payload(is_partial=True, last_completed_step=hint)))

    assert hinted == baseline


def test_empty_draft_starts_at_first_step():
    progress = evaluate(DraftRecord())

    assert progress.current_step == 1
    assert progress.completed_count == 0


def test_bulk_progress_is_single_value(bulk_payload):
    progress = evaluate(DraftRecord.model_validate(bulk_payload))

    assert progress.is_bulk is True
    assert (progress.current_step, progress.total_steps, progress.completed_count) == (1, 1, 1)
    assert progress.ready_to_publish is True
    assert progress.resume_index == 0


def test_bulk_without_employer_is_not_ready(bulk_payload):
    bulk_payload["employer"] = ""

    assert evaluate(DraftRecord.model_validate(bulk_payload)).ready_to_publish is False


def test_unreadable_payload_degrades_to_empty_progress(caplog):
    with caplog.at_level(logging.WARNING):
        progress = evaluate_payload({"id": "x", "positions": "not-a-list", "status": "archived"})

    assert progress == UNREADABLE_PROGRESS
    assert "Unreadable draft x" in caplog.text


def test_hint_drift_is_reported(make_payload, caplog):
    draft = DraftRecord.model_validate(make_payload(is_partial=True, last_completed_step=1))
    with caplog.at_level(logging.INFO):
        message = describe_hint_drift(draft)

    assert message == "Stored step hint 2 differs from recomputed step 6"
    assert message in caplog.text


def test_matching_hint_is_not_drift(make_payload):
    draft = DraftRecord.model_validate(make_payload(is_partial=True, last_completed_step=5))

    assert describe_hint_drift(draft) is None


def _two_position_draft(make_payload, **overrides):
    # One male-only and one female-only position, no experience required.
    payload = make_payload(
        positions=[
            {"id": 1, "title": "Cook", "vacancies_male": 3, "vacancies_female": 0, "monthly_salary": 1800, "currency": "AED"},
            {"id": 2, "title": "Cleaner", "vacancies_male": 0, "vacancies_female": 2, "monthly_salary": 1500, "currency": "AED"},
        ],
        tags={
            "skills": ["Cooking"],
            "education_requirements": ["Class 8"],
            "experience": {"min_years": 0, "domains": ["Hospitality"]},
            "canonical_title_ids": [2],
            "canonical_title_names": ["Cook"],
        },
        **overrides,
    )
    return DraftRecord.model_validate(payload)


def test_two_positions_with_one_expense_stop_at_cutout(make_payload):
    draft = _two_position_draft(make_payload)

    assert len(draft.expenses) == 1
    assert draft.cutout is None
    progress = evaluate(draft)
    assert progress.step_results[:6] == (True, True, True, True, True, False)
    assert progress.current_step == 6
    assert progress.completed_count == 5


def test_two_positions_without_expense_stop_at_expenses(make_payload):
    progress = evaluate(_two_position_draft(make_payload, expenses=[]))

    assert progress.current_step == 5
    assert progress.completed_count == 4
