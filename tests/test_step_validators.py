import logging

import pytest

from constants.steps import StepId
from core.step_validators import (
    first_failing_step,
    validate,
    validate_bulk_entries,
    validate_contract,
    validate_cutout,
    validate_expenses,
    validate_interview,
    validate_positions,
    validate_posting_details,
    validate_review,
    validate_steps,
    validate_tags,
)
from core.validation import in_range
from core.validators import coerce_int, coerce_numeric_input
from models.draft import DraftRecord, revise


def test_valid_draft_passes_content_steps(single_draft):
    for step_id in (StepId.DETAILS, StepId.CONTRACT, StepId.POSITIONS, StepId.TAGS, StepId.EXPENSES):
        assert validate(step_id, single_draft) == {}, step_id


def test_posting_details_reports_every_missing_field():
    errors = validate_posting_details(DraftRecord())

    assert set(errors) == {
        "city",
        "lt_number",
        "chalani_number",
        "country",
        "approval_date_ad",
        "posting_date_ad",
        "announcement_type",
    }


def test_posting_details_checks_dates_of_active_calendar(single_draft):
    details = revise(single_draft.administrative, date_format="BS", approval_date_bs="2081-01-15")
    errors = validate_posting_details(revise(single_draft, administrative=details))

    assert errors == {"posting_date_bs": "Posting Date is required"}


def test_whitespace_city_counts_as_missing(single_draft):
    details = revise(single_draft.administrative, city="   ")

    assert "city" in validate_posting_details(revise(single_draft, administrative=details))


def test_contract_bounds(single_draft):
    contract = revise(
        single_draft.contract,
        period_years=0,
        hours_per_day=18,
        days_per_week=8,
        weekly_off_days=-1,
        annual_leave_days=None,
    )
    errors = validate_contract(revise(single_draft, contract=contract))

    assert set(errors) == {
        "period_years",
        "hours_per_day",
        "days_per_week",
        "weekly_off_days",
        "annual_leave_days",
    }
    assert errors["hours_per_day"] == "Working hours must be between 1 and 16 hours per day"


def test_contract_accepts_zero_off_days_and_leave(single_draft):
    contract = revise(single_draft.contract, weekly_off_days=0, annual_leave_days=0)

    assert validate_contract(revise(single_draft, contract=contract)) == {}


def test_contract_unset_numbers_are_not_zero(single_draft):
    contract = revise(single_draft.contract, weekly_off_days="")

    assert "weekly_off_days" in validate_contract(revise(single_draft, contract=contract))


def test_positions_require_at_least_one(single_draft):
    errors = validate_positions(revise(single_draft, positions=()))

    assert errors == {"positions_general": "At least one position is required"}


def test_position_errors_are_keyed_by_local_id(single_draft):
    broken = revise(
        single_draft.positions[1],
        title="",
        vacancies_male=0,
        vacancies_female=0,
        monthly_salary=0,
        overrides={"hours_per_day": 17, "days_per_week": 0, "weekly_off_days": 9},
    )
    draft = revise(single_draft, positions=(single_draft.positions[0], broken))
    errors = validate_positions(draft)

    assert set(errors) == {
        "positions_2_title",
        "positions_2_vacancies_total",
        "positions_2_monthly_salary",
        "positions_2_hours_per_day_override",
        "positions_2_days_per_week_override",
        "positions_2_weekly_off_days_override",
    }


def test_tags_preferred_experience_below_minimum(single_draft):
    experience = revise(single_draft.tags.experience, min_years=3, preferred_years=1)
    draft = revise(single_draft, tags=revise(single_draft.tags, experience=experience))

    assert set(validate_tags(draft)) == {"experience_preferred_years"}


def test_tags_missing_everything():
    errors = validate_tags(DraftRecord())

    assert set(errors) == {
        "skills",
        "education_requirements",
        "experience_min_years",
        "experience_domains",
        "canonical_titles",
    }


def test_no_expenses_is_valid(single_draft):
    assert validate_expenses(revise(single_draft, expenses=())) == {}


def test_paid_expense_needs_amount_and_currency(single_draft):
    expense = revise(single_draft.expenses[0], is_free=False, amount=None, currency=None)
    errors = validate_expenses(revise(single_draft, expenses=(expense,)))

    assert set(errors) == {"expenses_3_amount", "expenses_3_currency"}


def test_expense_without_type_or_payer(single_draft):
    expense = revise(single_draft.expenses[0], type=None, payer=None)
    errors = validate_expenses(revise(single_draft, expenses=(expense,)))

    assert set(errors) == {"expenses_3_type", "expenses_3_who_pays"}


def test_cutout_required(single_draft, publishable_draft):
    assert validate_cutout(single_draft) == {"cutout_file": "Job advertisement image is required"}
    assert validate_cutout(publishable_draft) == {}


def test_uploaded_url_counts_as_cutout(single_draft):
    draft = revise(single_draft, cutout={"uploaded_url": "https://cdn.example.com/a.png", "is_uploaded": True})

    assert validate_cutout(draft) == {}


def test_interview_is_optional(single_draft):
    assert validate_interview(single_draft) == {}


def test_interview_time_format(single_draft):
    for good in ("10:00 AM", "14:30", "9:05 pm"):
        draft = revise(single_draft, interview=revise(single_draft.interview, time=good))
        assert validate_interview(draft) == {}, good
    draft = revise(single_draft, interview=revise(single_draft.interview, time="25:99"))
    assert set(validate_interview(draft)) == {"interview_time"}


def test_interview_expenses_use_their_own_prefix(single_draft):
    interview = revise(single_draft.interview, expenses=({"id": 9, "is_free": False},))
    errors = validate_interview(revise(single_draft, interview=interview))

    assert set(errors) == {
        "interview_expense_9_type",
        "interview_expense_9_who_pays",
        "interview_expense_9_amount",
    }


def test_review_aggregates_content_steps(single_draft):
    errors = validate_review(single_draft)

    assert errors == {"cutout_file": "Job advertisement image is required"}


def test_bulk_entries_ignore_incomplete_rows(bulk_payload):
    bulk_payload["bulk_entries"].append({"id": 3, "country": None, "job_count": None})
    draft = DraftRecord.model_validate(bulk_payload)

    assert validate_bulk_entries(draft) == {}


def test_bulk_entries_need_one_complete_row():
    draft = DraftRecord.model_validate({"kind": "bulk", "bulk_entries": [{"id": 1, "country": "UAE"}]})

    assert set(validate_bulk_entries(draft)) == {"bulk_entries"}


def test_bulk_job_count_must_be_positive_whole_number():
    draft = DraftRecord.model_validate(
        {
            "kind": "bulk",
            "bulk_entries": [
                {"id": 1, "country": "UAE", "job_count": 0},
                {"id": 2, "country": "Qatar", "job_count": 2.5},
            ],
        }
    )

    assert set(validate_bulk_entries(draft)) == {"bulk_1_job_count", "bulk_2_job_count"}


def test_unknown_step_has_no_rules(single_draft, caplog):
    with caplog.at_level(logging.WARNING):
        assert validate("payment", single_draft) == {}
    assert "payment" in caplog.text


def test_first_failing_step_keeps_order(single_draft):
    contract = revise(single_draft.contract, hours_per_day=18)
    draft = revise(single_draft, contract=contract, positions=())
    results = validate_steps(draft, (StepId.DETAILS, StepId.CONTRACT, StepId.POSITIONS))

    assert first_failing_step(results) is StepId.CONTRACT
    assert first_failing_step({StepId.DETAILS: {}}) is None


@pytest.mark.parametrize("text", ["nan", "inf", "-inf", "1e400", " NaN "])
def test_non_finite_text_stays_unset(text):
    assert coerce_numeric_input(text) is None
    assert coerce_numeric_input(float("nan")) is None
    assert coerce_int(text) is None


def test_in_range_rejects_non_finite_values():
    assert in_range(float("nan"), 1, 16) is False
    assert in_range(float("inf"), 0) is False
    assert in_range(16, 1, 16) is True


def test_non_finite_contract_values_fail_validation(single_draft):
    contract = revise(single_draft.contract, hours_per_day="nan", period_years="inf")
    errors = validate_contract(revise(single_draft, contract=contract))

    assert contract.hours_per_day is None
    assert {"hours_per_day", "period_years"} <= set(errors)


def test_overflowing_salary_fails_validation(single_draft):
    position = revise(single_draft.positions[0], monthly_salary="1e400")
    errors = validate_positions(revise(single_draft, positions=(position, single_draft.positions[1])))

    assert position.monthly_salary is None
    assert "positions_1_monthly_salary" in errors


def test_infinite_bulk_job_count_is_ignored(bulk_payload):
    bulk_payload["bulk_entries"][0]["job_count"] = "inf"
    draft = DraftRecord.model_validate(bulk_payload)

    assert draft.bulk_summary().total_jobs == 5
    assert validate_bulk_entries(draft) == {}
