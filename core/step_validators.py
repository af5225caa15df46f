"""Field rules for every wizard step.

Each validator takes a :class:`~models.draft.DraftRecord` snapshot and returns
a mapping of field key to message; an empty mapping means the step passes.
Validators are pure and never raise. Repeatable entries are keyed as
``<collection>_<local id>_<field>``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Final

from constants.steps import CONTENT_STEPS, StepId
from core.validation import in_range, is_blank, is_valid_interview_time
from models.draft import DraftRecord, Expense

logger = logging.getLogger(__name__)

ValidationErrors = dict[str, str]
StepValidator = Callable[[DraftRecord], ValidationErrors]


def validate_posting_details(draft: DraftRecord) -> ValidationErrors:
    """Administrative fields: all required, dates in the active calendar."""

    details = draft.administrative
    errors: ValidationErrors = {}
    if is_blank(details.city):
        errors["city"] = "City selection is required"
    if is_blank(details.lt_number):
        errors["lt_number"] = "Please enter a valid LT Number (e.g., LT-2024-001)"
    if is_blank(details.chalani_number):
        errors["chalani_number"] = "Please enter a valid Chalani Number (e.g., CH-2024-001)"
    if is_blank(details.country):
        errors["country"] = "Country selection is required"
    suffix = details.date_format.value.lower()
    if details.approval_date() is None:
        errors[f"approval_date_{suffix}"] = "Approval Date is required"
    if details.posting_date() is None:
        errors[f"posting_date_{suffix}"] = "Posting Date is required"
    if details.announcement_type is None:
        errors["announcement_type"] = "Please select an announcement type"
    return errors


def validate_contract(draft: DraftRecord) -> ValidationErrors:
    contract = draft.contract
    errors: ValidationErrors = {}
    if not in_range(contract.period_years, 1):
        errors["period_years"] = "Contract period must be at least 1 year"
    if contract.renewable is None:
        errors["renewable"] = "Please specify if contract is renewable"
    if not in_range(contract.hours_per_day, 1, 16):
        errors["hours_per_day"] = "Working hours must be between 1 and 16 hours per day"
    if not in_range(contract.days_per_week, 1, 7):
        errors["days_per_week"] = "Working days must be between 1 and 7 days per week"
    if contract.overtime_policy is None:
        errors["overtime_policy"] = "Please select an overtime policy"
    if not in_range(contract.weekly_off_days, 0, 7):
        errors["weekly_off_days"] = "Weekly off days must be between 0 and 7"
    if contract.food is None:
        errors["food"] = "Please specify food provision"
    if contract.accommodation is None:
        errors["accommodation"] = "Please specify accommodation provision"
    if contract.transport is None:
        errors["transport"] = "Please specify transport provision"
    if not in_range(contract.annual_leave_days, 0):
        errors["annual_leave_days"] = "Annual leave days must be 0 or greater"
    return errors


def validate_positions(draft: DraftRecord) -> ValidationErrors:
    if not draft.positions:
        return {"positions_general": "At least one position is required"}
    errors: ValidationErrors = {}
    for position in draft.positions:
        prefix = f"positions_{position.id}"
        if is_blank(position.title):
            errors[f"{prefix}_title"] = "Position title is required"
        if not in_range(position.vacancies_male, 0):
            errors[f"{prefix}_vacancies_male"] = "Male vacancies must be 0 or greater"
        if not in_range(position.vacancies_female, 0):
            errors[f"{prefix}_vacancies_female"] = "Female vacancies must be 0 or greater"
        if position.total_vacancies() <= 0:
            errors[f"{prefix}_vacancies_total"] = "Total vacancies must be greater than 0"
        if position.monthly_salary is None or position.monthly_salary <= 0:
            errors[f"{prefix}_monthly_salary"] = "Monthly salary must be greater than 0"
        if position.currency is None:
            errors[f"{prefix}_currency"] = "Currency selection is required"

        overrides = position.overrides
        if overrides.hours_per_day is not None and not in_range(overrides.hours_per_day, 1, 16):
            errors[f"{prefix}_hours_per_day_override"] = "Hours Per Day must be between 1 and 16"
        if overrides.days_per_week is not None and not in_range(overrides.days_per_week, 1, 7):
            errors[f"{prefix}_days_per_week_override"] = "Days Per Week must be between 1 and 7"
        if overrides.weekly_off_days is not None and not in_range(overrides.weekly_off_days, 0, 7):
            errors[f"{prefix}_weekly_off_days_override"] = "Weekly Off Days must be between 0 and 7"
    return errors


def validate_tags(draft: DraftRecord) -> ValidationErrors:
    tags = draft.tags
    experience = tags.experience
    errors: ValidationErrors = {}
    if not tags.skills:
        errors["skills"] = "Please add at least one skill requirement"
    if not tags.education_requirements:
        errors["education_requirements"] = "Please specify education requirements"
    if not in_range(experience.min_years, 0):
        errors["experience_min_years"] = "Minimum experience years is required (use 0 for no experience)"
    elif experience.preferred_years is not None and experience.preferred_years < experience.min_years:
        errors["experience_preferred_years"] = "Preferred experience cannot be less than the minimum"
    if not experience.domains:
        errors["experience_domains"] = "Please specify at least one experience domain"
    if not tags.canonical_title_ids:
        errors["canonical_titles"] = "Please select at least one canonical job title"
    return errors


def expense_errors(expenses: Iterable[Expense], *, prefix: str) -> ValidationErrors:
    """Apply the shared expense rule to every entry of ``expenses``."""

    errors: ValidationErrors = {}
    for expense in expenses:
        key = f"{prefix}_{expense.id}"
        if expense.type is None:
            errors[f"{key}_type"] = "Expense type is required"
        if expense.payer is None:
            errors[f"{key}_who_pays"] = "Please specify who pays for this expense"
        if not expense.is_free:
            if expense.amount is None or expense.amount <= 0:
                errors[f"{key}_amount"] = "Please enter a valid amount greater than 0"
            if expense.currency is None:
                errors[f"{key}_currency"] = "Currency is required for paid expenses"
    return errors


def validate_expenses(draft: DraftRecord) -> ValidationErrors:
    """Expenses are optional, but every entered expense must be complete."""

    return expense_errors(draft.expenses, prefix="expenses")


def validate_cutout(draft: DraftRecord) -> ValidationErrors:
    if not draft.has_cutout_content():
        return {"cutout_file": "Job advertisement image is required"}
    return {}


def validate_interview(draft: DraftRecord) -> ValidationErrors:
    interview = draft.interview
    errors: ValidationErrors = {}
    if interview.is_touched() and interview.time is not None:
        if not is_valid_interview_time(interview.time):
            errors["interview_time"] = "Please enter a valid time format (e.g., 10:00 AM or 14:30)"
    errors.update(expense_errors(interview.expenses, prefix="interview_expense"))
    return errors


def validate_review(draft: DraftRecord) -> ValidationErrors:
    """The review screen has no fields; it reports the content steps combined."""

    errors: ValidationErrors = {}
    for step_id in CONTENT_STEPS:
        errors.update(STEP_VALIDATORS[step_id](draft))
    return errors


def validate_bulk_entries(draft: DraftRecord) -> ValidationErrors:
    """Entries without country or job count are ignored; the rest must be valid."""

    errors: ValidationErrors = {}
    complete = [entry for entry in draft.bulk_entries if entry.is_complete()]
    if not complete:
        errors["bulk_entries"] = "Add at least one country with a job count"
        return errors
    for entry in complete:
        count = entry.job_count
        if count is None or count <= 0 or not float(count).is_integer():
            errors[f"bulk_{entry.id}_job_count"] = "Job count must be a positive whole number"
    return errors


STEP_VALIDATORS: Final[Mapping[StepId, StepValidator]] = {
    StepId.DETAILS: validate_posting_details,
    StepId.CONTRACT: validate_contract,
    StepId.POSITIONS: validate_positions,
    StepId.TAGS: validate_tags,
    StepId.EXPENSES: validate_expenses,
    StepId.CUTOUT: validate_cutout,
    StepId.INTERVIEW: validate_interview,
    StepId.REVIEW: validate_review,
    StepId.BULK: validate_bulk_entries,
}


def validate(step_id: StepId | str, draft: DraftRecord) -> ValidationErrors:
    """Run the rules of ``step_id`` against ``draft``."""

    try:
        key = StepId(step_id)
    except ValueError:
        logger.warning("No validation rules registered for step %r", step_id)
        return {}
    return STEP_VALIDATORS[key](draft)


def validate_steps(draft: DraftRecord, steps: Iterable[StepId]) -> dict[StepId, ValidationErrors]:
    """Validate ``steps`` in order and return the errors of each step."""

    return {step_id: validate(step_id, draft) for step_id in steps}


def first_failing_step(results: Mapping[StepId, ValidationErrors]) -> StepId | None:
    """Return the first step in ``results`` that reported errors."""

    for step_id, errors in results.items():
        if errors:
            return step_id
    return None


__all__ = [
    "STEP_VALIDATORS",
    "StepValidator",
    "ValidationErrors",
    "expense_errors",
    "first_failing_step",
    "validate",
    "validate_bulk_entries",
    "validate_contract",
    "validate_cutout",
    "validate_expenses",
    "validate_interview",
    "validate_positions",
    "validate_posting_details",
    "validate_review",
    "validate_steps",
]
