"""Map a completed draft onto the payload accepted by the publish boundary."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

from models.draft import (
    AdministrativeDetails,
    ContractTerms,
    CutoutImage,
    DraftRecord,
    Expense,
    InterviewDetails,
    Position,
    TagsAndRequirements,
)
from models.payload import (
    AdministrativePayload,
    ContractOverridesPayload,
    ContractPayload,
    CutoutPayload,
    ExperiencePayload,
    ExpensePayload,
    InterviewPayload,
    PositionPayload,
    PublishPayload,
    SalaryPayload,
    TagsPayload,
    VacanciesPayload,
)

FALLBACK_POSITION_TITLE: Final[str] = "Untitled"


def posting_title(draft: DraftRecord) -> str:
    """Return the explicit posting title or one derived from the first position."""

    if draft.title:
        return draft.title
    first_title = draft.positions[0].title if draft.positions else None
    return f"{first_title or FALLBACK_POSITION_TITLE} Position"


def _contract(contract: ContractTerms) -> ContractPayload:
    return ContractPayload(
        period_years=contract.period_years,
        renewable=bool(contract.renewable),
        hours_per_day=contract.hours_per_day,
        days_per_week=contract.days_per_week,
        overtime_policy=contract.overtime_policy,
        weekly_off_days=contract.weekly_off_days,
        food=contract.food,
        accommodation=contract.accommodation,
        transport=contract.transport,
        annual_leave_days=contract.annual_leave_days,
    )


def _position(position: Position) -> PositionPayload:
    overrides = position.overrides
    return PositionPayload(
        title=position.title,
        vacancies=VacanciesPayload(
            male=position.vacancies_male or 0,
            female=position.vacancies_female or 0,
        ),
        salary=SalaryPayload(monthly_amount=position.monthly_salary, currency=position.currency),
        contract_overrides=ContractOverridesPayload(
            hours_per_day=overrides.hours_per_day,
            days_per_week=overrides.days_per_week,
            overtime_policy=overrides.overtime_policy,
            weekly_off_days=overrides.weekly_off_days,
            food=overrides.food,
            accommodation=overrides.accommodation,
            transport=overrides.transport,
        ),
        notes=position.notes,
    )


def _administrative(details: AdministrativeDetails) -> AdministrativePayload:
    return AdministrativePayload(
        city=details.city,
        lt_number=details.lt_number,
        chalani_number=details.chalani_number,
        date_format=details.date_format,
        approval_date_ad=details.approval_date_ad.isoformat() if details.approval_date_ad else None,
        approval_date_bs=details.approval_date_bs,
        posting_date_ad=details.posting_date_ad.isoformat() if details.posting_date_ad else None,
        posting_date_bs=details.posting_date_bs,
        announcement_type=details.announcement_type,
        notes=details.notes,
    )


def _tags(tags: TagsAndRequirements) -> TagsPayload:
    return TagsPayload(
        skills=list(tags.skills),
        education_requirements=list(tags.education_requirements),
        experience_requirements=ExperiencePayload(
            min_years=tags.experience.min_years,
            preferred_years=tags.experience.preferred_years,
            domains=list(tags.experience.domains),
        ),
        canonical_title_ids=list(tags.canonical_title_ids),
        canonical_title_names=list(tags.canonical_title_names),
    )


def publishable_expenses(expenses: Iterable[Expense]) -> list[ExpensePayload]:
    """Keep only expenses with both a type and a payer."""

    payloads: list[ExpensePayload] = []
    for expense in expenses:
        if expense.type is None or expense.payer is None:
            continue
        payloads.append(
            ExpensePayload(
                type=expense.type,
                who_pays=expense.payer,
                is_free=expense.is_free,
                amount=None if expense.is_free else expense.amount,
                currency=None if expense.is_free else expense.currency,
                notes=expense.notes,
            )
        )
    return payloads


def _interview(interview: InterviewDetails) -> InterviewPayload | None:
    if not interview.has_date():
        return None
    return InterviewPayload(
        date_format=interview.date_format,
        date_ad=interview.date_ad.isoformat() if interview.date_ad else None,
        date_bs=interview.date_bs,
        time=interview.time,
        location=interview.location,
        contact_person=interview.contact_person,
        required_documents=list(interview.required_documents),
        notes=interview.notes,
        expenses=publishable_expenses(interview.expenses),
    )


def _cutout(cutout: CutoutImage | None) -> CutoutPayload | None:
    if cutout is None or not cutout.has_content:
        return None
    return CutoutPayload(
        has_file=True,
        is_uploaded=cutout.is_uploaded,
        file_name=cutout.file_name,
        file_size=cutout.file_size,
        file_type=cutout.file_type,
        uploaded_url=cutout.uploaded_url,
    )


def transform(draft: DraftRecord) -> PublishPayload:
    """Build the publish payload from ``draft`` alone."""

    return PublishPayload(
        posting_title=posting_title(draft),
        country=draft.administrative.country,
        employer=draft.employer,
        contract=_contract(draft.contract),
        positions=[_position(position) for position in draft.positions],
        administrative_details=_administrative(draft.administrative),
        tags_and_requirements=_tags(draft.tags),
        expenses=publishable_expenses(draft.expenses),
        interview=_interview(draft.interview),
        cutout=_cutout(draft.cutout),
    )


__all__ = ["FALLBACK_POSITION_TITLE", "posting_title", "publishable_expenses", "transform"]
