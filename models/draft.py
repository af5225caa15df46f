"""Pydantic models for job-posting drafts.

A :class:`DraftRecord` is the persisted entity. It is frozen: every edit goes
through :func:`revise`, which validates the changed copy, so a half-applied
change never becomes visible to a validator or to the progress evaluator.

Numeric inputs use ``None`` as the *unset* tag: an empty text box maps to
``None`` and is never confused with a typed ``0``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Annotated, Any, Final, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

import config
from constants.flow_mode import FlowMode
from constants.options import (
    AnnouncementType,
    CalendarSystem,
    Currency,
    ExpensePayer,
    ExpenseType,
    OvertimePolicy,
    Provision,
)
from core.validators import (
    blank_to_none,
    coerce_int,
    coerce_numeric_input,
    deduplicate_preserve_order,
    optional_text,
)

logger = logging.getLogger(__name__)

DraftKind = FlowMode


def _resolve_default_currency() -> Currency:
    try:
        return Currency(config.DEFAULT_CURRENCY)
    except ValueError:
        logger.warning("Unsupported DEFAULT_CURRENCY %r, using AED", config.DEFAULT_CURRENCY)
        return Currency.AED


DEFAULT_CURRENCY: Final[Currency] = _resolve_default_currency()

_TRUE_TOKENS: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_TOKENS: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


def coerce_flag(value: object, default: bool | None) -> bool | None:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE_TOKENS:
            return True
        if token in _FALSE_TOKENS:
            return False
        if not token:
            return default
    return default


def _currency_code(value: object) -> object | None:
    cleaned = blank_to_none(value)
    if isinstance(cleaned, str):
        return cleaned.upper()
    return cleaned


NumericInput = Annotated[Optional[int | float], BeforeValidator(coerce_numeric_input)]
Text = Annotated[Optional[str], BeforeValidator(optional_text)]
OptionalDate = Annotated[Optional[date], BeforeValidator(blank_to_none)]
TagSet = Annotated[tuple[str, ...], BeforeValidator(deduplicate_preserve_order)]
CurrencyChoice = Annotated[Optional[Currency], BeforeValidator(_currency_code)]
ProvisionChoice = Annotated[Optional[Provision], BeforeValidator(blank_to_none)]
OvertimeChoice = Annotated[Optional[OvertimePolicy], BeforeValidator(blank_to_none)]
AnnouncementChoice = Annotated[Optional[AnnouncementType], BeforeValidator(blank_to_none)]
ExpenseTypeChoice = Annotated[Optional[ExpenseType], BeforeValidator(blank_to_none)]
PayerChoice = Annotated[Optional[ExpensePayer], BeforeValidator(blank_to_none)]
LocalId = Annotated[int, BeforeValidator(coerce_int)]


class DraftStatus(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


def _calendar_system(value: object) -> CalendarSystem:
    if isinstance(value, CalendarSystem):
        return value
    if isinstance(value, str) and value.strip():
        return CalendarSystem(value.strip().upper())
    return CalendarSystem.AD


class AdministrativeDetails(_Section):
    """Licensing and announcement data from the *Posting Details* step."""

    country: Text = None
    city: Text = None
    lt_number: Text = None
    chalani_number: Text = None
    date_format: CalendarSystem = CalendarSystem.AD
    approval_date_ad: OptionalDate = None
    approval_date_bs: Text = None
    posting_date_ad: OptionalDate = None
    posting_date_bs: Text = None
    announcement_type: AnnouncementChoice = None
    notes: Text = None

    @field_validator("date_format", mode="before")
    @classmethod
    def _normalise_date_format(cls, value: object) -> CalendarSystem:
        return _calendar_system(value)

    def approval_date(self) -> date | str | None:
        """Return the approval date in the active calendar system."""

        if self.date_format is CalendarSystem.BS:
            return self.approval_date_bs
        return self.approval_date_ad

    def posting_date(self) -> date | str | None:
        """Return the posting date in the active calendar system."""

        if self.date_format is CalendarSystem.BS:
            return self.posting_date_bs
        return self.posting_date_ad


class ContractTerms(_Section):
    """Employment terms shared by every position of the posting."""

    period_years: NumericInput = None
    renewable: Optional[bool] = True
    hours_per_day: NumericInput = None
    days_per_week: NumericInput = None
    overtime_policy: OvertimeChoice = OvertimePolicy.AS_PER_COMPANY_POLICY
    weekly_off_days: NumericInput = None
    food: ProvisionChoice = Provision.NOT_PROVIDED
    accommodation: ProvisionChoice = Provision.NOT_PROVIDED
    transport: ProvisionChoice = Provision.NOT_PROVIDED
    annual_leave_days: NumericInput = None

    @field_validator("renewable", mode="before")
    @classmethod
    def _normalise_renewable(cls, value: object) -> bool | None:
        return coerce_flag(value, None)


class ContractOverrides(_Section):
    """Per-position deviations from :class:`ContractTerms`; ``None`` means no override."""

    hours_per_day: NumericInput = None
    days_per_week: NumericInput = None
    overtime_policy: OvertimeChoice = None
    weekly_off_days: NumericInput = None
    food: ProvisionChoice = None
    accommodation: ProvisionChoice = None
    transport: ProvisionChoice = None


class Position(_Section):
    id: LocalId
    title: Text = None
    vacancies_male: NumericInput = None
    vacancies_female: NumericInput = None
    monthly_salary: NumericInput = None
    currency: CurrencyChoice = DEFAULT_CURRENCY
    overrides: ContractOverrides = Field(default_factory=ContractOverrides)
    notes: Text = None

    def total_vacancies(self) -> int | float:
        """Return male + female vacancies, counting unset values as zero."""

        return (self.vacancies_male or 0) + (self.vacancies_female or 0)


class ExperienceRequirement(_Section):
    min_years: NumericInput = None
    preferred_years: NumericInput = None
    domains: TagSet = ()


class TagsAndRequirements(_Section):
    """Skills, education, experience and canonical title references."""

    skills: TagSet = ()
    education_requirements: TagSet = ()
    experience: ExperienceRequirement = Field(default_factory=ExperienceRequirement)
    canonical_title_ids: tuple[int, ...] = ()
    canonical_title_names: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_parallel_titles(self) -> "TagsAndRequirements":
        if len(self.canonical_title_ids) != len(self.canonical_title_names):
            raise ValueError("canonical_title_ids and canonical_title_names must have the same length")
        return self


class Expense(_Section):
    """A cost line item; free expenses never carry an amount."""

    id: LocalId
    type: ExpenseTypeChoice = None
    payer: PayerChoice = None
    is_free: bool = True
    amount: NumericInput = None
    currency: CurrencyChoice = DEFAULT_CURRENCY
    notes: Text = None

    @model_validator(mode="before")
    @classmethod
    def _drop_amount_when_free(cls, data: object) -> object:
        if not isinstance(data, Mapping):
            return data
        payload = dict(data)
        if "who_pays" in payload and "payer" not in payload:
            payload["payer"] = payload.pop("who_pays")
        is_free = coerce_flag(payload.get("is_free"), True)
        payload["is_free"] = is_free
        if is_free:
            payload["amount"] = None
        return payload


class CutoutImage(_Section):
    """Metadata of the job advertisement image (the transport is external)."""

    file_name: Text = None
    file_size: Optional[int] = None
    file_type: Text = None
    uploaded_url: Text = None
    is_uploaded: bool = False

    @property
    def has_local_file(self) -> bool:
        return self.file_name is not None

    @property
    def has_content(self) -> bool:
        return self.has_local_file or self.uploaded_url is not None


class InterviewDetails(_Section):
    """Optional interview arrangements including interview-related expenses."""

    date_format: CalendarSystem = CalendarSystem.AD
    date_ad: OptionalDate = None
    date_bs: Text = None
    time: Text = None
    location: Text = None
    contact_person: Text = None
    required_documents: TagSet = ()
    notes: Text = None
    expenses: tuple[Expense, ...] = ()

    @field_validator("date_format", mode="before")
    @classmethod
    def _normalise_date_format(cls, value: object) -> CalendarSystem:
        return _calendar_system(value)

    def has_date(self) -> bool:
        return self.date_ad is not None or self.date_bs is not None

    def is_touched(self) -> bool:
        """Return ``True`` once any interview field holds a value."""

        return any(
            (
                self.has_date(),
                self.time is not None,
                self.location is not None,
                self.contact_person is not None,
                bool(self.required_documents),
                self.notes is not None,
                bool(self.expenses),
            )
        )


class BulkEntry(_Section):
    id: LocalId
    country: Text = None
    job_count: NumericInput = None
    position: Text = None

    def is_complete(self) -> bool:
        return self.country is not None and self.job_count is not None


class CompletionMarker(_Section):
    is_complete: bool = False


@dataclass(frozen=True)
class BulkSummary:
    """Aggregates derived from the bulk entries of a draft."""

    total_jobs: int
    countries: tuple[str, ...]
    positions: tuple[str, ...]

    @property
    def country_label(self) -> str:
        if len(self.countries) == 1:
            return self.countries[0]
        return "Multiple Countries"

    @property
    def title(self) -> str:
        return ", ".join(self.positions) if self.positions else "Multiple Positions"

    @property
    def description(self) -> str:
        noun = "country" if len(self.countries) == 1 else "countries"
        return f"Bulk job creation for {self.total_jobs} positions across {len(self.countries)} {noun}"


def summarize_bulk_entries(entries: tuple[BulkEntry, ...] | list[BulkEntry]) -> BulkSummary:
    """Return totals and the unique country/position lists for ``entries``."""

    total = 0
    for entry in entries:
        if entry.job_count is not None and entry.job_count > 0:
            total += int(entry.job_count)
    countries = tuple(deduplicate_preserve_order(entry.country for entry in entries))
    positions = tuple(deduplicate_preserve_order(entry.position for entry in entries))
    return BulkSummary(total_jobs=total, countries=countries, positions=positions)


_SINGLE_ONLY_FIELDS: Final[frozenset[str]] = frozenset(
    {"administrative", "contract", "positions", "tags", "expenses", "cutout", "interview"}
)
_BULK_ONLY_FIELDS: Final[frozenset[str]] = frozenset({"bulk_entries"})


class DraftRecord(BaseModel):
    """The persisted job-posting draft, single or bulk."""

    # Persisted records may carry server-side extras (status history, totals).
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: Text = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    kind: DraftKind = DraftKind.SINGLE
    status: DraftStatus = DraftStatus.DRAFT

    title: Text = None
    employer: Text = None
    description: Text = None

    administrative: AdministrativeDetails = Field(default_factory=AdministrativeDetails)
    contract: ContractTerms = Field(default_factory=ContractTerms)
    positions: tuple[Position, ...] = ()
    tags: TagsAndRequirements = Field(default_factory=TagsAndRequirements)
    expenses: tuple[Expense, ...] = ()
    cutout: Optional[CutoutImage] = None
    interview: InterviewDetails = Field(default_factory=InterviewDetails)

    bulk_entries: tuple[BulkEntry, ...] = ()
    original_bulk_id: Text = None

    is_partial: bool = False
    last_completed_step: Optional[int] = None

    review: CompletionMarker = Field(default_factory=CompletionMarker)
    submit: CompletionMarker = Field(default_factory=CompletionMarker)

    @field_validator("kind", mode="before")
    @classmethod
    def _normalise_kind(cls, value: object) -> object:
        cleaned = blank_to_none(value)
        return DraftKind.SINGLE if cleaned is None else cleaned

    @field_validator("last_completed_step", mode="before")
    @classmethod
    def _normalise_step_hint(cls, value: object) -> int | None:
        return coerce_int(value)

    @field_validator("review", "submit", mode="before")
    @classmethod
    def _normalise_marker(cls, value: object) -> object:
        return {} if value is None else value

    @property
    def is_bulk(self) -> bool:
        return self.kind is DraftKind.BULK

    @property
    def is_published(self) -> bool:
        return self.status is DraftStatus.PUBLISHED

    def has_cutout_content(self) -> bool:
        return self.cutout is not None and self.cutout.has_content

    def bulk_summary(self) -> BulkSummary:
        return summarize_bulk_entries(self.bulk_entries)

    def max_local_id(self) -> int:
        """Return the highest local id used by any repeatable entry."""

        ids = [position.id for position in self.positions]
        ids.extend(expense.id for expense in self.expenses)
        ids.extend(expense.id for expense in self.interview.expenses)
        ids.extend(entry.id for entry in self.bulk_entries)
        return max(ids, default=0)

    def to_storage(self) -> dict[str, Any]:
        """Return a JSON-ready dict holding only the fields of this draft's kind."""

        excluded = _BULK_ONLY_FIELDS if self.kind is DraftKind.SINGLE else _SINGLE_ONLY_FIELDS
        payload = self.model_dump(mode="json", exclude=set(excluded))
        if self.kind is DraftKind.BULK:
            summary = self.bulk_summary()
            payload["total_jobs"] = summary.total_jobs
            payload["countries"] = list(summary.countries)
            payload["country"] = summary.country_label
        return payload


ModelT = TypeVar("ModelT", bound=BaseModel)


def revise(model: ModelT, **changes: Any) -> ModelT:
    """Return a validated copy of ``model`` with ``changes`` applied."""

    data = model.model_dump()
    data.update(changes)
    return type(model).model_validate(data)


__all__ = [
    "AdministrativeDetails",
    "BulkEntry",
    "BulkSummary",
    "CompletionMarker",
    "ContractOverrides",
    "ContractTerms",
    "CutoutImage",
    "DEFAULT_CURRENCY",
    "DraftKind",
    "DraftRecord",
    "DraftStatus",
    "Expense",
    "ExperienceRequirement",
    "InterviewDetails",
    "Position",
    "TagsAndRequirements",
    "coerce_flag",
    "revise",
    "summarize_bulk_entries",
]
