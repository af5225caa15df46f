"""Normalized payload handed to the persistence boundary on publish."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _PayloadModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


Number = int | float


class ContractPayload(_PayloadModel):
    period_years: Optional[Number] = None
    renewable: bool = False
    hours_per_day: Optional[Number] = None
    days_per_week: Optional[Number] = None
    overtime_policy: Optional[str] = None
    weekly_off_days: Optional[Number] = None
    food: Optional[str] = None
    accommodation: Optional[str] = None
    transport: Optional[str] = None
    annual_leave_days: Optional[Number] = None


class VacanciesPayload(_PayloadModel):
    male: Number = 0
    female: Number = 0


class SalaryPayload(_PayloadModel):
    monthly_amount: Optional[Number] = None
    currency: Optional[str] = None


class ContractOverridesPayload(_PayloadModel):
    """Every key is always present; ``None`` marks "no override"."""

    hours_per_day: Optional[Number]
    days_per_week: Optional[Number]
    overtime_policy: Optional[str]
    weekly_off_days: Optional[Number]
    food: Optional[str]
    accommodation: Optional[str]
    transport: Optional[str]


class PositionPayload(_PayloadModel):
    title: Optional[str] = None
    vacancies: VacanciesPayload
    salary: SalaryPayload
    contract_overrides: ContractOverridesPayload
    notes: Optional[str] = None


class AdministrativePayload(_PayloadModel):
    city: Optional[str] = None
    lt_number: Optional[str] = None
    chalani_number: Optional[str] = None
    date_format: str = "AD"
    approval_date_ad: Optional[str] = None
    approval_date_bs: Optional[str] = None
    posting_date_ad: Optional[str] = None
    posting_date_bs: Optional[str] = None
    announcement_type: Optional[str] = None
    notes: Optional[str] = None


class ExperiencePayload(_PayloadModel):
    min_years: Optional[Number] = None
    preferred_years: Optional[Number] = None
    domains: list[str] = Field(default_factory=list)


class TagsPayload(_PayloadModel):
    skills: list[str] = Field(default_factory=list)
    education_requirements: list[str] = Field(default_factory=list)
    experience_requirements: ExperiencePayload = Field(default_factory=ExperiencePayload)
    canonical_title_ids: list[int] = Field(default_factory=list)
    canonical_title_names: list[str] = Field(default_factory=list)


class ExpensePayload(_PayloadModel):
    type: str
    who_pays: str
    is_free: bool
    amount: Optional[Number] = None
    currency: Optional[str] = None
    notes: Optional[str] = None


class InterviewPayload(_PayloadModel):
    date_format: str = "AD"
    date_ad: Optional[str] = None
    date_bs: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    contact_person: Optional[str] = None
    required_documents: list[str] = Field(default_factory=list)
    notes: Optional[str] = None
    expenses: list[ExpensePayload] = Field(default_factory=list)


class CutoutPayload(_PayloadModel):
    has_file: bool
    is_uploaded: bool
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    file_type: Optional[str] = None
    uploaded_url: Optional[str] = None


class PublishPayload(_PayloadModel):
    """Shape accepted by ``create``/``update`` when a draft is published."""

    posting_title: str
    country: Optional[str] = None
    employer: Optional[str] = None
    contract: ContractPayload
    positions: list[PositionPayload] = Field(default_factory=list)
    administrative_details: AdministrativePayload
    tags_and_requirements: TagsPayload
    expenses: list[ExpensePayload] = Field(default_factory=list)
    interview: Optional[InterviewPayload] = None
    cutout: Optional[CutoutPayload] = None

    def to_wire(self) -> dict[str, object]:
        """Return a JSON-ready dict that keeps explicit ``None`` values."""

        return self.model_dump(mode="json")
