from datetime import date
from pathlib import Path
import sys
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from models.draft import DraftRecord  # noqa: E402
from state.draft_store import InMemoryDraftStore  # noqa: E402


def valid_single_payload(**overrides: Any) -> dict[str, Any]:
    """Return a single draft whose first six steps all pass validation."""

    payload: dict[str, Any] = {
        "id": "draft-1",
        "kind": "single",
        "title": "Security Guards for Dubai Mall",
        "employer": "Emirates Security LLC",
        "administrative": {
            "country": "United Arab Emirates",
            "city": "Dubai",
            "lt_number": "LT-2024-001",
            "chalani_number": "CH-2024-001",
            "date_format": "AD",
            "approval_date_ad": "2024-05-01",
            "posting_date_ad": "2024-05-03",
            "announcement_type": "newspaper",
        },
        "contract": {
            "period_years": 2,
            "renewable": True,
            "hours_per_day": 8,
            "days_per_week": 6,
            "overtime_policy": "paid",
            "weekly_off_days": 1,
            "food": "free",
            "accommodation": "free",
            "transport": "paid",
            "annual_leave_days": 21,
        },
        "positions": [
            {
                "id": 1,
                "title": "Security Guard",
                "vacancies_male": 10,
                "vacancies_female": 2,
                "monthly_salary": 2200,
                "currency": "AED",
            },
            {
                "id": 2,
                "title": "Supervisor",
                "vacancies_male": 1,
                "vacancies_female": 0,
                "monthly_salary": 3500,
                "currency": "AED",
                "overrides": {"hours_per_day": 10},
            },
        ],
        "tags": {
            "skills": ["Security", "English Communication"],
            "education_requirements": ["Class 10"],
            "experience": {"min_years": 1, "preferred_years": 2, "domains": ["Security"]},
            "canonical_title_ids": [1],
            "canonical_title_names": ["Security Guard"],
        },
        "expenses": [
            {"id": 3, "type": "visa", "payer": "company", "is_free": True},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_payload():
    return valid_single_payload


@pytest.fixture
def single_payload() -> dict[str, Any]:
    return valid_single_payload()


@pytest.fixture
def single_draft(single_payload: dict[str, Any]) -> DraftRecord:
    return DraftRecord.model_validate(single_payload)


@pytest.fixture
def publishable_draft(single_payload: dict[str, Any]) -> DraftRecord:
    single_payload["cutout"] = {"file_name": "advert.png", "file_size": 2048, "file_type": "image/png"}
    single_payload["interview"] = {"date_ad": date(2024, 6, 1).isoformat(), "time": "10:00 AM"}
    return DraftRecord.model_validate(single_payload)


@pytest.fixture
def bulk_payload() -> dict[str, Any]:
    return {
        "id": "bulk-1",
        "kind": "bulk",
        "title": "Gulf hiring round",
        "employer": "Multiple Companies",
        "description": "Hiring for several clients",
        "bulk_entries": [
            {"id": 1, "country": "UAE", "job_count": 10, "position": "Cook"},
            {"id": 2, "country": "Malaysia", "job_count": 5, "position": "Driver"},
        ],
    }


@pytest.fixture
def store() -> InMemoryDraftStore:
    return InMemoryDraftStore()

