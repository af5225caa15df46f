"""Partial-save ("save & exit") records and stored-record parsing."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from core.validators import coerce_int
from models.draft import DraftRecord, DraftStatus

logger = logging.getLogger(__name__)

PartialRecord = dict[str, Any]


def build_partial_record(draft: DraftRecord, *, step_index: int | None) -> PartialRecord:
    """Return the storage payload for a draft saved before completion.

    ``last_completed_step`` records ``step_index`` as a resume hint only; the
    progress badge is always recomputed from the content.
    """

    record = draft.to_storage()
    record["is_partial"] = True
    record["last_completed_step"] = coerce_int(step_index)
    record["saved_at"] = datetime.now(timezone.utc).isoformat()
    return record


def _unwrap(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    # Exports may wrap the record as {"draft": {...}} or {"data": {...}}.
    for key in ("draft", "data"):
        candidate = payload.get(key)
        if isinstance(candidate, Mapping) and "id" not in payload:
            return candidate
    return payload


def is_published_record(payload: Mapping[str, Any]) -> bool:
    """Return ``True`` when the stored ``status`` says published, readable or not."""

    status = _unwrap(payload).get("status")
    return isinstance(status, str) and status.strip().lower() == DraftStatus.PUBLISHED.value


def _ids_in_use(record: Mapping[str, Any]) -> Iterable[int | None]:
    interview = record.get("interview")
    groups = [record.get("positions"), record.get("expenses"), record.get("bulk_entries")]
    if isinstance(interview, Mapping):
        groups.append(interview.get("expenses"))
    for group in groups:
        for item in group or ():
            if isinstance(item, Mapping):
                yield coerce_int(item.get("id"))


class _IdSequence:
    def __init__(self, record: Mapping[str, Any]) -> None:
        self._last = max((value for value in _ids_in_use(record) if value is not None), default=0)

    def ensure(self, item: object) -> object:
        if not isinstance(item, Mapping):
            return item
        entry = dict(item)
        if coerce_int(entry.get("id")) is None:
            self._last += 1
            entry["id"] = self._last
        return entry


def _section(value: object) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _position_from_payload(item: Mapping[str, Any]) -> dict[str, Any]:
    if not any(key in item for key in ("vacancies", "salary", "contract_overrides")):
        return dict(item)
    vacancies = _section(item.get("vacancies"))
    salary = _section(item.get("salary"))
    position = {
        "title": item.get("title"),
        "vacancies_male": vacancies.get("male"),
        "vacancies_female": vacancies.get("female"),
        "monthly_salary": salary.get("monthly_amount"),
        "overrides": item.get("contract_overrides") or {},
        "notes": item.get("notes"),
    }
    if salary.get("currency"):
        position["currency"] = salary["currency"]
    if "id" in item:
        position["id"] = item["id"]
    return position


def map_backend_record(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``payload`` in the draft model's shape.

    Publishing stores the publish payload (``posting_title``,
    ``administrative_details``, nested ``vacancies``/``salary`` per position,
    expenses without local ids). Those keys are folded back into the draft
    fields and missing local ids are numbered after the highest one in use.
    Records already in draft shape pass through unchanged.
    """

    record = dict(payload)
    if not record.get("title") and record.get("posting_title"):
        record["title"] = record["posting_title"]

    details = record.pop("administrative_details", None)
    if isinstance(details, Mapping):
        administrative = {**_section(record.get("administrative")), **details}
        if record.get("country") and not administrative.get("country"):
            administrative["country"] = record["country"]
        record["administrative"] = administrative

    tags = record.pop("tags_and_requirements", None)
    if isinstance(tags, Mapping):
        tags = dict(tags)
        if "experience_requirements" in tags:
            tags["experience"] = tags.pop("experience_requirements")
        record["tags"] = tags

    if record.get("interview", {}) is None:
        del record["interview"]
    cutout = record.get("cutout")
    if isinstance(cutout, Mapping):
        record["cutout"] = {key: value for key, value in cutout.items() if key != "has_file"}

    ids = _IdSequence(record)
    if isinstance(record.get("positions"), list):
        record["positions"] = [
            ids.ensure(_position_from_payload(item) if isinstance(item, Mapping) else item)
            for item in record["positions"]
        ]
    if isinstance(record.get("expenses"), list):
        record["expenses"] = [ids.ensure(item) for item in record["expenses"]]
    interview = record.get("interview")
    if isinstance(interview, Mapping) and isinstance(interview.get("expenses"), list):
        record["interview"] = {**interview, "expenses": [ids.ensure(item) for item in interview["expenses"]]}
    return record


def parse_stored_record(payload: Mapping[str, Any]) -> DraftRecord:
    """Parse a stored draft mapping into a :class:`DraftRecord`.

    Raises:
        pydantic.ValidationError: if the mapping does not describe a draft.
    """

    return DraftRecord.model_validate(map_backend_record(_unwrap(payload)))


def try_parse_stored_record(payload: Mapping[str, Any]) -> DraftRecord | None:
    """Return the parsed draft or ``None`` when the mapping is unreadable."""

    try:
        return parse_stored_record(payload)
    except ValidationError as exc:
        logger.warning("Skipping unreadable draft %s: %s", payload.get("id", "<unknown>"), exc)
        return None


def serialize_record(record: Mapping[str, Any]) -> bytes:
    """Return a JSON representation of ``record`` for download."""

    return json.dumps(record, ensure_ascii=False, indent=2, default=str).encode("utf-8")


__all__ = [
    "PartialRecord",
    "build_partial_record",
    "is_published_record",
    "map_backend_record",
    "parse_stored_record",
    "serialize_record",
    "try_parse_stored_record",
]
