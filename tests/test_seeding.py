import logging

import pytest

from constants.flow_mode import FlowMode
from core.errors import PublishedDraftError
from models.draft import DraftRecord
from wizard.entries import LocalIdAllocator
from wizard.seeding import (
    GENERAL_WORKER_TITLE,
    expand_bulk_draft,
    new_bulk_draft,
    new_single_draft,
    seed_from_record,
)


def test_new_drafts_have_one_blank_entry():
    allocator = LocalIdAllocator()

    single = new_single_draft(allocator)
    bulk = new_bulk_draft(allocator)

    assert single.positions[0].id == 1 and single.positions[0].title is None
    assert bulk.bulk_entries[0].id == 2
    assert bulk.is_bulk


def test_expansion_drops_extra_entries(bulk_payload, caplog):
    record = DraftRecord.model_validate(bulk_payload)
    with caplog.at_level(logging.INFO):
        draft = expand_bulk_draft(record, LocalIdAllocator.for_draft(record))

    assert len(draft.positions) == 1
    assert draft.title == "Cook"
    assert draft.employer == "Multiple Companies"
    assert draft.administrative.notes == "Hiring for several clients"
    assert draft.positions[0].notes == "Expanded from bulk draft: Gulf hiring round"
    assert "1 entry not carried over" in caplog.text


def test_expansion_defaults_without_position_or_count():
    record = DraftRecord.model_validate(
        {"id": "b", "kind": "bulk", "title": "Round 2", "bulk_entries": [{"id": 1, "country": "Oman"}]}
    )
    draft = expand_bulk_draft(record, LocalIdAllocator.for_draft(record))

    assert draft.title == "Round 2"
    assert draft.positions[0].title == GENERAL_WORKER_TITLE
    assert draft.positions[0].vacancies_male == 1


def test_seed_rejects_published(make_payload):
    record = DraftRecord.model_validate(make_payload(status="published"))

    with pytest.raises(PublishedDraftError) as excinfo:
        seed_from_record(record, LocalIdAllocator())
    assert excinfo.value.draft_id == "draft-1"


def test_seed_ignores_hint_of_complete_draft(make_payload):
    record = DraftRecord.model_validate(make_payload(last_completed_step=4))
    seed = seed_from_record(record, LocalIdAllocator.for_draft(record))

    assert seed.flow is FlowMode.SINGLE
    assert seed.step_index == 0
