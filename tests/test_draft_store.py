import pytest

from core.errors import DraftStoreError
from state.draft_store import InMemoryDraftStore


def test_create_assigns_id_and_status(store):
    stored = store.create({"id": "ignored", "title": "Cooks"})

    assert stored["id"] != "ignored"
    assert stored["status"] == "draft"
    assert store.get(stored["id"])["title"] == "Cooks"


def test_update_merges_partial_record(store):
    stored = store.create({"title": "Cooks", "employer": "Hotel"})
    updated = store.update(stored["id"], {"title": "Chefs"})

    assert updated["title"] == "Chefs"
    assert updated["employer"] == "Hotel"
    assert updated["created_at"] == stored["created_at"]


def test_returned_records_are_copies(store):
    stored = store.create({"tags": {"skills": ["Cooking"]}})
    stored["tags"]["skills"].append("Driving")

    assert store.get(stored["id"])["tags"]["skills"] == ["Cooking"]


def test_missing_draft_raises_not_found(store):
    with pytest.raises(DraftStoreError) as excinfo:
        store.update("nope", {})

    assert excinfo.value.status_code == 404
    assert excinfo.value.operation == "update"


def test_published_draft_rejects_updates(store):
    stored = store.create({"title": "Cooks"})
    store.publish(stored["id"])

    with pytest.raises(DraftStoreError) as excinfo:
        store.update(stored["id"], {"title": "Chefs"})
    assert excinfo.value.status_code == 409


def test_delete_and_list():
    store = InMemoryDraftStore(records=[{"id": "a", "title": "A"}, {"id": "b", "title": "B"}])
    store.delete("a")

    assert [record["id"] for record in store.list()] == ["b"]
    assert ("delete", "a") in store.calls


def test_injected_failure_applies_once(store):
    store.fail_next()

    with pytest.raises(DraftStoreError):
        store.list()
    assert store.list() == []
