import pytest
import requests

from src.boatrace.api_client import MissingWriteTokenError
from src.boatrace.models import ResultRecord


def test_initialize_loads_items(store, fake_session, make_payload, sample_items):
    fake_session.get_responses.append(make_payload(sample_items))

    store.initialize()

    assert len(store) == 3
    assert all(isinstance(r, ResultRecord) for r in store.all())
    assert store.find("1").type == "free"
    assert store.find("1").return_val == 1500


def test_initialize_failure_empties_collection(store, fake_session, make_payload, sample_items):
    fake_session.get_responses.extend([make_payload(sample_items), requests.ConnectionError("down")])
    store.initialize()
    assert len(store) == 3

    store.initialize()

    assert store.all() == []


@pytest.mark.parametrize("ok, items", [(False, [{"id": "1"}]), (True, None), (True, "oops")])
def test_initialize_rejects_bad_payloads(store, fake_session, make_payload, ok, items):
    fake_session.get_responses.append(make_payload(items, ok=ok))

    store.initialize()

    assert store.all() == []


def test_add_local_assigns_id_and_sorts(store):
    first = store.add_local({"date": "2024-01-01", "invest": 100, "returnVal": 0, "type": "free"})
    second = store.add_local({"date": "2024-02-01", "invest": 100, "returnVal": 300, "type": "paid"})

    assert first.id and second.id and first.id != second.id
    assert first.created_at
    assert [r.date for r in store.all()] == ["2024-02-01", "2024-01-01"]


def test_add_local_ignores_caller_id(store):
    record = store.add_local({"id": "mine", "date": "2024-01-01"})

    assert record.id != "mine"


def test_update_local(store):
    record = store.add_local({"date": "2024-01-01", "invest": 100, "returnVal": 0})
    store.add_local({"date": "2024-01-05", "invest": 100, "returnVal": 0})

    assert store.update_local(record.id, {"returnVal": 250, "date": "2024-02-01"}) is True
    updated = store.find(record.id)
    assert updated.return_val == 250
    assert updated.invest == 100
    assert store.all()[0].id == record.id

    assert store.update_local("missing", {"invest": 1}) is False


def test_remove_local(store):
    record = store.add_local({"date": "2024-01-01"})

    assert store.remove_local(record.id) is True
    assert store.remove_local(record.id) is False
    assert len(store) == 0


def test_sort_puts_unparseable_dates_last(store):
    store.add_local({"date": "???"})
    store.add_local({"date": "2024/1/2"})
    store.add_local({"date": "2024-01-10"})

    assert [r.date for r in store.all()] == ["2024-01-10", "2024/1/2", "???"]


def test_remote_write_without_token_raises(store, fake_session):
    with pytest.raises(MissingWriteTokenError):
        store.create_remote({"date": "2024-01-01"})
    assert fake_session.calls == []


def test_remote_write_replaces_collection_with_refetch(store, fake_session, make_payload):
    store.add_local({"date": "2024-01-01"})
    store.set_write_token("secret")
    fake_session.get_responses.append(make_payload([{"id": "srv-9", "date": "2024-01-01", "type": "有料"}]))

    assert store.create_remote({"date": "2024-01-01", "type": "paid"}) == {"ok": True}

    assert [r.id for r in store.all()] == ["srv-9"]
    assert store.all()[0].type == "paid"


def test_remote_write_refetch_failure_empties_collection(store, fake_session):
    store.add_local({"date": "2024-01-01"})
    store.set_write_token("secret")
    fake_session.post_error = requests.Timeout("slow")
    fake_session.get_responses.append(requests.ConnectionError("down"))

    assert store.delete_remote("1") == {"ok": True}
    assert store.all() == []


def test_update_remote_sends_id(store, fake_session, make_payload):
    store.set_write_token("secret")
    fake_session.get_responses.append(make_payload([]))

    store.update_remote("42", {"invest": 500}, kind="users")

    _, _, _, body = fake_session.calls[0]
    assert body["kind"] == "users"
    assert body["data"] == {"id": "42", "invest": 500}
