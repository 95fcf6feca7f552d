"""Tests for the in-memory entity store."""

import dataclasses
import threading

import pytest

from factories import client_row, task_row, user_row
from tidemark.error import UnknownEntityKindError
from tidemark.mapper.dispatch import map_record
from tidemark.model.entity_type import ENTITY_TYPES, EntityType
from tidemark.repository.entity_store import EntityStore


def _task(id, **extra):
    return map_record(EntityType.TASK, task_row(id, **extra))


def _client(id, name="ClientA"):
    return map_record(EntityType.CLIENT, client_row(id, name))


def test_new_store_is_empty():
    store = EntityStore()

    assert store.generation == 0
    for kind in ENTITY_TYPES:
        assert store.count(kind) == 0
        assert store.all(kind) == []


def test_upsert_is_idempotent():
    store = EntityStore()
    task = _task(1)

    store.apply_upsert(EntityType.TASK, task)
    first = store.all(EntityType.TASK)
    store.apply_upsert(EntityType.TASK, task)

    assert store.all(EntityType.TASK) == first
    assert store.count(EntityType.TASK) == 1


def test_delete_before_insert_is_a_no_op():
    store = EntityStore()

    assert store.apply_delete(EntityType.TASK, "1") is False
    assert store.generation == 0

    store.apply_upsert(EntityType.TASK, _task(1))
    assert store.get(EntityType.TASK, "1") is not None


def test_delete_removes_record():
    store = EntityStore()
    store.apply_upsert(EntityType.CLIENT, _client(1))

    assert store.apply_delete(EntityType.CLIENT, "1") is True
    assert store.get(EntityType.CLIENT, "1") is None


def test_new_tasks_are_prepended_other_kinds_appended():
    store = EntityStore()
    store.apply_upsert(EntityType.TASK, _task(1))
    store.apply_upsert(EntityType.TASK, _task(2))
    store.apply_upsert(EntityType.CLIENT, _client(1))
    store.apply_upsert(EntityType.CLIENT, _client(2))

    assert [t["id"] for t in store.all(EntityType.TASK)] == ["2", "1"]
    assert [c["id"] for c in store.all(EntityType.CLIENT)] == ["1", "2"]


def test_update_keeps_position():
    store = EntityStore()
    store.bulk_replace(EntityType.CLIENT, [_client(1), _client(2), _client(3)])

    store.apply_upsert(EntityType.CLIENT, _client(2, "Renamed"))

    clients = store.all(EntityType.CLIENT)
    assert [c["id"] for c in clients] == ["1", "2", "3"]
    assert clients[1]["name"] == "Renamed"


def test_bulk_replace_preserves_incoming_order():
    store = EntityStore()
    store.apply_upsert(EntityType.CLIENT, _client(9))

    store.bulk_replace(EntityType.CLIENT, [_client(3), _client(1)])

    assert [c["id"] for c in store.all(EntityType.CLIENT)] == ["3", "1"]


def test_reads_return_copies():
    store = EntityStore()
    store.apply_upsert(EntityType.CLIENT, _client(1))

    store.get(EntityType.CLIENT, "1")["name"] = "Mutated"
    store.all(EntityType.CLIENT)[0]["name"] = "Mutated"

    assert store.get(EntityType.CLIENT, "1")["name"] == "ClientA"


def test_snapshot_is_isolated_from_later_mutations():
    store = EntityStore()
    store.apply_upsert(EntityType.CLIENT, _client(1))
    snapshot = store.snapshot()

    store.apply_upsert(EntityType.CLIENT, _client(1, "Renamed"))
    store.apply_upsert(EntityType.CLIENT, _client(2))

    assert snapshot.generation == 1
    assert [c["name"] for c in snapshot.clients] == ["ClientA"]
    assert snapshot.client("1")["name"] == "ClientA"
    assert snapshot.client("2") is None
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.generation = 5  # type: ignore[misc]


def test_snapshots_do_not_share_records():
    store = EntityStore()
    store.apply_upsert(EntityType.CLIENT, _client(1))
    first = store.snapshot()
    second = store.snapshot()

    first.clients[0]["name"] = "Edited by a reader"

    assert second.clients[0]["name"] == "ClientA"
    assert store.get(EntityType.CLIENT, "1")["name"] == "ClientA"
    assert store.snapshot().client("1")["name"] == "ClientA"


def test_snapshot_table_by_kind():
    store = EntityStore()
    store.apply_upsert(EntityType.USER, map_record(EntityType.USER, user_row(100)))

    snapshot = store.snapshot()

    assert snapshot.table(EntityType.USER) == snapshot.users
    with pytest.raises(UnknownEntityKindError):
        snapshot.table("invoice")


def test_unknown_kind_raises():
    store = EntityStore()

    with pytest.raises(UnknownEntityKindError):
        store.apply_upsert("invoice", {"id": "1"})
    with pytest.raises(UnknownEntityKindError):
        store.count("invoice")


def test_listeners_are_notified_until_unsubscribed():
    store = EntityStore()
    calls = []
    unsubscribe = store.subscribe(lambda kind, generation: calls.append((kind, generation)))

    store.apply_upsert(EntityType.CLIENT, _client(1))
    store.apply_delete(EntityType.CLIENT, "1")
    unsubscribe()
    store.apply_upsert(EntityType.CLIENT, _client(2))

    assert calls == [(EntityType.CLIENT, 1), (EntityType.CLIENT, 2)]


def test_failing_listener_does_not_break_the_store(caplog):
    store = EntityStore()

    def broken(kind, generation):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.apply_upsert(EntityType.CLIENT, _client(1))

    assert store.count(EntityType.CLIENT) == 1
    assert "Store listener failed" in caplog.text


def test_delete_matching():
    store = EntityStore()
    store.bulk_replace(EntityType.CLIENT, [_client(1), _client(2, "Other"), _client(3)])

    removed = store.apply_delete_matching(EntityType.CLIENT, lambda c: c["name"] == "ClientA")

    assert removed == 2
    assert [c["id"] for c in store.all(EntityType.CLIENT)] == ["2"]


def test_snapshots_are_never_torn():
    store = EntityStore()
    store.bulk_replace(EntityType.CLIENT, [_client(i) for i in range(50)])
    stop = threading.Event()

    def writer():
        i = 0
        while not stop.is_set():
            store.bulk_replace(EntityType.CLIENT, [_client(j, f"gen{i}") for j in range(50)])
            i += 1

    thread = threading.Thread(target=writer)
    thread.start()
    try:
        for _ in range(50):
            snapshot = store.snapshot()
            assert len(snapshot.clients) == 50
            assert len({c["name"] for c in snapshot.clients}) == 1
    finally:
        stop.set()
        thread.join()
