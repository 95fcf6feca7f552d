"""Tests for the client, project and collaborator rollup."""

from decimal import Decimal

import pendulum

from factories import client_row, project_row, timesheet_row, user_row
from tidemark.mapper.dispatch import map_record
from tidemark.model.entity_type import EntityType
from tidemark.model.rollup import RollupFilter
from tidemark.model.snapshot import StoreSnapshot
from tidemark.repository.entity_store import EntityStore
from tidemark.service.rollup import compute_rollup, entry_matches, report_rows

JANUARY: RollupFilter = {
    "start_date": pendulum.date(2024, 1, 1),
    "end_date": pendulum.date(2024, 1, 31),
}


def _entry(id, user_id, project_id, client_id, hours, date="2024-01-10"):
    return map_record(
        EntityType.TIMESHEET_ENTRY,
        timesheet_row(id, user_id, 1, project_id, client_id, date, hours),
    )


def test_example_rollup(snapshot):
    rollup = compute_rollup(snapshot, JANUARY)

    assert rollup["entry_count"] == 3
    assert rollup["hours"] == Decimal(12)
    assert rollup["value"] == Decimal(900)

    [client] = rollup["clients"]
    assert client["client_name"] == "ClientA"
    assert client["hours"] == Decimal(12)
    assert client["value"] == Decimal(900)

    project_x, project_y = client["projects"]
    assert project_x["project_name"] == "ProjectX"
    assert project_x["hours"] == Decimal(10)
    assert project_x["value"] == Decimal(800)
    assert project_x["budget"] == Decimal(1000)
    assert project_x["effective_hourly_rate"] == Decimal(100)
    shares = {line["user_name"]: line["share"] for line in project_x["collaborators"]}
    assert shares == {"Ana": Decimal(40), "Bruno": Decimal(60)}

    assert project_y["project_name"] == "ProjectY"
    assert project_y["hours"] == Decimal(2)
    assert project_y["value"] == Decimal(100)


def test_apportioned_budget(snapshot):
    rollup = compute_rollup(snapshot, JANUARY)
    project_x = rollup["clients"][0]["projects"][0]

    apportioned = {line["user_id"]: line["apportioned_budget"] for line in project_x["collaborators"]}

    assert apportioned == {"100": Decimal(400), "101": Decimal(600)}


def test_totals_are_exact_sums_of_children():
    entries = [
        _entry(1, "100", "10", "1", "0.1"),
        _entry(2, "100", "10", "1", "0.2"),
        _entry(3, "101", "10", "1", "1,7"),
        _entry(4, "100", "11", "2", "0.3333"),
    ]
    users = [map_record(EntityType.USER, user_row(100, "Ana", "33.3")), map_record(EntityType.USER, user_row(101, "Bruno", 7))]
    snapshot = StoreSnapshot(generation=1, users=tuple(users), timesheet_entries=tuple(entries))

    rollup = compute_rollup(snapshot, JANUARY)

    assert rollup["hours"] == sum((c["hours"] for c in rollup["clients"]), Decimal(0))
    assert rollup["value"] == sum((c["value"] for c in rollup["clients"]), Decimal(0))
    for client in rollup["clients"]:
        assert client["hours"] == sum((p["hours"] for p in client["projects"]), Decimal(0))
        assert client["value"] == sum((p["value"] for p in client["projects"]), Decimal(0))
        for project in client["projects"]:
            assert project["hours"] == sum((c["hours"] for c in project["collaborators"]), Decimal(0))
            assert project["value"] == sum((c["value"] for c in project["collaborators"]), Decimal(0))
    assert rollup["hours"] == Decimal("2.3333")


def test_shares_sum_to_one_hundred():
    entries = [_entry(i, str(100 + i), "10", "1", 1) for i in range(3)]
    snapshot = StoreSnapshot(generation=1, timesheet_entries=tuple(entries))

    project = compute_rollup(snapshot, JANUARY)["clients"][0]["projects"][0]
    total_share = sum((line["share"] for line in project["collaborators"]), Decimal(0))

    assert abs(total_share - 100) < Decimal("1e-20")


def test_zero_hours_never_divides_by_zero():
    project = map_record(EntityType.PROJECT, project_row(10, 1, budget=500))
    snapshot = StoreSnapshot(
        generation=1,
        projects=(project,),
        timesheet_entries=(_entry(1, "100", "10", "1", 0),),
    )

    project_line = compute_rollup(snapshot, JANUARY)["clients"][0]["projects"][0]

    assert project_line["hours"] == Decimal(0)
    assert project_line["effective_hourly_rate"] is None
    assert project_line["collaborators"][0]["share"] == Decimal(0)
    assert project_line["collaborators"][0]["apportioned_budget"] is None


def test_unknown_user_is_valued_at_zero_and_flagged():
    snapshot = StoreSnapshot(
        generation=1, timesheet_entries=(_entry(1, "999", "10", "1", 3),)
    )

    rollup = compute_rollup(snapshot, JANUARY)
    line = rollup["clients"][0]["projects"][0]["collaborators"][0]

    assert line["value"] == Decimal(0)
    assert line["cost_resolved"] is False
    assert line["hourly_cost"] is None
    assert rollup["unresolved_hours"] == Decimal(3)


def test_zero_cost_user_is_resolved():
    user = map_record(EntityType.USER, user_row(100, "Intern", 0))
    snapshot = StoreSnapshot(
        generation=1, users=(user,), timesheet_entries=(_entry(1, "100", "10", "1", 3),)
    )

    rollup = compute_rollup(snapshot, JANUARY)
    line = rollup["clients"][0]["projects"][0]["collaborators"][0]

    assert line["value"] == Decimal(0)
    assert line["cost_resolved"] is True
    assert rollup["unresolved_hours"] == Decimal(0)


def test_unresolved_client_and_project_use_raw_ids():
    snapshot = StoreSnapshot(
        generation=1, timesheet_entries=(_entry(1, "100", "77", "88", 2),)
    )

    client = compute_rollup(snapshot, JANUARY)["clients"][0]

    assert client["client_name"] == "88"
    assert client["projects"][0]["project_name"] == "77"
    assert client["projects"][0]["budget"] is None


def test_entries_are_attributed_by_their_own_keys_after_task_delete(raw_tables):
    store = EntityStore()
    for row in raw_tables["dim_clientes"]:
        store.apply_upsert(EntityType.CLIENT, map_record(EntityType.CLIENT, row))
    store.apply_upsert(EntityType.TIMESHEET_ENTRY, _entry(1, "100", "10", "1", 5))
    store.apply_delete(EntityType.TASK, "1")

    rollup = compute_rollup(store.snapshot(), JANUARY)

    assert rollup["hours"] == Decimal(5)


def test_date_range_is_inclusive_and_undated_entries_never_match():
    entries = (
        _entry(1, "100", "10", "1", 1, "2024-01-01"),
        _entry(2, "100", "10", "1", 1, "2024-01-31"),
        _entry(3, "100", "10", "1", 1, "2024-02-01"),
        _entry(4, "100", "10", "1", 1, None),
    )
    snapshot = StoreSnapshot(generation=1, timesheet_entries=entries)

    rollup = compute_rollup(snapshot, JANUARY)

    assert rollup["entry_count"] == 2
    assert rollup["hours"] == Decimal(2)


def test_id_filters(snapshot):
    by_collaborator = compute_rollup(snapshot, {**JANUARY, "collaborator_ids": ["101"]})
    by_project = compute_rollup(snapshot, {**JANUARY, "project_ids": ["11"]})
    by_client = compute_rollup(snapshot, {**JANUARY, "client_ids": ["2"]})
    unrestricted = compute_rollup(snapshot, {**JANUARY, "client_ids": []})

    assert by_collaborator["hours"] == Decimal(6)
    assert by_project["hours"] == Decimal(2)
    assert by_client["clients"] == []
    assert unrestricted["hours"] == Decimal(12)


def test_entry_matches_filters_on_every_key(snapshot):
    entry = snapshot.timesheet_entries[0]

    assert entry_matches(entry, JANUARY)
    assert not entry_matches(entry, {**JANUARY, "project_ids": ["11"]})


def test_empty_snapshot_gives_zeroed_totals():
    rollup = compute_rollup(StoreSnapshot(generation=0), JANUARY)

    assert rollup["hours"] == Decimal(0)
    assert rollup["value"] == Decimal(0)
    assert rollup["unresolved_hours"] == Decimal(0)
    assert rollup["clients"] == []


def test_report_rows_flatten_the_rollup(snapshot):
    rows = report_rows(compute_rollup(snapshot, JANUARY))

    assert len(rows) == 3
    assert {(row["project_name"], row["user_name"]) for row in rows} == {
        ("ProjectX", "Ana"),
        ("ProjectX", "Bruno"),
        ("ProjectY", "Ana"),
    }
    assert all(row["client_name"] == "ClientA" for row in rows)
    project_x_row = next(row for row in rows if row["project_name"] == "ProjectX")
    assert project_x_row["project_hours"] == Decimal(10)
    assert project_x_row["effective_hourly_rate"] == Decimal(100)


def test_rollup_carries_snapshot_generation(loaded_store):
    before = compute_rollup(loaded_store.snapshot(), JANUARY)
    loaded_store.apply_upsert(
        EntityType.CLIENT, map_record(EntityType.CLIENT, client_row(1, "Renamed"))
    )
    after = compute_rollup(loaded_store.snapshot(), JANUARY)

    assert after["generation"] == before["generation"] + 1
    assert after["clients"][0]["client_name"] == "Renamed"
