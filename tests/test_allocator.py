"""Tests for the allocation mutator and available-option derivation."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from data.roster import RosterCache
from data.store import InMemoryStore, StoreError
from engine.allocator import (
    apply_field, clear_field, assign, assign_all, available_seats, available_devices, available_tables,
)
from engine.occupancy import summarize
from models.assignment import TableAssignment, SeatAssignment, DeviceAssignment
from models.directory import ResourceDirectory
from models.outcome import AssignmentOk, AssignmentConflict, AssignmentRejected, StoreFailure
from models.person import Person


def make_row(pid, name, mesa=None, puesto=None, tablet=None, activo=True):
    return {"id": pid, "nombre": name, "rol": "Catador", "mesa": mesa, "puesto": puesto,
            "tablet": tablet, "activo": activo}


def make_store(*rows):
    return InMemoryStore({"usuarios": list(rows)})


class FailingUpdateStore(InMemoryStore):
    """Reads work, every update is rejected."""

    def __init__(self, tables=None):
        super().__init__(tables)
        self.update_calls = 0

    def update(self, collection, patch, filters):
        self.update_calls += 1
        raise StoreError("permission denied", status_code=403)


class TestApplyField:
    def test_round_trip(self):
        store = make_store(make_row("a", "Ana"))
        cache = RosterCache(store)

        result = apply_field(store, "a", TableAssignment(3))
        assert isinstance(result, AssignmentOk)

        cache.refresh()
        assert cache.get("a").mesa == 3

    def test_only_target_row_changes(self):
        store = make_store(make_row("a", "Ana"), make_row("b", "Bea"))
        apply_field(store, "a", DeviceAssignment("4"))

        rows = {r["id"]: r for r in store.select("usuarios")}
        assert rows["a"]["tablet"] == "4"
        assert rows["b"]["tablet"] is None

    def test_seat_out_of_range_never_reaches_store(self):
        store = FailingUpdateStore({"usuarios": [make_row("a", "Ana", mesa=1)]})
        result = apply_field(store, "a", SeatAssignment(6))

        assert isinstance(result, AssignmentRejected)
        assert store.update_calls == 0

    def test_store_error_becomes_failure(self):
        store = FailingUpdateStore({"usuarios": [make_row("a", "Ana")]})
        result = apply_field(store, "a", SeatAssignment(2))

        assert isinstance(result, StoreFailure)
        assert "permission denied" in result.error
        assert store.update_calls == 1  # no retry


class TestClearField:
    def test_clears_every_person(self):
        # Scenario C
        rows = [make_row(f"p{i}", f"P{i}", mesa=i % 4 + 1, puesto=i % 5 + 1) for i in range(10)]
        store = make_store(*rows)

        count = clear_field(store, "mesa")
        assert count == 10

        roster = RosterCache(store).refresh()
        assert all(p.mesa is None for p in roster)
        # Seats are untouched
        assert all(p.puesto is not None for p in roster)

        summary = summarize(roster, 5)
        assert summary.empty_count == 5
        assert summary.complete_count == 0
        assert summary.partial_count == 0

    def test_idempotent(self):
        store = make_store(make_row("a", "Ana", tablet="1"), make_row("b", "Bea", tablet="2"))
        clear_field(store, "tablet")
        once = store.select("usuarios", order="id")
        clear_field(store, "tablet")
        twice = store.select("usuarios", order="id")

        assert once == twice
        assert all(r["tablet"] is None for r in twice)

    def test_unknown_field_rejected(self):
        store = make_store(make_row("a", "Ana"))
        with pytest.raises(ValueError):
            clear_field(store, "nombre")


class TestAssign:
    def test_successful_assign_refreshes_cache(self):
        store = make_store(make_row("a", "Ana", mesa=1))
        cache = RosterCache(store)
        cache.refresh()
        generation = cache.generation

        result = assign(cache, "a", SeatAssignment(2))

        assert isinstance(result, AssignmentOk)
        assert cache.generation > generation
        assert cache.get("a").puesto == 2
        assert not cache.is_stale

    def test_conflict_does_not_write_and_refreshes(self):
        store = make_store(make_row("x", "X", mesa=1, puesto=1), make_row("y", "Y", mesa=1))
        cache = RosterCache(store)
        cache.refresh()
        generation = cache.generation

        result = assign(cache, "y", SeatAssignment(1))

        assert isinstance(result, AssignmentConflict)
        assert result.conflicting_person_name == "X"
        assert cache.generation > generation
        assert cache.get("y").puesto is None

    def test_conflict_written_behind_our_back_is_seen_after_refresh(self):
        store = make_store(make_row("x", "X", mesa=1), make_row("y", "Y", mesa=1))
        cache = RosterCache(store)
        cache.refresh()

        # Another session takes seat 3 for X
        store.update("usuarios", {"puesto": 3}, [("id", "eq", "x")])
        cache.invalidate()

        result = assign(cache, "y", SeatAssignment(3))
        assert isinstance(result, AssignmentConflict)

    def test_device_scenario(self):
        # Scenario B end to end
        store = make_store(make_row("z", "Z"), make_row("w", "W"))
        cache = RosterCache(store)

        assert isinstance(assign(cache, "z", DeviceAssignment("7")), AssignmentOk)
        second = assign(cache, "w", DeviceAssignment("7"))
        assert isinstance(second, AssignmentConflict)
        assert second.conflicting_person_name == "Z"

    def test_store_failure_refreshes(self):
        store = FailingUpdateStore({"usuarios": [make_row("a", "Ana", mesa=1)]})
        cache = RosterCache(store)
        cache.refresh()
        generation = cache.generation

        result = assign(cache, "a", SeatAssignment(2))

        assert isinstance(result, StoreFailure)
        assert cache.generation > generation
        assert cache.get("a").puesto is None

    def test_rejected_with_directory(self):
        store = make_store(make_row("a", "Ana"))
        cache = RosterCache(store)
        result = assign(cache, "a", TableAssignment(9), ResourceDirectory(table_count=5))
        assert isinstance(result, AssignmentRejected)
        assert store.select("usuarios")[0]["mesa"] is None


class TestAssignAll:
    def test_all_fields_written(self):
        store = make_store(make_row("a", "Ana"))
        cache = RosterCache(store)
        outcomes = assign_all(cache, "a", [TableAssignment(2), SeatAssignment(4), DeviceAssignment("9")])

        assert all(o.ok for o in outcomes)
        assert cache.get("a").seat_pair == (2, 4)
        assert cache.get("a").tablet == "9"

    def test_stops_at_conflict_and_keeps_earlier_writes(self):
        store = make_store(make_row("x", "X", mesa=2, puesto=4), make_row("a", "Ana", mesa=1))
        cache = RosterCache(store)
        outcomes = assign_all(cache, "a", [TableAssignment(2), SeatAssignment(4), DeviceAssignment("9")])

        assert len(outcomes) == 2
        assert outcomes[0].ok
        assert isinstance(outcomes[1], AssignmentConflict)
        assert outcomes[1].conflicting_person_name == "X"
        person = cache.get("a")
        assert person.mesa == 2
        assert person.puesto is None
        assert person.tablet is None

    def test_nothing_to_do(self):
        assert assign_all(RosterCache(make_store(make_row("a", "Ana"))), "a", []) == []


class TestAvailableOptions:
    def roster(self):
        return [
            Person(id="a", nombre="A", mesa=1, puesto=1, tablet="1"),
            Person(id="b", nombre="B", mesa=1, puesto=3, tablet="2"),
            Person(id="c", nombre="C", mesa=2, puesto=1),
            Person(id="d", nombre="D", mesa=1, puesto=4, activo=False),
        ]

    def test_seats_exclude_other_occupants(self):
        assert available_seats(self.roster(), 1) == [2, 4, 5]

    def test_own_seat_is_always_offered(self):
        seats = available_seats(self.roster(), 1, exclude_person_id="b")
        assert 3 in seats
        assert 1 not in seats

    def test_own_seat_kept_when_duplicated(self):
        roster = [
            Person(id="p", nombre="P", mesa=1, puesto=3),
            Person(id="q", nombre="Q", mesa=1, puesto=3),
        ]
        seats = available_seats(roster, 1, exclude_person_id="p")
        assert seats == [1, 2, 3, 4, 5]
        # Nobody else gets the doubled seat
        assert 3 not in available_seats(roster, 1)

    def test_empty_table_offers_all_seats(self):
        assert available_seats(self.roster(), 5) == [1, 2, 3, 4, 5]

    def test_devices_exclude_others_keep_own(self):
        slots = ["1", "2", "3"]
        assert available_devices(self.roster(), slots) == ["3"]
        assert available_devices(self.roster(), slots, exclude_person_id="a") == ["1", "3"]

    def test_own_device_outside_pool_still_offered(self):
        roster = [Person(id="a", nombre="A", tablet="99")]
        assert available_devices(roster, ["1"], exclude_person_id="a") == ["1", "99"]

    def test_tables_follow_directory(self):
        assert available_tables(ResourceDirectory(table_count=3)) == [1, 2, 3]
