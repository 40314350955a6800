"""Tests for assignment conflict validation."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from models.person import Person
from models.directory import ResourceDirectory
from models.assignment import TableAssignment, SeatAssignment, DeviceAssignment
from models.outcome import AssignmentOk, AssignmentConflict, AssignmentRejected
from engine.validator import validate_assignment, find_roster_conflicts, check_domain


def make_person(pid="p1", name="Ana", mesa=None, puesto=None, tablet=None, activo=True, rol="Catador"):
    return Person(id=pid, nombre=name, rol=rol, mesa=mesa, puesto=puesto, tablet=tablet, activo=activo)


class TestValidateSeatAndTable:
    def test_same_seat_same_table_conflicts(self):
        # Scenario A
        roster = [
            make_person("x", "X", mesa=1, puesto=1),
            make_person("y", "Y", mesa=1),
        ]
        result = validate_assignment("y", SeatAssignment(1), roster)

        assert isinstance(result, AssignmentConflict)
        assert result.conflicting_person_name == "X"
        assert result.conflicting_person_id == "x"
        assert result.field == "puesto"

    def test_table_change_uses_current_seat(self):
        roster = [
            make_person("x", "X", mesa=2, puesto=3),
            make_person("y", "Y", mesa=1, puesto=3),
        ]
        result = validate_assignment("y", TableAssignment(2), roster)

        assert isinstance(result, AssignmentConflict)
        assert result.conflicting_person_name == "X"

    def test_conflict_is_symmetric(self):
        roster = [
            make_person("p", "P", mesa=4, puesto=2),
            make_person("q", "Q", mesa=4, puesto=5),
        ]
        p_moves = validate_assignment("p", SeatAssignment(5), roster)
        q_moves = validate_assignment("q", SeatAssignment(2), roster)

        assert p_moves.conflicting_person_name == "Q"
        assert q_moves.conflicting_person_name == "P"

    def test_free_seat_is_ok(self):
        roster = [
            make_person("x", "X", mesa=1, puesto=1),
            make_person("y", "Y", mesa=1),
        ]
        result = validate_assignment("y", SeatAssignment(2), roster)
        assert isinstance(result, AssignmentOk)
        assert result.value == 2

    def test_same_seat_other_table_is_ok(self):
        roster = [
            make_person("x", "X", mesa=1, puesto=1),
            make_person("y", "Y", mesa=2),
        ]
        assert validate_assignment("y", SeatAssignment(1), roster).ok

    def test_seat_without_table_never_conflicts(self):
        roster = [
            make_person("x", "X", mesa=1, puesto=1),
            make_person("y", "Y"),
        ]
        assert validate_assignment("y", SeatAssignment(1), roster).ok

    def test_keeping_own_seat_is_ok(self):
        roster = [make_person("x", "X", mesa=1, puesto=1)]
        assert validate_assignment("x", SeatAssignment(1), roster).ok
        assert validate_assignment("x", TableAssignment(1), roster).ok

    def test_inactive_holder_does_not_block(self):
        roster = [
            make_person("x", "X", mesa=1, puesto=1, activo=False),
            make_person("y", "Y", mesa=1),
        ]
        assert validate_assignment("y", SeatAssignment(1), roster).ok

    def test_unassigning_never_conflicts(self):
        roster = [
            make_person("x", "X", mesa=1, puesto=1),
            make_person("y", "Y", mesa=1, puesto=1),  # already inconsistent
        ]
        assert validate_assignment("y", SeatAssignment(None), roster).ok
        assert validate_assignment("y", TableAssignment(None), roster).ok

    def test_unknown_person_has_no_current_seat(self):
        roster = [make_person("x", "X", mesa=1, puesto=1)]
        assert validate_assignment("ghost", TableAssignment(1), roster).ok


class TestValidateDevice:
    def test_device_taken_conflicts(self):
        # Scenario B
        roster = [make_person("z", "Z"), make_person("w", "W")]
        first = validate_assignment("z", DeviceAssignment("7"), roster)
        assert isinstance(first, AssignmentOk)

        roster[0].tablet = "7"
        second = validate_assignment("w", DeviceAssignment("7"), roster)
        assert isinstance(second, AssignmentConflict)
        assert second.conflicting_person_name == "Z"

    def test_inactive_holder_still_blocks_device(self):
        roster = [make_person("z", "Z", tablet="3", activo=False), make_person("w", "W")]
        assert isinstance(validate_assignment("w", DeviceAssignment("3"), roster), AssignmentConflict)

    def test_device_comparison_is_exact(self):
        roster = [make_person("z", "Z", tablet="A1"), make_person("w", "W")]
        assert validate_assignment("w", DeviceAssignment("a1"), roster).ok

    def test_empty_device_never_conflicts(self):
        roster = [make_person("z", "Z", tablet="3"), make_person("w", "W")]
        assert validate_assignment("w", DeviceAssignment(None), roster).ok


class TestDomain:
    @pytest.mark.parametrize("seat", [0, 6, -1, 99])
    def test_seat_out_of_range_rejected(self, seat):
        roster = [make_person("y", "Y", mesa=1)]
        result = validate_assignment("y", SeatAssignment(seat), roster)
        assert isinstance(result, AssignmentRejected)

    def test_non_positive_table_rejected(self):
        result = validate_assignment("y", TableAssignment(0), [])
        assert isinstance(result, AssignmentRejected)

    def test_table_above_configured_count_rejected(self):
        directory = ResourceDirectory(table_count=3)
        assert check_domain(TableAssignment(4), directory) is not None
        assert check_domain(TableAssignment(3), directory) is None
        # Without a directory only positivity is checked
        assert check_domain(TableAssignment(40)) is None

    def test_unknown_device_rejected_with_directory(self):
        directory = ResourceDirectory()
        result = validate_assignment("y", DeviceAssignment("26"), [], directory)
        assert isinstance(result, AssignmentRejected)


class TestFindRosterConflicts:
    def test_reports_duplicate_seats_and_devices(self):
        roster = [
            make_person("a", "A", mesa=1, puesto=1, tablet="1"),
            make_person("b", "B", mesa=1, puesto=1, tablet="2"),
            make_person("c", "C", mesa=2, puesto=1, tablet="2"),
        ]
        conflicts = find_roster_conflicts(roster)

        assert {"field": "puesto", "value": "Mesa 1 · Puesto 1", "people": ["A", "B"]} in conflicts
        assert {"field": "tablet", "value": "Tablet 2", "people": ["B", "C"]} in conflicts
        assert len(conflicts) == 2

    def test_clean_roster(self):
        roster = [
            make_person("a", "A", mesa=1, puesto=1, tablet="1"),
            make_person("b", "B", mesa=1, puesto=2, tablet="2"),
        ]
        assert find_roster_conflicts(roster) == []
