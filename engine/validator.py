"""Conflict validation for table, seat and tablet assignments."""

from collections import defaultdict
from typing import List, Optional

from config.defaults import FIELD_DEVICE, FIELD_SEAT, SEATS_PER_TABLE
from models.assignment import Assignment, DeviceAssignment, SeatAssignment, TableAssignment
from models.directory import ResourceDirectory
from models.outcome import AssignmentConflict, AssignmentOk, AssignmentRejected, ValidationOutcome
from models.person import Person


def _find_person(roster: List[Person], person_id: str) -> Optional[Person]:
    return next((p for p in roster if p.id == person_id), None)


def check_domain(assignment: Assignment, directory: Optional[ResourceDirectory] = None) -> Optional[str]:
    """Return why the value can never be stored, or None if it is representable."""
    value = assignment.value
    if value is None:
        return None

    if isinstance(assignment, SeatAssignment):
        if not 1 <= value <= SEATS_PER_TABLE:
            return f"El puesto debe estar entre 1 y {SEATS_PER_TABLE} (recibido {value})"
    elif isinstance(assignment, TableAssignment):
        if value < 1:
            return f"La mesa debe ser un número positivo (recibido {value})"
        if directory is not None and value > directory.table_count:
            return f"La mesa {value} no existe (hay {directory.table_count} mesas)"
    elif isinstance(assignment, DeviceAssignment):
        if directory is not None and value not in directory.device_slots:
            return f"La tablet {value} no existe"
    return None


def seat_holder(roster: List[Person], table: int, seat: int, exclude_person_id: str) -> Optional[Person]:
    """Active person other than exclude_person_id sitting at (table, seat)."""
    for other in roster:
        if other.id == exclude_person_id or not other.activo:
            continue
        if other.seat_pair == (table, seat):
            return other
    return None


def device_holder(roster: List[Person], device: str, exclude_person_id: str) -> Optional[Person]:
    for other in roster:
        if other.id != exclude_person_id and other.tablet == device:
            return other
    return None


def _validate_pair(person_id, assignment, roster, table, seat) -> ValidationOutcome:
    if table is not None and seat is not None:
        holder = seat_holder(roster, table, seat, person_id)
        if holder is not None:
            return AssignmentConflict(
                person_id=person_id,
                field=assignment.column,
                value=f"Mesa {table} · Puesto {seat}",
                conflicting_person_id=holder.id,
                conflicting_person_name=holder.nombre,
            )
    return AssignmentOk(person_id, assignment.column, assignment.value)


def validate_table(person_id: str, assignment: TableAssignment, roster: List[Person]) -> ValidationOutcome:
    current = _find_person(roster, person_id)
    seat = current.puesto if current else None
    return _validate_pair(person_id, assignment, roster, assignment.table, seat)


def validate_seat(person_id: str, assignment: SeatAssignment, roster: List[Person]) -> ValidationOutcome:
    current = _find_person(roster, person_id)
    table = current.mesa if current else None
    return _validate_pair(person_id, assignment, roster, table, assignment.seat)


def validate_device(person_id: str, assignment: DeviceAssignment, roster: List[Person]) -> ValidationOutcome:
    if assignment.device:
        holder = device_holder(roster, assignment.device, person_id)
        if holder is not None:
            return AssignmentConflict(
                person_id=person_id,
                field=FIELD_DEVICE,
                value=f"Tablet {assignment.device}",
                conflicting_person_id=holder.id,
                conflicting_person_name=holder.nombre,
            )
    return AssignmentOk(person_id, FIELD_DEVICE, assignment.device)


def validate_assignment(
    person_id: str,
    assignment: Assignment,
    roster: List[Person],
    directory: Optional[ResourceDirectory] = None,
) -> ValidationOutcome:
    """Decide whether giving person_id the proposed value is legal against roster.

    Only as good as the roster it is given; a stale roster can miss a
    conflict written by someone else in the meantime.
    """
    reason = check_domain(assignment, directory)
    if reason:
        return AssignmentRejected(person_id, assignment.column, assignment.value, reason)

    if isinstance(assignment, TableAssignment):
        return validate_table(person_id, assignment, roster)
    if isinstance(assignment, SeatAssignment):
        return validate_seat(person_id, assignment, roster)
    if isinstance(assignment, DeviceAssignment):
        return validate_device(person_id, assignment, roster)
    raise TypeError(f"Unsupported assignment: {assignment!r}")


def find_roster_conflicts(roster: List[Person]) -> List[dict]:
    """Every seat pair or tablet held by more than one person.

    Returns list of dicts with: field, value, people (names)
    """
    seats = defaultdict(list)
    devices = defaultdict(list)
    for person in roster:
        if person.activo and person.seat_pair is not None:
            seats[person.seat_pair].append(person.nombre)
        if person.tablet:
            devices[person.tablet].append(person.nombre)

    conflicts = []
    for (table, seat), names in sorted(seats.items()):
        if len(names) > 1:
            conflicts.append({
                "field": FIELD_SEAT,
                "value": f"Mesa {table} · Puesto {seat}",
                "people": sorted(names),
            })
    for device, names in sorted(devices.items(), key=lambda item: (len(item[0]), item[0])):
        if len(names) > 1:
            conflicts.append({
                "field": FIELD_DEVICE,
                "value": f"Tablet {device}",
                "people": sorted(names),
            })
    return conflicts
