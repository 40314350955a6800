"""Applying validated assignments to the store and deriving selectable options."""

import logging
from typing import List, Optional, Sequence

from config.defaults import IMPOSSIBLE_ID, PEOPLE_COLLECTION, RESOURCE_FIELDS, SEAT_NUMBERS
from data.roster import RosterCache
from data.store import StoreError, eq, neq
from engine.validator import check_domain, validate_assignment
from models.assignment import Assignment
from models.directory import ResourceDirectory
from models.outcome import AssignmentOk, AssignmentRejected, MutationOutcome, StoreFailure
from models.person import Person

logger = logging.getLogger(__name__)


def apply_field(store, person_id: str, assignment: Assignment) -> MutationOutcome:
    """Write one resource field of one person. Never retries."""
    reason = check_domain(assignment)
    if reason:
        return AssignmentRejected(person_id, assignment.column, assignment.value, reason)

    try:
        store.update(PEOPLE_COLLECTION, {assignment.column: assignment.value}, [eq("id", person_id)])
    except StoreError as exc:
        logger.warning("Update of %s for %s failed: %s", assignment.column, person_id, exc)
        return StoreFailure(person_id, assignment.column, str(exc))

    logger.info("Set %s=%r for %s", assignment.column, assignment.value, person_id)
    return AssignmentOk(person_id, assignment.column, assignment.value)


def clear_field(store, field: str) -> int:
    """Unset field on every person. Irreversible; confirm before calling.

    Raises StoreError if the store rejects the update.
    """
    if field not in RESOURCE_FIELDS:
        raise ValueError(f"Unknown resource field: {field}")
    # The store refuses unfiltered updates, so match every real id instead
    rows = store.update(PEOPLE_COLLECTION, {field: None}, [neq("id", IMPOSSIBLE_ID)])
    logger.info("Cleared %s on %d people", field, len(rows))
    return len(rows)


def resync(cache: RosterCache):
    try:
        cache.refresh()
    except StoreError as exc:
        # Stays stale; the next read retries the refresh.
        logger.warning("Roster refresh failed: %s", exc)
        cache.invalidate()


def assign(
    cache: RosterCache,
    person_id: str,
    assignment: Assignment,
    directory: Optional[ResourceDirectory] = None,
) -> MutationOutcome:
    """Validate against the current roster, write, then re-read the roster.

    Any conflict or store failure also triggers a re-read so the cached view
    never lags the store by more than one round trip.
    """
    try:
        roster = cache.ensure_fresh()
    except StoreError as exc:
        logger.warning("Cannot load roster before assigning: %s", exc)
        return StoreFailure(person_id, assignment.column, str(exc))

    outcome = validate_assignment(person_id, assignment, roster, directory)
    if isinstance(outcome, AssignmentRejected):
        return outcome
    if not outcome.ok:
        logger.warning("Conflict assigning %s for %s: %s", assignment.column, person_id, outcome.message)
        resync(cache)
        return outcome

    outcome = apply_field(cache.store, person_id, assignment)
    resync(cache)
    return outcome


def assign_all(
    cache: RosterCache,
    person_id: str,
    assignments: List[Assignment],
    directory: Optional[ResourceDirectory] = None,
) -> List[MutationOutcome]:
    """Assign in order, stopping at the first outcome that is not ok.

    Earlier writes stay in the store; the last outcome explains the stop.
    """
    outcomes = []
    for assignment in assignments:
        outcome = assign(cache, person_id, assignment, directory)
        outcomes.append(outcome)
        if not outcome.ok:
            break
    return outcomes


def available_tables(directory: ResourceDirectory) -> List[int]:
    return directory.table_ids


def available_seats(roster: List[Person], table_id: int, exclude_person_id: Optional[str] = None) -> List[int]:
    """Seats at table_id not held by another active person.

    The excluded person's own seat always stays in the list.
    """
    taken = {
        p.puesto for p in roster
        if p.id != exclude_person_id and p.activo and p.mesa == table_id and p.puesto is not None
    }
    own = next(
        (p.puesto for p in roster if p.id == exclude_person_id and p.mesa == table_id and p.puesto is not None),
        None,
    )
    return [seat for seat in SEAT_NUMBERS if seat not in taken or seat == own]


def available_devices(
    roster: List[Person],
    device_slots: Sequence[str],
    exclude_person_id: Optional[str] = None,
) -> List[str]:
    """Tablet slots not held by anyone else, plus the excluded person's own tablet."""
    taken = {p.tablet for p in roster if p.id != exclude_person_id and p.tablet}
    options = [slot for slot in device_slots if slot not in taken]

    current = next((p.tablet for p in roster if p.id == exclude_person_id), None)
    if current and current not in options:
        options.append(current)
    return options
