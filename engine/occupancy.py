"""Per-table completeness and per-dimension occupancy derived from the roster."""

from typing import List

from config.defaults import SEATS_PER_TABLE
from models.directory import ResourceDirectory
from models.person import Person
from models.table import DimensionStats, OccupancySummary, TableOccupancy


def table_occupancy(roster: List[Person], table_id: int) -> TableOccupancy:
    occupants = [p for p in roster if p.activo and p.mesa == table_id]
    # Presidents first, then by seat (unseated last)
    occupants.sort(key=lambda p: (not p.is_president, p.puesto is None, p.puesto or 0, p.nombre))
    seats = {p.puesto for p in occupants if p.puesto is not None and 1 <= p.puesto <= SEATS_PER_TABLE}
    return TableOccupancy(table_id=table_id, occupants=occupants, occupied_seats=len(seats))


def summarize(roster: List[Person], table_count: int) -> OccupancySummary:
    """Occupancy of tables 1..table_count. Pure function of its inputs."""
    summary = OccupancySummary()
    for table_id in range(1, table_count + 1):
        table = table_occupancy(roster, table_id)
        summary.per_table.append(table)
        if table.is_complete:
            summary.complete_count += 1
        elif table.is_empty:
            summary.empty_count += 1
        else:
            summary.partial_count += 1
    return summary


def dimension_stats(roster: List[Person], directory: ResourceDirectory) -> DimensionStats:
    active = [p for p in roster if p.activo]
    used_devices = {p.tablet for p in roster if p.tablet}
    # Only pairs inside the configured tables count against seat_capacity
    seated = {
        p.seat_pair for p in active
        if p.seat_pair is not None
        and 1 <= p.mesa <= directory.table_count
        and 1 <= p.puesto <= SEATS_PER_TABLE
    }
    return DimensionStats(
        people_total=len(roster),
        people_active=len(active),
        with_table=sum(1 for p in active if p.mesa is not None),
        with_seat=sum(1 for p in active if p.puesto is not None),
        with_device=sum(1 for p in roster if p.tablet),
        seated_pairs=len(seated),
        seat_capacity=directory.table_count * SEATS_PER_TABLE,
        device_capacity=len(directory.device_slots),
        free_devices=sum(1 for slot in directory.device_slots if slot not in used_devices),
        unseated_active=sum(1 for p in active if p.seat_pair is None),
    )


def occupancy_rows(summary: OccupancySummary) -> List[dict]:
    """Flatten the summary for charts and tables."""
    rows = []
    for table in summary.per_table:
        if table.is_complete:
            status = "Completa"
        elif table.is_empty:
            status = "Vacía"
        else:
            status = "Parcial"
        rows.append({
            "table_id": table.table_id,
            "occupied_seats": table.occupied_seats,
            "free_seats": table.free_seats,
            "occupancy_pct": table.occupancy_pct,
            "status": status,
            "occupants": ", ".join(
                f"{p.puesto or '-'}: {p.nombre}{' (P)' if p.is_president else ''}" for p in table.occupants
            ),
        })
    return rows
