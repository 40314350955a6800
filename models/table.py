from dataclasses import dataclass, field
from typing import List

from config.defaults import SEATS_PER_TABLE
from models.person import Person


@dataclass
class TableOccupancy:
    """Derived view of one table; not stored anywhere."""
    table_id: int
    occupants: List[Person] = field(default_factory=list)
    occupied_seats: int = 0

    @property
    def is_complete(self) -> bool:
        return self.occupied_seats == SEATS_PER_TABLE

    @property
    def is_empty(self) -> bool:
        return self.occupied_seats == 0

    @property
    def occupancy_pct(self) -> float:
        return self.occupied_seats / SEATS_PER_TABLE

    @property
    def free_seats(self) -> int:
        return max(0, SEATS_PER_TABLE - self.occupied_seats)


@dataclass
class OccupancySummary:
    per_table: List[TableOccupancy] = field(default_factory=list)
    complete_count: int = 0
    partial_count: int = 0
    empty_count: int = 0


@dataclass
class DimensionStats:
    """How much of each resource dimension is in use."""
    people_total: int
    people_active: int
    with_table: int
    with_seat: int
    with_device: int
    seated_pairs: int
    seat_capacity: int
    device_capacity: int
    free_devices: int
    unseated_active: int
