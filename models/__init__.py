from models.person import Person
from models.table import TableOccupancy, OccupancySummary, DimensionStats
from models.directory import ResourceDirectory
from models.assignment import (
    Assignment, TableAssignment, SeatAssignment, DeviceAssignment, make_assignment, unassign,
)
from models.outcome import AssignmentOk, AssignmentConflict, AssignmentRejected, StoreFailure
from models.audit import AuditEntry
