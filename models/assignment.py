"""Proposed changes to one resource field of a person, one variant per field kind."""

from dataclasses import dataclass
from typing import Optional, Union

from config.defaults import FIELD_DEVICE, FIELD_SEAT, FIELD_TABLE


@dataclass(frozen=True)
class TableAssignment:
    table: Optional[int]
    column = FIELD_TABLE

    @property
    def value(self):
        return self.table


@dataclass(frozen=True)
class SeatAssignment:
    seat: Optional[int]
    column = FIELD_SEAT

    @property
    def value(self):
        return self.seat


@dataclass(frozen=True)
class DeviceAssignment:
    device: Optional[str]
    column = FIELD_DEVICE

    @property
    def value(self):
        return self.device


Assignment = Union[TableAssignment, SeatAssignment, DeviceAssignment]


def _parse_number(field_name: str, raw) -> Optional[int]:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"{field_name} must be a whole number, got {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if raw != raw:  # NaN from pandas means "unset"
            return None
        if not raw.is_integer():
            raise ValueError(f"{field_name} must be a whole number, got {raw!r}")
        return int(raw)
    text = str(raw).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        raise ValueError(f"{field_name} must be a whole number, got {raw!r}")
    if not number.is_integer():
        raise ValueError(f"{field_name} must be a whole number, got {raw!r}")
    return int(number)


def _parse_device(raw) -> Optional[str]:
    if raw is None:
        return None
    if isinstance(raw, float):
        if raw != raw:
            return None
        if raw.is_integer():
            raw = int(raw)
    text = str(raw).strip()
    return text or None


def make_assignment(field: str, raw) -> Assignment:
    """Build the assignment variant for a store column from raw UI or import input."""
    if field == FIELD_TABLE:
        return TableAssignment(_parse_number("Mesa", raw))
    if field == FIELD_SEAT:
        return SeatAssignment(_parse_number("Puesto", raw))
    if field == FIELD_DEVICE:
        return DeviceAssignment(_parse_device(raw))
    raise ValueError(f"Unknown resource field: {field}")


def unassign(field: str) -> Assignment:
    return make_assignment(field, None)
