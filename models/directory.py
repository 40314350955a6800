from dataclasses import dataclass, field
from typing import Tuple

from config.defaults import DEFAULT_DEVICE_SLOTS, DEFAULT_TABLE_COUNT


@dataclass(frozen=True)
class ResourceDirectory:
    table_count: int = DEFAULT_TABLE_COUNT
    device_slots: Tuple[str, ...] = field(default=DEFAULT_DEVICE_SLOTS)
    from_defaults: bool = False  # True when configuration could not be read

    @property
    def table_ids(self) -> list:
        return list(range(1, self.table_count + 1))
