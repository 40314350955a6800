"""Resource directory: number of tables and the tablet pool."""

import logging

from config.defaults import (
    CONFIG_COLLECTION, DEFAULT_DEVICE_SLOTS, DEFAULT_TABLE_COUNT,
    MAX_TABLE_COUNT, MIN_TABLE_COUNT, TABLE_COUNT_DESCRIPTION, TABLE_COUNT_KEY,
)
from data.store import StoreError, eq
from models.directory import ResourceDirectory

logger = logging.getLogger(__name__)


class ConfigUnavailable(Exception):
    """The table count could not be read from the configuration collection."""


def _read_table_count(store) -> int:
    try:
        rows = store.select(CONFIG_COLLECTION, "valor", filters=[eq("clave", TABLE_COUNT_KEY)])
    except StoreError as exc:
        raise ConfigUnavailable(f"configuration read failed: {exc}") from exc

    if not rows:
        raise ConfigUnavailable(f"no '{TABLE_COUNT_KEY}' row")

    raw = rows[0].get("valor")
    try:
        count = int(str(raw).strip())
    except (TypeError, ValueError) as exc:
        raise ConfigUnavailable(f"'{TABLE_COUNT_KEY}' is not a number: {raw!r}") from exc

    if count < MIN_TABLE_COUNT or count > MAX_TABLE_COUNT:
        raise ConfigUnavailable(f"'{TABLE_COUNT_KEY}' out of range: {count}")
    return count


def load_directory(store) -> ResourceDirectory:
    """Read the directory, falling back to defaults when configuration is missing."""
    try:
        table_count = _read_table_count(store)
    except ConfigUnavailable as exc:
        logger.warning("Using default resource directory: %s", exc)
        return ResourceDirectory(
            table_count=DEFAULT_TABLE_COUNT,
            device_slots=DEFAULT_DEVICE_SLOTS,
            from_defaults=True,
        )
    return ResourceDirectory(table_count=table_count, device_slots=DEFAULT_DEVICE_SLOTS)


def save_table_count(store, count: int) -> ResourceDirectory:
    """Persist the number of tables. Raises ValueError for out-of-range counts."""
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValueError(f"Table count must be an integer, got {count!r}")
    if count < MIN_TABLE_COUNT or count > MAX_TABLE_COUNT:
        raise ValueError(f"El número de mesas debe estar entre {MIN_TABLE_COUNT} y {MAX_TABLE_COUNT}")

    store.upsert(
        CONFIG_COLLECTION,
        [{"clave": TABLE_COUNT_KEY, "valor": str(count), "descripcion": TABLE_COUNT_DESCRIPTION}],
        on_conflict="clave",
    )
    logger.info("Table count set to %s", count)
    return ResourceDirectory(table_count=count, device_slots=DEFAULT_DEVICE_SLOTS)
