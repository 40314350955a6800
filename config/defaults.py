"""Default configuration constants for the Catas Seat Planning dashboard."""

# Seats per table (fixed, independent of the configured number of tables)
SEATS_PER_TABLE = 5
SEAT_NUMBERS = list(range(1, SEATS_PER_TABLE + 1))

# Number of tables, read from the "configuracion" collection
DEFAULT_TABLE_COUNT = 5
MIN_TABLE_COUNT = 1
MAX_TABLE_COUNT = 50
TABLE_COUNT_KEY = "numero_mesas"
TABLE_COUNT_DESCRIPTION = "Número total de mesas disponibles"

# Tablet pool
DEVICE_SLOT_COUNT = 25
DEFAULT_DEVICE_SLOTS = tuple(str(n) for n in range(1, DEVICE_SLOT_COUNT + 1))

# Remote collections
PEOPLE_COLLECTION = "usuarios"
CONFIG_COLLECTION = "configuracion"

# Resource columns on a person row
FIELD_TABLE = "mesa"
FIELD_SEAT = "puesto"
FIELD_DEVICE = "tablet"
RESOURCE_FIELDS = [FIELD_TABLE, FIELD_SEAT, FIELD_DEVICE]

FIELD_LABELS = {
    FIELD_TABLE: "Mesa",
    FIELD_SEAT: "Puesto",
    FIELD_DEVICE: "Tablet",
}

# Identity columns editable from the roster
EDITABLE_FIELDS = ["nombre", "codigo", "pais", "email", "telefono", "rol", "codigocatador", "activo"]

# Roles
ROLE_TASTER = "Catador"
ROLE_PRESIDENT = "Presidente"
ROLES = [ROLE_TASTER, ROLE_PRESIDENT]
DEFAULT_COUNTRY = "España"

# Bulk updates need a filter; no row ever has this id
IMPOSSIBLE_ID = "00000000-0000-0000-0000-000000000000"

# HTTP timeout for the remote store (seconds)
STORE_TIMEOUT_SECONDS = 10.0

# Table colors for charts and roster highlighting (cycled past 5)
TABLE_COLORS = ["#9B59B6", "#3498DB", "#1ABC9C", "#E67E22", "#5C6BC0"]
PRESIDENT_COLOR = "#F5C542"
