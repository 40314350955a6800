"""File upload parsing — CSV/XLSX roster into Person records."""

import pandas as pd
from typing import List

from config.defaults import DEFAULT_COUNTRY, FIELD_DEVICE, FIELD_SEAT, FIELD_TABLE
from models.assignment import make_assignment
from models.person import Person, normalize_role, to_int

# Spreadsheet column -> person attribute
COLUMN_MAP = {
    "Nombre": "nombre",
    "Codigo": "codigo",
    "Pais": "pais",
    "Email": "email",
    "Telefono": "telefono",
    "Rol": "rol",
    "Mesa": "mesa",
    "Puesto": "puesto",
    "Tablet": "tablet",
    "CodigoCatador": "codigocatador",
    "Activo": "activo",
}

_TRUE_VALUES = {"1", "true", "si", "sí", "yes", "activo", "x"}


def _cell(row, column):
    if column not in row.index:
        return None
    value = row[column]
    if pd.isna(value):
        return None
    return value


def _text(value):
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def _flag(value, default: bool = True) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def parse_people(df: pd.DataFrame) -> List[Person]:
    """Convert a validated roster DataFrame into new (id-less) Person objects.

    Raises ValueError on numeric cells that are not whole numbers.
    """
    people = []
    for _, row in df.iterrows():
        people.append(Person(
            id="",
            nombre=_text(_cell(row, "Nombre")) or "",
            rol=normalize_role(_cell(row, "Rol")),
            mesa=make_assignment(FIELD_TABLE, _cell(row, "Mesa")).value,
            puesto=make_assignment(FIELD_SEAT, _cell(row, "Puesto")).value,
            tablet=make_assignment(FIELD_DEVICE, _cell(row, "Tablet")).value,
            activo=_flag(_cell(row, "Activo")),
            codigo=_text(_cell(row, "Codigo")),
            pais=_text(_cell(row, "Pais")) or DEFAULT_COUNTRY,
            email=_text(_cell(row, "Email")),
            telefono=_text(_cell(row, "Telefono")),
            codigocatador=to_int(_cell(row, "CodigoCatador")),
        ))
    return people


def load_file(uploaded_file) -> pd.DataFrame:
    """Load an uploaded file (CSV or XLSX) into a DataFrame."""
    name = uploaded_file.name.lower()
    if name.endswith(".csv"):
        return pd.read_csv(uploaded_file)
    elif name.endswith(".xlsx") or name.endswith(".xls"):
        return pd.read_excel(uploaded_file, engine="openpyxl")
    else:
        raise ValueError(f"Unsupported file format: {name}. Use CSV or XLSX.")
