"""Schema validation for uploaded roster files."""

from dataclasses import dataclass, field
from typing import List
import pandas as pd

from config.defaults import SEATS_PER_TABLE

ROSTER_REQUIRED_COLUMNS = [
    "Nombre",
]

ROSTER_OPTIONAL_COLUMNS = [
    "Codigo",
    "Pais",
    "Email",
    "Telefono",
    "Rol",
    "Mesa",
    "Puesto",
    "Tablet",
    "CodigoCatador",
    "Activo",
]


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _check_required_columns(df: pd.DataFrame, required: List[str], file_label: str) -> ValidationResult:
    result = ValidationResult()
    missing = [col for col in required if col not in df.columns]
    if missing:
        result.is_valid = False
        result.errors.append(f"{file_label}: Missing required columns: {', '.join(missing)}")
    if df.empty:
        result.is_valid = False
        result.errors.append(f"{file_label}: File contains no data rows.")
    return result


def _numeric(df: pd.DataFrame, column: str) -> pd.Series:
    if column not in df.columns:
        return pd.Series([float("nan")] * len(df), index=df.index)
    return pd.to_numeric(df[column], errors="coerce")


def _active_mask(df: pd.DataFrame) -> pd.Series:
    if "Activo" not in df.columns:
        return pd.Series([True] * len(df), index=df.index)
    values = df["Activo"].astype(str).str.strip().str.lower()
    return df["Activo"].isna() | values.isin(["1", "true", "si", "sí", "yes", "activo", "x"])


def validate_roster(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, ROSTER_REQUIRED_COLUMNS, "Catadores")
    if not result.is_valid:
        return result

    blank_names = df["Nombre"].isna() | (df["Nombre"].astype(str).str.strip() == "")
    if blank_names.any():
        result.is_valid = False
        result.errors.append(f"Catadores: {int(blank_names.sum())} rows without Nombre.")

    mesa = _numeric(df, "Mesa")
    puesto = _numeric(df, "Puesto")

    for column, series in (("Mesa", mesa), ("Puesto", puesto)):
        if column in df.columns:
            garbage = df[column].notna() & series.isna()
            fractional = series.notna() & (series % 1 != 0)
            if (garbage | fractional).any():
                result.is_valid = False
                result.errors.append(f"Catadores: {column} must be a whole number.")

    if (mesa < 1).any():
        result.is_valid = False
        result.errors.append("Catadores: Mesa must be a positive number.")

    if ((puesto < 1) | (puesto > SEATS_PER_TABLE)).any():
        result.is_valid = False
        result.errors.append(f"Catadores: Puesto must be between 1 and {SEATS_PER_TABLE}.")

    # Duplicate seats among active people
    seated = df[_active_mask(df) & mesa.notna() & puesto.notna()].assign(_mesa=mesa, _puesto=puesto)
    dupes = seated.duplicated(subset=["_mesa", "_puesto"], keep=False)
    if dupes.any():
        result.is_valid = False
        pairs = seated[dupes][["_mesa", "_puesto"]].drop_duplicates().astype(int)
        labels = [f"Mesa {m} · Puesto {p}" for m, p in pairs.itertuples(index=False)]
        result.errors.append(f"Catadores: Duplicate seats: {', '.join(labels)}")

    if "Tablet" in df.columns:
        tablets = df["Tablet"].dropna().map(
            lambda v: str(int(v)) if isinstance(v, float) and v.is_integer() else str(v).strip()
        )
        tablets = tablets[tablets != ""]
        dup_tablets = tablets[tablets.duplicated(keep=False)]
        if not dup_tablets.empty:
            result.is_valid = False
            result.errors.append(f"Catadores: Duplicate tablets: {sorted(dup_tablets.unique().tolist())}")

    seat_without_table = puesto.notna() & mesa.isna()
    if seat_without_table.any():
        result.warnings.append(
            f"Catadores: {int(seat_without_table.sum())} rows have Puesto but no Mesa; "
            "the seat will not count towards any table."
        )

    unknown = [c for c in df.columns if c not in ROSTER_REQUIRED_COLUMNS + ROSTER_OPTIONAL_COLUMNS]
    if unknown:
        result.warnings.append(f"Catadores: Ignoring unknown columns: {', '.join(unknown)}")

    return result
