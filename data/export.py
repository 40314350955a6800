"""Roster export to DataFrame / Excel."""

import io
from typing import List

import pandas as pd

from models.person import Person

EXPORT_COLUMNS = [
    "Nombre", "Codigo", "Email", "Telefono", "Rol", "Pais", "Mesa", "Puesto", "Tablet",
    "CodigoCatador", "Activo", "Registro", "UserId", "Id",
]


def roster_to_dataframe(roster: List[Person]) -> pd.DataFrame:
    rows = [{
        "Nombre": p.nombre,
        "Codigo": p.codigo or "",
        "Email": p.email or "",
        "Telefono": p.telefono or "",
        "Rol": p.rol,
        "Pais": p.pais or "",
        "Mesa": p.mesa,
        "Puesto": p.puesto,
        "Tablet": p.tablet or "",
        "CodigoCatador": p.codigocatador,
        "Activo": p.activo,
        "Registro": p.created_at or "",
        "UserId": p.user_id or "",
        "Id": p.id,
    } for p in roster]
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    # Keep empty numeric cells blank rather than NaN floats
    for col in ("Mesa", "Puesto", "CodigoCatador"):
        df[col] = df[col].astype("Int64")
    return df


def export_roster_excel(roster: List[Person]) -> bytes:
    """Single-sheet workbook ("Usuarios") suitable for st.download_button."""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        roster_to_dataframe(roster).to_excel(writer, sheet_name="Usuarios", index=False)
    return buffer.getvalue()
