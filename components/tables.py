"""Styled roster display helpers."""

import streamlit as st
import pandas as pd
from typing import List, Optional

from config.defaults import PRESIDENT_COLOR, ROLE_PRESIDENT, TABLE_COLORS
from models.person import Person


def table_color(table_id: Optional[int]) -> Optional[str]:
    if not table_id:
        return None
    return TABLE_COLORS[(table_id - 1) % len(TABLE_COLORS)]


def roster_frame(roster: List[Person]) -> pd.DataFrame:
    return pd.DataFrame([{
        "Código": p.codigo or "",
        "Nombre": p.nombre,
        "Rol": p.rol,
        "País": p.pais or "",
        "Mesa": p.mesa,
        "Puesto": p.puesto,
        "Tablet": p.tablet or "",
        "Activo": "Sí" if p.activo else "No",
    } for p in roster], columns=["Código", "Nombre", "Rol", "País", "Mesa", "Puesto", "Tablet", "Activo"])


def render_roster_table(roster: List[Person], title: Optional[str] = None, height: Optional[int] = None):
    """Roster with presidents highlighted and the table column tinted per table."""
    if title:
        st.subheader(title)
    df = roster_frame(roster)
    if df.empty:
        st.info("No hay catadores que mostrar.")
        return

    def color_role(val):
        if val == ROLE_PRESIDENT:
            return f"background-color: {PRESIDENT_COLOR}; color: #5a4300; font-weight: bold"
        return ""

    def color_table(val):
        if pd.isna(val):
            return ""
        color = table_color(int(val))
        return f"background-color: {color}33; font-weight: bold" if color else ""

    df["Mesa"] = df["Mesa"].astype("Int64")
    df["Puesto"] = df["Puesto"].astype("Int64")
    styled = df.style.map(color_role, subset=["Rol"]).map(color_table, subset=["Mesa"])
    st.dataframe(styled, use_container_width=True, height=height, hide_index=True)


def render_conflict_table(conflicts: List[dict]):
    if not conflicts:
        st.success("Sin puestos ni tablets duplicados.")
        return
    df = pd.DataFrame([{
        "Recurso": c["value"],
        "Catadores": ", ".join(c["people"]),
    } for c in conflicts])
    st.dataframe(df, use_container_width=True, hide_index=True)
