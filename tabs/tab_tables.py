"""Tab 2: Mesas — per-table occupancy, completeness and tablet usage."""

import streamlit as st
import pandas as pd

from components.charts import device_usage_donut, table_occupancy_bar, table_status_pie
from components.metrics_cards import render_occupancy_metrics
from components.tables import render_conflict_table, table_color
from config.defaults import SEAT_NUMBERS
from data.session_store import get_directory, get_roster
from engine.occupancy import dimension_stats, occupancy_rows, summarize
from engine.validator import find_roster_conflicts


def _render_table_card(table):
    color = table_color(table.table_id)
    status = "COMPLETA" if table.is_complete else ("VACÍA" if table.is_empty else "DISPONIBLE")
    st.markdown(
        f"<div style='border-left: 6px solid {color}; padding-left: 8px'>"
        f"<b>Mesa {table.table_id}</b> · {table.occupied_seats}/{len(SEAT_NUMBERS)} · {status}</div>",
        unsafe_allow_html=True,
    )
    by_seat = {p.puesto: p for p in table.occupants if p.puesto is not None}
    for seat in SEAT_NUMBERS:
        person = by_seat.get(seat)
        if person is None:
            st.caption(f"Puesto {seat}: libre")
        else:
            crown = "👑 " if person.is_president else ""
            tablet = f" · 📱 {person.tablet}" if person.tablet else ""
            st.caption(f"Puesto {seat}: {crown}{person.nombre}{tablet}")
    unseated = [p for p in table.occupants if p.puesto is None]
    if unseated:
        st.caption("Sin puesto: " + ", ".join(p.nombre for p in unseated))


def render(sidebar_state):
    """Render the Mesas tab."""
    st.header("Mesas")

    roster = get_roster()
    directory = get_directory()
    summary = summarize(roster, directory.table_count)
    stats = dimension_stats(roster, directory)

    render_occupancy_metrics(summary, stats)
    st.divider()

    col1, col2, col3 = st.columns([3, 2, 2])
    rows = occupancy_rows(summary)
    with col1:
        st.plotly_chart(table_occupancy_bar(rows), use_container_width=True)
    with col2:
        st.plotly_chart(
            table_status_pie(summary.complete_count, summary.partial_count, summary.empty_count),
            use_container_width=True,
        )
    with col3:
        st.plotly_chart(
            device_usage_donut(stats.device_capacity - stats.free_devices, stats.device_capacity),
            use_container_width=True,
        )

    st.divider()
    st.subheader("Distribución")
    per_row = 3
    for start in range(0, len(summary.per_table), per_row):
        cols = st.columns(per_row)
        for col, table in zip(cols, summary.per_table[start:start + per_row]):
            with col:
                _render_table_card(table)

    st.divider()
    st.subheader("Detalle por mesa")
    st.dataframe(pd.DataFrame([{
        "Mesa": r["table_id"],
        "Ocupados": r["occupied_seats"],
        "Libres": r["free_seats"],
        "Ocupación": f"{r['occupancy_pct']:.0%}",
        "Estado": r["status"],
        "Catadores": r["occupants"] or "—",
    } for r in rows]), use_container_width=True, hide_index=True)

    outside = [p for p in roster if p.activo and p.mesa is not None and p.mesa > directory.table_count]
    if outside:
        st.warning(
            f"{len(outside)} catadores asignados a mesas fuera de la configuración "
            f"({directory.table_count} mesas): " + ", ".join(f"{p.nombre} (mesa {p.mesa})" for p in outside)
        )

    st.subheader("Puestos y tablets duplicados")
    st.caption("Las ediciones simultáneas pueden dejar duplicados que solo aparecen al recargar.")
    render_conflict_table(find_roster_conflicts(roster))
