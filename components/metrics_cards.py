"""KPI cards and outcome notifications."""

import streamlit as st

from models.outcome import AssignmentConflict, AssignmentRejected, StoreFailure
from models.table import DimensionStats, OccupancySummary


def render_metric_row(metrics: list[dict]):
    """Render a row of metric cards.

    Each metric dict should have: label, value, and optionally delta, help.
    """
    cols = st.columns(len(metrics))
    for col, m in zip(cols, metrics):
        with col:
            st.metric(label=m["label"], value=m["value"], delta=m.get("delta"), help=m.get("help"))


def render_occupancy_metrics(summary: OccupancySummary, stats: DimensionStats):
    render_metric_row([
        {"label": "Mesas completas", "value": summary.complete_count},
        {"label": "Mesas parciales", "value": summary.partial_count},
        {"label": "Mesas vacías", "value": summary.empty_count},
        {"label": "Puestos ocupados", "value": f"{stats.seated_pairs}/{stats.seat_capacity}"},
        {"label": "Tablets libres", "value": f"{stats.free_devices}/{stats.device_capacity}"},
        {"label": "Sin puesto", "value": stats.unseated_active, "help": "Catadores activos sin mesa y puesto"},
    ])


def render_outcome(outcome) -> bool:
    """Show the result of a write. Returns True when it succeeded."""
    if isinstance(outcome, AssignmentConflict):
        st.error(f"Conflicto: {outcome.message}", icon="🔴")
    elif isinstance(outcome, AssignmentRejected):
        st.warning(outcome.message, icon="🟡")
    elif isinstance(outcome, StoreFailure):
        st.error(outcome.message, icon="🔴")
    else:
        st.success(outcome.message)
        return True
    return False
