"""Plotly chart builders for table and tablet occupancy."""

import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from typing import List

from config.defaults import SEATS_PER_TABLE


def table_occupancy_bar(rows: List[dict], title: str = "Ocupación por mesa") -> go.Figure:
    """Stacked bar of occupied vs free seats for each table."""
    df = pd.DataFrame(rows)
    if df.empty:
        df = pd.DataFrame(columns=["table_id", "occupied_seats", "free_seats", "status"])
    df["Mesa"] = df["table_id"].map(lambda t: f"Mesa {t}")
    fig = px.bar(
        df, x="Mesa", y=["occupied_seats", "free_seats"],
        labels={"value": "Puestos", "variable": ""},
        title=title,
        color_discrete_map={"occupied_seats": "#2E9E5B", "free_seats": "#D9534F"},
    )
    fig.for_each_trace(lambda t: t.update(name={"occupied_seats": "Ocupados", "free_seats": "Libres"}[t.name]))
    fig.update_layout(legend_title_text="", height=380, yaxis_range=[0, SEATS_PER_TABLE])
    return fig


def device_usage_donut(used: int, total: int, title: str = "Tablets asignadas") -> go.Figure:
    """Donut chart of assigned vs free tablets."""
    available = max(0, total - used)
    fig = go.Figure(data=[go.Pie(
        labels=["Asignadas", "Libres"],
        values=[used, available],
        hole=0.6,
        marker_colors=["#E8734A", "#4A90D9"],
        textinfo="percent+label",
    )])
    fig.update_layout(
        title=title,
        height=350,
        showlegend=True,
        annotations=[dict(text=f"{used}/{total}", x=0.5, y=0.5, font_size=16, showarrow=False)],
    )
    return fig


def table_status_pie(complete: int, partial: int, empty: int) -> go.Figure:
    fig = go.Figure(data=[go.Pie(
        labels=["Completas", "Parciales", "Vacías"],
        values=[complete, partial, empty],
        marker_colors=["#2E9E5B", "#F5C542", "#BBBBBB"],
        sort=False,
    )])
    fig.update_layout(title="Estado de las mesas", height=350)
    return fig
