"""Global sidebar: store status, directory and roster refresh."""

import streamlit as st
from dataclasses import dataclass

from config.defaults import ROLES
from data.session_store import (
    get_directory, get_last_error, get_roster, invalidate_roster, is_demo_store, reload_directory,
)


@dataclass
class SidebarState:
    table_count: int
    role_filter: str
    show_inactive: bool


def render_sidebar() -> SidebarState:
    """Render the global sidebar controls and return current state."""
    with st.sidebar:
        st.title("Catas · Mesas")
        st.divider()

        if is_demo_store():
            st.warning("Modo demo: datos en memoria (SUPABASE_URL no configurado)")
        else:
            st.success("Conectado a Supabase")

        directory = get_directory()
        st.caption(f"Mesas: {directory.table_count} · Tablets: {len(directory.device_slots)}")
        if directory.from_defaults:
            st.caption("Configuración no disponible; usando valores por defecto")

        if st.button("Recargar datos", key="sidebar_refresh", use_container_width=True):
            invalidate_roster()
            directory = reload_directory()

        roster = get_roster()
        error = get_last_error()
        if error:
            st.error(f"No se pudo leer el roster: {error}")
        st.caption(f"{len(roster)} catadores")

        st.divider()
        role_filter = st.selectbox("Rol", ["Todos"] + ROLES, key="sidebar_role")
        show_inactive = st.checkbox("Mostrar inactivos", value=True, key="sidebar_inactive")

    return SidebarState(
        table_count=directory.table_count,
        role_filter=role_filter,
        show_inactive=show_inactive,
    )
