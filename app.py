"""Catas Seat Planning — Streamlit entry point."""

import logging
import streamlit as st
import sys
import os

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config.settings import log_level
from components.sidebar import render_sidebar
from data.session_store import initialize_session_state
from tabs import tab_tasters, tab_tables, tab_admin


def main():
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    st.set_page_config(
        page_title="Catas · Mesas",
        page_icon="🍷",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    initialize_session_state()
    sidebar_state = render_sidebar()

    tab1, tab2, tab3 = st.tabs([
        "👥 Catadores",
        "🍷 Mesas",
        "⚙️ Administración",
    ])

    with tab1:
        tab_tasters.render(sidebar_state)
    with tab2:
        tab_tables.render(sidebar_state)
    with tab3:
        tab_admin.render(sidebar_state)


if __name__ == "__main__":
    main()
