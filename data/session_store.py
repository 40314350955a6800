"""Typed wrapper around st.session_state for application data."""

import logging
import streamlit as st
from typing import List, Optional
from datetime import datetime

from config.settings import load_store_settings
from data.directory import load_directory
from data.roster import RosterCache
from data.sample_data import generate_seed_tables
from data.store import StoreError, build_store
from models.audit import AuditEntry
from models.directory import ResourceDirectory
from models.person import Person

logger = logging.getLogger(__name__)


def initialize_session_state():
    """Create the store, roster cache and directory once per session."""
    if "store" not in st.session_state:
        st.session_state["store"] = build_store(load_store_settings(), seed_rows=generate_seed_tables())
    if "roster_cache" not in st.session_state:
        st.session_state["roster_cache"] = RosterCache(st.session_state["store"])
    if "directory" not in st.session_state:
        st.session_state["directory"] = load_directory(st.session_state["store"])
    defaults = {
        "audit_log": [],
        "pending_clear": None,
        "last_error": None,
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


# --- Getters ---

def get_store():
    return st.session_state["store"]


def get_roster_cache() -> RosterCache:
    return st.session_state["roster_cache"]


def get_directory() -> ResourceDirectory:
    return st.session_state.get("directory", ResourceDirectory())


def get_roster() -> List[Person]:
    """Current roster, re-read from the store when the cache is stale."""
    cache = get_roster_cache()
    try:
        st.session_state["last_error"] = None
        return cache.ensure_fresh()
    except StoreError as exc:
        logger.warning("Roster unavailable: %s", exc)
        st.session_state["last_error"] = str(exc)
        return cache.people


def get_last_error() -> Optional[str]:
    return st.session_state.get("last_error")


def get_audit_log() -> List[AuditEntry]:
    return st.session_state.get("audit_log", [])


def get_pending_clear() -> Optional[str]:
    return st.session_state.get("pending_clear")


def is_demo_store() -> bool:
    return not load_store_settings().is_configured


# --- Setters ---

def set_directory(directory: ResourceDirectory):
    st.session_state["directory"] = directory


def reload_directory() -> ResourceDirectory:
    directory = load_directory(get_store())
    set_directory(directory)
    return directory


def invalidate_roster():
    get_roster_cache().invalidate()


def set_pending_clear(field: Optional[str]):
    st.session_state["pending_clear"] = field


# --- Audit ---

def add_audit_entry(
    action: str,
    field_changed: str,
    old_value: str,
    new_value: str,
    person_name: Optional[str] = None,
    rationale: str = "",
):
    entry = AuditEntry(
        timestamp=datetime.now(),
        action=action,
        person_name=person_name,
        field_changed=field_changed,
        old_value=old_value,
        new_value=new_value,
        rationale=rationale,
    )
    st.session_state["audit_log"].append(entry)
