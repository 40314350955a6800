"""Tab 3: Administración — table count, bulk resets, import/export, audit trail."""

import streamlit as st
import pandas as pd

from config.defaults import FIELD_LABELS, MAX_TABLE_COUNT, MIN_TABLE_COUNT, RESOURCE_FIELDS
from data.directory import save_table_count
from data.export import export_roster_excel, roster_to_dataframe
from data.loader import load_file, parse_people
from data.sample_data import generate_roster_df
from data.session_store import (
    add_audit_entry, get_audit_log, get_directory, get_pending_clear, get_roster, get_roster_cache,
    get_store, invalidate_roster, set_directory, set_pending_clear,
)
from data.store import StoreError
from data.validator import validate_roster
from engine.allocator import clear_field
from engine.people import import_people


def _import_roster(df: pd.DataFrame):
    """Validate, parse and insert an uploaded roster."""
    result = validate_roster(df)
    for w in result.warnings:
        st.warning(w)
    if not result.is_valid:
        for e in result.errors:
            st.error(e)
        return

    try:
        people = parse_people(df)
    except ValueError as e:
        st.error(f"Error leyendo el fichero: {e}")
        return

    outcome = import_people(get_roster_cache(), people)
    if not outcome.is_valid:
        for e in outcome.errors:
            st.error(e)
        return
    add_audit_entry("import", "usuarios", "", f"{len(people)} catadores", rationale="Importación de fichero")
    st.success(f"Importados {len(people)} catadores")


def _render_config():
    st.subheader("Configuración de mesas")
    directory = get_directory()
    new_count = st.number_input(
        "Número de mesas",
        min_value=MIN_TABLE_COUNT,
        max_value=MAX_TABLE_COUNT,
        value=directory.table_count,
        step=1,
        key="cfg_table_count",
    )
    st.caption("Cada mesa tiene 5 puestos; ese número no depende del número de mesas.")
    if st.button("Guardar configuración", key="btn_save_config"):
        try:
            updated = save_table_count(get_store(), int(new_count))
        except (ValueError, StoreError) as e:
            st.error(f"Error al guardar la configuración: {e}")
        else:
            add_audit_entry("config", "numero_mesas", str(directory.table_count), str(updated.table_count))
            set_directory(updated)
            st.success("Configuración guardada correctamente")


def _render_bulk_clear():
    st.subheader("Vaciar asignaciones")
    st.caption("Quita la mesa, el puesto o la tablet de todos los catadores. No se puede deshacer.")

    cols = st.columns(len(RESOURCE_FIELDS))
    for col, field in zip(cols, RESOURCE_FIELDS):
        with col:
            if st.button(f"Vaciar {FIELD_LABELS[field].lower()}s", key=f"btn_clear_{field}"):
                set_pending_clear(field)

    pending = get_pending_clear()
    if not pending:
        return

    label = FIELD_LABELS[pending].lower()
    st.warning(f"Se eliminará el campo **{label}** de todos los catadores.")
    confirmed = st.checkbox(f"Confirmo que quiero vaciar {label} en todos los catadores", key="confirm_clear")
    col_ok, col_cancel = st.columns(2)
    with col_ok:
        if st.button("Vaciar", type="primary", disabled=not confirmed, key="btn_clear_confirm"):
            try:
                count = clear_field(get_store(), pending)
            except StoreError as e:
                st.error(f"Error al vaciar {label}: {e}")
            else:
                add_audit_entry("clear", pending, "*", "", rationale=f"{count} catadores")
                st.success(f"{label.capitalize()} vaciado en {count} catadores")
            finally:
                invalidate_roster()
                set_pending_clear(None)
    with col_cancel:
        if st.button("Cancelar", key="btn_clear_cancel"):
            set_pending_clear(None)
            st.rerun()


def _render_import_export():
    st.subheader("Importar / exportar")
    col_in, col_out = st.columns(2)

    with col_in:
        st.caption(
            "CSV o XLSX con columna **Nombre** y opcionales Codigo, Pais, Email, Telefono, "
            "Rol, Mesa, Puesto, Tablet, CodigoCatador, Activo."
        )
        uploaded = st.file_uploader("Fichero de catadores", type=["csv", "xlsx"], key="upload_roster")
        if st.button("Importar", type="primary", key="btn_import"):
            if uploaded:
                try:
                    df = load_file(uploaded)
                except ValueError as e:
                    st.error(f"Error cargando el fichero: {e}")
                else:
                    _import_roster(df)
            else:
                st.warning("Selecciona un fichero.")
        st.download_button(
            "Plantilla de ejemplo (CSV)",
            generate_roster_df().to_csv(index=False),
            "catadores_ejemplo.csv",
            "text/csv",
        )

    with col_out:
        roster = get_roster()
        st.caption(f"{len(roster)} catadores en el roster actual")
        st.download_button(
            "Exportar a Excel",
            export_roster_excel(roster),
            "usuarios.xlsx",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            key="btn_export_xlsx",
        )
        st.download_button(
            "Exportar a CSV",
            roster_to_dataframe(roster).to_csv(index=False),
            "usuarios.csv",
            "text/csv",
            key="btn_export_csv",
        )


def render(sidebar_state):
    """Render the Administración tab."""
    st.header("Administración")

    _render_config()
    st.divider()
    _render_bulk_clear()
    st.divider()
    _render_import_export()
    st.divider()

    # --- Audit Trail ---
    st.subheader("Registro de cambios")

    audit_log = get_audit_log()
    if audit_log:
        audit_data = []
        for entry in reversed(audit_log):
            audit_data.append({
                "Fecha": entry.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                "Acción": entry.action,
                "Catador": entry.person_name or "—",
                "Campo": entry.field_changed,
                "Antes": entry.old_value[:50],
                "Después": entry.new_value[:50],
                "Motivo": entry.rationale,
            })
        audit_df = pd.DataFrame(audit_data)
        st.dataframe(audit_df, use_container_width=True, height=300)

        csv = audit_df.to_csv(index=False)
        st.download_button("Exportar registro (CSV)", csv, "registro_cambios.csv", "text/csv")
    else:
        st.info("Sin cambios registrados en esta sesión.")
