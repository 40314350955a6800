"""Tab 1: Catadores — roster, seat/table/tablet assignment, add/edit/delete."""

import streamlit as st

from components.metrics_cards import render_outcome
from components.tables import render_roster_table
from config.defaults import FIELD_DEVICE, FIELD_LABELS, FIELD_SEAT, FIELD_TABLE, ROLES
from data.session_store import (
    add_audit_entry, get_directory, get_roster, get_roster_cache,
)
from engine.allocator import assign_all, available_devices, available_seats, available_tables
from engine.people import create_person, delete_person, filter_people, sort_people, update_person
from models.assignment import make_assignment

NONE_LABEL = "—"


def _option_label(value):
    return NONE_LABEL if value is None else str(value)


def _apply(person, changes) -> bool:
    """Write the changed fields in order. True only when every write succeeded."""
    pending = [(field, getattr(person, field), value) for field, value in changes if value != getattr(person, field)]
    outcomes = assign_all(
        get_roster_cache(), person.id, [make_assignment(f, v) for f, _, v in pending], get_directory(),
    )
    saved = []
    for (field, old_value, new_value), outcome in zip(pending, outcomes):
        if not render_outcome(outcome):
            break
        add_audit_entry(
            "assign", field, _option_label(old_value), _option_label(new_value), person_name=person.nombre,
        )
        saved.append(FIELD_LABELS[field])
    if saved and len(saved) < len(outcomes):
        st.info(f"Guardado antes del error: {', '.join(saved)}")
    return bool(outcomes) and len(saved) == len(outcomes)


def _render_assignment_editor(person, roster):
    directory = get_directory()
    st.markdown(f"**{person.display_name}** · {person.rol}")
    col_table, col_seat, col_device = st.columns(3)

    with col_table:
        tables = [None] + available_tables(directory)
        if person.mesa is not None and person.mesa not in tables:
            tables.append(person.mesa)
        new_table = st.selectbox(
            FIELD_LABELS[FIELD_TABLE], tables,
            index=tables.index(person.mesa),
            format_func=_option_label,
            key=f"assign_table_{person.id}",
        )

    with col_seat:
        seats = [None]
        if new_table is not None:
            seats += available_seats(roster, new_table, person.id)
        if person.puesto is not None and person.puesto not in seats:
            seats.append(person.puesto)
        new_seat = st.selectbox(
            FIELD_LABELS[FIELD_SEAT], seats,
            index=seats.index(person.puesto),
            format_func=_option_label,
            key=f"assign_seat_{person.id}",
            help="Solo se muestran los puestos libres de la mesa actual",
        )

    with col_device:
        devices = [None] + available_devices(roster, directory.device_slots, person.id)
        new_device = st.selectbox(
            FIELD_LABELS[FIELD_DEVICE], devices,
            index=devices.index(person.tablet) if person.tablet in devices else 0,
            format_func=_option_label,
            key=f"assign_device_{person.id}",
        )

    if st.button("Guardar asignación", type="primary", key=f"assign_save_{person.id}"):
        # One write per changed field; a failure keeps the page so its message stays visible
        if _apply(person, [(FIELD_TABLE, new_table), (FIELD_SEAT, new_seat), (FIELD_DEVICE, new_device)]):
            st.rerun()


def _render_identity_editor(person):
    with st.form(f"edit_person_{person.id}"):
        nombre = st.text_input("Nombre", person.nombre)
        codigo = st.text_input("Código", person.codigo or "")
        pais = st.text_input("País", person.pais or "")
        email = st.text_input("Email", person.email or "")
        telefono = st.text_input("Teléfono", person.telefono or "")
        rol = st.selectbox("Rol", ROLES, index=ROLES.index(person.rol))
        activo = st.checkbox("Activo", value=person.activo)
        if st.form_submit_button("Guardar cambios"):
            outcome = update_person(get_roster_cache(), person.id, {
                "nombre": nombre, "codigo": codigo, "pais": pais, "email": email,
                "telefono": telefono, "rol": rol, "activo": activo,
            })
            if render_outcome(outcome):
                add_audit_entry("update", "identity", "", outcome.field, person_name=nombre)
                st.rerun()

    confirm = st.checkbox(f"Confirmo que quiero eliminar a {person.nombre}", key=f"confirm_delete_{person.id}")
    if st.button("Eliminar catador", disabled=not confirm, key=f"delete_{person.id}"):
        outcome = delete_person(get_roster_cache(), person.id)
        if render_outcome(outcome):
            add_audit_entry("delete", "usuario", person.nombre, "", person_name=person.nombre)
            st.rerun()


def _render_add_form():
    directory = get_directory()
    with st.expander("Añadir catador", expanded=False):
        with st.form("add_person"):
            nombre = st.text_input("Nombre *")
            codigo = st.text_input("Código")
            pais = st.text_input("País", "España")
            email = st.text_input("Email")
            rol = st.selectbox("Rol", ROLES)
            col1, col2, col3 = st.columns(3)
            mesa = col1.selectbox("Mesa", [None] + directory.table_ids, format_func=_option_label)
            puesto = col2.selectbox("Puesto", [None, 1, 2, 3, 4, 5], format_func=_option_label)
            tablet = col3.selectbox("Tablet", [None] + list(directory.device_slots), format_func=_option_label)
            if st.form_submit_button("Añadir"):
                outcome = create_person(get_roster_cache(), {
                    "nombre": nombre, "codigo": codigo, "pais": pais, "email": email, "rol": rol,
                    FIELD_TABLE: mesa, FIELD_SEAT: puesto, FIELD_DEVICE: tablet,
                }, directory)
                if render_outcome(outcome):
                    add_audit_entry("create", "usuario", "", nombre, person_name=nombre)
                    st.rerun()


def render(sidebar_state):
    """Render the Catadores tab."""
    st.header("Gestión de Catadores")

    roster = get_roster()
    _render_add_form()

    col_search, col_table, col_sort = st.columns([3, 1, 1])
    search = col_search.text_input("Buscar por nombre, email, país o código", key="tasters_search")
    table_filter = col_table.selectbox(
        "Mesa", [None] + get_directory().table_ids, format_func=lambda v: "Todas" if v is None else str(v),
        key="tasters_table_filter",
    )
    sort_field = col_sort.selectbox("Ordenar por", ["nombre", "mesa", "puesto", "rol", "pais", "codigo"],
                                    key="tasters_sort")

    visible = filter_people(
        roster,
        text=search,
        rol=None if sidebar_state.role_filter == "Todos" else sidebar_state.role_filter,
        mesa=table_filter,
        activo=None if sidebar_state.show_inactive else True,
    )
    visible = sort_people(visible, sort_field)
    st.caption(f"{len(visible)} de {len(roster)} catadores")
    render_roster_table(visible, height=400)

    st.divider()
    st.subheader("Asignar mesa, puesto y tablet")
    if not visible:
        return

    selected_id = st.selectbox(
        "Catador", [p.id for p in visible],
        format_func=lambda pid: next(p.display_name for p in visible if p.id == pid),
        key="tasters_selected",
    )
    person = next(p for p in visible if p.id == selected_id)

    _render_assignment_editor(person, roster)
    with st.expander("Editar datos / eliminar", expanded=False):
        _render_identity_editor(person)
