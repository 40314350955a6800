"""Creating, editing, deleting, filtering and sorting people."""

import logging
from dataclasses import replace
from typing import List, Optional

from config.defaults import (
    DEFAULT_COUNTRY, EDITABLE_FIELDS, FIELD_DEVICE, FIELD_SEAT, FIELD_TABLE, PEOPLE_COLLECTION,
)
from data.roster import RosterCache
from data.store import StoreError, eq
from data.validator import ValidationResult
from engine.allocator import resync
from engine.validator import check_domain, device_holder, seat_holder
from models.assignment import make_assignment
from models.directory import ResourceDirectory
from models.outcome import (
    AssignmentConflict, AssignmentOk, AssignmentRejected, MutationOutcome, StoreFailure,
)
from models.person import Person, normalize_role, to_int

logger = logging.getLogger(__name__)


def _clean_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _check_resources(person_id: str, mesa, puesto, tablet, roster, directory) -> Optional[MutationOutcome]:
    """Domain and uniqueness checks for a full (table, seat, tablet) triple."""
    for assignment in (
        make_assignment(FIELD_TABLE, mesa),
        make_assignment(FIELD_SEAT, puesto),
        make_assignment(FIELD_DEVICE, tablet),
    ):
        reason = check_domain(assignment, directory)
        if reason:
            return AssignmentRejected(person_id, assignment.column, assignment.value, reason)

    if mesa is not None and puesto is not None:
        holder = seat_holder(roster, mesa, puesto, person_id)
        if holder is not None:
            return AssignmentConflict(
                person_id, FIELD_SEAT, f"Mesa {mesa} · Puesto {puesto}", holder.id, holder.nombre,
            )
    if tablet:
        holder = device_holder(roster, tablet, person_id)
        if holder is not None:
            return AssignmentConflict(person_id, FIELD_DEVICE, f"Tablet {tablet}", holder.id, holder.nombre)
    return None


def create_person(
    cache: RosterCache,
    fields: dict,
    directory: Optional[ResourceDirectory] = None,
) -> MutationOutcome:
    """Insert a new person, optionally already seated. Returns AssignmentOk with the new id."""
    nombre = _clean_text(fields.get("nombre"))
    if not nombre:
        return AssignmentRejected("", "nombre", fields.get("nombre"), "El nombre es obligatorio")

    try:
        mesa = make_assignment(FIELD_TABLE, fields.get(FIELD_TABLE)).value
        puesto = make_assignment(FIELD_SEAT, fields.get(FIELD_SEAT)).value
        tablet = make_assignment(FIELD_DEVICE, fields.get(FIELD_DEVICE)).value
    except ValueError as exc:
        return AssignmentRejected("", "nombre", nombre, str(exc))

    try:
        roster = cache.ensure_fresh()
    except StoreError as exc:
        return StoreFailure(None, None, str(exc))

    problem = _check_resources("", mesa, puesto, tablet, roster, directory)
    if problem is not None:
        resync(cache)
        return problem

    person = Person(
        id="",
        nombre=nombre,
        rol=normalize_role(fields.get("rol")),
        mesa=mesa,
        puesto=puesto,
        tablet=tablet,
        activo=bool(fields.get("activo", True)),
        codigo=_clean_text(fields.get("codigo")),
        pais=_clean_text(fields.get("pais")) or DEFAULT_COUNTRY,
        email=_clean_text(fields.get("email")),
        telefono=_clean_text(fields.get("telefono")),
        codigocatador=to_int(fields.get("codigocatador")),
        user_id=_clean_text(fields.get("user_id")),
    )
    try:
        rows = cache.store.insert(PEOPLE_COLLECTION, [person.to_row()])
    except StoreError as exc:
        logger.warning("Insert of %s failed: %s", nombre, exc)
        resync(cache)
        return StoreFailure(None, None, str(exc))

    new_id = str(rows[0]["id"]) if rows and rows[0].get("id") is not None else ""
    logger.info("Created person %s (%s)", nombre, new_id)
    resync(cache)
    return AssignmentOk(new_id, "nombre", nombre)


def update_person(cache: RosterCache, person_id: str, fields: dict) -> MutationOutcome:
    """Edit identity attributes. Resource fields go through engine.allocator.assign."""
    unknown = [k for k in fields if k not in EDITABLE_FIELDS]
    if unknown:
        raise ValueError(f"Not editable here: {', '.join(unknown)}")

    patch = {}
    for key, value in fields.items():
        if key == "rol":
            patch[key] = normalize_role(value)
        elif key == "activo":
            patch[key] = bool(value)
        elif key == "codigocatador":
            patch[key] = to_int(value)
        else:
            patch[key] = _clean_text(value)
    if "nombre" in patch and not patch["nombre"]:
        return AssignmentRejected(person_id, "nombre", fields.get("nombre"), "El nombre es obligatorio")

    try:
        roster = cache.ensure_fresh()
    except StoreError as exc:
        return StoreFailure(person_id, None, str(exc))

    current = next((p for p in roster if p.id == person_id), None)
    if current is not None and patch.get("activo") and not current.activo and current.seat_pair:
        # Reactivating puts the person back on their old seat
        holder = seat_holder(roster, current.mesa, current.puesto, person_id)
        if holder is not None:
            resync(cache)
            return AssignmentConflict(
                person_id, FIELD_SEAT, f"Mesa {current.mesa} · Puesto {current.puesto}",
                holder.id, holder.nombre,
            )

    try:
        cache.store.update(PEOPLE_COLLECTION, patch, [eq("id", person_id)])
    except StoreError as exc:
        logger.warning("Update of %s failed: %s", person_id, exc)
        resync(cache)
        return StoreFailure(person_id, None, str(exc))

    resync(cache)
    return AssignmentOk(person_id, ",".join(sorted(patch)), None)


def delete_person(cache: RosterCache, person_id: str) -> MutationOutcome:
    try:
        cache.store.delete(PEOPLE_COLLECTION, [eq("id", person_id)])
    except StoreError as exc:
        logger.warning("Delete of %s failed: %s", person_id, exc)
        resync(cache)
        return StoreFailure(person_id, None, str(exc))
    logger.info("Deleted person %s", person_id)
    resync(cache)
    return AssignmentOk(person_id, "id", None)


def filter_people(
    roster: List[Person],
    text: str = "",
    rol: Optional[str] = None,
    mesa: Optional[int] = None,
    activo: Optional[bool] = None,
) -> List[Person]:
    """Case-insensitive search over name, email, country and code, plus exact filters."""
    term = (text or "").strip().lower()
    result = []
    for p in roster:
        if term:
            haystack = " ".join(filter(None, [p.nombre, p.email, p.pais, p.codigo])).lower()
            if term not in haystack:
                continue
        if rol and p.rol != rol:
            continue
        if mesa is not None and p.mesa != mesa:
            continue
        if activo is not None and p.activo != activo:
            continue
        result.append(p)
    return result


_NUMERIC_SORT_FIELDS = {"mesa", "puesto", "codigocatador"}
_TEXT_SORT_FIELDS = {"nombre", "rol", "pais", "codigo", "tablet", "email", "created_at"}


def sort_people(roster: List[Person], field: str = "nombre", ascending: bool = True) -> List[Person]:
    if field in _NUMERIC_SORT_FIELDS:
        key = lambda p: getattr(p, field) if getattr(p, field) is not None else -1
    elif field == "activo":
        key = lambda p: 1 if p.activo else 0
    elif field in _TEXT_SORT_FIELDS:
        key = lambda p: (getattr(p, field) or "").lower()
    else:
        raise ValueError(f"Cannot sort by {field}")
    return sorted(roster, key=key, reverse=not ascending)


def import_people(cache: RosterCache, people: List[Person]) -> ValidationResult:
    """Insert parsed people in one batch if they do not collide with the roster."""
    result = ValidationResult()
    try:
        roster = cache.ensure_fresh()
    except StoreError as exc:
        result.is_valid = False
        result.errors.append(f"No se pudo leer el roster: {exc}")
        return result

    # Only clashes involving an imported row block the batch
    checked = list(roster)
    for idx, person in enumerate(people):
        staged = replace(person, id=f"new-{idx}")
        if staged.activo and staged.seat_pair is not None:
            holder = seat_holder(checked, staged.mesa, staged.puesto, staged.id)
            if holder is not None:
                result.is_valid = False
                result.errors.append(
                    f"Mesa {staged.mesa} · Puesto {staged.puesto} repetido: {holder.nombre}, {staged.nombre}"
                )
        if staged.tablet:
            holder = device_holder(checked, staged.tablet, staged.id)
            if holder is not None:
                result.is_valid = False
                result.errors.append(f"Tablet {staged.tablet} repetido: {holder.nombre}, {staged.nombre}")
        checked.append(staged)
    if not result.is_valid:
        return result

    rows = []
    for person in people:
        row = person.to_row()
        row.pop("id", None)
        rows.append(row)
    try:
        cache.store.insert(PEOPLE_COLLECTION, rows)
    except StoreError as exc:
        logger.warning("Import of %d people failed: %s", len(rows), exc)
        result.is_valid = False
        result.errors.append(f"Error al importar: {exc}")
    else:
        logger.info("Imported %d people", len(rows))
    resync(cache)
    return result
