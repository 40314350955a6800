from dataclasses import dataclass
from typing import Optional

from config.defaults import ROLE_PRESIDENT, ROLE_TASTER


def to_int(value) -> Optional[int]:
    """Coerce a store value to int; blanks and garbage become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if number.is_integer() else None


def _to_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_role(value) -> str:
    text = (_to_text(value) or "").lower()
    if text == ROLE_PRESIDENT.lower():
        return ROLE_PRESIDENT
    return ROLE_TASTER


@dataclass
class Person:
    id: str
    nombre: str
    rol: str = ROLE_TASTER
    mesa: Optional[int] = None      # table
    puesto: Optional[int] = None    # seat within the table, 1..5
    tablet: Optional[str] = None    # device identifier
    activo: bool = True
    codigo: Optional[str] = None
    pais: Optional[str] = None
    email: Optional[str] = None
    telefono: Optional[str] = None
    codigocatador: Optional[int] = None
    user_id: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_president(self) -> bool:
        return self.rol == ROLE_PRESIDENT

    @property
    def seat_pair(self) -> Optional[tuple]:
        """(table, seat) when both are assigned."""
        if self.mesa is None or self.puesto is None:
            return None
        return (self.mesa, self.puesto)

    @property
    def display_name(self) -> str:
        if self.codigo:
            return f"{self.codigo} · {self.nombre}"
        return self.nombre

    @classmethod
    def from_row(cls, row: dict) -> "Person":
        if row.get("id") in (None, ""):
            raise ValueError(f"Row without id: {row}")
        activo = row.get("activo")
        return cls(
            id=str(row["id"]),
            nombre=_to_text(row.get("nombre")) or "",
            rol=normalize_role(row.get("rol")),
            mesa=to_int(row.get("mesa")),
            puesto=to_int(row.get("puesto")),
            tablet=_to_text(row.get("tablet")),
            activo=True if activo is None else bool(activo),
            codigo=_to_text(row.get("codigo")),
            pais=_to_text(row.get("pais")),
            email=_to_text(row.get("email")),
            telefono=_to_text(row.get("telefono")),
            codigocatador=to_int(row.get("codigocatador")),
            user_id=_to_text(row.get("user_id")),
            created_at=_to_text(row.get("created_at")),
        )

    def to_row(self) -> dict:
        row = {
            "nombre": self.nombre,
            "rol": self.rol,
            "mesa": self.mesa,
            "puesto": self.puesto,
            "tablet": self.tablet,
            "activo": self.activo,
            "codigo": self.codigo,
            "pais": self.pais,
            "email": self.email,
            "telefono": self.telefono,
            "codigocatador": self.codigocatador,
            "user_id": self.user_id,
        }
        if self.id:
            row["id"] = self.id
        return row
