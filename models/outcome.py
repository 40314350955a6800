"""Results of validating or applying an assignment."""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass
class AssignmentOk:
    person_id: str
    field: str
    value: object = None
    ok = True

    @property
    def message(self) -> str:
        return "Asignación guardada"


@dataclass
class AssignmentConflict:
    person_id: str
    field: str
    value: object
    conflicting_person_id: str
    conflicting_person_name: str
    ok = False

    @property
    def message(self) -> str:
        return f"{self.value} ya está asignado a {self.conflicting_person_name}"


@dataclass
class AssignmentRejected:
    """The proposed value is outside the representable domain."""
    person_id: str
    field: str
    value: object
    reason: str
    ok = False

    @property
    def message(self) -> str:
        return self.reason


@dataclass
class StoreFailure:
    person_id: Optional[str]
    field: Optional[str]
    error: str
    ok = False

    @property
    def message(self) -> str:
        return f"Error al guardar: {self.error}"


ValidationOutcome = Union[AssignmentOk, AssignmentConflict, AssignmentRejected]
MutationOutcome = Union[AssignmentOk, AssignmentConflict, AssignmentRejected, StoreFailure]
