"""
Roster Kernel — Personnel Types v1.0

Name, HistoryEntry, PersonSpec and Person.

PersonSpec replaces a step-by-step builder: it is validated in one shot by
build_person_spec(), which either returns a complete spec or raises
IncompletePersonError naming every missing field. A Person only exists once
the store has admitted it, so there is never a half-built Person around.

────────────────────────────────────────────────
DOMAIN GLOSSARY
────────────────────────────────────────────────

Natural order:
    (last name, first name). The middle name does not participate.
    Ties are broken by person id so two namesakes stay distinguishable.

History entry:
    A department assignment and the date it took effect.
    history[0] is always the hire department, dated date_of_hire.

────────────────────────────────────────────────
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .department import Department
from .errors import (
    AlreadyInDepartmentError,
    EmployeeAlreadyListedError,
    EmployeeNotListedError,
    IncompletePersonError,
    RosterCorruptionError,
)

# Error types that mean "the caller never supplied a usable value".
_MISSING_ERROR_TYPES = frozenset({"missing", "string_too_short"})


@dataclass(frozen=True)
class Name:
    last: str
    first: str
    middle: Optional[str] = None

    def __str__(self) -> str:
        if self.middle:
            return f"{self.last}, {self.first} {self.middle}"
        return f"{self.last}, {self.first}"

    @property
    def natural_key(self) -> Tuple[str, str]:
        return (self.last, self.first)


@dataclass(frozen=True)
class HistoryEntry:
    """A department assignment and its effective date."""

    department_id: int
    date: date


class PersonSpec(BaseModel):
    """Complete, validated description of a person to admit."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    middle_name: Optional[str] = None
    date_of_hire: date
    department_id: int

    @field_validator("middle_name")
    @classmethod
    def _blank_middle_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @property
    def name(self) -> Name:
        return Name(last=self.last_name, first=self.first_name, middle=self.middle_name)


def build_person_spec(**fields: Any) -> PersonSpec:
    """
    Validate *fields* into a PersonSpec.

    Raises IncompletePersonError listing every required field that is
    missing, None or blank. Other validation failures (wrong types, bad
    dates) are reported in the error detail.
    """
    supplied = {k: v for k, v in fields.items() if v is not None}
    try:
        return PersonSpec(**supplied)
    except ValidationError as exc:
        missing: List[str] = []
        other: List[str] = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err["loc"])
            if err["type"] in _MISSING_ERROR_TYPES:
                missing.append(loc)
            else:
                other.append(f"{loc}: {err['msg']}")
        raise IncompletePersonError(missing, "; ".join(other)) from exc


@dataclass
class Person:
    """An admitted person. Mutated only through transfer()."""

    id: int
    name: Name
    date_of_hire: date
    department_id: int
    history: List[HistoryEntry] = field(default_factory=list)

    @classmethod
    def from_spec(cls, person_id: int, spec: PersonSpec) -> "Person":
        return cls(
            id=person_id,
            name=spec.name,
            date_of_hire=spec.date_of_hire,
            department_id=spec.department_id,
            history=[HistoryEntry(spec.department_id, spec.date_of_hire)],
        )

    def __str__(self) -> str:
        return f"{self.name}, DOH: {self.date_of_hire.isoformat()}"

    @property
    def sort_key(self) -> Tuple[str, str, int]:
        return (self.name.last, self.name.first, self.id)

    def transfer(
        self,
        current: Department,
        new_department: Department,
        effective_date: date,
    ) -> HistoryEntry:
        """
        Move this person from *current* to *new_department*.

        Order:
          1. Same department        -> AlreadyInDepartmentError, no mutation
          2. Remove from old roster -> RosterCorruptionError if not listed
          3. Add to new roster      -> RosterCorruptionError if already listed
                                       (old roster entry restored first)
          4. Append history entry
          5. Repoint department_id
        """
        if new_department.id == self.department_id:
            raise AlreadyInDepartmentError(self.id, new_department.id)
        if current.id != self.department_id:
            raise RosterCorruptionError(
                "department_pointer",
                f"Person {self.id} points at department {self.department_id}, "
                f"caller supplied department {current.id}",
            )

        try:
            current.remove_employee(self)
        except EmployeeNotListedError as exc:
            raise RosterCorruptionError("not_listed_in_department", str(exc)) from exc

        try:
            new_department.add_employee(self)
        except EmployeeAlreadyListedError as exc:
            current.add_employee(self)
            raise RosterCorruptionError("already_listed_in_department", str(exc)) from exc

        entry = HistoryEntry(new_department.id, effective_date)
        self.history.append(entry)
        self.department_id = new_department.id
        return entry
