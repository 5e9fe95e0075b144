"""
Roster Kernel — Roster Store v1.0

Top-level aggregate and the only mutation entry point. Owns the
department and person arenas, both alias maps, both alias indexes and
the id counters. Cross-entity operations go through here so the
person/roster pointers never drift apart.

Every mutation runs to completion or leaves no trace:
  - create_department: map insert, index insert, then id commit
  - create_person:     map + index insert, arena insert, first roster add;
                       any failure unwinds all of it
  - transfer_person:   delegated to Person.transfer (which restores the
                       old roster entry on a failed insert)

When check_invariants is on, validate_invariants runs after each mutation.
"""

from __future__ import annotations

import logging
from datetime import date
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .alias_index import AliasIndex
from .department import Department
from .diagnostics import compute_diagnostics
from .errors import (
    AliasInUseError,
    EmployeeAlreadyListedError,
    NoSuchDepartmentError,
    NoSuchPersonError,
    RosterCorruptionError,
)
from .invariants import validate_invariants
from .personnel import HistoryEntry, Person, PersonSpec

logger = logging.getLogger(__name__)


class RosterStore:
    """
    In-memory roster of departments and people.

    Handles are integer ids. Departments are numbered from 1 in creation
    order; people likewise, in admission order.
    """

    def __init__(self, check_invariants: bool = True) -> None:
        self._departments: Dict[int, Department] = {}
        self._people: Dict[int, Person] = {}
        self._dept_aliases: Dict[str, int] = {}
        self._person_aliases: Dict[str, int] = {}
        self._dept_index = AliasIndex("department")
        self._person_index = AliasIndex("person")
        self.department_count: int = 0
        self.employee_count: int = 0
        self.transfer_count: int = 0
        self.check_invariants = check_invariants

    # -- Arena access -------------------------------------------------------

    @property
    def departments(self) -> Mapping[int, Department]:
        return MappingProxyType(self._departments)

    @property
    def people(self) -> Mapping[int, Person]:
        return MappingProxyType(self._people)

    @property
    def department_index(self) -> AliasIndex:
        return self._dept_index

    @property
    def person_index(self) -> AliasIndex:
        return self._person_index

    def department(self, department_id: int) -> Department:
        try:
            return self._departments[department_id]
        except KeyError:
            raise NoSuchDepartmentError(department_id) from None

    def person(self, person_id: int) -> Person:
        try:
            return self._people[person_id]
        except KeyError:
            raise NoSuchPersonError(person_id) from None

    def find_department(self, alias: str) -> Department:
        department_id = self._dept_aliases.get(alias)
        if department_id is None:
            raise NoSuchDepartmentError(alias)
        return self._departments[department_id]

    def find_person(self, alias: str) -> Person:
        person_id = self._person_aliases.get(alias)
        if person_id is None:
            raise NoSuchPersonError(alias)
        return self._people[person_id]

    def roster(self, department_id: int) -> List[Person]:
        """People in *department_id*, in natural order."""
        return [self._people[pid] for pid in self.department(department_id).employees]

    # -- Mutation -----------------------------------------------------------

    def create_department(self, alias: str, display_name: str) -> int:
        """Register a department under *alias* and return its id."""
        if alias in self._dept_aliases:
            raise AliasInUseError("department", alias)

        department_id = self.department_count + 1
        self._dept_aliases[alias] = department_id
        try:
            self._dept_index.insert(alias, department_id)
        except AliasInUseError:
            del self._dept_aliases[alias]
            logger.warning("department index already held alias %r; map entry undone", alias)
            raise

        self._departments[department_id] = Department(id=department_id, name=display_name)
        self.department_count = department_id
        logger.debug("created department %r (#%d) %r", alias, department_id, display_name)
        self._validate()
        return department_id

    def create_person(self, alias: str, spec: PersonSpec) -> int:
        """
        Admit a person under *alias* and enrol them in their hire department.

        Nothing is left behind if any step fails.
        """
        if alias in self._person_aliases:
            raise AliasInUseError("person", alias)
        department = self._departments.get(spec.department_id)
        if department is None:
            raise NoSuchDepartmentError(spec.department_id)

        person_id = self.employee_count + 1
        person = Person.from_spec(person_id, spec)

        self._person_aliases[alias] = person_id
        try:
            self._person_index.insert(alias, person_id)
        except AliasInUseError:
            del self._person_aliases[alias]
            logger.warning("person index already held alias %r; map entry undone", alias)
            raise
        self._people[person_id] = person
        self.employee_count = person_id

        try:
            department.add_employee(person)
        except EmployeeAlreadyListedError:
            del self._people[person_id]
            self._person_index.remove(alias)
            del self._person_aliases[alias]
            self.employee_count = person_id - 1
            logger.warning("admission of %r rolled back: already on roster", alias)
            raise

        logger.debug(
            "created person %r (#%d) %s in department #%d",
            alias, person_id, person.name, department.id,
        )
        self._validate()
        return person_id

    def transfer_person(
        self,
        person_alias: str,
        dept_alias: str,
        effective_date: Optional[date] = None,
    ) -> HistoryEntry:
        """
        Move a person to another department.

        effective_date defaults to today. Raises AlreadyInDepartmentError
        for a same-department move and RosterCorruptionError when the
        rosters disagree with the person's department pointer.
        """
        person = self.find_person(person_alias)
        target = self.find_department(dept_alias)
        current = self._departments.get(person.department_id)
        if current is None:
            raise RosterCorruptionError(
                "dangling_reference",
                f"Person {person.id} points at missing department {person.department_id}",
            )
        if effective_date is None:
            effective_date = date.today()

        try:
            entry = person.transfer(current, target, effective_date)
        except RosterCorruptionError as exc:
            logger.error("transfer of %r to %r aborted: %s", person_alias, dept_alias, exc)
            raise

        self.transfer_count += 1
        logger.debug(
            "transferred %r from #%d to #%d effective %s",
            person_alias, current.id, target.id, effective_date.isoformat(),
        )
        self._validate()
        return entry

    # -- Queries ------------------------------------------------------------

    def list_departments(self) -> List[Tuple[str, int]]:
        return self._dept_index.entries()

    def list_people(self) -> List[Tuple[str, int]]:
        return self._person_index.entries()

    def departments_by_alias(self) -> Mapping[str, int]:
        return MappingProxyType(self._dept_aliases)

    def people_by_alias(self) -> Mapping[str, int]:
        return MappingProxyType(self._person_aliases)

    def alias_of_department(self, department_id: int) -> str:
        for alias, did in self._dept_index:
            if did == department_id:
                return alias
        raise NoSuchDepartmentError(department_id)

    def alias_of_person(self, person_id: int) -> str:
        for alias, pid in self._person_index:
            if pid == person_id:
                return alias
        raise NoSuchPersonError(person_id)

    def get_diagnostics(self) -> dict:
        """Return diagnostic snapshot of the current roster."""
        return compute_diagnostics(self)

    def to_dict(self) -> dict:
        """Serialise the roster to a plain dict (for diagnostics / logging)."""
        return {
            "departments": {
                alias: {
                    "id": did,
                    "name": self._departments[did].name,
                    "employees": list(self._departments[did].employees),
                }
                for alias, did in self._dept_index
            },
            "people": {
                alias: {
                    "id": pid,
                    "name": str(self._people[pid].name),
                    "date_of_hire": self._people[pid].date_of_hire.isoformat(),
                    "department_id": self._people[pid].department_id,
                    "history": [
                        [h.department_id, h.date.isoformat()]
                        for h in self._people[pid].history
                    ],
                }
                for alias, pid in self._person_index
            },
            "department_count": self.department_count,
            "employee_count": self.employee_count,
            "transfer_count": self.transfer_count,
        }

    # -- Internal -----------------------------------------------------------

    def _validate(self) -> None:
        if self.check_invariants:
            validate_invariants(self)
