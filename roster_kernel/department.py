"""
Roster Kernel — Department Roster

A department owns a roster of person ids kept in natural order
(last name, first name). Entries are stored as sort keys so the
roster can be binary-searched without touching the person arena.

Callers outside the kernel should go through Person.transfer / RosterStore
rather than calling add_employee / remove_employee directly.
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Tuple

from .errors import EmployeeAlreadyListedError, EmployeeNotListedError

if TYPE_CHECKING:
    from .personnel import Person

RosterKey = Tuple[str, str, int]


@dataclass
class Department:
    """A department and its sorted roster."""

    id: int
    name: str
    roster: List[RosterKey] = field(default_factory=list)

    def __str__(self) -> str:
        return f"Dept. #{self.id}: {self.name}, {len(self.roster)} employees"

    def __len__(self) -> int:
        return len(self.roster)

    @property
    def employees(self) -> Tuple[int, ...]:
        """Person ids in natural order."""
        return tuple(key[2] for key in self.roster)

    def lists(self, person: "Person") -> bool:
        key = person.sort_key
        i = bisect_left(self.roster, key)
        return i < len(self.roster) and self.roster[i] == key

    def add_employee(self, person: "Person") -> None:
        """Sorted insert. Raises EmployeeAlreadyListedError if present."""
        key = person.sort_key
        i = bisect_left(self.roster, key)
        if i < len(self.roster) and self.roster[i] == key:
            raise EmployeeAlreadyListedError(person.id, self.id)
        self.roster.insert(i, key)

    def remove_employee(self, person: "Person") -> int:
        """Remove *person* and return their id. Raises EmployeeNotListedError."""
        key = person.sort_key
        i = bisect_left(self.roster, key)
        if i == len(self.roster) or self.roster[i] != key:
            raise EmployeeNotListedError(person.id, self.id)
        return self.roster.pop(i)[2]
