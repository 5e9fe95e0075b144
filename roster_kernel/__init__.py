"""
Roster Kernel v1.0
In-memory department/personnel roster with sorted alias indexes.
Departments and people live in id-keyed arenas owned by RosterStore.
"""

from .errors import (
    RosterError,
    AliasInUseError,
    NoSuchDepartmentError,
    NoSuchPersonError,
    AlreadyInDepartmentError,
    EmployeeAlreadyListedError,
    EmployeeNotListedError,
    IncompletePersonError,
    RosterCorruptionError,
)
from .alias_index import AliasIndex
from .department import Department
from .personnel import Name, HistoryEntry, PersonSpec, Person, build_person_spec
from .invariants import InvariantViolationError, validate_invariants
from .diagnostics import compute_diagnostics
from .store import RosterStore
from .commands import (
    BaseCommand,
    CreateDepartmentCommand,
    CreatePersonCommand,
    TransferPersonCommand,
    ListDepartmentsCommand,
    ListPeopleCommand,
    ShowDepartmentCommand,
    ShowPersonCommand,
)
from .dispatch import CommandResult, apply_command

__all__ = [
    "RosterError",
    "AliasInUseError",
    "NoSuchDepartmentError",
    "NoSuchPersonError",
    "AlreadyInDepartmentError",
    "EmployeeAlreadyListedError",
    "EmployeeNotListedError",
    "IncompletePersonError",
    "RosterCorruptionError",
    "AliasIndex",
    "Department",
    "Name",
    "HistoryEntry",
    "PersonSpec",
    "Person",
    "build_person_spec",
    "InvariantViolationError",
    "validate_invariants",
    "compute_diagnostics",
    "RosterStore",
    "BaseCommand",
    "CreateDepartmentCommand",
    "CreatePersonCommand",
    "TransferPersonCommand",
    "ListDepartmentsCommand",
    "ListPeopleCommand",
    "ShowDepartmentCommand",
    "ShowPersonCommand",
    "CommandResult",
    "apply_command",
]
