"""
Roster Kernel — Error Hierarchy v1.0

Two severity classes, never mixed:

  RosterError
      Recoverable, caller-facing. Bad alias, unknown alias, same-department
      transfer, incomplete person data. State is untouched when raised.

  RosterCorruptionError
      Fatal. Alias indices, rosters and department pointers have diverged.
      Not a RosterError: catching RosterError never swallows corruption.
"""

from __future__ import annotations


class RosterError(Exception):
    """Base class for recoverable roster errors."""


class AliasInUseError(RosterError):
    """Raised when an alias is already registered in its namespace."""

    def __init__(self, namespace: str, alias: str) -> None:
        self.namespace = namespace
        self.alias = alias
        super().__init__(f"Could not add {namespace}, alias {alias!r} in use")


class NoSuchDepartmentError(RosterError):
    """Raised when a department alias or id does not resolve."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Could not find department matching {key!r}")


class NoSuchPersonError(RosterError):
    """Raised when a person alias or id does not resolve."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Could not find person matching {key!r}")


class AlreadyInDepartmentError(RosterError):
    """Transfer target is the department the person already belongs to."""

    def __init__(self, person_id: int, department_id: int) -> None:
        self.person_id = person_id
        self.department_id = department_id
        super().__init__(
            f"Invalid transfer to same department "
            f"(person={person_id}, department={department_id})"
        )


class EmployeeAlreadyListedError(RosterError):
    def __init__(self, person_id: int, department_id: int) -> None:
        self.person_id = person_id
        self.department_id = department_id
        super().__init__(
            f"Employee {person_id} already listed in department {department_id}"
        )


class EmployeeNotListedError(RosterError):
    def __init__(self, person_id: int, department_id: int) -> None:
        self.person_id = person_id
        self.department_id = department_id
        super().__init__(
            f"Employee {person_id} not found in department {department_id}"
        )


class IncompletePersonError(RosterError):
    """Raised when a PersonSpec cannot be finalized."""

    def __init__(self, missing: list[str], detail: str = "") -> None:
        self.missing = list(missing)
        self.detail = detail
        msg = "Required fields missing"
        if self.missing:
            msg += f": {', '.join(self.missing)}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class RosterCorruptionError(Exception):
    """Raised when the data layer's own bookkeeping has diverged."""

    label = "CORRUPTION"

    def __init__(self, rule: str, detail: str) -> None:
        self.rule = rule
        self.detail = detail
        super().__init__(f"[{self.label}:{rule}] {detail}")
