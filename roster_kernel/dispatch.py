"""
Roster Kernel — Command Dispatch v1.0

Single dispatcher from command to RosterStore call. Recoverable
RosterErrors become unsuccessful CommandResults; RosterCorruptionError
is never caught here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

from .commands import BaseCommand
from .errors import IncompletePersonError, NoSuchDepartmentError, RosterError
from .personnel import build_person_spec
from .store import RosterStore


@dataclass(frozen=True)
class CommandResult:
    """Structured, immutable outcome of a command."""

    command_type: str = ""
    success: bool = True
    entity_id: int = 0
    rows: Tuple[Tuple[Any, ...], ...] = ()
    reason: str = ""


# ---------------------------------------------------------------------------
# Public dispatcher
# ---------------------------------------------------------------------------

def apply_command(store: RosterStore, command: BaseCommand) -> CommandResult:
    """Apply *command* to *store* and return its result."""
    ctype = command.command_type

    if ctype == "create_department":
        handler = _apply_create_department
    elif ctype == "create_person":
        handler = _apply_create_person
    elif ctype == "transfer_person":
        handler = _apply_transfer_person
    elif ctype == "list_departments":
        handler = _apply_list_departments
    elif ctype == "list_people":
        handler = _apply_list_people
    elif ctype == "show_department":
        handler = _apply_show_department
    elif ctype == "show_person":
        handler = _apply_show_person
    else:
        raise ValueError(f"Unknown command type: {ctype}")

    try:
        return handler(store, command)
    except RosterError as exc:
        return CommandResult(command_type=ctype, success=False, reason=str(exc))


# ---------------------------------------------------------------------------
# Individual handlers (private)
# ---------------------------------------------------------------------------

def _apply_create_department(store: RosterStore, command: BaseCommand) -> CommandResult:
    p = command.payload
    department_id = store.create_department(p["alias"], p["name"])
    return CommandResult(command_type=command.command_type, entity_id=department_id)


def _apply_create_person(store: RosterStore, command: BaseCommand) -> CommandResult:
    p = command.payload
    alias = p.get("alias")
    if not alias:
        raise IncompletePersonError(["alias"])
    dept_alias = p.get("department")
    department_id = None
    if dept_alias is not None:
        department_id = store.departments_by_alias().get(dept_alias)
        if department_id is None:
            raise NoSuchDepartmentError(dept_alias)

    spec = build_person_spec(
        first_name=p.get("first_name"),
        last_name=p.get("last_name"),
        middle_name=p.get("middle_name"),
        date_of_hire=p.get("date_of_hire"),
        department_id=department_id,
    )
    person_id = store.create_person(alias, spec)
    return CommandResult(command_type=command.command_type, entity_id=person_id)


def _apply_transfer_person(store: RosterStore, command: BaseCommand) -> CommandResult:
    p = command.payload
    entry = store.transfer_person(p["person"], p["department"], p.get("effective_date"))
    return CommandResult(
        command_type=command.command_type,
        entity_id=store.find_person(p["person"]).id,
        rows=((p["department"], entry.date),),
    )


def _apply_list_departments(store: RosterStore, command: BaseCommand) -> CommandResult:
    rows = tuple(
        (alias, store.department(did).name, len(store.department(did)))
        for alias, did in store.list_departments()
    )
    return CommandResult(command_type=command.command_type, rows=rows)


def _apply_list_people(store: RosterStore, command: BaseCommand) -> CommandResult:
    rows = tuple(
        (alias, str(store.person(pid).name))
        for alias, pid in store.list_people()
    )
    return CommandResult(command_type=command.command_type, rows=rows)


def _apply_show_department(store: RosterStore, command: BaseCommand) -> CommandResult:
    department = store.find_department(command.payload["department"])
    rows = tuple(
        (store.alias_of_person(person.id), str(person.name))
        for person in store.roster(department.id)
    )
    return CommandResult(
        command_type=command.command_type, entity_id=department.id, rows=rows,
    )


def _apply_show_person(store: RosterStore, command: BaseCommand) -> CommandResult:
    person = store.find_person(command.payload["person"])
    rows = tuple(
        (
            store.alias_of_department(entry.department_id),
            store.department(entry.department_id).name,
            entry.date,
        )
        for entry in person.history
    )
    return CommandResult(
        command_type=command.command_type, entity_id=person.id, rows=rows,
    )
