"""
Roster Kernel — Command Definitions v1.0

Commands are **pure data**. They carry intent and payload only.
They contain ZERO roster logic; dispatch.apply_command interprets them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class BaseCommand:
    """Base for all roster commands: a pure data container."""

    command_type: str = ""
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "command_type": self.command_type,
            "payload": dict(self.payload),
        }


@dataclass
class CreateDepartmentCommand(BaseCommand):
    """Register a new department."""

    command_type: str = "create_department"
    # payload keys: alias, name


@dataclass
class CreatePersonCommand(BaseCommand):
    """Admit a new person into their hire department."""

    command_type: str = "create_person"
    # payload keys: alias, first_name, last_name, middle_name (optional),
    #               date_of_hire (date), department (department alias)


@dataclass
class TransferPersonCommand(BaseCommand):
    """Move a person to another department."""

    command_type: str = "transfer_person"
    # payload keys: person, department, effective_date (optional date)


@dataclass
class ListDepartmentsCommand(BaseCommand):
    command_type: str = "list_departments"


@dataclass
class ListPeopleCommand(BaseCommand):
    command_type: str = "list_people"


@dataclass
class ShowDepartmentCommand(BaseCommand):
    """Roster of one department, in natural order."""

    command_type: str = "show_department"
    # payload keys: department


@dataclass
class ShowPersonCommand(BaseCommand):
    """One person's details and department history."""

    command_type: str = "show_person"
    # payload keys: person
