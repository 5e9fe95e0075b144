"""
Text Shell — line-oriented menu over the Roster Kernel.

Every roster change goes through roster_kernel.apply_command; the shell
only parses input, runs the field-editing forms and prints results.

Commands (keyword is case-insensitive, arguments are not):
  help [COMMAND]
  new employee|department
  list departments|employees
  list department ALIAS
  transfer PERSON DEPARTMENT [MM/DD/YYYY]
  show PERSON
  quit
"""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, TextIO

import click

from roster_kernel import (
    CreateDepartmentCommand,
    CreatePersonCommand,
    ListDepartmentsCommand,
    ListPeopleCommand,
    RosterStore,
    ShowDepartmentCommand,
    ShowPersonCommand,
    TransferPersonCommand,
    apply_command,
)

from .config import ShellConfig
from .dates import InvalidDateError, format_date_us, parse_date_us

logger = logging.getLogger(__name__)

NONE_TEXT = "None"
FORM_HINT = 'Enter a line number to modify, "commit" to finish or "cancel" to abort.'
FORM_PROMPT = "?> "

# Commands are split on whitespace, so aliases typed here must be one word.
ALIAS_PATTERN = re.compile(r'^\S+$')


@dataclass(frozen=True)
class HelpEntry:
    keyword: str
    short_desc: str
    long_desc: str


HELP_ENTRIES: List[HelpEntry] = [
    HelpEntry(
        "help",
        'Print this list.  Use "help [COMMAND]" for details on a command.',
        "HELP [COMMAND]\n\nWithout an argument, list every command. "
        "With one, describe that command.",
    ),
    HelpEntry(
        "new",
        "Add a new employee or department entry.",
        "NEW [EMPLOYEE|DEPARTMENT]\n\nEx:  NEW EMPLOYEE\n     NEW DEPARTMENT\n\n"
        "Opens a form. Fields marked * are required. A department must exist\n"
        "before employees can be added to it.",
    ),
    HelpEntry(
        "list",
        "Print a list of departments or employees.",
        "LIST [DEPARTMENTS|EMPLOYEES]\nLIST DEPARTMENT ALIAS\n\n"
        "Prints departments in alphabetical order of alias, or employees\n"
        "(all of them, or one department's) ordered by last name, first name.",
    ),
    HelpEntry(
        "transfer",
        "Move an employee to another department.",
        "TRANSFER PERSON DEPARTMENT [MM/DD/YYYY]\n\n"
        "Moves the employee with alias PERSON to the department with alias\n"
        "DEPARTMENT. The date defaults to today.",
    ),
    HelpEntry(
        "show",
        "Show an employee's details and department history.",
        "SHOW PERSON\n\nPrints name, date of hire, current department and\n"
        "every department assignment with its effective date.",
    ),
    HelpEntry(
        "quit",
        "Exit the program.",
        "QUIT\n\nLeave the program. All data is kept in memory only and is\n"
        "discarded on exit.",
    ),
]

_HELP_BY_KEYWORD: Dict[str, HelpEntry] = {h.keyword: h for h in HELP_ENTRIES}


class TextShell:
    """Interactive read-evaluate loop bound to one RosterStore."""

    def __init__(
        self,
        store: Optional[RosterStore] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        config: Optional[ShellConfig] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.config = config or ShellConfig()
        self.store = store if store is not None else RosterStore(
            check_invariants=self.config.strict_invariants,
        )
        self._in = stdin or sys.stdin
        self._out = stdout or sys.stdout
        self._err = stderr or (stdout if stdout is not None else sys.stderr)
        self._today = today

    # -- I/O ------------------------------------------------------------------

    def _echo(self, message: str = "") -> None:
        click.echo(message, file=self._out)

    def _error(self, message: str) -> None:
        click.echo(message, file=self._err)

    def _read_line(self, prompt: str = "") -> Optional[str]:
        """Prompt and read one line. None on end of input."""
        if prompt:
            click.echo(prompt, file=self._out, nl=False)
            self._out.flush()
        line = self._in.readline()
        if line == "":
            return None
        return line.strip()

    # -- Loop -----------------------------------------------------------------

    def run(self) -> int:
        """Read and execute commands until quit or end of input."""
        self._echo("Type HELP for a list of commands.")
        while True:
            line = self._read_line(self.config.prompt)
            if line is None:
                logger.debug("end of input")
                return 0
            if not self.execute(line):
                return 0

    def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the shell should stop."""
        words = line.split()
        if not words:
            self._echo("Type HELP for a list of commands.")
            return True

        keyword, args = words[0].lower(), words[1:]

        if keyword == "help":
            self._help(args)
        elif keyword == "new":
            self._new(args)
        elif keyword == "list":
            self._list(args)
        elif keyword == "transfer":
            self._transfer(args)
        elif keyword == "show":
            self._show(args)
        elif keyword == "quit":
            self._echo("\nGoodbye.")
            return False
        else:
            self._echo("Type HELP for a list of commands.")
        return True

    # -- Commands -------------------------------------------------------------

    def _short_help(self) -> None:
        self._echo("Type HELP [COMMAND] for more information.")
        self._echo()

    def _help(self, args: List[str]) -> None:
        if not args:
            self._short_help()
            for entry in HELP_ENTRIES:
                self._echo(f"{entry.keyword}:  {entry.short_desc}")
            return
        entry = _HELP_BY_KEYWORD.get(args[0].lower())
        if entry is None:
            self._echo(f"Command not found: {args[0]}")
        else:
            self._echo(entry.long_desc)

    def _new(self, args: List[str]) -> None:
        thing = args[0].lower() if args else ""
        if thing == "employee":
            if not self.store.list_departments():
                self._echo("Cannot add employee: No departments found.")
            else:
                self._employee_form()
        elif thing == "department":
            self._department_form()
        else:
            self._short_help()

    def _list(self, args: List[str]) -> None:
        what = args[0].lower() if args else ""
        if what == "departments":
            result = apply_command(self.store, ListDepartmentsCommand())
            if not result.rows:
                self._echo("No departments found.")
            for alias, name, size in result.rows:
                self._echo(f'"{alias}": {name}, {size} employees')
        elif what == "employees":
            result = apply_command(self.store, ListPeopleCommand())
            if not result.rows:
                self._echo("No employees found.")
            rows = sorted(
                result.rows, key=lambda row: self.store.find_person(row[0]).sort_key,
            )
            for alias, name in rows:
                self._echo(f'"{alias}": {name}')
        elif what == "department" and len(args) > 1:
            result = apply_command(
                self.store, ShowDepartmentCommand(payload={"department": args[1]}),
            )
            if not result.success:
                self._error(f"Error printing list: {result.reason}")
                return
            self._echo(f"{self.store.department(result.entity_id).name}:")
            if not result.rows:
                self._echo("  (no employees)")
            for alias, name in result.rows:
                self._echo(f'  "{alias}": {name}')
        else:
            self._short_help()

    def _transfer(self, args: List[str]) -> None:
        if len(args) not in (2, 3):
            self._echo(_HELP_BY_KEYWORD["transfer"].long_desc)
            return
        payload = {"person": args[0], "department": args[1]}
        if len(args) == 3:
            try:
                payload["effective_date"] = parse_date_us(args[2])
            except InvalidDateError:
                self._echo("Invalid date format")
                return
        else:
            payload["effective_date"] = self._today()

        result = apply_command(self.store, TransferPersonCommand(payload=payload))
        if not result.success:
            self._error(f"Could not transfer: {result.reason}")
            return
        self._echo(
            f'Transferred "{args[0]}" to "{args[1]}" effective '
            f"{format_date_us(payload['effective_date'])}."
        )

    def _show(self, args: List[str]) -> None:
        if len(args) != 1:
            self._echo(_HELP_BY_KEYWORD["show"].long_desc)
            return
        result = apply_command(self.store, ShowPersonCommand(payload={"person": args[0]}))
        if not result.success:
            self._error(f"Could not show employee: {result.reason}")
            return
        person = self.store.person(result.entity_id)
        department = self.store.department(person.department_id)
        self._echo(
            f"{person.name}, DOH: {format_date_us(person.date_of_hire)}, {department.name}"
        )
        self._echo("History:")
        for alias, name, effective in result.rows:
            self._echo(f'  {format_date_us(effective)}  "{alias}": {name}')

    # -- Forms ----------------------------------------------------------------

    def _employee_form(self) -> None:
        fields: Dict[str, Optional[str]] = {
            "alias": None,
            "first_name": None,
            "middle_name": None,
            "last_name": None,
            "department": None,
        }
        date_of_hire: Optional[date] = None

        while True:
            shown = {k: (v if v is not None else NONE_TEXT) for k, v in fields.items()}
            dept_name = NONE_TEXT
            if fields["department"] is not None:
                dept_name = self.store.find_department(fields["department"]).name
            self._echo(f"1: Alias*:       {shown['alias']}")
            self._echo(f"2: First Name*:  {shown['first_name']}")
            self._echo(f"3: Middle Name:  {shown['middle_name']}")
            self._echo(f"4: Last Name*:   {shown['last_name']}")
            self._echo(f"5: Date of Hire: {format_date_us(date_of_hire or self._today())}")
            self._echo(f"6: Department*:  {dept_name}")
            self._echo()
            self._echo(FORM_HINT)

            choice = self._read_line(FORM_PROMPT)
            if choice is None or choice == "cancel":
                self._echo("Employee not added.")
                return

            if choice == "commit":
                if None in (fields["alias"], fields["first_name"],
                            fields["last_name"], fields["department"]):
                    self._echo("Required fields missing")
                    continue
                payload = dict(fields)
                payload["date_of_hire"] = date_of_hire or self._today()
                result = apply_command(self.store, CreatePersonCommand(payload=payload))
                if not result.success:
                    self._error(f"Could not add employee: {result.reason}")
                    continue
                self._echo(f'Added employee "{fields["alias"]}".')
                return

            if choice == "1":
                fields["alias"] = self._read_alias("alias", fields["alias"])
            elif choice == "2":
                fields["first_name"] = self._read_field("first name")
            elif choice == "3":
                fields["middle_name"] = self._read_field("middle name")
            elif choice == "4":
                fields["last_name"] = self._read_field("last name")
            elif choice == "5":
                text = self._read_field("date of hire(MM/DD/YYYY)")
                if text is None:
                    date_of_hire = None
                    continue
                try:
                    date_of_hire = parse_date_us(text)
                except InvalidDateError:
                    self._echo("Invalid date format")
            elif choice == "6":
                alias = self._read_field("initial department")
                if alias is None or alias in self.store.departments_by_alias():
                    fields["department"] = alias
                else:
                    self._echo(f"No department with alias {alias!r}")
            else:
                self._echo("Invalid input")

    def _department_form(self) -> None:
        alias: Optional[str] = None
        name: Optional[str] = None

        while True:
            self._echo(f"1: Unique identifier: {alias or NONE_TEXT}")
            self._echo(f"2: Full name:         {name or NONE_TEXT}")
            self._echo()
            self._echo(FORM_HINT)

            choice = self._read_line(FORM_PROMPT)
            if choice is None or choice == "cancel":
                self._echo("Department not added.")
                return

            if choice == "commit":
                if alias is None or name is None:
                    self._echo("Required fields missing.")
                    continue
                result = apply_command(
                    self.store,
                    CreateDepartmentCommand(payload={"alias": alias, "name": name}),
                )
                if not result.success:
                    self._error(f"Could not add department: {result.reason}")
                    continue
                self._echo(f'Added department "{alias}".')
                return

            if choice == "1":
                alias = self._read_alias("identifier", alias)
            elif choice == "2":
                name = self._read_field("department name")
            else:
                self._echo("Invalid selection.")

    def _read_field(self, label: str) -> Optional[str]:
        """Read one form value. Blank input or end of input clears the field."""
        value = self._read_line(f"Enter {label}: ")
        return value or None

    def _read_alias(self, label: str, current: Optional[str]) -> Optional[str]:
        """Read an alias field. A value with inner whitespace keeps *current*."""
        value = self._read_field(label)
        if value is not None and not ALIAS_PATTERN.match(value):
            self._echo(f"Invalid alias {value!r}: spaces are not allowed")
            return current
        return value
