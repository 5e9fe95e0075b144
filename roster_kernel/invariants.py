"""
Roster Kernel — Invariant Checks v1.0

Hard-fail validation. Every check raises InvariantViolationError on failure.
A violation means the kernel's own bookkeeping is wrong, so the error is a
RosterCorruptionError rather than a recoverable RosterError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict

from .errors import RosterCorruptionError

if TYPE_CHECKING:
    from .store import RosterStore


class InvariantViolationError(RosterCorruptionError):
    """Raised when a roster invariant is violated."""

    label = "INVARIANT"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_invariants(store: "RosterStore") -> None:
    """
    Run all 6 invariant checks. Raises InvariantViolationError on the
    first failure.
    """
    _check_alias_index_sorted(store)
    _check_alias_map_consistency(store)
    _check_dangling_references(store)
    _check_roster_sorted(store)
    _check_roster_membership(store)
    _check_history_tail(store)


# ---------------------------------------------------------------------------
# Individual checks (private)
# ---------------------------------------------------------------------------

def _check_alias_index_sorted(store: "RosterStore") -> None:
    """Both alias indexes strictly ascending."""
    for index in (store.department_index, store.person_index):
        aliases = [alias for alias, _ in index]
        for a, b in zip(aliases, aliases[1:]):
            if not a < b:
                raise InvariantViolationError(
                    "alias_index_sorted",
                    f"{index.namespace} index out of order at {a!r}, {b!r}",
                )


def _check_alias_map_consistency(store: "RosterStore") -> None:
    """Index contents equal the alias maps, and every id is in its arena."""
    pairs = (
        ("department", store.department_index, store.departments_by_alias(), store.departments),
        ("person", store.person_index, store.people_by_alias(), store.people),
    )
    for namespace, index, by_alias, arena in pairs:
        if dict(index.entries()) != dict(by_alias):
            raise InvariantViolationError(
                "alias_map_consistency",
                f"{namespace} alias index and alias map disagree",
            )
        if sorted(by_alias.values()) != sorted(arena.keys()):
            raise InvariantViolationError(
                "alias_map_consistency",
                f"{namespace} aliases do not cover the {namespace} arena one-to-one",
            )


def _check_dangling_references(store: "RosterStore") -> None:
    """Every id in a roster or history entry exists."""
    for dept in store.departments.values():
        for pid in dept.employees:
            if pid not in store.people:
                raise InvariantViolationError(
                    "dangling_reference",
                    f"Department {dept.id} lists missing person {pid}",
                )
    for person in store.people.values():
        if person.department_id not in store.departments:
            raise InvariantViolationError(
                "dangling_reference",
                f"Person {person.id} points at missing department {person.department_id}",
            )
        for entry in person.history:
            if entry.department_id not in store.departments:
                raise InvariantViolationError(
                    "dangling_reference",
                    f"Person {person.id} history names missing department "
                    f"{entry.department_id}",
                )


def _check_roster_sorted(store: "RosterStore") -> None:
    """Every roster strictly ascending by (last, first, id), keys current."""
    for dept in store.departments.values():
        for a, b in zip(dept.roster, dept.roster[1:]):
            if not a < b:
                raise InvariantViolationError(
                    "roster_sorted",
                    f"Department {dept.id} roster out of order at {a!r}, {b!r}",
                )
        for key in dept.roster:
            if store.people[key[2]].sort_key != key:
                raise InvariantViolationError(
                    "roster_sorted",
                    f"Department {dept.id} holds stale key {key!r}",
                )


def _check_roster_membership(store: "RosterStore") -> None:
    """Each person listed in exactly one roster: the one they point at."""
    listed_in: Dict[int, int] = {}
    for dept in store.departments.values():
        for pid in dept.employees:
            if pid in listed_in:
                raise InvariantViolationError(
                    "roster_membership",
                    f"Person {pid} listed in departments {listed_in[pid]} and {dept.id}",
                )
            listed_in[pid] = dept.id
    for person in store.people.values():
        where = listed_in.get(person.id)
        if where != person.department_id:
            raise InvariantViolationError(
                "roster_membership",
                f"Person {person.id} points at department {person.department_id} "
                f"but is listed in {where}",
            )


def _check_history_tail(store: "RosterStore") -> None:
    """History is non-empty and its last entry names the current department."""
    for person in store.people.values():
        if not person.history:
            raise InvariantViolationError(
                "history_tail",
                f"Person {person.id} has an empty department history",
            )
        if person.history[-1].department_id != person.department_id:
            raise InvariantViolationError(
                "history_tail",
                f"Person {person.id} history ends at department "
                f"{person.history[-1].department_id}, current is {person.department_id}",
            )
