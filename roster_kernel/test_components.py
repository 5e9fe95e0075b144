"""
Roster Kernel v1.0 — Component Tests

AliasIndex, Department roster, PersonSpec validation, Person.transfer
failure paths, store rollback paths, invariant checker, diagnostics and
command dispatch.

Run:  pytest roster_kernel/test_components.py
"""

from __future__ import annotations

import os
import sys
from datetime import date

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from roster_kernel import (
    AliasIndex,
    AliasInUseError,
    CreateDepartmentCommand,
    CreatePersonCommand,
    Department,
    EmployeeAlreadyListedError,
    EmployeeNotListedError,
    HistoryEntry,
    IncompletePersonError,
    InvariantViolationError,
    ListDepartmentsCommand,
    ListPeopleCommand,
    Name,
    Person,
    RosterCorruptionError,
    RosterError,
    RosterStore,
    ShowDepartmentCommand,
    ShowPersonCommand,
    TransferPersonCommand,
    BaseCommand,
    apply_command,
    build_person_spec,
    compute_diagnostics,
    validate_invariants,
)


def _person(pid: int, first: str, last: str, dept_id: int = 1) -> Person:
    return Person(
        id=pid,
        name=Name(last=last, first=first),
        date_of_hire=date(2020, 1, 1),
        department_id=dept_id,
        history=[HistoryEntry(dept_id, date(2020, 1, 1))],
    )


def _store(check_invariants: bool = True) -> RosterStore:
    store = RosterStore(check_invariants=check_invariants)
    eng = store.create_department("eng", "Engineering")
    store.create_department("sales", "Sales")
    store.create_person("sally", build_person_spec(
        first_name="Sally", last_name="Smith",
        date_of_hire=date(2020, 1, 15), department_id=eng,
    ))
    return store


# ───────────────────────────────────────────────────────────────
# AliasIndex
# ───────────────────────────────────────────────────────────────

class TestAliasIndex:

    def test_insert_keeps_alias_order(self) -> None:
        index = AliasIndex("department")
        for i, alias in enumerate(["sales", "Eng", "eng", "hr"], start=1):
            index.insert(alias, i)
        # case-sensitive: uppercase sorts first
        assert index.entries() == [("Eng", 2), ("eng", 3), ("hr", 4), ("sales", 1)]
        assert len(index) == 4
        assert "hr" in index and "HR" not in index

    def test_duplicate_insert_rejected(self) -> None:
        index = AliasIndex("person")
        index.insert("sally", 1)
        with pytest.raises(AliasInUseError) as exc_info:
            index.insert("sally", 2)
        assert exc_info.value.namespace == "person"
        assert index.entries() == [("sally", 1)]

    def test_lookup_and_remove(self) -> None:
        index = AliasIndex("person")
        index.insert("b", 2)
        index.insert("a", 1)
        assert index.lookup("a") == 1
        assert index.lookup("zz") is None
        assert index.remove("a") == 1
        assert list(index) == [("b", 2)]
        with pytest.raises(KeyError):
            index.remove("a")

    def test_store_accepts_any_alias_text(self) -> None:
        store = RosterStore()
        for alias in ["zeta", "big sales", "alpha"]:
            store.create_department(alias, alias.title())
        assert [alias for alias, _ in store.list_departments()] == [
            "alpha", "big sales", "zeta",
        ]
        sally_id = store.create_person("sally smith", build_person_spec(
            first_name="Sally", last_name="Smith",
            date_of_hire=date(2020, 1, 15),
            department_id=store.find_department("big sales").id,
        ))
        assert store.find_person("sally smith").id == sally_id
        assert store.find_department("big sales").employees == (sally_id,)


# ───────────────────────────────────────────────────────────────
# Department roster
# ───────────────────────────────────────────────────────────────

class TestDepartment:

    def test_roster_sorted_by_last_then_first(self) -> None:
        dept = Department(id=1, name="Engineering")
        people = [
            _person(1, "Sally", "Smith"),
            _person(2, "Amir", "Haddad"),
            _person(3, "Adam", "Smith"),
            _person(4, "Zoe", "Abe"),
        ]
        for p in people:
            dept.add_employee(p)
        assert dept.employees == (4, 2, 3, 1)
        assert str(dept) == "Dept. #1: Engineering, 4 employees"

    def test_duplicate_add_rejected(self) -> None:
        dept = Department(id=1, name="Engineering")
        sally = _person(1, "Sally", "Smith")
        dept.add_employee(sally)
        with pytest.raises(EmployeeAlreadyListedError):
            dept.add_employee(sally)
        assert dept.employees == (1,)

    def test_remove_returns_id_or_raises(self) -> None:
        dept = Department(id=1, name="Engineering")
        sally = _person(1, "Sally", "Smith")
        dept.add_employee(sally)
        assert dept.remove_employee(sally) == 1
        assert len(dept) == 0
        with pytest.raises(EmployeeNotListedError):
            dept.remove_employee(sally)

    def test_namesakes_stay_distinct(self) -> None:
        dept = Department(id=1, name="Engineering")
        first, second = _person(1, "Li", "Chen"), _person(2, "Li", "Chen")
        dept.add_employee(second)
        dept.add_employee(first)
        assert dept.employees == (1, 2)
        assert dept.remove_employee(second) == 2
        assert dept.employees == (1,)
        assert dept.lists(first) and not dept.lists(second)


# ───────────────────────────────────────────────────────────────
# PersonSpec
# ───────────────────────────────────────────────────────────────

class TestPersonSpec:

    def test_complete_spec(self) -> None:
        spec = build_person_spec(
            first_name="  Sally ", last_name="Smith", middle_name="",
            date_of_hire=date(2020, 1, 15), department_id=1,
        )
        assert spec.first_name == "Sally"
        assert spec.middle_name is None
        assert str(spec.name) == "Smith, Sally"

    def test_middle_name_in_display(self) -> None:
        spec = build_person_spec(
            first_name="Sally", last_name="Smith", middle_name="Ann",
            date_of_hire=date(2020, 1, 15), department_id=1,
        )
        assert str(spec.name) == "Smith, Sally Ann"
        assert spec.name.natural_key == ("Smith", "Sally")

    def test_missing_fields_listed(self) -> None:
        with pytest.raises(IncompletePersonError) as exc_info:
            build_person_spec(first_name="Sally", last_name="", department_id=None)
        assert set(exc_info.value.missing) == {"last_name", "date_of_hire", "department_id"}
        assert isinstance(exc_info.value, RosterError)

    def test_bad_date_reported(self) -> None:
        with pytest.raises(IncompletePersonError) as exc_info:
            build_person_spec(
                first_name="Sally", last_name="Smith",
                date_of_hire="not a date", department_id=1,
            )
        assert exc_info.value.missing == []
        assert "date_of_hire" in exc_info.value.detail


# ───────────────────────────────────────────────────────────────
# Person.transfer failure paths
# ───────────────────────────────────────────────────────────────

class TestTransferCorruption:

    def test_not_listed_in_current_roster(self) -> None:
        store = _store(check_invariants=False)
        eng, sales = store.find_department("eng"), store.find_department("sales")
        sally = store.find_person("sally")
        eng.roster.clear()

        with pytest.raises(RosterCorruptionError) as exc_info:
            store.transfer_person("sally", "sales", date(2021, 6, 1))

        assert exc_info.value.rule == "not_listed_in_department"
        assert not isinstance(exc_info.value, RosterError)
        assert sales.employees == ()
        assert sally.department_id == eng.id
        assert len(sally.history) == 1

    def test_already_listed_in_target_roster(self) -> None:
        store = _store(check_invariants=False)
        eng, sales = store.find_department("eng"), store.find_department("sales")
        sally = store.find_person("sally")
        sales.roster.append(sally.sort_key)

        with pytest.raises(RosterCorruptionError) as exc_info:
            store.transfer_person("sally", "sales", date(2021, 6, 1))

        assert exc_info.value.rule == "already_listed_in_department"
        # old roster entry restored, pointer and history untouched
        assert eng.employees == (sally.id,)
        assert sally.department_id == eng.id
        assert len(sally.history) == 1
        assert store.transfer_count == 0

    def test_wrong_current_department(self) -> None:
        store = _store(check_invariants=False)
        sally = store.find_person("sally")
        sales = store.find_department("sales")
        # caller claims sally currently sits in sales
        with pytest.raises(RosterCorruptionError) as exc_info:
            sally.transfer(sales, sales, date(2021, 6, 1))
        assert exc_info.value.rule == "department_pointer"


# ───────────────────────────────────────────────────────────────
# Store rollback paths
# ───────────────────────────────────────────────────────────────

class TestStoreRollback:

    def test_department_index_disagreement_undoes_map(self) -> None:
        store = RosterStore(check_invariants=False)
        store.department_index.insert("ghost", 99)
        with pytest.raises(AliasInUseError):
            store.create_department("ghost", "Ghost")
        assert "ghost" not in store.departments_by_alias()
        assert store.department_count == 0
        assert len(store.departments) == 0

    def test_person_index_disagreement_undoes_map(self) -> None:
        store = _store(check_invariants=False)
        store.person_index.insert("ghost", 99)
        spec = build_person_spec(
            first_name="Gus", last_name="Ghost",
            date_of_hire=date(2021, 1, 1), department_id=1,
        )
        with pytest.raises(AliasInUseError):
            store.create_person("ghost", spec)
        assert "ghost" not in store.people_by_alias()
        assert store.employee_count == 1

    def test_failed_enrolment_leaves_no_trace(self) -> None:
        store = _store(check_invariants=False)
        eng = store.find_department("eng")
        # occupy the roster slot the next admission would take
        eng.roster.insert(0, ("Jones", "Bob", 2))
        spec = build_person_spec(
            first_name="Bob", last_name="Jones",
            date_of_hire=date(2021, 1, 1), department_id=eng.id,
        )
        with pytest.raises(EmployeeAlreadyListedError):
            store.create_person("bob", spec)
        assert "bob" not in store.people_by_alias()
        assert "bob" not in store.person_index
        assert 2 not in store.people
        assert store.employee_count == 1

    def test_unknown_hire_department(self) -> None:
        store = _store()
        spec = build_person_spec(
            first_name="Bob", last_name="Jones",
            date_of_hire=date(2021, 1, 1), department_id=42,
        )
        with pytest.raises(RosterError):
            store.create_person("bob", spec)
        assert store.employee_count == 1


# ───────────────────────────────────────────────────────────────
# Invariants
# ───────────────────────────────────────────────────────────────

class TestInvariants:

    def test_clean_store_passes(self) -> None:
        validate_invariants(_store())

    def test_double_listing_detected(self) -> None:
        store = _store(check_invariants=False)
        sales = store.find_department("sales")
        sales.roster.append(store.find_person("sally").sort_key)
        with pytest.raises(InvariantViolationError) as exc_info:
            validate_invariants(store)
        assert exc_info.value.rule == "roster_membership"
        assert str(exc_info.value).startswith("[INVARIANT:roster_membership]")

    def test_history_tail_detected(self) -> None:
        store = _store(check_invariants=False)
        store.find_person("sally").history.append(HistoryEntry(2, date(2022, 1, 1)))
        with pytest.raises(InvariantViolationError) as exc_info:
            validate_invariants(store)
        assert exc_info.value.rule == "history_tail"

    def test_unsorted_roster_detected(self) -> None:
        store = _store(check_invariants=False)
        eng = store.find_department("eng")
        store.create_person("amir", build_person_spec(
            first_name="Amir", last_name="Haddad",
            date_of_hire=date(2020, 2, 1), department_id=eng.id,
        ))
        eng.roster.reverse()
        with pytest.raises(InvariantViolationError) as exc_info:
            validate_invariants(store)
        assert exc_info.value.rule == "roster_sorted"

    def test_strict_store_refuses_to_continue(self) -> None:
        store = _store()
        store.find_department("eng").roster.clear()
        with pytest.raises(InvariantViolationError):
            store.create_department("ops", "Operations")


# ───────────────────────────────────────────────────────────────
# Diagnostics
# ───────────────────────────────────────────────────────────────

def test_diagnostics_summary() -> None:
    store = _store()
    diag = compute_diagnostics(store)
    assert diag["department_count"] == 2
    assert diag["employee_count"] == 1
    assert diag["largest_department"] == "eng"
    assert diag["empty_departments"] == ["sales"]
    assert diag["warnings"] == ["1 empty department(s): sales"]
    assert store.get_diagnostics() == diag


# ───────────────────────────────────────────────────────────────
# Dispatch
# ───────────────────────────────────────────────────────────────

class TestDispatch:

    def test_full_command_cycle(self) -> None:
        store = RosterStore()
        assert apply_command(store, CreateDepartmentCommand(
            payload={"alias": "eng", "name": "Engineering"})).entity_id == 1
        apply_command(store, CreateDepartmentCommand(
            payload={"alias": "sales", "name": "Sales"}))
        created = apply_command(store, CreatePersonCommand(payload={
            "alias": "sally", "first_name": "Sally", "last_name": "Smith",
            "date_of_hire": date(2020, 1, 15), "department": "eng",
        }))
        assert created.success and created.entity_id == 1

        moved = apply_command(store, TransferPersonCommand(payload={
            "person": "sally", "department": "sales",
            "effective_date": date(2021, 6, 1),
        }))
        assert moved.success
        assert moved.rows == (("sales", date(2021, 6, 1)),)

        assert apply_command(store, ListDepartmentsCommand()).rows == (
            ("eng", "Engineering", 0), ("sales", "Sales", 1),
        )
        assert apply_command(store, ListPeopleCommand()).rows == (("sally", "Smith, Sally"),)
        assert apply_command(store, ShowDepartmentCommand(
            payload={"department": "sales"})).rows == (("sally", "Smith, Sally"),)
        assert apply_command(store, ShowPersonCommand(payload={"person": "sally"})).rows == (
            ("eng", "Engineering", date(2020, 1, 15)),
            ("sales", "Sales", date(2021, 6, 1)),
        )

    def test_recoverable_errors_become_results(self) -> None:
        store = _store()
        dup = apply_command(store, CreateDepartmentCommand(
            payload={"alias": "eng", "name": "Again"}))
        assert not dup.success and "alias 'eng' in use" in dup.reason

        incomplete = apply_command(store, CreatePersonCommand(
            payload={"alias": "bob", "department": "eng"}))
        assert not incomplete.success
        assert "first_name" in incomplete.reason

        no_alias = apply_command(store, CreatePersonCommand(payload={
            "first_name": "Bob", "last_name": "Jones",
            "date_of_hire": date(2021, 1, 1), "department": "eng",
        }))
        assert not no_alias.success
        assert no_alias.reason == "Required fields missing: alias"
        assert store.employee_count == 1

        unknown = apply_command(store, CreatePersonCommand(payload={
            "alias": "bob", "first_name": "Bob", "last_name": "Jones",
            "date_of_hire": date(2021, 1, 1), "department": "nope",
        }))
        assert not unknown.success

        same = apply_command(store, TransferPersonCommand(
            payload={"person": "sally", "department": "eng"}))
        assert not same.success and "same department" in same.reason

    def test_corruption_propagates(self) -> None:
        store = _store(check_invariants=False)
        store.find_department("eng").roster.clear()
        with pytest.raises(RosterCorruptionError):
            apply_command(store, TransferPersonCommand(
                payload={"person": "sally", "department": "sales"}))

    def test_unknown_command_type(self) -> None:
        with pytest.raises(ValueError):
            apply_command(RosterStore(), BaseCommand(command_type="delete_everything"))
