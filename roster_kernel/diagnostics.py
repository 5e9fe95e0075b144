"""
Roster Kernel — Diagnostics v1.0

Compute a diagnostic snapshot of the current roster.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .store import RosterStore


def compute_diagnostics(store: "RosterStore") -> dict:
    """Return a diagnostic dict summarising roster health."""
    sizes = {alias: len(store.departments[did]) for alias, did in store.department_index}

    empty = [alias for alias, size in sizes.items() if size == 0]
    largest = ""
    if sizes:
        # sizes iterates in alias order, so ties go to the first alias
        largest = max(sizes, key=sizes.__getitem__)

    warnings: list[str] = []
    if empty:
        warnings.append(f"{len(empty)} empty department(s): {', '.join(empty)}")

    return {
        "department_count": store.department_count,
        "employee_count": store.employee_count,
        "transfer_count": store.transfer_count,
        "department_sizes": sizes,
        "largest_department": largest,
        "empty_departments": empty,
        "warnings": warnings,
    }
