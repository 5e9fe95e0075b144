"""
Roster Kernel — Alias Index

Sorted (alias, id) sequence. Kept ordered on every insert so listing
never sorts on read. Aliases compare as plain case-sensitive strings.
"""

from __future__ import annotations

from bisect import bisect_left
from typing import Iterator, List, Optional, Tuple

from .errors import AliasInUseError


class AliasIndex:
    """Alias-ordered index of entity ids for one namespace."""

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace
        self._aliases: List[str] = []
        self._ids: List[int] = []

    def __len__(self) -> int:
        return len(self._aliases)

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and self._find(alias) is not None

    def __iter__(self) -> Iterator[Tuple[str, int]]:
        return iter(self.entries())

    def _find(self, alias: str) -> Optional[int]:
        i = bisect_left(self._aliases, alias)
        if i < len(self._aliases) and self._aliases[i] == alias:
            return i
        return None

    def insert(self, alias: str, entity_id: int) -> None:
        i = bisect_left(self._aliases, alias)
        if i < len(self._aliases) and self._aliases[i] == alias:
            raise AliasInUseError(self.namespace, alias)
        self._aliases.insert(i, alias)
        self._ids.insert(i, entity_id)

    def lookup(self, alias: str) -> Optional[int]:
        i = self._find(alias)
        return None if i is None else self._ids[i]

    def remove(self, alias: str) -> int:
        """Drop *alias* and return its id. Used to roll back a failed admission."""
        i = self._find(alias)
        if i is None:
            raise KeyError(alias)
        del self._aliases[i]
        return self._ids.pop(i)

    def entries(self) -> List[Tuple[str, int]]:
        """Snapshot of (alias, id) pairs in alias order."""
        return list(zip(self._aliases, self._ids))
