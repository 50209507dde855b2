"""
Ordered, deduplicated set of small integers for one cron field.
"""

from __future__ import annotations

from collections.abc import Iterator


class FieldValueSet:
    """Set of legal values for a cron field.

    Written once while a schedule is parsed, then only read. Membership tests
    are O(1); ``values()`` and iteration are in ascending order.
    """

    __slots__ = ("_items", "_capacity")

    def __init__(self, capacity: int = 0) -> None:
        # Capacity is a sizing hint only; Python sets grow on demand.
        self._capacity = capacity
        self._items: set[int] = set()

    @classmethod
    def of(cls, *values: int) -> FieldValueSet:
        """Build a set holding ``values``."""
        field_set = cls(len(values))
        field_set.add(*values)
        return field_set

    def add(self, *values: int) -> None:
        self._items.update(values)

    def contains(self, value: int) -> bool:
        return value in self._items

    def values(self) -> list[int]:
        return sorted(self._items)

    def __contains__(self, value: object) -> bool:
        return value in self._items

    def __iter__(self) -> Iterator[int]:
        return iter(self.values())

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldValueSet):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(frozenset(self._items))

    def __repr__(self) -> str:
        return f"FieldValueSet({self.values()!r})"
