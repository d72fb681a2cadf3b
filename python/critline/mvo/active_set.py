"""
Active Sets
===========

Sorted index sets used to partition solver variables into IN and OUT.
"""

from __future__ import annotations

from typing import Iterator, List


class ActiveSet:
    """
    A fixed-capacity set of integers kept in ascending order.

    Every scan of the solver walks these sets in index order, so the
    ordering decides which candidate wins a tie.

    Args:
        capacity: Maximum number of items the set may hold

    Example:
        >>> s = ActiveSet(4)
        >>> s.add(3); s.add(1)
        >>> s.find(3)
        1
    """

    __slots__ = ("_items", "_capacity")

    def __init__(self, capacity: int) -> None:
        self._items: List[int] = []
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> int:
        return self._items[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __contains__(self, item: int) -> bool:
        return self.find(item) >= 0

    def add(self, item: int) -> None:
        """Insert ``item`` keeping the ascending order."""
        if len(self._items) >= self._capacity:
            raise IndexError(f"ActiveSet is full (capacity {self._capacity})")
        i = len(self._items)
        while i > 0 and item <= self._items[i - 1]:
            i -= 1
        self._items.insert(i, item)

    def remove_at(self, index: int) -> None:
        del self._items[index]

    def remove(self, item: int) -> None:
        index = self.find(item)
        if index < 0:
            raise KeyError(item)
        self.remove_at(index)

    def find(self, item: int) -> int:
        """Position of ``item``, or -1 when absent."""
        for i, value in enumerate(self._items):
            if value == item:
                return i
        return -1

    def to_list(self) -> List[int]:
        return list(self._items)

    def __repr__(self) -> str:
        return "[" + " ".join(str(i) for i in self._items) + "]"
