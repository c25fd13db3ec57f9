# median_palette/pqueue.py
from __future__ import annotations

"""
Simple lazily sorted priority queue.

Items are kept in a plain list and sorted ascending by `key` only when an
ordered read is needed, so a burst of pushes costs one sort. pop() returns the
item with the largest key. Equal keys keep insertion order (stable sort), so
among ties the most recently pushed item is popped first.

The key is fixed per queue; to reorder under a different key, build a new
queue from contents().
"""

from typing import Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class PQueue(Generic[T]):
    def __init__(self, key: Callable[[T], float], items: Iterable[T] = ()) -> None:
        self._key = key
        self._contents: List[T] = list(items)
        self._sorted = not self._contents

    def _sort(self) -> None:
        if not self._sorted:
            self._contents.sort(key=self._key)
            self._sorted = True

    def push(self, item: T) -> None:
        self._contents.append(item)
        self._sorted = False

    def peek(self, index: Optional[int] = None) -> T:
        """Item at ascending rank `index`; the top item when index is None."""
        self._sort()
        if index is None:
            index = len(self._contents) - 1
        return self._contents[index]

    def pop(self) -> T:
        """Remove and return the item with the largest key."""
        if not self._contents:
            raise IndexError("pop from an empty PQueue")
        self._sort()
        return self._contents.pop()

    def size(self) -> int:
        return len(self._contents)

    def __len__(self) -> int:
        return len(self._contents)

    def map(self, fn: Callable[[T], R]) -> List[R]:
        """Apply fn to every item in ascending key order."""
        self._sort()
        return [fn(item) for item in self._contents]

    def contents(self) -> List[T]:
        """Copy of the items in ascending key order."""
        self._sort()
        return list(self._contents)


__all__ = ["PQueue"]
