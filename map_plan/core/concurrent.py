"""Lock-guarded collections for the open configuration phase.

Producers may append from several threads while others iterate. Iteration
always walks a snapshot taken under the lock, so readers never observe a
torn list and never need to hold a lock themselves.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class ThreadSafeList(Generic[T]):
    """Insertion-ordered list with snapshot-consistent iteration."""

    def __init__(self) -> None:
        self._items: list[T] = []
        self._lock = threading.Lock()

    def append(self, item: T) -> None:
        with self._lock:
            self._items.append(item)

    def extend(self, items: list[T] | tuple[T, ...]) -> None:
        with self._lock:
            self._items.extend(items)

    def append_if_absent(self, predicate: Callable[[T], bool], factory: Callable[[], T]) -> T:
        """Return the first item matching predicate, appending factory() if none does.

        The lookup and the append happen under one lock acquisition, so two
        racing producers cannot both create an item for the same key.
        """
        with self._lock:
            for item in self._items:
                if predicate(item):
                    return item
            item = factory()
            self._items.append(item)
            return item

    def find_first(self, predicate: Callable[[T], bool]) -> T | None:
        for item in self.snapshot():
            if predicate(item):
                return item
        return None

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def snapshot(self) -> tuple[T, ...]:
        with self._lock:
            return tuple(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __bool__(self) -> bool:
        return len(self) > 0
