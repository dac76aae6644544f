"""A singly linked list with append, positional access and removal."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")


@dataclass
class _Node:
    data: Any
    next: Optional["_Node"] = None


class LinkedList(Generic[T]):
    """Singly linked list that appends at the tail.

    Out-of-range positions are not errors: ``get`` and ``remove`` return
    ``None`` for them and leave the list untouched.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._root: Optional[_Node] = None
        self._last: Optional[_Node] = None
        self._size = 0
        for item in items:
            self.add(item)

    def add(self, item: T) -> None:
        """Append ``item`` at the end of the list."""
        node = _Node(item)
        if self._last is None:
            self._root = node
        else:
            self._last.next = node
        self._last = node
        self._size += 1

    def _in_range(self, index: int) -> bool:
        return 0 <= index < self._size

    def _nodes(self) -> Iterator[_Node]:
        node = self._root
        while node is not None:
            yield node
            node = node.next

    def get(self, index: int) -> Optional[T]:
        """Return the item at ``index``, or ``None`` if there is none."""
        if not self._in_range(index):
            return None
        for position, node in enumerate(self._nodes()):
            if position == index:
                return node.data
        return None

    def remove(self, index: int) -> Optional[T]:
        """Remove and return the item at ``index``, or ``None`` if there is none."""
        if not self._in_range(index):
            return None
        previous: Optional[_Node] = None
        node = self._root
        for _ in range(index):
            previous, node = node, node.next
        assert node is not None
        if previous is None:
            self._root = node.next
        else:
            previous.next = node.next
        if self._last is node:
            self._last = previous
        self._size -= 1
        return node.data

    def clear(self) -> None:
        """Remove every item."""
        self._root = None
        self._last = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[T]:
        for node in self._nodes():
            yield node.data

    def __repr__(self) -> str:
        return f"LinkedList({list(self)!r})"