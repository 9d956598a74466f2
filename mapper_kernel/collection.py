"""MappedCollection -- ordered, immutable result container for collection mode."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any, Generic, TypeVar, overload

T = TypeVar("T")
R = TypeVar("R")


class MappedCollection(Sequence[T], Generic[T]):
    """
    Ordered, indexable sequence of mapped items.

    Distinguishable from list/tuple by type, so callers can tell a
    collection-mode result from a single mapped value that happens to be a
    list. Constructing one from another MappedCollection reuses its items
    instead of nesting it.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[T] = ()):
        if isinstance(items, MappedCollection):
            self._items: tuple[T, ...] = items._items
        else:
            self._items = tuple(items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> MappedCollection[T]: ...

    def __getitem__(self, index: int | slice) -> T | MappedCollection[T]:
        if isinstance(index, slice):
            return MappedCollection(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MappedCollection):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"MappedCollection({list(self._items)!r})"

    def first(self, default: Any = None) -> T | Any:
        """First item, or ``default`` when empty."""
        return self._items[0] if self._items else default

    def last(self, default: Any = None) -> T | Any:
        """Last item, or ``default`` when empty."""
        return self._items[-1] if self._items else default

    def map(self, fn: Callable[[T], R]) -> MappedCollection[R]:
        return MappedCollection(fn(item) for item in self._items)

    def filter(self, predicate: Callable[[T], bool]) -> MappedCollection[T]:
        return MappedCollection(item for item in self._items if predicate(item))

    def all(self) -> list[T]:
        """Items as a new list."""
        return list(self._items)
