"""Ordered, name-unique entity collections."""

from collections.abc import Iterator
from typing import Protocol


class Named(Protocol):
    @property
    def name(self) -> str: ...


class EntityCollection[T: Named]:
    """Insertion-ordered entities with an auxiliary name index.

    Re-adding a name replaces the earlier entity at its original position, so
    output order stays deterministic across overwrites.
    """

    __slots__ = ("_items", "_index")

    def __init__(self) -> None:
        self._items: list[T] = []
        self._index: dict[str, int] = {}

    def upsert(self, item: T) -> bool:
        """Insert `item` or replace the entity with the same name; return whether it replaced."""
        position = self._index.get(item.name)
        if position is None:
            self._index[item.name] = len(self._items)
            self._items.append(item)
            return False
        self._items[position] = item
        return True

    def get(self, name: str) -> T | None:
        position = self._index.get(name)
        return None if position is None else self._items[position]

    def names(self) -> list[str]:
        return [item.name for item in self._items]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, position: int) -> T:
        return self._items[position]

    def __repr__(self) -> str:
        return f"EntityCollection({self.names()!r})"
