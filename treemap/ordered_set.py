"""
Append-only collection that keeps the first copy of each element.

Fed by the map's inorder walks, so iteration order is ascending key order.
"""

from typing import Any, Iterator, List


class OrderedSet:
    def __init__(self):
        self._items: List[Any] = []

    def add(self, item: Any) -> None:
        """Append item unless an equal element is already present (linear scan)."""
        if item not in self._items:
            self._items.append(item)

    def __contains__(self, item: Any) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __repr__(self):
        return "{" + ", ".join(repr(x) for x in self._items) + "}"
