from typing import Any, Callable, Iterable, NamedTuple, Optional

from treemap.indexing import BinarySearchTree, Position
from treemap.ordered_set import OrderedSet


class Entry(NamedTuple):
    """Lightweight (key, value) snapshot returned by queries."""
    key: Any
    value: Any

    def get_key(self): return self.key
    def get_value(self): return self.value


def _entry(p: Optional[Position]) -> Optional[Entry]:
    if p is None:
        return None
    return Entry(p.get_key(), p.get_value())


def _key(p: Optional[Position]) -> Any:
    if p is None:
        return None
    return p.get_key()


class TreeMap:
    """Sorted map backed by an unbalanced binary search tree.

    Lookups that find nothing return None; first_key/last_key on an empty map
    raise KeyError, and None is rejected as a key by put and by the neighbor
    queries. head_map, tail_map and sub_map return independent copies, not
    live views of this map.
    """

    def __init__(self, comparator: Optional[Callable[[Any, Any], int]] = None):
        self._tree = BinarySearchTree(comparator)

    @property
    def comparator(self) -> Callable[[Any, Any], int]:
        return self._tree.comparator

    # ------------------ Size ------------------
    def size(self) -> int:
        return len(self._tree)

    def __len__(self) -> int:
        return len(self._tree)

    def is_empty(self) -> bool:
        return self._tree.is_empty()

    def clear(self) -> None:
        self._tree.clear()

    # ------------------ Point operations ------------------
    def _find(self, k: Any) -> Optional[Position]:
        """Search for k, treating None and keys the comparator cannot order as absent."""
        if k is None:
            return None
        try:
            return self._tree.search(k)
        except TypeError:
            return None

    def get(self, k: Any, default: Any = None) -> Any:
        """Return the value associated with key k, or default."""
        p = self._find(k)
        if p is None:
            return default
        return p.get_value()

    def put(self, k: Any, v: Any) -> Optional[Any]:
        """Insert or replace entry (k, v) and return old value, or None."""
        _, old_value, _ = self._tree.insert(k, v)
        return old_value

    def insert(self, k: Any, v: Any) -> tuple[Optional[Any], bool]:
        """Like put, but also report whether an existing entry was replaced."""
        _, old_value, replaced = self._tree.insert(k, v)
        return old_value, replaced

    def remove(self, k: Any) -> Optional[Any]:
        """Remove entry with key k and return its value, or None."""
        p = self._find(k)
        if p is None:
            return None
        old_value = p.get_value()
        self._tree.delete(p)
        return old_value

    def contains_key(self, k: Any) -> bool:
        return self._find(k) is not None

    def contains_value(self, v: Any) -> bool:
        """Linear scan over every entry; values carry no ordering."""
        for p in self._tree.inorder():
            if p.get_value() == v:
                return True
        return False

    # ------------------ First / last ------------------
    def first_key(self) -> Any:
        if self._tree.is_empty():
            raise KeyError("TreeMap is empty")
        return self._tree.subtree_first(self._tree.root()).get_key()

    def last_key(self) -> Any:
        if self._tree.is_empty():
            raise KeyError("TreeMap is empty")
        return self._tree.subtree_last(self._tree.root()).get_key()

    def first_entry(self) -> Optional[Entry]:
        if self._tree.is_empty():
            return None
        return _entry(self._tree.subtree_first(self._tree.root()))

    def last_entry(self) -> Optional[Entry]:
        if self._tree.is_empty():
            return None
        return _entry(self._tree.subtree_last(self._tree.root()))

    def poll_first_entry(self) -> Optional[Entry]:
        """Remove and return the entry with the smallest key, or None."""
        if self._tree.is_empty():
            return None
        p = self._tree.subtree_first(self._tree.root())
        entry = _entry(p)
        self._tree.delete(p)
        return entry

    def poll_last_entry(self) -> Optional[Entry]:
        """Remove and return the entry with the largest key, or None."""
        if self._tree.is_empty():
            return None
        p = self._tree.subtree_last(self._tree.root())
        entry = _entry(p)
        self._tree.delete(p)
        return entry

    # ------------------ Navigation ------------------
    @staticmethod
    def _require_key(k: Any) -> None:
        if k is None:
            raise ValueError("key must not be None")

    def lower_entry(self, k: Any) -> Optional[Entry]:
        self._require_key(k)
        return _entry(self._tree.lower(k))

    def floor_entry(self, k: Any) -> Optional[Entry]:
        self._require_key(k)
        return _entry(self._tree.floor(k))

    def higher_entry(self, k: Any) -> Optional[Entry]:
        self._require_key(k)
        return _entry(self._tree.higher(k))

    def ceiling_entry(self, k: Any) -> Optional[Entry]:
        self._require_key(k)
        return _entry(self._tree.ceiling(k))

    def lower_key(self, k: Any) -> Any:
        """Greatest key strictly less than k, or None."""
        self._require_key(k)
        return _key(self._tree.lower(k))

    def floor_key(self, k: Any) -> Any:
        """Greatest key less than or equal to k, or None."""
        self._require_key(k)
        return _key(self._tree.floor(k))

    def higher_key(self, k: Any) -> Any:
        """Least key strictly greater than k, or None."""
        self._require_key(k)
        return _key(self._tree.higher(k))

    def ceiling_key(self, k: Any) -> Any:
        """Least key greater than or equal to k, or None."""
        self._require_key(k)
        return _key(self._tree.ceiling(k))

    # ------------------ Range copies ------------------
    def _copy_of(self, positions: Iterable[Position]) -> "TreeMap":
        result = TreeMap(self.comparator)
        for p in positions:
            result.put(p.get_key(), p.get_value())
        return result

    def head_map(self, end: Any) -> "TreeMap":
        """New map holding the entries with key < end."""
        cmp = self.comparator
        below = lambda p: cmp(p.get_key(), end) < 0
        return self._copy_of(self._tree.walk(
            include=below,
            go_left=lambda p: True,
            go_right=below,
        ))

    def tail_map(self, start: Any) -> "TreeMap":
        """New map holding the entries with key >= start."""
        cmp = self.comparator
        at_or_above = lambda p: cmp(p.get_key(), start) >= 0
        return self._copy_of(self._tree.walk(
            include=at_or_above,
            go_left=at_or_above,
            go_right=lambda p: True,
        ))

    def sub_map(self, start: Any, end: Any) -> "TreeMap":
        """New map holding the entries with start <= key < end."""
        cmp = self.comparator
        if cmp(start, end) > 0:
            raise ValueError("start key cannot be greater than end key")
        at_or_above = lambda p: cmp(p.get_key(), start) >= 0
        below = lambda p: cmp(p.get_key(), end) < 0
        return self._copy_of(self._tree.walk(
            include=lambda p: at_or_above(p) and below(p),
            go_left=at_or_above,
            go_right=below,
        ))

    # ------------------ Collections ------------------
    def key_set(self) -> OrderedSet:
        """Snapshot of the keys in ascending order."""
        keys = OrderedSet()
        for p in self._tree.inorder():
            keys.add(p.get_key())
        return keys

    def entry_set(self) -> OrderedSet:
        """Snapshot of the entries in ascending key order."""
        entries = OrderedSet()
        for p in self._tree.inorder():
            entries.add(Entry(p.get_key(), p.get_value()))
        return entries

    # ------------------ Mapping protocol ------------------
    def __iter__(self) -> Iterable[Any]:
        """Generate an iteration of the map's keys in order."""
        for p in self._tree.inorder():
            yield p.get_key()

    def keys(self) -> Iterable[Any]:
        return iter(self)

    def values(self) -> Iterable[Any]:
        """Generate an iteration of the map's values in key order."""
        for p in self._tree.inorder():
            yield p.get_value()

    def items(self) -> Iterable[Entry]:
        for p in self._tree.inorder():
            yield Entry(p.get_key(), p.get_value())

    def __contains__(self, k: Any) -> bool:
        return self.contains_key(k)

    def __getitem__(self, k: Any) -> Any:
        p = self._find(k)
        if p is None:
            raise KeyError(k)
        return p.get_value()

    def __setitem__(self, k: Any, v: Any) -> None:
        self.put(k, v)

    def __delitem__(self, k: Any) -> None:
        p = self._find(k)
        if p is None:
            raise KeyError(k)
        self._tree.delete(p)

    def __eq__(self, other):
        if not isinstance(other, TreeMap):
            return NotImplemented
        return list(self.items()) == list(other.items())

    def __repr__(self):
        return "TreeMap({" + ", ".join(f"{k!r}: {v!r}" for k, v in self.items()) + "})"
