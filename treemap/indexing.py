from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Optional


class Position(ABC):
    @abstractmethod
    def get_key(self):
        """Return the key stored at this position."""
        pass

    @abstractmethod
    def get_value(self):
        """Return the value stored at this position."""
        pass

    def __eq__(self, other):
        """Return True if other is a Position representing the same location."""
        raise NotImplementedError('must be implemented by subclass')

    def __ne__(self, other):
        """Return True if other does not represent the same location."""
        return not (self == other)


class BinaryTree(ABC):
    """Abstract base class representing a binary tree structure."""

    @abstractmethod
    def __len__(self) -> int:
        """Return the total number of nodes in the tree."""
        pass

    def is_empty(self) -> bool:
        """Return True if the tree is empty."""
        return len(self) == 0

    @abstractmethod
    def root(self) -> Optional[Position]:
        """Return the root Position of the tree (or None if tree is empty)."""
        pass

    @abstractmethod
    def parent(self, p: Position) -> Optional[Position]:
        """Return the Position of p's parent (or None if p is root)."""
        pass

    @abstractmethod
    def left(self, p: Position) -> Optional[Position]:
        """Return the Position of p's left child (or None if no child exists)."""
        pass

    @abstractmethod
    def right(self, p: Position) -> Optional[Position]:
        """Return the Position of p's right child (or None if no child exists)."""
        pass

    def num_children(self, p: Position) -> int:
        """Return the number of children of Position p."""
        count = 0
        if self.left(p) is not None:
            count += 1
        if self.right(p) is not None:
            count += 1
        return count

    def children(self, p: Position) -> Iterable[Position]:
        """Generate an iteration of Positions representing p's children."""
        if self.left(p) is not None:
            yield self.left(p)
        if self.right(p) is not None:
            yield self.right(p)

    def is_root(self, p: Position) -> bool:
        """Return True if Position p represents the root of the tree."""
        return p == self.root()

    def inorder(self) -> Iterable[Position]:
        """Generate an inorder iteration of positions, using an explicit stack."""
        stack = []
        walk = self.root()
        while stack or walk is not None:
            if walk is not None:
                stack.append(walk)
                walk = self.left(walk)
            else:
                p = stack.pop()
                yield p
                walk = self.right(p)


class LinkedBinaryTree(BinaryTree):
    """Concrete binary tree using a node-based, linked structure with parent links."""

    class _Node(Position):
        """Nested Node class that acts as a Position."""
        __slots__ = '_key', '_value', '_parent', '_left', '_right'

        def __init__(self, key, value, parent=None, left=None, right=None):
            self._key = key
            self._value = value
            self._parent = parent
            self._left = left
            self._right = right

        def get_key(self):
            if self._parent is self:  # convention for defunct node
                raise RuntimeError("Position no longer valid")
            return self._key

        def get_value(self):
            if self._parent is self:
                raise RuntimeError("Position no longer valid")
            return self._value

        def get_parent(self): return self._parent
        def get_left(self): return self._left
        def get_right(self): return self._right
        def set_key(self, key): self._key = key
        def set_value(self, value): self._value = value
        def set_parent(self, parent): self._parent = parent
        def set_left(self, left): self._left = left
        def set_right(self, right): self._right = right

        def __eq__(self, other):
            return other is self

        def __hash__(self):
            return id(self)

        def __repr__(self):
            return f"_Node({self._key!r}: {self._value!r})"

    def __init__(self):
        self._root = None
        self._size = 0

    def _validate(self, p):
        """Validates the position and returns it as a node."""
        if not isinstance(p, self._Node):
            raise RuntimeError("Not valid position type")
        if p.get_parent() is p:
            raise RuntimeError("p is no longer in the tree")
        return p

    def _make_node(self, key, value, parent=None):
        """Factory function to create a new node storing (key, value)."""
        return self._Node(key, value, parent)

    def __len__(self) -> int: return self._size
    def root(self) -> Optional[Position]: return self._root
    def parent(self, p: Position) -> Optional[Position]: return self._validate(p).get_parent()
    def left(self, p: Position) -> Optional[Position]: return self._validate(p).get_left()
    def right(self, p: Position) -> Optional[Position]: return self._validate(p).get_right()

    def add_root(self, key, value):
        if self._root is not None: raise RuntimeError("Tree is not empty")
        self._root = self._make_node(key, value)
        self._size = 1
        return self._root

    def add_left(self, p, key, value):
        parent = self._validate(p)
        if parent.get_left() is not None: raise RuntimeError("p already has a left child")
        child = self._make_node(key, value, parent)
        parent.set_left(child)
        self._size += 1
        return child

    def add_right(self, p, key, value):
        parent = self._validate(p)
        if parent.get_right() is not None: raise RuntimeError("p already has a right child")
        child = self._make_node(key, value, parent)
        parent.set_right(child)
        self._size += 1
        return child

    def replace(self, p, value):
        """Replaces the value at Position p and returns the replaced value."""
        node = self._validate(p)
        old = node.get_value()
        node.set_value(value)
        return old

    def remove(self, p):
        """Removes the node at Position p and splices its only child, if any, into place."""
        node = self._validate(p)
        if self.num_children(p) == 2:
            raise RuntimeError("p has two children")
        child = node.get_left() if node.get_left() is not None else node.get_right()
        if child is not None:
            child.set_parent(node.get_parent())
        if self.is_root(node):
            self._root = child
        else:
            parent = node.get_parent()
            if node is parent.get_left():
                parent.set_left(child)
            else:
                parent.set_right(child)
        self._size -= 1
        old = node.get_value()
        node.set_value(None)
        node.set_parent(node)  # convention for defunct node
        return old

    def clear(self) -> None:
        """Drop every node at once."""
        self._root = None
        self._size = 0


def natural_order(a: Any, b: Any) -> int:
    """Three-way comparison using the keys' own ordering."""
    return (a > b) - (a < b)


class BinarySearchTree(LinkedBinaryTree):
    """Unbalanced binary search tree keyed by a three-way comparator.

    Keys in a node's left subtree compare strictly less than the node's key
    and keys in its right subtree compare strictly greater. No rebalancing is
    ever done, so every operation is O(height).
    """

    def __init__(self, comparator: Optional[Callable[[Any, Any], int]] = None):
        super().__init__()
        self._compare = comparator if comparator is not None else natural_order

    @property
    def comparator(self) -> Callable[[Any, Any], int]:
        return self._compare

    # ------------------ Search ------------------
    def search(self, k: Any) -> Optional[Position]:
        """Return the Position holding key k, or None."""
        walk = self._root
        while walk is not None:
            c = self._compare(k, walk.get_key())
            if c < 0:
                walk = walk.get_left()
            elif c > 0:
                walk = walk.get_right()
            else:
                return walk
        return None

    def subtree_first(self, p: Position) -> Position:
        """Return Position of first (leftmost) item in subtree p."""
        walk = self._validate(p)
        while walk.get_left() is not None:
            walk = walk.get_left()
        return walk

    def subtree_last(self, p: Position) -> Position:
        """Return Position of last (rightmost) item in subtree p."""
        walk = self._validate(p)
        while walk.get_right() is not None:
            walk = walk.get_right()
        return walk

    # ------------------ Mutations ------------------
    def insert(self, k: Any, v: Any) -> tuple[Position, Any, bool]:
        """Insert or replace (k, v).

        Returns (position, old_value, replaced). When the key is already
        present the value is swapped in place and the node is reused.
        """
        if k is None:
            raise ValueError("key must not be None")

        if self._root is None:
            return self.add_root(k, v), None, False

        walk = self._root
        parent = None
        c = 0
        while walk is not None:
            parent = walk
            c = self._compare(k, walk.get_key())
            if c < 0:
                walk = walk.get_left()
            elif c > 0:
                walk = walk.get_right()
            else:
                return walk, self.replace(walk, v), True

        if c < 0:
            return self.add_left(parent, k, v), None, False
        return self.add_right(parent, k, v), None, False

    def delete(self, p: Position) -> None:
        """Delete the node at Position p.

        A node with two children takes over its in-order successor's key and
        value, then the successor (at most one child) is removed instead.
        """
        node = self._validate(p)
        if node.get_left() is not None and node.get_right() is not None:
            successor = self.subtree_first(node.get_right())
            node.set_key(successor.get_key())
            node.set_value(successor.get_value())
            node = successor
        self.remove(node)

    # ------------------ Neighbor search ------------------
    def lower(self, k: Any) -> Optional[Position]:
        """Position with the greatest key strictly less than k."""
        result = None
        walk = self._root
        while walk is not None:
            if self._compare(walk.get_key(), k) < 0:
                result = walk
                walk = walk.get_right()
            else:
                walk = walk.get_left()
        return result

    def floor(self, k: Any) -> Optional[Position]:
        """Position with the greatest key less than or equal to k."""
        result = None
        walk = self._root
        while walk is not None:
            if self._compare(walk.get_key(), k) <= 0:
                result = walk
                walk = walk.get_right()
            else:
                walk = walk.get_left()
        return result

    def higher(self, k: Any) -> Optional[Position]:
        """Position with the least key strictly greater than k."""
        result = None
        walk = self._root
        while walk is not None:
            if self._compare(walk.get_key(), k) > 0:
                result = walk
                walk = walk.get_left()
            else:
                walk = walk.get_right()
        return result

    def ceiling(self, k: Any) -> Optional[Position]:
        """Position with the least key greater than or equal to k."""
        result = None
        walk = self._root
        while walk is not None:
            if self._compare(walk.get_key(), k) >= 0:
                result = walk
                walk = walk.get_left()
            else:
                walk = walk.get_right()
        return result

    # ------------------ Traversal ------------------
    def walk(self,
             include: Callable[[Position], bool],
             go_left: Callable[[Position], bool],
             go_right: Callable[[Position], bool]) -> Iterable[Position]:
        """Pruned inorder traversal.

        go_left/go_right decide whether a node's subtrees can hold anything
        of interest; include decides whether the node itself is yielded.
        """
        stack = []
        walk = self._root
        while stack or walk is not None:
            if walk is not None:
                stack.append(walk)
                walk = walk.get_left() if go_left(walk) else None
            else:
                node = stack.pop()
                if include(node):
                    yield node
                walk = node.get_right() if go_right(node) else None
