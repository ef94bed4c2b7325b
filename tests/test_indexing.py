"""
Tests for the linked binary search tree primitives.
"""

import pytest

from treemap.indexing import BinarySearchTree, LinkedBinaryTree, natural_order


def build(keys, comparator=None):
    tree = BinarySearchTree(comparator)
    for k in keys:
        tree.insert(k, f"v{k}")
    return tree


def inorder_keys(tree):
    return [p.get_key() for p in tree.inorder()]


class TestLinkedBinaryTree:
    """Structural operations independent of key order."""

    def test_add_and_remove_leaf(self):
        tree = LinkedBinaryTree()
        root = tree.add_root("r", 0)
        left = tree.add_left(root, "l", 1)
        right = tree.add_right(root, "x", 2)

        assert len(tree) == 3
        assert tree.is_root(root)
        assert list(tree.children(root)) == [left, right]
        assert tree.num_children(root) == 2

        assert tree.remove(left) == 1
        assert len(tree) == 2
        assert tree.left(root) is None

    def test_add_root_twice_fails(self):
        tree = LinkedBinaryTree()
        tree.add_root("r", 0)
        with pytest.raises(RuntimeError):
            tree.add_root("s", 1)

    def test_add_child_over_existing_fails(self):
        tree = LinkedBinaryTree()
        root = tree.add_root("r", 0)
        tree.add_left(root, "l", 1)
        with pytest.raises(RuntimeError):
            tree.add_left(root, "m", 2)

    def test_remove_node_with_two_children_fails(self):
        tree = LinkedBinaryTree()
        root = tree.add_root("r", 0)
        tree.add_left(root, "l", 1)
        tree.add_right(root, "x", 2)
        with pytest.raises(RuntimeError):
            tree.remove(root)

    def test_removed_position_is_defunct(self):
        tree = LinkedBinaryTree()
        root = tree.add_root("r", 0)
        child = tree.add_left(root, "l", 1)
        tree.remove(child)

        with pytest.raises(RuntimeError):
            child.get_key()
        with pytest.raises(RuntimeError):
            tree.parent(child)

    def test_foreign_position_rejected(self):
        tree = LinkedBinaryTree()
        with pytest.raises(RuntimeError):
            tree.left("not a position")

    def test_remove_root_promotes_child(self):
        tree = LinkedBinaryTree()
        root = tree.add_root("r", 0)
        child = tree.add_right(root, "x", 1)
        tree.remove(root)

        assert tree.root() is child
        assert tree.is_root(child)
        assert tree.parent(child) is None

    def test_remove_last_node_empties_tree(self):
        tree = LinkedBinaryTree()
        root = tree.add_root("r", 0)
        tree.remove(root)
        assert tree.root() is None
        assert tree.is_empty()

    def test_clear(self):
        tree = LinkedBinaryTree()
        root = tree.add_root("r", 0)
        tree.add_left(root, "l", 1)
        tree.clear()
        assert tree.is_empty()
        assert tree.root() is None


class TestInsertAndSearch:

    def test_inorder_is_sorted(self, check_tree):
        tree = build([50, 20, 70, 10, 30, 60, 80, 25, 65])
        assert inorder_keys(tree) == [10, 20, 25, 30, 50, 60, 65, 70, 80]
        check_tree(tree)

    def test_insert_into_empty_becomes_root(self):
        tree = BinarySearchTree()
        p, old, replaced = tree.insert(1, "a")
        assert tree.root() is p
        assert old is None and replaced is False
        assert len(tree) == 1

    def test_duplicate_key_replaces_in_place(self):
        tree = build([5, 3, 8])
        node = tree.search(3)
        p, old, replaced = tree.insert(3, "new")

        assert p is node
        assert old == "v3"
        assert replaced is True
        assert node.get_value() == "new"
        assert len(tree) == 3

    def test_none_key_rejected(self):
        tree = BinarySearchTree()
        with pytest.raises(ValueError):
            tree.insert(None, "x")
        assert tree.is_empty()

    def test_search_missing(self):
        tree = build([5, 3, 8])
        assert tree.search(4) is None
        assert BinarySearchTree().search(4) is None

    def test_subtree_first_last(self):
        tree = build([5, 3, 8, 1, 9])
        assert tree.subtree_first(tree.root()).get_key() == 1
        assert tree.subtree_last(tree.root()).get_key() == 9
        right = tree.right(tree.root())
        assert tree.subtree_first(right).get_key() == 8

    def test_custom_comparator_reverses_order(self, check_tree):
        tree = build([1, 2, 3, 4], comparator=lambda a, b: natural_order(b, a))
        assert inorder_keys(tree) == [4, 3, 2, 1]
        check_tree(tree)

    def test_natural_order(self):
        assert natural_order(1, 2) < 0
        assert natural_order(2, 1) > 0
        assert natural_order("a", "a") == 0


class TestDelete:
    """Delete by child count: leaf, one child, two children."""

    def test_delete_leaf(self, check_tree):
        tree = build([5, 3, 8])
        tree.delete(tree.search(3))
        assert inorder_keys(tree) == [5, 8]
        assert tree.left(tree.root()) is None
        check_tree(tree)

    def test_delete_only_node(self):
        tree = build([5])
        tree.delete(tree.root())
        assert tree.root() is None
        assert len(tree) == 0

    def test_delete_one_child_splices(self, check_tree):
        tree = build([5, 3, 1])
        three = tree.search(3)
        one = tree.search(1)
        tree.delete(three)

        assert tree.left(tree.root()) is one
        assert tree.parent(one) is tree.root()
        check_tree(tree)

    def test_delete_two_children_keeps_node_identity(self, check_tree):
        tree = build([5, 3, 8, 7, 9, 6])
        root = tree.root()
        tree.delete(root)

        # successor 6 was copied into the root node
        assert tree.root() is root
        assert root.get_key() == 6
        assert root.get_value() == "v6"
        assert inorder_keys(tree) == [3, 6, 7, 8, 9]
        assert len(tree) == 5
        check_tree(tree)

    def test_delete_successor_with_right_child(self, check_tree):
        tree = build([10, 5, 20, 15, 30, 17])
        tree.delete(tree.search(10))
        assert tree.root().get_key() == 15
        assert inorder_keys(tree) == [5, 15, 17, 20, 30]
        check_tree(tree)

    def test_mixed_deletes_keep_invariants(self, check_tree):
        keys = [41, 7, 93, 2, 18, 66, 99, 11, 25, 50, 70, 1, 3, 60, 80]
        tree = build(keys)
        for k in [41, 2, 99, 66, 7, 1, 60]:
            tree.delete(tree.search(k))
            check_tree(tree)
        assert inorder_keys(tree) == [3, 11, 18, 25, 50, 70, 80, 93]


class TestNeighborSearch:

    @pytest.fixture
    def tree(self):
        return build([20, 10, 30, 5, 15, 25, 35])

    def test_lower(self, tree):
        assert tree.lower(20).get_key() == 15
        assert tree.lower(21).get_key() == 20
        assert tree.lower(5) is None

    def test_floor(self, tree):
        assert tree.floor(20).get_key() == 20
        assert tree.floor(24).get_key() == 20
        assert tree.floor(4) is None

    def test_higher(self, tree):
        assert tree.higher(20).get_key() == 25
        assert tree.higher(19).get_key() == 20
        assert tree.higher(35) is None

    def test_ceiling(self, tree):
        assert tree.ceiling(20).get_key() == 20
        assert tree.ceiling(16).get_key() == 20
        assert tree.ceiling(36) is None

    def test_empty_tree(self):
        tree = BinarySearchTree()
        assert tree.lower(1) is None
        assert tree.floor(1) is None
        assert tree.higher(1) is None
        assert tree.ceiling(1) is None


class TestTraversal:

    def test_walk_prunes_subtrees(self):
        tree = build([20, 10, 30, 5, 15, 25, 35])
        visited = []

        def include(p):
            visited.append(p.get_key())
            return p.get_key() >= 15

        keys = [p.get_key() for p in tree.walk(include,
                                               go_left=lambda p: p.get_key() > 15,
                                               go_right=lambda p: True)]
        assert keys == [15, 20, 25, 30, 35]
        assert 5 not in visited

    def test_degenerate_tree_does_not_recurse(self, check_tree):
        n = 2000
        tree = build(range(n))
        assert len(tree) == n
        assert inorder_keys(tree) == list(range(n))
        walked = [p.get_key() for p in tree.walk(lambda p: True, lambda p: True, lambda p: True)]
        assert walked == list(range(n))
        check_tree(tree)
