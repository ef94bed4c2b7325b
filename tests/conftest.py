import pytest

from treemap.tree_map import TreeMap


def _check_tree(tree):
    """Walk every node and verify ordering, parent links and the size counter."""
    root = tree.root()
    if root is None:
        assert len(tree) == 0
        return
    assert tree.parent(root) is None
    cmp = tree.comparator
    count = 0
    stack = [(root, None, None)]
    while stack:
        node, low, high = stack.pop()
        count += 1
        key = node.get_key()
        if low is not None:
            assert cmp(key, low) > 0
        if high is not None:
            assert cmp(key, high) < 0
        for child in tree.children(node):
            assert tree.parent(child) is node
        if tree.left(node) is not None:
            stack.append((tree.left(node), low, key))
        if tree.right(node) is not None:
            stack.append((tree.right(node), key, high))
    assert count == len(tree)


@pytest.fixture
def check_tree():
    return _check_tree


@pytest.fixture
def scenario_map():
    """Keys 5, 3, 8, 1, 4, 7, 9 inserted in that order."""
    m = TreeMap()
    for k in [5, 3, 8, 1, 4, 7, 9]:
        m.put(k, f"v{k}")
    return m
