from treemap.indexing import BinarySearchTree, LinkedBinaryTree, natural_order
from treemap.ordered_set import OrderedSet
from treemap.tree_map import Entry, TreeMap

__all__ = [
    "BinarySearchTree",
    "Entry",
    "LinkedBinaryTree",
    "OrderedSet",
    "TreeMap",
    "natural_order",
]
