"""Merkle trie subsystem: build trees from disk and compare them."""

from merkletrie_core.merkle.builder import DEFAULT_IGNORE, TreeBuilder
from merkletrie_core.merkle.differ import TreeDiffer
from merkletrie_core.merkle.models import TreeDiff


def build_tree(*args, **kwargs):
    """Convenience wrapper around TreeBuilder.build()."""
    return TreeBuilder.build(*args, **kwargs)


def diff_trees(old, new) -> TreeDiff:
    """Convenience wrapper around TreeDiffer.diff()."""
    return TreeDiffer.diff(old, new)


__all__ = [
    "DEFAULT_IGNORE",
    "TreeBuilder",
    "TreeDiff",
    "TreeDiffer",
    "build_tree",
    "diff_trees",
]
