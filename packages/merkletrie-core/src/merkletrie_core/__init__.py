"""Merkletrie Core - content-addressed trees for hashing and comparing hierarchical data."""

from merkletrie_core.config import MerkletrieConfig, load_config
from merkletrie_core.fsnoder import (
    DirectoryNode,
    DuplicateChildNameError,
    EmptyChildNameError,
    FileNode,
    NoderError,
    new_directory_node,
    parse,
)
from merkletrie_core.interfaces import Noder
from merkletrie_core.merkle import TreeDiff, build_tree, diff_trees

__version__ = "0.1.0"

__all__ = [
    "DirectoryNode",
    "DuplicateChildNameError",
    "EmptyChildNameError",
    "FileNode",
    "MerkletrieConfig",
    "Noder",
    "NoderError",
    "TreeDiff",
    "build_tree",
    "diff_trees",
    "load_config",
    "new_directory_node",
    "parse",
]
