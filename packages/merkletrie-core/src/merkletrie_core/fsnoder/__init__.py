"""In-memory merkle trie nodes: directories, files and their canonical form."""

from merkletrie_core.fsnoder.dir import DirectoryNode, new_directory_node
from merkletrie_core.fsnoder.file import FileNode
from merkletrie_core.fsnoder.hashing import compute_hash, new_hasher
from merkletrie_core.fsnoder.models import (
    DuplicateChildNameError,
    EmptyChildNameError,
    EmptyFileNameError,
    NoderError,
    ParseError,
)
from merkletrie_core.fsnoder.parser import parse

__all__ = [
    "DirectoryNode",
    "DuplicateChildNameError",
    "EmptyChildNameError",
    "EmptyFileNameError",
    "FileNode",
    "NoderError",
    "ParseError",
    "compute_hash",
    "new_directory_node",
    "new_hasher",
    "parse",
]
