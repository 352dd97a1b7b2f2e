"""Shared test fixtures for Merkletrie."""

import pytest

from merkletrie_core.config.models import MerkletrieConfig
from merkletrie_core.fsnoder import DirectoryNode, FileNode


@pytest.fixture
def sample_config():
    return MerkletrieConfig()


@pytest.fixture
def leaf_a():
    return FileNode("a", "1")


@pytest.fixture
def leaf_b():
    return FileNode("b", "2")


@pytest.fixture
def sample_tree():
    """root(README<doc> src(main<x> util<y>))"""
    src = DirectoryNode("src", [FileNode("util", "y"), FileNode("main", "x")])
    return DirectoryNode("root", [src, FileNode("README", "doc")])
