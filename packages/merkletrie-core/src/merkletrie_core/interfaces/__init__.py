"""Capability interfaces shared by every node implementation."""

from merkletrie_core.interfaces.noder import Noder

__all__ = [
    "Noder",
]
