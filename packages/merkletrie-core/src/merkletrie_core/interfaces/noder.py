"""Noder interface: the capability set every tree node exposes."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Noder(Protocol):
    """A node of a merkle trie, either a directory or a leaf.

    ``children()`` and ``child_count()`` may raise for implementers backed by
    fallible I/O; in-memory implementers never do.
    """

    name: str

    def hash(self) -> bytes: ...

    def is_directory(self) -> bool: ...

    def children(self) -> list[Noder]: ...

    def child_count(self) -> int: ...

    def __str__(self) -> str: ...
