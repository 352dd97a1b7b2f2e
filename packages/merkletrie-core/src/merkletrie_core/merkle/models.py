"""Data models for the tree comparison subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TreeDiff:
    """Result of comparing two trees.

    Paths are slash-joined names relative to the compared roots.
    """

    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    modified: tuple[str, ...] = ()
    root_changed: bool = False
    old_root_hash: str = ""
    new_root_hash: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.modified)
