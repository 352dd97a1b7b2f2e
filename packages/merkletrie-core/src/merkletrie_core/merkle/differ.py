"""Differ for merkle tries built from ``Noder`` implementations."""

from __future__ import annotations

from merkletrie_core.interfaces.noder import Noder
from merkletrie_core.merkle.models import TreeDiff


def _join(prefix: str, name: str) -> str:
    return f"{prefix}/{name}" if prefix else name


def _leaf_paths(node: Noder, path: str) -> list[str]:
    """Paths of every file and empty directory under *node*, *node* included."""
    paths: list[str] = []
    pending = [(node, path)]
    while pending:
        current, current_path = pending.pop()
        if not current.is_directory() or current.child_count() == 0:
            paths.append(current_path)
            continue
        pending.extend((c, _join(current_path, c.name)) for c in current.children())
    return paths


class TreeDiffer:
    """Compares two trees, descending only into subtrees whose hashes differ."""

    def __init__(self) -> None:
        self.added: list[str] = []
        self.removed: list[str] = []
        self.modified: list[str] = []

    @staticmethod
    def diff(old: Noder, new: Noder) -> TreeDiff:
        """Compare *old* against *new* and return a diff summary."""
        differ = TreeDiffer()
        differ._compare(old, new)
        old_hash = old.hash()
        new_hash = new.hash()
        return TreeDiff(
            added=tuple(sorted(differ.added)),
            removed=tuple(sorted(differ.removed)),
            modified=tuple(sorted(differ.modified)),
            root_changed=old_hash != new_hash,
            old_root_hash=old_hash.hex(),
            new_root_hash=new_hash.hex(),
        )

    def _compare(self, old_root: Noder, new_root: Noder) -> None:
        pending: list[tuple[Noder, Noder, str]] = [(old_root, new_root, "")]
        while pending:
            old, new, path = pending.pop()

            if old.is_directory() != new.is_directory():
                # A file replaced by a directory, or the other way round
                self.removed.extend(_leaf_paths(old, path))
                self.added.extend(_leaf_paths(new, path))
                continue

            if old.hash() == new.hash():
                continue

            if not old.is_directory():
                self.modified.append(path)
                continue

            old_children = {c.name: c for c in old.children()}
            new_children = {c.name: c for c in new.children()}

            for name in old_children.keys() | new_children.keys():
                child_path = _join(path, name)
                if name not in new_children:
                    self.removed.extend(_leaf_paths(old_children[name], child_path))
                elif name not in old_children:
                    self.added.extend(_leaf_paths(new_children[name], child_path))
                else:
                    pending.append((old_children[name], new_children[name], child_path))
