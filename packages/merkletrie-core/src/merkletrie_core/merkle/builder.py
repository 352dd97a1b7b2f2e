"""Builder for constructing merkle tries from a directory on disk."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from merkletrie_core.fsnoder.dir import DirectoryNode
from merkletrie_core.fsnoder.file import FileNode
from merkletrie_core.interfaces.noder import Noder

logger = logging.getLogger(__name__)

# Directories always skipped during tree build
DEFAULT_IGNORE = {
    ".git",
    "node_modules",
    "build",
    "dist",
    "__pycache__",
    ".venv",
}


class TreeBuilder:
    """Builds a ``DirectoryNode`` tree by walking a directory on disk."""

    def __init__(self, ignore: set[str], follow_symlinks: bool = False) -> None:
        self.ignore = ignore
        self.follow_symlinks = follow_symlinks

    @staticmethod
    def build(
        root_path: Path,
        ignore_patterns: list[str] | None = None,
        follow_symlinks: bool = False,
    ) -> DirectoryNode:
        """Walk *root_path* and return its tree; the root node has an empty name.

        Entries whose name is in *ignore_patterns* (or the built-in defaults)
        are skipped, as are symlinks unless *follow_symlinks* is set. Files
        are leaves identified by the digest of their bytes.
        """
        root_path = root_path.resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"No such directory: {root_path}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Not a directory: {root_path}")

        ignore = set(DEFAULT_IGNORE)
        if ignore_patterns:
            ignore.update(ignore_patterns)

        builder = TreeBuilder(ignore, follow_symlinks)
        return builder._build_root(root_path)

    def _build_root(self, root_path: Path) -> DirectoryNode:
        # one frame per directory being read: its name, the resolved paths
        # above it, the children built so far and the entries still to visit
        frames: list[tuple[str, set[Path], list[Noder], Iterator[Path]]] = [
            ("", {root_path}, [], iter(list(root_path.iterdir())))
        ]
        while True:
            name, ancestors, children, entries = frames[-1]
            entry = next(entries, None)
            if entry is None:
                frames.pop()
                node = DirectoryNode(name, children)
                if not frames:
                    return node
                frames[-1][2].append(node)
                continue

            if entry.name in self.ignore:
                logger.debug("Skipping ignored path %s", entry)
                continue
            if entry.is_symlink() and not self.follow_symlinks:
                logger.debug("Skipping symlink %s", entry)
                continue

            try:
                if entry.is_dir():
                    resolved = entry.resolve()
                    # Following symlinks can lead back into an ancestor
                    if resolved in ancestors:
                        logger.warning("Skipping symlink loop at %s", entry)
                        continue
                    frames.append(
                        (entry.name, ancestors | {resolved}, [], iter(list(entry.iterdir())))
                    )
                elif entry.is_file():
                    children.append(FileNode.from_bytes(entry.name, entry.read_bytes()))
            except PermissionError as e:
                logger.warning("Skipping unreadable path %s: %s", entry, e)
