"""Directory nodes: immutable, content-addressed inner nodes of a trie."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field

from merkletrie_core.fsnoder.hashing import encode_text, new_hasher
from merkletrie_core.fsnoder.models import DuplicateChildNameError, EmptyChildNameError
from merkletrie_core.interfaces.noder import Noder

logger = logging.getLogger(__name__)

DIR_START_MARK = "("
DIR_END_MARK = ")"
DIR_ELEMENT_SEP = " "

_HASH_TAG = b"dir "


def _by_name(node: Noder) -> bytes:
    return encode_text(node.name)


def _has_children_with_no_name(children: tuple[Noder, ...]) -> bool:
    return any(c.name == "" for c in children)


def _first_duplicated_name(children: tuple[Noder, ...]) -> str | None:
    """Return the first repeated name; *children* must already be sorted."""
    for prev, cur in zip(children, children[1:]):
        if _by_name(cur) == _by_name(prev):
            return cur.name
    return None


@dataclass(frozen=True, init=False)
class DirectoryNode:
    """A directory in a merkle trie.

    Children are copied and sorted by the bytes of their names at
    construction, so two nodes built from permutations of the same children
    are equal, hash the same and render the same. The directory's own name
    takes no part in its hash.

    ``hash()`` and ``str()`` walk the tree without recursion, so they work
    on arbitrarily deep trees. ``==`` and ``repr`` are the dataclass ones and
    do recurse.
    """

    name: str
    _children: tuple[Noder, ...]
    _hash: bytes | None = field(default=None, compare=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, compare=False, repr=False
    )

    def __init__(self, name: str, children: Iterable[Noder] = ()) -> None:
        cloned = tuple(sorted(children, key=_by_name))

        if _has_children_with_no_name(cloned):
            logger.debug("Rejecting directory %r: child with empty name", name)
            raise EmptyChildNameError(name)

        duplicated = _first_duplicated_name(cloned)
        if duplicated is not None:
            logger.debug("Rejecting directory %r: duplicated child %r", name, duplicated)
            raise DuplicateChildNameError(name, duplicated)

        object.__setattr__(self, "name", name)
        object.__setattr__(self, "_children", cloned)
        object.__setattr__(self, "_hash", None)
        object.__setattr__(self, "_lock", threading.Lock())

    def __reduce__(self):
        # the memo cell and its lock are rebuilt on load
        return (DirectoryNode, (self.name, self._children))

    # ------------------------------------------------------------------
    # Hash
    # ------------------------------------------------------------------

    def hash(self) -> bytes:
        """Return the memoized content hash, computing it on first use."""
        cached = self._hash
        if cached is not None:
            return cached
        # deepest directories first, so every child hash is already cached
        for node in reversed(self._unhashed_directories()):
            node._store_hash()
        return self._hash

    def _unhashed_directories(self) -> list[DirectoryNode]:
        """This node and the directories below it with no cached hash, parents first."""
        found: list[DirectoryNode] = []
        pending: list[DirectoryNode] = [self]
        while pending:
            node = pending.pop()
            found.append(node)
            pending.extend(
                c for c in node._children
                if isinstance(c, DirectoryNode) and c._hash is None
            )
        return found

    def _store_hash(self) -> None:
        with self._lock:
            if self._hash is None:
                object.__setattr__(self, "_hash", self._calculate_hash())

    def _calculate_hash(self) -> bytes:
        """Digest of ``"dir "`` plus, per sorted child, its name, a space and its hash."""
        h = new_hasher()
        h.update(_HASH_TAG)
        for child in self._children:
            h.update(encode_text(child.name))
            h.update(b" ")
            h.update(child.hash())
        return h.digest()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def is_directory(self) -> bool:
        return True

    def children(self) -> list[Noder]:
        """Return a copy so nobody can alter the order of the stored children."""
        return list(self._children)

    def child_count(self) -> int:
        return len(self._children)

    def __str__(self) -> str:
        parts: list[str] = []
        # marks and separators are pushed as plain strings, nodes as themselves
        pending: list[Noder | str] = [self]
        while pending:
            item = pending.pop()
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, DirectoryNode):
                parts.append(item.name + DIR_START_MARK)
                pending.append(DIR_END_MARK)
                last = len(item._children) - 1
                for i, child in enumerate(reversed(item._children)):
                    pending.append(child)
                    if i != last:
                        pending.append(DIR_ELEMENT_SEP)
            else:
                parts.append(str(item))
        return "".join(parts)


def new_directory_node(name: str, children: Iterable[Noder] = ()) -> DirectoryNode:
    """Build a validated directory node.

    *name* may be empty only for a root. Raises ``EmptyChildNameError`` when a
    child has no name and ``DuplicateChildNameError`` when two children share
    one. The caller's *children* sequence is never modified or retained.
    """
    return DirectoryNode(name, children)
