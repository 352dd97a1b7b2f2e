"""File nodes: the leaves of a merkle trie."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from merkletrie_core.fsnoder.hashing import compute_hash, encode_text, new_hasher
from merkletrie_core.fsnoder.models import EmptyFileNameError
from merkletrie_core.interfaces.noder import Noder

FILE_START_MARK = "<"
FILE_END_MARK = ">"

_HASH_TAG = b"file "


@dataclass(frozen=True)
class FileNode:
    """A leaf identified by its contents.

    Renders as ``name<contents>``. Like directories, the name is not part
    of the hash.
    """

    name: str
    contents: str = ""
    _hash: bytes | None = field(default=None, init=False, compare=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.name == "":
            raise EmptyFileNameError()

    def __reduce__(self):
        return (FileNode, (self.name, self.contents))

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> FileNode:
        """Leaf whose contents are the hex digest of *data*."""
        return cls(name, compute_hash(data).hex())

    def hash(self) -> bytes:
        cached = self._hash
        if cached is not None:
            return cached
        with self._lock:
            if self._hash is None:
                h = new_hasher()
                h.update(_HASH_TAG)
                h.update(encode_text(self.contents))
                object.__setattr__(self, "_hash", h.digest())
            return self._hash

    def is_directory(self) -> bool:
        return False

    def children(self) -> list[Noder]:
        return []

    def child_count(self) -> int:
        return 0

    def __str__(self) -> str:
        return f"{self.name}{FILE_START_MARK}{self.contents}{FILE_END_MARK}"
