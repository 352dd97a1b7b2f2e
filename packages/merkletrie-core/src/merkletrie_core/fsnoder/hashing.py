"""Hash primitives for fsnoder trees.

Node hashes are 64-bit BLAKE2b digests. They identify content, they are not
meant to resist deliberately crafted collisions.
"""

from __future__ import annotations

import hashlib

DIGEST_SIZE = 8


def new_hasher():
    """Return a fresh streaming hasher producing ``DIGEST_SIZE`` byte digests."""
    return hashlib.blake2b(digest_size=DIGEST_SIZE)


def compute_hash(content: bytes) -> bytes:
    """One-shot digest of *content*."""
    h = new_hasher()
    h.update(content)
    return h.digest()


def encode_text(text: str) -> bytes:
    """UTF-8 bytes of *text*, restoring undecodable bytes from ``os.fsdecode``.

    Names read from disk may carry lone surrogates standing in for bytes that
    were not valid UTF-8; ``surrogateescape`` maps them back to those bytes.
    Any other lone surrogate is kept with ``surrogatepass``, so every str
    encodes.
    """
    try:
        return text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return text.encode("utf-8", "surrogatepass")
