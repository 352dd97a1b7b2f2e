"""Error types raised while building fsnoder trees."""

from __future__ import annotations


class NoderError(Exception):
    """Base class for node construction and parsing failures."""


class EmptyChildNameError(NoderError, ValueError):
    """A directory was given a child with an empty name."""

    def __init__(self, parent: str) -> None:
        self.parent = parent
        super().__init__(
            f"non-root inner nodes cannot have empty names (parent {parent!r})"
        )


class DuplicateChildNameError(NoderError, ValueError):
    """A directory was given two children with the same name."""

    def __init__(self, parent: str, child: str) -> None:
        self.parent = parent
        self.child = child
        super().__init__(
            f"children cannot have duplicated names: {child!r} in {parent!r}"
        )


class EmptyFileNameError(NoderError, ValueError):
    """A leaf was given an empty name."""

    def __init__(self) -> None:
        super().__init__("files cannot have empty names")


class ParseError(NoderError, ValueError):
    """Malformed canonical tree string."""

    def __init__(self, text: str, position: int, reason: str) -> None:
        self.text = text
        self.position = position
        self.reason = reason
        super().__init__(f"{reason} at position {position} in {text!r}")
