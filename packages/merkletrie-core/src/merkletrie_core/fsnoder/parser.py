"""Parser for the canonical tree string produced by ``str(node)``.

Grammar::

    dir   := name "(" [entry (" " entry)*] ")"
    file  := name "<" contents ">"
    entry := dir | file

Names are runs of any character but ``( ) < >`` and space; only the
top-level directory may have an empty one. Contents may not contain ``<``
or ``>``.
"""

from __future__ import annotations

from merkletrie_core.fsnoder.dir import (
    DIR_ELEMENT_SEP,
    DIR_END_MARK,
    DIR_START_MARK,
    DirectoryNode,
)
from merkletrie_core.fsnoder.file import FILE_END_MARK, FILE_START_MARK, FileNode
from merkletrie_core.fsnoder.models import ParseError
from merkletrie_core.interfaces.noder import Noder

_NAME_STOP = frozenset(
    (DIR_START_MARK, DIR_END_MARK, FILE_START_MARK, FILE_END_MARK, DIR_ELEMENT_SEP)
)
_CONTENTS_STOP = frozenset((FILE_START_MARK, FILE_END_MARK))


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _error(self, reason: str) -> ParseError:
        return ParseError(self.text, self.pos, reason)

    def _name(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] not in _NAME_STOP:
            self.pos += 1
        return self.text[start:self.pos]

    def parse(self) -> DirectoryNode:
        name = self._name()
        if self._peek() != DIR_START_MARK:
            raise self._error(f"expected {DIR_START_MARK!r}")
        self.pos += 1

        # one (name, children) frame per directory still open
        open_dirs: list[tuple[str, list[Noder]]] = [(name, [])]
        expecting_entry = True
        may_close = True
        root: DirectoryNode | None = None

        while root is None:
            mark = self._peek()
            if mark == DIR_END_MARK and may_close:
                self.pos += 1
                dir_name, children = open_dirs.pop()
                node = DirectoryNode(dir_name, children)
                if open_dirs:
                    open_dirs[-1][1].append(node)
                    expecting_entry = False
                else:
                    root = node
            elif not expecting_entry:
                if mark != DIR_ELEMENT_SEP:
                    raise self._error(f"expected {DIR_ELEMENT_SEP!r} or {DIR_END_MARK!r}")
                self.pos += 1
                expecting_entry = True
                may_close = False
            else:
                entry_name = self._name()
                mark = self._peek()
                if mark == DIR_START_MARK:
                    self.pos += 1
                    open_dirs.append((entry_name, []))
                elif mark == FILE_START_MARK:
                    open_dirs[-1][1].append(self._file(entry_name))
                    expecting_entry = False
                else:
                    raise self._error(
                        f"expected {DIR_START_MARK!r} or {FILE_START_MARK!r}"
                    )
                may_close = True

        if self.pos != len(self.text):
            raise self._error("unexpected trailing input")
        return root

    def _file(self, name: str) -> FileNode:
        self.pos += 1  # FILE_START_MARK
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] not in _CONTENTS_STOP:
            self.pos += 1
        if self._peek() != FILE_END_MARK:
            raise self._error("unterminated file contents")
        contents = self.text[start:self.pos]
        self.pos += 1
        return FileNode(name, contents)


def parse(text: str) -> DirectoryNode:
    """Build a tree from its canonical string, e.g. ``"root(a<1> b(c<2>))"``.

    Raises ``ParseError`` on malformed input. Construction errors such as
    ``DuplicateChildNameError`` propagate unchanged.
    """
    return _Parser(text.strip()).parse()
