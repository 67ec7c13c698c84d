"""Document abstraction consumed by the expression editor.

The core never talks to a live widget. It reads lines and the selection
through the ``Document`` protocol and hands back ``TextEdit`` values which the
document applies atomically.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, order=True)
class Position:
    """A zero-based (line, character) location."""

    line: int
    character: int = 0


@dataclass(frozen=True)
class Range:
    """Half-open interval ``[start, end)`` over a document.

    The constructor accepts the endpoints in either order and normalizes them
    so that ``start <= end``.
    """

    start: Position
    end: Position

    def __post_init__(self) -> None:
        if self.end < self.start:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)

    @classmethod
    def from_coords(
        cls, start_line: int, start_char: int, end_line: int, end_char: int
    ) -> Range:
        return cls(Position(start_line, start_char), Position(end_line, end_char))

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class Selection:
    """Editor selection; ``anchor`` may come after ``active``."""

    anchor: Position
    active: Position

    @classmethod
    def cursor(cls, position: Position) -> Selection:
        return cls(position, position)

    def to_range(self) -> Range:
        return Range(self.anchor, self.active)


@dataclass(frozen=True)
class TextEdit:
    """A single replace (``range`` set) or insert (``position`` set) command."""

    text: str
    range: Range | None = None
    position: Position | None = None

    @classmethod
    def replace(cls, range: Range, text: str) -> TextEdit:
        return cls(text=text, range=range)

    @classmethod
    def insert(cls, position: Position, text: str) -> TextEdit:
        return cls(text=text, position=position)

    @property
    def target(self) -> Range:
        if self.range is not None:
            return self.range
        assert self.position is not None
        return Range(self.position, self.position)


class Document(Protocol):
    """What the expression editor needs from a host text buffer."""

    @property
    def line_count(self) -> int: ...

    def line_at(self, line: int) -> str: ...

    @property
    def selection(self) -> Selection: ...

    @selection.setter
    def selection(self, value: Selection) -> None: ...

    def get_text(self, range: Range) -> str: ...

    def apply_edit(self, edit: TextEdit) -> None: ...


def is_blank(document: Document, line: int) -> bool:
    return not document.line_at(line).strip()


class TextDocument:
    """In-memory ``Document`` backed by a list of lines."""

    def __init__(
        self,
        lines: list[str] | None = None,
        selection: Selection | None = None,
    ) -> None:
        self._lines: list[str] = list(lines) if lines else [""]
        self._selection = selection or Selection.cursor(Position(0, 0))

    @classmethod
    def from_text(cls, text: str, selection: Selection | None = None) -> TextDocument:
        return cls(text.split("\n"), selection)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, line: int) -> str:
        if not 0 <= line < len(self._lines):
            raise IndexError(f"Line {line} out of range (0..{len(self._lines) - 1})")
        return self._lines[line]

    @property
    def selection(self) -> Selection:
        return self._selection

    @selection.setter
    def selection(self, value: Selection) -> None:
        self._selection = value

    def _offset(self, position: Position) -> int:
        line = min(max(position.line, 0), len(self._lines) - 1)
        character = min(max(position.character, 0), len(self._lines[line]))
        return sum(len(text) + 1 for text in self._lines[:line]) + character

    def get_text(self, range: Range) -> str:
        return self.text[self._offset(range.start) : self._offset(range.end)]

    def apply_edit(self, edit: TextEdit) -> None:
        target = edit.target
        text = self.text
        start, end = self._offset(target.start), self._offset(target.end)
        self._lines = (text[:start] + edit.text + text[end:]).split("\n")
