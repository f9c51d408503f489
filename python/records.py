"""
Read-only views over the cell matrix.

Anything that implements the ``Records`` protocol can be measured and
rendered. ``VecRecords`` is the in-memory implementation used by ``Table``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Sequence

from grid_types import Position
from text_measure import display_width, display_width_ansi, split_lines, split_lines_ansi


class TextKind(Enum):
    """How a cell's text has to be measured."""

    PLAIN = "plain"
    COLORED = "colored"  # contains ANSI escape sequences


@dataclass(frozen=True)
class CellInfo:
    """A cell's text together with its pre-measured lines."""

    text: str
    kind: TextKind
    lines: tuple[str, ...]
    line_widths: tuple[int, ...]
    width: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "width", max(self.line_widths))

    @classmethod
    def plain(cls, text: str) -> CellInfo:
        lines = tuple(split_lines(text))
        return cls(text, TextKind.PLAIN, lines, tuple(display_width(line) for line in lines))

    @classmethod
    def colored(cls, text: str) -> CellInfo:
        lines = tuple(split_lines_ansi(text))
        return cls(
            text, TextKind.COLORED, lines, tuple(display_width_ansi(line) for line in lines)
        )

    @classmethod
    def from_text(cls, text: str) -> CellInfo:
        """Pick the plain or colored representation from the text itself."""
        return cls.colored(text) if "\x1b" in text else cls.plain(text)

    def line_widths_with_tabs(self, tab_width: int) -> tuple[int, ...]:
        """Line widths once every tab is expanded to ``tab_width`` spaces."""
        return tuple(
            width + line.count("\t") * tab_width
            for line, width in zip(self.lines, self.line_widths)
        )

    def width_with_tabs(self, tab_width: int) -> int:
        if "\t" not in self.text:
            return self.width
        return max(self.line_widths_with_tabs(tab_width))

    @property
    def count_lines(self) -> int:
        return len(self.lines)

    @property
    def is_colored(self) -> bool:
        return self.kind is TextKind.COLORED


class Records(Protocol):
    """What the layout engine needs from a table's data."""

    def count_rows(self) -> int: ...

    def count_columns(self) -> int: ...

    def get_cell(self, pos: Position) -> CellInfo: ...


class VecRecords:
    """Records backed by a list of rows.

    Short rows are filled with empty cells up to the longest row.
    """

    def __init__(self, data: Sequence[Sequence[str]]) -> None:
        width = max((len(row) for row in data), default=0)
        self._cells: list[list[CellInfo]] = [
            [CellInfo.from_text(text) for text in row]
            + [CellInfo.plain("") for _ in range(width - len(row))]
            for row in data
        ]
        self._count_columns = width if self._cells else 0
        self.revision = 0

    def count_rows(self) -> int:
        return len(self._cells)

    def count_columns(self) -> int:
        return self._count_columns

    def shape(self) -> tuple[int, int]:
        return self.count_rows(), self.count_columns()

    def get_cell(self, pos: Position) -> CellInfo:
        if not (0 <= pos.row < len(self._cells) and 0 <= pos.col < self._count_columns):
            raise IndexError(f"Position {pos} is outside the records {self.shape()}")
        return self._cells[pos.row][pos.col]

    def get_text(self, pos: Position) -> str:
        return self.get_cell(pos).text

    def set_text(self, pos: Position, text: str) -> None:
        """Replace the text of one existing cell."""
        self.get_cell(pos)
        self._cells[pos.row][pos.col] = CellInfo.from_text(text)
        self.revision += 1

    def __repr__(self) -> str:
        return f"VecRecords({self.count_rows()}x{self.count_columns()})"
