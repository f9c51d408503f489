"""
Border storage and lookup.

Borders live on grid lines rather than on cells: horizontal line ``r`` runs
above row ``r`` (line ``R`` is the bottom edge), vertical line ``c`` runs left
of column ``c`` (line ``C`` is the right edge), and intersection ``(r, c)`` is
where horizontal line ``r`` meets vertical line ``c``.

The same structure stores border glyphs (``str``) and border colors
(``AnsiColor``).
"""

from __future__ import annotations

import copy
from collections import Counter
from typing import Generic, TypeVar

from grid_types import Border, Borders, HorizontalLine, Position, VerticalLine

T = TypeVar("T")

Shape = tuple[int, int]


class BordersConfig(Generic[T]):
    """Table-wide borders plus per-position and per-line overrides.

    Lookup order for every piece: the per-position map, then a line
    override, then the table-wide ``Borders`` slot for that edge, then the
    global value.

    Per-position entries are counted per line as they are inserted, so
    ``has_horizontal``/``has_vertical`` do not scan the maps.
    """

    def __init__(self, borders: Borders[T] | None = None) -> None:
        self.global_value: T | None = None
        self.borders: Borders[T] = borders if borders is not None else Borders()
        self.cell_horizontals: dict[Position, T] = {}
        self.cell_verticals: dict[Position, T] = {}
        self.cell_intersections: dict[Position, T] = {}
        self.horizontal_lines: dict[int, HorizontalLine[T]] = {}
        self.vertical_lines: dict[int, VerticalLine[T]] = {}
        # line index -> number of per-position entries registering that line
        self._rows_used: Counter[int] = Counter()
        self._cols_used: Counter[int] = Counter()

    def copy(self) -> BordersConfig[T]:
        return copy.deepcopy(self)

    def is_empty(self) -> bool:
        return (
            self.global_value is None
            and self.borders.is_empty()
            and not self.cell_horizontals
            and not self.cell_verticals
            and not self.cell_intersections
            and not self.horizontal_lines
            and not self.vertical_lines
        )

    # -------------------------------------------------------------------------
    # Per-position pieces
    # -------------------------------------------------------------------------

    def _put(self, pieces: dict[Position, T], pos: Position, value: T) -> None:
        if pos not in pieces:
            if pieces is not self.cell_verticals:
                self._rows_used[pos.row] += 1
            if pieces is not self.cell_horizontals:
                self._cols_used[pos.col] += 1
        pieces[pos] = value

    def _drop(self, pieces: dict[Position, T], pos: Position) -> None:
        if pos not in pieces:
            return
        del pieces[pos]
        if pieces is not self.cell_verticals:
            self._rows_used[pos.row] -= 1
            if not self._rows_used[pos.row]:
                del self._rows_used[pos.row]
        if pieces is not self.cell_horizontals:
            self._cols_used[pos.col] -= 1
            if not self._cols_used[pos.col]:
                del self._cols_used[pos.col]

    def insert_horizontal(self, pos: Position, value: T) -> None:
        """Piece of horizontal line ``pos.row`` above column ``pos.col``."""
        self._put(self.cell_horizontals, pos, value)

    def insert_vertical(self, pos: Position, value: T) -> None:
        """Piece of vertical line ``pos.col`` beside row ``pos.row``."""
        self._put(self.cell_verticals, pos, value)

    def insert_intersection(self, pos: Position, value: T) -> None:
        """Crossing of horizontal line ``pos.row`` and vertical line ``pos.col``."""
        self._put(self.cell_intersections, pos, value)

    def insert_border(self, pos: Position, border: Border[T]) -> None:
        """Store every present piece of ``border`` on the lines around ``pos``."""
        row, col = pos.row, pos.col
        if border.top is not None:
            self.insert_horizontal(Position(row, col), border.top)
        if border.bottom is not None:
            self.insert_horizontal(Position(row + 1, col), border.bottom)
        if border.left is not None:
            self.insert_vertical(Position(row, col), border.left)
        if border.right is not None:
            self.insert_vertical(Position(row, col + 1), border.right)
        if border.left_top_corner is not None:
            self.insert_intersection(Position(row, col), border.left_top_corner)
        if border.right_top_corner is not None:
            self.insert_intersection(Position(row, col + 1), border.right_top_corner)
        if border.left_bottom_corner is not None:
            self.insert_intersection(Position(row + 1, col), border.left_bottom_corner)
        if border.right_bottom_corner is not None:
            self.insert_intersection(Position(row + 1, col + 1), border.right_bottom_corner)

    def remove_border(self, pos: Position) -> None:
        row, col = pos.row, pos.col
        self._drop(self.cell_horizontals, Position(row, col))
        self._drop(self.cell_horizontals, Position(row + 1, col))
        self._drop(self.cell_verticals, Position(row, col))
        self._drop(self.cell_verticals, Position(row, col + 1))
        for corner in (
            Position(row, col),
            Position(row, col + 1),
            Position(row + 1, col),
            Position(row + 1, col + 1),
        ):
            self._drop(self.cell_intersections, corner)

    def get_border(self, pos: Position, shape: Shape) -> Border[T]:
        """Resolve the eight pieces around the cell at ``pos``."""
        count_rows, count_cols = shape
        row, col = pos.row, pos.col
        return Border(
            top=self.get_horizontal(Position(row, col), count_rows),
            bottom=self.get_horizontal(Position(row + 1, col), count_rows),
            left=self.get_vertical(Position(row, col), count_cols),
            right=self.get_vertical(Position(row, col + 1), count_cols),
            left_top_corner=self.get_intersection(Position(row, col), shape),
            right_top_corner=self.get_intersection(Position(row, col + 1), shape),
            left_bottom_corner=self.get_intersection(Position(row + 1, col), shape),
            right_bottom_corner=self.get_intersection(Position(row + 1, col + 1), shape),
        )

    # -------------------------------------------------------------------------
    # Line overrides
    # -------------------------------------------------------------------------

    def insert_horizontal_line(self, row: int, line: HorizontalLine[T]) -> None:
        self.horizontal_lines[row] = line

    def remove_horizontal_line(self, row: int) -> None:
        self.horizontal_lines.pop(row, None)

    def insert_vertical_line(self, col: int, line: VerticalLine[T]) -> None:
        self.vertical_lines[col] = line

    def remove_vertical_line(self, col: int) -> None:
        self.vertical_lines.pop(col, None)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_vertical(self, pos: Position, count_cols: int) -> T | None:
        """The piece of vertical line ``pos.col`` beside row ``pos.row``."""
        value = self.cell_verticals.get(pos)
        if value is not None:
            return value

        line = self.vertical_lines.get(pos.col)
        if line is not None and line.main is not None:
            return line.main

        if pos.col == count_cols:
            value = self.borders.right
        elif pos.col == 0:
            value = self.borders.left
        else:
            value = self.borders.vertical
        if value is not None:
            return value

        return self.global_value

    def get_horizontal(self, pos: Position, count_rows: int) -> T | None:
        """The piece of horizontal line ``pos.row`` above column ``pos.col``."""
        value = self.cell_horizontals.get(pos)
        if value is not None:
            return value

        line = self.horizontal_lines.get(pos.row)
        if line is not None and line.main is not None:
            return line.main

        if pos.row == 0:
            value = self.borders.top
        elif pos.row == count_rows:
            value = self.borders.bottom
        else:
            value = self.borders.horizontal
        if value is not None:
            return value

        return self.global_value

    def get_intersection(self, pos: Position, shape: Shape) -> T | None:
        count_rows, count_cols = shape
        use_top = pos.row == 0
        use_bottom = pos.row == count_rows
        use_left = pos.col == 0
        use_right = pos.col == count_cols

        value = self.cell_intersections.get(pos)
        if value is not None:
            return value

        hline = self.horizontal_lines.get(pos.row)
        if hline is not None:
            if use_left and hline.left is not None:
                return hline.left
            if use_right and hline.right is not None:
                return hline.right
            if not use_left and not use_right and hline.intersection is not None:
                return hline.intersection

        vline = self.vertical_lines.get(pos.col)
        if vline is not None:
            if use_top and vline.top is not None:
                return vline.top
            if use_bottom and vline.bottom is not None:
                return vline.bottom
            if not use_top and not use_bottom and vline.intersection is not None:
                return vline.intersection

        b = self.borders
        if use_top and use_left:
            value = b.top_left
        elif use_top and use_right:
            value = b.top_right
        elif use_bottom and use_left:
            value = b.bottom_left
        elif use_bottom and use_right:
            value = b.bottom_right
        elif use_top:
            value = b.top_intersection
        elif use_bottom:
            value = b.bottom_intersection
        elif use_left:
            value = b.left_intersection
        elif use_right:
            value = b.right_intersection
        else:
            value = b.intersection
        if value is not None:
            return value

        return self.global_value

    def has_horizontal(self, row: int, count_rows: int) -> bool:
        """Whether horizontal line ``row`` is drawn at all."""
        return (
            self.global_value is not None
            or (row == 0 and self.borders.has_top())
            or (row == count_rows and self.borders.has_bottom())
            or (0 < row < count_rows and self.borders.has_horizontal())
            or row in self.horizontal_lines
            or row in self._rows_used
        )

    def has_vertical(self, col: int, count_cols: int) -> bool:
        """Whether vertical line ``col`` is drawn at all."""
        return (
            self.global_value is not None
            or (col == 0 and self.borders.has_left())
            or (col == count_cols and self.borders.has_right())
            or (0 < col < count_cols and self.borders.has_vertical())
            or col in self.vertical_lines
            or col in self._cols_used
        )
