"""
Grid configuration: borders, padding, alignment, formatting, colors and spans.

A GridConfig is built by the caller, then read by the dimension estimator
and the renderer. Every setter bumps ``revision`` so that cached layouts
can tell when they are stale.
"""

from __future__ import annotations

import copy
import logging

from borders_config import BordersConfig, Shape
from entity_map import EntityMap
from grid_types import (
    ASCII_BORDERS,
    NO_OFFSET,
    ZERO_INDENT,
    AlignmentHorizontal,
    AlignmentVertical,
    AnsiColor,
    Border,
    Borders,
    Entity,
    Formatting,
    HorizontalLine,
    Indent,
    LayoutError,
    Offset,
    Position,
    Sides,
    VerticalLine,
)
from text_measure import display_width, split_lines_ansi

logger = logging.getLogger(__name__)

NO_COLORS: Sides[AnsiColor | None] = Sides.all(None)


class GridConfig:
    """All layout settings of one table."""

    def __init__(self) -> None:
        self.borders: BordersConfig[str] = BordersConfig(ASCII_BORDERS)
        self.border_colors: BordersConfig[AnsiColor] = BordersConfig()
        self.missing_border = " "

        self.padding: EntityMap[Sides[Indent]] = EntityMap(ZERO_INDENT)
        self.padding_color: EntityMap[Sides[AnsiColor | None]] = EntityMap(NO_COLORS)
        self.alignment_horizontal: EntityMap[AlignmentHorizontal] = EntityMap(
            AlignmentHorizontal.LEFT
        )
        self.alignment_vertical: EntityMap[AlignmentVertical] = EntityMap(
            AlignmentVertical.TOP
        )
        self.formatting: EntityMap[Formatting] = EntityMap(Formatting())
        self.colors: EntityMap[AnsiColor | None] = EntityMap(None)

        self.margin: Sides[Indent] = ZERO_INDENT
        self.margin_color: Sides[AnsiColor | None] = NO_COLORS
        self.margin_offset: Sides[Offset] = NO_OFFSET

        # Glyphs and text placed over border lines at an offset
        self.horizontal_chars: dict[Position, dict[Offset, str]] = {}
        self.vertical_chars: dict[Position, dict[Offset, str]] = {}
        self.split_line_texts: dict[int, tuple[str, Offset]] = {}

        self.column_spans: dict[Position, int] = {}
        self.row_spans: dict[Position, int] = {}

        self.tab_width = 4
        self.span_correction = True
        self.revision = 0

    def _touch(self) -> None:
        self.revision += 1

    def copy(self) -> GridConfig:
        return copy.deepcopy(self)

    # =========================================================================
    # Borders
    # =========================================================================

    def set_borders(self, borders: Borders[str]) -> None:
        self.borders.borders = borders
        self._touch()

    def get_borders(self) -> Borders[str]:
        return self.borders.borders

    def set_global_border(self, glyph: str) -> None:
        """Use ``glyph`` for every border piece that is not otherwise set."""
        self.borders.global_value = glyph
        self._touch()

    def clear_theme(self) -> None:
        """Remove every border, border override and border color."""
        self.borders = BordersConfig()
        self.border_colors = BordersConfig()
        self._touch()

    def set_border(self, pos: Position, border: Border[str]) -> None:
        self.borders.insert_border(pos, border)
        self._touch()

    def remove_border(self, pos: Position) -> None:
        self.borders.remove_border(pos)
        self._touch()

    def set_intersection(self, pos: Position, glyph: str) -> None:
        """Override the glyph where horizontal line ``pos.row`` meets vertical line ``pos.col``."""
        self.borders.insert_intersection(pos, glyph)
        self._touch()

    def set_horizontal_line(self, row: int, line: HorizontalLine[str]) -> None:
        self.borders.insert_horizontal_line(row, line)
        self._touch()

    def remove_horizontal_line(self, row: int) -> None:
        self.borders.remove_horizontal_line(row)
        self._touch()

    def set_vertical_line(self, col: int, line: VerticalLine[str]) -> None:
        self.borders.insert_vertical_line(col, line)
        self._touch()

    def remove_vertical_line(self, col: int) -> None:
        self.borders.remove_vertical_line(col)
        self._touch()

    def set_borders_missing(self, glyph: str) -> None:
        """Glyph used where two drawn lines cross but no intersection is configured."""
        self.missing_border = glyph
        self._touch()

    def get_border(self, pos: Position, shape: Shape) -> Border[str]:
        """Resolve the border around ``pos``.

        Sides that run through the inside of a merged region are reported as
        absent. Corners are left as configured; the span border correction
        pass decides those.
        """
        border = self.borders.get_border(pos, shape)
        row, col = pos.row, pos.col
        changes: dict[str, str | None] = {}
        if self.is_interior_vertical(Position(row, col)):
            changes["left"] = None
        if self.is_interior_vertical(Position(row, col + 1)):
            changes["right"] = None
        if self.is_interior_horizontal(Position(row, col)):
            changes["top"] = None
        if self.is_interior_horizontal(Position(row + 1, col)):
            changes["bottom"] = None
        return border.with_changes(**changes) if changes else border

    def get_horizontal(self, pos: Position, count_rows: int) -> str | None:
        """Horizontal glyph, or the missing-border glyph when the line is drawn."""
        glyph = self.borders.get_horizontal(pos, count_rows)
        if glyph is None and self.has_horizontal(pos.row, count_rows):
            return self.missing_border
        return glyph

    def get_vertical(self, pos: Position, count_cols: int) -> str | None:
        """Vertical glyph, or the missing-border glyph when the line is drawn."""
        glyph = self.borders.get_vertical(pos, count_cols)
        if glyph is None and self.has_vertical(pos.col, count_cols):
            return self.missing_border
        return glyph

    def get_intersection(self, pos: Position, shape: Shape) -> str | None:
        """Intersection glyph, or the missing-border glyph when both lines are drawn."""
        glyph = self.borders.get_intersection(pos, shape)
        if glyph is not None:
            return glyph
        count_rows, count_cols = shape
        if self.has_horizontal(pos.row, count_rows) and self.has_vertical(pos.col, count_cols):
            return self.missing_border
        return None

    def has_horizontal(self, row: int, count_rows: int) -> bool:
        return self.borders.has_horizontal(row, count_rows)

    def has_vertical(self, col: int, count_cols: int) -> bool:
        return self.borders.has_vertical(col, count_cols)

    def count_horizontal(self, count_rows: int) -> int:
        return sum(1 for row in range(count_rows + 1) if self.has_horizontal(row, count_rows))

    def count_vertical(self, count_cols: int) -> int:
        return sum(1 for col in range(count_cols + 1) if self.has_vertical(col, count_cols))

    # -------------------------------------------------------------------------
    # Border colors
    # -------------------------------------------------------------------------

    def set_borders_color(self, colors: Borders[AnsiColor]) -> None:
        self.border_colors.borders = colors
        self._touch()

    def set_border_color_global(self, color: AnsiColor) -> None:
        self.border_colors.global_value = color
        self._touch()

    def set_border_color(self, pos: Position, border: Border[AnsiColor]) -> None:
        self.border_colors.insert_border(pos, border)
        self._touch()

    def has_border_colors(self) -> bool:
        return not self.border_colors.is_empty()

    # -------------------------------------------------------------------------
    # Text and glyphs over border lines
    # -------------------------------------------------------------------------

    def override_split_line(self, row: int, text: str, offset: Offset = Offset()) -> None:
        """Write ``text`` over horizontal line ``row``, starting at ``offset``.

        Only the first line of ``text`` is used and it is cut at the end of
        the border line. Nothing shows if the line itself is not drawn.
        """
        self.split_line_texts[row] = (text, offset)
        self._touch()

    def get_split_line_text(self, row: int) -> str | None:
        entry = self.split_line_texts.get(row)
        if entry is None:
            return None
        return split_lines_ansi(entry[0])[0]

    def get_split_line_offset(self, row: int) -> Offset | None:
        entry = self.split_line_texts.get(row)
        return entry[1] if entry is not None else None

    def remove_split_line_text(self, row: int) -> tuple[str, Offset] | None:
        entry = self.split_line_texts.pop(row, None)
        self._touch()
        return entry

    def set_horizontal_char(self, pos: Position, glyph: str, offset: Offset) -> None:
        """Replace one glyph of the horizontal piece above ``pos`` (counted inside the column)."""
        self._set_offset_char(self.horizontal_chars, pos, glyph, offset)

    def set_vertical_char(self, pos: Position, glyph: str, offset: Offset) -> None:
        """Replace one glyph of the vertical piece left of ``pos`` (counted down the row)."""
        self._set_offset_char(self.vertical_chars, pos, glyph, offset)

    def remove_horizontal_chars(self, pos: Position) -> None:
        self.horizontal_chars.pop(pos, None)
        self._touch()

    def remove_vertical_chars(self, pos: Position) -> None:
        self.vertical_chars.pop(pos, None)
        self._touch()

    def _set_offset_char(
        self, chars: dict[Position, dict[Offset, str]], pos: Position, glyph: str, offset: Offset
    ) -> None:
        if display_width(glyph) != 1:
            raise LayoutError(
                f"Border glyph must be one column wide\n"
                f"  Glyph: {glyph!r} at {pos}"
            )
        chars.setdefault(pos, {})[offset] = glyph
        self._touch()

    def lookup_horizontal_char(self, pos: Position, index: int, length: int) -> str | None:
        return _lookup_offset_char(self.horizontal_chars, pos, index, length)

    def lookup_vertical_char(self, pos: Position, index: int, length: int) -> str | None:
        return _lookup_offset_char(self.vertical_chars, pos, index, length)

    def has_offset_chars(self) -> bool:
        return bool(self.horizontal_chars or self.vertical_chars)

    # =========================================================================
    # Cell settings
    # =========================================================================

    def set_padding(self, entity: Entity, value: Sides[Indent]) -> None:
        self.padding.set(entity, value)
        self._touch()

    def get_padding(self, pos: Position) -> Sides[Indent]:
        return self.padding.get(pos)

    def set_padding_color(self, entity: Entity, value: Sides[AnsiColor | None]) -> None:
        self.padding_color.set(entity, value)
        self._touch()

    def get_padding_color(self, pos: Position) -> Sides[AnsiColor | None]:
        return self.padding_color.get(pos)

    def set_alignment_horizontal(self, entity: Entity, value: AlignmentHorizontal) -> None:
        self.alignment_horizontal.set(entity, value)
        self._touch()

    def get_alignment_horizontal(self, pos: Position) -> AlignmentHorizontal:
        return self.alignment_horizontal.get(pos)

    def set_alignment_vertical(self, entity: Entity, value: AlignmentVertical) -> None:
        self.alignment_vertical.set(entity, value)
        self._touch()

    def get_alignment_vertical(self, pos: Position) -> AlignmentVertical:
        return self.alignment_vertical.get(pos)

    def set_formatting(self, entity: Entity, value: Formatting) -> None:
        self.formatting.set(entity, value)
        self._touch()

    def get_formatting(self, pos: Position) -> Formatting:
        return self.formatting.get(pos)

    def set_color(self, entity: Entity, color: AnsiColor | None) -> None:
        """Wrap the text of the selected cells in ``color``."""
        self.colors.set(entity, color)
        self._touch()

    def get_color(self, pos: Position) -> AnsiColor | None:
        return self.colors.get(pos)

    def set_margin(self, margin: Sides[Indent]) -> None:
        self.margin = margin
        self._touch()

    def set_margin_color(self, colors: Sides[AnsiColor | None]) -> None:
        self.margin_color = colors
        self._touch()

    def set_margin_offset(self, offsets: Sides[Offset]) -> None:
        """Leave part of each margin blank.

        For the top and bottom margins the offset counts columns, for the
        left and right margins it counts table lines.
        """
        self.margin_offset = offsets
        self._touch()

    def set_tab_width(self, width: int) -> None:
        """Number of spaces a tab expands to."""
        if width < 0:
            raise LayoutError(f"Tab width must not be negative, got {width}")
        self.tab_width = width
        self._touch()

    def set_span_correction(self, enabled: bool) -> None:
        self.span_correction = enabled
        self._touch()

    # =========================================================================
    # Spans
    # =========================================================================

    def set_column_span(self, pos: Position, span: int) -> None:
        """Merge ``span`` columns starting at ``pos``.

        A span of 0 is ignored and a span of 1 removes the merge. Setting a
        span on the same anchor again replaces it.
        """
        self._set_span(self.column_spans, pos, span)

    def set_row_span(self, pos: Position, span: int) -> None:
        """Merge ``span`` rows starting at ``pos`` (same rules as column spans)."""
        self._set_span(self.row_spans, pos, span)

    def _set_span(self, spans: dict[Position, int], pos: Position, span: int) -> None:
        if span < 0:
            raise LayoutError(f"Span must not be negative, got {span} at {pos}")
        if span == 0:
            return
        if span == 1:
            spans.pop(pos, None)
        else:
            spans[pos] = span
        self._touch()

    def get_column_span(self, pos: Position) -> int | None:
        return self.column_spans.get(pos)

    def get_row_span(self, pos: Position) -> int | None:
        return self.row_spans.get(pos)

    def has_column_spans(self) -> bool:
        return bool(self.column_spans)

    def has_row_spans(self) -> bool:
        return bool(self.row_spans)

    def iter_column_spans(self) -> list[tuple[Position, int]]:
        """Column spans ordered by anchor, row-major."""
        return sorted(self.column_spans.items())

    def iter_row_spans(self) -> list[tuple[Position, int]]:
        return sorted(self.row_spans.items())

    def is_cell_covered_by_column_span(self, pos: Position) -> bool:
        return any(
            anchor.row == pos.row and anchor.col < pos.col < anchor.col + span
            for anchor, span in self.column_spans.items()
        )

    def is_cell_covered_by_row_span(self, pos: Position) -> bool:
        return any(
            anchor.col == pos.col and anchor.row < pos.row < anchor.row + span
            for anchor, span in self.row_spans.items()
        )

    def is_cell_covered_by_both_spans(self, pos: Position) -> bool:
        """True for cells strictly inside a region merged in both directions."""
        for anchor, rows in self.row_spans.items():
            cols = self.column_spans.get(anchor)
            if cols is None:
                continue
            if (
                anchor.row < pos.row < anchor.row + rows
                and anchor.col < pos.col < anchor.col + cols
            ):
                return True
        return False

    def is_cell_visible(self, pos: Position) -> bool:
        return not (
            self.is_cell_covered_by_column_span(pos)
            or self.is_cell_covered_by_row_span(pos)
            or self.is_cell_covered_by_both_spans(pos)
        )

    def _span_regions(self) -> list[tuple[Position, int, int]]:
        """(anchor, rows, cols) for every merged region."""
        anchors = sorted(set(self.row_spans) | set(self.column_spans))
        return [
            (anchor, self.row_spans.get(anchor, 1), self.column_spans.get(anchor, 1))
            for anchor in anchors
        ]

    def is_interior_vertical(self, pos: Position) -> bool:
        """Whether the vertical line left of ``pos`` lies inside a merged region."""
        return any(
            anchor.row <= pos.row < anchor.row + rows
            and anchor.col < pos.col < anchor.col + cols
            for anchor, rows, cols in self._span_regions()
        )

    def is_interior_horizontal(self, pos: Position) -> bool:
        """Whether the horizontal line above ``pos`` lies inside a merged region."""
        return any(
            anchor.col <= pos.col < anchor.col + cols
            and anchor.row < pos.row < anchor.row + rows
            for anchor, rows, cols in self._span_regions()
        )

    def validate_spans(self, shape: Shape) -> None:
        """Reject spans that leave the grid or overlap each other.

        Raises:
            LayoutError: describing the first offending span.
        """
        count_rows, count_cols = shape
        owner: dict[Position, Position] = {}
        for anchor, rows, cols in self._span_regions():
            if anchor.row >= count_rows or anchor.col >= count_cols:
                raise LayoutError(
                    f"Span anchor {anchor} is outside the grid\n"
                    f"  Grid shape: {count_rows} rows x {count_cols} columns"
                )
            if anchor.col + cols > count_cols or anchor.row + rows > count_rows:
                raise LayoutError(
                    f"Span at {anchor} reaches past the grid boundary\n"
                    f"  Span: {rows} rows x {cols} columns\n"
                    f"  Grid shape: {count_rows} rows x {count_cols} columns"
                )
            for row in range(anchor.row, anchor.row + rows):
                for col in range(anchor.col, anchor.col + cols):
                    pos = Position(row, col)
                    other = owner.get(pos)
                    if other is not None:
                        raise LayoutError(
                            f"Overlapping spans at {pos}\n"
                            f"  First span anchored at {other}\n"
                            f"  Second span anchored at {anchor}"
                        )
                    owner[pos] = anchor
        logger.debug("validate_spans: %d merged regions fit %s", len(self._span_regions()), shape)


def _lookup_offset_char(
    chars: dict[Position, dict[Offset, str]], pos: Position, index: int, length: int
) -> str | None:
    """Glyph set for slot ``index`` of a run of ``length`` slots, from either end."""
    at = chars.get(pos)
    if at is None:
        return None
    glyph = at.get(Offset.begin(index))
    if glyph is None and index < length:
        glyph = at.get(Offset.end(length - index - 1))
    return glyph
