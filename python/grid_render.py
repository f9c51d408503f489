"""
Text rendering of a laid-out grid.

For every row the renderer writes the horizontal line above it (when that
line is drawn) and then one output line per unit of row height. A merged
cell is drawn once across all of its columns; a cell merged over several
rows keeps producing lines, including the lines where the covered
horizontal borders would be.
"""

from __future__ import annotations

import io
import logging
from typing import Iterator, Protocol

from border_correction import apply_span_correction
from dimension import Dimension, range_height, range_width
from grid_config import GridConfig
from grid_types import (
    AlignmentHorizontal,
    AlignmentVertical,
    AnsiColor,
    Indent,
    Offset,
    Position,
)
from records import CellInfo, Records
from text_measure import (
    display_width,
    display_width_ansi,
    expand_tabs,
    slice_ansi,
    strip_ansi,
    trim_line,
)

logger = logging.getLogger(__name__)

__all__ = ["SupportsWrite", "iter_grid_lines", "render_grid", "write_grid"]

Segment = tuple[str, AnsiColor | None]


class SupportsWrite(Protocol):
    """Anything text can be written to (StringIO, sys.stdout, an open file)."""

    def write(self, text: str, /) -> object: ...


# =============================================================================
# Helpers
# =============================================================================


def calculate_indent(
    alignment: AlignmentHorizontal, text_width: int, available: int
) -> tuple[int, int]:
    """Spaces to put (left, right) of a line of ``text_width`` in ``available`` columns."""
    diff = max(0, available - text_width)
    match alignment:
        case AlignmentHorizontal.LEFT:
            return 0, diff
        case AlignmentHorizontal.RIGHT:
            return diff, 0
        case AlignmentHorizontal.CENTER:
            left = diff // 2
            return left, diff - left


def indent_from_top(alignment: AlignmentVertical, available: int, real: int) -> int:
    """Blank lines above ``real`` lines of text placed in ``available`` lines."""
    diff = max(0, available - real)
    match alignment:
        case AlignmentVertical.TOP:
            return 0
        case AlignmentVertical.BOTTOM:
            return diff
        case AlignmentVertical.CENTER:
            return diff // 2


def _is_blank(line: str) -> bool:
    return not strip_ansi(line).strip()


def _strip_empty_lines(lines: list[str], widths: list[int]) -> tuple[list[str], list[int]]:
    start = 0
    while start < len(lines) and _is_blank(lines[start]):
        start += 1
    end = len(lines)
    while end > start and _is_blank(lines[end - 1]):
        end -= 1
    return lines[start:end], widths[start:end]


def _paint(text: str, color: AnsiColor | None) -> str:
    return color.colorize(text) if color is not None else text


def join_segments(segments: list[Segment]) -> str:
    """Concatenate segments, wrapping each run of equally colored ones once."""
    parts: list[str] = []
    run: list[str] = []
    run_color: AnsiColor | None = None
    for text, color in segments:
        if color != run_color and run:
            parts.append(_paint("".join(run), run_color))
            run = []
        run_color = color
        run.append(text)
    if run:
        parts.append(_paint("".join(run), run_color))
    return "".join(parts)


# =============================================================================
# Cell blocks
# =============================================================================


class CellBlock:
    """Produces the output lines of one (possibly merged) cell, one at a time."""

    def __init__(
        self,
        cell: CellInfo,
        pos: Position,
        width: int,
        height: int,
        cfg: GridConfig,
        col_span: int = 1,
        rows_left: int = 1,
    ) -> None:
        self.width = width
        self.col_span = col_span
        self.rows_left = rows_left

        self.pad = cfg.get_padding(pos)
        self.pad_color = cfg.get_padding_color(pos)
        self.color = cfg.get_color(pos)
        self.alignment = cfg.get_alignment_horizontal(pos)
        fmt = cfg.get_formatting(pos)
        self.line_alignment = fmt.allow_lines_alignment

        tab_width = cfg.tab_width
        lines = [expand_tabs(line, tab_width) for line in cell.lines]
        widths = list(cell.line_widths_with_tabs(tab_width))
        if fmt.horizontal_trim:
            lines = [trim_line(line, cell.is_colored) for line in lines]
            measure = display_width_ansi if cell.is_colored else display_width
            widths = [measure(line) for line in lines]
        if fmt.vertical_trim:
            lines, widths = _strip_empty_lines(lines, widths)
        self.lines = lines
        self.line_widths = widths
        self.next_index = 0

        self.available = max(0, width - self.pad.left.size - self.pad.right.size)
        text_height = max(0, height - self.pad.top.size - self.pad.bottom.size)
        self.indent_top = self.pad.top.size + indent_from_top(
            cfg.get_alignment_vertical(pos), text_height, len(lines)
        )

        text_width = max(widths, default=0)
        self.indent_left = calculate_indent(self.alignment, text_width, self.available)[0]

    def next_line(self) -> str:
        if self.indent_top > 0:
            self.indent_top -= 1
            return _paint(self.pad.top.fill * self.width, self.pad_color.top)

        if self.next_index >= len(self.lines):
            return _paint(self.pad.bottom.fill * self.width, self.pad_color.bottom)

        line = self.lines[self.next_index]
        line_width = self.line_widths[self.next_index]
        self.next_index += 1

        if self.line_alignment:
            left, right = calculate_indent(self.alignment, line_width, self.available)
        else:
            left = self.indent_left
            right = max(0, self.available - line_width - left)

        return "".join(
            (
                _paint(self.pad.left.render(), self.pad_color.left),
                " " * left,
                _paint(line, self.color),
                " " * right,
                _paint(self.pad.right.render(), self.pad_color.right),
            )
        )


# =============================================================================
# Grid printing
# =============================================================================


class GridPrinter:
    """Turns records, config and dimensions into output lines."""

    def __init__(self, records: Records, cfg: GridConfig, dimension: Dimension) -> None:
        self.records = records
        self.cfg = cfg
        self.dimension = dimension
        self.shape = (records.count_rows(), records.count_columns())
        self.colored_borders = cfg.has_border_colors()
        self.offset_chars = cfg.has_offset_chars()
        self.total_height = dimension.total_height(cfg)
        self.active: dict[int, CellBlock] = {}  # column -> block still spanning rows

    # -------------------------------------------------------------------------
    # Border pieces
    # -------------------------------------------------------------------------

    def _intersection(self, row: int, col: int) -> Segment | None:
        count_rows, count_cols = self.shape
        if not self.cfg.has_vertical(col, count_cols):
            return None
        pos = Position(row, col)
        glyph = self.cfg.get_intersection(pos, self.shape)
        if glyph is None:
            return None
        color = (
            self.cfg.border_colors.get_intersection(pos, self.shape)
            if self.colored_borders
            else None
        )
        return glyph, color

    def _vertical(self, row: int, col: int, line: int = 0) -> Segment | None:
        """Vertical piece left of column ``col`` on output line ``line`` of ``row``."""
        count_cols = self.shape[1]
        pos = Position(row, col)
        glyph = self.cfg.get_vertical(pos, count_cols)
        if glyph is None:
            return None
        if self.offset_chars:
            height = self.dimension.heights[row]
            glyph = self.cfg.lookup_vertical_char(pos, line, height) or glyph
        color = (
            self.cfg.border_colors.get_vertical(pos, count_cols) if self.colored_borders else None
        )
        return glyph, color

    def _horizontal(self, row: int, col: int, width: int) -> Segment:
        count_rows = self.shape[0]
        pos = Position(row, col)
        glyph = self.cfg.get_horizontal(pos, count_rows)
        if glyph is None:
            return " " * width, None
        color = (
            self.cfg.border_colors.get_horizontal(pos, count_rows) if self.colored_borders else None
        )
        if self.offset_chars:
            text = "".join(
                self.cfg.lookup_horizontal_char(pos, i, width) or glyph for i in range(width)
            )
            return text, color
        return glyph * width, color

    # -------------------------------------------------------------------------
    # Lines
    # -------------------------------------------------------------------------

    def split_line(self, row: int) -> list[Segment]:
        """Horizontal line ``row``, interrupted where a merged cell crosses it."""
        count_cols = self.shape[1]
        segments: list[Segment] = []

        left = self._intersection(row, 0)
        if left is not None:
            segments.append(left)

        col = 0
        while col < count_cols:
            pos = Position(row, col)
            if self.cfg.is_cell_covered_by_row_span(pos):
                block = self.active[col]
                segments.append((block.next_line(), None))
                col += block.col_span
            else:
                segments.append(self._horizontal(row, col, self.dimension.widths[col]))
                col += 1

            right = self._intersection(row, col)
            if right is not None:
                segments.append(right)

        return segments

    def _row_blocks(self, row: int) -> list[tuple[int, CellBlock]]:
        """Blocks drawn on ``row``, including ones carried from rows above."""
        count_cols = self.shape[1]
        widths = self.dimension.widths
        heights = self.dimension.heights

        blocks: list[tuple[int, CellBlock]] = []
        col = 0
        while col < count_cols:
            block = self.active.get(col)
            if block is None:
                pos = Position(row, col)
                col_span = self.cfg.get_column_span(pos) or 1
                row_span = self.cfg.get_row_span(pos) or 1
                width = range_width(self.cfg, widths, col, col + col_span)
                height = range_height(self.cfg, heights, row, row + row_span)
                block = CellBlock(
                    self.records.get_cell(pos),
                    pos,
                    width,
                    height,
                    self.cfg,
                    col_span=col_span,
                    rows_left=row_span,
                )
                if row_span > 1:
                    self.active[col] = block
            blocks.append((col, block))
            col += block.col_span
        return blocks

    def content_lines(self, row: int) -> Iterator[list[Segment]]:
        count_cols = self.shape[1]
        blocks = self._row_blocks(row)

        for line in range(self.dimension.heights[row]):
            segments: list[Segment] = []
            for col, block in blocks:
                border = self._vertical(row, col, line)
                if border is not None:
                    segments.append(border)
                segments.append((block.next_line(), None))
            border = self._vertical(row, count_cols, line)
            if border is not None:
                segments.append(border)
            yield segments

        for col in list(self.active):
            self.active[col].rows_left -= 1
            if self.active[col].rows_left <= 0:
                del self.active[col]

    def _with_text(self, row: int, segments: list[Segment]) -> list[Segment]:
        """Horizontal line ``row`` with its overriding text written over it."""
        text = self.cfg.get_split_line_text(row)
        offset = self.cfg.get_split_line_offset(row)
        if text is None or offset is None:
            return segments

        total = self.dimension.total_width(self.cfg)
        start = offset.start_in(total)
        if start >= total:
            return segments

        line = join_segments(segments)
        piece = slice_ansi(text, 0, total - start)
        end = start + display_width_ansi(piece)
        return [(slice_ansi(line, 0, start) + piece + slice_ansi(line, end, total), None)]

    # -------------------------------------------------------------------------
    # Margins
    # -------------------------------------------------------------------------

    def _side_margin(
        self, indent: Indent, offset: Offset, color: AnsiColor | None, line: int
    ) -> Segment:
        """Left or right margin of table line ``line``; the offset blanks some lines."""
        if indent.size == 0:
            return "", None
        height = self.total_height
        if offset.from_end:
            filled = line < height - min(offset.value, height)
        else:
            filled = line >= min(offset.value, height)
        if filled:
            return indent.render(), color
        return " " * indent.size, None

    def _with_margin(self, segments: list[Segment], line: int) -> str:
        margin = self.cfg.margin
        colors = self.cfg.margin_color
        offsets = self.cfg.margin_offset
        return join_segments(
            [self._side_margin(margin.left, offsets.left, colors.left, line)]
            + segments
            + [self._side_margin(margin.right, offsets.right, colors.right, line)]
        )

    def _margin_lines(
        self, indent: Indent, offset: Offset, color: AnsiColor | None
    ) -> Iterator[str]:
        """Top or bottom margin; the offset blanks columns at the start or the end."""
        margin = self.cfg.margin
        width = self.dimension.total_width(self.cfg) + margin.left.size + margin.right.size
        blank = min(offset.value, width)
        fill = _paint(indent.fill * (width - blank), color)
        line = fill + " " * blank if offset.from_end else " " * blank + fill
        for _ in range(indent.size):
            yield line

    def table_lines(self) -> Iterator[list[Segment]]:
        """Every line of the table between the margins, as segments."""
        count_rows = self.shape[0]
        for row in range(count_rows):
            if self.cfg.has_horizontal(row, count_rows):
                yield self._with_text(row, self.split_line(row))
            yield from self.content_lines(row)

        if self.cfg.has_horizontal(count_rows, count_rows):
            yield self._with_text(count_rows, self.split_line(count_rows))

    def lines(self) -> Iterator[str]:
        margin = self.cfg.margin
        colors = self.cfg.margin_color
        offsets = self.cfg.margin_offset

        yield from self._margin_lines(margin.top, offsets.top, colors.top)
        for line, segments in enumerate(self.table_lines()):
            yield self._with_margin(segments, line)
        yield from self._margin_lines(margin.bottom, offsets.bottom, colors.bottom)


# =============================================================================
# Entry points
# =============================================================================


def iter_grid_lines(records: Records, cfg: GridConfig, dimension: Dimension) -> Iterator[str]:
    """Output lines of the grid, without line terminators.

    Raises:
        LayoutError: for spans that do not fit the grid or dimensions of the
            wrong shape. Raised before the first line is produced.
    """
    shape = (records.count_rows(), records.count_columns())
    if shape[0] == 0 or shape[1] == 0:
        return iter(())

    dimension.check_shape(shape)
    cfg.validate_spans(shape)
    if cfg.span_correction:
        cfg = apply_span_correction(cfg, shape)

    logger.debug("render: %dx%d grid, total width %d", shape[0], shape[1], dimension.total_width(cfg))
    return GridPrinter(records, cfg, dimension).lines()


def write_grid(records: Records, cfg: GridConfig, dimension: Dimension, sink: SupportsWrite) -> None:
    """Write the grid to ``sink``, lines separated by '\\n' with no trailing newline."""
    for i, line in enumerate(iter_grid_lines(records, cfg, dimension)):
        if i > 0:
            sink.write("\n")
        sink.write(line)


def render_grid(records: Records, cfg: GridConfig, dimension: Dimension) -> str:
    out = io.StringIO()
    write_grid(records, cfg, dimension, out)
    return out.getvalue()
