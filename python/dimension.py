"""
Column width and row height estimation.

Widths and heights include cell padding but not borders. A merged cell
needs the combined size of the columns (rows) it covers, counting the
border lines drawn between them; any shortfall is spread over the covered
columns (rows), with the remainder going to the first one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from grid_config import GridConfig
from grid_types import LayoutError, Position
from records import Records

logger = logging.getLogger(__name__)

__all__ = ["Dimension", "estimate", "range_width", "range_height"]


@dataclass(frozen=True)
class Dimension:
    """Width of every column and height of every row."""

    widths: tuple[int, ...]
    heights: tuple[int, ...]

    @classmethod
    def fixed(cls, widths: list[int] | tuple[int, ...], heights: list[int] | tuple[int, ...]) -> Dimension:
        """Dimensions supplied by the caller instead of estimated."""
        if any(w < 0 for w in widths) or any(h < 0 for h in heights):
            raise LayoutError(
                f"Dimensions must not be negative\n"
                f"  widths: {list(widths)}\n"
                f"  heights: {list(heights)}"
            )
        return cls(tuple(widths), tuple(heights))

    @classmethod
    def constant(cls, width: int, height: int, shape: tuple[int, int]) -> Dimension:
        """Every column ``width`` wide and every row ``height`` high."""
        count_rows, count_cols = shape
        return cls.fixed([width] * count_cols, [height] * count_rows)

    def check_shape(self, shape: tuple[int, int]) -> None:
        count_rows, count_cols = shape
        if len(self.widths) != count_cols or len(self.heights) != count_rows:
            raise LayoutError(
                f"Dimension does not match the grid\n"
                f"  Grid shape: {count_rows} rows x {count_cols} columns\n"
                f"  Dimension: {len(self.heights)} heights x {len(self.widths)} widths"
            )

    def total_width(self, cfg: GridConfig) -> int:
        """Width of every output line, borders included, margins excluded."""
        return sum(self.widths) + cfg.count_vertical(len(self.widths))

    def total_height(self, cfg: GridConfig) -> int:
        return sum(self.heights) + cfg.count_horizontal(len(self.heights))


# =============================================================================
# Estimation
# =============================================================================


def range_width(cfg: GridConfig, widths: list[int] | tuple[int, ...], start: int, end: int) -> int:
    """Width of columns ``start..end`` plus the vertical lines drawn between them."""
    count_cols = len(widths)
    borders = sum(1 for col in range(start + 1, end) if cfg.has_vertical(col, count_cols))
    return sum(widths[start:end]) + borders


def range_height(cfg: GridConfig, heights: list[int] | tuple[int, ...], start: int, end: int) -> int:
    """Height of rows ``start..end`` plus the horizontal lines drawn between them."""
    count_rows = len(heights)
    borders = sum(1 for row in range(start + 1, end) if cfg.has_horizontal(row, count_rows))
    return sum(heights[start:end]) + borders


def _spread(sizes: list[int], start: int, count: int, deficit: int) -> None:
    """Add ``deficit`` across ``sizes[start:start+count]``, remainder to the first slot."""
    one = deficit // count
    rest = deficit - one * count
    for i in range(start, start + count):
        sizes[i] += one
    sizes[start] += rest


def _resolve_spans(
    sizes: list[int],
    spans: list[tuple[Position, int, int]],
    axis_start: Callable[[Position], int],
    measure: Callable[[list[int], int, int], int],
) -> None:
    # Shorter spans first so longer ones only take up what is still missing
    for anchor, span, required in sorted(spans, key=lambda s: (s[1], s[0])):
        start = axis_start(anchor)
        current = measure(sizes, start, start + span)
        if current >= required:
            continue
        _spread(sizes, start, span, required - current)


def estimate(records: Records, cfg: GridConfig) -> Dimension:
    """Compute the smallest widths and heights that fit every cell.

    Raises:
        LayoutError: if a span leaves the grid or overlaps another span.
    """
    count_rows = records.count_rows()
    count_cols = records.count_columns()
    if count_rows == 0 or count_cols == 0:
        return Dimension(tuple([0] * count_cols), tuple([0] * count_rows))

    cfg.validate_spans((count_rows, count_cols))

    widths = [0] * count_cols
    heights = [0] * count_rows
    column_spans: list[tuple[Position, int, int]] = []
    row_spans: list[tuple[Position, int, int]] = []

    for row in range(count_rows):
        for col in range(count_cols):
            pos = Position(row, col)
            if not cfg.is_cell_visible(pos):
                continue

            cell = records.get_cell(pos)
            pad = cfg.get_padding(pos)
            width = cell.width_with_tabs(cfg.tab_width) + pad.left.size + pad.right.size
            height = cell.count_lines + pad.top.size + pad.bottom.size

            col_span = cfg.get_column_span(pos)
            if col_span is not None:
                column_spans.append((pos, col_span, width))
            else:
                widths[col] = max(widths[col], width)

            row_span = cfg.get_row_span(pos)
            if row_span is not None:
                row_spans.append((pos, row_span, height))
            else:
                heights[row] = max(heights[row], height)

    _resolve_spans(
        widths,
        column_spans,
        lambda p: p.col,
        lambda sizes, start, end: range_width(cfg, sizes, start, end),
    )
    _resolve_spans(
        heights,
        row_spans,
        lambda p: p.row,
        lambda sizes, start, end: range_height(cfg, sizes, start, end),
    )

    logger.info(
        "estimate: %dx%d grid, %d column spans, %d row spans -> widths=%s heights=%s",
        count_rows,
        count_cols,
        len(column_spans),
        len(row_spans),
        widths,
        heights,
    )
    return Dimension(tuple(widths), tuple(heights))
