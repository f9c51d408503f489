"""
Intersection glyph correction around merged cells.

Default intersections assume every cell boundary is drawn. Along the edges
of a merged region some of those boundaries disappear, so the crossing
glyph has to turn into a tee or a plain line. The pass below walks every
span once, looks at the neighbouring cells, and produces a map of
intersection position -> corrected glyph that is layered over the config.
"""

from __future__ import annotations

import logging

from borders_config import BordersConfig, Shape
from grid_config import GridConfig
from grid_types import Border, Position

logger = logging.getLogger(__name__)

__all__ = ["apply_span_correction", "compute_span_corrections"]


class _Corrector:
    """Applies corrections to a scratch copy of the borders, recording each one."""

    def __init__(self, cfg: GridConfig, shape: Shape) -> None:
        self.cfg = cfg
        self.shape = shape
        self.borders: BordersConfig[str] = cfg.borders.copy()
        self.corrections: dict[Position, str] = {}

    def border(self, pos: Position) -> Border[str]:
        return self.borders.get_border(pos, self.shape)

    def set_corner(self, pos: Position, glyph: str | None) -> None:
        """Replace the corner at ``pos``; corners the config does not draw stay absent."""
        if glyph is None or self.cfg.borders.get_intersection(pos, self.shape) is None:
            return
        self.borders.insert_intersection(pos, glyph)
        self.corrections[pos] = glyph

    def has_left(self, pos: Position) -> bool:
        """Whether a vertical line piece starts at the left edge of ``pos``."""
        if self.cfg.is_cell_covered_by_both_spans(pos) or self.cfg.is_cell_covered_by_column_span(pos):
            return False
        border = self.border(pos)
        return (
            border.left is not None
            or border.left_top_corner is not None
            or border.left_bottom_corner is not None
        )

    def has_top(self, pos: Position) -> bool:
        """Whether a horizontal line piece runs along the top edge of ``pos``."""
        if self.cfg.is_cell_covered_by_both_spans(pos) or self.cfg.is_cell_covered_by_row_span(pos):
            return False
        border = self.border(pos)
        return (
            border.top is not None
            or border.left_top_corner is not None
            or border.right_top_corner is not None
        )

    def correct_column_spans(self) -> None:
        count_rows, _ = self.shape
        defaults = self.borders.borders
        for anchor, span in self.cfg.iter_column_spans():
            row = anchor.row
            for col in range(anchor.col, anchor.col + span):
                if col == 0:
                    continue

                is_first = col == anchor.col
                has_up = row > 0 and self.has_left(Position(row - 1, col))
                has_down = row + 1 < count_rows and self.has_left(Position(row + 1, col))
                border = self.border(Position(row, col))

                if border.left_top_corner is not None and border.top is not None:
                    if has_up and is_first:
                        glyph = defaults.intersection
                    elif has_up:
                        glyph = defaults.bottom_intersection
                    elif is_first:
                        glyph = defaults.top_intersection
                    else:
                        glyph = border.top
                    self.set_corner(Position(row, col), glyph)

                if border.left_bottom_corner is not None and border.bottom is not None:
                    if has_down and is_first:
                        glyph = defaults.intersection
                    elif has_down:
                        glyph = defaults.top_intersection
                    elif is_first:
                        glyph = defaults.bottom_intersection
                    else:
                        glyph = border.bottom
                    self.set_corner(Position(row + 1, col), glyph)

    def correct_row_spans(self) -> None:
        _, count_cols = self.shape
        defaults = self.borders.borders
        for anchor, span in self.cfg.iter_row_spans():
            col = anchor.col
            for row in range(anchor.row + 1, anchor.row + span):
                border = self.border(Position(row, col))

                if border.left_top_corner is not None:
                    has_left = col > 0 and self.has_top(Position(row, col - 1))
                    glyph = defaults.right_intersection if has_left else defaults.vertical
                    self.set_corner(Position(row, col), glyph)

                if border.right_top_corner is not None:
                    has_right = col + 1 < count_cols and self.has_top(Position(row, col + 1))
                    glyph = defaults.left_intersection if has_right else defaults.vertical
                    self.set_corner(Position(row, col + 1), glyph)

    def correct_inner_cells(self) -> None:
        """Cells merged in both directions, where four regions can meet."""
        count_rows, count_cols = self.shape
        defaults = self.borders.borders
        inner = [
            Position(row, col)
            for row in range(1, count_rows)
            for col in range(count_cols)
            if self.cfg.is_cell_covered_by_both_spans(Position(row, col))
        ]
        for pos in inner:
            row, col = pos.row, pos.col
            has_right = col + 1 < count_cols and self.has_top(Position(row, col + 1))
            has_up = self.has_left(Position(row - 1, col))

            if has_up and not has_right:
                self.set_corner(Position(row, col + 1), defaults.right_intersection)
            if not has_up and has_right:
                self.set_corner(Position(row, col + 1), defaults.left_intersection)

            has_down = row + 1 < count_rows and self.has_left(Position(row + 1, col))
            if has_down:
                self.set_corner(Position(row + 1, col), defaults.top_intersection)


def compute_span_corrections(cfg: GridConfig, shape: Shape) -> dict[Position, str]:
    """Map of intersection position -> glyph for every corner a span changes.

    ``cfg`` is not modified.
    """
    if not (cfg.has_column_spans() or cfg.has_row_spans()):
        return {}

    corrector = _Corrector(cfg, shape)
    corrector.correct_column_spans()
    corrector.correct_row_spans()
    corrector.correct_inner_cells()

    logger.info(
        "span correction: %d intersections adjusted for %d column spans and %d row spans",
        len(corrector.corrections),
        len(cfg.column_spans),
        len(cfg.row_spans),
    )
    return corrector.corrections


def apply_span_correction(cfg: GridConfig, shape: Shape) -> GridConfig:
    """Return a copy of ``cfg`` with span corrections layered on top."""
    corrections = compute_span_corrections(cfg, shape)
    if not corrections:
        return cfg
    corrected = cfg.copy()
    for pos, glyph in corrections.items():
        corrected.borders.insert_intersection(pos, glyph)
    return corrected
