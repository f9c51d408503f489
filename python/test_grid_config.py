"""Tests for grid_config and borders_config modules."""

import random

import pytest

from grid_config import GridConfig
from grid_types import (
    AlignmentHorizontal,
    Border,
    Borders,
    Cell,
    Global,
    HorizontalLine,
    LayoutError,
    Offset,
    Position,
    VerticalLine,
    padding,
)


def random_regions(rng: random.Random, rows: int, cols: int) -> list[tuple[Position, int, int]]:
    """Non-overlapping merged regions covering parts of a rows x cols grid."""
    taken: set[Position] = set()
    regions = []
    for row in range(rows):
        for col in range(cols):
            if Position(row, col) in taken:
                continue
            height = rng.randint(1, rows - row)
            width = rng.randint(1, cols - col)
            cells = {Position(r, c) for r in range(row, row + height) for c in range(col, col + width)}
            if cells & taken:
                height = width = 1
                cells = {Position(row, col)}
            taken |= cells
            regions.append((Position(row, col), height, width))
    return regions


class TestSpans:
    """Tests for span bookkeeping and visibility."""

    def test_span_zero_ignored(self) -> None:
        """A span of 0 leaves the config untouched."""
        cfg = GridConfig()
        cfg.set_column_span(Position(0, 0), 2)
        cfg.set_column_span(Position(0, 0), 0)
        assert cfg.get_column_span(Position(0, 0)) == 2

    def test_span_one_removes(self) -> None:
        """A span of 1 removes the merge."""
        cfg = GridConfig()
        cfg.set_row_span(Position(0, 0), 3)
        cfg.set_row_span(Position(0, 0), 1)
        assert cfg.get_row_span(Position(0, 0)) is None
        assert not cfg.has_row_spans()

    def test_span_last_write_wins(self) -> None:
        """Setting a span on the same anchor again replaces it."""
        cfg = GridConfig()
        cfg.set_column_span(Position(1, 0), 2)
        cfg.set_column_span(Position(1, 0), 3)
        assert cfg.get_column_span(Position(1, 0)) == 3

    def test_negative_span_rejected(self) -> None:
        """A negative span is a layout error."""
        cfg = GridConfig()
        with pytest.raises(LayoutError, match="negative"):
            cfg.set_column_span(Position(0, 0), -1)

    def test_column_span_visibility(self) -> None:
        """Cells to the right of a column span anchor are hidden."""
        cfg = GridConfig()
        cfg.set_column_span(Position(0, 0), 3)
        assert cfg.is_cell_visible(Position(0, 0))
        assert not cfg.is_cell_visible(Position(0, 1))
        assert not cfg.is_cell_visible(Position(0, 2))
        assert cfg.is_cell_visible(Position(0, 3))
        assert cfg.is_cell_visible(Position(1, 1))

    def test_row_span_visibility(self) -> None:
        """Cells below a row span anchor are hidden."""
        cfg = GridConfig()
        cfg.set_row_span(Position(0, 1), 2)
        assert cfg.is_cell_covered_by_row_span(Position(1, 1))
        assert not cfg.is_cell_visible(Position(1, 1))
        assert cfg.is_cell_visible(Position(2, 1))

    def test_both_spans_visibility(self) -> None:
        """Inner cells of a 2D region are covered by both spans only."""
        cfg = GridConfig()
        cfg.set_row_span(Position(0, 0), 2)
        cfg.set_column_span(Position(0, 0), 2)
        inner = Position(1, 1)
        assert cfg.is_cell_covered_by_both_spans(inner)
        assert not cfg.is_cell_covered_by_row_span(inner)
        assert not cfg.is_cell_covered_by_column_span(inner)
        assert not cfg.is_cell_visible(inner)

    @pytest.mark.parametrize("seed", range(20))
    def test_visible_count(self, seed: int) -> None:
        """Exactly the cells strictly inside merged regions are hidden."""
        rng = random.Random(seed)
        rows, cols = rng.randint(1, 6), rng.randint(1, 6)
        cfg = GridConfig()
        covered = 0
        for anchor, height, width in random_regions(rng, rows, cols):
            cfg.set_row_span(anchor, height)
            cfg.set_column_span(anchor, width)
            covered += height * width - 1

        cfg.validate_spans((rows, cols))
        visible = sum(
            1 for r in range(rows) for c in range(cols) if cfg.is_cell_visible(Position(r, c))
        )
        assert visible == rows * cols - covered


class TestValidateSpans:
    """Tests for rejecting spans that cannot be laid out."""

    def test_span_past_boundary(self) -> None:
        """A span reaching past the last column is rejected."""
        cfg = GridConfig()
        cfg.set_column_span(Position(0, 1), 3)
        with pytest.raises(LayoutError, match="reaches past the grid boundary"):
            cfg.validate_spans((2, 2))

    def test_anchor_outside(self) -> None:
        """A span anchored outside the grid is rejected."""
        cfg = GridConfig()
        cfg.set_row_span(Position(5, 0), 2)
        with pytest.raises(LayoutError, match="outside the grid"):
            cfg.validate_spans((2, 2))

    def test_overlap(self) -> None:
        """Two merged regions sharing a cell are rejected."""
        cfg = GridConfig()
        cfg.set_column_span(Position(0, 0), 2)
        cfg.set_row_span(Position(0, 1), 2)
        with pytest.raises(LayoutError, match="Overlapping spans at"):
            cfg.validate_spans((3, 3))

    def test_valid(self) -> None:
        """Fitting spans pass silently."""
        cfg = GridConfig()
        cfg.set_column_span(Position(0, 0), 2)
        cfg.set_row_span(Position(1, 1), 2)
        cfg.validate_spans((3, 2))


class TestBorderLookup:
    """Tests for resolving border glyphs."""

    def test_default_ascii(self) -> None:
        """Every piece of a cell's border comes from the ASCII preset."""
        cfg = GridConfig()
        border = cfg.get_border(Position(0, 0), (2, 2))
        assert border == Border(
            top="-",
            bottom="-",
            left="|",
            right="|",
            left_top_corner="+",
            right_top_corner="+",
            left_bottom_corner="+",
            right_bottom_corner="+",
        )

    def test_span_interior_suppressed(self) -> None:
        """Sides running through a merged region are absent."""
        cfg = GridConfig()
        cfg.set_column_span(Position(0, 0), 2)
        assert cfg.get_border(Position(0, 0), (2, 2)).right is None
        assert cfg.get_border(Position(0, 1), (2, 2)).left is None
        assert cfg.get_border(Position(0, 1), (2, 2)).top == "-"
        assert cfg.get_border(Position(1, 0), (2, 2)).right == "|"

    def test_row_span_interior_suppressed(self) -> None:
        """The line between rows of a row span is absent."""
        cfg = GridConfig()
        cfg.set_row_span(Position(0, 0), 2)
        assert cfg.get_border(Position(0, 0), (2, 2)).bottom is None
        assert cfg.get_border(Position(1, 0), (2, 2)).top is None
        assert cfg.get_border(Position(0, 1), (2, 2)).bottom == "-"

    def test_cell_override(self) -> None:
        """A per-cell border overrides only the lines around that cell."""
        cfg = GridConfig()
        cfg.set_border(Position(0, 0), Border(top="=", left_top_corner="#"))
        assert cfg.get_horizontal(Position(0, 0), 2) == "="
        assert cfg.get_horizontal(Position(0, 1), 2) == "-"
        assert cfg.get_intersection(Position(0, 0), (2, 2)) == "#"
        cfg.remove_border(Position(0, 0))
        assert cfg.get_horizontal(Position(0, 0), 2) == "-"

    def test_line_override(self) -> None:
        """A horizontal line override replaces the whole line."""
        cfg = GridConfig()
        cfg.set_horizontal_line(1, HorizontalLine(main="=", intersection="#", left="<", right=">"))
        assert cfg.get_horizontal(Position(1, 0), 2) == "="
        assert cfg.get_intersection(Position(1, 0), (2, 2)) == "<"
        assert cfg.get_intersection(Position(1, 1), (2, 2)) == "#"
        assert cfg.get_intersection(Position(1, 2), (2, 2)) == ">"
        assert cfg.get_intersection(Position(0, 1), (2, 2)) == "+"

    def test_vertical_line_override(self) -> None:
        """A vertical line override supplies its end glyphs."""
        cfg = GridConfig()
        cfg.set_borders(Borders())
        cfg.set_vertical_line(1, VerticalLine(main="!", top="v", bottom="^"))
        assert cfg.has_vertical(1, 2)
        assert not cfg.has_vertical(0, 2)
        assert cfg.get_vertical(Position(0, 1), 2) == "!"
        assert cfg.get_intersection(Position(0, 1), (2, 2)) == "v"
        cfg.remove_vertical_line(1)
        assert not cfg.has_vertical(1, 2)

    def test_missing_intersection(self) -> None:
        """Crossing lines without an intersection glyph use the missing glyph."""
        cfg = GridConfig()
        cfg.set_borders(Borders(horizontal="-", vertical="|"))
        assert cfg.get_intersection(Position(1, 1), (2, 2)) == " "
        cfg.set_borders_missing("?")
        assert cfg.get_intersection(Position(1, 1), (2, 2)) == "?"
        assert cfg.get_intersection(Position(0, 0), (2, 2)) is None

    def test_global_border(self) -> None:
        """A global glyph fills every line."""
        cfg = GridConfig()
        cfg.clear_theme()
        assert not cfg.has_horizontal(0, 1)
        cfg.set_global_border("*")
        assert cfg.has_horizontal(0, 1)
        assert cfg.get_vertical(Position(0, 0), 1) == "*"
        assert cfg.get_intersection(Position(1, 1), (1, 1)) == "*"

    def test_has_lines(self) -> None:
        """Outer and inner lines follow the preset slots."""
        cfg = GridConfig()
        cfg.set_borders(Borders(top="-", vertical="|"))
        assert cfg.has_horizontal(0, 3)
        assert not cfg.has_horizontal(1, 3)
        assert not cfg.has_horizontal(3, 3)
        assert cfg.has_vertical(1, 3)
        assert not cfg.has_vertical(0, 3)
        assert cfg.count_vertical(3) == 2
        assert cfg.count_horizontal(3) == 1

    def test_cell_pieces_register_lines(self) -> None:
        """Per-cell pieces draw their lines until the last of them is removed."""
        cfg = GridConfig()
        cfg.clear_theme()
        cfg.set_border(Position(1, 1), Border(top="=", right="!"))
        cfg.set_border(Position(1, 0), Border(top="="))
        assert cfg.has_horizontal(1, 3)
        assert cfg.has_vertical(2, 3)
        assert not cfg.has_vertical(1, 3)
        assert not cfg.has_horizontal(2, 3)

        cfg.remove_border(Position(1, 1))
        assert cfg.has_horizontal(1, 3)
        assert not cfg.has_vertical(2, 3)
        cfg.remove_border(Position(1, 0))
        assert not cfg.has_horizontal(1, 3)

    def test_intersection_registers_both_lines(self) -> None:
        cfg = GridConfig()
        cfg.clear_theme()
        cfg.set_intersection(Position(2, 1), "#")
        assert cfg.has_horizontal(2, 3)
        assert cfg.has_vertical(1, 3)
        assert cfg.count_horizontal(3) == 1
        assert cfg.count_vertical(3) == 1


class TestSettings:
    """Tests for per-entity settings and change tracking."""

    def test_padding_precedence(self) -> None:
        """Cell padding overrides the global padding."""
        cfg = GridConfig()
        cfg.set_padding(Global(), padding(left=1, right=1))
        cfg.set_padding(Cell(0, 0), padding(left=3))
        assert cfg.get_padding(Position(0, 0)).left.size == 3
        assert cfg.get_padding(Position(1, 1)).left.size == 1

    def test_alignment_default(self) -> None:
        """Cells are left aligned unless configured."""
        cfg = GridConfig()
        assert cfg.get_alignment_horizontal(Position(0, 0)) is AlignmentHorizontal.LEFT

    def test_revision_bumps(self) -> None:
        """Every setter marks the config as changed."""
        cfg = GridConfig()
        start = cfg.revision
        cfg.set_padding(Global(), padding(left=1))
        cfg.set_column_span(Position(0, 0), 2)
        cfg.set_span_correction(False)
        assert cfg.revision == start + 3

    def test_copy_is_independent(self) -> None:
        """A copied config does not share border overrides."""
        cfg = GridConfig()
        other = cfg.copy()
        other.set_intersection(Position(0, 0), "#")
        assert cfg.get_intersection(Position(0, 0), (1, 1)) == "+"
        assert other.get_intersection(Position(0, 0), (1, 1)) == "#"

    def test_split_line_text(self) -> None:
        """Only the first line of the text is kept for drawing."""
        cfg = GridConfig()
        assert cfg.get_split_line_text(0) is None
        cfg.override_split_line(1, "top\nrest", Offset.end(2))
        assert cfg.get_split_line_text(1) == "top"
        assert cfg.get_split_line_offset(1) == Offset.end(2)
        cfg.remove_split_line_text(1)
        assert cfg.get_split_line_text(1) is None

    def test_offset_glyph_lookup(self) -> None:
        """A glyph is found from the start first and from the end second."""
        cfg = GridConfig()
        pos = Position(0, 0)
        cfg.set_horizontal_char(pos, "a", Offset.begin(0))
        cfg.set_horizontal_char(pos, "z", Offset.end(0))
        assert cfg.lookup_horizontal_char(pos, 0, 5) == "a"
        assert cfg.lookup_horizontal_char(pos, 4, 5) == "z"
        assert cfg.lookup_horizontal_char(pos, 2, 5) is None
        assert cfg.lookup_vertical_char(pos, 0, 5) is None
        assert cfg.has_offset_chars()

    def test_tab_width(self) -> None:
        cfg = GridConfig()
        assert cfg.tab_width == 4
        cfg.set_tab_width(2)
        assert cfg.tab_width == 2
        with pytest.raises(LayoutError):
            cfg.set_tab_width(-3)
