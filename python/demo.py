"""
Demonstration scripts for the spangrid layout engine.
"""

import logging
import sys

import simple_chalk as chalk  # type: ignore[import-untyped]

from grid_parser import parse_layout
from grid_types import (
    MODERN_BORDERS,
    AlignmentHorizontal,
    AlignmentVertical,
    AnsiColor,
    Borders,
    Cell,
    Column,
    Formatting,
    Global,
    HorizontalLine,
    Offset,
    Row,
    Sides,
    padding,
)
from table import Table


def basic_demo() -> None:
    """Plain tables with the default ASCII borders."""
    table = Table([["0-0", "0-1"], ["1-0", "1-1"]])
    print("Default borders, no padding:")
    print(table)
    print()

    table.config.set_padding(Global(), padding(left=1, right=1))
    print("With one space of padding:")
    print(table)
    print()

    table = Table([["left\ncell", "1\n2\n3\n4\n5\n6"]])
    print("Multi-line cells (row height follows the tallest cell):")
    print(table)
    print()


def span_demo() -> None:
    """Merged cells with and without intersection correction."""
    table = parse_layout("Quarterly_report < <|Region Q1 Q2|North 10 12|South ^ 9")
    table.with_borders(MODERN_BORDERS)
    table.config.set_padding(Global(), padding(left=1, right=1))
    table.config.set_alignment_horizontal(Row(0), AlignmentHorizontal.CENTER)
    table.config.set_alignment_vertical(Global(), AlignmentVertical.CENTER)

    print("Spans with corrected intersections:")
    print(table)
    print()

    table.config.set_span_correction(False)
    print("Same table, raw intersections:")
    print(table)
    print()


def color_demo() -> None:
    """Colored content, borders, padding, margins and a caption on the top line."""
    header = chalk.bold.yellow
    table = Table(
        [
            [header("name"), header("width")],
            ["ascii", "3"],
            [chalk.green("日本語"), "6"],
        ]
    )
    table.with_borders(MODERN_BORDERS)
    table.config.set_padding(Global(), padding(left=1, right=1))
    table.config.set_alignment_horizontal(Column(1), AlignmentHorizontal.RIGHT)
    table.config.set_borders_color(Borders.filled(AnsiColor.from_style(chalk.blue)))
    table.config.set_horizontal_line(1, HorizontalLine(main="═", intersection="╪", left="╞", right="╡"))
    table.config.set_color(Cell(1, 0), AnsiColor.from_style(chalk.cyan))
    table.config.set_margin(padding(left=2, top=1, bottom=1))
    table.config.set_margin_color(Sides.all(AnsiColor.from_style(chalk.bgBlack)))
    table.config.override_split_line(0, chalk.bold(" sizes "), Offset.begin(2))
    print("Colors never change the layout:")
    print(table)
    print()


def formatting_demo() -> None:
    """Trim and per-line alignment."""
    table = Table([["   padded text   \n  second  ", "\n\nafter blank lines\n\n"]])
    table.config.set_alignment_horizontal(Global(), AlignmentHorizontal.CENTER)
    print("Untrimmed:")
    print(table)
    print()

    table.config.set_formatting(
        Global(), Formatting(horizontal_trim=True, vertical_trim=True, allow_lines_alignment=True)
    )
    print("Trimmed, each line centered on its own:")
    print(table)
    print()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "-v":
        # Show layout estimation and span correction summaries
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    basic_demo()
    span_demo()
    color_demo()
    formatting_demo()
