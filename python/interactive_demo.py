"""
Interactive explorer for spanned table layouts.
Display a table and change its borders, alignment and spans from the keyboard.
"""

import logging

import readchar, sys
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from grid_parser import parse_layout, parse_layouts
from grid_types import (
    ASCII_BORDERS,
    EMPTY_BORDERS,
    MODERN_BORDERS,
    AlignmentHorizontal,
    AlignmentVertical,
    Global,
    LayoutError,
    padding,
)
from table import Table

BORDER_STYLES = [("ascii", ASCII_BORDERS), ("modern", MODERN_BORDERS), ("none", EMPTY_BORDERS)]
HORIZONTAL = list(AlignmentHorizontal)
VERTICAL = list(AlignmentVertical)


class InteractiveDemo:
    """Interactive demo for table layout settings."""

    def __init__(self, layouts: dict[str, str]) -> None:
        self.layouts = layouts
        self.names = list(layouts)
        self.layout_index = 0
        self.border_index = 1
        self.halign_index = 0
        self.valign_index = 0
        self.pad = 1
        self.span_correction = True
        self.console = Console()
        self.status_message = "Ready"
        self.table = self.build_table()

    @property
    def layout_name(self) -> str:
        return self.names[self.layout_index]

    def build_table(self) -> Table:
        """Rebuild the current layout with the current settings."""
        table = parse_layout(self.layouts[self.layout_name])
        table.with_borders(BORDER_STYLES[self.border_index][1])
        table.config.set_padding(Global(), padding(left=self.pad, right=self.pad))
        table.config.set_alignment_horizontal(Global(), HORIZONTAL[self.halign_index])
        table.config.set_alignment_vertical(Global(), VERTICAL[self.valign_index])
        table.config.set_span_correction(self.span_correction)
        return table

    def generate_display(self) -> Panel:
        """Generate the current display with table and status."""
        status = Text()
        status.append("Layout: ", style="bold")
        status.append(f"{self.layout_name}  ({self.layouts[self.layout_name]})\n")
        status.append("Borders: ", style="bold")
        status.append(f"{BORDER_STYLES[self.border_index][0]}   ")
        status.append("Align: ", style="bold")
        status.append(f"{HORIZONTAL[self.halign_index].value}/{VERTICAL[self.valign_index].value}   ")
        status.append("Padding: ", style="bold")
        status.append(f"{self.pad}   ")
        status.append("Span correction: ", style="bold")
        status.append(f"{'on' if self.span_correction else 'off'}\n\n")

        try:
            rendered = self.table.render()
        except LayoutError as e:
            status.append(f"Layout error: {e}\n", style="bold red")
        else:
            # Convert ANSI-colored table text to Rich Text properly
            status.append(Text.from_ansi(rendered))
            widths = self.table.dimension().widths
            status.append(f"\n\ncolumn widths: {list(widths)}\n", style="dim")

        status.append("\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  N - Next layout\n")
        status.append("  B - Cycle border style\n")
        status.append("  H - Cycle horizontal alignment\n")
        status.append("  V - Cycle vertical alignment\n")
        status.append("  + / - - Change padding\n")
        status.append("  C - Toggle span correction\n")
        status.append("  Q - Quit\n\n")

        # Status line at the bottom
        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Spangrid Layout Explorer", border_style="green", width=100)

    def apply(self, message: str) -> None:
        self.table = self.build_table()
        self.status_message = message

    def run(self) -> None:
        """Run the explorer until the user quits."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())

                    key = readchar.readkey()

                    if key.lower() == 'q':
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key.lower() == 'n':
                        self.layout_index = (self.layout_index + 1) % len(self.names)
                        self.apply(f"Switched to layout '{self.layout_name}'")
                    elif key.lower() == 'b':
                        self.border_index = (self.border_index + 1) % len(BORDER_STYLES)
                        self.apply(f"Borders: {BORDER_STYLES[self.border_index][0]}")
                    elif key.lower() == 'h':
                        self.halign_index = (self.halign_index + 1) % len(HORIZONTAL)
                        self.apply(f"Horizontal alignment: {HORIZONTAL[self.halign_index].value}")
                    elif key.lower() == 'v':
                        self.valign_index = (self.valign_index + 1) % len(VERTICAL)
                        self.apply(f"Vertical alignment: {VERTICAL[self.valign_index].value}")
                    elif key == '+':
                        self.pad += 1
                        self.apply(f"Padding: {self.pad}")
                    elif key == '-':
                        self.pad = max(0, self.pad - 1)
                        self.apply(f"Padding: {self.pad}")
                    elif key.lower() == 'c':
                        self.span_correction = not self.span_correction
                        self.apply(f"Span correction {'on' if self.span_correction else 'off'}")
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())

LAYOUTS = dict(
    report = 'Quarterly_report < <|Region Q1 Q2|North 10 12|South ^ 9',
    block = 'a b c d|e big < f|g ^ ^ h|i j k l',
    column = 'tall one two|^ three four|^ five six',
    wide = 'x < < < <|1 2 3 4 5',
)


def main(layouts: dict[str, str]) -> None:
    """Run the interactive explorer over the given layouts."""
    demo = InteractiveDemo(layouts)
    demo.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == 'sublime':
        # Running from IDE - just render every layout once
        # Configure logging to see layout estimation
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

        print('Running from IDE - rendering all layouts')
        print()

        for name, table in parse_layouts(LAYOUTS).items():
            table.with_borders(MODERN_BORDERS)
            print(name)
            print(table)
            print()
    else:
        main(LAYOUTS)
