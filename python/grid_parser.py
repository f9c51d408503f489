"""
Compact notation for spanned tables.

Used by the demos and tests to describe a table and its merged cells in a
single string.
"""

from __future__ import annotations

from grid_types import Position
from table import Table

__all__ = ["parse_layout", "parse_layouts"]

MERGE_LEFT = "<"
MERGE_UP = "^"
EMPTY = "_"


def _cell_text(token: str) -> str:
    if token == EMPTY:
        return ""
    return token.replace("\\n", "\n").replace(EMPTY, " ")


def parse_layout(definition: str) -> Table:
    """
    Parse a table definition into a Table with its spans set.

    Format:
    - Rows separated by |
    - Cells separated by single spaces
    - Cell tokens:
      * '<': part of the merged region of the cell to the left
      * '^': part of the merged region of the cell above
      * '_': empty cell
      * anything else: cell text, where '_' stands for a space and the two
        characters '\\n' for a line break

    Example:
        "title < <|a b c|x ^ ^"
        Creates a 3x3 table whose first row is one cell spanning 3 columns,
        and whose cells (1, 1) and (1, 2) each span 2 rows.

    Args:
        definition: The table definition

    Returns:
        Table holding the texts, with column and row spans for merged regions

    Raises:
        ValueError: If a merge marker has nothing to merge with, rows have
            different lengths, or a merged region is not a rectangle
    """
    row_strings = definition.strip().split("|")
    tokens = [row_str.strip().split(" ") for row_str in row_strings]

    cols = len(tokens[0])
    mismatched = [(i, len(row)) for i, row in enumerate(tokens) if len(row) != cols]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths in layout\n"
            f"  Expected: {cols} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} columns - \"{row_strings[row_idx]}\"\n"
        error_msg += "  All rows must have the same number of cells"
        raise ValueError(error_msg)

    owner: dict[Position, Position] = {}
    claimed: dict[Position, list[Position]] = {}
    texts: list[list[str]] = []

    for row_idx, row in enumerate(tokens):
        texts.append([])
        for col_idx, token in enumerate(row):
            pos = Position(row_idx, col_idx)
            if token in (MERGE_LEFT, MERGE_UP):
                neighbour = (
                    Position(row_idx, col_idx - 1)
                    if token == MERGE_LEFT
                    else Position(row_idx - 1, col_idx)
                )
                if neighbour.row < 0 or neighbour.col < 0:
                    raise ValueError(
                        f"Merge marker '{token}' has no cell to merge with\n"
                        f"  Row {row_idx}: \"{row_strings[row_idx]}\"\n"
                        f"  Position: column {col_idx}"
                    )
                anchor = owner[neighbour]
                texts[-1].append("")
            elif not token:
                raise ValueError(
                    f"Empty cell token in layout\n"
                    f"  Row {row_idx}: \"{row_strings[row_idx]}\"\n"
                    f"  Position: column {col_idx}\n"
                    f"  Use '_' for an empty cell"
                )
            else:
                anchor = pos
                texts[-1].append(_cell_text(token))
            owner[pos] = anchor
            claimed.setdefault(anchor, []).append(pos)

    table = Table(texts)
    for anchor, cells in claimed.items():
        if len(cells) == 1:
            continue
        last_row = max(p.row for p in cells)
        last_col = max(p.col for p in cells)
        rows = last_row - anchor.row + 1
        cols = last_col - anchor.col + 1
        if len(cells) != rows * cols:
            raise ValueError(
                f"Merged region anchored at ({anchor.row}, {anchor.col}) is not a rectangle\n"
                f"  Cells: {[(p.row, p.col) for p in cells]}\n"
                f"  Expected a full {rows}x{cols} block"
            )
        table.merge(anchor.row, anchor.col, rows=rows, cols=cols)

    return table


def parse_layouts(definitions: dict[str, str]) -> dict[str, Table]:
    """Parse several named layouts at once."""
    return {name: parse_layout(definition) for name, definition in definitions.items()}
