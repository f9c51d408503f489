"""
Sparse per-entity settings with specificity-based lookup.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from grid_types import Cell, Column, Entity, Global, Position, Row

T = TypeVar("T")


class EntityMap(Generic[T]):
    """A value for every position, stored only where it was configured.

    Lookup order for a position is cell, then row/column, then the global
    value. When both the row and the column of a position carry a value,
    the one set last wins.
    """

    def __init__(self, default: T) -> None:
        self.global_value: T = default
        self.rows: dict[int, tuple[int, T]] = {}
        self.columns: dict[int, tuple[int, T]] = {}
        self.cells: dict[Position, T] = {}
        self._sequence = 0

    def get(self, pos: Position) -> T:
        if pos in self.cells:
            return self.cells[pos]

        row = self.rows.get(pos.row)
        column = self.columns.get(pos.col)
        if row is not None and column is not None:
            return row[1] if row[0] > column[0] else column[1]
        if row is not None:
            return row[1]
        if column is not None:
            return column[1]
        return self.global_value

    def set(self, entity: Entity, value: T) -> None:
        self._sequence += 1
        match entity:
            case Global():
                self.global_value = value
            case Row(index=row):
                self.rows[row] = (self._sequence, value)
            case Column(index=col):
                self.columns[col] = (self._sequence, value)
            case Cell(row=row, col=col):
                self.cells[Position(row, col)] = value
            case _:
                raise TypeError(f"Unknown entity: {entity!r}")

    def remove(self, entity: Entity) -> None:
        """Drop the value stored for exactly this entity (Global cannot be removed)."""
        match entity:
            case Row(index=row):
                self.rows.pop(row, None)
            case Column(index=col):
                self.columns.pop(col, None)
            case Cell(row=row, col=col):
                self.cells.pop(Position(row, col), None)
            case _:
                pass

    def is_empty(self) -> bool:
        """True when nothing more specific than the global value is set."""
        return not (self.rows or self.columns or self.cells)

    def __repr__(self) -> str:
        return (
            f"EntityMap(global={self.global_value!r}, rows={len(self.rows)}, "
            f"columns={len(self.columns)}, cells={len(self.cells)})"
        )
