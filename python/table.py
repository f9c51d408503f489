"""
Table: records plus configuration, with a cached layout.
"""

from __future__ import annotations

import logging
from typing import Sequence

from dimension import Dimension, estimate
from grid_config import GridConfig
from grid_render import SupportsWrite, render_grid, write_grid
from grid_types import Borders, Position
from records import VecRecords

logger = logging.getLogger(__name__)

__all__ = ["Table"]


class Table:
    """A renderable table.

    The estimated ``Dimension`` is cached and reused across renders. The
    cache is tied to the revision counters of the records and the config,
    so any change made through their setters makes it stale; ``invalidate``
    drops it explicitly.
    """

    def __init__(self, data: Sequence[Sequence[str]] = (), config: GridConfig | None = None) -> None:
        self.records = VecRecords(data)
        self.config = config if config is not None else GridConfig()
        self._fixed: Dimension | None = None
        self._cached: Dimension | None = None
        self._cached_at: tuple[int, int] | None = None

    @property
    def shape(self) -> tuple[int, int]:
        return self.records.shape()

    def _revision(self) -> tuple[int, int]:
        return self.records.revision, self.config.revision

    def is_dirty(self) -> bool:
        """Whether the next render has to estimate the layout again."""
        return self._fixed is None and self._cached_at != self._revision()

    def invalidate(self) -> None:
        self._cached = None
        self._cached_at = None

    def set_dimension(self, dimension: Dimension | None) -> None:
        """Use fixed widths and heights instead of estimating them (None to estimate again)."""
        if dimension is not None:
            dimension.check_shape(self.shape)
        self._fixed = dimension

    def dimension(self) -> Dimension:
        if self._fixed is not None:
            return self._fixed
        if self._cached is None or self.is_dirty():
            logger.debug("table %s: estimating layout", self.shape)
            self._cached = estimate(self.records, self.config)
            self._cached_at = self._revision()
        return self._cached

    # -------------------------------------------------------------------------
    # Shortcuts for common settings
    # -------------------------------------------------------------------------

    def with_borders(self, borders: Borders[str]) -> Table:
        self.config.set_borders(borders)
        return self

    def merge(self, row: int, col: int, rows: int = 1, cols: int = 1) -> Table:
        """Merge a ``rows`` x ``cols`` block whose top-left cell is (row, col)."""
        pos = Position(row, col)
        self.config.set_row_span(pos, rows)
        self.config.set_column_span(pos, cols)
        return self

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def write(self, sink: SupportsWrite) -> None:
        write_grid(self.records, self.config, self.dimension(), sink)

    def render(self) -> str:
        return render_grid(self.records, self.config, self.dimension())

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        rows, cols = self.shape
        return f"Table({rows}x{cols})"
