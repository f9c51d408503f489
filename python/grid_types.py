"""
Shared type definitions for the spangrid layout engine.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Callable, Generic, Iterator, TypeVar

T = TypeVar("T")


class LayoutError(ValueError):
    """A grid configuration that cannot be laid out (bad spans, bad dimensions)."""

    pass


# =============================================================================
# Positions and Entities
# =============================================================================


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based (row, col) address of a cell."""

    row: int
    col: int


@dataclass(frozen=True)
class Global:
    """Every cell of the grid."""

    pass


@dataclass(frozen=True)
class Row:
    """Every cell of one row."""

    index: int


@dataclass(frozen=True)
class Column:
    """Every cell of one column."""

    index: int


@dataclass(frozen=True)
class Cell:
    """A single cell."""

    row: int
    col: int

    @property
    def position(self) -> Position:
        return Position(self.row, self.col)


Entity = Global | Row | Column | Cell


def iter_entity(entity: Entity, count_rows: int, count_cols: int) -> Iterator[Position]:
    """Expand an entity into the positions it selects.

    Global is produced row-major and is empty when either dimension is 0.
    A Cell always yields its position, whether or not it lies inside the grid.
    """
    match entity:
        case Global():
            if count_rows == 0 or count_cols == 0:
                return
            for row in range(count_rows):
                for col in range(count_cols):
                    yield Position(row, col)
        case Row(index=row):
            for col in range(count_cols):
                yield Position(row, col)
        case Column(index=col):
            for row in range(count_rows):
                yield Position(row, col)
        case Cell(row=row, col=col):
            yield Position(row, col)
        case _:
            raise TypeError(f"Unknown entity: {entity!r}")


# =============================================================================
# Padding, Margin and Colors
# =============================================================================


@dataclass(frozen=True)
class Indent:
    """An amount of fill characters on one side of a box."""

    size: int = 0
    fill: str = " "

    def render(self) -> str:
        return self.fill * self.size


@dataclass(frozen=True)
class Sides(Generic[T]):
    """A value for each of the four sides of a box."""

    left: T
    right: T
    top: T
    bottom: T

    @classmethod
    def all(cls, value: T) -> Sides[T]:
        return cls(value, value, value, value)


def padding(
    left: int = 0, right: int = 0, top: int = 0, bottom: int = 0, fill: str = " "
) -> Sides[Indent]:
    """Build padding (or margin) sides sharing one fill character."""
    return Sides(Indent(left, fill), Indent(right, fill), Indent(top, fill), Indent(bottom, fill))


ZERO_INDENT = Sides.all(Indent())


@dataclass(frozen=True)
class Offset:
    """A distance counted from the start or from the end of a run.

    ``Offset.end(0)`` is the last slot of the run.
    """

    value: int = 0
    from_end: bool = False

    @classmethod
    def begin(cls, value: int) -> Offset:
        return cls(value)

    @classmethod
    def end(cls, value: int) -> Offset:
        return cls(value, from_end=True)

    def start_in(self, length: int) -> int:
        """Index where something placed at this offset starts in a run of ``length``.

        An end offset past the start of the run yields ``length`` (nothing fits).
        """
        if not self.from_end:
            return self.value
        return length - self.value if self.value <= length else length


NO_OFFSET: Sides[Offset] = Sides.all(Offset())


@dataclass(frozen=True)
class AnsiColor:
    """A color as the escape prefix/suffix wrapped around colored text.

    Colors never take part in width measurement.
    """

    prefix: str
    suffix: str

    @classmethod
    def from_style(cls, style: Callable[[str], str]) -> AnsiColor:
        """Build a color from a simple_chalk style such as ``chalk.bgBlue.white``."""
        sample = style("\x00")
        prefix, _, suffix = sample.partition("\x00")
        return cls(prefix, suffix)

    def colorize(self, text: str) -> str:
        if not text:
            return text
        return f"{self.prefix}{text}{self.suffix}"


# =============================================================================
# Alignment and Formatting
# =============================================================================


class AlignmentHorizontal(Enum):
    """Horizontal placement of text inside a cell."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class AlignmentVertical(Enum):
    """Vertical placement of text inside a cell."""

    TOP = "top"
    BOTTOM = "bottom"
    CENTER = "center"


@dataclass(frozen=True)
class Formatting:
    """Per-cell text formatting flags."""

    horizontal_trim: bool = False  # strip whitespace around each line
    vertical_trim: bool = False  # drop blank lines before and after the text
    allow_lines_alignment: bool = False  # align each line on its own


# =============================================================================
# Borders
# =============================================================================


@dataclass(frozen=True)
class Border(Generic[T]):
    """The eight border pieces around one cell."""

    top: T | None = None
    bottom: T | None = None
    left: T | None = None
    right: T | None = None
    left_top_corner: T | None = None
    right_top_corner: T | None = None
    left_bottom_corner: T | None = None
    right_bottom_corner: T | None = None

    @classmethod
    def filled(cls, value: T) -> Border[T]:
        return cls(value, value, value, value, value, value, value, value)

    def values(self) -> list[T | None]:
        return [getattr(self, f.name) for f in fields(self)]

    def is_empty(self) -> bool:
        return all(v is None for v in self.values())

    def is_uniform(self) -> bool:
        """True when the border is non-empty and every present piece is the same."""
        present = {v for v in self.values() if v is not None}
        return len(present) == 1

    def with_changes(self, **changes: Any) -> Border[T]:
        return replace(self, **changes)


@dataclass(frozen=True)
class Borders(Generic[T]):
    """Table-wide border pieces, chosen by where an edge sits in the grid."""

    top: T | None = None
    bottom: T | None = None
    left: T | None = None
    right: T | None = None
    horizontal: T | None = None
    vertical: T | None = None
    intersection: T | None = None
    top_left: T | None = None
    top_right: T | None = None
    bottom_left: T | None = None
    bottom_right: T | None = None
    top_intersection: T | None = None
    bottom_intersection: T | None = None
    left_intersection: T | None = None
    right_intersection: T | None = None

    @classmethod
    def filled(cls, value: T) -> Borders[T]:
        return cls(**{f.name: value for f in fields(cls)})

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def has_left(self) -> bool:
        return any(
            v is not None
            for v in (self.left, self.left_intersection, self.top_left, self.bottom_left)
        )

    def has_right(self) -> bool:
        return any(
            v is not None
            for v in (self.right, self.right_intersection, self.top_right, self.bottom_right)
        )

    def has_top(self) -> bool:
        return any(
            v is not None
            for v in (self.top, self.top_intersection, self.top_left, self.top_right)
        )

    def has_bottom(self) -> bool:
        return any(
            v is not None
            for v in (self.bottom, self.bottom_intersection, self.bottom_left, self.bottom_right)
        )

    def has_horizontal(self) -> bool:
        return any(
            v is not None
            for v in (
                self.horizontal,
                self.left_intersection,
                self.right_intersection,
                self.intersection,
            )
        )

    def has_vertical(self) -> bool:
        return any(
            v is not None
            for v in (
                self.vertical,
                self.intersection,
                self.top_intersection,
                self.bottom_intersection,
            )
        )


@dataclass(frozen=True)
class HorizontalLine(Generic[T]):
    """Override for one whole horizontal line."""

    main: T | None = None
    intersection: T | None = None
    left: T | None = None
    right: T | None = None


@dataclass(frozen=True)
class VerticalLine(Generic[T]):
    """Override for one whole vertical line."""

    main: T | None = None
    intersection: T | None = None
    top: T | None = None
    bottom: T | None = None


ASCII_BORDERS: Borders[str] = Borders(
    top="-",
    bottom="-",
    left="|",
    right="|",
    horizontal="-",
    vertical="|",
    intersection="+",
    top_left="+",
    top_right="+",
    bottom_left="+",
    bottom_right="+",
    top_intersection="+",
    bottom_intersection="+",
    left_intersection="+",
    right_intersection="+",
)

MODERN_BORDERS: Borders[str] = Borders(
    top="─",
    bottom="─",
    left="│",
    right="│",
    horizontal="─",
    vertical="│",
    intersection="┼",
    top_left="┌",
    top_right="┐",
    bottom_left="└",
    bottom_right="┘",
    top_intersection="┬",
    bottom_intersection="┴",
    left_intersection="├",
    right_intersection="┤",
)

EMPTY_BORDERS: Borders[str] = Borders()
