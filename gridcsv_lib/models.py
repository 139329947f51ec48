# --- gridcsv_lib/models.py ---
"""
gridcsv_lib/models.py: Data models for drawing primitives and the cell grid.
"""
import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple


def _coordinate(value, name):
    """Coerces a coordinate to float, rejecting NaN, infinities and non-numbers."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


# --- DRAWING PRIMITIVES ---
@dataclass(frozen=True)
class LineSegment:
    """A straight ruling line between two points; endpoint order is irrelevant."""

    x1: float
    y1: float
    x2: float
    y2: float

    def __post_init__(self):
        for name in ("x1", "y1", "x2", "y2"):
            object.__setattr__(self, name, _coordinate(getattr(self, name), name))

    @property
    def start(self) -> Tuple[float, float]:
        return self.x1, self.y1

    @property
    def end(self) -> Tuple[float, float]:
        return self.x2, self.y2

    def is_axis_aligned(self, tolerance=0.0) -> bool:
        """True for horizontal or vertical segments (within `tolerance`)."""
        return abs(self.x2 - self.x1) <= tolerance or abs(self.y2 - self.y1) <= tolerance


@dataclass(frozen=True)
class TextLabel:
    """A piece of placed text and the anchor point used to locate its cell."""

    text: str
    x: float
    y: float

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise ValueError(f"text must be a string, got {type(self.text).__name__}")
        object.__setattr__(self, "x", _coordinate(self.x, "x"))
        object.__setattr__(self, "y", _coordinate(self.y, "y"))

    @property
    def anchor(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass
class GeometrySet:
    """The segments and labels that make up one table (a page, a modelspace...)."""

    name: str
    segments: List[LineSegment] = field(default_factory=list)
    labels: List[TextLabel] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.segments and not self.labels


# --- GRID MODEL ---
class CellGrid:
    """A rows x cols grid of optional text cells.

    A cell is either absent (None) or holds the text of exactly one label.
    Absent cells are still addressable; the grid never has missing entries.
    """

    def __init__(self, num_rows: int, num_cols: int):
        self.num_rows = max(0, num_rows)
        self.num_cols = max(0, num_cols)
        self._cells: List[List[Optional[str]]] = [
            [None] * self.num_cols for _ in range(self.num_rows)
        ]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.num_rows, self.num_cols

    @property
    def is_empty(self) -> bool:
        """True when either axis has no bands, i.e. there is no cell at all."""
        return self.num_rows == 0 or self.num_cols == 0

    def _check(self, row, col):
        if not (0 <= row < self.num_rows and 0 <= col < self.num_cols):
            raise IndexError(f"cell ({row}, {col}) outside {self.num_rows}x{self.num_cols} grid")

    def get(self, row: int, col: int) -> Optional[str]:
        self._check(row, col)
        return self._cells[row][col]

    def set(self, row: int, col: int, text: str) -> Optional[str]:
        """Writes `text` into a cell and returns what it held before."""
        self._check(row, col)
        previous = self._cells[row][col]
        self._cells[row][col] = text
        return previous

    def is_present(self, row: int, col: int) -> bool:
        return self.get(row, col) is not None

    def filled_count(self) -> int:
        return sum(1 for row in self._cells for cell in row if cell is not None)

    def rows(self) -> Iterator[List[Optional[str]]]:
        """Yields a copy of each row, top to bottom."""
        for row in self._cells:
            yield list(row)

    def __repr__(self):
        return f"CellGrid(rows={self.num_rows}, cols={self.num_cols}, filled={self.filled_count()})"


@dataclass
class GridLayout:
    """Boundary sequences derived from the rulings plus the grid they define."""

    x_bounds: Tuple[float, ...]
    y_bounds: Tuple[float, ...]
    grid: CellGrid


@dataclass
class ExportStats:
    """Counters collected while reconstructing one table."""

    segments: int = 0
    labels: int = 0
    placed: int = 0
    dropped: int = 0
    collisions: int = 0
