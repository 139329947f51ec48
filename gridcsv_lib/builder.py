# --- gridcsv_lib/builder.py ---
"""
gridcsv_lib/builder.py: Contains the GridBuilder, which turns ruling lines
into boundary sequences and an empty cell grid.
"""
import logging

from .constants import COORD_PRECISION
from .diagnostics import NullSink
from .geometry import unique_rounded
from .models import CellGrid, GridLayout

log_grid = logging.getLogger("gridcsv.grid")


class GridBuilder:
    """
    Derives column boundaries (X, ascending) and row boundaries (Y, descending)
    from segment endpoints. Higher Y is visually "up", so row 0 is the top band.
    """

    def __init__(self, precision=COORD_PRECISION, sink=None):
        self.precision = precision
        self.sink = sink or NullSink()

    def _format(self, value):
        """Prints a rounded coordinate in full, without exponent or trailing zeros."""
        text = f"{value:.{self.precision}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return "0" if text == "-0" else text

    def build(self, segments) -> GridLayout:
        """Builds the boundary sequences and an all-absent grid sized from them."""
        segments = list(segments)
        xs = [x for s in segments for x in (s.x1, s.x2)]
        ys = [y for s in segments for y in (s.y1, s.y2)]
        self.sink.event(
            "grid",
            "segments_collected",
            f"Collected {len(segments)} segment(s)",
            segments=[(s.start, s.end) for s in segments],
        )

        x_bounds = unique_rounded(xs, self.precision)
        y_bounds = unique_rounded(ys, self.precision, descending=True)
        self.sink.event(
            "grid",
            "boundaries_computed",
            "X Coordinates: {}\nY Coordinates: {}".format(
                " ".join(self._format(x) for x in x_bounds),
                " ".join(self._format(y) for y in y_bounds),
            ),
            x_bounds=x_bounds,
            y_bounds=y_bounds,
        )

        num_cols = max(0, len(x_bounds) - 1)
        num_rows = max(0, len(y_bounds) - 1)
        grid = CellGrid(num_rows, num_cols)
        if grid.is_empty:
            log_grid.debug(
                "Degenerate grid (%d distinct X, %d distinct Y): nothing to fill.",
                len(x_bounds),
                len(y_bounds),
            )
        self.sink.event(
            "grid",
            "grid_allocated",
            f"Allocated {num_rows}x{num_cols} grid",
            rows=num_rows,
            cols=num_cols,
        )
        return GridLayout(x_bounds, y_bounds, grid)
