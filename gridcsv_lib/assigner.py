# --- gridcsv_lib/assigner.py ---
"""
gridcsv_lib/assigner.py: Contains the CellAssigner, which places text labels
into the cells of a GridLayout.
"""
from .diagnostics import NullSink
from .geometry import band_index_ascending, band_index_descending
from .models import ExportStats, GridLayout


class CellAssigner:
    """
    Maps each label anchor to a (row, col) cell and writes its text there.

    Labels outside the rulings are dropped without raising. When two labels
    land in the same cell, the later one in input order wins.
    """

    def __init__(self, layout: GridLayout, sink=None):
        self.layout = layout
        self.sink = sink or NullSink()

    def locate(self, x, y):
        """Returns the (row, col) holding the point, or None when it is off-grid."""
        col = band_index_ascending(self.layout.x_bounds, x)
        row = band_index_descending(self.layout.y_bounds, y)
        if row is None or col is None:
            return None
        return row, col

    def assign(self, labels, stats=None) -> ExportStats:
        """Writes every placeable label into the grid, in input order."""
        stats = stats or ExportStats()
        grid = self.layout.grid
        for label in labels:
            stats.labels += 1
            cell = self.locate(label.x, label.y)
            if cell is None:
                stats.dropped += 1
                self.sink.event(
                    "assign",
                    "label_dropped",
                    f"Text '{label.text}' at ({label.x:g}, {label.y:g}) is outside the grid",
                    label=label,
                )
                continue

            row, col = cell
            previous = grid.set(row, col, label.text)
            stats.placed += 1
            self.sink.event(
                "assign",
                "label_mapped",
                f"Text '{label.text}' at ({label.x:g}, {label.y:g}) mapped to cell [{row}, {col}]",
                label=label,
                row=row,
                col=col,
            )
            if previous is not None:
                stats.collisions += 1
                self.sink.event(
                    "assign",
                    "label_collision",
                    f"Cell [{row}, {col}]: '{label.text}' replaces '{previous}'",
                    row=row,
                    col=col,
                    previous=previous,
                    text=label.text,
                )
        return stats
