# --- gridcsv_lib/api.py ---
"""
gridcsv_lib/api.py: High-level entry points tying the pipeline together:
segments -> GridBuilder -> CellAssigner(labels) -> TableSerializer -> destination.
"""
import logging
from dataclasses import dataclass

from .assigner import CellAssigner
from .builder import GridBuilder
from .constants import DEFAULT_DELIMITER, DEFAULT_LINE_TERMINATOR
from .diagnostics import NullSink
from .errors import NoInputSelected
from .models import CellGrid, ExportStats, GeometrySet, GridLayout
from .serializer import TableSerializer

log = logging.getLogger("gridcsv.api")


@dataclass
class TableResult:
    """Everything produced while reconstructing one table."""

    layout: GridLayout
    text: str
    stats: ExportStats

    @property
    def grid(self) -> CellGrid:
        return self.layout.grid


def reconstruct_table(
    segments,
    labels,
    sink=None,
    delimiter=DEFAULT_DELIMITER,
    line_terminator=DEFAULT_LINE_TERMINATOR,
) -> TableResult:
    """Builds the grid from `segments`, fills it with `labels` and serializes it.

    Pure apart from the events sent to `sink`; never raises for degenerate
    grids or labels that fall outside the rulings.
    """
    sink = sink or NullSink()
    segments = list(segments)
    stats = ExportStats(segments=len(segments))

    layout = GridBuilder(sink=sink).build(segments)
    CellAssigner(layout, sink=sink).assign(labels, stats)
    text = TableSerializer(delimiter, line_terminator, sink=sink).serialize(layout.grid)
    return TableResult(layout, text, stats)


def export_geometry(geometry: GeometrySet, destination, sink=None, **fmt) -> TableResult:
    """Reconstructs the table held by `geometry` and hands the text to `destination`.

    Raises:
        NoInputSelected: the geometry set has neither segments nor labels.
        DestinationWriteFailure: the destination could not persist the text.
    """
    if geometry.is_empty:
        raise NoInputSelected(f"Nothing to export in '{geometry.name}'")
    result = reconstruct_table(geometry.segments, geometry.labels, sink=sink, **fmt)
    log.debug(
        "%s: %dx%d grid, %d placed, %d dropped, %d collisions",
        geometry.name,
        result.grid.num_rows,
        result.grid.num_cols,
        result.stats.placed,
        result.stats.dropped,
        result.stats.collisions,
    )
    if destination is not None:
        destination.write(result.text)
    return result
