# --- gridcsv_lib/errors.py ---
"""
gridcsv_lib/errors.py: Exceptions raised by the export pipeline.

Grid-shape anomalies (degenerate grids, labels outside the rulings) are not
errors; only acquisition and destination problems are raised.
"""


class GridCsvError(Exception):
    """Base class for all gridcsv errors."""


class NoInputSelected(GridCsvError):
    """The geometry source yielded nothing to export."""


class GeometrySourceError(GridCsvError):
    """An input file could not be read or does not hold usable geometry."""


class DestinationWriteFailure(GridCsvError):
    """The serialized table could not be persisted."""

    def __init__(self, destination, cause):
        super().__init__(f"Could not write table to '{destination}': {cause}")
        self.destination = destination
        self.cause = cause
