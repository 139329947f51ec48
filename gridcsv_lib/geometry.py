# --- gridcsv_lib/geometry.py ---
"""
gridcsv_lib/geometry.py: Coordinate helpers shared by the grid builder,
the cell assigner and the geometry sources.
"""
import logging

import numpy as np

from .constants import COORD_PRECISION

log_source = logging.getLogger("gridcsv.source")


def unique_rounded(values, precision=COORD_PRECISION, descending=False):
    """Rounds coordinates, drops duplicates and sorts them.

    Returns a tuple of plain floats, ascending unless `descending` is set.
    """
    if len(values) == 0:
        return ()
    unique = np.unique(np.round(np.asarray(values, dtype=float), precision))
    if descending:
        unique = unique[::-1]
    return tuple(float(v) for v in unique)


def band_index_ascending(bounds, value):
    """Index of the band [bounds[i], bounds[i+1]) holding `value`, or None.

    The band is found from the first boundary strictly greater than `value`;
    a value on a boundary therefore falls in the band starting there.
    """
    first_greater = int(np.searchsorted(np.asarray(bounds, dtype=float), value, side="right"))
    if first_greater >= len(bounds):
        return None
    index = first_greater - 1
    return index if index >= 0 else None


def band_index_descending(bounds, value):
    """Index of the band (bounds[i] >= value > bounds[i+1]) of a descending sequence.

    Mirrors band_index_ascending on the negated sequence, so it looks for the
    first boundary strictly less than `value`.
    """
    negated = -np.asarray(bounds, dtype=float)
    return band_index_ascending(negated, -value)


def rect_edges(x0, y0, x1, y1):
    """The four edges of an axis-aligned rectangle as (x1, y1, x2, y2) tuples."""
    return [
        (x0, y0, x1, y0),
        (x1, y0, x1, y1),
        (x1, y1, x0, y1),
        (x0, y1, x0, y0),
    ]


def polyline_edges(points, closed=False):
    """Consecutive vertex pairs of a polyline as (x1, y1, x2, y2) tuples."""
    pts = [(float(p[0]), float(p[1])) for p in points]
    edges = [(a[0], a[1], b[0], b[1]) for a, b in zip(pts, pts[1:])]
    if closed and len(pts) > 2:
        edges.append((pts[-1][0], pts[-1][1], pts[0][0], pts[0][1]))
    return edges


def filter_axis_aligned(segments, tolerance):
    """Keeps horizontal and vertical segments; diagonal rulings are unsupported."""
    kept = [s for s in segments if s.is_axis_aligned(tolerance)]
    rejected = len(segments) - len(kept)
    if rejected:
        log_source.warning(
            "Ignoring %d non axis-aligned segment(s); only horizontal and vertical "
            "rulings define the grid.",
            rejected,
        )
    return kept


def vertical_rulings_at(segments, y, tolerance=0.0):
    """Rounded, ascending X positions of the vertical segments spanning height `y`."""
    xs = [
        s.x1
        for s in segments
        if abs(s.x2 - s.x1) <= tolerance and min(s.y1, s.y2) <= y <= max(s.y1, s.y2)
    ]
    return unique_rounded(xs)


def slot_of(rulings, x):
    """Number of rulings at or left of `x`; equal slots mean no ruling in between."""
    return int(np.searchsorted(np.asarray(rulings, dtype=float), x, side="right"))
