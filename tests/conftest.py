import pytest

from gridcsv_lib.models import LineSegment


def _grid_segments(xs, ys):
    """Full rulings: one horizontal per y across all xs, one vertical per x."""
    segments = [LineSegment(min(xs), y, max(xs), y) for y in ys]
    segments += [LineSegment(x, min(ys), x, max(ys)) for x in xs]
    return segments


@pytest.fixture
def grid_segments():
    return _grid_segments


@pytest.fixture
def two_by_two():
    """Segments forming a 2x2 grid with corners at X, Y in {0, 10, 20}."""
    return _grid_segments([0, 10, 20], [0, 10, 20])
