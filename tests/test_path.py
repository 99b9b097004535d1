import pytest

from src.geometry.point import Point
from src.planning.path import Path
from src.utils.errors import DegenerateInputError, PursuitError

SQUARE = [(0, 0), (48, 0), (48, 48), (0, 48)]


def test_path_segments_join_consecutive_waypoints():
    path = Path.from_waypoints(SQUARE)
    assert len(path) == 3
    assert path.start == Point(0, 0)
    assert path.end == Point(0, 48)
    assert path.endpoint_pairs() == [
        (Point(0, 0), Point(48, 0)),
        (Point(48, 0), Point(48, 48)),
        (Point(48, 48), Point(0, 48)),
    ]
    assert path.length == pytest.approx(144.0)


def test_path_accepts_points():
    path = Path.from_waypoints([Point(0, 0), Point(1, 1)])
    assert [s.p2 for s in path] == [Point(1, 1)]


def test_coincident_waypoints_rejected():
    with pytest.raises(DegenerateInputError, match="Waypoints 1 and 2"):
        Path.from_waypoints([(0, 0), (5, 5), (5, 5), (9, 0)])


def test_too_few_waypoints_rejected():
    with pytest.raises(PursuitError):
        Path.from_waypoints([(1, 1)])


def test_path_errors_are_value_errors():
    with pytest.raises(ValueError):
        Path.from_waypoints([])


def test_circle_intersections_keep_segment_order():
    path = Path.from_waypoints(SQUARE)
    # circle around the first corner crosses segment 0 then segment 1
    hits = path.circle_intersections(Point(48, 0), 6)
    assert len(hits) == 2
    assert hits[0].x == pytest.approx(42.0)
    assert hits[0].y == pytest.approx(0.0, abs=1e-9)
    assert hits[1].x == pytest.approx(48.0)
    assert hits[1].y == pytest.approx(6.0)
