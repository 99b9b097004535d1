import pytest

from src.control.pure_pursuit import (
    ControllerGains,
    PurePursuitController,
    annotate,
    fallback,
    forward_filter,
    heading_delta,
    position_delta,
)
from src.geometry.point import Point
from src.planning.path import Path
from src.utils.errors import InvalidRadiusError
from src.utils.types import Candidate

SQUARE = Path.from_waypoints([(0, 0), (48, 0), (48, 48), (0, 48)])


def make_square_controller(**kwargs):
    return PurePursuitController(SQUARE, start=Point(-8, 10), heading_deg=0, lookahead=12, **kwargs)


def test_annotate_bearings_in_degrees():
    out = annotate([Point(1, 0), Point(0, 1), Point(-1, 0)], Point(0, 0))
    assert [c.bearing for c in out] == pytest.approx([0.0, 90.0, 180.0])


def test_forward_filter_sorts_and_drops_behind():
    cands = [Candidate(Point(0, 0), b) for b in (10.0, -30.0, 120.0, 80.0, 90.0, -90.0)]
    kept = forward_filter(cands, heading=0.0)
    assert [c.bearing for c in kept] == [-30.0, 10.0, 80.0]


def test_forward_filter_is_relative_to_heading():
    cands = [Candidate(Point(0, 0), b) for b in (170.0, 10.0, 100.0)]
    kept = forward_filter(cands, heading=135.0)
    assert [c.bearing for c in kept] == [100.0, 170.0]


def test_fallback_only_when_empty():
    origin = Point(0, 0)
    remembered = Point(0, -5)
    kept = [Candidate(Point(1, 1), 45.0)]
    assert fallback(kept, remembered, origin) == (kept, False)

    out, used = fallback([], remembered, origin)
    assert used
    assert out[0].point == remembered
    assert out[0].bearing == pytest.approx(-90.0)


def test_heading_delta_is_scaled_then_clamped():
    gains = ControllerGains()
    assert heading_delta(4.0, 0.0, gains) == pytest.approx(1.0)
    assert heading_delta(40.0, 0.0, gains) == 2.0
    assert heading_delta(-40.0, 0.0, gains) == -2.0
    assert heading_delta(10.0, 12.0, gains) == pytest.approx(-0.5)


def test_position_delta_is_manhattan_normalized():
    move = position_delta(Point(6, -6), 0.5)
    assert move == Point(0.25, -0.25)
    # close to the target the step is not amplified
    assert position_delta(Point(0.2, 0.0), 0.5) == Point(0.1, 0.0)
    assert position_delta(Point(0.0, 0.0), 0.5) == Point(0.0, 0.0)


def test_first_step_along_straight_path():
    path = Path.from_waypoints([(0, 0), (48, 0)])
    controller = PurePursuitController(path, start=Point(0, 0), heading_deg=0, lookahead=12)
    result = controller.step()
    assert result.target.point == Point(12, 0)
    assert not result.used_fallback
    assert result.heading_delta == 0.0
    assert result.state.position == Point(0.5, 0)
    assert controller.last_intersection == Point(12, 0)
    assert not result.arrived


def test_fallback_keeps_last_intersection():
    controller = PurePursuitController(SQUARE, start=Point(100, 100), heading_deg=0, lookahead=1)
    result = controller.step()
    assert result.candidates == ()
    assert result.used_fallback
    assert result.target.point == SQUARE.start
    assert result.target.bearing == pytest.approx(-135.0)
    assert result.heading_delta == -2.0
    assert controller.last_intersection == SQUARE.start


def test_state_query_is_a_copy():
    controller = make_square_controller()
    snapshot = controller.state
    snapshot.heading = 99.0
    assert controller.state.heading == 0.0


def test_square_path_arrives_within_bounds():
    controller = make_square_controller()
    gains = controller.gains
    results = []
    for _ in range(500):
        results.append(controller.step())
        if results[-1].arrived:
            break

    assert results[-1].arrived
    assert controller.arrived
    assert len(results) < 500
    for r in results:
        assert abs(r.heading_delta) <= gains.max_turn_deg
        assert abs(r.move.x) + abs(r.move.y) <= gains.speed + 1e-9
    # ends on the final leg of the square
    final = results[-1].state.position
    assert final.y == pytest.approx(48.0, abs=0.5)
    assert 0.0 <= final.x < 12.0


def test_heading_accumulates_step_deltas():
    controller = make_square_controller()
    previous = controller.state.heading
    for _ in range(50):
        result = controller.step()
        assert result.state.heading == pytest.approx(previous + result.heading_delta)
        previous = result.state.heading


def test_zero_lookahead_on_path_arrives_immediately():
    path = Path.from_waypoints([(0, 0), (10, 0)])
    controller = PurePursuitController(path, start=Point(5, 0), lookahead=0)
    result = controller.step()
    assert result.arrived
    assert result.target.point == Point(5, 0)


def test_step_after_arrival_is_a_no_op():
    path = Path.from_waypoints([(0, 0), (10, 0)])
    controller = PurePursuitController(path, start=Point(5, 0), lookahead=0)
    first = controller.step()
    again = controller.step()
    assert again.arrived
    assert again.step_index == first.step_index
    assert again.state == first.state
    assert controller.step_count == 1


def test_negative_lookahead_rejected():
    with pytest.raises(InvalidRadiusError):
        PurePursuitController(SQUARE, start=Point(0, 0), lookahead=-1)


def test_custom_gains_are_used():
    gains = ControllerGains(speed=1.0, max_turn_deg=5.0)
    controller = PurePursuitController(SQUARE, start=Point(100, 100), lookahead=1, gains=gains)
    result = controller.step()
    assert result.heading_delta == -5.0
    assert abs(result.move.x) + abs(result.move.y) == pytest.approx(1.0)


def test_from_config():
    cfg = {
        "robot": {"start": [1, 2], "heading_deg": 45, "lookahead": 6, "size": {"width": 4, "height": 5}},
        "path": {"waypoints": [[0, 0], [10, 0], [10, 10]]},
        "controller": {"speed": 0.25},
    }
    controller = PurePursuitController.from_config(cfg)
    state = controller.state
    assert state.position == Point(1, 2)
    assert state.heading == 45.0
    assert state.lookahead == 6.0
    assert (state.size.width, state.size.height) == (4.0, 5.0)
    assert controller.gains.speed == 0.25
    assert controller.gains.max_turn_deg == 2.0
    assert len(controller.path_segments()) == 2
