import pytest

cv2 = pytest.importorskip("cv2")

from src.control.robot_state import RobotSize, RobotState  # noqa: E402
from src.geometry.point import Point  # noqa: E402
from src.visualization.renderer import SimRenderer  # noqa: E402


def test_render_canvas_shape():
    renderer = SimRenderer(tile_size=24, tiles=6, pixels_per_unit=5)
    state = RobotState(position=Point(-8, 10), heading=0.0, size=RobotSize(14, 18), lookahead=12)
    segments = [(Point(0, 0), Point(48, 0)), (Point(48, 0), Point(48, 48))]
    img = renderer.render(segments, state, trail=[Point(-8, 10), Point(-7.5, 10)], intersections=[Point(5.6, 0)])
    assert img.shape == (720, 720, 3)
    assert img.any()


def test_world_to_px_centers_origin():
    renderer = SimRenderer(tile_size=10, tiles=4, pixels_per_unit=2)
    assert renderer.size == 80
    assert renderer.world_to_px(0, 0) == (40, 40)
    assert renderer.world_to_px(5, -5) == (50, 30)


def test_robot_body_long_side_follows_heading():
    renderer = SimRenderer(pixels_per_unit=5)
    state = RobotState(position=Point(0, 0), heading=0.0, size=RobotSize(14, 18), lookahead=12)
    poly = renderer.robot_polygon(state)
    xs, ys = poly[:, 0], poly[:, 1]
    assert xs.max() - xs.min() == pytest.approx(90, abs=1)
    assert ys.max() - ys.min() == pytest.approx(70, abs=1)
