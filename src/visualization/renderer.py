from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

import cv2
import numpy as np

from src.control.robot_state import RobotState
from src.geometry.point import Point

# BGR
AQUA = (255, 255, 0)
RED = (0, 0, 255)
WHITE = (255, 255, 255)
TRAIL = (160, 160, 0)


class SimRenderer:
    """
    Top-down renderer for the pursuit simulation.

    Coordinate frame:
      - world origin at the canvas center
      - +X right, +Y down (screen convention, matches heading/bearing signs)
      - one world unit = pixels_per_unit pixels
    """

    def __init__(self, tile_size: float = 24, tiles: int = 6, pixels_per_unit: float = 5.0):
        self.tile_size = tile_size
        self.tiles = tiles
        self.ppu = pixels_per_unit
        self.size = int(tiles * tile_size * pixels_per_unit)
        self.origin = (self.size // 2, self.size // 2)

    def world_to_px(self, x: float, y: float) -> Tuple[int, int]:
        return int(round(self.origin[0] + x * self.ppu)), int(round(self.origin[1] + y * self.ppu))

    def render(
        self,
        segments: Iterable[Tuple[Point, Point]],
        robot: RobotState,
        trail: Sequence[Point] = (),
        intersections: Sequence[Point] = (),
    ) -> np.ndarray:
        canvas = np.zeros((self.size, self.size, 3), dtype=np.uint8)
        self._draw_grid(canvas)
        self._draw_path(canvas, segments)
        self._draw_robot(canvas, robot)
        self._draw_trail(canvas, trail)
        self._draw_intersections(canvas, intersections)
        return canvas

    # ------------------------------------------------------------------ #
    # Draw helpers
    # ------------------------------------------------------------------ #
    def _draw_grid(self, canvas: np.ndarray) -> None:
        step_px = self.tile_size * self.ppu
        half = self.tiles // 2
        for i in range(-half, half + 1):
            offset = int(round(i * step_px))
            x = self.origin[0] + offset
            y = self.origin[1] + offset
            cv2.line(canvas, (x, 0), (x, self.size), WHITE, 1)
            cv2.line(canvas, (0, y), (self.size, y), WHITE, 1)

    def _draw_path(self, canvas: np.ndarray, segments: Iterable[Tuple[Point, Point]]) -> None:
        for p1, p2 in segments:
            cv2.line(canvas, self.world_to_px(p1.x, p1.y), self.world_to_px(p2.x, p2.y), AQUA, 2)

    def robot_polygon(self, robot: RobotState) -> np.ndarray:
        """Corners of the robot body in pixels; the long side points along the heading."""
        w = robot.size.width / 2
        h = robot.size.height / 2
        # body frame: -y is forward, rotated by heading + 90 deg
        corners = np.array([[-w, -h], [w, -h], [w, h], [-w, h]], dtype=np.float64)
        theta = math.radians(robot.heading + 90)
        rot = np.array([[math.cos(theta), -math.sin(theta)], [math.sin(theta), math.cos(theta)]])
        world = corners @ rot.T + np.array([robot.position.x, robot.position.y])
        return np.array([self.world_to_px(x, y) for x, y in world], dtype=np.int32)

    def _draw_robot(self, canvas: np.ndarray, robot: RobotState) -> None:
        cv2.fillPoly(canvas, [self.robot_polygon(robot)], RED)

        center = self.world_to_px(robot.position.x, robot.position.y)
        theta = math.radians(robot.heading)
        tip = self.world_to_px(
            robot.position.x + robot.size.height * math.cos(theta),
            robot.position.y + robot.size.height * math.sin(theta),
        )
        overlay = canvas.copy()
        cv2.line(overlay, center, tip, RED, 3)
        cv2.circle(overlay, center, int(round(robot.lookahead * self.ppu)), RED, 2)
        canvas[:] = cv2.addWeighted(overlay, 0.5, canvas, 0.5, 0)

    def _draw_trail(self, canvas: np.ndarray, trail: Sequence[Point]) -> None:
        if len(trail) < 2:
            return
        pts: List[Tuple[int, int]] = [self.world_to_px(p.x, p.y) for p in trail]
        cv2.polylines(canvas, [np.array(pts, dtype=np.int32)], False, TRAIL, 2)

    def _draw_intersections(self, canvas: np.ndarray, intersections: Sequence[Point]) -> None:
        for p in intersections:
            cv2.circle(canvas, self.world_to_px(p.x, p.y), 4, AQUA, -1)
