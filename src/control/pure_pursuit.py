from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from src.control.base_controller import BaseController
from src.control.robot_state import RobotSize, RobotState
from src.geometry.point import Point
from src.planning.path import Path
from src.utils.config import get
from src.utils.errors import InvalidRadiusError
from src.utils.logger import get_logger
from src.utils.types import Candidate, StepResult


@dataclass(frozen=True)
class ControllerGains:
    """
    Fixed control constants. Defaults reproduce the reference simulator:
      speed                   max Manhattan displacement per step
      max_turn_deg            heading clamp per step
      turn_gain_divisor       heading error is divided by this before clamping
      arrival_tolerance       per-axis distance to the target that counts as arrived
      forward_half_angle_deg  candidates further than this from the heading are "behind"
    """

    speed: float = 0.5
    max_turn_deg: float = 2.0
    turn_gain_divisor: float = 4.0
    arrival_tolerance: float = 0.1
    forward_half_angle_deg: float = 90.0


# ---------------------------------------------------------------------- #
# Step pipeline (pure functions, each returns a new value)
# ---------------------------------------------------------------------- #
def bearing_deg(origin: Point, target: Point) -> float:
    return math.degrees(origin.angle_to(target))


def collect_candidates(path: Path, center: Point, radius: float) -> List[Point]:
    return path.circle_intersections(center, radius)


def annotate(points: Sequence[Point], origin: Point) -> List[Candidate]:
    return [Candidate(point=p, bearing=bearing_deg(origin, p)) for p in points]


def forward_filter(candidates: Sequence[Candidate], heading: float, half_angle_deg: float = 90.0) -> List[Candidate]:
    """Ascending by bearing, dropping anything at or beyond half_angle_deg from the heading."""
    ordered = sorted(candidates, key=lambda c: c.bearing)
    return [c for c in ordered if abs(c.bearing - heading) < half_angle_deg]


def fallback(candidates: Sequence[Candidate], remembered: Point, origin: Point) -> Tuple[List[Candidate], bool]:
    if candidates:
        return list(candidates), False
    return [Candidate(point=remembered, bearing=bearing_deg(origin, remembered))], True


def heading_delta(bearing: float, heading: float, gains: ControllerGains) -> float:
    scaled = (bearing - heading) / gains.turn_gain_divisor
    return min(gains.max_turn_deg, max(-gains.max_turn_deg, scaled))


def position_delta(diff: Point, speed: float) -> Point:
    # Manhattan-normalized; never divide by less than 1
    denom = max(abs(diff.x) + abs(diff.y), 1.0)
    return diff.divide(Point(denom, denom)).scale(speed)


def has_arrived(diff: Point, tolerance: float) -> bool:
    return abs(diff.x) < tolerance and abs(diff.y) < tolerance


class PurePursuitController(BaseController):
    """
    Steps a single robot along a fixed Path.

    Owns the RobotState and the remembered last target; both change only
    inside step(). The Path is immutable and can be shared between controllers.
    """

    def __init__(
        self,
        path: Path,
        start: Point,
        heading_deg: float = 0.0,
        lookahead: float = 12.0,
        size: Optional[RobotSize] = None,
        gains: Optional[ControllerGains] = None,
    ):
        if lookahead < 0:
            raise InvalidRadiusError(f"Lookahead radius must be >= 0, got {lookahead}")
        self.logger = get_logger(__name__)
        self.path = path
        self.gains = gains or ControllerGains()
        self._state = RobotState(
            position=Point.of(start),
            heading=float(heading_deg),
            size=size or RobotSize(),
            lookahead=float(lookahead),
        )
        self._last_intersection: Point = path.start
        self._arrived = False
        self._step_index = 0
        self._last_result: Optional[StepResult] = None
        self.logger.info(
            "Pure pursuit ready: %d segments, start=%s heading=%.1f lookahead=%.2f",
            len(path),
            self._state.position,
            self._state.heading,
            self._state.lookahead,
        )

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> PurePursuitController:
        path = Path.from_waypoints(get(cfg, "path.waypoints", [[0, 0], [48, 0], [48, 48], [0, 48]]))
        size_cfg = get(cfg, "robot.size", {}) or {}
        gains = ControllerGains(
            speed=float(get(cfg, "controller.speed", 0.5)),
            max_turn_deg=float(get(cfg, "controller.max_turn_deg", 2.0)),
            turn_gain_divisor=float(get(cfg, "controller.turn_gain_divisor", 4.0)),
            arrival_tolerance=float(get(cfg, "controller.arrival_tolerance", 0.1)),
            forward_half_angle_deg=float(get(cfg, "controller.forward_half_angle_deg", 90.0)),
        )
        return cls(
            path=path,
            start=Point.of(get(cfg, "robot.start", [-8, 10])),
            heading_deg=float(get(cfg, "robot.heading_deg", 0.0)),
            lookahead=float(get(cfg, "robot.lookahead", 12.0)),
            size=RobotSize(float(size_cfg.get("width", 14.0)), float(size_cfg.get("height", 18.0))),
            gains=gains,
        )

    # ------------------------------------------------------------------ #
    # Read-only queries
    # ------------------------------------------------------------------ #
    @property
    def state(self) -> RobotState:
        return self._state.copy()

    @property
    def last_intersection(self) -> Point:
        return self._last_intersection

    @property
    def arrived(self) -> bool:
        return self._arrived

    @property
    def step_count(self) -> int:
        return self._step_index

    def path_segments(self) -> List[Tuple[Point, Point]]:
        return self.path.endpoint_pairs()

    # ------------------------------------------------------------------ #
    # Step
    # ------------------------------------------------------------------ #
    def step(self) -> StepResult:
        if self._arrived and self._last_result is not None:
            return StepResult(
                step_index=self._step_index,
                state=self._state.copy(),
                target=self._last_result.target,
                candidates=self._last_result.candidates,
                arrived=True,
            )

        state = self._state
        raw = collect_candidates(self.path, state.position, state.lookahead)
        ahead = forward_filter(annotate(raw, state.position), state.heading, self.gains.forward_half_angle_deg)
        choices, used_fallback = fallback(ahead, self._last_intersection, state.position)

        target = choices[0]
        if not used_fallback:
            self._last_intersection = target.point
        else:
            self.logger.debug("No forward intersection; falling back to %s", self._last_intersection)

        delta = heading_delta(target.bearing, state.heading, self.gains)
        state.heading += delta

        diff = target.point.subtract(state.position)
        move = position_delta(diff, self.gains.speed)
        state.position = state.position.add(move)

        self._step_index += 1
        self._arrived = has_arrived(diff, self.gains.arrival_tolerance)

        result = StepResult(
            step_index=self._step_index,
            state=state.copy(),
            target=target,
            candidates=tuple(raw),
            used_fallback=used_fallback,
            heading_delta=delta,
            move=move,
            arrived=self._arrived,
        )
        self._last_result = result

        self.logger.debug(
            "step=%d target=%s bearing=%.2f heading=%.2f pos=%s",
            self._step_index,
            target.point,
            target.bearing,
            state.heading,
            state.position,
        )
        if self._arrived:
            self.logger.info("Arrived at %s after %d steps", state.position, self._step_index)
        return result
