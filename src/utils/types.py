from dataclasses import dataclass
from typing import Optional, Tuple

from src.control.robot_state import RobotState
from src.geometry.point import Point


@dataclass(frozen=True)
class Candidate:
    point: Point
    bearing: float  # degrees, from robot position to point


@dataclass
class StepResult:
    step_index: int
    state: RobotState
    target: Optional[Candidate]
    candidates: Tuple[Point, ...] = ()
    used_fallback: bool = False
    heading_delta: float = 0.0
    move: Point = Point(0.0, 0.0)
    arrived: bool = False
