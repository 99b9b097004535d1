from __future__ import annotations

from dataclasses import dataclass, field, replace

from src.geometry.point import Point


@dataclass(frozen=True)
class RobotSize:
    width: float = 14.0
    height: float = 18.0


@dataclass
class RobotState:
    position: Point
    heading: float = 0.0  # degrees, not wrapped
    size: RobotSize = field(default_factory=RobotSize)  # display only
    lookahead: float = 12.0

    def copy(self) -> "RobotState":
        return replace(self)
