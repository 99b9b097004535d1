from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Point:
    """2D value type. Every operation returns a new Point."""

    x: float
    y: float

    def add(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def subtract(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def multiply(self, other: Point) -> Point:
        return Point(self.x * other.x, self.y * other.y)

    def divide(self, other: Point) -> Point:
        """
        Component-wise division with IEEE semantics:
        a zero divisor gives inf/nan instead of raising.
        """
        with np.errstate(divide="ignore", invalid="ignore"):
            x = np.float64(self.x) / np.float64(other.x)
            y = np.float64(self.y) / np.float64(other.y)
        return Point(float(x), float(y))

    def scale(self, k: float) -> Point:
        return Point(self.x * k, self.y * k)

    def equals(self, other: Point) -> bool:
        return self.x == other.x and self.y == other.y

    def angle_to(self, other: Point) -> float:
        """Signed angle (radians, in (-pi, pi]) of the vector from this point to `other`."""
        angle = math.atan2(other.y - self.y, other.x - self.x)
        # atan2 reports -pi for a negative zero dy
        return math.pi if angle == -math.pi else angle

    def distance_to(self, other: Point) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def of(cls, value: Point | Tuple[float, float] | list) -> Point:
        if isinstance(value, Point):
            return value
        x, y = value
        return cls(float(x), float(y))

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply
    __truediv__ = divide

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"
