from __future__ import annotations

from dataclasses import dataclass

from src.geometry.point import Point


@dataclass(frozen=True)
class Line:
    """Infinite line in implicit form a*x + b*y + c = 0."""

    a: float
    b: float
    c: float

    @staticmethod
    def get_a(p1: Point, p2: Point) -> float:
        return p1.y - p2.y

    @staticmethod
    def get_b(p1: Point, p2: Point) -> float:
        return p2.x - p1.x

    @staticmethod
    def get_c(p1: Point, p2: Point) -> float:
        a = Line.get_a(p1, p2)
        b = Line.get_b(p1, p2)
        return -a * p1.x - b * p1.y

    @classmethod
    def from_points(cls, p1: Point, p2: Point) -> Line:
        return cls(cls.get_a(p1, p2), cls.get_b(p1, p2), cls.get_c(p1, p2))

    @property
    def is_degenerate(self) -> bool:
        # only produced by two coincident source points
        return self.a == 0 and self.b == 0

    def evaluate(self, point: Point) -> float:
        return self.a * point.x + self.b * point.y + self.c

    def is_equal(self, other: Line) -> bool:
        return self.a == other.a and self.b == other.b and self.c == other.c

    def __str__(self) -> str:
        return f"{self.a}x + {self.b}y + {self.c} = 0"
