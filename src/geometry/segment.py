from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Tuple

from src.geometry.line import Line
from src.geometry.point import Point
from src.utils.errors import DegenerateInputError, InvalidRadiusError

# Membership is checked on coordinates rounded to two decimals, ties away
# from zero (absorbs float drift from the intersection math, ~0.005 tolerance).
POINT_ON_QUANTUM = Decimal("0.01")


def round_coord(value: float) -> Decimal:
    """Round the exact binary value of `value` to POINT_ON_QUANTUM, halves away from zero."""
    return Decimal(value).quantize(POINT_ON_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Segment:
    """
    Bounded piece of a Line between p1 and p2.

    The line is derived from the endpoints once, at construction, so the
    coefficients always match p1/p2.
    """

    p1: Point
    p2: Point
    line: Line = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "line", Line.from_points(self.p1, self.p2))

    @property
    def a(self) -> float:
        return self.line.a

    @property
    def b(self) -> float:
        return self.line.b

    @property
    def c(self) -> float:
        return self.line.c

    @property
    def is_degenerate(self) -> bool:
        return self.line.is_degenerate

    @property
    def length(self) -> float:
        return self.p1.distance_to(self.p2)

    def endpoints(self) -> Tuple[Point, Point]:
        return self.p1, self.p2

    def translated(self, offset: Point) -> Segment:
        """Same segment expressed relative to `offset` (offset becomes the origin)."""
        return Segment(self.p1.subtract(offset), self.p2.subtract(offset))

    def point_on(self, point: Point) -> bool:
        """
        Bounding-box test for a point already known to be on the line.
        Coordinates are compared after round_coord().
        """
        min_x = round_coord(min(self.p1.x, self.p2.x))
        max_x = round_coord(max(self.p1.x, self.p2.x))
        min_y = round_coord(min(self.p1.y, self.p2.y))
        max_y = round_coord(max(self.p1.y, self.p2.y))

        x = round_coord(point.x)
        y = round_coord(point.y)
        return min_x <= x <= max_x and min_y <= y <= max_y

    def circle_intersection(self, center: Point, radius: float) -> List[Point]:
        """
        Points where the circle (center, radius) crosses this segment.

        Works in center-relative coordinates so the circle sits at the origin:
          d0 = |c| / sqrt(a^2 + b^2)      distance origin -> line
          d0 >  r  -> no hit
          d0 == r  -> tangent at the foot of the perpendicular
          d0 <  r  -> two points either side of the foot along (b, -a)
        Returns 0, 1 or 2 points, each inside the segment bounds.
        """
        if radius < 0:
            raise InvalidRadiusError(f"Circle radius must be >= 0, got {radius}")
        if self.is_degenerate:
            raise DegenerateInputError(f"Cannot intersect zero-length segment {self}")

        local = self.translated(center)
        a, b, c = local.a, local.b, local.c
        norm = a * a + b * b

        d0 = abs(c) / math.sqrt(norm)
        if d0 > radius:
            return []

        x0 = (-a * c) / norm
        y0 = (-b * c) / norm

        if d0 == radius:
            tangent = Point(x0, y0).add(center)
            return [tangent] if self.point_on(tangent) else []

        d = math.sqrt(radius * radius - (c * c) / norm)
        mult = math.sqrt((d * d) / norm)

        candidates = [
            Point(x0 + b * mult, y0 - a * mult),
            Point(x0 - b * mult, y0 + a * mult),
        ]
        return [p.add(center) for p in candidates if local.point_on(p)]

    def __str__(self) -> str:
        return f"{self.p1} -> {self.p2}"
