from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple

from src.geometry.point import Point
from src.geometry.segment import Segment
from src.utils.errors import DegenerateInputError


@dataclass(frozen=True)
class Path:
    """Ordered, immutable polyline. Segment i joins waypoint i and i + 1."""

    waypoints: Tuple[Point, ...]
    segments: Tuple[Segment, ...]

    @classmethod
    def from_waypoints(cls, waypoints: Iterable[Point | Sequence[float]]) -> Path:
        points = [Point.of(p) for p in waypoints]
        if len(points) < 2:
            raise DegenerateInputError(f"A path needs at least 2 waypoints, got {len(points)}")

        segments: List[Segment] = []
        for i, (p1, p2) in enumerate(zip(points, points[1:])):
            if p1.equals(p2):
                raise DegenerateInputError(f"Waypoints {i} and {i + 1} coincide at {p1}")
            segments.append(Segment(p1, p2))

        return cls(waypoints=tuple(points), segments=tuple(segments))

    @property
    def start(self) -> Point:
        return self.waypoints[0]

    @property
    def end(self) -> Point:
        return self.waypoints[-1]

    @property
    def length(self) -> float:
        return sum(s.length for s in self.segments)

    def endpoint_pairs(self) -> List[Tuple[Point, Point]]:
        return [s.endpoints() for s in self.segments]

    def circle_intersections(self, center: Point, radius: float) -> List[Point]:
        """All circle crossings, in segment order then per-segment order."""
        hits: List[Point] = []
        for segment in self.segments:
            hits.extend(segment.circle_intersection(center, radius))
        return hits

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)
