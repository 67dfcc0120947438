from dataclasses import dataclass
from typing import Tuple

from .core import Point, Rect

BOTTOM_CENTER = (0.5, 1.0)
TOP_CENTER = (0.5, 0.0)


def connector_points(source: Rect, target: Rect) -> Tuple[Point, Point]:
    return source.anchor(*BOTTOM_CENTER), target.anchor(*TOP_CENTER)


@dataclass(frozen=True)
class Connector:
    source_id: int
    target_id: int
    start: Point
    end: Point

    @classmethod
    def between(cls, source_id: int, source: Rect, target_id: int, target: Rect) -> "Connector":
        start, end = connector_points(source, target)
        return cls(source_id=source_id, target_id=target_id, start=start, end=end)

    @property
    def is_vertical(self) -> bool:
        return self.start.x == self.end.x

    @property
    def length(self) -> float:
        return ((self.end.x - self.start.x) ** 2 + (self.end.y - self.start.y) ** 2) ** 0.5
