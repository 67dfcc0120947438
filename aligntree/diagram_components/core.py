from dataclasses import dataclass
from enum import Enum


class ConnectorPolicy(Enum):

    CHILDREN = "children"
    DESCENDANTS = "descendants"

    @classmethod
    def coerce(cls, value) -> "ConnectorPolicy":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.lower().strip()
            for policy in cls:
                if policy.value == key:
                    return policy
        raise ValueError(f"Unknown connector policy: {value!r}")


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2

    def anchor(self, ux: float, uy: float) -> Point:
        """Point at unit offsets ``(ux, uy)`` inside the rectangle, (0, 0) being top-left."""
        return Point(self.min_x + ux * self.width, self.min_y + uy * self.height)

    def translated(self, dx: float, dy: float) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def union(self, other: "Rect") -> "Rect":
        min_x = min(self.min_x, other.min_x)
        min_y = min(self.min_y, other.min_y)
        max_x = max(self.max_x, other.max_x)
        max_y = max(self.max_y, other.max_y)
        return Rect(min_x, min_y, max_x - min_x, max_y - min_y)


@dataclass
class BoxChars:

    top_left: str = "╭"
    top_right: str = "╮"
    bottom_left: str = "╰"
    bottom_right: str = "╯"

    horizontal: str = "─"
    vertical: str = "│"
    diagonal_down: str = "╲"
    diagonal_up: str = "╱"

    tee_down: str = "┬"
    tee_up: str = "┴"
    tee_right: str = "├"
    tee_left: str = "┤"
    cross: str = "┼"

    arrow_down: str = "▼"

    @classmethod
    def for_style(cls, style: str) -> "BoxChars":
        key = style.lower().strip()
        if key in {"rounded", "round", "modern"}:
            return cls()
        if key in {"square", "line", "box"}:
            return cls(
                top_left="┌",
                top_right="┐",
                bottom_left="└",
                bottom_right="┘",
            )
        if key in {"heavy", "bold"}:
            return cls(
                top_left="┏",
                top_right="┓",
                bottom_left="┗",
                bottom_right="┛",
                horizontal="━",
                vertical="┃",
                tee_down="┳",
                tee_up="┻",
                tee_right="┣",
                tee_left="┫",
                cross="╋",
            )
        if key in {"ascii", "plain"}:
            return cls(
                top_left="+",
                top_right="+",
                bottom_left="+",
                bottom_right="+",
                horizontal="-",
                vertical="|",
                diagonal_down="\\",
                diagonal_up="/",
                tee_down="+",
                tee_up="+",
                tee_right="+",
                tee_left="+",
                cross="+",
                arrow_down="v",
            )
        raise ValueError(f"Unknown box style: {style}")
