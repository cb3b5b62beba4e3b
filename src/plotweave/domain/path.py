"""Core geometric types for path representation.

This module defines the fundamental geometric types produced by generators:
- Point: A 2D point in canvas units
- Polyline: An explicit ordered point sequence
- Circle: Circle shorthand, expanded lazily
- Polygon: Regular polygon shorthand, expanded lazily
- ShapeKind: Enum naming the path variant

A ``Path`` is one of the three variants. Circle and Polygon are primitives:
any operation that needs literal vertices (clipping, occlusion, modifiers)
must call ``expand`` first.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Union


class ShapeKind(str, Enum):
    """Variant tag of a path."""

    POLYLINE = "polyline"
    CIRCLE = "circle"
    POLYGON = "polygon"


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D canvas space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def to_dict(self) -> dict[str, float]:
        """Serialize to dictionary."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary."""
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass(slots=True)
class Polyline:
    """An explicit ordered sequence of points.

    Point order defines stroke direction. A polyline whose first and last
    points coincide is treated as closed.

    Attributes:
        points: Points in stroke order
        group: Optional grouping key for consumers
        label: Optional display label
    """

    points: list[Point] = field(default_factory=list)
    group: str | None = None
    label: str | None = None

    kind = ShapeKind.POLYLINE

    @property
    def is_primitive(self) -> bool:
        return False

    def expand(self, segments: int = 64) -> "Polyline":  # noqa: ARG002
        """Return self; a polyline is already explicit."""
        return self

    def with_points(self, points: list[Point]) -> "Polyline":
        """Return a new polyline with the same grouping and new points."""
        return Polyline(points=list(points), group=self.group, label=self.label)

    def is_closed(self, tolerance: float = 1e-6) -> bool:
        """Check whether first and last points coincide."""
        if len(self.points) < 3:
            return False
        first, last = self.points[0], self.points[-1]
        return (first.x - last.x) ** 2 + (first.y - last.y) ** 2 < tolerance

    def __len__(self) -> int:
        return len(self.points)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "points": [p.to_dict() for p in self.points],
            "group": self.group,
            "label": self.label,
        }


@dataclass(slots=True)
class Circle:
    """Circle shorthand.

    ``scale_x``/``scale_y`` and ``rotation`` are set by the engine's layer
    transform so that non-uniform scaling turns the circle into an ellipse
    without losing the shorthand.
    """

    cx: float
    cy: float
    r: float
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotation: float = 0.0
    group: str | None = None
    label: str | None = None

    kind = ShapeKind.CIRCLE

    @property
    def is_primitive(self) -> bool:
        return True

    @property
    def rx(self) -> float:
        return abs(self.r * self.scale_x)

    @property
    def ry(self) -> float:
        return abs(self.r * self.scale_y)

    def expand(self, segments: int = 64) -> Polyline:
        """Tessellate into a closed polyline with ``segments`` edges."""
        segments = max(3, int(segments))
        cos_r = math.cos(self.rotation)
        sin_r = math.sin(self.rotation)
        points = []
        for i in range(segments + 1):
            t = (i / segments) * math.tau
            ex = math.cos(t) * self.rx
            ey = math.sin(t) * self.ry
            points.append(
                Point(self.cx + ex * cos_r - ey * sin_r, self.cy + ex * sin_r + ey * cos_r)
            )
        points[-1] = points[0]
        return Polyline(points=points, group=self.group, label=self.label)

    def moved(self, dx: float, dy: float) -> "Circle":
        return replace(self, cx=self.cx + dx, cy=self.cy + dy)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "cx": self.cx,
            "cy": self.cy,
            "r": self.r,
            "rx": self.rx,
            "ry": self.ry,
            "rotation": self.rotation,
            "group": self.group,
            "label": self.label,
        }


@dataclass(slots=True)
class Polygon:
    """Regular polygon shorthand centred on (cx, cy) with circumradius r."""

    cx: float
    cy: float
    r: float
    sides: int
    rotation: float = 0.0
    group: str | None = None
    label: str | None = None

    kind = ShapeKind.POLYGON

    @property
    def is_primitive(self) -> bool:
        return True

    def expand(self, segments: int = 64) -> Polyline:  # noqa: ARG002
        """Return the closed vertex ring; a polygon always has ``sides`` edges."""
        sides = max(3, int(self.sides))
        points = []
        for k in range(sides + 1):
            ang = (k / sides) * math.tau + self.rotation
            points.append(Point(self.cx + math.cos(ang) * self.r, self.cy + math.sin(ang) * self.r))
        points[-1] = points[0]
        return Polyline(points=points, group=self.group, label=self.label)

    def moved(self, dx: float, dy: float) -> "Polygon":
        return replace(self, cx=self.cx + dx, cy=self.cy + dy)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "cx": self.cx,
            "cy": self.cy,
            "r": self.r,
            "sides": self.sides,
            "rotation": self.rotation,
            "group": self.group,
            "label": self.label,
        }


Path = Union[Polyline, Circle, Polygon]


def path_from_dict(data: dict[str, Any]) -> Path:
    """Deserialize any path variant from its dictionary form."""
    kind = ShapeKind(data.get("kind", ShapeKind.POLYLINE.value))
    group = data.get("group")
    label = data.get("label")
    if kind is ShapeKind.CIRCLE:
        r = float(data["r"])
        scale_x = float(data.get("rx", r)) / r if r else 1.0
        scale_y = float(data.get("ry", r)) / r if r else 1.0
        return Circle(
            cx=float(data["cx"]),
            cy=float(data["cy"]),
            r=r,
            scale_x=scale_x,
            scale_y=scale_y,
            rotation=float(data.get("rotation", 0.0)),
            group=group,
            label=label,
        )
    if kind is ShapeKind.POLYGON:
        return Polygon(
            cx=float(data["cx"]),
            cy=float(data["cy"]),
            r=float(data["r"]),
            sides=int(data["sides"]),
            rotation=float(data.get("rotation", 0.0)),
            group=group,
            label=label,
        )
    return Polyline(
        points=[Point.from_dict(p) for p in data.get("points", [])],
        group=group,
        label=label,
    )
