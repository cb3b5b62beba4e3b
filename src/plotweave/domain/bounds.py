"""Canvas bounds and generation results."""

from dataclasses import dataclass, field
from typing import Any

from plotweave.domain.path import Path, Point, path_from_dict


@dataclass(frozen=True, slots=True)
class Bounds:
    """Canvas extent and drawable inset.

    Attributes:
        width: Canvas width in canvas units
        height: Canvas height in canvas units
        margin: Margin reserved around the drawable area
        truncate: Whether generators should keep output inside the margin
    """

    width: float
    height: float
    margin: float = 20.0
    truncate: bool = True

    @property
    def inner_width(self) -> float:
        return max(0.0, self.width - self.margin * 2)

    @property
    def inner_height(self) -> float:
        return max(0.0, self.height - self.margin * 2)

    @property
    def inset(self) -> float:
        """Margin honoured by truncating generators, 0 when truncation is off."""
        return self.margin if self.truncate else 0.0

    @property
    def center(self) -> Point:
        return Point(self.width / 2, self.height / 2)

    def contains(self, x: float, y: float, inset: float | None = None) -> bool:
        """Check whether (x, y) lies inside the canvas shrunk by ``inset``."""
        pad = self.margin if inset is None else inset
        return pad <= x <= self.width - pad and pad <= y <= self.height - pad

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "margin": self.margin,
            "innerWidth": self.inner_width,
            "innerHeight": self.inner_height,
            "truncate": self.truncate,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Bounds":
        return cls(
            width=float(data["width"]),
            height=float(data["height"]),
            margin=float(data.get("margin", 20.0)),
            truncate=bool(data.get("truncate", True)),
        )


@dataclass(slots=True)
class GenerationResult:
    """Output of one generator call.

    Attributes:
        paths: Primary artwork paths in draw order
        helpers: Auxiliary guide paths that are not part of the artwork
    """

    paths: list[Path] = field(default_factory=list)
    helpers: list[Path] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self):
        return iter(self.paths)

    @property
    def point_count(self) -> int:
        """Total number of explicit points, counting primitives as one."""
        total = 0
        for path in self.paths:
            total += len(path.points) if hasattr(path, "points") else 1
        return total

    def to_dict(self) -> dict[str, Any]:
        return {
            "paths": [p.to_dict() for p in self.paths],
            "helpers": [p.to_dict() for p in self.helpers],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GenerationResult":
        return cls(
            paths=[path_from_dict(p) for p in data.get("paths", [])],
            helpers=[path_from_dict(p) for p in data.get("helpers", [])],
        )
