"""Iso-contour extraction from a sampled scalar grid (marching squares).

The grid holds ``(rows + 1) x (cols + 1)`` corner values over a rectangle.
For each threshold every cell yields zero, one or two crossing segments;
segments are then linked end to end into polylines. Work is bounded by
``rows * cols * levels`` and every segment is consumed exactly once.
"""

import math
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from plotweave.core.geometry import chaikin
from plotweave.domain import Point

logger = structlog.get_logger(__name__)

# Corner bits: 1 = top-left, 2 = top-right, 4 = bottom-right, 8 = bottom-left.
# Edges: 0 = top, 1 = right, 2 = bottom, 3 = left.
CASES: dict[int, tuple[tuple[int, int], ...]] = {
    1: ((3, 0),),
    2: ((0, 1),),
    3: ((3, 1),),
    4: ((1, 2),),
    5: ((3, 2), (0, 1)),
    6: ((0, 2),),
    7: ((3, 2),),
    8: ((2, 3),),
    9: ((0, 2),),
    10: ((0, 3), (1, 2)),
    11: ((1, 2),),
    12: ((1, 3),),
    13: ((0, 1),),
    14: ((3, 0),),
}

# Saddle resolutions keyed by (case, cell average above threshold).
SADDLES: dict[tuple[int, bool], tuple[tuple[int, int], ...]] = {
    (5, True): ((3, 0), (1, 2)),
    (5, False): ((3, 2), (0, 1)),
    (10, True): ((0, 1), (2, 3)),
    (10, False): ((0, 3), (1, 2)),
}

Segment = tuple[Point, Point]


@dataclass(slots=True)
class ScalarField:
    """Corner values of a regular grid laid over a rectangle.

    Attributes:
        values: ``rows + 1`` lists of ``cols + 1`` values
        left: X of the grid origin
        top: Y of the grid origin
        cell_w: Cell width
        cell_h: Cell height
    """

    values: list[list[float]]
    left: float = 0.0
    top: float = 0.0
    cell_w: float = 1.0
    cell_h: float = 1.0

    @property
    def rows(self) -> int:
        return len(self.values) - 1

    @property
    def cols(self) -> int:
        return len(self.values[0]) - 1 if self.values else -1

    @classmethod
    def from_function(
        cls,
        fn: Callable[[float, float], float],
        left: float,
        top: float,
        width: float,
        height: float,
        cols: int,
        rows: int,
    ) -> "ScalarField":
        """Sample ``fn(x, y)`` at every grid corner; non-finite values become 0."""
        cols = max(1, cols)
        rows = max(1, rows)
        cell_w = width / cols
        cell_h = height / rows
        values = []
        for iy in range(rows + 1):
            row = []
            for ix in range(cols + 1):
                v = fn(left + ix * cell_w, top + iy * cell_h)
                row.append(v if math.isfinite(v) else 0.0)
            values.append(row)
        return cls(values, left, top, cell_w, cell_h)

    def value_range(self) -> tuple[float, float]:
        flat = [v for row in self.values for v in row]
        return min(flat), max(flat)

    def corner(self, ix: int, iy: int) -> Point:
        return Point(self.left + ix * self.cell_w, self.top + iy * self.cell_h)

    def sample(self, x: float, y: float) -> float:
        """Bilinear sample, clamped to the grid."""
        gx = max(0.0, min(self.cols, (x - self.left) / self.cell_w)) if self.cell_w else 0.0
        gy = max(0.0, min(self.rows, (y - self.top) / self.cell_h)) if self.cell_h else 0.0
        x0 = math.floor(gx)
        y0 = math.floor(gy)
        x1 = min(self.cols, x0 + 1)
        y1 = min(self.rows, y0 + 1)
        tx = gx - x0
        ty = gy - y0
        v = self.values
        top = v[y0][x0] + (v[y0][x1] - v[y0][x0]) * tx
        bottom = v[y1][x0] + (v[y1][x1] - v[y1][x0]) * tx
        return top + (bottom - top) * ty

    def refine(self, pt: Point, threshold: float) -> Point:
        """One Newton step from ``pt`` toward the isoline at ``threshold``."""
        h = min(self.cell_w, self.cell_h) * 0.5 or 1e-3
        fx = (self.sample(pt.x + h, pt.y) - self.sample(pt.x - h, pt.y)) / (2 * h)
        fy = (self.sample(pt.x, pt.y + h) - self.sample(pt.x, pt.y - h)) / (2 * h)
        denom = fx * fx + fy * fy + 1e-6
        diff = self.sample(pt.x, pt.y) - threshold
        return Point(pt.x - diff * fx / denom, pt.y - diff * fy / denom)


def _interp(p1: Point, p2: Point, v1: float, v2: float, threshold: float) -> Point:
    denom = (v2 - v1) or 1e-6
    ratio = (threshold - v1) / denom
    return Point(p1.x + (p2.x - p1.x) * ratio, p1.y + (p2.y - p1.y) * ratio)


def cell_edges(v0: float, v1: float, v2: float, v3: float, threshold: float) -> tuple[tuple[int, int], ...]:
    """Crossing edge pairs for one cell (corners clockwise from top-left)."""
    idx = (v0 > threshold) | (v1 > threshold) << 1 | (v2 > threshold) << 2 | (v3 > threshold) << 3
    if idx in (0, 15):
        return ()
    if idx in (5, 10):
        average = (v0 + v1 + v2 + v3) / 4
        return SADDLES[(idx, average > threshold)]
    return CASES[idx]


def link_segments(segments: list[Segment], precision: int = 3) -> list[list[Point]]:
    """Join segments that share (rounded) endpoints into polylines.

    Each unused segment seeds a path that is extended greedily at its end,
    then at its start, until neither end finds an unused neighbour.
    """

    def key(pt: Point) -> tuple[float, float]:
        return (round(pt.x, precision), round(pt.y, precision))

    index: dict[tuple[float, float], list[tuple[int, int]]] = {}
    for i, (a, b) in enumerate(segments):
        index.setdefault(key(a), []).append((i, 0))
        index.setdefault(key(b), []).append((i, 1))

    used = [False] * len(segments)

    def take(pt: Point) -> Point | None:
        for i, end in index.get(key(pt), ()):
            if not used[i]:
                used[i] = True
                seg = segments[i]
                return seg[1] if end == 0 else seg[0]
        return None

    paths = []
    for i, (a, b) in enumerate(segments):
        if used[i]:
            continue
        used[i] = True
        path = deque((a, b))
        extended = True
        while extended:
            extended = False
            nxt = take(path[-1])
            if nxt is not None:
                path.append(nxt)
                extended = True
            prev = take(path[0])
            if prev is not None:
                path.appendleft(prev)
                extended = True
        paths.append(list(path))
    return paths


@dataclass(slots=True)
class ContourLevel:
    """All polylines extracted at one threshold."""

    threshold: float
    paths: list[list[Point]] = field(default_factory=list)


class ContourExtractor:
    """Marching squares over a ``ScalarField``.

    Args:
        field: Sampled grid
        precision: Decimal places used to match segment endpoints
    """

    def __init__(self, field: ScalarField, precision: int = 3) -> None:
        self.field = field
        self.precision = precision

    def thresholds(self, levels: int, offset: float = 0.0) -> list[float]:
        """``levels`` evenly spaced thresholds strictly inside the value range."""
        levels = max(1, int(levels))
        low, high = self.field.value_range()
        span = (high - low) or 1.0
        return [low + (i / (levels + 1)) * span + offset for i in range(1, levels + 1)]

    def segments(self, threshold: float, refine: bool = False) -> list[Segment]:
        grid = self.field
        v = grid.values
        out: list[Segment] = []
        for y in range(grid.rows):
            for x in range(grid.cols):
                v0, v1, v2, v3 = v[y][x], v[y][x + 1], v[y + 1][x + 1], v[y + 1][x]
                edges = cell_edges(v0, v1, v2, v3, threshold)
                if not edges:
                    continue
                p0 = grid.corner(x, y)
                p1 = grid.corner(x + 1, y)
                p2 = grid.corner(x + 1, y + 1)
                p3 = grid.corner(x, y + 1)
                crossings = (
                    (p0, p1, v0, v1),
                    (p1, p2, v1, v2),
                    (p2, p3, v2, v3),
                    (p3, p0, v3, v0),
                )
                for e0, e1 in edges:
                    a = _interp(*crossings[e0], threshold)
                    b = _interp(*crossings[e1], threshold)
                    if refine:
                        a = grid.refine(a, threshold)
                        b = grid.refine(b, threshold)
                    out.append((a, b))
        return out

    def extract(
        self,
        levels: int,
        offset: float = 0.0,
        smoothing: int = 0,
        refine: bool = False,
    ) -> list[ContourLevel]:
        """Extract linked contours for every threshold.

        Args:
            levels: Number of thresholds
            offset: Shift added to every threshold
            smoothing: Chaikin passes applied to each polyline
            refine: Snap crossing points onto the isoline by gradient steps

        Returns:
            One ``ContourLevel`` per threshold that produced any polyline
        """
        result = []
        for threshold in self.thresholds(levels, offset):
            linked = link_segments(self.segments(threshold, refine), self.precision)
            paths = []
            for path in linked:
                if len(path) < 2:
                    continue
                paths.append(chaikin(path, smoothing) if smoothing else path)
            if paths:
                result.append(ContourLevel(threshold, paths))
        logger.debug(
            "contours_extracted",
            levels=len(result),
            paths=sum(len(level.paths) for level in result),
        )
        return result
