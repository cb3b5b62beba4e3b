"""Incremental occlusion and directional-light shadowing.

Shapes register as occluders in the order they are drawn. A later shape
can be clipped against every earlier occluder (painter's algorithm, rear to
front), and its points can be classified as lit or shadowed relative to a
light position. Occluders are never clipped retroactively.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from plotweave.core.geometry import BBox, bounding_box, point_in_polygon, segment_intersection_params
from plotweave.domain import Path, Point, Polyline

logger = structlog.get_logger(__name__)

DEFAULT_EPSILON = 1e-4


@dataclass(frozen=True, slots=True)
class Occluder:
    """A closed polygon that hides whatever is drawn after it."""

    points: tuple[Point, ...]
    bbox: BBox

    @classmethod
    def from_path(cls, path: Path, segments: int = 64) -> "Occluder | None":
        """Build an occluder from any path; None if it has fewer than 3 points."""
        pts = list(path.expand(segments).points)
        if len(pts) < 3:
            return None
        if pts[0] != pts[-1]:
            pts.append(pts[0])
        return cls(tuple(pts), bounding_box(pts))

    def contains(self, point: Point) -> bool:
        if not self.bbox.contains(point.x, point.y):
            return False
        return point_in_polygon(point, self.points)

    def edges(self):
        return zip(self.points, self.points[1:])


def _blocks_ray(occluder: Occluder, light: Point, point: Point, epsilon: float) -> bool:
    ray_box = BBox(
        min(light.x, point.x), min(light.y, point.y), max(light.x, point.x), max(light.y, point.y)
    )
    if not ray_box.overlaps(occluder.bbox):
        return False
    if occluder.contains(light):
        return True
    for a, b in occluder.edges():
        hit = segment_intersection_params(light, point, a, b)
        if hit is not None and epsilon < hit[0] < 1 - epsilon:
            return True
    return False


def is_shadowed(
    point: Point,
    light: Point,
    center: Point,
    occluders: Sequence[Occluder],
    epsilon: float = DEFAULT_EPSILON,
) -> bool:
    """Check whether ``point`` is hidden from ``light``.

    A point is lit only if it faces the light (the vectors point->light and
    center->point have a positive dot product) and no occluder blocks the
    straight ray from the light to the point.
    """
    to_light_x = light.x - point.x
    to_light_y = light.y - point.y
    out_x = point.x - center.x
    out_y = point.y - center.y
    if to_light_x * out_x + to_light_y * out_y <= 0:
        return True
    return any(_blocks_ray(occ, light, point, epsilon) for occ in occluders)


def split_by_shadow(
    path: Path,
    light: Point,
    center: Point,
    occluders: Sequence[Occluder],
    shadowed: bool = True,
    epsilon: float = DEFAULT_EPSILON,
) -> list[Polyline]:
    """Split a path into runs whose segment midpoints share a shadow state.

    Args:
        path: Path to split
        light: Light position
        center: Reference centre used by the facing test
        occluders: Occluders that may block the light
        shadowed: Keep shadowed runs when True, lit runs otherwise

    Returns:
        Runs of at least two points, in path order
    """
    line = path.expand()
    pts = line.points
    runs: list[Polyline] = []
    current: list[Point] = []
    for a, b in zip(pts, pts[1:]):
        mid = Point((a.x + b.x) / 2, (a.y + b.y) / 2)
        if is_shadowed(mid, light, center, occluders, epsilon) == shadowed:
            if not current:
                current.append(a)
            current.append(b)
        elif current:
            if len(current) >= 2:
                runs.append(line.with_points(current))
            current = []
    if len(current) >= 2:
        runs.append(line.with_points(current))
    return runs


def _dedup_sorted(values: list[float], epsilon: float) -> list[float]:
    out: list[float] = []
    for v in sorted(values):
        if not out or v - out[-1] > epsilon:
            out.append(v)
    return out


def clip_outside(
    path: Path,
    occluders: Sequence[Occluder],
    epsilon: float = DEFAULT_EPSILON,
) -> list[Polyline]:
    """Keep only the parts of ``path`` lying outside every occluder.

    Every edge is cut at its crossings with occluder edges. Sub-intervals
    whose midpoint is outside all occluders survive and are stitched back
    into maximal runs.

    Returns:
        Visible runs of at least two points, in path order
    """
    line = path.expand()
    pts = line.points
    if len(pts) < 2:
        return []
    if not occluders:
        return [line]

    runs: list[list[Point]] = []
    current: list[Point] = []

    def close_run() -> None:
        nonlocal current
        if len(current) >= 2:
            runs.append(current)
        current = []

    for a, b in zip(pts, pts[1:]):
        edge_box = BBox(min(a.x, b.x), min(a.y, b.y), max(a.x, b.x), max(a.y, b.y))
        nearby = [occ for occ in occluders if edge_box.overlaps(occ.bbox, epsilon)]
        params = [0.0, 1.0]
        for occ in nearby:
            for c, d in occ.edges():
                hit = segment_intersection_params(a, b, c, d)
                if hit is not None:
                    params.append(hit[0])
        params = _dedup_sorted(params, epsilon * 1e-2)

        for t0, t1 in zip(params, params[1:]):
            tm = (t0 + t1) / 2
            mid = Point(a.x + (b.x - a.x) * tm, a.y + (b.y - a.y) * tm)
            if any(occ.contains(mid) for occ in nearby):
                close_run()
                continue
            start = Point(a.x + (b.x - a.x) * t0, a.y + (b.y - a.y) * t0)
            end = Point(a.x + (b.x - a.x) * t1, a.y + (b.y - a.y) * t1)
            if current and math.hypot(current[-1].x - start.x, current[-1].y - start.y) <= epsilon:
                current.append(end)
            else:
                close_run()
                current = [start, end]
    close_run()
    return [line.with_points(run) for run in runs]


class OcclusionEngine:
    """Ordered occluder list built while shapes are emitted.

    Args:
        epsilon: Tolerance for intersection parameters and run stitching
        segments: Tessellation used when registering circle shorthand
    """

    def __init__(self, epsilon: float = DEFAULT_EPSILON, segments: int = 64) -> None:
        self.epsilon = epsilon
        self.segments = segments
        self.occluders: list[Occluder] = []

    def __len__(self) -> int:
        return len(self.occluders)

    def add(self, path: Path) -> Occluder | None:
        """Register a drawn shape; degenerate shapes are ignored."""
        occluder = Occluder.from_path(path, self.segments)
        if occluder is not None:
            self.occluders.append(occluder)
        return occluder

    def clip_outside(self, path: Path) -> list[Polyline]:
        return clip_outside(path, self.occluders, self.epsilon)

    def clip_all(self, paths: Sequence[Path]) -> list[Polyline]:
        visible: list[Polyline] = []
        for path in paths:
            visible.extend(self.clip_outside(path))
        return visible

    def is_shadowed(self, point: Point, light: Point, center: Point) -> bool:
        return is_shadowed(point, light, center, self.occluders, self.epsilon)

    def split_by_shadow(
        self, path: Path, light: Point, center: Point, shadowed: bool = True
    ) -> list[Polyline]:
        return split_by_shadow(path, light, center, self.occluders, shadowed, self.epsilon)

    def log_summary(self) -> None:
        logger.debug("occlusion_summary", occluders=len(self.occluders))
