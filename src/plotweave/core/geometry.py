"""Geometric operations shared by generators and post-processing.

This module provides core mathematical utilities for:
- Signed area calculation (shoelace formula)
- Point-in-polygon testing (even-odd ray casting)
- Line segment intersection
- Bounding boxes
- Path smoothing (neighbour averaging and Chaikin corner cutting)
- Path simplification (Ramer-Douglas-Peucker and Visvalingam-Whyatt)
- Path bookkeeping: length, endpoints, centroid, closing, reversing, offsets

All functions are pure and never mutate their inputs.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from plotweave.domain import Circle, Path, Point, Polygon, Polyline

CLOSED_TOLERANCE = 1e-6


@dataclass(frozen=True, slots=True)
class BBox:
    """Axis-aligned bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def overlaps(self, other: "BBox", pad: float = 0.0) -> bool:
        return not (
            self.max_x < other.min_x - pad
            or other.max_x < self.min_x - pad
            or self.max_y < other.min_y - pad
            or other.max_y < self.min_y - pad
        )

    def contains(self, x: float, y: float, pad: float = 0.0) -> bool:
        return self.min_x - pad <= x <= self.max_x + pad and self.min_y - pad <= y <= self.max_y + pad


def bounding_box(points: Sequence[Point]) -> BBox:
    """Bounding box of a point sequence; an empty sequence gives a zero box."""
    if not points:
        return BBox(0.0, 0.0, 0.0, 0.0)
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return BBox(min(xs), min(ys), max(xs), max(ys))


def signed_area(points: Sequence[Point]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    The sign of the area indicates winding direction:
    - Positive area: counter-clockwise winding
    - Negative area: clockwise winding

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> square = [Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0), Point(0.0, 1.0)]
        >>> signed_area(square)
        1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """Determine if a point is inside a polygon using ray casting algorithm.

    Casts a horizontal ray from the point to the right and counts intersections
    with polygon edges. Odd number of intersections = inside, even = outside.
    A repeated closing vertex contributes a zero-length edge and is harmless.

    Args:
        point: The point to test
        polygon: List of points forming the polygon boundary

    Returns:
        True if point is inside polygon, False otherwise

    Examples:
        >>> square = [Point(0.0, 0.0), Point(2.0, 0.0), Point(2.0, 2.0), Point(0.0, 2.0)]
        >>> point_in_polygon(Point(1.0, 1.0), square)
        True
        >>> point_in_polygon(Point(3.0, 3.0), square)
        False
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    x, y = point.x, point.y
    j = n - 1

    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y

        # Check if ray from point intersects edge (j, i)
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside

        j = i

    return inside


def segment_intersection_params(
    p1: Point, p2: Point, p3: Point, p4: Point
) -> tuple[float, float] | None:
    """Parameters (t, u) where segment p1p2 meets segment p3p4.

    Returns None for parallel segments or when the crossing lies outside
    either segment.
    """
    x1, y1 = p1.x, p1.y
    x2, y2 = p2.x, p2.y
    x3, y3 = p3.x, p3.y
    x4, y4 = p4.x, p4.y

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < 1e-10:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom
    if 0 <= t <= 1 and 0 <= u <= 1:
        return t, u
    return None


def line_intersection(p1: Point, p2: Point, p3: Point, p4: Point) -> Point | None:
    """Find intersection point of two line segments.

    Args:
        p1: First endpoint of segment 1
        p2: Second endpoint of segment 1
        p3: First endpoint of segment 2
        p4: Second endpoint of segment 2

    Returns:
        Point at intersection if segments intersect, None otherwise
    """
    params = segment_intersection_params(p1, p2, p3, p4)
    if params is None:
        return None
    t = params[0]
    return Point(p1.x + t * (p2.x - p1.x), p1.y + t * (p2.y - p1.y))


def distance_sq_to_segment(p: Point, a: Point, b: Point) -> float:
    """Squared distance from p to segment ab."""
    dx = b.x - a.x
    dy = b.y - a.y
    if dx == 0 and dy == 0:
        return (p.x - a.x) ** 2 + (p.y - a.y) ** 2
    t = ((p.x - a.x) * dx + (p.y - a.y) * dy) / (dx * dx + dy * dy)
    if t <= 0:
        return (p.x - a.x) ** 2 + (p.y - a.y) ** 2
    if t >= 1:
        return (p.x - b.x) ** 2 + (p.y - b.y) ** 2
    return (p.x - (a.x + t * dx)) ** 2 + (p.y - (a.y + t * dy)) ** 2


def lerp_point(a: Point, b: Point, t: float) -> Point:
    return Point(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


def smooth_path(path: Path, amount: float | None) -> Path:
    """Pull each interior point toward the average of its neighbours.

    Endpoints are kept. Primitives and paths shorter than three points are
    returned unchanged.

    Args:
        path: Path to smooth
        amount: Blend factor in [0, 1]; falsy or non-positive disables smoothing
    """
    if not amount or amount <= 0 or not isinstance(path, Polyline) or len(path.points) < 3:
        return path
    pts = path.points
    smoothed = [pts[0]]
    for i in range(1, len(pts) - 1):
        prev, curr, nxt = pts[i - 1], pts[i], pts[i + 1]
        avg_x = (prev.x + nxt.x) / 2
        avg_y = (prev.y + nxt.y) / 2
        smoothed.append(Point(curr.x * (1 - amount) + avg_x * amount, curr.y * (1 - amount) + avg_y * amount))
    smoothed.append(pts[-1])
    return path.with_points(smoothed)


def chaikin(points: Sequence[Point], iterations: int = 1, closed: bool | None = None) -> list[Point]:
    """Chaikin corner cutting.

    Each edge is replaced by points at 1/4 and 3/4 of its length. Open paths
    keep their endpoints, so a contour that ends on the grid border still
    touches it; plain corner cutting would pull each end in by a quarter
    edge. Closed paths (first point equal to last) are cut cyclically and
    stay closed.

    Args:
        points: Input polyline
        iterations: Number of cutting passes
        closed: Force the closed/open treatment; detected when None
    """
    out = list(points)
    if len(out) < 3:
        return out
    if closed is None:
        closed = Polyline(out).is_closed(CLOSED_TOLERANCE)
    for _ in range(max(0, iterations)):
        if closed:
            ring = out[:-1]
            n = len(ring)
            if n < 3:
                break
            cut: list[Point] = []
            for i in range(n):
                a, b = ring[i], ring[(i + 1) % n]
                cut.append(lerp_point(a, b, 0.25))
                cut.append(lerp_point(a, b, 0.75))
            cut.append(cut[0])
        else:
            cut = [out[0]]
            for i in range(len(out) - 1):
                a, b = out[i], out[i + 1]
                cut.append(lerp_point(a, b, 0.25))
                cut.append(lerp_point(a, b, 0.75))
            cut.append(out[-1])
        out = cut
    return out


def simplify_rdp(path: Path, tolerance: float | None) -> Path:
    """Ramer-Douglas-Peucker simplification.

    Returns the input unchanged for non-positive tolerance, primitives,
    paths shorter than three points, or when fewer than two points survive.
    """
    if not tolerance or tolerance <= 0 or not isinstance(path, Polyline) or len(path.points) < 3:
        return path
    pts = path.points
    keep = [False] * len(pts)
    keep[0] = keep[-1] = True
    stack = [(0, len(pts) - 1)]
    tol_sq = tolerance * tolerance

    while stack:
        start, end = stack.pop()
        max_dist = 0.0
        index = -1
        for i in range(start + 1, end):
            dist = distance_sq_to_segment(pts[i], pts[start], pts[end])
            if dist > max_dist:
                max_dist = dist
                index = i
        if max_dist > tol_sq and index != -1:
            keep[index] = True
            stack.append((start, index))
            stack.append((index, end))

    simplified = [p for p, k in zip(pts, keep) if k]
    return path.with_points(simplified) if len(simplified) >= 2 else path


def _triangle_area(a: Point, b: Point, c: Point) -> float:
    return abs((a.x * (b.y - c.y) + b.x * (c.y - a.y) + c.x * (a.y - b.y)) / 2)


def simplify_visvalingam(path: Path, tolerance: float | None) -> Path:
    """Visvalingam-Whyatt simplification with area threshold ``tolerance**2``."""
    if not tolerance or tolerance <= 0 or not isinstance(path, Polyline) or len(path.points) < 3:
        return path
    pts = path.points
    n = len(pts)
    threshold = tolerance * tolerance
    keep = [True] * n
    area = [math.inf] * n
    for i in range(1, n - 1):
        area[i] = _triangle_area(pts[i - 1], pts[i], pts[i + 1])

    def neighbour(idx: int, step: int) -> int:
        i = idx + step
        while 0 < i < n - 1 and not keep[i]:
            i += step
        return i

    while True:
        min_area = math.inf
        min_index = -1
        for i in range(1, n - 1):
            if keep[i] and area[i] < min_area:
                min_area = area[i]
                min_index = i
        if min_index == -1 or min_area >= threshold:
            break
        keep[min_index] = False
        prev = neighbour(min_index, -1)
        nxt = neighbour(min_index, 1)
        if prev > 0:
            area[prev] = _triangle_area(pts[neighbour(prev, -1)], pts[prev], pts[nxt])
        if nxt < n - 1:
            area[nxt] = _triangle_area(pts[prev], pts[nxt], pts[neighbour(nxt, 1)])

    simplified = [p for p, k in zip(pts, keep) if k]
    return path.with_points(simplified) if len(simplified) >= 2 else path


def polyline_length(points: Sequence[Point]) -> float:
    return sum(math.hypot(b.x - a.x, b.y - a.y) for a, b in zip(points, points[1:]))


def path_length(path: Path) -> float:
    """Stroke length; circles use their analytic circumference."""
    if isinstance(path, Circle):
        return math.tau * (path.rx + path.ry) / 2
    return polyline_length(path.expand().points)


def path_endpoints(path: Path) -> tuple[Point, Point]:
    """Start and end points; a circle starts and ends at its centre."""
    if isinstance(path, Circle):
        center = Point(path.cx, path.cy)
        return center, center
    pts = path.expand().points
    if not pts:
        origin = Point(0.0, 0.0)
        return origin, origin
    return pts[0], pts[-1]


def path_centroid(path: Path) -> Point:
    if isinstance(path, (Circle, Polygon)):
        return Point(path.cx, path.cy)
    pts = path.points
    if not pts:
        return Point(0.0, 0.0)
    return Point(sum(p.x for p in pts) / len(pts), sum(p.y for p in pts) / len(pts))


def is_closed_path(path: Path) -> bool:
    if isinstance(path, (Circle, Polygon)):
        return True
    return path.is_closed(CLOSED_TOLERANCE)


def close_path(path: Path, closed: bool = True) -> Path:
    """Append the first point when ``closed`` and the path is still open."""
    if not closed or not isinstance(path, Polyline) or len(path.points) < 2:
        return path
    first, last = path.points[0], path.points[-1]
    if (first.x - last.x) ** 2 + (first.y - last.y) ** 2 > CLOSED_TOLERANCE:
        return path.with_points([*path.points, Point(first.x, first.y)])
    return path


def reverse_path(path: Path) -> Path:
    if not isinstance(path, Polyline):
        return path
    return path.with_points(path.points[::-1])


def offset_path(path: Path, dx: float, dy: float) -> Path:
    """Translate a path; primitives keep their shorthand."""
    if isinstance(path, (Circle, Polygon)):
        return path.moved(dx, dy)
    return path.with_points([Point(p.x + dx, p.y + dy) for p in path.points])


def count_points(paths: Iterable[Path]) -> tuple[int, int]:
    """Return (lines, points) over explicit polylines."""
    lines = 0
    points = 0
    for path in paths:
        if isinstance(path, Polyline):
            lines += 1
            points += len(path.points)
    return lines, points


def clone_paths(paths: Iterable[Path]) -> list[Path]:
    """Copy paths so that edits to the copies never reach the originals."""
    cloned: list[Path] = []
    for path in paths:
        if isinstance(path, Polyline):
            cloned.append(path.with_points(path.points))
        else:
            cloned.append(path.moved(0.0, 0.0))
    return cloned
