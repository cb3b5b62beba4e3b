"""Internal cubic Bezier helpers for profile curves.

This is an internal module used by petal profile construction.
Not intended for public use.
"""

import math

from plotweave.domain import Point

MAX_DEPTH = 12


def cubic_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Evaluate a cubic Bezier at parameter t."""
    mt = 1 - t
    a = mt * mt * mt
    b = 3 * mt * mt * t
    c = 3 * mt * t * t
    d = t * t * t
    return Point(
        a * p0.x + b * p1.x + c * p2.x + d * p3.x,
        a * p0.y + b * p1.y + c * p2.y + d * p3.y,
    )


def flatten_cubic(points: list[Point], tolerance: float, depth: int = 0) -> list[Point]:
    """Flatten a cubic Bezier curve using recursive subdivision.

    Uses De Casteljau's algorithm for subdivision. Recursion stops at
    ``MAX_DEPTH`` even if the curve is not yet flat.

    Args:
        points: List of 4 control points [p0, p1, p2, p3]
        tolerance: Maximum distance from true curve

    Returns:
        List of points approximating the curve
    """
    p0, p1, p2, p3 = points

    # Calculate curve midpoint (at t=0.5)
    curve_mid_x = 0.125 * (p0.x + 3 * p1.x + 3 * p2.x + p3.x)
    curve_mid_y = 0.125 * (p0.y + 3 * p1.y + 3 * p2.y + p3.y)

    line_mid_x = (p0.x + p3.x) / 2
    line_mid_y = (p0.y + p3.y) / 2

    distance = math.hypot(curve_mid_x - line_mid_x, curve_mid_y - line_mid_y)
    if distance <= tolerance or depth >= MAX_DEPTH:
        return [p0, p3]

    q1 = Point((p0.x + p1.x) / 2, (p0.y + p1.y) / 2)
    q2 = Point((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)
    q3 = Point((p2.x + p3.x) / 2, (p2.y + p3.y) / 2)

    r1 = Point((q1.x + q2.x) / 2, (q1.y + q2.y) / 2)
    r2 = Point((q2.x + q3.x) / 2, (q2.y + q3.y) / 2)

    mid = Point((r1.x + r2.x) / 2, (r1.y + r2.y) / 2)

    left = flatten_cubic([p0, q1, r1, mid], tolerance, depth + 1)
    right = flatten_cubic([mid, r2, q3, p3], tolerance, depth + 1)

    # Combine, avoiding duplicate midpoint
    return left[:-1] + right


def catmull_rom_segments(anchors: list[Point]) -> list[list[Point]]:
    """Convert an anchor sequence into cubic segments through every anchor.

    End tangents reuse the end anchors, so the curve starts and stops
    exactly on the first and last anchors.

    Args:
        anchors: At least two points the curve must pass through

    Returns:
        One [p0, c1, c2, p3] control list per consecutive anchor pair
    """
    n = len(anchors)
    segments = []
    for i in range(n - 1):
        prev = anchors[i - 1] if i > 0 else anchors[i]
        start = anchors[i]
        end = anchors[i + 1]
        nxt = anchors[i + 2] if i + 2 < n else end
        c1 = Point(start.x + (end.x - prev.x) / 6, start.y + (end.y - prev.y) / 6)
        c2 = Point(end.x - (nxt.x - start.x) / 6, end.y - (nxt.y - start.y) / 6)
        segments.append([start, c1, c2, end])
    return segments


def flatten_anchors(anchors: list[Point], tolerance: float = 0.002) -> list[Point]:
    """Flatten the smooth curve through ``anchors`` into a polyline."""
    if len(anchors) < 2:
        return list(anchors)
    out: list[Point] = [anchors[0]]
    for segment in catmull_rom_segments(anchors):
        out.extend(flatten_cubic(segment, tolerance)[1:])
    return out
