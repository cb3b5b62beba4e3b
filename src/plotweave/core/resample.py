"""Arc-length operations on polylines.

A ``SegmentTable`` parametrizes a polyline by cumulative distance. From it
paths can be sliced between two distances, sampled at (jittered) even
spacing, or chopped into dashes. Zero-length segments are skipped when the
table is built, so every operation downstream can divide by a segment
length safely.
"""

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from plotweave.core.rng import SeededRng
from plotweave.domain import Path, Point, Polyline

MIN_STEP = 0.1
MAX_DASHES = 100_000


@dataclass(frozen=True, slots=True)
class Segment:
    """One non-degenerate edge with its distance from the path start."""

    a: Point
    b: Point
    length: float
    start: float

    @property
    def end(self) -> float:
        return self.start + self.length

    def point_at(self, distance: float) -> Point:
        t = (distance - self.start) / self.length
        return Point(self.a.x + (self.b.x - self.a.x) * t, self.a.y + (self.b.y - self.a.y) * t)

    @property
    def tangent(self) -> tuple[float, float]:
        return (self.b.x - self.a.x, self.b.y - self.a.y)


@dataclass(frozen=True, slots=True)
class SegmentTable:
    segments: list[Segment] = field(default_factory=list)
    total_length: float = 0.0

    def __len__(self) -> int:
        return len(self.segments)


def build_segment_table(path: Path | Sequence[Point]) -> SegmentTable:
    """Parametrize a path by arc length.

    Args:
        path: A path (primitives are expanded) or a bare point sequence

    Returns:
        Table of non-degenerate segments and the total length
    """
    if isinstance(path, (list, tuple)):
        points = list(path)
    else:
        points = path.expand().points
    segments = []
    total = 0.0
    for a, b in zip(points, points[1:]):
        length = math.hypot(b.x - a.x, b.y - a.y)
        if not length:
            continue
        segments.append(Segment(a, b, length, total))
        total += length
    return SegmentTable(segments, total)


def slice_by_distance(table: SegmentTable, start: float, end: float) -> list[Point] | None:
    """Extract the sub-path between two arc-length distances.

    Entry and exit points on boundary segments are linearly interpolated.

    Returns:
        The points of the slice, or None when ``end <= start`` or fewer than
        two distinct points result
    """
    if end <= start:
        return None
    points: list[Point] = []

    def push(pt: Point) -> None:
        if not points or points[-1] != pt:
            points.append(pt)

    for seg in table.segments:
        if seg.end < start:
            continue
        if seg.start > end:
            break
        if seg.start <= start <= seg.end:
            push(seg.point_at(start))
        elif seg.start >= start:
            push(seg.a)
        if seg.end <= end:
            push(seg.b)
        if seg.start <= end <= seg.end:
            push(seg.point_at(end))
            break
    return points if len(points) > 1 else None


def iterate_samples(
    table: SegmentTable,
    spacing: float,
    offset: float = 0.0,
    jitter: float = 0.0,
    rng: SeededRng | None = None,
) -> Iterator[tuple[Point, tuple[float, float]]]:
    """Walk the path at (jittered) even spacing.

    Each stop yields the point and the tangent of the segment it lies on.
    The step is ``spacing * (1 + j)`` with ``j`` drawn from
    ``[-jitter, jitter)``, floored at ``MIN_STEP`` so the walk always ends.

    Args:
        table: Arc-length table of the path
        spacing: Nominal distance between stops
        offset: Distance of the first stop; negative values start at 0
        jitter: Relative spacing randomness; needs ``rng`` when non-zero
        rng: Random source for jitter draws
    """
    cursor = max(0.0, offset)
    index = 0
    segments = table.segments
    while cursor <= table.total_length and index < len(segments):
        while index < len(segments) and cursor > segments[index].end:
            index += 1
        if index >= len(segments):
            break
        seg = segments[index]
        yield seg.point_at(cursor), seg.tangent
        j = (rng.next_float() * 2 - 1) * jitter if jitter and rng is not None else 0.0
        cursor += max(MIN_STEP, spacing * (1 + j))


def chop_by_dash_pattern(
    path: Path | Sequence[Point],
    dash_length: float,
    gap_length: float,
    offset: float = 0.0,
    gap_jitter: float = 0.0,
    rng: SeededRng | None = None,
) -> list[Polyline]:
    """Split a path into alternating drawn and skipped runs.

    A drawn run starts at ``offset`` and then after every gap. The final run
    is clipped to the path end and kept only if it has at least two points.

    Args:
        path: Path to chop
        dash_length: Length of each drawn run
        gap_length: Length of each skipped run, floored at ``MIN_STEP``
        offset: Distance of the first dash
        gap_jitter: Relative gap randomness; needs ``rng`` when non-zero
        rng: Random source for gap jitter

    Returns:
        Drawn sub-paths in path order
    """
    if dash_length <= 0:
        return []
    table = build_segment_table(path)
    group = getattr(path, "group", None)
    label = getattr(path, "label", None)
    dashes: list[Polyline] = []
    cursor = offset
    guard = 0
    while cursor < table.total_length and guard < MAX_DASHES:
        dash_end = cursor + dash_length
        piece = slice_by_distance(table, max(0.0, cursor), min(dash_end, table.total_length))
        if piece:
            dashes.append(Polyline(piece, group=group, label=label))
        j = (rng.next_float() * 2 - 1) * gap_jitter if gap_jitter and rng is not None else 0.0
        cursor = dash_end + max(MIN_STEP, gap_length * (1 + j))
        guard += 1
    return dashes
