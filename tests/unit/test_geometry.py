"""Unit tests for geometric operations."""

import math

import pytest

from plotweave.core.geometry import (
    bounding_box,
    chaikin,
    clone_paths,
    close_path,
    count_points,
    distance_sq_to_segment,
    is_closed_path,
    line_intersection,
    offset_path,
    path_centroid,
    path_endpoints,
    path_length,
    point_in_polygon,
    reverse_path,
    signed_area,
    simplify_rdp,
    simplify_visvalingam,
    smooth_path,
)
from plotweave.domain import Circle, Point, Polygon, Polyline


@pytest.fixture
def unit_square() -> list[Point]:
    return [Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0), Point(0.0, 1.0)]


class TestSignedArea:
    """Tests for signed_area function."""

    def test_counter_clockwise_positive(self, unit_square: list[Point]) -> None:
        assert signed_area(unit_square) == pytest.approx(1.0)

    def test_clockwise_negative(self, unit_square: list[Point]) -> None:
        assert signed_area(unit_square[::-1]) == pytest.approx(-1.0)

    def test_degenerate(self) -> None:
        assert signed_area([Point(0, 0), Point(1, 1)]) == 0.0
        assert signed_area([]) == 0.0


class TestPointInPolygon:
    """Tests for point_in_polygon function."""

    def test_inside(self, unit_square: list[Point]) -> None:
        assert point_in_polygon(Point(0.5, 0.5), unit_square)

    def test_outside(self, unit_square: list[Point]) -> None:
        assert not point_in_polygon(Point(1.5, 0.5), unit_square)
        assert not point_in_polygon(Point(-0.1, 0.5), unit_square)

    def test_closing_vertex_is_harmless(self, unit_square: list[Point]) -> None:
        closed = [*unit_square, unit_square[0]]
        assert point_in_polygon(Point(0.5, 0.5), closed)
        assert not point_in_polygon(Point(2.0, 0.5), closed)

    def test_concave(self) -> None:
        # U shape opening upwards
        u = [Point(0, 0), Point(3, 0), Point(3, 3), Point(2, 3), Point(2, 1), Point(1, 1), Point(1, 3), Point(0, 3)]
        assert point_in_polygon(Point(0.5, 2), u)
        assert not point_in_polygon(Point(1.5, 2), u)

    def test_too_few_points(self) -> None:
        assert not point_in_polygon(Point(0, 0), [Point(0, 0), Point(1, 1)])


class TestLineIntersection:
    """Tests for line_intersection function."""

    def test_crossing(self) -> None:
        hit = line_intersection(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
        assert hit is not None
        assert hit.x == pytest.approx(1.0)
        assert hit.y == pytest.approx(1.0)

    def test_parallel(self) -> None:
        assert line_intersection(Point(0, 0), Point(1, 0), Point(0, 1), Point(1, 1)) is None

    def test_outside_segment(self) -> None:
        assert line_intersection(Point(0, 0), Point(1, 0), Point(2, -1), Point(2, 1)) is None

    def test_distance_to_segment(self) -> None:
        a, b = Point(0, 0), Point(10, 0)
        assert distance_sq_to_segment(Point(5, 3), a, b) == pytest.approx(9.0)
        assert distance_sq_to_segment(Point(-3, 4), a, b) == pytest.approx(25.0)
        assert distance_sq_to_segment(Point(3, 4), a, a) == pytest.approx(25.0)


class TestSmoothing:
    """Tests for smooth_path and chaikin."""

    def test_full_smoothing_averages_neighbours(self) -> None:
        path = Polyline([Point(0, 0), Point(1, 2), Point(2, 0)])
        out = smooth_path(path, 1.0)
        assert out.points == [Point(0, 0), Point(1, 0), Point(2, 0)]

    def test_half_smoothing(self) -> None:
        out = smooth_path(Polyline([Point(0, 0), Point(1, 2), Point(2, 0)]), 0.5)
        assert out.points[1].y == pytest.approx(1.0)

    @pytest.mark.parametrize("amount", [None, 0, -1])
    def test_disabled(self, amount) -> None:
        path = Polyline([Point(0, 0), Point(1, 2), Point(2, 0)])
        assert smooth_path(path, amount) is path

    def test_primitives_untouched(self) -> None:
        circle = Circle(0, 0, 5)
        assert smooth_path(circle, 0.5) is circle

    def test_chaikin_open_keeps_endpoints(self) -> None:
        out = chaikin([Point(0, 0), Point(4, 0), Point(4, 4)], iterations=1)
        assert out[0] == Point(0, 0)
        assert out[-1] == Point(4, 4)
        assert out[1:-1] == [Point(1, 0), Point(3, 0), Point(4, 1), Point(4, 3)]

    def test_chaikin_closed_stays_closed(self, unit_square: list[Point]) -> None:
        ring = [*unit_square, unit_square[0]]
        out = chaikin(ring, iterations=2)
        assert out[0] == out[-1]
        assert len(out) == 17

    def test_chaikin_short_input(self) -> None:
        pts = [Point(0, 0), Point(1, 1)]
        assert chaikin(pts, iterations=3) == pts


class TestSimplification:
    """Tests for RDP and Visvalingam simplification."""

    def test_rdp_drops_near_collinear(self) -> None:
        path = Polyline([Point(0, 0), Point(1, 0.01), Point(2, 0), Point(3, 0)])
        assert simplify_rdp(path, 0.1).points == [Point(0, 0), Point(3, 0)]

    def test_rdp_keeps_spike(self) -> None:
        path = Polyline([Point(0, 0), Point(1, 5), Point(2, 0)])
        assert len(simplify_rdp(path, 1.0).points) == 3

    def test_visvalingam_drops_small_triangles(self) -> None:
        path = Polyline([Point(0, 0), Point(1, 0.01), Point(2, 0)])
        assert simplify_visvalingam(path, 1.0).points == [Point(0, 0), Point(2, 0)]

    def test_visvalingam_keeps_large_triangles(self) -> None:
        path = Polyline([Point(0, 0), Point(1, 5), Point(2, 0)])
        assert len(simplify_visvalingam(path, 1.0).points) == 3

    @pytest.mark.parametrize("simplify", [simplify_rdp, simplify_visvalingam])
    def test_non_positive_tolerance_is_identity(self, simplify) -> None:
        path = Polyline([Point(0, 0), Point(1, 0.01), Point(2, 0)])
        assert simplify(path, 0) is path
        assert simplify(path, -2) is path

    @pytest.mark.parametrize("simplify", [simplify_rdp, simplify_visvalingam])
    def test_keeps_group(self, simplify) -> None:
        path = Polyline([Point(0, 0), Point(1, 0.01), Point(2, 0)], group="outline")
        assert simplify(path, 1.0).group == "outline"


class TestPathHelpers:
    """Tests for length, endpoints and editing helpers."""

    def test_lengths(self) -> None:
        assert path_length(Polyline([Point(0, 0), Point(3, 4), Point(3, 10)])) == pytest.approx(11.0)
        assert path_length(Circle(0, 0, 2)) == pytest.approx(4 * math.pi)

    def test_endpoints(self) -> None:
        assert path_endpoints(Circle(5, 6, 1)) == (Point(5, 6), Point(5, 6))
        assert path_endpoints(Polyline([Point(1, 2), Point(3, 4)])) == (Point(1, 2), Point(3, 4))
        assert path_endpoints(Polyline([])) == (Point(0, 0), Point(0, 0))

    def test_centroid(self) -> None:
        assert path_centroid(Polygon(3, 4, 2, 6)) == Point(3, 4)
        assert path_centroid(Polyline([Point(0, 0), Point(2, 0), Point(2, 2), Point(0, 2)])) == Point(1, 1)

    def test_closed_detection(self, unit_square: list[Point]) -> None:
        assert is_closed_path(Circle(0, 0, 1))
        assert not is_closed_path(Polyline(unit_square))
        assert is_closed_path(close_path(Polyline(unit_square)))

    def test_close_path_is_idempotent(self, unit_square: list[Point]) -> None:
        once = close_path(Polyline(unit_square))
        twice = close_path(once)
        assert len(twice.points) == len(unit_square) + 1
        assert close_path(Polyline(unit_square), closed=False).points == unit_square

    def test_reverse_and_offset(self) -> None:
        path = Polyline([Point(0, 0), Point(1, 0)], group="g")
        assert reverse_path(path).points == [Point(1, 0), Point(0, 0)]
        moved = offset_path(path, 2, 3)
        assert moved.points == [Point(2, 3), Point(3, 3)]
        assert moved.group == "g"
        circle = offset_path(Circle(0, 0, 1), 2, 3)
        assert isinstance(circle, Circle)
        assert (circle.cx, circle.cy) == (2, 3)

    def test_count_points_ignores_primitives(self) -> None:
        paths = [Polyline([Point(0, 0), Point(1, 1)]), Circle(0, 0, 1), Polyline([Point(0, 0)] * 3)]
        assert count_points(paths) == (2, 5)

    def test_clone_is_independent(self) -> None:
        original = Polyline([Point(0, 0), Point(1, 1)])
        copy = clone_paths([original])[0]
        copy.points.append(Point(2, 2))
        assert len(original.points) == 2

    def test_bounding_box(self) -> None:
        box = bounding_box([Point(-1, 2), Point(3, -4), Point(0, 0)])
        assert (box.min_x, box.min_y, box.max_x, box.max_y) == (-1, -4, 3, 2)
        assert box.width == 4
        assert box.height == 6
        assert bounding_box([]).width == 0
