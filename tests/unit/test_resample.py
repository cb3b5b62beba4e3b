"""Tests for arc-length slicing, sampling and dash chopping."""

import math

import pytest

from plotweave.core.geometry import polyline_length
from plotweave.core.resample import (
    build_segment_table,
    chop_by_dash_pattern,
    iterate_samples,
    slice_by_distance,
)
from plotweave.core.rng import SeededRng
from plotweave.domain import Circle, Point, Polyline


@pytest.fixture
def ten_unit_line() -> Polyline:
    return Polyline([Point(0, 0), Point(10, 0)])


@pytest.fixture
def zigzag() -> Polyline:
    return Polyline([Point(0, 0), Point(3, 4), Point(6, 0), Point(9, 4)])


class TestSegmentTable:
    """Tests for build_segment_table."""

    def test_total_length(self, zigzag: Polyline) -> None:
        table = build_segment_table(zigzag)
        assert table.total_length == pytest.approx(15.0)
        assert len(table) == 3

    def test_skips_zero_length_segments(self) -> None:
        table = build_segment_table([Point(0, 0), Point(0, 0), Point(5, 0)])
        assert len(table) == 1
        assert table.total_length == 5.0

    def test_expands_primitives(self) -> None:
        table = build_segment_table(Circle(0, 0, 10))
        assert table.total_length == pytest.approx(2 * math.pi * 10, rel=0.01)


class TestSliceByDistance:
    """Tests for slice_by_distance."""

    def test_full_slice_keeps_endpoints(self, zigzag: Polyline) -> None:
        table = build_segment_table(zigzag)
        piece = slice_by_distance(table, 0, table.total_length)
        assert piece is not None
        assert piece[0] == zigzag.points[0]
        assert piece[-1] == zigzag.points[-1]

    def test_interpolates_inside_segment(self, ten_unit_line: Polyline) -> None:
        piece = slice_by_distance(build_segment_table(ten_unit_line), 2.5, 7.5)
        assert piece == [Point(2.5, 0), Point(7.5, 0)]

    def test_spans_vertices(self, zigzag: Polyline) -> None:
        piece = slice_by_distance(build_segment_table(zigzag), 2.5, 7.5)
        assert piece is not None
        assert Point(3, 4) in piece
        assert polyline_length(piece) == pytest.approx(5.0)

    def test_empty_range(self, ten_unit_line: Polyline) -> None:
        table = build_segment_table(ten_unit_line)
        assert slice_by_distance(table, 5, 5) is None
        assert slice_by_distance(table, 6, 2) is None


class TestDashPattern:
    """Tests for chop_by_dash_pattern."""

    def test_ten_unit_line(self, ten_unit_line: Polyline) -> None:
        """A 10 unit line with dash 2 and gap 1 gives dashes at 0, 3, 6 and 9."""
        dashes = chop_by_dash_pattern(ten_unit_line, 2, 1)
        assert len(dashes) == 4
        assert [d.points[0].x for d in dashes] == pytest.approx([0, 3, 6, 9])
        for dash in dashes[:3]:
            assert polyline_length(dash.points) == pytest.approx(2.0)
        for dash in dashes:
            for pt in dash.points:
                assert 0 <= pt.x <= 10
                assert pt.y == 0

    def test_covered_length_never_exceeds_path(self, zigzag: Polyline) -> None:
        dashes = chop_by_dash_pattern(zigzag, 1.7, 0.9)
        covered = sum(polyline_length(d.points) for d in dashes)
        assert covered <= 15.0 + 1e-9

    def test_offset_shifts_first_dash(self, ten_unit_line: Polyline) -> None:
        dashes = chop_by_dash_pattern(ten_unit_line, 2, 1, offset=1)
        assert dashes[0].points[0].x == pytest.approx(1.0)

    def test_zero_dash_length(self, ten_unit_line: Polyline) -> None:
        assert chop_by_dash_pattern(ten_unit_line, 0, 1) == []

    def test_zero_gap_is_floored(self, ten_unit_line: Polyline) -> None:
        dashes = chop_by_dash_pattern(ten_unit_line, 1, 0)
        assert 0 < len(dashes) <= 10

    def test_keeps_group(self) -> None:
        line = Polyline([Point(0, 0), Point(10, 0)], group="shading")
        assert {d.group for d in chop_by_dash_pattern(line, 2, 1)} == {"shading"}

    def test_jitter_is_deterministic(self, zigzag: Polyline) -> None:
        a = chop_by_dash_pattern(zigzag, 1, 1, gap_jitter=0.5, rng=SeededRng(3))
        b = chop_by_dash_pattern(zigzag, 1, 1, gap_jitter=0.5, rng=SeededRng(3))
        assert [d.points for d in a] == [d.points for d in b]


class TestIterateSamples:
    """Tests for iterate_samples."""

    def test_even_spacing(self, ten_unit_line: Polyline) -> None:
        samples = list(iterate_samples(build_segment_table(ten_unit_line), 2.5))
        assert [pt.x for pt, _ in samples] == pytest.approx([0, 2.5, 5, 7.5, 10])
        assert all(tangent == (10, 0) for _, tangent in samples)

    def test_tiny_spacing_is_floored(self, ten_unit_line: Polyline) -> None:
        samples = list(iterate_samples(build_segment_table(ten_unit_line), 0.0))
        assert len(samples) <= 101
