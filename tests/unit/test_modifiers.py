"""Tests for polar and local modifier pipelines."""

import math

import pytest

from plotweave.config import ModifierSpec, ModifierType
from plotweave.core.modifiers import LocalFrame, PolarFrame, apply_local_modifiers, apply_polar_modifiers
from plotweave.core.noise import NoiseField
from plotweave.domain import Circle, Point, Polygon, Polyline

CENTER = Point(100, 100)


@pytest.fixture
def spoke() -> Polyline:
    return Polyline([Point(100 + r, 100) for r in range(0, 60, 5)])


class TestPolarModifiers:
    """Tests for apply_polar_modifiers."""

    def test_empty_list_is_identity(self, spoke: Polyline, noise: NoiseField) -> None:
        out = apply_polar_modifiers([spoke], [], PolarFrame(CENTER, 50), noise)
        assert out[0].points == spoke.points

    def test_disabled_modifiers_are_skipped(self, spoke: Polyline, noise: NoiseField) -> None:
        mods = [ModifierSpec(type=ModifierType.TWIST, amount=90, enabled=False)]
        out = apply_polar_modifiers([spoke], mods, PolarFrame(CENTER, 50), noise)
        assert out[0].points == spoke.points

    def test_clip_at_max_radius(self, spoke: Polyline, noise: NoiseField) -> None:
        mods = [ModifierSpec(type=ModifierType.CLIP)]
        out = apply_polar_modifiers([spoke], mods, PolarFrame(CENTER, 30), noise)
        for before, after in zip(spoke.points, out[0].points):
            r_before = math.hypot(before.x - CENTER.x, before.y - CENTER.y)
            r_after = math.hypot(after.x - CENTER.x, after.y - CENTER.y)
            assert r_after <= 30 + 1e-9
            if r_before <= 30:
                assert after.x == pytest.approx(before.x)
                assert after.y == pytest.approx(before.y, abs=1e-9)

    def test_clip_radius_override(self, spoke: Polyline, noise: NoiseField) -> None:
        mods = [ModifierSpec(type=ModifierType.CLIP, radius=10)]
        out = apply_polar_modifiers([spoke], mods, PolarFrame(CENTER, 30), noise)
        assert max(math.hypot(p.x - 100, p.y - 100) for p in out[0].points) == pytest.approx(10)

    def test_twist_grows_with_radius(self, spoke: Polyline, noise: NoiseField) -> None:
        mods = [ModifierSpec(type=ModifierType.TWIST, amount=90)]
        out = apply_polar_modifiers([spoke], mods, PolarFrame(CENTER, 55), noise)
        tip = out[0].points[-1]
        angle = math.degrees(math.atan2(tip.y - 100, tip.x - 100))
        assert angle == pytest.approx(90.0)

    def test_offset_translates(self, spoke: Polyline, noise: NoiseField) -> None:
        mods = [ModifierSpec(type=ModifierType.OFFSET, offset_x=5, offset_y=-2)]
        out = apply_polar_modifiers([spoke], mods, PolarFrame(CENTER, 50), noise)
        for before, after in zip(spoke.points, out[0].points):
            assert after.x == pytest.approx(before.x + 5)
            assert after.y == pytest.approx(before.y - 2)

    def test_circular_offset_pushes_along_tangent(self, noise: NoiseField) -> None:
        mod = ModifierSpec(type=ModifierType.CIRCULAR_OFFSET, amount=4, scale=0.05)
        # Angle 0 and angle 90 degrees, both at radius 40
        line = Polyline([Point(140, 100), Point(100, 140)])
        out = apply_polar_modifiers([line], [mod], PolarFrame(CENTER, 50), noise)
        east, south = out[0].points

        push = 4 * (1 + noise.noise2d(40 * 0.05, 0))
        assert east.x == pytest.approx(140.0)
        assert east.y == pytest.approx(100 + push)
        assert math.hypot(east.x - 100, east.y - 100) == pytest.approx(math.hypot(40, push))

        push = 4 * (1 + noise.noise2d(0, 40 * 0.05))
        assert south.x == pytest.approx(100 - push)
        assert south.y == pytest.approx(140.0)

    def test_circular_offset_adds_direct_offset(self, noise: NoiseField) -> None:
        mod = ModifierSpec(type=ModifierType.CIRCULAR_OFFSET, amount=0, offset_x=3, offset_y=-1)
        out = apply_polar_modifiers([Polyline([Point(120, 100), Point(100, 80)])], [mod], PolarFrame(CENTER, 50), noise)
        assert out[0].points[0].x == pytest.approx(123.0)
        assert out[0].points[0].y == pytest.approx(99.0)
        assert out[0].points[1].x == pytest.approx(103.0)
        assert out[0].points[1].y == pytest.approx(79.0)

    def test_expands_circles_and_stays_closed(self, noise: NoiseField) -> None:
        mods = [ModifierSpec(type=ModifierType.RIPPLE, amount=3, frequency=6)]
        out = apply_polar_modifiers([Circle(100, 100, 20)], mods, PolarFrame(CENTER, 50), noise)
        ring = out[0]
        assert isinstance(ring, Polyline)
        assert ring.points[0] == ring.points[-1]

    def test_input_not_mutated(self, spoke: Polyline, noise: NoiseField) -> None:
        before = list(spoke.points)
        apply_polar_modifiers([spoke], [ModifierSpec(type=ModifierType.RIPPLE, amount=5)], PolarFrame(CENTER, 50), noise)
        assert spoke.points == before


class TestLocalModifiers:
    """Tests for apply_local_modifiers."""

    def test_offset_in_rotated_frame(self, noise: NoiseField) -> None:
        frame = LocalFrame(Point(0, 0), math.pi / 2, 10)
        # Local (lx=10, ly=0) sits at world (0, 10)
        line = Polyline([Point(0, 0), Point(0, 10)])
        out = apply_local_modifiers([line], [ModifierSpec(type=ModifierType.OFFSET, offset_x=2)], frame, noise)
        assert out[0].points[1].x == pytest.approx(0.0, abs=1e-9)
        assert out[0].points[1].y == pytest.approx(12.0)

    def test_taper_scales_width_along_length(self, noise: NoiseField) -> None:
        frame = LocalFrame(Point(0, 0), 0.0, 10)
        line = Polyline([Point(0, 1), Point(10, 1)])
        out = apply_local_modifiers([line], [ModifierSpec(type=ModifierType.TAPER, amount=1)], frame, noise)
        assert out[0].points[0].y == pytest.approx(0.5)
        assert out[0].points[1].y == pytest.approx(1.5)

    def test_primitives_pass_through(self, noise: NoiseField) -> None:
        frame = LocalFrame(Point(0, 0), 0.0, 10)
        shapes = [Circle(0, 0, 3), Polygon(0, 0, 3, 5)]
        out = apply_local_modifiers(shapes, [ModifierSpec(type=ModifierType.SHEAR, amount=1)], frame, noise)
        assert out == shapes

    def test_closed_paths_stay_closed(self, noise: NoiseField) -> None:
        frame = LocalFrame(Point(0, 0), 0.3, 10)
        ring = Circle(5, 0, 4).expand(16)
        mods = [ModifierSpec(type=ModifierType.NOISE, amount=2, scale=0.3)]
        out = apply_local_modifiers([ring], mods, frame, noise)
        assert out[0].points[0] == out[0].points[-1]
