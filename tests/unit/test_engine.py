"""Tests for the generation engine and the layer transform."""

import math

import pytest

from plotweave.algorithms import AlgorithmRegistry
from plotweave.config import KernelSettings, RenderConfig, SimplifyMethod
from plotweave.core.engine import GenerationEngine, LayerTransform, transform_path
from plotweave.domain import Bounds, Circle, Point, Polygon, Polyline
from plotweave.exceptions import DegenerateGeometryError, UnknownAlgorithmError

CENTER = Point(200, 200)

LISSAJOUS = {"freqX": 3, "freqY": 2, "phase": 0, "damping": 0, "resolution": 100}


@pytest.fixture
def engine(registry: AlgorithmRegistry) -> GenerationEngine:
    return GenerationEngine(registry)


class TestLayerTransform:
    """Tests for LayerTransform and transform_path."""

    def test_identity(self) -> None:
        transform = LayerTransform(CENTER)
        line = Polyline([Point(1, 2), Point(3, 4)])
        assert transform.is_identity
        assert transform_path(line, transform) is line

    def test_scale_about_center(self) -> None:
        transform = LayerTransform(CENTER, scale_x=2, scale_y=0.5)
        assert transform.point(Point(210, 220)) == Point(220, 210)

    def test_rotation_then_translation(self) -> None:
        transform = LayerTransform(CENTER, rotation=90, pos_x=5)
        moved = transform.point(Point(210, 200))
        assert moved.x == pytest.approx(205)
        assert moved.y == pytest.approx(210)

    def test_circle_keeps_shorthand(self) -> None:
        transform = LayerTransform(CENTER, scale_x=2, scale_y=3, pos_y=10)
        circle = transform_path(Circle(210, 200, 5, group="dot"), transform)
        assert isinstance(circle, Circle)
        assert (circle.cx, circle.cy) == (220, 210)
        assert (circle.rx, circle.ry) == (10, 15)
        assert circle.group == "dot"

    def test_rotated_ellipse_under_non_uniform_scale_is_expanded(self) -> None:
        transform = LayerTransform(CENTER, scale_x=2, scale_y=1)
        ellipse = Circle(200, 200, 5, rotation=0.5)
        out = transform_path(ellipse, transform, segments=16)
        assert isinstance(out, Polyline)
        assert len(out.points) == 17

    def test_polygon_uniform_scale(self) -> None:
        transform = LayerTransform(CENTER, scale_x=2, scale_y=2, rotation=30)
        out = transform_path(Polygon(200, 200, 4, 6), transform)
        assert isinstance(out, Polygon)
        assert out.r == 8
        assert out.rotation == pytest.approx(math.radians(30))

    def test_polygon_mirrored_is_expanded(self) -> None:
        transform = LayerTransform(CENTER, scale_x=-1, scale_y=-1)
        out = transform_path(Polygon(210, 200, 4, 5), transform)
        assert isinstance(out, Polyline)
        assert len(out.points) == 6


class TestGenerationEngine:
    """Tests for GenerationEngine.generate."""

    def test_matches_raw_generator_without_transform(self, engine: GenerationEngine, bounds: Bounds) -> None:
        out = engine.generate("lissajous", LISSAJOUS, bounds)
        assert len(out.paths) == 1
        assert len(out.paths[0].points) == 100

    def test_default_bounds(self, engine: GenerationEngine) -> None:
        out = engine.generate("lissajous", LISSAJOUS)
        assert out.paths[0].points[0] == Point(200, 200)

    def test_translation_applies_to_every_point(self, engine: GenerationEngine, bounds: Bounds) -> None:
        plain = engine.generate("lissajous", LISSAJOUS, bounds)
        moved = engine.generate("lissajous", {**LISSAJOUS, "posX": 15, "posY": -5}, bounds)
        for a, b in zip(plain.paths[0].points, moved.paths[0].points):
            assert b.x == pytest.approx(a.x + 15)
            assert b.y == pytest.approx(a.y - 5)

    def test_helpers_are_transformed(self, engine: GenerationEngine, bounds: Bounds) -> None:
        params = {"samples": 200, "showPendulumGuides": True}
        plain = engine.generate("harmonograph", params, bounds)
        moved = engine.generate("harmonograph", {**params, "posX": 10}, bounds)
        assert len(moved.helpers) == len(plain.helpers) > 0
        assert moved.helpers[0].points[0].x == pytest.approx(plain.helpers[0].points[0].x + 10)

    def test_simplify_reduces_points(self, engine: GenerationEngine, bounds: Bounds) -> None:
        params = {**LISSAJOUS, "resolution": 2000}
        plain = engine.generate("lissajous", params, bounds)
        simple = engine.generate("lissajous", {**params, "simplify": 2}, bounds)
        assert len(simple.paths[0].points) < len(plain.paths[0].points)

    def test_smoothing_keeps_endpoints(self, engine: GenerationEngine, bounds: Bounds) -> None:
        plain = engine.generate("lissajous", LISSAJOUS, bounds)
        smooth = engine.generate("lissajous", {**LISSAJOUS, "smoothing": 0.8}, bounds)
        assert smooth.paths[0].points[0] == plain.paths[0].points[0]
        assert smooth.paths[0].points[-1] == plain.paths[0].points[-1]
        assert smooth.paths[0].points[1:-1] != plain.paths[0].points[1:-1]

    def test_settings_supply_default_post_processing(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        settings = KernelSettings(render=RenderConfig(simplify=2, simplify_method=SimplifyMethod.VISVALINGAM))
        engine = GenerationEngine(registry, settings)
        params = {**LISSAJOUS, "resolution": 2000}
        default = GenerationEngine(registry).generate("lissajous", params, bounds)
        simple = engine.generate("lissajous", params, bounds)
        assert len(simple.paths[0].points) < len(default.paths[0].points)

    def test_primitives_are_not_simplified(self, engine: GenerationEngine, bounds: Bounds) -> None:
        out = engine.generate("phylla", {"count": 20, "simplify": 5, "smoothing": 1}, bounds)
        assert out.paths
        assert all(isinstance(p, Circle) for p in out.paths)

    def test_unknown_algorithm(self, engine: GenerationEngine, bounds: Bounds) -> None:
        with pytest.raises(UnknownAlgorithmError):
            engine.generate("nope", {}, bounds)
        assert engine.stats.error_count == 1

    @pytest.mark.parametrize("size", [(0, 400), (400, -1)])
    def test_degenerate_canvas(self, engine: GenerationEngine, size) -> None:
        with pytest.raises(DegenerateGeometryError):
            engine.generate("lissajous", {}, Bounds(*size))

    def test_stats(self, engine: GenerationEngine, bounds: Bounds) -> None:
        engine.generate("lissajous", LISSAJOUS, bounds)
        engine.generate("grid", {"rows": 2, "cols": 2}, bounds)
        stats = engine.stats
        assert stats.generated_count == 2
        assert stats.path_count == 1 + 6
        assert stats.point_count == 100 + 18
        assert stats.start_time is not None
        assert stats.end_time is not None

    def test_formula(self, engine: GenerationEngine) -> None:
        assert "sin(3.0t + 0.0)" in engine.formula("lissajous", LISSAJOUS)
