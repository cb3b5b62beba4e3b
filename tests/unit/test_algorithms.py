"""Tests for the algorithm catalog and individual generators."""

import math

import pytest

from plotweave.algorithms import DEFAULT_ALGORITHMS, AlgorithmRegistry, build_default_registry
from plotweave.algorithms.lissajous import LissajousAlgorithm
from plotweave.algorithms.petalis import profile_function
from plotweave.config.params import PetalProfile, RingMode
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, Circle, Point, Polygon, Polyline
from plotweave.exceptions import DuplicateAlgorithmError, UnknownAlgorithmError

ALGORITHM_IDS = [cls.id for cls in DEFAULT_ALGORITHMS]


def run(registry: AlgorithmRegistry, algorithm_id: str, params: dict, bounds: Bounds, seed: int = 7):
    algorithm = registry.get(algorithm_id)
    resolved = algorithm.resolve_params({**params, "seed": seed})
    return algorithm.generate(resolved, SeededRng(seed), NoiseField.from_seed(seed), bounds)


def all_points(paths):
    for path in paths:
        if isinstance(path, Polyline):
            yield from path.points
        else:
            yield Point(path.cx, path.cy)


class TestRegistry:
    """Tests for AlgorithmRegistry."""

    def test_catalog_ids(self, registry: AlgorithmRegistry) -> None:
        assert len(registry) == 15
        assert registry.ids() == sorted(ALGORITHM_IDS)
        assert "petalisDesigner" in registry

    def test_unknown_id(self, registry: AlgorithmRegistry) -> None:
        with pytest.raises(UnknownAlgorithmError) as exc_info:
            registry.get("doesNotExist")
        assert exc_info.value.algorithm_id == "doesNotExist"
        assert "lissajous" in exc_info.value.known

    def test_duplicate_registration(self) -> None:
        registry = AlgorithmRegistry([LissajousAlgorithm()])
        with pytest.raises(DuplicateAlgorithmError):
            registry.register(LissajousAlgorithm())

    def test_registries_are_independent(self) -> None:
        a = build_default_registry()
        b = build_default_registry()
        assert a.get("grid") is not b.get("grid")


@pytest.mark.parametrize("algorithm_id", ALGORITHM_IDS)
class TestEveryAlgorithm:
    """Contract checks run against every registered algorithm."""

    def test_deterministic(
        self, registry: AlgorithmRegistry, small_bounds: Bounds, fast_params: dict, algorithm_id: str
    ) -> None:
        a = run(registry, algorithm_id, fast_params[algorithm_id], small_bounds)
        b = run(registry, algorithm_id, fast_params[algorithm_id], small_bounds)
        assert a.to_dict() == b.to_dict()

    def test_points_are_finite(
        self, registry: AlgorithmRegistry, small_bounds: Bounds, fast_params: dict, algorithm_id: str
    ) -> None:
        out = run(registry, algorithm_id, fast_params[algorithm_id], small_bounds)
        for pt in all_points([*out.paths, *out.helpers]):
            assert math.isfinite(pt.x)
            assert math.isfinite(pt.y)

    def test_polylines_have_two_points(
        self, registry: AlgorithmRegistry, small_bounds: Bounds, fast_params: dict, algorithm_id: str
    ) -> None:
        out = run(registry, algorithm_id, fast_params[algorithm_id], small_bounds)
        for path in out.paths:
            if isinstance(path, Polyline):
                assert len(path.points) >= 2

    def test_formula(self, registry: AlgorithmRegistry, algorithm_id: str) -> None:
        algorithm = registry.get(algorithm_id)
        text = algorithm.formula(algorithm.resolve_params({}))
        assert isinstance(text, str)
        assert text.strip()

    def test_empty_params_resolve(self, registry: AlgorithmRegistry, algorithm_id: str) -> None:
        algorithm = registry.get(algorithm_id)
        assert algorithm.resolve_params(None) == algorithm.resolve_params({})


class TestLissajous:
    """Tests for the Lissajous generator."""

    def test_undamped_open_curve(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        params = {"freqX": 3, "freqY": 2, "phase": 0, "damping": 0, "closeLines": False, "resolution": 100}
        out = run(registry, "lissajous", params, bounds)
        assert len(out.paths) == 1
        line = out.paths[0]
        assert len(line.points) == 100
        assert line.points[0] == Point(200, 200)
        for pt in line.points:
            assert 40 - 1e-9 <= pt.x <= 360 + 1e-9
            assert 40 - 1e-9 <= pt.y <= 360 + 1e-9

    def test_heavy_damping_stops_early(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        out = run(registry, "lissajous", {"damping": 0.5, "resolution": 1000}, bounds)
        assert len(out.paths[0].points) < 1000

    def test_close_lines_ends_on_curve(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        params = {"freqX": 3, "freqY": 2, "damping": 0, "closeLines": True, "resolution": 400}
        out = run(registry, "lissajous", params, bounds)
        assert len(out.paths[0].points) < 400


class TestHyphae:
    """Tests for the hyphae generator."""

    def test_straight_growth_from_center(self, registry: AlgorithmRegistry, small_bounds: Bounds) -> None:
        params = {"sources": 1, "steps": 50, "branchProb": 0, "segLen": 5, "angleVar": 0, "origin": "center"}
        out = run(registry, "hyphae", params, small_bounds)
        assert len(out.paths) == 1
        pts = out.paths[0].points
        assert pts[0] == Point(100, 100)
        for a, b, c in zip(pts, pts[1:], pts[2:]):
            cross = (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)
            assert cross == pytest.approx(0.0, abs=1e-6)
        for a, b in zip(pts, pts[1:]):
            assert math.hypot(b.x - a.x, b.y - a.y) == pytest.approx(5.0)

    def test_branch_cap(self, registry: AlgorithmRegistry, small_bounds: Bounds) -> None:
        params = {"sources": 3, "steps": 200, "branchProb": 1, "maxBranches": 10, "origin": "center"}
        out = run(registry, "hyphae", params, small_bounds)
        assert len(out.paths) <= 10


class TestPlacementGenerators:
    """Tests for phylla, shape pack and grid."""

    def test_phylla_circles_inside_margin(self, registry: AlgorithmRegistry, small_bounds: Bounds) -> None:
        out = run(registry, "phylla", {"count": 200, "spacing": 4}, small_bounds)
        assert out.paths
        for path in out.paths:
            assert isinstance(path, Circle)
            assert 20 < path.cx < 180
            assert 20 < path.cy < 180

    def test_phylla_polygons(self, registry: AlgorithmRegistry, small_bounds: Bounds) -> None:
        out = run(registry, "phylla", {"count": 30, "shapeType": "polygon", "sides": 5}, small_bounds)
        assert all(isinstance(p, Polygon) and p.sides == 5 for p in out.paths)

    def test_shape_pack_no_overlap(self, registry: AlgorithmRegistry, small_bounds: Bounds) -> None:
        params = {"count": 25, "minR": 3, "maxR": 12, "padding": 1, "attempts": 200}
        circles = run(registry, "shapePack", params, small_bounds).paths
        assert circles
        for i, a in enumerate(circles):
            for b in circles[i + 1 :]:
                gap = math.hypot(a.cx - b.cx, a.cy - b.cy) - a.r - b.r
                assert gap >= 1 - 0.01 - 1e-9

    def test_shape_pack_perspective_emits_polylines(self, registry: AlgorithmRegistry, small_bounds: Bounds) -> None:
        params = {"count": 5, "attempts": 50, "perspectiveType": "radial", "perspective": 0.5}
        out = run(registry, "shapePack", params, small_bounds)
        assert all(isinstance(p, Polyline) and p.is_closed() for p in out.paths)

    def test_grid_lattice(self, registry: AlgorithmRegistry, small_bounds: Bounds) -> None:
        out = run(registry, "grid", {"rows": 2, "cols": 3, "distortion": 0, "chaos": 0}, small_bounds)
        assert len(out.paths) == 3 + 4
        assert [len(p.points) for p in out.paths] == [4, 4, 4, 3, 3, 3, 3]
        assert out.paths[0].points[0] == Point(20, 20)
        corner = out.paths[-1].points[-1]
        assert (corner.x, corner.y) == pytest.approx((180, 180))


class TestCurveGenerators:
    """Tests for attractor, harmonograph, rings, spiral and topo."""

    def test_attractor_single_trace(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        out = run(registry, "attractor", {"iter": 300}, bounds)
        assert len(out.paths) == 1
        assert len(out.paths[0].points) == 300

    def test_harmonograph_thickening_and_guides(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        params = {"samples": 300, "widthMultiplier": 3, "showPendulumGuides": True}
        out = run(registry, "harmonograph", params, bounds)
        assert len(out.paths) == 3
        assert len(out.helpers) == 3

    def test_harmonograph_point_mode(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        out = run(registry, "harmonograph", {"samples": 300, "renderMode": "points"}, bounds)
        assert out.paths
        assert all(isinstance(p, Circle) for p in out.paths)

    def test_harmonograph_without_pendulums(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        params = {"pendulums": [{"enabled": False}]}
        assert run(registry, "harmonograph", params, bounds).paths == []

    def test_harmonograph_empty_pendulum_list_uses_flat_params(
        self, registry: AlgorithmRegistry, bounds: Bounds
    ) -> None:
        out = run(registry, "harmonograph", {"samples": 300, "pendulums": [], "ampX1": 50, "freq1": 2}, bounds)
        assert len(out.paths) == 1
        xs = [p.x for p in out.paths[0].points]
        assert max(xs) - min(xs) > 10
        assert run(registry, "harmonograph", {"samples": 300, "pendulums": []}, bounds).paths

    def test_harmonograph_settles_early(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        # radius is exactly 100 * exp(-10 t), below 1 after t = 0.46
        pendulum = {"ampX": 100, "ampY": 100, "phaseY": 90, "freq": 1, "damp": 10}
        params = {"samples": 1000, "pendulums": [pendulum], "settleThreshold": 1, "settleWindow": 24}
        points = run(registry, "harmonograph", params, bounds).paths[0].points
        assert 24 <= len(points) < 1001

    def test_harmonograph_without_settling_runs_full_length(
        self, registry: AlgorithmRegistry, bounds: Bounds
    ) -> None:
        pendulum = {"ampX": 100, "ampY": 100, "phaseY": 90, "freq": 1, "damp": 10}
        params = {"samples": 1000, "pendulums": [pendulum], "settleThreshold": 0}
        assert len(run(registry, "harmonograph", params, bounds).paths[0].points) == 1001

    def test_harmonograph_undamped_never_settles(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        pendulum = {"ampX": 100, "ampY": 100, "phaseY": 90, "freq": 1, "damp": 0}
        params = {"samples": 1000, "pendulums": [pendulum], "settleThreshold": 1}
        assert len(run(registry, "harmonograph", params, bounds).paths[0].points) == 1001

    def test_rings_are_closed(self, registry: AlgorithmRegistry, small_bounds: Bounds) -> None:
        out = run(registry, "rings", {"rings": 5}, small_bounds)
        assert len(out.paths) == 5
        for ring in out.paths:
            assert ring.points[0] == ring.points[-1]

    def test_spiral_without_noise_grows_outward(self, registry: AlgorithmRegistry, small_bounds: Bounds) -> None:
        params = {"loops": 4, "res": 40, "startR": 5, "noiseAmp": 0}
        pts = run(registry, "spiral", params, small_bounds).paths[0].points
        radii = [math.hypot(p.x - 100, p.y - 100) for p in pts]
        assert radii[0] == pytest.approx(5.0)
        assert radii[-1] == pytest.approx(80.0)
        assert all(b >= a - 1e-9 for a, b in zip(radii, radii[1:]))

    def test_topo_levels_inside_canvas(self, registry: AlgorithmRegistry, small_bounds: Bounds) -> None:
        out = run(registry, "topo", {"resolution": 30, "levels": 5}, small_bounds)
        assert out.paths
        for pt in all_points(out.paths):
            assert 20 - 1e-6 <= pt.x <= 180 + 1e-6
            assert 20 - 1e-6 <= pt.y <= 180 + 1e-6

    def test_topo_gradient_mode_stays_on_contours(self, registry: AlgorithmRegistry, small_bounds: Bounds) -> None:
        params = {"resolution": 30, "levels": 4}
        marching = run(registry, "topo", params, small_bounds)
        gradient = run(registry, "topo", {**params, "mappingMode": "gradient"}, small_bounds)
        assert gradient.paths
        assert {p.group for p in gradient.paths} == {p.group for p in marching.paths}
        # Marching points already sit on the sampled isoline, so refinement
        # moves them by far less than a cell (160 / 30 units)
        reference = list(all_points(marching.paths))
        for pt in all_points(gradient.paths):
            nearest = min(math.hypot(pt.x - q.x, pt.y - q.y) for q in reference)
            assert nearest < 1.0


class TestPetalis:
    """Tests for petal compositions."""

    @pytest.mark.parametrize("kind", [k for k in PetalProfile if k is not PetalProfile.DESIGNER])
    def test_profiles_close_at_ends(self, kind: PetalProfile) -> None:
        width = profile_function(kind)
        assert width(0.0) == pytest.approx(0.0, abs=1e-9)
        assert width(1.0) == pytest.approx(0.0, abs=1e-9)
        assert width(0.5) > 0

    def test_designer_profile_fallback(self) -> None:
        width = profile_function(PetalProfile.DESIGNER, [1.0])
        assert width(0.5) == pytest.approx(1.0)

    def test_petals_are_closed_outlines(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        out = run(registry, "petalis", {"count": 12, "petalSteps": 12, "centerType": "none"}, bounds)
        assert len(out.paths) == 12
        for petal in out.paths:
            assert petal.group == "petal"
            assert petal.points[0] == petal.points[-1]

    def test_inner_shading_and_center(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        params = {"count": 4, "petalSteps": 12, "innerShading": True, "innerDensity": 0.4}
        out = run(registry, "petalis", params, bounds)
        groups = [p.group for p in out.paths]
        assert groups.count("petal") == 4
        assert groups.count("shading") == 4 * 6
        assert groups[-1] == "center"

    def test_occlusion_keeps_first_petal(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        params = {"count": 20, "petalSteps": 12, "centerType": "none"}
        plain = run(registry, "petalis", params, bounds)
        occluded = run(registry, "petalis", {**params, "occlusion": True}, bounds)
        assert occluded.paths[0].points == plain.paths[0].points

    def test_designer_variant_forces_dual_rings(self, registry: AlgorithmRegistry, bounds: Bounds) -> None:
        algorithm = registry.get("petalisDesigner")
        params = algorithm.resolve_params({"ringMode": "single", "innerCount": 3, "outerCount": 4, "centerType": "none"})
        prepared = algorithm.prepare(params)
        assert prepared.ring_mode is RingMode.DUAL
        assert prepared.petal_profile is PetalProfile.DESIGNER
        assert "designer" in algorithm.formula(params)
        out = algorithm.generate(params, SeededRng(1), NoiseField.from_seed(1), bounds)
        assert len(out.paths) == 7
