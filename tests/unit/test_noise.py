"""Tests for the seeded random source and the noise field."""

import math

import pytest

from plotweave.config import NoiseLayerSpec, NoiseType, TileMode
from plotweave.config.specs import ApplyMode, BlendMode
from plotweave.core.image import ImageStore, RasterImage
from plotweave.core.noise import LayerValue, NoiseField, SimplexNoise, apply_tile, blend_values
from plotweave.core.rng import DEFAULT_SEED, SeededRng
from plotweave.domain import Bounds


class TestSeededRng:
    """Tests for the linear congruential generator."""

    def test_first_draw_matches_lcg(self) -> None:
        rng = SeededRng(1)
        assert rng.next_int() == (1103515245 * 1 + 12345) % 2**31

    def test_same_seed_same_sequence(self) -> None:
        a = SeededRng(99)
        b = SeededRng(99)
        assert [a.next_float() for _ in range(50)] == [b.next_float() for _ in range(50)]

    def test_different_seeds_differ(self) -> None:
        a = SeededRng(1)
        b = SeededRng(2)
        assert [a.next_int() for _ in range(5)] != [b.next_int() for _ in range(5)]

    @pytest.mark.parametrize("seed", [0, None])
    def test_zero_seed_uses_default(self, seed) -> None:
        assert SeededRng(seed).state == DEFAULT_SEED

    def test_float_range(self) -> None:
        rng = SeededRng(7)
        for _ in range(1000):
            value = rng.next_float()
            assert 0.0 <= value < 1.0

    def test_next_range(self) -> None:
        rng = SeededRng(7)
        for _ in range(200):
            assert -3.0 <= rng.next_range(-3.0, 5.0) < 5.0


class TestSimplexNoise:
    """Tests for base simplex noise."""

    def test_deterministic(self) -> None:
        a = SimplexNoise(5)
        b = SimplexNoise(5)
        assert a.noise2d(1.3, -4.2) == b.noise2d(1.3, -4.2)

    def test_seed_changes_field(self) -> None:
        a = SimplexNoise(5)
        b = SimplexNoise(6)
        samples = [(i * 0.37, i * 0.91) for i in range(20)]
        assert [a.noise2d(x, y) for x, y in samples] != [b.noise2d(x, y) for x, y in samples]

    def test_range(self) -> None:
        noise = SimplexNoise(3)
        for i in range(2000):
            value = noise.noise2d(i * 0.137, i * 0.071 - 40)
            assert -1.0 <= value <= 1.0


class TestNoiseShapes:
    """Every shape stays finite and inside [-1, 1] after layer sampling."""

    @pytest.mark.parametrize("kind", list(NoiseType))
    def test_shape_range(self, kind: NoiseType) -> None:
        field = NoiseField.from_seed(11)
        bounds = Bounds(200, 200)
        layer = NoiseLayerSpec(type=kind, zoom=0.05)
        stack = field.stack([layer], bounds)
        for i in range(400):
            x = (i * 37) % 200
            y = (i * 53) % 200
            value = stack.combine_normalized(x, y)
            assert math.isfinite(value)
            assert -1.0 <= value <= 1.0

    def test_fbm_is_normalized(self) -> None:
        field = NoiseField.from_seed(2)
        for i in range(500):
            assert -1.0 <= field.fbm(i * 0.21, i * 0.13, octaves=6) <= 1.0

    def test_checker_is_binary(self) -> None:
        field = NoiseField.from_seed(2)
        layer = NoiseLayerSpec(type=NoiseType.CHECKER)
        assert {field.shape(layer, i * 0.1, i * 0.3) for i in range(50)} <= {-1.0, 1.0}

    def test_image_layer_without_image_falls_back(self) -> None:
        field = NoiseField.from_seed(4)
        bounds = Bounds(100, 100, margin=20)
        missing = NoiseLayerSpec(type=NoiseType.IMAGE, image_id="nope")
        # Unknown ids sample plain noise in the image frame (zoom 0.02 * 50 = 1)
        expected = field.noise2d((30 - 20) / 60 - 0.5, (40 - 20) / 60 - 0.5)
        assert field.sample_layer(missing, 30, 40, bounds) == pytest.approx(expected)

    def test_image_layer_uses_raster(self) -> None:
        white = RasterImage.from_luminance(2, 2, [1.0, 1.0, 1.0, 1.0])
        black = RasterImage.from_luminance(2, 2, [0.0, 0.0, 0.0, 0.0])
        bounds = Bounds(100, 100)
        layer = NoiseLayerSpec(type=NoiseType.IMAGE, image_id="img")
        light = NoiseField.from_seed(4, ImageStore({"img": white})).sample_layer(layer, 50, 50, bounds)
        dark = NoiseField.from_seed(4, ImageStore({"img": black})).sample_layer(layer, 50, 50, bounds)
        # White has zero impact, black is fully dark
        assert light == pytest.approx(0.0)
        assert dark == pytest.approx(-1.0)


class TestTiling:
    """Tests for domain tiling."""

    def test_off_is_identity(self) -> None:
        assert apply_tile(3.7, -1.2, TileMode.OFF) == (3.7, -1.2)

    @pytest.mark.parametrize(
        "mode",
        [m for m in TileMode if m not in (TileMode.OFF, TileMode.RADIAL, TileMode.SPIRAL)],
    )
    def test_cell_modes_fold_into_unit_square(self, mode: TileMode) -> None:
        for i in range(100):
            x, y = apply_tile(i * 0.77 - 30, i * 0.31 - 10, mode, 0.1)
            assert 0.0 <= x <= 1.0
            assert 0.0 <= y <= 1.0

    def test_grid_repeats(self) -> None:
        a = apply_tile(0.25, 0.75, TileMode.GRID)
        b = apply_tile(3.25, -4.25, TileMode.GRID)
        assert a == pytest.approx(b)


class TestLayerBlending:
    """Tests for blend_values and LayerStack."""

    def test_empty_is_zero(self) -> None:
        assert blend_values([], 1.0) == 0.0

    def test_first_value_seeds_combination(self) -> None:
        values = [LayerValue(BlendMode.MULTIPLY, 0.5), LayerValue(BlendMode.MULTIPLY, 0.5)]
        assert blend_values(values, 2.0) == pytest.approx(0.25)

    def test_basic_blends(self) -> None:
        base = LayerValue(BlendMode.ADD, 0.4)
        assert blend_values([base, LayerValue(BlendMode.ADD, 0.2)], 1) == pytest.approx(0.6)
        assert blend_values([base, LayerValue(BlendMode.SUBTRACT, 0.2)], 1) == pytest.approx(0.2)
        assert blend_values([base, LayerValue(BlendMode.MIN, -0.3)], 1) == pytest.approx(-0.3)
        assert blend_values([base, LayerValue(BlendMode.MAX, 0.9)], 1) == pytest.approx(0.9)

    def test_hatch_dark_bias(self) -> None:
        base = LayerValue(BlendMode.ADD, 0.0)
        # tone 0.5, weight 0.5, positive bias 0.6
        combined = blend_values([base, LayerValue(BlendMode.HATCH_DARK, 1.0)], 1.0)
        assert combined == pytest.approx(0.3)

    def test_disabled_layers_are_skipped(self, noise: NoiseField) -> None:
        bounds = Bounds(100, 100)
        stack = noise.stack([NoiseLayerSpec(enabled=False)], bounds)
        assert not stack
        assert stack.combine(10, 10) == 0.0

    def test_amplitude_scales_value(self, noise: NoiseField) -> None:
        bounds = Bounds(100, 100)
        one = noise.stack([NoiseLayerSpec(amplitude=1.0)], bounds).combine(33, 12)
        three = noise.stack([NoiseLayerSpec(amplitude=3.0)], bounds).combine(33, 12)
        assert three == pytest.approx(one * 3)

    def test_linear_mode_samples_path_frame(self, noise: NoiseField) -> None:
        bounds = Bounds(100, 100)
        stack = noise.stack([NoiseLayerSpec(apply_mode=ApplyMode.LINEAR, zoom=0.05)], bounds)
        # Canvas position is ignored when the path frame is given
        assert stack.combine(10, 10, 0.3, 0.6) == stack.combine(80, 5, 0.3, 0.6)
