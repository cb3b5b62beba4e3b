"""Topographic contour lines over a noise height field."""

import math

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import MappingMode, TopoParams
from plotweave.config.specs import NoiseLayerSpec
from plotweave.core.contour import ContourExtractor, ScalarField
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, GenerationResult, Polyline

# Chaikin passes per mapping mode.
SMOOTHING_PASSES = {
    MappingMode.MARCHING: 0,
    MappingMode.SMOOTH: 1,
    MappingMode.BEZIER: 2,
    MappingMode.GRADIENT: 0,
}


class TopoAlgorithm(Algorithm[TopoParams]):
    """Iso-lines of a shaped noise field sampled on a square grid.

    ``sensitivity`` bends the field as ``sign(v) * |v| ** (1 / sensitivity)``
    before contouring. ``mapping_mode`` picks raw marching squares, one or
    two Chaikin passes, or gradient refinement of every crossing point.
    """

    id = "topo"
    label = "Topo"
    description = "Marching-squares contour map"
    params_model = TopoParams

    def field(self, params: TopoParams, noise: NoiseField, bounds: Bounds) -> ScalarField:
        p = params
        layer = NoiseLayerSpec(type=p.noise_type, octaves=p.octaves, lacunarity=p.lacunarity, gain=p.gain)
        exponent = 1 / p.sensitivity

        def height(x: float, y: float) -> float:
            v = noise.shape(layer, (x + p.noise_offset_x) * p.noise_scale, (y + p.noise_offset_y) * p.noise_scale, x, y)
            return math.copysign(abs(v) ** exponent, v)

        inset = bounds.inset
        return ScalarField.from_function(
            height,
            inset,
            inset,
            bounds.width - inset * 2,
            bounds.height - inset * 2,
            p.resolution,
            p.resolution,
        )

    def generate(
        self, params: TopoParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        extractor = ContourExtractor(self.field(p, noise, bounds))
        levels = extractor.extract(
            p.levels,
            offset=p.threshold_offset,
            smoothing=SMOOTHING_PASSES[p.mapping_mode],
            refine=p.mapping_mode is MappingMode.GRADIENT,
        )
        paths = []
        for index, level in enumerate(levels):
            for points in level.paths:
                paths.append(Polyline(points, group=f"level-{index}"))
        return result(paths)

    def formula(self, params: TopoParams) -> str:
        return (
            f"field = noise(x*{params.noise_scale}, y*{params.noise_scale})\n"
            f"contours = marchingSquares(field, {params.levels})"
        )
