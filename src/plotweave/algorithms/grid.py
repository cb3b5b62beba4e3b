"""Noise-warped lattice."""

import math

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import GridParams, GridType
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, GenerationResult, Point, Polyline


class GridAlgorithm(Algorithm[GridParams]):
    """Row lines then column lines through a displaced lattice.

    ``warp`` pushes each node along the heading ``noise * π``; ``shift``
    only moves nodes vertically. ``chaos`` adds uniform jitter, drawn per
    node in emission order.
    """

    id = "grid"
    label = "Grid"
    description = "Warped or shifted lattice"
    params_model = GridParams

    def _node(self, p: GridParams, rng: SeededRng, noise: NoiseField, x: float, y: float) -> Point:
        n = noise.noise2d(x * p.noise_scale, y * p.noise_scale)
        if p.type is GridType.WARP:
            x += math.cos(n * math.pi) * p.distortion
            y += math.sin(n * math.pi) * p.distortion
        else:
            y += n * p.distortion
        x += (rng.next_float() - 0.5) * p.chaos
        y += (rng.next_float() - 0.5) * p.chaos
        return Point(x, y)

    def generate(
        self, params: GridParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        m = bounds.margin
        col_w = bounds.inner_width / p.cols
        row_h = bounds.inner_height / p.rows
        paths = []
        for r in range(p.rows + 1):
            paths.append(
                Polyline([self._node(p, rng, noise, m + c * col_w, m + r * row_h) for c in range(p.cols + 1)])
            )
        for c in range(p.cols + 1):
            paths.append(
                Polyline([self._node(p, rng, noise, m + c * col_w, m + r * row_h) for r in range(p.rows + 1)])
            )
        return result(paths)

    def formula(self, params: GridParams) -> str:
        return "pos += noise(x,y) * distortion"
