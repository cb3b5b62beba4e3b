"""Golden-angle phyllotaxis."""

import math

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import PhyllaParams, PhyllaShape
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, Circle, GenerationResult, Path, Polygon

NOISE_FREQUENCY = 0.05


class PhyllaAlgorithm(Algorithm[PhyllaParams]):
    """Seeds placed at ``r = spacing * sqrt(i)`` and a fixed divergence angle.

    Seeds outside the margin are skipped. Each seed is a circle or a polygon
    whose side count may jitter per seed.
    """

    id = "phylla"
    label = "Phyllotaxis"
    description = "Golden-angle seed head"
    params_model = PhyllaParams

    def generate(
        self, params: PhyllaParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        m = bounds.margin
        cx = bounds.width / 2
        cy = bounds.height / 2
        step = math.radians(p.angle_str)
        angle_offset = rng.next_float() * math.tau
        paths: list[Path] = []
        for i in range(p.count):
            r = p.spacing * math.sqrt(i) * p.divergence
            a = i * step + angle_offset
            x = cx + r * math.cos(a)
            y = cy + r * math.sin(a)
            n = noise.noise2d(x * NOISE_FREQUENCY, y * NOISE_FREQUENCY)
            x += n * p.noise_inf
            y += n * p.noise_inf
            if not (m < x < bounds.width - m and m < y < bounds.height - m):
                continue
            if p.shape_type is PhyllaShape.CIRCLE:
                paths.append(Circle(x, y, p.dot_size))
                continue
            jitter = round((rng.next_float() * 2 - 1) * p.side_jitter) if p.side_jitter else 0
            sides = max(3, min(100, p.sides + jitter))
            paths.append(Polygon(x, y, p.dot_size, sides))
        return result(paths)

    def formula(self, params: PhyllaParams) -> str:
        return f"θ = i * {params.angle_str}°, r = c√i\npos = [cos(θ)*r, sin(θ)*r]"
