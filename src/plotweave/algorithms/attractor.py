"""Chaotic attractor traces."""

import math

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import AttractorParams, AttractorType
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, GenerationResult, Point, Polyline


def lorenz(x: float, y: float, z: float, p: AttractorParams) -> tuple[float, float, float]:
    return p.sigma * (y - x), x * (p.rho - z) - y, x * y - p.beta * z


def aizawa(x: float, y: float, z: float, p: AttractorParams) -> tuple[float, float, float]:
    dx = (z - 0.7) * x - 3.5 * y
    dy = 3.5 * x + (z - 0.7) * y
    dz = 0.6 + 0.95 * z - z**3 / 3 - (x * x + y * y) * (1 + 0.25 * z) + 0.1 * z * x**3
    return dx, dy, dz


class AttractorAlgorithm(Algorithm[AttractorParams]):
    """Euler-integrated Lorenz or Aizawa system projected onto x/y.

    Integration stops early if the state diverges to a non-finite value.
    """

    id = "attractor"
    label = "Attractor"
    description = "Lorenz / Aizawa strange attractor"
    params_model = AttractorParams

    def generate(
        self, params: AttractorParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        step = lorenz if p.type is AttractorType.LORENZ else aizawa
        x = rng.next_range(-0.5, 0.5)
        y = rng.next_range(-0.5, 0.5)
        z = rng.next_range(-0.5, 0.5)
        cx = bounds.width / 2
        cy = bounds.height / 2
        points = []
        for _ in range(p.iter):
            dx, dy, dz = step(x, y, z, p)
            x += dx * p.dt
            y += dy * p.dt
            z += dz * p.dt
            if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(z)):
                break
            points.append(Point(cx + x * p.scale, cy + y * p.scale))
        return result([Polyline(points)] if len(points) >= 2 else [])

    def formula(self, params: AttractorParams) -> str:
        if params.type is AttractorType.AIZAWA:
            return "dx = (z - 0.7)x - 3.5y\ndy = 3.5x + (z - 0.7)y\ndz = 0.6 + 0.95z - z³/3 - (x² + y²)(1 + 0.25z) + 0.1zx³"
        return f"dx = {params.sigma}(y - x)\ndy = x({params.rho} - z) - y\ndz = xy - {params.beta}z"
