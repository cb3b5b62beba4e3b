"""Concentric rings displaced by layered noise."""

import math

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import RingsParams
from plotweave.config.specs import NoiseLayerSpec
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, GenerationResult, Point, Polyline

MIN_RING_STEPS = 64
MIN_RADIUS = 0.1


class RingsAlgorithm(Algorithm[RingsParams]):
    """Closed rings whose radius is pushed in and out by noise.

    Ring ``i`` samples the noise stack around a circle of ``noise_radius``
    in noise space, shifted by ``i * noise_layer`` so neighbouring rings
    drift apart. Without explicit ``noises`` a single layer is built from
    ``noise_type``, ``noise_scale`` and ``amplitude``.
    """

    id = "rings"
    label = "Rings"
    description = "Concentric noise-displaced rings"
    params_model = RingsParams

    def generate(
        self, params: RingsParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        cx = bounds.width / 2 + p.offset_x
        cy = bounds.height / 2 + p.offset_y
        max_r = max(1.0, min(bounds.width, bounds.height) / 2 - bounds.inset)
        gap = (max_r / (p.rings - 1) if p.rings > 1 else max_r) * p.gap
        start_r = max(0.0, max_r - gap * (p.rings - 1))

        fallback = NoiseLayerSpec(type=p.noise_type, zoom=p.noise_scale, amplitude=p.amplitude)
        stack = noise.stack(p.noise_layers(fallback), bounds)
        layer_step = p.noise_layer / p.noise_scale

        paths = []
        for i in range(p.rings):
            r_base = max(MIN_RADIUS, start_r + i * gap)
            steps = max(MIN_RING_STEPS, int(r_base * 2))
            shift = i * layer_step
            points = []
            for k in range(steps + 1):
                t = k / steps * math.tau
                nx = p.noise_offset_x + math.cos(t) * p.noise_radius + shift
                ny = p.noise_offset_y + math.sin(t) * p.noise_radius + shift
                r = max(MIN_RADIUS, r_base + stack.combine(nx, ny))
                points.append(Point(cx + math.cos(t) * r, cy + math.sin(t) * r))
            points[-1] = points[0]
            paths.append(Polyline(points))
        return result(paths)

    def formula(self, params: RingsParams) -> str:
        p = params
        return (
            f"n_x = cosθ * {p.noise_radius}, n_y = sinθ * {p.noise_radius}\n"
            f"noise = noise((n_x+{p.noise_offset_x})*{p.noise_scale}, "
            f"(n_y+{p.noise_offset_y})*{p.noise_scale} + i*{p.noise_layer})\n"
            f"r = r0 + {p.amplitude} * noise"
        )
