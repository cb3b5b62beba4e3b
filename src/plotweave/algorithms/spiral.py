"""Archimedean spiral with pulse and layered noise."""

import math

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import SpiralParams
from plotweave.config.specs import NoiseLayerSpec, NoiseType
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, GenerationResult, Point, Polyline


class SpiralAlgorithm(Algorithm[SpiralParams]):
    """One spiral growing linearly from ``start_r`` to the inner half-extent.

    ``res`` is the number of steps per loop, or per quarter turn when
    ``axis_snap`` is set so that samples land on the axes. The radius is
    scaled by ``1 + sin(θ * pulse_freq) * pulse_amp`` and offset by the
    blended noise value. Layers in ``apply_mode`` linear are sampled along
    the spiral (progress, radius / max radius) rather than in canvas space.
    """

    id = "spiral"
    label = "Spiral"
    description = "Noise-modulated Archimedean spiral"
    params_model = SpiralParams

    def generate(
        self, params: SpiralParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        center = bounds.center
        max_r = min(bounds.inner_width, bounds.inner_height) / 2
        steps_per = max(1, p.res)
        d_theta = (math.pi / 2 if p.axis_snap else math.tau) / steps_per
        total = max(1, int(math.tau * p.loops / d_theta))
        dr = (max_r - p.start_r) / total

        fallback = NoiseLayerSpec(type=NoiseType.TURBULENCE, amplitude=p.noise_amp, zoom=p.noise_freq)
        stack = noise.stack(p.noise_layers(fallback), bounds)
        radius_norm = max_r or 1.0

        points = []
        theta = math.radians(p.angle_offset)
        r = p.start_r
        for i in range(total + 1):
            t = i / total
            pulse = 1 + math.sin(theta * p.pulse_freq) * p.pulse_amp
            px = center.x + math.cos(theta) * r
            py = center.y + math.sin(theta) * r
            offset = stack.combine(px, py, t, r / radius_norm) if stack else 0.0
            r_mod = r * pulse + offset
            points.append(Point(center.x + math.cos(theta) * r_mod, center.y + math.sin(theta) * r_mod))
            theta += d_theta
            r += dr
        return result([Polyline(points)])

    def formula(self, params: SpiralParams) -> str:
        return "r = r + (noise(θ) * amp)\nx = cos(θ)*r, y = sin(θ)*r"
