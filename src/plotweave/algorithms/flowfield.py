"""Flow-following streamlines."""

import math

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import FlowfieldParams, FlowNoiseType
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, GenerationResult, Point, Polyline

CURL_EPSILON = 0.0005


def _shape(kind: FlowNoiseType, value: float, x: float, y: float) -> float:
    if kind is FlowNoiseType.RIDGED:
        return (1 - abs(value)) * 2 - 1
    if kind in (FlowNoiseType.BILLOW, FlowNoiseType.TURBULENCE):
        return abs(value) * 2 - 1
    if kind is FlowNoiseType.SWIRL:
        return math.sin(x * 2 + value * 2) * math.cos(y * 2 + value)
    if kind is FlowNoiseType.RADIAL:
        return math.sin(math.hypot(x, y) * 3 + value * 2)
    if kind is FlowNoiseType.CHECKER:
        return 1.0 if (math.floor(x * 4) + math.floor(y * 4)) % 2 == 0 else -1.0
    return value


class FlowfieldAlgorithm(Algorithm[FlowfieldParams]):
    """Particles stepping along a heading read from noise.

    Each particle starts at a random point inside the margin and advances
    ``step_len`` per step until it leaves the drawable area or runs out of
    steps. Lines shorter than ``min_steps`` points or ``min_length`` units
    are dropped.
    """

    id = "flowfield"
    label = "Flowfield"
    description = "Streamlines following a noise-derived heading field"
    params_model = FlowfieldParams

    def _sample(self, p: FlowfieldParams, noise: NoiseField, x: float, y: float) -> float:
        total = 0.0
        amp = 1.0
        freq = 1.0
        norm = 0.0
        for _ in range(p.octaves):
            nx = x * p.noise_scale * freq
            ny = y * p.noise_scale * freq
            total += _shape(p.noise_type, noise.noise2d(nx, ny), nx, ny) * amp
            norm += amp
            amp *= p.gain
            freq *= p.lacunarity
        return total / norm if norm else total

    def _curl_angle(self, p: FlowfieldParams, noise: NoiseField, x: float, y: float) -> float:
        dx = dy = 0.0
        amp = 1.0
        freq = 1.0
        norm = 0.0
        for _ in range(p.octaves):
            scale = p.noise_scale * freq
            dx += (noise.noise2d((x + CURL_EPSILON) * scale, y * scale) - noise.noise2d((x - CURL_EPSILON) * scale, y * scale)) * amp
            dy += (noise.noise2d(x * scale, (y + CURL_EPSILON) * scale) - noise.noise2d(x * scale, (y - CURL_EPSILON) * scale)) * amp
            norm += amp
            amp *= p.gain
            freq *= p.lacunarity
        if norm:
            dx /= norm
            dy /= norm
        return math.atan2(dy, -dx)

    def generate(
        self, params: FlowfieldParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        m = bounds.margin
        angle_offset = math.radians(p.angle_offset)
        paths = []
        for _ in range(p.density):
            x = m + rng.next_float() * bounds.inner_width
            y = m + rng.next_float() * bounds.inner_height
            points = [Point(x, y)]
            length = 0.0
            for _ in range(p.max_steps):
                if p.noise_type is FlowNoiseType.CURL:
                    angle = self._curl_angle(p, noise, x, y) * p.force + angle_offset
                else:
                    angle = self._sample(p, noise, x, y) * math.tau * p.force + angle_offset
                angle += (rng.next_float() - 0.5) * p.chaos
                dx = math.cos(angle) * p.step_len
                dy = math.sin(angle) * p.step_len
                x += dx
                y += dy
                if not bounds.contains(x, y, m):
                    break
                length += math.hypot(dx, dy)
                points.append(Point(x, y))
            if len(points) >= p.min_steps and length >= p.min_length:
                paths.append(Polyline(points))
        return result(paths)

    def formula(self, params: FlowfieldParams) -> str:
        return (
            f"θ = noise(x * {params.noise_scale}, y * {params.noise_scale}) * 2π * {params.force}\n"
            f"pos += [cos(θ), sin(θ)] * {params.step_len}"
        )
