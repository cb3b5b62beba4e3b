"""Damped Lissajous figures."""

import math

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import LissajousParams
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, GenerationResult, Point, Polyline

T_MAX = 200.0
MIN_AMPLITUDE = 0.01
HIT_MARGIN = 1e-4


def _crossing(a: Point, b: Point, c: Point, d: Point) -> tuple[Point, float] | None:
    """Interior crossing of ab with cd, with its parameter along ab."""
    den = (b.x - a.x) * (d.y - c.y) - (b.y - a.y) * (d.x - c.x)
    if abs(den) < 1e-6:
        return None
    t = ((c.x - a.x) * (d.y - c.y) - (c.y - a.y) * (d.x - c.x)) / den
    u = ((c.x - a.x) * (b.y - a.y) - (c.y - a.y) * (b.x - a.x)) / den
    if t <= HIT_MARGIN or t >= 1 - HIT_MARGIN or u <= HIT_MARGIN or u >= 1 - HIT_MARGIN:
        return None
    return Point(a.x + t * (b.x - a.x), a.y + t * (b.y - a.y)), t


class LissajousAlgorithm(Algorithm[LissajousParams]):
    """A single damped Lissajous curve centred on the canvas.

    With ``close_lines`` the curve stops at its first self-intersection, or
    is closed back to its start when it never crosses itself.
    """

    id = "lissajous"
    label = "Lissajous"
    description = "Damped harmonic figure with optional auto-close"
    params_model = LissajousParams

    def generate(
        self, params: LissajousParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        cx = bounds.width / 2
        cy = bounds.height / 2
        scale = min(bounds.width, bounds.height) * 0.4 * p.scale
        steps = max(10, p.resolution)
        t_step = T_MAX / steps

        points: list[Point] = []
        closed = False
        for i in range(steps):
            t = i * t_step
            amp = math.exp(-p.damping * t)
            if amp < MIN_AMPLITUDE:
                break
            nxt = Point(
                cx + math.sin(p.freq_x * t + p.phase) * scale * amp,
                cy + math.sin(p.freq_y * t) * scale * amp,
            )
            if p.close_lines and len(points) > 2:
                prev = points[-1]
                hit: tuple[Point, float] | None = None
                for a, b in zip(points, points[1:-1]):
                    crossing = _crossing(prev, nxt, a, b)
                    if crossing and (hit is None or crossing[1] < hit[1]):
                        hit = crossing
                if hit is not None:
                    points.append(hit[0])
                    closed = True
                    break
            points.append(nxt)
        if p.close_lines and len(points) > 2 and not closed:
            points.append(points[0])
        return result([Polyline(points)] if len(points) >= 2 else [])

    def formula(self, params: LissajousParams) -> str:
        return (
            f"x = sin({params.freq_x}t + {params.phase})\n"
            f"y = sin({params.freq_y}t)\n"
            f"amp = e^(-{params.damping}t)"
        )
