"""Branching growth."""

import math
from dataclasses import dataclass, field

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import HyphaeOrigin, HyphaeParams
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, GenerationResult, Point, Polyline


@dataclass(slots=True)
class _Tip:
    x: float
    y: float
    angle: float
    trail: list[Point] = field(default_factory=list)


class HyphaeAlgorithm(Algorithm[HyphaeParams]):
    """Growing tips that wander, fork at right angles and die at the margin.

    The number of live tips never exceeds ``max_branches``; growth stops as
    soon as the cap is reached.
    """

    id = "hyphae"
    label = "Hyphae"
    description = "Branching growth from seed points"
    params_model = HyphaeParams

    def generate(
        self, params: HyphaeParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        m = bounds.margin
        cap = max(10, p.max_branches)
        tips: list[_Tip] = []
        for _ in range(p.sources):
            if p.origin is HyphaeOrigin.CENTER:
                tips.append(_Tip(bounds.width / 2, bounds.height / 2, rng.next_float() * math.tau))
            else:
                x = m + rng.next_float() * bounds.inner_width
                y = m + rng.next_float() * bounds.inner_height
                tips.append(_Tip(x, y, rng.next_float() * math.tau))

        trails: list[list[Point]] = []
        for _ in range(p.steps):
            if len(tips) >= cap:
                break
            for i in range(len(tips) - 1, -1, -1):
                tip = tips[i]
                tip.trail.append(Point(tip.x, tip.y))
                tip.x += math.cos(tip.angle) * p.seg_len
                tip.y += math.sin(tip.angle) * p.seg_len
                tip.angle += (rng.next_float() - 0.5) * p.angle_var
                if rng.next_float() < p.branch_prob and len(tips) < cap:
                    tips.append(_Tip(tip.x, tip.y, tip.angle + math.pi / 2))
                if not bounds.contains(tip.x, tip.y, m):
                    del tips[i]
                    trails.append(tip.trail)
        trails.extend(tip.trail for tip in tips)
        return result(Polyline(trail) for trail in trails if len(trail) >= 2)

    def formula(self, params: HyphaeParams) -> str:
        return (
            f"pos += [cos(α), sin(α)] * {params.seg_len}\n"
            f"if rand() < {params.branch_prob}: branch(α + π/2)"
        )
