"""Flocking trails (separation, alignment, cohesion)."""

import math
from dataclasses import dataclass, field

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import BoidsParams, FlockMode
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, GenerationResult, Point, Polyline

# (separation, alignment, cohesion, vertical damping) multipliers.
MODE_WEIGHTS = {
    FlockMode.BIRDS: (1.0, 1.0, 1.0, 1.0),
    FlockMode.FISH: (1.4, 1.3, 0.8, 0.9),
}


@dataclass(slots=True)
class _Boid:
    x: float
    y: float
    vx: float
    vy: float
    trail: list[Point] = field(default_factory=list)


def _set_mag(x: float, y: float, mag: float) -> tuple[float, float]:
    length = math.hypot(x, y) or 1.0
    return x / length * mag, y / length * mag


def _limit(x: float, y: float, cap: float) -> tuple[float, float]:
    length = math.hypot(x, y)
    if length > cap:
        return x / length * cap, y / length * cap
    return x, y


class BoidsAlgorithm(Algorithm[BoidsParams]):
    """Reynolds flocking; each boid's position history becomes a path.

    Boids update in place one after another, so later boids in a step see
    the already-moved earlier ones. Boids bounce off the margin by flipping
    the offending velocity component.
    """

    id = "boids"
    label = "Boids"
    description = "Flocking trails"
    params_model = BoidsParams

    def _steer(self, p: BoidsParams, boid: _Boid, target: tuple[float, float]) -> tuple[float, float]:
        dx, dy = _set_mag(target[0], target[1], p.speed)
        return _limit(dx - boid.vx, dy - boid.vy, p.force)

    def generate(
        self, params: BoidsParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        m = bounds.margin
        sep_mode, align_mode, coh_mode, damping = MODE_WEIGHTS[p.mode]
        flock = [
            _Boid(
                m + rng.next_float() * bounds.inner_width,
                m + rng.next_float() * bounds.inner_height,
                (rng.next_float() - 0.5) * p.speed,
                (rng.next_float() - 0.5) * p.speed,
            )
            for _ in range(p.count)
        ]
        for _ in range(p.steps):
            for boid in flock:
                boid.trail.append(Point(boid.x, boid.y))
                sx = sy = ax = ay = cx = cy = 0.0
                sep_n = align_n = coh_n = 0
                for other in flock:
                    if other is boid:
                        continue
                    dx = boid.x - other.x
                    dy = boid.y - other.y
                    dist = math.hypot(dx, dy)
                    if dist < p.sep_dist:
                        safe = dist or 0.0001
                        sx += dx / safe
                        sy += dy / safe
                        sep_n += 1
                    if dist < p.align_dist:
                        ax += other.vx
                        ay += other.vy
                        align_n += 1
                    if dist < p.coh_dist:
                        cx += other.x
                        cy += other.y
                        coh_n += 1

                steer_x = steer_y = 0.0
                if sep_n:
                    fx, fy = self._steer(p, boid, (sx / sep_n, sy / sep_n))
                    steer_x += fx * p.sep_weight * sep_mode
                    steer_y += fy * p.sep_weight * sep_mode
                if align_n:
                    fx, fy = self._steer(p, boid, (ax / align_n, ay / align_n))
                    steer_x += fx * p.align_weight * align_mode
                    steer_y += fy * p.align_weight * align_mode
                if coh_n:
                    fx, fy = self._steer(p, boid, (cx / coh_n - boid.x, cy / coh_n - boid.y))
                    steer_x += fx * p.coh_weight * coh_mode
                    steer_y += fy * p.coh_weight * coh_mode

                boid.vx += steer_x
                boid.vy = (boid.vy + steer_y) * damping
                boid.vx, boid.vy = _limit(boid.vx, boid.vy, p.speed)
                boid.x += boid.vx
                boid.y += boid.vy
                if boid.x < m or boid.x > bounds.width - m:
                    boid.vx = -boid.vx
                if boid.y < m or boid.y > bounds.height - m:
                    boid.vy = -boid.vy
        return result(Polyline(boid.trail) for boid in flock if len(boid.trail) >= 2)

    def formula(self, params: BoidsParams) -> str:
        p = params
        return (
            f"v += separate * {p.sep_dist} + align * {p.align_dist} + cohere * {p.coh_dist}\n"
            f"pos += v * {p.speed}"
        )
