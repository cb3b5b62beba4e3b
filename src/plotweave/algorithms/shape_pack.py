"""Relaxation circle packing."""

import math
from dataclasses import dataclass

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import PackShape, PerspectiveType, ShapePackParams
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, Circle, GenerationResult, Path, Point, Polygon, Polyline

RELAX_STEPS = 30
PUSH = 0.6
SHRINK = 0.15
OVERLAP_SLACK = 0.01


@dataclass(slots=True)
class _Disc:
    x: float
    y: float
    r: float


class ShapePackAlgorithm(Algorithm[ShapePackParams]):
    """Non-overlapping discs placed by random draws and local relaxation.

    Each candidate is pushed away from overlapping discs (and shrunk toward
    ``min_r``) for up to ``RELAX_STEPS`` rounds, then kept only if it no
    longer overlaps. At most ``attempts`` candidates are tried.
    """

    id = "shapePack"
    label = "Shape Pack"
    description = "Circle and polygon packing"
    params_model = ShapePackParams

    def _relax(self, disc: _Disc, placed: list[_Disc], p: ShapePackParams, min_r: float, bounds: Bounds) -> None:
        m = bounds.margin
        for _ in range(RELAX_STEPS):
            moved = False
            for other in placed:
                dx = disc.x - other.x
                dy = disc.y - other.y
                dist = math.hypot(dx, dy) or 0.0001
                target = disc.r + other.r + p.padding
                if dist < target:
                    overlap = target - dist
                    disc.x += dx / dist * overlap * PUSH
                    disc.y += dy / dist * overlap * PUSH
                    disc.r = max(min_r, disc.r - overlap * SHRINK)
                    moved = True
            disc.x = min(bounds.width - m - disc.r, max(m + disc.r, disc.x))
            disc.y = min(bounds.height - m - disc.r, max(m + disc.r, disc.y))
            if not moved:
                break

    def _perspective(self, p: ShapePackParams, bounds: Bounds):
        origin = Point(bounds.width / 2 + p.perspective_x, bounds.height / 2 + p.perspective_y)
        max_dist = math.hypot(bounds.width / 2, bounds.height / 2) or 1.0

        def warp(x: float, y: float) -> Point:
            dx = x - origin.x
            dy = y - origin.y
            if p.perspective_type is PerspectiveType.RADIAL:
                scale = 1 + math.hypot(dx, dy) / max_dist * p.perspective
            elif p.perspective_type is PerspectiveType.HORIZONTAL:
                scale = 1 + dx / (bounds.width / 2) * p.perspective
            else:
                scale = 1 + dy / (bounds.height / 2) * p.perspective
            return Point(origin.x + dx * scale, origin.y + dy * scale)

        return warp

    def generate(
        self, params: ShapePackParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        m = bounds.margin
        min_r = max(0.1, p.min_r)
        max_r = max(min_r, p.max_r)
        placed: list[_Disc] = []
        tries = 0
        while len(placed) < p.count and tries < p.attempts:
            r = rng.next_range(min_r, max_r)
            disc = _Disc(
                m + r + rng.next_float() * (bounds.inner_width - r * 2),
                m + r + rng.next_float() * (bounds.inner_height - r * 2),
                r,
            )
            self._relax(disc, placed, p, min_r, bounds)
            if all(
                math.hypot(disc.x - o.x, disc.y - o.y) >= disc.r + o.r + p.padding - OVERLAP_SLACK
                for o in placed
            ):
                placed.append(disc)
            tries += 1

        use_perspective = p.perspective_type is not PerspectiveType.NONE and abs(p.perspective) > 0.0001
        warp = self._perspective(p, bounds) if use_perspective else None
        rotation_step = math.radians(p.rotation_step)
        is_circle = p.shape is PackShape.CIRCLE
        steps = max(24, p.segments) if is_circle else max(3, p.segments)
        paths: list[Path] = []
        for i, disc in enumerate(placed):
            rot = 0.0 if is_circle else rotation_step * i
            if warp is None:
                if is_circle:
                    paths.append(Circle(disc.x, disc.y, disc.r))
                else:
                    paths.append(Polygon(disc.x, disc.y, disc.r, steps, rot))
                continue
            ring = [
                warp(disc.x + math.cos(k / steps * math.tau + rot) * disc.r, disc.y + math.sin(k / steps * math.tau + rot) * disc.r)
                for k in range(steps + 1)
            ]
            ring[-1] = ring[0]
            paths.append(Polyline(ring))
        return result(paths)

    def formula(self, params: ShapePackParams) -> str:
        return (
            f"if dist(p, others) > r + {params.padding}: add(shape(p, r))\n"
            f"r = rand({params.min_r}, {params.max_r})\n"
            f"rot = i * {params.rotation_step}\n"
            f"shape = {params.shape.value}, sides = {params.segments}\n"
            f"persp = {params.perspective_type.value}({params.perspective})"
        )
