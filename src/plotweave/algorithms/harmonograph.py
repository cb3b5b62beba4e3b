"""Multi-pendulum harmonograph."""

import math

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import HarmonographParams, PendulumSpec, RenderMode, ThickeningMode
from plotweave.core.noise import NoiseField
from plotweave.core.resample import SegmentTable, build_segment_table, chop_by_dash_pattern, iterate_samples
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, Circle, GenerationResult, Path, Point, Polyline

THICKEN_SPACING = 0.35


class HarmonographAlgorithm(Algorithm[HarmonographParams]):
    """Superposition of damped pendulums drawn on (optionally rotating) paper.

    The trace can be thickened into parallel or wavy copies and rendered as
    a line, dots, short tangent segments or dashes. Optional helper paths
    show each pendulum on its own.
    """

    id = "harmonograph"
    label = "Harmonograph"
    description = "Damped pendulum superposition"
    params_model = HarmonographParams

    def trace(
        self,
        params: HarmonographParams,
        pendulums: list[PendulumSpec],
        count: int,
        center: Point,
    ) -> Polyline:
        """Sample the pendulum sum at ``count + 1`` instants over the duration.

        Stops early once the radius stays at or below ``settle_threshold`` for
        ``settle_window`` consecutive samples.
        """
        p = params
        dt = p.duration / count
        spin = p.paper_rotation * math.tau
        settled = 0
        points = []
        for i in range(count + 1):
            t = i * dt
            x = y = 0.0
            for pend in pendulums:
                omega = (pend.freq + pend.micro + p.loop_drift * t) * math.tau
                decay = math.exp(-pend.damp * t)
                x += pend.amp_x * math.sin(omega * t + math.radians(pend.phase_x)) * decay
                y += pend.amp_y * math.sin(omega * t + math.radians(pend.phase_y)) * decay
            x *= p.scale
            y *= p.scale
            if spin:
                ang = spin * t
                x, y = x * math.cos(ang) - y * math.sin(ang), x * math.sin(ang) + y * math.cos(ang)
            points.append(Point(center.x + x, center.y + y))
            if p.settle_threshold > 0:
                settled = settled + 1 if math.hypot(x, y) <= p.settle_threshold else 0
                if settled >= p.settle_window:
                    break
        return Polyline(points)

    def thicken(self, params: HarmonographParams, path: Polyline, rng: SeededRng) -> list[Polyline]:
        """Offset copies of ``path`` along its normals."""
        count = params.width_multiplier
        if count <= 1 or len(path.points) < 2:
            return [path]
        half = (count - 1) / 2
        offsets = [(i - half) * THICKEN_SPACING for i in range(count)]
        pts = path.points
        normals = []
        for i, pt in enumerate(pts):
            prev = pts[i - 1] if i > 0 else pt
            nxt = pts[i + 1] if i + 1 < len(pts) else pt
            dx, dy = nxt.x - prev.x, nxt.y - prev.y
            mag = math.hypot(dx, dy) or 1.0
            normals.append((-dy / mag, dx / mag))
        phase = rng.next_float() * math.tau
        wave_freq = 2 + count * 0.4
        wave_amp = THICKEN_SPACING * 0.6
        last = max(1, len(pts) - 1)
        copies = []
        for idx, offset in enumerate(offsets):
            moved = []
            for i, pt in enumerate(pts):
                off = offset
                if params.thickening_mode is ThickeningMode.SINUSOIDAL:
                    off += math.sin(i / last * math.tau * wave_freq + phase + idx) * wave_amp
                nx, ny = normals[i]
                moved.append(Point(pt.x + nx * off, pt.y + ny * off))
            copies.append(Polyline(moved))
        return copies

    def _spacing(self, path: Polyline, stride: int, gap: float) -> tuple[float, SegmentTable]:
        table = build_segment_table(path)
        avg = table.total_length / max(1, len(path.points) - 1)
        return max(avg, avg * stride + gap), table

    def render(self, params: HarmonographParams, lines: list[Polyline], rng: SeededRng) -> list[Path]:
        p = params
        if p.render_mode is RenderMode.POINTS:
            dots: list[Path] = []
            for line in lines:
                spacing, table = self._spacing(line, p.point_stride, p.gap_size)
                for pt, _ in iterate_samples(table, spacing, p.gap_offset, p.gap_randomness, rng):
                    dots.append(Circle(pt.x, pt.y, p.point_size))
            return dots
        if p.render_mode is RenderMode.SEGMENTS:
            half = p.segment_length / 2
            segments: list[Path] = []
            for line in lines:
                spacing, table = self._spacing(line, p.segment_stride, p.gap_size)
                for pt, (tx, ty) in iterate_samples(table, spacing, p.gap_offset, p.gap_randomness, rng):
                    mag = math.hypot(tx, ty) or 1.0
                    ux, uy = tx / mag, ty / mag
                    segments.append(Polyline([Point(pt.x - ux * half, pt.y - uy * half), Point(pt.x + ux * half, pt.y + uy * half)]))
            return segments
        if p.render_mode is RenderMode.DASHED:
            dashes: list[Path] = []
            for line in lines:
                dashes.extend(
                    chop_by_dash_pattern(
                        line,
                        p.dash_length,
                        p.dash_gap + p.gap_size,
                        offset=p.gap_offset,
                        gap_jitter=p.gap_randomness,
                        rng=rng,
                    )
                )
            return dashes or list(lines)
        return list(lines)

    def generate(
        self, params: HarmonographParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        pendulums = [pend for pend in p.pendulums if pend.enabled]
        if not pendulums:
            return result([])
        center = bounds.center
        base = self.trace(p, pendulums, p.samples, center)
        paths = self.render(p, self.thicken(p, base, rng), rng)
        helpers: list[Path] = []
        if p.show_pendulum_guides:
            helper_samples = max(200, p.samples // 4)
            helpers = [self.trace(p, [pend], helper_samples, center) for pend in pendulums]
        return result(paths, helpers)

    def formula(self, params: HarmonographParams) -> str:
        return (
            "x = Σ Aᵢ sin((fᵢ+μᵢ)t + φxᵢ) e^(-dᵢ t)\n"
            "y = Σ Bᵢ sin((fᵢ+μᵢ)t + φyᵢ) e^(-dᵢ t)"
        )
