"""Stacked noise rows (joy-division style wave table)."""

import math

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import Continuity, FadeMode, WavetableParams
from plotweave.config.specs import NoiseLayerSpec
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, GenerationResult, Path, Point, Polyline


def fade_taper(
    t: float,
    mode: FadeMode,
    near: FadeMode,
    far: FadeMode,
    fade: float,
    threshold: float,
    feather: float,
) -> float:
    """Noise multiplier for a position ``t`` in [0, 1] across the table.

    ``fade``, ``threshold`` and ``feather`` are percentages. Inside the
    threshold zone the noise is damped by ``fade``; across the feather zone
    the damping eases back to none. ``mode`` picks which side(s) fade; values
    other than ``near``/``far``/``none`` fade both sides.
    """
    strength = min(1.0, fade / 100)
    zone_size = min(1.0, threshold / 100)
    feather_size = min(1.0, feather / 100)
    if strength <= 0 or zone_size <= 0 or mode is FadeMode.NONE:
        return 1.0
    if mode is near:
        dist, zone, both = t, zone_size, False
    elif mode is far:
        dist, zone, both = 1 - t, zone_size, False
    else:
        dist, zone, both = min(t, 1 - t), zone_size / 2, True
    if dist <= zone:
        return max(0.0, 1 - strength)
    if feather_size > 0:
        feather_zone = max(0.0001, feather_size / (2 if both else 1))
        if dist <= zone + feather_zone:
            eased = max(0.0, min(1.0, (dist - zone) / feather_zone))
            return max(0.0, 1 - strength + eased * strength)
    return 1.0


class WavetableAlgorithm(Algorithm[WavetableParams]):
    """Horizontal rows displaced by layered noise along ``line_offset``.

    Rows are spaced evenly over the inner height (scaled by ``gap`` and
    capped to fit) and sheared by ``tilt`` per row. With ``overlap_padding``
    rows are built bottom-up and each row is held at least half the padding
    above the row below it.
    """

    id = "wavetable"
    label = "Wavetable"
    description = "Stacked noise-displaced rows"
    params_model = WavetableParams

    def generate(
        self, params: WavetableParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = params
        inset = bounds.inset
        inner_w = bounds.width - inset * 2
        inner_h = bounds.height - inset * 2
        lines = p.lines
        spacing = inner_h / max(1, lines - 1) * p.gap
        total_height = spacing * (lines - 1) if lines > 1 else 0.0
        if lines > 1 and total_height > inner_h:
            spacing = inner_h / (lines - 1)
            total_height = spacing * (lines - 1)
        start_y = inset + (inner_h - total_height) / 2
        pts = max(2, int(inner_w / 2))
        x_step = inner_w / pts
        offset_angle = math.radians(p.line_offset)
        dir_x = math.sin(offset_angle)
        dir_y = -math.cos(offset_angle)

        fallback = NoiseLayerSpec(
            type=p.noise_type, amplitude=p.amplitude, zoom=p.zoom, freq=p.freq, angle=p.noise_angle
        )
        stack = noise.stack(p.noise_layers(fallback), bounds)

        order = range(lines - 1, -1, -1) if p.overlap_padding > 0 else range(lines)
        rows: list[list[Point] | None] = [None] * lines
        below: list[float] | None = None
        below_shift = 0.0
        for i in order:
            base_y = start_y + i * spacing
            t_row = 0.5 if lines <= 1 else i / (lines - 1)
            v_taper = fade_taper(
                t_row,
                p.vertical_fade_mode,
                FadeMode.TOP,
                FadeMode.BOTTOM,
                p.vertical_fade,
                p.vertical_fade_threshold,
                p.vertical_fade_feather,
            )
            shift = p.tilt * i
            heights: list[float] = []
            row = []
            for j in range(pts + 1):
                base_x = inset + j * x_step + shift
                offset = stack.combine(base_x, base_y, j / pts, t_row) if stack else 0.0
                taper = fade_taper(
                    j / pts,
                    p.edge_fade_mode,
                    FadeMode.LEFT,
                    FadeMode.RIGHT,
                    p.edge_fade,
                    p.edge_fade_threshold,
                    p.edge_fade_feather,
                )
                amp = offset * taper * v_taper
                x = base_x + amp * dir_x
                y = base_y + amp * dir_y
                if p.dampen_extremes and not inset <= y <= bounds.height - inset:
                    limit = max(0.0, base_y - inset if y < inset else bounds.height - inset - base_y)
                    y = base_y + amp * min(1.0, limit / max(0.001, abs(amp)))
                if below is not None:
                    index = (base_x - (inset + below_shift)) / x_step
                    if 0 <= index <= pts:
                        i0 = int(index)
                        i1 = min(pts, i0 + 1)
                        below_y = below[i0] + (below[i1] - below[i0]) * (index - i0)
                        y = min(y, below_y - p.overlap_padding * 0.5)
                row.append(Point(x, y))
                heights.append(y)
            rows[i] = row if len(row) > 1 else None
            if p.overlap_padding > 0:
                below = heights
                below_shift = shift
        paths = self._join(p.continuity, rows)
        if p.flat_caps:
            bottom_shift = p.tilt * (lines - 1)
            bottom_y = start_y + spacing * (lines - 1)
            paths.append(Polyline([Point(inset + j * x_step, start_y) for j in range(pts + 1)]))
            paths.append(Polyline([Point(inset + j * x_step + bottom_shift, bottom_y) for j in range(pts + 1)]))
        return result(paths)

    def _join(self, continuity: Continuity, rows: list[list[Point] | None]) -> list[Path]:
        """Emit rows as-is, as one serpentine line, or with side connectors."""
        if continuity is Continuity.SINGLE:
            snake: list[Point] = []
            for idx, row in enumerate(rows):
                if not row:
                    continue
                segment = row if idx % 2 == 0 else row[::-1]
                if snake and snake[-1] == segment[0]:
                    segment = segment[1:]
                snake.extend(segment)
            return [Polyline(snake)] if snake else []
        paths: list[Path] = [Polyline(row) for row in rows if row]
        if continuity is Continuity.DOUBLE:
            for a, b in zip(rows, rows[1:]):
                if not a or not b:
                    continue
                paths.append(Polyline([a[0], b[0]]))
                paths.append(Polyline([a[-1], b[-1]]))
        return paths

    def formula(self, params: WavetableParams) -> str:
        return (
            "y = yBase + Σ noiseᵢ(rotate(x*zoomᵢ*freqᵢ, y*zoomᵢ)) * ampᵢ\n"
            "edge/vertical dampening scales noise"
        )
