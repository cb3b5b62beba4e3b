"""Radial petal compositions.

Petals are placed along a golden-angle (or custom) spiral, one or two rings
deep, innermost first. Each petal is an outline built from a width profile
mirrored about its axis, plus optional shading lines. Later petals can be
clipped by earlier ones and shading can be split by a directional light.
A central element (disk, dome, starburst, dots or filaments) is drawn last.
"""

import math
from bisect import bisect_right
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import structlog

from plotweave.algorithms.base import Algorithm, result
from plotweave.config.params import (
    CenterType,
    InnerShading,
    OuterShading,
    PetalisParams,
    PetalProfile,
    RingMode,
    ShadowMode,
    SpiralMode,
)
from plotweave.core._bezier import flatten_anchors
from plotweave.core.modifiers import LocalFrame, PolarFrame, apply_local_modifiers, apply_polar_modifiers
from plotweave.core.noise import NoiseField
from plotweave.core.occlusion import OcclusionEngine
from plotweave.core.resample import chop_by_dash_pattern
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, Circle, GenerationResult, Path, Point, Polyline

logger = structlog.get_logger(__name__)

GOLDEN_ANGLE = 137.507764
STIPPLE_TICK = 0.15
DOME_MAX_RINGS = 30
FILAMENT_STEPS = 8

Profile = Callable[[float], float]


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def designer_profile(widths: Sequence[float]) -> Profile:
    """Smooth width curve through evenly spaced anchor widths.

    The anchors are joined by cubic segments and flattened once; the
    returned function interpolates the flattened curve. Fewer than two
    anchors fall back to the oval profile.
    """
    if len(widths) < 2:
        return lambda t: math.sin(math.pi * t)
    last = len(widths) - 1
    curve = flatten_anchors([Point(i / last, max(0.0, w)) for i, w in enumerate(widths)])
    xs = [pt.x for pt in curve]

    def width(t: float) -> float:
        i = bisect_right(xs, t)
        if i <= 0:
            return curve[0].y
        if i >= len(curve):
            return curve[-1].y
        a, b = curve[i - 1], curve[i]
        span = b.x - a.x
        return a.y if span <= 0 else _lerp(a.y, b.y, (t - a.x) / span)

    return width


def profile_function(kind: PetalProfile, designer: Sequence[float] = ()) -> Profile:
    """Width of a unit petal at axial position ``t`` in [0, 1]."""
    if kind is PetalProfile.DESIGNER:
        return designer_profile(designer)

    def width(t: float) -> float:
        s = math.sin(math.pi * t)
        if kind is PetalProfile.TEARDROP:
            return s * (1 - 0.35 * t)
        if kind is PetalProfile.LANCEOLATE:
            return s**1.4
        if kind is PetalProfile.HEART:
            return s * (1 + 0.25 * math.sin(math.tau * t))
        if kind is PetalProfile.SPOON:
            return s * (0.7 + 0.3 * (1 - t)) + 0.08 * s
        if kind is PetalProfile.ROUNDED:
            return s**0.6
        if kind is PetalProfile.SPATULATE:
            return s * (0.45 + 0.55 * t**1.5)
        return s

    return width


@dataclass(frozen=True, slots=True)
class WidthProfile:
    """Per-petal width function: blended profiles, sharpening and edge wave."""

    base: Profile
    center: Profile
    morph_weight: float
    sharpness: float
    base_flare: float
    base_pinch: float
    wave_amp: float
    wave_freq: float
    wave_phase: float

    def width(self, t: float) -> float:
        w = _lerp(self.base(t), self.center(t), self.morph_weight)
        w = max(0.0, w) ** _lerp(0.8, 2.4, _clamp(self.sharpness, 0.0, 1.0))
        w *= 1 + (self.base_flare - self.base_pinch) * (1 - t) ** 2
        if self.wave_amp > 0:
            w *= 1 + self.wave_amp * math.sin(math.tau * t * self.wave_freq + self.wave_phase)
        return max(0.0, w)


@dataclass(frozen=True, slots=True)
class Petal:
    """One placed petal: base point, heading (radians), size and profile."""

    base: Point
    angle: float
    length: float
    width_ratio: float
    profile: WidthProfile

    def half_width(self, t: float) -> float:
        return self.profile.width(t) * self.width_ratio * self.length / 2

    def to_world(self, lx: float, ly: float) -> Point:
        cos_a = math.cos(self.angle)
        sin_a = math.sin(self.angle)
        return Point(self.base.x + lx * cos_a - ly * sin_a, self.base.y + lx * sin_a + ly * cos_a)

    @property
    def frame(self) -> LocalFrame:
        return LocalFrame(self.base, self.angle, self.length)

    def outline(self, steps: int, curl: float = 0.0) -> Polyline:
        """Closed outline: left edge base to tip, right edge tip to base."""
        left = []
        right = []
        for i in range(steps + 1):
            t = i / steps
            half = self.half_width(t)
            bend = curl * self.length * 0.15 * t * t
            left.append((t * self.length, half + bend))
            right.append((t * self.length, -half + bend))
        local = left + right[::-1]
        local.append(local[0])
        return Polyline([self.to_world(x, y) for x, y in local], group="petal")


class ShadingBuilder:
    """Hatch lines inside (inner) and along the edge (outer) of one petal."""

    def __init__(self, params: PetalisParams, petal: Petal, steps: int, noise: NoiseField) -> None:
        self.params = params
        self.petal = petal
        self.steps = steps
        self.inner_band = _clamp(1 - params.shading_transition, 0.2, 1.0)
        jitter = 0.0
        if params.hatch_noise:
            jitter = noise.noise2d(petal.base.x * 0.002, petal.base.y * 0.002) * params.hatch_noise * 30
        hatch = math.radians(params.hatch_angle + jitter)
        self.cos_h = math.cos(hatch)
        self.sin_h = math.sin(hatch)

    def _place(self, lx: float, ly: float) -> Point:
        hx = lx * self.cos_h - ly * self.sin_h
        hy = lx * self.sin_h + ly * self.cos_h
        return self.petal.to_world(hx, hy)

    def line(self, offset: float, gradient: bool = False, spiral: bool = False) -> Polyline:
        petal = self.petal
        points = []
        for i in range(self.steps + 1):
            t = i / self.steps
            taper = _lerp(1.0, 0.4, t) if gradient else 1.0
            lateral = offset + t * 0.3 if spiral else offset
            points.append(self._place(t * petal.length, lateral * petal.half_width(t) * taper))
        return Polyline(points, group="shading")

    def stipple(self, offset: float, rng: SeededRng) -> list[Polyline]:
        count = max(6, round(self.steps / 2))
        ticks = []
        for s in range(count):
            t = (s + 1) / (count + 1)
            jitter = (rng.next_float() - 0.5) * 0.2
            pt = self._place(t * self.petal.length, (offset + jitter) * self.petal.half_width(t))
            ticks.append(Polyline([pt, Point(pt.x + STIPPLE_TICK, pt.y + STIPPLE_TICK)], group="shading"))
        return ticks

    def build(self, rng: SeededRng) -> list[Polyline]:
        p = self.params
        lines: list[Polyline] = []
        if p.inner_shading:
            count = int(_clamp(round(p.inner_density * 14), 1, 24))
            for i in range(count):
                offset = _lerp(-self.inner_band / 2, self.inner_band / 2, (i + 1) / (count + 1))
                kind = p.inner_shading_type
                if kind is InnerShading.STIPPLE:
                    lines.extend(self.stipple(offset, rng))
                else:
                    lines.append(
                        self.line(offset, gradient=kind is InnerShading.GRADIENT, spiral=kind is InnerShading.SPIRAL)
                    )
        if p.outer_shading:
            if p.outer_shading_type in (OuterShading.RIM, OuterShading.OUTLINE):
                lines.append(Polyline(self.petal.outline(self.steps).points, group="shading"))
            else:
                count = int(_clamp(round(p.outer_density * 6), 1, 10))
                for i in range(count):
                    offset = _lerp(self.inner_band / 2, 1.0, (i + 1) / (count + 1))
                    lines.append(self.line(offset))
                    lines.append(self.line(-offset))
        return [line for line in lines if len(line.points) > 1]


@dataclass(frozen=True, slots=True)
class _Ring:
    count: int
    min_r: float
    max_r: float
    offset: float


class PetalisAlgorithm(Algorithm[PetalisParams]):
    """Spiral-placed petals with shading, occlusion, light and a centre."""

    id = "petalis"
    label = "Petalis"
    description = "Radial petal composition"
    params_model = PetalisParams

    def prepare(self, params: PetalisParams) -> PetalisParams:
        """Hook for variants that force parameters before generation."""
        return params

    def _rings(self, p: PetalisParams, rng: SeededRng, max_radius: float) -> list[_Ring]:
        def jittered(count: int) -> int:
            return max(1, round(count * (1 + rng.next_range(-p.count_jitter, p.count_jitter))))

        if p.ring_mode is RingMode.DUAL:
            split = max_radius * p.ring_split
            inner = jittered(p.inner_count)
            outer = jittered(p.outer_count)
            return [
                _Ring(inner, 0.0, split, 0.0),
                _Ring(outer, split, max_radius, math.radians(p.ring_offset)),
            ]
        return [_Ring(jittered(p.count), 0.0, max_radius, 0.0)]

    def _petal(
        self,
        p: PetalisParams,
        rng: SeededRng,
        noise: NoiseField,
        center: Point,
        max_radius: float,
        ring: _Ring,
        ring_index: int,
        i: int,
    ) -> tuple[Petal, float]:
        """Place petal ``i`` of a ring; also returns its centre factor."""
        base_angle = math.radians(p.custom_angle if p.spiral_mode is SpiralMode.CUSTOM else GOLDEN_ANGLE)
        t = 0.5 if ring.count <= 1 else i / (ring.count - 1)
        radial = _lerp(ring.min_r, ring.max_r, t**p.spiral_tightness) * p.radial_growth
        drift = math.radians(p.angular_drift) * p.drift_strength * noise.noise2d(i * p.drift_noise, ring_index * 2.1)
        angle = base_angle * i + ring.offset + drift
        angle += (rng.next_float() - 0.5) * math.radians(p.rotation_jitter)

        center_factor = _clamp(1 - radial / max_radius, 0.0, 1.0)
        morph_curve = center_factor**p.center_size_curve
        size_morph = 1 + p.center_size_morph * morph_curve
        radius_scale = 1 + p.radius_scale * t**p.radius_scale_curve
        jitter = 1 + (rng.next_float() * 2 - 1) * p.size_jitter
        length = max(4.0, p.petal_scale * size_morph * radius_scale * jitter)

        width_ratio = p.petal_width_ratio
        if p.bud_mode:
            bud = _clamp((center_factor - (1 - p.bud_radius)) / p.bud_radius, 0.0, 1.0)
            width_ratio *= 1 - bud * p.bud_tightness * 0.6

        profile = WidthProfile(
            base=profile_function(p.petal_profile, p.designer_profile),
            center=profile_function(p.center_profile or p.petal_profile, p.designer_profile),
            morph_weight=_clamp(p.center_shape_morph * morph_curve, 0.0, 1.0),
            sharpness=p.tip_sharpness,
            base_flare=p.base_flare,
            base_pinch=p.base_pinch,
            wave_amp=max(0.0, p.edge_wave_amp * (1 + p.center_wave_boost * center_factor)),
            wave_freq=p.edge_wave_freq,
            wave_phase=rng.next_float() * math.tau,
        )
        base = Point(center.x + math.cos(angle) * radial, center.y + math.sin(angle) * radial)
        return Petal(base, angle, length, width_ratio, profile), center_factor

    def central_elements(
        self, p: PetalisParams, rng: SeededRng, noise: NoiseField, center: Point, max_radius: float
    ) -> list[Path]:
        """Centre decoration, optional dot ring and connectors, then polar modifiers."""
        radius = p.center_radius
        density = p.center_density
        cx, cy = center.x, center.y
        paths: list[Path] = []
        kind = p.center_type
        if kind is CenterType.DISK:
            paths.append(Circle(cx, cy, radius, group="center"))
        elif kind is CenterType.DOME:
            rings = int(_clamp(round(density / 2), 2, DOME_MAX_RINGS))
            for i in range(rings):
                paths.append(Circle(cx, cy, max(0.2, radius * (1 - i / rings)), group="center"))
        elif kind is CenterType.STARBURST:
            for i in range(density):
                ang = i / density * math.tau
                reach = radius * (0.6 + 0.4 * rng.next_float())
                tip = Point(cx + math.cos(ang) * reach, cy + math.sin(ang) * reach)
                paths.append(Polyline([center, tip], group="center"))
        elif kind is CenterType.DOT:
            for _ in range(density):
                ang = rng.next_float() * math.tau
                r = math.sqrt(rng.next_float()) * radius
                size = 0.4 + rng.next_float() * 0.6
                paths.append(Circle(cx + math.cos(ang) * r, cy + math.sin(ang) * r, size, group="center"))
        elif kind is CenterType.FILAMENT:
            for i in range(density):
                ang = rng.next_float() * math.tau
                reach = radius * (0.6 + 0.6 * rng.next_float())
                points = []
                for s in range(FILAMENT_STEPS + 1):
                    t = s / FILAMENT_STEPS
                    bend = ang + noise.noise2d(t * 2, i * 0.2) * p.center_falloff
                    points.append(Point(cx + math.cos(bend) * reach * t, cy + math.sin(bend) * reach * t))
                paths.append(Polyline(points, group="center"))

        if p.center_ring:
            ring_radius = p.center_ring_radius if p.center_ring_radius is not None else radius * 1.6
            ring_count = max(6, p.center_ring_density if p.center_ring_density is not None else density)
            for i in range(ring_count):
                ang = i / ring_count * math.tau
                size = 0.35 + rng.next_float() * 0.4
                paths.append(
                    Circle(cx + math.cos(ang) * ring_radius, cy + math.sin(ang) * ring_radius, size, group="center")
                )

        if p.center_connectors:
            count = max(4, p.connector_count if p.connector_count is not None else density)
            reach = max(1.0, p.connector_length if p.connector_length is not None else radius)
            start = radius * 0.6
            for i in range(count):
                ang = i / count * math.tau + (rng.next_float() - 0.5) * p.connector_jitter
                cos_a, sin_a = math.cos(ang), math.sin(ang)
                paths.append(
                    Polyline(
                        [
                            Point(cx + cos_a * start, cy + sin_a * start),
                            Point(cx + cos_a * (start + reach), cy + sin_a * (start + reach)),
                        ],
                        group="center",
                    )
                )

        return apply_polar_modifiers(paths, p.center_modifiers, PolarFrame(center, max_radius), noise)

    def generate(
        self, params: PetalisParams, rng: SeededRng, noise: NoiseField, bounds: Bounds
    ) -> GenerationResult:
        p = self.prepare(params)
        center = bounds.center
        max_radius = max(1.0, min(bounds.width, bounds.height) / 2 - bounds.margin)
        shading_steps = max(6, round(p.petal_steps / 2))
        light_angle = math.radians(p.light_angle)
        light = Point(
            center.x + math.cos(light_angle) * max_radius * p.light_distance,
            center.y + math.sin(light_angle) * max_radius * p.light_distance,
        )
        shadows = p.shadow_mode is not ShadowMode.OFF
        track = p.occlusion or shadows
        engine = OcclusionEngine()

        paths: list[Path] = []
        for ring_index, ring in enumerate(self._rings(p, rng, max_radius)):
            for i in range(ring.count):
                petal, center_factor = self._petal(p, rng, noise, center, max_radius, ring, ring_index, i)
                curl = p.tip_curl * (1 + p.center_curl_boost * center_factor)
                outline = petal.outline(p.petal_steps, curl)
                shading: list[Path] = list(ShadingBuilder(p, petal, shading_steps, noise).build(rng))
                if p.petal_modifiers:
                    outline = apply_local_modifiers([outline], p.petal_modifiers, petal.frame, noise)[0]
                    shading = apply_local_modifiers(shading, p.petal_modifiers, petal.frame, noise)
                if p.shading_dash > 0:
                    shading = [
                        dash
                        for line in shading
                        for dash in chop_by_dash_pattern(line, p.shading_dash, p.shading_gap)
                    ]
                if shadows:
                    keep_shadowed = p.shadow_mode is ShadowMode.SHADOW
                    shading = [
                        run
                        for line in shading
                        for run in engine.split_by_shadow(line, light, center, shadowed=keep_shadowed)
                    ]
                if p.occlusion:
                    paths.extend(engine.clip_outside(outline))
                    paths.extend(engine.clip_all(shading))
                else:
                    paths.append(outline)
                    paths.extend(shading)
                if track:
                    engine.add(outline)
        if track:
            engine.log_summary()

        paths.extend(self.central_elements(p, rng, noise, center, max_radius))
        logger.debug("petalis_generated", paths=len(paths), occluders=len(engine))
        return result(paths)

    def formula(self, params: PetalisParams) -> str:
        params = self.prepare(params)
        angle = params.custom_angle if params.spiral_mode is SpiralMode.CUSTOM else GOLDEN_ANGLE
        return (
            f"θ = i * {angle}°\n"
            f"r = f(i) * {params.spiral_tightness}\n"
            f"petal = profile({params.petal_profile.value})"
        )
