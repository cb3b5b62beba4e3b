"""Per-point geometric modifiers.

Two flavors share one contract: take a path list and an ordered modifier
list, return new paths with every enabled modifier applied in list order.
Disabled modifiers are skipped, inputs are never mutated, and an empty (or
fully disabled) list returns the input paths as they are.

- Polar modifiers work in (radius, angle) around a centre and expand
  circle/polygon shorthand before transforming it.
- Local modifiers work in a shape's own frame (anchor, heading, length) and
  pass circle/polygon shorthand through untouched.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from plotweave.config.specs import ModifierSpec, ModifierType
from plotweave.core.noise import NoiseField
from plotweave.domain import Path, Point, Polyline

DEFAULT_EXPAND_SEGMENTS = 80


@dataclass(frozen=True, slots=True)
class PolarFrame:
    """Centre and reference radius for polar modifiers."""

    center: Point
    max_radius: float


@dataclass(frozen=True, slots=True)
class LocalFrame:
    """Anchor, heading (radians) and reference length of one shape."""

    anchor: Point
    angle: float
    length: float


def active_modifiers(modifiers: Sequence[ModifierSpec] | None) -> list[ModifierSpec]:
    return [mod for mod in modifiers or () if mod.enabled]


def _polar_point(
    x: float, y: float, modifiers: list[ModifierSpec], max_radius: float, noise: NoiseField
) -> tuple[float, float]:
    reach = max(1.0, max_radius)
    for mod in modifiers:
        r = math.hypot(x, y)
        a = math.atan2(y, x)
        kind = mod.type
        if kind is ModifierType.RIPPLE:
            r += math.sin(a * mod.frequency) * mod.amount
        elif kind is ModifierType.TWIST:
            a += math.radians(mod.amount) * (r / reach)
        elif kind is ModifierType.RADIAL_NOISE:
            r += noise.noise2d(x * mod.scale, y * mod.scale) * mod.amount
        elif kind is ModifierType.FALLOFF:
            amount = max(0.0, min(1.0, mod.amount))
            r *= 1 - amount * (r / reach)
        elif kind is ModifierType.CLIP:
            r = min(r, max_radius if mod.radius is None else mod.radius)
        elif kind is ModifierType.OFFSET:
            x += mod.offset_x
            y += mod.offset_y
            r = math.hypot(x, y)
            a = math.atan2(y, x)
        elif kind is ModifierType.CIRCULAR_OFFSET:
            # Offset plus a counter-clockwise tangential push, noise scales the push in [0, 2]
            push = mod.amount * (1 + noise.noise2d(x * mod.scale, y * mod.scale))
            x += mod.offset_x - math.sin(a) * push
            y += mod.offset_y + math.cos(a) * push
            r = math.hypot(x, y)
            a = math.atan2(y, x)
        x = math.cos(a) * r
        y = math.sin(a) * r
    return x, y


def apply_polar_modifiers(
    paths: Sequence[Path],
    modifiers: Sequence[ModifierSpec] | None,
    frame: PolarFrame,
    noise: NoiseField,
    segments: int = DEFAULT_EXPAND_SEGMENTS,
) -> list[Path]:
    """Apply polar modifiers around ``frame.center``.

    Args:
        paths: Paths to transform
        modifiers: Ordered modifier list
        frame: Centre and reference radius
        noise: Field sampled by noise-driven modifiers
        segments: Tessellation used when expanding circle shorthand

    Returns:
        New paths; closed inputs stay closed
    """
    active = active_modifiers(modifiers)
    if not active:
        return list(paths)
    cx, cy = frame.center.x, frame.center.y
    out: list[Path] = []
    for path in paths:
        line = path.expand(segments)
        closed = line.is_closed()
        moved = []
        for pt in line.points:
            x, y = _polar_point(pt.x - cx, pt.y - cy, active, frame.max_radius, noise)
            moved.append(Point(cx + x, cy + y))
        if closed and moved:
            moved[-1] = moved[0]
        out.append(line.with_points(moved))
    return out


def _local_point(
    lx: float,
    ly: float,
    modifiers: list[ModifierSpec],
    frame: LocalFrame,
    noise: NoiseField,
) -> tuple[float, float]:
    length = max(1e-6, frame.length)
    for mod in modifiers:
        t = max(0.0, min(1.0, lx / length))
        kind = mod.type
        if kind is ModifierType.RIPPLE:
            ly += math.sin(t * math.tau * mod.frequency) * mod.amount
        elif kind is ModifierType.TWIST:
            theta = math.radians(mod.amount) * t
            cos_t, sin_t = math.cos(theta), math.sin(theta)
            lx, ly = lx * cos_t - ly * sin_t, lx * sin_t + ly * cos_t
        elif kind is ModifierType.NOISE:
            wx = frame.anchor.x + lx
            wy = frame.anchor.y + ly
            ly += noise.noise2d(wx * mod.scale, wy * mod.scale) * mod.amount
        elif kind is ModifierType.SHEAR:
            lx += ly * mod.amount
        elif kind is ModifierType.TAPER:
            ly *= 1 + mod.amount * (t - 0.5)
        elif kind is ModifierType.OFFSET:
            lx += mod.offset_x
            ly += mod.offset_y
    return lx, ly


def apply_local_modifiers(
    paths: Sequence[Path],
    modifiers: Sequence[ModifierSpec] | None,
    frame: LocalFrame,
    noise: NoiseField,
) -> list[Path]:
    """Apply local modifiers in the frame of one shape.

    Points are rotated into anchor-local coordinates (x along the heading),
    modified, and rotated back. Circle and polygon shorthand is returned
    unchanged.
    """
    active = active_modifiers(modifiers)
    if not active:
        return list(paths)
    cos_a = math.cos(frame.angle)
    sin_a = math.sin(frame.angle)
    ax, ay = frame.anchor.x, frame.anchor.y
    out: list[Path] = []
    for path in paths:
        if not isinstance(path, Polyline):
            out.append(path)
            continue
        closed = path.is_closed()
        moved = []
        for pt in path.points:
            dx, dy = pt.x - ax, pt.y - ay
            lx = dx * cos_a + dy * sin_a
            ly = -dx * sin_a + dy * cos_a
            lx, ly = _local_point(lx, ly, active, frame, noise)
            moved.append(Point(ax + lx * cos_a - ly * sin_a, ay + lx * sin_a + ly * cos_a))
        if closed and moved:
            moved[-1] = moved[0]
        out.append(path.with_points(moved))
    return out
