"""Coherent noise: simplex base noise, shape functions and layer blending.

This module provides:
- SimplexNoise: seeded 2D simplex noise in [-1, 1]
- NoiseField: base noise plus the shape catalogue (ridged, fbm, cellular, ...)
- apply_tile: domain tiling applied before shaping
- LayerStack: a list of noise layers bound to a canvas, blended left to right

Everything here is a pure function of its inputs once constructed, so one
field can be shared by concurrent readers.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from plotweave.config.specs import ApplyMode, BlendMode, NoiseLayerSpec, NoiseType, TileMode
from plotweave.core.image import ImageNoise, ImageStore
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds

F2 = 0.5 * (math.sqrt(3.0) - 1.0)
G2 = (3.0 - math.sqrt(3.0)) / 6.0

GRAD3 = (
    (1, 1, 0),
    (-1, 1, 0),
    (1, -1, 0),
    (-1, -1, 0),
    (1, 0, 1),
    (-1, 0, 1),
    (1, 0, -1),
    (-1, 0, -1),
    (0, 1, 1),
    (0, -1, 1),
    (0, 1, -1),
    (0, -1, -1),
)


def _clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _frac(value: float) -> float:
    return value - math.floor(value)


class SimplexNoise:
    """Seeded 2D simplex noise.

    The permutation table is shuffled by a ``SeededRng`` built from ``seed``
    so the same seed always yields the same field.
    """

    __slots__ = ("seed", "_perm")

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        rng = SeededRng(seed)
        p = list(range(256))
        for i in range(255, 0, -1):
            r = int(rng.next_float() * (i + 1))
            p[i], p[r] = p[r], p[i]
        self._perm = tuple(p[i & 255] for i in range(512))

    def noise2d(self, xin: float, yin: float) -> float:
        """Sample noise at (xin, yin); the result lies in [-1, 1]."""
        perm = self._perm
        s = (xin + yin) * F2
        i = math.floor(xin + s)
        j = math.floor(yin + s)
        t = (i + j) * G2
        x0 = xin - (i - t)
        y0 = yin - (j - t)
        if x0 > y0:
            i1, j1 = 1, 0
        else:
            i1, j1 = 0, 1
        x1 = x0 - i1 + G2
        y1 = y0 - j1 + G2
        x2 = x0 - 1.0 + 2.0 * G2
        y2 = y0 - 1.0 + 2.0 * G2
        ii = i & 255
        jj = j & 255

        total = 0.0
        t0 = 0.5 - x0 * x0 - y0 * y0
        if t0 >= 0:
            g = GRAD3[perm[ii + perm[jj]] % 12]
            t0 *= t0
            total += t0 * t0 * (g[0] * x0 + g[1] * y0)
        t1 = 0.5 - x1 * x1 - y1 * y1
        if t1 >= 0:
            g = GRAD3[perm[ii + i1 + perm[jj + j1]] % 12]
            t1 *= t1
            total += t1 * t1 * (g[0] * x1 + g[1] * y1)
        t2 = 0.5 - x2 * x2 - y2 * y2
        if t2 >= 0:
            g = GRAD3[perm[ii + 1 + perm[jj + 1]] % 12]
            t2 *= t2
            total += t2 * t2 * (g[0] * x2 + g[1] * y2)
        return 70.0 * total


def apply_tile(nx: float, ny: float, mode: TileMode, padding: float = 0.0) -> tuple[float, float]:
    """Fold noise coordinates into a repeating cell pattern.

    Args:
        nx: Noise-space x
        ny: Noise-space y
        mode: Tiling pattern; ``off`` returns the input unchanged
        padding: Fraction of each cell edge squeezed out, clamped to [0, 0.45]

    Returns:
        Tiled (x, y) coordinates
    """
    if mode is TileMode.OFF:
        return nx, ny
    pad = _clamp(padding, 0.0, 0.45)

    def padded(t: float) -> float:
        if pad <= 0:
            return t
        span = 1 - pad * 2
        return _clamp((t - pad) / span, 0.0, 1.0)

    if mode is TileMode.BRICK:
        row = math.floor(ny)
        return padded(_frac(nx + (row % 2) * 0.5)), padded(_frac(ny))
    if mode is TileMode.HEX:
        hy = ny / 0.866
        row = math.floor(hy)
        return padded(_frac(nx + (row % 2) * 0.5)), padded(_frac(hy))
    if mode is TileMode.DIAMOND:
        return padded(_frac(nx + ny)), padded(_frac(-nx + ny))
    if mode is TileMode.TRIANGLE:
        fx, fy = _frac(nx), _frac(ny)
        if fx + fy > 1:
            fx, fy = 1 - fx, 1 - fy
        return padded(fx), padded(fy)
    if mode is TileMode.OFFSET:
        col = math.floor(nx)
        return padded(_frac(nx)), padded(_frac(ny + (col % 2) * 0.5))
    if mode in (TileMode.RADIAL, TileMode.SPIRAL):
        r = math.hypot(nx, ny)
        a = math.atan2(ny, nx) / math.tau + 0.5
        radial = r + a * 0.5 if mode is TileMode.SPIRAL else r
        rr = padded(_frac(radial))
        aa = padded(_frac(a)) * math.tau
        return rr * math.cos(aa), rr * math.sin(aa)
    if mode is TileMode.CHECKER:
        fx, fy = _frac(nx), _frac(ny)
        if (math.floor(nx) + math.floor(ny)) % 2 != 0:
            fx = 1 - fx
        return padded(fx), padded(fy)
    if mode is TileMode.WAVE:
        fx = _frac(nx + math.sin(ny * math.pi * 2) * 0.1)
        fy = _frac(ny + math.sin(nx * math.pi * 2) * 0.1)
        return padded(fx), padded(fy)
    return padded(_frac(nx)), padded(_frac(ny))


class NoiseField:
    """Base noise plus the catalogue of shape functions.

    Args:
        noise: Base simplex noise
        seed: Seed mixed into the hash used by grain/value/cellular shapes
        images: Store consulted by ``image`` layers
    """

    def __init__(
        self,
        noise: SimplexNoise,
        seed: int = 0,
        images: ImageStore | None = None,
    ) -> None:
        self.noise = noise
        self.seed = seed
        self.images = images or ImageStore()

    @classmethod
    def from_seed(cls, seed: int | None, images: ImageStore | None = None) -> "NoiseField":
        return cls(SimplexNoise(seed), seed=seed or 0, images=images)

    def noise2d(self, x: float, y: float) -> float:
        return self.noise.noise2d(x, y)

    def hash2d(self, x: float, y: float) -> float:
        """Deterministic hash of (x, y) in [0, 1)."""
        n = math.sin(x * 127.1 + y * 311.7 + self.seed * 0.1) * 43758.5453
        return n - math.floor(n)

    def value_noise(self, x: float, y: float, seed: int = 0, smooth: bool = True) -> float:
        xi, yi = math.floor(x), math.floor(y)
        xf, yf = x - xi, y - yi
        u = xf * xf * (3 - 2 * xf) if smooth else xf
        v = yf * yf * (3 - 2 * yf) if smooth else yf
        sx, sy = seed * 0.17, seed * 0.11
        n00 = self.hash2d(xi + sx, yi + sy)
        n10 = self.hash2d(xi + 1 + sx, yi + sy)
        n01 = self.hash2d(xi + sx, yi + 1 + sy)
        n11 = self.hash2d(xi + 1 + sx, yi + 1 + sy)
        top = n00 + (n10 - n00) * u
        bottom = n01 + (n11 - n01) * u
        return (top + (bottom - top) * v) * 2 - 1

    def cellular(self, x: float, y: float, jitter: float = 1.0) -> tuple[float, float]:
        """Distances to the nearest and second-nearest jittered cell points."""
        xi, yi = math.floor(x), math.floor(y)
        f1 = f2 = math.inf
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                cx = xi + dx + self.hash2d(xi + dx, yi + dy) * jitter
                cy = yi + dy + self.hash2d(xi + dx + 7.21, yi + dy + 3.17) * jitter
                dist = math.hypot(x - cx, y - cy)
                if dist < f1:
                    f2, f1 = f1, dist
                elif dist < f2:
                    f2 = dist
        return f1, f2

    def fbm(self, x: float, y: float, octaves: int = 4, lacunarity: float = 2.0, gain: float = 0.5) -> float:
        """Octave sum normalized by the amplitudes actually used."""
        total = 0.0
        amp = 1.0
        freq = 1.0
        norm = 0.0
        for _ in range(max(1, octaves)):
            total += self.noise.noise2d(x * freq, y * freq) * amp
            norm += amp
            amp *= gain
            freq *= lacunarity
        return total / norm if norm else total

    def shape(
        self,
        layer: NoiseLayerSpec,
        x: float,
        y: float,
        world_x: float | None = None,
        world_y: float | None = None,
        image: ImageNoise | None = None,
    ) -> float:
        """Evaluate the layer's shape function at noise coordinates (x, y)."""
        kind = layer.type
        n = self.noise.noise2d(x, y)
        px = x * layer.pattern_scale
        py = y * layer.pattern_scale

        if kind is NoiseType.SIMPLEX:
            return n
        if kind is NoiseType.RIDGED:
            return (1 - abs(n)) * 2 - 1
        if kind is NoiseType.BILLOW:
            return abs(n) * 2 - 1
        if kind is NoiseType.VALUE:
            return self.value_noise(x, y, layer.seed, smooth=False)
        if kind is NoiseType.PERLIN:
            return self.value_noise(x, y, layer.seed, smooth=True)
        if kind is NoiseType.TURBULENCE:
            n2 = self.noise.noise2d(x * 2, y * 2)
            n3 = self.noise.noise2d(x * 4, y * 4)
            t = (abs(n) + abs(n2) * 0.5 + abs(n3) * 0.25) / 1.75
            return t * 2 - 1
        if kind is NoiseType.STRIPES:
            return math.sin(px * 2 + n * 1.5)
        if kind is NoiseType.MARBLE:
            return math.sin((px + py) * 1.5 + n * 2)
        if kind is NoiseType.STEPS:
            count = layer.steps_count
            t = ((n + 1) / 2 + (layer.seed * 0.13) % 1) % 1
            return round(t * (count - 1)) / (count - 1) * 2 - 1
        if kind is NoiseType.FACET:
            count = layer.steps_count
            stepped = math.floor((n + 1) / 2 * count) / count
            return min(1.0, stepped * 2 - 1)
        if kind is NoiseType.SAWTOOTH:
            return ((px + py * 0.25) % 1) * 2 - 1
        if kind is NoiseType.TRIANGLE:
            t = (n + 1) / 2
            return (1 - abs((t % 1) * 2 - 1)) * 2 - 1
        if kind is NoiseType.POLYGON:
            return self._polygon(layer, px, py)
        if kind is NoiseType.WARP:
            warp = n * 1.5 * layer.warp_strength
            return self.noise.noise2d(x + warp, y + warp)
        if kind is NoiseType.CELLULAR:
            f1, _ = self.cellular(x * layer.cellular_scale, y * layer.cellular_scale, layer.cellular_jitter)
            return _clamp(1 - f1, 0.0, 1.0) * 2 - 1
        if kind is NoiseType.VORONOI:
            f1, _ = self.cellular(x * layer.cellular_scale, y * layer.cellular_scale, layer.cellular_jitter)
            return _clamp(f1, 0.0, 1.0) * 2 - 1
        if kind is NoiseType.CRACKLE:
            f1, f2 = self.cellular(x * layer.cellular_scale, y * layer.cellular_scale, layer.cellular_jitter)
            edge = _clamp((f2 - f1) * 3, 0.0, 1.0)
            return (1 - edge) * 2 - 1
        if kind is NoiseType.FBM:
            return self.fbm(x, y, layer.octaves, layer.lacunarity, layer.gain)
        if kind is NoiseType.SWIRL:
            return math.sin(px * 2 + n * 2) * math.cos(py * 2 + n)
        if kind is NoiseType.RADIAL:
            return math.sin(math.hypot(px, py) * 3 + n * 2)
        if kind is NoiseType.CHECKER:
            return 1.0 if (math.floor(px * 4) + math.floor(py * 4)) % 2 == 0 else -1.0
        if kind is NoiseType.ZIGZAG:
            t = abs((px * 2) % 2 - 1)
            return (1 - t) * 2 - 1
        if kind is NoiseType.RIPPLE:
            return math.sin((px + py) * 3 + n * 2)
        if kind is NoiseType.SPIRAL:
            return math.sin(math.atan2(py, px) * 4 + math.hypot(px, py) * 2 + n)
        if kind is NoiseType.GRAIN:
            return self.hash2d(x * 10, y * 10) * 2 - 1
        if kind is NoiseType.CROSSHATCH:
            return (math.sin(px * 3) + math.sin(py * 3)) * 0.5
        if kind is NoiseType.PULSE:
            return abs(math.sin(px * 2 + n) * math.cos(py * 2 + n)) * 2 - 1
        if kind is NoiseType.DOMAIN:
            wx = self.noise.noise2d(x * 1.7, y * 1.7) * layer.warp_strength
            wy = self.noise.noise2d(x * 1.7 + 5.2, y * 1.7 + 1.3) * layer.warp_strength
            return self.noise.noise2d(x + wx, y + wy)
        if kind is NoiseType.WEAVE:
            return math.sin(px * 2 + n) * math.sin(py * 2 + n)
        if kind is NoiseType.MOIRE:
            return (math.sin(px * 2) + math.sin(py * 2.2)) * 0.5
        if kind is NoiseType.DUNES:
            return math.sin(px * 2 + n * 1.5)
        if kind is NoiseType.IMAGE:
            if image is None:
                return n
            wx = x if world_x is None else world_x
            wy = y if world_y is None else world_y
            return image.value(x, y, n, wx, wy)
        return n

    @staticmethod
    def _polygon(layer: NoiseLayerSpec, px: float, py: float) -> float:
        """Signed-distance polygon centred on the origin, +1 inside."""
        sides = layer.polygon_sides
        rotation = math.radians(layer.polygon_rotation)
        outline = layer.polygon_outline
        edge = layer.polygon_edge_radius
        sector = math.tau / sides
        rel = (math.atan2(py, px) - rotation) % sector
        reach = math.cos(math.pi / sides) / math.cos(rel - math.pi / sides)
        sd = math.hypot(px, py) - layer.polygon_radius * reach
        if outline > 0:
            sd = abs(sd) - outline / 2
        if edge <= 0:
            return 1.0 if sd <= 0 else -1.0
        t = _clamp((sd + edge) / (edge * 2), 0.0, 1.0)
        return 1 - t * 2

    def stack(self, layers: Sequence[NoiseLayerSpec], bounds: Bounds) -> "LayerStack":
        """Bind layers to a canvas for repeated sampling."""
        return LayerStack(self, layers, bounds)

    def sample_layer(self, layer: NoiseLayerSpec, x: float, y: float, bounds: Bounds) -> float:
        """Sample one layer at canvas point (x, y); the result lies in [-1, 1]."""
        return LayerSampler(self, layer, bounds).sample(x, y)

    def combine(self, layers: Sequence[NoiseLayerSpec], x: float, y: float, bounds: Bounds) -> float:
        """Blend all enabled layers at canvas point (x, y)."""
        return self.stack(layers, bounds).combine(x, y)


class LayerSampler:
    """One noise layer bound to a canvas frame."""

    def __init__(self, field: NoiseField, layer: NoiseLayerSpec, bounds: Bounds) -> None:
        self.field = field
        self.layer = layer
        self.amplitude = layer.amplitude
        self.blend = layer.blend

        inset = bounds.inset
        self.inset = inset
        self.inner_w = max(1e-6, bounds.width - inset * 2)
        self.inner_h = max(1e-6, bounds.height - inset * 2)
        angle = math.radians(layer.angle)
        self.cos_a = math.cos(angle)
        self.sin_a = math.sin(angle)
        self.shift_x = layer.shift_x * self.inner_w * 0.5
        self.shift_y = layer.shift_y * self.inner_h * 0.5

        self.image: ImageNoise | None = None
        image_aspect = 1.0
        if layer.type is NoiseType.IMAGE and layer.image_id:
            source = field.images.get(layer.image_id)
            if source is not None:
                self.image = ImageNoise(layer, source)
                if source.width > 0 and source.height > 0:
                    image_aspect = source.width / source.height
        self.image_aspect = image_aspect

        canvas_aspect = max(1e-6, self.inner_w / self.inner_h)
        if canvas_aspect >= image_aspect:
            self.aspect_x, self.aspect_y = 1.0, image_aspect / canvas_aspect
        else:
            self.aspect_x, self.aspect_y = canvas_aspect / max(1e-6, image_aspect), 1.0

        if layer.type is NoiseType.IMAGE:
            self.width_scale = (1 / layer.image_width) / max(1e-6, image_aspect)
            self.height_scale = layer.image_height
        else:
            self.width_scale = layer.freq
            self.height_scale = 1.0
        self.framed = layer.type is NoiseType.IMAGE and layer.tile_mode is TileMode.OFF

    def sample(self, x: float, y: float, along: float | None = None, across: float | None = None) -> float:
        """Sample at canvas point (x, y).

        With ``apply_mode`` linear and both ``along``/``across`` given (each in
        [0, 1] along and across the generating path), the layer is sampled in
        that path frame instead of canvas space.
        """
        layer = self.layer
        linear = layer.apply_mode is ApplyMode.LINEAR and along is not None and across is not None
        if linear:
            u = along - 0.5 + layer.shift_x
            v = across - 0.5 + layer.shift_y
        else:
            u = (x - self.inset) / self.inner_w - 0.5 + layer.shift_x
            v = (y - self.inset) / self.inner_h - 0.5 + layer.shift_y
        if self.framed:
            zoom = max(0.1, layer.zoom * 50)
            nx = u * zoom * self.aspect_x / layer.image_width
            ny = v * zoom * self.aspect_y * layer.image_height
        elif linear:
            nx = u * self.inner_w * layer.zoom * self.width_scale
            ny = v * self.inner_h * layer.zoom * self.height_scale
        else:
            nx = (x + self.shift_x) * layer.zoom * self.width_scale
            ny = (y + self.shift_y) * layer.zoom * self.height_scale
        rx = nx * self.cos_a - ny * self.sin_a
        ry = nx * self.sin_a + ny * self.cos_a
        if not self.framed and layer.tile_mode is not TileMode.OFF:
            rx, ry = apply_tile(rx, ry, layer.tile_mode, layer.tile_padding)
        value = self.field.shape(layer, rx, ry, x, y, self.image)
        if not math.isfinite(value):
            return 0.0
        return _clamp(value)


@dataclass(frozen=True, slots=True)
class LayerValue:
    """A layer's scaled sample and how it blends."""

    blend: BlendMode
    value: float


def blend_values(values: Sequence[LayerValue], max_amplitude: float) -> float:
    """Combine scaled layer values left to right.

    The first value seeds the combination; there is no implicit zero for
    multiply, min or max. Hatch blends weight the incoming value by the running
    normalized tone and a direction bias.

    Args:
        values: Scaled layer values in layer order
        max_amplitude: Sum of absolute layer amplitudes, used to normalize tone

    Returns:
        Combined value, or 0.0 when ``values`` is empty
    """
    if not values:
        return 0.0
    norm = max_amplitude or 1.0
    combined = values[0].value
    for item in values[1:]:
        blend, value = item.blend, item.value
        if blend is BlendMode.SUBTRACT:
            combined -= value
        elif blend is BlendMode.MULTIPLY:
            combined *= value
        elif blend is BlendMode.MAX:
            combined = max(combined, value)
        elif blend is BlendMode.MIN:
            combined = min(combined, value)
        elif blend in (BlendMode.HATCH_DARK, BlendMode.HATCH_LIGHT):
            tone = _clamp((combined / norm + 1) / 2, 0.0, 1.0)
            dark = blend is BlendMode.HATCH_DARK
            weight = 1 - tone if dark else tone
            if value >= 0:
                bias = 0.6 if dark else 1.2
            else:
                bias = 1.2 if dark else 0.6
            combined += value * weight * bias
        else:
            combined += value
    return combined


class LayerStack:
    """Enabled noise layers bound to a canvas, blended in list order."""

    def __init__(self, field: NoiseField, layers: Sequence[NoiseLayerSpec], bounds: Bounds) -> None:
        self.samplers = [LayerSampler(field, layer, bounds) for layer in layers if layer.enabled]
        self.max_amplitude = sum(abs(s.amplitude) for s in self.samplers) or 1.0

    def __len__(self) -> int:
        return len(self.samplers)

    def __bool__(self) -> bool:
        return bool(self.samplers)

    def values(
        self, x: float, y: float, along: float | None = None, across: float | None = None
    ) -> list[LayerValue]:
        return [LayerValue(s.blend, s.sample(x, y, along, across) * s.amplitude) for s in self.samplers]

    def combine(self, x: float, y: float, along: float | None = None, across: float | None = None) -> float:
        """Blended value at canvas point (x, y); 0.0 with no enabled layers."""
        return blend_values(self.values(x, y, along, across), self.max_amplitude)

    def combine_normalized(
        self, x: float, y: float, along: float | None = None, across: float | None = None
    ) -> float:
        """Blended value divided by the total amplitude, clamped to [-1, 1]."""
        return _clamp(self.combine(x, y, along, across) / self.max_amplitude)
