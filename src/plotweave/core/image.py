"""Image-based noise sources.

The kernel never loads images itself. Callers register decoded RGBA rasters
in an ``ImageStore`` under an opaque id; a noise layer of type ``image``
looks its raster up by that id and turns luminance into a noise value
through an ordered chain of effects.

Each effect kind is its own small class with an ``apply(state, sampler)``
method, composed by iterating the chain in order.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from plotweave.config.specs import ImageEffectMode, ImageEffectSpec, ImpactStyle, NoiseLayerSpec
from plotweave.exceptions import ImageNotFoundError


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class ImageSource(Protocol):
    """Anything that can answer RGBA lookups by pixel index."""

    width: int
    height: int

    def rgba(self, ix: int, iy: int) -> tuple[int, int, int, int]: ...


@dataclass(frozen=True, slots=True)
class RasterImage:
    """Decoded RGBA raster, row-major, 4 bytes per pixel."""

    width: int
    height: int
    data: bytes

    def rgba(self, ix: int, iy: int) -> tuple[int, int, int, int]:
        idx = (iy * self.width + ix) * 4
        if idx < 0 or idx + 3 >= len(self.data):
            return (0, 0, 0, 0)
        return (self.data[idx], self.data[idx + 1], self.data[idx + 2], self.data[idx + 3])

    @classmethod
    def from_luminance(cls, width: int, height: int, values: Sequence[float]) -> "RasterImage":
        """Build an opaque grey raster from luminance values in [0, 1]."""
        buf = bytearray()
        for value in values:
            level = int(round(_clamp01(value) * 255))
            buf.extend((level, level, level, 255))
        return cls(width=width, height=height, data=bytes(buf))


class ImageStore:
    """Registry of image sources keyed by opaque id."""

    def __init__(self, images: dict[str, ImageSource] | None = None) -> None:
        self._images: dict[str, ImageSource] = dict(images or {})

    def add(self, image_id: str, image: ImageSource) -> None:
        self._images[image_id] = image

    def get(self, image_id: str) -> ImageSource | None:
        return self._images.get(image_id)

    def require(self, image_id: str) -> ImageSource:
        """Strict lookup.

        Raises:
            ImageNotFoundError: If no image is registered under ``image_id``
        """
        image = self._images.get(image_id)
        if image is None:
            raise ImageNotFoundError(image_id)
        return image

    def __contains__(self, image_id: object) -> bool:
        return image_id in self._images

    def __len__(self) -> int:
        return len(self._images)


class LumaSampler:
    """Luminance x alpha lookups over normalized (u, v) coordinates."""

    def __init__(
        self,
        image: ImageSource,
        wrap: bool = True,
        invert_color: bool = False,
        invert_opacity: bool = False,
    ) -> None:
        self.image = image
        self.wrap = wrap
        self.invert_color = invert_color
        self.invert_opacity = invert_opacity
        self.du = 1.0 / max(1, image.width)
        self.dv = 1.0 / max(1, image.height)

    def lum(self, u: float, v: float) -> float:
        if self.wrap:
            uu, vv = u % 1.0, v % 1.0
        else:
            uu, vv = _clamp01(u), _clamp01(v)
        width, height = self.image.width, self.image.height
        ix = min(width - 1, max(0, int(math.floor(uu * width))))
        iy = min(height - 1, max(0, int(math.floor(vv * height))))
        r, g, b, a = self.image.rgba(ix, iy)
        lum = (0.2126 * r + 0.7152 * g + 0.0722 * b) / 255
        if self.invert_color:
            lum = 1 - lum
        alpha = a / 255
        if self.invert_opacity:
            alpha = 1 - alpha
        return _clamp01(lum) * alpha

    def blur(self, u: float, v: float, radius: float = 0) -> float:
        """Box-filtered luminance over a (2r+1)^2 pixel window."""
        r = max(0, int(round(radius)))
        if not r:
            return self.lum(u, v)
        total = 0.0
        count = 0
        for dy in range(-r, r + 1):
            for dx in range(-r, r + 1):
                total += self.lum(u + dx * self.du, v + dy * self.dv)
                count += 1
        return total / count


@dataclass(frozen=True, slots=True)
class EffectState:
    u: float
    v: float
    lum: float


class ImageEffect(Protocol):
    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState: ...


@dataclass(frozen=True, slots=True)
class LumaEffect:
    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        return EffectState(state.u, state.v, sampler.lum(state.u, state.v))


@dataclass(frozen=True, slots=True)
class PixelateEffect:
    blocks: int

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        step = 1.0 / self.blocks
        u = math.floor(state.u / step) * step + step / 2
        v = math.floor(state.v / step) * step + step / 2
        return EffectState(u, v, sampler.lum(u, v))


@dataclass(frozen=True, slots=True)
class EdgeEffect:
    """Sobel gradient magnitude with a little of the source mixed back in."""

    blur: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        u, v, du, dv, r = state.u, state.v, sampler.du, sampler.dv, self.blur

        def at(ox: int, oy: int) -> float:
            return sampler.blur(u + ox * du, v + oy * dv, r)

        sx = -at(-1, -1) + at(1, -1) - 2 * at(-1, 0) + 2 * at(1, 0) - at(-1, 1) + at(1, 1)
        sy = -at(-1, -1) - 2 * at(0, -1) - at(1, -1) + at(-1, 1) + 2 * at(0, 1) + at(1, 1)
        magnitude = min(1.0, math.hypot(sx, sy) * 1.5)
        return EffectState(u, v, magnitude + at(0, 0) * 0.2)


@dataclass(frozen=True, slots=True)
class BlendBlurEffect:
    """Mix toward a box blur; used for blur and lowpass."""

    radius: float
    strength: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        blurred = sampler.blur(state.u, state.v, self.radius)
        return EffectState(state.u, state.v, state.lum + (blurred - state.lum) * self.strength)


@dataclass(frozen=True, slots=True)
class HighpassEffect:
    radius: float
    strength: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        blurred = sampler.blur(state.u, state.v, self.radius)
        return EffectState(state.u, state.v, _clamp01((state.lum - blurred) * self.strength + 0.5))


@dataclass(frozen=True, slots=True)
class BrightnessEffect:
    amount: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        return EffectState(state.u, state.v, state.lum + self.amount)


@dataclass(frozen=True, slots=True)
class LevelsEffect:
    low: float
    high: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        high = max(self.low + 0.001, self.high)
        return EffectState(state.u, state.v, (state.lum - self.low) / (high - self.low))


@dataclass(frozen=True, slots=True)
class GammaEffect:
    gamma: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        return EffectState(state.u, state.v, max(0.0, state.lum) ** self.gamma)


@dataclass(frozen=True, slots=True)
class ContrastEffect:
    contrast: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        return EffectState(state.u, state.v, (state.lum - 0.5) * self.contrast + 0.5)


@dataclass(frozen=True, slots=True)
class EmbossEffect:
    strength: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        u, v = state.u, state.v
        dx = sampler.blur(u + sampler.du, v, 1) - sampler.blur(u - sampler.du, v, 1)
        dy = sampler.blur(u, v + sampler.dv, 1) - sampler.blur(u, v - sampler.dv, 1)
        return EffectState(u, v, 0.5 + (dx + dy) * 0.5 * self.strength)


@dataclass(frozen=True, slots=True)
class SharpenEffect:
    amount: float
    radius: int

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        blurred = sampler.blur(state.u, state.v, self.radius)
        return EffectState(state.u, state.v, state.lum + (state.lum - blurred) * self.amount)


@dataclass(frozen=True, slots=True)
class InvertEffect:
    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        return EffectState(state.u, state.v, 1 - state.lum)


@dataclass(frozen=True, slots=True)
class ThresholdEffect:
    threshold: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        return EffectState(state.u, state.v, 1.0 if state.lum >= self.threshold else 0.0)


@dataclass(frozen=True, slots=True)
class PosterizeEffect:
    levels: int

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        steps = self.levels - 1
        return EffectState(state.u, state.v, round(state.lum * steps) / steps)


@dataclass(frozen=True, slots=True)
class SolarizeEffect:
    threshold: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        lum = 1 - state.lum if state.lum > self.threshold else state.lum
        return EffectState(state.u, state.v, lum)


BAYER_4X4 = (0, 8, 2, 10, 12, 4, 14, 6, 3, 11, 1, 9, 15, 7, 13, 5)


@dataclass(frozen=True, slots=True)
class DitherEffect:
    amount: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        ix = int(math.floor(state.u * sampler.image.width)) % 4
        iy = int(math.floor(state.v * sampler.image.height)) % 4
        lum = state.lum + (BAYER_4X4[iy * 4 + ix] / 16 - 0.5) * self.amount
        return EffectState(state.u, state.v, 1.0 if lum >= 0.5 else 0.0)


@dataclass(frozen=True, slots=True)
class MedianEffect:
    radius: int

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        samples = sorted(
            sampler.lum(state.u + dx * sampler.du, state.v + dy * sampler.dv)
            for dy in range(-self.radius, self.radius + 1)
            for dx in range(-self.radius, self.radius + 1)
        )
        return EffectState(state.u, state.v, samples[len(samples) // 2])


@dataclass(frozen=True, slots=True)
class VignetteEffect:
    strength: float
    radius: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        dist = math.hypot(state.u - 0.5, state.v - 0.5)
        t = _clamp01((dist - self.radius) / max(0.001, 1 - self.radius))
        return EffectState(state.u, state.v, state.lum * (1 - t * self.strength))


@dataclass(frozen=True, slots=True)
class CurveEffect:
    """S-curve around mid grey."""

    strength: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        power = 1 + self.strength * 2
        lum = max(0.0, min(1.0, state.lum))
        if lum < 0.5:
            lum = (lum * 2) ** power / 2
        else:
            lum = 1 - ((1 - lum) * 2) ** power / 2
        return EffectState(state.u, state.v, lum)


@dataclass(frozen=True, slots=True)
class BandpassEffect:
    center: float
    width: float

    def apply(self, state: EffectState, sampler: LumaSampler) -> EffectState:
        half = self.width / 2
        return EffectState(state.u, state.v, _clamp01(1 - abs(state.lum - self.center) / half))


def build_effect(spec: ImageEffectSpec) -> ImageEffect:
    """Turn a configured effect step into its effect object."""
    mode = spec.mode
    if mode is ImageEffectMode.PIXELATE:
        return PixelateEffect(blocks=spec.image_pixelate)
    if mode is ImageEffectMode.EDGE:
        return EdgeEffect(blur=spec.image_edge_blur)
    if mode is ImageEffectMode.BLUR:
        return BlendBlurEffect(radius=spec.image_blur_radius, strength=spec.image_blur_strength)
    if mode is ImageEffectMode.LOWPASS:
        return BlendBlurEffect(radius=spec.image_lowpass_radius, strength=spec.image_lowpass_strength)
    if mode is ImageEffectMode.HIGHPASS:
        return HighpassEffect(radius=spec.image_highpass_radius, strength=spec.image_highpass_strength)
    if mode is ImageEffectMode.BRIGHTNESS:
        return BrightnessEffect(amount=spec.image_brightness)
    if mode is ImageEffectMode.LEVELS:
        return LevelsEffect(low=spec.image_levels_low, high=spec.image_levels_high)
    if mode is ImageEffectMode.GAMMA:
        return GammaEffect(gamma=spec.image_gamma)
    if mode is ImageEffectMode.CONTRAST:
        return ContrastEffect(contrast=spec.image_contrast)
    if mode is ImageEffectMode.EMBOSS:
        return EmbossEffect(strength=spec.image_emboss_strength)
    if mode is ImageEffectMode.SHARPEN:
        return SharpenEffect(amount=spec.image_sharpen_amount, radius=spec.image_sharpen_radius)
    if mode is ImageEffectMode.INVERT:
        return InvertEffect()
    if mode is ImageEffectMode.THRESHOLD:
        return ThresholdEffect(threshold=spec.image_threshold)
    if mode is ImageEffectMode.POSTERIZE:
        return PosterizeEffect(levels=spec.image_posterize)
    if mode is ImageEffectMode.SOLARIZE:
        return SolarizeEffect(threshold=spec.image_solarize)
    if mode is ImageEffectMode.DITHER:
        return DitherEffect(amount=spec.image_dither)
    if mode is ImageEffectMode.MEDIAN:
        return MedianEffect(radius=spec.image_median_radius)
    if mode is ImageEffectMode.VIGNETTE:
        return VignetteEffect(strength=spec.image_vignette_strength, radius=spec.image_vignette_radius)
    if mode is ImageEffectMode.CURVE:
        return CurveEffect(strength=spec.image_curve_strength)
    if mode is ImageEffectMode.BANDPASS:
        return BandpassEffect(center=spec.image_band_center, width=spec.image_band_width)
    return LumaEffect()


class ImageNoise:
    """Noise values derived from one image layer.

    Built once per layer so the effect chain is resolved a single time.
    """

    def __init__(self, layer: NoiseLayerSpec, image: ImageSource) -> None:
        self.layer = layer
        self.wrap = layer.tile_mode.value != "off"
        self.sampler = LumaSampler(
            image,
            wrap=self.wrap,
            invert_color=layer.image_invert_color,
            invert_opacity=layer.image_invert_opacity,
        )
        specs = [spec for spec in layer.image_effects if spec.enabled]
        if not layer.image_effects:
            specs = [ImageEffectSpec(mode=layer.image_algo)]
        self.effects: list[ImageEffect] = [build_effect(spec) for spec in specs]

    def value(self, x: float, y: float, n: float, world_x: float, world_y: float) -> float:
        """Signed noise value in [-1, 1] at image coordinates (x, y).

        Args:
            x: Horizontal image coordinate (unit square when wrapping)
            y: Vertical image coordinate
            n: Base noise value at the same point, used by the noisy style
            world_x: Canvas x, used by the micro-frequency carrier
            world_y: Canvas y
        """
        u, v = x, y
        if not self.wrap:
            u += 0.5
            v += 0.5
        state = EffectState(u, v, self.sampler.lum(u, v))
        for effect in self.effects:
            state = effect.apply(state, self.sampler)
            state = EffectState(state.u, state.v, _clamp01(state.lum))

        lum = state.lum
        impact = 1 - lum
        style = self.layer.noise_style
        if style is ImpactStyle.CURVE:
            impact = impact * impact
        elif style is ImpactStyle.ANGLED:
            impact = max(0.0, (impact - 0.5) * 2)
        elif style is ImpactStyle.NOISY:
            impact = _clamp01(impact + n * 0.25)

        threshold = self.layer.noise_threshold
        if threshold > 0:
            impact = 1.0 if impact >= threshold else impact / threshold

        value = (lum * 2 - 1) * impact
        if self.layer.micro_freq > 0:
            cycles = self.layer.micro_freq / 2
            value += math.sin((world_x + world_y) * cycles * math.tau) * impact * 0.5
        return max(-1.0, min(1.0, value))
