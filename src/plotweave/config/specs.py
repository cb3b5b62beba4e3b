"""Shared parameter specs: noise layers, image effects and modifiers."""

from enum import Enum

from pydantic import Field

from plotweave.config.settings import ClampedModel


class NoiseType(str, Enum):
    """Shape function applied to the base coherent noise."""

    SIMPLEX = "simplex"
    RIDGED = "ridged"
    BILLOW = "billow"
    VALUE = "value"
    PERLIN = "perlin"
    TURBULENCE = "turbulence"
    STRIPES = "stripes"
    MARBLE = "marble"
    STEPS = "steps"
    FACET = "facet"
    SAWTOOTH = "sawtooth"
    TRIANGLE = "triangle"
    POLYGON = "polygon"
    WARP = "warp"
    CELLULAR = "cellular"
    VORONOI = "voronoi"
    CRACKLE = "crackle"
    FBM = "fbm"
    SWIRL = "swirl"
    RADIAL = "radial"
    CHECKER = "checker"
    ZIGZAG = "zigzag"
    RIPPLE = "ripple"
    SPIRAL = "spiral"
    GRAIN = "grain"
    CROSSHATCH = "crosshatch"
    PULSE = "pulse"
    DOMAIN = "domain"
    WEAVE = "weave"
    MOIRE = "moire"
    DUNES = "dunes"
    IMAGE = "image"


class BlendMode(str, Enum):
    """How a layer merges into the running combination."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    MIN = "min"
    MAX = "max"
    HATCH_DARK = "hatch-dark"
    HATCH_LIGHT = "hatch-light"


class TileMode(str, Enum):
    """Domain tiling applied before shaping."""

    OFF = "off"
    GRID = "grid"
    BRICK = "brick"
    HEX = "hex"
    DIAMOND = "diamond"
    TRIANGLE = "triangle"
    OFFSET = "offset"
    RADIAL = "radial"
    SPIRAL = "spiral"
    CHECKER = "checker"
    WAVE = "wave"


class ApplyMode(str, Enum):
    """Coordinate frame a layer is sampled in."""

    TOPDOWN = "topdown"
    LINEAR = "linear"


class ImageEffectMode(str, Enum):
    """Image processing step kinds."""

    LUMA = "luma"
    PIXELATE = "pixelate"
    EDGE = "edge"
    BLUR = "blur"
    LOWPASS = "lowpass"
    HIGHPASS = "highpass"
    BRIGHTNESS = "brightness"
    LEVELS = "levels"
    GAMMA = "gamma"
    CONTRAST = "contrast"
    EMBOSS = "emboss"
    SHARPEN = "sharpen"
    INVERT = "invert"
    THRESHOLD = "threshold"
    POSTERIZE = "posterize"
    SOLARIZE = "solarize"
    DITHER = "dither"
    MEDIAN = "median"
    VIGNETTE = "vignette"
    CURVE = "curve"
    BANDPASS = "bandpass"


class ImpactStyle(str, Enum):
    """How image darkness is mapped to noise impact."""

    LINEAR = "linear"
    CURVE = "curve"
    ANGLED = "angled"
    NOISY = "noisy"


class ImageEffectSpec(ClampedModel):
    """One step of an image processing chain."""

    enabled: bool = True
    mode: ImageEffectMode = ImageEffectMode.LUMA
    image_pixelate: int = Field(default=12, ge=2, le=512)
    image_edge_blur: float = Field(default=0.0, ge=0.0, le=4.0)
    image_blur_radius: float = Field(default=0.0, ge=0.0, le=6.0)
    image_blur_strength: float = Field(default=1.0, ge=0.0, le=1.0)
    image_lowpass_radius: float = Field(default=2.0, ge=0.0, le=6.0)
    image_lowpass_strength: float = Field(default=0.6, ge=0.0, le=1.0)
    image_highpass_radius: float = Field(default=1.0, ge=0.0, le=6.0)
    image_highpass_strength: float = Field(default=1.0, ge=0.0, le=2.0)
    image_brightness: float = Field(default=0.0, ge=-1.0, le=1.0)
    image_levels_low: float = Field(default=0.0, ge=0.0, le=1.0)
    image_levels_high: float = Field(default=1.0, ge=0.0, le=1.0)
    image_gamma: float = Field(default=1.0, ge=0.2, le=3.0)
    image_contrast: float = Field(default=1.0, ge=0.0, le=2.0)
    image_emboss_strength: float = Field(default=1.0, ge=0.0, le=2.0)
    image_sharpen_amount: float = Field(default=1.0, ge=0.0, le=2.0)
    image_sharpen_radius: int = Field(default=1, ge=0, le=4)
    image_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    image_posterize: int = Field(default=5, ge=2, le=10)
    image_solarize: float = Field(default=0.5, ge=0.0, le=1.0)
    image_dither: float = Field(default=0.5, ge=0.0, le=1.0)
    image_median_radius: int = Field(default=1, ge=1, le=4)
    image_vignette_strength: float = Field(default=0.4, ge=0.0, le=1.0)
    image_vignette_radius: float = Field(default=0.85, ge=0.2, le=1.0)
    image_curve_strength: float = Field(default=0.4, ge=0.0, le=1.0)
    image_band_center: float = Field(default=0.5, ge=0.0, le=1.0)
    image_band_width: float = Field(default=0.3, ge=0.05, le=1.0)


class NoiseLayerSpec(ClampedModel):
    """One layer of a composed noise field.

    The layer samples base noise at ``(x + shift) * zoom * freq`` rotated by
    ``angle`` degrees, optionally tiled, then shaped by ``type`` and scaled by
    ``amplitude``. Shape-specific fields only matter for their shape.
    """

    enabled: bool = True
    type: NoiseType = NoiseType.SIMPLEX
    blend: BlendMode = BlendMode.ADD
    amplitude: float = Field(default=1.0, ge=-1000.0, le=1000.0)
    zoom: float = Field(default=0.02, ge=0.0001, le=10.0)
    freq: float = Field(default=1.0, ge=0.01, le=50.0)
    angle: float = Field(default=0.0, ge=-360.0, le=360.0)
    shift_x: float = Field(default=0.0, ge=-10.0, le=10.0)
    shift_y: float = Field(default=0.0, ge=-10.0, le=10.0)
    tile_mode: TileMode = TileMode.OFF
    tile_padding: float = Field(default=0.0, ge=0.0, le=0.45)
    apply_mode: ApplyMode = ApplyMode.TOPDOWN
    seed: int = Field(default=0, ge=0, le=2_147_483_647)

    pattern_scale: float = Field(default=1.0, ge=0.1, le=50.0)
    warp_strength: float = Field(default=1.0, ge=0.0, le=10.0)
    cellular_scale: float = Field(default=1.0, ge=0.1, le=50.0)
    cellular_jitter: float = Field(default=1.0, ge=0.0, le=1.0)
    steps_count: int = Field(default=5, ge=2, le=64)
    octaves: int = Field(default=4, ge=1, le=8)
    lacunarity: float = Field(default=2.0, ge=1.1, le=4.0)
    gain: float = Field(default=0.5, ge=0.1, le=1.0)

    polygon_sides: int = Field(default=6, ge=3, le=64)
    polygon_radius: float = Field(default=2.0, ge=0.1, le=50.0)
    polygon_rotation: float = Field(default=0.0, ge=-360.0, le=360.0)
    polygon_outline: float = Field(default=0.0, ge=0.0, le=20.0)
    polygon_edge_radius: float = Field(default=0.0, ge=0.0, le=20.0)

    image_id: str = ""
    image_width: float = Field(default=1.0, ge=0.05, le=20.0)
    image_height: float = Field(default=1.0, ge=0.05, le=20.0)
    image_invert_color: bool = False
    image_invert_opacity: bool = False
    image_algo: ImageEffectMode = ImageEffectMode.LUMA
    image_effects: list[ImageEffectSpec] = Field(default_factory=list)
    noise_style: ImpactStyle = ImpactStyle.LINEAR
    noise_threshold: float = Field(default=0.0, ge=0.0, le=1.0)
    micro_freq: float = Field(default=0.0, ge=0.0, le=100.0)


class ModifierType(str, Enum):
    """Per-point transform kinds for modifier pipelines."""

    RIPPLE = "ripple"
    TWIST = "twist"
    RADIAL_NOISE = "radialNoise"
    FALLOFF = "falloff"
    CLIP = "clip"
    OFFSET = "offset"
    CIRCULAR_OFFSET = "circularOffset"
    NOISE = "noise"
    SHEAR = "shear"
    TAPER = "taper"


class ModifierSpec(ClampedModel):
    """One entry of a modifier list; list order is application order.

    Polar modifiers read ``amount``, ``frequency``, ``scale``, ``radius`` and
    ``offset_x``/``offset_y``. Local modifiers read the same fields in the
    petal's own frame.
    """

    type: ModifierType = ModifierType.RIPPLE
    enabled: bool = True
    amount: float = Field(default=0.0, ge=-1000.0, le=1000.0)
    frequency: float = Field(default=4.0, ge=0.0, le=256.0)
    scale: float = Field(default=0.2, ge=0.0001, le=10.0)
    radius: float | None = Field(default=None, ge=0.0, le=100000.0)
    offset_x: float = Field(default=0.0, ge=-10000.0, le=10000.0)
    offset_y: float = Field(default=0.0, ge=-10000.0, le=10000.0)
