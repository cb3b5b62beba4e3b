"""Parameter models, one per algorithm.

Every model derives from ``AlgorithmParams`` which carries the seed and the
layer transform applied by the engine after generation. Field ranges are the
documented safe bounds: out-of-range values are clamped, never rejected.
"""

from enum import Enum
from typing import Any

from pydantic import Field, model_validator

from plotweave.config.settings import ClampedModel
from plotweave.config.specs import ModifierSpec, NoiseLayerSpec, NoiseType


class AlgorithmParams(ClampedModel):
    """Fields shared by every algorithm."""

    seed: int = Field(default=1, ge=0, le=2_147_483_647)
    pos_x: float = Field(default=0.0, ge=-100000.0, le=100000.0)
    pos_y: float = Field(default=0.0, ge=-100000.0, le=100000.0)
    scale_x: float = Field(default=1.0, ge=-100.0, le=100.0)
    scale_y: float = Field(default=1.0, ge=-100.0, le=100.0)
    rotation: float = Field(default=0.0, ge=-360.0, le=360.0)
    smoothing: float | None = Field(default=None, ge=0.0, le=1.0)
    simplify: float | None = Field(default=None, ge=0.0, le=50.0)


class FlowNoiseType(str, Enum):
    SIMPLEX = "simplex"
    RIDGED = "ridged"
    BILLOW = "billow"
    TURBULENCE = "turbulence"
    SWIRL = "swirl"
    RADIAL = "radial"
    CHECKER = "checker"
    CURL = "curl"


class FlowfieldParams(AlgorithmParams):
    noise_scale: float = Field(default=0.01, ge=0.0001, le=1.0)
    density: int = Field(default=1000, ge=1, le=20000)
    step_len: float = Field(default=5.0, ge=0.1, le=100.0)
    max_steps: int = Field(default=50, ge=1, le=2000)
    min_steps: int = Field(default=2, ge=2, le=2000)
    min_length: float = Field(default=0.0, ge=0.0, le=100000.0)
    force: float = Field(default=1.0, ge=0.0, le=10.0)
    chaos: float = Field(default=0.0, ge=0.0, le=10.0)
    octaves: int = Field(default=1, ge=1, le=8)
    lacunarity: float = Field(default=2.0, ge=1.1, le=4.0)
    gain: float = Field(default=0.5, ge=0.1, le=1.0)
    noise_type: FlowNoiseType = FlowNoiseType.SIMPLEX
    angle_offset: float = Field(default=0.0, ge=-360.0, le=360.0)


class HyphaeOrigin(str, Enum):
    RANDOM = "random"
    CENTER = "center"


class HyphaeParams(AlgorithmParams):
    sources: int = Field(default=2, ge=1, le=100)
    steps: int = Field(default=50, ge=1, le=5000)
    branch_prob: float = Field(default=0.05, ge=0.0, le=1.0)
    angle_var: float = Field(default=0.5, ge=0.0, le=6.2832)
    seg_len: float = Field(default=3.0, ge=0.1, le=100.0)
    max_branches: int = Field(default=1000, ge=10, le=20000)
    origin: HyphaeOrigin = HyphaeOrigin.RANDOM


class LissajousParams(AlgorithmParams):
    freq_x: float = Field(default=3.0, ge=0.0, le=100.0)
    freq_y: float = Field(default=2.0, ge=0.0, le=100.0)
    damping: float = Field(default=0.001, ge=0.0, le=1.0)
    phase: float = Field(default=1.5, ge=-100.0, le=100.0)
    resolution: int = Field(default=100, ge=10, le=100000)
    scale: float = Field(default=1.0, ge=0.01, le=10.0)
    close_lines: bool = False


class AttractorType(str, Enum):
    LORENZ = "lorenz"
    AIZAWA = "aizawa"


class AttractorParams(AlgorithmParams):
    type: AttractorType = AttractorType.LORENZ
    iter: int = Field(default=1000, ge=10, le=500000)
    scale: float = Field(default=3.0, ge=0.01, le=1000.0)
    sigma: float = Field(default=10.0, ge=0.0, le=100.0)
    rho: float = Field(default=28.0, ge=0.0, le=200.0)
    beta: float = Field(default=2.66, ge=0.0, le=20.0)
    dt: float = Field(default=0.01, ge=0.0001, le=0.1)


class PendulumSpec(ClampedModel):
    """One damped pendulum of a harmonograph; phases are in degrees."""

    enabled: bool = True
    amp_x: float = Field(default=0.0, ge=-10000.0, le=10000.0)
    amp_y: float = Field(default=0.0, ge=-10000.0, le=10000.0)
    phase_x: float = Field(default=0.0, ge=-3600.0, le=3600.0)
    phase_y: float = Field(default=0.0, ge=-3600.0, le=3600.0)
    freq: float = Field(default=1.0, ge=0.0, le=100.0)
    micro: float = Field(default=0.0, ge=-10.0, le=10.0)
    damp: float = Field(default=0.0, ge=0.0, le=10.0)


def _default_pendulums() -> list[PendulumSpec]:
    return [
        PendulumSpec(amp_x=120, amp_y=120, phase_x=0, phase_y=90, freq=2, damp=0.02),
        PendulumSpec(amp_x=80, amp_y=80, phase_x=90, phase_y=0, freq=3, micro=0.01, damp=0.015),
        PendulumSpec(amp_x=20, amp_y=20, phase_x=45, phase_y=135, freq=1, damp=0.01),
    ]


class ThickeningMode(str, Enum):
    PARALLEL = "parallel"
    SINUSOIDAL = "sinusoidal"


class RenderMode(str, Enum):
    LINE = "line"
    POINTS = "points"
    SEGMENTS = "segments"
    DASHED = "dashed"


class HarmonographParams(AlgorithmParams):
    pendulums: list[PendulumSpec] = Field(default_factory=_default_pendulums)
    samples: int = Field(default=4000, ge=200, le=200000)
    duration: float = Field(default=30.0, ge=1.0, le=1000.0)
    scale: float = Field(default=1.0, ge=0.01, le=100.0)
    paper_rotation: float = Field(default=0.0, ge=-10.0, le=10.0)
    loop_drift: float = Field(default=0.0, ge=-1.0, le=1.0)
    settle_threshold: float = Field(default=0.0, ge=0.0, le=10000.0)
    settle_window: int = Field(default=24, ge=1, le=100000)
    width_multiplier: int = Field(default=1, ge=1, le=16)
    thickening_mode: ThickeningMode = ThickeningMode.PARALLEL
    render_mode: RenderMode = RenderMode.LINE
    point_stride: int = Field(default=4, ge=1, le=1000)
    point_size: float = Field(default=0.4, ge=0.1, le=50.0)
    segment_stride: int = Field(default=6, ge=1, le=1000)
    segment_length: float = Field(default=6.0, ge=0.5, le=500.0)
    dash_length: float = Field(default=4.0, ge=0.5, le=1000.0)
    dash_gap: float = Field(default=2.0, ge=0.0, le=1000.0)
    gap_size: float = Field(default=0.0, ge=0.0, le=1000.0)
    gap_offset: float = Field(default=0.0, ge=0.0, le=100000.0)
    gap_randomness: float = Field(default=0.0, ge=0.0, le=1.0)
    show_pendulum_guides: bool = False

    @model_validator(mode="before")
    @classmethod
    def _legacy_pendulums(cls, data: Any) -> Any:
        """Accept the flat three-pendulum form (``ampX1``, ``freq2``, ...).

        An explicit non-empty ``pendulums`` list wins. An empty one counts as
        missing, so the flat keys (or the default trio) apply.
        """
        if not isinstance(data, dict):
            return data
        pendulums = data.get("pendulums")
        if isinstance(pendulums, list) and pendulums:
            return data
        values = {key: value for key, value in data.items() if key != "pendulums"}
        keys = ("ampX", "ampY", "phaseX", "phaseY", "micro", "damp")
        if not any(f"{key}{i}" in values or f"freq{i}" in values for key in keys for i in (1, 2, 3)):
            return values
        pendulums = []
        for i in (1, 2, 3):
            pendulum = {key: values.pop(f"{key}{i}", 0) for key in keys}
            pendulum["freq"] = values.pop(f"freq{i}", 1)
            pendulums.append(pendulum)
        values["pendulums"] = pendulums
        return values


class PhyllaShape(str, Enum):
    CIRCLE = "circle"
    POLYGON = "polygon"


class PhyllaParams(AlgorithmParams):
    count: int = Field(default=500, ge=1, le=20000)
    spacing: float = Field(default=5.0, ge=0.1, le=100.0)
    angle_str: float = Field(default=137.5, ge=0.0, le=360.0)
    divergence: float = Field(default=1.0, ge=0.1, le=5.0)
    noise_inf: float = Field(default=0.0, ge=0.0, le=500.0)
    dot_size: float = Field(default=1.0, ge=0.1, le=50.0)
    shape_type: PhyllaShape = PhyllaShape.CIRCLE
    sides: int = Field(default=6, ge=3, le=100)
    side_jitter: int = Field(default=0, ge=0, le=50)


class PackShape(str, Enum):
    CIRCLE = "circle"
    POLYGON = "polygon"


class PerspectiveType(str, Enum):
    NONE = "none"
    RADIAL = "radial"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ShapePackParams(AlgorithmParams):
    count: int = Field(default=300, ge=1, le=5000)
    min_r: float = Field(default=2.0, ge=0.1, le=500.0)
    max_r: float = Field(default=20.0, ge=0.1, le=1000.0)
    padding: float = Field(default=1.0, ge=0.0, le=100.0)
    attempts: int = Field(default=200, ge=50, le=20000)
    segments: int = Field(default=32, ge=3, le=256)
    shape: PackShape = PackShape.CIRCLE
    rotation_step: float = Field(default=0.0, ge=-360.0, le=360.0)
    perspective_type: PerspectiveType = PerspectiveType.NONE
    perspective: float = Field(default=0.0, ge=-2.0, le=2.0)
    perspective_x: float = Field(default=0.0, ge=-100000.0, le=100000.0)
    perspective_y: float = Field(default=0.0, ge=-100000.0, le=100000.0)


class LayeredNoiseParams(AlgorithmParams):
    """Algorithms that sample a composed noise field.

    When ``noises`` is empty the algorithm builds a single layer from its own
    flat noise fields.
    """

    noises: list[NoiseLayerSpec] = Field(default_factory=list)

    def noise_layers(self, fallback: NoiseLayerSpec) -> list[NoiseLayerSpec]:
        """Configured layers, or ``[fallback]`` when none are given."""
        return list(self.noises) if self.noises else [fallback]


class RingsParams(LayeredNoiseParams):
    rings: int = Field(default=20, ge=1, le=1000)
    gap: float = Field(default=1.0, ge=0.1, le=5.0)
    offset_x: float = Field(default=0.0, ge=-10000.0, le=10000.0)
    offset_y: float = Field(default=0.0, ge=-10000.0, le=10000.0)
    amplitude: float = Field(default=8.0, ge=0.0, le=1000.0)
    noise_scale: float = Field(default=0.01, ge=0.0001, le=1.0)
    noise_offset_x: float = Field(default=0.0, ge=-100000.0, le=100000.0)
    noise_offset_y: float = Field(default=0.0, ge=-100000.0, le=100000.0)
    noise_layer: float = Field(default=0.0, ge=-10000.0, le=10000.0)
    noise_radius: float = Field(default=100.0, ge=0.0, le=10000.0)
    noise_type: NoiseType = NoiseType.SIMPLEX


class SpiralParams(LayeredNoiseParams):
    loops: float = Field(default=10.0, ge=1.0, le=500.0)
    res: int = Field(default=100, ge=1, le=5000)
    start_r: float = Field(default=5.0, ge=0.0, le=10000.0)
    angle_offset: float = Field(default=0.0, ge=-360.0, le=360.0)
    axis_snap: bool = False
    pulse_amp: float = Field(default=0.0, ge=0.0, le=2.0)
    pulse_freq: float = Field(default=0.0, ge=0.0, le=64.0)
    noise_amp: float = Field(default=10.0, ge=0.0, le=1000.0)
    noise_freq: float = Field(default=0.1, ge=0.0001, le=10.0)


class MappingMode(str, Enum):
    MARCHING = "marching"
    SMOOTH = "smooth"
    BEZIER = "bezier"
    GRADIENT = "gradient"


class TopoParams(AlgorithmParams):
    resolution: int = Field(default=120, ge=20, le=600)
    levels: int = Field(default=10, ge=1, le=200)
    noise_scale: float = Field(default=0.01, ge=0.0001, le=1.0)
    noise_offset_x: float = Field(default=0.0, ge=-100000.0, le=100000.0)
    noise_offset_y: float = Field(default=0.0, ge=-100000.0, le=100000.0)
    noise_type: NoiseType = NoiseType.SIMPLEX
    octaves: int = Field(default=1, ge=1, le=8)
    lacunarity: float = Field(default=2.0, ge=1.1, le=4.0)
    gain: float = Field(default=0.5, ge=0.1, le=1.0)
    sensitivity: float = Field(default=1.0, ge=0.01, le=10.0)
    threshold_offset: float = Field(default=0.0, ge=-1.0, le=1.0)
    mapping_mode: MappingMode = MappingMode.MARCHING


class FadeMode(str, Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"
    BOTH = "both"


class Continuity(str, Enum):
    NONE = "none"
    SINGLE = "single"
    DOUBLE = "double"


class WavetableParams(LayeredNoiseParams):
    lines: int = Field(default=40, ge=1, le=1000)
    amplitude: float = Field(default=30.0, ge=-1000.0, le=1000.0)
    zoom: float = Field(default=0.02, ge=0.0001, le=10.0)
    freq: float = Field(default=1.0, ge=0.01, le=50.0)
    noise_angle: float = Field(default=0.0, ge=-360.0, le=360.0)
    noise_type: NoiseType = NoiseType.SIMPLEX
    tilt: float = Field(default=0.0, ge=-100.0, le=100.0)
    gap: float = Field(default=1.0, ge=0.1, le=10.0)
    line_offset: float = Field(default=180.0, ge=-360.0, le=360.0)
    dampen_extremes: bool = False
    overlap_padding: float = Field(default=0.0, ge=0.0, le=100.0)
    flat_caps: bool = False
    continuity: Continuity = Continuity.NONE
    edge_fade: float = Field(default=0.0, ge=0.0, le=100.0)
    edge_fade_threshold: float = Field(default=0.0, ge=0.0, le=100.0)
    edge_fade_feather: float = Field(default=0.0, ge=0.0, le=100.0)
    edge_fade_mode: FadeMode = FadeMode.BOTH
    vertical_fade: float = Field(default=0.0, ge=0.0, le=100.0)
    vertical_fade_threshold: float = Field(default=0.0, ge=0.0, le=100.0)
    vertical_fade_feather: float = Field(default=0.0, ge=0.0, le=100.0)
    vertical_fade_mode: FadeMode = FadeMode.BOTH


class GridType(str, Enum):
    WARP = "warp"
    SHIFT = "shift"


class GridParams(AlgorithmParams):
    rows: int = Field(default=20, ge=1, le=1000)
    cols: int = Field(default=20, ge=1, le=1000)
    distortion: float = Field(default=10.0, ge=0.0, le=1000.0)
    noise_scale: float = Field(default=0.05, ge=0.0001, le=1.0)
    type: GridType = GridType.WARP
    chaos: float = Field(default=0.0, ge=0.0, le=1000.0)


class FlockMode(str, Enum):
    BIRDS = "birds"
    FISH = "fish"


class BoidsParams(AlgorithmParams):
    count: int = Field(default=100, ge=1, le=2000)
    steps: int = Field(default=100, ge=1, le=5000)
    speed: float = Field(default=2.0, ge=0.01, le=100.0)
    sep_dist: float = Field(default=10.0, ge=0.0, le=1000.0)
    align_dist: float = Field(default=20.0, ge=0.0, le=1000.0)
    coh_dist: float = Field(default=20.0, ge=0.0, le=1000.0)
    force: float = Field(default=0.05, ge=0.001, le=10.0)
    sep_weight: float = Field(default=1.0, ge=0.0, le=10.0)
    align_weight: float = Field(default=1.0, ge=0.0, le=10.0)
    coh_weight: float = Field(default=1.0, ge=0.0, le=10.0)
    mode: FlockMode = FlockMode.BIRDS


class RingMode(str, Enum):
    SINGLE = "single"
    DUAL = "dual"


class SpiralMode(str, Enum):
    GOLDEN = "golden"
    CUSTOM = "custom"


class PetalProfile(str, Enum):
    OVAL = "oval"
    TEARDROP = "teardrop"
    LANCEOLATE = "lanceolate"
    HEART = "heart"
    SPOON = "spoon"
    ROUNDED = "rounded"
    SPATULATE = "spatulate"
    DESIGNER = "designer"


class InnerShading(str, Enum):
    RADIAL = "radial"
    GRADIENT = "gradient"
    SPIRAL = "spiral"
    STIPPLE = "stipple"


class OuterShading(str, Enum):
    RIM = "rim"
    OUTLINE = "outline"
    EDGE = "edge"


class ShadowMode(str, Enum):
    """Which shading runs survive directional-light splitting."""

    OFF = "off"
    SHADOW = "shadow"
    LIGHT = "light"


class CenterType(str, Enum):
    NONE = "none"
    DISK = "disk"
    DOME = "dome"
    STARBURST = "starburst"
    DOT = "dot"
    FILAMENT = "filament"


def _default_designer_profile() -> list[float]:
    return [0.0, 0.55, 0.9, 1.0, 0.75, 0.0]


class PetalisParams(AlgorithmParams):
    # placement
    ring_mode: RingMode = RingMode.SINGLE
    count: int = Field(default=120, ge=1, le=5000)
    inner_count: int = Field(default=60, ge=1, le=5000)
    outer_count: int = Field(default=120, ge=1, le=5000)
    count_jitter: float = Field(default=0.0, ge=0.0, le=0.5)
    ring_split: float = Field(default=0.5, ge=0.1, le=0.9)
    ring_offset: float = Field(default=0.0, ge=-360.0, le=360.0)
    spiral_mode: SpiralMode = SpiralMode.GOLDEN
    custom_angle: float = Field(default=137.507764, ge=0.0, le=360.0)
    spiral_tightness: float = Field(default=1.0, ge=0.5, le=5.0)
    radial_growth: float = Field(default=1.0, ge=0.1, le=5.0)
    rotation_jitter: float = Field(default=0.0, ge=0.0, le=180.0)
    size_jitter: float = Field(default=0.0, ge=0.0, le=0.6)
    drift_strength: float = Field(default=0.0, ge=0.0, le=1.0)
    drift_noise: float = Field(default=0.2, ge=0.01, le=5.0)
    angular_drift: float = Field(default=0.0, ge=-360.0, le=360.0)

    # petal shape
    petal_profile: PetalProfile = PetalProfile.TEARDROP
    center_profile: PetalProfile | None = None
    designer_profile: list[float] = Field(default_factory=_default_designer_profile)
    petal_steps: int = Field(default=28, ge=12, le=80)
    petal_scale: float = Field(default=30.0, ge=1.0, le=1000.0)
    petal_width_ratio: float = Field(default=0.45, ge=0.05, le=3.0)
    tip_sharpness: float = Field(default=0.5, ge=0.0, le=1.0)
    tip_curl: float = Field(default=0.0, ge=-2.0, le=2.0)
    base_flare: float = Field(default=0.0, ge=0.0, le=2.0)
    base_pinch: float = Field(default=0.0, ge=0.0, le=1.0)
    edge_wave_amp: float = Field(default=0.0, ge=0.0, le=1.0)
    edge_wave_freq: float = Field(default=2.0, ge=0.0, le=20.0)
    center_size_morph: float = Field(default=0.0, ge=-1.0, le=5.0)
    center_size_curve: float = Field(default=1.0, ge=0.1, le=5.0)
    center_shape_morph: float = Field(default=0.0, ge=0.0, le=1.0)
    center_curl_boost: float = Field(default=0.0, ge=0.0, le=5.0)
    center_wave_boost: float = Field(default=0.0, ge=0.0, le=5.0)
    radius_scale: float = Field(default=0.0, ge=-1.0, le=5.0)
    radius_scale_curve: float = Field(default=1.0, ge=0.1, le=5.0)
    bud_mode: bool = False
    bud_radius: float = Field(default=0.15, ge=0.05, le=0.5)
    bud_tightness: float = Field(default=0.5, ge=0.0, le=1.0)
    petal_modifiers: list[ModifierSpec] = Field(default_factory=list)

    # shading
    inner_shading: bool = False
    inner_shading_type: InnerShading = InnerShading.RADIAL
    inner_density: float = Field(default=0.4, ge=0.0, le=1.0)
    outer_shading: bool = False
    outer_shading_type: OuterShading = OuterShading.RIM
    outer_density: float = Field(default=0.4, ge=0.0, le=1.0)
    shading_transition: float = Field(default=0.3, ge=0.0, le=1.0)
    hatch_angle: float = Field(default=0.0, ge=-360.0, le=360.0)
    hatch_noise: float = Field(default=0.0, ge=0.0, le=5.0)
    shading_dash: float = Field(default=0.0, ge=0.0, le=500.0)
    shading_gap: float = Field(default=0.0, ge=0.0, le=500.0)

    # occlusion and light
    occlusion: bool = False
    shadow_mode: ShadowMode = ShadowMode.OFF
    light_angle: float = Field(default=225.0, ge=-360.0, le=360.0)
    light_distance: float = Field(default=2.0, ge=1.05, le=100.0)

    # centre
    center_type: CenterType = CenterType.DISK
    center_radius: float = Field(default=6.0, ge=0.5, le=1000.0)
    center_density: int = Field(default=12, ge=1, le=1000)
    center_falloff: float = Field(default=0.6, ge=0.0, le=1.0)
    center_ring: bool = False
    center_ring_radius: float | None = Field(default=None, ge=0.5, le=10000.0)
    center_ring_density: int | None = Field(default=None, ge=6, le=1000)
    center_connectors: bool = False
    connector_count: int | None = Field(default=None, ge=4, le=1000)
    connector_length: float | None = Field(default=None, ge=1.0, le=10000.0)
    connector_jitter: float = Field(default=0.0, ge=0.0, le=1.0)
    center_modifiers: list[ModifierSpec] = Field(default_factory=list)
