"""Configuration management for plotweave.

This module provides configuration management using Pydantic models.
Creative parameters are clamped to safe ranges rather than rejected.

Key classes:
- ClampedModel: Base model that clamps numbers and falls back on bad enums
- NoiseLayerSpec, ImageEffectSpec, ModifierSpec: Shared building blocks
- AlgorithmParams and one subclass per algorithm
- GeometryConfig, RenderConfig, LoggingConfig: Kernel settings
- KernelSettings: Main application settings
"""

from plotweave.config.params import (
    AlgorithmParams,
    AttractorParams,
    BoidsParams,
    FlowfieldParams,
    GridParams,
    HarmonographParams,
    HyphaeParams,
    LayeredNoiseParams,
    LissajousParams,
    PendulumSpec,
    PetalisParams,
    PhyllaParams,
    RingsParams,
    ShapePackParams,
    SpiralParams,
    TopoParams,
    WavetableParams,
)
from plotweave.config.settings import (
    ClampedModel,
    GeometryConfig,
    KernelSettings,
    LoggingConfig,
    RenderConfig,
    SimplifyMethod,
    get_default_settings,
)
from plotweave.config.specs import (
    BlendMode,
    ImageEffectMode,
    ImageEffectSpec,
    ModifierSpec,
    ModifierType,
    NoiseLayerSpec,
    NoiseType,
    TileMode,
)

__all__ = [
    "AlgorithmParams",
    "AttractorParams",
    "BlendMode",
    "BoidsParams",
    "ClampedModel",
    "FlowfieldParams",
    "GeometryConfig",
    "GridParams",
    "HarmonographParams",
    "HyphaeParams",
    "ImageEffectMode",
    "ImageEffectSpec",
    "KernelSettings",
    "LayeredNoiseParams",
    "LissajousParams",
    "LoggingConfig",
    "ModifierSpec",
    "ModifierType",
    "NoiseLayerSpec",
    "NoiseType",
    "PendulumSpec",
    "PetalisParams",
    "PhyllaParams",
    "RenderConfig",
    "RingsParams",
    "ShapePackParams",
    "SimplifyMethod",
    "SpiralParams",
    "TileMode",
    "TopoParams",
    "WavetableParams",
    "get_default_settings",
]
