"""Shared kernel for plotweave generators.

This module contains the building blocks every generator relies on:

- Seeded random source and coherent noise (layered, tiled, image driven)
- Arc-length resampling and dash chopping
- Polar and local path modifiers
- Occlusion clipping and shadow tests
- Marching-squares contour extraction
- Shared polyline geometry (smoothing, simplification, intersections)

All services are designed to be:
- Deterministic for a fixed seed
- Pure apart from the random cursor
- Free of renderer concerns

The generation orchestrator lives in ``plotweave.core.engine`` and is not
re-exported here, since it depends on the algorithm catalog which in turn
depends on this package.

Key classes:
- SeededRng: Linear congruential random source
- NoiseField: Layered noise sampling and blending
- ScalarField: Sampled grid for contour extraction
- ContourExtractor: Marching-squares iso-line extraction
"""

from plotweave.core.contour import ContourExtractor, ScalarField
from plotweave.core.geometry import (
    chaikin,
    line_intersection,
    point_in_polygon,
    signed_area,
    simplify_rdp,
    simplify_visvalingam,
    smooth_path,
)
from plotweave.core.noise import NoiseField, SimplexNoise
from plotweave.core.rng import SeededRng

__all__ = [
    # Noise and randomness
    "ContourExtractor",
    "NoiseField",
    "ScalarField",
    "SeededRng",
    "SimplexNoise",
    # Geometry functions
    "chaikin",
    "line_intersection",
    "point_in_polygon",
    "signed_area",
    "simplify_rdp",
    "simplify_visvalingam",
    "smooth_path",
]
