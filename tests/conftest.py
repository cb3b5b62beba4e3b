"""Shared fixtures for plotweave tests."""

import pytest

from plotweave.algorithms import AlgorithmRegistry, build_default_registry
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds


@pytest.fixture
def bounds() -> Bounds:
    """Default 400 x 400 canvas with a 20 unit margin."""
    return Bounds(400.0, 400.0, margin=20.0)


@pytest.fixture
def small_bounds() -> Bounds:
    """Small canvas used to keep heavy generators fast."""
    return Bounds(200.0, 200.0, margin=20.0)


@pytest.fixture
def rng() -> SeededRng:
    return SeededRng(42)


@pytest.fixture
def noise() -> NoiseField:
    return NoiseField.from_seed(42)


@pytest.fixture
def registry() -> AlgorithmRegistry:
    return build_default_registry()


# Small workloads so registry-wide tests stay fast
FAST_PARAMS: dict[str, dict] = {
    "flowfield": {"density": 40, "maxSteps": 20},
    "hyphae": {"steps": 30},
    "lissajous": {"resolution": 200},
    "attractor": {"iter": 400},
    "harmonograph": {"samples": 400},
    "phylla": {"count": 80},
    "shapePack": {"count": 15, "attempts": 60},
    "petalis": {"count": 10, "petalSteps": 12},
    "petalisDesigner": {"innerCount": 5, "outerCount": 6, "petalSteps": 12},
    "rings": {"rings": 4},
    "spiral": {"loops": 3, "res": 30},
    "topo": {"resolution": 30, "levels": 4},
    "wavetable": {"lines": 6},
    "grid": {"rows": 4, "cols": 4},
    "boids": {"count": 8, "steps": 20},
}


@pytest.fixture
def fast_params() -> dict[str, dict]:
    """Per-algorithm parameter overrides with small workloads."""
    return {key: dict(value) for key, value in FAST_PARAMS.items()}
