"""Path generators for plotweave.

Each generator turns a parameter model, a seeded random source, a noise
field and canvas bounds into paths. Generators are:

- Deterministic for a fixed seed and parameter set
- Fail-soft (parameters are clamped, degenerate geometry is skipped)
- Registered by stable string id

Key classes:
- Algorithm: Base class of every generator
- AlgorithmRegistry: Mapping from id to generator

Key functions:
- build_default_registry: Registry with every built-in generator
"""

from plotweave.algorithms.base import Algorithm, AlgorithmRegistry, result
from plotweave.algorithms.catalog import DEFAULT_ALGORITHMS, build_default_registry

__all__ = [
    "DEFAULT_ALGORITHMS",
    "Algorithm",
    "AlgorithmRegistry",
    "build_default_registry",
    "result",
]
