"""Domain models for plotweave.

This module contains the geometric values exchanged between generators and
their consumers. All models are designed to be:

- Small dataclasses with explicit fields
- Serializable to plain dictionaries for JSON output
- Independent of any renderer

Key classes:
- Point: A 2D point
- Polyline, Circle, Polygon: The three path variants (``Path``)
- Bounds: Canvas extent and drawable inset
- GenerationResult: Paths plus auxiliary helper paths
"""

from plotweave.domain.bounds import Bounds, GenerationResult
from plotweave.domain.path import Circle, Path, Point, Polygon, Polyline, ShapeKind, path_from_dict

__all__: list[str] = [
    # Enums
    "ShapeKind",
    # Core types
    "Point",
    "Polyline",
    "Circle",
    "Polygon",
    "Path",
    "Bounds",
    "GenerationResult",
    "path_from_dict",
]
