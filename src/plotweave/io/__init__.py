"""File I/O layer for plotweave.

This module handles reading parameter presets and writing generated paths
as JSON. It keeps file formats out of the generation kernel.

Key responsibilities:
- Load parameter presets (flat mappings, single records or libraries)
- Serialize generation results with their provenance

Key classes:
- PresetReader: Load presets from JSON
- PathWriter: Save generation results to JSON
"""

from plotweave.io.reader import Preset, PresetReader
from plotweave.io.writer import PathWriter, read_result, result_document

__all__ = [
    "PathWriter",
    "Preset",
    "PresetReader",
    "read_result",
    "result_document",
]
