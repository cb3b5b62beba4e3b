"""Plotweave - Deterministic procedural geometry for pen plotters.

Plotweave generates vector artwork as ordered point sequences ("paths") from a
named algorithm, a parameter set and a seed. The same inputs always produce the
same paths, so a drawing can be re-rendered or re-plotted exactly.

Example:
    $ plotweave generate lissajous --seed 42 --output figure.json

This writes the generated paths as JSON, ready for a renderer or plotter driver.
"""

__version__ = "0.1.0"
__author__ = "Plotweave Contributors"

__all__ = ["__author__", "__version__"]
