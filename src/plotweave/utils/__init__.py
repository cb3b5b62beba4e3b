"""Utility functions for plotweave.

This module provides utility functions including:

- Logging setup and configuration
- Generation statistics
"""

from plotweave.utils.logging import (
    GenerationLogger,
    GenerationStats,
    configure_logging,
)

__all__ = [
    "GenerationLogger",
    "GenerationStats",
    "configure_logging",
]
