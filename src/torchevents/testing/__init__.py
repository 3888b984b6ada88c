"""Testing utilities for event detectors."""

from . import strategies

__all__ = [
    "strategies",
]
