"""Hypothesis strategies for event detector testing."""

from ._constant_detectors import ConstantDetector, constant_detectors
from ._detector_parameters import detector_parameters
from ._numbers import positive_real_numbers, real_numbers

__all__ = [
    # Numeric strategies
    "positive_real_numbers",
    "real_numbers",
    # Detector strategies
    "detector_parameters",
    "constant_detectors",
    "ConstantDetector",
]
