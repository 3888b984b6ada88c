"""torchevents: composable event detectors for PyTorch trajectory simulation."""

from . import detection

__all__ = [
    "detection",
]

__version__ = "0.1.0"
