"""Exceptions for event detectors."""


class DetectorError(Exception):
    """Base exception for all event detector errors."""

    pass


class EmptyOperandSet(DetectorError, ValueError):
    """Raised when a boolean combination is built from zero detectors."""

    pass


class InvalidDetectorParameter(DetectorError, ValueError):
    """Raised when a search parameter is not strictly positive and finite."""

    pass
