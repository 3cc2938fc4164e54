from __future__ import annotations


class MeasureError(Exception):
    """Base class for errors raised by the measurement engine."""


class InvalidCalibration(MeasureError, ValueError):
    """Calibration could not be derived or applied from the given input."""


class InvalidSnapUnit(MeasureError, ValueError):
    """Length snap unit must be strictly positive."""
