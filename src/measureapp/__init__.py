"""
Measurement engine for raster images: pan/zoom transforms, snapping,
scale calibration and two-click line/rectangle measurements.
"""

from .core.errors import InvalidCalibration, InvalidSnapUnit, MeasureError
from .core.model import Calibrated, Line, Measurement, Point2D, Rectangle
from .core.store import MeasurementStore
from .features.editing.measure import MeasurementMode, MeasurementStateMachine
from .features.editing.snap import SnapConfig
from .features.navigation.zoom import ViewState
from .features.scale.scale import CalibrationModel
from .session import MeasureSession

__all__ = [
    'Calibrated',
    'CalibrationModel',
    'InvalidCalibration',
    'InvalidSnapUnit',
    'Line',
    'MeasureError',
    'MeasureSession',
    'Measurement',
    'MeasurementMode',
    'MeasurementStateMachine',
    'MeasurementStore',
    'Point2D',
    'Rectangle',
    'SnapConfig',
    'ViewState',
]
