from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ...core.errors import InvalidCalibration
from ...core.model import Calibrated, Line, Point2D
from ..editing.snap import SnapConfig, apply_snap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Uncalibrated:
    pass


@dataclass(frozen=True)
class Calibrating:
    """Picking the reference segment; ``previous`` is restored on cancel."""

    first_point: Optional[Point2D] = None
    previous: Optional[Calibrated] = None


@dataclass(frozen=True)
class AwaitingInput:
    """Both reference points placed; waiting for the real length and unit."""

    start: Point2D
    end: Point2D
    pixel_distance: float
    previous: Optional[Calibrated] = None


CalibrationState = Union[Uncalibrated, Calibrating, AwaitingInput, Calibrated]


def derive_calibration(pixel_distance: float, real_length: float, unit: str) -> Calibrated:
    """Return the calibration mapping ``pixel_distance`` pixels to ``real_length`` units."""
    if not pixel_distance > 0:
        raise InvalidCalibration("Select two distinct points to set the scale.")
    if not real_length > 0:
        raise InvalidCalibration("Length must be greater than zero.")
    unit = (unit or "").strip()
    if not unit:
        raise InvalidCalibration("Please choose a unit.")
    return Calibrated(pixels_per_unit=pixel_distance / real_length, unit_label=unit)


class CalibrationModel:
    """Drives the two-point scale calibration workflow.

    Uncalibrated -> Calibrating -> AwaitingInput -> Calibrated. Cancelling
    before ``apply`` restores whatever calibration was active when
    ``start`` was called.
    """

    def __init__(self) -> None:
        self.state: CalibrationState = Uncalibrated()

    @property
    def active(self) -> Optional[Calibrated]:
        """Calibration applied to new measurements right now."""
        state = self.state
        if isinstance(state, Calibrated):
            return state
        if isinstance(state, (Calibrating, AwaitingInput)):
            return state.previous
        return None

    @property
    def is_calibrating(self) -> bool:
        return isinstance(self.state, (Calibrating, AwaitingInput))

    @property
    def is_calibrated(self) -> bool:
        return isinstance(self.state, Calibrated)

    def start(self) -> None:
        self.state = Calibrating(previous=self.active)
        logger.debug("Scale calibration started")

    def add_point(self, point: Point2D, snap: Optional[SnapConfig] = None) -> bool:
        """Place a reference point. Returns True when the length is now awaited."""
        state = self.state
        if not isinstance(state, Calibrating):
            return False
        if state.first_point is None:
            self.state = Calibrating(first_point=point, previous=state.previous)
            return False
        start = state.first_point
        end = apply_snap(start, point, snap) if snap is not None else point
        self.state = AwaitingInput(
            start=start,
            end=end,
            pixel_distance=start.distance_to(end),
            previous=state.previous,
        )
        return True

    def preview(self, point: Point2D, snap: Optional[SnapConfig] = None) -> Optional[Line]:
        """Rubber-band segment from the first reference point to ``point``."""
        state = self.state
        if not isinstance(state, Calibrating) or state.first_point is None:
            return None
        end = apply_snap(state.first_point, point, snap) if snap is not None else point
        return Line(state.first_point, end)

    def apply(self, real_length: float, unit: str) -> Calibrated:
        state = self.state
        if not isinstance(state, AwaitingInput):
            raise InvalidCalibration("Place both reference points before entering a length.")
        try:
            calibrated = derive_calibration(state.pixel_distance, real_length, unit)
        except InvalidCalibration as e:
            logger.warning(f"Calibration rejected: {e}")
            raise
        self.state = calibrated
        logger.info(
            f"Scale set: {calibrated.pixels_per_unit:.4f} px/{calibrated.unit_label} "
            f"({state.pixel_distance:.2f} px = {real_length} {calibrated.unit_label})"
        )
        return calibrated

    def cancel(self) -> None:
        state = self.state
        if not isinstance(state, (Calibrating, AwaitingInput)):
            return
        self.state = state.previous if state.previous is not None else Uncalibrated()
        logger.debug("Scale calibration cancelled")

    def reset(self) -> None:
        self.state = Uncalibrated()

    def status_message(self) -> str:
        state = self.state
        if isinstance(state, Calibrating):
            if state.first_point is None:
                return "Scale calibration: Click first point on known distance"
            return "Scale calibration: Click second point"
        if isinstance(state, AwaitingInput):
            return "Scale calibration: Enter real-world distance"
        if isinstance(state, Calibrated):
            return f"Scale: {state.pixels_per_unit:.4f} px/{state.unit_label}"
        return "No scale calibration"
