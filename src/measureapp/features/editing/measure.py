from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Union

from ...core.model import Calibrated, Line, Measurement, MeasurementKind, Point2D, Rectangle
from ...core.store import MeasurementStore
from .snap import SnapConfig, apply_snap

logger = logging.getLogger(__name__)


class MeasurementMode(enum.Enum):
    LINE = "line"
    RECTANGLE = "rectangle"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Picking:
    mode: MeasurementMode
    first_point: Point2D


PickState = Union[Idle, Picking]


def build_geometry(mode: MeasurementMode, p0: Point2D, p1: Point2D) -> MeasurementKind:
    if mode is MeasurementMode.LINE:
        return Line(p0, p1)
    if mode is MeasurementMode.RECTANGLE:
        return Rectangle(p0, p1)
    raise ValueError(f"Unknown measurement mode: {mode!r}")


class MeasurementStateMachine:
    """Two-click point picking for line and rectangle measurements.

    The first click anchors ``p0``; pointer moves produce a preview; the
    second click snaps ``p1`` against ``p0``, commits the measurement with
    the calibration in force and returns to idle.
    """

    def __init__(self, store: MeasurementStore, mode: MeasurementMode = MeasurementMode.LINE) -> None:
        self.store = store
        self.mode = mode
        self.state: PickState = Idle()

    @property
    def is_picking(self) -> bool:
        return isinstance(self.state, Picking)

    def set_mode(self, mode: MeasurementMode) -> None:
        self.cancel()
        self.mode = mode

    def _snapped(self, state: Picking, point: Point2D, snap: Optional[SnapConfig]) -> Point2D:
        if snap is None:
            return point
        return apply_snap(
            state.first_point, point, snap, rectangle=state.mode is MeasurementMode.RECTANGLE
        )

    def pointer_move(self, point: Point2D, snap: Optional[SnapConfig] = None) -> Optional[MeasurementKind]:
        state = self.state
        if not isinstance(state, Picking):
            return None
        return build_geometry(state.mode, state.first_point, self._snapped(state, point, snap))

    def click(
        self,
        point: Point2D,
        snap: Optional[SnapConfig] = None,
        calibration: Optional[Calibrated] = None,
    ) -> Optional[Measurement]:
        """Advance the picking state. Returns the measurement on commit."""
        state = self.state
        if isinstance(state, Idle):
            self.state = Picking(mode=self.mode, first_point=point)
            return None
        end = self._snapped(state, point, snap)
        geometry = build_geometry(state.mode, state.first_point, end)
        measurement = self.store.create(geometry, calibration)
        self.state = Idle()
        logger.debug(f"Committed {measurement.summary()}")
        return measurement

    def cancel(self) -> bool:
        if isinstance(self.state, Idle):
            return False
        self.state = Idle()
        return True
