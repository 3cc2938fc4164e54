from __future__ import annotations

import itertools
import logging
from typing import Iterator, List, Optional

from .model import (
    Calibrated,
    Line,
    Measurement,
    MeasurementKind,
    Point2D,
    Rectangle,
    distance_to_geometry,
)

logger = logging.getLogger(__name__)

# Shared by every store so ids stay unique for the whole process.
_ID_COUNTER = itertools.count(1)


def next_measurement_id() -> int:
    return next(_ID_COUNTER)


class MeasurementStore:
    """Ordered collection of committed measurements."""

    def __init__(self) -> None:
        self._items: List[Measurement] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Measurement]:
        return iter(list(self._items))

    def __contains__(self, measurement_id: object) -> bool:
        return any(m.id == measurement_id for m in self._items)

    def create(self, geometry: MeasurementKind, calibration: Optional[Calibrated]) -> Measurement:
        """Wrap ``geometry`` in a new Measurement with a fresh id and store it."""
        measurement = Measurement(id=next_measurement_id(), geometry=geometry, calibration=calibration)
        self.add(measurement)
        return measurement

    def add(self, measurement: Measurement) -> None:
        if measurement.id in self:
            raise ValueError(f"Measurement id {measurement.id} is already stored")
        self._items.append(measurement)
        logger.debug(f"Stored measurement #{measurement.id} ({measurement.kind})")

    def remove_by_id(self, measurement_id: int) -> bool:
        for idx, m in enumerate(self._items):
            if m.id == measurement_id:
                del self._items[idx]
                logger.debug(f"Removed measurement #{measurement_id}")
                return True
        return False

    def clear(self) -> None:
        count = len(self._items)
        self._items.clear()
        logger.debug(f"Cleared {count} measurements")

    def get(self, measurement_id: int) -> Optional[Measurement]:
        for m in self._items:
            if m.id == measurement_id:
                return m
        return None

    def lines(self) -> List[Measurement]:
        return [m for m in self._items if isinstance(m.geometry, Line)]

    def rectangles(self) -> List[Measurement]:
        return [m for m in self._items if isinstance(m.geometry, Rectangle)]

    def find_near(self, point: Point2D, tolerance: float) -> Optional[Measurement]:
        """Return the measurement whose outline is closest to ``point``.

        Only outlines within ``tolerance`` (image pixels) are considered; the
        most recently added one wins a tie.
        """
        best: Optional[Measurement] = None
        best_dist = tolerance
        for m in reversed(self._items):
            dist = distance_to_geometry(point, m.geometry)
            if dist < best_dist or (best is None and dist <= tolerance):
                best = m
                best_dist = dist
        return best
