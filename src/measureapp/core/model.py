from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from .errors import InvalidCalibration


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float

    def distance_to(self, other: "Point2D") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def __post_init__(self) -> None:
        # Coordinates are always floats, whatever the caller passed in
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))


@dataclass(frozen=True)
class Line:
    """Straight segment between two picked points."""

    p0: Point2D
    p1: Point2D
    kind: ClassVar[str] = "line"

    @property
    def length(self) -> float:
        return self.p0.distance_to(self.p1)


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle spanned by two opposite corners (any order)."""

    corner0: Point2D
    corner1: Point2D
    kind: ClassVar[str] = "rectangle"

    @property
    def width(self) -> float:
        return abs(self.corner1.x - self.corner0.x)

    @property
    def height(self) -> float:
        return abs(self.corner1.y - self.corner0.y)

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def min_corner(self) -> Point2D:
        return Point2D(min(self.corner0.x, self.corner1.x), min(self.corner0.y, self.corner1.y))

    @property
    def max_corner(self) -> Point2D:
        return Point2D(max(self.corner0.x, self.corner1.x), max(self.corner0.y, self.corner1.y))


MeasurementKind = Union[Line, Rectangle]


def unexpected_kind(geometry: object) -> TypeError:
    return TypeError(f"Unsupported measurement geometry: {type(geometry).__name__}")


@dataclass(frozen=True)
class Calibrated:
    """Active pixel -> real unit conversion."""

    pixels_per_unit: float
    unit_label: str

    def __post_init__(self) -> None:
        if not self.pixels_per_unit > 0:
            raise InvalidCalibration("pixels_per_unit must be positive")

    def convert_length(self, pixels: float) -> float:
        return pixels / self.pixels_per_unit

    def convert_area(self, square_pixels: float) -> float:
        return square_pixels / (self.pixels_per_unit ** 2)


@dataclass(frozen=True)
class Measurement:
    """A committed measurement.

    ``calibration`` is the snapshot that was active at commit time, so the
    reported real-world values never change when the image is re-calibrated
    later. All metrics are derived from ``geometry`` on demand.
    """

    id: int
    geometry: MeasurementKind
    calibration: Optional[Calibrated] = None

    @property
    def kind(self) -> str:
        return self.geometry.kind

    @property
    def unit_label(self) -> Optional[str]:
        return self.calibration.unit_label if self.calibration is not None else None

    # Line metrics
    @property
    def pixel_distance(self) -> Optional[float]:
        if isinstance(self.geometry, Line):
            return self.geometry.length
        return None

    @property
    def calibrated_distance(self) -> Optional[float]:
        if self.calibration is None or not isinstance(self.geometry, Line):
            return None
        return self.calibration.convert_length(self.geometry.length)

    # Rectangle metrics
    @property
    def pixel_width(self) -> Optional[float]:
        return self.geometry.width if isinstance(self.geometry, Rectangle) else None

    @property
    def pixel_height(self) -> Optional[float]:
        return self.geometry.height if isinstance(self.geometry, Rectangle) else None

    @property
    def pixel_area(self) -> Optional[float]:
        return self.geometry.area if isinstance(self.geometry, Rectangle) else None

    @property
    def calibrated_width(self) -> Optional[float]:
        if self.calibration is None or not isinstance(self.geometry, Rectangle):
            return None
        return self.calibration.convert_length(self.geometry.width)

    @property
    def calibrated_height(self) -> Optional[float]:
        if self.calibration is None or not isinstance(self.geometry, Rectangle):
            return None
        return self.calibration.convert_length(self.geometry.height)

    @property
    def calibrated_area(self) -> Optional[float]:
        if self.calibration is None or not isinstance(self.geometry, Rectangle):
            return None
        return self.calibration.convert_area(self.geometry.area)

    def summary(self) -> str:
        """Short human-readable description, e.g. for an info label."""
        unit = self.unit_label or "px"
        geometry = self.geometry
        if isinstance(geometry, Line):
            value = self.calibrated_distance if self.calibration else geometry.length
            return f"#{self.id} line: {value:.2f} {unit}"
        if isinstance(geometry, Rectangle):
            if self.calibration:
                w, h, a = self.calibrated_width, self.calibrated_height, self.calibrated_area
            else:
                w, h, a = geometry.width, geometry.height, geometry.area
            return f"#{self.id} rectangle: {w:.2f} x {h:.2f} {unit} ({a:.2f} {unit}²)"
        raise unexpected_kind(geometry)


def distance_to_segment(pt: Point2D, a: Point2D, b: Point2D) -> float:
    """Return the shortest distance from ``pt`` to the segment ``a``-``b``."""
    dx = b.x - a.x
    dy = b.y - a.y
    seg_len_sq = dx * dx + dy * dy
    if seg_len_sq == 0:
        return pt.distance_to(a)
    t = ((pt.x - a.x) * dx + (pt.y - a.y) * dy) / seg_len_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(pt.x - (a.x + t * dx), pt.y - (a.y + t * dy))


def distance_to_geometry(pt: Point2D, geometry: MeasurementKind) -> float:
    """Distance from a point to the drawn outline of a measurement."""
    if isinstance(geometry, Line):
        return distance_to_segment(pt, geometry.p0, geometry.p1)
    if isinstance(geometry, Rectangle):
        lo, hi = geometry.min_corner, geometry.max_corner
        corners = [lo, Point2D(hi.x, lo.y), hi, Point2D(lo.x, hi.y)]
        return min(
            distance_to_segment(pt, corners[i], corners[(i + 1) % 4]) for i in range(4)
        )
    raise unexpected_kind(geometry)
