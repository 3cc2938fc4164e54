from __future__ import annotations

import math
from dataclasses import dataclass

from ...core.errors import InvalidSnapUnit
from ...core.model import Point2D

DEFAULT_LENGTH_SNAP_UNIT: float = 1.0


def validate_snap_unit(unit: float) -> float:
    if not unit > 0:
        raise InvalidSnapUnit(f"Length snap unit must be positive, got {unit!r}")
    return float(unit)


@dataclass(frozen=True)
class SnapConfig:
    angle_snap_enabled: bool = False
    length_snap_enabled: bool = False
    length_snap_unit: float = DEFAULT_LENGTH_SNAP_UNIT

    def __post_init__(self) -> None:
        validate_snap_unit(self.length_snap_unit)


def snap_angle(origin: Point2D, free_point: Point2D) -> Point2D:
    """Project ``free_point`` onto the nearest axis-aligned ray from ``origin``.

    The distance to ``origin`` is preserved. Comparing ``|dx|`` with ``|dy|``
    picks the ray closest in angle without trigonometry. At exactly 45° off
    an axis the ray with the smaller absolute angle wins: 0° over ±90°, and
    ±90° over 180°.
    """
    dx = free_point.x - origin.x
    dy = free_point.y - origin.y
    if dx == 0 and dy == 0:
        return free_point
    distance = math.hypot(dx, dy)
    if abs(dx) > abs(dy) or (abs(dx) == abs(dy) and dx > 0):
        return Point2D(origin.x + math.copysign(distance, dx), origin.y)
    return Point2D(origin.x, origin.y + math.copysign(distance, dy))


def snap_length(length: float, unit: float) -> float:
    """Round ``length`` to the nearest multiple of ``unit`` (ties to even)."""
    validate_snap_unit(unit)
    return round(length / unit) * unit


def snap_line_end(p0: Point2D, p1: Point2D, unit: float) -> Point2D:
    """Move ``p1`` along the ``p0``-``p1`` direction so the length is a multiple of ``unit``."""
    distance = p0.distance_to(p1)
    if distance == 0:
        return p1
    snapped = snap_length(distance, unit)
    scale = snapped / distance
    return Point2D(p0.x + (p1.x - p0.x) * scale, p0.y + (p1.y - p0.y) * scale)


def snap_rectangle_corner(corner0: Point2D, corner1: Point2D, unit: float) -> Point2D:
    """Round width and height independently, keeping ``corner0`` as the anchor."""
    dx = corner1.x - corner0.x
    dy = corner1.y - corner0.y
    width = math.copysign(snap_length(abs(dx), unit), dx)
    height = math.copysign(snap_length(abs(dy), unit), dy)
    return Point2D(corner0.x + width, corner0.y + height)


def apply_snap(origin: Point2D, point: Point2D, config: SnapConfig, rectangle: bool = False) -> Point2D:
    """Angle snap first (segments only), then length snap along the result."""
    if rectangle:
        if config.length_snap_enabled:
            return snap_rectangle_corner(origin, point, config.length_snap_unit)
        return point
    if config.angle_snap_enabled:
        point = snap_angle(origin, point)
    if config.length_snap_enabled:
        point = snap_line_end(origin, point, config.length_snap_unit)
    return point
