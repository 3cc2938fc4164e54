from __future__ import annotations

import math

import pytest

from measureapp.core.errors import InvalidCalibration
from measureapp.core.model import (
    Calibrated,
    Line,
    Measurement,
    Point2D,
    Rectangle,
    distance_to_geometry,
    distance_to_segment,
)


def test_line_measurement_reports_pixel_distance_only_when_uncalibrated() -> None:
    m = Measurement(id=1, geometry=Line(Point2D(10, 10), Point2D(13, 14)))

    assert m.kind == "line"
    assert m.pixel_distance == pytest.approx(5.0)
    assert m.calibrated_distance is None
    assert m.unit_label is None
    assert m.pixel_area is None


def test_rectangle_metrics_are_non_negative_for_any_corner_order() -> None:
    a, b = Point2D(13, 14), Point2D(10, 10)
    m = Measurement(id=2, geometry=Rectangle(a, b))

    assert m.pixel_width == pytest.approx(3.0)
    assert m.pixel_height == pytest.approx(4.0)
    assert m.pixel_area == pytest.approx(12.0)
    assert m.pixel_distance is None
    assert m.geometry.min_corner == Point2D(10, 10)
    assert m.geometry.max_corner == Point2D(13, 14)


def test_calibrated_rectangle_converts_area_with_squared_factor() -> None:
    cal = Calibrated(pixels_per_unit=10.0, unit_label="mm")
    m = Measurement(id=3, geometry=Rectangle(Point2D(0, 0), Point2D(30, 40)), calibration=cal)

    assert m.calibrated_width == pytest.approx(3.0)
    assert m.calibrated_height == pytest.approx(4.0)
    assert m.calibrated_area == pytest.approx(12.0)
    assert m.unit_label == "mm"


def test_degenerate_geometry_is_zero_not_an_error() -> None:
    p = Point2D(5, 5)

    assert Measurement(id=4, geometry=Line(p, p)).pixel_distance == 0.0
    assert Measurement(id=5, geometry=Rectangle(p, p)).pixel_area == 0.0


@pytest.mark.parametrize("ppu", [0.0, -2.0])
def test_calibrated_rejects_non_positive_factor(ppu: float) -> None:
    with pytest.raises(InvalidCalibration):
        Calibrated(pixels_per_unit=ppu, unit_label="mm")


def test_summary_uses_calibrated_units() -> None:
    cal = Calibrated(pixels_per_unit=10.0, unit_label="mm")
    m = Measurement(id=7, geometry=Line(Point2D(0, 0), Point2D(50, 0)), calibration=cal)

    assert m.summary() == "#7 line: 5.00 mm"


def test_distance_to_segment_clamps_to_endpoints() -> None:
    a, b = Point2D(0, 0), Point2D(10, 0)

    assert distance_to_segment(Point2D(5, 3), a, b) == pytest.approx(3.0)
    assert distance_to_segment(Point2D(13, 4), a, b) == pytest.approx(5.0)
    assert distance_to_segment(Point2D(3, 4), a, a) == pytest.approx(5.0)


def test_distance_to_rectangle_measures_to_nearest_edge() -> None:
    rect = Rectangle(Point2D(10, 10), Point2D(0, 0))

    assert distance_to_geometry(Point2D(5, 12), rect) == pytest.approx(2.0)
    assert distance_to_geometry(Point2D(5, 5), rect) == pytest.approx(5.0)
    assert math.isclose(distance_to_geometry(Point2D(0, 0), rect), 0.0)


def test_point_coordinates_are_stored_as_floats() -> None:
    p = Point2D(3, 4)

    assert type(p.x) is float and type(p.y) is float
    assert p == Point2D(3.0, 4.0)
