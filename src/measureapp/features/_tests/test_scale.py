from __future__ import annotations

import pytest

from measureapp.core.errors import InvalidCalibration
from measureapp.core.model import Calibrated, Line, Point2D
from measureapp.features.editing.snap import SnapConfig
from measureapp.features.scale.scale import (
    AwaitingInput,
    CalibrationModel,
    Calibrating,
    Uncalibrated,
    derive_calibration,
)


def _awaiting(model: CalibrationModel, p0: Point2D, p1: Point2D) -> None:
    model.start()
    assert model.add_point(p0) is False
    assert model.add_point(p1) is True


def test_derive_calibration_scenario() -> None:
    cal = derive_calibration(100.0, 10.0, "mm")

    assert cal.pixels_per_unit == pytest.approx(10.0)
    assert cal.unit_label == "mm"
    assert cal.convert_length(50.0) == pytest.approx(5.0)
    assert cal.convert_area(200.0) == pytest.approx(2.0)


@pytest.mark.parametrize("ppu", [0.37, 1.0, 12.5, 4000.0])
@pytest.mark.parametrize("real_length", [0.01, 3.0, 250.0])
def test_calibration_round_trip(ppu: float, real_length: float) -> None:
    cal = derive_calibration(ppu * real_length, real_length, "cm")

    assert cal.convert_length(ppu * real_length) == pytest.approx(real_length)


@pytest.mark.parametrize(
    "pixel_distance,real_length,unit",
    [(0.0, 10.0, "mm"), (-1.0, 10.0, "mm"), (100.0, 0.0, "mm"), (100.0, -3.0, "mm"), (100.0, 10.0, "  ")],
)
def test_derive_calibration_rejects_invalid_input(pixel_distance: float, real_length: float, unit: str) -> None:
    with pytest.raises(InvalidCalibration):
        derive_calibration(pixel_distance, real_length, unit)


def test_workflow_reaches_calibrated() -> None:
    model = CalibrationModel()
    assert isinstance(model.state, Uncalibrated)

    _awaiting(model, Point2D(0, 0), Point2D(60, 80))
    assert isinstance(model.state, AwaitingInput)
    assert model.state.pixel_distance == pytest.approx(100.0)

    cal = model.apply(10.0, "mm")

    assert model.state == cal
    assert model.active == cal
    assert model.is_calibrated
    assert cal.pixels_per_unit == pytest.approx(10.0)


def test_failed_apply_keeps_awaiting_input() -> None:
    model = CalibrationModel()
    _awaiting(model, Point2D(0, 0), Point2D(10, 0))
    before = model.state

    with pytest.raises(InvalidCalibration):
        model.apply(0.0, "mm")

    assert model.state == before


def test_zero_pixel_reference_is_rejected_on_apply() -> None:
    model = CalibrationModel()
    _awaiting(model, Point2D(5, 5), Point2D(5, 5))

    with pytest.raises(InvalidCalibration):
        model.apply(1.0, "mm")
    assert isinstance(model.state, AwaitingInput)


@pytest.mark.parametrize("points", [0, 1])
def test_apply_before_both_points_is_rejected(points: int) -> None:
    model = CalibrationModel()
    with pytest.raises(InvalidCalibration):
        model.apply(1.0, "mm")

    model.start()
    for i in range(points):
        model.add_point(Point2D(i, i))
    with pytest.raises(InvalidCalibration):
        model.apply(1.0, "mm")
    assert isinstance(model.state, Calibrating)


def test_add_point_outside_calibration_is_ignored() -> None:
    model = CalibrationModel()

    assert model.add_point(Point2D(1, 1)) is False
    assert isinstance(model.state, Uncalibrated)


def test_cancel_returns_to_uncalibrated() -> None:
    model = CalibrationModel()
    model.start()
    model.add_point(Point2D(0, 0))

    model.cancel()

    assert isinstance(model.state, Uncalibrated)
    assert model.active is None


def test_cancel_recalibration_restores_previous_calibration() -> None:
    model = CalibrationModel()
    _awaiting(model, Point2D(0, 0), Point2D(100, 0))
    first = model.apply(10.0, "mm")

    _awaiting(model, Point2D(0, 0), Point2D(50, 0))
    assert model.active == first
    model.cancel()

    assert model.state == first


def test_recalibration_replaces_previous() -> None:
    model = CalibrationModel()
    _awaiting(model, Point2D(0, 0), Point2D(100, 0))
    model.apply(10.0, "mm")
    _awaiting(model, Point2D(0, 0), Point2D(100, 0))

    second = model.apply(1.0, "in")

    assert model.active == second
    assert second == Calibrated(pixels_per_unit=100.0, unit_label="in")


def test_second_reference_point_is_snapped() -> None:
    model = CalibrationModel()
    model.start()
    model.add_point(Point2D(0, 0))
    snap = SnapConfig(angle_snap_enabled=True, length_snap_enabled=True, length_snap_unit=5.0)

    model.add_point(Point2D(1, 41), snap)

    assert model.state.end.x == pytest.approx(0.0)
    assert model.state.end.y == pytest.approx(40.0)
    assert model.state.pixel_distance == pytest.approx(40.0)


def test_preview_only_after_first_point() -> None:
    model = CalibrationModel()
    model.start()
    assert model.preview(Point2D(3, 3)) is None

    model.add_point(Point2D(0, 0))

    assert model.preview(Point2D(3, 4)) == Line(Point2D(0, 0), Point2D(3, 4))


def test_status_messages_follow_workflow() -> None:
    model = CalibrationModel()
    assert model.status_message() == "No scale calibration"
    model.start()
    assert "first point" in model.status_message()
    model.add_point(Point2D(0, 0))
    assert "second point" in model.status_message()
    model.add_point(Point2D(0, 20))
    assert "Enter real-world distance" in model.status_message()
    model.apply(2.0, "cm")
    assert model.status_message() == "Scale: 10.0000 px/cm"
