"""
Headless measurement session.

Wires screen-space pointer and keyboard events to the measurement engine the
way a GUI client does: clicks are mapped through the current view into image
space, snapped, and either fed to the scale calibration (while it is active)
or to the line/rectangle picker. The session owns the view state, the active
calibration and the measurement store; a UI layer only forwards events and
draws what the session reports.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from .app_io.export_mod import export_records, write_export
from .config import EngineConfig
from .core.model import Calibrated, Measurement, MeasurementKind, Point2D
from .core.store import MeasurementStore
from .features.editing.measure import MeasurementMode, MeasurementStateMachine
from .features.editing.snap import SnapConfig, validate_snap_unit
from .features.navigation.pan import PanDrag
from .features.navigation.zoom import ViewState, fit_to_viewport, to_image, to_screen, zoom_at
from .features.navigation.zoom import zoom_in as view_zoom_in, zoom_out as view_zoom_out
from .features.scale.scale import CalibrationModel
from .file_io import ImageBounds, clipboard_image_bounds, load_image_bounds

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT: Tuple[float, float] = (800.0, 600.0)


class MeasureSession:
    """Top-level state of one measuring session on one image."""

    def __init__(self, config: Optional[EngineConfig] = None, viewport_size: Tuple[float, float] = DEFAULT_VIEWPORT) -> None:
        # Private copy: set_length_snap must not leak into the caller's config
        self.config = replace(config) if config is not None else EngineConfig()
        self.viewport_size = viewport_size
        self.view = ViewState()
        self.image_bounds: Optional[ImageBounds] = None
        self.store = MeasurementStore()
        self.picker = MeasurementStateMachine(self.store)
        self.calibration = CalibrationModel()
        self.angle_snap = False
        self._pan = PanDrag()

    # ---------- image ----------
    def set_image_bounds(self, bounds: ImageBounds) -> None:
        """Start over on a new image: measurements and calibration are reset."""
        self.image_bounds = bounds
        self.view = fit_to_viewport(bounds.size, self.viewport_size, self.config.zoom_min, self.config.zoom_max)
        self.store.clear()
        self.picker.cancel()
        self.calibration.reset()

    def load_image(self, path: str, page_number: int = 0) -> ImageBounds:
        bounds = load_image_bounds(path, page_number)
        self.set_image_bounds(bounds)
        return bounds

    def paste_from_clipboard(self) -> Optional[ImageBounds]:
        bounds = clipboard_image_bounds()
        if bounds is not None:
            self.set_image_bounds(bounds)
        return bounds

    # ---------- snapping ----------
    @property
    def snap(self) -> SnapConfig:
        return self.config.snap_config(angle_snap_enabled=self.angle_snap)

    def set_angle_snap(self, enabled: bool) -> None:
        """Reflects the modifier key state."""
        self.angle_snap = bool(enabled)

    def set_length_snap(self, enabled: bool, unit: Optional[float] = None) -> None:
        if unit is not None:
            self.config.length_snap_unit = validate_snap_unit(unit)
        self.config.length_snap_enabled = bool(enabled)

    # ---------- coordinates ----------
    def screen_to_image(self, x: float, y: float) -> Point2D:
        return to_image(Point2D(x, y), self.view)

    def image_to_screen(self, point: Point2D) -> Point2D:
        return to_screen(point, self.view)

    def _inside_image(self, point: Point2D) -> bool:
        return self.image_bounds is None or self.image_bounds.contains(point)

    # ---------- pointer / keyboard ----------
    def set_mode(self, mode: MeasurementMode) -> None:
        self.picker.set_mode(mode)

    def on_canvas_click(self, x: float, y: float) -> Optional[Measurement]:
        """Handle a left click in screen space. Returns a newly committed measurement."""
        point = self.screen_to_image(x, y)
        if not self._inside_image(point):
            return None
        if self.calibration.is_calibrating:
            self.calibration.add_point(point, self.snap)
            return None
        return self.picker.click(point, self.snap, self.calibration.active)

    def on_canvas_motion(self, x: float, y: float) -> Optional[MeasurementKind]:
        """Preview geometry (image space) for the pick in progress, if any."""
        point = self.screen_to_image(x, y)
        if self.calibration.is_calibrating:
            return self.calibration.preview(point, self.snap)
        return self.picker.pointer_move(point, self.snap)

    def on_escape(self) -> None:
        if self.calibration.is_calibrating:
            self.calibration.cancel()
        else:
            self.picker.cancel()

    # ---------- calibration ----------
    def start_calibration(self) -> None:
        self.picker.cancel()
        self.calibration.start()

    def apply_calibration(self, real_length: float, unit: str) -> Calibrated:
        return self.calibration.apply(real_length, unit)

    def cancel_calibration(self) -> None:
        self.calibration.cancel()

    # ---------- navigation ----------
    def _pivot(self, x: Optional[float], y: Optional[float]) -> Point2D:
        view_w, view_h = self.viewport_size
        return Point2D(view_w / 2 if x is None else x, view_h / 2 if y is None else y)

    def set_zoom(self, zoom: float, x: Optional[float] = None, y: Optional[float] = None) -> None:
        self.view = zoom_at(self._pivot(x, y), zoom, self.view, self.config.zoom_min, self.config.zoom_max)

    def zoom_in(self, x: Optional[float] = None, y: Optional[float] = None) -> None:
        cfg = self.config
        self.view = view_zoom_in(self._pivot(x, y), self.view, cfg.zoom_step, cfg.zoom_min, cfg.zoom_max)

    def zoom_out(self, x: Optional[float] = None, y: Optional[float] = None) -> None:
        cfg = self.config
        self.view = view_zoom_out(self._pivot(x, y), self.view, cfg.zoom_step, cfg.zoom_min, cfg.zoom_max)

    def zoom_fit(self) -> None:
        if self.image_bounds is not None:
            self.view = fit_to_viewport(
                self.image_bounds.size, self.viewport_size, self.config.zoom_min, self.config.zoom_max
            )
        else:
            self.view = ViewState()

    def on_pan_start(self, x: float, y: float) -> None:
        self._pan.start(Point2D(x, y))

    def on_pan_move(self, x: float, y: float) -> None:
        self.view = self._pan.move(Point2D(x, y), self.view)

    def on_pan_end(self) -> None:
        self._pan.end()

    # ---------- measurements ----------
    @property
    def measurements(self) -> List[Measurement]:
        return list(self.store)

    def measurement_at(self, x: float, y: float) -> Optional[Measurement]:
        tolerance = self.config.hit_tolerance_px / self.view.zoom
        return self.store.find_near(self.screen_to_image(x, y), tolerance)

    def delete_measurement(self, measurement_id: int) -> bool:
        return self.store.remove_by_id(measurement_id)

    def delete_at(self, x: float, y: float) -> Optional[Measurement]:
        hit = self.measurement_at(x, y)
        if hit is not None:
            self.store.remove_by_id(hit.id)
        return hit

    def clear_measurements(self) -> None:
        self.store.clear()

    # ---------- export / status ----------
    def export_records(self) -> List[Dict[str, Any]]:
        return export_records(self.store)

    def export(self, path: str) -> None:
        write_export(path, self.store, self.calibration.active)

    def status_message(self) -> str:
        if self.calibration.is_calibrating:
            return self.calibration.status_message()
        if self.picker.is_picking:
            return f"{self.picker.mode.value.capitalize()}: Click second point (Esc to cancel)"
        return self.calibration.status_message()
