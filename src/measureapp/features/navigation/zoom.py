from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Tuple

from ...core.model import Point2D

logger = logging.getLogger(__name__)

ZOOM_MIN = 0.01
ZOOM_MAX = 64.0
ZOOM_STEP = 1.25


@dataclass(frozen=True)
class ViewState:
    """Zoom factor and pan offset (screen position of image origin)."""

    zoom: float = 1.0
    pan: Point2D = field(default_factory=lambda: Point2D(0.0, 0.0))

    def __post_init__(self) -> None:
        if not self.zoom > 0:
            raise ValueError(f"Zoom must be positive, got {self.zoom}")


def to_screen(image_point: Point2D, view: ViewState) -> Point2D:
    return Point2D(
        image_point.x * view.zoom + view.pan.x,
        image_point.y * view.zoom + view.pan.y,
    )


def to_image(screen_point: Point2D, view: ViewState) -> Point2D:
    return Point2D(
        (screen_point.x - view.pan.x) / view.zoom,
        (screen_point.y - view.pan.y) / view.zoom,
    )


def clamp_zoom(zoom: float, zoom_min: float = ZOOM_MIN, zoom_max: float = ZOOM_MAX) -> float:
    return max(zoom_min, min(zoom, zoom_max))


def zoom_at(
    pivot: Point2D,
    new_zoom: float,
    view: ViewState,
    zoom_min: float = ZOOM_MIN,
    zoom_max: float = ZOOM_MAX,
) -> ViewState:
    """Return a view zoomed to ``new_zoom`` keeping the image point under ``pivot`` fixed."""
    zoom = clamp_zoom(new_zoom, zoom_min, zoom_max)
    zoom_ratio = zoom / view.zoom
    pan = Point2D(
        pivot.x - (pivot.x - view.pan.x) * zoom_ratio,
        pivot.y - (pivot.y - view.pan.y) * zoom_ratio,
    )
    logger.debug(f"Zoom {view.zoom:.4f} -> {zoom:.4f} at ({pivot.x:.1f}, {pivot.y:.1f})")
    return ViewState(zoom=zoom, pan=pan)


def zoom_in(
    pivot: Point2D,
    view: ViewState,
    step: float = ZOOM_STEP,
    zoom_min: float = ZOOM_MIN,
    zoom_max: float = ZOOM_MAX,
) -> ViewState:
    return zoom_at(pivot, view.zoom * step, view, zoom_min, zoom_max)


def zoom_out(
    pivot: Point2D,
    view: ViewState,
    step: float = ZOOM_STEP,
    zoom_min: float = ZOOM_MIN,
    zoom_max: float = ZOOM_MAX,
) -> ViewState:
    return zoom_at(pivot, view.zoom / step, view, zoom_min, zoom_max)


def fit_to_viewport(
    image_size: Tuple[int, int],
    viewport_size: Tuple[float, float],
    zoom_min: float = ZOOM_MIN,
    zoom_max: float = ZOOM_MAX,
) -> ViewState:
    """Largest zoom (at most 1.0) showing the whole image, centred in the viewport."""
    img_w, img_h = image_size
    view_w, view_h = viewport_size
    if img_w <= 0 or img_h <= 0:
        raise ValueError(f"Invalid image size {image_size}")
    zoom = clamp_zoom(min(view_w / img_w, view_h / img_h, 1.0), zoom_min, zoom_max)
    pan = Point2D((view_w - img_w * zoom) / 2.0, (view_h - img_h * zoom) / 2.0)
    return ViewState(zoom=zoom, pan=pan)
