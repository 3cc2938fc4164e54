from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...core.model import Point2D
from .zoom import ViewState


def pan_by(view: ViewState, dx: float, dy: float) -> ViewState:
    return ViewState(zoom=view.zoom, pan=Point2D(view.pan.x + dx, view.pan.y + dy))


@dataclass
class PanDrag:
    """Tracks a pan gesture between press and release (screen space)."""

    last: Optional[Point2D] = None

    @property
    def active(self) -> bool:
        return self.last is not None

    def start(self, screen_point: Point2D) -> None:
        self.last = screen_point

    def move(self, screen_point: Point2D, view: ViewState) -> ViewState:
        if self.last is None:
            return view
        dx = screen_point.x - self.last.x
        dy = screen_point.y - self.last.y
        self.last = screen_point
        return pan_by(view, dx, dy)

    def end(self) -> None:
        self.last = None
