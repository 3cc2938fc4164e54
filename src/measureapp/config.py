from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict

from .features.editing.snap import DEFAULT_LENGTH_SNAP_UNIT, SnapConfig, validate_snap_unit
from .features.navigation.zoom import ZOOM_MAX, ZOOM_MIN, ZOOM_STEP

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Settings the engine consumes but does not own."""

    zoom_min: float = ZOOM_MIN
    zoom_max: float = ZOOM_MAX
    zoom_step: float = ZOOM_STEP
    length_snap_unit: float = DEFAULT_LENGTH_SNAP_UNIT
    length_snap_enabled: bool = False
    # Hit-test radius in screen pixels
    hit_tolerance_px: float = 8.0

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not 0 < self.zoom_min <= self.zoom_max:
            raise ValueError(f"Invalid zoom range [{self.zoom_min}, {self.zoom_max}]")
        if not self.zoom_step > 1.0:
            raise ValueError(f"Zoom step must be greater than 1, got {self.zoom_step}")
        if self.hit_tolerance_px < 0:
            raise ValueError("Hit tolerance must not be negative")
        validate_snap_unit(self.length_snap_unit)

    def snap_config(self, angle_snap_enabled: bool = False) -> SnapConfig:
        return SnapConfig(
            angle_snap_enabled=angle_snap_enabled,
            length_snap_enabled=self.length_snap_enabled,
            length_snap_unit=self.length_snap_unit,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})
