from __future__ import annotations

import csv
import io
import json
import logging
import os
from typing import Any, Dict, Iterable, List, Optional

from ..core.model import Calibrated, Line, Measurement, Rectangle, unexpected_kind

logger = logging.getLogger(__name__)

LINE_FIELDS: List[str] = [
    'id', 'kind', 'p0_x', 'p0_y', 'p1_x', 'p1_y',
    'pixel_distance', 'calibrated_distance', 'unit_label', 'pixels_per_unit',
]
RECTANGLE_FIELDS: List[str] = [
    'id', 'kind', 'corner0_x', 'corner0_y', 'corner1_x', 'corner1_y',
    'pixel_width', 'pixel_height', 'pixel_area',
    'calibrated_width', 'calibrated_height', 'calibrated_area',
    'unit_label', 'pixels_per_unit',
]


def export_record(m: Measurement) -> Dict[str, Any]:
    """Flat record for one measurement; calibrated fields are None when uncalibrated."""
    cal = m.calibration
    geometry = m.geometry
    if isinstance(geometry, Line):
        return {
            'id': m.id,
            'kind': m.kind,
            'p0_x': geometry.p0.x,
            'p0_y': geometry.p0.y,
            'p1_x': geometry.p1.x,
            'p1_y': geometry.p1.y,
            'pixel_distance': m.pixel_distance,
            'calibrated_distance': m.calibrated_distance,
            'unit_label': m.unit_label,
            'pixels_per_unit': cal.pixels_per_unit if cal else None,
        }
    if isinstance(geometry, Rectangle):
        return {
            'id': m.id,
            'kind': m.kind,
            'corner0_x': geometry.corner0.x,
            'corner0_y': geometry.corner0.y,
            'corner1_x': geometry.corner1.x,
            'corner1_y': geometry.corner1.y,
            'pixel_width': m.pixel_width,
            'pixel_height': m.pixel_height,
            'pixel_area': m.pixel_area,
            'calibrated_width': m.calibrated_width,
            'calibrated_height': m.calibrated_height,
            'calibrated_area': m.calibrated_area,
            'unit_label': m.unit_label,
            'pixels_per_unit': cal.pixels_per_unit if cal else None,
        }
    raise unexpected_kind(geometry)


def export_records(measurements: Iterable[Measurement]) -> List[Dict[str, Any]]:
    return [export_record(m) for m in measurements]


def _csv_cell(value: Any) -> Any:
    if value is None:
        return ''
    if isinstance(value, float):
        return f'{value:.2f}'
    return value


def _write_section(out: io.StringIO, title: str, fieldnames: List[str], records: List[Dict[str, Any]]) -> None:
    out.write(f'# {title}\n')
    writer = csv.DictWriter(out, fieldnames=fieldnames, lineterminator='\n')
    writer.writeheader()
    for rec in records:
        writer.writerow({k: _csv_cell(rec[k]) for k in fieldnames})


def to_csv_text(measurements: Iterable[Measurement]) -> str:
    """CSV with one section per measurement kind; empty when nothing was measured."""
    records = export_records(measurements)
    lines = [r for r in records if r['kind'] == Line.kind]
    rects = [r for r in records if r['kind'] == Rectangle.kind]
    out = io.StringIO()
    if lines:
        _write_section(out, 'Line Measurements', LINE_FIELDS, lines)
    if rects:
        if lines:
            out.write('\n')
        _write_section(out, 'Rectangle Measurements', RECTANGLE_FIELDS, rects)
    return out.getvalue()


def to_json_text(measurements: Iterable[Measurement], calibration: Optional[Calibrated] = None) -> str:
    """Pretty-printed JSON; ``calibration`` is the one active at export time."""
    records = export_records(measurements)
    data = {
        'calibration': (
            {'pixels_per_unit': calibration.pixels_per_unit, 'unit_label': calibration.unit_label}
            if calibration is not None else None
        ),
        'measurements': [r for r in records if r['kind'] == Line.kind],
        'rectangle_measurements': [r for r in records if r['kind'] == Rectangle.kind],
    }
    return json.dumps(data, indent=2)


def write_export(path: str, measurements: Iterable[Measurement], calibration: Optional[Calibrated] = None) -> None:
    """Write CSV or JSON depending on the extension of ``path``."""
    ext = os.path.splitext(path)[1].lower()
    measurements = list(measurements)
    if ext == '.csv':
        text = to_csv_text(measurements)
    elif ext == '.json':
        text = to_json_text(measurements, calibration)
    else:
        raise ValueError(f"Unsupported export format: {ext or path}")
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(text)
    logger.info(f"Exported {len(measurements)} measurements to {path}")
