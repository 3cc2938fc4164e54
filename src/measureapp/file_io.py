from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

import pymupdf as fitz
from PIL import Image, ImageGrab

from .config import EngineConfig
from .core.model import Point2D

logger = logging.getLogger(__name__)

# Same render zoom the PDF rasteriser uses (72 dpi * 2)
PDF_RENDER_ZOOM = 2


@dataclass(frozen=True)
class ImageBounds:
    """Pixel dimensions of the image being measured."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid image size {self.width}x{self.height}")

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def contains(self, point: Point2D) -> bool:
        return 0 <= point.x <= self.width and 0 <= point.y <= self.height

    def clamp(self, point: Point2D) -> Point2D:
        return Point2D(
            max(0.0, min(point.x, float(self.width))),
            max(0.0, min(point.y, float(self.height))),
        )


def bounds_from_image(img: Image.Image) -> ImageBounds:
    return ImageBounds(img.width, img.height)


def _image_file_bounds(path: str) -> ImageBounds:
    # Image.open only parses the header; pixel data is never loaded here.
    with Image.open(path) as img:
        return bounds_from_image(img)


def _pdf_page_bounds(pdf_path: str, page_number: int = 0, zoom: float = PDF_RENDER_ZOOM) -> ImageBounds:
    """Size of the given PDF page once rendered at ``zoom``."""
    with fitz.open(pdf_path) as doc:
        if page_number < 0 or page_number >= len(doc):
            raise ValueError(f"Invalid page number {page_number} for PDF with {len(doc)} pages")
        # Same pixel box get_pixmap produces for this matrix
        irect = (doc.load_page(page_number).rect * fitz.Matrix(zoom, zoom)).irect
    return ImageBounds(max(1, irect.width), max(1, irect.height))


def load_image_bounds(path: str, page_number: int = 0) -> ImageBounds:
    """Return the pixel bounds of an image file or a PDF page."""
    if os.path.splitext(path)[1].lower() == '.pdf':
        bounds = _pdf_page_bounds(path, page_number)
    else:
        bounds = _image_file_bounds(path)
    logger.info(f"Loaded {os.path.basename(path)}: {bounds.width}x{bounds.height} px")
    return bounds


def clipboard_image_bounds() -> Optional[ImageBounds]:
    """Bounds of the image currently on the clipboard, or None if there is none."""
    content = ImageGrab.grabclipboard()
    if not isinstance(content, Image.Image):
        logger.debug("Clipboard does not hold an image")
        return None
    return bounds_from_image(content)


def load_config(path: str) -> EngineConfig:
    with open(path, 'r', encoding='utf-8') as f:
        cfg = json.load(f)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    config = EngineConfig.from_dict(cfg)
    logger.info(f"Configuration loaded from {path}")
    return config


def save_config(config: EngineConfig, path: str) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.info(f"Configuration saved to {path}")
