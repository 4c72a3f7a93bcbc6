"""
Module: export.overlay

Purpose:
    Debug visualization for export documents. Draws every product box
    (and every stacked box) onto a captured screenshot so misalignment
    between the export and the rendered image is easy to spot.

Key Functions:
    - draw_export_boxes(): Overlay boxes onto a copy of an image
    - save_export_overlay(): Draw and save to disk

Dependencies:
    - PIL: Image drawing
    - export.models: ExportDocument

Used By:
    - Capture verification (manual debugging)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .models import ExportDocument

logger = logging.getLogger(__name__)

# Visualization constants
BASE_COLOR = (255, 0, 0, 200)       # Red - base products
STACKED_COLOR = (0, 0, 255, 200)    # Blue - stacked products
LABEL_BG_COLOR = (0, 0, 0, 160)
LABEL_TEXT_COLOR = (255, 255, 255)
CANVAS_COLOR = (255, 255, 255)
BOX_LINE_WIDTH = 2
FONT_SIZE = 12


def _load_font() -> ImageFont.ImageFont:
    try:
        return ImageFont.truetype("Arial.ttf", FONT_SIZE)
    except (IOError, OSError):
        return ImageFont.load_default()


def _draw_box(
    draw: ImageDraw.ImageDraw,
    bbox: Tuple[int, int, int, int],
    label: str,
    color: Tuple[int, int, int, int],
    font: ImageFont.ImageFont,
) -> None:
    """Draw one outlined box with its label at the top-left corner."""
    draw.rectangle(bbox, outline=color, width=BOX_LINE_WIDTH)
    if not label:
        return
    x0, y0 = bbox[0], bbox[1]
    text_bbox = draw.textbbox((x0 + 2, y0 + 2), label, font=font)
    draw.rectangle(text_bbox, fill=LABEL_BG_COLOR)
    draw.text((x0 + 2, y0 + 2), label, fill=LABEL_TEXT_COLOR, font=font)


def draw_export_boxes(
    document: ExportDocument,
    image: Optional[Image.Image] = None,
    *,
    labels: bool = True,
) -> Image.Image:
    """
    Draw every box of an export document.

    Args:
        document: Export document (coordinates in the image's pixel space)
        image: Captured screenshot; a blank canvas sized from
            document.dimensions is used when omitted
        labels: Whether to print the SKU inside each box

    Returns:
        New RGB image with overlays (the input image is not modified)

    Example:
        >>> debug = draw_export_boxes(document, Image.open("capture.png"))
        >>> debug.save("capture_boxes.png")
    """
    if image is None:
        size = (
            max(1, int(round(document.dimensions.width))),
            max(1, int(round(document.dimensions.height))),
        )
        base = Image.new("RGBA", size, CANVAS_COLOR + (255,))
    else:
        base = image.convert("RGBA")

    overlay = Image.new("RGBA", base.size, (255, 255, 255, 0))
    draw = ImageDraw.Draw(overlay)
    font = _load_font()

    drawn = 0
    for product in document.iter_products():
        for index, (sku, box) in enumerate(product.iter_boxes()):
            color = BASE_COLOR if index == 0 else STACKED_COLOR
            bbox = (int(box.left), int(box.top), int(box.right), int(box.bottom))
            _draw_box(draw, bbox, sku if labels else "", color, font)
            drawn += 1

    logger.debug(f"Drew {drawn} boxes on {base.size[0]}x{base.size[1]} image")
    return Image.alpha_composite(base, overlay).convert("RGB")


def save_export_overlay(
    document: ExportDocument,
    output_path: Path,
    image: Optional[Image.Image] = None,
) -> Path:
    """Draw boxes and save the result as an image file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    draw_export_boxes(document, image).save(output_path)
    logger.info(f"Saved export overlay to {output_path}")
    return output_path
