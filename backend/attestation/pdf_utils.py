"""
Low-level PDF helpers shared by the annotation renderers.

PyMuPDF works in a top-left coordinate system while the layout table and the
annotation model use PDF page space (origin bottom-left), so every rectangle
is flipped here before it reaches the page.
"""

from __future__ import annotations

import io
import logging
from typing import Tuple

import fitz  # PyMuPDF
from PIL import Image

logger = logging.getLogger(__name__)

Rect = Tuple[float, float, float, float]

TEXT_FONT = "helv"  # base-14 Helvetica
BLACK = (0, 0, 0)


def to_fitz_rect(rect: Rect, page_height: float) -> fitz.Rect:
    """Convert an (x, y, width, height) box in PDF space to a PyMuPDF rect."""
    x, y, width, height = rect
    top = page_height - y - height
    return fitz.Rect(x, top, x + width, top + height)


def image_to_png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    if image.mode not in ("1", "L", "RGB", "RGBA"):
        image = image.convert("RGBA")
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def add_free_text(page: fitz.Page, rect: Rect, text: str, font_size: float) -> fitz.Annot:
    """
    Add a borderless, transparent FreeText annotation with black, left-aligned
    Helvetica text.
    """
    annot = page.add_freetext_annot(
        to_fitz_rect(rect, page.rect.height),
        text,
        fontsize=font_size,
        fontname=TEXT_FONT,
        text_color=BLACK,
        fill_color=None,
        align=fitz.TEXT_ALIGN_LEFT,
    )
    logger.debug("FreeText %r at %s (size %s)", text, rect, font_size)
    return annot


def draw_image(page: fitz.Page, rect: Rect, image: Image.Image) -> None:
    """Paint the raster pixels of `image` into `rect`."""
    page.insert_image(to_fitz_rect(rect, page.rect.height), stream=image_to_png_bytes(image))
    logger.debug("Image %sx%s drawn at %s", image.width, image.height, rect)
