"""
Drawable annotations and the factory functions that position them.

Each annotation kind knows how to draw itself on a PyMuPDF page, so the
document renderer only iterates a page's annotations and calls `draw`.
"""

from __future__ import annotations

import datetime as dt
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple

import fitz  # PyMuPDF
from PIL import Image

from .layout import (
    DEFAULT_FONT_SIZE,
    TEXT_BOX_HEIGHT,
    TEXT_Y_NUDGE,
    CertificateLayout,
    FieldPosition,
    WidthPolicy,
)
from .pdf_utils import Rect, add_free_text, draw_image

CHECKMARK = "X"
CHECKMARK_FONT_SIZE = 19.0
CHECKMARK_BOX = (20.0, 25.0)

DEFAULT_DATE_FORMAT = "%d/%m/%Y"
DEFAULT_TIME_FORMAT = "%H:%M"
CREATION_DATE_LABEL = "Date de création:"


class Annotation(ABC):
    rect: Rect

    @property
    def x(self) -> float:
        return self.rect[0]

    @property
    def y(self) -> float:
        return self.rect[1]

    @property
    def width(self) -> float:
        return self.rect[2]

    @property
    def height(self) -> float:
        return self.rect[3]

    @abstractmethod
    def draw(self, page: fitz.Page) -> None:
        ...


@dataclass(frozen=True)
class TextAnnotation(Annotation):
    text: str
    rect: Rect
    font_size: float = DEFAULT_FONT_SIZE

    def draw(self, page: fitz.Page) -> None:
        add_free_text(page, self.rect, self.text, self.font_size)


@dataclass(frozen=True)
class MarkAnnotation(Annotation):
    rect: Rect
    text: str = CHECKMARK
    font_size: float = CHECKMARK_FONT_SIZE

    def draw(self, page: fitz.Page) -> None:
        add_free_text(page, self.rect, self.text, self.font_size)


@dataclass(frozen=True, eq=False)
class ImageAnnotation(Annotation):
    image: Image.Image
    rect: Rect

    def draw(self, page: fitz.Page) -> None:
        draw_image(page, self.rect, self.image)


def make_text_annotation(
    text: str,
    x: float,
    y: float,
    width: WidthPolicy,
    page_width: float,
    font_size: float = DEFAULT_FONT_SIZE,
) -> TextAnnotation:
    box_width = width.resolve(x, page_width)
    return TextAnnotation(
        text=text,
        rect=(x, y + TEXT_Y_NUDGE, box_width, TEXT_BOX_HEIGHT),
        font_size=font_size,
    )


def make_field_annotation(text: str, position: FieldPosition, page_width: float) -> TextAnnotation:
    return make_text_annotation(
        text,
        position.x,
        position.y,
        position.width,
        page_width,
        font_size=position.font_size,
    )


def make_checkmark_annotation(x: float, y: float) -> MarkAnnotation:
    box_width, box_height = CHECKMARK_BOX
    return MarkAnnotation(rect=(x, y + TEXT_Y_NUDGE, box_width, box_height))


def make_image_annotation(image: Image.Image, x: float, y: float, width: float, height: float) -> ImageAnnotation:
    return ImageAnnotation(image=image, rect=(x, y, width, height))


def format_creation_date(
    creation_date: dt.datetime,
    date_format: str = DEFAULT_DATE_FORMAT,
    time_format: str = DEFAULT_TIME_FORMAT,
) -> Tuple[str, str]:
    return creation_date.strftime(date_format), creation_date.strftime(time_format)


def make_creation_date_annotations(
    creation_date: dt.datetime,
    layout: CertificateLayout,
    page_width: float,
    date_format: str = DEFAULT_DATE_FORMAT,
    time_format: str = DEFAULT_TIME_FORMAT,
) -> List[TextAnnotation]:
    """Footer labels: "Date de création:" and "<date> à <time>"."""
    date, time = format_creation_date(creation_date, date_format, time_format)
    return [
        make_field_annotation(CREATION_DATE_LABEL, layout.footer_label, page_width),
        make_field_annotation(f"{date} à {time}", layout.footer_value, page_width),
    ]
