"""
Template loading.

Reads the certificate template once per build with pypdf, validating that it
parses and has at least one page, and captures the page sizes the assembler
needs. The raw bytes are kept so the renderer never touches the file again.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from pypdf import PdfReader

from .errors import UnableToOpenTemplate
from .layout import FALLBACK_PAGE_HEIGHT, FALLBACK_PAGE_WIDTH

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_PATH = Path(__file__).resolve().parent / "assets" / "certificate.pdf"


@dataclass(frozen=True)
class CertificateTemplate:
    path: Path
    data: bytes
    page_sizes: Tuple[Tuple[Optional[float], Optional[float]], ...]

    @property
    def page_count(self) -> int:
        return len(self.page_sizes)

    def page_width(self, index: int = 0) -> float:
        width = self.page_sizes[index][0]
        if width is None:
            logger.warning("Template %s page %d has no media box width; using %s", self.path.name, index, FALLBACK_PAGE_WIDTH)
            return FALLBACK_PAGE_WIDTH
        return width

    def page_height(self, index: int = 0) -> float:
        height = self.page_sizes[index][1]
        return FALLBACK_PAGE_HEIGHT if height is None else height


def load_template(path: Path) -> CertificateTemplate:
    """
    Open and validate the template PDF.

    Raises:
        UnableToOpenTemplate: the file is missing, is not a readable PDF, or
            has no pages.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise UnableToOpenTemplate(path, exc.strerror or str(exc)) from exc

    try:
        reader = PdfReader(io.BytesIO(data), strict=False)
        sizes: List[Tuple[Optional[float], Optional[float]]] = [_media_box_size(page) for page in reader.pages]
    except Exception as exc:  # pypdf raises a variety of errors on damaged files
        raise UnableToOpenTemplate(path, str(exc)) from exc

    if not sizes:
        raise UnableToOpenTemplate(path, "template has no pages")

    logger.debug("Loaded template %s (%d page(s), page 0 = %s)", path.name, len(sizes), sizes[0])
    return CertificateTemplate(path=path, data=data, page_sizes=tuple(sizes))


def _media_box_size(page) -> Tuple[Optional[float], Optional[float]]:
    try:
        box = page.mediabox
        return float(box.width), float(box.height)
    except (KeyError, AttributeError, TypeError, ValueError):
        return None, None
