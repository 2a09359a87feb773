"""
In-memory certificate document and its PDF rendering.

The assembler only deals with `CertificatePage` / `CertificateDocument`
values; PyMuPDF is touched once, when the document is rendered to bytes.
Rendering starts from an empty PDF each time, so the template bytes are never
modified.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import fitz  # PyMuPDF

from .annotations import Annotation, ImageAnnotation, MarkAnnotation, TextAnnotation

logger = logging.getLogger(__name__)


@dataclass
class CertificatePage:
    width: float
    height: float
    template_index: Optional[int] = None
    annotations: List[Annotation] = field(default_factory=list)

    @property
    def is_blank(self) -> bool:
        return self.template_index is None

    def add_annotation(self, annotation: Annotation) -> None:
        self.annotations.append(annotation)

    @property
    def text_annotations(self) -> List[TextAnnotation]:
        return [a for a in self.annotations if isinstance(a, TextAnnotation)]

    @property
    def checkmarks(self) -> List[MarkAnnotation]:
        return [a for a in self.annotations if isinstance(a, MarkAnnotation)]

    @property
    def images(self) -> List[ImageAnnotation]:
        return [a for a in self.annotations if isinstance(a, ImageAnnotation)]


@dataclass
class CertificateDocument:
    template_data: bytes
    pages: List[CertificatePage] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page(self, index: int) -> CertificatePage:
        return self.pages[index]

    def insert_page(self, index: int, page: CertificatePage) -> None:
        self.pages.insert(index, page)

    def to_bytes(self) -> bytes:
        template = fitz.open(stream=self.template_data, filetype="pdf")
        output = fitz.open()
        try:
            for page in self.pages:
                if page.is_blank:
                    target = output.new_page(width=page.width, height=page.height)
                else:
                    output.insert_pdf(template, from_page=page.template_index, to_page=page.template_index)
                    target = output[output.page_count - 1]
                for annotation in page.annotations:
                    annotation.draw(target)
            result = output.tobytes(garbage=3, deflate=True)
        finally:
            output.close()
            template.close()

        logger.debug("Rendered certificate document (%d pages, %d bytes)", self.page_count, len(result))
        return result

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as f:
            f.write(self.to_bytes())
        return path
