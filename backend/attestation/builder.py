"""
Certificate document assembler.

Opens the template, lays the record's fields, selected motives and QR code
over page 0, and inserts a page carrying a large copy of the QR code right
after it.
"""

from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import Optional

from .annotations import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_TIME_FORMAT,
    make_checkmark_annotation,
    make_creation_date_annotations,
    make_field_annotation,
    make_image_annotation,
)
from .document import CertificateDocument, CertificatePage
from .layout import DEFAULT_LAYOUT, CertificateLayout
from .models import CertificateRecord
from .qr_builder import CertificateQRCodeBuilder, QRCodeBuilder
from .template import DEFAULT_TEMPLATE_PATH, load_template

logger = logging.getLogger(__name__)

PERSONAL_FIELDS = ("display_name", "birthdate", "birthplace", "full_address")
OUTING_FIELDS = ("city", "date", "hour", "minute")

QR_PAGE_INDEX = 1


def build_document(
    record: CertificateRecord,
    creation_date: Optional[dt.datetime] = None,
    *,
    template_path: Path = DEFAULT_TEMPLATE_PATH,
    layout: CertificateLayout = DEFAULT_LAYOUT,
    qr_builder: Optional[QRCodeBuilder] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    time_format: str = DEFAULT_TIME_FORMAT,
) -> CertificateDocument:
    """
    Build the two-page certificate for `record`.

    Raises:
        UnableToOpenTemplate: the template cannot be opened. Nothing else is
            done in that case; the QR builder is not called.
        Any exception raised by `qr_builder.build`, unchanged.
    """
    if creation_date is None:
        creation_date = dt.datetime.now()
    qr_builder = qr_builder or CertificateQRCodeBuilder()

    template = load_template(template_path)
    page_width = template.page_width(0)

    pages = [
        CertificatePage(width=template.page_width(i), height=template.page_height(i), template_index=i)
        for i in range(template.page_count)
    ]
    main_page = pages[0]

    for name in PERSONAL_FIELDS:
        main_page.add_annotation(make_field_annotation(getattr(record, name), layout.position(name), page_width))

    for motive, (x, y) in layout.motives.items():
        if motive in record.motives:
            main_page.add_annotation(make_checkmark_annotation(x, y))

    for name in OUTING_FIELDS:
        main_page.add_annotation(make_field_annotation(getattr(record, name), layout.position(name), page_width))

    qr_image = qr_builder.build(record, creation_date)

    main_page.add_annotation(
        make_image_annotation(qr_image, *layout.qr_inset.resolve(page_width, main_page.height))
    )
    for annotation in make_creation_date_annotations(
        creation_date, layout, page_width, date_format=date_format, time_format=time_format
    ):
        main_page.add_annotation(annotation)

    qr_page = CertificatePage(width=main_page.width, height=main_page.height)
    qr_page.add_annotation(make_image_annotation(qr_image, *layout.qr_page.resolve(qr_page.width, qr_page.height)))

    document = CertificateDocument(template_data=template.data, pages=pages)
    document.insert_page(QR_PAGE_INDEX, qr_page)

    logger.info(
        "Built certificate document: %d page(s), %d checkmark(s), created %s",
        document.page_count,
        len(main_page.checkmarks),
        creation_date.isoformat(timespec="minutes"),
    )
    return document
