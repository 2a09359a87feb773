"""
High-level service that exposes certificate generation to the FastAPI layer.

Responsibilities
----------------
* resolve configuration (template, layout, date formats) from the environment
* build and render certificates for a record
* keep recently generated PDFs in a short-lived cache for re-download
"""

from __future__ import annotations

import datetime as dt
import logging
import os
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from cachetools import TTLCache

from .annotations import DEFAULT_DATE_FORMAT, DEFAULT_TIME_FORMAT
from .builder import build_document
from .layout import DEFAULT_LAYOUT, CertificateLayout
from .models import CertificateRecord
from .qr_builder import CertificateQRCodeBuilder, QRCodeBuilder
from .template import DEFAULT_TEMPLATE_PATH

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 900
DEFAULT_CACHE_SIZE = 256


class CertificateService:
    def __init__(
        self,
        template_path: Optional[Path] = None,
        layout: Optional[CertificateLayout] = None,
        qr_builder: Optional[QRCodeBuilder] = None,
        date_format: Optional[str] = None,
        time_format: Optional[str] = None,
        cache_ttl: Optional[int] = None,
        cache_size: Optional[int] = None,
    ):
        self.template_path = Path(
            template_path
            or os.getenv("CERTIFICATE_TEMPLATE_PATH")
            or DEFAULT_TEMPLATE_PATH
        )

        if layout is None:
            layout_path = os.getenv("CERTIFICATE_LAYOUT_PATH")
            layout = CertificateLayout.from_json(Path(layout_path)) if layout_path else DEFAULT_LAYOUT
        self.layout = layout

        self.qr_builder = qr_builder or CertificateQRCodeBuilder()
        self.date_format = date_format or os.getenv("CERTIFICATE_DATE_FORMAT", DEFAULT_DATE_FORMAT)
        self.time_format = time_format or os.getenv("CERTIFICATE_TIME_FORMAT", DEFAULT_TIME_FORMAT)

        ttl = cache_ttl if cache_ttl is not None else int(os.getenv("CERTIFICATE_CACHE_TTL", DEFAULT_CACHE_TTL))
        size = cache_size if cache_size is not None else int(os.getenv("CERTIFICATE_CACHE_SIZE", DEFAULT_CACHE_SIZE))
        self._pdf_cache: TTLCache = TTLCache(maxsize=size, ttl=ttl)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def motive_codes(self) -> List[str]:
        return [motive.value for motive in self.layout.motives]

    def describe_layout(self) -> Dict:
        return self.layout.to_dict()

    # ------------------------------------------------------------------
    # PDF generation
    # ------------------------------------------------------------------
    def generate_pdf(self, record: CertificateRecord, creation_date: Optional[dt.datetime] = None) -> Dict:
        if creation_date is None:
            creation_date = dt.datetime.now()

        try:
            document = build_document(
                record,
                creation_date,
                template_path=self.template_path,
                layout=self.layout,
                qr_builder=self.qr_builder,
                date_format=self.date_format,
                time_format=self.time_format,
            )
            pdf_bytes = document.to_bytes()
        except Exception as exc:
            logger.error("Failed to generate certificate: %s", exc, exc_info=True)
            raise

        certificate_id = str(uuid.uuid4())
        metadata = {
            "certificate_id": certificate_id,
            "generated_at": dt.datetime.now(dt.timezone.utc).isoformat().replace("+00:00", "Z"),
            "created_at": creation_date.isoformat(),
            "filename": f"attestation-{creation_date:%Y-%m-%d_%H-%M}.pdf",
            "page_count": document.page_count,
            "motives": sorted(motive.value for motive in record.motives),
        }

        self._pdf_cache[certificate_id] = {"metadata": metadata, "bytes": pdf_bytes}
        logger.info("Generated certificate %s (%d bytes)", certificate_id, len(pdf_bytes))
        return {"metadata": metadata, "bytes": pdf_bytes}

    def get_pdf(self, certificate_id: str) -> Optional[Dict]:
        return self._pdf_cache.get(certificate_id)

