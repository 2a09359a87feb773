"""
Movement certificate ("attestation de déplacement dérogatoire") generation.

This package bundles:
  - the field layout table calibrated against the bundled template
  - drawable text / checkmark / image annotations
  - the document assembler producing the filled certificate + QR page
  - a service facade consumed by the FastAPI layer
"""

from .builder import build_document
from .errors import CertificateError, LayoutError, UnableToOpenTemplate
from .layout import DEFAULT_LAYOUT, CertificateLayout
from .models import CertificateRecord, Motive
from .service import CertificateService

__all__ = [
    "CertificateError",
    "CertificateLayout",
    "CertificateRecord",
    "CertificateService",
    "DEFAULT_LAYOUT",
    "LayoutError",
    "Motive",
    "UnableToOpenTemplate",
    "build_document",
]
