"""
QR code generation for certificate verification.

The assembler only depends on the `QRCodeBuilder` protocol; the default
implementation encodes the record in the plain-text format printed on the
official generator's QR codes.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Dict, Protocol

import qrcode
from PIL import Image

from .models import CertificateRecord, Motive

logger = logging.getLogger(__name__)

MOTIVE_LABELS: Dict[Motive, str] = {
    Motive.PRO: "travail",
    Motive.SHOP: "achats",
    Motive.HEALTH: "sante",
    Motive.FAMILY: "famille",
    Motive.BRIEF: "sport",
    Motive.ADMINISTRATIVE: "judiciaire",
    Motive.TIG: "missions",
}


class QRCodeBuilder(Protocol):
    def build(self, record: CertificateRecord, creation_date: dt.datetime) -> Image.Image:
        ...


def build_payload(record: CertificateRecord, creation_date: dt.datetime) -> str:
    motives = ", ".join(MOTIVE_LABELS[motive] for motive in Motive if motive in record.motives)
    address = " ".join(part for part in (record.full_address, record.zip_code, record.city) if part)
    lines = [
        f"Cree le: {creation_date:%d/%m/%Y} a {creation_date:%H}h{creation_date:%M}",
        f"Nom: {record.last_name}",
        f"Prenom: {record.first_name}",
        f"Naissance: {record.birthdate} a {record.birthplace}",
        f"Adresse: {address}",
        f"Sortie: {record.date} a {record.hour}h{record.minute}",
        f"Motifs: {motives}",
    ]
    return ";\n ".join(lines)


class CertificateQRCodeBuilder:
    """Renders `build_payload` as a square black-on-white QR image."""

    def __init__(self, box_size: int = 10, border: int = 1):
        self.box_size = box_size
        self.border = border

    def build(self, record: CertificateRecord, creation_date: dt.datetime) -> Image.Image:
        payload = build_payload(record, creation_date)
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=self.box_size,
            border=self.border,
        )
        qr.add_data(payload)
        qr.make(fit=True)
        image = qr.make_image(fill_color="black", back_color="white").get_image()
        logger.debug("Built QR code version %s for %d-char payload", qr.version, len(payload))
        return image.convert("RGB")
