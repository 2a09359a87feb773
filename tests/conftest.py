import datetime as dt
from pathlib import Path

import fitz  # PyMuPDF
import pytest
from PIL import Image

from attestation import CertificateRecord, Motive


class FakeQRBuilder:
    """Records calls and returns a plain white square."""

    def __init__(self, size: int = 64):
        self.size = size
        self.calls = []

    def build(self, record, creation_date):
        self.calls.append((record, creation_date))
        return Image.new("RGB", (self.size, self.size), "white")


class FailingQRBuilder:
    def __init__(self, exc: Exception):
        self.exc = exc
        self.calls = 0

    def build(self, record, creation_date):
        self.calls += 1
        raise self.exc


@pytest.fixture
def make_template(tmp_path):
    def _make(pages: int = 1, width: float = 600, height: float = 842, name: str = "template.pdf") -> Path:
        doc = fitz.open()
        for i in range(pages):
            page = doc.new_page(width=width, height=height)
            page.insert_text((50, 72), f"template page {i}", fontsize=11)
        path = tmp_path / name
        doc.save(path)
        doc.close()
        return path

    return _make


@pytest.fixture
def template_path(make_template) -> Path:
    return make_template()


@pytest.fixture
def qr_builder() -> FakeQRBuilder:
    return FakeQRBuilder()


@pytest.fixture
def creation_date() -> dt.datetime:
    return dt.datetime(2020, 4, 11, 10, 30)


@pytest.fixture
def record() -> CertificateRecord:
    return CertificateRecord(
        first_name="Jean",
        last_name="Dupont",
        birthdate="01/01/1990",
        birthplace="Lyon",
        full_address="999 avenue de France",
        city="Paris",
        zip_code="75001",
        motives=frozenset({Motive.SHOP, Motive.HEALTH}),
        date="11/04/2020",
        hour="10",
        minute="45",
    )
