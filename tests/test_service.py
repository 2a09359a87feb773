import json

import pytest

from attestation import CertificateService, Motive, UnableToOpenTemplate


@pytest.fixture
def service(template_path, qr_builder):
    return CertificateService(template_path=template_path, qr_builder=qr_builder)


def test_generate_pdf_returns_metadata_and_bytes(service, record, creation_date):
    result = service.generate_pdf(record, creation_date)

    metadata = result["metadata"]
    assert result["bytes"].startswith(b"%PDF")
    assert metadata["page_count"] == 2
    assert metadata["filename"] == "attestation-2020-04-11_10-30.pdf"
    assert metadata["created_at"] == "2020-04-11T10:30:00"
    assert metadata["motives"] == ["health", "shop"]
    assert metadata["generated_at"].endswith("Z")


def test_generated_pdf_can_be_fetched_again(service, record, creation_date):
    result = service.generate_pdf(record, creation_date)

    entry = service.get_pdf(result["metadata"]["certificate_id"])

    assert entry["bytes"] == result["bytes"]
    assert service.get_pdf("unknown") is None


def test_missing_template_is_reported(tmp_path, qr_builder, record):
    service = CertificateService(template_path=tmp_path / "missing.pdf", qr_builder=qr_builder)

    with pytest.raises(UnableToOpenTemplate):
        service.generate_pdf(record)
    assert qr_builder.calls == []


def test_environment_configuration(monkeypatch, template_path, tmp_path, qr_builder):
    layout_path = tmp_path / "layout.json"
    layout_path.write_text(json.dumps({"motives": {"pro": {"x": 70, "y": 530}}}), encoding="utf-8")
    monkeypatch.setenv("CERTIFICATE_TEMPLATE_PATH", str(template_path))
    monkeypatch.setenv("CERTIFICATE_LAYOUT_PATH", str(layout_path))
    monkeypatch.setenv("CERTIFICATE_DATE_FORMAT", "%Y-%m-%d")

    service = CertificateService(qr_builder=qr_builder)

    assert service.template_path == template_path
    assert service.layout.motives[Motive.PRO] == (70, 530)
    assert service.date_format == "%Y-%m-%d"
    assert service.time_format == "%H:%M"


def test_arguments_override_environment(monkeypatch, template_path, tmp_path):
    monkeypatch.setenv("CERTIFICATE_TEMPLATE_PATH", str(tmp_path / "other.pdf"))
    service = CertificateService(template_path=template_path, cache_ttl=5)
    assert service.template_path == template_path


def test_motive_codes_and_layout_description(service):
    assert service.motive_codes() == [motive.value for motive in Motive]
    layout = service.describe_layout()
    assert layout["motives"]["shop"] == {"x": 74, "y": 478}
    assert layout["fields"]["date"]["width"] == 80


def test_generation_failures_are_logged_and_reraised(tmp_path, qr_builder, record, caplog):
    service = CertificateService(template_path=tmp_path / "missing.pdf", qr_builder=qr_builder)

    with caplog.at_level("ERROR", logger="attestation.service"):
        with pytest.raises(UnableToOpenTemplate):
            service.generate_pdf(record)

    assert "Failed to generate certificate" in caplog.text
