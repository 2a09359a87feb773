import datetime as dt

import pytest

from attestation import CertificateRecord, Motive
from attestation.models import parse_motives


def test_display_name_joins_first_and_last_name(record):
    assert record.display_name == "Jean Dupont"


def test_display_name_without_first_name():
    record = CertificateRecord("", "Dupont", "01/01/1990", "Lyon", "1 rue", "Paris")
    assert record.display_name == "Dupont"


def test_from_form_formats_outing_and_parses_motives():
    record = CertificateRecord.from_form(
        first_name=" Jean ",
        last_name="Dupont",
        birthdate="01/01/1990",
        birthplace="Lyon",
        full_address="999 avenue de France",
        city="Paris",
        zip_code="75001",
        outing=dt.datetime(2020, 4, 11, 9, 5),
        motives=["shop", "HEALTH", Motive.TIG],
    )

    assert record.first_name == "Jean"
    assert (record.date, record.hour, record.minute) == ("11/04/2020", "09", "05")
    assert record.motives == {Motive.SHOP, Motive.HEALTH, Motive.TIG}


def test_from_form_without_motives():
    record = CertificateRecord.from_form(
        first_name="Jean",
        last_name="Dupont",
        birthdate="01/01/1990",
        birthplace="Lyon",
        full_address="999 avenue de France",
        city="Paris",
        outing=dt.datetime(2020, 4, 11, 9, 5),
    )
    assert record.motives == frozenset()


def test_parse_motives_rejects_unknown_codes():
    with pytest.raises(ValueError, match="sport"):
        parse_motives(["shop", "sport"])


def test_parse_motives_deduplicates():
    assert parse_motives(["pro", "pro", Motive.PRO]) == {Motive.PRO}
