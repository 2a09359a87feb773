import dataclasses

from PIL import Image

from attestation import Motive
from attestation.qr_builder import CertificateQRCodeBuilder, build_payload


def test_payload_lists_record_fields(record, creation_date):
    payload = build_payload(record, creation_date)

    assert payload.split(";\n ") == [
        "Cree le: 11/04/2020 a 10h30",
        "Nom: Dupont",
        "Prenom: Jean",
        "Naissance: 01/01/1990 a Lyon",
        "Adresse: 999 avenue de France 75001 Paris",
        "Sortie: 11/04/2020 a 10h45",
        "Motifs: achats, sante",
    ]


def test_payload_motives_follow_declaration_order(record, creation_date):
    record = dataclasses.replace(record, motives=frozenset({Motive.TIG, Motive.PRO, Motive.BRIEF}))
    assert build_payload(record, creation_date).endswith("Motifs: travail, sport, missions")


def test_payload_with_no_motive(record, creation_date):
    record = dataclasses.replace(record, motives=frozenset())
    assert build_payload(record, creation_date).endswith("Motifs: ")


def test_builder_returns_square_rgb_image(record, creation_date):
    image = CertificateQRCodeBuilder(box_size=4).build(record, creation_date)

    assert isinstance(image, Image.Image)
    assert image.mode == "RGB"
    assert image.width == image.height
    assert image.width > 0
