import base64
import datetime as dt

from dotenv import load_dotenv

load_dotenv(".env.local"); load_dotenv()  # also loads .env if present

import logging  # noqa: E402
import os  # noqa: E402
from typing import Optional  # noqa: E402

from fastapi import FastAPI, HTTPException, Response  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from pydantic import BaseModel, Field  # noqa: E402

from attestation import CertificateError, CertificateRecord, CertificateService, UnableToOpenTemplate  # noqa: E402

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

app = FastAPI(title="Attestation de déplacement")
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

certificate_service = CertificateService()


class CertificateRequest(BaseModel):
    first_name: str
    last_name: str
    birthdate: str
    birthplace: str
    address: str
    city: str
    zip_code: str = ""
    motives: list[str] = Field(default_factory=list)
    outing: dt.datetime
    created_at: Optional[dt.datetime] = None  # defaults to "now"


@app.get("/health")
def health():
    return {"ok": True}


# --- Certificate endpoints ---------------------------------------------------


@app.get("/certificate/motives")
def certificate_motives():
    return {"motives": certificate_service.motive_codes()}


@app.get("/certificate/layout")
def certificate_layout():
    return {"layout": certificate_service.describe_layout()}


@app.post("/certificate")
def certificate_generate(req: CertificateRequest):
    try:
        record = CertificateRecord.from_form(
            first_name=req.first_name,
            last_name=req.last_name,
            birthdate=req.birthdate,
            birthplace=req.birthplace,
            full_address=req.address,
            city=req.city,
            zip_code=req.zip_code,
            motives=req.motives,
            outing=req.outing,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        result = certificate_service.generate_pdf(record, creation_date=req.created_at)
    except UnableToOpenTemplate as exc:
        logger.error("Certificate template unavailable: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except CertificateError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    encoded = base64.b64encode(result["bytes"]).decode("ascii")
    return {
        "metadata": result["metadata"],
        "pdf_base64": encoded,
    }


@app.get("/certificate/{certificate_id}")
def certificate_download(certificate_id: str):
    """Download a generated certificate by ID"""
    entry = certificate_service.get_pdf(certificate_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Certificate not found")
    filename = entry["metadata"].get("filename", f"{certificate_id}.pdf")
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=entry["bytes"], media_type="application/pdf", headers=headers)
