from __future__ import annotations

from pathlib import Path
from typing import Optional


class CertificateError(RuntimeError):
    """Domain-specific exception for certificate generation errors."""


class UnableToOpenTemplate(CertificateError):
    """The bundled template PDF is missing, unreadable or has no pages."""

    def __init__(self, path: Path, reason: Optional[str] = None):
        self.path = Path(path)
        self.reason = reason
        message = f"Unable to open certificate template {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class LayoutError(CertificateError):
    """A layout table or calibration file is invalid."""
