# app/api/deps.py
from __future__ import annotations

from typing import Generator, Optional

from app.services.admission_client import AdmissionClient
from app.services.pdf_admission_report import ImageFetcher


# =========================================================
# ADMISSIONS BACKEND
# =========================================================
def get_admission_client() -> Generator[AdmissionClient, None, None]:
    client = AdmissionClient()
    try:
        yield client
    finally:
        client.close()


# =========================================================
# DOCUMENT IMAGES
# =========================================================
def get_image_fetcher() -> Optional[ImageFetcher]:
    """None -> the report builder downloads images over HTTP itself."""
    return None
