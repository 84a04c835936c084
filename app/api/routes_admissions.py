# FILE: app/api/routes_admissions.py
from __future__ import annotations

import io
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.api.deps import get_admission_client, get_image_fetcher
from app.schemas.admission import AdmissionRecord
from app.services.admission_client import AdmissionClient
from app.services.pdf_admission_report import (
    AdmissionReport,
    ImageFetcher,
    generate_admission_report,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _pdf_download(report: AdmissionReport) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(report.content),
        media_type=report.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{report.filename}"'
        },
    )


# ---------------------------------------------------------
# Admission report PDF from a posted record
# ---------------------------------------------------------
@router.post("/report", response_class=StreamingResponse)
def download_admission_report(
        record: AdmissionRecord,
        fetch_image: Optional[ImageFetcher] = Depends(get_image_fetcher),
):
    logger.info("Admission report requested for %s", record.application_id)
    report = generate_admission_report(record, fetch_image=fetch_image)
    return _pdf_download(report)


# ---------------------------------------------------------
# Admission report PDF for a record held by the backend
# ---------------------------------------------------------
@router.get("/{admission_id}/report", response_class=StreamingResponse)
def download_stored_admission_report(
        admission_id: str,
        client: AdmissionClient = Depends(get_admission_client),
        fetch_image: Optional[ImageFetcher] = Depends(get_image_fetcher),
):
    record = client.get_admission(admission_id)
    logger.info("Admission report requested for %s (%s)",
                record.application_id, admission_id)
    report = generate_admission_report(record, fetch_image=fetch_image)
    return _pdf_download(report)
