# FILE: app/services/admission_client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests
from fastapi import HTTPException
from pydantic import ValidationError

from app.core.config import settings
from app.schemas.admission import AdmissionRecord

logger = logging.getLogger(__name__)


class AdmissionClient:
    """
    Read-only client for the website's admissions REST backend.
    Backend failures surface as HTTPException so routes can pass them through.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.ADMISSIONS_API_URL).rstrip("/")
        self.timeout = settings.ADMISSIONS_API_TIMEOUT if timeout is None else timeout
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _get_json(self, path: str) -> Any:
        url = self._url(path)
        try:
            resp = self.session.get(url,
                                    headers={"Accept": "application/json"},
                                    timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Admissions backend unreachable: %s (%s)", url, e)
            raise HTTPException(status_code=502,
                                detail="Admissions backend unreachable")

        if resp.status_code == 404:
            raise HTTPException(status_code=404, detail="Admission not found")
        if not resp.ok:
            logger.error("Admissions backend error %s for %s: %s",
                         resp.status_code, url, resp.text[:200])
            raise HTTPException(status_code=502,
                                detail=f"Admissions backend error ({resp.status_code})")

        try:
            return resp.json()
        except ValueError:
            raise HTTPException(status_code=502,
                                detail="Admissions backend returned invalid JSON")

    @staticmethod
    def _unwrap(payload: Any) -> Dict[str, Any]:
        # backend answers either the record itself or {"data": record}
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            return payload["data"]
        if isinstance(payload, dict):
            return payload
        raise HTTPException(status_code=502,
                            detail="Unexpected admissions backend payload")

    def get_admission(self, admission_id: str) -> AdmissionRecord:
        path = f"admissions/getadmissionbyid/{quote(str(admission_id), safe='')}"
        payload = self._get_json(path)
        try:
            return AdmissionRecord.model_validate(self._unwrap(payload))
        except ValidationError as e:
            logger.error("Invalid admission %s from backend: %s", admission_id, e)
            raise HTTPException(status_code=502,
                                detail="Admission record from backend is invalid")

    def close(self) -> None:
        self.session.close()
