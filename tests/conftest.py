# Shared fixtures, fakes and factories for the admission report tests.
from io import BytesIO

import pytest
import requests
from PIL import Image
from pypdf import PdfReader

from app.core.config import settings
from app.schemas.admission import AdmissionRecord
from app.services.document_images import ImageFetchError, rasterize


# ---------- Settings pinned for deterministic dates ----------
@pytest.fixture(autouse=True)
def report_settings(monkeypatch):
    monkeypatch.setattr(settings, "REPORT_TIMEZONE", "Asia/Kolkata")
    monkeypatch.setattr(settings, "PDF_SHOW_PAGE_NUMBERS", True)
    monkeypatch.setattr(settings, "IMAGE_FETCH_TIMEOUT", 15.0)
    return settings


# ---------- Lightweight HTTP fakes ----------
class FakeResponse:
    # Just enough of requests.Response for the services under test
    def __init__(self, status_code=200, content=b"", json_data=None, text=""):
        self.status_code = status_code
        self.content = content
        self._json = json_data
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json


class FakeSession:
    # Maps url -> FakeResponse or Exception; records every GET
    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        hit = self.routes.get(url)
        if hit is None:
            raise requests.ConnectionError(f"no route for {url}")
        if isinstance(hit, Exception):
            raise hit
        return hit

    def close(self):
        self.closed = True


@pytest.fixture()
def fake_session_factory():
    def make(routes=None):
        return FakeSession(routes)
    return make


# ---------- Image factories ----------
@pytest.fixture()
def png_bytes():
    # Encode a solid-colour PNG of the given pixel size
    def make(width=40, height=20, mode="RGB", color=(200, 30, 30)):
        if mode == "RGBA" and len(color) == 3:
            color = color + (128,)
        im = Image.new(mode, (width, height), color)
        out = BytesIO()
        im.save(out, format="PNG")
        return out.getvalue()
    return make


class RecordingFetcher:
    # Stand-in for the HTTP image fetcher; remembers the order of requests
    def __init__(self, images=None, failures=None, default=None):
        self.images = dict(images or {})
        self.failures = set(failures or ())
        self.default = default
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        if url in self.failures:
            raise ImageFetchError(url, "HTTP 404")
        img = self.images.get(url, self.default)
        if img is None:
            raise ImageFetchError(url, "request failed (no route)")
        return img


@pytest.fixture()
def fetcher_factory(png_bytes):
    def make(size=(40, 20), failures=None):
        default = rasterize(png_bytes(*size))
        return RecordingFetcher(default=default, failures=failures)
    return make


# ---------- Data factories ----------
def _base_payload():
    # Shape of the backend's getadmissionbyid response
    return {
        "_id": "665f0c2a9b1e",
        "applicationId": "APP75454712",
        "studentName": "Chinmoy Koch",
        "email": "chinmoy@example.com",
        "phone": "9101200131",
        "dateOfBirth": "2005-06-10",
        "gender": "male",
        "religion": "jainism",
        "aadharNumber": "123456789098",
        "permanentAddress": "Near Hostel 8",
        "temporaryAddress": "Assam Engineering College",
        "city": "Guwahati",
        "state": "Assam",
        "pincode": "781013",
        "fatherName": "Ranjit Koch",
        "fatherPhone": "9000000001",
        "fatherOccupation": "private-service",
        "fatherQualification": "diploma",
        "motherName": "Mala Koch",
        "motherPhone": "9000000002",
        "motherOccupation": "lawyer",
        "motherQualification": "post-graduation",
        "parentsAnnualIncome": 123456,
        "parentsAddress": "Jalukbari, Guwahati",
        "tenthBoard": "icse",
        "tenthInstitution": "Don Bosco School",
        "tenthStream": "science",
        "tenthPercentage": "67%",
        "tenthYear": "2019",
        "twelfthBoard": "cbse",
        "twelfthInstitution": "Kendriya Vidyalaya",
        "twelfthStream": "science",
        "twelfthPercentage": "86%",
        "twelfthYear": "2021",
        "programCategory": "",
        "programName": "bvs",
        "programType": "vocational",
        "specialization": "interior_design",
        "campus": "main",
        "paymentStatus": "completed",
        "applicationStatus": "pending",
        "paymentComplete": True,
        "amount": 50000,
        "razorpayOrderId": "order_123",
        "submittedAt": "2025-06-22T06:57:43.744Z",
        "createdAt": "2025-06-22T06:57:43.744Z",
        "updatedAt": "2025-06-23T10:00:00.000Z",
    }


@pytest.fixture()
def admission_payload():
    def make(**overrides):
        payload = _base_payload()
        payload.update(overrides)
        return payload
    return make


@pytest.fixture()
def record_factory(admission_payload):
    def make(**overrides):
        return AdmissionRecord.model_validate(admission_payload(**overrides))
    return make


# ---------- PDF inspection ----------
@pytest.fixture()
def pdf_pages():
    # Extracted text per page
    def read(pdf: bytes):
        reader = PdfReader(BytesIO(pdf))
        return [page.extract_text() or "" for page in reader.pages]
    return read
