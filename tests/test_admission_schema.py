# Tests for the AdmissionRecord input model.

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from app.schemas.admission import (
    AdmissionRecord,
    ApplicationStatus,
    DocumentAttachment,
    PaymentStatus,
)

pytestmark = pytest.mark.pdf


def test_backend_payload_parses(record_factory):
    # camelCase keys, the singular parent spelling and unknown extras all load
    r = record_factory()
    assert r.id == "665f0c2a9b1e"
    assert r.application_id == "APP75454712"
    assert r.fathers_name == "Ranjit Koch"
    assert r.mothers_qualification == "post-graduation"
    assert r.payment_status is PaymentStatus.COMPLETED
    assert r.application_status is ApplicationStatus.PENDING
    assert r.submitted_at == datetime(2025, 6, 22, 6, 57, 43, 744000, tzinfo=timezone.utc)
    assert not hasattr(r, "razorpay_order_id")


def test_plural_parent_spelling_and_snake_case(admission_payload):
    payload = admission_payload()
    payload.pop("fatherName")
    payload["fathersName"] = "R. Koch"
    payload["mothers_name"] = "M. Koch"
    payload.pop("motherName")
    r = AdmissionRecord.model_validate(payload)
    assert r.fathers_name == "R. Koch"
    assert r.mothers_name == "M. Koch"


def test_blank_strings_become_absent(record_factory):
    r = record_factory(programCategory="", religion="   ", city=" Guwahati ")
    assert r.program_category is None
    assert r.religion is None
    assert r.city == "Guwahati"


@pytest.mark.parametrize("missing", ["applicationId", "submittedAt"])
def test_required_fields_fail_fast(admission_payload, missing):
    payload = admission_payload()
    payload.pop(missing)
    with pytest.raises(ValidationError):
        AdmissionRecord.model_validate(payload)


@pytest.mark.parametrize("bad", [{"applicationId": ""}, {"submittedAt": "not-a-date"}])
def test_blank_or_malformed_required_fields_rejected(admission_payload, bad):
    with pytest.raises(ValidationError):
        AdmissionRecord.model_validate(admission_payload(**bad))


def test_unknown_status_is_rejected(admission_payload):
    with pytest.raises(ValidationError):
        AdmissionRecord.model_validate(admission_payload(paymentStatus="refunded"))
    with pytest.raises(ValidationError):
        AdmissionRecord.model_validate(admission_payload(applicationStatus="waitlisted"))


def test_status_is_case_insensitive_and_defaults(admission_payload):
    r = AdmissionRecord.model_validate(
        admission_payload(paymentStatus="Completed", applicationStatus="ENROLLED"))
    assert r.payment_status is PaymentStatus.COMPLETED
    assert r.application_status is ApplicationStatus.ENROLLED

    payload = admission_payload(paymentStatus="")
    payload.pop("applicationStatus")
    payload.pop("paymentComplete")
    r = AdmissionRecord.model_validate(payload)
    assert r.payment_status is PaymentStatus.PENDING
    assert r.application_status is ApplicationStatus.PENDING
    assert r.payment_complete is False


def test_income_accepts_grouped_string(record_factory):
    assert record_factory(parentsAnnualIncome="1,23,456").parents_annual_income == 123456.0


def test_full_name_falls_back_to_parts(record_factory):
    r = record_factory(studentName="", firstName="Chinmoy", lastName="Koch")
    assert r.full_name == "Chinmoy Koch"
    r = record_factory(studentName=None, firstName="Chinmoy", lastName=None)
    assert r.full_name == "Chinmoy"
    r = record_factory(studentName=None)
    assert r.full_name is None


def test_document_attachments_in_report_order(record_factory):
    r = record_factory(
        graduationMarksheet="https://cdn.example.com/grad.jpg",
        profilePhoto="https://cdn.example.com/photo.jpg",
        aadharCard="",
        tenthMarksheet="https://cdn.example.com/10.png",
    )
    assert r.document_attachments() == [
        DocumentAttachment("Profile Photo", "https://cdn.example.com/photo.jpg"),
        DocumentAttachment("10th Marksheet", "https://cdn.example.com/10.png"),
        DocumentAttachment("Graduation Marksheet", "https://cdn.example.com/grad.jpg"),
    ]


def test_no_documents_means_no_attachments(record_factory):
    assert record_factory().document_attachments() == []


@pytest.mark.parametrize("blank", [None, "", "  "])
def test_blank_payment_complete_means_unpaid(admission_payload, blank):
    r = AdmissionRecord.model_validate(admission_payload(paymentComplete=blank))
    assert r.payment_complete is False
