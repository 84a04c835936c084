# FILE: app/schemas/admission.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ENROLLED = "enrolled"


@dataclass(frozen=True)
class DocumentAttachment:
    label: str
    url: str


# (field, label) in the order the report embeds them
DOCUMENT_FIELDS = (
    ("profile_photo", "Profile Photo"),
    ("signature", "Signature"),
    ("aadhar_card", "Aadhar Card"),
    ("tenth_marksheet", "10th Marksheet"),
    ("twelfth_marksheet", "12th Marksheet"),
    ("diploma_marksheet", "Diploma Marksheet"),
    ("graduation_marksheet", "Graduation Marksheet"),
)


def _strip(v: Any) -> Any:
    if not isinstance(v, str):
        return v
    x = v.strip()
    return x if x else None


class AdmissionRecord(BaseModel):
    """
    One student's admission application as served by the admissions backend.

    Accepts the backend's camelCase keys as well as snake_case field names.
    Only application_id and submitted_at are required; blank strings count as
    absent so the report can simply skip them.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    # identity
    id: Optional[str] = Field(default=None, alias="_id")
    application_id: str

    # personal
    student_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    religion: Optional[str] = None
    aadhar_number: Optional[str] = None

    # address
    permanent_address: Optional[str] = None
    temporary_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None

    # parents (the dashboard and the public form disagree on the spelling)
    fathers_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("fathersName", "fatherName", "fathers_name"))
    fathers_phone: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("fathersPhone", "fatherPhone", "fathers_phone"))
    fathers_occupation: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("fathersOccupation", "fatherOccupation",
                                       "fathers_occupation"))
    fathers_qualification: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("fathersQualification", "fatherQualification",
                                       "fathers_qualification"))
    mothers_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("mothersName", "motherName", "mothers_name"))
    mothers_phone: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("mothersPhone", "motherPhone", "mothers_phone"))
    mothers_occupation: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("mothersOccupation", "motherOccupation",
                                       "mothers_occupation"))
    mothers_qualification: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("mothersQualification", "motherQualification",
                                       "mothers_qualification"))
    parents_annual_income: Optional[float] = None
    parents_address: Optional[str] = None

    # local guardian
    local_guardian_name: Optional[str] = None
    local_guardian_phone: Optional[str] = None
    local_guardian_occupation: Optional[str] = None
    local_guardian_relation: Optional[str] = None
    local_guardian_address: Optional[str] = None

    # academics
    tenth_board: Optional[str] = None
    tenth_institution: Optional[str] = None
    tenth_stream: Optional[str] = None
    tenth_percentage: Optional[str] = None
    tenth_year: Optional[str] = None

    twelfth_board: Optional[str] = None
    twelfth_institution: Optional[str] = None
    twelfth_stream: Optional[str] = None
    twelfth_percentage: Optional[str] = None
    twelfth_year: Optional[str] = None

    diploma_institution: Optional[str] = None
    diploma_stream: Optional[str] = None
    diploma_percentage: Optional[str] = None
    diploma_year: Optional[str] = None

    graduation_university: Optional[str] = None
    graduation_percentage: Optional[str] = None
    graduation_year: Optional[str] = None

    # program
    program_category: Optional[str] = None
    program_name: Optional[str] = None
    program_type: Optional[str] = None
    specialization: Optional[str] = None
    campus: Optional[str] = None

    # status
    payment_status: PaymentStatus = PaymentStatus.PENDING
    application_status: ApplicationStatus = ApplicationStatus.PENDING
    payment_complete: bool = False

    # uploaded documents (URLs)
    profile_photo: Optional[str] = None
    signature: Optional[str] = None
    aadhar_card: Optional[str] = None
    tenth_marksheet: Optional[str] = None
    twelfth_marksheet: Optional[str] = None
    diploma_marksheet: Optional[str] = None
    graduation_marksheet: Optional[str] = None

    # timestamps
    submitted_at: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("*", mode="before")
    @classmethod
    def v_blank_to_none(cls, v):
        return _strip(v)

    @field_validator("payment_status", "application_status", mode="before")
    @classmethod
    def v_status(cls, v, info):
        v = _strip(v)
        if v is None:
            return cls.model_fields[info.field_name].default
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator("payment_complete", mode="before")
    @classmethod
    def v_payment_complete(cls, v):
        return False if _strip(v) is None else v

    @field_validator("parents_annual_income", mode="before")
    @classmethod
    def v_income(cls, v):
        # backend sometimes sends "123,456"
        if isinstance(v, str):
            return v.replace(",", "")
        return v

    @property
    def full_name(self) -> Optional[str]:
        if self.student_name:
            return self.student_name
        name = " ".join(p for p in (self.first_name, self.last_name) if p)
        return name or None

    def document_attachments(self) -> List[DocumentAttachment]:
        """Non-empty document URLs, in report order."""
        out: List[DocumentAttachment] = []
        for field, label in DOCUMENT_FIELDS:
            url = getattr(self, field)
            if url:
                out.append(DocumentAttachment(label=label, url=url))
        return out
