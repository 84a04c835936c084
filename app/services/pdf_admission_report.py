# FILE: app/services/pdf_admission_report.py
from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, NamedTuple, Optional, Sequence, Union

import requests
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas as rl_canvas

from app.core.config import settings
from app.schemas.admission import (
    AdmissionRecord,
    DocumentAttachment,
    PaymentStatus,
)
from app.services.document_images import (
    ImageFetchError,
    RasterImage,
    fetch_document_image,
)
from app.services.pdfs.engine import (
    Cursor,
    NumberedCanvas,
    PageGeometry,
    ensure_room,
    fmt_date,
    fmt_time,
    mm_pt,
    new_page,
    pt_mm,
    wrap_text,
)
from app.utils.timezone import utc_today

logger = logging.getLogger(__name__)

ImageFetcher = Callable[[str], RasterImage]

# layout constants (mm)
LINE_HEIGHT = 7.0
HEADER_GAP = 5.0
FIELD_GAP = 3.0
GROUP_GAP = 3.0
SECTION_GAP = 5.0
SUMMARY_GAP = 15.0
TITLE_STEP = 10.0
IMAGE_MAX_HEIGHT = 80.0
IMAGE_LABEL_ALLOWANCE = 20.0
IMAGE_LABEL_GAP = 5.0
IMAGE_TRAILING_GAP = 10.0

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
TITLE_SIZE = 18
SUBTITLE_SIZE = 12
HEADER_SIZE = 14
BODY_SIZE = 10

VALUE_COLOR = colors.Color(100 / 255, 100 / 255, 100 / 255)

# total over PaymentStatus
_PAYMENT_METHOD = {
    PaymentStatus.PENDING: "Not Specified",
    PaymentStatus.COMPLETED: "Online Payment",
    PaymentStatus.FAILED: "Not Specified",
}


# ============================================================
# Content model
# ============================================================
@dataclass(frozen=True)
class ReportField:
    label: str
    value: str


@dataclass(frozen=True)
class Gap:
    height: float


SectionItem = Union[ReportField, Gap]


@dataclass(frozen=True)
class ReportSection:
    title: str
    items: Sequence[SectionItem] = ()
    gap_after: float = SECTION_GAP
    attachments: Sequence[DocumentAttachment] = ()

    @property
    def fields(self) -> List[ReportField]:
        return [i for i in self.items if isinstance(i, ReportField)]


class PaymentSummary(NamedTuple):
    fee_status: str
    payment_method: str
    processing: str


@dataclass
class AdmissionReport:
    filename: str
    content: bytes
    media_type: str = field(default="application/pdf")


def capitalize_first(s: str) -> str:
    """Upper-case the first character only; the rest is left untouched."""
    return s[:1].upper() + s[1:]


def derived_payment_summary(record: AdmissionRecord) -> PaymentSummary:
    return PaymentSummary(
        fee_status="Paid" if record.payment_complete else "Pending",
        payment_method=_PAYMENT_METHOD[record.payment_status],
        processing=capitalize_first(record.application_status.value),
    )


def _fmt_income(v: Optional[float]) -> Optional[str]:
    if not v:
        return None
    amount = int(v) if float(v).is_integer() else v
    # standard PDF fonts have no rupee glyph
    return f"INR {amount}"


def _group(*pairs) -> List[ReportField]:
    return [ReportField(label, value) for label, value in pairs if value]


def report_sections(record: AdmissionRecord) -> List[ReportSection]:
    """
    Everything the report prints below the title block, in order.
    Absent values are already dropped and conditional groups already decided.
    """
    r = record
    sections: List[ReportSection] = []

    sections.append(ReportSection("Personal Information", _group(
        ("Full Name", r.full_name),
        ("Email", r.email),
        ("Phone", r.phone),
        ("Date of Birth", fmt_date(r.date_of_birth)),
        ("Gender", r.gender),
        ("Religion", r.religion),
        ("Aadhar Number", r.aadhar_number),
    )))

    sections.append(ReportSection("Address Information", _group(
        ("Permanent Address", r.permanent_address),
        ("Temporary Address", r.temporary_address),
        ("City", r.city),
        ("State", r.state),
        ("Pincode", r.pincode),
    )))

    guardian: List[SectionItem] = []
    guardian += _group(
        ("Father's Name", r.fathers_name),
        ("Father's Phone", r.fathers_phone),
        ("Father's Occupation", r.fathers_occupation),
        ("Father's Qualification", r.fathers_qualification),
    )
    guardian.append(Gap(GROUP_GAP))
    guardian += _group(
        ("Mother's Name", r.mothers_name),
        ("Mother's Phone", r.mothers_phone),
        ("Mother's Occupation", r.mothers_occupation),
        ("Mother's Qualification", r.mothers_qualification),
    )
    guardian.append(Gap(GROUP_GAP))
    guardian += _group(
        ("Parents Annual Income", _fmt_income(r.parents_annual_income)),
        ("Parents Address", r.parents_address),
    )
    sections.append(ReportSection("Guardian Information", guardian))

    if r.local_guardian_name:
        sections.append(ReportSection("Local Guardian Information", _group(
            ("Name", r.local_guardian_name),
            ("Phone", r.local_guardian_phone),
            ("Occupation", r.local_guardian_occupation),
            ("Relation", r.local_guardian_relation),
            ("Address", r.local_guardian_address),
        )))

    academic: List[SectionItem] = []
    academic += _group(
        ("10th Board", r.tenth_board),
        ("10th Institution", r.tenth_institution),
        ("10th Stream", r.tenth_stream),
        ("10th Percentage", r.tenth_percentage),
        ("10th Year", r.tenth_year),
    )
    academic.append(Gap(GROUP_GAP))
    academic += _group(
        ("12th Board", r.twelfth_board),
        ("12th Institution", r.twelfth_institution),
        ("12th Stream", r.twelfth_stream),
        ("12th Percentage", r.twelfth_percentage),
        ("12th Year", r.twelfth_year),
    )
    academic.append(Gap(GROUP_GAP))
    if r.diploma_institution:
        academic += _group(
            ("Diploma Institution", r.diploma_institution),
            ("Diploma Stream", r.diploma_stream),
            ("Diploma Percentage", r.diploma_percentage),
            ("Diploma Year", r.diploma_year),
        )
        academic.append(Gap(GROUP_GAP))
    if r.graduation_university:
        academic += _group(
            ("Graduation University", r.graduation_university),
            ("Graduation Percentage", r.graduation_percentage),
            ("Graduation Year", r.graduation_year),
        )
        academic.append(Gap(SECTION_GAP))
    sections.append(ReportSection("Academic Information", academic, gap_after=0.0))

    sections.append(ReportSection("Program Information", _group(
        ("Program Category", r.program_category),
        ("Program Name", r.program_name),
        ("Program Type", r.program_type),
        ("Specialization", r.specialization),
        ("Campus", r.campus),
    )))

    sections.append(ReportSection("Application Status", _group(
        ("Payment Status", r.payment_status.value),
        ("Application Status", r.application_status.value),
    )))

    sections.append(ReportSection("Payment Details", _group(
        ("Payment Complete", "Yes" if r.payment_complete else "No"),
        ("Application ID", r.application_id),
        ("Submitted Date", fmt_date(r.submitted_at)),
        ("Submitted Time", fmt_time(r.submitted_at)),
        ("Created Date", fmt_date(r.created_at)),
        ("Last Updated", fmt_date(r.updated_at)),
    )))

    summary = derived_payment_summary(r)
    sections.append(ReportSection("Payment Summary", _group(
        ("Application Fee Status", summary.fee_status),
        ("Payment Method", summary.payment_method),
        ("Application Processing", summary.processing),
    ), gap_after=SUMMARY_GAP))

    sections.append(ReportSection(
        "Uploaded Documents",
        gap_after=0.0,
        attachments=r.document_attachments(),
    ))
    return sections


def admission_report_filename(record: AdmissionRecord,
                              today: Optional[date] = None) -> str:
    day = today or utc_today()
    return f"admission_{record.application_id}_{day.isoformat()}.pdf"


# ============================================================
# Drawing primitives (each takes a cursor, returns the next one)
# ============================================================
def draw_title_block(c: rl_canvas.Canvas, geo: PageGeometry, cursor: Cursor,
                     record: AdmissionRecord) -> Cursor:
    center_x = mm_pt(geo.width / 2)
    c.setFillColor(colors.black)

    c.setFont(FONT_BOLD, TITLE_SIZE)
    c.drawCentredString(center_x, geo.y_pt(cursor.y), "ADMISSION APPLICATION")
    cursor = cursor.advance(TITLE_STEP)

    c.setFont(FONT, SUBTITLE_SIZE)
    c.drawCentredString(center_x, geo.y_pt(cursor.y),
                        f"Application ID: {record.application_id}")
    cursor = cursor.advance(TITLE_STEP)

    c.drawCentredString(center_x, geo.y_pt(cursor.y),
                        f"Submitted: {fmt_date(record.submitted_at)}")
    return cursor.advance(SUMMARY_GAP)


def draw_section_header(c: rl_canvas.Canvas, geo: PageGeometry, cursor: Cursor,
                        title: str) -> Cursor:
    cursor = ensure_room(c, geo, cursor, LINE_HEIGHT + HEADER_GAP)
    c.setFont(FONT_BOLD, HEADER_SIZE)
    c.setFillColor(colors.black)
    c.drawString(mm_pt(geo.margin), geo.y_pt(cursor.y), title)
    return cursor.advance(LINE_HEIGHT + HEADER_GAP)


def draw_field(c: rl_canvas.Canvas, geo: PageGeometry, cursor: Cursor,
               label: str, value: Optional[str]) -> Cursor:
    if not value:
        return cursor

    label_text = f"{label}: "
    label_w = pt_mm(stringWidth(label_text, FONT_BOLD, BODY_SIZE))
    lines = wrap_text(value, FONT, BODY_SIZE, mm_pt(geo.content_width - label_w))
    value_x = mm_pt(geo.margin + label_w)

    cursor = ensure_room(c, geo, cursor, 0)
    c.setFont(FONT_BOLD, BODY_SIZE)
    c.setFillColor(colors.black)
    c.drawString(mm_pt(geo.margin), geo.y_pt(cursor.y), label_text)

    c.setFont(FONT, BODY_SIZE)
    c.setFillColor(VALUE_COLOR)
    for i, line in enumerate(lines):
        if i:
            cursor = cursor.advance(LINE_HEIGHT)
            if cursor.y > geo.bottom:
                # value continues at the top of the next page
                cursor = new_page(c, geo, cursor)
                c.setFont(FONT, BODY_SIZE)
                c.setFillColor(VALUE_COLOR)
        c.drawString(value_x, geo.y_pt(cursor.y), line)

    return cursor.advance(LINE_HEIGHT + FIELD_GAP)


def fit_image(width: float, height: float, max_w: float,
              max_h: float) -> tuple[float, float]:
    """Shrink to fit max_w, then max_h, keeping the aspect ratio. Never enlarges."""
    if width > max_w:
        ratio = max_w / width
        width, height = max_w, height * ratio
    if height > max_h:
        ratio = max_h / height
        width, height = width * ratio, max_h
    return width, height


def needs_page_break(geo: PageGeometry, y: float, image_h: float) -> bool:
    return y + image_h + IMAGE_LABEL_ALLOWANCE > geo.bottom


def draw_document_image(c: rl_canvas.Canvas, geo: PageGeometry, cursor: Cursor,
                        label: str, image: RasterImage) -> Cursor:
    # native pixels are laid out 1:1 as millimetres before fitting
    w, h = fit_image(image.width, image.height, geo.content_width, IMAGE_MAX_HEIGHT)

    if needs_page_break(geo, cursor.y, h):
        cursor = new_page(c, geo, cursor)

    c.setFont(FONT_BOLD, BODY_SIZE)
    c.setFillColor(colors.black)
    c.drawString(mm_pt(geo.margin), geo.y_pt(cursor.y), label)
    cursor = cursor.advance(IMAGE_LABEL_GAP)

    c.drawImage(
        ImageReader(io.BytesIO(image.data)),
        mm_pt(geo.margin),
        geo.y_pt(cursor.y + h),
        width=mm_pt(w),
        height=mm_pt(h),
    )
    return cursor.advance(h + IMAGE_TRAILING_GAP)


def draw_attachments(c: rl_canvas.Canvas, geo: PageGeometry, cursor: Cursor,
                     attachments: Sequence[DocumentAttachment],
                     fetch_image: ImageFetcher) -> Cursor:
    # one at a time, in document order; a failed image is skipped
    for att in attachments:
        try:
            image = fetch_image(att.url)
        except ImageFetchError as e:
            logger.warning("Failed to load image: %s (%s)", att.label, e)
            continue
        cursor = draw_document_image(c, geo, cursor, att.label, image)
    return cursor


def draw_section(c: rl_canvas.Canvas, geo: PageGeometry, cursor: Cursor,
                 section: ReportSection, fetch_image: ImageFetcher) -> Cursor:
    cursor = draw_section_header(c, geo, cursor, section.title)
    for item in section.items:
        if isinstance(item, Gap):
            cursor = cursor.advance(item.height)
        else:
            cursor = draw_field(c, geo, cursor, item.label, item.value)
    if section.attachments:
        cursor = draw_attachments(c, geo, cursor, section.attachments, fetch_image)
    return cursor.advance(section.gap_after)


# ============================================================
# Public API
# ============================================================
def build_admission_report_pdf(
    record: AdmissionRecord,
    *,
    fetch_image: Optional[ImageFetcher] = None,
    show_page_number: Optional[bool] = None,
) -> bytes:
    """
    Render the admission application as an A4 PDF and return its bytes.

    Document images are downloaded sequentially with `fetch_image`
    (defaults to an HTTP fetch sharing one requests session). Images that
    fail are left out; any other error propagates and no PDF is produced.
    """
    if show_page_number is None:
        show_page_number = settings.PDF_SHOW_PAGE_NUMBERS

    geo = PageGeometry()
    buf = io.BytesIO()
    c = NumberedCanvas(buf, pagesize=A4, invariant=1,
                       show_page_number=show_page_number)
    c.setTitle(f"Admission Application {record.application_id}")
    c.setAuthor(settings.PROJECT_NAME)

    session: Optional[requests.Session] = None
    if fetch_image is None:
        session = requests.Session()

        def fetch_image(url: str) -> RasterImage:
            return fetch_document_image(url, session=session)

    try:
        cursor = Cursor(page=1, y=geo.margin)
        cursor = draw_title_block(c, geo, cursor, record)
        for section in report_sections(record):
            cursor = draw_section(c, geo, cursor, section, fetch_image)
    finally:
        if session is not None:
            session.close()

    c.showPage()
    c.save()

    pdf_bytes = buf.getvalue()
    buf.close()
    logger.info("Built admission report %s (%d page(s), %d bytes)",
                record.application_id, cursor.page, len(pdf_bytes))
    return pdf_bytes


def generate_admission_report(
    record: AdmissionRecord,
    *,
    fetch_image: Optional[ImageFetcher] = None,
    today: Optional[date] = None,
    show_page_number: Optional[bool] = None,
) -> AdmissionReport:
    return AdmissionReport(
        filename=admission_report_filename(record, today),
        content=build_admission_report_pdf(record, fetch_image=fetch_image,
                                           show_page_number=show_page_number),
    )
