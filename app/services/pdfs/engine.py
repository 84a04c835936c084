# FILE: app/services/pdfs/engine.py
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas as rl_canvas

from app.utils.timezone import to_report_tz


# -----------------------------
# Helpers
# -----------------------------
def _safe_str(v: Any) -> str:
    if v is None:
        return ""
    try:
        s = str(v)
    except Exception:
        return ""
    return s.replace("\u2011", "-")  # avoid non-breaking hyphen rendering issues


def mm_pt(x_mm: float) -> float:
    return x_mm * mm


def pt_mm(x_pt: float) -> float:
    return x_pt / mm


def fmt_date(v: Any) -> str:
    if not v:
        return ""
    if isinstance(v, datetime):
        return to_report_tz(v).strftime("%d-%b-%Y")
    if isinstance(v, date):
        return v.strftime("%d-%b-%Y")
    s = _safe_str(v).strip()
    try:
        return date.fromisoformat(s[:10]).strftime("%d-%b-%Y")
    except ValueError:
        return s


def fmt_time(dt: Optional[datetime]) -> str:
    if not dt:
        return ""
    return to_report_tz(dt).strftime("%I:%M %p")


def wrap_text(text: str, font: str, size: float, max_w_pt: float) -> List[str]:
    """Split text into lines that fit max_w_pt using the font's glyph widths."""
    out: List[str] = []
    for line in _safe_str(text).split("\n"):
        line = line.rstrip()
        if not line.strip():
            out.append("")
            continue
        segs = simpleSplit(line, font, size, max_w_pt)
        out.extend(segs if segs else [""])
    return out or [""]


# -----------------------------
# Page geometry + cursor
# -----------------------------
@dataclass(frozen=True)
class PageGeometry:
    """A4 portrait in millimetres, origin at the top-left corner."""
    width: float = A4[0] / mm
    height: float = A4[1] / mm
    margin: float = 20.0

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def bottom(self) -> float:
        return self.height - self.margin

    def y_pt(self, y_mm: float) -> float:
        """Top-down millimetres -> reportlab bottom-up points."""
        return mm_pt(self.height - y_mm)


@dataclass(frozen=True)
class Cursor:
    page: int
    y: float

    def advance(self, dy: float) -> "Cursor":
        return replace(self, y=self.y + dy)


def new_page(c: rl_canvas.Canvas, geo: PageGeometry, cursor: Cursor) -> Cursor:
    c.showPage()
    return Cursor(page=cursor.page + 1, y=geo.margin)


def ensure_room(c: rl_canvas.Canvas, geo: PageGeometry, cursor: Cursor,
                needed: float) -> Cursor:
    """Start a new page when `needed` mm below the cursor would cross the bottom margin."""
    if cursor.y + needed > geo.bottom:
        return new_page(c, geo, cursor)
    return cursor


# -----------------------------
# Page-number canvas (Page X of Y)
# -----------------------------
class NumberedCanvas(rl_canvas.Canvas):
    def __init__(self, *args, show_page_number: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []
        self._pdf_show_page_number = show_page_number

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        num_pages = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_page_number(num_pages)
            super().showPage()
        super().save()

    def _draw_page_number(self, page_count: int):
        # footer right: Page X of Y
        if not self._pdf_show_page_number:
            return
        page_w, _ = self._pagesize
        self.saveState()
        self.setFont("Helvetica", 9)
        self.setFillColor(colors.grey)
        txt = f"Page {self._pageNumber} of {page_count}"
        self.drawRightString(page_w - mm_pt(12), mm_pt(8), txt)
        self.restoreState()
