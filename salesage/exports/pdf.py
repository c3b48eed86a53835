from __future__ import annotations
from datetime import date
import logging

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from salesage.config.env import BrandConfig, get_brand_config
from salesage.exports.formatting import Formatter, format_rate, format_report_date
from salesage.exports.reports import DISCLAIMER
from salesage.forecasting.assumptions import ForecastInput
from salesage.forecasting.engine import ForecastResult

logger = logging.getLogger(__name__)

BRAND_GREEN = (36, 94, 79)  # #245e4f
ACCENT_GREEN = (122, 201, 167)  # #7ac9a7
TEXT_DARK = (51, 51, 51)
TEXT_MUTED = (100, 100, 100)
ROW_SHADE = (240, 240, 240)

# Core PDF fonts only cover Latin-1
SAFE_MAP = str.maketrans({
    "₹": "Rs.",
    "–": "-", "—": "-", "−": "-",
    "’": "'", "‘": "'", "“": '"', "”": '"',
})


def latin1_safe(text: str) -> str:
    clean = (text or "").translate(SAFE_MAP)
    return clean.encode("latin-1", "replace").decode("latin-1")


def report_filename(day: date) -> str:
    return f"Sales_Forecast_{day.isoformat()}.pdf"


class _ReportPDF(FPDF):
    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", size=8)
        self.set_text_color(*TEXT_MUTED)
        self.cell(0, 10, f"Page {self.page_no()} of {{nb}}", align="R")


def render_pdf(
    inp: ForecastInput,
    result: ForecastResult,
    formatter: Formatter,
    generated_on: date,
    brand: BrandConfig | None = None,
) -> bytes:
    """Typeset the forecast report and return the PDF document bytes.

    All amounts go through ``formatter`` so the document matches every other
    view of the same forecast.
    """
    brand = brand or get_brand_config()
    pdf = _ReportPDF()
    pdf.set_margins(20, 20, 20)
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.add_page()
    width = pdf.epw

    def heading(text: str, size: int, color=BRAND_GREEN, align: str = "L"):
        pdf.set_font("Helvetica", "B", size)
        pdf.set_text_color(*color)
        pdf.cell(0, size * 0.6, latin1_safe(text), align=align, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def line(text: str, size: int = 11, indent: float = 5):
        pdf.set_font("Helvetica", size=size)
        pdf.set_text_color(*TEXT_DARK)
        pdf.set_x(pdf.l_margin + indent)
        pdf.cell(0, 7, latin1_safe(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    heading("Sales Forecast Report", 22, align="C")
    pdf.set_font("Helvetica", size=12)
    pdf.set_text_color(*TEXT_DARK)
    pdf.cell(0, 8, latin1_safe(brand.company_line), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", size=10)
    pdf.set_text_color(*TEXT_MUTED)
    pdf.cell(0, 6, f"Generated on: {format_report_date(generated_on)}", align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.set_draw_color(*ACCENT_GREEN)
    pdf.set_line_width(0.5)
    y = pdf.get_y() + 2
    pdf.line(pdf.l_margin, y, pdf.l_margin + width, y)
    pdf.ln(8)

    heading("Forecast Parameters", 14)
    line(f"Initial Monthly Sales: {formatter(inp.initial_sales)}")
    line(f"Monthly Growth Rate: {format_rate(inp.growth_rate)}")
    line(f"Forecast Period: {inp.timeframe} months")
    pdf.ln(4)

    heading("Forecast Summary", 14)
    line(f"Total Projected Sales ({inp.timeframe} months): {formatter(result.total)}", size=12)
    line(f"Average Monthly Sales: {formatter(result.average)}", size=12)
    pdf.ln(4)

    heading("Monthly Forecast Breakdown", 14)
    pdf.ln(2)
    cols = [("Period", width * 0.3), ("Forecasted Sales", width * 0.4), ("Monthly Growth", width * 0.3)]
    pdf.set_font("Helvetica", "B", 10)
    pdf.set_fill_color(*BRAND_GREEN)
    pdf.set_text_color(255, 255, 255)
    for title, w in cols:
        pdf.cell(w, 8, title, border=0, fill=True, align="C")
    pdf.ln(8)

    pdf.set_font("Helvetica", size=10)
    pdf.set_text_color(*TEXT_DARK)
    pdf.set_fill_color(*ROW_SHADE)
    rate = format_rate(inp.growth_rate)
    for idx, p in enumerate(result.points):
        shade = idx % 2 == 1
        cells = (p.label, latin1_safe(formatter(p.value)), rate)
        for (_, w), text in zip(cols, cells):
            pdf.cell(w, 7, text, fill=shade, align="C")
        pdf.ln(7)

    pdf.ln(10)
    pdf.set_font("Helvetica", "B", 10)
    pdf.set_text_color(*TEXT_MUTED)
    pdf.cell(0, 6, "DISCLAIMER:", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", size=8)
    pdf.multi_cell(0, 4, DISCLAIMER)
    pdf.ln(4)
    pdf.set_font("Helvetica", size=9)
    pdf.set_text_color(*BRAND_GREEN)
    pdf.cell(0, 6, f"For more information, visit {brand.website}", align="C")

    body = bytes(pdf.output())
    logger.info("rendered forecast PDF: %d months, %d pages, %d bytes", inp.timeframe, pdf.page_no(), len(body))
    return body
