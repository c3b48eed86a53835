from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional
import io
import logging
import time
import zipfile

from salesage.exports.formatting import Formatter, format_inr
from salesage.exports.pdf import render_pdf
from salesage.exports.reports import forecast_report_md
from salesage.exports.writers import write_forecast_csv, write_summary_csv
from salesage.forecasting.assumptions import ForecastInput, validate_input
from salesage.forecasting.engine import ForecastResult, compute_forecast

logger = logging.getLogger(__name__)

EXPORT_FORMATS = {
    "pdf": ("report.pdf", "application/pdf"),
    "csv": ("forecast.csv", "text/csv"),
    "md": ("report.md", "text/markdown"),
}


@dataclass
class ReportBundle:
    input: ForecastInput
    result: ForecastResult
    generated_on: date
    events: List[Dict[str, Any]] = field(default_factory=list)
    artifacts: Dict[str, bytes] = field(default_factory=dict)  # filename -> content

    def zip_bytes(self) -> bytes:
        mem = io.BytesIO()
        with zipfile.ZipFile(mem, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
            for name, body in self.artifacts.items():
                zf.writestr(name, body)
        return mem.getvalue()


def _event(bundle: ReportBundle, stage: str, message: str):
    bundle.events.append({"stage": stage, "message": message, "ts": time.time()})


def build_bundle(
    inp: ForecastInput,
    formats: Optional[List[str]] = None,
    formatter: Formatter = format_inr,
    generated_on: Optional[date] = None,
) -> ReportBundle:
    """Compute the forecast and render the requested export artifacts.

    Validation runs before anything is rendered, so an InvalidInputError
    leaves no partial bundle behind.
    """
    validate_input(inp)
    result = compute_forecast(inp)
    bundle = ReportBundle(input=inp, result=result, generated_on=generated_on or date.today())
    _event(bundle, "Forecast", f"Projected {inp.timeframe} months at {inp.growth_rate}% per month")

    wanted = formats or list(EXPORT_FORMATS)
    for fmt in wanted:
        if fmt not in EXPORT_FORMATS:
            raise KeyError(fmt)

    _event(bundle, "Export", f"Rendering {', '.join(wanted)}")
    if "csv" in wanted:
        bundle.artifacts["forecast.csv"] = write_forecast_csv(inp, result).encode("utf-8")
        bundle.artifacts["summary.csv"] = write_summary_csv(inp, result).encode("utf-8")
    if "md" in wanted:
        bundle.artifacts["report.md"] = forecast_report_md(inp, result, formatter, bundle.generated_on).encode("utf-8")
    if "pdf" in wanted:
        bundle.artifacts["report.pdf"] = render_pdf(inp, result, formatter, bundle.generated_on)
    _event(bundle, "Done", f"{len(bundle.artifacts)} artifacts ready")
    logger.debug("bundle built: %s", list(bundle.artifacts))
    return bundle
