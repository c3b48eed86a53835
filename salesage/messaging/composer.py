from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import re

from salesage.config.env import get_brand_config
from salesage.exports.formatting import Formatter, format_inr, format_rate
from salesage.forecasting.assumptions import ForecastInput
from salesage.forecasting.engine import ForecastResult

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class InvalidEmailError(ValueError):
    pass


@dataclass(frozen=True)
class EmailRequest:
    to: str
    subject: str
    message: str
    forecast: Dict[str, Any]


def default_subject(timeframe: int) -> str:
    return f"Your Sales Forecast Report for {timeframe} Months"


def default_message(inp: ForecastInput, result: ForecastResult, formatter: Formatter = format_inr) -> str:
    brand = get_brand_config()
    return "\n".join([
        "Hello,",
        "",
        "I'd like to share this sales forecast report with you.",
        "",
        "Key highlights:",
        f"- Initial monthly sales: {formatter(inp.initial_sales)}",
        f"- Growth rate: {format_rate(inp.growth_rate)} per month",
        f"- Forecast period: {inp.timeframe} months",
        f"- Total projected sales: {formatter(result.total)}",
        "",
        f"This forecast was generated using the {brand.product_name}.",
        "",
        "Regards,",
        "[Your Name]",
    ])


def compose_email(
    to: str,
    inp: ForecastInput,
    result: ForecastResult,
    subject: Optional[str] = None,
    message: Optional[str] = None,
    formatter: Formatter = format_inr,
) -> EmailRequest:
    """Assemble the report email; blank subject or message fall back to defaults."""
    if to is not None and not isinstance(to, str):
        raise InvalidEmailError("Please enter a valid email address")
    to = (to or "").strip()
    if not to or not _EMAIL_RE.match(to):
        raise InvalidEmailError("Please enter a valid email address")
    for text in (subject, message):
        if text is not None and not isinstance(text, str):
            raise InvalidEmailError("Subject and message must be text")
    return EmailRequest(
        to=to,
        subject=subject or default_subject(inp.timeframe),
        message=message or default_message(inp, result, formatter),
        forecast={
            "initial_sales": inp.initial_sales,
            "growth_rate": inp.growth_rate,
            "timeframe": inp.timeframe,
            "total": result.total,
            "monthly_data": [{"label": p.label, "value": p.value} for p in result.points],
        },
    )
