from __future__ import annotations
from datetime import date
from typing import Callable

from salesage.forecasting.engine import round_half_up

RUPEE = "₹"

# Formatters injected into exporters take a number and return display text
Formatter = Callable[[float], str]


def format_indian_number(value: float) -> str:
    """Whole-unit amount with Indian digit grouping: 1234567 -> '12,34,567'."""
    n = round_half_up(value)
    digits = str(abs(n))
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        pairs.insert(0, head)
        digits = ",".join(pairs + [tail])
    return f"-{digits}" if n < 0 else digits


def format_inr(value: float) -> str:
    """Indian Rupees, no fraction digits: 105000 -> '₹1,05,000'."""
    text = format_indian_number(value)
    if text.startswith("-"):
        return f"-{RUPEE}{text[1:]}"
    return f"{RUPEE}{text}"


def format_rate(rate: float) -> str:
    rate = float(rate)
    if rate.is_integer():
        return f"{int(rate)}%"
    return f"{rate}%"


def format_signed_rate(rate: float) -> str:
    text = format_rate(rate)
    return text if rate < 0 else f"+{text}"


def format_axis_inr(value: float) -> str:
    return f"{RUPEE}{round_half_up(value / 1000)}K"


def short_label(label: str) -> str:
    return label.replace("Month ", "M")


def format_report_date(day: date) -> str:
    """en-IN style date used on every generated report: 19/10/2026."""
    return day.strftime("%d/%m/%Y")
