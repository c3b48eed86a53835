from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Tuple
import math

from salesage.forecasting.assumptions import ForecastInput, InvalidInputError, validate_input


@dataclass(frozen=True)
class ForecastPoint:
    label: str  # "Month N", 1-indexed
    value: int  # projected sales rounded to whole currency units


@dataclass(frozen=True)
class ForecastResult:
    points: Tuple[ForecastPoint, ...]
    total: float  # sum of unrounded monthly values
    average: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "points": [{"label": p.label, "value": p.value} for p in self.points],
            "total": self.total,
            "average": self.average,
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero (115762.5 -> 115763)."""
    return int(Decimal(value).to_integral_value(rounding=ROUND_HALF_UP))


def growth_direction(growth_rate: float) -> str:
    return "Decline" if growth_rate < 0 else "Growth"


def compute_forecast(inp: ForecastInput) -> ForecastResult:
    """Project monthly sales by compounding growth_rate over timeframe months.

    Growth compounds on the running unrounded value. Rounding is applied
    only to each point's display value; total and the next month's base
    both use the unrounded figure.
    """
    validate_input(inp)

    factor = 1 + inp.growth_rate / 100
    current = float(inp.initial_sales)
    total = 0.0
    points = []

    for month in range(1, inp.timeframe + 1):
        current = current * factor
        if not math.isfinite(current):
            raise InvalidInputError("Projected sales overflow; reduce the growth rate or period.", field="growth_rate")
        total += current
        points.append(ForecastPoint(label=f"Month {month}", value=round_half_up(current)))

    return ForecastResult(points=tuple(points), total=total, average=total / inp.timeframe)
