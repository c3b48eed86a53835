from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping, Optional
import math

from salesage.config.env import CalculatorConfig, get_calculator_config


class InvalidInputError(ValueError):
    """Raised when forecast inputs cannot produce a projection."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


@dataclass(frozen=True)
class ForecastInput:
    initial_sales: float  # monthly sales at the start, currency units
    growth_rate: float  # percent per month, e.g. 5 for 5%
    timeframe: int  # number of months to project


def validate_input(inp: ForecastInput) -> None:
    sales = inp.initial_sales
    if isinstance(sales, bool) or not isinstance(sales, (int, float)) or not math.isfinite(sales) or sales <= 0:
        raise InvalidInputError("Initial sales must be greater than zero.", field="initial_sales")
    rate = inp.growth_rate
    if isinstance(rate, bool) or not isinstance(rate, (int, float)) or not math.isfinite(rate):
        raise InvalidInputError("Growth rate must be a finite number.", field="growth_rate")
    months = inp.timeframe
    if isinstance(months, bool) or not isinstance(months, int) or months <= 0:
        raise InvalidInputError("Forecast period must be a positive whole number of months.", field="timeframe")


def _to_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a number", field=field)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field} must be a number", field=field) from None


def _to_int(value: Any, field: str) -> int:
    num = _to_float(value, field)
    if not math.isfinite(num) or num != int(num):
        raise InvalidInputError("Forecast period must be a positive whole number of months.", field=field)
    return int(num)


def parse_input(payload: Mapping[str, Any], cfg: CalculatorConfig | None = None) -> ForecastInput:
    """Build a ForecastInput from loosely typed request values.

    Missing keys fall back to the calculator defaults. Accepts both
    snake_case and the camelCase names used by browser forms.
    """
    cfg = cfg or get_calculator_config()

    def pick(snake: str, camel: str, default: Any) -> Any:
        if payload.get(snake) is not None:
            return payload[snake]
        if payload.get(camel) is not None:
            return payload[camel]
        return default

    inp = ForecastInput(
        initial_sales=_to_float(pick("initial_sales", "initialSales", cfg.default_initial_sales), "initial_sales"),
        growth_rate=_to_float(pick("growth_rate", "growthRate", cfg.default_growth_rate), "growth_rate"),
        timeframe=_to_int(pick("timeframe", "timeframe", cfg.default_timeframe), "timeframe"),
    )
    validate_input(inp)
    return inp
