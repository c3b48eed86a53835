from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class CalculatorConfig:
    default_initial_sales: float = 100000.0
    default_growth_rate: float = 5.0
    default_timeframe: int = 12
    # UI slider bounds; the engine itself accepts any rate
    growth_rate_min: float = -10.0
    growth_rate_max: float = 50.0
    growth_rate_step: float = 0.5
    timeframes: Tuple[int, ...] = (3, 6, 12, 24)


def get_calculator_config() -> CalculatorConfig:
    return CalculatorConfig(
        default_initial_sales=float(os.getenv("SALESAGE_DEFAULT_INITIAL_SALES", "100000")),
        default_growth_rate=float(os.getenv("SALESAGE_DEFAULT_GROWTH_RATE", "5")),
        default_timeframe=int(os.getenv("SALESAGE_DEFAULT_TIMEFRAME", "12")),
    )


@dataclass(frozen=True)
class BrandConfig:
    product_name: str = "SaleSage Forecasting Calculator"
    company_line: str = "SaleSage Forecasting Solutions"
    website: str = "www.salesage-calculator.in"


def get_brand_config() -> BrandConfig:
    return BrandConfig(website=os.getenv("SALESAGE_WEBSITE", "www.salesage-calculator.in"))


@dataclass(frozen=True)
class EmailConfig:
    sender: str
    send_delay_sec: float = 1.5


def get_email_config() -> EmailConfig:
    return EmailConfig(
        sender=os.getenv("EMAIL_SENDER", "reports@salesage-calculator.in"),
        send_delay_sec=float(os.getenv("EMAIL_SEND_DELAY_SEC", "1.5")),
    )
