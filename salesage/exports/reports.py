from __future__ import annotations
from datetime import date
from typing import List

from salesage.exports.formatting import Formatter, format_rate, format_report_date
from salesage.forecasting.assumptions import ForecastInput
from salesage.forecasting.engine import ForecastResult

DISCLAIMER = (
    "This forecast is based on the provided inputs and should be used as an estimation tool only. "
    "Actual results may vary based on market conditions, competition, and other factors."
)


def forecast_report_md(inp: ForecastInput, result: ForecastResult, formatter: Formatter, generated_on: date) -> str:
    lines: List[str] = ["# Sales Forecast Report", "", f"Generated on: {format_report_date(generated_on)}", ""]

    lines.append("## Forecast Parameters")
    lines.append(f"- Initial Monthly Sales: {formatter(inp.initial_sales)}")
    lines.append(f"- Monthly Growth Rate: {format_rate(inp.growth_rate)}")
    lines.append(f"- Forecast Period: {inp.timeframe} months")

    lines.append("\n## Forecast Summary")
    lines.append(f"- Total Projected Sales ({inp.timeframe} months): {formatter(result.total)}")
    lines.append(f"- Average Monthly Sales: {formatter(result.average)}")

    lines.append("\n## Monthly Forecast Breakdown")
    lines.append("")
    lines.append("| Period | Forecasted Sales | Monthly Growth |")
    lines.append("|---|---:|---:|")
    rate = format_rate(inp.growth_rate)
    for p in result.points:
        lines.append(f"| {p.label} | {formatter(p.value)} | {rate} |")

    lines.append("\n## Disclaimer")
    lines.append(DISCLAIMER)
    return "\n".join(lines) + "\n"

