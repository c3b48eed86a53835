from __future__ import annotations
from typing import List, Dict, Any, Iterable, Optional
import csv
import io

from salesage.exports.formatting import Formatter, format_signed_rate
from salesage.forecasting.assumptions import ForecastInput
from salesage.forecasting.engine import ForecastResult

SCHEMAS = {
    "forecast": ["period", "projected_sales", "growth_rate"],
    "summary": ["initial_sales", "growth_rate", "timeframe", "total", "average"],
}


def write_csv(rows: Iterable[Dict[str, Any]], columns: List[str]) -> str:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    w.writeheader()
    for r in rows:
        w.writerow({k: r.get(k) for k in columns})
    return buf.getvalue()


def forecast_rows(inp: ForecastInput, result: ForecastResult, formatter: Optional[Formatter] = None) -> List[Dict[str, Any]]:
    rate = format_signed_rate(inp.growth_rate)
    return [
        {
            "period": p.label,
            "projected_sales": formatter(p.value) if formatter else p.value,
            "growth_rate": rate,
        }
        for p in result.points
    ]


def write_forecast_csv(inp: ForecastInput, result: ForecastResult, formatter: Optional[Formatter] = None) -> str:
    return write_csv(forecast_rows(inp, result, formatter), SCHEMAS["forecast"])


def write_summary_csv(inp: ForecastInput, result: ForecastResult) -> str:
    return write_csv([{
        "initial_sales": inp.initial_sales,
        "growth_rate": inp.growth_rate,
        "timeframe": inp.timeframe,
        "total": result.total,
        "average": result.average,
    }], SCHEMAS["summary"])
