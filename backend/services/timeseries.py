"""
Weekly / monthly series built from the archived model data
"""
from datetime import date
from typing import Any, Dict, List

from backend.utils.helpers import as_number
from backend.utils.validators import PERIOD_DAYS, validate_period


def archive_sort_key(entry: Dict[str, Any]):
    """Sort key for archive entries: parsed date, unparsable dates first"""
    raw = str(entry.get("date") or "")
    try:
        return (date.fromisoformat(raw[:10]), raw)
    except ValueError:
        return (date.min, raw)


def build_series(entries: List[Dict[str, Any]], period: str) -> List[Dict[str, Any]]:
    """
    Last 7 (weekly) or 30 (monthly) archive entries, oldest first, with
    plate counts and earnings summed per day. Shorter histories are
    returned as-is.
    """
    days = PERIOD_DAYS[validate_period(period)]
    ordered = sorted(
        (e for e in entries if isinstance(e, dict)),
        key=archive_sort_key,
    )

    series = []
    for day in ordered[-days:]:
        items = [i for i in (day.get("items") or []) if isinstance(i, dict)]
        series.append({
            "date": day.get("date"),
            "actual": sum(as_number(i.get("totalPlates")) for i in items),
            "actualEarning": round(
                float(sum(as_number(i.get("totalEarning")) for i in items)), 2
            ),
        })
    return series


def build_prediction_series(entries: List[Dict[str, Any]], period: str) -> List[Dict[str, Any]]:
    """The actual series relabelled as the prediction baseline"""
    return [
        {
            "date": d["date"],
            "predicted": d["actual"],
            "predictedEarning": d["actualEarning"],
        }
        for d in build_series(entries, period)
    ]
