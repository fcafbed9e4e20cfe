"""
General helper utilities
"""
import secrets
import time
from datetime import date, datetime, timezone
from typing import Any, Optional


def today_key(today: Optional[date] = None) -> str:
    """Calendar date key (YYYY-MM-DD) for the local day"""
    return (today or date.today()).isoformat()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def new_id() -> str:
    """Millisecond timestamp id with a short random suffix"""
    return f"{int(time.time() * 1000)}{secrets.token_hex(2)}"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC"""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def as_number(value: Any) -> float:
    """Coerce a loosely typed JSON value to a number, 0 when not numeric"""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            try:
                return float(value)
            except ValueError:
                return 0
    return 0
