"""
Freshness filters for food listings and events, plus the compaction
that persists them. The filters are pure; only compact_* writes.
"""
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from backend.config import get_settings
from backend.services.document_store import DocumentStore
from backend.utils.helpers import parse_timestamp, today_key, utc_now
from backend.utils.logger import get_logger

logger = get_logger(__name__)


def is_fresh_food(item: Dict[str, Any], now: Optional[datetime] = None) -> bool:
    """
    Available, created within the freshness window, and created today.
    A listing with no createdAt counts as created now, the same stamp
    compaction gives it.
    """
    now = now or utc_now()
    if item.get("status") != "available":
        return False
    if not item.get("createdAt"):
        return True
    created = parse_timestamp(item.get("createdAt"))
    if created is None:
        return False
    window = timedelta(hours=get_settings().FOOD_FRESHNESS_HOURS)
    local_today = now.astimezone().date()
    return created >= now - window and created.astimezone().date() == local_today


def available_food(items: List[Dict[str, Any]], now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    now = now or utc_now()
    return [i for i in items if isinstance(i, dict) and is_fresh_food(i, now)]


def upcoming_events(events: List[Dict[str, Any]], today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Events dated today or later (ISO date strings compare lexically)"""
    key = today_key(today)
    return [
        e for e in events
        if isinstance(e, dict) and isinstance(e.get("date"), str) and e["date"] >= key
    ]


async def compact_food(store: DocumentStore, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Drop every food listing that is no longer available and fresh"""
    now = now or utc_now()

    def _compact(items):
        for item in items:
            if isinstance(item, dict) and not item.get("createdAt"):
                item["createdAt"] = now.isoformat()
        return available_food(items, now)

    kept = await store.update("foodItems", _compact, fallback=[])
    logger.info(f"Compacted food listings: {len(kept)} kept")
    return kept


async def compact_events(store: DocumentStore, today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Drop past events"""
    kept = await store.update(
        "events", lambda events: upcoming_events(events, today), fallback=[]
    )
    logger.info(f"Compacted events: {len(kept)} upcoming")
    return kept
