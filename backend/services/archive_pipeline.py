"""
Daily archive-and-retrain pipeline.

Today's serving records are folded into the per-date model data
(one entry per date, overwritten on re-archive), the today collection is
cleared, and the trainer is run to refresh the predicted summary.

Archive and reset are separate writes with no rollback between them. If
the process stops in between, today still holds archived data and the
next archive of the same date simply overwrites the entry again.
"""
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from backend.models.documents import ArchiveEntry
from backend.services.document_store import DocumentStore
from backend.services.listings import compact_events, compact_food
from backend.services.timeseries import archive_sort_key
from backend.services.trainer import TrainingResult, launch_trainer, run_trainer
from backend.utils.helpers import today_key, utc_now_iso
from backend.utils.logger import get_logger

logger = get_logger(__name__)


def upsert_archive_entry(
    archive: List[Dict[str, Any]],
    date_key: str,
    items: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """Replace the items of the entry for `date_key` or append a new one,
    then return the archive sorted by date."""
    for entry in archive:
        if isinstance(entry, dict) and entry.get("date") == date_key:
            entry["items"] = items
            break
    else:
        archive.append(ArchiveEntry(date=date_key, items=items).to_document())

    archive.sort(key=lambda e: archive_sort_key(e) if isinstance(e, dict) else (date.min, ""))
    return archive


def closing_day(now: Optional[datetime] = None) -> date:
    """
    The serving day a scheduled run closes out. Runs in the first half of
    the day (the default midnight run) close the previous day.
    """
    now = now or datetime.now()
    return (now - timedelta(hours=12)).date()


async def archive_today(store: DocumentStore, archive_date: Optional[date] = None) -> Dict[str, Any]:
    """
    Copy the today collection into the model data under `archive_date`
    (default: today). An empty collection still produces an entry.
    """
    date_key = today_key(archive_date)
    items = store.read("today", [])
    if not isinstance(items, list):
        items = []

    def _upsert(archive):
        if not isinstance(archive, list):
            archive = []
        return upsert_archive_entry(archive, date_key, items)

    await store.update("modelData", _upsert, fallback=[])
    logger.info(f"Archived {len(items)} serving record(s) for {date_key}")
    return {"date": date_key, "items": items}


async def reset_today(store: DocumentStore) -> None:
    """Clear the today collection in both locations"""
    async with store.lock("today"):
        store.write_both("today", [])
    logger.info("Today's servings cleared")


async def recalibrate(store: DocumentStore) -> Tuple[TrainingResult, Optional[Dict[str, Any]]]:
    """
    Run the trainer and wait for it. On success the predicted summary is
    re-read, stamped with lastCalibrated and returned; on failure the
    summary is left untouched.
    """
    result = await run_trainer()
    if not result.success:
        return result, None

    def _stamp(summary):
        if not isinstance(summary, dict):
            summary = {}
        summary["lastCalibrated"] = utc_now_iso()
        return summary

    summary = await store.update("predicted", _stamp, fallback={})
    return result, summary


async def run_daily_job(store: DocumentStore, archive_date: Optional[date] = None) -> Dict[str, Any]:
    """
    Scheduled run: archive the day that just ended, clear today, compact
    stale listings, then launch training in the background.
    """
    if archive_date is None:
        archive_date = closing_day()

    archived = await archive_today(store, archive_date)
    await reset_today(store)

    try:
        await compact_events(store)
        await compact_food(store)
    except Exception as e:
        logger.error(f"Listing compaction failed: {e}")

    launch_trainer()
    return {"archived_date": archived["date"], "archived_items": len(archived["items"])}
