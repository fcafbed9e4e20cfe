"""
Today's servings API - record servings, archive the day, reset
"""
from fastapi import APIRouter, Body, Depends
from typing import Any, Dict
import logging

from backend.models.documents import ServingRecord
from backend.models.user import User
from backend.api.auth import get_current_user
from backend.services.archive_pipeline import archive_today, reset_today
from backend.services.document_store import DocumentStore, get_document_store
from backend.utils.helpers import new_id, today_key

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/servings")
async def list_servings(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """Servings recorded today. Records missing an id get one assigned."""
    async with store.lock("today"):
        servings = store.read("today", [])
        missing = [s for s in servings if isinstance(s, dict) and not s.get("id")]
        if missing:
            for s in missing:
                s["id"] = new_id()
            store.write_both("today", servings)
            logger.info(f"Assigned ids to {len(missing)} serving record(s)")

    today = today_key()
    return [s for s in servings if isinstance(s, dict) and s.get("date") == today]


@router.post("/servings")
async def add_serving(
    body: Dict[str, Any] = Body(default={}),
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    # Submitted fields win over the generated id / date
    record = ServingRecord(**{"id": new_id(), "date": today_key(), **body}).to_document()

    def _append(servings):
        servings.append(record)

    await store.update("today", _append, fallback=[])
    return {"message": "Added", "item": record}


@router.delete("/servings/{serving_id}")
async def delete_serving(
    serving_id: str,
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    await store.update(
        "today",
        lambda servings: [s for s in servings if not (isinstance(s, dict) and str(s.get("id")) == serving_id)],
        fallback=[],
    )
    return {"message": "Deleted"}


@router.post("/archive")
async def archive_servings(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """Fold today's servings into the model data under today's date"""
    await archive_today(store)
    return {"message": "Archived"}


@router.post("/reset")
async def reset_servings(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    await reset_today(store)
    return {"message": "Today cleared"}
