"""
Food listing API - restaurant uploads, NGO reservations, compaction
"""
from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel
from typing import Any, Dict
import logging

from backend.models.documents import FoodItem
from backend.models.user import User
from backend.api.auth import get_current_user
from backend.services.document_store import DocumentStore, get_document_store
from backend.services.listings import available_food, compact_food
from backend.utils.helpers import new_id, utc_now_iso

router = APIRouter()
logger = logging.getLogger(__name__)


class ReserveRequest(BaseModel):
    id: Any


@router.post("/food")
async def upload_food(
    body: Dict[str, Any] = Body(default={}),
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """List surplus food; the server owns id, status and createdAt"""
    item = FoodItem(**{
        **body,
        "id": new_id(),
        "status": "available",
        "createdAt": utc_now_iso(),
    }).to_document()

    await store.update("foodItems", lambda items: items + [item], fallback=[])
    return {"message": "Food added", "item": item}


@router.get("/available-food")
async def list_available_food(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """Fresh, unreserved listings. Read-only: stale listings stay on disk until compaction."""
    return available_food(store.read("foodItems", []))


@router.post("/food/compact")
async def compact_food_listings(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    kept = await compact_food(store)
    return {"message": "Food listings compacted", "remaining": len(kept)}


@router.post("/reserve-food")
async def reserve_food(
    data: ReserveRequest,
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """Mark a listing reserved and append a snapshot to the reserved list"""
    async with store.lock("foodItems"):
        items = store.read("foodItems", [])
        item = next(
            (i for i in items if isinstance(i, dict) and i.get("id") == data.id),
            None,
        )
        if item is None:
            raise HTTPException(status_code=404, detail="Not found")

        item["status"] = "reserved"
        item["reservedAt"] = utc_now_iso()
        store.write_and_mirror("foodItems", items)

    snapshot = dict(item)
    await store.update("reserved", lambda reserved: reserved + [snapshot], fallback=[])
    logger.info(f"Food item {data.id} reserved by user {current_user.id}")
    return {"success": True}


@router.get("/reserved")
async def list_reserved(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    return store.read("reserved", [])


@router.delete("/reserved/{item_id}")
async def remove_reserved(
    item_id: str,
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    await store.update(
        "reserved",
        lambda reserved: [i for i in reserved if not (isinstance(i, dict) and str(i.get("id")) == item_id)],
        fallback=[],
    )
    return {"message": "Reserved item removed"}


@router.delete("/food/{item_id}")
async def delete_food(
    item_id: str,
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    await store.update(
        "foodItems",
        lambda items: [i for i in items if not (isinstance(i, dict) and str(i.get("id")) == item_id)],
        fallback=[],
    )
    return {"message": "Food item deleted"}
