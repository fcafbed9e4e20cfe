"""
Cart & pickup request API
"""
from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel
from typing import Any, Dict, Optional

from backend.models.documents import RequestRecord
from backend.models.user import User
from backend.api.auth import get_current_user
from backend.services.document_store import DocumentStore, get_document_store

router = APIRouter()


class StatusUpdate(BaseModel):
    status: Optional[str] = None


@router.post("/save-cart")
async def save_cart(
    body: Dict[str, Any] = Body(default={}),
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """Persist the cart and open one booked request per cart item"""
    items = body.get("items")
    if not isinstance(items, list):
        raise HTTPException(status_code=400, detail="Invalid payload")

    new_requests = [
        RequestRecord.from_cart_item(item if isinstance(item, dict) else {}).to_document()
        for item in items
    ]

    async with store.lock("cart"):
        store.write_and_mirror("cart", items)
    await store.update("requests", lambda existing: existing + new_requests, fallback=[])
    return {"message": "Cart saved and requests created"}


@router.get("/cart")
async def get_cart(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    return store.read("cart", [])


@router.delete("/cart")
async def clear_cart(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    async with store.lock("cart"):
        store.write_and_mirror("cart", [])
    return {"message": "Cart cleared"}


@router.get("/requests")
async def list_requests(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    return store.read("requests", [])


@router.post("/requests/{request_id}/status")
async def update_request_status(
    request_id: str,
    data: StatusUpdate,
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """Move a pickup request to a new status (pending, accepted, ...)"""
    async with store.lock("requests"):
        requests = store.read("requests", [])
        match = next(
            (r for r in requests if isinstance(r, dict) and str(r.get("id")) == request_id),
            None,
        )
        if match is None:
            raise HTTPException(status_code=404, detail="Not found")
        match["status"] = data.status
        store.write_and_mirror("requests", requests)

    return {"message": "Status updated", "id": request_id, "status": data.status}
