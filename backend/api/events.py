"""
Community events API
"""
from fastapi import APIRouter, Body, Depends
from typing import Any, Dict

from backend.models.documents import Event
from backend.models.user import User
from backend.api.auth import get_current_user
from backend.services.document_store import DocumentStore, get_document_store
from backend.services.listings import compact_events, upcoming_events

router = APIRouter()


@router.get("/events")
async def list_events(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """Events dated today or later. Past events are only removed by compaction."""
    return upcoming_events(store.read("events", []))


@router.post("/events")
async def add_event(
    body: Dict[str, Any] = Body(default={}),
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    event = Event(**body).to_document()
    await store.update("events", lambda events: events + [event], fallback=[])
    return {"message": "Event added"}


@router.post("/events/compact")
async def compact_past_events(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    kept = await compact_events(store)
    return {"message": "Events compacted", "remaining": len(kept)}


@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    await store.update(
        "events",
        lambda events: [e for e in events if not (isinstance(e, dict) and str(e.get("id")) == event_id)],
        fallback=[],
    )
    return {"message": "Event deleted"}
