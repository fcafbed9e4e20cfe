"""
Feedback & reviews API (public)
"""
from fastapi import APIRouter, Body, Depends
from typing import Any, Dict, List

from backend.models.documents import Feedback, Review
from backend.services.document_store import DocumentStore, get_document_store
from backend.utils.helpers import new_id, utc_now_iso

router = APIRouter()


@router.post("/feedback")
async def submit_feedback(
    body: Dict[str, Any] = Body(default={}),
    store: DocumentStore = Depends(get_document_store)
):
    entry = Feedback(**{**body, "id": new_id(), "submittedAt": utc_now_iso()}).to_document()
    await store.update("feedback", lambda existing: existing + [entry], fallback=[])
    return {"message": "Feedback submitted successfully"}


@router.get("/feedback")
async def list_feedback(store: DocumentStore = Depends(get_document_store)):
    return store.read("feedback", [])


@router.get("/reviews", response_model=List[Review])
async def list_reviews(store: DocumentStore = Depends(get_document_store)):
    """Feedback submissions shown as NGO → restaurant review cards"""
    return [
        Review.from_feedback(item)
        for item in store.read("feedback", [])
        if isinstance(item, dict)
    ]
