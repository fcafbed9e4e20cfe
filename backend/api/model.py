"""
Model summary API - trained summary, on-demand recalibration, dish predictions
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from backend.models.user import User
from backend.api.auth import get_current_user
from backend.services.archive_pipeline import recalibrate
from backend.services.document_store import DocumentStore, get_document_store
from backend.utils.helpers import as_number

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/model/summary")
async def get_model_summary(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """Latest summary written by the trainer"""
    return store.read("predicted", {})


@router.post("/model/recalibrate")
async def recalibrate_model(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """Retrain now and wait for the new summary"""
    result, summary = await recalibrate(store)
    if not result.success:
        return JSONResponse(
            status_code=500,
            content={"error": "Model training failed", "details": result.diagnostic},
        )
    logger.info(f"Model recalibrated by user {current_user.id}")
    return summary


@router.get("/predictions")
async def get_predictions(store: DocumentStore = Depends(get_document_store)):
    """Per-dish Q-values from the summary, flagged with the current best dish"""
    data = store.read("predicted", {})
    if not isinstance(data, dict):
        data = {}
    dishes, q_values, counts = (
        data.get(k) if isinstance(data.get(k), list) else []
        for k in ("dishes", "q_values", "counts")
    )

    predictions = []
    for i, dish in enumerate(dishes):
        q_value = q_values[i] if i < len(q_values) else 0
        count = counts[i] if i < len(counts) else 0
        predictions.append({
            "dishName": dish,
            "qValue": round(float(as_number(q_value)), 2),
            "count": count or 0,
            "isBest": dish == data.get("best"),
        })
    return predictions
