"""
Stats API - platform counters, donation time series and trainer metrics
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from backend.database import get_db
from backend.models.user import User, UserRole
from backend.api.auth import get_current_user
from backend.services.document_store import DocumentStore, get_document_store
from backend.services.timeseries import build_prediction_series, build_series
from backend.utils.helpers import as_number
from backend.utils.validators import validate_period

router = APIRouter()


def _accepted_requests(store: DocumentStore) -> list:
    return [
        r for r in store.read("requests", [])
        if isinstance(r, dict) and r.get("status") == "accepted"
    ]


def _food_saved(requests: list) -> int:
    return int(sum(int(as_number(r.get("quantity"))) for r in requests))


async def _count_role(db: AsyncSession, role: UserRole) -> int:
    result = await db.execute(select(func.count(User.id)).where(User.role == role))
    return result.scalar() or 0


def _checked_period(period: str) -> str:
    try:
        return validate_period(period)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid period")


@router.get("/stats/users")
async def get_user_stats(
    db: AsyncSession = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """Partner counts and donation totals from accepted requests"""
    accepted = _accepted_requests(store)
    return {
        "ngos": await _count_role(db, UserRole.NGO),
        "restaurants": await _count_role(db, UserRole.RESTAURANT),
        "mealsDonated": len(accepted),
        "foodSaved": _food_saved(accepted),
    }


@router.get("/stats/dashboard")
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    all_requests = [r for r in store.read("requests", []) if isinstance(r, dict)]
    accepted = [r for r in all_requests if r.get("status") == "accepted"]
    return {
        "activePartners": await _count_role(db, UserRole.RESTAURANT),
        "upcomingPickups": sum(1 for r in all_requests if r.get("status") == "pending"),
        "requestsFulfilled": len(accepted),
        "totalFoodSaved": _food_saved(accepted),
    }


@router.get("/dataformodel/{period}")
async def get_model_data_series(
    period: str,
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """Daily plates and earnings for the last 7 / 30 archived days"""
    period = _checked_period(period)
    return build_series(store.read("modelData", []), period)


@router.get("/predicted/{period}")
async def get_predicted_series(
    period: str,
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    period = _checked_period(period)
    summary = store.read("predicted", {})
    epsilon = summary.get("epsilon") if isinstance(summary, dict) else None
    return {
        "epsilon": epsilon or 0,
        "series": build_prediction_series(store.read("modelData", []), period),
    }


@router.get("/predicted-weekly")
async def get_predicted_weekly(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    """7-day forecast written by the trainer"""
    return store.read("predictedWeekly", {})


@router.get("/metrics/weekly")
async def get_weekly_metrics(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    return store.read("metricsWeekly", {})


@router.get("/metrics/monthly")
async def get_monthly_metrics(
    store: DocumentStore = Depends(get_document_store),
    current_user: User = Depends(get_current_user)
):
    return store.read("metricsMonthly", {})
