"""
Partnership API - NGO partnership requests and the restaurant directory
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from pydantic import BaseModel

from backend.database import get_db
from backend.models.user import User, UserRole
from backend.models.partnership import PartnershipRequest
from backend.api.auth import get_current_user

router = APIRouter()


class PartnershipCreate(BaseModel):
    restaurantId: int


def _restaurant_card(r: User) -> dict:
    return {
        "id": r.id,
        "name": r.restaurant_name,
        "email": r.email,
        "gstNumber": r.gst_number or "",
        "joinedDate": r.created_at.isoformat() if r.created_at else None,
        "address": "",
        "phone": "",
        "cuisine": "",
        "status": "Active",
        "lastPickup": "-",
        "totalDonations": 0,
        "totalPickups": 0,
        "rating": 0,
        "reliability": 0,
    }


def _request_response(p: PartnershipRequest) -> dict:
    return {
        "id": p.id,
        "ngoId": p.ngo_id,
        "restaurantId": p.restaurant_id,
        "status": p.status,
        "createdAt": p.created_at.isoformat() if p.created_at else None,
    }


@router.post("/partnership-requests")
async def create_partnership_request(
    data: PartnershipCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Ask a restaurant to partner with the current NGO (once per pair)"""
    existing = await db.execute(
        select(PartnershipRequest).where(
            PartnershipRequest.ngo_id == current_user.id,
            PartnershipRequest.restaurant_id == data.restaurantId,
        )
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Already requested.")

    request = PartnershipRequest(ngo_id=current_user.id, restaurant_id=data.restaurantId)
    db.add(request)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Already requested.")
    await db.refresh(request)
    return _request_response(request)


@router.get("/partnership-requests/outgoing")
async def list_outgoing_requests(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    result = await db.execute(
        select(PartnershipRequest)
        .options(selectinload(PartnershipRequest.restaurant))
        .where(PartnershipRequest.ngo_id == current_user.id)
        .order_by(PartnershipRequest.created_at.desc())
    )
    return [
        {
            **_request_response(p),
            "restaurant": _restaurant_card(p.restaurant) if p.restaurant else None,
        }
        for p in result.scalars().all()
    ]


@router.get("/restaurants")
async def list_restaurants(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    result = await db.execute(
        select(User).where(User.role == UserRole.RESTAURANT).order_by(User.created_at)
    )
    return [_restaurant_card(r) for r in result.scalars().all()]
