"""
Partnership request model - an NGO asking a restaurant to partner up
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from backend.database import Base


class PartnershipRequest(Base):
    __tablename__ = "partnership_requests"

    id = Column(Integer, primary_key=True, index=True)
    ngo_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    restaurant_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    ngo = relationship("User", foreign_keys=[ngo_id])
    restaurant = relationship("User", foreign_keys=[restaurant_id])

    __table_args__ = (
        UniqueConstraint('ngo_id', 'restaurant_id', name='uq_partnership_ngo_restaurant'),
    )
