"""
User model - restaurants, NGOs and admins
"""
import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Enum as SQLEnum
from backend.database import Base


class UserRole(str, enum.Enum):
    NGO = "NGO"
    RESTAURANT = "RESTAURANT"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False)

    # Restaurant / NGO identity
    restaurant_name = Column(String, nullable=True)
    gst_number = Column(String, nullable=True)     # restaurants
    aadhar_number = Column(String, nullable=True)  # NGO representatives

    created_at = Column(DateTime, default=datetime.utcnow)
