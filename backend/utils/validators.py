"""
Input validation utilities
"""
from backend.models.user import UserRole

PERIOD_DAYS = {"weekly": 7, "monthly": 30}


def validate_period(period: str) -> str:
    """Validate a time-series period name"""
    if period not in PERIOD_DAYS:
        raise ValueError(f"Invalid period. Must be one of: {sorted(PERIOD_DAYS)}")
    return period


def validate_role(role: str) -> UserRole:
    """Validate a signup role (case-insensitive)"""
    try:
        return UserRole(role.upper())
    except ValueError:
        raise ValueError(f"Invalid role. Must be one of: {[r.value for r in UserRole]}")
