from backend.models.user import User, UserRole
from backend.models.partnership import PartnershipRequest

__all__ = [
    "User",
    "UserRole",
    "PartnershipRequest",
]
