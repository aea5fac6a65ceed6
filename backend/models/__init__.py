"""SQLAlchemy models package."""

from .base import Base
from .staff_profile import StaffProfile
from .user import User, UserRole

__all__ = [
    "Base",
    "StaffProfile",
    "User",
    "UserRole",
]
