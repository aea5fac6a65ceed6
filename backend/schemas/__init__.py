"""Pydantic request and response contracts for the identity API."""

from .staff import StaffProfileCreate, StaffProfileRead, StaffProfileUpdate
from .users import (
    LoginRequest,
    LoginResult,
    PasswordReset,
    UserCreate,
    UserRead,
    UserUpdate,
)

__all__ = [
    "LoginRequest",
    "LoginResult",
    "PasswordReset",
    "StaffProfileCreate",
    "StaffProfileRead",
    "StaffProfileUpdate",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]
