"""User account contracts."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ..models.user import UserRole
from .common import Email, NewPassword, as_utc, reject_explicit_nulls
from .staff import StaffProfileRead


class UserCreate(BaseModel):
    email: Email
    password: NewPassword
    role: UserRole


class LoginRequest(BaseModel):
    email: Email
    password: str


class UserUpdate(BaseModel):
    """Partial update: only fields present in the payload are applied."""

    email: Optional[Email] = None
    password: Optional[NewPassword] = None
    role: Optional[UserRole] = None

    @model_validator(mode="before")
    @classmethod
    def _no_nulls(cls, data: Any) -> Any:
        return reject_explicit_nulls(data, ("email", "password", "role"))


class PasswordReset(BaseModel):
    new_password: NewPassword


class UserRead(BaseModel):
    """User as exposed to callers; the credential hash is never included."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class LoginResult(BaseModel):
    user: UserRead
    staff_profile: Optional[StaffProfileRead] = None
