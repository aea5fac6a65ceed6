"""Staff profile contracts."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import Email, as_utc, reject_explicit_nulls


class StaffProfileCreate(BaseModel):
    user_id: int
    name: str = Field(min_length=1)
    email: Email
    phone_number: Optional[str] = None
    position: str = Field(min_length=1)


class StaffProfileUpdate(BaseModel):
    """Partial update.

    ``phone_number`` is tri-state: omitted leaves it unchanged, ``null``
    clears it. The other fields may be omitted but not nulled.
    """

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[Email] = None
    phone_number: Optional[str] = None
    position: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _no_nulls(cls, data: Any) -> Any:
        return reject_explicit_nulls(data, ("name", "email", "position"))


class StaffProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    email: str
    phone_number: Optional[str] = None
    position: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)
