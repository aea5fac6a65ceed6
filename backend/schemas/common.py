"""Field types and validators shared by the user and staff contracts."""

from datetime import datetime, timezone
from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, Field

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72  # bcrypt input limit


def _check_email(value: str) -> str:
    """Validate address syntax but keep the string exactly as supplied."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e
    return value


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return value


Email = Annotated[str, AfterValidator(_check_email)]

NewPassword = Annotated[
    str,
    Field(min_length=PASSWORD_MIN_LENGTH),
    AfterValidator(_check_password_bytes),
]


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; every stored timestamp is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def reject_explicit_nulls(data: dict, fields: tuple[str, ...]) -> dict:
    """Raise if a non-clearable field was sent as an explicit null."""
    if isinstance(data, dict):
        nulled = [name for name in fields if name in data and data[name] is None]
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
    return data
