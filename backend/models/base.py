"""Declarative base and shared column helpers."""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Timezone-aware current UTC time used for created_at/updated_at."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass
