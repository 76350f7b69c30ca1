"""
Small helpers shared by the domain services.
"""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Naive UTC now. Timestamps are stored naive UTC so SQLite and PostgreSQL compare alike."""
    return datetime.utcnow()


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def like_pattern(term: str) -> str:
    """Case-insensitive substring pattern for ``ilike``."""
    return f"%{term.strip()}%"
