from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values; SQLite drops the offset on the way back."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def timestamp_field(nullable: bool = False, **kwargs):
    """Timezone-aware timestamp column, defaulting to now unless nullable."""
    if nullable:
        return Field(default=None, sa_type=DateTime(timezone=True), **kwargs)
    return Field(default_factory=utcnow, sa_type=DateTime(timezone=True), **kwargs)
