from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import Optional, List
from uuid import uuid4

from .base import timestamp_field

class User(SQLModel, table=True):
    """User model for authentication and profile management.

    Emails are stored trimmed and lower-cased so the unique index also
    enforces case-insensitive uniqueness.
    """
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = Field(max_length=50)
    email: str = Field(unique=True, index=True)
    hashed_password: str
    profile_picture: Optional[str] = None
    is_active: bool = Field(default=True)
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()
    last_login: Optional[datetime] = timestamp_field(nullable=True)

    # Relationship to tasks
    tasks: List["Task"] = Relationship(back_populates="user")
