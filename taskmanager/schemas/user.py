from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..models import User as UserModel
from ..models.base import as_utc
from .task import CamelModel


class UserCreate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserLogin(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    profile_picture: Optional[str] = None


class User(CamelModel):
    """Public user profile. Never carries the password hash."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    email: str
    profile_picture: Optional[str] = None
    is_active: bool = True
    created_at: datetime
    last_login: Optional[datetime] = None

    @field_validator("created_at", "last_login")
    @classmethod
    def ensure_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @classmethod
    def from_user(cls, user: UserModel) -> "User":
        return cls.model_validate(user)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class AuthData(CamelModel):
    user: User
    token: str
