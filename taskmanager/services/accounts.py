"""Account operations: registration, login, token verification and profile updates."""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..errors import AuthError, ConflictError
from ..models import User
from ..models.base import utcnow
from ..security import (
    burn_password_check,
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from ..validation import (
    ensure_valid,
    validate_login,
    validate_profile_update,
    validate_registration,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_TOKEN = "Invalid or expired token"
MISSING_TOKEN = "Access denied. No token provided."
EMAIL_TAKEN = "User already exists with this email"


@dataclass(frozen=True)
class AuthSession:
    """The authenticated caller of one request."""
    user: User
    token: str
    expires_at: datetime

    @property
    def user_id(self) -> str:
        return self.user.id


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.exec(select(User).where(User.email == normalize_email(email))).first()


def _open_session(user: User) -> AuthSession:
    token = create_access_token(user.id)
    token_data = decode_access_token(token)
    return AuthSession(user=user, token=token, expires_at=token_data.expires_at)


def register(db: Session, name: str, email: str, password: str) -> AuthSession:
    """Create an account and open a session for it."""
    ensure_valid(validate_registration(name, email, password))

    if get_user_by_email(db, email):
        raise ConflictError(EMAIL_TAKEN)

    now = utcnow()
    user = User(
        name=name.strip(),
        email=normalize_email(email),
        hashed_password=get_password_hash(password),
        created_at=now,
        updated_at=now,
        last_login=now,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(EMAIL_TAKEN)
    db.refresh(user)

    logger.info("Registered user %s", user.id)
    return _open_session(user)


def login(db: Session, email: str, password: str) -> AuthSession:
    """Authenticate by email and password.

    Unknown email, wrong password and deactivated account all fail with the
    same message.
    """
    ensure_valid(validate_login(email, password))

    user = get_user_by_email(db, email)
    if user is None:
        burn_password_check(password)
        logger.info("Login failed for unknown email")
        raise AuthError(INVALID_CREDENTIALS)
    if not verify_password(password, user.hashed_password) or not user.is_active:
        logger.info("Login failed for user %s", user.id)
        raise AuthError(INVALID_CREDENTIALS)

    user.last_login = utcnow()
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("User %s logged in", user.id)
    return _open_session(user)


def verify(db: Session, token: Optional[str]) -> AuthSession:
    """Resolve a bearer token to its session, or raise AuthError."""
    if not token:
        raise AuthError(MISSING_TOKEN)

    token_data = decode_access_token(token)
    if token_data is None:
        raise AuthError(INVALID_TOKEN)

    user = db.get(User, token_data.user_id)
    if user is None or not user.is_active:
        raise AuthError(INVALID_TOKEN)

    return AuthSession(user=user, token=token, expires_at=token_data.expires_at)


def update_profile(
    db: Session,
    user: User,
    name: Optional[str] = None,
    email: Optional[str] = None,
    profile_picture: Optional[str] = None,
) -> User:
    ensure_valid(validate_profile_update(name, email, profile_picture))

    if email is not None:
        new_email = normalize_email(email)
        if new_email != user.email:
            other = get_user_by_email(db, new_email)
            if other is not None and other.id != user.id:
                raise ConflictError("Email is already in use by another account")
            user.email = new_email
    if name is not None:
        user.name = name.strip()
    if profile_picture is not None:
        user.profile_picture = profile_picture or None

    user.updated_at = utcnow()
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email is already in use by another account")
    db.refresh(user)

    logger.info("Updated profile for user %s", user.id)
    return user
