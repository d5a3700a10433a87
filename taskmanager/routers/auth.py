import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sqlmodel import Session

from ..config import ACCESS_TOKEN_EXPIRE_MINUTES, AUTH_COOKIE_NAME, IS_PRODUCTION
from ..database import get_db
from ..errors import success_envelope
from ..schemas.user import AuthData, ProfileUpdate, User as UserSchema, UserCreate, UserLogin
from ..services import accounts
from ..services.accounts import AuthSession

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.cookies.get(AUTH_COOKIE_NAME)


def get_current_session(
    request: Request,
    db: Session = Depends(get_db),
) -> AuthSession:
    """Resolve the caller's session from the bearer header or auth cookie."""
    return accounts.verify(db, _get_token_from_request(request))


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="strict",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def _auth_payload(session: AuthSession) -> dict:
    return AuthData(user=UserSchema.from_user(session.user), token=session.token).model_dump(
        by_alias=True, mode="json"
    )


def _user_payload(session_user) -> dict:
    return {"user": UserSchema.from_user(session_user).to_wire()}


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    user: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """Create a new user account."""
    session = accounts.register(db, user.name, user.email, user.password)
    _set_auth_cookie(response, session.token)
    return success_envelope(_auth_payload(session), "User registered successfully")


@router.post("/login")
def login(
    credentials: UserLogin,
    response: Response,
    db: Session = Depends(get_db),
):
    """Sign in and get a JWT token."""
    session = accounts.login(db, credentials.email, credentials.password)
    _set_auth_cookie(response, session.token)
    return success_envelope(_auth_payload(session), "Login successful")


@router.get("/verify")
def verify(session: AuthSession = Depends(get_current_session)):
    """Check that the presented token is still valid."""
    return success_envelope(_user_payload(session.user), "Token is valid")


@router.post("/logout")
def logout(response: Response, session: AuthSession = Depends(get_current_session)):
    """Clear the auth cookie. The token itself stays valid until it expires."""
    response.delete_cookie(key=AUTH_COOKIE_NAME, samesite="strict", secure=IS_PRODUCTION, httponly=True)
    logger.info("User %s logged out", session.user_id)
    return success_envelope(message="Logout successful")


@router.get("/profile")
def read_profile(session: AuthSession = Depends(get_current_session)):
    """Get current user information."""
    return success_envelope(_user_payload(session.user))


@router.put("/profile")
def update_profile(
    profile: ProfileUpdate,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Update name, email or profile picture of the current user."""
    user = accounts.update_profile(
        db,
        session.user,
        name=profile.name,
        email=profile.email,
        profile_picture=profile.profile_picture,
    )
    return success_envelope(_user_payload(user), "Profile updated successfully")
