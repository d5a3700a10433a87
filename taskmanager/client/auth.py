import logging
from typing import Optional

from ..errors import Err, Ok, Result
from ..schemas.user import User
from .api import ApiClient

logger = logging.getLogger(__name__)


class AuthManager:
    """Client-side login, registration and profile flows over one ``ClientSession``."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.session = api.session
        self.error: Optional[str] = None

    @property
    def user(self) -> Optional[User]:
        return self.session.user

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    def clear_error(self) -> None:
        self.error = None

    def _fail(self, result: Err) -> Result:
        self.error = result.message
        return result

    async def restore(self) -> bool:
        """Verify a remembered token; any failure drops it."""
        if not self.session.token:
            return False
        result = await self.api.verify()
        if isinstance(result, Ok):
            self.session.set_user(result.data)
            return True
        self.session.clear()
        return False

    async def login(self, email: str, password: str) -> Result:
        self.error = None
        result = await self.api.login(email, password)
        if isinstance(result, Err):
            return self._fail(result)
        self.session.open(result.data.token, result.data.user)
        return result

    async def register(self, name: str, email: str, password: str) -> Result:
        self.error = None
        result = await self.api.register(name, email, password)
        if isinstance(result, Err):
            return self._fail(result)
        self.session.open(result.data.token, result.data.user)
        return result

    async def logout(self) -> None:
        """Always ends the local session, whatever the server says."""
        if self.session.token:
            result = await self.api.logout()
            if isinstance(result, Err):
                logger.info("Server logout failed (%s); clearing local session anyway", result.message)
        self.session.clear()

    async def update_profile(self, name: Optional[str] = None, email: Optional[str] = None,
                             profile_picture: Optional[str] = None) -> Result:
        self.error = None
        result = await self.api.update_profile(name=name, email=email, profile_picture=profile_picture)
        if isinstance(result, Err):
            return self._fail(result)
        self.session.set_user(result.data)
        return result

    async def refresh_user(self) -> None:
        """Reload the profile; on failure the current user is kept."""
        result = await self.api.get_profile()
        if isinstance(result, Ok):
            self.session.set_user(result.data)
        else:
            logger.debug("Profile refresh failed: %s", result.message)
