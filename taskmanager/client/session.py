"""Client-side session and the persistent store that remembers its token."""
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Union

from ..config import IS_PRODUCTION
from ..schemas.user import User

logger = logging.getLogger(__name__)

CREDENTIAL_TTL = timedelta(days=7)


@dataclass(frozen=True)
class StoredCredential:
    token: str
    expires_at: datetime
    secure: bool = IS_PRODUCTION
    same_site: str = "strict"

    def expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at


class CredentialStore(ABC):
    """Where the auth token lives between runs."""

    @abstractmethod
    def save(self, credential: StoredCredential) -> None:
        ...

    @abstractmethod
    def load(self) -> Optional[StoredCredential]:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class MemoryCredentialStore(CredentialStore):
    def __init__(self):
        self._credential = None

    def save(self, credential: StoredCredential) -> None:
        self._credential = credential

    def load(self) -> Optional[StoredCredential]:
        if self._credential is not None and self._credential.expired():
            self._credential = None
        return self._credential

    def clear(self) -> None:
        self._credential = None


class FileCredentialStore(CredentialStore):
    """JSON file holding one credential; an expired or unreadable file counts as empty."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def save(self, credential: StoredCredential) -> None:
        payload = asdict(credential)
        payload["expires_at"] = credential.expires_at.isoformat()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload))

    def load(self) -> Optional[StoredCredential]:
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text())
            payload["expires_at"] = datetime.fromisoformat(payload["expires_at"])
            credential = StoredCredential(**payload)
        except (ValueError, KeyError, TypeError):
            logger.warning("Ignoring unreadable credential file %s", self.path)
            self.clear()
            return None
        if credential.expired():
            self.clear()
            return None
        return credential

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class ClientSession:
    """The signed-in state of one client.

    Created by login, register or a successful verify; destroyed by logout or
    by any 401 from the server.
    """

    def __init__(self, store: Optional[CredentialStore] = None):
        self.store = store or MemoryCredentialStore()
        credential = self.store.load()
        self.token: Optional[str] = credential.token if credential else None
        self.user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    def open(self, token: str, user: User) -> None:
        self.token = token
        self.user = user
        self.store.save(StoredCredential(token=token, expires_at=datetime.now(timezone.utc) + CREDENTIAL_TTL))

    def set_user(self, user: User) -> None:
        self.user = user

    def clear(self) -> None:
        self.token = None
        self.user = None
        self.store.clear()

    def auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}
