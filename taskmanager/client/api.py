"""Async HTTP client for the task manager API.

Every call returns ``Ok`` or ``Err``. A 401 on any call clears the session,
so callers only ever need one code path for expired or revoked credentials.
"""
import logging
from datetime import date
from typing import Any, Dict, Optional, Union

import httpx

from ..errors import Err, ErrorKind, Ok, Result, result_from_envelope
from ..schemas.task import TaskInput, TaskOut
from ..schemas.user import AuthData, User
from .session import ClientSession

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"
CONNECTIVITY_MESSAGE = "Unable to reach the server. Please check your connection."


def _task_body(data: Union[TaskInput, Dict[str, Any]]) -> dict:
    if isinstance(data, dict):
        data = TaskInput.model_validate(
            {key: value.isoformat() if isinstance(value, date) else value for key, value in data.items()}
        )
    return data.model_dump(by_alias=True, exclude_none=True)


def _map(result: Result, convert) -> Result:
    """Convert the payload of an Ok; an Err passes through untouched."""
    if isinstance(result, Err):
        return result
    try:
        return Ok(convert(result.data), result.message)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Malformed response payload: %s", exc)
        return Err(ErrorKind.UNEXPECTED, ["Unexpected response from server"])


class ApiClient:
    def __init__(self, http: httpx.AsyncClient, session: Optional[ClientSession] = None):
        self.http = http
        self.session = session or ClientSession()

    @classmethod
    def connect(cls, base_url: str = DEFAULT_BASE_URL, session: Optional[ClientSession] = None) -> "ApiClient":
        return cls(httpx.AsyncClient(base_url=base_url), session)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def request(self, method: str, path: str, json: Any = None, params: Optional[dict] = None) -> Result:
        try:
            response = await self.http.request(
                method, path, json=json, params=params, headers=self.session.auth_headers()
            )
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            return Err(ErrorKind.CONNECTIVITY, [CONNECTIVITY_MESSAGE])

        try:
            body = response.json()
        except ValueError:
            body = None

        result = result_from_envelope(response.status_code, body)
        if isinstance(result, Err) and result.kind == ErrorKind.AUTH and self.session.token:
            logger.info("Session rejected by server; clearing local credentials")
            self.session.clear()
        return result

    # Auth

    async def register(self, name: str, email: str, password: str) -> Result:
        result = await self.request("POST", "/api/auth/register",
                                    json={"name": name, "email": email, "password": password})
        return _map(result, AuthData.model_validate)

    async def login(self, email: str, password: str) -> Result:
        result = await self.request("POST", "/api/auth/login", json={"email": email, "password": password})
        return _map(result, AuthData.model_validate)

    async def verify(self) -> Result:
        result = await self.request("GET", "/api/auth/verify")
        return _map(result, lambda data: User.model_validate(data["user"]))

    async def logout(self) -> Result:
        return await self.request("POST", "/api/auth/logout")

    async def get_profile(self) -> Result:
        result = await self.request("GET", "/api/auth/profile")
        return _map(result, lambda data: User.model_validate(data["user"]))

    async def update_profile(self, **fields) -> Result:
        body = {key: value for key, value in fields.items() if value is not None}
        result = await self.request("PUT", "/api/auth/profile", json=body)
        return _map(result, lambda data: User.model_validate(data["user"]))

    # Tasks

    async def list_tasks(self, filters: Optional[dict] = None) -> Result:
        params = {key: value for key, value in (filters or {}).items() if value}
        result = await self.request("GET", "/api/tasks", params=params)
        return _map(result, lambda data: tuple(TaskOut.model_validate(item) for item in data))

    async def create_task(self, data: Union[TaskInput, Dict[str, Any]]) -> Result:
        result = await self.request("POST", "/api/tasks", json=_task_body(data))
        return _map(result, TaskOut.model_validate)

    async def update_task(self, task_id: str, data: Union[TaskInput, Dict[str, Any]]) -> Result:
        result = await self.request("PUT", f"/api/tasks/{task_id}", json=_task_body(data))
        return _map(result, TaskOut.model_validate)

    async def delete_task(self, task_id: str) -> Result:
        return await self.request("DELETE", f"/api/tasks/{task_id}")
