"""Error taxonomy, response envelope and the tagged result used by clients.

Every API response has the shape ``{success, message?, data?, errors?}``.
Server code raises an ``AppError`` subclass and the handlers registered in
``taskmanager.main`` turn it into an envelope. Client code parses an envelope
back into either ``Ok(data)`` or ``Err(kind, messages)``.
"""
import enum
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNEXPECTED = "unexpected"
    CONNECTIVITY = "connectivity"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTH: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNEXPECTED: 500,
}


class AppError(Exception):
    """Base class for errors that are reported to the caller."""

    kind = ErrorKind.UNEXPECTED
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_envelope(self) -> dict:
        return error_envelope(self.message, self.errors)


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION
    default_message = "Validation failed"

    def __init__(self, errors: List[str], message: Optional[str] = None):
        super().__init__(message, errors)


class AuthError(AppError):
    kind = ErrorKind.AUTH
    default_message = "Invalid or expired token"


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT
    default_message = "Resource already exists"


class UnexpectedError(AppError):
    kind = ErrorKind.UNEXPECTED


def success_envelope(data: Any = None, message: Optional[str] = None) -> dict:
    body: dict = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def error_envelope(message: str, errors: Optional[List[str]] = None) -> dict:
    body: dict = {"success": False, "message": message}
    if errors:
        body["errors"] = list(errors)
    return body


@dataclass(frozen=True)
class Ok:
    data: Any = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    messages: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return "; ".join(self.messages) if self.messages else self.kind.value


Result = Union[Ok, Err]


def kind_for_status(status_code: int) -> ErrorKind:
    for kind, code in STATUS_BY_KIND.items():
        if code == status_code:
            return kind
    if status_code == 403:
        return ErrorKind.AUTH
    return ErrorKind.UNEXPECTED


def result_from_envelope(status_code: int, body: Any) -> Result:
    """Turn a decoded response into ``Ok`` or ``Err``; never both."""
    if not isinstance(body, dict):
        return Err(kind_for_status(status_code) if status_code >= 400 else ErrorKind.UNEXPECTED,
                   ["Unexpected response from server"])

    if status_code < 400 and body.get("success"):
        return Ok(body.get("data"), body.get("message"))

    messages = []
    if body.get("message"):
        messages.append(body["message"])
    messages.extend(body.get("errors") or [])
    kind = kind_for_status(status_code) if status_code >= 400 else ErrorKind.UNEXPECTED
    return Err(kind, messages or ["Request failed"])
