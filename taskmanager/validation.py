"""Field-level input validation.

Each ``validate_*`` function is pure: it inspects plain values and returns a
list of human-readable messages, empty when the input is acceptable. Every
violation is reported, not only the first one. Routes call ``ensure_valid``
before touching the database.
"""
import re
from datetime import date, datetime
from typing import List, Optional

from .errors import ValidationError
from .models import Priority, TaskStatus

EMAIL_RE = re.compile(r"^\w[\w.+-]*@[\w-]+(\.[\w-]+)*\.\w{2,3}$")
EMAIL_MAX = 254
DIGIT_RE = re.compile(r"\d")
URL_RE = re.compile(r"^https?://\S+$", re.IGNORECASE)

NAME_MIN, NAME_MAX = 2, 50
PASSWORD_MIN, PASSWORD_MAX = 6, 128
TITLE_MAX = 200
DESCRIPTION_MAX = 1000

PRIORITY_VALUES = [p.value for p in Priority]
STATUS_VALUES = [s.value for s in TaskStatus]


def ensure_valid(errors: List[str]) -> None:
    if errors:
        raise ValidationError(errors)


def _name_errors(name) -> List[str]:
    errors = []
    if not isinstance(name, str) or len(name.strip()) < NAME_MIN:
        errors.append("Name must be at least 2 characters long")
    if isinstance(name, str):
        if len(name) > NAME_MAX:
            errors.append("Name cannot exceed 50 characters")
        if DIGIT_RE.search(name):
            errors.append("Name cannot contain numbers")
    return errors


def _email_errors(email, required: bool = True) -> List[str]:
    if not email:
        return ["Email is required"] if required else ["Please enter a valid email address"]
    email = email.strip()
    if len(email) > EMAIL_MAX or not EMAIL_RE.match(email):
        return ["Please enter a valid email address"]
    return []


def password_errors(password) -> List[str]:
    if not password:
        return ["Password is required"]

    errors = []
    if len(password) < PASSWORD_MIN:
        errors.append("Password must be at least 6 characters long")
    elif len(password) > PASSWORD_MAX:
        errors.append("Password cannot exceed 128 characters")

    has_upper = any(c.isupper() for c in password)
    has_lower = any(c.islower() for c in password)
    has_digit = any(c.isdigit() for c in password)
    if not (has_upper and has_lower and has_digit):
        errors.append(
            "Password must contain at least one uppercase letter, "
            "one lowercase letter, and one number"
        )
    return errors


def validate_registration(name, email, password) -> List[str]:
    return _name_errors(name) + _email_errors(email) + password_errors(password)


def validate_login(email, password) -> List[str]:
    errors = []
    if not email:
        errors.append("Email is required")
    if not password:
        errors.append("Password is required")
    return errors


def validate_profile_update(name=None, email=None, profile_picture=None) -> List[str]:
    """Only the fields that are present are checked."""
    errors = []
    if name is not None:
        errors.extend(_name_errors(name))
    if email is not None:
        errors.extend(_email_errors(email, required=False))
    if profile_picture and not URL_RE.match(profile_picture):
        errors.append("Profile picture must be a valid http(s) URL")
    return errors


def parse_due_date(value) -> Optional[date]:
    """Parse an ISO date (or datetime, truncated to its date); None when invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def validate_task_input(title=None, description=None, due_date=None, priority=None, status=None) -> List[str]:
    errors = []

    if not title or not title.strip():
        errors.append("Task title is required")
    elif len(title) > TITLE_MAX:
        errors.append("Task title cannot exceed 200 characters")

    if description and len(description) > DESCRIPTION_MAX:
        errors.append("Task description cannot exceed 1000 characters")

    if not due_date:
        errors.append("Due date is required")
    elif parse_due_date(due_date) is None:
        errors.append("Invalid due date format")

    if not priority:
        errors.append("Priority is required")
    elif priority not in PRIORITY_VALUES:
        errors.append("Priority must be one of: Low, Medium, High")

    if status is not None and status not in STATUS_VALUES:
        errors.append("Status must be one of: Pending, In Progress, Completed")

    return errors


def validate_task_query(status=None, priority=None) -> List[str]:
    errors = []
    if status and status not in STATUS_VALUES:
        errors.append("Status filter must be one of: Pending, In Progress, Completed")
    if priority and priority not in PRIORITY_VALUES:
        errors.append("Priority filter must be one of: Low, Medium, High")
    return errors
