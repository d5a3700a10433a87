from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..models import Priority, TaskStatus, is_overdue
from ..models import Task as TaskModel
from ..models.base import as_utc


class CamelModel(BaseModel):
    """Base schema speaking camelCase on the wire and snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskInput(CamelModel):
    """Task create/replace body.

    Fields stay loosely typed so the validation layer can report every
    problem at once. Unknown keys, including any owner field, are dropped.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None


class TaskQuery(CamelModel):
    """Filter and sort parameters for listing tasks."""
    status: Optional[str] = None
    priority: Optional[str] = None
    search: Optional[str] = None
    sort_by: str = "createdAt"
    sort_order: str = "desc"


class TaskOut(CamelModel):
    """Task as returned by the API and held in client state."""
    id: str
    title: str
    description: str = ""
    due_date: date
    priority: Priority
    status: TaskStatus
    owner: str
    owner_name: Optional[str] = None
    owner_email: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    overdue: bool = False

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @classmethod
    def from_task(cls, task: TaskModel, today: Optional[date] = None) -> "TaskOut":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description or "",
            due_date=task.due_date,
            priority=task.priority,
            status=task.status,
            owner=task.user_id,
            owner_name=task.user.name if task.user else None,
            owner_email=task.user.email if task.user else None,
            created_at=task.created_at,
            updated_at=task.updated_at,
            overdue=is_overdue(task.status, task.due_date, today or date.today()),
        )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
