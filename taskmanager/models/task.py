from sqlmodel import SQLModel, Field, Relationship
from datetime import date, datetime
from typing import Optional
from uuid import uuid4
import enum

from .base import timestamp_field


class Priority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class Task(SQLModel, table=True):
    """Task model for todo items.

    ``user_id`` is assigned from the authenticated caller when the task is
    created and is never written again.
    """
    __tablename__ = "tasks"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str = Field(max_length=200)
    description: str = Field(default="", max_length=1000)
    due_date: date
    priority: Priority
    status: TaskStatus = Field(default=TaskStatus.PENDING)
    created_at: datetime = timestamp_field(index=True)
    updated_at: datetime = timestamp_field()
    user_id: str = Field(foreign_key="users.id", index=True)

    # Relationship back to user
    user: Optional["User"] = Relationship(back_populates="tasks")


def is_overdue(status, due_date: date, today: date) -> bool:
    """A task is overdue when it is not completed and its due date is before today."""
    return TaskStatus(status) != TaskStatus.COMPLETED and due_date < today
