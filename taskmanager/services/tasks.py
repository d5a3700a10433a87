"""Task operations. Every read and write is constrained to the calling owner.

A task that does not exist and a task that belongs to someone else are
reported with the same NotFoundError.
"""
import logging
from typing import List, Optional

from sqlmodel import Session, select

from ..errors import NotFoundError
from ..models import Priority, Task, TaskStatus
from ..models.base import utcnow
from ..queries import build_task_query
from ..schemas.task import TaskInput, TaskQuery
from ..validation import ensure_valid, parse_due_date, validate_task_input, validate_task_query

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found"


def _validate(data: TaskInput) -> None:
    ensure_valid(validate_task_input(
        title=data.title,
        description=data.description,
        due_date=data.due_date,
        priority=data.priority,
        status=data.status,
    ))


def get_owned_task(db: Session, owner_id: str, task_id: str) -> Task:
    task = db.exec(select(Task).where(Task.id == task_id, Task.user_id == owner_id)).first()
    if task is None:
        raise NotFoundError(TASK_NOT_FOUND)
    return task


def list_tasks(db: Session, owner_id: str, params: Optional[TaskQuery] = None) -> List[Task]:
    params = params or TaskQuery()
    ensure_valid(validate_task_query(params.status, params.priority))
    return list(db.exec(build_task_query(owner_id, params)).all())


def create_task(db: Session, owner_id: str, data: TaskInput) -> Task:
    """Create a task owned by ``owner_id``; status defaults to Pending."""
    _validate(data)

    now = utcnow()
    task = Task(
        title=data.title.strip(),
        description=data.description or "",
        due_date=parse_due_date(data.due_date),
        priority=Priority(data.priority),
        status=TaskStatus(data.status) if data.status else TaskStatus.PENDING,
        user_id=owner_id,
        created_at=now,
        updated_at=now,
    )
    db.add(task)
    db.commit()
    db.refresh(task)

    logger.info("User %s created task %s", owner_id, task.id)
    return task


def update_task(db: Session, owner_id: str, task_id: str, data: TaskInput) -> Task:
    """Replace the editable fields of an owned task.

    Omitted description becomes empty; omitted status keeps the stored one.
    """
    _validate(data)

    task = get_owned_task(db, owner_id, task_id)

    task.title = data.title.strip()
    task.description = data.description or ""
    task.due_date = parse_due_date(data.due_date)
    task.priority = Priority(data.priority)
    if data.status:
        task.status = TaskStatus(data.status)
    task.updated_at = utcnow()

    db.add(task)
    db.commit()
    db.refresh(task)

    logger.info("User %s updated task %s", owner_id, task.id)
    return task


def delete_task(db: Session, owner_id: str, task_id: str) -> None:
    task = get_owned_task(db, owner_id, task_id)

    db.delete(task)
    db.commit()

    logger.info("User %s deleted task %s", owner_id, task_id)
