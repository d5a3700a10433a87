"""Owner-scoped task query construction.

Each supplied criterion is ANDed onto the owner constraint. ``search`` is an
OR of case-insensitive substring matches on title and description.
"""
from typing import Optional

from sqlalchemy import case, func, or_
from sqlmodel import select

from .models import Priority, Task, TaskStatus
from .schemas.task import TaskQuery

DEFAULT_SORT = "createdAt"

PRIORITY_RANK = case(
    (Task.priority == Priority.LOW, 1),
    (Task.priority == Priority.MEDIUM, 2),
    (Task.priority == Priority.HIGH, 3),
    else_=0,
)

STATUS_RANK = case(
    (Task.status == TaskStatus.PENDING, 1),
    (Task.status == TaskStatus.IN_PROGRESS, 2),
    (Task.status == TaskStatus.COMPLETED, 3),
    else_=0,
)

SORT_KEYS = {
    "createdAt": Task.created_at,
    "updatedAt": Task.updated_at,
    "dueDate": Task.due_date,
    "title": Task.title,
    "priority": PRIORITY_RANK,
    "status": STATUS_RANK,
}


def sort_expression(sort_by: Optional[str], sort_order: Optional[str]):
    """Unknown keys fall back to creation time; anything but ``asc`` sorts descending."""
    column = SORT_KEYS.get(sort_by or DEFAULT_SORT, SORT_KEYS[DEFAULT_SORT])
    return column.asc() if sort_order == "asc" else column.desc()


def build_task_query(owner_id: str, params: Optional[TaskQuery] = None):
    params = params or TaskQuery()

    query = select(Task).where(Task.user_id == owner_id)

    if params.status:
        query = query.where(Task.status == TaskStatus(params.status))
    if params.priority:
        query = query.where(Task.priority == Priority(params.priority))
    if params.search:
        needle = params.search.lower()
        query = query.where(
            or_(
                func.lower(Task.title).contains(needle, autoescape=True),
                func.lower(Task.description).contains(needle, autoescape=True),
            )
        )

    return query.order_by(sort_expression(params.sort_by, params.sort_order))
