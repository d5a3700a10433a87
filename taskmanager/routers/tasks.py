from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from ..database import get_db
from ..errors import success_envelope
from ..schemas.task import TaskInput, TaskOut, TaskQuery
from ..services import tasks as task_service
from ..services.accounts import AuthSession
from .auth import get_current_session

router = APIRouter()


def _serialize(task) -> dict:
    return TaskOut.from_task(task, date.today()).to_wire()


@router.get("/tasks")
def get_tasks(
    status: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """List the caller's tasks with optional filtering and sorting."""
    params = TaskQuery(
        status=status or None,
        priority=priority or None,
        search=search or None,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    tasks = task_service.list_tasks(db, session.user_id, params)
    return success_envelope([_serialize(task) for task in tasks])


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskInput,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Create a new task owned by the caller."""
    db_task = task_service.create_task(db, session.user_id, task)
    return success_envelope(_serialize(db_task), "Task created successfully")


@router.get("/tasks/{task_id}")
def get_task(
    task_id: str,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Get one of the caller's tasks by ID."""
    db_task = task_service.get_owned_task(db, session.user_id, task_id)
    return success_envelope(_serialize(db_task))


@router.put("/tasks/{task_id}")
def update_task(
    task_id: str,
    task: TaskInput,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Replace one of the caller's tasks."""
    db_task = task_service.update_task(db, session.user_id, task_id, task)
    return success_envelope(_serialize(db_task), "Task updated successfully")


@router.delete("/tasks/{task_id}")
def delete_task(
    task_id: str,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Delete one of the caller's tasks."""
    task_service.delete_task(db, session.user_id, task_id)
    return success_envelope(message="Task deleted successfully")
