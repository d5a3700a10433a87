"""Presentation-only derivations over a list of tasks.

Nothing here is stored: every function recomputes from the full task list it
is given. Active, Overdue and Completed are disjoint and together cover the
list, as long as ``today`` is held fixed for the call.
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence

from .models import Priority, TaskStatus, is_overdue

ALL = "All"

PRIORITY_WEIGHT = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


def _today(today: Optional[date]) -> date:
    return today or date.today()


def is_task_overdue(task, today: Optional[date] = None) -> bool:
    return is_overdue(task.status, task.due_date, _today(today))


def is_task_active(task, today: Optional[date] = None) -> bool:
    return TaskStatus(task.status) != TaskStatus.COMPLETED and not is_task_overdue(task, today)


def is_task_completed(task) -> bool:
    return TaskStatus(task.status) == TaskStatus.COMPLETED


def sort_by_due_date(tasks: Iterable) -> List:
    return sorted(tasks, key=lambda task: task.due_date)


def sort_by_priority(tasks: Iterable) -> List:
    """Highest priority first."""
    return sorted(tasks, key=lambda task: PRIORITY_WEIGHT[Priority(task.priority)], reverse=True)


@dataclass(frozen=True)
class TaskPartitions:
    active: List
    overdue: List
    completed: List

    @property
    def total(self) -> int:
        return len(self.active) + len(self.overdue) + len(self.completed)


def partition_tasks(tasks: Sequence, today: Optional[date] = None) -> TaskPartitions:
    """Split tasks into Active (sorted by due date), Overdue and Completed."""
    today = _today(today)
    active, overdue, completed = [], [], []
    for task in tasks:
        if is_task_completed(task):
            completed.append(task)
        elif is_task_overdue(task, today):
            overdue.append(task)
        else:
            active.append(task)
    return TaskPartitions(active=sort_by_due_date(active), overdue=overdue, completed=completed)


def filter_active(
    tasks: Sequence,
    value: str = ALL,
    filter_type: str = "status",
    today: Optional[date] = None,
) -> List:
    """Dashboard narrowing: one status or one priority value, inside Active only.

    ``"All"`` clears the narrowing.
    """
    active = partition_tasks(tasks, today).active
    if not value or value == ALL:
        return active
    if filter_type == "status":
        return [task for task in active if TaskStatus(task.status).value == value]
    if filter_type == "priority":
        return [task for task in active if Priority(task.priority).value == value]
    raise ValueError(f"Unknown filter type: {filter_type}")


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    in_progress: int
    overdue: int
    active: int
    completion_rate: int


def task_stats(tasks: Sequence, today: Optional[date] = None) -> TaskStats:
    today = _today(today)
    partitions = partition_tasks(tasks, today)
    total = len(tasks)
    completed = len(partitions.completed)
    return TaskStats(
        total=total,
        completed=completed,
        pending=sum(1 for task in tasks if TaskStatus(task.status) == TaskStatus.PENDING),
        in_progress=sum(1 for task in tasks if TaskStatus(task.status) == TaskStatus.IN_PROGRESS),
        overdue=len(partitions.overdue),
        active=len(partitions.active),
        completion_rate=round(completed / total * 100) if total else 0,
    )


def matches_search(task, term: str) -> bool:
    needle = term.lower()
    return needle in task.title.lower() or needle in (task.description or "").lower()


def categorize(
    tasks: Sequence,
    today: Optional[date] = None,
    search: str = "",
    priority: str = ALL,
    sort_by: str = "dueDate",
) -> TaskPartitions:
    """All-tasks page: search and priority narrowing, then ordering, then partitioning.

    Unlike ``partition_tasks`` the chosen ordering is kept in every partition.
    """
    today = _today(today)
    selected = list(tasks)
    if search:
        selected = [task for task in selected if matches_search(task, search)]
    if priority and priority != ALL:
        selected = [task for task in selected if Priority(task.priority).value == priority]

    if sort_by == "dueDate":
        selected = sort_by_due_date(selected)
    elif sort_by == "priority":
        selected = sort_by_priority(selected)

    return TaskPartitions(
        active=[task for task in selected if is_task_active(task, today)],
        overdue=[task for task in selected if is_task_overdue(task, today)],
        completed=[task for task in selected if is_task_completed(task)],
    )
