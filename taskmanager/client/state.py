"""Local task list state and the pure reducer that patches it.

The list is only changed through ``reduce``; each action maps the prior
ordered collection to a new one without touching the old.
"""
from dataclasses import dataclass, replace
from typing import Tuple, Union

from ..schemas.task import TaskOut


@dataclass(frozen=True)
class TaskListState:
    tasks: Tuple[TaskOut, ...] = ()

    def get(self, task_id: str):
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def __len__(self) -> int:
        return len(self.tasks)


@dataclass(frozen=True)
class TasksLoaded:
    tasks: Tuple[TaskOut, ...]


@dataclass(frozen=True)
class TaskAdded:
    task: TaskOut


@dataclass(frozen=True)
class TaskReplaced:
    task: TaskOut


@dataclass(frozen=True)
class TaskRemoved:
    task_id: str


TaskAction = Union[TasksLoaded, TaskAdded, TaskReplaced, TaskRemoved]


def reduce(state: TaskListState, action: TaskAction) -> TaskListState:
    if isinstance(action, TasksLoaded):
        return replace(state, tasks=tuple(action.tasks))
    if isinstance(action, TaskAdded):
        return replace(state, tasks=(action.task,) + state.tasks)
    if isinstance(action, TaskReplaced):
        return replace(
            state,
            tasks=tuple(action.task if task.id == action.task.id else task for task in state.tasks),
        )
    if isinstance(action, TaskRemoved):
        return replace(state, tasks=tuple(task for task in state.tasks if task.id != action.task_id))
    raise TypeError(f"Unknown task action: {action!r}")
