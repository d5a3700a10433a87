"""Task list store that mirrors server state without refetching.

The local list changes only after the server has confirmed a create, update
or delete. A failed call leaves the list as it was, records the message in
``error`` and raises ``TaskOperationError``. Once the store is closed, any
response that arrives later is dropped instead of being applied.
"""
import enum
import inspect
import logging
from datetime import date
from typing import Any, Callable, Dict, Optional, Union

from ..errors import Err, Result
from ..schemas.task import TaskInput, TaskOut
from ..views import TaskPartitions, TaskStats, filter_active, partition_tasks, task_stats
from .api import ApiClient
from .state import TaskAdded, TaskListState, TaskRemoved, TaskReplaced, TasksLoaded, reduce

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this task?"


class DeleteOutcome(str, enum.Enum):
    DELETED = "deleted"
    CANCELLED = "cancelled"
    DISCARDED = "discarded"


class TaskOperationError(Exception):
    def __init__(self, result: Err):
        self.result = result
        super().__init__(result.message)

    @property
    def kind(self):
        return self.result.kind


Confirm = Callable[[str], Any]


async def _ask(confirm: Confirm, prompt: str) -> bool:
    answer = confirm(prompt)
    if inspect.isawaitable(answer):
        answer = await answer
    return bool(answer)


class TaskStore:
    def __init__(self, api: ApiClient, confirm: Optional[Confirm] = None):
        self.api = api
        self.confirm = confirm
        self.state = TaskListState()
        self.in_flight = 0
        self.error: Optional[str] = None
        self.closed = False

    @property
    def tasks(self):
        return self.state.tasks

    @property
    def loading(self) -> bool:
        return self.in_flight > 0

    def close(self) -> None:
        self.closed = True

    def _dispatch(self, action) -> None:
        self.state = reduce(self.state, action)

    async def _call(self, label: str, call) -> Optional[Result]:
        """Run one API call; returns None when the store closed meanwhile."""
        self.in_flight += 1
        self.error = None
        try:
            result = await call
        finally:
            self.in_flight -= 1
        if self.closed:
            logger.debug("Discarding %s response for closed store", label)
            return None
        if isinstance(result, Err):
            self.error = result.message
            raise TaskOperationError(result)
        return result

    async def fetch(self, filters: Optional[dict] = None) -> None:
        result = await self._call("fetch", self.api.list_tasks(filters))
        if result is not None:
            self._dispatch(TasksLoaded(result.data))

    async def add_task(self, data: Union[TaskInput, Dict[str, Any]]) -> Optional[TaskOut]:
        result = await self._call("create", self.api.create_task(data))
        if result is None:
            return None
        self._dispatch(TaskAdded(result.data))
        return result.data

    async def update_task(self, task_id: str, data: Union[TaskInput, Dict[str, Any]]) -> Optional[TaskOut]:
        result = await self._call("update", self.api.update_task(task_id, data))
        if result is None:
            return None
        self._dispatch(TaskReplaced(result.data))
        return result.data

    async def delete_task(self, task_id: str, confirm: Optional[Confirm] = None) -> DeleteOutcome:
        confirm = confirm or self.confirm
        if confirm is None:
            raise ValueError("Deleting a task needs a confirm callback")
        if not await _ask(confirm, DELETE_PROMPT):
            return DeleteOutcome.CANCELLED

        result = await self._call("delete", self.api.delete_task(task_id))
        if result is None:
            return DeleteOutcome.DISCARDED
        self._dispatch(TaskRemoved(task_id))
        return DeleteOutcome.DELETED

    # Derived views, recomputed on every access

    def partitions(self, today: Optional[date] = None) -> TaskPartitions:
        return partition_tasks(self.state.tasks, today)

    def dashboard(self, value: str = "All", filter_type: str = "status",
                  today: Optional[date] = None):
        return filter_active(self.state.tasks, value, filter_type, today)

    def stats(self, today: Optional[date] = None) -> TaskStats:
        return task_stats(self.state.tasks, today)
