from datetime import date, datetime

import pytest

from taskmanager.client.state import (
    TaskAdded,
    TaskListState,
    TaskRemoved,
    TaskReplaced,
    TasksLoaded,
    reduce,
)
from taskmanager.schemas.task import TaskOut


def make(task_id, title=None):
    return TaskOut(
        id=task_id,
        title=title or f"Task {task_id}",
        due_date=date(2030, 1, 1),
        priority="Low",
        status="Pending",
        owner="u1",
        created_at=datetime(2026, 1, 1),
        updated_at=datetime(2026, 1, 1),
    )


@pytest.fixture
def state():
    return reduce(TaskListState(), TasksLoaded((make("a"), make("b"), make("c"))))


def _ids(state):
    return [task.id for task in state.tasks]


def test_added_task_is_prepended(state):
    new_state = reduce(state, TaskAdded(make("d")))
    assert _ids(new_state) == ["d", "a", "b", "c"]
    assert _ids(state) == ["a", "b", "c"]


def test_replaced_task_keeps_its_position(state):
    new_state = reduce(state, TaskReplaced(make("b", title="Renamed")))
    assert _ids(new_state) == ["a", "b", "c"]
    assert new_state.get("b").title == "Renamed"
    assert state.get("b").title == "Task b"


def test_replacing_an_unknown_task_changes_nothing(state):
    assert reduce(state, TaskReplaced(make("zzz"))) == state


def test_removed_task_is_dropped_by_id(state):
    assert _ids(reduce(state, TaskRemoved("b"))) == ["a", "c"]
    assert _ids(reduce(state, TaskRemoved("missing"))) == ["a", "b", "c"]


def test_loaded_replaces_everything(state):
    assert _ids(reduce(state, TasksLoaded((make("x"),)))) == ["x"]
    assert len(reduce(state, TasksLoaded(()))) == 0


def test_unknown_action_is_rejected(state):
    with pytest.raises(TypeError):
        reduce(state, "TaskArchived")
