from __future__ import annotations

import pytest

from tasker.core.errors import TaskNotFoundError, TaskValidationError
from tasker.core.tasks import operations
from tasker.core.tasks.schemas import Task


def test_new_task_id_uses_millisecond_timestamp() -> None:
    assert operations.new_task_id([], 1707417600000) == "task-1707417600000"


def test_new_task_id_avoids_same_millisecond_collisions() -> None:
    tasks = [Task(id="task-1000", title="a", created_at=1000)]
    assert operations.new_task_id(tasks, 1000) == "task-1000-1"

    tasks.append(Task(id="task-1000-1", title="b", created_at=1000))
    assert operations.new_task_id(tasks, 1000) == "task-1000-2"


def test_rapid_adds_get_unique_ids() -> None:
    tasks: list[Task] = []
    for index in range(5):
        _, tasks = operations.add_task(tasks, f"Task {index}", timestamp_ms=42)

    assert len({task.id for task in tasks}) == 5
    assert [task.title for task in tasks] == ["Task 4", "Task 3", "Task 2", "Task 1", "Task 0"]


def test_created_at_never_goes_backwards() -> None:
    tasks = [Task(id="t1", title="later", created_at=5000)]

    task, _ = operations.add_task(tasks, "earlier clock", timestamp_ms=1000)

    assert task.created_at == 5000


def test_add_trims_and_validates_title() -> None:
    task, _ = operations.add_task([], "  Buy milk  ")
    assert task.title == "Buy milk"

    with pytest.raises(TaskValidationError):
        operations.add_task([], "   ")
    with pytest.raises(TaskValidationError):
        operations.add_task([], "x" * 11, max_length=10)


def test_toggle_and_delete_raise_for_unknown_ids(two_tasks) -> None:
    with pytest.raises(TaskNotFoundError) as excinfo:
        operations.toggle_task(two_tasks, "nope")
    assert excinfo.value.task_id == "nope"

    with pytest.raises(TaskNotFoundError):
        operations.delete_task(two_tasks, "nope")


def test_operations_leave_input_untouched(two_tasks) -> None:
    before = list(two_tasks)

    operations.toggle_task(two_tasks, "t1")
    operations.delete_task(two_tasks, "t2")
    operations.add_task(two_tasks, "New")

    assert two_tasks == before


def test_task_wire_format_uses_created_at_alias() -> None:
    task = Task.model_validate({"id": "t1", "title": "Buy milk", "completed": False, "createdAt": 7})

    assert task.created_at == 7
    assert task.to_wire() == {"id": "t1", "title": "Buy milk", "completed": False, "createdAt": 7}


def test_deleted_id_is_not_reissued_in_the_same_millisecond() -> None:
    first, tasks = operations.add_task([], "first", timestamp_ms=1000)
    _, tasks = operations.delete_task(tasks, first.id)

    second, _ = operations.add_task(tasks, "second", timestamp_ms=1000, issued_after=first.created_at)

    assert second.id != first.id
    assert second.id == "task-1001"
    assert second.created_at == 1001
