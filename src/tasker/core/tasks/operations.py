"""Pure operations over a task collection.

Every function takes the current collection and returns a new one; neither
the input list nor its records are modified.
"""

from __future__ import annotations

from tasker.core.errors import TaskNotFoundError, TaskValidationError

from .schemas import TITLE_MAX_LENGTH, Task, now_ms


def new_task_id(tasks: list[Task], timestamp_ms: int | None = None) -> str:
    taken = {task.id for task in tasks}
    candidate = f"task-{timestamp_ms if timestamp_ms is not None else now_ms()}"
    if candidate not in taken:
        return candidate
    suffix = 1
    while f"{candidate}-{suffix}" in taken:
        suffix += 1
    return f"{candidate}-{suffix}"


def validate_title(title: object, max_length: int = TITLE_MAX_LENGTH) -> str:
    if not isinstance(title, str) or not title.strip():
        raise TaskValidationError("Title is required and must be a string")
    cleaned = title.strip()
    if len(cleaned) > max_length:
        raise TaskValidationError(f"Title must be at most {max_length} characters")
    return cleaned


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    for task in tasks:
        if task.id == task_id:
            return task
    return None


def add_task(
    tasks: list[Task],
    title: str,
    *,
    max_length: int = TITLE_MAX_LENGTH,
    timestamp_ms: int | None = None,
    issued_after: int = 0,
) -> tuple[Task, list[Task]]:
    """Prepend a new pending task.

    ``issued_after`` is the newest timestamp already used for an id, including
    ids of tasks deleted since. The new id is stamped strictly after it.
    """
    cleaned = validate_title(title, max_length=max_length)
    now = timestamp_ms if timestamp_ms is not None else now_ms()
    # created_at never goes backwards relative to the newest task
    if tasks:
        now = max(now, max(task.created_at for task in tasks))
    if issued_after:
        now = max(now, issued_after + 1)
    task = Task(id=new_task_id(tasks, now), title=cleaned, completed=False, created_at=now)
    return task, [task, *tasks]


def toggle_task(tasks: list[Task], task_id: str) -> tuple[Task, list[Task]]:
    target = find_task(tasks, task_id)
    if target is None:
        raise TaskNotFoundError(task_id)
    updated = target.model_copy(update={"completed": not target.completed})
    return updated, [updated if task.id == task_id else task for task in tasks]


def delete_task(tasks: list[Task], task_id: str) -> tuple[Task, list[Task]]:
    target = find_task(tasks, task_id)
    if target is None:
        raise TaskNotFoundError(task_id)
    return target, [task for task in tasks if task.id != task_id]
