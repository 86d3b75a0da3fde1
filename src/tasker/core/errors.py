from __future__ import annotations


class TaskerError(RuntimeError):
    """Base error for task list operations."""


class TaskNotFoundError(TaskerError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with ID '{task_id}' not found")
        self.task_id = task_id


class TaskValidationError(TaskerError):
    """Raised when a task field fails validation."""
