from __future__ import annotations

import logging
from typing import Any, Callable

from tasker.core.errors import TaskerError
from tasker.core.orchestration.schemas import Invocation, InvocationResult
from tasker.core.tasks import operations
from tasker.core.tasks.schemas import TITLE_MAX_LENGTH, DeletedTask, Task

from .catalog import ADD_TASK, COMPLETE_TASK, DELETE_TASK, get_tool

logger = logging.getLogger("tasker.executor")

ToolHandler = Callable[..., tuple[dict[str, Any], list[Task]]]


def advance_issued_mark(issued_after: int, result: InvocationResult) -> int:
    """Newest id timestamp once ``result`` is applied."""
    if result.success and result.tool_name == ADD_TASK and result.data:
        return max(issued_after, int(result.data.get("createdAt", 0)))
    return issued_after


class ToolExecutor:
    """Applies invocations to a task collection.

    ``execute`` never raises: validation problems, unknown ids, unknown tools
    and unexpected errors all come back as a failed ``InvocationResult`` with
    the collection unchanged.
    """

    def __init__(self, title_max_length: int = TITLE_MAX_LENGTH) -> None:
        self.title_max_length = title_max_length
        self._handlers: dict[str, ToolHandler] = {
            ADD_TASK: self._add,
            COMPLETE_TASK: self._complete,
            DELETE_TASK: self._delete,
        }

    def execute(
        self, tasks: list[Task], invocation: Invocation, *, issued_after: int = 0
    ) -> tuple[list[Task], InvocationResult]:
        name = invocation.name
        tool = get_tool(name)
        handler = self._handlers.get(name)
        if tool is None or handler is None:
            logger.warning("unknown tool", extra={"extra_fields": {"tool_name": name}})
            return tasks, InvocationResult(tool_name=name, success=False, error=f"Unknown tool: {name}")

        error = tool.validate(invocation.input)
        if error is not None:
            return tasks, InvocationResult(tool_name=name, success=False, error=error)

        try:
            data, updated = handler(tasks, invocation.input, issued_after=issued_after)
        except TaskerError as exc:
            return tasks, InvocationResult(tool_name=name, success=False, error=str(exc))
        except Exception as exc:
            logger.exception("tool failed", extra={"extra_fields": {"tool_name": name}})
            return tasks, InvocationResult(tool_name=name, success=False, error=str(exc) or "Unknown error")
        return updated, InvocationResult(tool_name=name, success=True, data=data)

    def execute_all(
        self, tasks: list[Task], invocations: list[Invocation], *, issued_after: int = 0
    ) -> tuple[list[Task], list[InvocationResult]]:
        results: list[InvocationResult] = []
        for invocation in invocations:
            tasks, result = self.execute(tasks, invocation, issued_after=issued_after)
            issued_after = advance_issued_mark(issued_after, result)
            results.append(result)
        return tasks, results

    def _add(
        self, tasks: list[Task], tool_input: dict[str, Any], issued_after: int = 0
    ) -> tuple[dict[str, Any], list[Task]]:
        task, updated = operations.add_task(
            tasks, tool_input["title"], max_length=self.title_max_length, issued_after=issued_after
        )
        return task.to_wire(), updated

    def _complete(self, tasks: list[Task], tool_input: dict[str, Any], **_: Any) -> tuple[dict[str, Any], list[Task]]:
        task, updated = operations.toggle_task(tasks, tool_input["task_id"])
        return task.to_wire(), updated

    def _delete(self, tasks: list[Task], tool_input: dict[str, Any], **_: Any) -> tuple[dict[str, Any], list[Task]]:
        task, updated = operations.delete_task(tasks, tool_input["task_id"])
        return DeletedTask(id=task.id, title=task.title).model_dump(), updated
