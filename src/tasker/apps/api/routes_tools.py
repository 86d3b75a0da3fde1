from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from .deps import get_executor, get_task_store
from tasker.core.orchestration.schemas import Invocation
from tasker.core.tasks.store import TaskStore
from tasker.core.tools.catalog import TASK_TOOLS
from tasker.core.tools.executor import ToolExecutor

router = APIRouter()


class ToolBody(BaseModel):
    tool_name: str | None = None
    tool_input: dict[str, Any] | None = None


@router.get("/")
def list_tools() -> dict[str, list[dict[str, Any]]]:
    return {"tools": [tool.to_dict() for tool in TASK_TOOLS]}


@router.post("/")
def execute_tool(
    body: ToolBody,
    store: TaskStore = Depends(get_task_store),
    executor: ToolExecutor = Depends(get_executor),
) -> dict[str, Any]:
    if not body.tool_name or body.tool_input is None:
        raise HTTPException(status_code=400, detail="Missing tool_name or tool_input")

    invocation = Invocation(name=body.tool_name, input=body.tool_input)
    with store.transaction() as snapshot:
        snapshot.tasks, result = executor.execute(
            snapshot.tasks, invocation, issued_after=snapshot.last_issued_ms
        )
    return {"success": result.success, "data": result.data, "error": result.error}
