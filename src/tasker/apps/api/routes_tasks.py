from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from .deps import get_orchestrator, get_task_store
from tasker.core.errors import TaskNotFoundError, TaskValidationError
from tasker.core.orchestration.orchestrator import Orchestrator
from tasker.core.tasks.schemas import dump_tasks
from tasker.core.tasks.store import TaskStore

router = APIRouter()


class NewTask(BaseModel):
    title: Any = None


class ChatBody(BaseModel):
    message: Any = None


@router.get("/")
def list_tasks(store: TaskStore = Depends(get_task_store)) -> dict[str, Any]:
    tasks = store.list_tasks()
    return {"tasks": dump_tasks(tasks), "count": len(tasks)}


@router.post("/")
def create_task(body: NewTask, store: TaskStore = Depends(get_task_store)) -> dict[str, Any]:
    try:
        task = store.add(body.title)
    except TaskValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return task.to_wire()


@router.post("/chat")
def chat(
    body: ChatBody,
    store: TaskStore = Depends(get_task_store),
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    if not isinstance(body.message, str) or not body.message.strip():
        raise HTTPException(status_code=400, detail="Message is required and must be a string")
    with store.transaction() as snapshot:
        result = orchestrator.run(body.message, snapshot.tasks, issued_after=snapshot.last_issued_ms)
        snapshot.tasks = result.tasks
        snapshot.last_issued_ms = result.issued_after
    return result.to_response()


@router.post("/{task_id}/toggle")
def toggle_task(task_id: str, store: TaskStore = Depends(get_task_store)) -> dict[str, Any]:
    try:
        task = store.toggle(task_id)
    except TaskNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return task.to_wire()


@router.delete("/{task_id}")
def delete_task(task_id: str, store: TaskStore = Depends(get_task_store)) -> dict[str, str]:
    try:
        task = store.delete(task_id)
    except TaskNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"id": task.id, "title": task.title}
