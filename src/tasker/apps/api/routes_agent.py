from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from .deps import get_orchestrator
from tasker.core.orchestration.orchestrator import Orchestrator
from tasker.core.tasks.schemas import Task

router = APIRouter()


class AgentBody(BaseModel):
    message: Any = None
    tasks: list[Task] = Field(default_factory=list)


@router.post("/")
def agent(body: AgentBody, orchestrator: Orchestrator = Depends(get_orchestrator)) -> dict[str, Any]:
    if not isinstance(body.message, str) or not body.message.strip():
        raise HTTPException(status_code=400, detail="Message is required and must be a string")
    result = orchestrator.run(body.message, body.tasks)
    return result.to_response()
