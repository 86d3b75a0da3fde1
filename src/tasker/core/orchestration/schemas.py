from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from tasker.core.tasks.schemas import Task


class Invocation(BaseModel):
    name: str
    input: dict[str, Any] = Field(default_factory=dict)


class InvocationResult(BaseModel):
    tool_name: str
    success: bool
    data: dict[str, Any] | None = None
    error: str | None = None


class Resolution(BaseModel):
    reply: str
    invocations: list[Invocation] = Field(default_factory=list)
    intent: str = "fallback"


@dataclass
class AgentRequest:
    message: str
    tasks: list[Task] = field(default_factory=list)
    issued_after: int = 0


@dataclass
class OrchestrationResult:
    reply: str
    invocations: list[Invocation]
    results: list[InvocationResult]
    tasks: list[Task]
    intent: str = "fallback"
    turn_id: str | None = None
    trace_events: list[dict[str, Any]] = field(default_factory=list)
    issued_after: int = 0

    @property
    def failed(self) -> list[InvocationResult]:
        return [result for result in self.results if not result.success]

    def to_response(self) -> dict[str, Any]:
        return {
            "reply": self.reply,
            "invocations": [invocation.model_dump() for invocation in self.invocations],
            "results": [result.model_dump() for result in self.results],
            "tasks": [task.to_wire() for task in self.tasks],
            "turn_id": self.turn_id,
        }
