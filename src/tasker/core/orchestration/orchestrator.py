from __future__ import annotations

import logging
from uuid import uuid4

from tasker.core.config import ReplyMode, Settings
from tasker.core.logging.context import get_log_context, log_context
from tasker.core.observability.trace import Trace
from tasker.core.tasks.schemas import Task
from tasker.core.tools.executor import ToolExecutor, advance_issued_mark

from .resolver import IntentResolver, RuleBasedResolver
from .schemas import AgentRequest, InvocationResult, OrchestrationResult

logger = logging.getLogger("tasker.orchestrator")


def reconcile_reply(reply: str, results: list[InvocationResult]) -> str:
    failed = [result for result in results if not result.success]
    if not failed:
        return reply
    errors = "; ".join(result.error or "unknown error" for result in failed)
    noun = "action" if len(results) == 1 else "actions"
    return f"{reply}\n\nNote: {len(failed)} of {len(results)} {noun} failed: {errors}"


class Orchestrator:
    """Resolve one message, execute its invocations in order, assemble the reply."""

    def __init__(
        self,
        resolver: IntentResolver | None = None,
        executor: ToolExecutor | None = None,
        reply_mode: ReplyMode = "optimistic",
    ) -> None:
        self.resolver = resolver or RuleBasedResolver()
        self.executor = executor or ToolExecutor()
        self.reply_mode = reply_mode

    @classmethod
    def from_settings(cls, settings: Settings) -> "Orchestrator":
        return cls(
            resolver=RuleBasedResolver(title_max_length=settings.title_max_length),
            executor=ToolExecutor(title_max_length=settings.title_max_length),
            reply_mode=settings.reply_mode,
        )

    def handle(self, request: AgentRequest) -> OrchestrationResult:
        turn_id = str(uuid4())
        correlation_id = get_log_context().get("correlation_id")
        trace = Trace(message=request.message, turn_id=turn_id, correlation_id=correlation_id)

        with log_context(turn_id=turn_id):
            trace.emit("TurnStarted", {"task_count": len(request.tasks)})
            resolution = self.resolver.resolve(request.message, list(request.tasks))
            trace.emit(
                "IntentResolved",
                {"intent": resolution.intent, "invocation_count": len(resolution.invocations)},
            )
            logger.info(
                "intent resolved",
                extra={
                    "extra_fields": {
                        "intent": resolution.intent,
                        "invocation_count": len(resolution.invocations),
                    }
                },
            )

            tasks: list[Task] = list(request.tasks)
            results: list[InvocationResult] = []
            issued_after = request.issued_after
            for invocation in resolution.invocations:
                tasks, result = self.executor.execute(tasks, invocation, issued_after=issued_after)
                issued_after = advance_issued_mark(issued_after, result)
                results.append(result)
                trace.emit(
                    "ToolExecuted",
                    {"tool_name": invocation.name, "success": result.success, "error": result.error},
                )
                if not result.success:
                    logger.warning(
                        "tool invocation failed",
                        extra={"extra_fields": {"tool_name": invocation.name, "error": result.error}},
                    )

            reply = resolution.reply
            if self.reply_mode == "reconcile":
                reply = reconcile_reply(reply, results)

            failed_count = sum(1 for result in results if not result.success)
            trace.emit("TurnCompleted", {"result_count": len(results), "failed_count": failed_count})

        return OrchestrationResult(
            reply=reply,
            invocations=list(resolution.invocations),
            results=results,
            tasks=tasks,
            intent=resolution.intent,
            turn_id=turn_id,
            trace_events=trace.events,
            issued_after=issued_after,
        )

    def run(
        self, message: str, tasks: list[Task] | None = None, *, issued_after: int = 0
    ) -> OrchestrationResult:
        return self.handle(AgentRequest(message=message, tasks=list(tasks or []), issued_after=issued_after))
