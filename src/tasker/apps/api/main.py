from __future__ import annotations

import logging
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tasker.core.logging import configure_logging
from tasker.core.logging.context import log_context

from .deps import get_settings
from .routes_agent import router as agent_router
from .routes_tasks import router as tasks_router
from .routes_tools import router as tools_router

logger = logging.getLogger("tasker.api")

app = FastAPI(title="Tasker API")

app.include_router(agent_router, prefix="/agent", tags=["agent"])
app.include_router(tools_router, prefix="/tools", tags=["tools"])
app.include_router(tasks_router, prefix="/tasks", tags=["tasks"])


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid4())
    with log_context(correlation_id=correlation_id):
        response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled error",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"extra_fields": {"path": request.url.path}},
    )
    return JSONResponse(status_code=500, content={"detail": "Failed to process message"})


@app.on_event("startup")
def startup() -> None:
    settings = get_settings()
    configure_logging(settings)
    logger.info("tasker api started", extra={"extra_fields": {"state_dir": str(settings.state_dir)}})


@app.get("/healthz")
def healthz() -> dict[str, bool]:
    return {"ok": True}


def run() -> None:
    uvicorn.run("tasker.apps.api.main:app", host="127.0.0.1", port=8000)
