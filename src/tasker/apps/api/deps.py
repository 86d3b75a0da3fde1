from __future__ import annotations

from functools import lru_cache

from tasker.core.config import Settings, load_settings
from tasker.core.orchestration.orchestrator import Orchestrator
from tasker.core.tasks.store import TaskStore
from tasker.core.tools.executor import ToolExecutor


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def get_task_store() -> TaskStore:
    settings = get_settings()
    return TaskStore(state_dir=settings.state_dir, title_max_length=settings.title_max_length)


@lru_cache(maxsize=1)
def get_executor() -> ToolExecutor:
    return ToolExecutor(title_max_length=get_settings().title_max_length)


@lru_cache(maxsize=1)
def get_orchestrator() -> Orchestrator:
    return Orchestrator.from_settings(get_settings())


def reset_caches() -> None:
    get_settings.cache_clear()
    get_task_store.cache_clear()
    get_executor.cache_clear()
    get_orchestrator.cache_clear()
