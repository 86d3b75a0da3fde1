from __future__ import annotations

import pytest

from tasker.apps.api import deps
from tasker.core.tasks.schemas import Task


@pytest.fixture(autouse=True)
def isolated_state_dir(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKER_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.setenv("TASKER_LOG_TO_FILE", "off")
    monkeypatch.delenv("TASKER_CONFIG", raising=False)
    monkeypatch.delenv("TASKER_REPLY_MODE", raising=False)
    monkeypatch.delenv("TASKER_TITLE_MAX_LENGTH", raising=False)
    deps.reset_caches()
    yield
    deps.reset_caches()


@pytest.fixture
def two_tasks() -> list[Task]:
    return [
        Task(id="t1", title="Buy milk", completed=False, created_at=2000),
        Task(id="t2", title="Walk dog", completed=True, created_at=1000),
    ]


@pytest.fixture
def three_tasks() -> list[Task]:
    return [
        Task(id="t1", title="Buy milk", completed=False, created_at=3000),
        Task(id="t2", title="Walk dog", completed=True, created_at=2000),
        Task(id="t3", title="Call mom", completed=False, created_at=1000),
    ]
