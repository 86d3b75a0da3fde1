from __future__ import annotations

import json
import logging
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Iterator

from pydantic import ValidationError

from . import operations
from .schemas import TITLE_MAX_LENGTH, Task

logger = logging.getLogger("tasker.store")

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _locks[key] = lock
        return lock


@dataclass
class TaskSnapshot:
    tasks: list[Task] = field(default_factory=list)
    last_issued_ms: int = 0


def _issued_mark(tasks: list[Task], last_issued_ms: int = 0) -> int:
    return max([last_issued_ms, *(task.created_at for task in tasks)])


class TaskStore:
    """One persisted task collection, newest first.

    Reads and writes go through ``transaction()`` so that concurrent
    read-modify-write cycles on the same file are serialized. Next to the
    task lines the store keeps the newest timestamp it has stamped into an
    id, so ids of deleted tasks are not handed out again.
    """

    def __init__(self, state_dir: Path, title_max_length: int = TITLE_MAX_LENGTH) -> None:
        self.state_dir = Path(state_dir)
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.file_path = self.state_dir / "tasks.jsonl"
        self.meta_path = self.state_dir / "tasks.meta.json"
        self.title_max_length = title_max_length
        self._lock = _lock_for(self.file_path)

    def load(self) -> list[Task]:
        if not self.file_path.exists() or self.file_path.stat().st_size == 0:
            return []
        tasks: list[Task] = []
        with self.file_path.open("r", encoding="utf-8") as handle:
            for line_no, line in enumerate(handle, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    tasks.append(Task.model_validate(json.loads(line)))
                except (json.JSONDecodeError, ValidationError):
                    logger.warning(
                        "skipping corrupt task record",
                        extra={"extra_fields": {"path": str(self.file_path), "line": line_no}},
                    )
        return tasks

    def load_issued_mark(self) -> int:
        if not self.meta_path.exists():
            return 0
        try:
            data = json.loads(self.meta_path.read_text(encoding="utf-8"))
            return int(data.get("last_issued_ms", 0))
        except (json.JSONDecodeError, AttributeError, TypeError, ValueError):
            logger.warning("ignoring corrupt task metadata", extra={"extra_fields": {"path": str(self.meta_path)}})
            return 0

    def _write_atomic(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile("w", encoding="utf-8", delete=False, dir=path.parent) as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
            temp_name = handle.name
        Path(temp_name).replace(path)

    def save(self, tasks: list[Task], last_issued_ms: int | None = None) -> None:
        if last_issued_ms is None:
            last_issued_ms = self.load_issued_mark()
        mark = _issued_mark(tasks, last_issued_ms)
        self._write_atomic(self.meta_path, json.dumps({"last_issued_ms": mark}))
        self._write_atomic(
            self.file_path,
            "".join(json.dumps(task.to_wire(), ensure_ascii=False) + "\n" for task in tasks),
        )

    @contextmanager
    def transaction(self) -> Iterator[TaskSnapshot]:
        with self._lock:
            tasks = self.load()
            snapshot = TaskSnapshot(tasks=tasks, last_issued_ms=_issued_mark(tasks, self.load_issued_mark()))
            yield snapshot
            self.save(snapshot.tasks, snapshot.last_issued_ms)

    def list_tasks(self) -> list[Task]:
        with self._lock:
            return self.load()

    def add(self, title: str) -> Task:
        with self.transaction() as snapshot:
            task, snapshot.tasks = operations.add_task(
                snapshot.tasks,
                title,
                max_length=self.title_max_length,
                issued_after=snapshot.last_issued_ms,
            )
        return task

    def toggle(self, task_id: str) -> Task:
        with self.transaction() as snapshot:
            task, snapshot.tasks = operations.toggle_task(snapshot.tasks, task_id)
        return task

    def delete(self, task_id: str) -> Task:
        with self.transaction() as snapshot:
            task, snapshot.tasks = operations.delete_task(snapshot.tasks, task_id)
        return task
