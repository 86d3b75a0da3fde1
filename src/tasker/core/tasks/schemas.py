from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field, field_validator

TITLE_MAX_LENGTH = 200


def now_ms() -> int:
    return int(time.time() * 1000)


class Task(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    completed: bool = False
    created_at: int = Field(default_factory=now_ms, alias="createdAt")

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class DeletedTask(BaseModel):
    id: str
    title: str


def dump_tasks(tasks: list[Task]) -> list[dict]:
    return [task.to_wire() for task in tasks]


def completed_tasks(tasks: list[Task]) -> list[Task]:
    return [task for task in tasks if task.completed]
