from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

ADD_TASK = "add_task"
COMPLETE_TASK = "complete_task"
DELETE_TASK = "delete_task"

_JSON_TYPES: dict[str, type] = {"string": str, "boolean": bool, "integer": int}


@dataclass(frozen=True)
class ToolField:
    type: str
    required: bool = True
    description: str = ""


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_fields: Mapping[str, ToolField]
    input_examples: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)

    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                name: {"type": spec.type, "description": spec.description}
                for name, spec in self.input_fields.items()
            },
            "required": [name for name, spec in self.input_fields.items() if spec.required],
            "additionalProperties": False,
        }

    def validate(self, tool_input: Mapping[str, Any]) -> str | None:
        """Return a field-level error message, or None when the input is usable."""
        for name, spec in self.input_fields.items():
            value = tool_input.get(name)
            expected = _JSON_TYPES.get(spec.type, object)
            if value is None:
                if spec.required:
                    return f"{_label(name)} is required and must be a {spec.type}"
                continue
            if not isinstance(value, expected) or (expected is str and not value.strip()):
                return f"{_label(name)} is required and must be a {spec.type}"
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema(),
            "input_examples": [dict(example) for example in self.input_examples],
        }


def _label(field_name: str) -> str:
    if field_name == "task_id":
        return "Task ID"
    return field_name.replace("_", " ").capitalize()


_TASK_ID_FIELD = ToolField(
    type="string",
    description="The unique ID of the task (format: task-{timestamp})",
)

TASK_TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name=ADD_TASK,
        description=(
            "Creates a new task in the task list. Takes a title and returns the newly "
            "created task with a unique ID and creation timestamp."
        ),
        input_fields=MappingProxyType(
            {"title": ToolField(type="string", description="The task title (1-200 characters)")}
        ),
        input_examples=({"title": "Buy groceries"}, {"title": "Review pull requests"}),
    ),
    ToolDefinition(
        name=COMPLETE_TASK,
        description=(
            "Marks a task as completed by toggling its completion status. Takes a task_id "
            "and returns the updated task."
        ),
        input_fields=MappingProxyType({"task_id": _TASK_ID_FIELD}),
        input_examples=({"task_id": "task-1707417600000"},),
    ),
    ToolDefinition(
        name=DELETE_TASK,
        description=(
            "Permanently removes a task from the task list. Takes a task_id and returns "
            "the deleted task's ID and title."
        ),
        input_fields=MappingProxyType({"task_id": _TASK_ID_FIELD}),
        input_examples=({"task_id": "task-1707417600000"},),
    ),
)

_BY_NAME: dict[str, ToolDefinition] = {tool.name: tool for tool in TASK_TOOLS}


def get_tool(name: str) -> ToolDefinition | None:
    return _BY_NAME.get(name)


def tool_names() -> list[str]:
    return [tool.name for tool in TASK_TOOLS]
