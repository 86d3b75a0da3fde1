from __future__ import annotations

import re
from typing import Protocol

from tasker.core.tasks.schemas import TITLE_MAX_LENGTH, Task, completed_tasks
from tasker.core.tools.catalog import ADD_TASK, COMPLETE_TASK, DELETE_TASK

from .schemas import Invocation, Resolution

CLEAR_VERBS = ("clear", "delete all", "remove all")
COMPLETION_QUALIFIERS = ("completed", "done")
ADD_KEYWORDS = ("add", "create")
COMPLETE_KEYWORDS = ("complete", "done", "finish", "mark", "✓")
DELETE_KEYWORDS = ("delete", "remove")
LIST_KEYWORDS = ("show", "list", "what", "how many", "view", "display")

INTENT_CLEAR_COMPLETED = "clear_completed"
INTENT_ADD = "add"
INTENT_COMPLETE = "complete"
INTENT_DELETE = "delete"
INTENT_LIST = "list"
INTENT_FALLBACK = "fallback"

FALLBACK_REPLY = (
    "I can help you manage tasks! Try asking me to:\n"
    "- Add a task (e.g., 'Add Buy milk')\n"
    "- Complete a task (e.g., 'Mark the first task done')\n"
    "- Delete a task (e.g., 'Delete that')\n"
    "- Show my tasks (e.g., 'What tasks do I have?')"
)

_QUOTED_DOUBLE_RE = re.compile(r"[\"“]([^\"“”\n]+?)[\"”]")
_INNER_APOSTROPHE = r"(?<=\w)['’](?=\w)"
_QUOTED_SINGLE_RE = re.compile(
    r"(?:^|(?<=\s))['‘]((?:[^'‘’\n]|" + _INNER_APOSTROPHE + r")+?)['’](?=\s|$|[.,!?;:])"
)
_ADD_TITLE_RE = re.compile(
    r"\b(?:add|create)\b(?:\s+(?:a\s+)?(?:new\s+)?task\b)?(?:\s+(?:called|named)\b)?(?:\s+an?\b)?"
    r"\s*:?\s*((?:[^\"'“”‘’.\n]|" + _INNER_APOSTROPHE + r")+)",
    re.IGNORECASE,
)
_TARGET_RE = re.compile(
    r"\b(?:complete[ds]?|finish(?:ed)?|mark(?:ed)?|check\s+off|done\s+with|delete[ds]?|remove[ds]?)\b"
    r"\s*((?:[^\"'“”‘’.\n]|" + _INNER_APOSTROPHE + r")*)",
    re.IGNORECASE,
)
_LIST_SUFFIX_RE = re.compile(
    r"\s+(?:to|on|onto|in)\s+(?:my|the)\s+(?:task\s+|to-?do\s+)?(?:list|tasks|todos?)$",
    re.IGNORECASE,
)
_TRAILING_PUNCT = " \t!?,;:"
_TITLE_FILLER = {"a", "an", "new", "task", "tasks", "to", "my", "the", "list", "please"}

_LEADING_FILLER = {"the", "my", "a", "an", "task", "item", "todo", "that", "this", "it", "off", "as", "with"}
_TRAILING_FILLER = {
    "as", "done", "complete", "completed", "finished", "task", "item", "please", "off", "now", "it", "one",
}


class IntentResolver(Protocol):
    def resolve(self, message: str, tasks: list[Task]) -> Resolution: ...


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def extract_quoted(message: str) -> str | None:
    for pattern in (_QUOTED_DOUBLE_RE, _QUOTED_SINGLE_RE):
        match = pattern.search(message)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


def extract_title(message: str, max_length: int = TITLE_MAX_LENGTH) -> str | None:
    """Title for an add request: quoted text first, else the text after the verb."""
    title = extract_quoted(message)
    if title is None:
        match = _ADD_TITLE_RE.search(message)
        if match is None:
            return None
        title = _LIST_SUFFIX_RE.sub("", match.group(1).strip(_TRAILING_PUNCT))
        title = re.sub(r"\s+please$", "", title, flags=re.IGNORECASE).strip(_TRAILING_PUNCT)
    title = title.strip()
    if not title or all(word.casefold() in _TITLE_FILLER for word in title.split()):
        return None
    return title[:max_length].rstrip()


def extract_target_fragment(message: str) -> str | None:
    quoted = extract_quoted(message)
    if quoted is not None:
        return quoted
    match = _TARGET_RE.search(message)
    if match is None:
        return None
    words = match.group(1).strip(_TRAILING_PUNCT).split()
    while words and words[0].casefold() in _LEADING_FILLER:
        words.pop(0)
    while words and words[-1].casefold().strip(_TRAILING_PUNCT) in _TRAILING_FILLER:
        words.pop()
    fragment = " ".join(words).strip(_TRAILING_PUNCT)
    return fragment or None


def find_by_fragment(tasks: list[Task], fragment: str) -> Task | None:
    needle = fragment.casefold()
    for task in tasks:
        if needle in task.title.casefold():
            return task
    return None


class RuleBasedResolver:
    """Deterministic keyword classifier over a task collection snapshot.

    Bulk intents are checked before single-target ones; the first matching
    rule decides the reply and the invocations. The snapshot is never
    modified and the resolver keeps no state between calls.
    """

    def __init__(self, title_max_length: int = TITLE_MAX_LENGTH) -> None:
        self.title_max_length = title_max_length

    def resolve(self, message: str, tasks: list[Task]) -> Resolution:
        text = message.lower().strip()

        if _contains_any(text, CLEAR_VERBS):
            return self._clear(text, tasks)
        if _contains_any(text, ADD_KEYWORDS):
            return self._add(message)
        if _contains_any(text, COMPLETE_KEYWORDS):
            return self._single_target(text, message, tasks, INTENT_COMPLETE)
        if _contains_any(text, DELETE_KEYWORDS):
            return self._single_target(text, message, tasks, INTENT_DELETE)
        if _contains_any(text, LIST_KEYWORDS):
            return self._list(tasks)
        return Resolution(reply=FALLBACK_REPLY, intent=INTENT_FALLBACK)

    def _clear(self, text: str, tasks: list[Task]) -> Resolution:
        if not _contains_any(text, COMPLETION_QUALIFIERS):
            return Resolution(
                reply="What would you like me to clear? Try 'clear completed tasks'.",
                intent=INTENT_CLEAR_COMPLETED,
            )
        done = completed_tasks(tasks)
        if not done:
            return Resolution(
                reply="You don't have any completed tasks to clear.",
                intent=INTENT_CLEAR_COMPLETED,
            )
        remaining = len(tasks) - len(done)
        return Resolution(
            reply=(
                f"Cleared {_plural(len(done), 'completed task')}. "
                f"You have {_plural(remaining, 'task')} remaining."
            ),
            invocations=[Invocation(name=DELETE_TASK, input={"task_id": task.id}) for task in done],
            intent=INTENT_CLEAR_COMPLETED,
        )

    def _add(self, message: str) -> Resolution:
        title = extract_title(message, max_length=self.title_max_length)
        if title is None:
            return Resolution(
                reply="I'd like to add a task, but I need a title. What should the task be called?",
                intent=INTENT_ADD,
            )
        return Resolution(
            reply=f'✓ I\'ve added "{title}" to your tasks.',
            invocations=[Invocation(name=ADD_TASK, input={"title": title})],
            intent=INTENT_ADD,
        )

    def _single_target(self, text: str, message: str, tasks: list[Task], intent: str) -> Resolution:
        if not tasks:
            verb = "complete" if intent == INTENT_COMPLETE else "delete"
            return Resolution(reply=f"You don't have any tasks to {verb}!", intent=intent)

        target = self._resolve_target(text, message, tasks)
        if intent == INTENT_COMPLETE:
            return Resolution(
                reply=f'✓ Marked "{target.title}" as complete.',
                invocations=[Invocation(name=COMPLETE_TASK, input={"task_id": target.id})],
                intent=intent,
            )
        return Resolution(
            reply=f'🗑 Deleted "{target.title}".',
            invocations=[Invocation(name=DELETE_TASK, input={"task_id": target.id})],
            intent=intent,
        )

    def _resolve_target(self, text: str, message: str, tasks: list[Task]) -> Task:
        if "first" in text:
            return tasks[0]
        if "last" in text:
            return tasks[-1]
        fragment = extract_target_fragment(message)
        if fragment is not None:
            matched = find_by_fragment(tasks, fragment)
            if matched is not None:
                return matched
        # no usable reference: fall back to the first task
        return tasks[0]

    def _list(self, tasks: list[Task]) -> Resolution:
        if not tasks:
            return Resolution(reply="You have no tasks yet. Would you like me to add some?", intent=INTENT_LIST)
        done = len(completed_tasks(tasks))
        pending = len(tasks) - done
        lines = [f"{'✓' if task.completed else '○'} {task.title}" for task in tasks]
        header = f"You have {_plural(len(tasks), 'task')} ({pending} pending, {done} done):"
        return Resolution(reply=header + "\n\n" + "\n".join(lines), intent=INTENT_LIST)
