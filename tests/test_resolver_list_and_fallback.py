from __future__ import annotations

from tasker.core.orchestration.resolver import FALLBACK_REPLY, RuleBasedResolver


def test_list_scenario(two_tasks) -> None:
    resolution = RuleBasedResolver().resolve("Show my tasks", two_tasks)

    assert resolution.invocations == []
    assert "2 tasks (1 pending, 1 done)" in resolution.reply
    assert "○ Buy milk" in resolution.reply
    assert "✓ Walk dog" in resolution.reply


def test_list_is_idempotent(two_tasks) -> None:
    resolver = RuleBasedResolver()

    first = resolver.resolve("show my tasks", two_tasks)
    second = resolver.resolve("show my tasks", two_tasks)

    assert first == second
    assert first.invocations == []


def test_list_empty_collection_invites_adding() -> None:
    resolution = RuleBasedResolver().resolve("how many tasks do I have?", [])

    assert resolution.reply == "You have no tasks yet. Would you like me to add some?"


def test_fallback_for_unrecognised_text(two_tasks) -> None:
    resolution = RuleBasedResolver().resolve("hello there", two_tasks)

    assert resolution.reply == FALLBACK_REPLY
    assert resolution.invocations == []
    assert resolution.intent == "fallback"


def test_resolver_does_not_modify_snapshot(two_tasks) -> None:
    snapshot = list(two_tasks)

    RuleBasedResolver().resolve("clear completed", two_tasks)

    assert two_tasks == snapshot
