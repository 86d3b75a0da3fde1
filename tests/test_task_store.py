from __future__ import annotations

import threading

import pytest

from tasker.core.errors import TaskNotFoundError
from tasker.core.tasks.schemas import Task
from tasker.core.tasks.store import TaskStore


def test_store_add_toggle_delete_persist(tmp_path) -> None:
    store = TaskStore(state_dir=tmp_path)

    first = store.add("Buy milk")
    second = store.add("Walk dog")
    store.toggle(first.id)

    reloaded = TaskStore(state_dir=tmp_path).list_tasks()
    assert [task.id for task in reloaded] == [second.id, first.id]
    assert reloaded[1].completed is True

    removed = store.delete(second.id)
    assert removed.title == "Walk dog"
    assert [task.id for task in store.list_tasks()] == [first.id]


def test_store_raises_for_unknown_ids(tmp_path) -> None:
    store = TaskStore(state_dir=tmp_path)

    with pytest.raises(TaskNotFoundError):
        store.toggle("missing")
    with pytest.raises(TaskNotFoundError):
        store.delete("missing")


def test_store_skips_corrupt_lines(tmp_path) -> None:
    store = TaskStore(state_dir=tmp_path)
    store.save([Task(id="t1", title="Buy milk", created_at=1)])
    with store.file_path.open("a", encoding="utf-8") as handle:
        handle.write("{not json\n")
        handle.write('{"id": "t2", "title": ""}\n')

    assert [task.id for task in store.load()] == ["t1"]


def test_transaction_is_not_saved_on_error(tmp_path) -> None:
    store = TaskStore(state_dir=tmp_path)
    store.add("Keep me")

    with pytest.raises(RuntimeError):
        with store.transaction() as snapshot:
            snapshot.tasks = []
            raise RuntimeError("boom")

    assert [task.title for task in store.list_tasks()] == ["Keep me"]


def test_concurrent_adds_are_not_lost(tmp_path) -> None:
    store = TaskStore(state_dir=tmp_path)

    threads = [threading.Thread(target=store.add, args=(f"Task {index}",)) for index in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    tasks = TaskStore(state_dir=tmp_path).list_tasks()
    assert len(tasks) == 10
    assert len({task.id for task in tasks}) == 10


def test_store_never_reuses_a_deleted_id(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr("tasker.core.tasks.operations.now_ms", lambda: 5000)
    store = TaskStore(state_dir=tmp_path)

    first = store.add("a")
    store.delete(first.id)
    second = store.add("b")
    assert second.id != first.id

    store.delete(second.id)
    third = TaskStore(state_dir=tmp_path).add("c")
    assert third.id not in {first.id, second.id}
    assert store.load_issued_mark() == third.created_at


def test_store_ignores_corrupt_metadata(tmp_path) -> None:
    store = TaskStore(state_dir=tmp_path)
    store.meta_path.write_text("[not an object", encoding="utf-8")

    assert store.load_issued_mark() == 0
    assert store.add("Buy milk").title == "Buy milk"
