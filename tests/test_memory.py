"""Unit tests for the in-memory journal and its layers."""

from datetime import datetime, timedelta

import pytest

from switchboard.memory import InMemoryJournal, MemoryJournal, ShortTermMemory, WorkingMemory
from switchboard.types import AgentType, Message, Task, TaskResult, TaskStatus


def test_in_memory_journal_satisfies_the_protocol():
    assert isinstance(InMemoryJournal(), MemoryJournal)


class TestShortTermMemory:
    def test_keeps_the_newest_messages(self):
        stm = ShortTermMemory(max_messages=3)
        for i in range(5):
            stm.add(Message.user(f"m{i}"))

        assert len(stm) == 3
        assert [m.content for m in stm.get_recent(10)] == ["m2", "m3", "m4"]

    def test_recent_is_oldest_first(self):
        stm = ShortTermMemory()
        for i in range(4):
            stm.add(Message.user(f"m{i}"))

        assert [m.content for m in stm.get_recent(2)] == ["m2", "m3"]
        assert stm.get_recent(0) == []

    def test_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            ShortTermMemory(max_messages=0)


class TestWorkingMemory:
    def test_update_keeps_created_at(self):
        wm = WorkingMemory()
        wm.set("active_task", "t1")
        created = wm.get_note("active_task").created_at

        wm.set("active_task", "t2")

        note = wm.get_note("active_task")
        assert note.value == "t2"
        assert note.created_at == created

    def test_defaults_and_delete(self):
        wm = WorkingMemory()
        wm.set("tone", "casual")

        assert wm.get("missing", "fallback") == "fallback"
        assert wm.delete("tone")
        assert not wm.delete("tone")
        assert wm.keys() == []


class TestInMemoryJournal:
    def test_messages(self):
        journal = InMemoryJournal(max_messages=10)
        journal.add_message(Message.user("hi"))
        journal.add_message(Message.assistant("hello"))

        assert [m.content for m in journal.get_recent_messages(6)] == ["hi", "hello"]

        journal.clear_messages()
        assert journal.get_recent_messages() == []

    def test_tasks_are_stored_by_reference(self):
        journal = InMemoryJournal()
        task = Task(title="Ship it", description="Deploy", type=AgentType.WORK)
        journal.store_task(task)

        task.start("coding-agent")
        task.complete(TaskResult(success=True, output="Shipped"))

        assert journal.get_task(task.id).status == TaskStatus.COMPLETED
        assert journal.get_task("missing") is None

    def test_recent_tasks_newest_first_with_status_filter(self):
        journal = InMemoryJournal()
        now = datetime.now()
        old = Task(title="old", description="", type="work", created_at=now - timedelta(hours=2))
        mid = Task(title="mid", description="", type="work", created_at=now - timedelta(hours=1))
        new = Task(title="new", description="", type="personal", created_at=now)
        for task in (mid, new, old):
            journal.store_task(task)
        mid.start("coding-agent")
        mid.fail(TaskResult(success=False, error="boom"))

        assert [t.title for t in journal.get_recent_tasks()] == ["new", "mid", "old"]
        assert [t.title for t in journal.get_recent_tasks(limit=1)] == ["new"]
        assert [t.title for t in journal.get_recent_tasks(status="pending")] == ["new", "old"]
        assert journal.get_recent_tasks(status=TaskStatus.FAILED) == [mid]

    def test_preferences(self):
        journal = InMemoryJournal()
        journal.set_preference("active_task", "abc")

        assert journal.get_preference("active_task") == "abc"
        assert journal.get_preference("timezone", "UTC") == "UTC"
