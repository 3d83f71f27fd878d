"""
Memory System
=============

The memory collaborator the router and agent registry write to.

Persistent storage is outside this package: anything that implements the
MemoryJournal protocol can be plugged in. InMemoryJournal is the built-in
implementation, a facade over two session-scoped layers:

1. SHORT-TERM: The conversation log (Message objects)
2. WORKING: Preferences and session notes (key -> value)

plus a task table keyed by task id.

Usage:
    from switchboard.memory import InMemoryJournal

    journal = InMemoryJournal()
    journal.add_message(Message.user("Hello!"))
    journal.get_recent_messages(6)

    journal.store_task(task)
    journal.get_task(task.id)

    journal.set_preference("active_task", task.id)
    journal.get_preference("active_task")
"""

from typing import Any, Protocol, runtime_checkable

from switchboard.memory.short_term import ShortTermMemory
from switchboard.memory.working import WorkingMemory
from switchboard.types import Message, Task, TaskStatus
from switchboard.utils.logger import Logger

logger = Logger("Memory")


@runtime_checkable
class MemoryJournal(Protocol):
    """The operations the rest of the system needs from a memory store."""

    def add_message(self, message: Message) -> None: ...

    def get_recent_messages(self, limit: int = 20) -> list[Message]: ...

    def store_task(self, task: Task) -> None: ...

    def get_task(self, task_id: str) -> Task | None: ...

    def get_preference(self, key: str, default: Any = None) -> Any: ...

    def set_preference(self, key: str, value: Any) -> None: ...


class InMemoryJournal:
    """
    Session-only MemoryJournal.

    Tasks are stored by reference: a task stored while pending and finished
    later is seen finished through get_task() without being stored again.
    Storing a task with a known id replaces the previous entry.

    Example:
        journal = InMemoryJournal()
        journal.store_task(task)
        recent = journal.get_recent_tasks(5, status=TaskStatus.COMPLETED)
    """

    def __init__(self, max_messages: int = 500):
        self.short_term = ShortTermMemory(max_messages=max_messages)
        self.working = WorkingMemory()
        self._tasks: dict[str, Task] = {}

        logger.debug("In-memory journal initialized")

    # ==========================================================================
    # Messages
    # ==========================================================================

    def add_message(self, message: Message) -> None:
        self.short_term.add(message)

    def get_recent_messages(self, limit: int = 20) -> list[Message]:
        """Most recent messages, oldest first."""
        return self.short_term.get_recent(limit)

    def clear_messages(self) -> None:
        self.short_term.clear()
        logger.info("Cleared conversation log")

    # ==========================================================================
    # Tasks
    # ==========================================================================

    def store_task(self, task: Task) -> None:
        self._tasks[task.id] = task
        logger.debug(f"Stored task {task.id} ({task.status.value})")

    def get_task(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def get_recent_tasks(
        self,
        limit: int = 20,
        status: TaskStatus | str | None = None
    ) -> list[Task]:
        """
        Most recently created tasks first.

        Args:
            limit: Maximum number of tasks to return
            status: Only return tasks in this status

        Returns:
            Tasks ordered by created_at, newest first
        """
        tasks = list(self._tasks.values())
        if status is not None:
            wanted = TaskStatus(status)
            tasks = [t for t in tasks if t.status == wanted]
        tasks.sort(key=lambda t: t.created_at, reverse=True)
        return tasks[:limit]

    # ==========================================================================
    # Preferences
    # ==========================================================================

    def get_preference(self, key: str, default: Any = None) -> Any:
        return self.working.get(key, default)

    def set_preference(self, key: str, value: Any) -> None:
        self.working.set(key, value)


__all__ = [
    "MemoryJournal",
    "InMemoryJournal",
    "ShortTermMemory",
    "WorkingMemory",
]
