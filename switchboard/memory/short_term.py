"""
Short-Term Memory
=================

In-memory conversation log for the current session.

- Stores Message objects in arrival order
- Lives only in RAM (cleared on restart)
- Keeps at most `max_messages`, dropping the oldest first

The router writes every user request and every reply here; recent messages
give the small-talk path its conversational context.
"""

from switchboard.types import Message


class ShortTermMemory:
    """
    Bounded in-memory message log.

    Example:
        stm = ShortTermMemory(max_messages=100)
        stm.add(Message.user("Hello!"))
        stm.add(Message.assistant("Hi there!"))

        recent = stm.get_recent(limit=6)   # oldest first
    """

    def __init__(self, max_messages: int = 500):
        """
        Initialize short-term memory.

        Args:
            max_messages: Maximum messages to keep
        """
        if max_messages < 1:
            raise ValueError("max_messages must be at least 1")
        self.max_messages = max_messages
        self._messages: list[Message] = []

    def add(self, message: Message) -> None:
        """Append a message, trimming the oldest ones past the limit."""
        self._messages.append(message)

        if len(self._messages) > self.max_messages:
            self._messages = self._messages[-self.max_messages:]

    def get_recent(self, limit: int = 20) -> list[Message]:
        """
        Get the most recent messages.

        Args:
            limit: Maximum number of messages to return

        Returns:
            Messages in chronological order (oldest first)
        """
        if limit <= 0:
            return []
        return self._messages[-limit:]

    def clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)
