"""
Working Memory
==============

Session-scoped key-value notes.

The router uses it for user preferences and session state such as
`active_task` (the id of the last task it created). Values can be any
Python object; nothing is persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class WorkingNote:
    """
    A single note in working memory.

    Attributes:
        key: Identifier for the note
        value: The stored value
        created_at: When the note was created
        updated_at: When the note was last updated
    """
    key: str
    value: Any
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)


class WorkingMemory:
    """
    Session-scoped key-value storage.

    Example:
        wm = WorkingMemory()
        wm.set("active_task", task.id)
        wm.get("active_task")            # -> task.id
        wm.get("missing", "fallback")    # -> "fallback"
    """

    def __init__(self):
        self._notes: dict[str, WorkingNote] = {}

    def set(self, key: str, value: Any) -> None:
        """Store or update a note."""
        note = self._notes.get(key)
        if note is None:
            self._notes[key] = WorkingNote(key=key, value=value)
        else:
            note.value = value
            note.updated_at = datetime.now()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a note's value, or `default` if not set."""
        note = self._notes.get(key)
        return note.value if note is not None else default

    def get_note(self, key: str) -> WorkingNote | None:
        """Get the full note (with timestamps)."""
        return self._notes.get(key)

    def delete(self, key: str) -> bool:
        """Delete a note. Returns True if it existed."""
        return self._notes.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._notes.keys())

    def clear(self) -> None:
        self._notes.clear()
