"""Abstract repository interfaces for tracker storage.

Defines ABC interfaces for all database operations. No SQLAlchemy
imports here -- pure abstract contracts.

Concrete implementations are in sqlite.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from instruction_tracker.models.config import TrackerSettings
    from instruction_tracker.storage.schema import MessageRow


class SettingsRepository(ABC):
    """Abstract interface for persisted settings blobs."""

    @abstractmethod
    def get(self, name: str) -> TrackerSettings | None:
        """Get the settings stored under *name*. Returns None if absent."""
        ...

    @abstractmethod
    def save(self, name: str, settings: TrackerSettings) -> None:
        """Insert or replace the settings stored under *name*."""
        ...


class TranscriptRepository(ABC):
    """Abstract interface for transcript message storage."""

    @abstractmethod
    def list_messages(self, chat_id: str) -> Sequence[MessageRow]:
        """All messages of a chat in position order."""
        ...

    @abstractmethod
    def get(self, chat_id: str, position: int) -> MessageRow | None:
        """Get the message at *position*. Returns None if not found."""
        ...

    @abstractmethod
    def append(
        self, chat_id: str, name: str | None, body: str, send_date: str | None
    ) -> MessageRow:
        """Append a message at the end of the chat."""
        ...

    @abstractmethod
    def update_body(self, chat_id: str, position: int, body: str) -> MessageRow | None:
        """Replace the body of a message. Returns None if not found."""
        ...

    @abstractmethod
    def set_hidden(self, chat_id: str, position: int, hidden: bool) -> bool:
        """Set the hidden flag. Returns False if no message was found."""
        ...

    @abstractmethod
    def delete(self, chat_id: str, position: int) -> bool:
        """Delete a message and close the gap in positions.

        Returns False if no message was found.
        """
        ...

    @abstractmethod
    def list_chats(self) -> list[str]:
        """Distinct chat ids that have at least one message."""
        ...


class MetaRepository(ABC):
    """Abstract interface for key/value metadata."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...
