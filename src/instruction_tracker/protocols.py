"""Protocol definitions for the instruction tracker.

Defines the host-facing interfaces the core reads from and writes to
(TranscriptSource, TranscriptMutator, PersistScheduler) and the frozen
Message dataclass the host hands over.

No SQLAlchemy imports allowed in this module -- pure domain protocols.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, Union, runtime_checkable

Timestamp = Union[str, int, float]


@dataclass(frozen=True)
class Message:
    """A single transcript entry as seen by the core.

    The host owns messages. The core reads ``name``, ``body`` and
    ``send_date`` and only changes visibility through a TranscriptMutator.
    """

    index: int
    name: str | None = None
    body: str | None = None
    is_hidden: bool = False
    send_date: Timestamp | None = None


@runtime_checkable
class TranscriptSource(Protocol):
    """Read access to the host's current transcript."""

    def get_transcript(self) -> Sequence[Message]:
        """Return the current chat's messages in position order."""
        ...

    def get_current_chat_id(self) -> str | None:
        """Return the active chat id, or None when no chat is open."""
        ...


@runtime_checkable
class TranscriptMutator(Protocol):
    """Write access to message visibility flags."""

    def set_visible(self, position: int, visible: bool) -> None:
        """Show or hide the message at ``position``.

        Must be a no-op when no message exists at that position.
        """
        ...


@runtime_checkable
class PersistScheduler(Protocol):
    """A "save soon" request sink.

    Implementations may write immediately or coalesce repeated requests
    into a single deferred write.
    """

    def schedule_persist(self) -> None:
        """Request that pending in-memory state be written out."""
        ...
