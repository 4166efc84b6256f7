"""Reference transcript host backed by SQLite.

Plays the part of the chat application: owns the transcripts, tracks the
current chat, and emits notifications on the dispatcher after each mutation.
The tracker only talks to it through the TranscriptSource and
TranscriptMutator protocols.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from instruction_tracker.events import EventType
from instruction_tracker.exceptions import MessageNotFoundError
from instruction_tracker.models.config import DEFAULT_CHAT_ID
from instruction_tracker.protocols import Message

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from instruction_tracker.events import EventDispatcher
    from instruction_tracker.storage.repositories import MetaRepository, TranscriptRepository
    from instruction_tracker.storage.schema import MessageRow

logger = logging.getLogger(__name__)

CURRENT_CHAT_KEY = "current_chat_id"


def _row_to_message(row: MessageRow) -> Message:
    """Convert a MessageRow to a Message."""
    return Message(
        index=row.position,
        name=row.name,
        body=row.body,
        is_hidden=row.is_hidden,
        send_date=row.send_date,
    )


class SqliteTranscriptHost:
    """TranscriptSource + TranscriptMutator over the SQLite repositories."""

    def __init__(
        self,
        session: Session,
        transcript_repo: TranscriptRepository,
        meta_repo: MetaRepository,
        *,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self._session = session
        self._transcripts = transcript_repo
        self._meta = meta_repo
        self._dispatcher = dispatcher

    def _emit(self, event_type: EventType, **payload: object) -> None:
        if self._dispatcher is not None:
            self._dispatcher.emit(event_type, **payload)

    # ------------------------------------------------------------------
    # TranscriptSource / TranscriptMutator
    # ------------------------------------------------------------------

    def get_current_chat_id(self) -> str | None:
        return self._meta.get(CURRENT_CHAT_KEY)

    @property
    def chat_id(self) -> str:
        return self.get_current_chat_id() or DEFAULT_CHAT_ID

    def get_transcript(self) -> list[Message]:
        return [_row_to_message(row) for row in self._transcripts.list_messages(self.chat_id)]

    def set_visible(self, position: int, visible: bool) -> None:
        if not self._transcripts.set_hidden(self.chat_id, position, not visible):
            logger.debug("set_visible ignored: no message at #%d", position)

    def persist(self) -> None:
        """Commit pending transcript changes."""
        self._session.commit()

    # ------------------------------------------------------------------
    # Host-side mutations
    # ------------------------------------------------------------------

    def add_message(
        self,
        name: str | None,
        body: str,
        *,
        send_date: str | int | None = None,
        sent: bool = False,
    ) -> Message:
        """Append a message and announce it (sent by the user or received)."""
        if send_date is None:
            send_date = int(time.time() * 1000)
        row = self._transcripts.append(self.chat_id, name, body, str(send_date))
        self._session.commit()
        message = _row_to_message(row)
        self._emit(
            EventType.MESSAGE_SENT if sent else EventType.MESSAGE_RECEIVED,
            position=message.index,
        )
        return message

    def edit_message(self, position: int, body: str) -> Message:
        row = self._transcripts.update_body(self.chat_id, position, body)
        if row is None:
            raise MessageNotFoundError(self.chat_id, position)
        self._session.commit()
        self._emit(EventType.MESSAGE_EDITED, position=position)
        return _row_to_message(row)

    def delete_message(self, position: int) -> None:
        if not self._transcripts.delete(self.chat_id, position):
            raise MessageNotFoundError(self.chat_id, position)
        self._session.commit()
        self._emit(EventType.MESSAGE_DELETED, position=position)

    def switch_chat(self, chat_id: str) -> None:
        self._meta.set(CURRENT_CHAT_KEY, chat_id)
        self._session.commit()
        self._emit(EventType.CHAT_CHANGED, chat_id=chat_id)

    def list_chats(self) -> list[str]:
        return self._transcripts.list_chats()
