"""SQLite implementations of repository interfaces.

All repositories use SQLAlchemy 2.0-style queries (select() + session.execute()).
Each repository takes a Session in its constructor and only flushes;
committing is left to the owner of the session.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from instruction_tracker.exceptions import SettingsError
from instruction_tracker.models.config import TrackerSettings
from instruction_tracker.storage.repositories import (
    MetaRepository,
    SettingsRepository,
    TranscriptRepository,
)
from instruction_tracker.storage.schema import MessageRow, SettingsRow, TrackerMetaRow


def _utcnow() -> datetime:
    """Naive UTC now (SQLite stores naive datetimes)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SqliteSettingsRepository(SettingsRepository):
    """SQLite implementation of the settings repository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _row(self, name: str) -> SettingsRow | None:
        stmt = select(SettingsRow).where(SettingsRow.name == name)
        return self._session.execute(stmt).scalar_one_or_none()

    def get(self, name: str) -> TrackerSettings | None:
        try:
            row = self._row(name)
        except ValidationError as e:
            raise SettingsError(f"Stored settings '{name}' are invalid: {e}") from e
        if row is None:
            return None
        # Callers mutate their copy; the row keeps its loaded value for change tracking.
        return row.payload.model_copy(deep=True)

    def save(self, name: str, settings: TrackerSettings) -> None:
        # Copy so the ORM sees a new value; the caller keeps mutating its instance.
        payload = settings.model_copy(deep=True)
        row = self._row(name)
        if row is None:
            self._session.add(SettingsRow(name=name, payload=payload, updated_at=_utcnow()))
        else:
            row.payload = payload
            row.updated_at = _utcnow()
        self._session.flush()


class SqliteTranscriptRepository(TranscriptRepository):
    """SQLite implementation of the transcript repository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_messages(self, chat_id: str) -> Sequence[MessageRow]:
        stmt = (
            select(MessageRow)
            .where(MessageRow.chat_id == chat_id)
            .order_by(MessageRow.position)
        )
        return list(self._session.execute(stmt).scalars().all())

    def get(self, chat_id: str, position: int) -> MessageRow | None:
        stmt = select(MessageRow).where(
            MessageRow.chat_id == chat_id, MessageRow.position == position
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def append(
        self, chat_id: str, name: str | None, body: str, send_date: str | None
    ) -> MessageRow:
        count_stmt = select(func.count()).select_from(MessageRow).where(
            MessageRow.chat_id == chat_id
        )
        position = self._session.execute(count_stmt).scalar_one()
        row = MessageRow(
            chat_id=chat_id,
            position=position,
            name=name,
            body=body,
            is_hidden=False,
            send_date=send_date,
            created_at=_utcnow(),
        )
        self._session.add(row)
        self._session.flush()
        return row

    def update_body(self, chat_id: str, position: int, body: str) -> MessageRow | None:
        row = self.get(chat_id, position)
        if row is None:
            return None
        row.body = body
        self._session.flush()
        return row

    def set_hidden(self, chat_id: str, position: int, hidden: bool) -> bool:
        row = self.get(chat_id, position)
        if row is None:
            return False
        row.is_hidden = hidden
        self._session.flush()
        return True

    def delete(self, chat_id: str, position: int) -> bool:
        row = self.get(chat_id, position)
        if row is None:
            return False
        self._session.delete(row)
        stmt = select(MessageRow).where(
            MessageRow.chat_id == chat_id, MessageRow.position > position
        )
        for later in self._session.execute(stmt).scalars().all():
            later.position -= 1
        self._session.flush()
        return True

    def list_chats(self) -> list[str]:
        stmt = select(MessageRow.chat_id).distinct().order_by(MessageRow.chat_id)
        return list(self._session.execute(stmt).scalars().all())


class SqliteMetaRepository(MetaRepository):
    """SQLite implementation of the metadata repository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, key: str) -> str | None:
        stmt = select(TrackerMetaRow).where(TrackerMetaRow.key == key)
        row = self._session.execute(stmt).scalar_one_or_none()
        return row.value if row else None

    def set(self, key: str, value: str) -> None:
        stmt = select(TrackerMetaRow).where(TrackerMetaRow.key == key)
        row = self._session.execute(stmt).scalar_one_or_none()
        if row is None:
            self._session.add(TrackerMetaRow(key=key, value=value))
        else:
            row.value = value
        self._session.flush()
