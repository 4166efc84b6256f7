"""SQLAlchemy ORM schema for the instruction tracker.

Tables: _tracker_meta (schema version, current chat), settings (persisted
TrackerSettings blobs), messages (the reference host's transcripts).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from instruction_tracker.models.config import TrackerSettings
from instruction_tracker.storage.types import PydanticJSON


class Base(DeclarativeBase):
    """Base class for all tracker ORM models."""

    pass


class TrackerMetaRow(Base):
    """Key/value metadata (schema_version, current_chat_id)."""

    __tablename__ = "_tracker_meta"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)


class SettingsRow(Base):
    """One persisted settings blob per settings key."""

    __tablename__ = "settings"

    name: Mapped[str] = mapped_column(String(128), primary_key=True)
    payload: Mapped[TrackerSettings] = mapped_column(
        PydanticJSON(TrackerSettings), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class MessageRow(Base):
    """A transcript message.

    ``position`` is dense per chat and shifts down when an earlier message
    is deleted, so the surrogate ``id`` is the primary key.
    """

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    chat_id: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    send_date: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_messages_chat_position", "chat_id", "position"),
    )
