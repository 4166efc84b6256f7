"""Tracker storage layer.

Provides SQLAlchemy ORM schema, engine/session factory, repository
implementations for SQLite, and the SQLite-backed reference host.
"""

from instruction_tracker.storage.engine import create_session_factory, create_tracker_engine, init_db
from instruction_tracker.storage.host import SqliteTranscriptHost
from instruction_tracker.storage.sqlite import (
    SqliteMetaRepository,
    SqliteSettingsRepository,
    SqliteTranscriptRepository,
)

__all__ = [
    "create_tracker_engine",
    "create_session_factory",
    "init_db",
    "SqliteTranscriptHost",
    "SqliteSettingsRepository",
    "SqliteTranscriptRepository",
    "SqliteMetaRepository",
]
