"""SQLite engine, sessions and schema bootstrap for the tracker database.

One file holds three tables: ``settings`` (the persisted auto-hide flag and
kept markers, one JSON row per settings key), ``messages`` (transcripts of
the reference host, all chats) and ``_tracker_meta`` (string key/value pairs:
``schema_version`` and the host's ``current_chat_id``).
"""

from __future__ import annotations

from sqlalchemy import Engine, create_engine, event, select
from sqlalchemy.orm import Session, sessionmaker

from instruction_tracker.storage.schema import Base, TrackerMetaRow

SCHEMA_VERSION = "1"
SCHEMA_VERSION_KEY = "schema_version"


def create_tracker_engine(db_path: str = ":memory:") -> Engine:
    """Create an engine for the tracker database at *db_path*.

    WAL journaling and a busy timeout let the CLI and an embedding host open
    the same file one after another without lock errors.
    """
    url = "sqlite://" if db_path == ":memory:" else f"sqlite:///{db_path}"
    engine = create_engine(url, echo=False)

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):  # type: ignore[no-untyped-def]
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to the given engine.

    Uses expire_on_commit=False so rows stay readable after commit.
    """
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create the ``settings``, ``messages`` and ``_tracker_meta`` tables.

    Stamps ``_tracker_meta.schema_version`` on a fresh database.  Existing
    rows, including ``current_chat_id``, are left alone.
    """
    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    with SessionLocal() as session:
        existing = session.execute(
            select(TrackerMetaRow).where(TrackerMetaRow.key == SCHEMA_VERSION_KEY)
        ).scalar_one_or_none()

        if existing is None:
            session.add(TrackerMetaRow(key=SCHEMA_VERSION_KEY, value=SCHEMA_VERSION))
            session.commit()
