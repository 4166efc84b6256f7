"""Shared test fixtures for the instruction tracker.

Provides in-memory SQLite engine, session, and repository fixtures, plus
in-memory host doubles for engine-level tests.
"""

import pytest
from sqlalchemy.orm import Session, sessionmaker

from fakes import SCENARIO_ROWS, FakeHost, RecordingPersister
from instruction_tracker import EventDispatcher, InstructionTracker, TrackerSettings
from instruction_tracker.storage.engine import create_tracker_engine, init_db
from instruction_tracker.storage.sqlite import (
    SqliteMetaRepository,
    SqliteSettingsRepository,
    SqliteTranscriptRepository,
)


@pytest.fixture
def engine():
    """In-memory SQLite engine with all tables created."""
    eng = create_tracker_engine(":memory:")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    """Session with automatic rollback after each test."""
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    sess = SessionLocal()
    yield sess
    sess.rollback()
    sess.close()


@pytest.fixture
def settings_repo(session: Session) -> SqliteSettingsRepository:
    return SqliteSettingsRepository(session)


@pytest.fixture
def transcript_repo(session: Session) -> SqliteTranscriptRepository:
    return SqliteTranscriptRepository(session)


@pytest.fixture
def meta_repo(session: Session) -> SqliteMetaRepository:
    return SqliteMetaRepository(session)


@pytest.fixture
def scenario_host() -> FakeHost:
    """Instruction, User, Instruction, Bot in chat1."""
    return FakeHost.from_rows(SCENARIO_ROWS)


@pytest.fixture
def settings() -> TrackerSettings:
    return TrackerSettings()


@pytest.fixture
def make_tracker():
    """Factory for trackers over a FakeHost with recording persisters.

    Returns (tracker, settings_persister, transcript_persister).
    """

    def _make(host: FakeHost, *, settings: TrackerSettings | None = None, dispatcher=None):
        settings_persister = RecordingPersister()
        transcript_persister = RecordingPersister()
        tracker = InstructionTracker.from_components(
            source=host,
            mutator=host,
            settings=settings,
            dispatcher=dispatcher or EventDispatcher(),
            settings_persister=settings_persister,
            transcript_persister=transcript_persister,
        )
        return tracker, settings_persister, transcript_persister

    return _make
