"""InstructionTracker -- the public entry point.

Ties together the retention store, instruction index, visibility policy and
orphan reaper, and wires them to host notifications.  Users interact with
``InstructionTracker.open()``, ``tracker.toggle_keep()``,
``tracker.force_hide()``, etc.

Not thread-safe.  Every entry point is expected to run on the host's single
event-handling thread.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from instruction_tracker.engine.index import InstructionIndex, is_instruction
from instruction_tracker.engine.persistence import CoalescingPersister
from instruction_tracker.engine.reaper import OrphanReaper
from instruction_tracker.engine.retention import RetentionStore
from instruction_tracker.engine.visibility import VisibilityPolicy
from instruction_tracker.events import EventDispatcher, EventType, TrackerEvent
from instruction_tracker.exceptions import TrackerClosedError
from instruction_tracker.models.config import TrackerConfig, TrackerSettings
from instruction_tracker.storage.engine import create_session_factory, create_tracker_engine, init_db
from instruction_tracker.storage.host import SqliteTranscriptHost
from instruction_tracker.storage.sqlite import (
    SqliteMetaRepository,
    SqliteSettingsRepository,
    SqliteTranscriptRepository,
)

if TYPE_CHECKING:
    from sqlalchemy import Engine
    from sqlalchemy.orm import Session

    from instruction_tracker.models.records import (
        InstructionCounts,
        InstructionRecord,
        SweepResult,
    )
    from instruction_tracker.protocols import PersistScheduler, TranscriptMutator, TranscriptSource

logger = logging.getLogger(__name__)


class _NullPersister:
    """PersistScheduler that drops every request."""

    def schedule_persist(self) -> None:
        pass


class InstructionTracker:
    """Tracks instruction messages and manages their visibility.

    Create a tracker via :meth:`InstructionTracker.open` (SQLite-backed
    reference host) or :meth:`InstructionTracker.from_components` (any host,
    testing / DI).

    Example::

        with InstructionTracker.open("chat.db") as tracker:
            tracker.set_auto_hide(True)
            tracker.host.add_message("Instruction", "Answer in French.")
            tracker.host.add_message("User", "Hello")
            tracker.host.add_message("Bot", "Bonjour")
            print(tracker.counts().badge)
    """

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def __init__(
        self,
        *,
        source: TranscriptSource,
        mutator: TranscriptMutator,
        settings: TrackerSettings,
        config: TrackerConfig,
        dispatcher: EventDispatcher,
        settings_persister: PersistScheduler,
        transcript_persister: PersistScheduler,
        engine: Engine | None = None,
        session: Session | None = None,
    ) -> None:
        self._source = source
        self._mutator = mutator
        self._settings = settings
        self._config = config
        self._dispatcher = dispatcher
        self._settings_persister = settings_persister
        self._transcript_persister = transcript_persister
        self._engine = engine
        self._session = session

        self._retention = RetentionStore(
            settings,
            settings_persister,
            fingerprint_length=config.fingerprint_length,
        )
        self._index = InstructionIndex(
            source,
            self._retention,
            default_chat_id=config.default_chat_id,
        )
        self._policy = VisibilityPolicy(
            self._index,
            mutator,
            transcript_persister,
            settings,
            recent_window=config.recent_window,
        )
        self._reaper = OrphanReaper(self._index, self._retention)

        self._subscriptions: list[tuple[EventType, object]] = []
        self._closed = False

    @classmethod
    def open(
        cls,
        path: str | None = None,
        *,
        config: TrackerConfig | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> InstructionTracker:
        """Open (or create) a SQLite-backed tracker with its reference host.

        Args:
            path: SQLite path.  Falls back to ``config.db_path``, which
                defaults to ``":memory:"``.
            config: Tracker configuration.  Defaults created if *None*.
            dispatcher: Event dispatcher shared with the host.  A new one
                is created if *None*.

        Returns:
            A ready-to-use, attached ``InstructionTracker``.

        Raises:
            ValueError: If *path* and ``config.db_path`` name different
                databases.
        """
        if config is None:
            config = TrackerConfig() if path is None else TrackerConfig(db_path=path)
        elif path is not None and path != config.db_path:
            raise ValueError(
                f"Conflicting database paths: path={path!r}, config.db_path={config.db_path!r}"
            )
        if dispatcher is None:
            dispatcher = EventDispatcher()

        engine = create_tracker_engine(config.db_path)
        init_db(engine)
        session = create_session_factory(engine)()

        settings_repo = SqliteSettingsRepository(session)
        host = SqliteTranscriptHost(
            session,
            SqliteTranscriptRepository(session),
            SqliteMetaRepository(session),
            dispatcher=dispatcher,
        )

        settings = settings_repo.get(config.settings_key) or TrackerSettings()

        def write_settings() -> None:
            settings_repo.save(config.settings_key, settings)
            session.commit()

        tracker = cls(
            source=host,
            mutator=host,
            settings=settings,
            config=config,
            dispatcher=dispatcher,
            settings_persister=CoalescingPersister(
                write_settings, name="settings", immediate=config.immediate_persist
            ),
            transcript_persister=CoalescingPersister(
                host.persist, name="transcript", immediate=config.immediate_persist
            ),
            engine=engine,
            session=session,
        )
        tracker.attach()
        return tracker

    @classmethod
    def from_components(
        cls,
        *,
        source: TranscriptSource,
        mutator: TranscriptMutator,
        settings: TrackerSettings | None = None,
        config: TrackerConfig | None = None,
        dispatcher: EventDispatcher | None = None,
        settings_persister: PersistScheduler | None = None,
        transcript_persister: PersistScheduler | None = None,
        attach: bool = True,
    ) -> InstructionTracker:
        """Create a tracker over an arbitrary host.

        Skips engine/session creation.  Missing persisters drop their
        requests.  Useful for embedding and testing.
        """
        tracker = cls(
            source=source,
            mutator=mutator,
            settings=settings if settings is not None else TrackerSettings(),
            config=config or TrackerConfig(),
            dispatcher=dispatcher or EventDispatcher(),
            settings_persister=(
                settings_persister if settings_persister is not None else _NullPersister()
            ),
            transcript_persister=(
                transcript_persister if transcript_persister is not None else _NullPersister()
            ),
        )
        if attach:
            tracker.attach()
        return tracker

    # ------------------------------------------------------------------
    # Public properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> TrackerConfig:
        return self._config

    @property
    def settings(self) -> TrackerSettings:
        """The live persisted state (auto-hide flag and kept markers)."""
        return self._settings

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    @property
    def host(self) -> TranscriptSource:
        """The transcript source this tracker reads from."""
        return self._source

    @property
    def index(self) -> InstructionIndex:
        return self._index

    @property
    def retention(self) -> RetentionStore:
        return self._retention

    @property
    def chat_id(self) -> str:
        """Current chat id, or the configured sentinel when no chat is open."""
        return self._index.chat_id

    @property
    def auto_hide(self) -> bool:
        return self._settings.auto_hide

    @property
    def is_attached(self) -> bool:
        return bool(self._subscriptions)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def instructions(self) -> list[InstructionRecord]:
        """Instruction records of the current chat in transcript order."""
        self._check_open()
        return self._index.records()

    def get_instruction(self, position: int) -> InstructionRecord | None:
        self._check_open()
        return self._index.get(position)

    def counts(self) -> InstructionCounts:
        self._check_open()
        return self._index.counts()

    def is_kept(self, position: int) -> bool:
        self._check_open()
        return self._retention.is_kept(self.chat_id, self._index.message_at(position))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def set_auto_hide(self, enabled: bool) -> None:
        """Enable or disable passive hiding after new messages."""
        self._check_open()
        self._settings.auto_hide = bool(enabled)
        self._settings_persister.schedule_persist()
        logger.info("Auto-hide %s", "enabled" if enabled else "disabled")

    def toggle_keep(self, position: int) -> bool | None:
        """Toggle the kept marker of the instruction at *position*.

        An instruction that becomes kept while hidden is revealed.  Other
        messages cannot be kept.

        Returns:
            The new kept state, or None if *position* holds no instruction.
        """
        self._check_open()
        message = self._index.message_at(position)
        if not is_instruction(message):
            return None

        kept = self._retention.toggle_kept(self.chat_id, message)
        if kept and message.is_hidden:
            self._mutator.set_visible(position, True)
            self._transcript_persister.schedule_persist()

        self.refresh()
        return kept

    def auto_hide_sweep(self) -> SweepResult:
        """Passive sweep; skipped unless auto-hide is enabled."""
        self._check_open()
        return self._policy.auto_hide()

    def force_hide(self) -> SweepResult:
        """Hide every non-kept instruction outside the recent window."""
        self._check_open()
        result = self._policy.force_hide()
        self.refresh()
        return result

    def cleanup_orphans(self) -> int:
        """Drop kept markers of the current chat with no live instruction."""
        self._check_open()
        return self._reaper.run()

    def refresh(self) -> InstructionCounts:
        """Announce current counts so presentation code can redraw."""
        counts = self._index.counts()
        self._dispatcher.emit(EventType.PANEL_REFRESH, counts=counts, chat_id=self.chat_id)
        return counts

    def flush(self) -> None:
        """Write any coalesced persistence requests now."""
        for persister in (self._settings_persister, self._transcript_persister):
            if isinstance(persister, CoalescingPersister):
                persister.flush()

    # ------------------------------------------------------------------
    # Event wiring
    # ------------------------------------------------------------------

    def attach(self) -> None:
        """Subscribe to host notifications.  Idempotent."""
        if self._subscriptions:
            return
        table = {
            EventType.CHAT_CHANGED: self._on_chat_changed,
            EventType.MESSAGE_RECEIVED: self._on_message_added,
            EventType.MESSAGE_SENT: self._on_message_added,
            EventType.MESSAGE_DELETED: self._on_message_deleted,
            EventType.MESSAGE_EDITED: self._on_transcript_changed,
            EventType.MESSAGE_UPDATED: self._on_transcript_changed,
            EventType.CHAT_UPDATED: self._on_transcript_changed,
        }
        for event_type, handler in table.items():
            self._dispatcher.subscribe(event_type, handler)
            self._subscriptions.append((event_type, handler))

    def detach(self) -> None:
        """Unsubscribe from host notifications."""
        for event_type, handler in self._subscriptions:
            self._dispatcher.unsubscribe(event_type, handler)  # type: ignore[arg-type]
        self._subscriptions.clear()

    def _on_chat_changed(self, event: TrackerEvent) -> None:
        self._reaper.run()
        self.refresh()

    def _on_message_added(self, event: TrackerEvent) -> None:
        self._policy.auto_hide()
        self.refresh()

    def _on_message_deleted(self, event: TrackerEvent) -> None:
        self._reaper.run()
        self.refresh()

    def _on_transcript_changed(self, event: TrackerEvent) -> None:
        self.refresh()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise TrackerClosedError()

    def close(self) -> None:
        """Flush pending writes, detach, and release storage."""
        if self._closed:
            return
        self._closed = True
        try:
            self.flush()
        finally:
            self.detach()
            if self._session is not None:
                self._session.close()
            if self._engine is not None:
                self._engine.dispose()

    def __enter__(self) -> InstructionTracker:
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object) -> None:
        self.close()

    def __repr__(self) -> str:
        if self._closed:
            return "InstructionTracker(closed)"
        return f"InstructionTracker(chat_id='{self.chat_id}', auto_hide={self.auto_hide})"
