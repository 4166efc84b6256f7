"""Retention store: per-chat "kept" markers keyed by fingerprint.

The store mutates the ``kept_instructions`` mapping of a TrackerSettings
instance in place and asks its PersistScheduler to save after every change.
A fingerprint's presence means "kept"; there is no stored False.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Collection

from instruction_tracker.engine.fingerprint import fingerprint
from instruction_tracker.models.config import FINGERPRINT_BODY_LENGTH

if TYPE_CHECKING:
    from instruction_tracker.models.config import TrackerSettings
    from instruction_tracker.protocols import Message, PersistScheduler

logger = logging.getLogger(__name__)


class RetentionStore:
    """Per-chat mapping of fingerprint -> kept.

    All calls come from a single event-handling context; no locking.
    """

    def __init__(
        self,
        settings: TrackerSettings,
        persister: PersistScheduler,
        *,
        fingerprint_length: int = FINGERPRINT_BODY_LENGTH,
    ) -> None:
        self._settings = settings
        self._persister = persister
        self._fingerprint_length = fingerprint_length

    def fingerprint(self, message: Message | None) -> str | None:
        return fingerprint(message, length=self._fingerprint_length)

    def is_kept(self, chat_id: str, message: Message | None) -> bool:
        """Whether *message* is kept in *chat_id*.  False for a missing message."""
        key = self.fingerprint(message)
        if key is None:
            return False
        return self._settings.kept_instructions.get(chat_id, {}).get(key) is True

    def toggle_kept(self, chat_id: str, message: Message | None) -> bool | None:
        """Flip the kept marker for *message*.

        Returns:
            The new kept state, or None if there was no message to toggle.
        """
        key = self.fingerprint(message)
        if key is None:
            return None

        kept = self._settings.kept_instructions.setdefault(chat_id, {})
        if key in kept:
            del kept[key]
            now_kept = False
        else:
            kept[key] = True
            now_kept = True

        logger.debug("Toggled kept=%s for %r in chat %s", now_kept, key, chat_id)
        self._persister.schedule_persist()
        return now_kept

    def purge_orphans(self, chat_id: str, valid_fingerprints: Collection[str]) -> int:
        """Drop every kept entry of *chat_id* not in *valid_fingerprints*.

        Returns:
            Number of entries removed.  Persistence is requested only when
            something was removed.
        """
        kept = self._settings.kept_instructions.get(chat_id)
        if not kept:
            return 0

        valid = set(valid_fingerprints)
        orphans = [key for key in kept if key not in valid]
        for key in orphans:
            del kept[key]

        if orphans:
            self._persister.schedule_persist()
        return len(orphans)

    def kept_fingerprints(self, chat_id: str) -> frozenset[str]:
        """Snapshot of the kept fingerprints for *chat_id*."""
        return frozenset(self._settings.kept_instructions.get(chat_id, {}))
