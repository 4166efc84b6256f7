"""Orphan reaper: drop kept markers whose message is gone.

Deleting or regenerating a message invalidates its fingerprint, leaving a
dead entry in the retention store until this pass removes it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from instruction_tracker.engine.index import InstructionIndex
    from instruction_tracker.engine.retention import RetentionStore

logger = logging.getLogger(__name__)


class OrphanReaper:
    """Purges retention entries of the current chat with no live instruction."""

    def __init__(self, index: InstructionIndex, retention: RetentionStore) -> None:
        self._index = index
        self._retention = retention

    def run(self) -> int:
        """Recompute live fingerprints and purge the rest.

        Returns:
            Number of orphaned entries removed.
        """
        chat_id = self._index.chat_id
        valid = {record.fingerprint for record in self._index if record.fingerprint is not None}
        removed = self._retention.purge_orphans(chat_id, valid)
        if removed > 0:
            logger.info("Cleaned up %d orphaned kept instruction(s) in chat %s", removed, chat_id)
        return removed
