"""Coalescing persistence requests.

The core updates in-memory state first and then asks for it to be saved.
Repeated requests between two flushes collapse into a single write.
"""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)


class CoalescingPersister:
    """PersistScheduler that defers and coalesces writes.

    ``schedule_persist()`` only marks state dirty; ``flush()`` performs one
    write if anything is pending. In ``immediate`` mode every request writes
    at once (useful for tests and short-lived CLI processes).

    If the writer raises, the exception propagates and the request stays
    pending so that a later flush can retry.
    """

    def __init__(
        self,
        write: Callable[[], None],
        *,
        name: str = "state",
        immediate: bool = False,
    ) -> None:
        self._write = write
        self._name = name
        self._immediate = immediate
        self._pending = False
        self.requests = 0
        self.writes = 0

    @property
    def pending(self) -> bool:
        """Whether a write has been requested but not yet performed."""
        return self._pending

    def schedule_persist(self) -> None:
        self.requests += 1
        self._pending = True
        if self._immediate:
            self.flush()
        else:
            logger.debug("Persist requested: %s (requests=%d)", self._name, self.requests)

    def flush(self) -> bool:
        """Write pending state.  Returns True if a write happened."""
        if not self._pending:
            return False
        self._write()
        self._pending = False
        self.writes += 1
        logger.debug("Persisted %s (writes=%d)", self._name, self.writes)
        return True

    def __repr__(self) -> str:
        return (
            f"CoalescingPersister(name='{self._name}', pending={self._pending}, "
            f"requests={self.requests}, writes={self.writes})"
        )
