"""Visibility policy: hide instructions that left the recent window.

Both the passive auto-hide and the user-requested forced sweep share one
algorithm. Kept and already hidden instructions are never touched, so a
sweep is idempotent.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from instruction_tracker.models.config import RECENT_WINDOW
from instruction_tracker.models.records import SweepMode, SweepResult

if TYPE_CHECKING:
    from instruction_tracker.engine.index import InstructionIndex
    from instruction_tracker.models.config import TrackerSettings
    from instruction_tracker.protocols import PersistScheduler, TranscriptMutator

logger = logging.getLogger(__name__)


def hide_boundary(transcript_length: int, recent_window: int = RECENT_WINDOW) -> int:
    """First position that is exempt from hiding.

    Positions strictly below the boundary are candidates.
    """
    return max(0, transcript_length - recent_window)


class VisibilityPolicy:
    """Decides which instructions to hide and applies it through the mutator."""

    def __init__(
        self,
        index: InstructionIndex,
        mutator: TranscriptMutator,
        persister: PersistScheduler,
        settings: TrackerSettings,
        *,
        recent_window: int = RECENT_WINDOW,
    ) -> None:
        self._index = index
        self._mutator = mutator
        self._persister = persister
        self._settings = settings
        self._recent_window = recent_window

    @property
    def boundary(self) -> int:
        return hide_boundary(self._index.transcript_length(), self._recent_window)

    def sweep(self, mode: SweepMode) -> SweepResult:
        """Hide every non-kept, visible instruction before the boundary."""
        boundary = self.boundary
        hidden: list[int] = []

        for record in self._index.records():
            if record.is_kept or record.is_hidden:
                continue
            if record.position < boundary:
                self._mutator.set_visible(record.position, False)
                hidden.append(record.position)

        if hidden:
            logger.debug("Sweep (%s) hid positions %s (boundary=%d)", mode.value, hidden, boundary)
            self._persister.schedule_persist()

        return SweepResult(mode=mode, hidden_positions=tuple(hidden))

    def auto_hide(self) -> SweepResult:
        """Passive sweep.  Does nothing unless auto-hide is enabled."""
        if not self._settings.auto_hide:
            return SweepResult(mode=SweepMode.AUTO, skipped=True)
        return self.sweep(SweepMode.AUTO)

    def force_hide(self) -> SweepResult:
        """Unconditional sweep requested by the user."""
        result = self.sweep(SweepMode.FORCE)
        if result.hidden_count:
            logger.info(result.message)
        return result
