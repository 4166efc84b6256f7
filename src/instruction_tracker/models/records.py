"""Result records produced by the tracker engine.

All records are frozen dataclasses rebuilt on every query; none of them
are stored.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class SweepMode(str, enum.Enum):
    """How a visibility sweep was started."""

    AUTO = "auto"
    FORCE = "force"


@dataclass(frozen=True)
class InstructionRecord:
    """An instruction message with its current visibility and kept state.

    Attributes:
        position: 0-based position in the transcript.
        is_hidden: Whether the message is currently hidden.
        is_kept: Whether the message is exempt from hiding in this chat.
        preview_text: Full message body; display code truncates it.
        fingerprint: Retention key for the message.
    """

    position: int
    is_hidden: bool
    is_kept: bool
    preview_text: str
    fingerprint: str | None = None


@dataclass(frozen=True)
class InstructionCounts:
    """Active (visible) and total instruction counts for the current chat."""

    active: int = 0
    total: int = 0

    @property
    def badge(self) -> str:
        return f"{self.active}/{self.total}"


@dataclass(frozen=True)
class SweepResult:
    """Outcome of a visibility sweep.

    Attributes:
        mode: AUTO for passive sweeps, FORCE for user-requested ones.
        hidden_positions: Positions hidden by this sweep, ascending.
        skipped: True when a passive sweep did not run (auto-hide off).
    """

    mode: SweepMode
    hidden_positions: tuple[int, ...] = field(default_factory=tuple)
    skipped: bool = False

    @property
    def hidden_count(self) -> int:
        return len(self.hidden_positions)

    @property
    def is_informational(self) -> bool:
        """True when nothing was hidden."""
        return self.hidden_count == 0

    @property
    def message(self) -> str:
        """User-facing summary line."""
        if self.hidden_count == 0:
            return "No instructions to hide"
        return f"Hidden {self.hidden_count} instruction message(s)"
