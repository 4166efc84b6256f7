"""Instruction tracker: keep instruction messages out of the way.

Finds messages sent under the "instruction" label in a chat transcript,
remembers which ones the user pinned, and hides the rest once they fall out
of the most recent turns.
"""

from instruction_tracker._version import __version__

# Core entry point
from instruction_tracker.tracker import InstructionTracker

# Engine
from instruction_tracker.engine.fingerprint import fingerprint
from instruction_tracker.engine.index import InstructionIndex, find_instructions, is_instruction
from instruction_tracker.engine.persistence import CoalescingPersister
from instruction_tracker.engine.reaper import OrphanReaper
from instruction_tracker.engine.retention import RetentionStore
from instruction_tracker.engine.visibility import VisibilityPolicy, hide_boundary

# Events
from instruction_tracker.events import EventDispatcher, EventType, TrackerEvent

# Configuration and records
from instruction_tracker.models.config import (
    DEFAULT_CHAT_ID,
    FINGERPRINT_BODY_LENGTH,
    RECENT_WINDOW,
    TrackerConfig,
    TrackerSettings,
)
from instruction_tracker.models.records import (
    InstructionCounts,
    InstructionRecord,
    SweepMode,
    SweepResult,
)

# Protocols
from instruction_tracker.protocols import (
    Message,
    PersistScheduler,
    TranscriptMutator,
    TranscriptSource,
)

# Exceptions
from instruction_tracker.exceptions import (
    InstructionTrackerError,
    MessageNotFoundError,
    SettingsError,
    TrackerClosedError,
)

__all__ = [
    "__version__",
    "InstructionTracker",
    # Engine
    "fingerprint",
    "is_instruction",
    "find_instructions",
    "InstructionIndex",
    "RetentionStore",
    "VisibilityPolicy",
    "hide_boundary",
    "OrphanReaper",
    "CoalescingPersister",
    # Events
    "EventDispatcher",
    "EventType",
    "TrackerEvent",
    # Config
    "TrackerConfig",
    "TrackerSettings",
    "RECENT_WINDOW",
    "FINGERPRINT_BODY_LENGTH",
    "DEFAULT_CHAT_ID",
    # Records
    "InstructionRecord",
    "InstructionCounts",
    "SweepMode",
    "SweepResult",
    # Protocols
    "Message",
    "TranscriptSource",
    "TranscriptMutator",
    "PersistScheduler",
    # Exceptions
    "InstructionTrackerError",
    "SettingsError",
    "MessageNotFoundError",
    "TrackerClosedError",
]
