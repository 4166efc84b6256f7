"""Instruction tracker exception hierarchy.

All tracker-specific exceptions inherit from InstructionTrackerError.
The core engine never raises these for missing messages; they are used by
the storage layer, the reference host, and the CLI.
"""


class InstructionTrackerError(Exception):
    """Base exception for all instruction tracker errors."""


class SettingsError(InstructionTrackerError):
    """Raised when persisted settings cannot be validated."""


class MessageNotFoundError(InstructionTrackerError):
    """Raised when the reference host is asked for a missing message."""

    def __init__(self, chat_id: str, position: int) -> None:
        self.chat_id = chat_id
        self.position = position
        super().__init__(f"Message not found: #{position} in chat '{chat_id}'")


class TrackerClosedError(InstructionTrackerError):
    """Raised when an operation is attempted on a closed tracker."""

    def __init__(self) -> None:
        super().__init__("Tracker is closed")
