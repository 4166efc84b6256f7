"""Instruction index: classify transcript messages as instructions.

The index is rebuilt from the host transcript on every iteration. Nothing is
cached between calls because the transcript mutates outside the tracker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, Iterator

from instruction_tracker.models.config import DEFAULT_CHAT_ID
from instruction_tracker.models.records import InstructionCounts, InstructionRecord

if TYPE_CHECKING:
    from instruction_tracker.engine.retention import RetentionStore
    from instruction_tracker.protocols import Message, TranscriptSource

INSTRUCTION_LABEL = "instruction"


def is_instruction(message: Message | None) -> bool:
    """Whether *message* was authored under the ``instruction`` label (any case)."""
    if message is None:
        return False
    return (message.name or "").lower() == INSTRUCTION_LABEL


def resolve_chat_id(source: TranscriptSource, default: str = DEFAULT_CHAT_ID) -> str:
    """The host's active chat id, or *default* when no chat is open."""
    return source.get_current_chat_id() or default


def find_instructions(
    messages: Iterable[Message],
    is_kept: Callable[[Message], bool],
    fingerprint: Callable[[Message], str | None] | None = None,
) -> Iterator[InstructionRecord]:
    """Yield an InstructionRecord per instruction message, in transcript order."""
    for position, message in enumerate(messages):
        if not is_instruction(message):
            continue
        yield InstructionRecord(
            position=position,
            is_hidden=message.is_hidden is True,
            is_kept=is_kept(message),
            preview_text=message.body or "",
            fingerprint=fingerprint(message) if fingerprint is not None else None,
        )


class InstructionIndex:
    """Restartable view over the instructions of the current chat.

    Iterating yields fresh records each time.
    """

    def __init__(
        self,
        source: TranscriptSource,
        retention: RetentionStore,
        *,
        default_chat_id: str = DEFAULT_CHAT_ID,
    ) -> None:
        self._source = source
        self._retention = retention
        self._default_chat_id = default_chat_id

    @property
    def chat_id(self) -> str:
        return resolve_chat_id(self._source, self._default_chat_id)

    def transcript_length(self) -> int:
        return len(self._source.get_transcript())

    def message_at(self, position: int) -> Message | None:
        """The host message at *position*, or None if out of range."""
        messages = self._source.get_transcript()
        if position < 0 or position >= len(messages):
            return None
        return messages[position]

    def __iter__(self) -> Iterator[InstructionRecord]:
        chat_id = self.chat_id
        return find_instructions(
            self._source.get_transcript(),
            lambda message: self._retention.is_kept(chat_id, message),
            self._retention.fingerprint,
        )

    def records(self) -> list[InstructionRecord]:
        return list(self)

    def get(self, position: int) -> InstructionRecord | None:
        """The record at *position*, or None if that message is not an instruction."""
        for record in self:
            if record.position == position:
                return record
        return None

    def counts(self) -> InstructionCounts:
        """Visible and total instruction counts."""
        records = self.records()
        active = sum(1 for record in records if not record.is_hidden)
        return InstructionCounts(active=active, total=len(records))
