"""Message fingerprinting.

Messages have no persistent identity in the host other than position, which
shifts on deletion. A fingerprint built from the truncated body and the send
timestamp correlates a logical message across edits, deletes and
regenerations.

Two distinct messages with the same first characters and the same timestamp
share a fingerprint. That collision is accepted.
"""

from __future__ import annotations

import time

from instruction_tracker.models.config import FINGERPRINT_BODY_LENGTH
from instruction_tracker.protocols import Message


def _now_ms() -> int:
    return int(time.time() * 1000)


def fingerprint(message: Message | None, *, length: int = FINGERPRINT_BODY_LENGTH) -> str | None:
    """Return the retention key for *message*, or None if there is no message.

    Format: ``body[:length] + "_" + send_date``. A missing ``send_date``
    falls back to the current time in epoch milliseconds.
    """
    if message is None:
        return None
    body = message.body or ""
    timestamp = message.send_date if message.send_date is not None else _now_ms()
    return f"{body[:length]}_{timestamp}"
