"""Host notifications and the dispatcher that delivers them.

The dispatcher is passed into the tracker as a constructor dependency; there
is no module-level bus. Handlers run synchronously, in registration order,
on the caller's stack.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventType(str, enum.Enum):
    """Notifications exchanged between the host and the tracker."""

    CHAT_CHANGED = "chat_changed"
    MESSAGE_RECEIVED = "message_received"
    MESSAGE_SENT = "message_sent"
    MESSAGE_DELETED = "message_deleted"
    MESSAGE_EDITED = "message_edited"
    MESSAGE_UPDATED = "message_updated"
    CHAT_UPDATED = "chat_updated"
    # Outbound: the instruction list or counts changed and should be redrawn.
    PANEL_REFRESH = "panel_refresh"


@dataclass(frozen=True)
class TrackerEvent:
    """A single delivered notification.

    Attributes:
        event_type: What happened.
        payload: Free-form keyword data supplied by the emitter.
        timestamp: When the event was emitted (UTC).
    """

    event_type: EventType
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


EventHandler = Callable[[TrackerEvent], None]


class EventDispatcher:
    """Synchronous subscribe/emit registry.

    Exceptions raised by a handler propagate to the emitter; remaining
    handlers for that event are not called.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[EventHandler]] = {}

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Remove *handler*.  Unknown handlers are ignored."""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def handlers(self, event_type: EventType) -> list[EventHandler]:
        return list(self._handlers.get(event_type, ()))

    def emit(self, event_type: EventType, **payload: Any) -> TrackerEvent:
        """Deliver an event to every subscribed handler."""
        event = TrackerEvent(event_type=event_type, payload=payload)
        handlers = self.handlers(event_type)
        logger.debug("Emit %s -> %d handler(s)", event_type.value, len(handlers))
        for handler in handlers:
            handler(event)
        return event
