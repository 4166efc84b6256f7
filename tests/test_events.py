"""Tests for the event dispatcher."""

from __future__ import annotations

import pytest

from instruction_tracker import EventDispatcher, EventType, TrackerEvent


class TestEventDispatcher:
    def test_emit_in_registration_order(self):
        dispatcher = EventDispatcher()
        seen = []
        dispatcher.subscribe(EventType.MESSAGE_SENT, lambda e: seen.append(("a", e.event_type)))
        dispatcher.subscribe(EventType.MESSAGE_SENT, lambda e: seen.append(("b", e.event_type)))

        dispatcher.emit(EventType.MESSAGE_SENT)

        assert seen == [("a", EventType.MESSAGE_SENT), ("b", EventType.MESSAGE_SENT)]

    def test_only_matching_type(self):
        dispatcher = EventDispatcher()
        seen = []
        dispatcher.subscribe(EventType.MESSAGE_DELETED, seen.append)
        dispatcher.emit(EventType.MESSAGE_SENT)
        assert seen == []

    def test_payload_and_return(self):
        dispatcher = EventDispatcher()
        seen: list[TrackerEvent] = []
        dispatcher.subscribe(EventType.CHAT_CHANGED, seen.append)

        event = dispatcher.emit(EventType.CHAT_CHANGED, chat_id="c2")

        assert seen == [event]
        assert event.payload == {"chat_id": "c2"}
        assert event.timestamp.tzinfo is not None

    def test_unsubscribe(self):
        dispatcher = EventDispatcher()
        seen = []
        dispatcher.subscribe(EventType.CHAT_UPDATED, seen.append)
        dispatcher.unsubscribe(EventType.CHAT_UPDATED, seen.append)
        dispatcher.unsubscribe(EventType.CHAT_UPDATED, seen.append)
        dispatcher.emit(EventType.CHAT_UPDATED)
        assert seen == []
        assert dispatcher.handlers(EventType.CHAT_UPDATED) == []

    def test_handler_error_propagates(self):
        dispatcher = EventDispatcher()
        after = []

        def boom(event):
            raise RuntimeError("handler failed")

        dispatcher.subscribe(EventType.MESSAGE_EDITED, boom)
        dispatcher.subscribe(EventType.MESSAGE_EDITED, after.append)

        with pytest.raises(RuntimeError, match="handler failed"):
            dispatcher.emit(EventType.MESSAGE_EDITED)
        assert after == []

    def test_emit_without_handlers(self):
        event = EventDispatcher().emit(EventType.PANEL_REFRESH)
        assert event.event_type is EventType.PANEL_REFRESH
