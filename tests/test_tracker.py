"""Tests for the InstructionTracker facade and its event wiring."""

from __future__ import annotations

import pytest

from fakes import SCENARIO_ROWS, FakeHost
from instruction_tracker import (
    EventDispatcher,
    EventType,
    InstructionCounts,
    InstructionTracker,
    TrackerClosedError,
    TrackerSettings,
)


def _refreshes(dispatcher: EventDispatcher) -> list:
    events = []
    dispatcher.subscribe(EventType.PANEL_REFRESH, events.append)
    return events


# ---------------------------------------------------------------------------
# Direct operations
# ---------------------------------------------------------------------------


class TestOperations:
    def test_instructions_and_counts(self, make_tracker, scenario_host):
        tracker, _, _ = make_tracker(scenario_host)
        assert [r.position for r in tracker.instructions()] == [0, 2]
        assert tracker.counts() == InstructionCounts(active=2, total=2)
        assert tracker.get_instruction(2).preview_text == "Do Y"
        assert tracker.chat_id == "chat1"

    def test_toggle_keep(self, make_tracker, scenario_host):
        tracker, settings_persister, _ = make_tracker(scenario_host)

        assert tracker.toggle_keep(0) is True
        assert tracker.is_kept(0)
        assert tracker.settings.kept_instructions == {"chat1": {"Do X_1000": True}}
        assert tracker.toggle_keep(0) is False
        assert not tracker.is_kept(0)
        assert settings_persister.requests == 2

    def test_toggle_keep_missing_position(self, make_tracker, scenario_host):
        tracker, settings_persister, _ = make_tracker(scenario_host)
        refreshes = _refreshes(tracker.dispatcher)
        assert tracker.toggle_keep(42) is None
        assert settings_persister.requests == 0
        assert refreshes == []

    @pytest.mark.parametrize("position", [1, 3])
    def test_toggle_keep_ignores_non_instructions(self, make_tracker, scenario_host, position):
        tracker, settings_persister, _ = make_tracker(scenario_host)
        refreshes = _refreshes(tracker.dispatcher)

        assert tracker.toggle_keep(position) is None
        assert tracker.settings.kept_instructions == {}
        assert settings_persister.requests == 0
        assert refreshes == []

    def test_toggle_keep_never_reveals_hidden_user_message(self, make_tracker):
        host = FakeHost()
        host.add("User", "secret", 1000, hidden=True)
        host.add("Bot", "ok", 1100)
        tracker, settings_persister, transcript_persister = make_tracker(host)

        assert tracker.toggle_keep(0) is None
        assert host.hidden_positions() == [0]
        assert host.visibility_calls == []
        assert settings_persister.requests == 0
        assert transcript_persister.requests == 0

    def test_keeping_hidden_message_reveals_it(self, make_tracker, scenario_host):
        tracker, _, transcript_persister = make_tracker(scenario_host)
        tracker.force_hide()
        assert scenario_host.hidden_positions() == [0]

        tracker.toggle_keep(0)

        assert scenario_host.hidden_positions() == []
        assert scenario_host.visibility_calls[-1] == (0, True)
        assert transcript_persister.requests == 2

    def test_unkeeping_does_not_hide(self, make_tracker, scenario_host):
        tracker, _, _ = make_tracker(scenario_host)
        tracker.toggle_keep(0)
        tracker.toggle_keep(0)
        assert scenario_host.hidden_positions() == []

    def test_force_hide_always_refreshes(self, make_tracker):
        host = FakeHost.from_rows([("User", "hi", 1)])
        tracker, _, _ = make_tracker(host)
        refreshes = _refreshes(tracker.dispatcher)

        result = tracker.force_hide()

        assert result.hidden_count == 0
        assert len(refreshes) == 1
        assert refreshes[0].payload["counts"] == InstructionCounts(0, 0)

    def test_set_auto_hide(self, make_tracker, scenario_host):
        tracker, settings_persister, _ = make_tracker(scenario_host)
        assert tracker.auto_hide is False
        tracker.set_auto_hide(True)
        assert tracker.auto_hide is True
        assert tracker.settings.auto_hide is True
        assert settings_persister.requests == 1

    def test_auto_hide_sweep_respects_flag(self, make_tracker, scenario_host):
        tracker, _, _ = make_tracker(scenario_host)
        assert tracker.auto_hide_sweep().skipped
        tracker.set_auto_hide(True)
        assert tracker.auto_hide_sweep().hidden_positions == (0,)

    def test_cleanup_orphans(self, make_tracker, scenario_host):
        settings = TrackerSettings(keptInstructions={"chat1": {"Do X_1000": True, "gone_1": True}})
        tracker, _, _ = make_tracker(scenario_host, settings=settings)
        assert tracker.cleanup_orphans() == 1
        assert tracker.retention.kept_fingerprints("chat1") == {"Do X_1000"}


# ---------------------------------------------------------------------------
# Event wiring
# ---------------------------------------------------------------------------


class TestEventWiring:
    @pytest.mark.parametrize("event_type", [EventType.MESSAGE_RECEIVED, EventType.MESSAGE_SENT])
    def test_new_message_runs_auto_hide(self, make_tracker, scenario_host, event_type):
        tracker, _, _ = make_tracker(scenario_host, settings=TrackerSettings(autoHide=True))
        refreshes = _refreshes(tracker.dispatcher)

        tracker.dispatcher.emit(event_type)

        assert scenario_host.hidden_positions() == [0]
        assert refreshes[-1].payload["counts"] == InstructionCounts(active=1, total=2)

    def test_new_message_without_auto_hide(self, make_tracker, scenario_host):
        tracker, _, _ = make_tracker(scenario_host)
        tracker.dispatcher.emit(EventType.MESSAGE_RECEIVED)
        assert scenario_host.hidden_positions() == []

    def test_instruction_hidden_once_it_ages(self, make_tracker):
        host = FakeHost()
        tracker, _, _ = make_tracker(host, settings=TrackerSettings(autoHide=True))

        for name, body, send_date in SCENARIO_ROWS[:3]:
            host.add(name, body, send_date)
            tracker.dispatcher.emit(EventType.MESSAGE_RECEIVED)
        assert host.hidden_positions() == [0]

        host.add("Bot", "ok", 2500)
        host.add("User", "more", 2600)
        tracker.dispatcher.emit(EventType.MESSAGE_SENT)
        assert host.hidden_positions() == [0, 2]

    def test_deletion_runs_reaper(self, make_tracker, scenario_host):
        tracker, _, _ = make_tracker(scenario_host)
        tracker.toggle_keep(0)
        tracker.toggle_keep(2)

        scenario_host.delete(2)
        tracker.dispatcher.emit(EventType.MESSAGE_DELETED)

        assert tracker.retention.kept_fingerprints("chat1") == {"Do X_1000"}

    def test_chat_switch_runs_reaper_for_new_chat(self, make_tracker, scenario_host):
        settings = TrackerSettings(
            keptInstructions={"chat1": {"stale_1": True}, "chat2": {"stale_2": True}}
        )
        tracker, _, _ = make_tracker(scenario_host, settings=settings)

        scenario_host.chat_id = "chat2"
        tracker.dispatcher.emit(EventType.CHAT_CHANGED)

        assert settings.kept_instructions["chat2"] == {}
        assert settings.kept_instructions["chat1"] == {"stale_1": True}

    @pytest.mark.parametrize(
        "event_type",
        [EventType.MESSAGE_EDITED, EventType.MESSAGE_UPDATED, EventType.CHAT_UPDATED],
    )
    def test_updates_only_refresh(self, make_tracker, scenario_host, event_type):
        settings = TrackerSettings(autoHide=True, keptInstructions={"chat1": {"stale_1": True}})
        tracker, _, _ = make_tracker(scenario_host, settings=settings)
        refreshes = _refreshes(tracker.dispatcher)

        tracker.dispatcher.emit(event_type)

        assert len(refreshes) == 1
        assert scenario_host.hidden_positions() == []
        assert settings.kept_instructions["chat1"] == {"stale_1": True}

    def test_attach_is_idempotent(self, make_tracker, scenario_host):
        tracker, _, _ = make_tracker(scenario_host)
        tracker.attach()
        assert len(tracker.dispatcher.handlers(EventType.MESSAGE_SENT)) == 1

    def test_detach(self, make_tracker, scenario_host):
        tracker, _, _ = make_tracker(scenario_host, settings=TrackerSettings(autoHide=True))
        tracker.detach()
        assert not tracker.is_attached
        tracker.dispatcher.emit(EventType.MESSAGE_RECEIVED)
        assert scenario_host.hidden_positions() == []

    def test_from_components_without_attach(self, scenario_host):
        tracker = InstructionTracker.from_components(
            source=scenario_host, mutator=scenario_host, attach=False
        )
        assert not tracker.is_attached


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_closed_tracker_rejects_calls(self, make_tracker, scenario_host):
        tracker, _, _ = make_tracker(scenario_host)
        tracker.close()
        tracker.close()
        with pytest.raises(TrackerClosedError):
            tracker.force_hide()
        assert repr(tracker) == "InstructionTracker(closed)"

    def test_close_detaches(self, make_tracker, scenario_host):
        tracker, _, _ = make_tracker(scenario_host)
        with tracker:
            assert tracker.is_attached
        assert not tracker.is_attached

    def test_repr(self, make_tracker, scenario_host):
        tracker, _, _ = make_tracker(scenario_host)
        assert repr(tracker) == "InstructionTracker(chat_id='chat1', auto_hide=False)"
