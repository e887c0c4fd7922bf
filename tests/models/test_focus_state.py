"""Unit tests for the focus stopwatch state."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from taskdeck.models.focus.state import FocusSession


class TestFocusSessionDefaults:
    def test_idle_by_default(self) -> None:
        focus = FocusSession()

        assert focus.is_active is False
        assert focus.is_paused is False
        assert focus.start_time is None
        assert focus.is_running is False

    def test_is_running_when_paused(self) -> None:
        assert FocusSession(is_paused=True).is_running is True


class TestElapsedSinceStart:
    def test_floors_to_whole_seconds(self) -> None:
        focus = FocusSession(is_active=True, start_time=1_000)

        assert focus.elapsed_since_start(10_999) == 9
        assert focus.elapsed_since_start(11_000) == 10

    def test_zero_without_start_time(self) -> None:
        assert FocusSession().elapsed_since_start(123_456) == 0


class TestReset:
    def test_keeps_cumulative_counters(self) -> None:
        focus = FocusSession(
            is_active=True,
            start_time=5,
            current_time=40,
            paused_time=30,
            total_focus_time=1.5,
            sessions_today=3,
            last_session_date="2024-03-12",
        )

        focus.reset()

        assert focus.is_running is False
        assert focus.start_time is None
        assert focus.current_time == 0
        assert focus.paused_time == 0
        assert focus.total_focus_time == 1.5
        assert focus.sessions_today == 3
        assert focus.last_session_date == "2024-03-12"


class TestSerialization:
    def test_from_dict_ignores_unknown_keys(self) -> None:
        focus = FocusSession.from_dict({"sessions_today": 2, "legacy_field": True})

        assert focus.sessions_today == 2

    def test_round_trip(self) -> None:
        focus = FocusSession(is_paused=True, paused_time=90, sessions_today=1)

        assert FocusSession.from_dict(focus.to_dict()) == focus

    def test_from_dict_rejects_text_start_time(self) -> None:
        with pytest.raises(ValidationError):
            FocusSession.from_dict({"is_active": True, "start_time": "yesterday"})
