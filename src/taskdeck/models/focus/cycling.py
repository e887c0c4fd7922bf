"""Pomodoro cycling: work -> short/long break -> work."""

from dataclasses import asdict, dataclass, field, fields
from typing import Literal

from pydantic import TypeAdapter

PomodoroPhase = Literal["work", "short_break", "long_break"]

PHASE_LABELS: dict[str, str] = {
    "work": "🍅 Work Time",
    "short_break": "☕ Short Break",
    "long_break": "🏃 Long Break",
}


@dataclass
class PomodoroSettings:
    """Phase lengths in seconds."""

    work_duration: int = 25 * 60
    short_break_duration: int = 5 * 60
    long_break_duration: int = 15 * 60
    rounds_before_long_break: int = 4

    def duration_of(self, phase: PomodoroPhase) -> int:
        if phase == "work":
            return self.work_duration
        if phase == "short_break":
            return self.short_break_duration
        return self.long_break_duration


@dataclass
class PomodoroSession:
    """Structured countdown state.

    ``linked_task_id`` / ``linked_project_id`` are weak links: they are looked
    up when time is logged and may point at nothing by then.
    """

    is_active: bool = False
    current_phase: PomodoroPhase = "work"
    time_remaining: int = 0  # seconds
    current_round: int = 0
    linked_task_id: str | None = None
    linked_project_id: str | None = None
    settings: PomodoroSettings = field(default_factory=PomodoroSettings)
    completed_rounds: int = 0
    total_work_time: int = 0  # seconds

    def next_phase(self) -> PomodoroPhase:
        """Phase that follows the current one.

        Call after ``completed_rounds`` has been bumped for a finished work
        phase; every ``rounds_before_long_break``-th break is a long one.
        """
        if self.current_phase != "work":
            return "work"
        rounds = max(1, self.settings.rounds_before_long_break)
        if self.completed_rounds % rounds == 0:
            return "long_break"
        return "short_break"

    @property
    def work_elapsed(self) -> int:
        """Seconds already worked in the current work phase."""
        if self.current_phase != "work":
            return 0
        return max(0, self.settings.work_duration - self.time_remaining)

    def to_dict(self) -> dict:
        """Convert to dictionary for persistence."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "PomodoroSession":
        """Create from dictionary; nested settings are validated too."""
        known = {f.name for f in fields(cls)}
        return TypeAdapter(cls).validate_python({k: v for k, v in data.items() if k in known})
