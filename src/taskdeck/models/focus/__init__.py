"""Focus mode - stopwatch, Pomodoro cycling and daily tracking models."""

from .analytics import Analytics
from .cycling import PomodoroPhase, PomodoroSession, PomodoroSettings
from .daily import DailyPlanning, DailyStats, DayChangeDetector
from .state import FocusSession
from .suggestions import TaskSuggestion, TaskSuggestionEngine

__all__ = [
    "Analytics",
    "DailyPlanning",
    "DailyStats",
    "DayChangeDetector",
    "FocusSession",
    "PomodoroPhase",
    "PomodoroSession",
    "PomodoroSettings",
    "TaskSuggestion",
    "TaskSuggestionEngine",
]
