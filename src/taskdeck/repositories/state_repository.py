"""Reads and writes every persisted blob.

Each piece of state lives under its own key as a JSON string.  A missing or
unreadable blob loads as defaults; reading never raises.
"""

from __future__ import annotations

import json
from json import JSONDecodeError
from typing import Any

from pydantic import ValidationError

from taskdeck.core.ports import KeyValueStore
from taskdeck.models.focus.analytics import Analytics
from taskdeck.models.focus.cycling import PomodoroSession
from taskdeck.models.focus.daily import DailyPlanning, DailyStats, DayChangeDetector
from taskdeck.models.focus.state import FocusSession
from taskdeck.models.workspace import Goal, Project, Task, Workspace
from taskdeck.utils.logger import get_logger

logger = get_logger("repository")

FOCUS_KEY = "productivity_focus_stats"
POMODORO_KEY = "productivity_pomodoro_stats"
DAILY_STATS_KEY = "productivity_daily_stats"
DAY_CHANGE_KEY = "productivity_day_change_detector"
PROJECTS_KEY = "productivity_projects"
ARCHIVED_TASKS_KEY = "productivity_archived_tasks"
ARCHIVED_PROJECTS_KEY = "productivity_archived_projects"
GOALS_KEY = "productivity_goals"
NEXT_ID_KEY = "productivity_nextId"
NEXT_GOAL_ID_KEY = "productivity_nextGoalId"
PLANNING_KEY = "productivity_daily_planning"
ANALYTICS_KEY = "productivity_analytics"


class StateRepository:
    """Typed access to the key-value store."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _read(self, key: str) -> Any | None:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except JSONDecodeError as e:
            logger.warning("Discarding corrupt blob %s: %s", key, e)
            return None

    def _write(self, key: str, value: Any) -> None:
        self.store.set(key, json.dumps(value))

    def _load_dataclass(self, key: str, cls):
        data = self._read(key)
        if not isinstance(data, dict):
            return cls()
        try:
            return cls.from_dict(data)
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning("Discarding invalid blob %s: %s", key, e)
            return cls()

    # Focus / Pomodoro

    def load_focus(self) -> FocusSession:
        return self._load_dataclass(FOCUS_KEY, FocusSession)

    def save_focus(self, focus: FocusSession) -> None:
        self._write(FOCUS_KEY, focus.to_dict())

    def load_pomodoro(self) -> PomodoroSession:
        return self._load_dataclass(POMODORO_KEY, PomodoroSession)

    def save_pomodoro(self, pomodoro: PomodoroSession) -> None:
        self._write(POMODORO_KEY, pomodoro.to_dict())

    # Daily tracking

    def load_daily_stats(self) -> DailyStats:
        return self._load_dataclass(DAILY_STATS_KEY, DailyStats)

    def save_daily_stats(self, stats: DailyStats) -> None:
        self._write(DAILY_STATS_KEY, stats.to_dict())

    def load_day_change(self) -> DayChangeDetector:
        return self._load_dataclass(DAY_CHANGE_KEY, DayChangeDetector)

    def save_day_change(self, detector: DayChangeDetector) -> None:
        self._write(DAY_CHANGE_KEY, detector.to_dict())

    def load_planning(self) -> DailyPlanning:
        return self._load_dataclass(PLANNING_KEY, DailyPlanning)

    def save_planning(self, planning: DailyPlanning) -> None:
        self._write(PLANNING_KEY, planning.to_dict())

    def load_analytics(self) -> Analytics:
        return self._load_dataclass(ANALYTICS_KEY, Analytics)

    def save_analytics(self, analytics: Analytics) -> None:
        self._write(ANALYTICS_KEY, analytics.to_dict())

    # Workspace graph

    def load_workspace(self) -> Workspace:
        """Load the graph; any unreadable collection comes back empty."""
        workspace = Workspace()

        collections = (
            (PROJECTS_KEY, "projects", lambda v: {k: Project.model_validate(p) for k, p in v.items()}),
            (GOALS_KEY, "goals", lambda v: {k: Goal.model_validate(g) for k, g in v.items()}),
            (
                ARCHIVED_TASKS_KEY,
                "archived_tasks",
                lambda v: {k: [Task.model_validate(t) for t in ts] for k, ts in v.items()},
            ),
            (
                ARCHIVED_PROJECTS_KEY,
                "archived_projects",
                lambda v: {k: Project.model_validate(p) for k, p in v.items()},
            ),
        )
        for key, field, parse in collections:
            data = self._read(key)
            if not isinstance(data, dict):
                continue
            try:
                setattr(workspace, field, parse(data))
            except (ValidationError, TypeError, AttributeError) as e:
                logger.warning("Discarding invalid blob %s: %s", key, e)

        workspace.next_id = self._read_int(NEXT_ID_KEY, default=1)
        workspace.next_goal_id = self._read_int(NEXT_GOAL_ID_KEY, default=1)
        return workspace

    def _read_int(self, key: str, default: int) -> int:
        value = self._read(key)
        if isinstance(value, int) and value > 0:
            return value
        return default

    def save_workspace(self, workspace: Workspace) -> None:
        data = workspace.snapshot()
        self._write(PROJECTS_KEY, data["projects"])
        self._write(GOALS_KEY, data["goals"])
        self._write(ARCHIVED_TASKS_KEY, data["archived_tasks"])
        self._write(ARCHIVED_PROJECTS_KEY, data["archived_projects"])
        self._write(NEXT_ID_KEY, workspace.next_id)
        self._write(NEXT_GOAL_ID_KEY, workspace.next_goal_id)
