"""Daily counters, streak, day-change handling, planning and analytics."""

from __future__ import annotations

from taskdeck.core.ports import Clock, date_string, to_datetime
from taskdeck.models.focus.analytics import Analytics
from taskdeck.models.focus.daily import DailyPlanning, DailyStats, DayChangeDetector
from taskdeck.models.focus.suggestions import TaskSuggestion, TaskSuggestionEngine
from taskdeck.models.workspace import Workspace
from taskdeck.repositories.state_repository import StateRepository
from taskdeck.utils.logger import get_logger

logger = get_logger("daily")


class DailyService:
    """Owns DailyStats, the day-change detector, the daily plan and analytics."""

    def __init__(self, workspace: Workspace, repository: StateRepository, clock: Clock):
        self.workspace = workspace
        self.repository = repository
        self.clock = clock
        self.stats = DailyStats()
        self.detector = DayChangeDetector()
        self.planning = DailyPlanning()
        self.analytics = Analytics()

    def today(self) -> str:
        return date_string(self.clock.now())

    def load(self) -> None:
        """Load persisted daily state and drop a plan left over from another day."""
        self.stats = self.repository.load_daily_stats()
        self.detector = self.repository.load_day_change()
        self.planning = self.repository.load_planning()
        self.analytics = self.repository.load_analytics()
        self.clear_stale_plan()

    # Day change

    def check_for_day_change(self) -> str | None:
        """Return the new date when the calendar day changed since the last check."""
        today = self.today()
        previous = self.detector.last_checked_date
        changed = self.detector.check(today)
        self.repository.save_day_change(self.detector)
        if changed:
            logger.info("Day change detected: %s -> %s", previous, today)
            return today
        return None

    def handle_day_change(self, new_date: str, focus_sessions: int, pomodoro_rounds: int) -> None:
        """Roll stats and streak, reset the plan and refresh today's analytics row."""
        self.update_daily_stats()
        if self.planning.last_planning_date != new_date:
            self.planning.reset_for(new_date)
            self._clear_planned_flags()
            self.repository.save_planning(self.planning)
        self.update_analytics(focus_sessions, pomodoro_rounds)

    def update_daily_stats(self) -> None:
        """Roll onto today if needed and recount tasks completed today."""
        today = self.today()
        self.stats.roll_to(today)

        completed = 0
        for project in self.workspace.projects.values():
            for task in project.tasks:
                if task.completed and task.completed_at is not None:
                    if task.completed_at.astimezone().date().isoformat() == today:
                        completed += 1
        self.stats.completed_today = completed
        self.repository.save_daily_stats(self.stats)

    def add_time(self, hours: float) -> None:
        """Add logged time to today's total."""
        self.stats.total_time_today += hours
        self.repository.save_daily_stats(self.stats)

    # Analytics

    def update_analytics(self, focus_sessions: int, pomodoro_rounds: int) -> None:
        row = self.analytics.row(self.today())
        row["time_logged"] = self.stats.total_time_today
        row["tasks_completed"] = self.stats.completed_today
        row["focus_sessions"] = focus_sessions
        row["pomodoro_sessions"] = pomodoro_rounds
        self.analytics.last_updated = to_datetime(self.clock.now()).isoformat()
        self.repository.save_analytics(self.analytics)

    def track_incubation(self) -> None:
        """Count one project moved to incubation today."""
        today = self.today()
        self.analytics.incubation_activity[today] = (
            self.analytics.incubation_activity.get(today, 0) + 1
        )
        self.repository.save_analytics(self.analytics)

    # Planning

    def needs_planning(self) -> bool:
        return self.planning.needs_planning(self.today())

    def suggestions(self) -> list[TaskSuggestion]:
        return TaskSuggestionEngine(self.workspace).suggest(self.today())

    def start_day(self, selected: list[tuple[str, str]]) -> int:
        """Mark the selected ``(project_id, task_id)`` pairs as planned for today.

        Returns the number of tasks that still existed and were marked.
        """
        today = self.today()
        planned = []
        for project_id, task_id in selected:
            task = self.workspace.find_task(project_id, task_id)
            if task is None:
                continue
            task.planned_for_today = True
            planned.append(
                {"project_id": project_id, "task_id": task_id, "planned_date": today}
            )

        self.planning.last_planning_date = today
        self.planning.has_daily_plan = True
        self.planning.planned_tasks = planned
        self.repository.save_workspace(self.workspace)
        self.repository.save_planning(self.planning)
        logger.info("Day started with %d planned tasks", len(planned))
        return len(planned)

    def skip_day(self) -> None:
        self.planning.reset_for(self.today())
        self.repository.save_planning(self.planning)

    def clear_stale_plan(self) -> None:
        """Forget a plan made on another day, including the task flags."""
        if self.planning.last_planning_date == self.today():
            return
        if self.planning.has_daily_plan or self.planning.planned_tasks:
            self.planning.has_daily_plan = False
            self.planning.planned_tasks = []
            self.repository.save_planning(self.planning)
        if self._clear_planned_flags():
            self.repository.save_workspace(self.workspace)

    def _clear_planned_flags(self) -> bool:
        cleared = False
        for project in self.workspace.projects.values():
            for task in project.tasks:
                if task.planned_for_today:
                    task.planned_for_today = False
                    cleared = True
        return cleared
