"""Session timer engine: focus stopwatch and Pomodoro countdown.

Both timers tick once per second through a ``Scheduler``.  They are mutually
exclusive: starting one stops the other.  All durations come from the clock
by subtraction; the focus tick never counts seconds on its own.
"""

from __future__ import annotations

from taskdeck.core.ports import Clock, Notifier, RefreshCallback, noop_refresh, to_datetime
from taskdeck.core.scheduler import PeriodicTask, Scheduler
from taskdeck.models.focus.cycling import PomodoroSession, PomodoroSettings
from taskdeck.models.focus.state import FocusSession
from taskdeck.models.workspace import Workspace
from taskdeck.repositories.state_repository import StateRepository
from taskdeck.services.daily_service import DailyService
from taskdeck.utils.logger import get_logger

logger = get_logger("timer")

TICK_SECONDS = 1.0
# Sessions longer than this (in hours, i.e. 6 minutes) get a completion notification
FOCUS_NOTIFY_MIN_HOURS = 0.1


class SessionTimerEngine:
    """Owns FocusSession and PomodoroSession and their ticks."""

    def __init__(
        self,
        *,
        workspace: Workspace,
        repository: StateRepository,
        daily: DailyService,
        clock: Clock,
        scheduler: Scheduler,
        notifier: Notifier,
        refresh: RefreshCallback = noop_refresh,
        settings: PomodoroSettings | None = None,
    ):
        self.workspace = workspace
        self.repository = repository
        self.daily = daily
        self.clock = clock
        self.scheduler = scheduler
        self.notifier = notifier
        self.refresh = refresh

        self.focus = FocusSession()
        self.pomodoro = PomodoroSession(settings=settings or PomodoroSettings())

        self._focus_tick: PeriodicTask | None = None
        self._pomodoro_tick: PeriodicTask | None = None

    # ------------------------------------------------------------------
    # Restore / shutdown
    # ------------------------------------------------------------------

    def restore(self) -> None:
        """Load persisted sessions, resuming an active focus session's tick.

        A Pomodoro is never restored as running; its counters and settings are.
        """
        settings = self.pomodoro.settings
        self.focus = self.repository.load_focus()
        self.pomodoro = self.repository.load_pomodoro()
        # configured durations win over persisted ones
        self.pomodoro.settings = settings
        self.pomodoro.is_active = False

        if self.focus.is_active and self.focus.start_time is not None:
            self.focus.is_paused = False
            self.focus.current_time = self.focus.paused_time + self.focus.elapsed_since_start(
                self.clock.now()
            )
            self._start_focus_tick()
            logger.info("Restored active focus session at %ds", self.focus.current_time)
        elif self.focus.is_paused:
            self.focus.is_active = False
            self.focus.start_time = None
            self.focus.current_time = self.focus.paused_time
        else:
            self.focus.reset()

    def shutdown(self) -> None:
        """Cancel both ticks without changing session state."""
        self._cancel_focus_tick()
        self._cancel_pomodoro_tick()

    # ------------------------------------------------------------------
    # Day change
    # ------------------------------------------------------------------

    def check_for_day_change(self) -> bool:
        """Roll per-day counters when the calendar day changed."""
        new_date = self.daily.check_for_day_change()
        if new_date is None:
            return False
        if self.focus.last_session_date != new_date:
            self.focus.sessions_today = 0
            self.focus.last_session_date = new_date
            self.repository.save_focus(self.focus)
        self.daily.handle_day_change(
            new_date,
            focus_sessions=self.focus.sessions_today,
            pomodoro_rounds=self.pomodoro.completed_rounds,
        )
        self.refresh()
        return True

    # ------------------------------------------------------------------
    # Focus session
    # ------------------------------------------------------------------

    def focus_elapsed(self) -> int:
        """Seconds to display for the focus session right now."""
        if self.focus.is_active:
            return self.focus.paused_time + self.focus.elapsed_since_start(self.clock.now())
        if self.focus.is_paused:
            return self.focus.paused_time
        return 0

    def start_focus(self) -> bool:
        """Start a focus session. Returns False if one is already active."""
        if self.focus.is_active:
            return False

        self.check_for_day_change()

        if self.pomodoro.is_active:
            self.stop_pomodoro()

        fresh = self.focus.paused_time == 0
        self.focus.is_active = True
        self.focus.is_paused = False
        self.focus.start_time = self.clock.now()
        if fresh:
            self.focus.current_time = 0

        today = self.daily.today()
        if self.focus.last_session_date != today:
            self.focus.sessions_today = 0
            self.focus.last_session_date = today
        if fresh:
            self.focus.sessions_today += 1

        self._start_focus_tick()
        self.repository.save_focus(self.focus)
        self.refresh()
        logger.info("Focus session started (session %d today)", self.focus.sessions_today)
        return True

    def pause_focus(self) -> bool:
        if not self.focus.is_active:
            return False

        self.focus.paused_time += self.focus.elapsed_since_start(self.clock.now())
        self.focus.current_time = self.focus.paused_time
        self.focus.is_active = False
        self.focus.is_paused = True
        self.focus.start_time = None
        self._cancel_focus_tick()

        self.repository.save_focus(self.focus)
        self.refresh()
        logger.info("Focus session paused at %ds", self.focus.paused_time)
        return True

    def resume_focus(self) -> bool:
        if self.focus.is_active or not self.focus.is_paused:
            return False

        self.check_for_day_change()

        self.focus.is_active = True
        self.focus.is_paused = False
        self.focus.start_time = self.clock.now()
        self._start_focus_tick()

        self.repository.save_focus(self.focus)
        self.refresh()
        logger.info("Focus session resumed")
        return True

    def toggle_focus_pause(self) -> bool:
        if self.focus.is_active:
            return self.pause_focus()
        return self.resume_focus()

    def stop_focus(self) -> int:
        """End the focus session and return its length in seconds.

        The time is added to the lifetime total and to today's total.  A
        session that was neither active nor paused returns 0.
        """
        if not self.focus.is_running:
            return 0

        if self.focus.is_active:
            final_time = self.focus.paused_time + self.focus.elapsed_since_start(self.clock.now())
        else:
            final_time = self.focus.paused_time
        self._cancel_focus_tick()

        hours = final_time / 3600
        self.focus.total_focus_time += hours
        self.daily.add_time(hours)
        self.focus.reset()

        self.repository.save_focus(self.focus)
        self.daily.update_analytics(self.focus.sessions_today, self.pomodoro.completed_rounds)
        self.refresh()
        logger.info("Focus session ended after %ds (%.2fh)", final_time, hours)

        if hours > FOCUS_NOTIFY_MIN_HOURS:
            self.notifier.notify(
                "Focus Session Complete!",
                f"Great work! You focused for {round(hours * 60)} minutes.",
                {"silent": False, "on_click": "focus-completed"},
            )
        return final_time

    def _start_focus_tick(self) -> None:
        self._cancel_focus_tick()
        self._focus_tick = self.scheduler.every(TICK_SECONDS, self._on_focus_tick)

    def _cancel_focus_tick(self) -> None:
        if self._focus_tick is not None:
            self._focus_tick.cancel()
            self._focus_tick = None

    def _on_focus_tick(self) -> None:
        # a tick queued before pause/stop may still arrive
        if not self.focus.is_active or self.focus.start_time is None:
            return
        self.focus.current_time = self.focus.paused_time + self.focus.elapsed_since_start(
            self.clock.now()
        )
        self.repository.save_focus(self.focus)
        self.refresh()

    # ------------------------------------------------------------------
    # Pomodoro
    # ------------------------------------------------------------------

    @property
    def pomodoro_running(self) -> bool:
        """True while the countdown is ticking (active and not paused)."""
        return self._pomodoro_tick is not None

    def start_pomodoro(self, task_id: str | None = None, project_id: str | None = None) -> bool:
        """Start a work phase linked to a task. Stops a running focus session first."""
        if self.pomodoro.is_active:
            return False

        if self.focus.is_running:
            self.stop_focus()

        self.pomodoro.is_active = True
        self.pomodoro.linked_task_id = task_id
        self.pomodoro.linked_project_id = project_id
        self.pomodoro.current_phase = "work"
        self.pomodoro.current_round += 1
        self.pomodoro.time_remaining = self.pomodoro.settings.work_duration

        self._start_pomodoro_tick()
        self.repository.save_pomodoro(self.pomodoro)
        self.refresh()
        logger.info(
            "Pomodoro round %d started for task %s", self.pomodoro.current_round, task_id
        )
        return True

    def pause_pomodoro(self) -> bool:
        if not self.pomodoro.is_active or self._pomodoro_tick is None:
            return False
        self._cancel_pomodoro_tick()
        self.repository.save_pomodoro(self.pomodoro)
        self.refresh()
        logger.info("Pomodoro paused with %ds remaining", self.pomodoro.time_remaining)
        return True

    def resume_pomodoro(self) -> bool:
        if not self.pomodoro.is_active or self._pomodoro_tick is not None:
            return False
        self._start_pomodoro_tick()
        self.refresh()
        logger.info("Pomodoro resumed")
        return True

    def stop_pomodoro(self) -> int:
        """Stop the Pomodoro; a partial work phase is logged to the linked task.

        Returns the seconds logged.
        """
        if not self.pomodoro.is_active:
            return 0

        logged = 0
        if self.pomodoro.current_phase == "work":
            partial = self.pomodoro.work_elapsed
            if self._log_time_to_linked_task(partial):
                logged = partial

        self.pomodoro.is_active = False
        self.pomodoro.linked_task_id = None
        self.pomodoro.linked_project_id = None
        self._cancel_pomodoro_tick()

        self.repository.save_pomodoro(self.pomodoro)
        self.refresh()
        logger.info("Pomodoro stopped")
        return logged

    def complete_pomodoro_phase(self) -> None:
        """Finish the current phase and move to the next one."""
        pomodoro = self.pomodoro
        was_work = pomodoro.current_phase == "work"

        if was_work:
            self._log_time_to_linked_task(pomodoro.settings.work_duration)
            pomodoro.completed_rounds += 1
            pomodoro.total_work_time += pomodoro.settings.work_duration

        self._notify_phase_complete(was_work)

        pomodoro.current_phase = pomodoro.next_phase()
        pomodoro.time_remaining = pomodoro.settings.duration_of(pomodoro.current_phase)
        if not was_work:
            pomodoro.current_round += 1

        self.repository.save_pomodoro(pomodoro)
        self.refresh()
        logger.info(
            "Pomodoro phase complete; now %s (%d rounds done)",
            pomodoro.current_phase,
            pomodoro.completed_rounds,
        )

    def _start_pomodoro_tick(self) -> None:
        self._cancel_pomodoro_tick()
        self._pomodoro_tick = self.scheduler.every(TICK_SECONDS, self._on_pomodoro_tick)

    def _cancel_pomodoro_tick(self) -> None:
        if self._pomodoro_tick is not None:
            self._pomodoro_tick.cancel()
            self._pomodoro_tick = None

    def _on_pomodoro_tick(self) -> None:
        # a tick queued before stop may still arrive
        if not self.pomodoro.is_active:
            return
        self.pomodoro.time_remaining -= 1
        self.refresh()
        if self.pomodoro.time_remaining <= 0:
            self.complete_pomodoro_phase()

    def _log_time_to_linked_task(self, seconds: int) -> bool:
        """Add *seconds* to the linked task, its project and today's total.

        A link to a task that no longer exists is skipped silently.
        """
        project_id = self.pomodoro.linked_project_id
        task_id = self.pomodoro.linked_task_id
        task = self.workspace.find_task(project_id, task_id)
        if task is None:
            if task_id:
                logger.debug("Linked task %s/%s is gone; not logging time", project_id, task_id)
            return False

        project = self.workspace.projects[project_id]
        hours = seconds / 3600
        task.actual_time += hours
        project.actual_time += hours
        project.updated_at = to_datetime(self.clock.now())
        self.daily.add_time(hours)
        self.repository.save_workspace(self.workspace)
        logger.info("Logged %.2fh to task %s", hours, task.description)
        return True

    def _notify_phase_complete(self, was_work: bool) -> None:
        message = (
            "Work session completed! Time for a break."
            if was_work
            else "Break time over! Ready for the next work session?"
        )
        self.notifier.notify("Pomodoro Timer", message, {"silent": False})
