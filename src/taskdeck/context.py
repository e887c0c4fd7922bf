"""Application context: the one object that owns all mutable state.

Engines and services receive their collaborators from here instead of
reaching for module globals.  ``lock`` serializes user actions with timer
ticks delivered by a ``ThreadingScheduler``.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from taskdeck.adapters.notifier import NullNotifier
from taskdeck.core.ports import Clock, KeyValueStore, Notifier, RefreshCallback, SystemClock, noop_refresh
from taskdeck.core.scheduler import Scheduler, ThreadingScheduler
from taskdeck.models.config_models import AppConfig
from taskdeck.repositories.state_repository import StateRepository
from taskdeck.services.daily_service import DailyService
from taskdeck.services.history_service import UndoRedoHistory
from taskdeck.services.timer_engine import SessionTimerEngine
from taskdeck.services.workspace_service import WorkspaceService


class AppContext:
    """Wires the store, clock, scheduler and notifier into the engines."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        config: AppConfig | None = None,
        clock: Clock | None = None,
        scheduler: Scheduler | None = None,
        notifier: Notifier | None = None,
        refresh: RefreshCallback = noop_refresh,
        on_message: Callable[[str], None] | None = None,
    ):
        self.config = config or AppConfig()
        self.lock = threading.RLock()
        self.clock = clock or SystemClock()
        self.scheduler = scheduler or ThreadingScheduler(self.lock)
        self.notifier = notifier or NullNotifier()
        self.refresh = refresh

        self.repository = StateRepository(store)
        self.workspace = self.repository.load_workspace()
        self.daily = DailyService(self.workspace, self.repository, self.clock)
        self.history = UndoRedoHistory(
            self.workspace,
            max_history_size=self.config.history.max_size,
            clock=self.clock,
            on_restore=self._after_restore,
            on_message=on_message,
        )
        self.timer = SessionTimerEngine(
            workspace=self.workspace,
            repository=self.repository,
            daily=self.daily,
            clock=self.clock,
            scheduler=self.scheduler,
            notifier=self.notifier,
            refresh=refresh,
            settings=self.config.pomodoro.to_settings(),
        )
        self.workspace_service = WorkspaceService(
            self.workspace,
            self.history,
            self.daily,
            self.repository,
            self.clock,
            refresh=refresh,
        )

    def start(self) -> "AppContext":
        """Load persisted state, catch up on a day change and seed the history."""
        with self.lock:
            self.daily.load()
            self.daily.update_daily_stats()
            self.timer.restore()
            self.timer.check_for_day_change()
            self.history.initialize()
        return self

    def close(self) -> None:
        """Stop ticking; persisted state is left for the next run."""
        with self.lock:
            self.timer.shutdown()
            self.repository.save_focus(self.timer.focus)
            self.repository.save_pomodoro(self.timer.pomodoro)

    def _after_restore(self) -> None:
        self.repository.save_workspace(self.workspace)
        self.daily.update_daily_stats()
        self.refresh()

    def __enter__(self) -> "AppContext":
        return self.start()

    def __exit__(self, *exc) -> None:
        self.close()
