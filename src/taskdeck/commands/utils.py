"""Shared helpers for CLI commands."""

from __future__ import annotations

import typer

from taskdeck.adapters.notifier import ConsoleNotifier, NullNotifier
from taskdeck.adapters.store import JsonFileStore
from taskdeck.context import AppContext
from taskdeck.core.scheduler import ManualScheduler
from taskdeck.models.workspace import Project, Task
from taskdeck.services.config_service import get_config_service
from taskdeck.utils.exit_codes import ERROR_NOT_FOUND
from taskdeck.utils.ui.console import get_console

console = get_console()


def get_app_context(live: bool = False) -> AppContext:
    """Build and start an AppContext from the user's configuration.

    One-shot commands never wait for a tick, so they get a ManualScheduler;
    ``live`` commands get real one-second ticks.
    """
    svc = get_config_service()
    config = svc.load_config()
    notifier = (
        ConsoleNotifier(console, sound=config.notifications.sound)
        if config.notifications.enabled
        else NullNotifier()
    )
    ctx = AppContext(
        JsonFileStore(svc.store_path),
        config=config,
        scheduler=None if live else ManualScheduler(),
        notifier=notifier,
        on_message=lambda text: console.print(f"[dim]↺ {text}[/dim]"),
    )
    return ctx.start()


def require_project(ctx: AppContext, project_id: str) -> Project:
    project = ctx.workspace.projects.get(project_id)
    if project is None:
        console.print(f"[red]Error: project '{project_id}' not found[/red]")
        raise typer.Exit(ERROR_NOT_FOUND)
    return project


def require_task(ctx: AppContext, project_id: str, task_id: str) -> Task:
    require_project(ctx, project_id)
    task = ctx.workspace.find_task(project_id, task_id)
    if task is None:
        console.print(f"[red]Error: task '{task_id}' not found in {project_id}[/red]")
        raise typer.Exit(ERROR_NOT_FOUND)
    return task


def format_hours(hours: float) -> str:
    return f"{hours:.1f}h"
