"""Pomodoro commands."""

import time

import typer
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from taskdeck.context import AppContext
from taskdeck.models.focus.cycling import PHASE_LABELS
from taskdeck.utils.exit_codes import ERROR_INVALID_ARGS
from taskdeck.utils.ui.console import format_clock

from .utils import console, get_app_context, require_task

app = typer.Typer(help="Pomodoro work/break cycles")


def render_pomodoro(ctx: AppContext) -> Panel:
    """Panel with phase, countdown and round counters."""
    pomodoro = ctx.timer.pomodoro
    task = ctx.workspace.find_task(pomodoro.linked_project_id, pomodoro.linked_task_id)

    body = Text(justify="center")
    body.append(PHASE_LABELS[pomodoro.current_phase] + "\n", style="bold")
    color = "cyan" if pomodoro.current_phase == "work" else "green"
    if not ctx.timer.pomodoro_running:
        color = "yellow"
    body.append(format_clock(pomodoro.time_remaining) + "\n", style=f"bold {color}")
    body.append(
        f"Round {pomodoro.current_round}  •  {pomodoro.completed_rounds} completed",
        style="dim",
    )
    if task is not None:
        body.append(f"\n{task.description}", style="white")
    return Panel(body, title="🍅 Pomodoro", subtitle="Ctrl-C to stop", expand=False)


@app.command("run")
def run_pomodoro(
    task_id: str | None = typer.Option(None, "--task", "-t", help="Task to log work time to"),
    project_id: str | None = typer.Option(None, "--project", "-p", help="Project of the task"),
    rounds: int = typer.Option(0, "--rounds", "-r", help="Stop after N work rounds (0 = run until Ctrl-C)"),
):
    """Run Pomodoro cycles in the foreground."""
    ctx = get_app_context(live=True)
    try:
        if task_id:
            if not project_id:
                console.print("[red]--task requires --project[/red]")
                raise typer.Exit(ERROR_INVALID_ARGS)
            require_task(ctx, project_id, task_id)

        with ctx.lock:
            ctx.timer.start_pomodoro(task_id, project_id)
            target = ctx.timer.pomodoro.completed_rounds + rounds

        try:
            with Live(render_pomodoro(ctx), console=console, refresh_per_second=4) as live:
                while True:
                    time.sleep(0.25)
                    with ctx.lock:
                        if not ctx.timer.pomodoro.is_active:
                            break
                        if rounds and ctx.timer.pomodoro.completed_rounds >= target:
                            ctx.timer.stop_pomodoro()
                            break
                        live.update(render_pomodoro(ctx))
        except KeyboardInterrupt:
            with ctx.lock:
                logged = ctx.timer.stop_pomodoro()
            console.print("\n[yellow]Pomodoro stopped[/yellow]")
            if logged:
                console.print(f"[dim]Logged {format_clock(logged)} of work[/dim]")
            return

        console.print("\n[bold green]🎉 Pomodoro finished[/bold green]")
    finally:
        ctx.close()


@app.command("status")
def pomodoro_status():
    """Show Pomodoro counters."""
    ctx = get_app_context()
    try:
        pomodoro = ctx.timer.pomodoro
        settings = pomodoro.settings
        console.print(f"Completed rounds: {pomodoro.completed_rounds}")
        console.print(f"Total work time: {format_clock(pomodoro.total_work_time)}")
        console.print(
            f"[dim]Work {settings.work_duration // 60}m  •  "
            f"short break {settings.short_break_duration // 60}m  •  "
            f"long break {settings.long_break_duration // 60}m every "
            f"{settings.rounds_before_long_break} rounds[/dim]"
        )
    finally:
        ctx.close()
