"""Focus mode commands: a pausable stopwatch that survives between runs."""

import typer

from taskdeck.utils.exit_codes import ERROR_CONFLICT
from taskdeck.utils.ui.console import format_clock

from .utils import console, format_hours, get_app_context

app = typer.Typer(help="Focus stopwatch")


@app.command("start")
def start_focus():
    """Start a focus session (stops a running Pomodoro)."""
    ctx = get_app_context()
    try:
        if ctx.timer.focus.is_active:
            console.print("[yellow]A focus session is already running[/yellow]")
            raise typer.Exit(ERROR_CONFLICT)
        if ctx.timer.focus.is_paused:
            ctx.timer.resume_focus()
            console.print("[green]▶ Focus session resumed[/green]")
            return
        ctx.timer.start_focus()
        console.print("\n[bold green]🎯 Focus session started[/bold green]")
        console.print(f"Sessions today: {ctx.timer.focus.sessions_today}")
    finally:
        ctx.close()


@app.command("pause")
def pause_focus():
    """Pause the running focus session."""
    ctx = get_app_context()
    try:
        if not ctx.timer.pause_focus():
            console.print("[yellow]No active focus session[/yellow]")
            return
        console.print(
            f"[yellow]⏸  Paused at {format_clock(ctx.timer.focus.paused_time)}[/yellow]"
        )
    finally:
        ctx.close()


@app.command("resume")
def resume_focus():
    """Resume a paused focus session."""
    ctx = get_app_context()
    try:
        if not ctx.timer.resume_focus():
            console.print("[yellow]No paused focus session[/yellow]")
            return
        console.print("[green]▶ Focus session resumed[/green]")
    finally:
        ctx.close()


@app.command("stop")
def stop_focus():
    """Stop the focus session and log its time."""
    ctx = get_app_context()
    try:
        if not ctx.timer.focus.is_running:
            console.print("[yellow]No focus session to stop[/yellow]")
            return
        seconds = ctx.timer.stop_focus()
        console.print(f"\n[bold]⏹  Focus session ended:[/bold] {format_clock(seconds)}")
        console.print(f"Total focus time: {format_hours(ctx.timer.focus.total_focus_time)}")
    finally:
        ctx.close()


@app.command("status")
def focus_status():
    """Show the focus session and today's counters."""
    ctx = get_app_context()
    try:
        focus = ctx.timer.focus
        if focus.is_active:
            state = "[green]running[/green]"
        elif focus.is_paused:
            state = "[yellow]paused[/yellow]"
        else:
            state = "[dim]idle[/dim]"
        console.print(f"Focus: {state}  {format_clock(ctx.timer.focus_elapsed())}")
        console.print(f"Sessions today: {focus.sessions_today}")
        console.print(f"Time today: {format_hours(ctx.daily.stats.total_time_today)}")
        console.print(f"Total focus time: {format_hours(focus.total_focus_time)}")
    finally:
        ctx.close()
