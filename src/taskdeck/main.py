"""Main entry point for the taskdeck CLI."""

import typer

from taskdeck import __version__
from taskdeck.commands import config, focus, goals, plan, pomodoro, projects, shell, stats, tasks
from taskdeck.utils.ui.console import get_console

app = typer.Typer(
    name="taskdeck",
    help="Projects, tasks, focus sessions and Pomodoro cycles in the terminal",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(focus.app, name="focus", help="Focus stopwatch")
app.add_typer(pomodoro.app, name="pomodoro", help="Pomodoro work/break cycles")
app.add_typer(projects.app, name="project", help="Project management commands")
app.add_typer(tasks.app, name="task", help="Task management commands")
app.add_typer(goals.app, name="goal", help="Goals linked to tasks")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]taskdeck[/bold] version [cyan]{__version__}[/cyan]")


@app.command("plan")
def plan_day(
    accept: bool = typer.Option(False, "--accept", help="Plan the suggested tasks for today"),
    skip: bool = typer.Option(False, "--skip", help="Skip planning for today"),
) -> None:
    """Suggest tasks for today."""
    plan.show_plan(accept=accept, skip=skip)


@app.command("stats")
def show_stats(
    days: int = typer.Option(7, "--days", "-d", help="Days of history to show"),
    insights: bool = typer.Option(False, "--insights", "-i", help="Add insights for the last 7 days"),
    week: bool = typer.Option(False, "--week", help="Totals for the last 4 weeks"),
    month: bool = typer.Option(False, "--month", help="Totals for the last 6 months"),
    output: str = typer.Option(None, "--output", "-o", help="Output format (json)"),
) -> None:
    """Show productivity statistics."""
    stats.show_stats(days=days, insights=insights, week=week, month=month, output=output)


@app.command("shell")
def interactive_shell() -> None:
    """Interactive session with undo/redo."""
    shell.run_shell()


if __name__ == "__main__":
    app()
