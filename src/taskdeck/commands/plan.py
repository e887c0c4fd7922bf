"""Daily planning command."""

from rich.table import Table

from .utils import console, get_app_context


def show_plan(accept: bool = False, skip: bool = False) -> None:
    """Print today's suggestions; ``accept`` plans them, ``skip`` declines."""
    ctx = get_app_context()
    try:
        daily = ctx.daily
        if skip:
            daily.skip_day()
            console.print("[yellow]Planning skipped for today[/yellow]")
            return

        suggestions = daily.suggestions()
        if not suggestions:
            console.print("[yellow]No suggestions: add tasks with a priority or due date[/yellow]")
            return

        table = Table(title=f"Suggested for {daily.today()}", show_header=True)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Task")
        table.add_column("Project", style="cyan")
        table.add_column("Why")
        table.add_column("Score", justify="right")
        for i, s in enumerate(suggestions, 1):
            table.add_row(str(i), s.task_description, s.project_name, s.reason, str(s.score))
        console.print(table)

        if accept:
            count = daily.start_day([(s.project_id, s.task_id) for s in suggestions])
            console.print(f"[green]✓ Day started with {count} planned task(s)[/green]")
        elif daily.needs_planning():
            console.print("[dim]Run 'taskdeck plan --accept' to start the day[/dim]")
    finally:
        ctx.close()
