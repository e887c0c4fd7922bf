"""Goal commands."""

from datetime import date

import typer
from rich.table import Table

from taskdeck.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND

from .utils import console, get_app_context

app = typer.Typer(help="Goals linked to tasks")


def _parse_link(value: str) -> tuple[str, str]:
    project_id, sep, task_id = value.partition(":")
    if not sep or not project_id or not task_id:
        console.print(f"[red]Invalid link '{value}', expected PROJECT_ID:TASK_ID[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS)
    return project_id, task_id


@app.command("add")
def add_goal(
    title: str = typer.Argument(..., help="Goal title"),
    description: str = typer.Option("", "--description", "-d"),
    due: str | None = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    link: list[str] = typer.Option([], "--link", "-l", help="PROJECT_ID:TASK_ID, repeatable"),
):
    """Create a goal."""
    links = [_parse_link(value) for value in link]
    try:
        due_date = date.fromisoformat(due) if due else None
    except ValueError as e:
        console.print(f"[red]Invalid due date '{due}', expected YYYY-MM-DD[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS) from e

    ctx = get_app_context()
    try:
        goal = ctx.workspace_service.create_goal(
            title, description=description, due_date=due_date, linked_tasks=links
        )
        if goal is None:
            console.print("[red]Goal title cannot be empty[/red]")
            raise typer.Exit(ERROR_INVALID_ARGS)
        console.print(f"[green]✓ Created goal[/green] {goal.title} [dim]({goal.id})[/dim]")
    finally:
        ctx.close()


@app.command("list")
def list_goals():
    """List goals with progress over their linked tasks."""
    ctx = get_app_context()
    try:
        goals = list(ctx.workspace.goals.values())
        if not goals:
            console.print("[yellow]No goals yet[/yellow]")
            return

        table = Table(title="Goals", show_header=True)
        table.add_column("ID", style="cyan")
        table.add_column("Title")
        table.add_column("Due")
        table.add_column("Progress", justify="right")

        for goal in goals:
            completed, total, pct = ctx.workspace_service.goal_progress(goal)
            table.add_row(
                goal.id,
                goal.title,
                goal.due_date.isoformat() if goal.due_date else "—",
                f"{completed}/{total} ({pct:.0f}%)" if total else "no linked tasks",
            )
        console.print(table)
    finally:
        ctx.close()


@app.command("delete")
def delete_goal(goal_id: str = typer.Argument(..., help="Goal id")):
    """Delete a goal."""
    ctx = get_app_context()
    try:
        goal = ctx.workspace_service.delete_goal(goal_id)
        if goal is None:
            console.print(f"[red]Error: goal '{goal_id}' not found[/red]")
            raise typer.Exit(ERROR_NOT_FOUND)
        console.print(f"[green]✓ Deleted goal[/green] {goal.title}")
    finally:
        ctx.close()
