"""Task management commands."""

from datetime import date

import typer
from rich.table import Table

from taskdeck.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND

from .utils import console, format_hours, get_app_context, require_project, require_task

app = typer.Typer(help="Task management commands")


def _parse_due(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        console.print(f"[red]Invalid due date '{value}', expected YYYY-MM-DD[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS) from e


@app.command("add")
def add_task(
    project_id: str = typer.Argument(..., help="Project id"),
    description: str = typer.Argument(..., help="Task description"),
    due: str | None = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    estimate: float = typer.Option(0.0, "--estimate", "-e", help="Estimated hours"),
    priority: str | None = typer.Option(None, "--priority"),
):
    """Add a task to a project."""
    due_date = _parse_due(due)
    ctx = get_app_context()
    try:
        require_project(ctx, project_id)
        task = ctx.workspace_service.add_task(
            project_id, description, due_date=due_date, priority=priority, estimated_time=estimate
        )
        if task is None:
            console.print("[red]Task description cannot be empty[/red]")
            raise typer.Exit(ERROR_INVALID_ARGS)
        console.print(f"[green]✓ Added task[/green] {task.description} [dim]({task.id})[/dim]")
    finally:
        ctx.close()


@app.command("done")
def toggle_task(
    project_id: str = typer.Argument(..., help="Project id"),
    task_id: str = typer.Argument(..., help="Task id"),
):
    """Toggle a task's completion."""
    ctx = get_app_context()
    try:
        require_task(ctx, project_id, task_id)
        task = ctx.workspace_service.toggle_task(project_id, task_id)
        mark = "[green]✓ Completed[/green]" if task.completed else "[yellow]○ Reopened[/yellow]"
        console.print(f"{mark} {task.description}")
    finally:
        ctx.close()


@app.command("delete")
def delete_task(
    project_id: str = typer.Argument(..., help="Project id"),
    task_id: str = typer.Argument(..., help="Task id"),
):
    """Delete a task."""
    ctx = get_app_context()
    try:
        require_task(ctx, project_id, task_id)
        task = ctx.workspace_service.delete_task(project_id, task_id)
        console.print(f"[green]✓ Deleted[/green] {task.description}")
    finally:
        ctx.close()


@app.command("subtask")
def add_subtask(
    project_id: str = typer.Argument(..., help="Project id"),
    task_id: str = typer.Argument(..., help="Task id"),
    description: str = typer.Argument(..., help="Subtask description"),
):
    """Add a subtask."""
    ctx = get_app_context()
    try:
        require_task(ctx, project_id, task_id)
        subtask = ctx.workspace_service.add_subtask(project_id, task_id, description)
        if subtask is None:
            console.print("[red]Subtask description cannot be empty[/red]")
            raise typer.Exit(ERROR_INVALID_ARGS)
        console.print(f"[green]✓ Added subtask[/green] {subtask.description} [dim]({subtask.id})[/dim]")
    finally:
        ctx.close()


@app.command("archive")
def archive_tasks(project_id: str = typer.Argument(..., help="Project id")):
    """Archive a project's completed tasks."""
    ctx = get_app_context()
    try:
        require_project(ctx, project_id)
        moved = ctx.workspace_service.archive_completed_tasks(project_id)
        console.print(f"[green]✓ Archived {moved} task(s)[/green]")
    finally:
        ctx.close()


@app.command("list")
def list_tasks(
    project_id: str | None = typer.Argument(None, help="Only this project"),
    show_all: bool = typer.Option(False, "--all", "-a", help="Include completed tasks"),
):
    """List open tasks."""
    ctx = get_app_context()
    try:
        projects = ctx.workspace.projects.values()
        if project_id:
            projects = [require_project(ctx, project_id)]

        table = Table(show_header=True)
        table.add_column("Project", style="cyan")
        table.add_column("ID", style="dim")
        table.add_column("Task")
        table.add_column("Due")
        table.add_column("Est.", justify="right")
        table.add_column("Logged", justify="right")

        rows = 0
        for project in projects:
            for task in project.tasks:
                if task.completed and not show_all:
                    continue
                title = f"[strike]{task.description}[/strike]" if task.completed else task.description
                if task.planned_for_today:
                    title = f"📌 {title}"
                if task.subtasks:
                    done = sum(1 for s in task.subtasks if s.completed)
                    title += f" [dim]({done}/{len(task.subtasks)})[/dim]"
                table.add_row(
                    project.id,
                    task.id,
                    title,
                    task.due_date.isoformat() if task.due_date else "—",
                    format_hours(task.estimated_time) if task.estimated_time else "—",
                    format_hours(task.actual_time),
                )
                rows += 1

        if not rows:
            console.print("[yellow]No tasks found[/yellow]")
            return
        console.print(table)
    finally:
        ctx.close()


@app.command("move")
def move_task(
    project_id: str = typer.Argument(..., help="Project id"),
    task_id: str = typer.Argument(..., help="Task id"),
    target_project_id: str = typer.Argument(..., help="Project to move the task to"),
):
    """Move a task to another project."""
    ctx = get_app_context()
    try:
        require_task(ctx, project_id, task_id)
        require_project(ctx, target_project_id)
        task = ctx.workspace_service.move_task(project_id, task_id, target_project_id)
        if task is None:
            console.print("[yellow]Task is already in that project[/yellow]")
            return
        console.print(f"[green]✓ Moved[/green] {task.description} → {target_project_id}")
    finally:
        ctx.close()


@app.command("reorder")
def reorder_task(
    project_id: str = typer.Argument(..., help="Project id"),
    task_id: str = typer.Argument(..., help="Task id"),
    position: int = typer.Argument(..., min=1, help="New 1-based position"),
):
    """Move a task to another position in its project."""
    ctx = get_app_context()
    try:
        require_task(ctx, project_id, task_id)
        task = ctx.workspace_service.reorder_task(project_id, task_id, position - 1)
        tasks = ctx.workspace.projects[project_id].tasks
        index = next(i for i, t in enumerate(tasks, 1) if t.id == task_id)
        console.print(f"[green]✓[/green] {task.description} is now #{index}")
    finally:
        ctx.close()


@app.command("move-subtask")
def move_subtask(
    project_id: str = typer.Argument(..., help="Project id"),
    task_id: str = typer.Argument(..., help="Task holding the subtask"),
    subtask_id: str = typer.Argument(..., help="Subtask id"),
    target_task_id: str = typer.Argument(..., help="Task in the same project to move it to"),
):
    """Move a subtask to another task."""
    ctx = get_app_context()
    try:
        require_task(ctx, project_id, task_id)
        require_task(ctx, project_id, target_task_id)
        subtask = ctx.workspace_service.move_subtask(project_id, task_id, subtask_id, target_task_id)
        if subtask is None:
            console.print(f"[red]Error: subtask '{subtask_id}' not found in {task_id}[/red]")
            raise typer.Exit(ERROR_NOT_FOUND)
        console.print(f"[green]✓ Moved[/green] {subtask.description} → {target_task_id}")
    finally:
        ctx.close()


@app.command("reorder-subtask")
def reorder_subtask(
    project_id: str = typer.Argument(..., help="Project id"),
    task_id: str = typer.Argument(..., help="Task id"),
    subtask_id: str = typer.Argument(..., help="Subtask id"),
    position: int = typer.Argument(..., min=1, help="New 1-based position"),
):
    """Move a subtask to another position in its task."""
    ctx = get_app_context()
    try:
        require_task(ctx, project_id, task_id)
        subtask = ctx.workspace_service.reorder_subtask(project_id, task_id, subtask_id, position - 1)
        if subtask is None:
            console.print(f"[red]Error: subtask '{subtask_id}' not found in {task_id}[/red]")
            raise typer.Exit(ERROR_NOT_FOUND)
        console.print(f"[green]✓ Reordered[/green] {subtask.description}")
    finally:
        ctx.close()
