"""Project management commands."""

import typer
from rich.table import Table

from taskdeck.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND

from .utils import console, format_hours, get_app_context, require_project

app = typer.Typer(help="Project management commands")


@app.command("add")
def add_project(
    name: str = typer.Argument(..., help="Project name"),
    description: str = typer.Option("", "--description", "-d"),
    priority: str | None = typer.Option(None, "--priority", help="high, medium or low"),
    theme: str = typer.Option("General", "--theme", help="Aspect the project belongs to"),
    parent: str | None = typer.Option(None, "--parent", help="Parent project id"),
    incubate: bool = typer.Option(False, "--incubate", help="Put on the incubation board"),
):
    """Create a project."""
    if priority is not None and priority not in ("high", "medium", "low"):
        console.print("[red]Invalid priority. Must be: high, medium or low[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS)
    ctx = get_app_context()
    try:
        project = ctx.workspace_service.create_project(
            name,
            description=description,
            priority=priority,
            theme=theme,
            parent_id=parent,
            status="incubation" if incubate else "execution",
        )
        console.print(f"[green]✓ Created project[/green] {project.name} [dim]({project.id})[/dim]")
    finally:
        ctx.close()


@app.command("list")
def list_projects(
    archived: bool = typer.Option(False, "--archived", help="Show archived projects"),
):
    """List projects grouped by board."""
    ctx = get_app_context()
    try:
        source = ctx.workspace.archived_projects if archived else ctx.workspace.projects
        if not source:
            console.print("[yellow]No projects found[/yellow]")
            return

        table = Table(title="Archived Projects" if archived else "Projects", show_header=True)
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Board")
        table.add_column("Theme")
        table.add_column("Tasks", justify="right")
        table.add_column("Time", justify="right")

        for project in sorted(source.values(), key=lambda p: (p.status, p.order)):
            done = sum(1 for t in project.tasks if t.completed)
            indent = "  " if project.parent_id else ""
            table.add_row(
                project.id,
                f"{indent}{project.name}",
                project.status,
                project.theme,
                f"{done}/{len(project.tasks)}",
                format_hours(project.actual_time),
            )
        console.print(table)
    finally:
        ctx.close()


@app.command("move")
def move_project(project_id: str = typer.Argument(..., help="Project id")):
    """Toggle a project between execution and incubation."""
    ctx = get_app_context()
    try:
        require_project(ctx, project_id)
        project = ctx.workspace_service.move_project(project_id)
        console.print(f"[green]✓[/green] {project.name} moved to {project.status}")
    finally:
        ctx.close()


@app.command("archive")
def archive_project(project_id: str = typer.Argument(..., help="Project id")):
    """Archive a project and all of its tasks."""
    ctx = get_app_context()
    try:
        require_project(ctx, project_id)
        project = ctx.workspace_service.archive_project(project_id)
        console.print(f"[green]✓ Archived[/green] {project.name}")
    finally:
        ctx.close()


@app.command("restore")
def restore_project(project_id: str = typer.Argument(..., help="Archived project id")):
    """Restore an archived project."""
    ctx = get_app_context()
    try:
        project = ctx.workspace_service.restore_project(project_id)
        if project is None:
            console.print(f"[red]Error: archived project '{project_id}' not found[/red]")
            raise typer.Exit(ERROR_NOT_FOUND)
        console.print(f"[green]✓ Restored[/green] {project.name}")
    finally:
        ctx.close()


@app.command("delete")
def delete_project(
    project_id: str = typer.Argument(..., help="Project id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
):
    """Delete a project and its sub-projects."""
    ctx = get_app_context()
    try:
        project = require_project(ctx, project_id)
        if not yes and not typer.confirm(f"Delete '{project.name}'?", default=False):
            console.print("[yellow]Cancelled[/yellow]")
            return
        ctx.workspace_service.delete_project(project_id)
        console.print(f"[green]✓ Deleted[/green] {project.name}")
    finally:
        ctx.close()


@app.command("theme")
def set_theme(
    project_id: str = typer.Argument(..., help="Project id"),
    theme: str = typer.Argument(..., help="Aspect to move the project to"),
):
    """Move a project to another aspect."""
    ctx = get_app_context()
    try:
        require_project(ctx, project_id)
        project = ctx.workspace_service.set_project_theme(project_id, theme)
        if project is None:
            console.print("[red]Theme cannot be empty[/red]")
            raise typer.Exit(ERROR_INVALID_ARGS)
        console.print(f"[green]✓[/green] {project.name} moved to {project.theme}")
    finally:
        ctx.close()


@app.command("reorder")
def reorder_project(
    project_id: str = typer.Argument(..., help="Project id"),
    position: int = typer.Argument(..., min=1, help="New 1-based position in the aspect"),
    theme: str | None = typer.Option(None, "--theme", help="Aspect to move into first"),
):
    """Move a top-level project to another position in its aspect."""
    ctx = get_app_context()
    try:
        require_project(ctx, project_id)
        project = ctx.workspace_service.reorder_project(project_id, position - 1, theme=theme)
        if project is None:
            console.print("[red]Sub-projects are ordered with their parent[/red]")
            raise typer.Exit(ERROR_INVALID_ARGS)
        names = [p.name for p in ctx.workspace_service.top_level_projects(project.theme)]
        console.print(f"[green]✓[/green] {project.theme}: " + " · ".join(names))
    finally:
        ctx.close()
