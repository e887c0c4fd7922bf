"""Configuration management commands."""

import typer

from taskdeck.services.config_service import get_config_service
from taskdeck.utils.exit_codes import ERROR_INVALID_ARGS

from .utils import console

app = typer.Typer(help="Configuration management commands")


@app.command("view")
def view_config() -> None:
    """View current configuration."""
    svc = get_config_service()
    console.print_json(data=svc.config.model_dump())
    console.print(f"[dim]{svc.config_path}[/dim]")


@app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., pomodoro.work_minutes)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    svc = get_config_service()
    try:
        svc.set_value(key, value)
    except KeyError:
        console.print(f"[red]Unknown configuration key '{key}'[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS)
    except ValueError as e:
        console.print(f"[red]Invalid value for '{key}': {e}[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS)
    console.print(f"[green]✓ Configuration '{key}' set to '{value}'[/green]")


@app.command("reset")
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes and not typer.confirm("Are you sure you want to reset the configuration?"):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)
    get_config_service().reset_config()
    console.print("[green]✓ Configuration reset to defaults[/green]")
