"""Productivity statistics."""

from collections.abc import Callable
from typing import Any

import typer
from rich.panel import Panel
from rich.table import Table

from taskdeck.context import AppContext
from taskdeck.utils.exit_codes import ERROR_INVALID_ARGS

from .utils import console, format_hours, get_app_context

INSIGHT_LABELS = {
    "most_productive_day": "🏆 Most productive day",
    "avg_task_time": "⏱️  Average task time",
    "focus_efficiency": "🎯 Focus efficiency",
    "weekly_trend": "📊 Weekly trend",
}


def render_progress_bar(value: float, max_value: float, width: int = 10) -> str:
    """Render a progress bar using block characters."""
    ratio = 0 if max_value == 0 else min(value / max_value, 1.0)
    filled = int(ratio * width)
    return "█" * filled + "░" * (width - filled)


def _render_summary(ctx: AppContext, days: int) -> None:
    summary = ctx.workspace_service.statistics()
    console.print("\n[bold cyan]📊 Productivity[/bold cyan]\n")
    console.print(f"Projects: [bold]{summary['total_projects']}[/bold]")
    console.print(
        f"Tasks: [bold]{summary['completed_tasks']}/{summary['total_tasks']}[/bold] "
        f"({summary['completion_rate']}%)"
    )
    console.print(f"Streak: [bold]{summary['streak_days']}[/bold] day(s)")
    console.print(
        f"Today: {summary['completed_today']} completed, {format_hours(summary['time_today'])} logged"
    )

    rows = ctx.daily.analytics.days(ctx.daily.today(), days)
    peak = max((row["time_logged"] for _, row in rows), default=0.0)

    table = Table(title=f"Last {days} days", show_header=True)
    table.add_column("Day")
    table.add_column("Time", justify="right")
    table.add_column("")
    table.add_column("Tasks", justify="right")
    table.add_column("Focus", justify="right")
    table.add_column("🍅", justify="right")
    for day, row in rows:
        table.add_row(
            day,
            format_hours(row["time_logged"]),
            render_progress_bar(row["time_logged"], peak),
            str(row["tasks_completed"]),
            str(row["focus_sessions"]),
            str(row["pomodoro_sessions"]),
        )
    console.print()
    console.print(table)


def _render_insights(insights: dict[str, str]) -> None:
    lines = [f"{INSIGHT_LABELS[key]}: [bold]{value}[/bold]" for key, value in insights.items()]
    console.print(Panel("\n".join(lines), title="💡 Insights (last 7 days)", expand=False))


def _render_periods(
    title: str, periods: list[dict[str, Any]], label: Callable[[dict[str, Any]], str]
) -> None:
    peak = max((p["total_tasks"] for p in periods), default=0)
    table = Table(title=title, show_header=True)
    table.add_column("Period")
    table.add_column("Tasks", justify="right")
    table.add_column("")
    table.add_column("Time", justify="right")
    table.add_column("Focus", justify="right")
    table.add_column("Tasks/day", justify="right")
    table.add_column("Time/day", justify="right")
    for period in periods:
        table.add_row(
            label(period),
            str(period["total_tasks"]),
            render_progress_bar(period["total_tasks"], peak),
            format_hours(period["total_time"]),
            str(period["total_focus_sessions"]),
            f"{period['average_tasks_per_day']:.1f}",
            format_hours(period["average_time_per_day"]),
        )
    console.print(table)


def show_stats(
    days: int = 7,
    insights: bool = False,
    week: bool = False,
    month: bool = False,
    output: str | None = None,
) -> None:
    if week and month:
        console.print("[red]Use either --week or --month[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS)
    if output not in (None, "json"):
        console.print(f"[red]Unknown output format '{output}'. Use: json[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS)

    ctx = get_app_context()
    try:
        analytics = ctx.daily.analytics
        today = ctx.daily.today()

        if week or month:
            periods = analytics.export_weekly(today) if week else analytics.export_monthly(today)
            if output == "json":
                console.print_json(data=periods)
                return
            if week:
                _render_periods("Weekly", periods, lambda p: f"{p['start_date']} → {p['end_date']}")
            else:
                _render_periods("Monthly", periods, lambda p: p["period"])
            return

        if output == "json":
            data: dict[str, Any] = {"summary": ctx.workspace_service.statistics()}
            data["days"] = [{"date": day, **row} for day, row in analytics.days(today, days)]
            if insights:
                data["insights"] = analytics.insights(today)
            console.print_json(data=data)
            return

        _render_summary(ctx, days)
        if insights:
            console.print()
            _render_insights(analytics.insights(today))
    finally:
        ctx.close()
