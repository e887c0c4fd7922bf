"""Interactive shell: every action runs in one process so undo/redo work."""

from __future__ import annotations

import shlex
from collections.abc import Callable

from rich.prompt import Prompt
from rich.table import Table

from taskdeck.context import AppContext
from taskdeck.utils.ui.console import format_clock

from .stats import INSIGHT_LABELS
from .utils import console, format_hours, get_app_context

HELP = """\
[bold]Projects[/bold]  project NAME · projects · move PID · archive PID · rmproject PID
          theme PID THEME · posproject PID N [THEME]
[bold]Tasks[/bold]     task PID DESCRIPTION · tasks [PID] · done PID TID · rmtask PID TID
          mvtask PID TID TARGET_PID · postask PID TID N
          mvsub PID TID SID TARGET_TID · possub PID TID SID N
[bold]Goals[/bold]     goal TITLE [PID:TID ...] · goals · rmgoal GID
[bold]Timers[/bold]    focus · pause · stop · pomo [PID TID] · pomostop · status
[bold]History[/bold]   undo · redo · history
[bold]Other[/bold]     plan · stats · insights · help · quit"""


class Shell:
    """Parses one line at a time and dispatches it against an AppContext.

    Every action runs under ``ctx.lock`` so it never interleaves with a
    timer tick.
    """

    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.commands: dict[str, Callable[[list[str]], None]] = {
            "help": self.do_help,
            "project": self.do_project,
            "projects": self.do_projects,
            "move": self.do_move,
            "archive": self.do_archive,
            "rmproject": self.do_rmproject,
            "theme": self.do_theme,
            "posproject": self.do_posproject,
            "task": self.do_task,
            "tasks": self.do_tasks,
            "done": self.do_done,
            "rmtask": self.do_rmtask,
            "mvtask": self.do_mvtask,
            "postask": self.do_postask,
            "mvsub": self.do_mvsub,
            "possub": self.do_possub,
            "goal": self.do_goal,
            "goals": self.do_goals,
            "rmgoal": self.do_rmgoal,
            "focus": self.do_focus,
            "pause": self.do_pause,
            "stop": self.do_stop,
            "pomo": self.do_pomo,
            "pomostop": self.do_pomostop,
            "status": self.do_status,
            "undo": self.do_undo,
            "redo": self.do_redo,
            "history": self.do_history,
            "plan": self.do_plan,
            "stats": self.do_stats,
            "insights": self.do_insights,
        }

    def handle(self, line: str) -> bool:
        """Run one input line. Returns False when the user asked to quit."""
        try:
            words = shlex.split(line)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            return True
        if not words:
            return True
        verb, args = words[0].lower(), words[1:]
        if verb in ("quit", "exit", "q"):
            return False

        handler = self.commands.get(verb)
        if handler is None:
            console.print(f"[red]Unknown command '{verb}'[/red] [dim](type 'help')[/dim]")
            return True
        with self.ctx.lock:
            try:
                handler(args)
            except IndexError:
                console.print(f"[red]Missing arguments for '{verb}'[/red]")
        return True

    # projects

    def do_help(self, args: list[str]) -> None:
        console.print(HELP)

    def do_project(self, args: list[str]) -> None:
        name = " ".join(args).strip()
        if not name:
            console.print("[red]Missing arguments for 'project'[/red]")
            return
        project = self.ctx.workspace_service.create_project(name)
        console.print(f"[green]✓[/green] {project.name} [dim]({project.id})[/dim]")

    def do_projects(self, args: list[str]) -> None:
        svc = self.ctx.workspace_service
        for project in svc.top_level_projects():
            self._print_project(project.id, indent="")

    def _print_project(self, project_id: str, indent: str) -> None:
        project = self.ctx.workspace.projects.get(project_id)
        if project is None:
            return
        done = sum(1 for t in project.tasks if t.completed)
        board = "" if project.status == "execution" else " [magenta](incubating)[/magenta]"
        console.print(
            f"{indent}[cyan]{project.id}[/cyan] {project.name}{board} "
            f"[dim]{done}/{len(project.tasks)}[/dim]"
        )
        for child_id in project.child_projects:
            self._print_project(child_id, indent + "  ")

    def do_move(self, args: list[str]) -> None:
        project = self.ctx.workspace_service.move_project(args[0])
        if project is None:
            console.print(f"[red]No project {args[0]}[/red]")
            return
        console.print(f"{project.name} → {project.status}")

    def do_archive(self, args: list[str]) -> None:
        project = self.ctx.workspace_service.archive_project(args[0])
        if project is None:
            console.print(f"[red]No project {args[0]}[/red]")
            return
        console.print(f"[green]✓ Archived[/green] {project.name}")

    def do_rmproject(self, args: list[str]) -> None:
        project = self.ctx.workspace_service.delete_project(args[0])
        if project is None:
            console.print(f"[red]No project {args[0]}[/red]")
            return
        console.print(f"[green]✓ Deleted[/green] {project.name}")

    def do_theme(self, args: list[str]) -> None:
        project = self.ctx.workspace_service.set_project_theme(args[0], " ".join(args[1:]))
        if project is None:
            console.print("[red]Unknown project or empty theme[/red]")
            return
        console.print(f"{project.name} → {project.theme}")

    def do_posproject(self, args: list[str]) -> None:
        position = _position(args[1])
        if position is None:
            return
        theme = " ".join(args[2:]) or None
        project = self.ctx.workspace_service.reorder_project(args[0], position, theme=theme)
        if project is None:
            console.print(f"[red]No top-level project {args[0]}[/red]")
            return
        names = [p.name for p in self.ctx.workspace_service.top_level_projects(project.theme)]
        console.print(f"{project.theme}: " + " · ".join(names))

    # tasks

    def do_task(self, args: list[str]) -> None:
        project_id, description = args[0], " ".join(args[1:])
        task = self.ctx.workspace_service.add_task(project_id, description)
        if task is None:
            console.print("[red]Unknown project or empty description[/red]")
            return
        console.print(f"[green]✓[/green] {task.description} [dim]({task.id})[/dim]")

    def do_tasks(self, args: list[str]) -> None:
        projects = self.ctx.workspace.projects.values()
        if args:
            projects = [p for p in projects if p.id == args[0]]
        for project in projects:
            for task in project.tasks:
                mark = "[green]✓[/green]" if task.completed else "○"
                console.print(
                    f"{mark} [cyan]{project.id}[/cyan] [dim]{task.id}[/dim] {task.description}"
                    f" [dim]{format_hours(task.actual_time)}[/dim]"
                )

    def do_done(self, args: list[str]) -> None:
        task = self.ctx.workspace_service.toggle_task(args[0], args[1])
        if task is None:
            console.print("[red]No such task[/red]")
            return
        console.print(f"{'✓' if task.completed else '○'} {task.description}")

    def do_rmtask(self, args: list[str]) -> None:
        task = self.ctx.workspace_service.delete_task(args[0], args[1])
        if task is None:
            console.print("[red]No such task[/red]")
            return
        console.print(f"[green]✓ Deleted[/green] {task.description}")

    def do_mvtask(self, args: list[str]) -> None:
        task = self.ctx.workspace_service.move_task(args[0], args[1], args[2])
        if task is None:
            console.print("[red]No such task or target project[/red]")
            return
        console.print(f"{task.description} → {args[2]}")

    def do_postask(self, args: list[str]) -> None:
        position = _position(args[2])
        if position is None:
            return
        task = self.ctx.workspace_service.reorder_task(args[0], args[1], position)
        if task is None:
            console.print("[red]No such task[/red]")
            return
        self.do_tasks([args[0]])

    def do_mvsub(self, args: list[str]) -> None:
        subtask = self.ctx.workspace_service.move_subtask(args[0], args[1], args[2], args[3])
        if subtask is None:
            console.print("[red]No such subtask or target task[/red]")
            return
        console.print(f"{subtask.description} → {args[3]}")

    def do_possub(self, args: list[str]) -> None:
        position = _position(args[3])
        if position is None:
            return
        subtask = self.ctx.workspace_service.reorder_subtask(args[0], args[1], args[2], position)
        if subtask is None:
            console.print("[red]No such subtask[/red]")
            return
        task = self.ctx.workspace.find_task(args[0], args[1])
        for i, sub in enumerate(task.subtasks, 1):
            mark = "[green]✓[/green]" if sub.completed else "○"
            console.print(f"{i}. {mark} {sub.description} [dim]{sub.id}[/dim]")

    # goals

    def do_goal(self, args: list[str]) -> None:
        title = args[0]
        links = []
        for value in args[1:]:
            project_id, _, task_id = value.partition(":")
            links.append((project_id, task_id))
        goal = self.ctx.workspace_service.create_goal(title, linked_tasks=links)
        if goal is None:
            console.print("[red]Goal title cannot be empty[/red]")
            return
        console.print(f"[green]✓[/green] {goal.title} [dim]({goal.id})[/dim]")

    def do_goals(self, args: list[str]) -> None:
        svc = self.ctx.workspace_service
        for goal in self.ctx.workspace.goals.values():
            completed, total, pct = svc.goal_progress(goal)
            console.print(f"[cyan]{goal.id}[/cyan] {goal.title} [dim]{completed}/{total} ({pct:.0f}%)[/dim]")

    def do_rmgoal(self, args: list[str]) -> None:
        goal = self.ctx.workspace_service.delete_goal(args[0])
        if goal is None:
            console.print(f"[red]No goal {args[0]}[/red]")
            return
        console.print(f"[green]✓ Deleted[/green] {goal.title}")

    # timers

    def do_focus(self, args: list[str]) -> None:
        timer = self.ctx.timer
        if timer.focus.is_paused:
            timer.resume_focus()
            console.print("▶ Focus resumed")
        elif timer.start_focus():
            console.print("🎯 Focus started")
        else:
            console.print("[yellow]Focus already running[/yellow]")

    def do_pause(self, args: list[str]) -> None:
        timer = self.ctx.timer
        if timer.pomodoro_running:
            timer.pause_pomodoro()
            console.print("⏸  Pomodoro paused")
        elif timer.pomodoro.is_active:
            timer.resume_pomodoro()
            console.print("▶ Pomodoro resumed")
        elif timer.toggle_focus_pause():
            state = "paused" if timer.focus.is_paused else "resumed"
            console.print(f"Focus {state}")
        else:
            console.print("[yellow]Nothing to pause[/yellow]")

    def do_stop(self, args: list[str]) -> None:
        if not self.ctx.timer.focus.is_running:
            console.print("[yellow]No focus session[/yellow]")
            return
        seconds = self.ctx.timer.stop_focus()
        console.print(f"⏹  Focus stopped ({format_clock(seconds)})")

    def do_pomo(self, args: list[str]) -> None:
        project_id, task_id = (args[0], args[1]) if len(args) >= 2 else (None, None)
        if self.ctx.timer.start_pomodoro(task_id, project_id):
            console.print("🍅 Pomodoro started")
        else:
            console.print("[yellow]Pomodoro already running[/yellow]")

    def do_pomostop(self, args: list[str]) -> None:
        seconds = self.ctx.timer.stop_pomodoro()
        console.print(f"⏹  Pomodoro stopped, {format_clock(seconds)} of work logged")

    def do_status(self, args: list[str]) -> None:
        timer = self.ctx.timer
        if timer.focus.is_running:
            state = "paused" if timer.focus.is_paused else "running"
            console.print(f"🎯 Focus {state}: {format_clock(timer.focus_elapsed())}")
        if timer.pomodoro.is_active:
            pomodoro = timer.pomodoro
            state = pomodoro.current_phase if timer.pomodoro_running else "paused"
            console.print(
                f"🍅 {state} {format_clock(pomodoro.time_remaining)} "
                f"(round {pomodoro.current_round}, {pomodoro.completed_rounds} done)"
            )
        if not timer.focus.is_running and not timer.pomodoro.is_active:
            console.print("[dim]No timer running[/dim]")

    # history

    def do_undo(self, args: list[str]) -> None:
        history = self.ctx.history
        if not history.can_undo():
            console.print("[yellow]Nothing to undo[/yellow]")
            return
        if history.undo() is None:
            console.print("[dim]At the start of history[/dim]")

    def do_redo(self, args: list[str]) -> None:
        if self.ctx.history.redo() is None:
            console.print("[yellow]Nothing to redo[/yellow]")

    def do_history(self, args: list[str]) -> None:
        history = self.ctx.history
        table = Table(show_header=True, box=None)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Action")
        for i, entry in enumerate(history.history):
            marker = "[bold green]→[/bold green] " if i == history.current_index else "  "
            table.add_row(str(i), f"{marker}{entry.action}")
        console.print(table)
        console.print(f"[dim]{history.undo_label()}  •  {history.redo_label()}[/dim]")

    # daily

    def do_plan(self, args: list[str]) -> None:
        for i, s in enumerate(self.ctx.daily.suggestions(), 1):
            console.print(f"{i}. {s.task_description} [cyan]{s.project_name}[/cyan] [dim]{s.reason}[/dim]")

    def do_stats(self, args: list[str]) -> None:
        summary = self.ctx.workspace_service.statistics()
        console.print(
            f"{summary['completed_tasks']}/{summary['total_tasks']} tasks "
            f"({summary['completion_rate']}%), streak {summary['streak_days']}, "
            f"today {format_hours(summary['time_today'])}"
        )

    def do_insights(self, args: list[str]) -> None:
        insights = self.ctx.daily.analytics.insights(self.ctx.daily.today())
        for key, value in insights.items():
            console.print(f"{INSIGHT_LABELS[key]}: {value}")


def _position(value: str) -> int | None:
    """Parse a 1-based position typed by the user into a 0-based index."""
    try:
        return max(1, int(value)) - 1
    except ValueError:
        console.print(f"[red]Not a position: {value}[/red]")
        return None


def run_shell() -> None:
    """Read-eval loop until ``quit`` or end of input."""
    ctx = get_app_context(live=True)
    shell = Shell(ctx)
    console.print("[bold]taskdeck shell[/bold] [dim](type 'help', 'quit' to leave)[/dim]")
    try:
        while True:
            try:
                line = Prompt.ask("[cyan]taskdeck[/cyan]", console=console)
            except (EOFError, KeyboardInterrupt):
                console.print()
                break
            if not shell.handle(line):
                break
    finally:
        ctx.close()
