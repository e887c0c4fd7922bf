"""Tests for the interactive shell."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from taskdeck.commands.shell import Shell
from taskdeck.main import app

runner = CliRunner()


@pytest.fixture()
def shell(ctx):
    return Shell(ctx)


class TestShellDispatch:
    def test_quit(self, shell):
        assert shell.handle("quit") is False
        assert shell.handle("") is True

    def test_unknown_command(self, shell):
        assert shell.handle("frobnicate") is True

    def test_missing_arguments_do_not_raise(self, shell):
        assert shell.handle("done") is True
        assert shell.handle("project") is True

    def test_unbalanced_quotes(self, shell):
        assert shell.handle('task project_1 "oops') is True

    def test_creates_project_and_task(self, shell, ctx):
        shell.handle('project "Home office"')
        shell.handle("task project_1 Buy a lamp")

        assert ctx.workspace.projects["project_1"].name == "Home office"
        assert ctx.workspace.find_task("project_1", "task_2").description == "Buy a lamp"


class TestShellHistory:
    def test_undo_and_redo(self, shell, ctx):
        shell.handle("project Home")
        shell.handle("task project_1 Fix sink")
        shell.handle("done project_1 task_2")

        shell.handle("undo")
        assert ctx.workspace.find_task("project_1", "task_2") is None

        shell.handle("redo")
        assert ctx.workspace.find_task("project_1", "task_2").completed is True

    def test_undo_back_to_initial_state(self, shell, ctx):
        shell.handle("project Home")

        shell.handle("undo")

        assert ctx.workspace.projects == {}
        assert ctx.history.current_index == 0

    def test_undo_is_persisted(self, shell, ctx, make_ctx):
        shell.handle("project Home")
        shell.handle("undo")

        assert make_ctx().workspace.projects == {}


class TestShellTimers:
    def test_focus_pause_stop(self, shell, ctx, clock):
        shell.handle("focus")
        clock.advance(30)
        shell.handle("pause")
        assert ctx.timer.focus.is_paused is True

        shell.handle("stop")
        assert ctx.timer.focus.total_focus_time > 0

    def test_pomo_pause_toggles(self, shell, ctx):
        shell.handle("pomo")
        shell.handle("pause")
        assert ctx.timer.pomodoro_running is False

        shell.handle("pause")
        assert ctx.timer.pomodoro_running is True

        shell.handle("pomostop")
        assert ctx.timer.pomodoro.is_active is False



class TestShellOrdering:
    def test_mvtask_and_postask(self, shell, ctx):
        shell.handle("project Home")
        shell.handle("project Work")
        shell.handle("task project_1 Fix sink")
        shell.handle("task project_1 Paint door")

        shell.handle("postask project_1 task_4 1")
        assert [t.id for t in ctx.workspace.projects["project_1"].tasks] == ["task_4", "task_3"]

        shell.handle("mvtask project_1 task_3 project_2")
        assert ctx.workspace.find_task("project_2", "task_3") is not None
        assert ctx.workspace.find_task("project_1", "task_3") is None

    def test_mvsub_and_possub(self, shell, ctx):
        shell.handle("project Home")
        shell.handle("task project_1 Fix sink")
        shell.handle("task project_1 Paint door")
        svc = ctx.workspace_service
        svc.add_subtask("project_1", "task_2", "Buy washer")
        svc.add_subtask("project_1", "task_2", "Call plumber")

        shell.handle("possub project_1 task_2 subtask_5 1")
        task = ctx.workspace.find_task("project_1", "task_2")
        assert [s.id for s in task.subtasks] == ["subtask_5", "subtask_4"]

        shell.handle("mvsub project_1 task_2 subtask_4 task_3")
        assert [s.id for s in ctx.workspace.find_task("project_1", "task_3").subtasks] == ["subtask_4"]

    def test_theme_and_posproject(self, shell, ctx):
        shell.handle("project Home")
        shell.handle("project Work")
        shell.handle("project Gym")

        shell.handle("theme project_3 Health")
        assert ctx.workspace.projects["project_3"].theme == "Health"

        shell.handle("posproject project_1 1 Health")
        assert [p.id for p in ctx.workspace_service.top_level_projects("Health")] == [
            "project_1",
            "project_3",
        ]

    def test_position_must_be_a_number(self, shell, ctx):
        shell.handle("project Home")
        shell.handle("task project_1 Fix sink")
        shell.handle("task project_1 Paint door")

        assert shell.handle("postask project_1 task_3 first") is True
        assert [t.id for t in ctx.workspace.projects["project_1"].tasks] == ["task_2", "task_3"]

    def test_insights_without_data(self, shell, capsys):
        shell.handle("insights")

        assert "No data yet" in capsys.readouterr().out

def test_shell_command_reads_until_quit(cli_config):
    result = runner.invoke(app, ["shell"], input="project Home\nhistory\nquit\n")

    assert result.exit_code == 0
    assert "Created project: Home" in result.stdout
