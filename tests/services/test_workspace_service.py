"""Tests for project, task, goal and archive actions."""

from __future__ import annotations

from datetime import date

import pytest


@pytest.fixture()
def svc(ctx):
    return ctx.workspace_service


class TestProjects:
    def test_create_records_snapshot(self, ctx, svc):
        project = svc.create_project("Home", priority="high")

        assert project.id == "project_1"
        assert ctx.workspace.projects[project.id].priority == "high"
        assert ctx.history.history[-1].action == "Created project: Home"
        assert ctx.history.history[-1].data["type"] == "create"

    def test_create_persists(self, ctx, make_ctx, svc):
        svc.create_project("Home")

        assert "project_1" in make_ctx().workspace.projects

    def test_create_nested(self, ctx, svc):
        parent = svc.create_project("Parent")
        child = svc.create_project("Child", parent_id=parent.id)

        assert child.parent_id == parent.id
        assert ctx.workspace.projects[parent.id].child_projects == [child.id]

    def test_unknown_parent_is_dropped(self, svc):
        assert svc.create_project("Orphan", parent_id="project_99").parent_id is None

    def test_unknown_field_raises(self, svc):
        with pytest.raises(TypeError):
            svc.create_project("Bad", colour="red")

    def test_update_reparents_and_keeps_tasks(self, ctx, svc):
        a = svc.create_project("A")
        b = svc.create_project("B")
        child = svc.create_project("Child", parent_id=a.id)
        svc.add_task(child.id, "keep me")

        svc.update_project(child.id, parent_id=b.id, name="Moved")

        assert ctx.workspace.projects[a.id].child_projects == []
        assert ctx.workspace.projects[b.id].child_projects == [child.id]
        assert child.name == "Moved"
        assert [t.description for t in child.tasks] == ["keep me"]
        assert ctx.history.history[-1].action == "Updated project: Moved"
        assert ctx.history.history[-1].data["old_project"]["name"] == "Child"

    def test_update_refuses_cycles(self, svc):
        a = svc.create_project("A")
        b = svc.create_project("B", parent_id=a.id)

        svc.update_project(a.id, parent_id=b.id)

        assert a.parent_id is None

    def test_delete_removes_children_and_detaches(self, ctx, svc):
        root = svc.create_project("Root")
        mid = svc.create_project("Mid", parent_id=root.id)
        leaf = svc.create_project("Leaf", parent_id=mid.id)

        svc.delete_project(mid.id)

        assert mid.id not in ctx.workspace.projects
        assert leaf.id not in ctx.workspace.projects
        assert ctx.workspace.projects[root.id].child_projects == []
        assert ctx.history.history[-1].action == "Deleted project: Mid"

    def test_move_toggles_board_and_tracks_incubation(self, ctx, svc):
        project = svc.create_project("Idea")
        recorded = len(ctx.history.history)

        svc.move_project(project.id)

        assert project.status == "incubation"
        assert ctx.daily.analytics.incubation_activity[ctx.daily.today()] == 1
        assert len(ctx.history.history) == recorded

        svc.move_project(project.id)

        assert project.status == "execution"
        assert ctx.daily.analytics.incubation_activity[ctx.daily.today()] == 1

    def test_top_level_projects_by_theme(self, svc, clock):
        svc.create_project("Work", theme="Career")
        clock.advance(1)
        parent = svc.create_project("Gym", theme="Health")
        svc.create_project("Legs", theme="Health", parent_id=parent.id)

        assert [p.name for p in svc.top_level_projects("Health")] == ["Gym"]
        assert [p.name for p in svc.top_level_projects()] == ["Work", "Gym"]

    def test_missing_ids_are_no_ops(self, svc):
        assert svc.update_project("nope", name="x") is None
        assert svc.delete_project("nope") is None
        assert svc.move_project("nope") is None
        assert svc.archive_project("nope") is None
        assert svc.restore_project("nope") is None


class TestTasks:
    def test_add_task(self, svc):
        project = svc.create_project("Home")

        task = svc.add_task(project.id, "  Fix sink ", due_date=date(2024, 3, 20), estimated_time=0.5)

        assert task.description == "Fix sink"
        assert task.due_date == date(2024, 3, 20)
        assert project.tasks == [task]

    def test_empty_description_is_rejected(self, svc):
        project = svc.create_project("Home")

        assert svc.add_task(project.id, "   ") is None
        assert svc.add_task("nope", "task") is None

    def test_toggle_completes_and_counts_today(self, ctx, svc):
        project = svc.create_project("Home")
        task = svc.add_task(project.id, "Fix sink")

        svc.toggle_task(project.id, task.id)

        assert task.completed is True
        assert task.completed_at is not None
        assert ctx.daily.stats.completed_today == 1
        assert ctx.history.history[-1].action == "Completed task: Fix sink"

        svc.toggle_task(project.id, task.id)

        assert task.completed_at is None
        assert ctx.daily.stats.completed_today == 0
        assert ctx.history.history[-1].action == "Uncompleted task: Fix sink"

    def test_delete_task_then_undo(self, ctx, svc):
        project = svc.create_project("Home")
        task = svc.add_task(project.id, "Fix sink")
        svc.toggle_task(project.id, task.id)

        svc.delete_task(project.id, task.id)
        assert ctx.workspace.find_task(project.id, task.id) is None
        assert ctx.history.history[-1].action == "Deleted task: Fix sink"

        ctx.history.undo()
        restored = ctx.workspace.find_task(project.id, task.id)
        assert restored is not None
        assert restored.completed is True

    def test_update_task_does_not_record(self, ctx, svc):
        project = svc.create_project("Home")
        task = svc.add_task(project.id, "Fix sink")
        recorded = len(ctx.history.history)

        svc.update_task(project.id, task.id, priority="high")

        assert task.priority == "high"
        assert len(ctx.history.history) == recorded

    def test_subtasks(self, svc):
        project = svc.create_project("Home")
        task = svc.add_task(project.id, "Paint")

        sub = svc.add_subtask(project.id, task.id, "Buy paint")
        svc.toggle_subtask(project.id, task.id, sub.id)

        assert task.subtasks[0].completed is True
        assert svc.delete_subtask(project.id, task.id, sub.id) is True
        assert task.subtasks == []
        assert svc.delete_subtask(project.id, task.id, sub.id) is False


class TestArchive:
    def test_archive_completed_tasks(self, ctx, svc):
        project = svc.create_project("Home")
        done = svc.add_task(project.id, "done")
        svc.add_task(project.id, "open")
        svc.toggle_task(project.id, done.id)

        assert svc.archive_completed_tasks(project.id) == 1
        assert [t.description for t in project.tasks] == ["open"]
        assert ctx.workspace.archived_tasks[project.id][0].id == done.id

    def test_archive_and_restore_project(self, ctx, svc):
        project = svc.create_project("Home")
        svc.add_task(project.id, "a")
        svc.add_task(project.id, "b")

        svc.archive_project(project.id)

        assert project.id not in ctx.workspace.projects
        assert project.archived_at is not None

        restored = svc.restore_project(project.id)

        assert restored.archived_at is None
        assert sorted(t.description for t in restored.tasks) == ["a", "b"]
        assert ctx.workspace.archived_tasks[project.id] == []

    def test_restore_task_reopens_it(self, svc):
        project = svc.create_project("Home")
        task = svc.add_task(project.id, "done")
        svc.toggle_task(project.id, task.id)
        svc.archive_completed_tasks(project.id)

        restored = svc.restore_task(project.id, task.id)

        assert restored.completed is False
        assert [t.id for t in project.tasks] == [task.id]

    def test_restore_task_of_deleted_project_is_a_no_op(self, ctx, svc):
        project = svc.create_project("Home")
        task = svc.add_task(project.id, "done")
        svc.toggle_task(project.id, task.id)
        svc.archive_completed_tasks(project.id)
        svc.delete_project(project.id)

        assert svc.restore_task(project.id, task.id) is None
        assert len(ctx.workspace.archived_tasks[project.id]) == 1

    def test_fully_completed(self, svc):
        project = svc.create_project("Home")
        assert svc.is_project_fully_completed(project) is False

        task = svc.add_task(project.id, "only")
        svc.toggle_task(project.id, task.id)

        assert svc.is_project_fully_completed(project) is True


class TestGoals:
    def test_goal_progress_over_linked_tasks(self, ctx, svc):
        project = svc.create_project("Home")
        t1 = svc.add_task(project.id, "one")
        t2 = svc.add_task(project.id, "two")
        goal = svc.create_goal(
            "Tidy house",
            linked_tasks=[(project.id, t1.id), (project.id, t2.id), (project.id, "task_404")],
        )
        svc.toggle_task(project.id, t1.id)

        completed, total, pct = svc.goal_progress(goal)

        assert (completed, total) == (1, 3)
        assert pct == pytest.approx(100 / 3)
        assert ctx.history.history[-2].action == "Created goal: Tidy house"

    def test_goal_without_links(self, svc):
        goal = svc.create_goal("Someday")

        assert svc.goal_progress(goal) == (0, 0, 0.0)

    def test_update_and_delete_goal(self, ctx, svc):
        goal = svc.create_goal("Old")

        svc.update_goal(goal.id, title="New")
        assert ctx.history.history[-1].action == "Updated goal: New"
        assert ctx.history.history[-1].data["old_goal"]["title"] == "Old"

        svc.delete_goal(goal.id)
        assert goal.id not in ctx.workspace.goals
        assert ctx.history.history[-1].action == "Deleted goal: New"
        assert svc.delete_goal(goal.id) is None

    def test_empty_title_is_rejected(self, svc):
        assert svc.create_goal("  ") is None


class TestStatistics:
    def test_counts_active_and_archived(self, svc):
        project = svc.create_project("Home")
        done = svc.add_task(project.id, "done")
        svc.add_task(project.id, "open")
        svc.toggle_task(project.id, done.id)
        svc.archive_completed_tasks(project.id)
        other = svc.create_project("Work")
        finished = svc.add_task(other.id, "finished")
        svc.toggle_task(other.id, finished.id)

        stats = svc.statistics()

        assert stats["total_projects"] == 2
        assert stats["total_tasks"] == 3
        assert stats["completed_tasks"] == 2
        assert stats["completion_rate"] == 67

    def test_empty_workspace(self, svc):
        stats = svc.statistics()

        assert stats["total_tasks"] == 0
        assert stats["completion_rate"] == 0


class TestMovingAndOrdering:
    @pytest.fixture()
    def three_tasks(self, svc):
        project = svc.create_project("Home")
        tasks = [svc.add_task(project.id, name) for name in ("one", "two", "three")]
        return project, tasks

    def test_move_task_to_other_project(self, ctx, svc):
        home = svc.create_project("Home")
        work = svc.create_project("Work")
        task = svc.add_task(home.id, "Report")
        goal = svc.create_goal("Ship", linked_tasks=[(home.id, task.id)])
        recorded = len(ctx.history.history)

        moved = svc.move_task(home.id, task.id, work.id)

        assert moved is task
        assert home.tasks == []
        assert [t.id for t in work.tasks] == [task.id]
        assert goal.linked_tasks[0].project_id == work.id
        assert len(ctx.history.history) == recorded

    def test_move_task_no_ops(self, svc):
        home = svc.create_project("Home")
        task = svc.add_task(home.id, "Report")

        assert svc.move_task(home.id, task.id, home.id) is None
        assert svc.move_task(home.id, task.id, "project_99") is None
        assert svc.move_task(home.id, "task_99", home.id) is None
        assert [t.id for t in home.tasks] == [task.id]

    def test_reorder_task(self, svc, three_tasks):
        project, (one, two, three) = three_tasks

        svc.reorder_task(project.id, three.id, 0)
        assert [t.description for t in project.tasks] == ["three", "one", "two"]

        svc.reorder_task(project.id, three.id, 99)
        assert [t.description for t in project.tasks] == ["one", "two", "three"]

        assert svc.reorder_task(project.id, "task_99", 0) is None

    def test_move_subtask_between_tasks(self, svc, three_tasks):
        project, (one, two, _) = three_tasks
        sub = svc.add_subtask(project.id, one.id, "Buy paint")

        assert svc.move_subtask(project.id, one.id, sub.id, one.id) is None
        assert svc.move_subtask(project.id, one.id, sub.id, "task_99") is None

        svc.move_subtask(project.id, one.id, sub.id, two.id)

        assert one.subtasks == []
        assert [s.id for s in two.subtasks] == [sub.id]

    def test_reorder_subtask(self, svc, three_tasks):
        project, (one, _, _) = three_tasks
        a = svc.add_subtask(project.id, one.id, "a")
        svc.add_subtask(project.id, one.id, "b")

        svc.reorder_subtask(project.id, one.id, a.id, 1)

        assert [s.description for s in one.subtasks] == ["b", "a"]
        assert svc.reorder_subtask(project.id, one.id, "subtask_99", 0) is None

    def test_set_theme_places_project_last(self, svc, clock):
        gym = svc.create_project("Gym", theme="Health")
        clock.advance(1)
        job = svc.create_project("Job", theme="Work")
        clock.advance(1)

        svc.set_project_theme(job.id, "Health")

        assert [p.name for p in svc.top_level_projects("Health")] == ["Gym", "Job"]
        assert svc.set_project_theme(gym.id, "  ") is None
        assert svc.set_project_theme("project_99", "Health") is None

    def test_reorder_project_renumbers_aspect(self, svc, clock):
        projects = []
        for name in ("A", "B", "C"):
            projects.append(svc.create_project(name))
            clock.advance(1)
        a, b, c = projects

        svc.reorder_project(c.id, 0)

        assert [p.name for p in svc.top_level_projects("General")] == ["C", "A", "B"]
        assert [c.order, a.order, b.order] == [1000, 2000, 3000]

    def test_reorder_project_into_other_aspect(self, svc, clock):
        gym = svc.create_project("Gym", theme="Health")
        clock.advance(1)
        job = svc.create_project("Job")

        svc.reorder_project(job.id, 0, theme="Health")

        assert job.theme == "Health"
        assert [p.name for p in svc.top_level_projects("Health")] == ["Job", "Gym"]
        assert svc.top_level_projects("General") == []

    def test_nested_project_cannot_be_reordered(self, svc):
        parent = svc.create_project("Parent")
        child = svc.create_project("Child", parent_id=parent.id)

        assert svc.reorder_project(child.id, 0) is None
        assert svc.reorder_project("project_99", 0) is None
