"""User actions on the project/task/goal graph.

Mutations that the history tracks record a snapshot right after they are
applied.  Unknown ids make an action a no-op (None / False), never an error.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from taskdeck.core.ports import Clock, RefreshCallback, noop_refresh, to_datetime
from taskdeck.models.workspace import Goal, LinkedTask, Project, Subtask, Task, Workspace
from taskdeck.repositories.state_repository import StateRepository
from taskdeck.services.daily_service import DailyService
from taskdeck.services.history_service import UndoRedoHistory
from taskdeck.utils.logger import get_logger

logger = get_logger("workspace")

_PROJECT_FIELDS = {"name", "description", "status", "priority", "theme", "parent_id"}
_TASK_FIELDS = {"description", "due_date", "priority", "estimated_time"}
_GOAL_FIELDS = {"title", "description", "due_date", "linked_tasks"}


def _move_within(items: list, item_id: str, position: int) -> bool:
    """Move the item with *item_id* to *position* (clamped). False when nothing moved."""
    current = next((i for i, item in enumerate(items) if item.id == item_id), None)
    if current is None:
        return False
    position = max(0, min(position, len(items) - 1))
    if position == current:
        return False
    items.insert(position, items.pop(current))
    return True


class WorkspaceService:
    """Service layer over the workspace graph."""

    def __init__(
        self,
        workspace: Workspace,
        history: UndoRedoHistory,
        daily: DailyService,
        repository: StateRepository,
        clock: Clock,
        refresh: RefreshCallback = noop_refresh,
    ):
        self.workspace = workspace
        self.history = history
        self.daily = daily
        self.repository = repository
        self.clock = clock
        self.refresh = refresh

    def _now(self) -> datetime:
        return to_datetime(self.clock.now())

    def _commit(self, action: str | None = None, data: dict[str, Any] | None = None) -> None:
        if action is not None:
            self.history.record_snapshot(action, data)
        self.repository.save_workspace(self.workspace)
        self.refresh()

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def create_project(self, name: str, **fields: Any) -> Project:
        """Create a project, optionally nested under ``parent_id``."""
        unknown = set(fields) - _PROJECT_FIELDS
        if unknown:
            raise TypeError(f"Unknown project fields: {sorted(unknown)}")

        now = self._now()
        parent_id = fields.get("parent_id")
        if parent_id and parent_id not in self.workspace.projects:
            parent_id = None

        project = Project(
            id=self.workspace.allocate_id("project"),
            name=name,
            created_at=now,
            updated_at=now,
            order=self.clock.now(),
            **{**fields, "parent_id": parent_id},
        )
        self.workspace.projects[project.id] = project
        if parent_id:
            self.workspace.projects[parent_id].child_projects.append(project.id)

        self._commit(f"Created project: {name}", {"type": "create", "project_id": project.id})
        logger.info("Created project %s (%s)", project.id, name)
        return project

    def update_project(self, project_id: str, **fields: Any) -> Project | None:
        """Update project fields; tasks are preserved, re-parenting is kept consistent."""
        project = self.workspace.projects.get(project_id)
        if project is None:
            return None
        unknown = set(fields) - _PROJECT_FIELDS
        if unknown:
            raise TypeError(f"Unknown project fields: {sorted(unknown)}")

        old_project = project.model_dump(mode="json")
        if "parent_id" in fields:
            new_parent_id = fields["parent_id"]
            if new_parent_id == project_id or self.is_descendant_of(project_id, new_parent_id):
                new_parent_id = project.parent_id
            self._reparent(project, new_parent_id)

        for key, value in fields.items():
            if key != "parent_id":
                setattr(project, key, value)
        project.updated_at = self._now()

        self._commit(
            f"Updated project: {project.name}",
            {"type": "update", "project_id": project_id, "old_project": old_project},
        )
        return project

    def _reparent(self, project: Project, new_parent_id: str | None) -> None:
        old_parent_id = project.parent_id
        if old_parent_id == new_parent_id:
            return
        old_parent = self.workspace.projects.get(old_parent_id or "")
        if old_parent is not None:
            old_parent.child_projects = [c for c in old_parent.child_projects if c != project.id]
        new_parent = self.workspace.projects.get(new_parent_id or "")
        if new_parent is not None and project.id not in new_parent.child_projects:
            new_parent.child_projects.append(project.id)
        project.parent_id = new_parent_id if new_parent is not None else None

    def is_descendant_of(self, ancestor_id: str, project_id: str | None) -> bool:
        """True if *project_id* sits somewhere below *ancestor_id*."""
        seen = set()
        current = self.workspace.projects.get(project_id or "")
        while current is not None and current.id not in seen:
            if current.parent_id == ancestor_id:
                return True
            seen.add(current.id)
            current = self.workspace.projects.get(current.parent_id or "")
        return False

    def delete_project(self, project_id: str) -> Project | None:
        """Delete a project and its direct children."""
        project = self.workspace.projects.get(project_id)
        if project is None:
            return None
        deleted = project.model_dump(mode="json")

        for child_id in project.child_projects:
            self.workspace.projects.pop(child_id, None)
        parent = self.workspace.projects.get(project.parent_id or "")
        if parent is not None:
            parent.child_projects = [c for c in parent.child_projects if c != project_id]
        del self.workspace.projects[project_id]

        self._commit(
            f"Deleted project: {project.name}",
            {"type": "delete", "project_id": project_id, "deleted_project": deleted},
        )
        logger.info("Deleted project %s", project_id)
        return project

    def move_project(self, project_id: str) -> Project | None:
        """Toggle a project between the execution and incubation boards."""
        project = self.workspace.projects.get(project_id)
        if project is None:
            return None
        was_execution = project.status == "execution"
        project.status = "incubation" if was_execution else "execution"
        project.updated_at = self._now()
        if was_execution:
            self.daily.track_incubation()
        self._commit()
        return project

    def top_level_projects(self, theme: str | None = None) -> list[Project]:
        """Projects without a parent, ordered by ``order``."""
        projects = [
            p
            for p in self.workspace.projects.values()
            if not p.parent_id and (theme is None or p.theme == theme)
        ]
        return sorted(projects, key=lambda p: p.order)

    def set_project_theme(self, project_id: str, theme: str) -> Project | None:
        """Move a project to another aspect, placing it last there."""
        project = self.workspace.projects.get(project_id)
        theme = theme.strip()
        if project is None or not theme:
            return None
        project.theme = theme
        project.order = self.clock.now()
        project.updated_at = self._now()
        self._commit()
        return project

    def reorder_project(self, project_id: str, position: int, theme: str | None = None) -> Project | None:
        """Put a top-level project at *position* within its (or another) aspect.

        The aspect's projects are renumbered 1000, 2000, ... afterwards.
        Nested projects follow their parent and cannot be reordered.
        """
        project = self.workspace.projects.get(project_id)
        if project is None or project.parent_id:
            return None
        theme = (theme or "").strip() or project.theme
        siblings = [p for p in self.top_level_projects(theme) if p.id != project_id]
        siblings.insert(max(0, min(position, len(siblings))), project)

        project.theme = theme
        for i, sibling in enumerate(siblings):
            sibling.order = (i + 1) * 1000
        project.updated_at = self._now()
        self._commit()
        return project

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def add_task(
        self,
        project_id: str,
        description: str,
        due_date: date | None = None,
        priority: str | None = None,
        estimated_time: float = 0.0,
    ) -> Task | None:
        project = self.workspace.projects.get(project_id)
        description = description.strip()
        if project is None or not description:
            return None

        task = Task(
            id=self.workspace.allocate_id("task"),
            description=description,
            created_at=self._now(),
            due_date=due_date,
            priority=priority,
            estimated_time=estimated_time,
        )
        project.tasks.append(task)
        project.updated_at = self._now()
        self._commit()
        return task

    def update_task(self, project_id: str, task_id: str, **fields: Any) -> Task | None:
        task = self.workspace.find_task(project_id, task_id)
        if task is None:
            return None
        unknown = set(fields) - _TASK_FIELDS
        if unknown:
            raise TypeError(f"Unknown task fields: {sorted(unknown)}")
        for key, value in fields.items():
            setattr(task, key, value)
        self.workspace.projects[project_id].updated_at = self._now()
        self._commit()
        return task

    def toggle_task(self, project_id: str, task_id: str) -> Task | None:
        """Flip completion; completing stamps ``completed_at`` and refreshes daily stats."""
        task = self.workspace.find_task(project_id, task_id)
        if task is None:
            return None

        was_completed = task.completed
        task.completed = not was_completed
        if task.completed:
            task.completed_at = self._now()
        else:
            task.completed_at = None
        self.workspace.projects[project_id].updated_at = self._now()
        self.daily.update_daily_stats()

        verb = "Completed" if task.completed else "Uncompleted"
        self._commit(
            f"{verb} task: {task.description}",
            {
                "type": "toggleTask",
                "project_id": project_id,
                "task_id": task_id,
                "was_completed": was_completed,
            },
        )
        return task

    def delete_task(self, project_id: str, task_id: str) -> Task | None:
        task = self.workspace.find_task(project_id, task_id)
        if task is None:
            return None
        project = self.workspace.projects[project_id]
        project.tasks = [t for t in project.tasks if t.id != task_id]
        project.updated_at = self._now()

        self._commit(
            f"Deleted task: {task.description}",
            {
                "type": "deleteTask",
                "project_id": project_id,
                "task_id": task_id,
                "deleted_task": task.model_dump(mode="json"),
            },
        )
        return task

    # Subtasks

    def add_subtask(self, project_id: str, task_id: str, description: str) -> Subtask | None:
        task = self.workspace.find_task(project_id, task_id)
        description = description.strip()
        if task is None or not description:
            return None
        subtask = Subtask(id=self.workspace.allocate_id("subtask"), description=description)
        task.subtasks.append(subtask)
        self.workspace.projects[project_id].updated_at = self._now()
        self._commit()
        return subtask

    def toggle_subtask(self, project_id: str, task_id: str, subtask_id: str) -> Subtask | None:
        task = self.workspace.find_task(project_id, task_id)
        if task is None:
            return None
        subtask = next((s for s in task.subtasks if s.id == subtask_id), None)
        if subtask is None:
            return None
        subtask.completed = not subtask.completed
        self.workspace.projects[project_id].updated_at = self._now()
        self._commit()
        return subtask

    def delete_subtask(self, project_id: str, task_id: str, subtask_id: str) -> bool:
        task = self.workspace.find_task(project_id, task_id)
        if task is None or not any(s.id == subtask_id for s in task.subtasks):
            return False
        task.subtasks = [s for s in task.subtasks if s.id != subtask_id]
        self.workspace.projects[project_id].updated_at = self._now()
        self._commit()
        return True

    # Moving and ordering

    def move_task(self, project_id: str, task_id: str, target_project_id: str) -> Task | None:
        """Move a task to the end of another project; goal links follow it."""
        source = self.workspace.projects.get(project_id)
        target = self.workspace.projects.get(target_project_id)
        if source is None or target is None or project_id == target_project_id:
            return None
        task = source.find_task(task_id)
        if task is None:
            return None

        source.tasks = [t for t in source.tasks if t.id != task_id]
        target.tasks.append(task)
        for goal in self.workspace.goals.values():
            for link in goal.linked_tasks:
                if link.project_id == project_id and link.task_id == task_id:
                    link.project_id = target_project_id
        now = self._now()
        source.updated_at = now
        target.updated_at = now
        self._commit()
        return task

    def reorder_task(self, project_id: str, task_id: str, position: int) -> Task | None:
        """Move a task to *position* (0-based, clamped) inside its project."""
        project = self.workspace.projects.get(project_id)
        task = self.workspace.find_task(project_id, task_id)
        if task is None:
            return None
        if _move_within(project.tasks, task_id, position):
            project.updated_at = self._now()
            self._commit()
        return task

    def move_subtask(
        self, project_id: str, task_id: str, subtask_id: str, target_task_id: str
    ) -> Subtask | None:
        """Move a subtask to the end of another task in the same project."""
        source = self.workspace.find_task(project_id, task_id)
        target = self.workspace.find_task(project_id, target_task_id)
        if source is None or target is None or task_id == target_task_id:
            return None
        subtask = next((s for s in source.subtasks if s.id == subtask_id), None)
        if subtask is None:
            return None
        source.subtasks = [s for s in source.subtasks if s.id != subtask_id]
        target.subtasks.append(subtask)
        self.workspace.projects[project_id].updated_at = self._now()
        self._commit()
        return subtask

    def reorder_subtask(
        self, project_id: str, task_id: str, subtask_id: str, position: int
    ) -> Subtask | None:
        """Move a subtask to *position* (0-based, clamped) inside its task."""
        task = self.workspace.find_task(project_id, task_id)
        if task is None:
            return None
        subtask = next((s for s in task.subtasks if s.id == subtask_id), None)
        if subtask is None:
            return None
        if _move_within(task.subtasks, subtask_id, position):
            self.workspace.projects[project_id].updated_at = self._now()
            self._commit()
        return subtask

    # ------------------------------------------------------------------
    # Archive
    # ------------------------------------------------------------------

    def archive_completed_tasks(self, project_id: str) -> int:
        """Move a project's completed tasks into the archive. Returns how many moved."""
        project = self.workspace.projects.get(project_id)
        if project is None:
            return 0
        completed = [t for t in project.tasks if t.completed]
        if not completed:
            return 0
        self.workspace.archived_tasks.setdefault(project_id, []).extend(completed)
        project.tasks = [t for t in project.tasks if not t.completed]
        project.updated_at = self._now()
        self._commit()
        return len(completed)

    def archive_project(self, project_id: str) -> Project | None:
        """Archive a project together with all of its tasks."""
        project = self.workspace.projects.get(project_id)
        if project is None:
            return None
        if project.tasks:
            self.workspace.archived_tasks.setdefault(project_id, []).extend(project.tasks)
        project.archived_at = self._now()
        self.workspace.archived_projects[project_id] = project
        del self.workspace.projects[project_id]
        self._commit()
        logger.info("Archived project %s", project_id)
        return project

    def restore_task(self, project_id: str, task_id: str) -> Task | None:
        """Bring an archived task back as open; restores its project if archived too."""
        archived = self.workspace.archived_tasks.get(project_id)
        if not archived:
            return None
        task = next((t for t in archived if t.id == task_id), None)
        if task is None:
            return None
        if project_id not in self.workspace.projects and project_id not in self.workspace.archived_projects:
            return None
        archived.remove(task)
        task.completed = False
        task.completed_at = None

        if project_id in self.workspace.projects:
            project = self.workspace.projects[project_id]
            project.tasks.append(task)
            project.updated_at = self._now()
        elif project_id in self.workspace.archived_projects:
            project = self.workspace.archived_projects.pop(project_id)
            project.archived_at = None
            project.tasks = [task]
            project.updated_at = self._now()
            self.workspace.projects[project_id] = project
        self._commit()
        return task

    def restore_project(self, project_id: str) -> Project | None:
        project = self.workspace.archived_projects.get(project_id)
        if project is None:
            return None
        project.archived_at = None
        project.updated_at = self._now()
        archived_tasks = self.workspace.archived_tasks.get(project_id) or []
        # the archive holds every task the project had when archived
        known = {t.id for t in project.tasks}
        project.tasks = project.tasks + [t for t in archived_tasks if t.id not in known]
        self.workspace.archived_tasks[project_id] = []
        self.workspace.projects[project_id] = project
        del self.workspace.archived_projects[project_id]
        self._commit()
        return project

    @staticmethod
    def is_project_fully_completed(project: Project) -> bool:
        return bool(project.tasks) and all(t.completed for t in project.tasks)

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    def create_goal(
        self,
        title: str,
        description: str = "",
        due_date: date | None = None,
        linked_tasks: list[tuple[str, str]] | None = None,
    ) -> Goal | None:
        title = title.strip()
        if not title:
            return None
        now = self._now()
        goal = Goal(
            id=self.workspace.allocate_goal_id(),
            title=title,
            description=description.strip(),
            due_date=due_date,
            linked_tasks=[
                LinkedTask(project_id=p, task_id=t) for p, t in (linked_tasks or [])
            ],
            created_at=now,
            updated_at=now,
        )
        self.workspace.goals[goal.id] = goal
        self._commit(f"Created goal: {title}", {"type": "createGoal", "goal_id": goal.id})
        return goal

    def update_goal(self, goal_id: str, **fields: Any) -> Goal | None:
        goal = self.workspace.goals.get(goal_id)
        if goal is None:
            return None
        unknown = set(fields) - _GOAL_FIELDS
        if unknown:
            raise TypeError(f"Unknown goal fields: {sorted(unknown)}")
        old_goal = goal.model_dump(mode="json")
        if "linked_tasks" in fields:
            fields["linked_tasks"] = [
                LinkedTask(project_id=p, task_id=t) for p, t in fields["linked_tasks"]
            ]
        for key, value in fields.items():
            setattr(goal, key, value)
        goal.updated_at = self._now()
        self._commit(
            f"Updated goal: {goal.title}",
            {"type": "updateGoal", "goal_id": goal_id, "old_goal": old_goal},
        )
        return goal

    def delete_goal(self, goal_id: str) -> Goal | None:
        goal = self.workspace.goals.pop(goal_id, None)
        if goal is None:
            return None
        self._commit(
            f"Deleted goal: {goal.title}",
            {"type": "deleteGoal", "goal_id": goal_id, "deleted_goal": goal.model_dump(mode="json")},
        )
        return goal

    def goal_progress(self, goal: Goal) -> tuple[int, int, float]:
        """``(completed, total, percentage)`` over the goal's linked tasks."""
        total = len(goal.linked_tasks)
        if total == 0:
            return 0, 0, 0.0
        completed = 0
        for link in goal.linked_tasks:
            task = self.workspace.find_task(link.project_id, link.task_id)
            if task is not None and task.completed:
                completed += 1
        return completed, total, completed / total * 100

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def statistics(self) -> dict[str, Any]:
        """Totals across active and archived work; archived tasks count as done."""
        ws = self.workspace
        total_tasks = 0
        completed_tasks = 0
        for project in ws.projects.values():
            total_tasks += len(project.tasks)
            completed_tasks += sum(1 for t in project.tasks if t.completed)
        for tasks in ws.archived_tasks.values():
            total_tasks += len(tasks)
            completed_tasks += len(tasks)

        return {
            "total_projects": len(ws.projects) + len(ws.archived_projects),
            "completed_tasks": completed_tasks,
            "total_tasks": total_tasks,
            "completion_rate": round(completed_tasks / total_tasks * 100) if total_tasks else 0,
            "streak_days": self.daily.stats.streak_days,
            "completed_today": self.daily.stats.completed_today,
            "time_today": round(self.daily.stats.total_time_today, 2),
        }
