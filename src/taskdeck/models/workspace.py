"""Project / task / goal graph.

The graph is the payload the undo/redo history snapshots.  Everything the
history captures lives in the four collections listed in ``GRAPH_FIELDS``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

ProjectStatus = Literal["execution", "incubation"]
Priority = Literal["high", "medium", "low"]

GRAPH_FIELDS = ("projects", "goals", "archived_tasks", "archived_projects")


class Subtask(BaseModel):
    """Subtask model."""

    id: str
    description: str
    completed: bool = False


class Task(BaseModel):
    """Task model."""

    id: str
    description: str
    completed: bool = False
    completed_at: Optional[datetime] = None
    created_at: datetime
    due_date: Optional[date] = None
    priority: Optional[Priority] = None
    estimated_time: float = 0.0  # hours
    actual_time: float = 0.0  # hours
    subtasks: list[Subtask] = Field(default_factory=list)
    planned_for_today: bool = False


class Project(BaseModel):
    """Project model. Projects nest through ``parent_id`` / ``child_projects``."""

    id: str
    name: str
    description: str = ""
    status: ProjectStatus = "execution"
    priority: Optional[Priority] = None
    theme: str = "General"
    order: int = 0
    parent_id: Optional[str] = None
    child_projects: list[str] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    actual_time: float = 0.0  # hours
    created_at: datetime
    updated_at: datetime
    archived_at: Optional[datetime] = None

    def find_task(self, task_id: str) -> Task | None:
        return next((t for t in self.tasks if t.id == task_id), None)


class LinkedTask(BaseModel):
    task_id: str
    project_id: str


class Goal(BaseModel):
    """Goal model; progress is derived from the linked tasks."""

    id: str
    title: str
    description: str = ""
    due_date: Optional[date] = None
    linked_tasks: list[LinkedTask] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class Workspace(BaseModel):
    """The mutable graph plus the id counters."""

    projects: dict[str, Project] = Field(default_factory=dict)
    goals: dict[str, Goal] = Field(default_factory=dict)
    archived_tasks: dict[str, list[Task]] = Field(default_factory=dict)
    archived_projects: dict[str, Project] = Field(default_factory=dict)
    next_id: int = 1
    next_goal_id: int = 1

    def allocate_id(self, prefix: str) -> str:
        """Allocate ``<prefix>_<n>`` from the shared counter."""
        new_id = f"{prefix}_{self.next_id}"
        self.next_id += 1
        return new_id

    def allocate_goal_id(self) -> str:
        new_id = f"goal_{self.next_goal_id}"
        self.next_goal_id += 1
        return new_id

    def find_task(self, project_id: str | None, task_id: str | None) -> Task | None:
        """Resolve an id-based link. Dangling links resolve to None."""
        if not project_id or not task_id:
            return None
        project = self.projects.get(project_id)
        if project is None:
            return None
        return project.find_task(task_id)

    def snapshot(self) -> dict[str, Any]:
        """Deep copy of the four graph collections as plain JSON data."""
        return self.model_dump(mode="json", include=set(GRAPH_FIELDS))

    def restore(self, snapshot: dict[str, Any]) -> None:
        """Replace the graph collections in place with a copy of *snapshot*.

        The object identity is kept so every holder of this workspace sees
        the restored graph.
        """
        restored = Workspace.model_validate(
            {field: snapshot.get(field, {}) for field in GRAPH_FIELDS}
        )
        for field in GRAPH_FIELDS:
            setattr(self, field, getattr(restored, field))
