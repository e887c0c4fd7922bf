"""Data models for taskdeck."""

from .workspace import Goal, LinkedTask, Project, Subtask, Task, Workspace

__all__ = ["Goal", "LinkedTask", "Project", "Subtask", "Task", "Workspace"]
